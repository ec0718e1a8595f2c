"""
Domain layer package.

Entities, errors, port interfaces and pure policies. No framework
imports and no IO.
"""
