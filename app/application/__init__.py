"""
Application layer package.

Use cases run one operation each inside a unit of work and talk to
storage and external services only through domain ports.
"""
