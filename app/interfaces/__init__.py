"""
Interfaces layer package.

HTTP routers, request/response schemas and dependency wiring.
"""
