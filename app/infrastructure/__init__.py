"""
Infrastructure layer package.

Adapters for the domain ports: the SQL database, the Binance REST API,
token signing, password hashing and KYC document storage.
"""
