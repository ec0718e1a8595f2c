"""
Exchange bounded context, domain layer.

This module contains all domain logic for the exchange context:
- Accounts, roles and identity verification (KYC)
- Cash balances, positions and orders
- Deposit/withdraw requests and their audit trail
"""
