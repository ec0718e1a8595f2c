"""
Luno: crypto trading demo backend.

Application package root, laid out as ports and adapters.

Bounded contexts:
    - exchange: accounts, portfolio, market orders, KYC, admin console.

Layers:
    - domain: entities, ports (ABCs), errors and pure policies.
    - application: one use case per operation, plus DTOs.
    - infrastructure: SQLAlchemy repositories, Binance client, JWTs, file storage.
    - interfaces: FastAPI routers and Pydantic schemas.
    - shared: logging, error mapping, security middleware.
"""
