"""
Application entry point.

Creates the FastAPI application and wires together:
- Routers (one per area of the exchange API)
- Error handlers (centralized domain-to-HTTP mapping)
- Security middleware (headers, rate limiting, correlation ids)
- Logging configuration
- Database schema creation on startup

No business logic belongs here.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from app.core.config import settings
from app.infrastructure.database import init_db
from app.interfaces.exchange.account_router import router as account_router
from app.interfaces.exchange.admin_router import router as admin_router
from app.interfaces.exchange.auth_router import router as auth_router
from app.interfaces.exchange.dependencies import get_engine
from app.interfaces.exchange.files_router import router as files_router
from app.interfaces.exchange.kyc_router import router as kyc_router
from app.interfaces.exchange.market_router import router as market_router
from app.interfaces.exchange.orders_router import router as orders_router
from app.interfaces.exchange.portfolio_router import router as portfolio_router
from app.interfaces.exchange.requests_router import router as requests_router
from app.interfaces.health import router as health_router
from app.shared.errors.handlers import register_error_handlers
from app.shared.logging import configure_logging
from app.shared.request_context import CorrelationIdMiddleware
from app.shared.security.headers import SecurityHeadersMiddleware
from app.shared.security.rate_limiting import limiter, rate_limit_exceeded_handler

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: make sure the schema exists before serving."""
    init_db(get_engine())
    if settings.jwt_secret.startswith("change-me"):
        logger.warning("JWT secrets are the built-in defaults; set JWT_SECRET and REFRESH_SECRET")
    yield
    get_engine().dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Registers routers, error handlers, and security middleware.
    This is the composition root of the application.

    Returns:
        A fully configured FastAPI application instance.
    """
    configure_logging(level=settings.log_level)

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # --- Rate Limiting ---
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # --- Security Middleware ---
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(CorrelationIdMiddleware)

    # --- Error Handlers ---
    register_error_handlers(app)

    # --- Routers ---
    for router in (
        health_router,
        auth_router,
        portfolio_router,
        orders_router,
        requests_router,
        kyc_router,
        account_router,
        market_router,
        admin_router,
        files_router,
    ):
        app.include_router(router, prefix=API_PREFIX)

    return app


app = create_app()
