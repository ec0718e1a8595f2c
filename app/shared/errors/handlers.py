"""
Centralized error handlers for FastAPI.

Maps domain-specific errors to HTTP responses.
No stack traces or internal details are exposed to clients.
All error responses use the ErrorResponse schema.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.domain.exchange.errors import (
    AccountDisabledError,
    AlertNotFoundError,
    AssetNotFoundError,
    AuthenticationError,
    ConcurrentUpdateError,
    DocumentNotFoundError,
    EmailAlreadyRegisteredError,
    InsufficientAssetError,
    InsufficientFundsError,
    InvalidCredentialsError,
    InvalidDocumentError,
    KycAlreadySubmittedError,
    KycNotFoundError,
    KycRequiredError,
    LoginThrottledError,
    LunoDomainError,
    MarketDataUnavailableError,
    OrderNotCancellableError,
    OrderNotFoundError,
    PermissionDeniedError,
    RequestAlreadyProcessedError,
    RequestNotFoundError,
    UserNotFoundError,
    ValidationFailedError,
    WeakPasswordError,
)
from app.shared.request_context import get_request_id

logger = logging.getLogger(__name__)

HTTP_400 = 400
HTTP_401 = 401
HTTP_403 = 403
HTTP_404 = 404
HTTP_409 = 409
HTTP_429 = 429
HTTP_500 = 500
HTTP_502 = 502

STATUS_BY_ERROR: dict[type[LunoDomainError], int] = {
    InsufficientFundsError: HTTP_400,
    InsufficientAssetError: HTTP_400,
    ValidationFailedError: HTTP_400,
    InvalidDocumentError: HTTP_400,
    WeakPasswordError: HTTP_400,
    InvalidCredentialsError: HTTP_400,
    PermissionDeniedError: HTTP_403,
    AccountDisabledError: HTTP_403,
    UserNotFoundError: HTTP_404,
    OrderNotFoundError: HTTP_404,
    RequestNotFoundError: HTTP_404,
    KycNotFoundError: HTTP_404,
    AlertNotFoundError: HTTP_404,
    DocumentNotFoundError: HTTP_404,
    AssetNotFoundError: HTTP_404,
    EmailAlreadyRegisteredError: HTTP_409,
    RequestAlreadyProcessedError: HTTP_409,
    KycAlreadySubmittedError: HTTP_409,
    OrderNotCancellableError: HTTP_409,
    ConcurrentUpdateError: HTTP_409,
}


def _error_response(
    status_code: int,
    error: str,
    detail: str | None = None,
    headers: dict[str, str] | None = None,
    **extra,
) -> JSONResponse:
    """Build a consistent JSON error response."""
    body: dict = {"error": error}
    if detail:
        body["detail"] = detail
    body.update(extra)
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def register_error_handlers(app: FastAPI) -> None:
    """Register all domain error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(AuthenticationError)
    async def handle_authentication(
        _request: Request, exc: AuthenticationError
    ) -> JSONResponse:
        """Reject missing, invalid or expired credentials."""
        logger.info("Authentication failed: %s", exc.message)
        return _error_response(
            HTTP_401, exc.message, headers={"WWW-Authenticate": "Bearer"}
        )

    @app.exception_handler(LoginThrottledError)
    async def handle_login_throttled(
        _request: Request, exc: LoginThrottledError
    ) -> JSONResponse:
        """Tell the client when it may try to log in again."""
        return _error_response(
            HTTP_429,
            exc.message,
            headers={"Retry-After": str(exc.retry_after_seconds)},
        )

    @app.exception_handler(KycRequiredError)
    async def handle_kyc_required(
        _request: Request, exc: KycRequiredError
    ) -> JSONResponse:
        """Include the KYC state so the client can route to the KYC form."""
        logger.info("KYC required (status=%s)", exc.kyc_status)
        return _error_response(
            HTTP_403,
            exc.message,
            kyc_status=exc.kyc_status,
            missing_fields=exc.missing_fields,
        )

    @app.exception_handler(MarketDataUnavailableError)
    async def handle_market_data(
        _request: Request, exc: MarketDataUnavailableError
    ) -> JSONResponse:
        logger.error("Market data provider failed: %s", exc.reason)
        return _error_response(HTTP_502, "Failed to fetch market data", exc.reason)

    @app.exception_handler(LunoDomainError)
    async def handle_domain(_request: Request, exc: LunoDomainError) -> JSONResponse:
        """Map the remaining domain errors through STATUS_BY_ERROR."""
        status_code = next(
            (
                STATUS_BY_ERROR[cls]
                for cls in type(exc).__mro__
                if cls in STATUS_BY_ERROR
            ),
            HTTP_500,
        )
        if status_code == HTTP_500:
            logger.error("Unhandled domain error: %s", exc.message)
            return _error_response(HTTP_500, "Internal server error")
        logger.warning("%s: %s", type(exc).__name__, exc.message)
        return _error_response(status_code, exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected(
        _request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        logger.exception("Unexpected error: %s", type(exc).__name__)
        return _error_response(
            HTTP_500, "Internal server error", correlation_id=get_request_id()
        )
