"""
Rate limiting configuration and setup.

Uses slowapi to enforce per-endpoint rate limits, and the underlying
``limits`` moving-window strategy for login brute-force protection.
Protects against denial-of-service, credential stuffing and resource abuse.
"""

import logging
import time

from limits import RateLimitItemPerMinute
from limits.storage import MemoryStorage, Storage
from limits.strategies import MovingWindowRateLimiter
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse

from app.core.config import settings
from app.domain.exchange.errors import LoginThrottledError
from app.domain.exchange.ports import LoginThrottle

logger = logging.getLogger(__name__)

DEFAULT_RATE_LIMIT = settings.rate_limit_default
AUTH_RATE_LIMIT = settings.rate_limit_auth

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[DEFAULT_RATE_LIMIT],
    enabled=settings.rate_limit_enabled,
)


async def rate_limit_exceeded_handler(
    _request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """Handle rate limit exceeded errors with a clean JSON response.

    Args:
        _request: The incoming HTTP request.
        exc: The rate limit exceeded exception.

    Returns:
        A 429 JSON response with a clear error message.
    """
    return JSONResponse(
        status_code=429,
        content={"error": "Rate limit exceeded", "detail": str(exc.detail)},
    )


class MovingWindowLoginThrottle(LoginThrottle):
    """Sliding-log login throttle.

    Allows ``max_attempts`` per key inside a moving window of
    ``window_minutes``. Once exhausted, the key stays blocked until the
    oldest attempt leaves the window.
    """

    NAMESPACE = "login"

    def __init__(
        self,
        max_attempts: int,
        window_minutes: int,
        storage: Storage | None = None,
    ) -> None:
        self._item = RateLimitItemPerMinute(
            max_attempts, window_minutes, namespace=self.NAMESPACE
        )
        self._strategy = MovingWindowRateLimiter(storage or MemoryStorage())

    def hit(self, key: str) -> None:
        if self._strategy.hit(self._item, key):
            return
        reset_at = self._strategy.get_window_stats(self._item, key)[0]
        retry_after = max(1, int(reset_at - time.time()))
        logger.warning("Login throttled (retry in %ds)", retry_after)
        raise LoginThrottledError(retry_after)

    def reset(self, key: str) -> None:
        self._strategy.clear(self._item, key)


login_throttle = MovingWindowLoginThrottle(
    max_attempts=settings.login_max_attempts,
    window_minutes=settings.login_window_minutes,
)
