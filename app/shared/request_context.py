"""
Per-request correlation id.

Every request carries an id taken from the ``X-Request-ID`` header or
generated on arrival. It is stored in a context variable so log records and
error bodies can reference it without threading it through call signatures.
"""

from contextvars import ContextVar
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

_request_id: ContextVar[str] = ContextVar("request_id", default="-")


def get_request_id() -> str:
    """Return the correlation id of the request being handled."""
    return _request_id.get()


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Binds a correlation id to the request and echoes it in the response."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        token = _request_id.set(request_id)
        try:
            response = await call_next(request)
        finally:
            _request_id.reset(token)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
