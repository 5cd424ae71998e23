"""X-Request-Id propagation into structlog context and responses."""

import re
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-Id"
MAX_REQUEST_ID_LENGTH = 64

_SAFE_REQUEST_ID = re.compile(r"[A-Za-z0-9._:-]+")


def resolve_request_id(supplied: str | None) -> str:
    """Return the caller's id when it is short and printable-safe, else a fresh UUID.

    The id ends up in every log line and in the response header, so anything
    with whitespace, control characters or unbounded length is replaced.
    """
    if supplied and len(supplied) <= MAX_REQUEST_ID_LENGTH and _SAFE_REQUEST_ID.fullmatch(supplied):
        return supplied
    return str(uuid.uuid4())


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tag every request (and every log line it produces) with an id."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
