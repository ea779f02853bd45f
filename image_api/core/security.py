"""Shared-secret authentication gate.

Every request must carry the configured header with a value equal to the
configured secret. There is one static secret for all clients.
"""

import hmac
from typing import Optional

import structlog
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from image_api.exceptions import AuthError
from image_api.schemas import ErrorResponse

logger = structlog.get_logger(__name__)


def is_authorized(presented: Optional[str], secret: str) -> bool:
    """Compare a presented header value with the secret in constant time.

    An empty secret authorizes nothing, so a missing ``API_KEY`` cannot be
    matched by a missing header. Header values arrive decoded as latin-1, so
    they are turned back into their raw bytes before comparing with the
    UTF-8 encoded secret.
    """
    if not secret or presented is None:
        return False
    try:
        presented_bytes = presented.encode("latin-1")
    except UnicodeEncodeError:
        # Not representable as an HTTP header value
        return False
    return hmac.compare_digest(presented_bytes, secret.encode("utf-8"))


class APIKeyMiddleware(BaseHTTPMiddleware):
    """Reject requests whose API key header does not match with 401."""

    def __init__(self, app: ASGIApp, header_name: str, api_key: str) -> None:
        super().__init__(app)
        self.header_name = header_name
        self.api_key = api_key

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not is_authorized(request.headers.get(self.header_name), self.api_key):
            error = AuthError()
            logger.warning("auth_rejected", method=request.method, path=request.url.path)
            return JSONResponse(
                status_code=error.status_code,
                content=ErrorResponse(message=error.message).model_dump(exclude_none=True),
            )
        return await call_next(request)
