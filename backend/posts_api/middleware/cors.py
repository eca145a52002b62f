"""
Posts API — Origin Allow-List Middleware
=========================================

What:  Rejects cross-origin requests from origins outside the allow-list.
Why:   Starlette's CORSMiddleware only withholds CORS headers from unknown
       origins; the request itself still runs. Here a disallowed origin gets
       a 403 envelope and never reaches a handler.
How:   Requests without an Origin header (curl, server-to-server, same-origin
       navigation) always pass. Allowed origins continue to CORSMiddleware,
       which adds the response headers and answers preflights.
"""

import logging
from typing import Iterable

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from posts_api.utils.responses import create_error_response

logger = logging.getLogger(__name__)


class OriginAllowListMiddleware(BaseHTTPMiddleware):

    def __init__(self, app, allowed_origins: Iterable[str] = ()):
        super().__init__(app)
        self.allowed_origins = frozenset(allowed_origins)

    def is_allowed(self, origin: str) -> bool:
        return origin in self.allowed_origins

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        origin = request.headers.get("origin")
        if origin is None or self.is_allowed(origin):
            return await call_next(request)

        logger.info("CORS blocked origin: %s", origin)
        return JSONResponse(
            status_code=403,
            content=create_error_response(f"Origin {origin} not allowed by CORS"),
        )
