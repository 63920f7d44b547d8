"""ASGI middleware that applies the origin policy to every request.

Preflights (OPTIONS with an Origin header) are answered directly with the
engine's response. Other cross-origin requests are passed on and get the
CORS headers added only when their origin is allowed. Requests without an
Origin header are same-origin or non-browser and pass through untouched.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from cors_policy.engine import OriginPolicyEngine
from cors_policy.responses import build_headers

if TYPE_CHECKING:
    from starlette.middleware.base import RequestResponseEndpoint
    from starlette.requests import Request
    from starlette.types import ASGIApp


class OriginPolicyMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, engine: OriginPolicyEngine | None = None) -> None:
        super().__init__(app)
        self.engine = engine or OriginPolicyEngine()

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        origin = request.headers.get("origin")
        if origin is None:
            return await call_next(request)

        if request.method == "OPTIONS":
            preflight = self.engine.preflight(origin)
            return Response(
                content=preflight.body,
                status_code=preflight.status_code,
                headers=preflight.headers,
            )

        verdict = self.engine.validate(origin)
        response = await call_next(request)
        if verdict.allowed:
            response.headers.update(build_headers(verdict.origin))
        else:
            response.headers["Vary"] = "Origin"
        return response

