from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

ALLOW_HEADERS = "Content-Type"


@dataclass(frozen=True)
class CorsPolicy:
    """Origin allow-list: one exact production origin plus a trusted suffix for previews."""

    allowed_origin: str = ""
    allowed_suffix: str = ""

    def is_allowed(self, origin: Optional[str]) -> bool:
        if not origin:
            return False
        if self.allowed_origin and origin == self.allowed_origin:
            return True
        return bool(self.allowed_suffix) and origin.endswith(self.allowed_suffix)

    def headers_for(self, origin: Optional[str], allow_methods: Optional[str] = None) -> Dict[str, str]:
        headers = {"Vary": "Origin"}
        if self.is_allowed(origin):
            headers["Access-Control-Allow-Origin"] = origin
        if allow_methods:
            headers["Access-Control-Allow-Methods"] = allow_methods
            headers["Access-Control-Allow-Headers"] = ALLOW_HEADERS
        return headers


class CorsGateMiddleware(BaseHTTPMiddleware):
    """
    Applies the CORS policy to every response and answers pre-flight requests.

    `route_methods` maps a path to the methods it advertises, e.g.
    {"/verify-session": "GET,OPTIONS"}. OPTIONS on one of those paths gets a
    bare 200 without reaching the route.
    """

    def __init__(self, app, policy: CorsPolicy, route_methods: Mapping[str, str]):
        super().__init__(app)
        self.policy = policy
        self.route_methods = dict(route_methods)

    async def dispatch(self, request, call_next):
        origin = request.headers.get("origin")
        allow_methods = self.route_methods.get(request.url.path)
        headers = self.policy.headers_for(origin, allow_methods)

        if request.method == "OPTIONS" and allow_methods is not None:
            return Response(status_code=200, headers=headers)

        response = await call_next(request)
        response.headers.update(headers)
        return response


__all__ = ["CorsGateMiddleware", "CorsPolicy"]
