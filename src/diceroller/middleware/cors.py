"""
=============================================================================
CORS (Cross-Origin Resource Sharing) MIDDLEWARE
=============================================================================

Browsers only let a page read a cross-origin response when the server says
so in response headers. This service says so everywhere except one route:

    ┌───────────────────────┬──────────────────────────────────────────┐
    │ Request               │ What this middleware does                │
    ├───────────────────────┼──────────────────────────────────────────┤
    │ OPTIONS (any path)    │ answers itself: 200, empty body,         │
    │                       │ allow-origin/methods/headers, max-age    │
    │ anything else         │ calls the router, then adds              │
    │                       │ allow-origin/methods/headers             │
    │ route with cors=False │ calls the router, then STRIPS every      │
    │   (/api/no-cors)      │ Access-Control-* header                  │
    └───────────────────────┴──────────────────────────────────────────┘

The /api/no-cors route exists so the tester page can show a browser
rejecting a cross-origin read. Its missing headers are the point.

Position: after logging (so preflights get logged too), before anything
else.

=============================================================================
"""

from typing import List, Optional
from dataclasses import dataclass, field

from .base import Middleware, NextHandler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, ResponseBuilder, HTTPStatus


CORS_HEADER_PREFIX = "access-control-"


@dataclass
class CORSConfig:
    """
    CORS policy.

    The defaults are the service's policy: any origin, the common methods,
    and the two request headers browser clients actually send.
    """

    allow_origin: str = "*"
    allow_methods: List[str] = field(
        default_factory=lambda: ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    )
    allow_headers: List[str] = field(
        default_factory=lambda: ["Content-Type", "Authorization"]
    )
    # How long a browser may cache a preflight answer (seconds)
    max_age: int = 86400
    # Route meta key that opts a route out of CORS
    opt_out_key: str = "cors"


class CORSMiddleware(Middleware):
    """
    Adds CORS headers, answers preflights, honours per-route opt-out.

        server.use(CORSMiddleware())

        @router.get("/api/no-cors", cors=False)
        def no_cors(request): ...
    """

    def __init__(self, config: Optional[CORSConfig] = None):
        self.config = config or CORSConfig()

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        if request.method == "OPTIONS":
            return self._handle_preflight()

        response = next(request)

        if request.route_meta.get(self.config.opt_out_key, True) is False:
            # Handler or earlier middleware may have set some; none may leave
            self._strip_cors_headers(response)
        else:
            self._add_cors_headers(response)

        return response

    def _handle_preflight(self) -> HTTPResponse:
        """
        Answer an OPTIONS request without touching the router.

        200 with an explicit empty body rather than 204, so clients that
        insist on a 200 preflight are satisfied too.
        """
        response = ResponseBuilder().status(HTTPStatus.OK).build()
        self._add_cors_headers(response)
        response.headers["Access-Control-Max-Age"] = str(self.config.max_age)
        return response

    def _add_cors_headers(self, response: HTTPResponse):
        response.headers["Access-Control-Allow-Origin"] = self.config.allow_origin
        response.headers["Access-Control-Allow-Methods"] = ", ".join(self.config.allow_methods)
        response.headers["Access-Control-Allow-Headers"] = ", ".join(self.config.allow_headers)

    @staticmethod
    def _strip_cors_headers(response: HTTPResponse):
        for name in list(response.headers):
            if name.lower().startswith(CORS_HEADER_PREFIX):
                del response.headers[name]
