"""
=============================================================================
URL ROUTER
=============================================================================

Maps (method, path) to a handler function.

    Registered routes:
        GET  /                  → index
        GET  /api/wake          → wake
        GET  /api/random        → random_number
        GET  /api/roll/:sides   → roll           ← GET /api/roll/20
        GET  /api/no-cors       → no_cors          path_params = {"sides": "20"}

Pattern segments:

    static      /api/wake       exact match
    :param      /api/roll/:sides   one segment, captured by name

Each pattern is compiled once to an anchored regex:

    /api/roll/:sides   →   ^/api/roll/(?P<sides>[^/]+)$

Matching walks the routes in registration order; first match wins. Anything
that matches nothing (wrong path OR wrong method) is a 404 with
{"error": "Not found"}.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Callable, Optional, Dict, Any, List
import re

from .request import HTTPRequest
from .response import HTTPResponse, not_found


# All handlers take a request and return a response
Handler = Callable[[HTTPRequest], HTTPResponse]


@dataclass
class Route:
    """
    A URL pattern bound to a handler.

    meta holds free-form flags for middleware, e.g. cors=False on the
    no-cors endpoint. The router copies it onto request.route_meta.
    """

    path: str                        # URL pattern (e.g., /api/roll/:sides)
    method: Optional[str]            # HTTP method (None = any method)
    handler: Handler
    name: Optional[str] = None
    meta: Dict[str, Any] = field(default_factory=dict)

    _pattern: Optional[re.Pattern] = field(default=None, repr=False)
    _param_names: List[str] = field(default_factory=list, repr=False)


@dataclass
class RouteMatch:
    """A matched route plus the path parameters it captured."""
    route: Route
    params: Dict[str, str]


class Router:
    """
    HTTP request router with :param path segments.

        router = Router()

        @router.get("/api/roll/:sides")
        def roll(request):
            sides = request.path_params["sides"]
            ...

        @router.get("/api/no-cors", cors=False)   # extra kwargs → route.meta
        def no_cors(request):
            ...

        response = router.handle(request)
    """

    def __init__(self):
        self._routes: List[Route] = []

    # =========================================================================
    # ROUTE REGISTRATION
    # =========================================================================

    def add_route(
        self,
        path: str,
        handler: Handler,
        method: Optional[str] = None,
        name: Optional[str] = None,
        **meta: Any
    ) -> Route:
        """
        Register a route.

        Args:
            path: URL pattern, e.g. /api/roll/:sides
            handler: Callable taking a request, returning a response
            method: HTTP method, or None to accept any
            name: Optional route name (defaults to the handler's name)
            **meta: Stored on route.meta for middleware

        Returns:
            The registered Route.
        """
        pattern, param_names = self._compile_pattern(path)

        route = Route(
            path=path,
            method=method.upper() if method else None,
            handler=handler,
            name=name or getattr(handler, "__name__", None),
            meta=meta,
            _pattern=pattern,
            _param_names=param_names,
        )
        self._routes.append(route)
        return route

    def _compile_pattern(self, path: str) -> tuple[re.Pattern, List[str]]:
        """
        Compile a route pattern into a regex.

            "/api/roll/:sides"
                split  → ["", "api", "roll", ":sides"]
                map    → "/api" "/roll" "/(?P<sides>[^/]+)"
                anchor → ^/api/roll/(?P<sides>[^/]+)$

        The root pattern "/" compiles to ^/$.
        """
        param_names: List[str] = []
        regex_parts = ["^"]

        for segment in path.split("/"):
            if not segment:
                continue

            regex_parts.append("/")

            if segment.startswith(":"):
                param_name = segment[1:]
                param_names.append(param_name)
                regex_parts.append(f"(?P<{param_name}>[^/]+)")
            else:
                regex_parts.append(re.escape(segment))

        if len(regex_parts) == 1:
            regex_parts.append("/")

        regex_parts.append("$")
        return re.compile("".join(regex_parts)), param_names

    # =========================================================================
    # ROUTE MATCHING
    # =========================================================================

    @staticmethod
    def normalize_path(path: str) -> str:
        """Leading slash, no trailing slash, root stays "/"."""
        stripped = path.strip("/")
        return "/" + stripped if stripped else "/"

    def match(self, method: str, path: str) -> Optional[RouteMatch]:
        """
        Find the first route matching method and path.

        Returns:
            RouteMatch, or None if nothing matches.
        """
        path = self.normalize_path(path)

        for route in self._routes:
            if route.method and route.method != method.upper():
                continue

            if route._pattern:
                match = route._pattern.match(path)
                if match:
                    return RouteMatch(route=route, params=match.groupdict())

        return None

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Dispatch a request.

        On a match the path parameters and route metadata are injected into
        the request before the handler runs. No match → 404.
        """
        match = self.match(request.method, request.path)

        if match is None:
            return not_found()

        request.path_params = match.params
        request.route_meta = dict(match.route.meta)
        return match.route.handler(request)

    # =========================================================================
    # DECORATOR-STYLE ROUTE REGISTRATION
    # =========================================================================

    def route(
        self,
        path: str,
        method: Optional[str] = None,
        name: Optional[str] = None,
        **meta: Any
    ) -> Callable[[Handler], Handler]:
        """Decorator form of add_route(). Returns the handler unchanged."""
        def decorator(handler: Handler) -> Handler:
            self.add_route(path, handler, method, name, **meta)
            return handler
        return decorator

    def get(self, path: str, name: Optional[str] = None, **meta: Any) -> Callable[[Handler], Handler]:
        """Register a GET route."""
        return self.route(path, "GET", name, **meta)

    # =========================================================================
    # UTILITY METHODS
    # =========================================================================

    def routes(self) -> List[Route]:
        """All registered routes, in match order."""
        return list(self._routes)

    def describe(self) -> List[str]:
        """One "METHOD  /path" line per route, for startup logging."""
        return [f"{route.method or 'ANY':8} {route.path}" for route in self._routes]
