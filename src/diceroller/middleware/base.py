"""
=============================================================================
MIDDLEWARE BASE
=============================================================================

Middleware wraps the router the way layers wrap an onion:

        request ──►  LoggingMiddleware ──► CORSMiddleware ──► router.handle
        response ◄── LoggingMiddleware ◄── CORSMiddleware ◄──┘

First added = outermost. Each middleware gets the request plus `next`, the
rest of the chain, and decides whether to call it:

    class AddHeader(Middleware):
        def __call__(self, request, next):
            response = next(request)            # continue the chain
            response.headers["X-Thing"] = "1"   # post-process
            return response

Returning without calling next() short-circuits the chain; the CORS
middleware does exactly that for OPTIONS preflight requests.

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import Callable, List
import logging

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger(__name__)


# The next middleware, or the router at the end of the chain
NextHandler = Callable[[HTTPRequest], HTTPResponse]


class Middleware(ABC):
    """Abstract base class for middleware."""

    @abstractmethod
    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        """
        Process the request.

        Args:
            request: The incoming HTTP request
            next: The rest of the chain; call it to continue

        Returns:
            The response, from next() or produced here
        """

    @property
    def name(self) -> str:
        return self.__class__.__name__


class MiddlewarePipeline:
    """
    An ordered list of middleware that can wrap a final handler.

        pipeline = MiddlewarePipeline()
        pipeline.add(LoggingMiddleware()).add(CORSMiddleware())
        handler = pipeline.wrap(router.handle)
        response = handler(request)
    """

    def __init__(self):
        self._middleware: List[Middleware] = []

    def add(self, middleware: Middleware) -> "MiddlewarePipeline":
        """Append middleware (runs inside everything added before it)."""
        self._middleware.append(middleware)
        logger.debug(f"Added middleware: {middleware.name}")
        return self

    def wrap(self, handler: NextHandler) -> NextHandler:
        """
        Build the chain around handler.

        Given [MW1, MW2] we wrap in reverse so the result is
        MW1 → MW2 → handler.
        """
        current = handler
        for middleware in reversed(self._middleware):
            current = self._create_wrapped_handler(middleware, current)
        return current

    def _create_wrapped_handler(
        self,
        middleware: Middleware,
        next_handler: NextHandler
    ) -> NextHandler:
        def wrapped(request: HTTPRequest) -> HTTPResponse:
            return middleware(request, next_handler)
        return wrapped

    def __len__(self) -> int:
        return len(self._middleware)

    def __iter__(self):
        return iter(self._middleware)
