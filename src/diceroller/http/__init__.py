"""
=============================================================================
HTTP PROTOCOL LAYER
=============================================================================

Everything between "bytes arrived on a socket" and "a handler was called":

    request.py       raw bytes      → HTTPRequest
    router.py        HTTPRequest    → handler(request)
    response.py      HTTPResponse   → raw bytes
    status_codes.py  HTTPStatus enum with reason phrases

=============================================================================
"""

from .request import HTTPRequest, RequestParser, HTTPParseError
from .response import (
    HTTPResponse,
    ResponseBuilder,
    ok,                 # 200 with JSON body
    error_response,     # any status, {"error": message}
    bad_request,        # 400
    not_found,          # 404
    internal_error,     # 500
)
from .router import Router, Route, RouteMatch
from .status_codes import HTTPStatus

__all__ = [
    "HTTPRequest",
    "RequestParser",
    "HTTPParseError",
    "HTTPResponse",
    "ResponseBuilder",
    "ok",
    "error_response",
    "bad_request",
    "not_found",
    "internal_error",
    "Router",
    "Route",
    "RouteMatch",
    "HTTPStatus",
]
