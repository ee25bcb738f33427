"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The status codes this service can emit, with their reason phrases.

    HTTP/1.1 404 Not Found
             ─── ─────────
              │      │
              │      └── Reason phrase (purely informational, RFC 7230)
              └───────── Status code (what clients actually act on)

Only the codes the server, router and handlers produce are listed. Adding
one means adding it here AND to _STATUS_PHRASES.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes used by the server.

    IntEnum so that values compare equal to plain ints:

        >>> HTTPStatus.OK == 200
        True
    """

    # 2xx Success
    OK = 200                            # Standard success response

    # 4xx Client Errors
    BAD_REQUEST = 400                   # Malformed request / invalid input
    NOT_FOUND = 404                     # No route matches
    METHOD_NOT_ALLOWED = 405            # Unknown HTTP method in request line
    REQUEST_TIMEOUT = 408               # Client too slow to send a request
    PAYLOAD_TOO_LARGE = 413             # Request exceeds max_request_size

    # 5xx Server Errors
    INTERNAL_SERVER_ERROR = 500         # Handler raised
    SERVICE_UNAVAILABLE = 503           # Worker pool queue is full
    HTTP_VERSION_NOT_SUPPORTED = 505    # Neither HTTP/1.0 nor HTTP/1.1

    @property
    def phrase(self) -> str:
        """Reason phrase for the status line."""
        return _STATUS_PHRASES.get(self, "Unknown")


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTPStatus.REQUEST_TIMEOUT: "Request Timeout",
    HTTPStatus.PAYLOAD_TOO_LARGE: "Payload Too Large",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
    HTTPStatus.SERVICE_UNAVAILABLE: "Service Unavailable",
    HTTPStatus.HTTP_VERSION_NOT_SUPPORTED: "HTTP Version Not Supported",
}
