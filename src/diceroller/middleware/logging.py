"""
=============================================================================
ACCESS LOGGING MIDDLEWARE
=============================================================================

One plain-text line per request on the "diceroller.access" logger, in the
Apache common-log spirit:

    127.0.0.1 - - [16/Oct/2026:12:00:00 +0000] "GET /api/roll/6" 200 74 0.41ms
    ─────────       ──────────────────────────  ───────────────  ─── ── ──────
    client          time                        request          code bytes time

Add it first so its timing covers every other middleware and so requests
short-circuited further in (CORS preflights) still get a line.

Configure it like any logger:

    logging.getLogger("diceroller.access").setLevel(logging.WARNING)

=============================================================================
"""

import time
import logging
from dataclasses import dataclass

from .base import Middleware, NextHandler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger("diceroller.access")


@dataclass
class RequestLog:
    """The fields of one access log line."""

    method: str
    path: str
    client_ip: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_text(self) -> str:
        return (
            f'{self.client_ip or "-"} - - [{self.timestamp}] '
            f'"{self.method} {self.path}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )


class LoggingMiddleware(Middleware):
    """
    Request logging middleware.

    Args:
        log_level: Level used for access lines (default INFO).
    """

    def __init__(self, log_level: int = logging.INFO):
        self.log_level = log_level

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        start_time = time.perf_counter()

        try:
            response = next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"Request failed: {request.method} {request.path} "
                f"- {type(e).__name__}: {e} ({duration_ms:.2f}ms)"
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000

        entry = RequestLog(
            method=request.method,
            path=request.path,
            client_ip=request.client_address[0],
            status_code=int(response.status),
            content_length=len(response.body),
            duration_ms=duration_ms,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )
        logger.log(self.log_level, entry.to_text())

        return response
