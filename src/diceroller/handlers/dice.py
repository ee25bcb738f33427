"""
=============================================================================
DICE API HANDLERS
=============================================================================

The four JSON endpoints of the service:

    ┌──────────────────────┬──────────────────────────────────────────────┐
    │ GET /api/wake        │ {"status": "awake",                          │
    │                      │  "message": "Server is running", timestamp}  │
    │ GET /api/random      │ {"random": 0.0 <= x < 1.0, timestamp}        │
    │ GET /api/roll/:sides │ {"sides": n, "result": 1..n, timestamp}      │
    │                      │ or 400 {"error": "Invalid number of sides"}  │
    │ GET /api/no-cors     │ {"message": "This endpoint has no CORS       │
    │                      │  headers", "random": x}                      │
    └──────────────────────┴──────────────────────────────────────────────┘

/api/wake is what a free-tier host's cold-start ping hits, so it answers
without doing any work and is never cached.

=============================================================================
ROLLING A DIE
=============================================================================

    result = floor(random() * sides) + 1

random() is uniform on [0, 1), so random() * sides is uniform on
[0, sides), its floor is uniform over {0, ..., sides-1}, and adding one
gives {1, ..., sides}.

random() returns k / 2**53 for an integer k, so the floor is computed
exactly in integers as (k * sides) >> 53. No float ever holds sides,
which may have thousands of digits.

=============================================================================
"""

import random
import re
from datetime import datetime, timezone
from typing import Optional

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, ResponseBuilder, HTTPStatus, ok, bad_request


INVALID_SIDES = "Invalid number of sides"

# Optional whitespace and sign, then the leading run of ASCII digits.
# Anything after the digits is ignored: "6abc" → 6, "3.9" → 3.
_LEADING_INT = re.compile(r"\s*([+-]?)([0-9]+)")

# Longer digit runs are rejected; int() refuses past 4300 by default.
MAX_SIDES_DIGITS = 4000

_FLOAT_BITS = 53


def iso_timestamp(now: Optional[datetime] = None) -> str:
    """
    UTC timestamp with millisecond precision and a Z suffix.

        2026-10-16T12:00:00.000Z
    """
    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def parse_sides(raw: str) -> Optional[int]:
    """
    Read the number of sides from a path segment.

    Returns:
        The integer, or None when there are no leading digits, more than
        MAX_SIDES_DIGITS of them, or the value is below 1.
    """
    match = _LEADING_INT.match(raw)
    if not match:
        return None

    sign, digits = match.groups()
    if len(digits) > MAX_SIDES_DIGITS:
        return None

    try:
        sides = int(sign + digits)
    except ValueError:
        return None  # interpreter digit limit lowered below MAX_SIDES_DIGITS

    if sides < 1:
        return None
    return sides


def roll_die(sides: int, rng: random.Random) -> int:
    """
    Roll a fair die with the given number of sides.

    Args:
        sides: Number of faces, >= 1.
        rng: Source of uniform floats in [0, 1).

    Returns:
        An integer in [1, sides].
    """
    k = int(rng.random() * (1 << _FLOAT_BITS))
    return ((k * sides) >> _FLOAT_BITS) + 1


class DiceHandler:
    """
    Handlers for the /api endpoints.

    The random source is injected so tests can pin it:

        dice = DiceHandler(rng=random.Random(42))
        router.get("/api/roll/:sides")(dice.roll)

    Handlers keep no per-request state; one instance serves all worker
    threads.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def wake(self, request: HTTPRequest) -> HTTPResponse:
        """Liveness answer for uptime pings."""
        return (ResponseBuilder()
            .status(HTTPStatus.OK)
            .json({
                "status": "awake",
                "message": "Server is running",
                "timestamp": iso_timestamp(),
            })
            .no_cache()
            .build())

    def random_number(self, request: HTTPRequest) -> HTTPResponse:
        return ok({
            "random": self.rng.random(),
            "timestamp": iso_timestamp(),
        })

    def roll(self, request: HTTPRequest) -> HTTPResponse:
        """
        Roll a die with request.path_params["sides"] faces.

        The path segment is validated here rather than in the route
        pattern, so "/api/roll/abc" reaches this handler and gets the 400
        instead of falling through to a 404.
        """
        sides = parse_sides(request.path_params.get("sides", ""))
        if sides is None:
            return bad_request(INVALID_SIDES)

        return ok({
            "sides": sides,
            "result": roll_die(sides, self.rng),
            "timestamp": iso_timestamp(),
        })

    def no_cors(self, request: HTTPRequest) -> HTTPResponse:
        """
        A normal JSON answer. Registered with cors=False, so the CORS
        middleware strips its Access-Control-* headers and browsers on
        other origins refuse to hand the body to the page.
        """
        return ok({
            "message": "This endpoint has no CORS headers",
            "random": self.rng.random(),
        })
