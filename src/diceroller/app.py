"""
Application factory: the server with its middleware and routes.

    GET  /                 tester page
    GET  /api/wake         liveness
    GET  /api/random       float in [0, 1)
    GET  /api/roll/:sides  die roll, 400 on bad sides
    GET  /api/no-cors      served without CORS headers
    OPTIONS *              preflight, answered by CORSMiddleware
    anything else          404 {"error": "Not found"}

Logging is added before CORS so preflights are logged too.
"""

import random
from typing import Optional

from .config import ServerConfig
from .handlers import DiceHandler, index
from .middleware import CORSMiddleware, LoggingMiddleware
from .server import HTTPServer


def create_app(
    config: Optional[ServerConfig] = None,
    rng: Optional[random.Random] = None,
) -> HTTPServer:
    """
    Build a ready-to-run server.

    Args:
        config: Server configuration. Defaults to ServerConfig.from_env().
        rng: Random source for the dice handlers; tests pass a seeded one.
    """
    server = HTTPServer(config or ServerConfig.from_env())

    server.use(LoggingMiddleware())
    server.use(CORSMiddleware())

    dice = DiceHandler(rng=rng)

    server.get("/")(index)
    server.get("/api/wake")(dice.wake)
    server.get("/api/random")(dice.random_number)
    server.get("/api/roll/:sides")(dice.roll)
    server.get("/api/no-cors", cors=False)(dice.no_cors)

    return server
