"""
=============================================================================
DICEROLLER - A tiny dice-rolling JSON API on a from-scratch HTTP/1.1 server
=============================================================================

Endpoints:

    GET /api/wake          {"status": "awake", "message": ..., "timestamp"}
    GET /api/random        {"random": x, "timestamp"}
    GET /api/roll/:sides   {"sides": n, "result": r, "timestamp"}
    GET /api/no-cors       same shape as a normal answer, minus CORS headers
    GET /                  HTML page with a button per endpoint

Package layout:

    diceroller/
    ├── __main__.py          python -m diceroller
    ├── app.py               create_app(): routes + middleware
    ├── server.py            HTTPServer
    ├── config.py            ServerConfig (PORT / HOST / LOG_LEVEL)
    ├── core/                sockets, connections, worker pool
    ├── http/                request parsing, responses, routing, status codes
    ├── middleware/          access logging, CORS
    └── handlers/            dice endpoints, tester page

=============================================================================
"""

__version__ = "1.0.0"

from .config import ServerConfig
from .server import HTTPServer
from .app import create_app
from .http import HTTPRequest, HTTPResponse, ResponseBuilder, Router, HTTPStatus
from .middleware import Middleware, LoggingMiddleware, CORSMiddleware, CORSConfig
from .handlers import DiceHandler

__all__ = [
    "ServerConfig",
    "HTTPServer",
    "create_app",
    "HTTPRequest",
    "HTTPResponse",
    "ResponseBuilder",
    "Router",
    "HTTPStatus",
    "Middleware",
    "LoggingMiddleware",
    "CORSMiddleware",
    "CORSConfig",
    "DiceHandler",
]
