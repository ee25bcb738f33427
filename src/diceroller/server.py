"""
=============================================================================
HTTP SERVER
=============================================================================

Ties the layers together:

    ┌─────────────┐  Connection   ┌────────────┐  task   ┌───────────────┐
    │ SocketServer│ ────────────► │ ThreadPool │ ──────► │ worker thread │
    │ accept loop │               │ (bounded)  │         │               │
    └─────────────┘               └────────────┘         └───────┬───────┘
                                                                 │
        read_request() ─► RequestParser ─► middleware ─► Router ─► handler
                                                                 │
        send_response() ◄──────────── HTTPResponse ◄─────────────┘

Failures outside the handlers become JSON errors and close the connection:

    HTTPParseError          → its status (400/405/413/505)
    first request too slow  → 408 {"error": "Request timeout"}
    handler raised          → 500 {"error": "Internal Server Error"}
    worker queue full       → 503 {"error": "Server overloaded"}

=============================================================================
"""

import logging
from typing import Callable, Optional

from .config import ServerConfig
from .core.connection import Connection, ConnectionState
from .core.socket_server import SocketServer
from .core.thread_pool import ThreadPool
from .http.request import HTTPRequest, HTTPParseError, RequestParser
from .http.response import HTTPResponse, ResponseBuilder, internal_error
from .http.router import Router
from .http.status_codes import HTTPStatus
from .middleware.base import Middleware, MiddlewarePipeline


logger = logging.getLogger(__name__)

# Listed in the startup log after the base URL.
ENDPOINT_PATHS = ("/api/wake", "/api/random", "/api/roll/6", "/api/no-cors")


class HTTPServer:
    """
    Threaded HTTP/1.1 server.

    Usage:
        server = HTTPServer(ServerConfig.from_env())
        server.use(LoggingMiddleware())
        server.get("/api/wake")(dice.wake)
        server.run()

    Middleware runs in the order added, outermost first.
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        self.config = config or ServerConfig()
        self.config.validate()

        self._socket_server = SocketServer(self.config)
        self._thread_pool = ThreadPool(
            min_workers=self.config.min_workers,
            max_workers=self.config.max_workers,
            queue_size=self.config.queue_size,
        )
        self._parser = RequestParser(max_request_size=self.config.max_request_size)
        self._router = Router()
        self._middleware = MiddlewarePipeline()

        self._handler: Optional[Callable[[HTTPRequest], HTTPResponse]] = None
        self._running = False

    # ─────────────────────────────────────────────────────────────────────
    # CONFIGURATION
    # ─────────────────────────────────────────────────────────────────────

    def use(self, middleware: Middleware) -> "HTTPServer":
        self._middleware.add(middleware)
        return self

    @property
    def router(self) -> Router:
        return self._router

    def get(self, path: str, **meta):
        return self._router.get(path, **meta)

    @property
    def address(self):
        """(host, port) the server listens on; the real port once bound."""
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._running

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Run one parsed request through middleware and router, without
        touching the network.
        """
        if self._handler is None:
            self._handler = self._middleware.wrap(self._router.handle)
        return self._handler(request)

    # ─────────────────────────────────────────────────────────────────────
    # LIFECYCLE
    # ─────────────────────────────────────────────────────────────────────

    def run(self, host: Optional[str] = None, port: Optional[int] = None):
        """
        Bind and serve until SIGINT/SIGTERM or shutdown().

        Raises:
            OSError: The port could not be bound. Already logged.
        """
        if host:
            self.config.host = host
        if port is not None:
            self.config.port = port

        self._setup_logging()
        self._handler = self._middleware.wrap(self._router.handle)

        self._socket_server.bind()
        self._thread_pool.start()
        self._running = True
        self._log_startup()

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        return self._socket_server.wait_until_ready(timeout)

    def shutdown(self):
        """Ask a running server to stop; run() returns once it has."""
        self._socket_server.shutdown()

    def _setup_logging(self):
        level = self.config.log_level_value

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("diceroller").setLevel(level)

    def _log_startup(self):
        _, port = self.address
        base = f"http://localhost:{port}"

        logger.info(f"Server running at {base}/")
        logger.info("Endpoints:")
        for path in ENDPOINT_PATHS:
            logger.info(f"  {base}{path}")

        for line in self._router.describe():
            logger.debug(f"route {line}")

    @property
    def drain_timeout(self) -> float:
        """
        Seconds shutdown waits for workers: long enough for a connection
        still waiting on its first request to hit its read timeout.
        """
        read_timeout = self.config.timeout or 0.0
        return max(read_timeout, self.config.keep_alive_timeout) + 1.0

    def _shutdown(self):
        logger.info("Shutting down server...")
        self._running = False
        self._thread_pool.shutdown(wait=True, timeout=self.drain_timeout)
        logger.info("Server stopped")

    # ─────────────────────────────────────────────────────────────────────
    # CONNECTION HANDLING
    # ─────────────────────────────────────────────────────────────────────

    def _handle_connection(self, conn: Connection):
        """Hand the connection to a worker, or answer 503 if none can take it."""
        submitted = self._thread_pool.submit(self._process_connection, args=(conn,), block=False)

        if not submitted:
            logger.warning(f"[{conn.id}] Worker queue full, rejecting connection")
            self._send_error(conn, HTTPStatus.SERVICE_UNAVAILABLE, "Server overloaded")
            conn.close()

    def _process_connection(self, conn: Connection):
        """
        Keep-alive loop for one connection (worker thread).

            read → parse → middleware/router → send → repeat or close
        """
        with conn:
            while self._running:
                try:
                    raw_request = conn.read_request()
                    if raw_request is None:
                        break

                    request = self._parser.parse(raw_request, conn.address)

                except HTTPParseError as e:
                    logger.info(f"[{conn.id}] Rejected request: {e}")
                    self._send_error(conn, e.status_code, str(e))
                    break

                except TimeoutError:
                    self._send_error(conn, HTTPStatus.REQUEST_TIMEOUT, "Request timeout")
                    break

                except OSError as e:
                    logger.debug(f"[{conn.id}] Read failed: {e}")
                    break

                conn.state = ConnectionState.PROCESSING

                try:
                    response = self._handler(request)
                except Exception as e:
                    logger.exception(f"[{conn.id}] Handler error: {e}")
                    response = internal_error()

                keep_alive = request.is_keep_alive and self.config.keep_alive
                if keep_alive:
                    response.headers.setdefault("Connection", "keep-alive")
                    response.headers.setdefault(
                        "Keep-Alive", f"timeout={int(self.config.keep_alive_timeout)}"
                    )
                else:
                    response.headers["Connection"] = "close"

                if not conn.send_response(response.to_bytes(self.config.server_name)):
                    break

                if not keep_alive:
                    break

                conn.set_keep_alive()

    def _send_error(self, conn: Connection, status: int, message: str):
        response = (ResponseBuilder()
            .status(status)
            .json({"error": message})
            .close_connection()
            .build())

        conn.send_response(response.to_bytes(self.config.server_name))
