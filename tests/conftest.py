"""
pytest configuration and fixtures.
"""

import random
import socket
import threading
from typing import Callable, Generator
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from diceroller import HTTPServer, ServerConfig, create_app


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request for a roll."""
    return (
        b"GET /api/roll/20?verbose=1&verbose=2 HTTP/1.1\r\n"
        b"Host: localhost:3000\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: application/json\r\n"
        b"Origin: http://example.com\r\n"
        b"Connection: keep-alive\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_preflight_request() -> bytes:
    """Sample CORS preflight request."""
    return (
        b"OPTIONS /api/random HTTP/1.1\r\n"
        b"Host: localhost:3000\r\n"
        b"Origin: http://example.com\r\n"
        b"Access-Control-Request-Method: GET\r\n"
        b"\r\n"
    )


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


class TestServer:
    """Test server helper that runs in a background thread."""

    def __init__(self, server: HTTPServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        """Start server in background thread and wait until it accepts."""
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        """Stop the server."""
        self.server.shutdown()

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=10.0)


def make_test_config(port: int = 0, log_level: str = "WARNING", **overrides) -> ServerConfig:
    settings = dict(
        host="127.0.0.1",
        port=port,
        min_workers=2,
        max_workers=4,
        timeout=5.0,
        keep_alive_timeout=1.0,
        log_level=log_level,
    )
    settings.update(overrides)
    return ServerConfig(**settings)


@pytest.fixture
def app() -> HTTPServer:
    """The full application, not listening, with a seeded random source."""
    return create_app(make_test_config(), rng=random.Random(1234))


@pytest.fixture
def test_server() -> Generator[TestServer, None, None]:
    """The full application listening on an OS-assigned port."""
    server = create_app(make_test_config(), rng=random.Random(1234))

    test_srv = TestServer(server)
    test_srv.start()

    yield test_srv

    test_srv.stop()


@pytest.fixture
def server_factory() -> Generator[Callable[..., TestServer], None, None]:
    """
    Build unstarted TestServers from make_test_config() keyword arguments.
    Any that were started are stopped at teardown.
    """
    created = []

    def factory(**config_kwargs) -> TestServer:
        server = TestServer(create_app(make_test_config(**config_kwargs), rng=random.Random(0)))
        created.append(server)
        return server

    yield factory

    for server in created:
        server.stop()
