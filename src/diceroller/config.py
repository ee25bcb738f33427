"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

All tunables in one dataclass, with defaults that suit a small container
deployment: bind every interface, port 3000.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ Source (highest priority first)                                     │
    ├─────────────────────────────────────────────────────────────────────┤
    │ 1. ServerConfig(...) keyword arguments    (tests, embedding)        │
    │ 2. Environment via ServerConfig.from_env  (deployment)              │
    │      PORT=8080 LOG_LEVEL=DEBUG python -m diceroller                 │
    │ 3. Field defaults below                                             │
    └─────────────────────────────────────────────────────────────────────┘

There is no config file. Validation happens once, when the server is
constructed, so a bad PORT fails at startup instead of on first request.

=============================================================================
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional


DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ServerConfig:
    """
    HTTP server configuration.

    Usage:
        config = ServerConfig.from_env()
        config = ServerConfig(host="127.0.0.1", port=0)   # tests
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK
    # ─────────────────────────────────────────────────────────────────────

    host: str = DEFAULT_HOST
    """Interface to bind. "0.0.0.0" = all of them, as hosting platforms expect."""

    port: int = DEFAULT_PORT
    """TCP port. Hosting platforms usually inject it through $PORT."""

    backlog: int = 128
    """Pending connections the kernel queues before refusing."""

    buffer_size: int = 8192
    """Bytes per recv() call."""

    timeout: Optional[float] = 30.0
    """Seconds to wait for the first request on a connection."""

    # ─────────────────────────────────────────────────────────────────────
    # HTTP
    # ─────────────────────────────────────────────────────────────────────

    keep_alive: bool = True
    keep_alive_timeout: float = 5.0
    """Idle seconds before a kept-alive connection is closed."""

    max_request_size: int = 1024 * 1024
    """The API takes no bodies; 1 MB is generous."""

    # ─────────────────────────────────────────────────────────────────────
    # WORKER POOL
    # ─────────────────────────────────────────────────────────────────────

    min_workers: int = 4
    max_workers: int = 16
    queue_size: int = 100
    """Connections waiting for a worker before new ones get 503."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING / IDENTITY
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    server_name: str = "DiceRoller/1.0"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServerConfig":
        """
        Build a config from environment variables.

            PORT       listen port              (default 3000)
            HOST       bind address             (default 0.0.0.0)
            LOG_LEVEL  DEBUG/INFO/WARNING/...   (default INFO)

        Args:
            environ: Mapping to read instead of os.environ.

        Raises:
            ValueError: If PORT is not an integer.
        """
        env = os.environ if environ is None else environ

        raw_port = env.get("PORT", "").strip() or str(DEFAULT_PORT)
        try:
            port = int(raw_port)
        except ValueError:
            raise ValueError(f"Invalid PORT: {raw_port!r}. Must be an integer.")

        return cls(
            host=env.get("HOST", "").strip() or DEFAULT_HOST,
            port=port,
            log_level=(env.get("LOG_LEVEL", "").strip() or "INFO").upper(),
        )

    @property
    def log_level_value(self) -> int:
        """log_level as a logging module constant."""
        return getattr(logging, self.log_level.upper(), logging.INFO)

    def validate(self) -> None:
        """
        Check values, raising ValueError on the first bad one.

        Port 0 is accepted: the OS picks a free port (used by tests).
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.min_workers < 1:
            raise ValueError("min_workers must be >= 1")

        if self.max_workers < self.min_workers:
            raise ValueError("max_workers must be >= min_workers")

        if self.queue_size < 1:
            raise ValueError("queue_size must be >= 1")

        if self.buffer_size < 1024:
            raise ValueError("buffer_size must be >= 1024")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(
                f"Invalid log_level: {self.log_level}. Must be one of {', '.join(LOG_LEVELS)}."
            )
