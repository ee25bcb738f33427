"""
Entry point.

    python -m diceroller
    PORT=8080 python -m diceroller
    dice-roller                        # console script

Configuration comes only from the environment (PORT, HOST, LOG_LEVEL); see
diceroller.config.
"""

import sys

from .app import create_app
from .config import ServerConfig


def main():
    try:
        config = ServerConfig.from_env()
        server = create_app(config)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        server.run()
    except OSError as e:
        print(f"Server error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
