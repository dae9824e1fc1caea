#!/usr/bin/env python3
"""
Ping the echo service once and log its response.

Environment:
  ECHO_URL (default ws://localhost:8081)
  LOG_LEVEL (default INFO)
"""
import argparse
import logging
import sys

from .client import DEFAULT_TIMEOUT, ping
from .config import Settings, configure_logging
from .errors import PingError

log = logging.getLogger("echo-ping")

DEFAULT_MESSAGE = "Hello, Server!"


def run(argv=None) -> str:
    settings = Settings.from_env()
    parser = argparse.ArgumentParser(description="Send one message to a WebSocket echo server.")
    parser.add_argument("message", nargs="?", default=DEFAULT_MESSAGE, help=f"Message to send (default {DEFAULT_MESSAGE!r}).")
    parser.add_argument("--url", default=settings.url, help=f"Server address (default {settings.url}).")
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT, help="Seconds to wait for the connection and the reply.")
    args = parser.parse_args(argv)

    configure_logging(settings.log_level)
    try:
        response = ping(args.url, args.message, timeout=args.timeout)
    except PingError as e:
        log.error(f"Error pinging WebSocket server: {e}")
        sys.exit(1)
    log.info(f"Received response: {response}")
    return response


def main(argv=None):
    run(argv)


if __name__ == "__main__":
    main()
