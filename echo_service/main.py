#!/usr/bin/env python3
"""
WebSocket Echo Service

Answers every message with "Server response: <message>".

Environment:
  ECHO_HOST (default 0.0.0.0)
  ECHO_PORT (default 8081)
  ECHO_PING_INTERVAL / ECHO_PING_TIMEOUT keepalive seconds, 0 disables (default 20)
  LOG_LEVEL (default INFO)
"""
import argparse
import asyncio
import logging
import sys

from .config import Settings, configure_logging, port_number
from .errors import BindError
from .server import EchoServer

logger = logging.getLogger("echo-service")


def _cli_port(value):
    try:
        return port_number(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the WebSocket echo service.")
    parser.add_argument("--host", default=settings.host, help=f"Interface to bind (default {settings.host}).")
    parser.add_argument("--port", type=_cli_port, default=settings.port, help=f"Port to listen on (default {settings.port}).")
    parser.add_argument("--log-level", default=settings.log_level, help=f"Logging level (default {settings.log_level}).")
    return parser


def main(argv=None):
    settings = Settings.from_env()
    args = build_parser(settings).parse_args(argv)
    settings.host = args.host
    settings.port = args.port
    settings.log_level = args.log_level.upper()

    configure_logging(settings.log_level)
    server = EchoServer.from_settings(settings)
    logger.info(f"Starting WebSocket Echo Service on {settings.host}:{settings.port}")
    try:
        asyncio.run(server.serve_forever())
    except BindError as e:
        logger.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
        sys.exit(0)


if __name__ == "__main__":
    main()
