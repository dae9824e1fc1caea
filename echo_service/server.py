"""
WebSocket echo server.

Every text frame received on a connection is answered on that same connection
with ``"Server response: " + message``.
"""
import asyncio
import enum
import http
import itertools
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

import websockets

from .config import DEFAULT_HOST, DEFAULT_PORT, DEFAULT_PING_INTERVAL, DEFAULT_PING_TIMEOUT
from .errors import BindError

logger = logging.getLogger(__name__)

RESPONSE_PREFIX = "Server response: "
HEALTH_PATH = "/health"


def echo_response(payload: str) -> str:
    return RESPONSE_PREFIX + payload


class ConnectionState(enum.Enum):
    """CONNECTING -> OPEN -> CLOSED. CLOSED is terminal."""
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"


@dataclass
class Connection:
    """Bookkeeping for one accepted client socket.

    Records are created by the connection handler, which websockets only
    invokes once the upgrade handshake has completed, and opened right away.
    """
    id: int
    remote_address: Optional[tuple] = None
    state: ConnectionState = ConnectionState.CONNECTING

    @property
    def client_ip(self) -> str:
        if not self.remote_address:
            return "unknown"
        return str(self.remote_address[0])

    def open(self) -> None:
        if self.state is not ConnectionState.CONNECTING:
            raise RuntimeError(f"Connection {self.id} cannot open from state {self.state.value}")
        self.state = ConnectionState.OPEN

    def close(self) -> None:
        self.state = ConnectionState.CLOSED


def health_check(connection, request):
    """Answer plain HTTP GET /health. Upgrade requests on any path go through."""
    if request.headers.get("Upgrade", "").lower() == "websocket":
        return None
    if request.path == HEALTH_PATH:
        return connection.respond(http.HTTPStatus.OK, "OK\n")
    return None


class EchoServer:
    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        ping_interval: Optional[float] = DEFAULT_PING_INTERVAL,
        ping_timeout: Optional[float] = DEFAULT_PING_TIMEOUT,
    ):
        self.host = host
        self.port = port
        self.ping_interval = ping_interval
        self.ping_timeout = ping_timeout
        self.connections: Dict[int, Connection] = {}
        self._ids = itertools.count(1)
        self._server = None

    @classmethod
    def from_settings(cls, settings) -> "EchoServer":
        return cls(
            host=settings.host,
            port=settings.port,
            ping_interval=settings.ping_interval,
            ping_timeout=settings.ping_timeout,
        )

    @property
    def is_serving(self) -> bool:
        return self._server is not None

    @property
    def address(self) -> str:
        return f"ws://{self.host}:{self.port}"

    @property
    def bound_addresses(self) -> List[tuple]:
        """(host, port) of every listening socket.

        With port 0 and a host resolving to several addresses each socket gets
        its own ephemeral port; `port` reports the first one.
        """
        if self._server is None:
            return []
        return [sock.getsockname()[:2] for sock in self._server.sockets]

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.stop()

    async def start(self) -> None:
        """Bind the listening socket. Raises BindError when the port is unavailable."""
        if self._server is not None:
            raise RuntimeError("Echo server already started")
        try:
            self._server = await websockets.serve(
                self.echo_handler,
                self.host,
                self.port,
                process_request=health_check,
                ping_interval=self.ping_interval,
                ping_timeout=self.ping_timeout,
            )
        except OverflowError as e:
            # bind() rejects ports outside 0-65535 this way
            raise BindError(self.host, self.port, str(e)) from e
        except OSError as e:
            raise BindError(self.host, self.port, e.strerror or str(e)) from e

        if self.port == 0:
            self.port = self.bound_addresses[0][1]
        logger.info(f"WebSocket server is listening on {self.address}")
        for sockname in self.bound_addresses[1:]:
            logger.info(f"Also listening on {sockname[0]}:{sockname[1]}")

    async def serve_forever(self) -> None:
        await self.start()
        try:
            await asyncio.Future()  # run forever
        finally:
            await self.stop()

    async def stop(self) -> None:
        if self._server is None:
            return
        server, self._server = self._server, None
        server.close()
        await server.wait_closed()
        logger.info(f"WebSocket server on {self.address} stopped")

    async def echo_handler(self, websocket):
        """Handle one connection until either peer closes it."""
        conn = Connection(id=next(self._ids), remote_address=websocket.remote_address)
        self.connections[conn.id] = conn
        conn.open()
        logger.info(f"Client connected (id={conn.id}, ip={conn.client_ip})")

        try:
            async for message in websocket:
                if isinstance(message, bytes):
                    message = message.decode("utf-8", errors="replace")
                logger.info(f"Received message: {message}")
                try:
                    await websocket.send(echo_response(message))
                except websockets.exceptions.ConnectionClosed:
                    logger.debug(f"Dropped response for closing connection {conn.id}")
                    break
        except websockets.exceptions.ConnectionClosedError as e:
            logger.info(f"Connection {conn.id} closed with error: {e}")
        finally:
            conn.close()
            self.connections.pop(conn.id, None)
            logger.info(f"Client disconnected (id={conn.id}, ip={conn.client_ip})")
