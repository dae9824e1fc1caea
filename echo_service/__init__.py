from .client import ping, ws_ping
from .config import Settings
from .errors import BindError, EchoServiceError, PingError
from .server import Connection, ConnectionState, EchoServer, echo_response

__version__ = "1.0.0"

__all__ = [
    "BindError",
    "Connection",
    "ConnectionState",
    "EchoServer",
    "EchoServiceError",
    "PingError",
    "Settings",
    "echo_response",
    "ping",
    "ws_ping",
]
