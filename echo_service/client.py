"""One-shot ping client: connect, send one message, wait for one reply."""
import asyncio
import logging

import websockets

from .errors import PingError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


async def ws_ping(address: str, message: str, timeout: float = DEFAULT_TIMEOUT) -> str:
    """Send ``message`` to the WebSocket server at ``address`` and return its reply.

    Raises PingError when the connection cannot be established, when the
    server closes before replying or when no reply arrives within ``timeout``
    seconds.
    """
    try:
        async with websockets.connect(
            address,
            open_timeout=timeout,
            close_timeout=timeout,
            ping_interval=None,  # one-shot connection
        ) as websocket:
            logger.debug(f"Connected to {address}, sending {message!r}")
            await websocket.send(message)
            response = await asyncio.wait_for(websocket.recv(), timeout=timeout)
    except asyncio.TimeoutError:
        raise PingError(address, f"timed out after {timeout}s") from None
    except websockets.exceptions.InvalidURI as e:
        raise PingError(address, f"invalid address ({e})") from e
    except websockets.exceptions.ConnectionClosed as e:
        raise PingError(address, f"connection closed before a response ({e})") from e
    except websockets.exceptions.InvalidHandshake as e:
        raise PingError(address, f"handshake rejected ({e})") from e
    except OSError as e:
        raise PingError(address, f"cannot connect ({e})") from e

    if isinstance(response, bytes):
        response = response.decode("utf-8", errors="replace")
    logger.debug(f"Received {response!r} from {address}")
    return response


def ping(address: str, message: str, timeout: float = DEFAULT_TIMEOUT) -> str:
    """Blocking wrapper around ws_ping."""
    return asyncio.run(ws_ping(address, message, timeout=timeout))
