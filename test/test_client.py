import asyncio
import http

import pytest
import websockets

from echo_service import PingError, ping, ws_ping

from conftest import free_port


def test_ping_returns_single_response(echo_url):
    assert ping(echo_url, "Hello, Server!", timeout=5) == "Server response: Hello, Server!"


def test_ping_connection_refused():
    address = f"ws://127.0.0.1:{free_port()}"
    with pytest.raises(PingError) as excinfo:
        ping(address, "anyone there?", timeout=2)
    assert excinfo.value.address == address


def test_ping_invalid_address():
    with pytest.raises(PingError, match="invalid address"):
        ping("http://127.0.0.1:8081", "wrong scheme", timeout=2)


def test_ping_times_out_without_reply():
    async def silent(websocket):
        async for _ in websocket:
            pass

    async def scenario():
        async with websockets.serve(silent, "127.0.0.1", 0) as server:
            port = server.sockets[0].getsockname()[1]
            await ws_ping(f"ws://127.0.0.1:{port}", "hello?", timeout=0.3)

    with pytest.raises(PingError, match="timed out"):
        asyncio.run(scenario())


def test_ping_fails_when_server_closes_first():
    async def hang_up(websocket):
        await websocket.recv()
        await websocket.close()

    async def scenario():
        async with websockets.serve(hang_up, "127.0.0.1", 0) as server:
            port = server.sockets[0].getsockname()[1]
            await ws_ping(f"ws://127.0.0.1:{port}", "bye", timeout=5)

    with pytest.raises(PingError, match="connection closed"):
        asyncio.run(scenario())


def test_ping_rejected_handshake():
    def refuse(connection, request):
        return connection.respond(http.HTTPStatus.FORBIDDEN, "no\n")

    async def echo(websocket):
        async for message in websocket:
            await websocket.send(message)

    async def scenario():
        async with websockets.serve(echo, "127.0.0.1", 0, process_request=refuse) as server:
            port = server.sockets[0].getsockname()[1]
            await ws_ping(f"ws://127.0.0.1:{port}", "hi", timeout=5)

    with pytest.raises(PingError, match="handshake rejected"):
        asyncio.run(scenario())
