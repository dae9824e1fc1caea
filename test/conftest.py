import asyncio
import socket
import threading
import time

import pytest
import requests

from echo_service import EchoServer


def _is_reachable(url: str, timeout: float = 0.5) -> bool:
    try:
        r = requests.get(url, timeout=timeout)
        return r.status_code < 500
    except Exception:
        return False


def _wait_for_reachable(url: str, total_timeout: float = 2.0, step: float = 0.25) -> bool:
    deadline = time.time() + total_timeout
    while time.time() < deadline:
        if _is_reachable(url):
            return True
        time.sleep(step)
    return False


def wait_until(predicate, total_timeout: float = 2.0, step: float = 0.02) -> bool:
    deadline = time.time() + total_timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(step)
    return predicate()


def free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


class ServerThread:
    """Runs an EchoServer on its own event loop in a background thread."""

    def __init__(self, server: EchoServer):
        self.server = server
        self.loop = asyncio.new_event_loop()
        self.thread = threading.Thread(target=self.loop.run_forever, daemon=True)

    def run(self, coro, timeout: float = 5.0):
        return asyncio.run_coroutine_threadsafe(coro, self.loop).result(timeout=timeout)

    def start(self):
        self.thread.start()
        self.run(self.server.start())

    def stop(self):
        try:
            self.run(self.server.stop())
        finally:
            self.loop.call_soon_threadsafe(self.loop.stop)
            self.thread.join(timeout=5)
            self.loop.close()


@pytest.fixture
def echo_server():
    runner = ServerThread(EchoServer(host="127.0.0.1", port=0, ping_interval=None, ping_timeout=None))
    runner.start()
    server = runner.server
    if not _wait_for_reachable(f"http://127.0.0.1:{server.port}/health"):
        runner.stop()
        pytest.fail(f"Echo server not reachable on port {server.port}")
    yield server
    runner.stop()


@pytest.fixture
def echo_url(echo_server) -> str:
    return f"ws://127.0.0.1:{echo_server.port}"
