"""Exceptions raised by the echo service and its ping client."""


class EchoServiceError(Exception):
    """Base class for echo service failures."""


class BindError(EchoServiceError):
    """The listening endpoint could not be bound."""

    def __init__(self, host, port, reason=None):
        self.host = host
        self.port = port
        self.reason = reason
        message = f"Cannot listen on {host}:{port}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class PingError(EchoServiceError):
    """A ping round trip did not produce a response."""

    def __init__(self, address, reason):
        self.address = address
        self.reason = reason
        super().__init__(f"Ping to {address} failed: {reason}")
