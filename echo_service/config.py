"""Environment driven settings for the echo server and ping client."""
import logging
import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8081
DEFAULT_URL = "ws://localhost:8081"
DEFAULT_PING_INTERVAL = 20.0
DEFAULT_PING_TIMEOUT = 20.0
DEFAULT_LOG_LEVEL = "INFO"


def _env_str(name: str, default: str) -> str:
    value = os.getenv(name, "").strip()
    return value or default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def port_number(value) -> int:
    """Parse a TCP port, 0 meaning any free port."""
    port = int(value)
    if not 0 <= port <= 65535:
        raise ValueError(f"port must be between 0 and 65535, got {port}")
    return port


def _keepalive(seconds: float) -> Optional[float]:
    # 0 (or less) turns the keepalive off
    return seconds if seconds > 0 else None


@dataclass
class Settings:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    ping_interval: Optional[float] = DEFAULT_PING_INTERVAL
    ping_timeout: Optional[float] = DEFAULT_PING_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL
    url: str = DEFAULT_URL

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from ECHO_* and LOG_LEVEL environment variables."""
        port = _env_int("ECHO_PORT", DEFAULT_PORT)
        try:
            port = port_number(port)
        except ValueError as e:
            raise ValueError(f"ECHO_PORT: {e}") from None
        return cls(
            host=_env_str("ECHO_HOST", DEFAULT_HOST),
            port=port,
            ping_interval=_keepalive(_env_float("ECHO_PING_INTERVAL", DEFAULT_PING_INTERVAL)),
            ping_timeout=_keepalive(_env_float("ECHO_PING_TIMEOUT", DEFAULT_PING_TIMEOUT)),
            log_level=_env_str("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
            url=_env_str("ECHO_URL", DEFAULT_URL),
        )


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(message)s",
        datefmt="%H:%M:%S",
    )
