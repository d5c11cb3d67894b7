"""Server configuration and CLI argument parsing."""

import argparse
import os
from dataclasses import dataclass
from typing import Optional


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value is not None else default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value is not None else default


def _env_str(name: str, default: str) -> str:
    value = os.getenv(name)
    return value if value is not None else default


DEFAULT_HOST = "localhost"
DEFAULT_PORT = 4221
DEFAULT_SOCKET_TIMEOUT = _env_float("TINYHTTPD_SOCKET_TIMEOUT", 0.0)
DEFAULT_SHUTDOWN_GRACE_SECONDS = _env_int("TINYHTTPD_SHUTDOWN_GRACE_SECONDS", 30)

HEADER_DELIMITER = b"\r\n\r\n"
LINE_DELIMITER = "\r\n"
RECV_CHUNK_SIZE = 4096
HEAD_ENCODING = "iso-8859-1"

ECHO_PREFIX = "/echo/"
FILES_PREFIX = "/files/"
USER_AGENT_PATH = "/user-agent"
INDEX_PATH = "/"

TEXT_PLAIN = "text/plain"
OCTET_STREAM = "application/octet-stream"


@dataclass
class ServerConfig:
    """Runtime settings handed to the accept loop and its workers."""

    directory: str
    socket_timeout: Optional[float] = None
    shutdown_grace_seconds: int = DEFAULT_SHUTDOWN_GRACE_SECONDS

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "ServerConfig":
        """Build a config from parsed CLI arguments; a zero timeout disables it."""
        return cls(
            directory=args.directory,
            socket_timeout=args.socket_timeout or None,
            shutdown_grace_seconds=args.shutdown_grace_seconds,
        )


def parse_cli_args(argv: list[str]) -> argparse.Namespace:
    """Return parsed CLI arguments for server configuration."""
    parser = argparse.ArgumentParser(description="tinyhttpd server configuration")
    parser.add_argument("--directory", default=".")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument(
        "--log-level",
        default=_env_str("TINYHTTPD_LOG_LEVEL", "INFO").upper(),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
    )
    parser.add_argument(
        "--log-destination",
        default=_env_str("TINYHTTPD_LOG_DESTINATION", "stdout"),
        help="stdout or a file path",
    )
    parser.add_argument(
        "--log-format",
        default=_env_str("TINYHTTPD_LOG_FORMAT", "json").lower(),
        choices=["json", "text"],
        type=str.lower,
    )
    parser.add_argument(
        "--socket-timeout",
        type=float,
        default=DEFAULT_SOCKET_TIMEOUT,
        help="Per-connection socket timeout in seconds (0 disables it)",
    )
    parser.add_argument(
        "--shutdown-grace-seconds",
        type=int,
        default=DEFAULT_SHUTDOWN_GRACE_SECONDS,
        help="Grace period in seconds for graceful shutdown",
    )
    return parser.parse_args(argv)
