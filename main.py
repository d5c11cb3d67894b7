"""HTTP server supporting echo, user-agent, and file operations."""

import signal
import sys

from tinyhttpd.bootstrap.config import ServerConfig, parse_cli_args
from tinyhttpd.bootstrap.logging_setup import configure_logging
from tinyhttpd.domain.connection_id import get_logger
from tinyhttpd.lifecycle.state import ServerLifecycle
from tinyhttpd.transport.accept_loop import run_server

SERVER_LOGGER = get_logger("tinyhttpd.server")


def main(argv: list[str] | None = None) -> None:
    """Start the HTTP server and spawn worker threads per connection."""
    args = parse_cli_args(sys.argv[1:] if argv is None else argv)
    configure_logging(args.log_level, args.log_destination, args.log_format == "json")

    config = ServerConfig.from_args(args)
    lifecycle = ServerLifecycle()

    def shutdown_handler(signum: int, _frame) -> None:
        SERVER_LOGGER.info(
            "Received shutdown signal",
            extra={"event": "signal_received", "signal": signum},
        )
        lifecycle.request_stop()

    signal.signal(signal.SIGTERM, shutdown_handler)
    signal.signal(signal.SIGINT, shutdown_handler)

    SERVER_LOGGER.info(
        "Starting HTTP server",
        extra={
            "event": "server_starting",
            "host": args.host,
            "port": args.port,
            "directory": args.directory,
            "log_destination": args.log_destination,
            "log_level": args.log_level,
            "socket_timeout": config.socket_timeout,
            "shutdown_grace_seconds": config.shutdown_grace_seconds,
        },
    )
    run_server(args.host, args.port, config, lifecycle)


if __name__ == "__main__":
    main()
