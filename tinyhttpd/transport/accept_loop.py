"""Main connection acceptance loop."""

import logging
import socket
import threading

from tinyhttpd.bootstrap.config import ServerConfig
from tinyhttpd.bootstrap.socket_factory import create_server_socket
from tinyhttpd.domain.connection_id import get_logger
from tinyhttpd.domain.file_store import FileStore
from tinyhttpd.lifecycle.state import ServerLifecycle
from tinyhttpd.transport.context import WorkerContext
from tinyhttpd.transport.worker import handle_client

ACCEPT_LOGGER = get_logger("tinyhttpd.transport.accept")


def _spawn_worker(
    client_socket: socket.socket,
    client_address: tuple[str, int],
    context: WorkerContext,
) -> threading.Thread:
    """Hand the accepted socket to a dedicated worker thread."""
    if ACCEPT_LOGGER.logger.isEnabledFor(logging.DEBUG):
        ACCEPT_LOGGER.debug(
            "Client connection accepted",
            extra={
                "event": "client_accepted",
                "client": f"{client_address[0]}:{client_address[1]}",
            },
        )
    thread = threading.Thread(
        target=handle_client,
        args=(client_socket, client_address, context),
        daemon=False,
    )
    thread.start()
    return thread


def serve_forever(
    server_socket: socket.socket, config: ServerConfig, lifecycle: ServerLifecycle
) -> None:
    """Accept connections until shutdown is requested, then drain workers.

    Connections still open when the grace period ends are shut down.

    ``server_socket`` must have a timeout so the loop can observe the stop flag.
    """
    context = WorkerContext(
        store=FileStore(config.directory),
        lifecycle=lifecycle,
        socket_timeout=config.socket_timeout,
    )

    try:
        while not lifecycle.should_stop():
            try:
                client_socket, client_address = server_socket.accept()
            except socket.timeout:
                continue
            except OSError as error:
                if lifecycle.should_stop():
                    break
                ACCEPT_LOGGER.error(
                    "Socket accept failed",
                    extra={"event": "accept_error", "error_type": type(error).__name__},
                )
                continue

            _spawn_worker(client_socket, client_address, context)
    finally:
        server_socket.close()
        ACCEPT_LOGGER.info(
            "Waiting for active connections to complete",
            extra={
                "event": "shutdown_waiting",
                "shutdown_grace_seconds": config.shutdown_grace_seconds,
            },
        )
        if not lifecycle.wait_for_workers(config.shutdown_grace_seconds):
            lifecycle.close_remaining_connections()
        ACCEPT_LOGGER.info(
            "Server shutdown complete", extra={"event": "server_stopped"}
        )


def run_server(
    host: str, port: int, config: ServerConfig, lifecycle: ServerLifecycle
) -> None:
    """Create the listening socket and serve until shutdown."""
    server_socket = create_server_socket(host, port)
    ACCEPT_LOGGER.info(
        "Server listening for connections",
        extra={"event": "server_listening", "host": host, "port": port},
    )
    serve_forever(server_socket, config, lifecycle)
