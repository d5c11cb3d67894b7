"""Worker logic for handling one client connection end to end."""

import dataclasses
import logging
import socket
import threading
from dataclasses import dataclass

from tinyhttpd.domain.connection_id import (
    clear_connection_id,
    generate_connection_id,
    get_logger,
    set_connection_id,
)
from tinyhttpd.domain.errors import HttpServerError
from tinyhttpd.domain.http_types import ConnectionState, HttpRequest, Method
from tinyhttpd.domain.sandbox import ForbiddenPath
from tinyhttpd.pipeline.negotiation import accepts_gzip
from tinyhttpd.pipeline.parser import parse_request
from tinyhttpd.pipeline.reader import RequestReader, read_body
from tinyhttpd.pipeline.router import route_request
from tinyhttpd.pipeline.writer import build_response, send_response
from tinyhttpd.transport.context import WorkerContext

WORKER_LOGGER = get_logger("tinyhttpd.transport.worker")


@dataclass
class _Exchange:
    client_addr_str: str
    state: ConnectionState = ConnectionState.AWAIT_REQUEST_LINE

    def advance(self, state: ConnectionState) -> None:
        self.state = state
        if WORKER_LOGGER.logger.isEnabledFor(logging.DEBUG):
            WORKER_LOGGER.debug(
                "Connection state changed",
                extra={
                    "event": "state_changed",
                    "state": state.value,
                    "client": self.client_addr_str,
                },
            )


def _read_request(reader: RequestReader, exchange: _Exchange) -> HttpRequest:
    request_line, header_lines = reader.read_head()
    exchange.advance(ConnectionState.PARSING_HEADERS)
    request = parse_request(request_line, header_lines)
    WORKER_LOGGER.debug(
        "Request parsed",
        extra={
            "event": "request_parsed",
            "method": request.method_token,
            "route": request.target,
        },
    )
    if request.method is Method.POST:
        exchange.advance(ConnectionState.READING_BODY)
        request = dataclasses.replace(
            request, body=read_body(reader, request.method, request.headers)
        )
    return request


def _serve(
    client_socket: socket.socket, context: WorkerContext, exchange: _Exchange
) -> None:
    request = _read_request(RequestReader(client_socket), exchange)

    exchange.advance(ConnectionState.DISPATCHING)
    outcome = route_request(request, context.store)
    response = build_response(outcome, accepts_gzip(request.headers))

    exchange.advance(ConnectionState.WRITING_RESPONSE)
    send_response(client_socket, response)
    WORKER_LOGGER.info(
        "Request complete",
        extra={
            "event": "request_complete",
            "method": request.method_token,
            "route": request.target,
            "status_code": response.status.value,
            "bytes_in": len(request.body),
            "bytes_out": len(response.body),
            "gzip": "Content-Encoding" in response.headers,
        },
    )


def _close_socket(client_socket: socket.socket, client_addr_str: str) -> None:
    try:
        client_socket.shutdown(socket.SHUT_WR)
    except OSError:
        pass
    client_socket.close()
    WORKER_LOGGER.debug(
        "Socket closed",
        extra={"event": "socket_closed", "client": client_addr_str},
    )


def handle_client(
    client_socket: socket.socket,
    client_address: tuple[str, int],
    context: WorkerContext,
) -> ConnectionState:
    """Serve a single request on the connection, then close it.

    Every failure is confined to this connection: it is logged and the socket
    is closed, without a response when none could be produced.
    """
    current_thread = threading.current_thread()
    lifecycle = context.lifecycle
    if lifecycle is not None:
        lifecycle.register_worker(current_thread, client_socket)
    if context.socket_timeout is not None:
        client_socket.settimeout(context.socket_timeout)

    set_connection_id(generate_connection_id())
    exchange = _Exchange(f"{client_address[0]}:{client_address[1]}")
    WORKER_LOGGER.debug(
        "Connection opened",
        extra={"event": "connection_opened", "client": exchange.client_addr_str},
    )

    try:
        _serve(client_socket, context, exchange)
    except HttpServerError as error:
        WORKER_LOGGER.warning(
            "Malformed request received",
            extra={
                "event": "malformed_request",
                "client": exchange.client_addr_str,
                "state": exchange.state.value,
                "error_type": type(error).__name__,
                "error": str(error),
            },
        )
    except (OSError, ForbiddenPath) as error:
        WORKER_LOGGER.error(
            "Error handling client connection",
            extra={
                "event": "connection_error",
                "client": exchange.client_addr_str,
                "state": exchange.state.value,
                "error_type": type(error).__name__,
            },
        )
    except Exception as error:  # pylint: disable=broad-except
        WORKER_LOGGER.error(
            "Unexpected error in worker",
            extra={
                "event": "worker_error",
                "client": exchange.client_addr_str,
                "state": exchange.state.value,
                "error_type": type(error).__name__,
                "error": str(error),
            },
            exc_info=True,
        )
    finally:
        exchange.advance(ConnectionState.CLOSED)
        _close_socket(client_socket, exchange.client_addr_str)
        if lifecycle is not None:
            lifecycle.cleanup_worker(current_thread)
        clear_connection_id()
    return exchange.state
