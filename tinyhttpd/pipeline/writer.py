"""Turning route outcomes into HTTP/1.1 responses on the wire."""

import gzip
import logging
import socket
from http import HTTPStatus

from tinyhttpd.bootstrap.config import OCTET_STREAM, TEXT_PLAIN
from tinyhttpd.domain.connection_id import get_logger
from tinyhttpd.domain.http_types import (
    FileServe,
    HttpResponse,
    NotFound,
    PlainBody,
    RouteOutcome,
    ServerError,
)

WRITER_LOGGER = get_logger("tinyhttpd.pipeline.writer")
COMPRESSION_LOGGER = get_logger("tinyhttpd.pipeline.compression")

CRLF = "\r\n"


def _outcome_parts(outcome: RouteOutcome) -> tuple[HTTPStatus, str, bytes]:
    if isinstance(outcome, PlainBody):
        return outcome.status, outcome.content_type, outcome.body
    if isinstance(outcome, FileServe):
        return outcome.status, OCTET_STREAM, outcome.body
    if isinstance(outcome, NotFound):
        return HTTPStatus.NOT_FOUND, TEXT_PLAIN, b""
    if isinstance(outcome, ServerError):
        return HTTPStatus.INTERNAL_SERVER_ERROR, TEXT_PLAIN, b""
    raise TypeError(f"Unknown route outcome: {outcome!r}")


def compress_body(payload: bytes) -> bytes:
    compressed = gzip.compress(payload)
    COMPRESSION_LOGGER.debug(
        "Compressed payload",
        extra={
            "event": "payload_compressed",
            "bytes_in": len(payload),
            "bytes_out": len(compressed),
        },
    )
    return compressed


def build_response(outcome: RouteOutcome, gzip_enabled: bool) -> HttpResponse:
    """Build the response for a route outcome.

    Non-empty bodies are gzip-compressed when the client negotiated it;
    Content-Length is always taken from the final body.
    """
    status, content_type, body = _outcome_parts(outcome)
    headers = {"Content-Type": content_type}
    if gzip_enabled and body:
        body = compress_body(body)
        headers["Content-Encoding"] = "gzip"
    headers["Content-Length"] = str(len(body))
    return HttpResponse(status, headers, body)


def serialize_response(response: HttpResponse) -> bytes:
    """Render the status line, headers and body as raw bytes."""
    lines = [response.status_line]
    lines.extend(f"{name}: {value}" for name, value in response.headers.items())
    head = CRLF.join(lines) + CRLF + CRLF
    return head.encode("ascii") + response.body


def send_response(client_socket: socket.socket, response: HttpResponse) -> None:
    """Serialize and send the HTTP response over the socket."""
    client_socket.sendall(serialize_response(response))
    if WRITER_LOGGER.logger.isEnabledFor(logging.DEBUG):
        WRITER_LOGGER.debug(
            "Sent response",
            extra={
                "event": "response_sent",
                "status_code": response.status.value,
                "bytes_out": len(response.body),
            },
        )
