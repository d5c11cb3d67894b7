"""Reading the request head and body off a client socket."""

import socket
from typing import Mapping

from tinyhttpd.bootstrap.config import (
    HEAD_ENCODING,
    HEADER_DELIMITER,
    LINE_DELIMITER,
    RECV_CHUNK_SIZE,
)
from tinyhttpd.domain.connection_id import get_logger
from tinyhttpd.domain.errors import IncompleteBody, MalformedRequest
from tinyhttpd.domain.http_types import Method

IO_LOGGER = get_logger("tinyhttpd.pipeline.reader")

CONTENT_LENGTH = "Content-Length"


class RequestReader:
    """Buffered reader over a connected socket.

    Bytes received past the end of the head are kept for :meth:`read_exact`.
    """

    def __init__(self, client_socket: socket.socket) -> None:
        self._socket = client_socket
        self._buffer = b""

    def _fill(self) -> bool:
        chunk = self._socket.recv(RECV_CHUNK_SIZE)
        if not chunk:
            return False
        self._buffer += chunk
        return True

    def read_head(self) -> tuple[str, list[str]]:
        """Return the request line and raw header lines.

        The blank line ending the head is consumed. If the client stops
        sending before that blank line, whatever arrived is used as the head.
        """
        while HEADER_DELIMITER not in self._buffer:
            if not self._fill():
                break

        if not self._buffer:
            raise MalformedRequest("Connection closed before a request line")

        if HEADER_DELIMITER in self._buffer:
            head, self._buffer = self._buffer.split(HEADER_DELIMITER, 1)
        else:
            head, self._buffer = self._buffer, b""
            IO_LOGGER.debug(
                "Head ended without blank line",
                extra={"event": "head_truncated", "bytes_in": len(head)},
            )

        lines = head.decode(HEAD_ENCODING).split(LINE_DELIMITER)
        return lines[0], [line for line in lines[1:] if line]

    def read_exact(self, length: int) -> bytes:
        """Return exactly ``length`` bytes or raise IncompleteBody."""
        while len(self._buffer) < length:
            if not self._fill():
                raise IncompleteBody(length, len(self._buffer))
        data, self._buffer = self._buffer[:length], self._buffer[length:]
        return data


def declared_content_length(headers: Mapping[str, str]) -> int:
    """Return the Content-Length value, 0 when absent."""
    value = headers.get(CONTENT_LENGTH)
    if value is None:
        return 0
    if not (value.isascii() and value.isdigit()):
        raise MalformedRequest(f"Invalid Content-Length: {value!r}")
    return int(value)


def read_body(
    reader: RequestReader, method: Method, headers: Mapping[str, str]
) -> bytes:
    """Read the request body; only POST requests carry one."""
    if method is not Method.POST:
        return b""
    length = declared_content_length(headers)
    if length == 0:
        return b""
    body = reader.read_exact(length)
    IO_LOGGER.debug("Body read", extra={"event": "body_read", "bytes_in": len(body)})
    return body
