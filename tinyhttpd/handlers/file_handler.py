"""File download and upload handlers."""

import logging
from http import HTTPStatus
from typing import Union

from tinyhttpd.bootstrap.config import FILES_PREFIX, TEXT_PLAIN
from tinyhttpd.domain.connection_id import get_logger
from tinyhttpd.domain.file_store import FileStore
from tinyhttpd.domain.http_types import (
    FileServe,
    HttpRequest,
    NotFound,
    PlainBody,
    ServerError,
)
from tinyhttpd.handlers.system_handlers import strip_prefix

FILE_LOGGER = get_logger("tinyhttpd.handlers.file")


def serve_file(
    request: HttpRequest, store: FileStore
) -> Union[FileServe, NotFound, ServerError]:
    """Return the named file's bytes, 404 when absent, 500 when unreadable."""
    name = strip_prefix(request.target, FILES_PREFIX)
    try:
        data = store.read(name)
    except OSError as error:
        FILE_LOGGER.error(
            "File read failed",
            extra={
                "event": "file_read_failed",
                "route": name,
                "error_type": type(error).__name__,
            },
        )
        return ServerError()
    if data is None:
        FILE_LOGGER.info(
            "File not found", extra={"event": "file_not_found", "route": name}
        )
        return NotFound()
    FILE_LOGGER.info(
        "File read complete",
        extra={"event": "file_read_complete", "route": name, "bytes_out": len(data)},
    )
    return FileServe(HTTPStatus.OK, data)


def store_file(request: HttpRequest, store: FileStore) -> PlainBody:
    """Write the request body to the named file.

    Write failures propagate to the connection driver; the client then sees
    the connection close without a response.
    """
    name = strip_prefix(request.target, FILES_PREFIX)
    if FILE_LOGGER.logger.isEnabledFor(logging.DEBUG):
        FILE_LOGGER.debug(
            "File write started",
            extra={
                "event": "file_write_started",
                "route": name,
                "bytes_in": len(request.body),
            },
        )
    path = store.write(name, request.body)
    FILE_LOGGER.info(
        "File write complete",
        extra={
            "event": "file_write_complete",
            "route": path.as_posix(),
            "bytes_in": len(request.body),
        },
    )
    return PlainBody(HTTPStatus.CREATED, TEXT_PLAIN, b"")
