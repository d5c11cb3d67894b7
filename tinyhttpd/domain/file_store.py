"""Byte store backed by a single serving directory."""

import os
from pathlib import Path
from typing import Optional

from tinyhttpd.bootstrap.config import HEAD_ENCODING
from tinyhttpd.domain.connection_id import get_logger
from tinyhttpd.domain.sandbox import ForbiddenPath, resolve_sandbox_path

STORE_LOGGER = get_logger("tinyhttpd.domain.file_store")


def filesystem_name(name: str) -> str:
    """Map a name decoded from the request head back to its on-disk form.

    The head is decoded byte-for-byte, so re-encoding recovers the raw bytes
    the client sent; those are then decoded the way the OS names files.
    """
    return os.fsdecode(name.encode(HEAD_ENCODING))


class FileStore:
    """Reads and writes named blobs directly under the serving root.

    Names are the raw remainder of a ``/files/`` target and must be a single
    path segment. A name that is not is treated as absent on read and raises
    :class:`ForbiddenPath` on write.
    """

    def __init__(self, directory: str) -> None:
        self.directory = directory

    def _resolve(self, name: str) -> Path:
        return resolve_sandbox_path(self.directory, filesystem_name(name))

    def read(self, name: str) -> Optional[bytes]:
        """Return the blob's bytes, or None when no regular file has that name.

        I/O failures on an existing file propagate as ``OSError``.
        """
        try:
            path = self._resolve(name)
        except ForbiddenPath:
            STORE_LOGGER.warning(
                "Read outside serving root rejected",
                extra={"event": "forbidden_path", "route": name},
            )
            return None
        if not path.is_file():
            return None
        return path.read_bytes()

    def write(self, name: str, data: bytes) -> Path:
        """Create or truncate the named blob and return its resolved path."""
        path = self._resolve(name)
        with open(path, "wb") as file_handle:
            file_handle.write(data)
        return path
