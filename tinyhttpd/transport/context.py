"""Context object shared across worker threads."""

from dataclasses import dataclass
from typing import Optional

from tinyhttpd.domain.file_store import FileStore
from tinyhttpd.lifecycle.state import ServerLifecycle


@dataclass(frozen=True)
class WorkerContext:
    """Read-only dependencies handed to every connection worker."""

    store: FileStore
    lifecycle: Optional[ServerLifecycle] = None
    socket_timeout: Optional[float] = None
