"""Server lifecycle state management."""

import socket
import threading
import time
from typing import Optional

from tinyhttpd.domain.connection_id import get_logger

LIFECYCLE_LOGGER = get_logger("tinyhttpd.lifecycle")


class ServerLifecycle:
    """Tracks worker threads, their client sockets, and the shutdown request."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._workers: dict[threading.Thread, Optional[socket.socket]] = {}

    def should_stop(self) -> bool:
        return self._stop_event.is_set()

    def request_stop(self) -> None:
        """Ask the accept loop to stop taking new connections."""
        self._stop_event.set()
        LIFECYCLE_LOGGER.info(
            "Shutdown requested", extra={"event": "shutdown_requested"}
        )

    def register_worker(
        self, thread: threading.Thread, client_socket: Optional[socket.socket] = None
    ) -> None:
        with self._lock:
            self._workers[thread] = client_socket

    def cleanup_worker(self, thread: threading.Thread) -> None:
        with self._lock:
            self._workers.pop(thread, None)

    def active_worker_count(self) -> int:
        with self._lock:
            return len(self._workers)

    def wait_for_workers(self, timeout: float) -> bool:
        """Wait for in-flight workers; return False if the timeout elapses first."""
        deadline = time.monotonic() + timeout
        while True:
            with self._lock:
                self._workers = {
                    w: s for w, s in self._workers.items() if w.is_alive()
                }
                active_workers = list(self._workers)
            if not active_workers:
                return True
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                LIFECYCLE_LOGGER.warning(
                    "Shutdown timeout exceeded",
                    extra={
                        "event": "shutdown_timeout",
                        "remaining_workers": len(active_workers),
                    },
                )
                return False
            for worker in active_workers:
                worker.join(timeout=min(0.1, remaining))
                if time.monotonic() >= deadline:
                    break

    def close_remaining_connections(self) -> int:
        """Shut down the sockets of workers still running; return how many.

        Blocked reads and writes on those sockets fail, so each worker runs
        its own cleanup and exits.
        """
        with self._lock:
            sockets = [
                s for w, s in self._workers.items() if s is not None and w.is_alive()
            ]
        for client_socket in sockets:
            try:
                client_socket.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass
        if sockets:
            LIFECYCLE_LOGGER.warning(
                "Closing connections left after grace period",
                extra={
                    "event": "connections_force_closed",
                    "remaining_workers": len(sockets),
                },
            )
        return len(sockets)
