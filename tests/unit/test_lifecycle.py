"""Unit tests for shutdown and worker tracking."""

import socket
import threading
import time
from unittest.mock import MagicMock

from tinyhttpd.lifecycle.state import ServerLifecycle


class TestServerLifecycle:
    """Tests for ServerLifecycle state management."""

    def test_initial_state(self):
        lifecycle = ServerLifecycle()
        assert not lifecycle.should_stop()
        assert lifecycle.active_worker_count() == 0

    def test_request_stop_sets_flag(self):
        lifecycle = ServerLifecycle()
        lifecycle.request_stop()
        assert lifecycle.should_stop()

    def test_register_and_cleanup_worker(self):
        lifecycle = ServerLifecycle()
        thread = threading.Thread(target=lambda: None)
        lifecycle.register_worker(thread)
        assert lifecycle.active_worker_count() == 1
        lifecycle.cleanup_worker(thread)
        assert lifecycle.active_worker_count() == 0

    def test_cleanup_nonexistent_worker_is_safe(self):
        lifecycle = ServerLifecycle()
        lifecycle.cleanup_worker(threading.Thread(target=lambda: None))
        assert lifecycle.active_worker_count() == 0

    def test_wait_for_workers_returns_when_idle(self):
        assert ServerLifecycle().wait_for_workers(timeout=0.1)

    def test_wait_for_workers_drops_finished_threads(self):
        lifecycle = ServerLifecycle()
        thread = threading.Thread(target=lambda: None)
        thread.start()
        thread.join()
        lifecycle.register_worker(thread)
        assert lifecycle.wait_for_workers(timeout=0.5)
        assert lifecycle.active_worker_count() == 0

    def test_wait_for_workers_waits_for_running_thread(self):
        lifecycle = ServerLifecycle()
        thread = threading.Thread(target=time.sleep, args=(0.2,))
        thread.start()
        lifecycle.register_worker(thread)
        assert lifecycle.wait_for_workers(timeout=2.0)
        assert not thread.is_alive()

    def test_wait_for_workers_times_out(self):
        lifecycle = ServerLifecycle()
        release = threading.Event()
        thread = threading.Thread(target=release.wait)
        thread.start()
        lifecycle.register_worker(thread)
        try:
            started = time.monotonic()
            assert not lifecycle.wait_for_workers(timeout=0.2)
            assert time.monotonic() - started < 1.0
        finally:
            release.set()
            thread.join()

    def test_close_remaining_connections_shuts_down_live_sockets(self):
        lifecycle = ServerLifecycle()
        release = threading.Event()
        thread = threading.Thread(target=release.wait)
        thread.start()
        client_socket = MagicMock()
        lifecycle.register_worker(thread, client_socket)
        try:
            assert lifecycle.close_remaining_connections() == 1
            client_socket.shutdown.assert_called_once_with(socket.SHUT_RDWR)
        finally:
            release.set()
            thread.join()

    def test_close_remaining_connections_ignores_finished_and_closed(self):
        lifecycle = ServerLifecycle()
        finished = threading.Thread(target=lambda: None)
        finished.start()
        finished.join()
        finished_socket = MagicMock()
        lifecycle.register_worker(finished, finished_socket)

        release = threading.Event()
        running = threading.Thread(target=release.wait)
        running.start()
        closed_socket = MagicMock()
        closed_socket.shutdown.side_effect = OSError("not connected")
        lifecycle.register_worker(running, closed_socket)
        try:
            assert lifecycle.close_remaining_connections() == 1
            finished_socket.shutdown.assert_not_called()
        finally:
            release.set()
            running.join()
