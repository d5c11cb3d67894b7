"""Unit tests for connection ID context handling and ConnectionLoggerAdapter."""

import logging
import threading

import pytest

from tinyhttpd.domain.connection_id import (
    ConnectionLoggerAdapter,
    clear_connection_id,
    generate_connection_id,
    get_connection_id,
    set_connection_id,
)


@pytest.fixture(name="logger_adapter")
def logger_adapter_fixture():
    """Create a ConnectionLoggerAdapter instance."""
    return ConnectionLoggerAdapter(logging.getLogger("tinyhttpd.test"), {})


@pytest.fixture(autouse=True)
def reset_connection_id():
    clear_connection_id()
    yield
    clear_connection_id()


def test_generated_ids_are_unique():
    assert generate_connection_id() != generate_connection_id()


def test_set_get_and_clear():
    set_connection_id("abc")
    assert get_connection_id() == "abc"
    clear_connection_id()
    assert get_connection_id() is None


def test_connection_id_is_thread_local():
    set_connection_id("main-thread")
    seen = []
    worker = threading.Thread(target=lambda: seen.append(get_connection_id()))
    worker.start()
    worker.join()
    assert seen == [None]
    assert get_connection_id() == "main-thread"


def test_adapter_injects_connection_id(logger_adapter):
    set_connection_id("test-connection-123")
    _, kwargs = logger_adapter.process("Test message", {})
    assert kwargs["extra"]["connection_id"] == "test-connection-123"


def test_adapter_defaults_connection_id_when_missing(logger_adapter):
    _, kwargs = logger_adapter.process("Test message", {})
    assert kwargs["extra"]["connection_id"] == "-"


def test_adapter_extracts_component_from_logger_name(logger_adapter):
    _, kwargs = logger_adapter.process("Test message", {})
    assert kwargs["extra"]["component"] == "test"


def test_adapter_uses_full_name_for_foreign_loggers():
    adapter = ConnectionLoggerAdapter(logging.getLogger("other.module"), {})
    _, kwargs = adapter.process("Test message", {})
    assert kwargs["extra"]["component"] == "other.module"


def test_adapter_preserves_existing_extra_fields(logger_adapter):
    set_connection_id("test-id")
    original_extra = {"custom_field": "custom_value", "status_code": 200}

    _, kwargs = logger_adapter.process("Test message", {"extra": original_extra})

    assert kwargs["extra"]["connection_id"] == "test-id"
    assert kwargs["extra"]["custom_field"] == "custom_value"
    assert kwargs["extra"]["status_code"] == 200
    assert "connection_id" not in original_extra
