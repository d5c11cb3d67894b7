"""Handlers for the index, echo, and user-agent routes."""

import logging
from http import HTTPStatus

from tinyhttpd.bootstrap.config import ECHO_PREFIX, HEAD_ENCODING, TEXT_PLAIN
from tinyhttpd.domain.connection_id import get_logger
from tinyhttpd.domain.file_store import FileStore
from tinyhttpd.domain.http_types import HttpRequest, PlainBody

SYSTEM_LOGGER = get_logger("tinyhttpd.handlers.system")

USER_AGENT = "User-Agent"


def strip_prefix(target: str, prefix: str) -> str:
    """Return what follows ``prefix`` in ``target``, or "" when nothing does."""
    if not target.startswith(prefix):
        return ""
    return target[len(prefix) :]


def text_body(text: str) -> PlainBody:
    """Wrap head-derived text as a 200 text/plain body, bytes unchanged."""
    return PlainBody(HTTPStatus.OK, TEXT_PLAIN, text.encode(HEAD_ENCODING))


def handle_index(request: HttpRequest, store: FileStore) -> PlainBody:
    return PlainBody(HTTPStatus.OK, TEXT_PLAIN, b"")


def handle_echo(request: HttpRequest, store: FileStore) -> PlainBody:
    """Return the raw remainder of the target after ``/echo/``."""
    content = strip_prefix(request.target, ECHO_PREFIX)
    if SYSTEM_LOGGER.logger.isEnabledFor(logging.DEBUG):
        SYSTEM_LOGGER.debug(
            "Echo request processed",
            extra={"event": "echo_request", "bytes_out": len(content)},
        )
    return text_body(content)


def handle_user_agent(request: HttpRequest, store: FileStore) -> PlainBody:
    """Reflect the User-Agent header, or an empty body when it is missing."""
    agent = request.headers.get(USER_AGENT, "")
    if SYSTEM_LOGGER.logger.isEnabledFor(logging.DEBUG):
        SYSTEM_LOGGER.debug(
            "User-agent request processed", extra={"event": "user_agent_request"}
        )
    return text_body(agent)
