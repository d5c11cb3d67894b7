"""Shared HTTP type definitions to avoid circular imports."""

from dataclasses import dataclass, field
from enum import Enum
from http import HTTPStatus
from typing import Union


class Method(str, Enum):
    """Request methods the router distinguishes."""

    GET = "GET"
    POST = "POST"
    OTHER = "OTHER"

    @classmethod
    def from_token(cls, token: str) -> "Method":
        """Map a raw request-line token onto a known method."""
        if token == cls.GET.value:
            return cls.GET
        if token == cls.POST.value:
            return cls.POST
        return cls.OTHER


class ConnectionState(str, Enum):
    """Stages a connection passes through for its single exchange."""

    AWAIT_REQUEST_LINE = "await_request_line"
    PARSING_HEADERS = "parsing_headers"
    READING_BODY = "reading_body"
    DISPATCHING = "dispatching"
    WRITING_RESPONSE = "writing_response"
    CLOSED = "closed"


@dataclass(frozen=True)
class HttpRequest:
    """Represents a parsed HTTP request."""

    method: Method
    method_token: str
    target: str
    version: str
    headers: dict[str, str]
    body: bytes = b""


@dataclass(frozen=True)
class PlainBody:
    status: HTTPStatus
    content_type: str
    body: bytes


@dataclass(frozen=True)
class FileServe:
    status: HTTPStatus
    body: bytes


@dataclass(frozen=True)
class NotFound:
    pass


@dataclass(frozen=True)
class ServerError:
    pass


RouteOutcome = Union[PlainBody, FileServe, NotFound, ServerError]


@dataclass
class HttpResponse:
    """Represents an HTTP response to be sent to a client."""

    status: HTTPStatus
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def status_line(self) -> str:
        return f"HTTP/1.1 {self.status.value} {self.status.phrase}"
