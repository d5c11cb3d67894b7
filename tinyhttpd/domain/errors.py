"""Connection-scoped error taxonomy."""


class HttpServerError(Exception):
    """Base class for failures that terminate a single connection."""


class MalformedRequest(HttpServerError):
    """Raised when the request head or Content-Length cannot be used."""


class IncompleteBody(HttpServerError):
    """Raised when the client closes the stream before the declared body arrives."""

    def __init__(self, expected: int, received: int) -> None:
        super().__init__(f"Expected {expected} body bytes, received {received}")
        self.expected = expected
        self.received = received
