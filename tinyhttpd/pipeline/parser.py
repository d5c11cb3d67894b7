"""Best-effort parsing of the request line and header lines.

Parsing never rejects a request: missing request-line tokens become empty
strings and header lines without ``": "`` are dropped.
"""

from typing import Iterable

from tinyhttpd.domain.http_types import HttpRequest, Method

HEADER_SEPARATOR = ": "


def parse_request_line(request_line: str) -> tuple[str, str, str]:
    """Split the request line into method, target and version tokens."""
    tokens = request_line.split(maxsplit=2)
    tokens.extend([""] * (3 - len(tokens)))
    method, target, version = tokens
    return method, target, version


def parse_headers(lines: Iterable[str]) -> dict[str, str]:
    """Convert raw header lines into a dictionary keyed as received."""
    parsed = {}
    for line in lines:
        if HEADER_SEPARATOR in line:
            name, value = line.split(HEADER_SEPARATOR, 1)
            parsed[name] = value
    return parsed


def parse_request(
    request_line: str, header_lines: Iterable[str], body: bytes = b""
) -> HttpRequest:
    method_token, target, version = parse_request_line(request_line)
    return HttpRequest(
        method=Method.from_token(method_token),
        method_token=method_token,
        target=target,
        version=version,
        headers=parse_headers(header_lines),
        body=body,
    )
