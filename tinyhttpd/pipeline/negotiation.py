"""Content-encoding negotiation."""

from typing import Mapping

ACCEPT_ENCODING = "Accept-Encoding"
GZIP = "gzip"


def accepts_gzip(headers: Mapping[str, str]) -> bool:
    """Return True when the Accept-Encoding value mentions gzip anywhere.

    This is a substring check, not the full header grammar: quality values
    are ignored, so ``gzip;q=0`` still counts as accepting gzip.
    """
    return GZIP in headers.get(ACCEPT_ENCODING, "")
