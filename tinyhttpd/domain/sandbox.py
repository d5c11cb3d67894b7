"""Filesystem sandbox utilities for safe path resolution."""

from pathlib import Path

SPECIAL_NAMES = {".", ".."}


class ForbiddenPath(Exception):
    """Raised when a requested name is not a single entry of the serving root."""


def resolve_sandbox_path(directory: str, name: str) -> Path:
    """Resolve a client-supplied file name to an entry directly under the root.

    The name must be one path segment; separators, ``.``/``..`` and NUL are
    rejected, as is a symlink that resolves outside the root.
    """
    if not name or "\x00" in name or "/" in name or name in SPECIAL_NAMES:
        raise ForbiddenPath(name)

    directory_root = Path(directory).resolve()
    target = (directory_root / name).resolve()
    if directory_root not in target.parents:
        raise ForbiddenPath(name)

    return target
