"""Path helpers for the storage namespace.

Paths are absolute, '/'-separated strings. These helpers are plain string
manipulation; nothing here talks to the grant store.
"""

from __future__ import annotations

import posixpath

from .config import DEFAULT_MAX_DIR_LENGTH, DEFAULT_MAX_PATH_LENGTH
from .exceptions import InvalidPathError


def rm_last_slash(path: str) -> str:
    """Strip trailing slashes, keeping the root as '/'."""
    return path.rstrip("/") or "/"


def dirname(path: str) -> str:
    """Parent directory of ``path``. The parent of the root is the root."""
    return posixpath.dirname(rm_last_slash(path)) or "/"


def basename(path: str) -> str:
    return posixpath.basename(rm_last_slash(path))


def path_join(*parts: str) -> str:
    """Join path segments, collapsing duplicate slashes.

    Example::

        >>> path_join("/", "tempZone", "home", "alice/")
        '/tempZone/home/alice'
    """
    joined = "/".join(p.strip("/") for p in parts if p and p.strip("/"))
    if parts and parts[0].startswith("/"):
        joined = "/" + joined
    return rm_last_slash(joined) if joined else "/"


def validate_path_lengths(
    path: str,
    max_path_length: int = DEFAULT_MAX_PATH_LENGTH,
    max_dir_length: int = DEFAULT_MAX_DIR_LENGTH,
) -> str:
    """Check a path against the storage backend's length limits.

    Args:
        path: Absolute path to validate.
        max_path_length: Maximum length of the full path.
        max_dir_length: Maximum length of the directory part.

    Returns:
        The path unchanged, so the call can be used inline.

    Raises:
        InvalidPathError: If the path is empty, relative, or too long.
    """
    if not path or not isinstance(path, str):
        raise InvalidPathError("Path must be a non-empty string", path=path)
    if not path.startswith("/"):
        raise InvalidPathError(f"Path must be absolute: {path}", path=path)

    max_filename_length = max_path_length - max_dir_length - 1

    if len(path) > max_path_length:
        raise InvalidPathError(
            f"Path is longer than {max_path_length} characters",
            path=path,
            limit=max_path_length,
        )
    parent = dirname(path)
    if len(parent) > max_dir_length:
        raise InvalidPathError(
            f"Directory is longer than {max_dir_length} characters",
            path=path,
            limit=max_dir_length,
        )
    name = basename(path)
    if len(name) > max_filename_length:
        raise InvalidPathError(
            f"File name is longer than {max_filename_length} characters",
            path=path,
            limit=max_filename_length,
        )
    return path


__all__ = [
    "basename",
    "dirname",
    "path_join",
    "rm_last_slash",
    "validate_path_lengths",
]
