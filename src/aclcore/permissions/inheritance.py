"""Collection inheritance flag.

When a collection's inheritance flag is set, the grant store copies the
collection's grants onto children created under it. aclcore only reads the
flag to decide how to reconcile grants after a move, and offers helpers to
set or clear it.
"""

from __future__ import annotations

from ..context import AclContext
from ..store import ObjectType


def is_inheriting(ctx: AclContext, path: str) -> bool:
    """True if ``path`` is a collection with its inheritance flag set.

    Data objects and unknown paths are never inheriting.
    """
    ctx.validate(path)
    if ctx.object_type(path) != ObjectType.COLLECTION:
        return False
    return bool(ctx.backend.get_inheritance_flag(path))


def set_inherits(ctx: AclContext, path: str) -> None:
    """Turn inheritance on for a collection and everything below it."""
    ctx.validate(path)
    if ctx.object_type(path) == ObjectType.COLLECTION:
        ctx.backend.set_inheritance_flag(path, True, True)


def remove_inherits(ctx: AclContext, path: str) -> None:
    """Turn inheritance off for a collection and everything below it."""
    ctx.validate(path)
    if ctx.object_type(path) == ObjectType.COLLECTION:
        ctx.backend.set_inheritance_flag(path, False, True)


__all__ = [
    "is_inheriting",
    "remove_inherits",
    "set_inherits",
]
