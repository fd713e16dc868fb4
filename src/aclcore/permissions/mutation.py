"""Direct grant mutations.

All writes go through here so that the type check, path validation and
logging happen in one place. Mutations never guess: a path that is neither
a collection nor a data object raises UnknownPathTypeError.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..context import AclContext
from ..exceptions import UnknownPathTypeError
from ..levels import PermissionLevel
from ..paths import rm_last_slash
from ..store import ObjectType
from .grants import direct_level

logger = logging.getLogger(__name__)


def _level_from_flags(read: bool, write: bool, own: bool) -> PermissionLevel:
    if own:
        return PermissionLevel.OWN
    if write:
        return PermissionLevel.WRITE
    if read:
        return PermissionLevel.READ
    return PermissionLevel.NONE


def _require_type(ctx: AclContext, path: str, known_type: Optional[ObjectType] = None) -> ObjectType:
    object_type = known_type or ctx.object_type(path)
    if object_type is None:
        raise UnknownPathTypeError(f"Refusing to change permissions on {path}", path=path)
    return ObjectType(object_type)


def set_level(
    ctx: AclContext,
    principal: str,
    path: str,
    level: PermissionLevel,
    recursive: bool = False,
    known_type: Optional[ObjectType] = None,
) -> None:
    """Store ``level`` for ``principal`` on ``path``; NONE revokes.

    ``recursive`` applies to collections only and is ignored for data objects.
    """
    path = rm_last_slash(path)
    ctx.validate(path)
    object_type = _require_type(ctx, path, known_type)
    recursive = recursive and object_type == ObjectType.COLLECTION

    if level == PermissionLevel.NONE:
        logger.debug("revoking %s on %s (recursive=%s)", principal, path, recursive)
        ctx.backend.revoke_grant(principal, path, recursive)
    else:
        logger.debug("granting %s to %s on %s (recursive=%s)", level.name.lower(), principal, path, recursive)
        ctx.backend.apply_grant(principal, path, level, recursive)


def set_permissions(
    ctx: AclContext,
    principal: str,
    path: str,
    read: bool,
    write: bool,
    own: bool,
    recursive: bool = False,
) -> None:
    """Set permissions from flags. The highest flag wins; all false revokes."""
    set_level(ctx, principal, path, _level_from_flags(read, write, own), recursive)


def set_permission(
    ctx: AclContext,
    principal: str,
    path: str,
    permission: PermissionLevel,
    recursive: bool = False,
) -> None:
    set_level(ctx, principal, path, PermissionLevel(permission), recursive)


def remove_permissions(ctx: AclContext, principal: str, path: str) -> None:
    """Remove permissions, recursively where applicable."""
    set_level(ctx, principal, path, PermissionLevel.NONE, recursive=True)


def remove_access_permissions(ctx: AclContext, principal: str, path: str) -> None:
    """Remove permissions, non-recursively."""
    set_level(ctx, principal, path, PermissionLevel.NONE, recursive=False)


def set_owner(ctx: AclContext, path: str, owner: str, known_type: Optional[ObjectType] = None) -> None:
    """Make ``owner`` an owner of ``path``; recursive for collections."""
    set_level(ctx, owner, path, PermissionLevel.OWN, recursive=True, known_type=known_type)


def set_readable(ctx: AclContext, principal: str, readable: bool, path: str) -> None:
    """Set or clear read access while keeping stored write/own on ``path``.

    Only the principal's own grant row is consulted; access held through a
    group is never copied onto the principal.
    """
    path = rm_last_slash(path)
    ctx.validate(path)
    current = direct_level(ctx, principal, path)
    if readable:
        target = max(current, PermissionLevel.READ)
    elif current >= PermissionLevel.WRITE:
        target = current
    else:
        target = PermissionLevel.NONE
    set_level(ctx, principal, path, target, recursive=False)


__all__ = [
    "remove_access_permissions",
    "remove_permissions",
    "set_level",
    "set_owner",
    "set_permission",
    "set_permissions",
    "set_readable",
]
