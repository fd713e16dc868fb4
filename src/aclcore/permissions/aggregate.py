"""Effective permission queries.

A principal's effective permission on a path is the highest level across
its own grants and the grants of every group it belongs to, expanded
monotonically (own implies write implies read). Queries are read-only and
always hit the grant store; nothing is cached between calls.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Optional

from ..context import AclContext
from ..levels import (
    NO_ACCESS,
    EffectivePermission,
    PermissionLevel,
    format_permission,
    max_level,
    parse_permission_level,
    take_upto,
)
from ..paths import rm_last_slash
from ..store import ObjectType

logger = logging.getLogger(__name__)


def iter_permission_levels(ctx: AclContext, principal: str, path: str) -> Iterator[PermissionLevel]:
    """Lazily yield every level ``principal`` holds on ``path``.

    Direct grants come first; group membership is resolved only once the
    direct grants have been consumed. The sequence is finite (bounded by the
    number of groups) and can only be restarted by calling again.
    """
    backend = ctx.backend
    for raw in backend.query_direct_grants(principal, path):
        yield parse_permission_level(raw)
    for group in backend.resolve_principal_groups(principal):
        for raw in backend.query_group_grants(group, path):
            yield parse_permission_level(raw)


def max_permission_up_to(
    ctx: AclContext,
    principal: str,
    path: str,
    stop_level: PermissionLevel = PermissionLevel.OWN,
) -> PermissionLevel:
    """Highest level ``principal`` holds on ``path``, scanning lazily.

    Scanning stops as soon as a level at or above ``stop_level`` is seen.
    Grants left unscanned cannot lower the result.
    """
    ctx.validate(path)
    levels = take_upto(
        iter_permission_levels(ctx, principal, rm_last_slash(path)),
        lambda level: level >= stop_level,
    )
    return max_level(levels)


def _perm_map(ctx: AclContext, user: str, path: str) -> EffectivePermission:
    ctx.validate(path)
    levels = set(iter_permission_levels(ctx, user, rm_last_slash(path)))
    return EffectivePermission.from_level(max_level(levels))


def collection_permission(ctx: AclContext, user: str, coll_path: str) -> EffectivePermission:
    """Effective permission of ``user`` on a collection."""
    return _perm_map(ctx, user, coll_path)


def dataobject_permission(ctx: AclContext, user: str, data_path: str) -> EffectivePermission:
    """Effective permission of ``user`` on a data object."""
    return _perm_map(ctx, user, data_path)


def effective_permission(
    ctx: AclContext,
    user: str,
    path: str,
    known_type: Optional[ObjectType] = None,
) -> EffectivePermission:
    """Effective read/write/own triple of ``user`` on ``path``.

    Paths that are neither collections nor data objects yield no access
    rather than an error.

    Raises:
        InvalidPathError: If the path fails validation.
        DataIntegrityError: If a stored permission code cannot be decoded.
        BackendUnavailableError: If the grant store cannot be reached.
    """
    ctx.validate(path)
    object_type = known_type or ctx.object_type(path)
    if object_type == ObjectType.COLLECTION:
        return collection_permission(ctx, user, path)
    if object_type == ObjectType.DATA_OBJECT:
        return dataobject_permission(ctx, user, path)
    logger.debug("unknown path type for %s, reporting no access", path)
    return NO_ACCESS


def permission_for(
    ctx: AclContext,
    user: str,
    path: str,
    known_type: Optional[ObjectType] = None,
) -> Optional[str]:
    """Aggregated permission name (``"read"``, ``"write"``, ``"own"``) or None."""
    ctx.validate(path)
    object_type = known_type or ctx.object_type(path)
    if object_type is None:
        return None
    return format_permission(max_permission_up_to(ctx, user, path, PermissionLevel.OWN))


def has_permission(ctx: AclContext, user: str, path: str, level: PermissionLevel) -> bool:
    """True if ``user`` holds ``level`` or better on ``path``, directly or via a group."""
    return max_permission_up_to(ctx, user, path, level) >= level


def _checked(
    ctx: AclContext,
    user: str,
    path: str,
    level: PermissionLevel,
    known_type: Optional[ObjectType],
) -> bool:
    ctx.validate(path)
    if not ctx.backend.principal_exists(user):
        return False
    object_type = known_type or ctx.object_type(path)
    if object_type is None:
        return False
    return has_permission(ctx, user, rm_last_slash(path), level)


def is_readable(ctx: AclContext, user: str, path: str, known_type: Optional[ObjectType] = None) -> bool:
    return _checked(ctx, user, path, PermissionLevel.READ, known_type)


def is_writeable(ctx: AclContext, user: str, path: str, known_type: Optional[ObjectType] = None) -> bool:
    return _checked(ctx, user, path, PermissionLevel.WRITE, known_type)


def owns(ctx: AclContext, user: str, path: str, known_type: Optional[ObjectType] = None) -> bool:
    return _checked(ctx, user, path, PermissionLevel.OWN, known_type)


def paths_writeable(ctx: AclContext, user: str, paths: Iterable[str]) -> bool:
    """True if every path is writeable by ``user``. All paths are validated first."""
    paths = list(paths)
    for p in paths:
        ctx.validate(p)
    return all(is_writeable(ctx, user, p) for p in paths)


__all__ = [
    "collection_permission",
    "dataobject_permission",
    "effective_permission",
    "has_permission",
    "is_readable",
    "is_writeable",
    "iter_permission_levels",
    "max_permission_up_to",
    "owns",
    "paths_writeable",
    "permission_for",
]
