"""Direct grant listing.

Listings reflect the grant rows stored on a path, not effective permissions
aggregated across groups: propagation revokes and re-applies rows exactly.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel

from ..context import AclContext
from ..exceptions import UnknownPathTypeError
from ..levels import EffectivePermission, PermissionLevel, format_permission, max_level, parse_permission_level
from ..paths import rm_last_slash
from ..store import ObjectType


class Grant(BaseModel):
    """A grant row stored directly on a path."""

    principal: str
    level: PermissionLevel

    model_config = {"frozen": True}

    @property
    def permissions(self) -> EffectivePermission:
        return EffectivePermission.from_level(self.level)

    def as_perm_map(self) -> dict[str, Any]:
        """``{"user": ..., "permissions": {"read": ..., "write": ..., "own": ...}}``"""
        return {"user": self.principal, "permissions": self.permissions.model_dump()}

    def as_level_map(self) -> dict[str, Any]:
        """``{"user": ..., "permission": "read" | "write" | "own" | None}``"""
        return {"user": self.principal, "permission": format_permission(self.level)}


def list_grants(ctx: AclContext, path: str, known_type: Optional[ObjectType] = None) -> list[Grant]:
    """Grant rows stored directly on ``path``, in store order.

    Raises:
        UnknownPathTypeError: If ``path`` is neither a collection nor a data object.
        DataIntegrityError: If a stored code cannot be decoded.
    """
    path = rm_last_slash(path)
    ctx.validate(path)
    if (known_type or ctx.object_type(path)) is None:
        raise UnknownPathTypeError(f"Cannot list grants on {path}", path=path)
    return [
        Grant(principal=principal, level=parse_permission_level(raw))
        for principal, raw in ctx.backend.list_path_grants(path)
    ]


def list_grant_levels(ctx: AclContext, path: str, known_type: Optional[ObjectType] = None) -> list[dict[str, Any]]:
    return [grant.as_level_map() for grant in list_grants(ctx, path, known_type)]


def direct_level(ctx: AclContext, principal: str, path: str) -> PermissionLevel:
    """Highest level stored for ``principal`` itself on ``path``, ignoring groups."""
    return max_level(parse_permission_level(raw) for raw in ctx.backend.query_direct_grants(principal, path))


__all__ = [
    "Grant",
    "direct_level",
    "list_grant_levels",
    "list_grants",
]
