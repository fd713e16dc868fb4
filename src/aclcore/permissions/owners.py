"""Owner reconciliation."""

from __future__ import annotations

import logging
from typing import Iterable

from ..context import AclContext
from ..paths import rm_last_slash
from .grants import Grant, list_grants
from .mutation import remove_access_permissions, set_owner

logger = logging.getLogger(__name__)


def removed_owners(current_grants: Iterable[Grant], new_owners: Iterable[str]) -> list[str]:
    """Principals holding a grant who are not among ``new_owners``, in grant order."""
    keep = set(new_owners)
    return [grant.principal for grant in current_grants if grant.principal not in keep]


def fix_owners(ctx: AclContext, path: str, *owners: str) -> list[str]:
    """Make ``owners`` the only principals with access to ``path``.

    Everyone else holding a grant on ``path`` loses it (non-recursively)
    before the owners are granted ``own``. Owners are granted in the order
    given; duplicates are ignored.

    Returns:
        The principals whose access was revoked.
    """
    path = rm_last_slash(path)
    ctx.validate(path)
    object_type = ctx.object_type(path)
    current = list_grants(ctx, path, object_type)
    new_owners = list(dict.fromkeys(owners))

    removed = removed_owners(current, new_owners)
    for principal in removed:
        remove_access_permissions(ctx, principal, path)

    for owner in new_owners:
        set_owner(ctx, path, owner, known_type=object_type)

    logger.debug("owners of %s set to %s, revoked %s", path, new_owners, removed)
    return removed


def reconcile_owners(ctx: AclContext, path: str, new_owners: Iterable[str]) -> list[str]:
    return fix_owners(ctx, path, *new_owners)


__all__ = [
    "fix_owners",
    "reconcile_owners",
    "removed_owners",
]
