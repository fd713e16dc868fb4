"""Collection listings used by reachability checks."""

from __future__ import annotations

import logging

from ..context import AclContext
from ..exceptions import InvalidPathError
from ..paths import basename, path_join, rm_last_slash
from ..store import ObjectType
from .aggregate import is_readable
from .grants import list_grants

logger = logging.getLogger(__name__)


def list_paths(ctx: AclContext, parent_path: str, ignore_child_errors: bool = False) -> list[str]:
    """Paths of the entries directly under ``parent_path``. Not recursive.

    Args:
        ctx: Operation context.
        parent_path: The collection to list.
        ignore_child_errors: Skip children whose path fails validation
            instead of raising.

    Raises:
        InvalidPathError: If ``parent_path`` or, unless ignored, a child path
            fails validation.
    """
    parent_path = rm_last_slash(parent_path)
    ctx.validate(parent_path)
    paths: list[str] = []
    for child in ctx.backend.list_immediate_children(parent_path):
        child_path = path_join(parent_path, basename(child))
        try:
            paths.append(ctx.validate(child_path))
        except InvalidPathError:
            if not ignore_child_errors:
                raise
            logger.warning("skipping child with invalid path under %s", parent_path)
    return paths


def contains_accessible_obj(ctx: AclContext, principal: str, dir_path: str) -> bool:
    """True if ``principal`` can read at least one entry directly under ``dir_path``."""
    children = list_paths(ctx, dir_path)
    logger.debug("checking %d entries under %s for %s", len(children), dir_path, principal)
    return any(is_readable(ctx, principal, child) for child in children)


def one_user_to_rule_them_all(ctx: AclContext, user: str) -> bool:
    """True if ``user`` has a grant on every collection directly under the home root."""
    subdirs = [p for p in list_paths(ctx, ctx.home) if ctx.object_type(p) == ObjectType.COLLECTION]
    return all(
        any(grant.principal == user for grant in list_grants(ctx, d, ObjectType.COLLECTION))
        for d in subdirs
    )


__all__ = [
    "contains_accessible_obj",
    "list_paths",
    "one_user_to_rule_them_all",
]
