"""Permission propagation after a move or rename.

When an item moves between collections, grants must be reconciled at both
ends. What happens depends only on the inheritance flags of the source and
destination parents:

- source inherits, destination inherits: reset the destination, then inherit
  the destination parent's grants.
- source inherits, destination does not: reset the destination.
- source does not, destination inherits: prune source ancestors, reset,
  inherit.
- neither inherits: prune source ancestors, extend read access above the
  destination.

Pruning (``remove_obsolete_perms``) climbs from the old parent towards the
root and drops read access from every ancestor in which a sharee can no
longer see anything. Extension (``make_file_accessible``) climbs from the new
parent and grants read on every ancestor so sharees of a non-inheriting item
can still reach it. Both walks stop at protected base directories.

Admin principals, the acting user and the connection user are never touched.
Nothing here is transactional: the first failing store call aborts the walk
and whatever was already applied stays applied.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Iterator, Optional
from uuid import uuid4

from ..context import AclContext
from ..exceptions import AclError
from ..logging import get_acl_logger
from ..paths import dirname, rm_last_slash
from .grants import Grant, list_grants
from .inheritance import is_inheriting
from .listing import contains_accessible_obj
from .mutation import remove_permissions, set_level, set_readable

logger = logging.getLogger(__name__)


class MoveCase(str, Enum):
    """Inheritance flags of (source parent, destination parent)."""

    INHERIT_TO_INHERIT = "inherit_to_inherit"
    INHERIT_TO_PLAIN = "inherit_to_plain"
    PLAIN_TO_INHERIT = "plain_to_inherit"
    PLAIN_TO_PLAIN = "plain_to_plain"


def classify_move(src_inherits: bool, dst_inherits: bool) -> MoveCase:
    if src_inherits:
        return MoveCase.INHERIT_TO_INHERIT if dst_inherits else MoveCase.INHERIT_TO_PLAIN
    return MoveCase.PLAIN_TO_INHERIT if dst_inherits else MoveCase.PLAIN_TO_PLAIN


# ── Walk helpers ────────────────────────────────────────


def ancestor_dirs(path: str, keep_walking: Callable[[str], bool]) -> Iterator[str]:
    """Yield the ancestors of ``path``, nearest first, while ``keep_walking`` holds.

    The generator is lazy: ``keep_walking`` is evaluated for an ancestor only
    after the caller has finished with the previous one. The root is never
    yielded.

    Example::

        >>> list(ancestor_dirs("/z/home/a/b/c.txt", lambda d: d != "/z/home"))
        ['/z/home/a/b', '/z/home/a']
    """
    current = dirname(path)
    while current != "/" and keep_walking(current):
        yield current
        current = dirname(current)


def process_grants(
    ctx: AclContext,
    path: str,
    acting_user: Optional[str],
    fn: Callable[[Grant], None],
) -> list[Grant]:
    """Apply ``fn`` to every grant on ``path`` not held by an excluded principal.

    Returns the grants that were processed.
    """
    excluded = ctx.excluded_principals(acting_user)
    grants = [g for g in list_grants(ctx, path) if g.principal not in excluded]
    logger.debug("processing %d grants on %s", len(grants), path)
    for grant in grants:
        fn(grant)
    return grants


def _base_dirs(ctx: AclContext) -> frozenset[str]:
    return frozenset({rm_last_slash(ctx.home), rm_last_slash(ctx.trash_base)})


# ── Sub-steps ───────────────────────────────────────────


def reset_perms(ctx: AclContext, path: str, acting_user: Optional[str]) -> list[Grant]:
    """Recursively revoke every non-excluded grant stored on ``path``."""
    return process_grants(
        ctx,
        path,
        acting_user,
        lambda grant: remove_permissions(ctx, grant.principal, path),
    )


def inherit_perms(ctx: AclContext, path: str, acting_user: Optional[str]) -> list[Grant]:
    """Recursively copy the non-excluded grants of ``path``'s parent onto ``path``."""
    return process_grants(
        ctx,
        dirname(path),
        acting_user,
        lambda grant: set_level(ctx, grant.principal, path, grant.level, recursive=True),
    )


def remove_obsolete_perms(ctx: AclContext, path: str, acting_user: Optional[str]) -> list[Grant]:
    """Drop read access that only existed to reach the item formerly at ``path``.

    For each sharee of ``path``'s old parent, ancestors are visited from the
    parent upwards. A visited ancestor loses the sharee's read access; the
    walk ends at a protected base directory (home root, trash root, the
    acting user's home) or at the first ancestor still holding something the
    sharee can read.
    """
    base_dirs = _base_dirs(ctx)
    if acting_user:
        base_dirs |= {ctx.user_home(acting_user)}

    def prune(grant: Grant) -> None:
        sharee = grant.principal

        def obsolete(dir_path: str) -> bool:
            return dir_path not in base_dirs and not contains_accessible_obj(ctx, sharee, dir_path)

        for dir_path in ancestor_dirs(path, obsolete):
            logger.debug("pruning read access of %s on %s", sharee, dir_path)
            set_readable(ctx, sharee, False, dir_path)

    return process_grants(ctx, dirname(path), acting_user, prune)


def make_file_accessible(ctx: AclContext, path: str, acting_user: Optional[str]) -> list[Grant]:
    """Grant read on every ancestor of ``path`` to everyone holding a grant on it.

    Stops below the home root or the trash root. Only read is granted; stored
    write/own on an ancestor are left as they are.
    """
    base_dirs = _base_dirs(ctx)

    def extend(grant: Grant) -> None:
        for dir_path in ancestor_dirs(path, lambda d: d not in base_dirs):
            set_readable(ctx, grant.principal, True, dir_path)

    return process_grants(ctx, path, acting_user, extend)


# ── Entry point ─────────────────────────────────────────


def _apply_case(
    ctx: AclContext,
    case: MoveCase,
    src: str,
    dst: str,
    acting_user: Optional[str],
    skip_source_perms: bool,
) -> None:
    if case in (MoveCase.PLAIN_TO_INHERIT, MoveCase.PLAIN_TO_PLAIN) and not skip_source_perms:
        remove_obsolete_perms(ctx, src, acting_user)

    if case == MoveCase.PLAIN_TO_PLAIN:
        make_file_accessible(ctx, dst, acting_user)
        return

    reset_perms(ctx, dst, acting_user)
    if case != MoveCase.INHERIT_TO_PLAIN:
        inherit_perms(ctx, dst, acting_user)


def fix_perms(
    ctx: AclContext,
    src: str,
    dst: str,
    acting_user: Optional[str],
    skip_source_perms: bool = False,
) -> Optional[MoveCase]:
    """Reconcile grants after the item at ``src`` has been moved to ``dst``.

    Call after the move has happened. Moves within one collection (renames)
    need no reconciliation.

    Args:
        ctx: Operation context.
        src: Former path of the item.
        dst: Current path of the item.
        acting_user: Principal performing the move; its grants are left alone.
        skip_source_perms: Do not prune grants on the source side.

    Returns:
        The MoveCase that was applied, or None for a rename in place.

    Raises:
        InvalidPathError: If either path fails validation (nothing is changed).
        BackendUnavailableError: If the grant store fails mid-walk.
    """
    src, dst = rm_last_slash(src), rm_last_slash(dst)
    ctx.validate(src)
    ctx.validate(dst)

    src_dir, dst_dir = dirname(src), dirname(dst)
    if src_dir == dst_dir:
        logger.debug("%s and %s share a parent, nothing to reconcile", src, dst)
        return None

    log = get_acl_logger(__name__, operation_id=uuid4())
    case = classify_move(is_inheriting(ctx, src_dir), is_inheriting(ctx, dst_dir))
    log.info("reconciling move %s -> %s as %s", src, dst, case.value, path=dst)

    try:
        _apply_case(ctx, case, src, dst, acting_user, skip_source_perms)
    except AclError as e:
        log.error("propagation failed with %s: %s", e.code, e.message, path=dst)
        raise

    log.info("move %s -> %s reconciled", src, dst, path=dst)
    return case


__all__ = [
    "MoveCase",
    "ancestor_dirs",
    "classify_move",
    "fix_perms",
    "inherit_perms",
    "make_file_accessible",
    "process_grants",
    "remove_obsolete_perms",
    "reset_perms",
]
