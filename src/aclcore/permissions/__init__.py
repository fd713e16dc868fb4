"""Grant queries, mutations and move-time propagation.

Defines:
- Aggregation: effective read/write/own of a principal across its groups
- Grants: direct grant listing and formatting
- Mutation: applying and revoking grants
- Inheritance: reading and setting the collection inheritance flag
- Propagation: reconciling grants after a move (fix_perms)
- Owners: replacing the owner set of a path (fix_owners)
"""

from .aggregate import (
    collection_permission,
    dataobject_permission,
    effective_permission,
    has_permission,
    is_readable,
    is_writeable,
    iter_permission_levels,
    max_permission_up_to,
    owns,
    paths_writeable,
    permission_for,
)
from .grants import Grant, direct_level, list_grant_levels, list_grants
from .inheritance import is_inheriting, remove_inherits, set_inherits
from .listing import contains_accessible_obj, list_paths, one_user_to_rule_them_all
from .mutation import (
    remove_access_permissions,
    remove_permissions,
    set_level,
    set_owner,
    set_permission,
    set_permissions,
    set_readable,
)
from .owners import fix_owners, reconcile_owners, removed_owners
from .propagation import (
    MoveCase,
    ancestor_dirs,
    classify_move,
    fix_perms,
    inherit_perms,
    make_file_accessible,
    process_grants,
    remove_obsolete_perms,
    reset_perms,
)

__all__ = [
    "Grant",
    "MoveCase",
    "ancestor_dirs",
    "classify_move",
    "collection_permission",
    "contains_accessible_obj",
    "dataobject_permission",
    "direct_level",
    "effective_permission",
    "fix_owners",
    "fix_perms",
    "has_permission",
    "inherit_perms",
    "is_inheriting",
    "is_readable",
    "is_writeable",
    "iter_permission_levels",
    "list_grant_levels",
    "list_grants",
    "list_paths",
    "make_file_accessible",
    "max_permission_up_to",
    "one_user_to_rule_them_all",
    "owns",
    "paths_writeable",
    "permission_for",
    "process_grants",
    "reconcile_owners",
    "remove_access_permissions",
    "remove_inherits",
    "remove_obsolete_perms",
    "remove_permissions",
    "removed_owners",
    "reset_perms",
    "set_inherits",
    "set_level",
    "set_owner",
    "set_permission",
    "set_permissions",
    "set_readable",
]
