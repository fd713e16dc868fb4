"""Grant store interface and an in-memory implementation.

The grant store is the remote storage backend: it answers grant lookups,
applies grant mutations and exposes the namespace tree. aclcore never talks
to a concrete backend directly; callers hand it an object satisfying
:class:`GrantStore`.
"""

from __future__ import annotations

import functools
from enum import Enum
from typing import Any, Iterable, Iterator, Optional, Protocol, Sequence, runtime_checkable

from .exceptions import backend_guard
from .levels import LEVEL_CODES, PermissionLevel
from .paths import dirname, rm_last_slash


class ObjectType(str, Enum):
    """Type tag of a node in the storage tree."""

    COLLECTION = "collection"
    DATA_OBJECT = "dataobject"


@runtime_checkable
class GrantStore(Protocol):
    """Capabilities the permission core needs from the storage backend.

    Grant lookups return raw stored codes; aclcore decodes them with
    :func:`aclcore.levels.parse_permission_level`.
    """

    def query_direct_grants(self, principal: str, path: str) -> Sequence[Any]:
        """Raw permission codes ``principal`` holds directly on ``path``."""
        ...

    def query_group_grants(self, group: str, path: str) -> Sequence[Any]:
        """Raw permission codes the group ``group`` holds on ``path``."""
        ...

    def resolve_principal_groups(self, principal: str) -> Sequence[str]:
        """Groups ``principal`` belongs to."""
        ...

    def principal_exists(self, principal: str) -> bool:
        ...

    def apply_grant(self, principal: str, path: str, level: PermissionLevel, recursive: bool) -> None:
        ...

    def revoke_grant(self, principal: str, path: str, recursive: bool) -> None:
        ...

    def is_collection(self, path: str) -> bool:
        ...

    def is_data_object(self, path: str) -> bool:
        ...

    def list_immediate_children(self, path: str) -> Sequence[str]:
        """Absolute paths of the direct children of collection ``path``."""
        ...

    def list_path_grants(self, path: str) -> Sequence[tuple[str, Any]]:
        """(principal, raw code) rows stored directly on ``path``."""
        ...

    def get_inheritance_flag(self, path: str) -> bool:
        ...

    def set_inheritance_flag(self, path: str, inherit: bool, recursive: bool) -> None:
        ...


class GuardedGrantStore:
    """Proxy that routes every store call through :func:`backend_guard`.

    Lazy results are materialized inside the guard so that a failure while
    iterating is reported as BackendUnavailableError too.
    """

    def __init__(self, store: GrantStore) -> None:
        self._store = store

    @property
    def wrapped(self) -> GrantStore:
        return self._store

    def __getattr__(self, name: str) -> Any:
        attr = getattr(self._store, name)
        if not callable(attr):
            return attr

        @functools.wraps(attr)
        def call(*args: Any, **kwargs: Any) -> Any:
            with backend_guard(name, args=args):
                result = attr(*args, **kwargs)
                if isinstance(result, Iterator):
                    result = list(result)
                return result

        return call


class InMemoryGrantStore:
    """Dict-backed grant store.

    Holds collections (with their inheritance flag), data objects, direct
    grants, users and group memberships. Every mutation is appended to
    ``calls`` as a tuple, e.g. ``("revoke", "bob", "/zone/home/alice/x", True)``.

    Example::

        store = InMemoryGrantStore()
        store.add_user("alice")
        store.add_collection("/tempZone/home/alice")
        store.add_data_object("/tempZone/home/alice/notes.txt")
        store.grant("alice", "/tempZone/home/alice/notes.txt", PermissionLevel.OWN)
    """

    def __init__(self) -> None:
        self._collections: dict[str, bool] = {"/": False}
        self._data_objects: set[str] = set()
        self._grants: dict[str, dict[str, PermissionLevel]] = {}
        self._users: set[str] = set()
        self._groups: dict[str, list[str]] = {}
        self.calls: list[tuple[Any, ...]] = []

    # ── Seeding ─────────────────────────────────────────

    def add_user(self, name: str, groups: Iterable[str] = ()) -> None:
        self._users.add(name)
        self._groups[name] = list(groups)
        for group in self._groups[name]:
            self._users.add(group)

    def add_collection(self, path: str, inherit: bool = False) -> None:
        """Create a collection, creating missing ancestors as non-inheriting."""
        path = rm_last_slash(path)
        parent = dirname(path)
        if parent not in self._collections:
            self.add_collection(parent)
        self._collections[path] = inherit

    def add_data_object(self, path: str) -> None:
        path = rm_last_slash(path)
        parent = dirname(path)
        if parent not in self._collections:
            self.add_collection(parent)
        self._data_objects.add(path)

    def grant(self, principal: str, path: str, level: PermissionLevel) -> None:
        """Store a grant without recording it as a call."""
        self._require(path)
        self._grants.setdefault(rm_last_slash(path), {})[principal] = level

    def grants(self, path: str) -> dict[str, PermissionLevel]:
        """Snapshot of the direct grants stored on ``path``."""
        return dict(self._grants.get(rm_last_slash(path), {}))

    def move(self, src: str, dst: str) -> None:
        """Rename a node and its descendants, carrying their grants along."""
        src, dst = rm_last_slash(src), rm_last_slash(dst)
        self._require(src)
        if dirname(dst) not in self._collections:
            raise FileNotFoundError(dirname(dst))

        def renamed(p: str) -> str:
            return dst + p[len(src):]

        for p in [p for p in self._collections if self._is_under(p, src)]:
            self._collections[renamed(p)] = self._collections.pop(p)
        for p in [p for p in self._data_objects if self._is_under(p, src)]:
            self._data_objects.remove(p)
            self._data_objects.add(renamed(p))
        for p in [p for p in self._grants if self._is_under(p, src)]:
            self._grants[renamed(p)] = self._grants.pop(p)

    # ── GrantStore protocol ─────────────────────────────

    def query_direct_grants(self, principal: str, path: str) -> list[str]:
        level = self._grants.get(rm_last_slash(path), {}).get(principal)
        if level is None:
            return []
        return [str(LEVEL_CODES[level])]

    def query_group_grants(self, group: str, path: str) -> list[str]:
        return self.query_direct_grants(group, path)

    def resolve_principal_groups(self, principal: str) -> list[str]:
        return list(self._groups.get(principal, []))

    def principal_exists(self, principal: str) -> bool:
        return principal in self._users

    def apply_grant(self, principal: str, path: str, level: PermissionLevel, recursive: bool) -> None:
        path = rm_last_slash(path)
        self._require(path)
        self.calls.append(("apply", principal, path, PermissionLevel(level), recursive))
        for target in self._targets(path, recursive):
            self._grants.setdefault(target, {})[principal] = PermissionLevel(level)

    def revoke_grant(self, principal: str, path: str, recursive: bool) -> None:
        path = rm_last_slash(path)
        self._require(path)
        self.calls.append(("revoke", principal, path, recursive))
        for target in self._targets(path, recursive):
            self._grants.get(target, {}).pop(principal, None)

    def is_collection(self, path: str) -> bool:
        return rm_last_slash(path) in self._collections

    def is_data_object(self, path: str) -> bool:
        return rm_last_slash(path) in self._data_objects

    def list_immediate_children(self, path: str) -> list[str]:
        path = rm_last_slash(path)
        nodes = [p for p in self._collections if p != "/"] + list(self._data_objects)
        return sorted(p for p in nodes if dirname(p) == path)

    def list_path_grants(self, path: str) -> list[tuple[str, str]]:
        stored = self._grants.get(rm_last_slash(path), {})
        return [(principal, str(LEVEL_CODES[level])) for principal, level in stored.items()]

    def get_inheritance_flag(self, path: str) -> bool:
        return self._collections.get(rm_last_slash(path), False)

    def set_inheritance_flag(self, path: str, inherit: bool, recursive: bool) -> None:
        path = rm_last_slash(path)
        self.calls.append(("inherit", path, inherit, recursive))
        for target in self._targets(path, recursive):
            if target in self._collections:
                self._collections[target] = inherit

    # ── Internals ───────────────────────────────────────

    def _require(self, path: str) -> None:
        path = rm_last_slash(path)
        if path not in self._collections and path not in self._data_objects:
            raise FileNotFoundError(path)

    @staticmethod
    def _is_under(path: str, root: str) -> bool:
        return path == root or path.startswith(root.rstrip("/") + "/")

    def _targets(self, path: str, recursive: bool) -> list[str]:
        if not recursive or path not in self._collections:
            return [path]
        nodes: list[str] = list(self._collections) + list(self._data_objects)
        return [p for p in nodes if self._is_under(p, path)]


def resolve_object_type(store: GrantStore, path: str) -> Optional[ObjectType]:
    """Collection, data object, or None when the path is neither."""
    if store.is_collection(path):
        return ObjectType.COLLECTION
    if store.is_data_object(path):
        return ObjectType.DATA_OBJECT
    return None


__all__ = [
    "GrantStore",
    "GuardedGrantStore",
    "InMemoryGrantStore",
    "ObjectType",
    "resolve_object_type",
]
