"""Operation context passed to every aclcore call.

An AclContext bundles the borrowed grant store handle with the zone layout
and the principals that propagation must leave alone.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
from typing import Iterable, Optional

from .config import DEFAULT_MAX_DIR_LENGTH, DEFAULT_MAX_PATH_LENGTH, AclConfig
from .paths import path_join, rm_last_slash, validate_path_lengths
from .store import GrantStore, GuardedGrantStore, ObjectType, resolve_object_type


@dataclass(frozen=True)
class AclContext:
    """Explicit context for one or more permission operations.

    Attributes:
        store: Grant store handle. Owned by the caller, borrowed for the call.
        zone: Zone (realm) name.
        home: Home root collection, e.g. ``/tempZone/home``.
        trash_base: Trash root collection, e.g. ``/tempZone/trash/home``.
        admin_users: Principals whose grants propagation never touches.
        username: Principal the store connection acts as, if any.
    """

    store: GrantStore
    zone: str
    home: str
    trash_base: str
    admin_users: frozenset[str] = field(default_factory=frozenset)
    username: Optional[str] = None
    max_path_length: int = DEFAULT_MAX_PATH_LENGTH
    max_dir_length: int = DEFAULT_MAX_DIR_LENGTH

    @classmethod
    def from_config(
        cls,
        store: GrantStore,
        config: AclConfig,
        username: Optional[str] = None,
    ) -> "AclContext":
        return cls(
            store=store,
            zone=config.zone,
            home=rm_last_slash(config.home or f"/{config.zone}/home"),
            trash_base=rm_last_slash(config.trash_base or f"/{config.zone}/trash/home"),
            admin_users=frozenset(config.admin_users),
            username=username,
            max_path_length=config.max_path_length,
            max_dir_length=config.max_dir_length,
        )

    @cached_property
    def backend(self) -> GuardedGrantStore:
        """The store with transport failures mapped to BackendUnavailableError."""
        return GuardedGrantStore(self.store)

    def validate(self, path: str) -> str:
        return validate_path_lengths(path, self.max_path_length, self.max_dir_length)

    def user_home(self, user: str) -> str:
        return path_join(self.home, user)

    def object_type(self, path: str) -> Optional[ObjectType]:
        return resolve_object_type(self.backend, path)

    def excluded_principals(self, acting_user: Optional[str], extra: Iterable[str] = ()) -> frozenset[str]:
        """Admins, the acting user and the connection user."""
        excluded = set(self.admin_users) | set(extra)
        if acting_user:
            excluded.add(acting_user)
        if self.username:
            excluded.add(self.username)
        return frozenset(excluded)


__all__ = ["AclContext"]
