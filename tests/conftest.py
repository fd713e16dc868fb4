"""Shared fixtures: a small zone with alice's home and a few sharees."""

from __future__ import annotations

from typing import Callable

import pytest

from aclcore import AclConfig, AclContext, InMemoryGrantStore, PermissionLevel

HOME = "/tempZone/home"
ALICE_HOME = "/tempZone/home/alice"
TRASH = "/tempZone/trash/home"


@pytest.fixture
def store() -> InMemoryGrantStore:
    store = InMemoryGrantStore()
    for user in ("alice", "bob", "carol", "rods", "svc"):
        store.add_user(user)
    store.add_user("dave", groups=["lab"])
    store.add_collection(HOME)
    store.add_collection(TRASH)
    store.add_collection(ALICE_HOME)
    store.grant("alice", ALICE_HOME, PermissionLevel.OWN)
    store.grant("rods", ALICE_HOME, PermissionLevel.OWN)
    return store


@pytest.fixture
def config() -> AclConfig:
    return AclConfig(zone="tempZone", admin_users=["rods"])


@pytest.fixture
def ctx(store: InMemoryGrantStore, config: AclConfig) -> AclContext:
    return AclContext.from_config(store, config, username="svc")


@pytest.fixture
def add_owned(store: InMemoryGrantStore) -> Callable[..., str]:
    """Create nodes owned by alice and rods, like the storage layer does."""

    def add(path: str, collection: bool = True, inherit: bool = False) -> str:
        if collection:
            store.add_collection(path, inherit=inherit)
        else:
            store.add_data_object(path)
        store.grant("alice", path, PermissionLevel.OWN)
        store.grant("rods", path, PermissionLevel.OWN)
        return path

    return add
