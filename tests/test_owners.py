"""Tests for owner reconciliation."""

from __future__ import annotations

import pytest

from aclcore import AclContext, InMemoryGrantStore, PermissionLevel, UnknownPathTypeError, fix_owners, reconcile_owners
from aclcore.permissions import Grant, removed_owners

ALICE_HOME = "/tempZone/home/alice"
REPORT = f"{ALICE_HOME}/report.pdf"
DOC = f"{ALICE_HOME}/doc"

OWN = PermissionLevel.OWN


class TestRemovedOwners:
    """Tests for removed_owners."""

    def test_difference_in_grant_order(self) -> None:
        grants = [
            Grant(principal="alice", level=OWN),
            Grant(principal="bob", level=OWN),
            Grant(principal="carol", level=PermissionLevel.READ),
        ]
        assert removed_owners(grants, ["bob"]) == ["alice", "carol"]

    def test_nothing_removed(self) -> None:
        assert removed_owners([Grant(principal="bob", level=OWN)], ["bob", "carol"]) == []


class TestFixOwners:
    """Tests for fix_owners."""

    def test_replaces_everyone(self, ctx: AclContext, store: InMemoryGrantStore) -> None:
        """Test that {alice: own, carol: write} reconciled to [bob] leaves only bob."""
        store.add_data_object(DOC)
        store.grant("alice", DOC, OWN)
        store.grant("carol", DOC, PermissionLevel.WRITE)

        removed = reconcile_owners(ctx, DOC, ["bob"])

        assert removed == ["alice", "carol"]
        assert store.calls == [
            ("revoke", "alice", DOC, False),
            ("revoke", "carol", DOC, False),
            ("apply", "bob", DOC, OWN, False),
        ]
        assert store.grants(DOC) == {"bob": OWN}

    def test_collection_owners_set_recursively(self, ctx: AclContext, store: InMemoryGrantStore) -> None:
        removed = fix_owners(ctx, ALICE_HOME, "alice", "bob", "alice")

        assert removed == ["rods"]
        assert store.calls == [
            ("revoke", "rods", ALICE_HOME, False),
            ("apply", "alice", ALICE_HOME, OWN, True),
            ("apply", "bob", ALICE_HOME, OWN, True),
        ]

    def test_existing_owner_kept(self, ctx: AclContext, store: InMemoryGrantStore) -> None:
        store.add_data_object(REPORT)
        store.grant("bob", REPORT, OWN)

        assert reconcile_owners(ctx, REPORT, ["bob"]) == []
        assert store.grants(REPORT) == {"bob": OWN}

    def test_unknown_path(self, ctx: AclContext, store: InMemoryGrantStore) -> None:
        with pytest.raises(UnknownPathTypeError):
            fix_owners(ctx, f"{ALICE_HOME}/missing", "bob")
        assert store.calls == []
