"""Tests for the in-memory grant store."""

from __future__ import annotations

import pytest

from aclcore import GrantStore, InMemoryGrantStore, ObjectType, PermissionLevel
from aclcore.store import resolve_object_type


@pytest.fixture
def tree() -> InMemoryGrantStore:
    store = InMemoryGrantStore()
    store.add_user("bob", groups=["lab"])
    store.add_collection("/z/home/alice/proj", inherit=True)
    store.add_data_object("/z/home/alice/proj/a.txt")
    store.add_data_object("/z/home/alice/notes.txt")
    return store


class TestInMemoryGrantStore:
    """Tests for seeding and the GrantStore protocol methods."""

    def test_satisfies_protocol(self, tree: InMemoryGrantStore) -> None:
        assert isinstance(tree, GrantStore)

    def test_parents_created(self, tree: InMemoryGrantStore) -> None:
        assert tree.is_collection("/z/home/alice")
        assert tree.is_collection("/z")
        assert not tree.get_inheritance_flag("/z/home/alice")
        assert tree.get_inheritance_flag("/z/home/alice/proj")

    def test_groups(self, tree: InMemoryGrantStore) -> None:
        assert tree.resolve_principal_groups("bob") == ["lab"]
        assert tree.principal_exists("lab")
        assert not tree.principal_exists("mallory")

    def test_codes_returned_as_stored_strings(self, tree: InMemoryGrantStore) -> None:
        tree.grant("bob", "/z/home/alice/notes.txt", PermissionLevel.WRITE)
        assert tree.query_direct_grants("bob", "/z/home/alice/notes.txt") == ["1120"]
        assert tree.list_path_grants("/z/home/alice/notes.txt") == [("bob", "1120")]
        assert tree.query_direct_grants("carol", "/z/home/alice/notes.txt") == []

    def test_children_sorted(self, tree: InMemoryGrantStore) -> None:
        assert tree.list_immediate_children("/z/home/alice") == [
            "/z/home/alice/notes.txt",
            "/z/home/alice/proj",
        ]

    def test_recursive_apply(self, tree: InMemoryGrantStore) -> None:
        tree.apply_grant("bob", "/z/home/alice", PermissionLevel.READ, True)
        for path in ("/z/home/alice", "/z/home/alice/proj", "/z/home/alice/proj/a.txt", "/z/home/alice/notes.txt"):
            assert tree.grants(path) == {"bob": PermissionLevel.READ}
        assert tree.calls == [("apply", "bob", "/z/home/alice", PermissionLevel.READ, True)]

    def test_non_recursive_revoke(self, tree: InMemoryGrantStore) -> None:
        tree.apply_grant("bob", "/z/home/alice", PermissionLevel.READ, True)
        tree.revoke_grant("bob", "/z/home/alice", False)
        assert tree.grants("/z/home/alice") == {}
        assert tree.grants("/z/home/alice/proj") == {"bob": PermissionLevel.READ}

    def test_mutation_on_missing_path(self, tree: InMemoryGrantStore) -> None:
        with pytest.raises(FileNotFoundError):
            tree.apply_grant("bob", "/z/home/alice/gone", PermissionLevel.READ, False)

    def test_recursive_inheritance_flag(self, tree: InMemoryGrantStore) -> None:
        tree.set_inheritance_flag("/z/home", True, True)
        assert tree.get_inheritance_flag("/z/home/alice")
        assert tree.calls == [("inherit", "/z/home", True, True)]

    def test_move_carries_grants(self, tree: InMemoryGrantStore) -> None:
        tree.grant("bob", "/z/home/alice/proj/a.txt", PermissionLevel.OWN)
        tree.move("/z/home/alice/proj", "/z/home/alice/archive")

        assert not tree.is_collection("/z/home/alice/proj")
        assert tree.get_inheritance_flag("/z/home/alice/archive")
        assert tree.is_data_object("/z/home/alice/archive/a.txt")
        assert tree.grants("/z/home/alice/archive/a.txt") == {"bob": PermissionLevel.OWN}

    def test_move_into_missing_parent(self, tree: InMemoryGrantStore) -> None:
        with pytest.raises(FileNotFoundError):
            tree.move("/z/home/alice/notes.txt", "/z/home/nobody/notes.txt")


class TestResolveObjectType:
    """Tests for resolve_object_type."""

    def test_types(self, tree: InMemoryGrantStore) -> None:
        assert resolve_object_type(tree, "/z/home/alice") is ObjectType.COLLECTION
        assert resolve_object_type(tree, "/z/home/alice/notes.txt") is ObjectType.DATA_OBJECT
        assert resolve_object_type(tree, "/z/home/alice/missing") is None
