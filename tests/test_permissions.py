"""Tests for role graph resolution and permission aggregation."""

from __future__ import annotations

import logging

import pytest

from rolegraph import (
    Permission,
    Role,
    RoleSet,
    Subject,
    collect_permission_ids,
    expand_roles,
    has_permission,
    has_permission_by_id,
    has_role,
    resolve_effective_roles,
    resolve_inherited_roles,
    role_key,
)


@pytest.fixture
def graph() -> dict[str, Role]:
    """admin → editor → author → reader; moderator → reader; guest alone."""
    reader = Role(id=1, name="reader", perms=[Permission(10, "posts.read")])
    author = Role(id=2, name="author", perms=[Permission(11, "posts.create")]).inherit(reader)
    editor = Role(id=3, name="editor", permissions=["posts.edit"]).inherit(author)
    admin = Role(
        id=4,
        name="admin",
        permissions=["users.manage"],
        perms=[Permission(12, "posts.publish")],
    ).inherit(editor)
    moderator = Role(id=5, name="moderator", perms=[Permission(13, "comments.delete")]).inherit(reader)
    guest = Role(id=6, name="guest")
    return {r.name: r for r in (reader, author, editor, admin, moderator, guest)}


class TestRoleSet:
    """Tests for RoleSet deduplication."""

    def test_add_deduplicates_by_id(self) -> None:
        """Two Role values with the same id are one member."""
        role_set = RoleSet()
        assert role_set.add(Role(id=1, name="a")) is True
        assert role_set.add(Role(id=1, name="a-copy")) is False
        assert len(role_set) == 1
        assert role_set.names() == frozenset({"a"})

    def test_preserves_first_discovery_order(self) -> None:
        role_set = RoleSet()
        for role_id, name in ((3, "c"), (1, "a"), (2, "b")):
            role_set.add(Role(id=role_id, name=name))
        assert [role.name for role in role_set] == ["c", "a", "b"]

    def test_contains_role_or_key(self) -> None:
        role = Role(id=7, name="x")
        role_set = RoleSet()
        role_set.add(role)
        assert role in role_set
        assert 7 in role_set
        assert 8 not in role_set
        assert Role(id=8, name="y") not in role_set

    def test_roles_without_id_keyed_by_object(self) -> None:
        """Unsaved roles (id=None) never collapse into each other."""
        first, second = Role(id=None, name="draft"), Role(id=None, name="draft")
        role_set = RoleSet()
        role_set.add(first)
        role_set.add(second)
        assert len(role_set) == 2
        assert role_key(first) != role_key(second)

    def test_empty_is_falsy(self) -> None:
        assert not RoleSet()


class TestResolveEffectiveRoles:
    """Tests for the full effective role set."""

    def test_includes_owned_and_transitive(self, graph: dict[str, Role]) -> None:
        result = resolve_effective_roles(Subject(roles=[graph["admin"]]))
        assert result.names() == {"admin", "editor", "author", "reader"}

    def test_always_contains_direct_roles(self, graph: dict[str, Role]) -> None:
        subject = Subject(roles=[graph["guest"], graph["moderator"]])
        result = resolve_effective_roles(subject)
        for role in subject.roles:
            assert role in result

    def test_leaf_role_contributes_itself(self, graph: dict[str, Role]) -> None:
        assert resolve_effective_roles(Subject(roles=[graph["guest"]])).names() == {"guest"}

    def test_no_roles(self) -> None:
        assert len(resolve_effective_roles(Subject())) == 0

    def test_diamond_visits_shared_role_once(self, graph: dict[str, Role]) -> None:
        """reader is reachable from both admin and moderator."""
        result = resolve_effective_roles(Subject(roles=[graph["admin"], graph["moderator"]]))
        assert [role.name for role in result].count("reader") == 1
        assert len(result) == 5

    def test_duplicate_owned_roles(self, graph: dict[str, Role]) -> None:
        result = resolve_effective_roles(Subject(roles=[graph["guest"], graph["guest"]]))
        assert len(result) == 1

    def test_two_node_cycle_terminates(self) -> None:
        a = Role(id=1, name="a")
        b = Role(id=2, name="b")
        a.inherit(b)
        b.inherit(a)
        result = resolve_effective_roles(Subject(roles=[a]))
        assert result.names() == {"a", "b"}
        assert len(result) == 2

    def test_self_loop_terminates(self) -> None:
        a = Role(id=1, name="a")
        a.inherit(a)
        assert resolve_effective_roles(Subject(roles=[a])).names() == {"a"}

    def test_long_cycle(self) -> None:
        roles = [Role(id=i, name=f"r{i}") for i in range(50)]
        for current, following in zip(roles, roles[1:] + roles[:1]):
            current.inherit(following)
        result = resolve_effective_roles(Subject(roles=[roles[17]]))
        assert len(result) == 50

    def test_equal_ids_are_same_role(self) -> None:
        """A second value with an already-visited id is not expanded again."""
        hidden = Role(id=9, name="hidden")
        original = Role(id=1, name="a")
        twin = Role(id=1, name="a").inherit(hidden)
        result = resolve_effective_roles(Subject(roles=[original, twin]))
        assert "hidden" not in result.names()

    def test_expand_roles_accepts_iterable(self, graph: dict[str, Role]) -> None:
        result = expand_roles(iter([graph["author"]]))
        assert result.names() == {"author", "reader"}

    @pytest.mark.parametrize("level", [logging.WARNING, logging.DEBUG])
    def test_unorderable_names(self, level: int, caplog: pytest.LogCaptureFixture) -> None:
        """Names that do not compare never break resolution, at any log level."""
        unnamed = Role(id=1, name=None)  # type: ignore[arg-type]
        numbered = Role(id=3, name=7)  # type: ignore[arg-type]
        named = Role(id=2, name="b").inherit(unnamed, numbered)
        subject = Subject(roles=[unnamed, named])
        with caplog.at_level(level, logger="rolegraph"):
            effective = resolve_effective_roles(subject)
            inherited = resolve_inherited_roles(subject)
        assert effective.names() == {None, "b", 7}
        assert inherited.names() == {None, 7}


class TestResolveInheritedRoles:
    """Tests for the strictly-inherited role set."""

    def test_excludes_owned_roots(self, graph: dict[str, Role]) -> None:
        result = resolve_inherited_roles(Subject(roles=[graph["admin"]]))
        assert result.names() == {"editor", "author", "reader"}

    def test_leaf_role_contributes_nothing(self, graph: dict[str, Role]) -> None:
        assert len(resolve_inherited_roles(Subject(roles=[graph["guest"]]))) == 0

    def test_owned_role_reached_via_other_owned_role(self, graph: dict[str, Role]) -> None:
        """editor is owned and also inherited through admin."""
        result = resolve_inherited_roles(Subject(roles=[graph["admin"], graph["editor"]]))
        assert "editor" in result.names()
        assert "admin" not in result.names()

    def test_owned_role_reappears_through_cycle(self) -> None:
        a = Role(id=1, name="a")
        b = Role(id=2, name="b")
        a.inherit(b)
        b.inherit(a)
        result = resolve_inherited_roles(Subject(roles=[a]))
        assert result.names() == {"a", "b"}
        assert len(result) == 2

    def test_subset_of_effective(self, graph: dict[str, Role]) -> None:
        subject = Subject(roles=[graph["admin"], graph["moderator"], graph["guest"]])
        inherited = resolve_inherited_roles(subject).ids()
        assert inherited <= resolve_effective_roles(subject).ids()

    def test_unreferenced_role_never_appears(self, graph: dict[str, Role]) -> None:
        result = resolve_inherited_roles(Subject(roles=[graph["admin"]]))
        assert "moderator" not in result.names()
        assert "guest" not in result.names()


class TestHasRole:
    def test_direct_and_inherited(self, graph: dict[str, Role]) -> None:
        subject = Subject(roles=[graph["editor"]])
        assert has_role(subject, "editor")
        assert has_role(subject, "reader")
        assert not has_role(subject, "admin")

    def test_empty_name(self, graph: dict[str, Role]) -> None:
        assert not has_role(Subject(roles=[graph["admin"]]), "")


class TestHasPermission:
    """Tests for name-based permission checks."""

    def test_structured_permission(self, graph: dict[str, Role]) -> None:
        assert has_permission(Subject(roles=[graph["author"]]), "posts.create")

    def test_legacy_permission(self, graph: dict[str, Role]) -> None:
        assert has_permission(Subject(roles=[graph["editor"]]), "posts.edit")

    def test_inherited_permission(self, graph: dict[str, Role]) -> None:
        """admin gets posts.read from reader via editor → author."""
        assert has_permission(Subject(roles=[graph["admin"]]), "posts.read")

    def test_legacy_and_structured_are_additive(self, graph: dict[str, Role]) -> None:
        subject = Subject(roles=[graph["admin"]])
        assert has_permission(subject, "users.manage")
        assert has_permission(subject, "posts.publish")

    def test_missing_permission(self, graph: dict[str, Role]) -> None:
        assert not has_permission(Subject(roles=[graph["editor"]]), "posts.publish")

    def test_no_roles(self) -> None:
        assert not has_permission(Subject(), "posts.read")

    def test_legacy_none_or_empty(self) -> None:
        subject = Subject(roles=[Role(id=1, name="a", permissions=None), Role(id=2, name="b", permissions=[])])
        assert not has_permission(subject, "anything")

    def test_legacy_non_list_ignored(self) -> None:
        """A legacy field that is not a list (e.g. a raw string) grants nothing."""
        subject = Subject(roles=[Role(id=1, name="a", permissions="posts.read")])  # type: ignore[arg-type]
        assert not has_permission(subject, "posts.read")

    def test_permission_through_cycle(self) -> None:
        a = Role(id=1, name="a")
        b = Role(id=2, name="b", perms=[Permission(1, "deep")])
        a.inherit(b)
        b.inherit(a)
        assert has_permission(Subject(roles=[a]), "deep")


class TestPermissionIds:
    """Tests for id-based permission checks."""

    def test_has_permission_by_id(self, graph: dict[str, Role]) -> None:
        subject = Subject(roles=[graph["admin"]])
        assert has_permission_by_id(subject, 10)
        assert has_permission_by_id(subject, 12)
        assert not has_permission_by_id(subject, 13)

    def test_by_id_ignores_legacy_list(self) -> None:
        subject = Subject(roles=[Role(id=1, name="a", permissions=["10"])])
        assert not has_permission_by_id(subject, "10")

    def test_collect_deduplicates(self) -> None:
        p1, p2, p3 = Permission(1, "p1"), Permission(2, "p2"), Permission(3, "p3")
        r1 = Role(id=1, name="r1", perms=[p1, p2])
        r2 = Role(id=2, name="r2", perms=[p2, p3])
        assert collect_permission_ids(Subject(roles=[r1, r2])) == {1, 2, 3}

    def test_collect_includes_inherited(self, graph: dict[str, Role]) -> None:
        assert collect_permission_ids(Subject(roles=[graph["admin"]])) == {10, 11, 12}

    def test_collect_no_roles(self) -> None:
        assert collect_permission_ids(Subject()) == frozenset()
