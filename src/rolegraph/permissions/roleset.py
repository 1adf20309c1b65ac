"""Ordered, deduplicated role collection built fresh for each traversal."""

from __future__ import annotations

from typing import Any, Hashable, Iterator

from ..models import RoleLike


def role_key(role: RoleLike) -> Hashable:
    """Identity used to deduplicate roles.

    The role's ``id``; a role without one yet (an unsaved ORM row) is keyed by
    object identity so two distinct unsaved rows never collapse into one.
    """
    key = getattr(role, "id", None)
    if key is None:
        return ("object", id(role))
    return key


class RoleSet:
    """Roles in first-discovery order with an identity index.

    Membership (``in``) accepts either a role or a raw role key.
    """

    __slots__ = ("_roles", "_keys")

    def __init__(self) -> None:
        self._roles: list[RoleLike] = []
        self._keys: set[Hashable] = set()

    def add(self, role: RoleLike) -> bool:
        """Add ``role`` unless already present. Returns True if it was added."""
        key = role_key(role)
        if key in self._keys:
            return False
        self._keys.add(key)
        self._roles.append(role)
        return True

    def names(self) -> frozenset[str]:
        return frozenset(role.name for role in self._roles)

    def ids(self) -> frozenset[Hashable]:
        return frozenset(self._keys)

    def __contains__(self, item: Any) -> bool:
        if hasattr(item, "descendants"):
            return role_key(item) in self._keys
        return item in self._keys

    def __iter__(self) -> Iterator[RoleLike]:
        return iter(self._roles)

    def __len__(self) -> int:
        return len(self._roles)

    def __bool__(self) -> bool:
        return bool(self._roles)

    def __repr__(self) -> str:
        return f"RoleSet({[role.name for role in self._roles]!r})"


__all__ = ["RoleSet", "role_key"]
