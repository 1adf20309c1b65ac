"""In-memory role graph entities and the protocols role sources must satisfy.

Provides:
- ``PermissionLike`` / ``RoleLike`` / ``SubjectLike`` — structural contracts.
  The SQLAlchemy records in :mod:`rolegraph.store` satisfy them too, so the
  resolver never needs to know where a role came from.
- ``Permission`` / ``Role`` — plain dataclasses for graphs built in code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Hashable, Iterable, Optional, Protocol, Sequence, runtime_checkable

RoleId = Hashable
PermissionId = Hashable


@runtime_checkable
class PermissionLike(Protocol):
    id: Any
    name: str


@runtime_checkable
class RoleLike(Protocol):
    """A role as seen by the resolver.

    ``permissions`` is the legacy inline list of permission names; ``perms``
    holds the structured permission entities.
    """

    id: Any
    name: str
    permissions: Optional[Sequence[str]]
    perms: Iterable[PermissionLike]

    def descendants(self) -> Iterable["RoleLike"]: ...


@runtime_checkable
class SubjectLike(Protocol):
    roles: Iterable[RoleLike]


@dataclass(frozen=True)
class Permission:
    """A named capability granted through roles."""

    id: PermissionId
    name: str
    display_name: str = ""
    description: str = ""


@dataclass(eq=False)
class Role:
    """A named authority unit.

    Equality is object identity; the resolver deduplicates by ``id``
    (see :func:`rolegraph.permissions.role_key`).

    Example::

        viewer = Role(id=1, name="viewer", perms=[Permission(1, "posts.read")])
        editor = Role(id=2, name="editor").inherit(viewer)
        editor.descendants()  # [viewer]
    """

    id: RoleId
    name: str
    permissions: Optional[list[str]] = None
    perms: list[Permission] = field(default_factory=list)
    _descendants: list["Role"] = field(default_factory=list, repr=False)

    def descendants(self) -> list["Role"]:
        """Roles this role inherits from, as declared (one hop)."""
        return list(self._descendants)

    def inherit(self, *roles: "Role") -> "Role":
        """Declare descendant edges. Returns self for chaining."""
        self._descendants.extend(roles)
        return self

    def __repr__(self) -> str:
        return f"Role(id={self.id!r}, name={self.name!r})"


__all__ = [
    "Permission",
    "PermissionId",
    "PermissionLike",
    "Role",
    "RoleId",
    "RoleLike",
    "SubjectLike",
]
