"""Role assignment boundary.

A role reference (``RoleRef``) may be a role value, a raw role id, or a
mapping carrying an ``"id"`` key. :func:`to_role_id` turns any of them into
an id before a :class:`RoleAssignmentStore` is asked to attach or detach.

Stores own persistence. The resolver never calls them; a mutation only
makes previously computed RoleSets stale.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable, Mapping, Union

from .exceptions import InvalidRoleReferenceError, RoleNotFoundError
from .logging import get_subject_logger
from .models import Role, RoleId, RoleLike
from .permissions.roleset import role_key

RoleRef = Union[RoleLike, int, str, Mapping[str, Any]]


def to_role_id(ref: RoleRef) -> RoleId:
    """Normalize a role reference to the role's id.

    Raises:
        InvalidRoleReferenceError: For ``None``, booleans, mappings without
            ``"id"`` or with ``"id": None``, and objects whose ``id`` is missing
            or ``None``.
    """
    if isinstance(ref, bool) or ref is None:
        raise InvalidRoleReferenceError(f"Not a role reference: {ref!r}", ref=repr(ref))
    if isinstance(ref, (int, str)):
        return ref
    if isinstance(ref, Mapping):
        if "id" not in ref:
            raise InvalidRoleReferenceError("Role mapping has no 'id' key", keys=sorted(map(str, ref)))
        if ref["id"] is None:
            raise InvalidRoleReferenceError("Role mapping has a null 'id'", ref=repr(ref))
        return ref["id"]
    role_id = getattr(ref, "id", None)
    if role_id is None:
        raise InvalidRoleReferenceError(
            f"{type(ref).__name__} has no id; save the role before assigning it",
            ref=repr(ref),
        )
    return role_id


class RoleAssignmentStore(ABC):
    """Adds and removes subject → role edges by role id."""

    @abstractmethod
    def attach(self, subject: Any, role_id: RoleId) -> None:
        """Give ``subject`` the role. Already attached = no-op.

        Raises:
            RoleNotFoundError: If no role has ``role_id``.
        """

    @abstractmethod
    def detach(self, subject: Any, role_id: RoleId) -> None:
        """Remove the role from ``subject``. Not attached = no-op."""

    @abstractmethod
    def reload(self, subject: Any) -> None:
        """Bring ``subject.roles`` up to date with stored assignments."""


def attach_role(store: RoleAssignmentStore, subject: Any, role: RoleRef) -> None:
    store.attach(subject, to_role_id(role))


def detach_role(store: RoleAssignmentStore, subject: Any, role: RoleRef) -> None:
    store.detach(subject, to_role_id(role))


def attach_roles(store: RoleAssignmentStore, subject: Any, roles: Iterable[RoleRef]) -> None:
    for role in roles:
        attach_role(store, subject, role)


def detach_roles(store: RoleAssignmentStore, subject: Any, roles: Iterable[RoleRef]) -> None:
    for role in roles:
        detach_role(store, subject, role)


class InMemoryRoleStore(RoleAssignmentStore):
    """Assignment store over a registry of in-memory roles.

    ``subject.roles`` is the stored state, so :meth:`reload` has nothing to do.

    Example::

        store = InMemoryRoleStore([admin, editor])
        user = Subject(store=store)
        user.attach_role({"id": admin.id})
    """

    def __init__(self, roles: Iterable[Role] = ()) -> None:
        self._roles: dict[RoleId, Role] = {}
        for role in roles:
            self.register(role)

    def register(self, role: Role) -> Role:
        self._roles[role_key(role)] = role
        return role

    def get(self, role_id: RoleId) -> Role:
        try:
            return self._roles[role_id]
        except KeyError:
            raise RoleNotFoundError(f"Role with id {role_id!r} not found", role_id=role_id) from None

    def attach(self, subject: Any, role_id: RoleId) -> None:
        role = self.get(role_id)
        if any(role_key(owned) == role_id for owned in subject.roles):
            return
        subject.roles.append(role)
        get_subject_logger(__name__, getattr(subject, "id", None)).info("Attached role %r (%s)", role.name, role_id)

    def detach(self, subject: Any, role_id: RoleId) -> None:
        kept = [owned for owned in subject.roles if role_key(owned) != role_id]
        if len(kept) != len(subject.roles):
            subject.roles[:] = kept
            get_subject_logger(__name__, getattr(subject, "id", None)).info("Detached role %r", role_id)

    def reload(self, subject: Any) -> None:
        return None


__all__ = [
    "InMemoryRoleStore",
    "RoleAssignmentStore",
    "RoleRef",
    "attach_role",
    "attach_roles",
    "detach_role",
    "detach_roles",
    "to_role_id",
]
