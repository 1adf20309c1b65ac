"""Subject-side authorization API.

``HasRoles`` is mixed into anything that owns a ``roles`` collection (the
in-memory :class:`Subject` below, or :class:`rolegraph.store.UserRecord`)
and exposes the resolver, aggregator and ability checks as methods, plus
role attach/detach through the subject's :class:`RoleAssignmentStore`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Hashable, Iterable, Mapping, Optional

from . import assignment
from .assignment import RoleAssignmentStore, RoleRef
from .exceptions import ConfigurationError
from .models import RoleLike
from .permissions import (
    AbilityOptions,
    AbilityResult,
    RoleSet,
    ability,
    collect_permission_ids,
    has_permission,
    has_permission_by_id,
    has_role,
    resolve_effective_roles,
    resolve_inherited_roles,
)
from .permissions.evaluator import NameList


class HasRoles:
    """Authorization methods for a subject with a ``roles`` collection.

    Subclasses provide :meth:`role_store`. When ``reload_roles_before_check``
    is true, ``can``, ``can_id``, ``permission_ids`` and ``ability`` refresh
    the role assignments from the store before evaluating.
    """

    reload_roles_before_check = False

    def role_store(self) -> RoleAssignmentStore:
        raise NotImplementedError

    def reload_roles(self) -> None:
        self.role_store().reload(self)

    def _prepare_check(self) -> None:
        if self.reload_roles_before_check:
            self.reload_roles()

    # ── Checks ─────────────────────────────────────────

    def role_list(self) -> RoleSet:
        """Owned roles plus everything they inherit."""
        return resolve_effective_roles(self)

    def inherited_role_list(self) -> RoleSet:
        """Only roles received through inheritance (may include owned roles)."""
        return resolve_inherited_roles(self)

    def has_role(self, name: str) -> bool:
        return has_role(self, name)

    def can(self, permission: str) -> bool:
        self._prepare_check()
        return has_permission(self, permission)

    def can_id(self, permission_id: Hashable) -> bool:
        self._prepare_check()
        return has_permission_by_id(self, permission_id)

    def permission_ids(self) -> frozenset[Hashable]:
        self._prepare_check()
        return collect_permission_ids(self)

    def ability(
        self,
        roles: NameList,
        permissions: NameList,
        options: AbilityOptions | Mapping[str, Any] | None = None,
    ) -> AbilityResult:
        """See :func:`rolegraph.permissions.ability`."""
        opts = AbilityOptions.coerce(options)
        self._prepare_check()
        return ability(self, roles, permissions, opts)

    # ── Assignment ─────────────────────────────────────

    def attach_role(self, role: RoleRef) -> None:
        """Attach a role given as a role value, an id, or ``{"id": ...}``."""
        assignment.attach_role(self.role_store(), self, role)

    def detach_role(self, role: RoleRef) -> None:
        assignment.detach_role(self.role_store(), self, role)

    def attach_roles(self, roles: Iterable[RoleRef]) -> None:
        assignment.attach_roles(self.role_store(), self, roles)

    def detach_roles(self, roles: Iterable[RoleRef]) -> None:
        assignment.detach_roles(self.role_store(), self, roles)


@dataclass(eq=False)
class Subject(HasRoles):
    """In-memory subject. Trusts its ``roles`` snapshot.

    Example::

        user = Subject(id=7, roles=[editor])
        user.can("posts.publish")
        user.ability("admin,editor", "posts.publish", {"return_type": "both"})
    """

    id: Any = None
    roles: list[RoleLike] = field(default_factory=list)
    store: Optional[RoleAssignmentStore] = field(default=None, repr=False)

    def role_store(self) -> RoleAssignmentStore:
        if self.store is None:
            raise ConfigurationError("Subject has no role store; pass store= to attach or detach roles")
        return self.store


__all__ = ["HasRoles", "Subject"]
