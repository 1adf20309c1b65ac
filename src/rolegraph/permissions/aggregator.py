"""Permission checks over a resolved role set.

Two permission sources exist on every role:

1. ``role.permissions`` — legacy inline list of permission *names*.
2. ``role.perms`` — structured permission entities with ``id`` and ``name``.

Name checks (``has_permission``) consult both sources and either one grants.
Id checks (``has_permission_by_id``, ``collect_permission_ids``) consult only
``perms``: the legacy list carries no ids. Keep this asymmetry when adding
new checks.

All functions trust the roles the subject carries right now. Refreshing a
stored subject's assignments is the caller's job (see
``HasRoles.reload_roles``).
"""

from __future__ import annotations

import logging
from typing import Hashable, Iterable

from ..models import RoleLike, SubjectLike
from .resolver import resolve_effective_roles

logger = logging.getLogger(__name__)


def _legacy_permissions(role: RoleLike) -> Iterable[str]:
    legacy = getattr(role, "permissions", None)
    if isinstance(legacy, (list, tuple)):
        return legacy
    return ()


def role_grants_permission(role: RoleLike, permission: str) -> bool:
    """Check one role's own permissions (legacy list, then ``perms``) by name."""
    if permission in _legacy_permissions(role):
        return True
    return any(perm.name == permission for perm in role.perms or ())


def roles_grant_permission(roles: Iterable[RoleLike], permission: str) -> bool:
    """Check a resolved role collection by permission name. Stops at first match."""
    return any(role_grants_permission(role, permission) for role in roles)


def roles_grant_permission_id(roles: Iterable[RoleLike], permission_id: Hashable) -> bool:
    """Check a resolved role collection by structured permission id."""
    return any(perm.id == permission_id for role in roles for perm in role.perms or ())


def has_permission(subject: SubjectLike, permission: str) -> bool:
    """Check if any effective role grants ``permission`` by name.

    Args:
        subject: Anything with a ``roles`` collection.
        permission: Permission name (e.g. ``"posts.publish"``).

    Returns:
        True if a legacy list or a structured permission matches.
        False for a subject without roles.

    Example::

        writer = Role(id=1, name="writer", permissions=["posts.create"])
        has_permission(Subject(roles=[writer]), "posts.create")  # True
    """
    granted = roles_grant_permission(resolve_effective_roles(subject), permission)
    logger.debug("Permission %r %s", permission, "granted" if granted else "denied")
    return granted


def has_permission_by_id(subject: SubjectLike, permission_id: Hashable) -> bool:
    """Check if any effective role holds a structured permission with ``permission_id``."""
    return roles_grant_permission_id(resolve_effective_roles(subject), permission_id)


def collect_permission_ids(subject: SubjectLike) -> frozenset[Hashable]:
    """Ids of every structured permission reachable through the effective role set."""
    return frozenset(perm.id for role in resolve_effective_roles(subject) for perm in role.perms or ())


__all__ = [
    "collect_permission_ids",
    "has_permission",
    "has_permission_by_id",
    "role_grants_permission",
    "roles_grant_permission",
    "roles_grant_permission_id",
]
