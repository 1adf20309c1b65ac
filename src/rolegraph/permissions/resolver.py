"""Role inheritance resolution.

Provides:
- ``resolve_effective_roles()`` — owned roles plus everything reachable
  through ``descendants()``.
- ``resolve_inherited_roles()`` — only what is reachable through at least one
  descendant edge from an owned role.
- ``has_role()`` — name membership in the effective role set.

Both traversals are breadth-first over a possibly cyclic graph. A role is
expanded only the first time it enters the result, so cycles and diamonds
terminate and every role appears once.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Iterable

from ..models import RoleLike, SubjectLike
from .roleset import RoleSet

logger = logging.getLogger(__name__)


def _walk(queue: deque[RoleLike]) -> RoleSet:
    role_set = RoleSet()
    while queue:
        role = queue.popleft()
        if role_set.add(role):
            queue.extend(role.descendants())
    return role_set


def expand_roles(roles: Iterable[RoleLike]) -> RoleSet:
    """Transitive closure of ``roles`` over descendant edges, seeds included."""
    return _walk(deque(roles))


def resolve_effective_roles(subject: SubjectLike) -> RoleSet:
    """Every role the subject effectively holds.

    Args:
        subject: Anything with a ``roles`` collection (duplicates allowed).

    Returns:
        RoleSet with the subject's own roles and all of their descendants.

    Example::

        admin = Role(id=1, name="admin").inherit(editor)
        resolve_effective_roles(Subject(roles=[admin])).names()
        # frozenset({"admin", "editor", ...})
    """
    role_set = expand_roles(subject.roles)
    logger.debug("Resolved %d effective roles: %r", len(role_set), role_set)
    return role_set


def resolve_inherited_roles(subject: SubjectLike) -> RoleSet:
    """Roles reached through at least one descendant edge.

    The walk is seeded with the descendants of each owned role, not the owned
    roles themselves. An owned role still shows up when another owned role
    (or a cycle) leads back to it.
    """
    queue: deque[RoleLike] = deque()
    for owned in subject.roles:
        queue.extend(owned.descendants())
    role_set = _walk(queue)
    logger.debug("Resolved %d inherited roles: %r", len(role_set), role_set)
    return role_set


def has_role(subject: SubjectLike, name: str) -> bool:
    """Check whether ``name`` is in the subject's effective role set."""
    return name in resolve_effective_roles(subject).names()


__all__ = [
    "expand_roles",
    "has_role",
    "resolve_effective_roles",
    "resolve_inherited_roles",
]
