"""Role graph resolution and authorization checks.

Defines:
- RoleSet / role_key: deduplicated role collections
- resolve_effective_roles() / resolve_inherited_roles(): cycle-safe expansion
- has_role(), has_permission(), has_permission_by_id(), collect_permission_ids()
- ability(): batch role + permission decision with AbilityOptions
"""

from .aggregator import (
    collect_permission_ids,
    has_permission,
    has_permission_by_id,
    role_grants_permission,
    roles_grant_permission,
    roles_grant_permission_id,
)
from .evaluator import (
    AbilityChecks,
    AbilityOptions,
    AbilityResult,
    ReturnType,
    ability,
    split_names,
)
from .resolver import (
    expand_roles,
    has_role,
    resolve_effective_roles,
    resolve_inherited_roles,
)
from .roleset import RoleSet, role_key

__all__ = [
    "AbilityChecks",
    "AbilityOptions",
    "AbilityResult",
    "ReturnType",
    "RoleSet",
    "ability",
    "collect_permission_ids",
    "expand_roles",
    "has_permission",
    "has_permission_by_id",
    "has_role",
    "resolve_effective_roles",
    "resolve_inherited_roles",
    "role_grants_permission",
    "role_key",
    "roles_grant_permission",
    "roles_grant_permission_id",
    "split_names",
]
