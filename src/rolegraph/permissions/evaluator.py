"""Composite role + permission checks.

Provides:
- ``ReturnType`` — result shape (boolean / array / both).
- ``AbilityOptions`` — validated option bag for :func:`ability`.
- ``ability()`` — evaluate a batch of required roles and permissions
  with an all-or-any policy.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Iterable, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, ValidationError

from ..exceptions import InvalidConfigurationError
from ..logging import safe_preview
from ..models import SubjectLike
from .aggregator import roles_grant_permission
from .resolver import resolve_effective_roles

logger = logging.getLogger(__name__)

NameList = Union[str, Iterable[str], None]
AbilityChecks = dict[str, dict[str, bool]]
AbilityResult = Union[bool, AbilityChecks, tuple[bool, AbilityChecks]]


class ReturnType(str, Enum):
    """Shape of the value returned by :func:`ability`.

    - ``BOOLEAN`` — the composite decision alone.
    - ``ARRAY`` — ``{"roles": {...}, "permissions": {...}}`` without the decision.
    - ``BOTH`` — ``(decision, {"roles": {...}, "permissions": {...}})``.
    """

    BOOLEAN = "boolean"
    ARRAY = "array"
    BOTH = "both"


class AbilityOptions(BaseModel):
    """Options for :func:`ability`.

    Args:
        validate_all: True = every listed role AND permission must hold;
            False = at least one must hold. Must be a real ``bool``.
        return_type: One of :class:`ReturnType` (or its string value).

    ``validateAll`` / ``returnType`` are accepted as aliases. Unknown keys are
    rejected.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    validate_all: StrictBool = Field(default=False, alias="validateAll")
    return_type: ReturnType = Field(default=ReturnType.BOOLEAN, alias="returnType")

    @classmethod
    def coerce(cls, options: "AbilityOptions | Mapping[str, Any] | None") -> "AbilityOptions":
        """Build options from ``None``, a mapping, or an existing instance.

        Raises:
            InvalidConfigurationError: If any option is missing its allowed type/value.
        """
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        if not isinstance(options, Mapping):
            raise InvalidConfigurationError(
                f"Ability options must be a mapping or AbilityOptions, got {type(options).__name__}"
            )
        try:
            return cls.model_validate(dict(options))
        except ValidationError as exc:
            raise InvalidConfigurationError(
                f"Invalid ability options: {safe_preview(dict(options))}",
                errors=exc.errors(include_url=False),
            ) from exc


def split_names(value: NameList) -> list[str]:
    """Normalize a role/permission argument to a list of names.

    A string is split on commas with empty pieces kept, so ``""`` becomes
    ``[""]`` and ``"a,,b"`` becomes ``["a", "", "b"]``. Those empty names are
    evaluated like any other and never match.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return value.split(",")
    return list(value)


def ability(
    subject: SubjectLike,
    roles: NameList,
    permissions: NameList,
    options: AbilityOptions | Mapping[str, Any] | None = None,
) -> AbilityResult:
    """Check a batch of roles and permissions in one decision.

    Args:
        subject: Anything with a ``roles`` collection.
        roles: Required role names, as a sequence or a comma-separated string.
        permissions: Required permission names, same forms as ``roles``.
        options: ``validate_all`` (default False) and ``return_type``
            (default ``"boolean"``).

    Returns:
        Depends on ``return_type``: ``bool``, the checks mapping, or a
        ``(bool, checks)`` tuple.

    Raises:
        InvalidConfigurationError: Before any check runs, if options are invalid.

    Example::

        ability(user, "admin,editor", ["posts.publish"])
        # True if user is admin OR editor OR can posts.publish

        ability(user, ["admin"], [], {"validate_all": True, "return_type": "both"})
        # (False, {"roles": {"admin": False}, "permissions": {}})

    With both lists empty the decision is True when ``validate_all`` is set
    (nothing failed) and False otherwise (nothing passed).
    """
    opts = AbilityOptions.coerce(options)

    role_names = split_names(roles)
    permission_names = split_names(permissions)

    role_set = resolve_effective_roles(subject)
    held = role_set.names()

    # Duplicate names collapse; the last evaluation wins.
    checked_roles: dict[str, bool] = {}
    for name in role_names:
        checked_roles[name] = name in held

    checked_permissions: dict[str, bool] = {}
    for name in permission_names:
        checked_permissions[name] = roles_grant_permission(role_set, name)

    results = [*checked_roles.values(), *checked_permissions.values()]
    decision = all(results) if opts.validate_all else any(results)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Ability %s (validate_all=%s): roles=%s permissions=%s",
            "granted" if decision else "denied",
            opts.validate_all,
            safe_preview(checked_roles),
            safe_preview(checked_permissions),
        )

    checks: AbilityChecks = {"roles": checked_roles, "permissions": checked_permissions}
    if opts.return_type is ReturnType.BOOLEAN:
        return decision
    if opts.return_type is ReturnType.ARRAY:
        return checks
    return decision, checks


__all__ = [
    "AbilityChecks",
    "AbilityOptions",
    "AbilityResult",
    "ReturnType",
    "ability",
    "split_names",
]
