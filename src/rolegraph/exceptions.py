"""Exception hierarchy for rolegraph.

All errors raised by the package inherit from RoleGraphError and carry a
stable ``code`` plus keyword ``details``.

Usage:
    from rolegraph.exceptions import (
        RoleGraphError,
        InvalidConfigurationError,
        RoleNotFoundError,
    )
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "RoleGraphError",
    "ConfigurationError",
    "InvalidConfigurationError",
    "InvalidRoleReferenceError",
    "RoleNotFoundError",
    "StorageError",
]


# ---- Exception Hierarchy ----------------------------------------------------


class RoleGraphError(Exception):
    """Base exception for rolegraph.

    Attributes:
        code: Stable error code string (e.g. "ROLE_NOT_FOUND").
        message: Human-readable error description.
        details: Additional context as keyword arguments.
    """

    code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"

    def __init__(self, message: str | None = None, code: str | None = None, **kwargs: Any) -> None:
        self.message = message or self.message
        self.code = code or self.code
        self.details = kwargs
        super().__init__(self.message)


class ConfigurationError(RoleGraphError):
    """Invalid or missing package configuration."""

    code: str = "CONFIGURATION_ERROR"
    message: str = "Invalid configuration"


class InvalidConfigurationError(ConfigurationError):
    """Invalid options passed to ``ability()``.

    Raised before any role or permission is evaluated.
    """

    code: str = "INVALID_CONFIGURATION"
    message: str = "Invalid ability options"


class InvalidRoleReferenceError(RoleGraphError):
    """A role reference is not a role, a raw id, or a mapping with an ``id`` key."""

    code: str = "INVALID_ROLE_REFERENCE"
    message: str = "Invalid role reference"


class RoleNotFoundError(RoleGraphError):
    """No role exists for the given id."""

    code: str = "ROLE_NOT_FOUND"
    message: str = "Role not found"


class StorageError(RoleGraphError):
    """Persistence layer failure while reading or mutating assignments."""

    code: str = "STORAGE_ERROR"
    message: str = "Storage operation failed"
