"""Configuration contract for rolegraph.

Pydantic-validated settings shared by the logging setup and the SQLAlchemy
store. Application code should build a ``RoleGraphConfig`` once (directly or
via ``load_config_from_env()``) and pass it down instead of reading
``os.environ`` itself.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator


class LogLevel(str, Enum):
    """Standard log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class RoleGraphConfig(BaseModel):
    """Settings for a rolegraph deployment.

    Environment variables (see :func:`load_config_from_env`):
        ROLEGRAPH_LOG_LEVEL                  — DEBUG | INFO | WARNING | ERROR | CRITICAL
        ROLEGRAPH_LOG_JSON                   — JSON log lines (default: false)
        ROLEGRAPH_DATABASE_URL               — SQLAlchemy URL for the role store
        ROLEGRAPH_DATABASE_ECHO              — echo SQL statements (default: false)
        ROLEGRAPH_RELOAD_ROLES_BEFORE_CHECK  — refresh ORM role assignments before
                                               permission checks (default: true)
    """

    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level",
    )
    log_json: bool = Field(
        default=False,
        description="Use JSON log format (default: plain text)",
    )

    database_url: str = Field(
        default="sqlite:///rolegraph.db",
        description="SQLAlchemy database URL for roles, permissions and assignments",
    )
    database_echo: bool = Field(
        default=False,
        description="Log every SQL statement issued by the store",
    )

    reload_roles_before_check: bool = Field(
        default=True,
        description=(
            "Refresh a stored subject's role assignments before can/can_id/permission_ids. "
            "In-memory subjects always trust their snapshot."
        ),
    )

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Require a URL with a dialect prefix."""
        if "://" not in v:
            raise ValueError("Database URL must look like 'dialect://...', e.g. sqlite:///rolegraph.db")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Convert string to LogLevel enum."""
        if isinstance(v, LogLevel):
            return v
        if isinstance(v, str):
            try:
                return LogLevel[v.upper()]
            except KeyError:
                raise ValueError(f"Invalid log level: {v}. Must be one of {[e.value for e in LogLevel]}")
        raise ValueError(f"Log level must be string or LogLevel enum, got {type(v)}")

    model_config = {
        "use_enum_values": True,
        "extra": "forbid",
    }


_TRUTHY = ("true", "1", "yes", "on")


def load_config_from_env() -> RoleGraphConfig:
    """Load configuration from ``ROLEGRAPH_*`` environment variables.

    This is the only place where the package reads the environment.

    Returns:
        RoleGraphConfig with values from environment or defaults.
    """
    import os

    return RoleGraphConfig(
        log_level=os.getenv("ROLEGRAPH_LOG_LEVEL", "INFO"),
        log_json=os.getenv("ROLEGRAPH_LOG_JSON", "false").lower() in _TRUTHY,
        database_url=os.getenv("ROLEGRAPH_DATABASE_URL", "sqlite:///rolegraph.db"),
        database_echo=os.getenv("ROLEGRAPH_DATABASE_ECHO", "false").lower() in _TRUTHY,
        reload_roles_before_check=os.getenv("ROLEGRAPH_RELOAD_ROLES_BEFORE_CHECK", "true").lower() in _TRUTHY,
    )


__all__ = [
    "LogLevel",
    "RoleGraphConfig",
    "load_config_from_env",
]
