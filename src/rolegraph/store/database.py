"""Engine and session wiring for the SQLAlchemy role store."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from ..config import RoleGraphConfig

# Session.info key telling UserRecord whether to refresh roles before permission checks.
RELOAD_ROLES_KEY = "rolegraph.reload_roles_before_check"

# All store models inherit from this Base.
Base = declarative_base()


def create_engine_from_config(config: Optional[RoleGraphConfig] = None) -> Engine:
    """Create an engine for ``config.database_url``.

    SQLite connections are opened with ``check_same_thread=False`` so a
    session factory can be shared by worker threads.
    """
    config = config or RoleGraphConfig()
    connect_args = {"check_same_thread": False} if config.database_url.startswith("sqlite") else {}
    return create_engine(config.database_url, echo=config.database_echo, connect_args=connect_args)


def create_session_factory(
    config: Optional[RoleGraphConfig] = None,
    engine: Optional[Engine] = None,
) -> sessionmaker:
    """Session factory bound to the configured database.

    ``autoflush=False``: stores call ``commit()`` explicitly after each mutation.
    """
    config = config or RoleGraphConfig()
    return sessionmaker(
        bind=engine or create_engine_from_config(config),
        autoflush=False,
        info={RELOAD_ROLES_KEY: config.reload_roles_before_check},
    )


def init_db(engine: Engine) -> None:
    """Create every rolegraph table that does not exist yet."""
    from . import models  # noqa: F401  (registers tables on Base.metadata)

    Base.metadata.create_all(bind=engine)


__all__ = [
    "Base",
    "RELOAD_ROLES_KEY",
    "create_engine_from_config",
    "create_session_factory",
    "init_db",
]
