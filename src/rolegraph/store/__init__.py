"""SQLAlchemy persistence for roles, permissions and role assignments.

Usage::

    from rolegraph.store import SqlAlchemyRoleRepository, create_session_factory, init_db

    SessionLocal = create_session_factory(config)
    init_db(SessionLocal.kw["bind"])

    with SessionLocal() as session:
        repo = SqlAlchemyRoleRepository(session)
        user = repo.create_user("alice")
        user.attach_role(repo.find_role_by_name("editor"))
        user.can("posts.publish")
"""

from .database import (
    RELOAD_ROLES_KEY,
    Base,
    create_engine_from_config,
    create_session_factory,
    init_db,
)
from .models import (
    PermissionRecord,
    RoleRecord,
    UserRecord,
    assigned_roles,
    permission_role,
    role_descendants,
)
from .repository import SqlAlchemyRoleRepository, SqlAlchemyRoleStore

__all__ = [
    "Base",
    "PermissionRecord",
    "RELOAD_ROLES_KEY",
    "RoleRecord",
    "SqlAlchemyRoleRepository",
    "SqlAlchemyRoleStore",
    "UserRecord",
    "assigned_roles",
    "create_engine_from_config",
    "create_session_factory",
    "init_db",
    "permission_role",
    "role_descendants",
]
