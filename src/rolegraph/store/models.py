"""SQLAlchemy records for roles, permissions and role assignments.

Tables:
- ``roles`` — one row per role; ``permissions`` is the legacy JSON list of names.
- ``permissions`` — structured permissions.
- ``permission_role`` — role → permission grants.
- ``role_descendants`` — role → descendant role inheritance edges (cycles allowed).
- ``users`` / ``assigned_roles`` — subjects and their directly owned roles.

The records satisfy :class:`rolegraph.models.RoleLike` and
:class:`rolegraph.models.SubjectLike`, so the resolver walks them directly.
"""

from sqlalchemy import JSON, Column, ForeignKey, Integer, String, Table
from sqlalchemy.orm import object_session, relationship

from ..exceptions import StorageError
from ..subject import HasRoles
from .database import RELOAD_ROLES_KEY, Base

permission_role = Table(
    "permission_role",
    Base.metadata,
    Column("permission_id", Integer, ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)

role_descendants = Table(
    "role_descendants",
    Base.metadata,
    Column("role_id", Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
    Column("descendant_id", Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)

assigned_roles = Table(
    "assigned_roles",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


class PermissionRecord(Base):
    """A structured permission (id + unique name)."""

    __tablename__ = "permissions"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    display_name = Column(String, nullable=True)

    def __repr__(self) -> str:
        return f"PermissionRecord(id={self.id!r}, name={self.name!r})"


class RoleRecord(Base):
    """A stored role with its grants and inheritance edges."""

    __tablename__ = "roles"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False, index=True)
    permissions = Column(JSON, nullable=True)

    perms = relationship("PermissionRecord", secondary=permission_role)
    children = relationship(
        "RoleRecord",
        secondary=role_descendants,
        primaryjoin=id == role_descendants.c.role_id,
        secondaryjoin=id == role_descendants.c.descendant_id,
    )

    def descendants(self):
        return list(self.children)

    def __repr__(self) -> str:
        return f"RoleRecord(id={self.id!r}, name={self.name!r})"


class UserRecord(HasRoles, Base):
    """A stored subject.

    Role assignments are refreshed from the session before ``can``,
    ``can_id``, ``permission_ids`` and ``ability`` unless the session factory
    was built with ``reload_roles_before_check=False``.
    """

    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, nullable=False, index=True)

    roles = relationship("RoleRecord", secondary=assigned_roles)

    @property
    def reload_roles_before_check(self):
        session = object_session(self)
        return session is not None and session.info.get(RELOAD_ROLES_KEY, True)

    def role_store(self):
        from .repository import SqlAlchemyRoleStore

        session = object_session(self)
        if session is None:
            raise StorageError(f"User {self.username!r} is not attached to a session", user_id=self.id)
        return SqlAlchemyRoleStore(session)

    def __repr__(self) -> str:
        return f"UserRecord(id={self.id!r}, username={self.username!r})"


__all__ = [
    "PermissionRecord",
    "RoleRecord",
    "UserRecord",
    "assigned_roles",
    "permission_role",
    "role_descendants",
]
