"""SQLAlchemy-backed role repository and assignment store."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..assignment import RoleAssignmentStore
from ..exceptions import RoleNotFoundError, StorageError
from ..logging import get_subject_logger
from ..models import RoleId
from .models import PermissionRecord, RoleRecord, UserRecord

logger = logging.getLogger(__name__)


class _SessionMixin:
    db: Session

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("%s failed: %s", action, e)
            raise StorageError(f"{action} failed: {e}", action=action) from e


class SqlAlchemyRoleRepository(_SessionMixin):
    """Creates and looks up roles, permissions and users."""

    def __init__(self, db_session: Session):
        self.db = db_session

    def find_role_by_id(self, role_id: RoleId) -> Optional[RoleRecord]:
        return self.db.get(RoleRecord, role_id)

    def find_role_by_name(self, name: str) -> Optional[RoleRecord]:
        return self.db.query(RoleRecord).filter(RoleRecord.name == name).first()

    def list_roles(self) -> List[RoleRecord]:
        return self.db.query(RoleRecord).order_by(RoleRecord.name.asc()).all()

    def create_role(self, name: str, legacy_permissions: Optional[Iterable[str]] = None) -> RoleRecord:
        role = RoleRecord(
            name=name,
            permissions=list(legacy_permissions) if legacy_permissions is not None else None,
        )
        self.db.add(role)
        self._commit(f"Create role {name!r}")
        self.db.refresh(role)
        return role

    def create_permission(self, name: str, display_name: Optional[str] = None) -> PermissionRecord:
        permission = PermissionRecord(name=name, display_name=display_name)
        self.db.add(permission)
        self._commit(f"Create permission {name!r}")
        self.db.refresh(permission)
        return permission

    def create_user(self, username: str) -> UserRecord:
        user = UserRecord(username=username)
        self.db.add(user)
        self._commit(f"Create user {username!r}")
        self.db.refresh(user)
        return user

    def grant(self, role: RoleRecord, *permissions: PermissionRecord) -> RoleRecord:
        """Add structured permissions to a role. Already granted = skipped."""
        for permission in permissions:
            if permission not in role.perms:
                role.perms.append(permission)
        self._commit(f"Grant permissions to role {role.name!r}")
        return role

    def inherit(self, role: RoleRecord, *descendants: RoleRecord) -> RoleRecord:
        """Add inheritance edges ``role`` → each descendant. Cycles are allowed."""
        for descendant in descendants:
            if descendant not in role.children:
                role.children.append(descendant)
        self._commit(f"Add descendants to role {role.name!r}")
        return role


class SqlAlchemyRoleStore(_SessionMixin, RoleAssignmentStore):
    """Attach/detach roles on a :class:`UserRecord` and commit."""

    def __init__(self, db_session: Session):
        self.db = db_session

    def attach(self, subject: UserRecord, role_id: RoleId) -> None:
        role = self.db.get(RoleRecord, role_id)
        if role is None:
            raise RoleNotFoundError(f"Role with id {role_id!r} not found", role_id=role_id)
        if role in subject.roles:
            return
        subject.roles.append(role)
        self._commit(f"Attach role {role_id!r}")
        get_subject_logger(__name__, subject.id).info("Attached role %r (%s)", role.name, role_id)

    def detach(self, subject: UserRecord, role_id: RoleId) -> None:
        role = self.db.get(RoleRecord, role_id)
        if role is None or role not in subject.roles:
            return
        subject.roles.remove(role)
        self._commit(f"Detach role {role_id!r}")
        get_subject_logger(__name__, subject.id).info("Detached role %r (%s)", role.name, role_id)

    def reload(self, subject: UserRecord) -> None:
        """Drop the cached ``roles`` collection; the next access re-reads it."""
        try:
            self.db.expire(subject, ["roles"])
        except SQLAlchemyError as e:
            logger.error("Reload roles for user %s failed: %s", subject.id, e)
            raise StorageError(f"Reload roles failed: {e}", user_id=subject.id) from e


__all__ = [
    "SqlAlchemyRoleRepository",
    "SqlAlchemyRoleStore",
]
