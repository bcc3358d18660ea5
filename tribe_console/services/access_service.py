"""Access-list service — the permission buckets and the authorization check."""

import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from tribe_console.db.session import atomic
from tribe_console.models.access_list import AccessList, RoleAccess
from tribe_console.models.role import Role
from tribe_console.core.exceptions import ResourceConflictError, ResourceNotFoundError
from tribe_console.services.resolvers import can_perform
from tribe_console.services.role_service import role_service, require_name

logger = logging.getLogger("tribe_console")


class AccessService:
    """Manages access lists and answers "can this role do that"."""

    @staticmethod
    def role_names(db: Session, access_list_id: str) -> List[str]:
        rows = (
            db.query(Role.name)
            .join(RoleAccess, RoleAccess.role_id == Role.id)
            .filter(RoleAccess.access_list_id == access_list_id)
            .order_by(Role.sort_order, Role.name)
            .all()
        )
        return [row.name for row in rows]

    @staticmethod
    def granted_roles(db: Session, access_list_name: str) -> Optional[List[str]]:
        """Role names on the named access list, or None if there is no such list."""
        access_list = db.query(AccessList).filter(AccessList.name == access_list_name).first()
        if access_list is None:
            return None
        return AccessService.role_names(db, access_list.id)

    @staticmethod
    def can_perform(db: Session, actor_role_name: Optional[str], access_list_name: str) -> bool:
        """Whether ``actor_role_name`` is on the ``access_list_name`` list."""
        if not (actor_role_name or "").strip():
            return False
        return can_perform(actor_role_name, AccessService.granted_roles(db, access_list_name))

    @staticmethod
    def to_dict(db: Session, access_list: AccessList) -> Dict[str, Any]:
        return {
            "id": access_list.id,
            "name": access_list.name,
            "description": access_list.description,
            "roles": AccessService.role_names(db, access_list.id),
        }

    @staticmethod
    def list_access_lists(db: Session) -> List[Dict[str, Any]]:
        """All access lists with their role names, ordered by name."""
        lists = db.query(AccessList).order_by(AccessList.name).all()
        return [AccessService.to_dict(db, a) for a in lists]

    @staticmethod
    def get(db: Session, access_list_id: str) -> AccessList:
        access_list = db.query(AccessList).filter(AccessList.id == access_list_id).first()
        if not access_list:
            raise ResourceNotFoundError(f"Access list {access_list_id} not found")
        return access_list

    @staticmethod
    def _check_name_free(db: Session, name: str, exclude_id: Optional[str] = None) -> None:
        query = db.query(AccessList).filter(AccessList.name == name)
        if exclude_id:
            query = query.filter(AccessList.id != exclude_id)
        if query.first():
            raise ResourceConflictError(f"Access list '{name}' already exists")

    @staticmethod
    def _write_roles(db: Session, access_list: AccessList, role_names: Iterable[str]) -> None:
        """Replace the list's roles. Unknown role names are created first."""
        roles = role_service.ensure_roles(db, role_names)
        db.query(RoleAccess).filter(RoleAccess.access_list_id == access_list.id).delete()
        for role in roles:
            db.add(RoleAccess(role_id=role.id, access_list_id=access_list.id))

    @staticmethod
    def create(
        db: Session,
        name: Optional[str],
        description: Optional[str] = None,
        roles: Optional[Iterable[str]] = None,
    ) -> Dict[str, Any]:
        """Create an access list granted to ``roles``."""
        name = require_name(name)
        AccessService._check_name_free(db, name)

        with atomic(db):
            access_list = AccessList(name=name, description=description)
            db.add(access_list)
            db.flush()
            AccessService._write_roles(db, access_list, roles or [])
        return AccessService.to_dict(db, access_list)

    @staticmethod
    def update(
        db: Session,
        access_list_id: str,
        name: Optional[str],
        description: Optional[str] = None,
        roles: Optional[Iterable[str]] = None,
    ) -> Dict[str, Any]:
        """Update an access list. ``roles`` None leaves its role set untouched."""
        name = require_name(name)
        access_list = AccessService.get(db, access_list_id)
        AccessService._check_name_free(db, name, exclude_id=access_list.id)

        with atomic(db):
            access_list.name = name
            access_list.description = description
            if roles is not None:
                AccessService._write_roles(db, access_list, roles)
        return AccessService.to_dict(db, access_list)

    @staticmethod
    def delete(db: Session, access_list_id: str) -> None:
        access_list = AccessService.get(db, access_list_id)
        with atomic(db):
            db.query(RoleAccess).filter(RoleAccess.access_list_id == access_list.id).delete()
            db.delete(access_list)
        logger.info("Deleted access list %s", access_list_id)


access_service = AccessService()
