"""Role service — CRUD, ordering and the ensure-role step."""

import logging
from typing import Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from tribe_console.db.session import atomic
from tribe_console.models.role import Role
from tribe_console.models.rank import Rank, RoleRank, RoleRankOverride
from tribe_console.models.access_list import RoleAccess
from tribe_console.models.member import MemberRole, MemberRank
from tribe_console.core.exceptions import (
    ResourceConflictError, ResourceNotFoundError, ValidationError,
)
from tribe_console.services.ordering import apply_order, clean_ids

logger = logging.getLogger("tribe_console")


def sanitize_role_names(names: Optional[Iterable[str]]) -> List[str]:
    """Trim role names, dropping blanks and repeats while keeping order."""
    if not names:
        return []
    cleaned: List[str] = []
    for item in names:
        name = item.strip() if isinstance(item, str) else ""
        if name and name not in cleaned:
            cleaned.append(name)
    return cleaned


def require_name(name: Optional[str], field: str = "name") -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError(f"{field} is required.")
    return name.strip()


class RoleService:
    """Manages tribe roles."""

    @staticmethod
    def list_roles(db: Session) -> List[Role]:
        """All roles ordered by sort order, ties by name."""
        return db.query(Role).order_by(Role.sort_order, Role.name).all()

    @staticmethod
    def get(db: Session, role_id: str) -> Role:
        """Get a role by id."""
        role = db.query(Role).filter(Role.id == role_id).first()
        if not role:
            raise ResourceNotFoundError(f"Role {role_id} not found")
        return role

    @staticmethod
    def get_by_name(db: Session, name: str) -> Optional[Role]:
        return db.query(Role).filter(Role.name == name).first()

    @staticmethod
    def next_sort_order(db: Session) -> int:
        current = db.query(func.max(Role.sort_order)).scalar()
        return (current or 0) + 1

    @staticmethod
    def create(
        db: Session,
        name: Optional[str],
        description: Optional[str] = None,
        sort_order: Optional[int] = None,
    ) -> Role:
        """Create a role; without a sort order it is placed last."""
        name = require_name(name)
        if RoleService.get_by_name(db, name):
            raise ResourceConflictError(f"Role '{name}' already exists")

        with atomic(db):
            role = Role(
                name=name,
                description=description,
                sort_order=sort_order if sort_order is not None else RoleService.next_sort_order(db),
            )
            db.add(role)
        db.refresh(role)
        return role

    @staticmethod
    def update(
        db: Session,
        role_id: str,
        name: Optional[str],
        description: Optional[str] = None,
        sort_order: Optional[int] = None,
    ) -> Role:
        """Rename/describe a role. The sort order is kept unless given."""
        name = require_name(name)
        role = RoleService.get(db, role_id)
        clash = RoleService.get_by_name(db, name)
        if clash and clash.id != role.id:
            raise ResourceConflictError(f"Role '{name}' already exists")

        with atomic(db):
            role.name = name
            role.description = description
            if sort_order is not None:
                role.sort_order = sort_order
        db.refresh(role)
        return role

    @staticmethod
    def delete(db: Session, role_id: str) -> None:
        """Delete a role and everything that referenced it.

        Bindings, overrides, the role's scoped ranks, member links and
        access-list links all go in the same transaction, so no permission
        or rank assignment outlives the role.
        """
        role = RoleService.get(db, role_id)
        role_name = role.name
        with atomic(db):
            scoped_ids = [r.id for r in db.query(Rank.id).filter(Rank.role_id == role.id).all()]
            if scoped_ids:
                db.query(RoleRank).filter(RoleRank.rank_id.in_(scoped_ids)).delete()
                db.query(RoleRankOverride).filter(
                    RoleRankOverride.rank_id.in_(scoped_ids)
                ).delete()
                db.query(MemberRank).filter(MemberRank.rank_id.in_(scoped_ids)).delete()
                db.query(Rank).filter(Rank.id.in_(scoped_ids)).delete()

            db.query(RoleRank).filter(RoleRank.role_id == role.id).delete()
            db.query(RoleRankOverride).filter(RoleRankOverride.role_id == role.id).delete()
            db.query(MemberRank).filter(MemberRank.role_id == role.id).delete()
            db.query(MemberRole).filter(MemberRole.role_id == role.id).delete()
            db.query(RoleAccess).filter(RoleAccess.role_id == role.id).delete()
            db.delete(role)
        logger.info("Deleted role %s (%s) with %d scoped ranks", role_id, role_name, len(scoped_ids))

    @staticmethod
    def reorder(db: Session, role_ids: Iterable[str]) -> int:
        """Rewrite role sort orders from a full ordered id list."""
        ordered = clean_ids(role_ids)
        with atomic(db):
            rows = db.query(Role).filter(Role.id.in_(ordered)).all() if ordered else []
            updated = apply_order({r.id: r for r in rows}, ordered)
        logger.info("Reordered %d of %d roles", updated, len(ordered))
        return updated

    @staticmethod
    def ensure_roles(db: Session, names: Iterable[str]) -> List[Role]:
        """Return roles for ``names``, creating the missing ones.

        Runs inside the caller's transaction (flush only). New roles are
        placed last in the role order.
        """
        roles: List[Role] = []
        for name in sanitize_role_names(names):
            role = RoleService.get_by_name(db, name)
            if role is None:
                role = Role(name=name, sort_order=RoleService.next_sort_order(db))
                db.add(role)
                db.flush()
                logger.info("Created role '%s' on first reference", name)
            roles.append(role)
        return roles


role_service = RoleService()
