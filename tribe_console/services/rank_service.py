"""Rank service — ranks, role-rank bindings and per-role rank overrides."""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from tribe_console.db.session import atomic
from tribe_console.models.rank import Rank, RoleRank, RoleRankOverride
from tribe_console.models.member import MemberRank
from tribe_console.core.exceptions import (
    ResourceConflictError, ResourceNotFoundError, ValidationError,
)
from tribe_console.services.ordering import apply_order, clean_ids
from tribe_console.services.resolvers import compose_available_ranks
from tribe_console.services.role_service import role_service, require_name

logger = logging.getLogger("tribe_console")


def _scope_filter(role_id: Optional[str]):
    return Rank.role_id.is_(None) if role_id is None else Rank.role_id == role_id


class RankService:
    """Manages global and role-scoped ranks and how roles use them."""

    # ---- Ranks ----

    @staticmethod
    def list_ranks(db: Session, role_id: Optional[str] = None) -> List[Rank]:
        """All ranks, or only those scoped to ``role_id``."""
        query = db.query(Rank)
        if role_id:
            query = query.filter(Rank.role_id == role_id)
        return query.order_by(Rank.sort_order, Rank.name).all()

    @staticmethod
    def get(db: Session, rank_id: str) -> Rank:
        """Get a rank by id."""
        rank = db.query(Rank).filter(Rank.id == rank_id).first()
        if not rank:
            raise ResourceNotFoundError(f"Rank {rank_id} not found")
        return rank

    @staticmethod
    def _check_name_free(db: Session, name: str, role_id: Optional[str], exclude_id: Optional[str] = None) -> None:
        query = db.query(Rank).filter(Rank.name == name, _scope_filter(role_id))
        if exclude_id:
            query = query.filter(Rank.id != exclude_id)
        if query.first():
            scope = "global ranks" if role_id is None else "this role's ranks"
            raise ResourceConflictError(f"Rank '{name}' already exists among {scope}")

    @staticmethod
    def create(
        db: Session,
        name: Optional[str],
        description: Optional[str] = None,
        sort_order: Optional[int] = None,
        role_id: Optional[str] = None,
    ) -> Rank:
        """Create a global rank, or a rank scoped to ``role_id``."""
        name = require_name(name)
        if role_id:
            role_service.get(db, role_id)
        else:
            role_id = None
        RankService._check_name_free(db, name, role_id)

        with atomic(db):
            if sort_order is None:
                current = db.query(func.max(Rank.sort_order)).filter(_scope_filter(role_id)).scalar()
                sort_order = (current or 0) + 1
            rank = Rank(name=name, description=description, sort_order=sort_order, role_id=role_id)
            db.add(rank)
        db.refresh(rank)
        return rank

    @staticmethod
    def update(
        db: Session,
        rank_id: str,
        name: Optional[str],
        description: Optional[str] = None,
        sort_order: Optional[int] = None,
    ) -> Rank:
        """Rename/describe a rank. Its owning role never changes."""
        name = require_name(name)
        rank = RankService.get(db, rank_id)
        RankService._check_name_free(db, name, rank.role_id, exclude_id=rank.id)

        with atomic(db):
            rank.name = name
            rank.description = description
            if sort_order is not None:
                rank.sort_order = sort_order
        db.refresh(rank)
        return rank

    @staticmethod
    def delete(db: Session, rank_id: str) -> None:
        """Delete a rank with its bindings, overrides and member assignments."""
        rank = RankService.get(db, rank_id)
        with atomic(db):
            db.query(RoleRank).filter(RoleRank.rank_id == rank.id).delete()
            db.query(RoleRankOverride).filter(RoleRankOverride.rank_id == rank.id).delete()
            db.query(MemberRank).filter(MemberRank.rank_id == rank.id).delete()
            db.delete(rank)
        logger.info("Deleted rank %s", rank_id)

    @staticmethod
    def reorder(db: Session, rank_ids: Iterable[str]) -> int:
        """Rewrite rank sort orders from a full ordered id list."""
        ordered = clean_ids(rank_ids)
        with atomic(db):
            rows = db.query(Rank).filter(Rank.id.in_(ordered)).all() if ordered else []
            updated = apply_order({r.id: r for r in rows}, ordered)
        logger.info("Reordered %d of %d ranks", updated, len(ordered))
        return updated

    # ---- Role-rank bindings ----

    @staticmethod
    def list_role_ranks(db: Session, role_id: Optional[str] = None) -> List[RoleRank]:
        query = db.query(RoleRank)
        if role_id:
            query = query.filter(RoleRank.role_id == role_id)
        return query.order_by(RoleRank.role_id, RoleRank.sort_order, RoleRank.rank_id).all()

    @staticmethod
    def _usable_ranks(db: Session, role_id: str, rank_ids: List[str]) -> Dict[str, Rank]:
        """Load ``rank_ids`` and check each is global or scoped to ``role_id``."""
        ranks = {r.id: r for r in db.query(Rank).filter(Rank.id.in_(rank_ids)).all()} if rank_ids else {}
        for rank_id in rank_ids:
            rank = ranks.get(rank_id)
            if rank is None:
                raise ResourceNotFoundError(f"Rank {rank_id} not found")
            if rank.role_id is not None and rank.role_id != role_id:
                raise ValidationError(f"Rank '{rank.name}' belongs to another role")
        return ranks

    @staticmethod
    def set_role_ranks(db: Session, role_id: str, rank_ids: Iterable[str]) -> List[RoleRank]:
        """Replace the set of ranks a role uses, in the given order.

        An empty list returns the role to the global rank pool.
        """
        role = role_service.get(db, role_id)
        ordered: List[str] = []
        for rank_id in rank_ids or []:
            rank_id = str(rank_id).strip() if rank_id is not None else ""
            if rank_id and rank_id not in ordered:
                ordered.append(rank_id)
        RankService._usable_ranks(db, role.id, ordered)

        with atomic(db):
            db.query(RoleRank).filter(RoleRank.role_id == role.id).delete()
            for position, rank_id in enumerate(ordered, start=1):
                db.add(RoleRank(role_id=role.id, rank_id=rank_id, sort_order=position))
        return RankService.list_role_ranks(db, role.id)

    @staticmethod
    def reorder_role_ranks(db: Session, role_id: str, rank_ids: Iterable[str]) -> int:
        """Rewrite one role's binding order from a full ordered rank id list."""
        role = role_service.get(db, role_id)
        ordered = clean_ids(rank_ids)
        with atomic(db):
            rows = (
                db.query(RoleRank)
                .filter(RoleRank.role_id == role.id, RoleRank.rank_id.in_(ordered))
                .all()
                if ordered else []
            )
            updated = apply_order({b.rank_id: b for b in rows}, ordered)
        logger.info("Reordered %d of %d ranks for role %s", updated, len(ordered), role.id)
        return updated

    @staticmethod
    def available_ranks_for(db: Session, role_id: str) -> List[Rank]:
        """Ranks selectable for members holding ``role_id``."""
        role = role_service.get(db, role_id)
        ranks = db.query(Rank).filter(or_(Rank.role_id.is_(None), Rank.role_id == role.id)).all()
        bindings = db.query(RoleRank).filter(RoleRank.role_id == role.id).all()
        return compose_available_ranks(role.id, ranks, bindings)

    # ---- Overrides ----

    @staticmethod
    def list_overrides(db: Session, role_id: Optional[str] = None) -> List[RoleRankOverride]:
        query = db.query(RoleRankOverride)
        if role_id:
            query = query.filter(RoleRankOverride.role_id == role_id)
        return query.order_by(RoleRankOverride.role_id, RoleRankOverride.rank_id).all()

    @staticmethod
    def override_map(db: Session) -> Dict[Tuple[str, str], str]:
        """``(role_id, rank_id) -> name`` for every override."""
        return {(o.role_id, o.rank_id): o.name for o in db.query(RoleRankOverride).all()}

    @staticmethod
    def set_overrides(db: Session, role_id: str, overrides: Iterable[dict]) -> List[RoleRankOverride]:
        """Replace a role's rank display-name overrides.

        Entries without a rank id or name are skipped; the first entry for a
        rank wins. Overrides can only target global ranks.
        """
        role = role_service.get(db, role_id)
        wanted: Dict[str, str] = {}
        for entry in overrides or []:
            rank_id = (entry.get("rank_id") or "").strip()
            name = (entry.get("name") or "").strip()
            if not rank_id or not name or rank_id in wanted:
                continue
            wanted[rank_id] = name

        ranks = {r.id: r for r in db.query(Rank).filter(Rank.id.in_(list(wanted))).all()} if wanted else {}
        for rank_id in wanted:
            rank = ranks.get(rank_id)
            if rank is None:
                raise ResourceNotFoundError(f"Rank {rank_id} not found")
            if rank.role_id is not None:
                raise ValidationError(f"Rank '{rank.name}' is role-scoped and cannot be overridden")

        with atomic(db):
            db.query(RoleRankOverride).filter(RoleRankOverride.role_id == role.id).delete()
            for rank_id, name in wanted.items():
                db.add(RoleRankOverride(role_id=role.id, rank_id=rank_id, name=name))
        return RankService.list_overrides(db, role.id)


rank_service = RankService()
