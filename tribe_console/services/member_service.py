"""Member service — members with full-replace role and rank assignment."""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from tribe_console.db.session import atomic
from tribe_console.models.member import Member, MemberRole, MemberRank, MemberStatusEnum
from tribe_console.models.rank import Rank
from tribe_console.models.role import Role
from tribe_console.core.exceptions import ResourceNotFoundError, ValidationError
from tribe_console.services.rank_service import rank_service
from tribe_console.services.resolvers import label_for
from tribe_console.services.role_service import role_service, require_name, sanitize_role_names

logger = logging.getLogger("tribe_console")


def _parse_status(status: Optional[str]) -> MemberStatusEnum:
    if status is None:
        return MemberStatusEnum.active
    try:
        return MemberStatusEnum(status)
    except ValueError:
        allowed = ", ".join(s.value for s in MemberStatusEnum)
        raise ValidationError(f"status must be one of: {allowed}.")


class MemberService:
    """Manages members and their role/rank assignments."""

    @staticmethod
    def _validate_ranks(
        db: Session,
        role_names: List[str],
        global_rank_id: Optional[str],
        role_ranks: Optional[Iterable[Dict[str, Any]]],
    ) -> List[Tuple[str, str]]:
        """Check rank references before anything is written.

        Returns the ``(role_name, rank_id)`` pairs to store. Entries for roles
        the member does not hold are dropped without error, as are entries
        missing a role or rank id; the first entry per role wins.
        """
        if global_rank_id:
            rank = rank_service.get(db, global_rank_id)
            if rank.role_id is not None:
                raise ValidationError("globalRankId must reference a global rank.")

        pairs: List[Tuple[str, str]] = []
        seen_roles = set()
        for entry in role_ranks or []:
            role_name = (entry.get("role") or "").strip()
            rank_id = (entry.get("rank_id") or "").strip()
            if not role_name or not rank_id:
                continue
            if role_name not in role_names or role_name in seen_roles:
                continue
            rank = rank_service.get(db, rank_id)
            if rank.role_id is not None:
                owner = role_service.get_by_name(db, role_name)
                if owner is None or owner.id != rank.role_id:
                    raise ValidationError(f"Rank '{rank.name}' is not available to role '{role_name}'.")
            seen_roles.add(role_name)
            pairs.append((role_name, rank_id))
        return pairs

    @staticmethod
    def _assign(
        db: Session,
        member: Member,
        role_names: List[str],
        global_rank_id: Optional[str],
        pairs: List[Tuple[str, str]],
    ) -> None:
        """Replace every role and rank row for ``member``."""
        db.query(MemberRole).filter(MemberRole.member_id == member.id).delete()
        db.query(MemberRank).filter(MemberRank.member_id == member.id).delete()

        held = {role.name: role for role in role_service.ensure_roles(db, role_names)}
        for role in held.values():
            db.add(MemberRole(member_id=member.id, role_id=role.id))
        if global_rank_id:
            db.add(MemberRank(member_id=member.id, rank_id=global_rank_id, role_id=None))
        for role_name, rank_id in pairs:
            db.add(MemberRank(member_id=member.id, rank_id=rank_id, role_id=held[role_name].id))

    @staticmethod
    def create(
        db: Session,
        display_name: Optional[str],
        status: Optional[str] = None,
        wallet_address: Optional[str] = None,
        roles: Optional[Iterable[str]] = None,
        global_rank_id: Optional[str] = None,
        role_ranks: Optional[Iterable[Dict[str, Any]]] = None,
    ) -> Dict[str, Any]:
        """Create a member with its roles and ranks in one transaction."""
        display_name = require_name(display_name, "displayName")
        member_status = _parse_status(status)
        role_names = sanitize_role_names(roles)
        pairs = MemberService._validate_ranks(db, role_names, global_rank_id, role_ranks)

        with atomic(db):
            member = Member(
                display_name=display_name,
                status=member_status,
                wallet_address=wallet_address or None,
                created_seq=MemberService.next_seq(db),
            )
            db.add(member)
            db.flush()
            MemberService._assign(db, member, role_names, global_rank_id, pairs)
        return MemberService.get_view(db, member.id)

    @staticmethod
    def update(
        db: Session,
        member_id: str,
        display_name: Optional[str],
        status: Optional[str] = None,
        wallet_address: Optional[str] = None,
        roles: Optional[Iterable[str]] = None,
        global_rank_id: Optional[str] = None,
        role_ranks: Optional[Iterable[Dict[str, Any]]] = None,
    ) -> Dict[str, Any]:
        """Overwrite a member's fields and replace all its roles and ranks."""
        display_name = require_name(display_name, "displayName")
        member_status = _parse_status(status)
        member = MemberService.get(db, member_id)
        role_names = sanitize_role_names(roles)
        pairs = MemberService._validate_ranks(db, role_names, global_rank_id, role_ranks)

        with atomic(db):
            member.display_name = display_name
            member.status = member_status
            member.wallet_address = wallet_address or None
            MemberService._assign(db, member, role_names, global_rank_id, pairs)
        return MemberService.get_view(db, member.id)

    @staticmethod
    def next_seq(db: Session) -> int:
        current = db.query(func.max(Member.created_seq)).scalar()
        return (current or 0) + 1

    @staticmethod
    def get(db: Session, member_id: str) -> Member:
        member = db.query(Member).filter(Member.id == member_id).first()
        if not member:
            raise ResourceNotFoundError(f"Member {member_id} not found")
        return member

    @staticmethod
    def delete(db: Session, member_id: str) -> None:
        member = MemberService.get(db, member_id)
        with atomic(db):
            db.query(MemberRole).filter(MemberRole.member_id == member.id).delete()
            db.query(MemberRank).filter(MemberRank.member_id == member.id).delete()
            db.delete(member)
        logger.info("Deleted member %s", member_id)

    @staticmethod
    def _views(db: Session, members: List[Member]) -> List[Dict[str, Any]]:
        """Read model: role names, global rank and labelled role ranks."""
        if not members:
            return []
        ids = [m.id for m in members]

        roles_by_member: Dict[str, List[Role]] = {}
        role_rows = (
            db.query(MemberRole.member_id, Role)
            .join(Role, Role.id == MemberRole.role_id)
            .filter(MemberRole.member_id.in_(ids))
            .order_by(Role.sort_order, Role.name)
            .all()
        )
        for member_id, role in role_rows:
            roles_by_member.setdefault(member_id, []).append(role)

        ranks_by_member: Dict[str, List[Tuple[MemberRank, Rank]]] = {}
        rank_rows = (
            db.query(MemberRank, Rank)
            .join(Rank, Rank.id == MemberRank.rank_id)
            .filter(MemberRank.member_id.in_(ids))
            .order_by(MemberRank.id)
            .all()
        )
        for assignment, rank in rank_rows:
            ranks_by_member.setdefault(assignment.member_id, []).append((assignment, rank))

        overrides = rank_service.override_map(db)
        views = []
        for member in members:
            roles = roles_by_member.get(member.id, [])
            held = {role.id: role for role in roles}
            position = {role.id: i for i, role in enumerate(roles)}

            global_rank = None
            role_ranks = []
            for assignment, rank in ranks_by_member.get(member.id, []):
                if assignment.role_id is None:
                    if global_rank is None:
                        global_rank = {"id": rank.id, "name": rank.name}
                elif assignment.role_id in held:
                    role_ranks.append((position[assignment.role_id], {
                        "role": held[assignment.role_id].name,
                        "rank": label_for(assignment.role_id, rank, overrides),
                        "rank_id": rank.id,
                    }))
            role_ranks = [entry for _, entry in sorted(role_ranks, key=lambda pair: pair[0])]

            views.append({
                "id": member.id,
                "display_name": member.display_name,
                "status": member.status.value if member.status else None,
                "wallet_address": member.wallet_address,
                "roles": [role.name for role in roles],
                "global_rank": global_rank,
                "role_ranks": role_ranks,
            })
        return views

    @staticmethod
    def get_view(db: Session, member_id: str) -> Dict[str, Any]:
        return MemberService._views(db, [MemberService.get(db, member_id)])[0]

    @staticmethod
    def list_members(db: Session) -> List[Dict[str, Any]]:
        """All members, newest first."""
        members = (
            db.query(Member)
            .order_by(Member.created_at.desc(), Member.created_seq.desc(), Member.display_name)
            .all()
        )
        return MemberService._views(db, members)


member_service = MemberService()
