"""Seed sample members with roles and ranks for local development."""

from sqlalchemy.orm import Session
from tribe_console.models.member import Member, MemberRole, MemberRank, MemberStatusEnum
from tribe_console.models.rank import Rank
from tribe_console.models.role import Role
from tribe_console.services.member_service import member_service

SAMPLE_MEMBERS = [
    {"display_name": "Aria Voss", "status": "active", "wallet_address": "0x8f3c...91b2", "roles": ["Chief"]},
    {"display_name": "Kellan Rye", "status": "active", "wallet_address": "0x51a2...0fdc", "roles": ["Elder"]},
    {"display_name": "Mira Sol", "status": "active", "wallet_address": "0x7d10...fe0a", "roles": ["Builder"]},
    {"display_name": "Tomas Vale", "status": "pending", "wallet_address": None, "roles": ["Gatherer"]},
    {"display_name": "Nia Quell", "status": "active", "wallet_address": "0x0a8b...44be", "roles": ["Explorer"]},
]

# (member, role or None for the global rank, global rank name)
SAMPLE_RANKS = [
    ("Aria Voss", None, "Veteran"),
    ("Mira Sol", "Builder", "Journeyman"),
    ("Kellan Rye", "Elder", "Expert"),
]


def seed_sample_data(db: Session) -> None:
    """Insert sample members unless a member with the same name exists."""
    created = 0
    for data in SAMPLE_MEMBERS:
        if db.query(Member).filter(Member.display_name == data["display_name"]).first():
            continue
        member = Member(
            display_name=data["display_name"],
            status=MemberStatusEnum(data["status"]),
            wallet_address=data["wallet_address"],
            created_seq=member_service.next_seq(db),
        )
        db.add(member)
        db.flush()
        for role in db.query(Role).filter(Role.name.in_(data["roles"])).all():
            db.add(MemberRole(member_id=member.id, role_id=role.id))
        created += 1
    db.flush()

    for member_name, role_name, rank_name in SAMPLE_RANKS:
        member = db.query(Member).filter(Member.display_name == member_name).first()
        rank = db.query(Rank).filter(Rank.name == rank_name, Rank.role_id.is_(None)).first()
        if not member or not rank:
            continue
        role_id = None
        if role_name:
            role = db.query(Role).filter(Role.name == role_name).first()
            if not role:
                continue
            role_id = role.id
        exists = db.query(MemberRank).filter(
            MemberRank.member_id == member.id,
            MemberRank.role_id.is_(None) if role_id is None else MemberRank.role_id == role_id,
        ).first()
        if not exists:
            db.add(MemberRank(member_id=member.id, rank_id=rank.id, role_id=role_id))

    db.commit()
    print(f"✅ Seeded {created} sample members")
