"""Seed default roles, global ranks and role-rank bindings."""

from sqlalchemy.orm import Session
from tribe_console.models.role import Role
from tribe_console.models.rank import Rank, RoleRank

ROLES = [
    "Chief", "Elder", "Warrior", "Builder", "Gatherer",
    "Crafter", "Explorer", "Logistician", "Healer", "Neophyte",
]

RANKS = [
    "Novice", "Journeyman", "Veteran", "Expert", "Master",
    "Legionnaire", "Centurion", "Praetor", "Legate",
]

ROLE_RANKS = {
    "Builder": ["Novice", "Journeyman", "Veteran", "Expert"],
    "Gatherer": ["Novice", "Journeyman", "Veteran", "Expert"],
    "Crafter": ["Novice", "Journeyman", "Veteran", "Expert"],
    "Warrior": ["Legionnaire", "Centurion", "Praetor", "Legate"],
    "Elder": ["Veteran", "Expert", "Master"],
}


def seed_roles(db: Session) -> None:
    """Insert default roles, or restore their default order if present."""
    for position, name in enumerate(ROLES, start=1):
        existing = db.query(Role).filter(Role.name == name).first()
        if existing:
            existing.sort_order = position
        else:
            db.add(Role(name=name, sort_order=position))

    db.commit()
    print(f"✅ Seeded {len(ROLES)} roles")


def seed_ranks(db: Session) -> None:
    """Insert default global ranks."""
    for position, name in enumerate(RANKS, start=1):
        existing = db.query(Rank).filter(Rank.name == name, Rank.role_id.is_(None)).first()
        if existing:
            existing.sort_order = position
        else:
            db.add(Rank(name=name, sort_order=position, role_id=None))

    db.commit()
    print(f"✅ Seeded {len(RANKS)} global ranks")


def seed_role_ranks(db: Session) -> None:
    """Bind roles to the global ranks they use, keeping existing bindings."""
    created = 0
    for role_name, rank_names in ROLE_RANKS.items():
        role = db.query(Role).filter(Role.name == role_name).first()
        if not role:
            continue
        for position, rank_name in enumerate(rank_names, start=1):
            rank = db.query(Rank).filter(Rank.name == rank_name, Rank.role_id.is_(None)).first()
            if not rank:
                continue
            exists = db.query(RoleRank).filter(
                RoleRank.role_id == role.id, RoleRank.rank_id == rank.id
            ).first()
            if not exists:
                db.add(RoleRank(role_id=role.id, rank_id=rank.id, sort_order=position))
                created += 1

    db.commit()
    print(f"✅ Seeded {created} role-rank bindings")
