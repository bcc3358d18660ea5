"""Seed default access lists, their roles and visibility settings."""

from sqlalchemy.orm import Session
from tribe_console.models.access_list import AccessList, RoleAccess
from tribe_console.models.role import Role
from tribe_console.models.visibility import VisibilitySetting

ACCESS_LISTS = {
    "manage_members": ["Chief", "Elder"],
    "manage_roles": ["Chief"],
    "manage_access_lists": ["Chief"],
    "view_audit_log": ["Chief", "Elder"],
    "manage_billing": ["Chief"],
}

VISIBILITY = {
    "members": True,
    "roles": False,
}


def seed_access_lists(db: Session) -> None:
    """Insert default access lists and grant them to their roles."""
    for name, role_names in ACCESS_LISTS.items():
        access_list = db.query(AccessList).filter(AccessList.name == name).first()
        if not access_list:
            access_list = AccessList(name=name)
            db.add(access_list)
            db.flush()

        for role in db.query(Role).filter(Role.name.in_(role_names)).all():
            exists = db.query(RoleAccess).filter(
                RoleAccess.role_id == role.id, RoleAccess.access_list_id == access_list.id
            ).first()
            if not exists:
                db.add(RoleAccess(role_id=role.id, access_list_id=access_list.id))

    db.commit()
    print(f"✅ Seeded {len(ACCESS_LISTS)} access lists")


def seed_visibility(db: Session) -> None:
    """Write the default visibility of each area."""
    for area, is_public in VISIBILITY.items():
        row = db.query(VisibilitySetting).filter(VisibilitySetting.area == area).first()
        if row:
            row.is_public = is_public
        else:
            db.add(VisibilitySetting(area=area, is_public=is_public))

    db.commit()
    print("✅ Seeded visibility settings")
