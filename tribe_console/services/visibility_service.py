"""Visibility service — anonymous read access per area."""

from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from tribe_console.db.session import atomic
from tribe_console.models.visibility import VisibilitySetting
from tribe_console.services.resolvers import AREA_DEFAULTS, is_readable, visibility_default


class VisibilityService:
    """Reads and toggles the public flag of the members/roles areas."""

    @staticmethod
    def stored_setting(db: Session, area: str) -> Optional[bool]:
        """The stored flag for ``area``, or None when no row exists."""
        visibility_default(area)
        row = db.query(VisibilitySetting).filter(VisibilitySetting.area == area).first()
        return row.is_public if row else None

    @staticmethod
    def is_readable(db: Session, area: str, is_authenticated: bool) -> bool:
        return is_readable(area, VisibilityService.stored_setting(db, area), is_authenticated)

    @staticmethod
    def list_visibility(db: Session) -> List[Dict[str, object]]:
        """Every known area with its effective flag."""
        stored = {row.area: row.is_public for row in db.query(VisibilitySetting).all()}
        return [
            {"area": area, "is_public": stored.get(area, default)}
            for area, default in sorted(AREA_DEFAULTS.items())
        ]

    @staticmethod
    def update(db: Session, area: str, is_public: bool) -> Dict[str, object]:
        """Insert or update the flag for ``area``."""
        visibility_default(area)
        with atomic(db):
            row = db.query(VisibilitySetting).filter(VisibilitySetting.area == area).first()
            if row is None:
                row = VisibilitySetting(area=area, is_public=bool(is_public))
                db.add(row)
            else:
                row.is_public = bool(is_public)
        return {"area": area, "is_public": bool(is_public)}


visibility_service = VisibilityService()
