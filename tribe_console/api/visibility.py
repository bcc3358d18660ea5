"""Visibility API router."""

from typing import List
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from tribe_console.db.session import get_db
from tribe_console.schemas.schemas import VisibilityIn, VisibilityOut
from tribe_console.services.resolvers import visibility_default
from tribe_console.services.visibility_service import visibility_service
from tribe_console.services.audit_service import audit_service
from tribe_console.core.security import Caller, require_manage_roles

router = APIRouter(prefix="/visibility", tags=["visibility"])


def valid_area(area: str) -> str:
    """Reject unknown areas before any access check runs."""
    visibility_default(area)
    return area


@router.get("", response_model=List[VisibilityOut])
async def list_visibility(db: Session = Depends(get_db)):
    """Effective public flag of every area."""
    return visibility_service.list_visibility(db)


@router.patch("/{area}", response_model=VisibilityOut)
async def update_visibility(
    body: VisibilityIn,
    request: Request,
    area: str = Depends(valid_area),
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_manage_roles),
):
    """Make an area publicly listable or restrict it to signed-in callers."""
    setting = visibility_service.update(db, area, body.is_public)
    audit_service.log_from_request(
        db, request, caller.role_name, "visibility.updated", "visibility", area,
        new_value={"is_public": setting["is_public"]},
    )
    return setting
