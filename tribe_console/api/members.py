"""Members API router."""

from typing import List
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from tribe_console.db.session import get_db
from tribe_console.schemas.schemas import MemberIn, MemberOut, OkResponse
from tribe_console.services.member_service import member_service
from tribe_console.services.audit_service import audit_service
from tribe_console.core.security import Caller, members_readable, require_manage_members

router = APIRouter(prefix="/members", tags=["members"])


def _member_kwargs(body: MemberIn) -> dict:
    return {
        "display_name": body.display_name,
        "status": body.status,
        "wallet_address": body.wallet_address,
        "roles": body.roles,
        "global_rank_id": body.global_rank_id,
        "role_ranks": [entry.model_dump() for entry in body.role_ranks or []],
    }


@router.get("", response_model=List[MemberOut])
async def list_members(
    db: Session = Depends(get_db),
    caller: Caller = Depends(members_readable),
):
    """List members, newest first, with rank labels resolved per role."""
    return member_service.list_members(db)


@router.get("/{member_id}", response_model=MemberOut)
async def get_member(
    member_id: str,
    db: Session = Depends(get_db),
    caller: Caller = Depends(members_readable),
):
    return member_service.get_view(db, member_id)


@router.post("", response_model=MemberOut, status_code=201)
async def create_member(
    body: MemberIn,
    request: Request,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_manage_members),
):
    """Create a member with roles, a global rank and per-role ranks."""
    member = member_service.create(db, **_member_kwargs(body))
    audit_service.log_from_request(
        db, request, caller.role_name, "member.created", "member", member["id"],
        new_value={"display_name": member["display_name"], "roles": member["roles"]},
    )
    return member


@router.patch("/{member_id}", response_model=MemberOut)
async def update_member(
    member_id: str,
    body: MemberIn,
    request: Request,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_manage_members),
):
    """Overwrite a member; roles and ranks are replaced, not merged."""
    member = member_service.update(db, member_id, **_member_kwargs(body))
    audit_service.log_from_request(
        db, request, caller.role_name, "member.updated", "member", member_id,
        new_value={"display_name": member["display_name"], "roles": member["roles"]},
    )
    return member


@router.delete("/{member_id}", response_model=OkResponse)
async def delete_member(
    member_id: str,
    request: Request,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_manage_members),
):
    member_service.delete(db, member_id)
    audit_service.log_from_request(db, request, caller.role_name, "member.deleted", "member", member_id)
    return OkResponse()
