"""Access lists API router and the access check endpoint."""

from typing import List
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from tribe_console.db.session import get_db
from tribe_console.schemas.schemas import (
    AccessListCreate, AccessListUpdate, AccessListOut, AccessCheckOut, OkResponse,
)
from tribe_console.services.access_service import access_service
from tribe_console.services.audit_service import audit_service
from tribe_console.core.security import (
    Caller, get_caller, require_authenticated, require_manage_access_lists,
)

router = APIRouter(prefix="/access-lists", tags=["access-lists"])
check_router = APIRouter(prefix="/access", tags=["access-lists"])


@router.get("", response_model=List[AccessListOut])
async def list_access_lists(
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_authenticated),
):
    """List access lists with the role names they grant."""
    return access_service.list_access_lists(db)


@router.post("", response_model=AccessListOut, status_code=201)
async def create_access_list(
    body: AccessListCreate,
    request: Request,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_manage_access_lists),
):
    """Create an access list. Role names that do not exist yet are created."""
    access_list = access_service.create(db, body.name, body.description, body.roles)
    audit_service.log_from_request(
        db, request, caller.role_name, "access_list.created", "access_list",
        access_list["id"], new_value={"name": access_list["name"], "roles": access_list["roles"]},
    )
    return access_list


@router.patch("/{access_list_id}", response_model=AccessListOut)
async def update_access_list(
    access_list_id: str,
    body: AccessListUpdate,
    request: Request,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_manage_access_lists),
):
    """Update an access list; omitting roles keeps the current grants."""
    access_list = access_service.update(db, access_list_id, body.name, body.description, body.roles)
    audit_service.log_from_request(
        db, request, caller.role_name, "access_list.updated", "access_list",
        access_list_id, new_value={"name": access_list["name"], "roles": access_list["roles"]},
    )
    return access_list


@router.delete("/{access_list_id}", response_model=OkResponse)
async def delete_access_list(
    access_list_id: str,
    request: Request,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_manage_access_lists),
):
    access_service.delete(db, access_list_id)
    audit_service.log_from_request(
        db, request, caller.role_name, "access_list.deleted", "access_list", access_list_id,
    )
    return OkResponse()


@check_router.get("/check", response_model=AccessCheckOut)
async def check_access(
    access_list: str = Query(..., alias="accessList"),
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    """Report whether the calling role may act under an access list."""
    allowed = caller.authenticated and access_service.can_perform(db, caller.role_name, access_list)
    return AccessCheckOut(role=caller.role_name, access_list=access_list, allowed=allowed)
