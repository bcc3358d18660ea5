"""Roles API router — CRUD, ordering and the ranks a role can use."""

from typing import List
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from tribe_console.db.session import get_db
from tribe_console.schemas.schemas import RoleIn, RoleOut, RoleOrderIn, RankOut, OkResponse
from tribe_console.services.role_service import role_service
from tribe_console.services.rank_service import rank_service
from tribe_console.services.audit_service import audit_service
from tribe_console.core.security import Caller, require_manage_roles, roles_readable

router = APIRouter(prefix="/roles", tags=["roles"])


@router.get("", response_model=List[RoleOut])
async def list_roles(
    db: Session = Depends(get_db),
    caller: Caller = Depends(roles_readable),
):
    """List roles in display order."""
    return role_service.list_roles(db)


@router.post("", response_model=RoleOut, status_code=201)
async def create_role(
    body: RoleIn,
    request: Request,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_manage_roles),
):
    """Create a role. Without a sort order it goes last."""
    role = role_service.create(db, body.name, body.description, body.sort_order)
    audit_service.log_from_request(
        db, request, caller.role_name, "role.created", "role", role.id,
        new_value={"name": role.name, "sort_order": role.sort_order},
    )
    return role


@router.patch("/order", response_model=OkResponse)
async def reorder_roles(
    body: RoleOrderIn,
    request: Request,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_manage_roles),
):
    """Rewrite role order from the complete ordered id list."""
    updated = role_service.reorder(db, body.role_ids)
    audit_service.log_from_request(
        db, request, caller.role_name, "role.reordered", "role",
        new_value={"role_ids": body.role_ids},
    )
    return OkResponse(detail={"updated": updated})


@router.patch("/{role_id}", response_model=RoleOut)
async def update_role(
    role_id: str,
    body: RoleIn,
    request: Request,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_manage_roles),
):
    """Update a role's name, description and optionally its sort order."""
    role = role_service.update(db, role_id, body.name, body.description, body.sort_order)
    audit_service.log_from_request(
        db, request, caller.role_name, "role.updated", "role", role.id,
        new_value=body.model_dump(exclude_unset=True),
    )
    return role


@router.delete("/{role_id}", response_model=OkResponse)
async def delete_role(
    role_id: str,
    request: Request,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_manage_roles),
):
    """Delete a role along with its bindings, overrides and grants."""
    role_service.delete(db, role_id)
    audit_service.log_from_request(db, request, caller.role_name, "role.deleted", "role", role_id)
    return OkResponse()


@router.get("/{role_id}/available-ranks", response_model=List[RankOut])
async def available_ranks(
    role_id: str,
    db: Session = Depends(get_db),
    caller: Caller = Depends(roles_readable),
):
    """Ranks members of this role may hold, in the role's display order."""
    return rank_service.available_ranks_for(db, role_id)
