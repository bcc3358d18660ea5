"""Ranks API router — global and role-scoped ranks."""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from tribe_console.db.session import get_db
from tribe_console.schemas.schemas import RankCreate, RankUpdate, RankOut, RankIdsIn, OkResponse
from tribe_console.services.rank_service import rank_service
from tribe_console.services.audit_service import audit_service
from tribe_console.core.security import Caller, require_manage_roles, roles_readable

router = APIRouter(prefix="/ranks", tags=["ranks"])


@router.get("", response_model=List[RankOut])
async def list_ranks(
    role_id: Optional[str] = Query(None, alias="roleId"),
    db: Session = Depends(get_db),
    caller: Caller = Depends(roles_readable),
):
    """List ranks, optionally only those scoped to one role."""
    return rank_service.list_ranks(db, role_id)


@router.post("", response_model=RankOut, status_code=201)
async def create_rank(
    body: RankCreate,
    request: Request,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_manage_roles),
):
    """Create a global rank, or a role-scoped one when roleId is given."""
    rank = rank_service.create(db, body.name, body.description, body.sort_order, body.role_id)
    audit_service.log_from_request(
        db, request, caller.role_name, "rank.created", "rank", rank.id,
        new_value={"name": rank.name, "role_id": rank.role_id},
    )
    return rank


@router.patch("/order", response_model=OkResponse)
async def reorder_ranks(
    body: RankIdsIn,
    request: Request,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_manage_roles),
):
    """Rewrite rank order from the complete ordered id list."""
    updated = rank_service.reorder(db, body.rank_ids)
    audit_service.log_from_request(
        db, request, caller.role_name, "rank.reordered", "rank",
        new_value={"rank_ids": body.rank_ids},
    )
    return OkResponse(detail={"updated": updated})


@router.patch("/{rank_id}", response_model=RankOut)
async def update_rank(
    rank_id: str,
    body: RankUpdate,
    request: Request,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_manage_roles),
):
    rank = rank_service.update(db, rank_id, body.name, body.description, body.sort_order)
    audit_service.log_from_request(
        db, request, caller.role_name, "rank.updated", "rank", rank.id,
        new_value=body.model_dump(exclude_unset=True),
    )
    return rank


@router.delete("/{rank_id}", response_model=OkResponse)
async def delete_rank(
    rank_id: str,
    request: Request,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_manage_roles),
):
    rank_service.delete(db, rank_id)
    audit_service.log_from_request(db, request, caller.role_name, "rank.deleted", "rank", rank_id)
    return OkResponse()
