"""Role-rank bindings and per-role rank override routers."""

from typing import List
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from tribe_console.db.session import get_db
from tribe_console.schemas.schemas import (
    RankIdsIn, RoleRankOut, OverridesIn, RoleRankOverrideOut, OkResponse,
)
from tribe_console.services.rank_service import rank_service
from tribe_console.services.audit_service import audit_service
from tribe_console.core.security import Caller, require_manage_roles

router = APIRouter(prefix="/role-ranks", tags=["role-ranks"])
overrides_router = APIRouter(prefix="/role-rank-overrides", tags=["role-ranks"])


@router.get("", response_model=List[RoleRankOut])
async def list_role_ranks(db: Session = Depends(get_db)):
    """Every role-rank binding."""
    return rank_service.list_role_ranks(db)


@router.patch("/order/{role_id}", response_model=OkResponse)
async def reorder_role_ranks(
    role_id: str,
    body: RankIdsIn,
    request: Request,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_manage_roles),
):
    """Rewrite one role's rank order from its complete ordered rank id list."""
    updated = rank_service.reorder_role_ranks(db, role_id, body.rank_ids)
    audit_service.log_from_request(
        db, request, caller.role_name, "role_rank.reordered", "role", role_id,
        new_value={"rank_ids": body.rank_ids},
    )
    return OkResponse(detail={"updated": updated})


@router.patch("/{role_id}", response_model=List[RoleRankOut])
async def set_role_ranks(
    role_id: str,
    body: RankIdsIn,
    request: Request,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_manage_roles),
):
    """Replace the ranks a role uses. An empty list means the global pool."""
    bindings = rank_service.set_role_ranks(db, role_id, body.rank_ids)
    audit_service.log_from_request(
        db, request, caller.role_name, "role_rank.updated", "role", role_id,
        new_value={"rank_ids": body.rank_ids},
    )
    return bindings


@overrides_router.get("", response_model=List[RoleRankOverrideOut])
async def list_overrides(db: Session = Depends(get_db)):
    """Every per-role rank display-name override."""
    return rank_service.list_overrides(db)


@overrides_router.patch("/{role_id}", response_model=List[RoleRankOverrideOut])
async def set_overrides(
    role_id: str,
    body: OverridesIn,
    request: Request,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_manage_roles),
):
    """Replace a role's rank display-name overrides."""
    entries = [o.model_dump() for o in body.overrides]
    overrides = rank_service.set_overrides(db, role_id, entries)
    audit_service.log_from_request(
        db, request, caller.role_name, "role_rank_override.updated", "role", role_id,
        new_value={"overrides": entries},
    )
    return overrides
