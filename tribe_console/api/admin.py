"""Admin API router: audit trail queries."""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from tribe_console.db.session import get_db
from tribe_console.schemas.schemas import AuditLogOut
from tribe_console.services.audit_service import audit_service
from tribe_console.core.security import Caller, require_view_audit_log

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/audit")
async def get_audit_logs(
    action: Optional[str] = Query(None),
    resource_type: Optional[str] = Query(None, alias="resourceType"),
    actor_role: Optional[str] = Query(None, alias="actorRole"),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200, alias="pageSize"),
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_view_audit_log),
):
    """Query audit logs (view_audit_log access list)."""
    result = audit_service.query_logs(db, actor_role, action, resource_type, page, page_size)
    return {
        "logs": [
            AuditLogOut.model_validate(log).model_dump(by_alias=True)
            for log in result["logs"]
        ],
        "total": result["total"],
        "page": result["page"],
    }
