"""Audit service — append-only audit trail for all mutations."""

import json
from typing import Optional, Any
from sqlalchemy.orm import Session
from fastapi import Request

from tribe_console.models.audit_log import AuditLog


class AuditService:
    """Records immutable audit log entries for console events."""

    @staticmethod
    def log(
        db: Session,
        actor_role: Optional[str],
        action: str,
        resource_type: str,
        resource_id: Optional[str] = None,
        new_value: Optional[Any] = None,
        request_id: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> AuditLog:
        """Write a single audit log record.

        Args:
            action: e.g. "role.created", "member.updated", "visibility.updated"
            resource_type: role, rank, role_rank, access_list, member, visibility

        This method commits immediately to ensure audit is never lost.
        """
        entry = AuditLog(
            actor_role=actor_role or None,
            action=action,
            resource_type=resource_type,
            resource_id=str(resource_id) if resource_id else None,
            new_value_json=json.dumps(new_value, default=str) if new_value is not None else None,
            request_id=request_id,
            ip_address=ip_address,
        )
        db.add(entry)
        db.commit()
        return entry

    @staticmethod
    def log_from_request(
        db: Session,
        request: Request,
        actor_role: Optional[str],
        action: str,
        resource_type: str,
        resource_id: Optional[str] = None,
        new_value: Optional[Any] = None,
    ) -> AuditLog:
        """Write audit log extracting request id and IP from the request."""
        ip = request.client.host if request.client else None
        request_id = getattr(request.state, "request_id", None)
        return AuditService.log(
            db=db,
            actor_role=actor_role,
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            new_value=new_value,
            request_id=request_id,
            ip_address=ip,
        )

    @staticmethod
    def query_logs(
        db: Session,
        actor_role: Optional[str] = None,
        action: Optional[str] = None,
        resource_type: Optional[str] = None,
        page: int = 1,
        page_size: int = 50,
    ):
        """Query audit logs with filters and pagination."""
        query = db.query(AuditLog)

        if actor_role:
            query = query.filter(AuditLog.actor_role == actor_role)
        if action:
            query = query.filter(AuditLog.action.ilike(f"%{action}%"))
        if resource_type:
            query = query.filter(AuditLog.resource_type == resource_type)

        total = query.count()
        logs = (
            query.order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )

        return {
            "logs": logs,
            "total": total,
            "page": page,
            "page_size": page_size,
        }


audit_service = AuditService()
