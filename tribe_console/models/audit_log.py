"""Audit log model — append-only."""

from sqlalchemy import Column, Integer, String, Text, DateTime, func
from tribe_console.db.base import Base


class AuditLog(Base):
    """Immutable audit trail for console mutations.

    This table is APPEND-ONLY: no UPDATE or DELETE operations should ever
    be performed on it (enforced at application level).
    """
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    actor_role = Column(String(100), nullable=True, index=True)
    action = Column(String(100), nullable=False, index=True)  # e.g. "role.created"
    resource_type = Column(String(50), nullable=False, index=True)  # role, rank, member, etc.
    resource_id = Column(String(100), nullable=True)
    new_value_json = Column(Text, nullable=True)
    request_id = Column(String(36), nullable=True)
    ip_address = Column(String(45), nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False, index=True)
