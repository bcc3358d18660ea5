"""AccessList and RoleAccess models."""

from sqlalchemy import Column, String, DateTime, ForeignKey, func
from tribe_console.db.base import Base, new_id


class AccessList(Base):
    """Named permission bucket (e.g. manage_members) granted to roles."""
    __tablename__ = "access_lists"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(100), unique=True, nullable=False, index=True)
    description = Column(String(500), nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)


class RoleAccess(Base):
    """Association between an access list and a role it grants."""
    __tablename__ = "role_access"

    role_id = Column(String(36), ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True)
    access_list_id = Column(
        String(36), ForeignKey("access_lists.id", ondelete="CASCADE"), primary_key=True
    )
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
