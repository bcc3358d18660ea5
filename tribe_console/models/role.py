"""Role model."""

from sqlalchemy import Column, Integer, String, DateTime, func
from tribe_console.db.base import Base, new_id


class Role(Base):
    """Named, independently sortable tribe role (Chief, Elder, ...)."""
    __tablename__ = "roles"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(100), unique=True, nullable=False, index=True)
    description = Column(String(500), nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)
