"""Visibility setting model."""

from sqlalchemy import Column, String, Boolean, DateTime, func
from tribe_console.db.base import Base


class VisibilitySetting(Base):
    """Whether anonymous callers may list an area (members, roles)."""
    __tablename__ = "visibility_settings"

    area = Column(String(50), primary_key=True)
    is_public = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)
