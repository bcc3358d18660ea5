"""Rank, RoleRank binding and RoleRankOverride models."""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from tribe_console.db.base import Base, new_id


class Rank(Base):
    """Rank usable by members.

    A rank with ``role_id`` NULL is global and can be adopted by any role.
    A rank with ``role_id`` set is scoped to that one role.
    """
    __tablename__ = "ranks"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(100), nullable=False, index=True)
    description = Column(String(500), nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)
    role_id = Column(String(36), ForeignKey("roles.id", ondelete="CASCADE"), nullable=True, index=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    @property
    def is_global(self) -> bool:
        return self.role_id is None


class RoleRank(Base):
    """A role opting into a rank, with the role's own display order."""
    __tablename__ = "role_ranks"

    role_id = Column(String(36), ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True)
    rank_id = Column(String(36), ForeignKey("ranks.id", ondelete="CASCADE"), primary_key=True)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)


class RoleRankOverride(Base):
    """Display name for a global rank when shown under one role."""
    __tablename__ = "role_rank_overrides"

    role_id = Column(String(36), ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True)
    rank_id = Column(String(36), ForeignKey("ranks.id", ondelete="CASCADE"), primary_key=True)
    name = Column(String(100), nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)
