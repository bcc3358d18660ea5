"""Member, MemberRole and MemberRank models."""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum, func
from tribe_console.db.base import Base, new_id
import enum


class MemberStatusEnum(str, enum.Enum):
    active = "active"
    pending = "pending"
    suspended = "suspended"


class Member(Base):
    """Tribe member with roles and ranks."""
    __tablename__ = "members"

    id = Column(String(36), primary_key=True, default=new_id)
    display_name = Column(String(255), nullable=False, index=True)
    status = Column(Enum(MemberStatusEnum), default=MemberStatusEnum.active, nullable=False)
    wallet_address = Column(String(255), nullable=True, index=True)
    created_seq = Column(Integer, nullable=False, default=0, index=True)  # creation order, breaks created_at ties
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)


class MemberRole(Base):
    """Association between members and the roles they hold."""
    __tablename__ = "member_roles"

    member_id = Column(String(36), ForeignKey("members.id", ondelete="CASCADE"), primary_key=True)
    role_id = Column(String(36), ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)


class MemberRank(Base):
    """Rank held by a member.

    ``role_id`` NULL marks the member's single global rank; otherwise the rank
    is held under that role.
    """
    __tablename__ = "member_ranks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    member_id = Column(String(36), ForeignKey("members.id", ondelete="CASCADE"), nullable=False, index=True)
    rank_id = Column(String(36), ForeignKey("ranks.id", ondelete="CASCADE"), nullable=False)
    role_id = Column(String(36), ForeignKey("roles.id", ondelete="CASCADE"), nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
