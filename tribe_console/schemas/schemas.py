"""Pydantic schemas for API request/response serialization.

Payloads use camelCase on the wire; snake_case names are accepted too.
"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict, Any
from datetime import datetime


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


# ---- Role ----
class RoleIn(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    sort_order: Optional[int] = None

class RoleOut(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    sort_order: int


# ---- Rank ----
class RankCreate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    sort_order: Optional[int] = None
    role_id: Optional[str] = None

class RankUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    sort_order: Optional[int] = None

class RankOut(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    sort_order: int
    role_id: Optional[str] = None


# ---- Ordering ----
class RoleOrderIn(CamelModel):
    role_ids: List[str] = []

class RankIdsIn(CamelModel):
    rank_ids: List[str] = []


# ---- Role-rank bindings and overrides ----
class RoleRankOut(CamelModel):
    role_id: str
    rank_id: str
    sort_order: int

class OverrideIn(CamelModel):
    rank_id: Optional[str] = None
    name: Optional[str] = None

class OverridesIn(CamelModel):
    overrides: List[OverrideIn] = []

class RoleRankOverrideOut(CamelModel):
    role_id: str
    rank_id: str
    name: str


# ---- Access list ----
class AccessListCreate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    roles: Optional[List[str]] = None

class AccessListUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    roles: Optional[List[str]] = None  # None keeps the current role set

class AccessListOut(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    roles: List[str] = []

class AccessCheckOut(CamelModel):
    role: Optional[str] = None
    access_list: str
    allowed: bool


# ---- Member ----
class MemberRoleRankIn(CamelModel):
    role: Optional[str] = None
    rank_id: Optional[str] = None

class MemberIn(CamelModel):
    display_name: Optional[str] = None
    status: Optional[str] = None
    wallet_address: Optional[str] = None
    roles: Optional[List[str]] = None
    global_rank_id: Optional[str] = None
    role_ranks: Optional[List[MemberRoleRankIn]] = None

class GlobalRankOut(CamelModel):
    id: str
    name: str

class MemberRoleRankOut(CamelModel):
    role: str
    rank: str
    rank_id: str

class MemberOut(CamelModel):
    id: str
    display_name: str
    status: str
    wallet_address: Optional[str] = None
    roles: List[str] = []
    global_rank: Optional[GlobalRankOut] = None
    role_ranks: List[MemberRoleRankOut] = []


# ---- Visibility ----
class VisibilityIn(CamelModel):
    is_public: bool = False

class VisibilityOut(CamelModel):
    area: str
    is_public: bool


# ---- Audit ----
class AuditLogOut(CamelModel):
    id: int
    actor_role: Optional[str] = None
    action: str
    resource_type: str
    resource_id: Optional[str] = None
    new_value_json: Optional[str] = None
    request_id: Optional[str] = None
    ip_address: Optional[str] = None
    created_at: Optional[datetime] = None


# ---- Generic ----
class OkResponse(BaseModel):
    ok: bool = True
    detail: Optional[Dict[str, Any]] = None
