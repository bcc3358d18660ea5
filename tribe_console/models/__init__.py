"""Models package — import all models so metadata.create_all can discover them."""

from tribe_console.models.role import Role
from tribe_console.models.rank import Rank, RoleRank, RoleRankOverride
from tribe_console.models.access_list import AccessList, RoleAccess
from tribe_console.models.member import Member, MemberRole, MemberRank, MemberStatusEnum
from tribe_console.models.visibility import VisibilitySetting
from tribe_console.models.audit_log import AuditLog

__all__ = [
    "Role", "Rank", "RoleRank", "RoleRankOverride",
    "AccessList", "RoleAccess",
    "Member", "MemberRole", "MemberRank", "MemberStatusEnum",
    "VisibilitySetting", "AuditLog",
]
