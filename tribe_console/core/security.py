"""Caller identity and access-list authorization helpers.

Identity is established upstream; it reaches this API as two headers, an
"is authenticated" flag and the caller's role name. Nothing here is global
state: every request carries its own ``Caller``.
"""

from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from tribe_console.core.config import settings
from tribe_console.core.exceptions import AuthenticationError, AuthorizationError
from tribe_console.db.session import get_db
from tribe_console.services.access_service import access_service
from tribe_console.services.visibility_service import visibility_service


class Caller:
    """Identity presented with a request."""

    def __init__(self, authenticated: bool = False, role_name: Optional[str] = None):
        self.authenticated = authenticated
        self.role_name = (role_name or "").strip() or None

    def __repr__(self) -> str:
        return f"Caller(authenticated={self.authenticated}, role_name={self.role_name!r})"


async def get_caller(request: Request) -> Caller:
    """Read the caller identity headers."""
    flag = request.headers.get(settings.AUTH_HEADER, "")
    return Caller(
        authenticated=flag.strip().lower() == "true",
        role_name=request.headers.get(settings.ROLE_HEADER),
    )


async def require_authenticated(caller: Caller = Depends(get_caller)) -> Caller:
    if not caller.authenticated:
        raise AuthenticationError("Authentication required.")
    return caller


class RequireAccess:
    """Dependency that checks the caller's role is on an access list."""

    def __init__(self, access_list_name: str):
        self.access_list_name = access_list_name

    async def __call__(
        self,
        caller: Caller = Depends(get_caller),
        db: Session = Depends(get_db),
    ) -> Caller:
        if not caller.authenticated:
            raise AuthenticationError("Authentication required.")
        if not access_service.can_perform(db, caller.role_name, self.access_list_name):
            raise AuthorizationError("Insufficient access.")
        return caller


class RequireVisibility:
    """Dependency that gates list reads of an area for anonymous callers."""

    def __init__(self, area: str):
        self.area = area

    async def __call__(
        self,
        caller: Caller = Depends(get_caller),
        db: Session = Depends(get_db),
    ) -> Caller:
        if not visibility_service.is_readable(db, self.area, caller.authenticated):
            raise AuthenticationError("Authentication required.")
        return caller


# Convenience dependency instances
require_manage_roles = RequireAccess("manage_roles")
require_manage_members = RequireAccess("manage_members")
require_manage_access_lists = RequireAccess("manage_access_lists")
require_view_audit_log = RequireAccess("view_audit_log")
members_readable = RequireVisibility("members")
roles_readable = RequireVisibility("roles")
