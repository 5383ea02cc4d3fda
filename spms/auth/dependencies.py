"""
FastAPI dependencies for authentication and authorization.

Provides:
- get_current_principal: the identity in the session cookie, or None
- require_principal: same, but 401 when there is none
- require_role: 403 unless the caller holds a specific role
- get_current_student / get_current_staff: the caller's full database row
"""

from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from spms.auth.jwt import TokenPayload, verify_session_token
from spms.auth.session import read_session_token
from spms.core.database import get_db
from spms.core.errors import AuthenticationRequiredError, AuthorizationError, NotFoundError
from spms.models.principal import PrincipalMixin, Staff, Student, principal_model
from spms.models.role import Role


async def get_current_principal(request: Request) -> Optional[TokenPayload]:
    """
    Resolve the identity carried by the session cookie.

    Returns None when there is no cookie or the token does not verify.
    Performs no role check and never touches the database.
    """
    token = read_session_token(request)
    if not token:
        return None
    return verify_session_token(token)


async def require_principal(
    principal: Optional[TokenPayload] = Depends(get_current_principal),
) -> TokenPayload:
    if principal is None:
        raise AuthenticationRequiredError()
    return principal


def require_role(role: Role):
    """
    Dependency to require a specific role.

    Usage:
        @router.get("/staff-only")
        async def endpoint(principal: TokenPayload = Depends(require_role(Role.STAFF))):
            ...
    """
    async def role_checker(
        principal: TokenPayload = Depends(require_principal),
    ) -> TokenPayload:
        if principal.role != role:
            raise AuthorizationError(f"{role.label} access required")
        return principal

    return role_checker


require_student = require_role(Role.STUDENT)
require_staff = require_role(Role.STAFF)


async def load_principal(db: AsyncSession, principal: TokenPayload) -> Optional[PrincipalMixin]:
    """
    Fetch the row a token refers to.

    The row must still carry the email the token was issued for; a token
    for a renamed or replaced account resolves to nothing.
    """
    model = principal_model(principal.role)
    row = await db.get(model, principal.user_id)
    if row is None or row.email != principal.email:
        return None
    return row


async def get_current_student(
    principal: TokenPayload = Depends(require_student),
    db: AsyncSession = Depends(get_db),
) -> Student:
    student = await load_principal(db, principal)
    if student is None:
        raise NotFoundError("Student not found")
    return student


async def get_current_staff(
    principal: TokenPayload = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
) -> Staff:
    staff = await load_principal(db, principal)
    if staff is None:
        raise NotFoundError("Staff not found")
    return staff


def get_client_ip(request: Request) -> str:
    """
    Extract client IP address from request.
    Handles X-Forwarded-For header for proxied requests.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # Take the first IP (original client)
        return forwarded.split(",")[0].strip()

    if request.client:
        return request.client.host

    return "unknown"
