"""
Authentication endpoints.

Provides:
- Login (email/password/role -> session cookie)
- Signup (creates a student or staff row, then logs in)
- Logout (clears the session cookie)
"""

import logging

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from spms.auth.dependencies import get_client_ip
from spms.auth.jwt import create_session_token
from spms.auth.password import needs_rehash
from spms.auth.session import establish_session, revoke_session
from spms.core.database import get_db
from spms.core.errors import ConflictError, CredentialError, NotFoundError
from spms.models.principal import principal_model
from spms.schemas.auth import LoginRequest, PrincipalSummary, SignupRequest
from spms.schemas.common import MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=PrincipalSummary)
async def login(
    request: Request,
    login_data: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """
    Authenticate a student or staff member and set the session cookie.

    The role picks which table is searched, so staff credentials submitted
    as a student are simply not found.
    """
    model = principal_model(login_data.role)
    result = await db.execute(
        select(model).where(model.email == login_data.email)
    )
    principal = result.scalar_one_or_none()

    if principal is None:
        logger.info("Login failed: no %s %s (ip=%s)", login_data.role.value, login_data.email, get_client_ip(request))
        raise NotFoundError(f"{login_data.role.label} not found!")

    if not principal.verify_password(login_data.password):
        logger.info("Login failed: wrong password for %s %s (ip=%s)", login_data.role.value, login_data.email, get_client_ip(request))
        raise CredentialError("Incorrect password!")

    # Upgrade hashes written with a different cost factor
    if needs_rehash(principal.password_hash):
        principal.set_password(login_data.password)
        await db.commit()

    token = create_session_token(principal.id, principal.email, principal.role)
    establish_session(response, token)

    logger.info("Login: %s %s", principal.role.value, principal.email)
    return principal.summary()


@router.post("/signup", response_model=PrincipalSummary, status_code=status.HTTP_201_CREATED)
async def signup(
    signup_data: SignupRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """
    Register a new student or staff member and log them in.

    Emails are unique per role. The lookup below only gives a friendly
    early answer; the unique constraint decides races.
    """
    role = signup_data.role
    model = principal_model(role)
    conflict = ConflictError(f"{role.label} with this email already exists!")

    result = await db.execute(
        select(model.id).where(model.email == signup_data.email)
    )
    if result.scalar_one_or_none() is not None:
        raise conflict

    principal = model(
        name=signup_data.fullname,
        email=signup_data.email,
        phone=signup_data.phone_number,
        description="",
    )
    principal.set_password(signup_data.password)
    db.add(principal)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise conflict

    await db.refresh(principal)

    token = create_session_token(principal.id, principal.email, role)
    establish_session(response, token)

    logger.info("Signup: %s %s", role.value, principal.email)
    return principal.summary()


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response):
    """
    Clear the session cookie.

    Tokens are stateless, so a copy of the token taken before logout keeps
    working until it expires.
    """
    revoke_session(response)

    logger.info("Logout")
    return MessageResponse(message="Logout successful!")
