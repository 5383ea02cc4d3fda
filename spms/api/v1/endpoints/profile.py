"""
Profile endpoints for the logged-in principal (student or staff).
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from spms.auth.dependencies import load_principal, require_principal
from spms.auth.jwt import TokenPayload
from spms.core.database import get_db
from spms.core.errors import NotFoundError, ValidationError
from spms.schemas.auth import PasswordChangeRequest, ProfileResponse
from spms.schemas.common import MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter()

MIN_PASSWORD_LENGTH = 6


@router.get("", response_model=ProfileResponse)
async def get_profile(
    principal: TokenPayload = Depends(require_principal),
    db: AsyncSession = Depends(get_db),
):
    """Profile fields the session token does not carry."""
    row = await load_principal(db, principal)
    if row is None:
        raise NotFoundError("Not found")

    return ProfileResponse(
        name=row.name,
        email=row.email,
        phone=row.phone,
        description=row.description or "",
        role=row.role,
    )


@router.patch("", response_model=MessageResponse)
async def change_password(
    password_data: PasswordChangeRequest,
    principal: TokenPayload = Depends(require_principal),
    db: AsyncSession = Depends(get_db),
):
    """Change the current principal's password."""
    if not password_data.current_password or not password_data.new_password:
        raise ValidationError("Both current and new password are required")

    if len(password_data.new_password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"New password must be at least {MIN_PASSWORD_LENGTH} characters")

    row = await load_principal(db, principal)
    if row is None:
        raise NotFoundError("Not found")

    if not row.verify_password(password_data.current_password):
        raise ValidationError("Current password is incorrect")

    row.set_password(password_data.new_password)
    await db.commit()

    logger.info("Password changed: %s %s", row.role.value, row.email)
    return MessageResponse(message="Password updated successfully")
