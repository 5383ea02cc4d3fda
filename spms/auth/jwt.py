"""
Session token issue and verification.

Tokens are HS256 JWTs carrying ``userId``, ``email`` and ``role`` plus the
standard ``iat``/``exp`` claims. They are self-contained: nothing is stored
server side, so a token stays valid until it expires.
"""

import logging
import os
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError
from jose.utils import base64url_decode, base64url_encode
from pydantic import BaseModel, ValidationError as PydanticValidationError

from spms.core.config import ENVIRONMENT, resolve_jwt_secret
from spms.models.role import Role

logger = logging.getLogger(__name__)

JWT_SECRET = resolve_jwt_secret(os.getenv("JWT_SECRET") or os.getenv("JWT_SECRET_KEY"), ENVIRONMENT)
JWT_ALGORITHM = "HS256"
SESSION_TOKEN_EXPIRE_DAYS = 7
SESSION_TOKEN_TTL = timedelta(days=SESSION_TOKEN_EXPIRE_DAYS)


def _has_canonical_signature(token: str) -> bool:
    """
    The last base64url character of an HS256 signature carries two unused
    bits that decoding ignores; only the canonical spelling is accepted.
    """
    signature = token.rsplit(".", 1)[-1]
    try:
        raw = base64url_decode(signature.encode("ascii"))
    except (ValueError, UnicodeEncodeError):
        return False
    return base64url_encode(raw).decode("ascii") == signature


class TokenPayload(BaseModel):
    """Identity claims carried by a session token."""
    user_id: int
    email: str
    role: Role


def create_session_token(
    user_id: int,
    email: str,
    role: Role,
    expires_delta: timedelta = SESSION_TOKEN_TTL,
    now: Optional[datetime] = None,
) -> str:
    """
    Sign a session token for a principal.

    Args:
        user_id: The principal's database ID
        email: The principal's email address
        role: Which principal table the ID refers to
        expires_delta: Validity window (7 days unless overridden)
        now: Issue time, defaults to the current UTC time

    Returns:
        Encoded JWT string
    """
    issued_at = now or datetime.now(timezone.utc)
    claims = {
        "userId": user_id,
        "email": email,
        "role": Role(role).value,
        "iat": issued_at,
        "exp": issued_at + expires_delta,
    }
    return jwt.encode(claims, JWT_SECRET, algorithm=JWT_ALGORITHM)


def verify_session_token(token: str) -> Optional[TokenPayload]:
    """
    Check signature and expiry and return the identity claims.

    Any failure (bad signature, malformed token, expired, missing or
    mistyped claims) yields None; callers treat that as unauthenticated.
    """
    if not _has_canonical_signature(token):
        return None

    try:
        claims = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except JWTError as exc:
        logger.debug("Rejected session token: %s", exc)
        return None

    user_id = claims.get("userId")
    # bool is an int subclass; a token claiming userId=true is not ours
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        return None

    try:
        return TokenPayload(user_id=user_id, email=claims.get("email"), role=claims.get("role"))
    except PydanticValidationError:
        return None
