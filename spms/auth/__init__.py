"""
Authentication and Authorization module.

Provides:
- Password hashing (bcrypt)
- Session token issue and verification (JWT)
- Session cookie set/clear
- Request dependencies resolving the current principal (see dependencies.py)
"""

from spms.auth.password import (
    hash_password,
    verify_password,
)
from spms.auth.jwt import (
    create_session_token,
    verify_session_token,
    TokenPayload,
)
from spms.auth.session import (
    establish_session,
    revoke_session,
)

__all__ = [
    # Password
    "hash_password",
    "verify_password",
    # JWT
    "create_session_token",
    "verify_session_token",
    "TokenPayload",
    # Cookie
    "establish_session",
    "revoke_session",
]
