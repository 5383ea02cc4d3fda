"""
Session cookie handling.

The signed session token travels in a single ``token`` cookie. Setting
it logs the client in; overwriting it with an empty, already-expired
value logs it out.
"""

from fastapi import Request, Response

from spms.auth.jwt import SESSION_TOKEN_TTL
from spms.core.config import is_production

SESSION_COOKIE_NAME = "token"
SESSION_COOKIE_MAX_AGE = int(SESSION_TOKEN_TTL.total_seconds())  # 604800


def establish_session(response: Response, token: str) -> None:
    """Attach the session cookie. Calling it twice just overwrites the cookie."""
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        max_age=SESSION_COOKIE_MAX_AGE,
        path="/",
        httponly=True,
        secure=is_production(),
        samesite="lax",
    )


def revoke_session(response: Response) -> None:
    """Tell the client to drop the session cookie immediately."""
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value="",
        max_age=0,
        path="/",
        httponly=True,
        secure=is_production(),
        samesite="lax",
    )


def read_session_token(request: Request) -> str | None:
    return request.cookies.get(SESSION_COOKIE_NAME) or None
