"""
Error taxonomy for request handling.

Each HTTP error carries its own status code so handlers can simply
``raise NotFoundError("Student not found!")``. FastAPI renders them as
``{"detail": "<message>"}``.
"""

from fastapi import HTTPException, status


class ConfigurationError(RuntimeError):
    """Deployment configuration is unusable; raised at startup."""


class SPMSHTTPError(HTTPException):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "An internal error occurred"

    def __init__(self, detail: str | None = None, headers: dict[str, str] | None = None):
        super().__init__(
            status_code=self.status_code,
            detail=detail or self.default_detail,
            headers=headers,
        )


class ValidationError(SPMSHTTPError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "All fields are required!"


class CredentialError(SPMSHTTPError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Incorrect password!"


class AuthenticationRequiredError(SPMSHTTPError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Unauthorized"


class AuthorizationError(SPMSHTTPError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Forbidden"


class NotFoundError(SPMSHTTPError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ConflictError(SPMSHTTPError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Already exists"
