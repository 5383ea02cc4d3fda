"""
Authentication-related schemas.
"""

from pydantic import BaseModel, Field, EmailStr, field_validator

from spms.models.role import Role
from spms.schemas.common import CamelModel


def _strip(v: str) -> str:
    return v.strip() if isinstance(v, str) else v


class LoginRequest(BaseModel):
    """Login request with email, password and the role being claimed."""

    email: EmailStr = Field(description="Principal email address")
    password: str = Field(min_length=1, max_length=128, description="Plaintext password")
    role: Role = Field(description="Which kind of principal is logging in")

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower().strip()


class SignupRequest(BaseModel):
    """Registration form for a new student or staff member."""

    fullname: str = Field(min_length=1, max_length=255)
    phone_number: str = Field(min_length=1, max_length=32)
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)
    role: Role

    @field_validator("fullname", "phone_number", mode="before")
    @classmethod
    def strip_text(cls, v):
        return _strip(v)

    @field_validator("email", mode="before")
    @classmethod
    def lowercase_email(cls, v):
        return _strip(v).lower() if isinstance(v, str) else v


class PrincipalSummary(BaseModel):
    """Identity returned after a successful login or signup."""

    id: int
    name: str
    email: str
    role: Role


class PasswordChangeRequest(CamelModel):
    """Request to change the caller's password."""

    current_password: str = Field(default="", max_length=128)
    new_password: str = Field(default="", max_length=128)


class ProfileResponse(BaseModel):
    name: str
    email: str
    phone: str
    description: str
    role: Role
