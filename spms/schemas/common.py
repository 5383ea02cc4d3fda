"""
Common schemas used across the API.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base for payloads exchanged with the dashboard frontend.

    Fields are declared in snake_case and travel as camelCase
    (``group_name`` <-> ``groupName``). Either spelling is accepted on input.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MessageResponse(BaseModel):
    """Generic success response."""

    message: str


class ErrorResponse(BaseModel):
    """Error response format."""

    detail: str = Field(description="Human-readable error message")
    errors: Optional[Any] = Field(default=None, description="Field level problems, if any")
