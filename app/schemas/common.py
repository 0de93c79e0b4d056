"""
Common schemas for API responses.
"""
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Error response schema."""

    detail: str


class ServiceErrorResponse(ErrorResponse):
    """Error response for failed AI generation."""

    kind: str
    retryable: bool
