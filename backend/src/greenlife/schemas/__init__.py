"""Pydantic schemas for API requests/responses."""

from greenlife.schemas.common import (
    ErrorResponse,
    FieldError,
    SubmissionResponse,
    ValidationErrorResponse,
)

__all__ = [
    "ErrorResponse",
    "FieldError",
    "SubmissionResponse",
    "ValidationErrorResponse",
]
