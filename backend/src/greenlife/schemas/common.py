"""Common schemas used across the API."""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str


class FieldError(BaseModel):
    """A single invalid field in a request body or query."""

    field: str
    message: str


class ValidationErrorResponse(BaseModel):
    """Every validation problem in a request, reported together."""

    detail: str = "Validation failed"
    errors: list[FieldError]


class SubmissionResponse(BaseModel):
    """Acknowledgement of a stored form submission."""

    success: bool = True
    id: str
