"""Common request and response schemas used across the API."""

from datetime import UTC, datetime

from pydantic import BaseModel, Field


class PaginationRequest(BaseModel):
    """Query parameters for paginated listings.

    Zero means "use the default" (page 1, 10 per page).
    """

    search: str = Field("", description="Case-sensitive substring of the user name")
    page: int = Field(0, ge=0)
    per_page: int = Field(0, ge=0)


class PaginationResponse(BaseModel):
    """Pagination metadata returned alongside a page of items."""

    page: int
    per_page: int
    max_page: int
    count: int


class ErrorResponse(BaseModel):
    """Standard error response format for API errors.

    Attributes:
        error: Error category (e.g., 'not_found', 'invalid_token')
        message: Human-readable error message
        data: Optional partial result accompanying the error
        timestamp: When the error occurred
    """

    error: str = Field(..., description="Error category")
    message: str = Field(..., description="Human-readable error message")
    data: dict | None = Field(None, description="Partial result, if any")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class MessageResponse(BaseModel):
    """Simple message response for operations that return only a message."""

    message: str
