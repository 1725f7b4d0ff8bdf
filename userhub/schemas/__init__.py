"""Pydantic schemas for API validation."""

from userhub.schemas.auth import RefreshTokenRequest, TokenResponse, UserLoginRequest
from userhub.schemas.common import (
    ErrorResponse,
    MessageResponse,
    PaginationRequest,
    PaginationResponse,
)
from userhub.schemas.user import (
    SendVerificationEmailRequest,
    UserCreateRequest,
    UserPaginationResponse,
    UserResponse,
    UserUpdateRequest,
    UserUpdateResponse,
    VerifyEmailRequest,
    VerifyEmailResponse,
)

__all__ = [
    "ErrorResponse",
    "MessageResponse",
    "PaginationRequest",
    "PaginationResponse",
    "RefreshTokenRequest",
    "SendVerificationEmailRequest",
    "TokenResponse",
    "UserCreateRequest",
    "UserLoginRequest",
    "UserPaginationResponse",
    "UserResponse",
    "UserUpdateRequest",
    "UserUpdateResponse",
    "VerifyEmailRequest",
    "VerifyEmailResponse",
]
