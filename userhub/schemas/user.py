"""Schemas for user registration, profile and verification."""

from pydantic import BaseModel, EmailStr, Field

from userhub.constants import Role
from userhub.schemas.common import PaginationResponse


class UserCreateRequest(BaseModel):
    """Schema for user registration."""

    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    phone_number: str | None = Field(None, min_length=8, max_length=20)
    password: str = Field(min_length=8)


class UserUpdateRequest(BaseModel):
    """Schema for partial profile updates. Omitted fields are unchanged."""

    name: str | None = Field(None, min_length=2, max_length=100)
    email: EmailStr | None = None
    phone_number: str | None = Field(None, min_length=8, max_length=20)
    password: str | None = Field(None, min_length=8)


class UserResponse(BaseModel):
    """Schema for user data returned to clients."""

    id: str
    name: str
    email: str
    phone_number: str | None = None
    role: Role
    image_url: str | None = None
    is_verified: bool

    model_config = {"from_attributes": True}


class UserUpdateResponse(BaseModel):
    """Schema for the result of a profile update."""

    id: str
    name: str
    email: str
    phone_number: str | None = None
    role: Role
    is_verified: bool

    model_config = {"from_attributes": True}


class UserPaginationResponse(PaginationResponse):
    """A page of users."""

    data: list[UserResponse]


class SendVerificationEmailRequest(BaseModel):
    """Schema for (re)sending the verification email."""

    email: str = Field(min_length=1)


class VerifyEmailRequest(BaseModel):
    """Schema for email verification."""

    token: str = Field(min_length=1)


class VerifyEmailResponse(BaseModel):
    """Schema for email verification result."""

    email: str
    is_verified: bool
