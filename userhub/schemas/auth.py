"""Schemas for authentication endpoints."""

from pydantic import BaseModel, Field

from userhub.constants import Role, TokenType


class UserLoginRequest(BaseModel):
    """Schema for user login."""

    email: str
    password: str


class RefreshTokenRequest(BaseModel):
    """Schema for token refresh and logout."""

    refresh_token: str = Field(min_length=1)


class TokenResponse(BaseModel):
    """Schema for token response."""

    access_token: str
    refresh_token: str
    expires_in: int = Field(..., description="Seconds until the access token expires")
    token_type: str = TokenType.BEARER
    role: Role
