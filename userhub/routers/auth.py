"""Authentication router."""

import logging

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from userhub.dependencies.auth import get_user_service
from userhub.rate_limiter import limiter
from userhub.schemas.auth import RefreshTokenRequest, TokenResponse, UserLoginRequest
from userhub.schemas.common import MessageResponse
from userhub.schemas.user import (
    SendVerificationEmailRequest,
    UserCreateRequest,
    UserResponse,
    VerifyEmailRequest,
    VerifyEmailResponse,
)
from userhub.services.file_storage import FileUpload
from userhub.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("5/minute")
def register(
    request: Request,
    name: str = Form(...),
    email: str = Form(...),
    password: str = Form(...),
    phone_number: str | None = Form(None),
    image: UploadFile | None = File(None),
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Register a new user and send verification email.

    Accepts multipart form data so a profile image can be uploaded with the
    registration.
    """
    try:
        data = UserCreateRequest(
            name=name, email=email, password=password, phone_number=phone_number or None
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors()) from e

    upload = None
    if image is not None and image.filename:
        upload = FileUpload(filename=image.filename, content=image.file.read())

    return service.register(data, upload)


@router.post("/login", response_model=TokenResponse)
@limiter.limit("5/minute")
def login(
    request: Request,
    data: UserLoginRequest,
    service: UserService = Depends(get_user_service),
) -> TokenResponse:
    """Login and get access/refresh tokens."""
    return service.login(data)


@router.post("/refresh", response_model=TokenResponse)
@limiter.limit("10/minute")
def refresh(
    request: Request,
    data: RefreshTokenRequest,
    service: UserService = Depends(get_user_service),
) -> TokenResponse:
    """Get a new access token using a refresh token."""
    return service.refresh_token(data)


@router.post("/logout", response_model=MessageResponse)
def logout(data: RefreshTokenRequest, service: UserService = Depends(get_user_service)) -> MessageResponse:
    """Logout by deleting the refresh token. Unknown tokens are ignored."""
    service.logout(data.refresh_token)
    return MessageResponse(message="Successfully logged out")


@router.post("/send-verification-email", response_model=MessageResponse)
@limiter.limit("3/minute")
def send_verification_email(
    request: Request,
    data: SendVerificationEmailRequest,
    service: UserService = Depends(get_user_service),
) -> MessageResponse:
    """Resend the email verification link."""
    service.send_verification_email(data)
    return MessageResponse(message="Verification email sent")


@router.post("/verify-email", response_model=VerifyEmailResponse)
@limiter.limit("10/minute")
def verify_email(
    request: Request,
    data: VerifyEmailRequest,
    service: UserService = Depends(get_user_service),
) -> VerifyEmailResponse:
    """Verify an email address using the token from the verification link."""
    return service.verify_email(data)
