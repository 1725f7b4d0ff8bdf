"""Service-layer error taxonomy.

Every error raised out of ``UserService`` is a ``UserServiceError``. The
``category`` attribute lets the HTTP layer choose a status code without
inspecting messages. Messages are stable and safe to show to clients.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from userhub.schemas.user import VerifyEmailResponse


class ErrorCategory:
    """Error category constants."""

    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    CONFLICT = "conflict"
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_TOKEN = "invalid_token"
    EXPIRED_TOKEN = "expired_token"
    VALIDATION = "validation"
    UPSTREAM = "upstream"


class UserServiceError(Exception):
    """Base exception for user service operations."""

    category: str = ErrorCategory.VALIDATION
    message: str = "request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.message
        super().__init__(self.message)


# Not found


class NotFoundError(UserServiceError):
    category = ErrorCategory.NOT_FOUND
    message = "not found"


class UserNotFoundError(NotFoundError):
    message = "user not found"


class EmailNotFoundError(NotFoundError):
    message = "email not found"


# Already exists / conflict


class AlreadyExistsError(UserServiceError):
    category = ErrorCategory.ALREADY_EXISTS
    message = "already exists"


class EmailAlreadyExistsError(AlreadyExistsError):
    message = "email already exist"


class AccountAlreadyVerifiedError(UserServiceError):
    category = ErrorCategory.CONFLICT
    message = "account already verified"


# Credentials


class InvalidCredentialsError(UserServiceError):
    """Login failure. The message never reveals which check failed."""

    category = ErrorCategory.INVALID_CREDENTIALS
    message = "invalid email or password"

    def __init__(self) -> None:
        super().__init__()


# Tokens


class InvalidTokenError(UserServiceError):
    category = ErrorCategory.INVALID_TOKEN
    message = "token invalid"


class TokenInvalidError(InvalidTokenError):
    """Email verification token could not be decrypted or parsed."""


class InvalidRefreshTokenError(InvalidTokenError):
    message = "invalid refresh token"


class ExpiredTokenError(UserServiceError):
    category = ErrorCategory.EXPIRED_TOKEN
    message = "token expired"


class TokenExpiredError(ExpiredTokenError):
    """Email verification token is past its expiry.

    Carries a partial response so clients can show which address the link
    was for.
    """

    def __init__(self, response: "VerifyEmailResponse"):
        self.response = response
        super().__init__()


class ExpiredRefreshTokenError(ExpiredTokenError):
    message = "refresh token has expired"


# Validation


class ValidationFailedError(UserServiceError):
    category = ErrorCategory.VALIDATION

    def __init__(self, field: str, message: str | None = None):
        self.field = field
        super().__init__(message or f"invalid value for {field}")


# Upstream collaborators


class UpstreamError(UserServiceError):
    """A collaborator (mail, storage) failed. The wrapped exception is ``__cause__``."""

    category = ErrorCategory.UPSTREAM
    message = "upstream service failed"


class MailDeliveryError(UpstreamError):
    message = "failed to send verification email"


class StorageError(UpstreamError):
    message = "failed to store file"
