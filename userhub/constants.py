"""Application constants to avoid magic strings."""

from enum import Enum


class Role(str, Enum):
    """User roles. The set is closed: every stored role is one of these."""

    USER = "user"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value: "str | Role") -> "Role":
        """Coerce a raw string to a Role, raising ValueError if unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Invalid role: {value!r}") from None


class Pagination:
    """Pagination defaults."""

    DEFAULT_PAGE = 1
    DEFAULT_PER_PAGE = 10


class TokenType:
    """Token type labels returned to clients."""

    BEARER = "Bearer"


# Verification token plaintext layout: "<email>_<expiry>"
VERIFICATION_TOKEN_SEPARATOR = "_"
VERIFICATION_TOKEN_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
VERIFY_EMAIL_ROUTE = "register/verify_email"
VERIFICATION_EMAIL_TEMPLATE = "base_mail.html"

# Profile image uploads are stored under this prefix inside the upload dir
PROFILE_IMAGE_DIR = "profile"
