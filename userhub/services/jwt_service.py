"""Access and refresh token issuance."""

import logging
import secrets
from datetime import UTC, datetime, timedelta

import jwt

from userhub.config import Settings, settings
from userhub.constants import Role

logger = logging.getLogger(__name__)

REFRESH_TOKEN_BYTES = 32


class TokenValidationError(Exception):
    """Base exception for access token validation failures."""


class EmptyTokenError(TokenValidationError):
    """No token was supplied."""


class MalformedTokenError(TokenValidationError):
    """Token is not a well-formed three-segment JWS."""


class UnexpectedAlgorithmError(TokenValidationError):
    """Token header names a signing algorithm other than the configured one."""


class InvalidSignatureError(TokenValidationError):
    """Token signature does not verify with the signing key."""


class AccessTokenExpiredError(TokenValidationError):
    """Token ``exp`` claim is in the past."""


class InvalidClaimsError(TokenValidationError):
    """Token claims are missing or have the wrong shape."""


class JWTService:
    """Service for issuing and validating tokens.

    Access tokens are HS256 JWTs carrying ``user_id`` and ``role``. They are
    stateless and stay valid until they expire. Refresh tokens are opaque
    random strings whose validity is tracked in the database.
    """

    def __init__(self, config: Settings = settings) -> None:
        self._secret_key = config.jwt_secret_key
        self._algorithm = config.jwt_algorithm
        self._issuer = config.jwt_issuer
        self._access_expiry = timedelta(minutes=config.access_token_expire_minutes)
        self._refresh_expiry = timedelta(days=config.refresh_token_expire_days)

    def generate_access_token(
        self,
        user_id: str,
        role: Role | str,
        expires_delta: timedelta | None = None,
    ) -> tuple[str, int]:
        """Create a signed access token.

        Returns:
            Tuple of (token, seconds until expiry)
        """
        if expires_delta is None:
            expires_delta = self._access_expiry

        now = datetime.now(UTC)
        payload = {
            "user_id": user_id,
            "role": Role.parse(role).value,
            "iss": self._issuer,
            "iat": now,
            "exp": now + expires_delta,
        }
        token = jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
        return token, int(expires_delta.total_seconds())

    def generate_refresh_token(self) -> tuple[str, datetime]:
        """Create a random URL-safe refresh token and its expiry."""
        token = secrets.token_urlsafe(REFRESH_TOKEN_BYTES)
        return token, datetime.now(UTC) + self._refresh_expiry

    def validate_token(self, token: str) -> dict:
        """Decode and validate an access token, returning its claims.

        Raises:
            EmptyTokenError, MalformedTokenError, UnexpectedAlgorithmError,
            InvalidSignatureError, AccessTokenExpiredError, InvalidClaimsError
        """
        if not token:
            raise EmptyTokenError("token is empty")

        if len(token.split(".")) != 3:
            raise MalformedTokenError("token contains an invalid number of segments")

        try:
            header = jwt.get_unverified_header(token)
        except jwt.DecodeError as e:
            raise MalformedTokenError(f"invalid token header: {e}") from e

        if header.get("alg") != self._algorithm:
            raise UnexpectedAlgorithmError(f"unexpected signing method {header.get('alg')}")

        try:
            return jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                issuer=self._issuer,
                options={"require": ["exp", "iat", "iss"]},
            )
        except jwt.ExpiredSignatureError as e:
            logger.debug("Token expired")
            raise AccessTokenExpiredError("token has expired") from e
        except jwt.InvalidSignatureError as e:
            raise InvalidSignatureError("signature verification failed") from e
        except jwt.DecodeError as e:
            raise MalformedTokenError(f"invalid token: {e}") from e
        except jwt.InvalidTokenError as e:
            logger.debug(f"Invalid token: {e}")
            raise InvalidClaimsError(f"invalid token claims: {e}") from e

    def get_user_id_by_token(self, token: str) -> str:
        """Extract the user id from a valid access token."""
        claims = self.validate_token(token)
        user_id = claims.get("user_id")
        if not isinstance(user_id, str) or not user_id:
            raise InvalidClaimsError("invalid token claims")
        return user_id

    def get_role_by_token(self, token: str) -> Role:
        """Extract the role from a valid access token."""
        claims = self.validate_token(token)
        role = claims.get("role")
        if not isinstance(role, str):
            raise InvalidClaimsError("invalid token claims")
        try:
            return Role.parse(role)
        except ValueError as e:
            raise InvalidClaimsError(str(e)) from e
