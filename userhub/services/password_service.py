"""Password hashing with bcrypt."""

import logging
from functools import lru_cache

import bcrypt

from userhub.config import Settings, settings

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of its input
BCRYPT_MAX_PASSWORD_BYTES = 72


class CredentialError(Exception):
    """Base exception for password hashing and verification."""


class PasswordTooLongError(CredentialError):
    """Password exceeds bcrypt's maximum input length."""

    def __init__(self, length: int):
        self.length = length
        super().__init__(
            f"password is {length} bytes, maximum is {BCRYPT_MAX_PASSWORD_BYTES}"
        )


class PasswordMismatchError(CredentialError):
    """Password does not match the stored hash."""

    def __init__(self) -> None:
        super().__init__("password does not match")


class MalformedHashError(CredentialError):
    """Stored hash is not a valid bcrypt hash."""

    def __init__(self) -> None:
        super().__init__("malformed password hash")


class PasswordService:
    """Service for one-way password hashing."""

    def __init__(self, config: Settings = settings) -> None:
        self._rounds = config.bcrypt_rounds

    def get_dummy_hash(self) -> str:
        """Get a dummy password hash for timing-consistent verification.

        Checked when the login email is unknown, so it must cost as many
        rounds as the hashes this service produces.
        """
        return _dummy_hash(self._rounds)

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt."""
        encoded = password.encode("utf-8")
        if len(encoded) > BCRYPT_MAX_PASSWORD_BYTES:
            raise PasswordTooLongError(len(encoded))
        hashed = bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=self._rounds))
        return hashed.decode("utf-8")

    @staticmethod
    def verify_password(hashed: str, password: str) -> bool:
        """Verify a password against its hash.

        Returns True on a match. Every failure raises instead of returning
        False, so a caller cannot mistake an error for a negative result.

        Raises:
            PasswordMismatchError: The password does not match.
            MalformedHashError: ``hashed`` is not a bcrypt hash.
        """
        encoded = password.encode("utf-8")
        if len(encoded) > BCRYPT_MAX_PASSWORD_BYTES:
            # Such a password could never have been hashed by hash_password,
            # but it still pays for one check against the stored hash.
            _checkpw(encoded[:BCRYPT_MAX_PASSWORD_BYTES], hashed)
            raise PasswordMismatchError()
        matched = _checkpw(encoded, hashed)
        if not matched:
            raise PasswordMismatchError()
        return True


def _checkpw(encoded: bytes, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(encoded, hashed.encode("utf-8"))
    except ValueError as e:
        logger.debug(f"Password verification error: {e}")
        raise MalformedHashError() from e


@lru_cache(maxsize=8)
def _dummy_hash(rounds: int) -> str:
    return bcrypt.hashpw(b"userhub-dummy-password", bcrypt.gensalt(rounds=rounds)).decode("utf-8")
