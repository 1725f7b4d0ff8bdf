"""Tests for password hashing."""

from unittest.mock import patch

import bcrypt
import pytest

from userhub.config import Settings
from userhub.services.password_service import (
    CredentialError,
    MalformedHashError,
    PasswordMismatchError,
    PasswordService,
    PasswordTooLongError,
)


def test_hash_password(password_service):
    """Test password hashing."""
    password = "secure_password_123"
    hashed = password_service.hash_password(password)

    assert hashed != password
    assert hashed.startswith("$2b$")  # bcrypt prefix


def test_hash_uses_configured_rounds(password_service):
    assert password_service.hash_password("secure_password_123").startswith("$2b$04$")


def test_same_password_hashes_differently(password_service):
    assert password_service.hash_password("same") != password_service.hash_password("same")


def test_verify_password_correct(password_service):
    """Test verifying correct password."""
    hashed = password_service.hash_password("secure_password_123")

    assert PasswordService.verify_password(hashed, "secure_password_123") is True


def test_verify_password_incorrect(password_service):
    """Mismatch raises instead of returning False."""
    hashed = password_service.hash_password("secure_password_123")

    with pytest.raises(PasswordMismatchError):
        PasswordService.verify_password(hashed, "wrong_password")


def test_verify_password_malformed_hash():
    with pytest.raises(MalformedHashError):
        PasswordService.verify_password("not-a-bcrypt-hash", "whatever")


def test_errors_share_base_class():
    assert issubclass(PasswordMismatchError, CredentialError)
    assert issubclass(MalformedHashError, CredentialError)
    assert issubclass(PasswordTooLongError, CredentialError)


def test_password_over_72_bytes_rejected(password_service):
    with pytest.raises(PasswordTooLongError) as exc_info:
        password_service.hash_password("a" * 73)
    assert exc_info.value.length == 73


def test_password_length_counts_bytes_not_characters(password_service):
    # 25 three-byte characters are 75 bytes
    with pytest.raises(PasswordTooLongError):
        password_service.hash_password("€" * 25)


def test_password_of_exactly_72_bytes_accepted(password_service):
    hashed = password_service.hash_password("a" * 72)
    assert PasswordService.verify_password(hashed, "a" * 72) is True


def test_dummy_hash_never_matches(password_service):
    """The dummy hash is a real bcrypt hash, so checking against it costs real time."""
    with pytest.raises(PasswordMismatchError):
        PasswordService.verify_password(password_service.get_dummy_hash(), "secure_password_123")


def test_dummy_hash_uses_configured_rounds(password_service, test_settings):
    dummy = password_service.get_dummy_hash()

    assert dummy[4:6] == f"{test_settings.bcrypt_rounds:02d}"
    assert dummy[4:6] == password_service.hash_password("secure_password_123")[4:6]


def test_dummy_hash_follows_rounds_of_each_service():
    service = PasswordService(Settings(_env_file=None, bcrypt_rounds=10))

    assert service.get_dummy_hash()[4:6] == "10"


def test_password_over_72_bytes_still_checks_hash(password_service):
    hashed = password_service.hash_password("a" * 72)

    with patch(
        "userhub.services.password_service.bcrypt.checkpw", wraps=bcrypt.checkpw
    ) as checkpw:
        with pytest.raises(PasswordMismatchError):
            PasswordService.verify_password(hashed, "a" * 73)

    checkpw.assert_called_once()
