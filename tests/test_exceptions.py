"""Tests for the service error taxonomy."""

from userhub.main import status_for
from userhub.services.exceptions import (
    EmailNotFoundError,
    ErrorCategory,
    InvalidRefreshTokenError,
    NotFoundError,
    UserNotFoundError,
    UserServiceError,
)


def test_not_found_errors():
    assert set(NotFoundError.__subclasses__()) == {UserNotFoundError, EmailNotFoundError}
    for error in (UserNotFoundError(), EmailNotFoundError()):
        assert error.category == ErrorCategory.NOT_FOUND
        assert status_for(error) == 404


def test_unknown_refresh_token_is_invalid_not_missing():
    error = InvalidRefreshTokenError()

    assert not isinstance(error, NotFoundError)
    assert error.category == ErrorCategory.INVALID_TOKEN
    assert status_for(error) == 401


def test_message_override():
    assert UserNotFoundError().message == "user not found"
    assert str(UserServiceError("custom")) == "custom"
