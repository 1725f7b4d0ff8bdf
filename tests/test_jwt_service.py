"""Tests for access and refresh token issuance."""

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from userhub.config import Settings
from userhub.constants import Role
from userhub.services.jwt_service import (
    AccessTokenExpiredError,
    EmptyTokenError,
    InvalidClaimsError,
    InvalidSignatureError,
    JWTService,
    MalformedTokenError,
    TokenValidationError,
    UnexpectedAlgorithmError,
)

SECRET = "test-secret-key-for-jwt-signing-0123456789"


def _encode(payload: dict, key: str = SECRET, algorithm: str = "HS256") -> str:
    return jwt.encode(payload, key, algorithm=algorithm)


def _claims(**overrides) -> dict:
    now = datetime.now(UTC)
    claims = {
        "user_id": "user-123",
        "role": "user",
        "iss": "userhub",
        "iat": now,
        "exp": now + timedelta(minutes=5),
    }
    claims.update(overrides)
    return claims


class TestAccessTokens:
    def test_generate_and_validate(self, jwt_service):
        token, expires_in = jwt_service.generate_access_token("user-123", Role.ADMIN)
        claims = jwt_service.validate_token(token)

        assert claims["user_id"] == "user-123"
        assert claims["role"] == "admin"
        assert claims["iss"] == "userhub"
        assert expires_in == 15 * 60

    def test_header_is_hs256(self, jwt_service):
        token, _ = jwt_service.generate_access_token("user-123", Role.USER)
        assert jwt.get_unverified_header(token)["alg"] == "HS256"

    def test_expires_in_follows_settings(self, test_settings):
        test_settings.access_token_expire_minutes = 30
        _, expires_in = JWTService(test_settings).generate_access_token("u", Role.USER)
        assert expires_in == 1800

    def test_role_string_accepted(self, jwt_service):
        token, _ = jwt_service.generate_access_token("user-123", "admin")
        assert jwt_service.get_role_by_token(token) is Role.ADMIN

    def test_unknown_role_rejected_at_issue(self, jwt_service):
        with pytest.raises(ValueError):
            jwt_service.generate_access_token("user-123", "superuser")

    def test_get_user_id_by_token(self, jwt_service):
        token, _ = jwt_service.generate_access_token("user-123", Role.USER)
        assert jwt_service.get_user_id_by_token(token) == "user-123"


class TestValidateToken:
    def test_empty(self, jwt_service):
        with pytest.raises(EmptyTokenError):
            jwt_service.validate_token("")

    @pytest.mark.parametrize("token", ["abc", "abc.def", "a.b.c.d"])
    def test_wrong_segment_count(self, jwt_service, token):
        with pytest.raises(MalformedTokenError):
            jwt_service.validate_token(token)

    def test_undecodable_segments(self, jwt_service):
        with pytest.raises(MalformedTokenError):
            jwt_service.validate_token("not.a.jwt")

    def test_alg_none_rejected(self, jwt_service):
        forged = jwt.encode(_claims(role="admin"), None, algorithm="none")
        with pytest.raises(UnexpectedAlgorithmError):
            jwt_service.validate_token(forged)

    def test_other_hmac_algorithm_rejected(self, jwt_service):
        token = _encode(_claims(), algorithm="HS512")
        with pytest.raises(UnexpectedAlgorithmError):
            jwt_service.validate_token(token)

    def test_wrong_key(self, jwt_service):
        token = _encode(_claims(), key="another-secret-key-of-sufficient-length")
        with pytest.raises(InvalidSignatureError):
            jwt_service.validate_token(token)

    def test_expired(self, jwt_service):
        token, _ = jwt_service.generate_access_token(
            "user-123", Role.USER, expires_delta=timedelta(hours=-1)
        )
        with pytest.raises(AccessTokenExpiredError):
            jwt_service.validate_token(token)

    def test_wrong_issuer(self, jwt_service):
        with pytest.raises(InvalidClaimsError):
            jwt_service.validate_token(_encode(_claims(iss="someone-else")))

    def test_missing_iat(self, jwt_service):
        claims = _claims()
        del claims["iat"]
        with pytest.raises(InvalidClaimsError):
            jwt_service.validate_token(_encode(claims))

    def test_missing_exp(self, jwt_service):
        claims = _claims()
        del claims["exp"]
        with pytest.raises(InvalidClaimsError):
            jwt_service.validate_token(_encode(claims))

    def test_all_failures_share_base_class(self, jwt_service):
        for token in ["", "abc", jwt.encode(_claims(), None, algorithm="none")]:
            with pytest.raises(TokenValidationError):
                jwt_service.validate_token(token)


class TestClaimExtraction:
    def test_missing_user_id(self, jwt_service):
        claims = _claims()
        del claims["user_id"]
        with pytest.raises(InvalidClaimsError):
            jwt_service.get_user_id_by_token(_encode(claims))

    def test_non_string_user_id(self, jwt_service):
        with pytest.raises(InvalidClaimsError):
            jwt_service.get_user_id_by_token(_encode(_claims(user_id=42)))

    def test_unknown_role(self, jwt_service):
        with pytest.raises(InvalidClaimsError):
            jwt_service.get_role_by_token(_encode(_claims(role="superuser")))

    def test_non_string_role(self, jwt_service):
        with pytest.raises(InvalidClaimsError):
            jwt_service.get_role_by_token(_encode(_claims(role=["admin"])))


class TestRefreshTokens:
    def test_random_and_url_safe(self, jwt_service):
        first, _ = jwt_service.generate_refresh_token()
        second, _ = jwt_service.generate_refresh_token()

        assert first != second
        assert len(first) >= 43
        assert "." not in first

    def test_expiry_follows_settings(self, jwt_service):
        _, expires_at = jwt_service.generate_refresh_token()
        expected = datetime.now(UTC) + timedelta(days=7)
        assert abs((expires_at - expected).total_seconds()) < 5


def test_settings_reject_other_algorithms():
    with pytest.raises(ValueError):
        Settings(_env_file=None, jwt_algorithm="HS512")
