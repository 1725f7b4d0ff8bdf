"""Refresh token data access layer."""

from datetime import UTC, datetime

from sqlalchemy.orm import Session, joinedload

from userhub.models import RefreshToken

from .exceptions import NotFoundError


class RefreshTokenRepository:
    """Centralized refresh token data access.

    Delete operations return the number of rows removed so callers can
    detect a token that was already consumed by a concurrent request.
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def create(self, user_id: str, token: str, expires_at: datetime) -> RefreshToken:
        """Store a new refresh token for a user."""
        refresh_token = RefreshToken(user_id=user_id, token=token, expires_at=expires_at)
        self._db.add(refresh_token)
        self._db.flush()
        return refresh_token

    def find_by_token(self, token: str) -> RefreshToken | None:
        """Find a stored token by value, with its owning user loaded."""
        return (
            self._db.query(RefreshToken)
            .options(joinedload(RefreshToken.user))
            .filter(RefreshToken.token == token)
            .first()
        )

    def get_by_token(self, token: str) -> RefreshToken:
        """Get a stored token by value."""
        refresh_token = self.find_by_token(token)
        if refresh_token is None:
            raise NotFoundError("RefreshToken", "<redacted>")
        return refresh_token

    def count_by_user_id(self, user_id: str) -> int:
        """Count stored tokens for a user, expired ones included."""
        return self._db.query(RefreshToken).filter(RefreshToken.user_id == user_id).count()

    def delete_by_user_id(self, user_id: str) -> int:
        """Delete every token belonging to a user."""
        return (
            self._db.query(RefreshToken)
            .filter(RefreshToken.user_id == user_id)
            .delete(synchronize_session=False)
        )

    def delete_by_token(self, token: str) -> int:
        """Delete a single token by value. Deleting a missing token returns 0."""
        return (
            self._db.query(RefreshToken)
            .filter(RefreshToken.token == token)
            .delete(synchronize_session=False)
        )

    def delete_expired(self, now: datetime | None = None) -> int:
        """Delete every token whose expiry is in the past."""
        now = now or datetime.now(UTC)
        return (
            self._db.query(RefreshToken)
            .filter(RefreshToken.expires_at < now)
            .delete(synchronize_session=False)
        )
