"""Refresh token model for session management."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import uuid4

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from userhub.database import Base

if TYPE_CHECKING:
    from userhub.models.user import User


class RefreshToken(Base):
    """Opaque refresh token issued on login or rotation."""

    __tablename__ = "refresh_tokens"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid4())
    )
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE", onupdate="CASCADE"), index=True
    )
    token: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    user: Mapped["User"] = relationship(back_populates="refresh_tokens")

    def is_expired(self, now: datetime | None = None) -> bool:
        """Return True once ``now`` is past the expiry timestamp."""
        now = now or datetime.now(UTC)
        expires_at = self.expires_at
        # Handle both timezone-aware and naive datetimes (SQLite stores naive)
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=UTC)
        return now > expires_at

    def __repr__(self) -> str:
        return f"<RefreshToken(id={self.id}, user_id='{self.user_id}')>"
