"""User model for authentication and profile data."""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import uuid4

from sqlalchemy import Boolean, DateTime, Enum, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates
from sqlalchemy.sql import func

from userhub.constants import Role
from userhub.database import Base

if TYPE_CHECKING:
    from userhub.models.refresh_token import RefreshToken


class User(Base):
    """User model representing registered accounts.

    ``password`` always holds a bcrypt hash; hashing happens in the service
    layer before the model is built. Rows are soft-deleted by setting
    ``deleted_at``; the partial unique index keeps email unique among live
    rows only, so a deleted account's address can register again.
    """

    __tablename__ = "users"
    __table_args__ = (
        Index(
            "uq_users_email_active",
            "email",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid4())
    )
    name: Mapped[str] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(255), index=True)
    phone_number: Mapped[str | None] = mapped_column(String(20), index=True)
    password: Mapped[str] = mapped_column(String(255))
    role: Mapped[Role] = mapped_column(
        Enum(
            Role,
            native_enum=False,
            length=50,
            values_callable=lambda roles: [r.value for r in roles],
            validate_strings=True,
        ),
        default=Role.USER,
    )
    image_url: Mapped[str | None] = mapped_column(String(255))
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now()
    )
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    # Relationships
    refresh_tokens: Mapped[list["RefreshToken"]] = relationship(
        back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )

    @validates("role")
    def validate_role(self, key: str, value: "str | Role") -> Role:
        return Role.parse(value)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
