"""SQLAlchemy ORM models."""

from userhub.models.refresh_token import RefreshToken
from userhub.models.user import User

__all__ = [
    "RefreshToken",
    "User",
]
