"""User data access layer."""

import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from userhub.models import User

from .exceptions import DuplicateError, NotFoundError
from .pagination import Page, normalize, paginate

logger = logging.getLogger(__name__)


class UserRepository:
    """Centralized user data access.

    Soft-deleted users are excluded from every query.

    Naming conventions:
    - find_* : Query that may return None
    - get_* : Query that raises NotFoundError if missing
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def _live(self) -> Query:
        return self._db.query(User).filter(User.deleted_at.is_(None))

    def register(self, user: User) -> User:
        """Insert a new user. The password must already be hashed."""
        self._db.add(user)
        try:
            self._db.flush()
        except IntegrityError as e:
            raise DuplicateError("User", "email", user.email) from e
        return user

    def find_by_id(self, user_id: str) -> User | None:
        """Find user by primary key."""
        return self._live().filter(User.id == user_id).first()

    def find_by_email(self, email: str) -> User | None:
        """Find user by exact email."""
        return self._live().filter(User.email == email).first()

    def get_by_id(self, user_id: str) -> User:
        """Get user by primary key."""
        user = self.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def get_by_email(self, email: str) -> User:
        """Get user by exact email."""
        user = self.find_by_email(email)
        if user is None:
            raise NotFoundError("User", email)
        return user

    def check_email(self, email: str) -> tuple[User | None, bool]:
        """Fetch the user owning ``email`` and report whether one exists."""
        user = self.find_by_email(email)
        return user, user is not None

    def update(self, user_id: str, **fields: Any) -> User:
        """Partially update a user; ``None`` values are left untouched."""
        user = self.get_by_id(user_id)
        for name, value in fields.items():
            if value is not None:
                setattr(user, name, value)
        try:
            self._db.flush()
        except IntegrityError as e:
            raise DuplicateError("User", "email", str(fields.get("email"))) from e
        return user

    def delete(self, user_id: str) -> None:
        """Soft-delete a user."""
        user = self.get_by_id(user_id)
        user.deleted_at = datetime.now(UTC)
        self._db.flush()

    def count(self) -> int:
        """Count live users."""
        return self._live().count()

    def get_all_with_pagination(
        self, search: str | None = None, page: int | None = None, per_page: int | None = None
    ) -> Page[User]:
        """List users, optionally filtered by a case-sensitive name substring.

        Only ``name`` is searched; there is no case-insensitive mode.
        """
        page, per_page = normalize(page, per_page)

        query = self._live()
        if search:
            if self._db.get_bind().dialect.name == "sqlite":
                # SQLite LIKE ignores ASCII case; instr() does not.
                query = query.filter(func.instr(User.name, search) > 0)
            else:
                query = query.filter(User.name.contains(search, autoescape=True))

        count = query.count()
        users = paginate(query.order_by(User.created_at, User.id), page, per_page).all()
        return Page(items=list(users), page=page, per_page=per_page, count=count)
