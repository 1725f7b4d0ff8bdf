"""Unit of work: one session and one transaction per service operation."""

import logging
from types import TracebackType

from sqlalchemy.orm import Session, sessionmaker

from userhub.services.repositories import RefreshTokenRepository, UserRepository

logger = logging.getLogger(__name__)


class UnitOfWork:
    """Scoped transaction boundary grouping repository calls atomically.

    Usage:
        with UnitOfWork(session_factory) as uow:
            user = uow.users.get_by_id(user_id)
            uow.refresh_tokens.delete_by_user_id(user.id)
            uow.commit()

    Leaving the block without calling ``commit()``, or because an exception
    was raised, rolls back everything done inside it. The exception is
    re-raised unchanged. A rollback that fails during that unwind is
    logged, never raised in its place. The session is always closed on exit.
    """

    users: UserRepository
    refresh_tokens: RefreshTokenRepository

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory
        self._session: Session | None = None
        self._committed = False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise RuntimeError("UnitOfWork used outside of a with block")
        return self._session

    def __enter__(self) -> "UnitOfWork":
        self._session = self._session_factory()
        self._committed = False
        self.users = UserRepository(self._session)
        self.refresh_tokens = RefreshTokenRepository(self._session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        try:
            if exc_type is not None:
                # The error already unwinding is the one the caller sees.
                try:
                    self.rollback()
                except Exception:
                    logger.exception(f"Rollback failed while handling {exc_type.__name__}")
            elif not self._committed:
                self.rollback()
        finally:
            self.session.close()
            self._session = None

    def commit(self) -> None:
        """Commit the transaction. Commit failures propagate to the caller."""
        self.session.commit()
        self._committed = True

    def rollback(self) -> None:
        self.session.rollback()
        self._committed = False
