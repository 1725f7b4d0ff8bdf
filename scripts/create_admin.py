"""Create or promote an administrator account."""

import getpass
import logging
import sys

from sqlalchemy.orm import sessionmaker

from userhub.constants import Role
from userhub.models import User
from userhub.services.password_service import PasswordService
from userhub.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


def create_admin(
    session_factory: sessionmaker,
    email: str,
    password: str | None = None,
    name: str = "Administrator",
) -> tuple[str, bool]:
    """
    Create a verified admin, or promote the existing user with this email.

    Args:
        session_factory: Session factory for the target database
        email: Admin email address
        password: Password for a new account. Required when creating;
            replaces the current password when promoting.
        name: Display name for a new account

    Returns:
        Tuple of (user_id, created)
    """
    passwords = PasswordService()

    with UnitOfWork(session_factory) as uow:
        existing = uow.users.find_by_email(email)
        if existing:
            fields = {"role": Role.ADMIN, "is_verified": True}
            if password:
                fields["password"] = passwords.hash_password(password)
            uow.users.update(existing.id, **fields)
            uow.commit()
            logger.info("Promoted existing user to admin: %s", existing.id)
            return existing.id, False

        if not password:
            raise ValueError("password is required to create a new admin")

        user = User(
            name=name,
            email=email,
            password=passwords.hash_password(password),
            role=Role.ADMIN,
            is_verified=True,
        )
        uow.users.register(user)
        uow.commit()

        logger.info("Created admin account: %s (id: %s)", email, user.id)
        return user.id, True


if __name__ == "__main__":
    """Run as standalone script: python -m scripts.create_admin EMAIL"""
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    from userhub.database import SessionLocal

    if len(sys.argv) < 2:
        print("usage: python -m scripts.create_admin EMAIL")
        sys.exit(2)

    create_admin(SessionLocal, sys.argv[1], getpass.getpass("Password: ") or None)
