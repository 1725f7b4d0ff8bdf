"""
Expired Refresh Token Cleanup

Deletes refresh tokens whose expiry has passed. Expired tokens are already
rejected on use, so this only reclaims storage. Intended to run from cron:

    0 3 * * * cd /srv/userhub && python -m scripts.cleanup_expired_tokens
"""

import logging

from sqlalchemy.orm import sessionmaker

from userhub.services.user_service import UserService

logger = logging.getLogger(__name__)


def cleanup_expired_tokens(session_factory: sessionmaker) -> int:
    """Delete expired refresh tokens and return how many were removed."""
    removed = UserService(session_factory).delete_expired_tokens()
    if removed:
        logger.info(f"Cleanup removed {removed} expired refresh token(s)")
    else:
        logger.info("No expired refresh tokens found")
    return removed


if __name__ == "__main__":
    """Run as standalone script."""
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    from userhub.database import SessionLocal

    cleanup_expired_tokens(SessionLocal)
