"""Admin authentication dependency."""

from fastapi import Depends, HTTPException, status

from userhub.constants import Role
from userhub.dependencies.auth import get_current_user
from userhub.schemas.user import UserResponse


def get_admin_user(current_user: UserResponse = Depends(get_current_user)) -> UserResponse:
    """Require admin privileges.

    Args:
        current_user: The authenticated user from get_current_user dependency.

    Returns:
        The user if they are an admin.

    Raises:
        HTTPException: If the user is not an admin.
    """
    if current_user.role != Role.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user
