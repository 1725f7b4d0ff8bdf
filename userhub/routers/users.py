"""User profile and administration router."""

import logging

from fastapi import APIRouter, Depends, Response, status

from userhub.dependencies.admin import get_admin_user
from userhub.dependencies.auth import get_current_user, get_user_service
from userhub.schemas.common import MessageResponse, PaginationRequest
from userhub.schemas.user import (
    UserPaginationResponse,
    UserResponse,
    UserUpdateRequest,
    UserUpdateResponse,
)
from userhub.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
def get_me(current_user: UserResponse = Depends(get_current_user)) -> UserResponse:
    """Get current user info."""
    return current_user


@router.patch("/me", response_model=UserUpdateResponse)
def update_me(
    data: UserUpdateRequest,
    current_user: UserResponse = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
) -> UserUpdateResponse:
    """Update the current user's profile."""
    return service.update(data, current_user.id)


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
def delete_me(
    current_user: UserResponse = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
) -> Response:
    """Delete the current user's account and sign out everywhere."""
    service.delete(current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/me/revoke-tokens", response_model=MessageResponse)
def revoke_my_tokens(
    current_user: UserResponse = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
) -> MessageResponse:
    """Sign out of every session of the current user."""
    removed = service.revoke_refresh_token(current_user.id)
    return MessageResponse(message=f"Revoked {removed} sessions")


# Admin


@router.get("", response_model=UserPaginationResponse)
def list_users(
    params: PaginationRequest = Depends(),
    admin: UserResponse = Depends(get_admin_user),
    service: UserService = Depends(get_user_service),
) -> UserPaginationResponse:
    """List users, optionally filtered by name."""
    return service.get_all_users_with_pagination(params)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: str,
    admin: UserResponse = Depends(get_admin_user),
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    return service.get_user_by_id(user_id)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: str,
    admin: UserResponse = Depends(get_admin_user),
    service: UserService = Depends(get_user_service),
) -> Response:
    service.delete(user_id)
    logger.info(f"Admin {admin.id} deleted user {user_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{user_id}/revoke-tokens", response_model=MessageResponse)
def revoke_user_tokens(
    user_id: str,
    admin: UserResponse = Depends(get_admin_user),
    service: UserService = Depends(get_user_service),
) -> MessageResponse:
    """Force a user to sign in again on every device."""
    removed = service.revoke_refresh_token(user_id)
    logger.info(f"Admin {admin.id} revoked tokens of user {user_id}")
    return MessageResponse(message=f"Revoked {removed} sessions")
