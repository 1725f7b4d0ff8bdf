"""Authentication dependencies for protected routes."""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import sessionmaker

from userhub.config import settings
from userhub.database import get_session_factory
from userhub.schemas.user import UserResponse
from userhub.services.exceptions import UserNotFoundError
from userhub.services.jwt_service import JWTService, TokenValidationError
from userhub.services.user_service import UserService

security = HTTPBearer()


def get_user_service(session_factory: sessionmaker = Depends(get_session_factory)) -> UserService:
    """Build the user service bound to the request's session factory."""
    return UserService(session_factory, settings)


def get_jwt_service() -> JWTService:
    return JWTService(settings)


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    jwt_service: JWTService = Depends(get_jwt_service),
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    """
    Get current authenticated user from the access token.

    Usage:
        @router.get("/protected")
        def protected_route(user: UserResponse = Depends(get_current_user)):
            return {"user_id": user.id}
    """
    try:
        user_id = jwt_service.get_user_id_by_token(credentials.credentials)
    except TokenValidationError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None

    try:
        return service.get_user_by_id(user_id)
    except UserNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None
