"""Services layer - business logic and external integrations.

- user_service: registration, verification, profile and token flows
- password_service, token_codec, jwt_service: credential primitives
- email_service, template_service, file_storage: collaborators
- repositories/: Data access layer

Common imports for convenience:
    from userhub.services import UserService, UnitOfWork
"""

# Re-export commonly used components for convenience
from userhub.services.exceptions import ErrorCategory, UserServiceError
from userhub.services.jwt_service import JWTService, TokenValidationError
from userhub.services.password_service import PasswordService
from userhub.services.repositories import (
    DuplicateError,
    NotFoundError,
    RefreshTokenRepository,
    RepositoryError,
    UserRepository,
)
from userhub.services.token_codec import TokenCodec
from userhub.services.unit_of_work import UnitOfWork
from userhub.services.user_service import UserService

__all__ = [
    # Repositories
    "DuplicateError",
    "NotFoundError",
    "RefreshTokenRepository",
    "RepositoryError",
    "UserRepository",
    "UnitOfWork",
    # Services
    "ErrorCategory",
    "JWTService",
    "PasswordService",
    "TokenCodec",
    "TokenValidationError",
    "UserService",
    "UserServiceError",
]
