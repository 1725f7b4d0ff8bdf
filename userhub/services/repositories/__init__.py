"""Repository layer - data access abstraction.

Repositories handle all database queries, providing a clean interface
for services. Services should use repositories for data access rather
than directly querying SQLAlchemy models.

The Repository pattern separates data access from business logic:
- Repositories: Pure data access (queries, creates, updates)
- Services: Business logic that uses repositories

Dependency direction: Services -> Repositories -> Models
"""

from .exceptions import DuplicateError, NotFoundError, RepositoryError
from .pagination import Page, total_page
from .refresh_token_repository import RefreshTokenRepository
from .user_repository import UserRepository

__all__ = [
    "DuplicateError",
    "NotFoundError",
    "Page",
    "RefreshTokenRepository",
    "RepositoryError",
    "UserRepository",
    "total_page",
]
