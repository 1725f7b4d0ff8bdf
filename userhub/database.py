"""Database configuration and session management."""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from userhub.config import settings


# Base class for ORM models
class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""

    pass


def build_engine(database_url: str) -> Engine:
    """Create an engine with pool settings suited to the database backend.

    PostgreSQL gets READ COMMITTED isolation and a lock timeout so that a
    transaction waiting on a row held by a concurrent login/refresh fails
    instead of hanging. SQLite is used for local development and tests.
    """
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            echo=False,
        )

    return create_engine(
        database_url,
        pool_pre_ping=True,  # Enable connection health checks
        pool_size=10,
        max_overflow=20,
        pool_recycle=3600,  # Recycle connections after 1 hour
        echo=False,
        isolation_level="READ COMMITTED",
        connect_args={
            "options": "-c lock_timeout=5000"  # 5s lock timeout
        },
    )


engine = build_engine(settings.database_url)

# Create session factory
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False,  # Prevent lazy loading errors after commit
)


def get_session_factory() -> sessionmaker:
    """
    Session factory dependency for FastAPI routes.

    Services open their own unit of work from the factory, so routes never
    hold a session directly. Tests override this to point at an in-memory
    database.
    """
    return SessionLocal
