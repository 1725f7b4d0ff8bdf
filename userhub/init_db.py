"""Database initialization script."""

from sqlalchemy.engine import Engine

from userhub import models  # noqa: F401  (registers tables on Base.metadata)
from userhub.database import Base, engine


def create_tables(bind: Engine = engine) -> None:
    """Create all database tables."""
    print("Creating database tables...")
    Base.metadata.create_all(bind=bind)
    print("Tables created successfully!")


def init_db():
    """Initialize database tables. Safe to run repeatedly."""
    print("Initializing database...")
    create_tables()
    print("\nDatabase initialization complete!")


if __name__ == "__main__":
    init_db()
