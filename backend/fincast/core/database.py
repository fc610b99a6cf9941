"""
database.py — Database Session & Connection Management

Purpose:
- Create and provide access to the database that stores saved snapshots.
- Manage SQLAlchemy Engine + Session lifecycle.
- Expose a FastAPI dependency `get_db()` that yields a session per-request.
- Provide the shared declarative `Base` for every ORM model.

Key Characteristics:
- Synchronous SQLAlchemy engine (fast + simple).
- No Alembic migrations — `init_db()` creates missing tables at startup.
- Session is opened at the start of a request and closed after the response.

This module does NOT:
- Define ORM models (see fincast/models/*).
- Perform any queries or business logic.
"""

from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from fincast.core.config import settings

# -----------------------------------------------------------------------------
# Declarative Base
# -----------------------------------------------------------------------------


class Base(DeclarativeBase):
    pass


# -----------------------------------------------------------------------------
# SQLAlchemy Engine
# -----------------------------------------------------------------------------

def normalize_database_url(db_url: str) -> str:
    """
    Use the psycopg (v3) driver for Postgres URLs that do not name one.

    Example:
        postgresql://u:p@host/db → postgresql+psycopg://u:p@host/db
    """
    if db_url.startswith("postgresql://") and "+" not in db_url.split("://")[0]:
        return db_url.replace("postgresql://", "postgresql+psycopg://", 1)
    return db_url


db_url = normalize_database_url(settings.DATABASE_URL.strip())

_connect_args = {"check_same_thread": False} if db_url.startswith("sqlite") else {}

engine = create_engine(
    db_url,
    pool_pre_ping=True,  # Ensures connections are valid before use
    connect_args=_connect_args,
)

# Session factory
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)


def init_db() -> None:
    """Create any missing tables for the registered ORM models."""
    # Import models so they register on Base.metadata
    from fincast.models import financial_data, investment_model, valuation_parameters  # noqa: F401

    Base.metadata.create_all(bind=engine)

# -----------------------------------------------------------------------------
# FastAPI Dependency
# -----------------------------------------------------------------------------

def get_db() -> Iterator[Session]:
    """
    FastAPI dependency: yields a database session for the duration of the request.

    Usage in API endpoint:
        def endpoint(db: Session = Depends(get_db)):
            db.query(...)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
