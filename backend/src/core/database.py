"""
Database connection and session management.

Provides SQLAlchemy engine, session factory, and dependency injection
for database sessions in FastAPI endpoints.
"""

from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from .config import settings


# =============================================================================
# SQLAlchemy Base
# =============================================================================

Base = declarative_base()


# =============================================================================
# Engine Configuration
# =============================================================================

def get_engine_url() -> str:
    """
    Get database URL.

    Returns:
        Database connection URL string
    """
    return settings.database_url


def build_engine(url: str) -> Engine:
    """
    Create the SQLAlchemy engine for the given URL.

    SQLite (development and tests) gets a thread-agnostic connection;
    an in-memory SQLite database is pinned to one connection so every
    session sees the same tables. Server databases get a tuned pool.
    """
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=settings.debug, **kwargs)

    return create_engine(
        url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True,  # Enable connection health checks
        pool_recycle=settings.db_pool_recycle,
        pool_timeout=settings.db_pool_timeout,
        echo=settings.debug,  # Log SQL queries in debug mode
    )


engine = build_engine(get_engine_url())


# =============================================================================
# Session Factory
# =============================================================================

SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
)


# =============================================================================
# Event Listeners for Connection Management
# =============================================================================

@event.listens_for(engine, "connect")
def set_connection_settings(dbapi_connection, connection_record):
    """
    Configure connection settings when a new connection is created.

    PostgreSQL: UTC timezone and a statement timeout.
    SQLite: enforce foreign keys.
    """
    cursor = dbapi_connection.cursor()
    if engine.dialect.name == "postgresql":
        cursor.execute("SET timezone='UTC'")
        cursor.execute("SET statement_timeout = '30s'")  # 30 second query timeout
    elif engine.dialect.name == "sqlite":
        cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# =============================================================================
# Dependency Injection
# =============================================================================

def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency for database session injection.

    Creates a new session for each request and ensures proper cleanup.

    Yields:
        SQLAlchemy Session instance

    Example:
        @router.get("/campaigns")
        def get_campaigns(db: Session = Depends(get_db)):
            return db.query(RingbaCampaign).all()
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# =============================================================================
# Database Utilities
# =============================================================================

def init_db() -> None:
    """
    Initialize database tables.

    Creates all tables defined in models. Should only be used
    in development or for initial setup.
    """
    # Register every model on Base.metadata before create_all
    from .. import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
