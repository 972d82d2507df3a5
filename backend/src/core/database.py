# pyright: reportMissingTypeStubs=false
"""
Database configuration and session management.

This module defines the SQLAlchemy declarative base and the ``Database``
handle that owns the engine and session factory. The handle is created once
at application startup (see ``main.lifespan``), stored on ``app.state`` and
disposed at shutdown; request handlers receive sessions through ``get_db``.
"""

import logging
from contextlib import contextmanager
from typing import Generator, Optional

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from core.constants import DB_POOL_RECYCLE_SECONDS
from core.exceptions import BookingPlatformError

logger = logging.getLogger(__name__)


# Create Base class for declarative models
class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


# SQLAlchemy event listeners to automatically set created_at and updated_at
@event.listens_for(Base, "before_insert", propagate=True)  # type: ignore
def receive_before_insert(mapper, connection, target):  # type: ignore
    """Set created_at and updated_at on insert."""
    # Import here to avoid circular import
    from utils.datetime_utils import utc_now
    now = utc_now()
    for column_name in ("created_at", "updated_at"):
        # Only set mapped columns; properties won't be in mapper.columns
        if column_name in mapper.columns and getattr(target, column_name, None) is None:  # type: ignore
            setattr(target, column_name, now)


@event.listens_for(Base, "before_update", propagate=True)  # type: ignore
def receive_before_update(mapper, connection, target):  # type: ignore
    """Set updated_at on update."""
    # Import here to avoid circular import
    from utils.datetime_utils import utc_now
    if "updated_at" in mapper.columns:  # type: ignore
        setattr(target, "updated_at", utc_now())


def build_engine(database_url: str) -> Engine:
    """
    Create a SQLAlchemy engine for the given URL.

    SQLite URLs get ``check_same_thread=False`` so FastAPI's threadpool can
    share the connection pool; in-memory SQLite additionally uses a
    ``StaticPool`` so every session sees the same database.
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, echo=False, future=True, **kwargs)

    return create_engine(
        database_url,
        pool_pre_ping=True,  # Verify connections before use
        pool_recycle=DB_POOL_RECYCLE_SECONDS,
        echo=False,          # Disable SQL logging
        future=True,         # Use SQLAlchemy 2.0 style
    )


class Database:
    """
    Persistence handle owning one engine and its session factory.

    Constructed explicitly at process start and passed down; call
    ``dispose()`` at shutdown to release pooled connections.
    """

    def __init__(self, database_url: Optional[str] = None, engine: Optional[Engine] = None):
        if engine is None:
            if database_url is None:
                raise ValueError("Either database_url or engine is required")
            engine = build_engine(database_url)
        self.engine = engine
        self.session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=engine,
            expire_on_commit=False,  # Don't expire objects after commit
        )

    def session(self) -> Session:
        """Open a new session bound to this handle's engine."""
        return self.session_factory()

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """
        Context manager for sessions outside of FastAPI dependency injection.

        Commits on success, rolls back on any exception.

        Example:
            ```python
            with database.session_scope() as db:
                clinic = db.query(Clinic).filter(Clinic.slug == slug).first()
            ```
        """
        db = self.session()
        try:
            yield db
            db.commit()
        except BookingPlatformError:
            # Expected business outcomes, not database failures
            db.rollback()
            raise
        except Exception as e:
            db.rollback()
            logger.exception(f"Database transaction failed: {e}")
            raise
        finally:
            db.close()

    def create_tables(self) -> None:
        """
        Create all database tables defined in SQLAlchemy models.

        Safe to call multiple times - will not recreate existing tables.

        Note:
            In production, prefer using Alembic migrations instead of this function.
            This is primarily useful for testing or initial setup.
        """
        # Import models so every table is registered on Base.metadata
        import models  # noqa: F401
        try:
            Base.metadata.create_all(bind=self.engine)
            logger.info("Database tables created successfully")
        except SQLAlchemyError as e:
            logger.exception(f"Failed to create database tables: {e}")
            raise

    def drop_tables(self) -> None:
        """
        Drop all database tables defined in SQLAlchemy models.

        WARNING: This will permanently delete all data in the tables!
        """
        try:
            Base.metadata.drop_all(bind=self.engine)
            logger.info("Database tables dropped successfully")
        except SQLAlchemyError as e:
            logger.exception(f"Failed to drop database tables: {e}")
            raise

    def dispose(self) -> None:
        """Release all pooled connections."""
        self.engine.dispose()


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    FastAPI dependency to provide database sessions.

    Yields a session from the ``Database`` handle stored on ``app.state``.
    The session is closed after the request, and rolled back if the handler
    raised.

    Example:
        ```python
        @router.get("/clinics")
        def list_clinics(db: Session = Depends(get_db)):
            return db.query(Clinic).all()
        ```
    """
    database: Database = request.app.state.database
    db = database.session()
    try:
        yield db
    except SQLAlchemyError as e:
        logger.exception(f"Database error: {e}")
        db.rollback()
        raise
    except BookingPlatformError:
        # Don't log domain errors as failures - they're expected business logic
        db.rollback()
        raise
    except Exception as e:
        logger.exception(f"Unexpected error in database session: {e}")
        db.rollback()
        raise
    finally:
        db.close()
