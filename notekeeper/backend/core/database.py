"""
Database Configuration.

SQLAlchemy async engine, session management and error translation
for the SQLite backend.
Uses lazy initialization so the file backend never touches the database.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from notekeeper.backend.core.exceptions import ConflictError, StorageUnavailableError
from notekeeper.backend.core.logging import get_logger
from notekeeper.backend.models import Base

logger = get_logger(__name__)

# Module-level state for lazy initialization
_engine: Any = None
_async_session_factory: async_sessionmaker[AsyncSession] | None = None


def _create_engine() -> AsyncEngine:
    """Create async SQLAlchemy engine."""
    from notekeeper.backend.core.config import get_app_config, get_database_url

    url = get_database_url()
    database = make_url(url).database
    if database and database != ":memory:":
        Path(database).parent.mkdir(parents=True, exist_ok=True)

    engine = create_async_engine(
        url,
        echo=get_app_config().storage.sqlite.echo,
    )
    enable_foreign_keys(engine)
    logger.debug("Database engine created", extra={"database": database})
    return engine


def enable_foreign_keys(engine: AsyncEngine) -> None:
    """Turn on SQLite foreign key enforcement for every new connection."""

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection: Any, connection_record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def get_engine() -> AsyncEngine:
    """
    Get the database engine, creating it on first use.

    Returns:
        SQLAlchemy async engine instance
    """
    global _engine
    if _engine is None:
        _engine = _create_engine()
    return _engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Build a session factory with the settings every caller expects."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Get the session factory, creating it on first use.

    Returns:
        SQLAlchemy async session factory
    """
    global _async_session_factory
    if _async_session_factory is None:
        _async_session_factory = create_session_factory(get_engine())
    return _async_session_factory


async def init_database(engine: AsyncEngine | None = None) -> None:
    """
    Create all tables that do not exist yet.

    Schema migrations are out of scope; this only brings an empty
    database up to the current model definitions.
    """
    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ensured")


async def dispose_engine() -> None:
    """Close all pooled connections and forget the engine."""
    global _engine, _async_session_factory
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _async_session_factory = None
        logger.debug("Database engine disposed")


@asynccontextmanager
async def translate_db_errors(
    operation: str,
    target: str | None = None,
) -> AsyncIterator[None]:
    """
    Convert SQLAlchemy exceptions raised in the block to application exceptions.

    Args:
        operation: Description of the operation for logging
        target: ID or key the operation addresses, if any

    Raises:
        ConflictError: For unique constraint violations
        StorageUnavailableError: For other database errors
    """
    try:
        yield
    except IntegrityError as e:
        logger.warning(
            "Database integrity error",
            extra={"operation": operation, "target": target, "error": str(e)},
        )
        error_str = str(e).lower()
        if "unique" in error_str or "duplicate" in error_str:
            raise ConflictError(f"Resource already exists: {target}") from e
        raise StorageUnavailableError(
            f"Database constraint violation: {operation}",
            operation=operation,
            target=target,
        ) from e
    except SQLAlchemyError as e:
        logger.error(
            "Database error",
            extra={"operation": operation, "target": target, "error": str(e)},
        )
        raise StorageUnavailableError(
            f"Database operation failed: {operation}",
            operation=operation,
            target=target,
        ) from e
