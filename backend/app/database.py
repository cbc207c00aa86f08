"""
ExportDesk Backend: Database Session Management
===============================================

What:  Async SQLAlchemy engine, session factory, FastAPI session dependency,
       and the helper that turns driver failures into DatabaseError.
How:   Creates an async engine with connection pooling and provides a session
       dependency that commits on success and rolls back on error.
Who:   Used by route handlers via FastAPI's dependency injection system and
       by every service method that touches the datastore.
When:  Engine is created at module import; sessions are created per request.

Connection Pooling:
    pool_size=20, max_overflow=10, pre-ping and hourly recycle for PostgreSQL.
    SQLite URLs (used by the test suite) get the dialect's own pool defaults.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, AsyncIterator, Dict

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config import settings
from app.exceptions import DatabaseError

logger = logging.getLogger(__name__)


def _engine_options(database_url: str) -> Dict[str, Any]:
    """Keyword arguments for create_async_engine for the given URL."""
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if not database_url.startswith("sqlite"):
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


# ── Engine Configuration ──────────────────────────────────────────────────
engine = create_async_engine(settings.database_url, **_engine_options(settings.database_url))

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: response models read attributes after commit
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models share this metadata object, which Alembic reads for
    migrations and the test suite uses for create_all().
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back the transaction and re-raises
        5. Always: closes the session (returns connection to pool)

    Example usage in a route:
        @router.get("/productlist")
        async def list_products(db: AsyncSession = Depends(get_db_session)):
            return await product_service.list_products(db)
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Error Translation ─────────────────────────────────────────────────────
@asynccontextmanager
async def translate_errors(action: str) -> AsyncIterator[None]:
    """
    Wrap a block of datastore calls so driver failures surface as DatabaseError.

    Application exceptions (NotFoundError, ConflictError, ...) pass through
    untouched. The driver message is kept in the context so the 500 response
    can echo it.

    Example:
        async with translate_errors("load freight rates"):
            result = await db.execute(query)
    """
    try:
        yield
    except SQLAlchemyError as e:
        logger.error("Database error while trying to %s: %s", action, str(e), exc_info=True)
        raise DatabaseError(
            message=f"Could not {action}. Please try again.",
            context={"original_error": str(e), "error_type": type(e).__name__},
        ) from e


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine() -> None:
    """Gracefully closes all connections in the pool (called on shutdown)."""
    await engine.dispose()
