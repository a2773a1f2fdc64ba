"""Database access for the marketplace: the engine, request sessions and a ping.

A session that leaves a request with an exception is rolled back before it is
closed. Driver failures become DatabaseError, so clients get the standard
envelope with no SQL in it.

The manager is created in the app lifespan (init_db). get_db is the request
dependency that tests override with their own in-memory SQLite sessions.
Pool sizing only applies to server databases.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from app.core import messages
from app.core.errors import DatabaseError

logger = logging.getLogger(__name__)

# Most specific first; the first match names the failed operation.
_FAILED_OPERATION: tuple[tuple[type[SQLAlchemyError], str], ...] = (
    (IntegrityError, "commit"),
    (OperationalError, "execute"),
    (DBAPIError, "query"),
    (SQLAlchemyError, "unknown"),
)


def _operation_for(exc: SQLAlchemyError) -> str:
    return next(op for kind, op in _FAILED_OPERATION if isinstance(exc, kind))


class DatabaseSessionManager:
    """Owns the async engine and hands out request-scoped sessions."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        engine_kwargs = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            operation = _operation_for(e)
            logger.error(f"Database {operation} failed: {e}")
            raise DatabaseError(messages.DATABASE_FAILURE, operation)
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """True when a trivial SELECT round-trips."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database ping failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Request dependency yielding one session per request."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
