"""Database Session Manager — async connection pool with scoped transactions and health checks.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - transaction() commits only on normal exit; every other exit path rolls back
    - All SQLAlchemy / driver exceptions mapped to StorageError (core/errors.py)
    - A failing rollback is logged, never raised over the original failure

Design Decisions:
    - One manager per process, created in the FastAPI lifespan and kept on app.state
      (no module-level handle)
    - expire_on_commit=False: prevents lazy-load issues in async context
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy import inspect, text

from axie_ledger.core.errors import StorageError

logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        engine_kwargs = {"pool_pre_ping": True}
        # SQLite pools take no sizing arguments
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await _rollback_quietly(session)
            logger.error(f"DB integrity error: {e}")
            raise StorageError("Integrity constraint violated", "commit") from e
        except OperationalError as e:
            await _rollback_quietly(session)
            logger.error(f"DB operational error: {e}")
            raise StorageError("Connection or operational error", "execute") from e
        except DBAPIError as e:
            await _rollback_quietly(session)
            logger.error(f"DB driver error: {e}")
            raise StorageError("Database driver error", "query") from e
        except SQLAlchemyError as e:
            await _rollback_quietly(session)
            logger.error(f"SQLAlchemy error: {e}")
            raise StorageError("Database operation failed", "unknown") from e
        except OSError as e:
            await _rollback_quietly(session)
            logger.error(f"DB connection error: {e}")
            raise StorageError("Database unreachable", "connect") from e
        finally:
            await session.close()

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[AsyncSession, None]:
        """Session inside one transaction: commit on exit, rollback on any exception.

        Cancellation counts as an exception, so a dropped request never
        leaves a half-applied transaction behind.
        """
        async with self.session() as session:
            async with session.begin():
                yield session

    async def health_check(self) -> bool:
        """Check database connectivity (for the readiness check)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def missing_tables(self, names: tuple[str, ...]) -> list[str]:
        """Names from `names` absent in the database (schema not migrated)."""
        try:
            async with self.engine.connect() as conn:
                existing = await conn.run_sync(
                    lambda sync_conn: set(inspect(sync_conn).get_table_names()),
                )
        except (SQLAlchemyError, OSError) as e:
            raise StorageError("Schema inspection failed", "inspect") from e
        return [name for name in names if name not in existing]

    async def dispose(self) -> None:
        await self.engine.dispose()


async def _rollback_quietly(session: AsyncSession) -> None:
    """Best-effort rollback; the transaction is already being abandoned."""
    try:
        await session.rollback()
    except Exception as e:
        logger.warning(f"DB rollback failed: {e}")
