# src/admin_service/infrastructure/database/connection.py
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
import logging

logger = logging.getLogger(__name__)


def enable_sqlite_savepoints(engine: AsyncEngine) -> None:
    """
    Let SQLAlchemy, not the sqlite3 driver, emit BEGIN.

    Without this the driver starts transactions lazily and nested
    transactions (SAVEPOINT) behave inconsistently.
    """
    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")


class DatabaseManager:
    """
    Manages the async engine and session factory.

    Features:
    - Configurable connection pooling (size, overflow, timeout, recycle)
    - Optional isolation level so paginated data/count pairs share a snapshot
    - Automatic session management with commit/rollback
    - Health check and pool statistics

    Usage:
        db = DatabaseManager()
        await db.connect(url="postgresql+asyncpg://...", isolation_level="REPEATABLE READ")
        async with db.session() as session:
            store = SoftDeleteStore(StorageAdapter(session))
        await db.disconnect()
    """

    def __init__(self):
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None
        self._pool_size: int = 5
        self._max_overflow: int = 10

    async def connect(
        self,
        url: str,
        pool_size: int = 5,
        max_overflow: int = 10,
        pool_timeout: int = 30,
        pool_recycle: int = 3600,
        pool_pre_ping: bool = True,
        echo_sql: bool = False,
        isolation_level: str | None = None,
    ) -> None:
        """
        Connect to the database.

        SQLite URLs get a single shared connection (``StaticPool``); pool sizing
        only applies to server databases.

        Raises:
            RuntimeError: If already connected
        """
        if self._engine is not None:
            raise RuntimeError("Database already connected")

        engine_kwargs: Dict[str, Any] = {"echo": echo_sql}
        if isolation_level:
            engine_kwargs["isolation_level"] = isolation_level

        if url.startswith("sqlite"):
            engine_kwargs.update(
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )
        else:
            self._pool_size = pool_size
            self._max_overflow = max_overflow
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_timeout=pool_timeout,
                pool_recycle=pool_recycle,
                pool_pre_ping=pool_pre_ping,
            )

        engine = create_async_engine(url, **engine_kwargs)
        if url.startswith("sqlite"):
            enable_sqlite_savepoints(engine)
        self.bind(engine)

        logger.info(
            "Database connected",
            extra={
                "pool_size": pool_size,
                "max_overflow": max_overflow,
                "isolation_level": isolation_level,
            },
        )

    def bind(self, engine: AsyncEngine) -> None:
        """Use an existing engine (tests share one in-memory engine this way)."""
        self._engine = engine
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def disconnect(self) -> None:
        """Dispose of the engine. Safe to call multiple times."""
        if self._engine:
            logger.info("Disconnecting from database")
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database disconnected")

    @property
    def engine(self) -> AsyncEngine:
        if not self._engine:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._engine

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get a database session with automatic commit/rollback.

        Raises:
            RuntimeError: If database not connected
        """
        if not self._session_factory:
            raise RuntimeError("Database not connected. Call connect() first.")

        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    def get_pool_stats(self) -> Dict[str, Any]:
        """Current connection pool statistics."""
        pool = self.engine.pool
        return {
            "pool_size": self._pool_size,
            "max_overflow": self._max_overflow,
            "checked_in": pool.checkedin() if hasattr(pool, "checkedin") else None,
            "checked_out": pool.checkedout() if hasattr(pool, "checkedout") else None,
        }

    async def health_check(self) -> bool:
        """True when a trivial query succeeds."""
        if not self._engine:
            return False

        try:
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False

    @property
    def is_connected(self) -> bool:
        return self._engine is not None


# Global instance
db = DatabaseManager()


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a session committed after the handler returns."""
    async with db.session() as session:
        yield session
