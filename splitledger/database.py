"""
SplitLedger Backend — Database Handle & Session Management
===========================================================

What:  The `Database` store handle (async engine + session factory), the ORM
       declarative base, and the per-request session dependency.
How:   A `Database` is constructed explicitly by the app factory (or by a
       test), stored on `app.state.db`, and disposed in the lifespan shutdown.
       Nothing connects at import time.
Who:   Routes receive sessions via `Depends(get_db_session)`; services receive
       the session as their first argument.

Connection Pooling:
    Server databases (PostgreSQL via asyncpg) use a QueuePool sized from
    settings. SQLite (aiosqlite) uses a StaticPool so that an in-memory
    database is shared by every session of the handle.
"""

import logging
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from splitledger.config import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object, which Alembic reads for autogenerate and
    `Database.create_all()` uses for development schemas.
    """
    pass


class Database:
    """
    Explicitly constructed store handle with an open/close lifecycle.

    Usage:
        db = Database("sqlite+aiosqlite:///:memory:")
        await db.create_all()
        async with db.session() as session:
            ...
        await db.close()
    """

    def __init__(self, url: Optional[str] = None, echo: Optional[bool] = None):
        self.url = url or settings.database_url
        if echo is None:
            echo = settings.log_level == "DEBUG"

        if self.url.startswith("sqlite"):
            self.engine: AsyncEngine = create_async_engine(
                self.url,
                echo=echo,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )
        else:
            self.engine = create_async_engine(
                self.url,
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=settings.db_pool_pre_ping,
                pool_recycle=3600,
                echo=echo,
            )

        # expire_on_commit=False: responses are built from ORM objects after
        # the session has committed.
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    def session(self) -> AsyncSession:
        """Return a new session; use as `async with db.session() as s:`."""
        return self.session_factory()

    async def create_all(self) -> None:
        """Create any missing tables from the ORM metadata."""
        # Models must be imported so their tables are registered on Base.
        from splitledger.models import expense, user  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ensured")

    async def ping(self) -> bool:
        """Run `SELECT 1`; used by the health check."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Database ping failed: %s", str(e))
            return False

    async def close(self) -> None:
        """Close every pooled connection."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Opens a session from the handle attached to `app.state.db`
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back, so a failed request commits nothing
        5. Always: closes the session (returns connection to pool)
    """
    database: Database = request.app.state.db
    async with database.session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
