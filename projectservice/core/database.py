"""
Database engine and session scopes for the membership store.

Services never commit: one session spans a request (``get_session``) or a
unit of work outside FastAPI (``get_session_context``), and the scope
commits on success or rolls back on any exception.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

from projectservice.core.config import get_settings

settings = get_settings()
log = structlog.get_logger()

engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_pre_ping=True,
    future=True,
)

async_session_factory = sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def init_db() -> None:
    """Create the membership tables (development only; production runs alembic)."""
    import projectservice.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    log.info("db.initialized", tables=sorted(SQLModel.metadata.tables))


@asynccontextmanager
async def get_session_context():
    """One transaction: commit on success, roll back and re-raise on error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception as exc:
            await session.rollback()
            log.info("db.rolled_back", error=type(exc).__name__)
            raise


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one transaction per request."""
    async with get_session_context() as session:
        yield session
