"""
Session helper tests: init_db and the commit/rollback context manager.
"""

from __future__ import annotations

import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import select
from structlog.testing import capture_logs

from projectservice.core import database
from projectservice.models.organization import Organization


@pytest.fixture
async def patched_engine(tmp_path, monkeypatch):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'init.db'}")
    monkeypatch.setattr(database, "engine", engine)
    monkeypatch.setattr(
        database,
        "async_session_factory",
        sessionmaker(engine, class_=AsyncSession, expire_on_commit=False),
    )
    yield engine
    await engine.dispose()


async def _count() -> int:
    async with database.get_session_context() as session:
        result = await session.execute(select(Organization))
        return len(result.scalars().all())


@pytest.mark.asyncio
async def test_session_context_commits_and_rolls_back(patched_engine):
    await database.init_db()

    async with database.get_session_context() as session:
        session.add(Organization(name="Kept", created_by_user_id=uuid.uuid4()))
    assert await _count() == 1

    with pytest.raises(RuntimeError):
        async with database.get_session_context() as session:
            session.add(Organization(name="Dropped", created_by_user_id=uuid.uuid4()))
            await session.flush()
            raise RuntimeError("boom")
    assert await _count() == 1


@pytest.mark.asyncio
async def test_request_session_rolls_back_and_logs(patched_engine):
    await database.init_db()

    sessions = database.get_session()
    session = await sessions.__anext__()
    session.add(Organization(name="Dropped", created_by_user_id=uuid.uuid4()))
    await session.flush()

    with capture_logs() as logs:
        with pytest.raises(RuntimeError):
            await sessions.athrow(RuntimeError("boom"))

    assert await _count() == 0
    assert {"event": "db.rolled_back", "error": "RuntimeError", "log_level": "info"} in logs


@pytest.mark.asyncio
async def test_request_session_commits(patched_engine):
    await database.init_db()

    sessions = database.get_session()
    session = await sessions.__anext__()
    session.add(Organization(name="Kept", created_by_user_id=uuid.uuid4()))
    with pytest.raises(StopAsyncIteration):
        await sessions.__anext__()

    assert await _count() == 1
