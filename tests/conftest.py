"""
Shared fixtures: SQLite database, fake collaborators and an HTTP client.
"""

from __future__ import annotations

import json
import os

os.environ.setdefault("PS_SECRET_KEY", "test-secret-key-for-the-project-service")
os.environ.setdefault("PS_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import uuid
from unittest.mock import AsyncMock

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

import projectservice.models  # noqa: F401
from projectservice.core.auth import create_jwt
from projectservice.core.database import get_session
from projectservice.main import create_app
from projectservice.services.mail import MailService, get_mail_service
from projectservice.services.users import UserServiceClient, get_user_service
from projectservice_shared.schemas.users import UsersLookupResponse


# ---------------------------------------------------------------------------
# Database: file-backed SQLite with SAVEPOINT support
# ---------------------------------------------------------------------------

@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")

    # pysqlite's own transaction handling breaks SAVEPOINT; emit BEGIN ourselves.
    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------

@pytest.fixture
def mail_service():
    return AsyncMock(spec=MailService)


@pytest.fixture
def profiles():
    """User profiles known to the fake user service, as dicts keyed by id."""
    return {}


@pytest.fixture
async def user_service(profiles):
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if request.url.path == "/users/batch":
            wanted = set(body["ids"])
            users = [p for p in profiles.values() if str(p["id"]) in wanted]
        else:
            wanted = {e.lower() for e in body["emails"]}
            users = [p for p in profiles.values() if p["email"].lower() in wanted]
        payload = UsersLookupResponse.model_validate({"users": users})
        return httpx.Response(200, json=payload.model_dump(mode="json"))

    client = UserServiceClient("http://users.test", transport=httpx.MockTransport(handler))
    yield client
    await client.close()


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------

@pytest.fixture
def app(session_factory, mail_service, user_service):
    app = create_app()

    async def _get_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = _get_session
    app.dependency_overrides[get_mail_service] = lambda: mail_service
    app.dependency_overrides[get_user_service] = lambda: user_service
    return app


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth_headers():
    """Build bearer headers for a user id and email."""

    def _headers(user_id: uuid.UUID, email: str = "someone@example.com") -> dict:
        return {"Authorization": f"Bearer {create_jwt(user_id, email)}"}

    return _headers
