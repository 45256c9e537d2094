"""Shared fixtures: in-memory SQLite store, engine facade and HTTP client."""

import os
import tempfile

# Settings are cached on first import; point logging and retries at test values first
os.environ.setdefault("CANONKEEPER_LOG_FILE", os.path.join(tempfile.gettempdir(), "canonkeeper-test.log"))
os.environ.setdefault("CANONKEEPER_STORE_RETRY_BASE_DELAY", "0")
os.environ.setdefault("CANONKEEPER_STORE_RETRY_MAX_DELAY", "0")

import httpx
import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from canonkeeper.app import app
from canonkeeper.database import get_session_factory
from canonkeeper.models import Base
from canonkeeper.services.continuity_engine import ContinuityEngine

AUTHOR = "author-1"


@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(bind=db_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
def continuity(session_factory):
    """The engine facade under test."""
    return ContinuityEngine(session_factory)


@pytest_asyncio.fixture
async def client(session_factory):
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    transport = httpx.ASGITransport(app=app)
    try:
        async with httpx.AsyncClient(
            transport=transport, base_url="http://test", headers={"X-Author-Id": AUTHOR}
        ) as c:
            yield c
    finally:
        app.dependency_overrides.clear()
