"""
Test fixtures for the User Connection Service API.

Uses an in-memory SQLite database for test isolation.
"""

from datetime import datetime, timezone
from typing import AsyncGenerator

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession

from app.models.database import Base, get_db, UserConnection


# In-memory SQLite for tests
TEST_DATABASE_URL = "sqlite+aiosqlite://"

test_engine = create_async_engine(TEST_DATABASE_URL, echo=False)
TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield a session, then drop tables."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with the test DB injected."""
    from main import app

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def add_connections(
    db: AsyncSession,
    rows: list[tuple[int, str, datetime | None]],
) -> list[UserConnection]:
    """Insert (user_id, ip_address, timestamp) rows directly, bypassing the API."""
    connections = [
        UserConnection(
            user_id=user_id,
            ip_address=ip_address,
            timestamp=timestamp or datetime.now(timezone.utc),
        )
        for user_id, ip_address, timestamp in rows
    ]
    db.add_all(connections)
    await db.commit()
    return connections
