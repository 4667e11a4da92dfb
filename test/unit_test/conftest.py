"""Shared fixtures for unit tests: an in-memory database and sample records."""

from __future__ import annotations

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.pool import StaticPool

from aimusic_studio.core.database import entities  # noqa: F401  (registers tables)
from aimusic_studio.core.database.entities import GenerationJob, Lyrics, Track
from aimusic_studio.core.models.domain import JobStatus

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
USER_ID = "user-1"
OTHER_USER_ID = "user-2"


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory SQLite engine with all tables."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def user_id() -> str:
    return USER_ID


@pytest.fixture
def make_job():
    """Factory for unsaved generation jobs."""

    def _make(**overrides) -> GenerationJob:
        data = dict(
            user_id=USER_ID,
            provider="suno",
            model="V4_5",
            status=JobStatus.processing.value,
            progress=60,
            request_params={"prompt": "A calm piano piece", "style": "ambient", "duration": 60},
            credits_used=10,
        )
        data.update(overrides)
        return GenerationJob(**data)

    return _make


@pytest.fixture
def make_track():
    def _make(**overrides) -> Track:
        data = dict(user_id=USER_ID, title="Morning Light", provider="test", duration=60)
        data.update(overrides)
        return Track(**data)

    return _make


@pytest.fixture
def make_lyrics():
    def _make(**overrides) -> Lyrics:
        data = dict(
            user_id=USER_ID,
            title="Lyrics for: summer night...",
            content="Lyrics are being generated...",
            prompt="summer night",
            style="pop",
            provider_lyrics_id="lyr-task-1",
        )
        data.update(overrides)
        return Lyrics(**data)

    return _make
