"""Fixtures for API tests: the app wired to in-memory SQLite and mocked providers."""

from __future__ import annotations

import random
from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from aimusic_studio.core.database import get_session
from aimusic_studio.providers import MurekaClient, ProviderRegistry, SandboxProvider, SunoClient
from aimusic_studio.server.core.config import settings
from aimusic_studio.server.services.auth import AuthenticatedUser
from aimusic_studio.server.services.deps import (
    get_current_user,
    get_prompt_enhancer,
    get_providers,
    get_session_factory,
)
from aimusic_studio.services import ProgressHub, PromptEnhancer, get_progress_hub

from ..conftest import USER_ID
from ..mock_http import Recorder, no_sleep

SUNO_URL = "http://mock.suno/api/v1"
MUREKA_URL = "http://mock.mureka/v1"
ADMIN_TOKEN = "admin-secret"


def _unavailable(request: httpx.Request) -> httpx.Response:
    return httpx.Response(503, json={"code": 503, "msg": "unavailable"})


@pytest.fixture
def suno_http() -> Recorder:
    """Suno transport; tests replace ``responder`` to script answers."""
    return Recorder(_unavailable)


@pytest.fixture
def mureka_http() -> Recorder:
    return Recorder(_unavailable)


@pytest_asyncio.fixture
async def providers(suno_http, mureka_http) -> AsyncGenerator[ProviderRegistry, None]:
    registry = ProviderRegistry(
        suno=SunoClient(
            "suno-key",
            base_url=SUNO_URL,
            client=suno_http.client(),
            sleep=no_sleep,
            max_retries=1,
            retry_delay=0,
        ),
        mureka=MurekaClient(
            "mureka-key",
            base_url=MUREKA_URL,
            health_url="http://mock.mureka/health",
            client=mureka_http.client(),
            sleep=no_sleep,
        ),
        sandbox=SandboxProvider(),
    )
    yield registry
    await registry.suno._client.aclose()
    await registry.mureka._client.aclose()


@pytest.fixture
def hub() -> ProgressHub:
    return ProgressHub()


@pytest.fixture
def current_user() -> AuthenticatedUser:
    return AuthenticatedUser(id=USER_ID, email="listener@example.com")


@pytest.fixture
def admin_token(monkeypatch) -> str:
    monkeypatch.setattr(settings, "admin_token", ADMIN_TOKEN)
    return ADMIN_TOKEN


@pytest.fixture
def app(session_factory, providers, hub, current_user):
    """The application with its dependencies overridden for tests."""
    from aimusic_studio.server.main import app

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_providers] = lambda: providers
    app.dependency_overrides[get_progress_hub] = lambda: hub
    app.dependency_overrides[get_prompt_enhancer] = lambda: PromptEnhancer(rng=random.Random(0))
    app.dependency_overrides[get_current_user] = lambda: current_user
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture(name="client")
async def client_fixture(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
        yield client
