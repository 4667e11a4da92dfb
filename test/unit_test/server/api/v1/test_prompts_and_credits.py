import httpx
import pytest
from httpx import AsyncClient

from aimusic_studio.core.database.repositories import GenerationJobRepository

pytestmark = pytest.mark.asyncio


async def test_enhance_uses_local_fallback_without_llm(client: AsyncClient):
    response = await client.post(
        "/api/v1/prompts/enhance", json={"prompt": "rainy jazz cafe", "style": "jazz", "enhancement_type": "complete"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["method"] == "fallback"
    assert body["enhanced_prompt"].startswith("rainy jazz cafe, ")
    assert body["tokens_used"] == 0


async def test_enhance_rejects_blank_prompt(client: AsyncClient):
    response = await client.post("/api/v1/prompts/enhance", json={"prompt": "  "})

    assert response.status_code == 400


async def test_enhance_rejects_unknown_type(client: AsyncClient):
    response = await client.post("/api/v1/prompts/enhance", json={"prompt": "x", "enhancement_type": "mastering"})

    assert response.status_code == 422


async def test_style_via_suno(client: AsyncClient, suno_http):
    suno_http.responder = lambda request: httpx.Response(200, json={"code": 200, "data": {"result": "warm lo-fi hip hop"}})

    response = await client.post("/api/v1/prompts/style", json={"content": "lo-fi"})

    assert response.json()["method"] == "suno_api"
    assert response.json()["enhanced_style"] == "warm lo-fi hip hop"


async def test_style_falls_back_when_suno_is_down(client: AsyncClient):
    response = await client.post("/api/v1/prompts/style", json={"content": "lo-fi"})

    assert response.json()["method"] == "local_fallback"
    assert response.json()["enhanced_style"].startswith("lo-fi, ")


async def test_credits_from_suno(client: AsyncClient, suno_http):
    suno_http.responder = lambda request: httpx.Response(200, json={"code": 200, "data": 250})

    response = await client.get("/api/v1/credits")

    assert response.json()["credits"] == 250
    assert response.json()["method"] == "suno_api"


async def test_credits_estimated_when_suno_is_down(client: AsyncClient, session, make_job):
    await GenerationJobRepository(session).create(make_job(credits_used=25))

    response = await client.get("/api/v1/credits")

    body = response.json()
    assert (body["credits"], body["method"]) == (75, "estimated")
    assert body["warning"] == "Could not fetch exact credits from Suno API"
