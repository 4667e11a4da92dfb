"""API tests for generation jobs."""

import httpx
import pytest
from httpx import AsyncClient

from aimusic_studio.core.database.repositories import GenerationJobRepository

pytestmark = pytest.mark.asyncio

BASE = "/api/v1/generation"


async def test_create_test_job_runs_in_background(client: AsyncClient):
    response = await client.post(BASE, json={"prompt": "Sleepy piano loop", "provider": "test", "duration": 45})

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "pending"
    assert body["credits_used"] == 0
    assert body["message"] == "Generation started"

    status_response = await client.get(f"{BASE}/{body['job_id']}")
    job = status_response.json()
    assert job["status"] == "completed"
    assert job["progress"] == 100
    assert job["track"]["duration"] == 45
    assert job["track"]["title"] == "Test: Sleepy piano loop"


async def test_wait_processes_before_answering(client: AsyncClient):
    response = await client.post(f"{BASE}?wait=true", json={"prompt": "Dub techno", "provider": "test"})

    body = response.json()
    assert body["status"] == "completed"
    assert body["progress"] == 100
    assert body["message"] == "Generation finished"


async def test_wait_reports_failure(client: AsyncClient, suno_http):
    suno_http.responder = lambda request: httpx.Response(200, json={"code": 429, "msg": "Insufficient credits"})

    response = await client.post(
        f"{BASE}?wait=true", json={"prompt": "Anthem", "provider": "suno", "instrumental": True}
    )

    body = response.json()
    assert body["status"] == "failed"
    assert body["message"] == "Generation did not complete"
    job = (await client.get(f"{BASE}/{body['job_id']}")).json()
    assert job["error_message"] == "Suno API error: Insufficient credits"
    assert job["credits_used"] == 10


async def test_blank_prompt_is_rejected(client: AsyncClient):
    response = await client.post(BASE, json={"prompt": "   ", "provider": "test"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Prompt is required"


async def test_unknown_provider_is_invalid(client: AsyncClient):
    response = await client.post(BASE, json={"prompt": "x", "provider": "udio"})

    assert response.status_code == 422


async def test_list_only_returns_own_jobs(client: AsyncClient, session, make_job):
    repo = GenerationJobRepository(session)
    own = await repo.create(make_job())
    await repo.create(make_job(user_id="user-2"))

    response = await client.get(BASE, params={"limit": 5})

    assert [job["id"] for job in response.json()] == [own.id]


async def test_foreign_job_is_not_found(client: AsyncClient, session, make_job):
    job = await GenerationJobRepository(session).create(make_job(user_id="user-2"))

    assert (await client.get(f"{BASE}/{job.id}")).status_code == 404
    assert (await client.post(f"{BASE}/{job.id}/cancel")).status_code == 404


async def test_cancel(client: AsyncClient, session, make_job):
    job = await GenerationJobRepository(session).create(make_job(status="processing", progress=60))

    response = await client.post(f"{BASE}/{job.id}/cancel")

    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"
    again = await client.post(f"{BASE}/{job.id}/cancel")
    assert again.status_code == 409
