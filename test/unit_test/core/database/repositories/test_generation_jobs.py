"""Unit tests for the generation job repository against in-memory SQLite."""

from __future__ import annotations

from datetime import timedelta

import pytest

from aimusic_studio.core.database.base import utc_now
from aimusic_studio.core.database.repositories import GenerationJobRepository
from aimusic_studio.core.models.domain import JobStatus

pytestmark = pytest.mark.asyncio


@pytest.fixture
def repo(session) -> GenerationJobRepository:
    return GenerationJobRepository(session)


class TestFindByTaskId:
    """Webhook lookup of a job by provider task id."""

    async def test_matches_camel_case_key(self, repo, make_job):
        job = await repo.create(make_job(response_data={"taskId": "task-abc"}))

        found = await repo.find_by_task_id("task-abc")

        assert found is not None and found.id == job.id

    async def test_matches_snake_case_key(self, repo, make_job):
        job = await repo.create(make_job(response_data={"task_id": "task-def"}))

        found = await repo.find_by_task_id("task-def")

        assert found is not None and found.id == job.id

    async def test_falls_back_to_scanning_response_data(self, repo, make_job):
        job = await repo.create(make_job(response_data={"result": {"nested": ["task-ghi"]}}))

        found = await repo.find_by_task_id("task-ghi")

        assert found is not None and found.id == job.id

    async def test_scan_ignores_old_jobs(self, repo, make_job):
        old = utc_now() - timedelta(days=3)
        await repo.create(make_job(response_data={"result": "task-old"}, created_at=old, updated_at=old))

        assert await repo.find_by_task_id("task-old") is None

    async def test_unknown_task(self, repo, make_job):
        await repo.create(make_job(response_data={"taskId": "task-abc"}))

        assert await repo.find_by_task_id("missing") is None


async def test_set_state_clamps_progress(repo, make_job):
    job = await repo.create(make_job(progress=10))

    job = await repo.set_state(job, status=JobStatus.completed, progress=140)

    assert job.status == "completed"
    assert job.progress == 100


async def test_find_stuck_and_fail_many(repo, make_job):
    now = utc_now()
    stale = now - timedelta(minutes=20)
    ancient = now - timedelta(minutes=45)
    stuck_processing = await repo.create(make_job(updated_at=stale, created_at=stale))
    await repo.create(make_job(updated_at=now))
    stuck_pending = await repo.create(make_job(status="pending", progress=0, created_at=ancient, updated_at=ancient))
    await repo.create(make_job(status="pending", progress=0, created_at=now - timedelta(minutes=5)))
    await repo.create(make_job(status="completed", progress=100, created_at=ancient, updated_at=ancient))

    processing, pending = await repo.find_stuck(
        processing_before=now - timedelta(minutes=15),
        pending_before=now - timedelta(minutes=30),
    )

    assert [job.id for job in processing] == [stuck_processing.id]
    assert [job.id for job in pending] == [stuck_pending.id]

    await repo.fail_many([stuck_processing.id, stuck_pending.id], "timed out")
    for job_id in (stuck_processing.id, stuck_pending.id):
        job = await repo.get_by_id(job_id)
        await repo.session.refresh(job)
        assert job.status == "failed"
        assert job.progress == 0
        assert job.error_message == "timed out"


async def test_credits_used_since(repo, make_job):
    now = utc_now()
    await repo.create(make_job(credits_used=10, created_at=now - timedelta(hours=1)))
    await repo.create(make_job(credits_used=5, created_at=now - timedelta(hours=2)))
    await repo.create(make_job(credits_used=40, created_at=now - timedelta(days=2)))
    await repo.create(make_job(user_id="user-2", credits_used=99))

    assert await repo.credits_used_since("user-1", now - timedelta(days=1)) == 15
    assert await repo.credits_used_since("nobody", now - timedelta(days=1)) == 0


async def test_list_for_user_is_newest_first(repo, make_job):
    now = utc_now()
    older = await repo.create(make_job(created_at=now - timedelta(minutes=5)))
    newer = await repo.create(make_job(created_at=now))
    await repo.create(make_job(user_id="user-2"))

    jobs = await repo.list_for_user("user-1", limit=10)

    assert [job.id for job in jobs] == [newer.id, older.id]
