from __future__ import annotations

from datetime import timedelta

import httpx
import pytest

from aimusic_studio.core.database.base import utc_now
from aimusic_studio.core.database.repositories import GenerationJobRepository
from aimusic_studio.services import TIMEOUT_MESSAGE, check_credits, cleanup_stuck_jobs, estimate_credits
from aimusic_studio.services.credits import ESTIMATE_WARNING

from ..mock_http import Recorder
from .conftest import suno_client

pytestmark = pytest.mark.asyncio


class TestCleanup:
    async def test_nothing_to_clean(self, session, make_job):
        await GenerationJobRepository(session).create(make_job())

        report = await cleanup_stuck_jobs(session)

        assert report.message == "No stuck jobs found"
        assert report.total_cleaned == 0
        assert report.job_ids == []

    async def test_fails_stuck_jobs(self, session, make_job):
        now = utc_now()
        repo = GenerationJobRepository(session)
        idle = now - timedelta(minutes=16)
        processing = await repo.create(make_job(created_at=idle, updated_at=idle))
        old = now - timedelta(minutes=31)
        pending = await repo.create(make_job(status="pending", progress=0, created_at=old, updated_at=old))
        fresh = await repo.create(make_job(status="pending", progress=0, created_at=now, updated_at=now))

        report = await cleanup_stuck_jobs(session, now=now)

        assert report.message == "Successfully cleaned up stuck jobs"
        assert (report.total_cleaned, report.processing_jobs, report.pending_jobs) == (2, 1, 1)
        assert set(report.job_ids) == {processing.id, pending.id}
        for job in (processing, pending, fresh):
            await session.refresh(job)
        assert processing.status == pending.status == "failed"
        assert processing.error_message == TIMEOUT_MESSAGE
        assert fresh.status == "pending"

    async def test_custom_timeouts(self, session, make_job):
        now = utc_now()
        idle = now - timedelta(minutes=3)
        await GenerationJobRepository(session).create(make_job(created_at=idle, updated_at=idle))

        report = await cleanup_stuck_jobs(session, processing_timeout=timedelta(minutes=2), now=now)

        assert report.processing_jobs == 1


class TestCredits:
    async def test_reads_suno_balance(self, session):
        recorder = Recorder(lambda r: httpx.Response(200, json={"code": 200, "msg": "success", "data": 87}))

        info = await check_credits(session, suno_client(recorder), "user-1")

        assert info.credits == 87
        assert info.method == "suno_api"
        assert info.raw["data"] == 87
        assert recorder.paths() == ["/api/v1/generate/credit"]

    async def test_estimates_when_suno_fails(self, session, make_job):
        await GenerationJobRepository(session).create(make_job(credits_used=30))
        recorder = Recorder(lambda r: httpx.Response(500, text="down"))

        info = await check_credits(session, suno_client(recorder), "user-1")

        assert info.credits == 70
        assert info.method == "estimated"
        assert info.warning == ESTIMATE_WARNING

    async def test_estimates_when_suno_reports_error_code(self, session):
        recorder = Recorder(lambda r: httpx.Response(200, json={"code": 401, "msg": "bad key"}))

        info = await check_credits(session, suno_client(recorder), "user-1")

        assert (info.credits, info.method) == (100, "estimated")

    async def test_estimate_floors_at_zero(self, session, make_job):
        repo = GenerationJobRepository(session)
        await repo.create(make_job(credits_used=80))
        await repo.create(make_job(credits_used=80))

        assert await estimate_credits(session, "user-1") == 0
