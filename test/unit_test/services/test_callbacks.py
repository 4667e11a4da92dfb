"""Unit tests for Suno webhook handling."""

from __future__ import annotations

import pytest

from aimusic_studio.core.database.repositories import GenerationJobRepository, LyricsRepository, TrackRepository
from aimusic_studio.core.models.io.callbacks import SunoCallback
from aimusic_studio.services import CallbackError, SunoCallbackHandler, clean_lyrics, extract_lyrics_text
from aimusic_studio.services.callbacks import LYRICS_FAILED, LYRICS_FILTERED_EMPTY, LYRICS_NOT_FOUND

pytestmark = pytest.mark.asyncio


def callback(task_id, kind, items=None, *, code=200, msg="success", lyrics_data=None) -> SunoCallback:
    data = {"callbackType": kind, "task_id": task_id}
    if items is not None:
        data["data"] = items
    if lyrics_data is not None:
        data["lyricsData"] = lyrics_data
    return SunoCallback.model_validate({"code": code, "msg": msg, "data": data})


CLIP = {
    "id": "clip-9",
    "title": "Neon Rain",
    "audio_url": "http://mock.cdn/neon.mp3",
    "image_url": "http://mock.cdn/neon.jpg",
    "duration": 149.6,
    "tags": "synthwave",
}


class TestLyricsText:
    def test_prefers_text_field(self):
        assert extract_lyrics_text({"text": "la la", "lyrics": "other"}) == "la la"

    def test_skips_echoed_instructions(self):
        item = {"text": "Create professional lyrics about rain", "content": "[Verse] rain"}
        assert extract_lyrics_text(item) == "[Verse] rain"

    def test_structured_prompt_is_last_resort(self):
        assert extract_lyrics_text({"prompt": "[Verse] from prompt"}) == "[Verse] from prompt"
        assert extract_lyrics_text({"prompt": "plain prompt"}) == LYRICS_NOT_FOUND

    def test_short_content_kept(self):
        assert clean_lyrics("Requirements: none") == "Requirements: none"

    def test_long_content_drops_instruction_lines(self):
        content = "\n".join(["Requirements: rhyme", "[Verse]", "line " * 500, "", "[Chorus]"])
        cleaned = clean_lyrics(content)
        assert "Requirements:" not in cleaned
        assert cleaned.startswith("[Verse]")
        assert cleaned.endswith("[Chorus]")

    def test_long_instruction_only_content(self):
        assert clean_lyrics("Requirements: x\n" * 200) == LYRICS_FILTERED_EMPTY


class TestJobCallbacks:
    async def test_complete_creates_track(self, session, make_job):
        job = await GenerationJobRepository(session).create(make_job(response_data={"taskId": "task-1"}))

        body = await SunoCallbackHandler(session).handle(callback("task-1", "complete", [CLIP]))

        assert body == {"success": True, "job_id": job.id, "status": "completed"}
        await session.refresh(job)
        assert job.progress == 100
        assert job.response_data["result"]["id"] == "clip-9"
        assert job.response_data["taskId"] == "task-1"
        track = await TrackRepository(session).get_by_id(job.track_id)
        assert track.title == "Neon Rain"
        assert track.duration == 150
        assert track.genre == "ambient"
        assert track.provider_track_id == "clip-9"

    async def test_complete_twice_keeps_first_track(self, session, make_job):
        job = await GenerationJobRepository(session).create(make_job(response_data={"taskId": "task-1"}))
        handler = SunoCallbackHandler(session)

        await handler.handle(callback("task-1", "complete", [CLIP]))
        await session.refresh(job)
        first_track = job.track_id
        await handler.handle(callback("task-1", "complete", [{**CLIP, "id": "clip-10"}]))

        await session.refresh(job)
        assert job.track_id == first_track
        assert len(await TrackRepository(session).list()) == 1

    async def test_error_marks_failed_with_provider_message(self, session, make_job):
        job = await GenerationJobRepository(session).create(make_job(response_data={"taskId": "task-2"}))

        await SunoCallbackHandler(session).handle(callback("task-2", "error", code=531, msg="Content rejected"))

        await session.refresh(job)
        assert job.status == "failed"
        assert job.progress == 0
        assert job.error_message == "Content rejected"

    async def test_error_without_message(self, session, make_job):
        job = await GenerationJobRepository(session).create(make_job(response_data={"taskId": "task-2"}))

        await SunoCallbackHandler(session).handle(callback("task-2", "error"))

        await session.refresh(job)
        assert job.error_message == "Generation failed"

    async def test_processing_updates_open_job_only(self, session, make_job):
        repo = GenerationJobRepository(session)
        open_job = await repo.create(make_job(status="pending", progress=0, response_data={"taskId": "task-3"}))
        closed_job = await repo.create(make_job(status="cancelled", progress=40, response_data={"taskId": "task-4"}))
        handler = SunoCallbackHandler(session)

        await handler.handle(callback("task-3", "processing"))
        await handler.handle(callback("task-4", "processing"))

        await session.refresh(open_job)
        await session.refresh(closed_job)
        assert (open_job.status, open_job.progress) == ("processing", 50)
        assert (closed_job.status, closed_job.progress) == ("cancelled", 40)

    async def test_late_error_keeps_completed_job(self, session, make_job):
        job = await GenerationJobRepository(session).create(make_job(response_data={"taskId": "task-5"}))
        handler = SunoCallbackHandler(session)
        await handler.handle(callback("task-5", "complete", [CLIP]))

        body = await handler.handle(callback("task-5", "error", code=500, msg="late failure"))

        await session.refresh(job)
        assert body["status"] == "completed"
        assert (job.status, job.progress, job.error_message) == ("completed", 100, None)
        assert job.track_id is not None

    async def test_complete_ignored_for_cancelled_job(self, session, make_job):
        job = await GenerationJobRepository(session).create(
            make_job(status="cancelled", progress=40, response_data={"taskId": "task-6"})
        )

        body = await SunoCallbackHandler(session).handle(callback("task-6", "complete", [CLIP]))

        await session.refresh(job)
        assert body["status"] == "cancelled"
        assert (job.status, job.track_id) == ("cancelled", None)
        assert await TrackRepository(session).list() == []


class TestLyricsCallbacks:
    async def test_complete_fills_content(self, session, make_lyrics):
        record = await LyricsRepository(session).create(make_lyrics())

        body = await SunoCallbackHandler(session).handle(
            callback("lyr-task-1", "complete", [{"text": "[Verse] stars", "title": "Stars"}])
        )

        assert body == {"success": True, "lyrics_id": record.id}
        await session.refresh(record)
        assert record.content == "[Verse] stars"
        assert record.title == "Stars"

    async def test_lyrics_data_key_and_case_insensitive_task(self, session, make_lyrics):
        record = await LyricsRepository(session).create(make_lyrics(provider_lyrics_id="LYR-TASK-2"))

        await SunoCallbackHandler(session).handle(
            callback("lyr-task-2", "text", lyrics_data=[{"lyrics": "[Chorus] moon"}])
        )

        await session.refresh(record)
        assert record.content == "[Chorus] moon"
        assert record.title == "Lyrics for: summer night..."

    async def test_error_sets_failure_text(self, session, make_lyrics):
        record = await LyricsRepository(session).create(make_lyrics())

        await SunoCallbackHandler(session).handle(callback("lyr-task-1", "error", code=500, msg="boom"))

        await session.refresh(record)
        assert record.content == LYRICS_FAILED


class TestRejectedCallbacks:
    async def test_missing_task_id(self, session):
        with pytest.raises(CallbackError) as exc_info:
            await SunoCallbackHandler(session).handle(SunoCallback.model_validate({"code": 200, "data": {}}))
        assert exc_info.value.status_code == 400

    async def test_unknown_task_id(self, session):
        with pytest.raises(CallbackError) as exc_info:
            await SunoCallbackHandler(session).handle(callback("nobody", "complete", [CLIP]))
        assert exc_info.value.status_code == 404
