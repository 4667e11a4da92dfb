"""
Suno webhook handling.

A callback carries a provider task id. It is matched first against
generation jobs (``response_data.taskId``, ``response_data.task_id``, then a
24 hour scan of serialized response data) and, failing that, against lyrics
records by ``provider_lyrics_id``. Job callbacks move the job through
processing, completion (creating the track) or failure; lyrics callbacks
fill in the generated text.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from aimusic_studio.core.database.base import utc_now
from aimusic_studio.core.database.entities.generation_jobs import GenerationJob
from aimusic_studio.core.database.entities.lyrics import Lyrics
from aimusic_studio.core.database.entities.tracks import Track
from aimusic_studio.core.database.repositories import (
    GenerationJobRepository,
    LyricsRepository,
    TrackRepository,
)
from aimusic_studio.core.logging_config import get_logger
from aimusic_studio.core.models.domain import CallbackType, JobStatus, Provider
from aimusic_studio.core.models.io.callbacks import SunoCallback
from aimusic_studio.core.monitoring import log_generation_event

from .progress_hub import ProgressHub

logger = get_logger(__name__)

LYRICS_TEXT_FIELDS = ("text", "lyrics", "content", "lyric_text")
SECTION_TAGS = ("[Verse]", "[Chorus]", "[Bridge]", "[Outro]", "[Intro]")
# prompt fragments Suno sometimes echoes back instead of lyrics
INSTRUCTION_MARKERS = ("Создай профессиональную лирику", "Create professional lyrics")
INSTRUCTION_LINE_MARKERS = ("Требования:", "Создай", "Requirements:")
MAX_LYRICS_LENGTH = 2000

LYRICS_NOT_FOUND = "Lyrics were generated, but no text was found in the callback data."
LYRICS_FILTERED_EMPTY = "Generation finished, but no song text was found. Please try again."
LYRICS_FAILED = "Lyrics generation failed. Please try again."


class CallbackError(Exception):
    """Callback that cannot be processed; ``status_code`` is the HTTP answer."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code


def extract_lyrics_text(item: Dict[str, Any]) -> str:
    """Pick the lyrics text out of one callback item.

    ``text``, ``lyrics``, ``content`` and ``lyric_text`` are tried in order,
    skipping echoed prompt instructions; a ``prompt`` holding structured
    lyrics (``[Verse]``) is the last resort.
    """
    for field in LYRICS_TEXT_FIELDS:
        value = item.get(field)
        if isinstance(value, str) and value and not any(marker in value for marker in INSTRUCTION_MARKERS):
            return value
    prompt = item.get("prompt")
    if isinstance(prompt, str) and "[Verse]" in prompt:
        return prompt
    return LYRICS_NOT_FOUND


def clean_lyrics(content: str) -> str:
    """Strip instruction lines from overly long content."""
    if len(content) <= MAX_LYRICS_LENGTH:
        return content
    lines = [
        line
        for line in content.split("\n")
        if any(tag in line for tag in SECTION_TAGS)
        or (not any(marker in line for marker in INSTRUCTION_LINE_MARKERS) and line.strip())
    ]
    return "\n".join(lines) if lines else LYRICS_FILTERED_EMPTY


class SunoCallbackHandler:
    """Applies one Suno callback to the matching job or lyrics record."""

    def __init__(self, session: AsyncSession, hub: Optional[ProgressHub] = None) -> None:
        self.session = session
        self.hub = hub
        self.jobs = GenerationJobRepository(session)
        self.lyrics = LyricsRepository(session)
        self.tracks = TrackRepository(session)

    async def handle(self, callback: SunoCallback) -> Dict[str, Any]:
        """Process ``callback``.

        Returns:
            Small acknowledgement body.

        Raises:
            CallbackError: 400 without a task id, 404 when nothing matches it,
                500 when the generated track cannot be saved.
        """
        task_id = callback.data.task_id
        if not task_id:
            raise CallbackError(400, "taskId is required")

        logger.info(f"Suno callback for task {task_id}: {callback.data.callback_type} (code {callback.code})")

        job = await self.jobs.find_by_task_id(task_id)
        if job is not None:
            return await self._handle_job(job, callback)

        record = await self.lyrics.find_by_provider_id(task_id)
        if record is not None:
            return await self._handle_lyrics(record, callback)

        logger.error(f"No generation job or lyrics record found for task {task_id}")
        raise CallbackError(404, "Record not found")

    async def _handle_job(self, job: GenerationJob, callback: SunoCallback) -> Dict[str, Any]:
        kind = callback.data.callback_type
        items = callback.data.items or []

        if kind == CallbackType.complete.value and items:
            if job.status == JobStatus.completed.value and job.track_id:
                logger.info(f"Job {job.id} already completed with track {job.track_id}")
            elif job.status == JobStatus.cancelled.value:
                logger.info(f"Ignoring complete callback for cancelled job {job.id}")
            else:
                job = await self._complete_job(job, items[0])
        elif kind == CallbackType.error.value:
            if JobStatus(job.status).is_terminal:
                logger.info(f"Ignoring error callback for closed job {job.id} ({job.status})")
            else:
                message = callback.msg if callback.code != 200 and callback.msg else "Generation failed"
                job = await self.jobs.set_state(job, status=JobStatus.failed, progress=0, error_message=message)
                await self._publish(job)
        elif kind == CallbackType.processing.value:
            if JobStatus(job.status).is_terminal:
                logger.info(f"Ignoring processing callback for closed job {job.id}")
            else:
                job = await self.jobs.set_state(job, status=JobStatus.processing, progress=50)
                await self._publish(job)
        else:
            logger.debug(f"Callback type {kind} needs no action for job {job.id}")

        return {"success": True, "job_id": job.id, "status": job.status}

    async def _complete_job(self, job: GenerationJob, result: Dict[str, Any]) -> GenerationJob:
        request = job.request_params or {}
        prompt = request.get("prompt") or ""
        duration = result.get("duration")
        track = Track(
            user_id=job.user_id,
            title=result.get("title") or prompt[:50] or "Generated Track",
            description=prompt,
            file_url=result.get("audio_url"),
            artwork_url=result.get("image_url"),
            duration=int(round(duration)) if isinstance(duration, (int, float)) and duration else 120,
            provider=Provider.suno.value,
            provider_track_id=result.get("id"),
            lyrics=request.get("lyrics") or result.get("prompt"),
            genre=request.get("style") or result.get("tags") or "pop",
            generation_params=request,
            is_public=False,
            is_commercial=False,
        )
        try:
            track = await self.tracks.create(track)
        except SQLAlchemyError as e:
            logger.error(f"Failed to save track for job {job.id}: {e}", exc_info=True)
            await self.session.rollback()
            failed = await self.jobs.get_by_id(job.id)
            if failed is not None:
                failed = await self.jobs.set_state(
                    failed, status=JobStatus.failed, progress=0, error_message=f"Failed to save track: {e}"
                )
                await self._publish(failed)
            raise CallbackError(500, "Failed to save track") from e

        job = await self.jobs.set_state(
            job,
            status=JobStatus.completed,
            progress=100,
            track_id=track.id,
            response_data={**(job.response_data or {}), "result": result},
        )
        await self._publish(job)
        logger.info(f"Job {job.id} completed from callback with track {track.id}")
        return job

    async def _handle_lyrics(self, record: Lyrics, callback: SunoCallback) -> Dict[str, Any]:
        kind = callback.data.callback_type
        items: List[Dict[str, Any]] = callback.data.items or callback.data.lyrics_data or []

        if kind in (CallbackType.complete.value, CallbackType.text.value) and items:
            first = items[0]
            content = clean_lyrics(extract_lyrics_text(first))
            await self.lyrics.update(
                record,
                {"content": content, "title": first.get("title") or record.title, "updated_at": utc_now()},
            )
            logger.info(f"Lyrics {record.id} updated from callback ({len(content)} chars)")
        elif kind == CallbackType.error.value:
            await self.lyrics.update(record, {"content": LYRICS_FAILED, "updated_at": utc_now()})
            logger.warning(f"Lyrics generation failed for record {record.id}: {callback.msg}")
        else:
            logger.debug(f"Lyrics callback {kind} for record {record.id}, waiting for completion")

        return {"success": True, "lyrics_id": record.id}

    async def _publish(self, job: GenerationJob) -> None:
        log_generation_event(job.id, job.provider, job.status, job.progress)
        if self.hub is not None:
            await self.hub.publish_job(job)
