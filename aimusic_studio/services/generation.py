"""
Generation service.

Owns the lifecycle of a generation job:

    pending -> processing 10 -> [lyrics 20] -> 40 -> submit -> 60
            -> provider polling (60..80) -> 80 -> track created -> completed 100

Any failure along the way marks the job ``failed`` with progress 0 and the
error message. A job that is cancelled or failed by cleanup is left alone:
processing stops at the next checkpoint and nothing is submitted after that.
Processing runs outside the request (FastAPI background task) with its own
database session, so it never shares a session with the route that created
the job.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from aimusic_studio.core.database.entities.generation_jobs import GenerationJob
from aimusic_studio.core.database.entities.tracks import Track
from aimusic_studio.core.database.repositories import GenerationJobRepository, TrackRepository
from aimusic_studio.core.logging_config import get_logger
from aimusic_studio.core.models.domain import JobStatus, Provider
from aimusic_studio.core.models.io.generation import GenerationRequest
from aimusic_studio.core.monitoring import log_error, log_generation_event
from aimusic_studio.providers import GenerationParams, GenerationResult, ProviderError, ProviderRegistry

from .progress_hub import ProgressHub

logger = get_logger(__name__)

DEFAULT_MODELS: Dict[Provider, str] = {
    Provider.suno: "V4_5",
    Provider.mureka: "mureka-v6",
    Provider.test: "test",
}

# credits charged per started 30 seconds of audio
CREDITS_PER_BLOCK: Dict[Provider, int] = {
    Provider.suno: 5,
    Provider.mureka: 8,
    Provider.test: 0,
}


def default_model(provider: Provider | str) -> str:
    return DEFAULT_MODELS[Provider(provider)]


def calculate_credits(provider: Provider | str, duration: int) -> int:
    """Credits a generation costs: ``ceil(duration / 30)`` blocks at the provider's rate."""
    return math.ceil(duration / 30) * CREDITS_PER_BLOCK[Provider(provider)]


class JobClosedError(Exception):
    """Raised when a job reached a terminal state while it was being processed."""


class GenerationService:
    """Creates generation jobs and drives them through a provider."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        providers: ProviderRegistry,
        hub: Optional[ProgressHub] = None,
    ) -> None:
        self.session_factory = session_factory
        self.providers = providers
        self.hub = hub

    async def create_job(self, user_id: str, request: GenerationRequest) -> GenerationJob:
        """Persist a ``pending`` job for ``request``."""
        model = request.model or default_model(request.provider)
        job = GenerationJob(
            user_id=user_id,
            provider=request.provider.value,
            model=model,
            status=JobStatus.pending.value,
            progress=0,
            request_params={
                "prompt": request.prompt,
                "style": request.style,
                "duration": request.duration,
                "instrumental": request.instrumental,
                "lyrics": request.lyrics,
                "model": request.model,
            },
            credits_used=calculate_credits(request.provider, request.duration),
        )
        async with self.session_factory() as session:
            job = await GenerationJobRepository(session).create(job)
        logger.info(f"Created generation job {job.id} for user {user_id} [{job.provider}/{job.model}]")
        return job

    async def process_job(self, job_id: str) -> None:
        """Run a job to completion. Never raises: failures are recorded on the job."""
        try:
            async with self.session_factory() as session:
                repo = GenerationJobRepository(session)
                job = await repo.get_by_id(job_id)
                if job is None:
                    logger.error(f"Generation job {job_id} not found")
                    return
                await self._run(repo, job)
        except JobClosedError:
            logger.info(f"Generation job {job_id} was closed while processing; stopping")
        except Exception as e:
            logger.error(f"Generation job {job_id} failed: {e}", exc_info=True)
            log_error(type(e).__name__, str(e), {"job_id": job_id})
            await self._mark_failed(job_id, str(e) or type(e).__name__)

    async def _run(self, repo: GenerationJobRepository, job: GenerationJob) -> None:
        if JobStatus(job.status).is_terminal:
            raise JobClosedError(job.id)

        params = self._params_for(job)
        provider = self.providers.get(job.provider)

        await self._update(repo, job, status=JobStatus.processing, progress=10)

        if job.provider == Provider.suno.value and not params.instrumental and not params.lyrics:
            await self._update(repo, job, progress=20)
            try:
                lyrics, lyrics_task_id = await self.providers.suno.compose_lyrics(params.prompt, params.style)
                params.lyrics = lyrics or None
                logger.info(f"Generated lyrics for job {job.id} (task {lyrics_task_id})")
            except ProviderError as e:
                logger.warning(f"Lyrics generation failed for job {job.id}, continuing without: {e}")

        await self._ensure_open(repo, job)
        await self._update(repo, job, progress=40)
        task_id = await provider.submit(params)
        await self._update(repo, job, progress=60, response_data={"taskId": task_id})

        async def on_progress(progress: int) -> None:
            await self._ensure_open(repo, job)
            await self._update(repo, job, progress=progress)

        result = await provider.wait_for_result(task_id, params, on_progress=on_progress)
        await self._ensure_open(repo, job)
        await self._update(repo, job, progress=80)

        track = await TrackRepository(repo.session).create(self._track_for(job, params, result))
        response_data: Dict[str, Any] = {**(job.response_data or {}), **result.model_dump(mode="json")}
        await self._update(
            repo,
            job,
            status=JobStatus.completed,
            progress=100,
            track_id=track.id,
            response_data=response_data,
        )
        logger.info(f"Generation job {job.id} completed with track {track.id}")

    @staticmethod
    def _params_for(job: GenerationJob) -> GenerationParams:
        request = job.request_params or {}
        return GenerationParams(
            prompt=request.get("prompt") or "",
            model=job.model or default_model(job.provider),
            style=request.get("style") or "pop",
            duration=request.get("duration") or 60,
            instrumental=bool(request.get("instrumental")),
            lyrics=request.get("lyrics") or None,
        )

    @staticmethod
    def _track_for(job: GenerationJob, params: GenerationParams, result: GenerationResult) -> Track:
        return Track(
            user_id=job.user_id,
            title=result.title or params.prompt[:50],
            description=params.prompt,
            duration=result.duration or params.duration,
            file_url=result.audio_url,
            artwork_url=result.image_url,
            genre=params.style,
            provider=job.provider,
            provider_track_id=result.id,
            generation_params={
                "prompt": params.prompt,
                "style": params.style,
                "duration": params.duration,
                "instrumental": params.instrumental,
                "lyrics": params.lyrics,
            },
            lyrics=result.lyrics or params.lyrics,
            is_public=False,
        )

    async def _ensure_open(self, repo: GenerationJobRepository, job: GenerationJob) -> None:
        await repo.session.refresh(job)
        if JobStatus(job.status).is_terminal:
            raise JobClosedError(job.id)

    async def _update(
        self,
        repo: GenerationJobRepository,
        job: GenerationJob,
        *,
        status: Optional[JobStatus] = None,
        progress: Optional[int] = None,
        **changes: Any,
    ) -> GenerationJob:
        job = await repo.set_state(job, status=status, progress=progress, **changes)
        await self._publish(job)
        return job

    async def _mark_failed(self, job_id: str, message: str) -> None:
        async with self.session_factory() as session:
            repo = GenerationJobRepository(session)
            job = await repo.get_by_id(job_id)
            if job is None or JobStatus(job.status).is_terminal:
                return
            job = await repo.set_state(job, status=JobStatus.failed, progress=0, error_message=message)
            await self._publish(job)

    async def _publish(self, job: GenerationJob) -> None:
        log_generation_event(job.id, job.provider, job.status, job.progress)
        if self.hub is not None:
            await self.hub.publish_job(job)
