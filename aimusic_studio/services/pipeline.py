"""
Music pipeline.

Runs one request through every stage of track production:

    style enhancement -> generation -> [extension] -> [vocal separation]
                      -> [WAV conversion]

Generation goes through ``GenerationService``, so the pipeline's job shows
up in the caller's generation history and on the progress hub like any
other. The optional Suno operations only submit their task; their results
arrive through the Suno callback. The run and each of its steps are
persisted, so status can be read from any worker.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from aimusic_studio.core.database.entities import GenerationJob, PipelineRun, Track
from aimusic_studio.core.database.repositories import (
    GenerationJobRepository,
    PipelineRunRepository,
    TrackRepository,
)
from aimusic_studio.core.logging_config import get_logger
from aimusic_studio.core.models.domain import JobStatus, PipelineStep, PipelineStepStatus, Provider
from aimusic_studio.core.models.io import (
    GenerationRequest,
    PipelineRead,
    PipelineRequest,
    PipelineStepRead,
    TrackSummary,
)
from aimusic_studio.core.monitoring import log_error
from aimusic_studio.providers import ProviderRegistry

from .generation import GenerationService
from .prompt_enhancer import PromptEnhancer

logger = get_logger(__name__)

# the extension never starts before this second of the track
MIN_CONTINUE_AT = 30

STEP_PROGRESS = {
    PipelineStepStatus.pending: 0,
    PipelineStepStatus.processing: 50,
    PipelineStepStatus.completed: 100,
    PipelineStepStatus.failed: 0,
    PipelineStepStatus.skipped: 100,
}


class PipelineStepError(Exception):
    """A pipeline step that could not complete."""


def plan_steps(request: PipelineRequest) -> List[Dict[str, Any]]:
    names = [PipelineStep.style, PipelineStep.generate]
    if request.enable_extension:
        names.append(PipelineStep.extend)
    if request.enable_vocal_separation:
        names.append(PipelineStep.vocal_separation)
    if request.enable_wav_conversion:
        names.append(PipelineStep.wav_conversion)
    return [{"name": name.value, "status": PipelineStepStatus.pending.value} for name in names]


def continue_at(track: Track, extend_at: int) -> int:
    return max((track.duration or 0) - extend_at, MIN_CONTINUE_AT)


def describe_run(
    run: PipelineRun,
    job: Optional[GenerationJob] = None,
    track: Optional[Track] = None,
) -> PipelineRead:
    """Build the status view of a run.

    While generation is running its step reports the generation job's own
    progress instead of the flat 50.
    """
    steps = []
    for step in run.steps:
        status = PipelineStepStatus(step["status"])
        progress = STEP_PROGRESS[status]
        if step["name"] == PipelineStep.generate.value and status is PipelineStepStatus.processing and job is not None:
            progress = job.progress
        steps.append(PipelineStepRead(progress=progress, **step))

    current = None
    if not JobStatus(run.status).is_terminal and run.steps:
        current = PipelineStep(run.steps[run.current_step]["name"])

    return PipelineRead(
        id=run.id,
        user_id=run.user_id,
        status=run.status,
        current_step=current,
        steps=steps,
        total_progress=round(sum(s.progress for s in steps) / len(steps)) if steps else 0,
        generation_job_id=run.generation_job_id,
        track_id=run.track_id,
        error_message=run.error_message,
        created_at=run.created_at,
        updated_at=run.updated_at,
        track=TrackSummary.model_validate(track) if track is not None else None,
    )


class PipelineService:
    """Creates pipeline runs and drives them step by step."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        providers: ProviderRegistry,
        enhancer: PromptEnhancer,
        generation: GenerationService,
    ) -> None:
        self.session_factory = session_factory
        self.providers = providers
        self.enhancer = enhancer
        self.generation = generation

    async def create_run(self, user_id: str, request: PipelineRequest) -> PipelineRun:
        run = PipelineRun(
            user_id=user_id,
            status=JobStatus.pending.value,
            steps=plan_steps(request),
            request_params=request.model_dump(mode="json"),
        )
        async with self.session_factory() as session:
            run = await PipelineRunRepository(session).create(run)
        logger.info(f"Created pipeline {run.id} for user {user_id} with steps {[s['name'] for s in run.steps]}")
        return run

    async def process_run(self, run_id: str) -> None:
        """Run every step of a pipeline. Never raises: failures are recorded on the run."""
        async with self.session_factory() as session:
            repo = PipelineRunRepository(session)
            run = await repo.get_by_id(run_id)
            if run is None:
                logger.error(f"Pipeline {run_id} not found")
                return
            try:
                await self._run(repo, run)
            except Exception as e:
                logger.error(f"Pipeline {run_id} failed: {e}", exc_info=True)
                log_error(type(e).__name__, str(e), {"pipeline_id": run_id})
                await session.rollback()
                await self._fail(repo, run, str(e) or type(e).__name__)

    async def _run(self, repo: PipelineRunRepository, run: PipelineRun) -> None:
        request = PipelineRequest.model_validate(run.request_params)
        suno = self.providers.suno
        run = await repo.set_state(run, status=JobStatus.processing)

        await self._start(repo, run, PipelineStep.style)
        style = await self.enhancer.enhance_style(f"{request.style}, {request.prompt}", suno)
        await self._finish(
            repo,
            run,
            PipelineStep.style,
            result={"enhanced_style": style.enhanced_style, "method": style.method.value},
        )

        await self._start(repo, run, PipelineStep.generate)
        track, task_id = await self._generate(repo, run, request, style.enhanced_style)
        await self._finish(
            repo,
            run,
            PipelineStep.generate,
            task_id=task_id,
            result={"job_id": run.generation_job_id, "track_id": track.id},
        )
        run = await repo.set_state(run, track_id=track.id)

        audio_id = track.provider_track_id
        for name in (PipelineStep.extend, PipelineStep.vocal_separation, PipelineStep.wav_conversion):
            if self._index(run, name) is None:
                continue
            if not audio_id or not task_id:
                await self._finish(
                    repo, run, name, status=PipelineStepStatus.skipped, error="No provider audio to process"
                )
                continue
            await self._start(repo, run, name)
            if name is PipelineStep.extend:
                step_task = await suno.extend(
                    audio_id,
                    prompt=request.extend_prompt,
                    continue_at=continue_at(track, request.extend_at),
                    model=request.model,
                )
            elif name is PipelineStep.vocal_separation:
                step_task = await suno.vocal_removal(task_id, audio_id)
            else:
                step_task = await suno.wav_conversion(task_id, audio_id)
            await self._finish(repo, run, name, task_id=step_task)

        await repo.set_state(run, status=JobStatus.completed)
        logger.info(f"Pipeline {run.id} completed with track {track.id}")

    async def _generate(
        self,
        repo: PipelineRunRepository,
        run: PipelineRun,
        request: PipelineRequest,
        style: str,
    ) -> tuple[Track, Optional[str]]:
        job = await self.generation.create_job(
            run.user_id,
            GenerationRequest(prompt=request.prompt, provider=Provider.suno, model=request.model, style=style),
        )
        await repo.set_state(run, generation_job_id=job.id)
        await self.generation.process_job(job.id)

        job = await GenerationJobRepository(repo.session).get_by_id(job.id)
        if job is None or job.status != JobStatus.completed.value or not job.track_id:
            detail = job.error_message if job is not None and job.error_message else None
            raise PipelineStepError(detail or f"Generation job {run.generation_job_id} did not complete")

        tracks = TrackRepository(repo.session)
        track = await tracks.get_by_id(job.track_id)
        if track is None:
            raise PipelineStepError(f"Track {job.track_id} of generation job {job.id} not found")
        if request.title:
            track = await tracks.update(track, {"title": request.title})
        return track, (job.response_data or {}).get("taskId")

    @staticmethod
    def _index(run: PipelineRun, name: PipelineStep) -> Optional[int]:
        for i, step in enumerate(run.steps):
            if step["name"] == name.value:
                return i
        return None

    async def _set_step(self, repo: PipelineRunRepository, run: PipelineRun, index: int, **changes: Any) -> PipelineRun:
        steps = [dict(step) for step in run.steps]
        steps[index].update({k: v for k, v in changes.items() if v is not None})
        return await repo.set_state(run, steps=steps)

    async def _start(self, repo: PipelineRunRepository, run: PipelineRun, name: PipelineStep) -> None:
        index = self._index(run, name)
        await repo.set_state(run, current_step=index)
        await self._set_step(repo, run, index, status=PipelineStepStatus.processing.value)

    async def _finish(
        self,
        repo: PipelineRunRepository,
        run: PipelineRun,
        name: PipelineStep,
        *,
        status: PipelineStepStatus = PipelineStepStatus.completed,
        task_id: Optional[str] = None,
        result: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
    ) -> None:
        await self._set_step(
            repo, run, self._index(run, name), status=status.value, task_id=task_id, result=result, error=error
        )

    async def _fail(self, repo: PipelineRunRepository, run: PipelineRun, message: str) -> None:
        await repo.session.refresh(run)
        index = run.current_step
        if run.steps and run.steps[index]["status"] == PipelineStepStatus.processing.value:
            run = await self._set_step(repo, run, index, status=PipelineStepStatus.failed.value, error=message)
        await repo.set_state(run, status=JobStatus.failed, error_message=message)
