"""
Music Generation API Endpoints.

This module is the entry point of track generation: it accepts generation
requests, reports job status to the polling client and lets the caller
cancel a job that has not finished yet.

Jobs are processed in a FastAPI background task with their own database
session, so ``POST`` answers as soon as the job is stored. Passing
``wait=true`` processes the job inside the request instead.
"""

from typing import List

from fastapi import APIRouter, BackgroundTasks, HTTPException, Query, status

from aimusic_studio.core.database.repositories import GenerationJobRepository, TrackRepository
from aimusic_studio.core.logging_config import get_logger
from aimusic_studio.core.models.domain import JobStatus
from aimusic_studio.core.models.io import (
    GenerationJobRead,
    GenerationRequest,
    GenerationSubmitted,
    TrackSummary,
)
from aimusic_studio.server.services.deps import CurrentUser, GenerationServiceDep, HubDep, SessionDep

logger = get_logger(__name__)
router = APIRouter()


@router.post(
    "",
    response_model=GenerationSubmitted,
    status_code=status.HTTP_201_CREATED,
    summary="Generate Music",
    description="Create a generation job and start processing it with the selected provider.",
    response_description="The accepted job with its initial status and credit cost.",
    responses={
        201: {"description": "Job created"},
        400: {"description": "Prompt is blank"},
        401: {"description": "Missing or invalid bearer token"},
    },
)
async def create_generation(
    request: GenerationRequest,
    user: CurrentUser,
    service: GenerationServiceDep,
    session: SessionDep,
    background_tasks: BackgroundTasks,
    wait: bool = Query(default=False, description="Process the job before answering"),
) -> GenerationSubmitted:
    """
    Submit a music generation request.

    - **prompt**: What the track should be about (required).
    - **provider**: ``suno``, ``mureka`` or ``test``.
    - **model**: Provider model, the provider default when omitted.
    - **style** / **duration** / **instrumental** / **lyrics**: Generation parameters.

    Suno jobs with vocals and no lyrics get lyrics generated first.
    """
    if not request.prompt.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Prompt is required")

    job = await service.create_job(user.id, request)

    if wait:
        await service.process_job(job.id)
        job = await GenerationJobRepository(session).get_by_id(job.id) or job
        message = "Generation finished" if job.status == JobStatus.completed.value else "Generation did not complete"
    else:
        background_tasks.add_task(service.process_job, job.id)
        message = "Generation started"

    return GenerationSubmitted(
        job_id=job.id,
        status=job.status,
        progress=job.progress,
        credits_used=job.credits_used,
        message=message,
    )


@router.get(
    "",
    response_model=List[GenerationJobRead],
    summary="List Generation Jobs",
    description="Retrieve the caller's most recent generation jobs, newest first.",
)
async def list_generations(
    user: CurrentUser,
    session: SessionDep,
    limit: int = Query(default=20, ge=1, le=100),
) -> List[GenerationJobRead]:
    jobs = await GenerationJobRepository(session).list_for_user(user.id, limit=limit)
    return [GenerationJobRead.model_validate(job) for job in jobs]


@router.get(
    "/{job_id}",
    response_model=GenerationJobRead,
    summary="Get Generation Status",
    description="Retrieve the status of one of the caller's generation jobs, with its track once completed.",
    responses={404: {"description": "Job not found"}},
)
async def get_generation(job_id: str, user: CurrentUser, session: SessionDep) -> GenerationJobRead:
    """
    Get generation status.

    This is the endpoint the client status poller calls until the job is
    completed, failed or cancelled.
    """
    job = await GenerationJobRepository(session).get_owned(job_id, user.id)
    if job is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Generation job {job_id} not found")

    result = GenerationJobRead.model_validate(job)
    if job.track_id:
        track = await TrackRepository(session).get_by_id(job.track_id)
        if track is not None:
            result.track = TrackSummary.model_validate(track)
    return result


@router.post(
    "/{job_id}/cancel",
    response_model=GenerationJobRead,
    summary="Cancel Generation",
    description="Cancel a pending or processing generation job.",
    responses={
        404: {"description": "Job not found"},
        409: {"description": "Job already finished"},
    },
)
async def cancel_generation(job_id: str, user: CurrentUser, session: SessionDep, hub: HubDep) -> GenerationJobRead:
    repo = GenerationJobRepository(session)
    job = await repo.get_owned(job_id, user.id)
    if job is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Generation job {job_id} not found")
    if JobStatus(job.status).is_terminal:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Generation job {job_id} is already {job.status}",
        )

    job = await repo.set_state(job, status=JobStatus.cancelled)
    await hub.publish_job(job)
    logger.info(f"Generation job {job_id} cancelled by user {user.id}")
    return GenerationJobRead.model_validate(job)
