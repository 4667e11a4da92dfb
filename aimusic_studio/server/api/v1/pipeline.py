"""
Music Pipeline API Endpoints.

Starts a pipeline run (style enhancement, generation and the optional Suno
post-processing steps) and reports its per-step status. Like generation,
runs are processed in a background task unless ``wait=true`` is passed.
"""

from typing import List

from fastapi import APIRouter, BackgroundTasks, HTTPException, Query, status

from aimusic_studio.core.database.repositories import GenerationJobRepository, PipelineRunRepository, TrackRepository
from aimusic_studio.core.logging_config import get_logger
from aimusic_studio.core.models.io import PipelineRead, PipelineRequest, PipelineSubmitted
from aimusic_studio.server.services.deps import CurrentUser, PipelineServiceDep, SessionDep
from aimusic_studio.services import describe_run

logger = get_logger(__name__)
router = APIRouter()


@router.post(
    "",
    response_model=PipelineSubmitted,
    status_code=status.HTTP_201_CREATED,
    summary="Start Music Pipeline",
    description="Enhance the style, generate a track and run the selected Suno post-processing steps.",
    responses={
        201: {"description": "Pipeline created"},
        400: {"description": "Prompt is blank"},
        401: {"description": "Missing or invalid bearer token"},
    },
)
async def start_pipeline(
    request: PipelineRequest,
    user: CurrentUser,
    service: PipelineServiceDep,
    session: SessionDep,
    background_tasks: BackgroundTasks,
    wait: bool = Query(default=False, description="Run the pipeline before answering"),
) -> PipelineSubmitted:
    if not request.prompt.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Prompt is required")

    run = await service.create_run(user.id, request)
    if wait:
        await service.process_run(run.id)
        run = await PipelineRunRepository(session).get_by_id(run.id) or run
        message = f"Pipeline {run.status}"
    else:
        background_tasks.add_task(service.process_run, run.id)
        message = "Pipeline started"

    return PipelineSubmitted(pipeline_id=run.id, status=run.status, steps=describe_run(run).steps, message=message)


@router.get(
    "",
    response_model=List[PipelineRead],
    summary="List Pipelines",
    description="Retrieve the caller's most recent pipeline runs, newest first.",
)
async def list_pipelines(
    user: CurrentUser,
    session: SessionDep,
    limit: int = Query(default=20, ge=1, le=100),
) -> List[PipelineRead]:
    runs = await PipelineRunRepository(session).list_for_user(user.id, limit=limit)
    return [describe_run(run) for run in runs]


@router.get(
    "/{pipeline_id}",
    response_model=PipelineRead,
    summary="Get Pipeline Status",
    description="Per-step status and total progress of one of the caller's pipeline runs.",
    responses={404: {"description": "Pipeline not found"}},
)
async def get_pipeline(pipeline_id: str, user: CurrentUser, session: SessionDep) -> PipelineRead:
    run = await PipelineRunRepository(session).get_owned(pipeline_id, user.id)
    if run is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Pipeline {pipeline_id} not found")

    job = await GenerationJobRepository(session).get_by_id(run.generation_job_id) if run.generation_job_id else None
    track = await TrackRepository(session).get_by_id(run.track_id) if run.track_id else None
    return describe_run(run, job, track)
