"""
Tracks API Endpoints.

CRUD over the caller's tracks (public tracks of other users are readable)
and the Suno audio operations that start from an existing track: extension,
vocal removal and WAV conversion. The audio operations only submit the
Suno task and return its id; results arrive through the Suno callback.
"""

from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, Response, status

from aimusic_studio.core.database.repositories import ProjectRepository, TrackRepository
from aimusic_studio.core.logging_config import get_logger
from aimusic_studio.core.models.io import (
    AudioTaskRequest,
    AudioTaskResponse,
    ExtendTrackRequest,
    TrackRead,
    TrackUpdate,
)
from aimusic_studio.server.services.deps import CurrentUser, ProvidersDep, SessionDep

logger = get_logger(__name__)
router = APIRouter()


def _not_found(track_id: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Track {track_id} not found")


@router.get(
    "",
    response_model=List[TrackRead],
    summary="List Tracks",
    description="List the caller's tracks, optionally including other users' public tracks.",
)
async def list_tracks(
    user: CurrentUser,
    session: SessionDep,
    include_public: bool = Query(default=False),
    project_id: Optional[str] = Query(default=None),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
) -> List[TrackRead]:
    tracks = await TrackRepository(session).list_visible(
        user.id,
        include_public=include_public,
        project_id=project_id,
        limit=limit,
        offset=offset,
    )
    return [TrackRead.model_validate(track) for track in tracks]


@router.post(
    "/extend",
    response_model=AudioTaskResponse,
    summary="Extend Track",
    description="Continue an existing Suno track from a given second.",
)
async def extend_track(request: ExtendTrackRequest, user: CurrentUser, providers: ProvidersDep) -> AudioTaskResponse:
    task_id = await providers.suno.extend(
        request.audio_id,
        prompt=request.prompt,
        continue_at=request.continue_at,
        model=request.model,
    )
    logger.info(f"Track extension {task_id} started by user {user.id} for audio {request.audio_id}")
    return AudioTaskResponse(task_id=task_id, message="Track extension started")


@router.post(
    "/vocal-removal",
    response_model=AudioTaskResponse,
    summary="Remove Vocals",
    description="Split a Suno track into vocals and instrumental.",
)
async def remove_vocals(request: AudioTaskRequest, user: CurrentUser, providers: ProvidersDep) -> AudioTaskResponse:
    task_id = await providers.suno.vocal_removal(request.task_id, request.audio_id)
    logger.info(f"Vocal removal {task_id} started by user {user.id}")
    return AudioTaskResponse(task_id=task_id, message="Vocal removal started")


@router.post(
    "/wav-conversion",
    response_model=AudioTaskResponse,
    summary="Convert to WAV",
    description="Convert a Suno track to WAV.",
)
async def convert_to_wav(request: AudioTaskRequest, user: CurrentUser, providers: ProvidersDep) -> AudioTaskResponse:
    task_id = await providers.suno.wav_conversion(request.task_id, request.audio_id)
    logger.info(f"WAV conversion {task_id} started by user {user.id}")
    return AudioTaskResponse(task_id=task_id, message="WAV conversion started")


@router.get(
    "/{track_id}",
    response_model=TrackRead,
    summary="Get Track",
    responses={404: {"description": "Track not found or not visible"}},
)
async def get_track(track_id: str, user: CurrentUser, session: SessionDep) -> TrackRead:
    track = await TrackRepository(session).get_visible(track_id, user.id)
    if track is None:
        raise _not_found(track_id)
    return TrackRead.model_validate(track)


@router.patch(
    "/{track_id}",
    response_model=TrackRead,
    summary="Update Track",
    responses={404: {"description": "Track or project not found"}},
)
async def update_track(track_id: str, changes: TrackUpdate, user: CurrentUser, session: SessionDep) -> TrackRead:
    repo = TrackRepository(session)
    track = await repo.get_owned(track_id, user.id)
    if track is None:
        raise _not_found(track_id)

    data = changes.model_dump(exclude_unset=True)
    project_id = data.get("project_id")
    if project_id and await ProjectRepository(session).get_owned(project_id, user.id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Project {project_id} not found")

    track = await repo.update(track, data)
    return TrackRead.model_validate(track)


@router.delete(
    "/{track_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Track",
    responses={404: {"description": "Track not found"}},
)
async def delete_track(track_id: str, user: CurrentUser, session: SessionDep) -> Response:
    repo = TrackRepository(session)
    if await repo.get_owned(track_id, user.id) is None:
        raise _not_found(track_id)
    await repo.delete(track_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{track_id}/play",
    response_model=TrackRead,
    summary="Record Play",
    description="Increment the play counter of a visible track.",
    responses={404: {"description": "Track not found or not visible"}},
)
async def play_track(track_id: str, user: CurrentUser, session: SessionDep) -> TrackRead:
    repo = TrackRepository(session)
    track = await repo.get_visible(track_id, user.id)
    if track is None:
        raise _not_found(track_id)
    track = await repo.increment_play_count(track)
    return TrackRead.model_validate(track)
