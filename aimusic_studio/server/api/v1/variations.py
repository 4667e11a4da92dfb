"""
Track Variations API Endpoints.

Drafts and the parent/child links between a user's tracks. Mounted under
the tracks prefix; every path has at least two segments or is ``/drafts``
so it never shadows a track id.
"""

from fastapi import APIRouter, HTTPException, Response, status

from aimusic_studio.core.database.repositories import ProjectRepository, TrackRepository, TrackVariationRepository
from aimusic_studio.core.logging_config import get_logger
from aimusic_studio.core.models.io import DraftCreate, TrackRead, TrackVariations, VariationCreate, VariationRead
from aimusic_studio.server.services.deps import CurrentUser, SessionDep
from aimusic_studio.services import (
    DuplicateVariationError,
    VariationError,
    create_draft,
    create_variation,
    describe_variations,
)

logger = get_logger(__name__)
router = APIRouter()


def _not_found(track_id: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Track {track_id} not found")


@router.post(
    "/drafts",
    response_model=TrackRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Draft",
    responses={404: {"description": "Project not found"}},
)
async def create_draft_track(draft: DraftCreate, user: CurrentUser, session: SessionDep) -> TrackRead:
    if draft.project_id and await ProjectRepository(session).get_owned(draft.project_id, user.id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Project {draft.project_id} not found")
    track = await create_draft(session, user.id, draft)
    logger.info(f"Draft track {track.id} created by user {user.id}")
    return TrackRead.model_validate(track)


@router.get(
    "/{track_id}/variations",
    response_model=TrackVariations,
    summary="List Track Variations",
    description="Variation links, variation family, tree position and statistics of a visible track.",
    responses={404: {"description": "Track not found or not visible"}},
)
async def list_variations(track_id: str, user: CurrentUser, session: SessionDep) -> TrackVariations:
    if await TrackRepository(session).get_visible(track_id, user.id) is None:
        raise _not_found(track_id)
    return await describe_variations(session, track_id)


@router.post(
    "/{track_id}/variations",
    response_model=VariationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Track Variation",
    description="Mark one of the caller's tracks as a variation of another.",
    responses={
        400: {"description": "Track linked to itself"},
        404: {"description": "Parent or child track not found"},
        409: {"description": "Tracks already linked"},
    },
)
async def add_variation(track_id: str, request: VariationCreate, user: CurrentUser, session: SessionDep) -> VariationRead:
    tracks = TrackRepository(session)
    parent = await tracks.get_owned(track_id, user.id)
    if parent is None:
        raise _not_found(track_id)
    child = await tracks.get_owned(request.child_track_id, user.id)
    if child is None:
        raise _not_found(request.child_track_id)

    try:
        variation = await create_variation(session, parent, child, request.variation_type)
    except DuplicateVariationError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except VariationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return VariationRead.model_validate(variation)


@router.delete(
    "/variations/{variation_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Track Variation",
    description="Remove a variation link. Both tracks are kept.",
    responses={404: {"description": "Variation not found"}},
)
async def delete_variation(variation_id: str, user: CurrentUser, session: SessionDep) -> Response:
    repo = TrackVariationRepository(session)
    variation = await repo.get_by_id(variation_id)
    if variation is None or await TrackRepository(session).get_owned(variation.parent_track_id, user.id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Variation {variation_id} not found")
    await repo.delete(variation_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
