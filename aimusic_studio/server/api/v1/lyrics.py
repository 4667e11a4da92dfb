"""
Lyrics API Endpoints.

Lyrics are generated asynchronously by Suno: ``POST /generate`` stores a
placeholder record whose content the Suno callback fills in later. The
remaining endpoints are plain CRUD over the caller's lyrics.
"""

from typing import List

from fastapi import APIRouter, HTTPException, Query, Response, status

from aimusic_studio.core.database.repositories import LyricsRepository
from aimusic_studio.core.models.io import LyricsGenerated, LyricsGenerateRequest, LyricsRead, LyricsUpdate
from aimusic_studio.server.services.deps import CurrentUser, ProvidersDep, SessionDep
from aimusic_studio.services import generate_lyrics

router = APIRouter()


@router.post(
    "/generate",
    response_model=LyricsGenerated,
    status_code=status.HTTP_201_CREATED,
    summary="Generate Lyrics",
    description="Ask Suno for song lyrics; the returned record is completed by the Suno callback.",
    responses={502: {"description": "Suno rejected the request"}},
)
async def create_lyrics(
    request: LyricsGenerateRequest,
    user: CurrentUser,
    session: SessionDep,
    providers: ProvidersDep,
) -> LyricsGenerated:
    return await generate_lyrics(session, providers.suno, user.id, request)


@router.get("", response_model=List[LyricsRead], summary="List Lyrics")
async def list_lyrics(
    user: CurrentUser,
    session: SessionDep,
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
) -> List[LyricsRead]:
    records = await LyricsRepository(session).list(limit=limit, offset=offset, filters={"user_id": user.id})
    return [LyricsRead.model_validate(record) for record in records]


@router.get(
    "/{lyrics_id}",
    response_model=LyricsRead,
    summary="Get Lyrics",
    responses={404: {"description": "Lyrics not found"}},
)
async def get_lyrics(lyrics_id: str, user: CurrentUser, session: SessionDep) -> LyricsRead:
    record = await LyricsRepository(session).get_owned(lyrics_id, user.id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Lyrics {lyrics_id} not found")
    return LyricsRead.model_validate(record)


@router.patch(
    "/{lyrics_id}",
    response_model=LyricsRead,
    summary="Update Lyrics",
    responses={404: {"description": "Lyrics not found"}},
)
async def update_lyrics(lyrics_id: str, changes: LyricsUpdate, user: CurrentUser, session: SessionDep) -> LyricsRead:
    repo = LyricsRepository(session)
    record = await repo.get_owned(lyrics_id, user.id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Lyrics {lyrics_id} not found")
    record = await repo.update(record, changes.model_dump(exclude_unset=True))
    return LyricsRead.model_validate(record)


@router.delete(
    "/{lyrics_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Lyrics",
    responses={404: {"description": "Lyrics not found"}},
)
async def delete_lyrics(lyrics_id: str, user: CurrentUser, session: SessionDep) -> Response:
    repo = LyricsRepository(session)
    if await repo.get_owned(lyrics_id, user.id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Lyrics {lyrics_id} not found")
    await repo.delete(lyrics_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
