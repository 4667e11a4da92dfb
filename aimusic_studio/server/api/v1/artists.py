"""
Artists API Endpoints.

CRUD over the caller's artist personas. Deleting an artist deletes its
projects; tracks in those projects stay in the library unassigned.
"""

from typing import List

from fastapi import APIRouter, HTTPException, Response, status

from aimusic_studio.core.database.entities.artists import Artist
from aimusic_studio.core.database.repositories import ArtistRepository
from aimusic_studio.core.models.io import ArtistCreate, ArtistRead, ArtistUpdate
from aimusic_studio.server.services.deps import CurrentUser, SessionDep

router = APIRouter()


def _not_found(artist_id: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Artist {artist_id} not found")


@router.post(
    "",
    response_model=ArtistRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Artist",
)
async def create_artist(artist_in: ArtistCreate, user: CurrentUser, session: SessionDep) -> ArtistRead:
    artist = await ArtistRepository(session).create(Artist(user_id=user.id, **artist_in.model_dump()))
    return ArtistRead.model_validate(artist)


@router.get("", response_model=List[ArtistRead], summary="List Artists")
async def list_artists(user: CurrentUser, session: SessionDep) -> List[ArtistRead]:
    artists = await ArtistRepository(session).list(filters={"user_id": user.id})
    return [ArtistRead.model_validate(artist) for artist in artists]


@router.get("/{artist_id}", response_model=ArtistRead, summary="Get Artist", responses={404: {"description": "Artist not found"}})
async def get_artist(artist_id: str, user: CurrentUser, session: SessionDep) -> ArtistRead:
    artist = await ArtistRepository(session).get_owned(artist_id, user.id)
    if artist is None:
        raise _not_found(artist_id)
    return ArtistRead.model_validate(artist)


@router.patch("/{artist_id}", response_model=ArtistRead, summary="Update Artist", responses={404: {"description": "Artist not found"}})
async def update_artist(artist_id: str, changes: ArtistUpdate, user: CurrentUser, session: SessionDep) -> ArtistRead:
    repo = ArtistRepository(session)
    artist = await repo.get_owned(artist_id, user.id)
    if artist is None:
        raise _not_found(artist_id)
    artist = await repo.update(artist, changes.model_dump(exclude_unset=True))
    return ArtistRead.model_validate(artist)


@router.delete(
    "/{artist_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Artist",
    responses={404: {"description": "Artist not found"}},
)
async def delete_artist(artist_id: str, user: CurrentUser, session: SessionDep) -> Response:
    repo = ArtistRepository(session)
    if await repo.get_owned(artist_id, user.id) is None:
        raise _not_found(artist_id)
    await repo.delete(artist_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
