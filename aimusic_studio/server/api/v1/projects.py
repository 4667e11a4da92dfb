"""
Projects API Endpoints.

A project (teaser, single, EP or album) always belongs to one of the
caller's artists. Project reads carry the artist and the number of tracks
assigned to the project.
"""

from typing import Dict, List, Optional

from fastapi import APIRouter, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from aimusic_studio.core.database.entities.artists import Artist, Project
from aimusic_studio.core.database.repositories import ArtistRepository, ProjectRepository
from aimusic_studio.core.models.io import ArtistRead, ProjectCreate, ProjectRead, ProjectUpdate
from aimusic_studio.server.services.deps import CurrentUser, SessionDep

router = APIRouter()


def _not_found(project_id: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Project {project_id} not found")


async def _require_artist(session: AsyncSession, artist_id: str, user_id: str) -> Artist:
    artist = await ArtistRepository(session).get_owned(artist_id, user_id)
    if artist is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Artist {artist_id} not found")
    return artist


async def _to_read(
    session: AsyncSession,
    projects: List[Project],
    artists: Optional[Dict[str, Artist]] = None,
) -> List[ProjectRead]:
    counts = await ProjectRepository(session).track_counts([project.id for project in projects])
    artists = dict(artists or {})
    repo = ArtistRepository(session)
    result = []
    for project in projects:
        if project.artist_id not in artists:
            artist = await repo.get_by_id(project.artist_id)
            if artist is not None:
                artists[artist.id] = artist
        read = ProjectRead.model_validate(project)
        artist = artists.get(project.artist_id)
        read.artist = ArtistRead.model_validate(artist) if artist is not None else None
        read.track_count = counts.get(project.id, 0)
        result.append(read)
    return result


@router.post(
    "",
    response_model=ProjectRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Project",
    responses={404: {"description": "Artist not found"}},
)
async def create_project(project_in: ProjectCreate, user: CurrentUser, session: SessionDep) -> ProjectRead:
    artist = await _require_artist(session, project_in.artist_id, user.id)
    data = project_in.model_dump()
    data["type"] = project_in.type.value
    project = await ProjectRepository(session).create(Project(user_id=user.id, **data))
    return (await _to_read(session, [project], {artist.id: artist}))[0]


@router.get(
    "",
    response_model=List[ProjectRead],
    summary="List Projects",
    description="List the caller's projects with their artist and track count, optionally for one artist.",
)
async def list_projects(
    user: CurrentUser,
    session: SessionDep,
    artist_id: Optional[str] = Query(default=None),
) -> List[ProjectRead]:
    projects = await ProjectRepository(session).list_for_user(user.id, artist_id)
    return await _to_read(session, projects)


@router.get("/{project_id}", response_model=ProjectRead, summary="Get Project", responses={404: {"description": "Project not found"}})
async def get_project(project_id: str, user: CurrentUser, session: SessionDep) -> ProjectRead:
    project = await ProjectRepository(session).get_owned(project_id, user.id)
    if project is None:
        raise _not_found(project_id)
    return (await _to_read(session, [project]))[0]


@router.patch("/{project_id}", response_model=ProjectRead, summary="Update Project", responses={404: {"description": "Project not found"}})
async def update_project(project_id: str, changes: ProjectUpdate, user: CurrentUser, session: SessionDep) -> ProjectRead:
    repo = ProjectRepository(session)
    project = await repo.get_owned(project_id, user.id)
    if project is None:
        raise _not_found(project_id)
    data = changes.model_dump(exclude_unset=True)
    if data.get("type") is not None:
        data["type"] = changes.type.value  # type: ignore[union-attr]
    project = await repo.update(project, data)
    return (await _to_read(session, [project]))[0]


@router.delete(
    "/{project_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Project",
    responses={404: {"description": "Project not found"}},
)
async def delete_project(project_id: str, user: CurrentUser, session: SessionDep) -> Response:
    repo = ProjectRepository(session)
    if await repo.get_owned(project_id, user.id) is None:
        raise _not_found(project_id)
    await repo.delete(project_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
