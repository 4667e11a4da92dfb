"""Track, artist and project repositories."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import delete, func, or_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.artists import Artist, Project
from ..entities.generation_jobs import GenerationJob
from ..entities.pipeline_runs import PipelineRun
from ..entities.track_variations import TrackVariation
from ..entities.tracks import Track
from .base import AsyncBaseRepository, QueryBuilder


class TrackRepository(AsyncBaseRepository[Track]):
    """Repository for tracks."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Track)

    async def list_visible(
        self,
        user_id: str,
        *,
        include_public: bool = False,
        project_id: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[Track]:
        """List the user's tracks, optionally together with other users' public tracks."""
        ownership = Track.user_id == user_id
        if include_public:
            ownership = or_(ownership, Track.is_public == True)  # noqa: E712
        stmt = select(Track).where(ownership)
        if project_id is not None:
            stmt = stmt.where(Track.project_id == project_id)
        stmt = stmt.order_by(Track.created_at.desc())
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        return list((await self.session.execute(stmt)).scalars().all())

    async def get_visible(self, track_id: str, user_id: str) -> Optional[Track]:
        track = await self.get_by_id(track_id)
        if track is None or (track.user_id != user_id and not track.is_public):
            return None
        return track

    async def delete(self, entity_id: str) -> bool:
        """Delete a track with its variation links, detaching its jobs and derived tracks."""
        await self.session.execute(
            update(GenerationJob).where(GenerationJob.track_id == entity_id).values(track_id=None)
        )
        await self.session.execute(update(PipelineRun).where(PipelineRun.track_id == entity_id).values(track_id=None))
        await self.session.execute(update(Track).where(Track.parent_draft_id == entity_id).values(parent_draft_id=None))
        await self.session.execute(
            delete(TrackVariation).where(
                or_(TrackVariation.parent_track_id == entity_id, TrackVariation.child_track_id == entity_id)
            )
        )
        return await super().delete(entity_id)

    async def increment_play_count(self, track: Track) -> Track:
        await self.session.execute(
            update(Track).where(Track.id == track.id).values(play_count=Track.play_count + 1)
        )
        await self.session.commit()
        await self.session.refresh(track)
        return track


class ArtistRepository(AsyncBaseRepository[Artist]):
    """Repository for artists."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Artist)

    async def delete(self, entity_id: str) -> bool:
        """Delete an artist together with its projects; their tracks are kept unassigned."""
        project_ids = select(Project.id).where(Project.artist_id == entity_id)
        await self.session.execute(
            update(Track).where(Track.project_id.in_(project_ids)).values(project_id=None)  # type: ignore[union-attr]
        )
        await self.session.execute(delete(Project).where(Project.artist_id == entity_id))
        return await super().delete(entity_id)


class ProjectRepository(AsyncBaseRepository[Project]):
    """Repository for projects."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Project)

    async def delete(self, entity_id: str) -> bool:
        """Delete a project; its tracks are kept unassigned."""
        await self.session.execute(update(Track).where(Track.project_id == entity_id).values(project_id=None))
        return await super().delete(entity_id)

    async def list_for_user(self, user_id: str, artist_id: Optional[str] = None) -> List[Project]:
        return await self.list(filters={"user_id": user_id, "artist_id": artist_id})

    async def track_counts(self, project_ids: List[str]) -> dict[str, int]:
        if not project_ids:
            return {}
        stmt = (
            select(Track.project_id, func.count(Track.id))
            .where(Track.project_id.in_(project_ids))  # type: ignore[union-attr]
            .group_by(Track.project_id)
        )
        rows = (await self.session.execute(stmt)).all()
        return {project_id: count for project_id, count in rows}
