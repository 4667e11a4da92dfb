"""
Track variation repository.

Besides the link rows themselves this covers a track's family: the track,
the drafts derived from it and every track linked to it, oldest first.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from aimusic_studio.core.models.domain import VariationType

from ..base import utc_now
from ..entities.track_variations import TrackVariation
from ..entities.tracks import Track
from .base import AsyncBaseRepository

ORIGINAL = "original"


class TrackVariationRepository(AsyncBaseRepository[TrackVariation]):
    """Repository for track variations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, TrackVariation)

    async def list_for_track(self, track_id: str) -> List[TrackVariation]:
        """Links where the track is the parent or the child, newest first."""
        stmt = (
            select(TrackVariation)
            .where(or_(TrackVariation.parent_track_id == track_id, TrackVariation.child_track_id == track_id))
            .order_by(TrackVariation.created_at.desc())
        )
        return list((await self.session.execute(stmt)).scalars().all())

    async def find_pair(self, parent_track_id: str, child_track_id: str) -> Optional[TrackVariation]:
        stmt = (
            select(TrackVariation)
            .where(TrackVariation.parent_track_id == parent_track_id)
            .where(TrackVariation.child_track_id == child_track_id)
        )
        return (await self.session.execute(stmt)).scalars().first()

    async def link(
        self, parent: Track, child: Track, variation_type: VariationType = VariationType.manual
    ) -> TrackVariation:
        """Create the link and make ``child`` a finished track derived from ``parent``."""
        variation = TrackVariation(
            parent_track_id=parent.id,
            child_track_id=child.id,
            variation_type=variation_type.value,
        )
        child.parent_draft_id = parent.id
        child.is_draft = False
        child.updated_at = utc_now()
        self.session.add(child)
        return await self.create(variation)

    async def family(self, track_id: str) -> List[tuple[Track, str]]:
        """The track, its drafts and its linked tracks with how each relates to it.

        Tracks not linked through a variation row (the track itself and
        drafts pointing at it through ``parent_draft_id``) are ``"original"``.
        """
        links = await self.list_for_track(track_id)
        relation = {}
        for link in links:
            other = link.child_track_id if link.parent_track_id == track_id else link.parent_track_id
            relation.setdefault(other, link.variation_type)

        stmt = (
            select(Track)
            .where(
                or_(
                    Track.id == track_id,
                    Track.parent_draft_id == track_id,
                    Track.id.in_(list(relation)),  # type: ignore[attr-defined]
                )
            )
            .order_by(Track.created_at.asc())
        )
        tracks = (await self.session.execute(stmt)).scalars().all()
        return [(track, relation.get(track.id, ORIGINAL)) for track in tracks]
