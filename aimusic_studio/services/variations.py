"""
Track variations and drafts.

A variation links a parent track to a child derived from it; linking makes
the child a finished track whose ``parent_draft_id`` is the parent. Drafts
are tracks created by hand in the studio before anything is generated.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from aimusic_studio.core.database.entities import Track, TrackVariation
from aimusic_studio.core.database.repositories import TrackRepository, TrackVariationRepository
from aimusic_studio.core.logging_config import get_logger
from aimusic_studio.core.models.domain import VariationType
from aimusic_studio.core.models.io import (
    DraftCreate,
    TrackVariations,
    VariationMember,
    VariationRead,
    VariationStats,
    VariationTree,
)

logger = get_logger(__name__)


class VariationError(Exception):
    """A variation link that cannot be created."""


class DuplicateVariationError(VariationError):
    pass


def variation_tree(track_id: str, variations: Iterable[TrackVariation]) -> VariationTree:
    parent_id: Optional[str] = None
    children: List[str] = []
    for variation in variations:
        if variation.child_track_id == track_id and parent_id is None:
            parent_id = variation.parent_track_id
        elif variation.parent_track_id == track_id:
            children.append(variation.child_track_id)

    has_parent = parent_id is not None
    return VariationTree(
        parent_track_id=parent_id,
        children=children,
        has_parent=has_parent,
        is_root=not has_parent and bool(children),
        is_leaf=has_parent and not children,
        is_standalone=not has_parent and not children,
    )


def variation_stats(variations: Iterable[TrackVariation]) -> VariationStats:
    variations = list(variations)
    return VariationStats(
        total_variations=len(variations),
        by_type=dict(Counter(v.variation_type for v in variations)),
        unique_parents=len({v.parent_track_id for v in variations}),
        unique_children=len({v.child_track_id for v in variations}),
    )


async def describe_variations(session: AsyncSession, track_id: str) -> TrackVariations:
    repo = TrackVariationRepository(session)
    variations = await repo.list_for_track(track_id)
    family = await repo.family(track_id)
    return TrackVariations(
        track_id=track_id,
        variations=[VariationRead.model_validate(v) for v in variations],
        family=[
            VariationMember(
                id=track.id,
                title=track.title,
                is_draft=track.is_draft,
                parent_draft_id=track.parent_draft_id,
                variation_type=relation,
                created_at=track.created_at,
            )
            for track, relation in family
        ],
        tree=variation_tree(track_id, variations),
        stats=variation_stats(variations),
    )


async def create_variation(
    session: AsyncSession,
    parent: Track,
    child: Track,
    variation_type: VariationType = VariationType.manual,
) -> TrackVariation:
    """Link ``child`` to ``parent``.

    Raises:
        VariationError: When both ids name the same track.
        DuplicateVariationError: When the pair is already linked.
    """
    if parent.id == child.id:
        raise VariationError("A track cannot be a variation of itself")
    repo = TrackVariationRepository(session)
    if await repo.find_pair(parent.id, child.id) is not None:
        raise DuplicateVariationError(f"Track {child.id} is already a variation of {parent.id}")
    variation = await repo.link(parent, child, variation_type)
    logger.info(f"Linked track {child.id} to {parent.id} as {variation.variation_type} variation")
    return variation


async def create_draft(session: AsyncSession, user_id: str, draft: DraftCreate) -> Track:
    track = Track(
        user_id=user_id,
        title=draft.title,
        description=draft.description,
        genre=draft.genre,
        mood=draft.mood,
        lyrics=draft.lyrics,
        project_id=draft.project_id,
        provider=draft.provider.value,
        is_draft=True,
        parent_draft_id=None,
    )
    return await TrackRepository(session).create(track)
