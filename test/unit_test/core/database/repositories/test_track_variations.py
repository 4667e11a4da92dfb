"""Unit tests for the track variation and pipeline run repositories."""

from __future__ import annotations

from datetime import timedelta

import pytest

from aimusic_studio.core.database.base import utc_now
from aimusic_studio.core.database.entities import PipelineRun
from aimusic_studio.core.database.repositories import (
    PipelineRunRepository,
    TrackRepository,
    TrackVariationRepository,
)
from aimusic_studio.core.models.domain import JobStatus, VariationType

pytestmark = pytest.mark.asyncio


@pytest.fixture
def variations(session) -> TrackVariationRepository:
    return TrackVariationRepository(session)


async def _tracks(session, make_track, count):
    repo = TrackRepository(session)
    now = utc_now()
    return [
        await repo.create(make_track(title=f"Take {i}", is_draft=True, created_at=now + timedelta(minutes=i)))
        for i in range(count)
    ]


async def test_link_finishes_the_child(session, variations, make_track):
    parent, child = await _tracks(session, make_track, 2)

    variation = await variations.link(parent, child, VariationType.style_change)

    assert variation.variation_type == "style_change"
    await session.refresh(child)
    assert child.parent_draft_id == parent.id
    assert child.is_draft is False
    assert (await variations.find_pair(parent.id, child.id)).id == variation.id
    assert await variations.find_pair(child.id, parent.id) is None


async def test_list_for_track_covers_both_sides(session, variations, make_track):
    root, middle, leaf = await _tracks(session, make_track, 3)
    first = await variations.link(root, middle)
    second = await variations.link(middle, leaf)

    assert [v.id for v in await variations.list_for_track(middle.id)] == [second.id, first.id]
    assert [v.id for v in await variations.list_for_track(leaf.id)] == [second.id]


async def test_family_labels_each_track(session, variations, make_track):
    original, improved, other = await _tracks(session, make_track, 3)
    draft = await TrackRepository(session).create(
        make_track(title="Sketch", is_draft=True, parent_draft_id=original.id, created_at=utc_now() + timedelta(hours=1))
    )
    await variations.link(original, improved, VariationType.auto_improve)

    family = await variations.family(original.id)

    assert [(track.id, relation) for track, relation in family] == [
        (original.id, "original"),
        (improved.id, "auto_improve"),
        (draft.id, "original"),
    ]
    assert other.id not in {track.id for track, _ in family}


async def test_deleting_a_track_drops_its_links(session, variations, make_track):
    parent, child = await _tracks(session, make_track, 2)
    await variations.link(parent, child)

    assert await TrackRepository(session).delete(parent.id) is True

    assert await variations.list_for_track(child.id) == []
    await session.refresh(child)
    assert child.parent_draft_id is None


async def test_pipeline_run_steps_are_replaced(session):
    runs = PipelineRunRepository(session)
    run = await runs.create(PipelineRun(user_id="user-1", steps=[{"name": "style", "status": "pending"}]))

    run = await runs.set_state(run, status=JobStatus.processing, steps=[{"name": "style", "status": "completed"}])

    session.expunge_all()
    stored = await runs.get_by_id(run.id)
    assert stored.status == "processing"
    assert stored.steps == [{"name": "style", "status": "completed"}]
    assert [r.id for r in await runs.list_for_user("user-1")] == [run.id]
    assert await runs.list_for_user("user-2") == []
