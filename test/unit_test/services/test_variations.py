"""Unit tests for track variations and drafts."""

from __future__ import annotations

import pytest

from aimusic_studio.core.database.entities import TrackVariation
from aimusic_studio.core.database.repositories import TrackRepository
from aimusic_studio.core.models.domain import VariationType
from aimusic_studio.core.models.io import DraftCreate
from aimusic_studio.services import (
    DuplicateVariationError,
    VariationError,
    create_draft,
    create_variation,
    describe_variations,
    variation_stats,
    variation_tree,
)

pytestmark = pytest.mark.asyncio


def link(parent, child, kind="manual"):
    return TrackVariation(parent_track_id=parent, child_track_id=child, variation_type=kind)


class TestTree:
    def test_standalone(self):
        tree = variation_tree("a", [])

        assert tree.is_standalone and not tree.is_root and not tree.is_leaf
        assert tree.parent_track_id is None

    def test_root_leaf_and_middle(self):
        links = [link("a", "b"), link("b", "c"), link("a", "d")]

        root = variation_tree("a", links)
        middle = variation_tree("b", links)
        leaf = variation_tree("c", links)

        assert (root.is_root, root.children) == (True, ["b", "d"])
        assert (middle.has_parent, middle.parent_track_id, middle.children) == (True, "a", ["c"])
        assert not middle.is_root and not middle.is_leaf and not middle.is_standalone
        assert (leaf.is_leaf, leaf.parent_track_id) == (True, "b")


def test_stats():
    stats = variation_stats([link("a", "b", "style_change"), link("a", "c", "style_change"), link("b", "c")])

    assert stats.total_variations == 3
    assert stats.by_type == {"style_change": 2, "manual": 1}
    assert (stats.unique_parents, stats.unique_children) == (2, 2)


async def test_create_draft(session):
    draft = await create_draft(session, "user-1", DraftCreate(title="Idea #4", genre="lo-fi"))

    assert draft.is_draft is True
    assert draft.parent_draft_id is None
    assert (draft.user_id, draft.provider, draft.genre) == ("user-1", "suno", "lo-fi")


async def test_create_variation_rules(session, make_track):
    tracks = TrackRepository(session)
    parent = await tracks.create(make_track(title="Original"))
    child = await tracks.create(make_track(title="Brighter mix", is_draft=True))

    variation = await create_variation(session, parent, child, VariationType.auto_improve)

    assert variation.variation_type == "auto_improve"
    with pytest.raises(DuplicateVariationError):
        await create_variation(session, parent, child)
    with pytest.raises(VariationError):
        await create_variation(session, parent, parent)


async def test_describe_variations(session, make_track):
    tracks = TrackRepository(session)
    parent = await tracks.create(make_track(title="Original"))
    child = await tracks.create(make_track(title="Darker mix"))
    await create_variation(session, parent, child, VariationType.style_change)

    described = await describe_variations(session, child.id)

    assert described.track_id == child.id
    assert described.tree.is_leaf
    assert described.tree.parent_track_id == parent.id
    assert {(m.id, m.variation_type) for m in described.family} == {(parent.id, "style_change"), (child.id, "original")}
    assert described.stats.by_type == {"style_change": 1}
