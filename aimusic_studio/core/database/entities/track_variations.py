"""
Track variation entity.

Links a parent track to a child track derived from it. Removing a link
keeps both tracks.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, UniqueConstraint
from sqlmodel import DateTime, Field

from aimusic_studio.core.models.domain import VariationType

from ..base import Base, new_id, utc_now


class TrackVariation(Base, table=True):
    """Persistent parent/child link between two tracks.

    Table: track_variations
    """

    __tablename__ = "track_variations"
    __table_args__ = (
        UniqueConstraint("parent_track_id", "child_track_id", name="uq_track_variations_pair"),
        CheckConstraint("parent_track_id <> child_track_id", name="ck_track_variations_not_self"),
        {"extend_existing": True},
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    parent_track_id: str = Field(foreign_key="tracks.id", index=True, max_length=36)
    child_track_id: str = Field(foreign_key="tracks.id", index=True, max_length=36)
    variation_type: str = Field(default=VariationType.manual.value, index=True, max_length=32)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime, sa_column_kwargs={"onupdate": utc_now})
