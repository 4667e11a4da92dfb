"""
Track entity.

Tracks are the audio results of generation jobs (or user uploads), owned
by a user and optionally attached to a project. A draft is a track the user
is still iterating on; ``parent_draft_id`` points at the track a variation
was derived from.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlmodel import JSON, Column, DateTime, Field

from ..base import Base, new_id, utc_now


class Track(Base, table=True):
    """Persistent track.

    Table: tracks
    """

    __tablename__ = "tracks"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    user_id: str = Field(index=True, max_length=64)
    project_id: Optional[str] = Field(default=None, foreign_key="projects.id", index=True, max_length=36)
    title: str
    description: Optional[str] = None
    duration: Optional[int] = Field(default=None, description="Duration in seconds")
    file_url: Optional[str] = None
    artwork_url: Optional[str] = None
    audio_format: str = Field(default="mp3", max_length=16)
    genre: Optional[str] = None
    mood: Optional[str] = None
    bpm: Optional[int] = None
    key_signature: Optional[str] = None
    is_public: bool = Field(default=False)
    is_commercial: bool = Field(default=False)
    provider: str = Field(max_length=32)
    provider_track_id: Optional[str] = Field(default=None, index=True)
    generation_params: Optional[dict[str, Any]] = Field(default=None, sa_column=Column(JSON(none_as_null=True), nullable=True))
    lyrics: Optional[str] = None
    play_count: int = Field(default=0)
    like_count: int = Field(default=0)
    is_draft: bool = Field(default=False)
    parent_draft_id: Optional[str] = Field(default=None, foreign_key="tracks.id", index=True, max_length=36)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime, sa_column_kwargs={"onupdate": utc_now})
