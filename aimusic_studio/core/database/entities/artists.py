"""Artist and project entities."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import DateTime, Field

from aimusic_studio.core.models.domain import ProjectType

from ..base import Base, new_id, utc_now


class Artist(Base, table=True):
    """A user's artist persona.

    Table: artists
    """

    __tablename__ = "artists"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    user_id: str = Field(index=True, max_length=64)
    name: str
    description: Optional[str] = None
    style: Optional[str] = None
    avatar_url: Optional[str] = None

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime, sa_column_kwargs={"onupdate": utc_now})


class Project(Base, table=True):
    """A release (teaser, single, EP or album) belonging to an artist.

    Table: projects
    """

    __tablename__ = "projects"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    artist_id: str = Field(foreign_key="artists.id", index=True, max_length=36)
    user_id: str = Field(index=True, max_length=64)
    name: str
    type: str = Field(default=ProjectType.single.value, max_length=16)
    description: Optional[str] = None
    concept: Optional[str] = None
    style: Optional[str] = None
    cover_url: Optional[str] = None

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime, sa_column_kwargs={"onupdate": utc_now})
