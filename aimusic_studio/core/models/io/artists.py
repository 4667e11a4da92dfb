"""Artist and project I/O models."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from aimusic_studio.core.models.domain import ProjectType


class ArtistCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    style: Optional[str] = None
    avatar_url: Optional[str] = None


class ArtistUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    style: Optional[str] = None
    avatar_url: Optional[str] = None


class ArtistRead(BaseModel):
    """Schema for reading an artist."""

    id: str
    user_id: str
    name: str
    description: Optional[str] = None
    style: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProjectCreate(BaseModel):
    """Schema for creating a project under one of the caller's artists."""

    artist_id: str
    name: str = Field(min_length=1, max_length=200)
    type: ProjectType = ProjectType.single
    description: Optional[str] = None
    concept: Optional[str] = None
    style: Optional[str] = None
    cover_url: Optional[str] = None


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    type: Optional[ProjectType] = None
    description: Optional[str] = None
    concept: Optional[str] = None
    style: Optional[str] = None
    cover_url: Optional[str] = None


class ProjectRead(BaseModel):
    """Schema for reading a project, with its artist and number of tracks."""

    id: str
    artist_id: str
    user_id: str
    name: str
    type: str
    description: Optional[str] = None
    concept: Optional[str] = None
    style: Optional[str] = None
    cover_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    artist: Optional[ArtistRead] = None
    track_count: int = 0

    model_config = ConfigDict(from_attributes=True)
