"""Track I/O models, including the Suno audio operation requests."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from aimusic_studio.core.models.domain import Provider, VariationType


class TrackRead(BaseModel):
    """Schema for reading a track."""

    id: str
    user_id: str
    project_id: Optional[str] = None
    title: str
    description: Optional[str] = None
    duration: Optional[int] = None
    file_url: Optional[str] = None
    artwork_url: Optional[str] = None
    audio_format: str = "mp3"
    genre: Optional[str] = None
    mood: Optional[str] = None
    bpm: Optional[int] = None
    key_signature: Optional[str] = None
    is_public: bool = False
    is_commercial: bool = False
    provider: str
    provider_track_id: Optional[str] = None
    generation_params: Optional[dict[str, Any]] = None
    lyrics: Optional[str] = None
    play_count: int = 0
    like_count: int = 0
    is_draft: bool = False
    parent_draft_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TrackUpdate(BaseModel):
    """Schema for updating a track. Only provided fields are changed."""

    title: Optional[str] = None
    description: Optional[str] = None
    genre: Optional[str] = None
    mood: Optional[str] = None
    bpm: Optional[int] = Field(default=None, ge=1, le=400)
    key_signature: Optional[str] = None
    is_public: Optional[bool] = None
    is_commercial: Optional[bool] = None
    project_id: Optional[str] = None
    artwork_url: Optional[str] = None
    lyrics: Optional[str] = None


class ExtendTrackRequest(BaseModel):
    audio_id: str = Field(description="Provider audio id of the track to extend")
    prompt: Optional[str] = None
    continue_at: int = Field(default=30, ge=0, description="Second at which the continuation starts")
    model: str = Field(default="V4_5")


class AudioTaskRequest(BaseModel):
    """Body of the vocal-removal and wav-conversion operations."""

    task_id: str = Field(description="Provider task id that produced the audio")
    audio_id: str = Field(description="Provider audio id")


class AudioTaskResponse(BaseModel):
    task_id: Optional[str] = None
    message: str


class DraftCreate(BaseModel):
    """Schema for creating a draft track."""

    title: str = Field(min_length=1)
    description: Optional[str] = None
    genre: Optional[str] = None
    mood: Optional[str] = None
    lyrics: Optional[str] = None
    project_id: Optional[str] = None
    provider: Provider = Field(default=Provider.suno)


class VariationCreate(BaseModel):
    child_track_id: str = Field(description="Track derived from the parent")
    variation_type: VariationType = Field(default=VariationType.manual)


class VariationRead(BaseModel):
    id: str
    parent_track_id: str
    child_track_id: str
    variation_type: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class VariationMember(BaseModel):
    """A track of a variation family and how it relates to the requested track."""

    id: str
    title: str
    is_draft: bool
    parent_draft_id: Optional[str] = None
    variation_type: str
    created_at: datetime


class VariationTree(BaseModel):
    """Position of a track among its variation links."""

    parent_track_id: Optional[str] = None
    children: List[str] = Field(default_factory=list)
    has_parent: bool = False
    is_root: bool = False
    is_leaf: bool = False
    is_standalone: bool = True


class VariationStats(BaseModel):
    total_variations: int = 0
    by_type: Dict[str, int] = Field(default_factory=dict)
    unique_parents: int = 0
    unique_children: int = 0


class TrackVariations(BaseModel):
    """Everything the studio shows about a track's variations."""

    track_id: str
    variations: List[VariationRead]
    family: List[VariationMember]
    tree: VariationTree
    stats: VariationStats
