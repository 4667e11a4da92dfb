"""
Generation I/O models for API requests and responses.

These schemas define the contract of the generation endpoints: submitting a
job, reading its status and listing a user's recent jobs.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from aimusic_studio.core.models.domain import Provider


class GenerationRequest(BaseModel):
    """Schema for submitting a music generation job."""

    prompt: str = Field(description="Free-text description of the track to generate")
    provider: Provider = Field(default=Provider.suno, description="Provider to route the job to")
    model: Optional[str] = Field(default=None, description="Provider model; the provider default when omitted")
    style: str = Field(default="pop", description="Musical style / genre")
    duration: int = Field(default=60, ge=1, le=600, description="Requested duration in seconds")
    instrumental: bool = Field(default=False, description="Generate without vocals")
    lyrics: Optional[str] = Field(default=None, description="Lyrics to sing; generated for vocal Suno jobs when omitted")


class TrackSummary(BaseModel):
    """Compact view of the track a completed job produced."""

    id: str
    title: str
    file_url: Optional[str] = None
    artwork_url: Optional[str] = None
    duration: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class GenerationJobRead(BaseModel):
    """Schema for reading a generation job."""

    id: str
    user_id: str
    provider: str
    model: Optional[str] = None
    status: str
    progress: int
    track_id: Optional[str] = None
    request_params: dict[str, Any] = Field(default_factory=dict)
    response_data: Optional[dict[str, Any]] = None
    error_message: Optional[str] = None
    credits_used: int = 0
    created_at: datetime
    updated_at: datetime
    track: Optional[TrackSummary] = None

    model_config = ConfigDict(from_attributes=True)


class GenerationSubmitted(BaseModel):
    """Response returned as soon as a job is accepted."""

    job_id: str
    status: str
    progress: int
    credits_used: int
    message: str
