"""Lyrics I/O models."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class LyricsGenerateRequest(BaseModel):
    """Schema for requesting lyrics from Suno."""

    prompt: str = Field(min_length=1, description="Theme of the song")
    style: str = Field(default="pop")
    language: str = Field(default="russian")
    structure: str = Field(default="verse-chorus")


class LyricsRead(BaseModel):
    id: str
    user_id: str
    title: str
    content: str
    prompt: Optional[str] = None
    style: Optional[str] = None
    language: str
    provider: str
    provider_lyrics_id: Optional[str] = None
    generation_params: Optional[dict[str, Any]] = None
    is_public: bool = False
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LyricsUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    style: Optional[str] = None
    is_public: Optional[bool] = None


class LyricsGenerated(BaseModel):
    """Response of a lyrics generation request."""

    lyrics: LyricsRead
    provider_response: dict[str, Any] = Field(default_factory=dict)
