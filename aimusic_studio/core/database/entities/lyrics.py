"""Lyrics entity."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlmodel import JSON, Column, DateTime, Field

from ..base import Base, new_id, utc_now


class Lyrics(Base, table=True):
    """Generated or user-written lyrics.

    ``provider_lyrics_id`` holds the provider task id so the webhook can
    find the record once the provider finishes.

    Table: lyrics
    """

    __tablename__ = "lyrics"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    user_id: str = Field(index=True, max_length=64)
    title: str
    content: str
    prompt: str
    style: Optional[str] = None
    language: str = Field(default="russian", max_length=32)
    provider: str = Field(default="suno", max_length=32)
    provider_lyrics_id: Optional[str] = Field(default=None, index=True)
    generation_params: Optional[dict[str, Any]] = Field(default=None, sa_column=Column(JSON(none_as_null=True), nullable=True))
    is_public: bool = Field(default=False)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime, sa_column_kwargs={"onupdate": utc_now})
