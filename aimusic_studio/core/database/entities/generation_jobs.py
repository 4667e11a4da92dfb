"""
Generation job entity.

A generation job tracks one request to a music provider, from submission
through provider polling or webhook delivery to the resulting track.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlmodel import JSON, Column, DateTime, Field

from aimusic_studio.core.models.domain import JobStatus

from ..base import Base, new_id, utc_now


class GenerationJob(Base, table=True):
    """Persistent generation job.

    Table: generation_jobs
    """

    __tablename__ = "generation_jobs"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    user_id: str = Field(index=True, max_length=64)
    track_id: Optional[str] = Field(default=None, foreign_key="tracks.id", max_length=36)
    provider: str = Field(max_length=32)
    model: Optional[str] = Field(default=None, max_length=64)
    status: str = Field(default=JobStatus.pending.value, index=True, max_length=32)
    progress: int = Field(default=0, ge=0, le=100)
    request_params: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    response_data: Optional[dict[str, Any]] = Field(default=None, sa_column=Column(JSON(none_as_null=True), nullable=True))
    error_message: Optional[str] = Field(default=None)
    credits_used: int = Field(default=0)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"GenerationJob(id={self.id}, provider={self.provider}, status={self.status}, progress={self.progress})"
