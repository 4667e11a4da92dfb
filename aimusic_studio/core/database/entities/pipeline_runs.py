"""
Pipeline run entity.

A pipeline run chains style enhancement, generation and the optional Suno
post-processing steps for one request. ``steps`` holds one entry per step
(``name``, ``status``, ``task_id``, ``result``, ``error``) in run order.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlmodel import JSON, Column, DateTime, Field

from aimusic_studio.core.models.domain import JobStatus

from ..base import Base, new_id, utc_now


class PipelineRun(Base, table=True):
    """Persistent pipeline run.

    Table: pipeline_runs
    """

    __tablename__ = "pipeline_runs"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    user_id: str = Field(index=True, max_length=64)
    status: str = Field(default=JobStatus.pending.value, index=True, max_length=32)
    current_step: int = Field(default=0)
    steps: list[dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    request_params: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    generation_job_id: Optional[str] = Field(default=None, foreign_key="generation_jobs.id", max_length=36)
    track_id: Optional[str] = Field(default=None, foreign_key="tracks.id", max_length=36)
    error_message: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"PipelineRun(id={self.id}, status={self.status}, current_step={self.current_step})"
