"""Music pipeline I/O models."""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from aimusic_studio.core.models.domain import PipelineStep, PipelineStepStatus

from .generation import TrackSummary

DEFAULT_EXTEND_PROMPT = "Continue the song, developing its main theme"


class PipelineRequest(BaseModel):
    """Schema for starting a music pipeline."""

    prompt: str = Field(description="Free-text description of the track to generate")
    style: str = Field(default="pop", description="Style the enhancement step starts from")
    title: Optional[str] = Field(default=None, description="Track title; the generated title when omitted")
    model: str = Field(default="V4_5", description="Suno model for generation and extension")
    enable_extension: bool = Field(default=True)
    enable_vocal_separation: bool = Field(default=False)
    enable_wav_conversion: bool = Field(default=False)
    extend_at: int = Field(default=30, ge=0, description="Seconds before the end at which the extension starts")
    extend_prompt: str = Field(default=DEFAULT_EXTEND_PROMPT)


class PipelineStepRead(BaseModel):
    name: PipelineStep
    status: PipelineStepStatus
    progress: int = 0
    task_id: Optional[str] = None
    result: Optional[dict[str, Any]] = None
    error: Optional[str] = None


class PipelineRead(BaseModel):
    """Schema for reading a pipeline run."""

    id: str
    user_id: str
    status: str
    current_step: Optional[PipelineStep] = None
    steps: List[PipelineStepRead]
    total_progress: int = 0
    generation_job_id: Optional[str] = None
    track_id: Optional[str] = None
    error_message: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    track: Optional[TrackSummary] = None


class PipelineSubmitted(BaseModel):
    """Response returned as soon as a pipeline is accepted."""

    pipeline_id: str
    status: str
    steps: List[PipelineStepRead]
    message: str
