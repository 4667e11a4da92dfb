"""Provider health, cleanup and credits I/O models."""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from aimusic_studio.core.models.domain import HealthStatus


class ProviderHealth(BaseModel):
    """Outcome of probing one provider."""

    provider: str
    status: HealthStatus
    response_time: int = Field(description="Check duration in milliseconds")
    error: Optional[str] = None
    timestamp: datetime


class HealthSummary(BaseModel):
    healthy: int = 0
    degraded: int = 0
    unhealthy: int = 0


class HealthReport(BaseModel):
    """Aggregated system health across providers."""

    status: HealthStatus
    timestamp: datetime
    providers: List[ProviderHealth]
    summary: HealthSummary


class HealthLogRead(BaseModel):
    id: str
    provider: str
    model: Optional[str] = None
    status: str
    response_time: Optional[int] = None
    error_message: Optional[str] = None
    checked_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CleanupReport(BaseModel):
    """Summary of a stuck-job cleanup run."""

    message: str
    cleaned_at: datetime
    total_cleaned: int = 0
    processing_jobs: int = 0
    pending_jobs: int = 0
    job_ids: List[str] = Field(default_factory=list)


class CreditsInfo(BaseModel):
    credits: int
    method: str
    warning: Optional[str] = None
    raw: Optional[Any] = None
