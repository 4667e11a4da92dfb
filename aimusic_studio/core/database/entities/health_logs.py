"""Provider health log entity."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import DateTime, Field

from ..base import Base, new_id, utc_now


class ApiHealthLog(Base, table=True):
    """One availability check of a provider.

    Table: api_health_logs
    """

    __tablename__ = "api_health_logs"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    provider: str = Field(index=True, max_length=32)
    model: Optional[str] = Field(default=None, max_length=64)
    status: str = Field(max_length=16)
    response_time: Optional[int] = Field(default=None, description="Response time in milliseconds")
    error_message: Optional[str] = None
    checked_at: datetime = Field(default_factory=utc_now, sa_type=DateTime, index=True)
