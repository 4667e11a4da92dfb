"""Pipeline run repository."""

from __future__ import annotations

from typing import Any, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from aimusic_studio.core.models.domain import JobStatus

from ..base import utc_now
from ..entities.pipeline_runs import PipelineRun
from .base import AsyncBaseRepository


class PipelineRunRepository(AsyncBaseRepository[PipelineRun]):
    """Repository for pipeline runs."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PipelineRun)

    async def set_state(self, run: PipelineRun, *, status: Optional[JobStatus] = None, **changes: Any) -> PipelineRun:
        """Update a run and commit.

        JSON columns are not mutation-tracked, so ``steps`` must be passed as a
        new list rather than edited in place.
        """
        if status is not None:
            changes["status"] = status.value
        if "steps" in changes:
            changes["steps"] = [dict(step) for step in changes["steps"]]
        changes["updated_at"] = utc_now()
        return await self.update(run, changes)

    async def list_for_user(self, user_id: str, *, limit: int = 20) -> List[PipelineRun]:
        return await self.list(limit=limit, filters={"user_id": user_id})
