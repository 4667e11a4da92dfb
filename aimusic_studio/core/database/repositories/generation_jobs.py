"""
Generation job repository.

Data access for the job lifecycle: ownership lookups, provider task id
lookups used by the webhook, and the stuck-job queries used by cleanup.
"""

from __future__ import annotations

import json
from datetime import datetime, timedelta
from typing import List, Optional, Sequence

from sqlalchemy import func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from aimusic_studio.core.models.domain import JobStatus

from ..base import utc_now
from ..entities.generation_jobs import GenerationJob
from .base import AsyncBaseRepository


class GenerationJobRepository(AsyncBaseRepository[GenerationJob]):
    """Repository for generation jobs."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, GenerationJob)

    async def set_state(
        self,
        job: GenerationJob,
        *,
        status: Optional[JobStatus] = None,
        progress: Optional[int] = None,
        **changes,
    ) -> GenerationJob:
        """Update status/progress (and any other columns) of a job and commit."""
        if status is not None:
            changes["status"] = status.value
        if progress is not None:
            changes["progress"] = max(0, min(100, progress))
        changes["updated_at"] = utc_now()
        return await self.update(job, changes)

    async def find_by_task_id(self, task_id: str, *, lookback: timedelta = timedelta(hours=24)) -> Optional[GenerationJob]:
        """Find the job a provider task id belongs to.

        ``response_data.taskId`` and ``response_data.task_id`` are tried
        first; failing that, recent jobs are scanned for the id anywhere in
        their serialized response data.

        Args:
            task_id: Provider task identifier
            lookback: How far back the fallback scan reaches

        Returns:
            Matching job or None
        """
        for key in ("taskId", "task_id"):
            stmt = (
                select(GenerationJob)
                .where(GenerationJob.response_data[key].as_string() == task_id)  # type: ignore[index]
                .limit(1)
            )
            result = await self.session.execute(stmt)
            job = result.scalars().first()
            if job is not None:
                return job

        since = utc_now() - lookback
        stmt = (
            select(GenerationJob)
            .where(GenerationJob.created_at >= since)
            .where(GenerationJob.response_data.is_not(None))  # type: ignore[union-attr]
            .order_by(GenerationJob.created_at.desc())
        )
        result = await self.session.execute(stmt)
        for job in result.scalars().all():
            if job.response_data and task_id in json.dumps(job.response_data):
                return job
        return None

    async def list_for_user(self, user_id: str, *, limit: int = 20) -> List[GenerationJob]:
        return await self.list(limit=limit, filters={"user_id": user_id})

    async def find_stuck(
        self, *, processing_before: datetime, pending_before: datetime
    ) -> tuple[List[GenerationJob], List[GenerationJob]]:
        """Return (processing jobs idle since ``processing_before``, pending jobs created before ``pending_before``)."""
        processing_stmt = (
            select(GenerationJob)
            .where(GenerationJob.status == JobStatus.processing.value)
            .where(GenerationJob.updated_at < processing_before)
        )
        pending_stmt = (
            select(GenerationJob)
            .where(GenerationJob.status == JobStatus.pending.value)
            .where(GenerationJob.created_at < pending_before)
        )
        processing = list((await self.session.execute(processing_stmt)).scalars().all())
        pending = list((await self.session.execute(pending_stmt)).scalars().all())
        return processing, pending

    async def fail_many(self, job_ids: Sequence[str], error_message: str) -> None:
        if not job_ids:
            return
        stmt = (
            update(GenerationJob)
            .where(GenerationJob.id.in_(list(job_ids)))  # type: ignore[attr-defined]
            .values(
                status=JobStatus.failed.value,
                progress=0,
                error_message=error_message,
                updated_at=utc_now(),
            )
        )
        await self.session.execute(stmt)
        await self.session.commit()

    async def credits_used_since(self, user_id: str, since: datetime) -> int:
        stmt = (
            select(func.coalesce(func.sum(GenerationJob.credits_used), 0))
            .where(GenerationJob.user_id == user_id)
            .where(GenerationJob.created_at >= since)
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())
