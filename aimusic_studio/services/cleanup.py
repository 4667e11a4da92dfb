"""Stuck generation job cleanup."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from aimusic_studio.core.database.base import utc_now
from aimusic_studio.core.database.repositories import GenerationJobRepository
from aimusic_studio.core.logging_config import get_logger
from aimusic_studio.core.models.io.health import CleanupReport

logger = get_logger(__name__)

TIMEOUT_MESSAGE = "Task timed out and was automatically cleaned up"


async def cleanup_stuck_jobs(
    session: AsyncSession,
    *,
    processing_timeout: timedelta = timedelta(minutes=15),
    pending_timeout: timedelta = timedelta(minutes=30),
    now: Optional[datetime] = None,
) -> CleanupReport:
    """Fail jobs that stopped making progress.

    A ``processing`` job not updated within ``processing_timeout`` and a
    ``pending`` job older than ``pending_timeout`` are both marked
    ``failed`` with progress 0.

    Args:
        session: Database session
        processing_timeout: Idle time after which a processing job is stuck
        pending_timeout: Age after which a pending job is stuck
        now: Reference time, current UTC time by default

    Returns:
        Report with counts and the ids of the failed jobs
    """
    now = now or utc_now()
    repo = GenerationJobRepository(session)
    processing, pending = await repo.find_stuck(
        processing_before=now - processing_timeout,
        pending_before=now - pending_timeout,
    )
    job_ids = [job.id for job in processing] + [job.id for job in pending]

    if not job_ids:
        logger.info("Cleanup found no stuck generation jobs")
        return CleanupReport(message="No stuck jobs found", cleaned_at=now)

    await repo.fail_many(job_ids, TIMEOUT_MESSAGE)
    logger.warning(
        f"Cleaned up {len(job_ids)} stuck generation jobs "
        f"({len(processing)} processing, {len(pending)} pending)"
    )
    return CleanupReport(
        message="Successfully cleaned up stuck jobs",
        cleaned_at=now,
        total_cleaned=len(job_ids),
        processing_jobs=len(processing),
        pending_jobs=len(pending),
        job_ids=job_ids,
    )
