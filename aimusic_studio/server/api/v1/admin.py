"""
Admin API Endpoints.

Operational endpoints guarded by the ``X-Admin-Token`` header:

- provider health check (also persisted to ``api_health_logs``);
- recent health logs;
- cleanup of generation jobs stuck in ``pending`` or ``processing``.

These are meant to be called by a scheduler as well as by operators.
"""

from datetime import timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from aimusic_studio.core.database.repositories import HealthLogRepository
from aimusic_studio.core.logging_config import get_logger
from aimusic_studio.core.models.domain import HealthStatus
from aimusic_studio.core.models.io import CleanupReport, HealthLogRead, HealthReport
from aimusic_studio.server.core.config import settings
from aimusic_studio.server.services.deps import ProvidersDep, SessionDep, require_admin
from aimusic_studio.services import HealthMonitor, cleanup_stuck_jobs, persist_report

logger = get_logger(__name__)
router = APIRouter(dependencies=[Depends(require_admin)])


@router.post(
    "/health-check",
    response_model=HealthReport,
    summary="Check Provider Health",
    description="Check Suno and Mureka concurrently and store the results.",
    responses={503: {"description": "At least one provider is unhealthy", "model": HealthReport}},
)
async def run_health_check(session: SessionDep, providers: ProvidersDep):
    """
    Check provider availability.

    Answers 200 when every provider is healthy or degraded and 503 when any
    provider is unhealthy. The body is the same report either way.
    """
    report = await HealthMonitor(providers.suno, providers.mureka).run()
    await persist_report(
        session,
        report,
        models={"suno": providers.suno.default_model, "mureka": providers.mureka.default_model},
    )
    status_code = 503 if report.status is HealthStatus.unhealthy else 200
    return JSONResponse(status_code=status_code, content=report.model_dump(mode="json"))


@router.get(
    "/health-logs",
    response_model=List[HealthLogRead],
    summary="List Health Logs",
    description="Most recent provider health checks, newest first.",
)
async def list_health_logs(
    session: SessionDep,
    provider: Optional[str] = Query(default=None),
    limit: int = Query(default=50, ge=1, le=500),
) -> List[HealthLogRead]:
    logs = await HealthLogRepository(session).list_recent(provider=provider, limit=limit)
    return [HealthLogRead.model_validate(log) for log in logs]


@router.post(
    "/cleanup",
    response_model=CleanupReport,
    summary="Clean Up Stuck Jobs",
    description="Fail processing jobs idle too long and pending jobs never picked up.",
)
async def cleanup(session: SessionDep) -> CleanupReport:
    polling = settings.polling
    return await cleanup_stuck_jobs(
        session,
        processing_timeout=timedelta(minutes=polling.processing_timeout_minutes),
        pending_timeout=timedelta(minutes=polling.pending_timeout_minutes),
    )
