"""
Provider availability monitoring.

Each provider is checked with one cheap request and rated:

- Suno: the credit endpoint. Missing key, HTTP error or exception is
  ``unhealthy``; a response slower than 5 s is ``degraded``.
- Mureka: the platform health endpoint. Missing key or exception is
  ``degraded``; 404 still proves the host is reachable; slower than 10 s is
  ``degraded``.

The overall verdict is the worst provider verdict.
"""

from __future__ import annotations

import asyncio
import time
from datetime import datetime
from typing import Callable, List, Optional, Sequence

import httpx
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from aimusic_studio.core.database.base import utc_now
from aimusic_studio.core.database.entities.health_logs import ApiHealthLog
from aimusic_studio.core.database.repositories import HealthLogRepository
from aimusic_studio.core.logging_config import get_logger
from aimusic_studio.core.models.domain import HealthStatus, Provider
from aimusic_studio.core.models.io.health import HealthReport, HealthSummary, ProviderHealth
from aimusic_studio.providers import MurekaClient, ProviderNotConfiguredError, SunoClient

logger = get_logger(__name__)

SUNO_DEGRADED_AFTER_MS = 5000
MUREKA_DEGRADED_AFTER_MS = 10000


def _elapsed_ms(started: float, clock: Callable[[], float]) -> int:
    return int(round((clock() - started) * 1000))


class HealthMonitor:
    """Check the availability of the configured music providers."""

    def __init__(
        self,
        suno: SunoClient,
        mureka: MurekaClient,
        *,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.suno = suno
        self.mureka = mureka
        self._clock = clock or time.perf_counter

    async def check_suno(self) -> ProviderHealth:
        started = self._clock()
        status = HealthStatus.healthy
        error: Optional[str] = None
        try:
            response = await self.suno.ping()
            if not response.is_success:
                status = HealthStatus.unhealthy
                error = f"HTTP {response.status_code}: {response.reason_phrase}"
        except ProviderNotConfiguredError as e:
            status, error = HealthStatus.unhealthy, str(e)
        except httpx.HTTPError as e:
            status, error = HealthStatus.unhealthy, str(e) or type(e).__name__

        response_time = _elapsed_ms(started, self._clock)
        if status is HealthStatus.healthy and response_time > SUNO_DEGRADED_AFTER_MS:
            status = HealthStatus.degraded
        return ProviderHealth(
            provider=Provider.suno.value,
            status=status,
            response_time=response_time,
            error=error,
            timestamp=utc_now(),
        )

    async def check_mureka(self) -> ProviderHealth:
        started = self._clock()
        status = HealthStatus.healthy
        error: Optional[str] = None
        try:
            response = await self.mureka.ping()
            # 404 means the host answered; the health route itself is optional
            if not response.is_success and response.status_code != 404:
                status = HealthStatus.degraded
                error = f"HTTP {response.status_code}: {response.reason_phrase}"
        except ProviderNotConfiguredError as e:
            status, error = HealthStatus.degraded, str(e)
        except httpx.HTTPError as e:
            status, error = HealthStatus.degraded, str(e) or type(e).__name__

        response_time = _elapsed_ms(started, self._clock)
        if status is HealthStatus.healthy and response_time > MUREKA_DEGRADED_AFTER_MS:
            status = HealthStatus.degraded
        return ProviderHealth(
            provider=Provider.mureka.value,
            status=status,
            response_time=response_time,
            error=error,
            timestamp=utc_now(),
        )

    @staticmethod
    def aggregate(results: Sequence[ProviderHealth], timestamp: Optional[datetime] = None) -> HealthReport:
        """Combine provider results into one report."""
        summary = HealthSummary(
            healthy=sum(1 for r in results if r.status is HealthStatus.healthy),
            degraded=sum(1 for r in results if r.status is HealthStatus.degraded),
            unhealthy=sum(1 for r in results if r.status is HealthStatus.unhealthy),
        )
        if summary.unhealthy:
            overall = HealthStatus.unhealthy
        elif summary.degraded:
            overall = HealthStatus.degraded
        else:
            overall = HealthStatus.healthy
        return HealthReport(
            status=overall,
            timestamp=timestamp or utc_now(),
            providers=list(results),
            summary=summary,
        )

    async def run(self) -> HealthReport:
        results: List[ProviderHealth] = list(await asyncio.gather(self.check_suno(), self.check_mureka()))
        report = self.aggregate(results)
        logger.info(
            f"Provider health: {report.status.value} "
            f"(healthy={report.summary.healthy}, degraded={report.summary.degraded}, unhealthy={report.summary.unhealthy})"
        )
        return report


async def persist_report(session: AsyncSession, report: HealthReport, *, models: Optional[dict] = None) -> None:
    """Store one ``api_health_logs`` row per provider. Failures are only logged."""
    models = models or {}
    logs = [
        ApiHealthLog(
            provider=result.provider,
            model=models.get(result.provider),
            status=result.status.value,
            response_time=result.response_time,
            error_message=result.error,
            checked_at=result.timestamp,
        )
        for result in report.providers
    ]
    try:
        await HealthLogRepository(session).add_many(logs)
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Failed to store health check results: {e}")
