"""Unit tests for provider health probing."""

from __future__ import annotations

from datetime import datetime
from itertools import count

import httpx
import pytest

from aimusic_studio.core.database.repositories import HealthLogRepository
from aimusic_studio.core.models.domain import HealthStatus
from aimusic_studio.core.models.io.health import ProviderHealth
from aimusic_studio.services import HealthMonitor, persist_report

from ..mock_http import Recorder
from .conftest import mureka_client, suno_client

pytestmark = pytest.mark.asyncio


def stepping_clock(step_seconds: float):
    """Clock advancing ``step_seconds`` per reading."""
    ticks = count()
    return lambda: next(ticks) * step_seconds


def monitor(suno_response, mureka_response, *, suno_key="k", mureka_key="k", step=0.01) -> HealthMonitor:
    return HealthMonitor(
        suno_client(Recorder(lambda r: suno_response), api_key=suno_key),
        mureka_client(Recorder(lambda r: mureka_response), api_key=mureka_key),
        clock=stepping_clock(step),
    )


def result(provider, status) -> ProviderHealth:
    return ProviderHealth(provider=provider, status=status, response_time=1, timestamp=datetime(2025, 1, 1))


class TestChecks:
    async def test_all_healthy(self):
        report = await monitor(httpx.Response(200, json={"data": 10}), httpx.Response(200)).run()

        assert report.status is HealthStatus.healthy
        assert report.summary.healthy == 2

    async def test_suno_http_error_is_unhealthy(self):
        health = await monitor(httpx.Response(500), httpx.Response(200)).check_suno()

        assert health.status is HealthStatus.unhealthy
        assert health.error == "HTTP 500: Internal Server Error"

    async def test_suno_without_key_is_unhealthy(self):
        health = await monitor(httpx.Response(200), httpx.Response(200), suno_key=None).check_suno()

        assert health.status is HealthStatus.unhealthy
        assert health.error == "SUNO_API_KEY not configured"

    async def test_slow_suno_is_degraded(self):
        health = await monitor(httpx.Response(200), httpx.Response(200), step=6).check_suno()

        assert health.status is HealthStatus.degraded
        assert health.response_time == 6000

    async def test_mureka_404_counts_as_reachable(self):
        health = await monitor(httpx.Response(200), httpx.Response(404)).check_mureka()

        assert health.status is HealthStatus.healthy

    async def test_mureka_problems_are_degraded(self):
        errored = await monitor(httpx.Response(200), httpx.Response(503)).check_mureka()
        unconfigured = await monitor(httpx.Response(200), httpx.Response(200), mureka_key=None).check_mureka()

        assert errored.status is HealthStatus.degraded
        assert unconfigured.status is HealthStatus.degraded
        assert unconfigured.error == "MUREKA_API_KEY not configured"

    async def test_transport_error(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        health_monitor = HealthMonitor(
            suno_client(Recorder(refuse)),
            mureka_client(Recorder(refuse)),
            clock=stepping_clock(0.01),
        )

        report = await health_monitor.run()

        assert [p.status for p in report.providers] == [HealthStatus.unhealthy, HealthStatus.degraded]
        assert report.providers[0].error == "connection refused"


class TestAggregate:
    @pytest.mark.parametrize(
        "statuses,expected",
        [
            ((HealthStatus.healthy, HealthStatus.healthy), HealthStatus.healthy),
            ((HealthStatus.healthy, HealthStatus.degraded), HealthStatus.degraded),
            ((HealthStatus.degraded, HealthStatus.unhealthy), HealthStatus.unhealthy),
        ],
    )
    def test_worst_status_wins(self, statuses, expected):
        report = HealthMonitor.aggregate([result(f"p{i}", s) for i, s in enumerate(statuses)])

        assert report.status is expected
        assert report.summary.healthy + report.summary.degraded + report.summary.unhealthy == 2


async def test_persist_report(session):
    report = HealthMonitor.aggregate(
        [result("suno", HealthStatus.healthy), result("mureka", HealthStatus.degraded)]
    )

    await persist_report(session, report, models={"suno": "V4_5"})

    logs = await HealthLogRepository(session).list_recent()
    by_provider = {log.provider: log for log in logs}
    assert by_provider["suno"].model == "V4_5"
    assert by_provider["mureka"].status == "degraded"
    assert by_provider["mureka"].model is None
