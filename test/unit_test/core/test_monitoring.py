"""
Unit tests for the Logfire monitoring module.

This test suite covers:
- Feature flag and token handling in initialize_logfire
- Instrumentation switches
- Event helpers (API requests, generation events, errors)
- Graceful degradation when Logfire calls fail
"""

import sys
from unittest.mock import MagicMock, patch

import pytest
from fastapi import FastAPI

import aimusic_studio.core.monitoring as monitoring


@pytest.fixture
def fake_logfire():
    module = MagicMock()
    with patch.dict(sys.modules, {"logfire": module}):
        yield module


@pytest.fixture
def enabled(monkeypatch):
    monkeypatch.setattr(monitoring, "LOGFIRE_ENABLED", True)
    monkeypatch.setattr(monitoring, "LOGFIRE_TOKEN", "lf-token")


class TestInitializeLogfire:
    def test_disabled_does_nothing(self, monkeypatch, fake_logfire):
        monkeypatch.setattr(monitoring, "LOGFIRE_ENABLED", False)

        monitoring.initialize_logfire()

        fake_logfire.configure.assert_not_called()

    def test_missing_token_does_nothing(self, monkeypatch, fake_logfire):
        monkeypatch.setattr(monitoring, "LOGFIRE_ENABLED", True)
        monkeypatch.setattr(monitoring, "LOGFIRE_TOKEN", "")

        monitoring.initialize_logfire()

        fake_logfire.configure.assert_not_called()

    def test_configures_and_instruments(self, enabled, fake_logfire):
        app = FastAPI()

        monitoring.initialize_logfire(app)

        fake_logfire.configure.assert_called_once_with(
            token="lf-token",
            service_name=monitoring.LOGFIRE_SERVICE_NAME,
            service_version=monitoring.LOGFIRE_SERVICE_VERSION,
            environment=monitoring.LOGFIRE_ENVIRONMENT,
        )
        fake_logfire.instrument_sqlalchemy.assert_called_once()
        fake_logfire.instrument_httpx.assert_called_once()
        fake_logfire.instrument_pydantic_ai.assert_called_once()
        fake_logfire.instrument_fastapi.assert_called_once_with(app=app)

    def test_instrumentation_switches(self, enabled, monkeypatch, fake_logfire):
        monkeypatch.setattr(monitoring, "LOGFIRE_TRACE_SQLALCHEMY", False)
        monkeypatch.setattr(monitoring, "LOGFIRE_TRACE_HTTPX", False)

        monitoring.initialize_logfire()

        fake_logfire.instrument_sqlalchemy.assert_not_called()
        fake_logfire.instrument_httpx.assert_not_called()
        fake_logfire.instrument_fastapi.assert_not_called()

    def test_instrumentation_failure_is_tolerated(self, enabled, fake_logfire):
        fake_logfire.instrument_httpx.side_effect = RuntimeError("no httpx")

        monitoring.initialize_logfire()

        fake_logfire.instrument_pydantic_ai.assert_called_once()

    def test_configure_failure_is_tolerated(self, enabled, fake_logfire):
        fake_logfire.configure.side_effect = RuntimeError("bad token")

        monitoring.initialize_logfire()

        fake_logfire.instrument_sqlalchemy.assert_not_called()


class TestEventHelpers:
    def test_helpers_skip_logfire_when_disabled(self, monkeypatch, fake_logfire):
        monkeypatch.setattr(monitoring, "LOGFIRE_ENABLED", False)

        monitoring.log_api_request("GET", "/health", 200, 1.5)
        monitoring.log_generation_event("job-1", "suno", "processing", 40)
        monitoring.log_error("ProviderError", "boom")

        fake_logfire.info.assert_not_called()
        fake_logfire.error.assert_not_called()

    def test_api_request(self, enabled, fake_logfire):
        monitoring.log_api_request("POST", "/api/v1/generation", 201, 12.0)

        fake_logfire.info.assert_called_once_with(
            "API request", method="POST", path="/api/v1/generation", status_code=201, duration_ms=12.0
        )

    def test_generation_event(self, enabled, fake_logfire):
        monitoring.log_generation_event("job-1", "mureka", "completed", 100)

        fake_logfire.info.assert_called_once_with(
            "Generation job update", job_id="job-1", provider="mureka", status="completed", progress=100
        )

    def test_error_with_context(self, enabled, fake_logfire):
        monitoring.log_error("ProviderError", "timeout", {"job_id": "job-1"})

        fake_logfire.error.assert_called_once_with(
            "Error occurred", error_type="ProviderError", error_message="timeout", job_id="job-1"
        )

    def test_logfire_failure_is_swallowed(self, enabled, fake_logfire):
        fake_logfire.info.side_effect = RuntimeError("exporter down")

        monitoring.log_generation_event("job-1", "suno", "failed", 0)
