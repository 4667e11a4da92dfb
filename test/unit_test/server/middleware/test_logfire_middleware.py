"""
Unit tests for Logfire middleware.

This test suite covers request reporting, the X-Process-Time header, slow
request warnings and failure reporting.
"""

from itertools import chain, repeat
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI, Request
from starlette.responses import Response
from starlette.testclient import TestClient

from aimusic_studio.server.middleware.logfire_middleware import LogfireMiddleware

MODULE = "aimusic_studio.server.middleware.logfire_middleware"


def mock_request(method="GET", path="/api/v1/tracks"):
    request = AsyncMock(spec=Request)
    request.method = method
    request.url.path = path
    request.state = MagicMock()
    return request


class TestLogfireMiddlewareDispatch:
    """Test LogfireMiddleware.dispatch method."""

    @pytest.mark.asyncio
    async def test_reports_successful_request(self):
        async def call_next(request):
            return Response(content="ok", status_code=200)

        middleware = LogfireMiddleware(app=AsyncMock())

        with patch(f"{MODULE}.log_api_request") as mock_log:
            response = await middleware.dispatch(mock_request(), call_next)

        assert response.status_code == 200
        assert "X-Process-Time" in response.headers
        kwargs = mock_log.call_args[1]
        assert (kwargs["method"], kwargs["path"], kwargs["status_code"]) == ("GET", "/api/v1/tracks", 200)

    @pytest.mark.asyncio
    async def test_slow_request_warning(self):
        async def call_next(request):
            return Response(status_code=201)

        middleware = LogfireMiddleware(app=AsyncMock())

        with patch(f"{MODULE}.time.time", side_effect=chain([100.0, 102.5], repeat(102.5))), patch(f"{MODULE}.log_api_request"), patch(
            f"{MODULE}.logger"
        ) as mock_logger:
            await middleware.dispatch(mock_request("POST", "/api/v1/generation"), call_next)

        mock_logger.warning.assert_called_once()
        assert "Slow API request" in mock_logger.warning.call_args[0][0]

    @pytest.mark.asyncio
    async def test_failure_is_reported_and_reraised(self):
        async def call_next(request):
            raise RuntimeError("boom")

        middleware = LogfireMiddleware(app=AsyncMock())

        with patch(f"{MODULE}.log_api_request") as mock_log:
            with pytest.raises(RuntimeError):
                await middleware.dispatch(mock_request(), call_next)

        assert mock_log.call_args[1]["status_code"] == 500


def test_header_added_in_app():
    app = FastAPI()
    app.add_middleware(LogfireMiddleware)

    @app.get("/ping")
    async def ping():
        return {"pong": True}

    response = TestClient(app).get("/ping")

    assert response.status_code == 200
    assert float(response.headers["X-Process-Time"]) >= 0
