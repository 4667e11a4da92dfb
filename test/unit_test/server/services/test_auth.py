"""Unit tests for bearer token verification."""

import httpx
import pytest
from fastapi import HTTPException

from aimusic_studio.server.services.auth import AuthError, AuthVerifier, parse_bearer

from ...mock_http import Recorder

pytestmark = pytest.mark.asyncio


class TestParseBearer:
    async def test_valid_header(self):
        assert parse_bearer("Bearer abc.def") == "abc.def"
        assert parse_bearer("bearer  xyz ") == "xyz"

    @pytest.mark.parametrize("header", [None, "", "Basic abc", "Bearer", "Bearer   "])
    async def test_invalid_header(self, header):
        with pytest.raises(AuthError) as exc_info:
            parse_bearer(header)
        assert exc_info.value.status_code == 401
        assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}


class TestAuthVerifier:
    async def test_resolves_user(self):
        recorder = Recorder(lambda r: httpx.Response(200, json={"id": "u-42", "email": "a@example.com"}))
        verifier = AuthVerifier("http://mock.auth/", "service-key", client=recorder.client())

        user = await verifier.verify("token-1")

        assert (user.id, user.email) == ("u-42", "a@example.com")
        request = recorder.requests[0]
        assert str(request.url) == "http://mock.auth/auth/v1/user"
        assert request.headers["Authorization"] == "Bearer token-1"
        assert request.headers["apikey"] == "service-key"

    @pytest.mark.parametrize(
        "response",
        [httpx.Response(401, json={"msg": "expired"}), httpx.Response(200, json={"email": "no-id@example.com"})],
    )
    async def test_rejected_token(self, response):
        verifier = AuthVerifier("http://mock.auth", client=Recorder(lambda r: response).client())

        with pytest.raises(AuthError):
            await verifier.verify("token-1")

    async def test_non_json_answer(self):
        recorder = Recorder(lambda r: httpx.Response(200, text="<html>maintenance</html>"))
        verifier = AuthVerifier("http://mock.auth", client=recorder.client())

        with pytest.raises(HTTPException) as exc_info:
            await verifier.verify("token-1")
        assert exc_info.value.status_code == 503

    async def test_backend_unreachable(self):
        def refuse(request):
            raise httpx.ConnectError("refused", request=request)

        verifier = AuthVerifier("http://mock.auth", client=Recorder(refuse).client())

        with pytest.raises(HTTPException) as exc_info:
            await verifier.verify("token-1")
        assert exc_info.value.status_code == 503
