"""
Bearer token verification.

Tokens are issued by the managed auth backend; this service never decodes
them itself. ``AuthVerifier`` asks the backend who the token belongs to
(``GET {AUTH_URL}/auth/v1/user``) and turns the answer into an
``AuthenticatedUser``.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
from fastapi import HTTPException, status
from pydantic import BaseModel

from aimusic_studio.core.logging_config import get_logger

logger = get_logger(__name__)


class AuthError(HTTPException):
    """401 raised for a missing, malformed or rejected bearer token."""

    def __init__(self, detail: str = "Authentication required") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AuthenticatedUser(BaseModel):
    id: str
    email: Optional[str] = None
    raw: Dict[str, Any] = {}


def parse_bearer(authorization: Optional[str]) -> str:
    """Return the token of an ``Authorization: Bearer <token>`` header.

    Raises:
        AuthError: When the header is missing or not a bearer header.
    """
    if not authorization:
        raise AuthError("Missing authorization header")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthError("Invalid authorization header")
    return token.strip()


class AuthVerifier:
    """Resolve bearer tokens through the auth backend."""

    def __init__(self, base_url: str, api_key: Optional[str] = None, *, client: Optional[httpx.AsyncClient] = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=10.0)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def verify(self, token: str) -> AuthenticatedUser:
        headers = {"Authorization": f"Bearer {token}"}
        if self.api_key:
            headers["apikey"] = self.api_key
        try:
            r = await self._client.get(f"{self.base_url}/auth/v1/user", headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Auth backend request failed: {e}")
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Auth backend unavailable") from e

        if r.status_code != 200:
            logger.info(f"Auth backend rejected token: HTTP {r.status_code}")
            raise AuthError("Invalid or expired token")

        try:
            payload = r.json()
        except ValueError as e:
            logger.error(f"Auth backend returned a non-JSON body: {e}")
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Auth backend unavailable") from e

        user_id = payload.get("id") if isinstance(payload, dict) else None
        if not user_id:
            raise AuthError("Invalid or expired token")
        return AuthenticatedUser(id=str(user_id), email=payload.get("email"), raw=payload)
