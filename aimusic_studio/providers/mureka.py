"""Mureka API client.

Submits generation tasks to ``POST /music/generate`` and follows them through
``GET /music/status/{task_id}`` until the track is ready.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Dict, Optional

import httpx

from aimusic_studio.core.logging_config import get_logger
from aimusic_studio.core.models.domain import Provider

from .base import GenerationParams, GenerationResult, ProgressCallback
from .errors import ProviderError, ProviderNotConfiguredError, ProviderTimeoutError
from .retry import SleepFunc

if TYPE_CHECKING:
    from aimusic_studio.server.core.config import Settings

logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://api.mureka.com/v1"
DEFAULT_HEALTH_URL = "https://platform.mureka.ai/v1/health"


class MurekaClient:
    """Async client for the Mureka API."""

    name = Provider.mureka.value

    def __init__(
        self,
        api_key: Optional[str],
        *,
        base_url: str = DEFAULT_BASE_URL,
        health_url: str = DEFAULT_HEALTH_URL,
        default_model: str = "mureka-v6",
        timeout: float = 30.0,
        poll_interval: float = 5.0,
        max_poll_attempts: int = 60,
        client: Optional[httpx.AsyncClient] = None,
        sleep: Optional[SleepFunc] = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.health_url = health_url
        self.default_model = default_model
        self.poll_interval = poll_interval
        self.max_poll_attempts = max_poll_attempts
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)
        self._sleep: SleepFunc = sleep or asyncio.sleep

    @classmethod
    def from_settings(cls, settings: "Settings", **kwargs: Any) -> "MurekaClient":
        mureka = settings.mureka
        polling = settings.polling
        options: Dict[str, Any] = dict(
            base_url=mureka.base_url,
            health_url=mureka.health_url,
            default_model=mureka.default_model,
            poll_interval=polling.poll_interval_seconds,
            max_poll_attempts=polling.max_poll_attempts,
        )
        options.update(kwargs)
        return cls(mureka.api_key, **options)

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        if not self.api_key:
            raise ProviderNotConfiguredError(self.name, "MUREKA_API_KEY")
        return {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"}

    async def _request(self, method: str, path: str, *, json: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        headers = self._headers()
        try:
            r = await self._client.request(method, f"{self.base_url}/{path.lstrip('/')}", headers=headers, json=json)
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                f"Mureka API error: {e.response.status_code}",
                provider=self.name,
                status_code=e.response.status_code,
                details=e.response.text,
            ) from e
        except httpx.HTTPError as e:
            raise ProviderError(f"Mureka API request failed: {e}", provider=self.name) from e
        try:
            payload = r.json()
        except ValueError as e:
            raise ProviderError("Mureka API returned a non-JSON response", provider=self.name, details=r.text) from e
        if not isinstance(payload, dict):
            raise ProviderError("Unexpected Mureka API response", provider=self.name, details=payload)
        return payload

    async def submit(self, params: GenerationParams) -> str:
        """Submit a generation task and return its id."""
        body: Dict[str, Any] = {
            "description": params.prompt,
            "genre": params.style,
            "duration_seconds": params.duration,
            "instrumental_only": params.instrumental,
            "model": params.model or self.default_model,
        }
        if not params.instrumental and params.lyrics:
            body["lyrics"] = params.lyrics
        payload = await self._request("POST", "music/generate", json=body)
        task_id = payload.get("task_id") or payload.get("id")
        if not task_id:
            raise ProviderError("No task ID found in Mureka API response", provider=self.name, details=payload)
        logger.info(f"Mureka generation task submitted: {task_id}")
        return str(task_id)

    async def get_status(self, task_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"music/status/{task_id}")

    async def wait_for_result(
        self,
        task_id: str,
        params: GenerationParams,
        *,
        on_progress: Optional[ProgressCallback] = None,
    ) -> GenerationResult:
        """Poll the task status until it completes.

        Raises:
            ProviderError: When Mureka reports the task failed or returns no audio.
            ProviderTimeoutError: When ``max_poll_attempts`` checks pass without completion.
        """
        for attempt in range(self.max_poll_attempts):
            await self._sleep(self.poll_interval)
            try:
                status = await self.get_status(task_id)
            except ProviderError as e:
                logger.warning(f"Mureka status check {attempt + 1} for {task_id} failed: {e}")
                continue

            if on_progress is not None:
                await on_progress(round(60 + min(20, attempt / self.max_poll_attempts * 20)))

            state = status.get("status")
            if state == "completed":
                return self._to_result(status, task_id, params)
            if state == "failed":
                raise ProviderError(
                    f"Mureka generation failed: {status.get('error') or 'Unknown error'}",
                    provider=self.name,
                    details=status,
                )

        raise ProviderTimeoutError(self.name, task_id, self.max_poll_attempts)

    def _to_result(self, status: Dict[str, Any], task_id: str, params: GenerationParams) -> GenerationResult:
        output = status.get("output") or {}
        if not output.get("audio_url"):
            raise ProviderError("Mureka task completed without audio", provider=self.name, details=status)
        metadata = status.get("metadata") or {}
        duration = output.get("duration")
        return GenerationResult(
            id=str(status.get("task_id") or task_id),
            title=metadata.get("title") or params.prompt[:50],
            audio_url=output["audio_url"],
            image_url=output.get("cover_url"),
            duration=int(duration) if isinstance(duration, (int, float)) else params.duration,
            lyrics=output.get("lyrics") or params.lyrics,
            task_id=task_id,
        )

    async def ping(self) -> httpx.Response:
        """Unchecked request to the availability endpoint."""
        return await self._client.get(self.health_url, headers=self._headers())
