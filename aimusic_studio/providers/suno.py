"""Suno API client

Overview
--------
Thin async HTTP client for the Suno REST API (``https://api.sunoapi.org``).
It covers everything the service proxies to Suno: music generation and its
status polling, lyrics generation, credit balance, track extension, vocal
removal, WAV conversion and style enhancement.

Responses
---------
Suno wraps every payload as ``{"code": 200, "msg": "success", "data": ...}``.
A ``code`` other than 200 is raised as ``ProviderError``. Task ids are read
from ``data.taskId``, ``data.task_id`` or ``data.id`` (also when ``data`` is a
list), falling back to the same keys at the top level.

Errors
------
All HTTP failures are raised as ``ProviderError`` with status code and body.
Calls made without ``SUNO_API_KEY`` raise ``ProviderNotConfiguredError`` before
any request is sent. Polling that runs out of attempts raises
``ProviderTimeoutError``.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Dict, Optional

import httpx

from aimusic_studio.core.logging_config import get_logger
from aimusic_studio.core.models.domain import Provider

from .base import GenerationParams, GenerationResult, ProgressCallback
from .errors import ProviderError, ProviderNotConfiguredError, ProviderTimeoutError
from .retry import SleepFunc, retry_api_call

if TYPE_CHECKING:
    from aimusic_studio.server.core.config import Settings

logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://api.sunoapi.org/api/v1"
TASK_ID_KEYS = ("taskId", "task_id", "id")
CREDIT_KEYS = ("data", "credits", "remaining")


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return int(round(value))


class SunoClient:
    """Async client for the Suno API.

    Responsibilities
    ----------------
    - Authenticate requests with the configured bearer key.
    - Submit generation/lyrics/audio tasks and extract their task ids.
    - Poll generation and lyrics tasks until they finish.
    - Normalize finished tracks into ``GenerationResult``.
    """

    name = Provider.suno.value

    def __init__(
        self,
        api_key: Optional[str],
        *,
        base_url: str = DEFAULT_BASE_URL,
        callback_url: Optional[str] = None,
        default_model: str = "V4_5",
        timeout: float = 30.0,
        poll_interval: float = 5.0,
        max_poll_attempts: int = 60,
        lyrics_poll_interval: float = 3.0,
        lyrics_max_poll_attempts: int = 20,
        max_retries: int = 3,
        retry_delay: float = 2.0,
        client: Optional[httpx.AsyncClient] = None,
        sleep: Optional[SleepFunc] = None,
    ) -> None:
        """Create a Suno client.

        Args:
            api_key: Suno API key. ``None`` leaves the client unconfigured.
            base_url: API base URL including the ``/api/v1`` prefix.
            callback_url: Public URL of this service's Suno webhook, sent as
                ``callBackUrl`` so Suno reports task state back.
            default_model: Model used when a request does not name one.
            timeout: Default HTTP timeout for the internal client.
            poll_interval: Seconds between generation status checks.
            max_poll_attempts: Generation status checks before timing out.
            lyrics_poll_interval: Seconds between lyrics status checks.
            lyrics_max_poll_attempts: Lyrics status checks before timing out.
            max_retries: Attempts for submissions wrapped in ``retry_api_call``.
            retry_delay: Base delay of the linear retry backoff.
            client: Optional preconfigured ``httpx.AsyncClient`` to use.
            sleep: Awaitable sleep used while polling; ``asyncio.sleep`` by default.
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.callback_url = callback_url
        self.default_model = default_model
        self.poll_interval = poll_interval
        self.max_poll_attempts = max_poll_attempts
        self.lyrics_poll_interval = lyrics_poll_interval
        self.lyrics_max_poll_attempts = lyrics_max_poll_attempts
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)
        self._sleep: SleepFunc = sleep or asyncio.sleep

    @classmethod
    def from_settings(cls, settings: "Settings", **kwargs: Any) -> "SunoClient":
        suno = settings.suno
        polling = settings.polling
        options: Dict[str, Any] = dict(
            base_url=suno.base_url,
            callback_url=suno.callback_url,
            default_model=suno.default_model,
            poll_interval=polling.poll_interval_seconds,
            max_poll_attempts=polling.max_poll_attempts,
            lyrics_poll_interval=polling.lyrics_poll_interval_seconds,
            lyrics_max_poll_attempts=polling.lyrics_max_poll_attempts,
        )
        options.update(kwargs)
        return cls(suno.api_key, **options)

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # Transport helpers
    # ------------------------------------------------------------------

    def _require_key(self) -> str:
        if not self.api_key:
            raise ProviderNotConfiguredError(self.name, "SUNO_API_KEY")
        return self.api_key

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._require_key()}",
            "Content-Type": "application/json",
        }

    def _with_callback(self, body: Dict[str, Any]) -> Dict[str, Any]:
        if self.callback_url:
            body["callBackUrl"] = self.callback_url
        return body

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Send one request and return the decoded JSON body.

        Raises:
            ProviderNotConfiguredError: When no API key is set.
            ProviderError: On transport failures, non-2xx responses or a
                body that is not a JSON object.
        """
        headers = self._headers()
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            r = await self._client.request(method, url, headers=headers, json=json, params=params)
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                f"Suno API error: {e.response.status_code} {e.response.reason_phrase}",
                provider=self.name,
                status_code=e.response.status_code,
                details=e.response.text,
            ) from e
        except httpx.HTTPError as e:
            raise ProviderError(f"Suno API request failed: {e}", provider=self.name) from e
        try:
            payload = r.json()
        except ValueError as e:
            raise ProviderError(
                "Suno API returned a non-JSON response",
                provider=self.name,
                status_code=r.status_code,
                details=r.text,
            ) from e
        if not isinstance(payload, dict):
            raise ProviderError("Unexpected Suno API response", provider=self.name, details=payload)
        return payload

    async def _call_with_retry(self, method: str, path: str, *, retries: Optional[int] = None, **kwargs: Any) -> Dict[str, Any]:
        self._require_key()
        return await retry_api_call(
            lambda: self._request(method, path, **kwargs),
            retries or self.max_retries,
            self.retry_delay,
            sleep=self._sleep,
        )

    def _check_code(self, payload: Dict[str, Any]) -> None:
        code = payload.get("code", 200)
        if code != 200:
            reason = payload.get("msg") or payload.get("error") or "Unknown error"
            raise ProviderError(f"Suno API error: {reason}", provider=self.name, status_code=code, details=payload)

    @staticmethod
    def extract_task_id(payload: Dict[str, Any]) -> Optional[str]:
        """Extract the task id from a Suno submission response.

        Args:
            payload: Decoded response body.

        Returns:
            The task id, or None when the response carries none.
        """
        data = payload.get("data")
        if isinstance(data, list):
            data = data[0] if data else None
        for source in (_as_dict(data), payload):
            for key in TASK_ID_KEYS:
                value = source.get(key)
                if value:
                    return str(value)
        return None

    def _require_task_id(self, payload: Dict[str, Any]) -> str:
        task_id = self.extract_task_id(payload)
        if not task_id:
            raise ProviderError("No task ID found in Suno API response", provider=self.name, details=payload)
        return task_id

    # ------------------------------------------------------------------
    # Music generation
    # ------------------------------------------------------------------

    async def generate(self, params: GenerationParams) -> str:
        """Submit a generation task.

        API
        ---
        - Method/Path: ``POST /generate``

        Returns:
            Suno task id.
        """
        body: Dict[str, Any] = {
            "prompt": params.prompt,
            "title": params.prompt[:80],
            "model": params.model or self.default_model,
            "make_instrumental": params.instrumental,
            "customMode": not params.instrumental and bool(params.lyrics),
        }
        if not params.instrumental and params.lyrics:
            body["lyrics"] = params.lyrics
        self._with_callback(body)

        payload = await self._call_with_retry("POST", "generate", json=body)
        self._check_code(payload)
        task_id = self._require_task_id(payload)
        logger.info(f"Suno generation task submitted: {task_id}")
        return task_id

    async def submit(self, params: GenerationParams) -> str:
        return await self.generate(params)

    async def poll_generation(self, task_id: str, *, on_progress: Optional[ProgressCallback] = None) -> GenerationResult:
        """Poll ``GET /get?ids=<task_id>`` until the track has audio.

        Each answered check reports progress moving from 60 towards 80.
        Transport errors are logged and retried on the next check; a track
        reported as ``failed`` raises immediately.

        Raises:
            ProviderError: When Suno reports the generation failed.
            ProviderTimeoutError: When ``max_poll_attempts`` checks pass without a result.
        """
        for attempt in range(self.max_poll_attempts):
            await self._sleep(self.poll_interval)
            try:
                payload = await self._request("GET", "get", params={"ids": task_id})
            except ProviderError as e:
                logger.warning(f"Suno status check {attempt + 1} for {task_id} failed: {e}")
                continue

            if on_progress is not None:
                await on_progress(round(60 + min(20, attempt / self.max_poll_attempts * 20)))

            tracks = payload.get("data")
            if not isinstance(tracks, list) or not tracks:
                continue
            track = _as_dict(tracks[0])
            status = track.get("status")
            if status == "completed" and track.get("audio_url"):
                return self.to_result(track, task_id)
            if status == "failed":
                raise ProviderError(
                    f"Suno generation failed: {track.get('error_message') or 'Unknown error'}",
                    provider=self.name,
                    details=track,
                )
            logger.debug(f"Suno task {task_id} status: {status}, continuing to poll")

        raise ProviderTimeoutError(self.name, task_id, self.max_poll_attempts)

    async def wait_for_result(
        self,
        task_id: str,
        params: GenerationParams,
        *,
        on_progress: Optional[ProgressCallback] = None,
    ) -> GenerationResult:
        result = await self.poll_generation(task_id, on_progress=on_progress)
        if not result.lyrics and params.lyrics:
            result.lyrics = params.lyrics
        return result

    def to_result(self, track: Dict[str, Any], task_id: Optional[str] = None) -> GenerationResult:
        """Normalize one Suno track item (poll response or callback item)."""
        return GenerationResult(
            id=str(track.get("id") or task_id),
            title=track.get("title") or "Generated Track",
            audio_url=track.get("audio_url") or "",
            image_url=track.get("image_url"),
            duration=_as_int(track.get("duration")) or 120,
            lyrics=track.get("lyric"),
            task_id=task_id,
        )

    # ------------------------------------------------------------------
    # Lyrics
    # ------------------------------------------------------------------

    async def generate_lyrics(
        self,
        prompt: str,
        *,
        style: str = "pop",
        language: str = "russian",
        structure: str = "verse-chorus",
        retries: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Submit a lyrics task.

        API
        ---
        - Method/Path: ``POST /generate/lyrics``

        Returns:
            The decoded response; use ``extract_task_id`` for the task id.
        """
        body = self._with_callback(
            {"prompt": prompt, "style": style, "language": language, "structure": structure}
        )
        payload = await self._call_with_retry("POST", "generate/lyrics", json=body, retries=retries)
        self._check_code(payload)
        return payload

    async def poll_lyrics(self, task_id: str) -> str:
        """Poll ``GET /lyrics/record-info`` until the lyrics text is ready.

        Raises:
            ProviderError: When Suno reports the lyrics task failed.
            ProviderTimeoutError: When ``lyrics_max_poll_attempts`` checks pass without text.
        """
        for attempt in range(self.lyrics_max_poll_attempts):
            await self._sleep(self.lyrics_poll_interval)
            try:
                payload = await self._request("GET", "lyrics/record-info", params={"taskId": task_id})
            except ProviderError as e:
                logger.warning(f"Suno lyrics check {attempt + 1} for {task_id} failed: {e}")
                continue

            response = _as_dict(_as_dict(payload.get("data")).get("response"))
            items = response.get("lyricsData") or []
            first = _as_dict(items[0]) if items else {}
            if first.get("status") == "complete":
                return first.get("text") or ""
            if response.get("status") == "FAILED":
                raise ProviderError("Lyrics generation failed", provider=self.name, details=payload)

        raise ProviderTimeoutError(self.name, task_id, self.lyrics_max_poll_attempts)

    async def compose_lyrics(self, prompt: str, style: str) -> tuple[str, str]:
        """Generate lyrics for a song prompt and wait for the text.

        Returns:
            ``(lyrics, task_id)``
        """
        payload = await self.generate_lyrics(f"Create song lyrics for: {prompt}", style=style, retries=2)
        task_id = self._require_task_id(payload)
        return await self.poll_lyrics(task_id), task_id

    # ------------------------------------------------------------------
    # Account and audio operations
    # ------------------------------------------------------------------

    async def get_credits(self) -> Dict[str, Any]:
        """Fetch the account credit balance (``GET /generate/credit``)."""
        payload = await self._request("GET", "generate/credit")
        self._check_code(payload)
        return payload

    @staticmethod
    def remaining_credits(payload: Dict[str, Any]) -> int:
        """Read the remaining credits from ``data``, ``credits`` or ``remaining``."""
        for key in CREDIT_KEYS:
            value = _as_int(payload.get(key))
            if value:
                return value
        return 0

    async def ping(self) -> httpx.Response:
        """Unchecked credit request used as an availability check."""
        return await self._client.get(f"{self.base_url}/generate/credit", headers=self._headers())

    async def extend(
        self,
        audio_id: str,
        *,
        prompt: Optional[str] = None,
        continue_at: int = 30,
        model: Optional[str] = None,
    ) -> Optional[str]:
        """Continue an existing track (``POST /extend``) and return the task id."""
        body = self._with_callback(
            {
                "audioId": audio_id,
                "defaultParamFlag": True,
                "prompt": prompt,
                "continueAt": continue_at,
                "model": model or self.default_model,
            }
        )
        payload = await self._request("POST", "extend", json=body)
        self._check_code(payload)
        return self.extract_task_id(payload)

    async def vocal_removal(self, task_id: str, audio_id: str) -> Optional[str]:
        """Split vocals from a track (``POST /vocal-removal/generate``)."""
        body = self._with_callback({"taskId": task_id, "audioId": audio_id})
        payload = await self._request("POST", "vocal-removal/generate", json=body)
        self._check_code(payload)
        return self.extract_task_id(payload)

    async def wav_conversion(self, task_id: str, audio_id: str) -> Optional[str]:
        """Convert a track to WAV (``POST /wav-format/generate``)."""
        body = self._with_callback({"taskId": task_id, "audioId": audio_id})
        payload = await self._request("POST", "wav-format/generate", json=body)
        self._check_code(payload)
        return self.extract_task_id(payload)

    async def style_enhance(self, content: str) -> Dict[str, Any]:
        """Ask Suno to enrich a style description (``POST /style/generate``)."""
        payload = await self._request("POST", "style/generate", json={"content": content})
        self._check_code(payload)
        return payload

    @staticmethod
    def enhanced_style(payload: Dict[str, Any]) -> Optional[str]:
        result = _as_dict(payload.get("data")).get("result") or payload.get("result")
        return str(result) if result else None
