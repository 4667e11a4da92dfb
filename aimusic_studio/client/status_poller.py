"""
Generation status poller.

Client-side loop that follows one generation job until it finishes:

- polls immediately, then every ``interval`` (1000 ms to start);
- a successful poll resets the interval to 1000 ms and the error count;
- a failed poll multiplies the interval by 1.5, capped at 5000 ms;
- five consecutive failures stop the loop with a synthetic ``failed``
  snapshot;
- a snapshot with a terminal status stops the loop.

Stopping the poller cancels its task; nothing else is undone.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Awaitable, Callable, Optional, Union

import httpx
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from aimusic_studio.core.logging_config import get_logger
from aimusic_studio.core.models.domain import JobStatus
from aimusic_studio.server.core.constant import API_V1_STR

logger = get_logger(__name__)

INITIAL_INTERVAL_MS = 1000
BACKOFF_FACTOR = 1.5
MAX_INTERVAL_MS = 5000
MAX_CONSECUTIVE_ERRORS = 5
POLLING_FAILED_MESSAGE = "Real-time updates failed after multiple attempts"


class JobSnapshot(BaseModel):
    """What the poller knows about a job after one poll."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    job_id: str = Field(validation_alias=AliasChoices("job_id", "id"))
    status: JobStatus
    progress: int = 0
    error_message: Optional[str] = None
    track_id: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal


StatusFetcher = Callable[[str], Awaitable[JobSnapshot]]
UpdateHandler = Callable[[JobSnapshot], Union[None, Awaitable[None]]]
SleepFunc = Callable[[float], Awaitable[Any]]


def http_status_fetcher(client: httpx.AsyncClient, token: Optional[str] = None) -> StatusFetcher:
    """Build a fetcher reading ``GET /api/v1/generation/{job_id}`` through ``client``.

    ``client`` must carry the service base URL.
    """
    headers = {"Authorization": f"Bearer {token}"} if token else {}

    async def fetch(job_id: str) -> JobSnapshot:
        response = await client.get(f"{API_V1_STR}/generation/{job_id}", headers=headers)
        response.raise_for_status()
        return JobSnapshot.model_validate(response.json())

    return fetch


class GenerationStatusPoller:
    """Poll one job with backoff until it reaches a terminal state."""

    def __init__(
        self,
        job_id: str,
        fetch: StatusFetcher,
        *,
        on_update: Optional[UpdateHandler] = None,
        sleep: Optional[SleepFunc] = None,
    ) -> None:
        self.job_id = job_id
        self.fetch = fetch
        self.on_update = on_update
        self._sleep: SleepFunc = sleep or asyncio.sleep

        self.interval_ms: float = INITIAL_INTERVAL_MS
        self.consecutive_errors = 0
        self.last_snapshot: Optional[JobSnapshot] = None
        self.finished = False
        self._task: Optional[asyncio.Task] = None

    def record_success(self, snapshot: JobSnapshot) -> bool:
        """Apply a successful poll. Returns whether polling should continue."""
        self.interval_ms = INITIAL_INTERVAL_MS
        self.consecutive_errors = 0
        self.last_snapshot = snapshot
        if snapshot.is_terminal:
            self.finished = True
        return not self.finished

    def record_error(self, error: BaseException) -> Optional[JobSnapshot]:
        """Apply a failed poll.

        Returns:
            A synthetic ``failed`` snapshot once the error limit is reached,
            otherwise None.
        """
        self.consecutive_errors += 1
        self.interval_ms = min(self.interval_ms * BACKOFF_FACTOR, MAX_INTERVAL_MS)
        logger.warning(f"Polling job {self.job_id} failed (attempt {self.consecutive_errors}): {error}")
        if self.consecutive_errors < MAX_CONSECUTIVE_ERRORS:
            return None

        logger.error(f"Too many polling errors for job {self.job_id}, stopping")
        self.finished = True
        previous = self.last_snapshot
        self.last_snapshot = JobSnapshot(
            job_id=self.job_id,
            status=JobStatus.failed,
            progress=previous.progress if previous else 0,
            error_message=POLLING_FAILED_MESSAGE,
            track_id=previous.track_id if previous else None,
        )
        return self.last_snapshot

    async def _notify(self, snapshot: JobSnapshot) -> None:
        if self.on_update is None:
            return
        result = self.on_update(snapshot)
        if inspect.isawaitable(result):
            await result

    async def poll_once(self) -> bool:
        """Run one poll. Returns whether polling should continue."""
        try:
            snapshot = await self.fetch(self.job_id)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            failed = self.record_error(e)
            if failed is not None:
                await self._notify(failed)
            return not self.finished

        keep_going = self.record_success(snapshot)
        await self._notify(snapshot)
        return keep_going

    async def run(self) -> Optional[JobSnapshot]:
        """Poll until the job finishes or polling gives up; return the last snapshot."""
        while await self.poll_once():
            await self._sleep(self.interval_ms / 1000)
        return self.last_snapshot

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run())
        return self._task

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            logger.debug(f"Stopped polling job {self.job_id}")

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()
