"""
Realtime progress hub.

Keeps the WebSocket registered for each generation job and pushes progress
updates and audio chunks to it. Senders never fail because a client is
missing: updates for jobs without an open connection are dropped.
"""

from __future__ import annotations

import time
from typing import Any, Dict, Optional

from fastapi import WebSocket
from starlette.websockets import WebSocketState

from aimusic_studio.core.database.entities.generation_jobs import GenerationJob
from aimusic_studio.core.logging_config import get_logger

logger = get_logger(__name__)


def _timestamp_ms() -> int:
    return int(time.time() * 1000)


class ProgressHub:
    """Registry of one WebSocket per job id."""

    def __init__(self) -> None:
        self._connections: Dict[str, WebSocket] = {}

    def register(self, job_id: str, websocket: WebSocket) -> None:
        previous = self._connections.get(job_id)
        if previous is not None and previous is not websocket:
            logger.debug(f"Replacing progress connection for job {job_id}")
        self._connections[job_id] = websocket

    def unregister(self, job_id: str, websocket: Optional[WebSocket] = None) -> None:
        """Drop the connection of ``job_id`` (only if it is still ``websocket`` when given)."""
        current = self._connections.get(job_id)
        if current is None:
            return
        if websocket is None or current is websocket:
            del self._connections[job_id]

    def is_connected(self, job_id: str) -> bool:
        websocket = self._connections.get(job_id)
        return websocket is not None and websocket.client_state == WebSocketState.CONNECTED

    async def _send(self, job_id: str, message: Dict[str, Any]) -> bool:
        if not self.is_connected(job_id):
            return False
        websocket = self._connections[job_id]
        try:
            await websocket.send_json(message)
        except Exception as e:
            logger.warning(f"Dropping progress connection for job {job_id}: {e}")
            self.unregister(job_id, websocket)
            return False
        return True

    async def send_progress_update(
        self,
        job_id: str,
        *,
        stage: str,
        progress: int,
        details: Optional[str] = None,
        tokens_used: Optional[int] = None,
        estimated_time_remaining: Optional[int] = None,
        streaming_chunk: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """Push a ``progress_update`` message. Returns False when nobody listens."""
        message: Dict[str, Any] = {
            "type": "progress_update",
            "job_id": job_id,
            "stage": stage,
            "progress": progress,
            "timestamp": _timestamp_ms(),
        }
        optional = {
            "details": details,
            "tokens_used": tokens_used,
            "estimated_time_remaining": estimated_time_remaining,
            "streaming_chunk": streaming_chunk,
        }
        message.update({key: value for key, value in optional.items() if value is not None})
        return await self._send(job_id, message)

    async def send_audio_chunk(self, job_id: str, chunk: Dict[str, Any]) -> bool:
        """Push an ``audio_chunk`` message (``data``, ``index``, ``format`` and optional ``duration``)."""
        return await self._send(
            job_id,
            {"type": "audio_chunk", "job_id": job_id, "chunk": chunk, "timestamp": _timestamp_ms()},
        )

    async def publish_job(self, job: GenerationJob) -> bool:
        return await self.send_progress_update(
            job.id,
            stage=job.status,
            progress=job.progress,
            details=job.error_message,
        )

    @staticmethod
    def status_message(job: GenerationJob) -> Dict[str, Any]:
        return {
            "type": "status_update",
            "job_id": job.id,
            "status": job.status,
            "progress": job.progress,
            "error": job.error_message,
            "timestamp": _timestamp_ms(),
        }

    @staticmethod
    def connection_message(job_id: str) -> Dict[str, Any]:
        return {"type": "connection_established", "job_id": job_id, "timestamp": _timestamp_ms()}

    @staticmethod
    def pong_message() -> Dict[str, Any]:
        return {"type": "pong", "timestamp": _timestamp_ms()}


_hub: Optional[ProgressHub] = None


def get_progress_hub() -> ProgressHub:
    global _hub
    if _hub is None:
        _hub = ProgressHub()
    return _hub
