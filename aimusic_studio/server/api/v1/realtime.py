"""
Realtime Progress WebSocket.

``/progress?job_id=...`` streams the progress of one generation job. The
server pushes ``progress_update`` and ``audio_chunk`` messages through the
progress hub; the client may send ``request_status`` (answered with a
``status_update`` read from the database) and ``ping`` (answered with
``pong``).
"""

import json
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from aimusic_studio.core.database.repositories import GenerationJobRepository
from aimusic_studio.core.logging_config import get_logger
from aimusic_studio.server.services.deps import get_session_factory
from aimusic_studio.services import ProgressHub, get_progress_hub

logger = get_logger(__name__)
router = APIRouter()


async def _status_message(session_factory: async_sessionmaker[AsyncSession], job_id: str) -> Dict[str, Any]:
    async with session_factory() as session:
        job = await GenerationJobRepository(session).get_by_id(job_id)
    if job is None:
        return {"type": "error", "job_id": job_id, "message": f"Generation job {job_id} not found"}
    return ProgressHub.status_message(job)


def _message_type(raw: str) -> Optional[str]:
    try:
        message = json.loads(raw)
    except ValueError:
        return None
    return message.get("type") if isinstance(message, dict) else None


@router.websocket("/progress")
async def progress_socket(
    websocket: WebSocket,
    job_id: Optional[str] = None,
    hub: ProgressHub = Depends(get_progress_hub),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> None:
    if not job_id:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason="job_id is required")
        return

    await websocket.accept()
    hub.register(job_id, websocket)
    logger.info(f"Progress socket opened for job {job_id}")
    try:
        await websocket.send_json(hub.connection_message(job_id))
        while True:
            kind = _message_type(await websocket.receive_text())
            if kind == "request_status":
                await websocket.send_json(await _status_message(session_factory, job_id))
            elif kind == "ping":
                await websocket.send_json(hub.pong_message())
            else:
                logger.debug(f"Ignoring progress socket message for job {job_id}: {kind}")
    except WebSocketDisconnect:
        logger.info(f"Progress socket closed for job {job_id}")
    finally:
        hub.unregister(job_id, websocket)
