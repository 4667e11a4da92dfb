"""
Provider Callback Endpoints.

Suno reports task state by POSTing to the callback URL sent with each
request. The webhook is unauthenticated: it only acts on records whose
provider task id it can find.
"""

from typing import Any, Dict

from fastapi import APIRouter, HTTPException

from aimusic_studio.core.logging_config import get_logger
from aimusic_studio.core.models.io import SunoCallback
from aimusic_studio.server.services.deps import HubDep, SessionDep
from aimusic_studio.services import CallbackError, SunoCallbackHandler

logger = get_logger(__name__)
router = APIRouter()


@router.post(
    "/suno",
    summary="Suno Callback",
    description="Webhook receiving Suno generation and lyrics task updates.",
    responses={
        400: {"description": "Callback carries no task id"},
        404: {"description": "No job or lyrics record for the task id"},
        500: {"description": "The generated track could not be stored"},
    },
)
async def suno_callback(callback: SunoCallback, session: SessionDep, hub: HubDep) -> Dict[str, Any]:
    logger.info(
        f"Suno callback received: type={callback.data.callback_type}, task={callback.data.task_id}, code={callback.code}"
    )
    try:
        return await SunoCallbackHandler(session, hub).handle(callback)
    except CallbackError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e)) from e
