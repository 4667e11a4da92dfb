"""Lyrics generation through Suno."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from aimusic_studio.core.database.entities.lyrics import Lyrics
from aimusic_studio.core.database.repositories import LyricsRepository
from aimusic_studio.core.logging_config import get_logger
from aimusic_studio.core.models.domain import Provider
from aimusic_studio.core.models.io.lyrics import LyricsGenerated, LyricsGenerateRequest, LyricsRead
from aimusic_studio.providers import ProviderError, SunoClient

logger = get_logger(__name__)

PENDING_CONTENT = "Lyrics are being generated..."


async def generate_lyrics(
    session: AsyncSession,
    suno: SunoClient,
    user_id: str,
    request: LyricsGenerateRequest,
) -> LyricsGenerated:
    """Submit a lyrics task and store a placeholder record for it.

    The record's ``provider_lyrics_id`` is the Suno task id; the webhook
    fills in the content once Suno finishes.

    Raises:
        ProviderError: When Suno rejects the request or returns no task id.
    """
    payload = await suno.generate_lyrics(
        request.prompt,
        style=request.style,
        language=request.language,
        structure=request.structure,
    )
    task_id = SunoClient.extract_task_id(payload)
    if not task_id:
        raise ProviderError("No task ID found in Suno API response", provider=Provider.suno.value, details=payload)

    record = await LyricsRepository(session).create(
        Lyrics(
            user_id=user_id,
            title=f"Lyrics for: {request.prompt[:50]}...",
            content=PENDING_CONTENT,
            prompt=request.prompt,
            style=request.style,
            language=request.language,
            provider=Provider.suno.value,
            provider_lyrics_id=task_id,
            generation_params=request.model_dump(),
        )
    )
    logger.info(f"Lyrics task {task_id} submitted for user {user_id} (record {record.id})")
    return LyricsGenerated(lyrics=LyricsRead.model_validate(record), provider_response=payload)
