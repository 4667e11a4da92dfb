"""Credit balance lookup."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from aimusic_studio.core.database.base import utc_now
from aimusic_studio.core.database.repositories import GenerationJobRepository
from aimusic_studio.core.logging_config import get_logger
from aimusic_studio.core.models.io.health import CreditsInfo
from aimusic_studio.providers import ProviderError, SunoClient

logger = get_logger(__name__)

ESTIMATED_DAILY_CREDITS = 100
ESTIMATE_WARNING = "Could not fetch exact credits from Suno API"


async def estimate_credits(session: AsyncSession, user_id: str, *, now: Optional[datetime] = None) -> int:
    """Daily allowance minus what the user spent in the last 24 hours, floored at 0."""
    since = (now or utc_now()) - timedelta(hours=24)
    used = await GenerationJobRepository(session).credits_used_since(user_id, since)
    return max(0, ESTIMATED_DAILY_CREDITS - used)


async def check_credits(session: AsyncSession, suno: SunoClient, user_id: str) -> CreditsInfo:
    """Remaining Suno credits, estimated from recent usage when Suno cannot answer."""
    try:
        payload = await suno.get_credits()
    except ProviderError as e:
        logger.warning(f"Suno credit lookup failed for user {user_id}, estimating: {e}")
        return CreditsInfo(
            credits=await estimate_credits(session, user_id),
            method="estimated",
            warning=ESTIMATE_WARNING,
        )
    return CreditsInfo(credits=SunoClient.remaining_credits(payload), method="suno_api", raw=payload)
