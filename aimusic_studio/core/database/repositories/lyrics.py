"""Lyrics repository."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.lyrics import Lyrics
from .base import AsyncBaseRepository


class LyricsRepository(AsyncBaseRepository[Lyrics]):
    """Repository for lyrics records."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Lyrics)

    async def find_by_provider_id(self, provider_lyrics_id: str) -> Optional[Lyrics]:
        """Find lyrics by provider task id, exact match first, then case-insensitive."""
        stmt = select(Lyrics).where(Lyrics.provider_lyrics_id == provider_lyrics_id).limit(1)
        record = (await self.session.execute(stmt)).scalars().first()
        if record is not None:
            return record

        stmt = (
            select(Lyrics)
            .where(func.lower(Lyrics.provider_lyrics_id) == provider_lyrics_id.lower())
            .limit(1)
        )
        return (await self.session.execute(stmt)).scalars().first()
