"""Offline provider producing deterministic fake tracks.

Used for the ``test`` provider option: no network, no credits, and a result
shaped exactly like a real provider's so the full job lifecycle can be
exercised end to end.
"""

from __future__ import annotations

import asyncio
from typing import Optional
from uuid import uuid4

from aimusic_studio.core.models.domain import Provider

from .base import GenerationParams, GenerationResult, ProgressCallback
from .retry import SleepFunc

SAMPLE_AUDIO_URL = "https://commondatastorage.googleapis.com/codeskulptor-demos/DDR_assets/Sevish_-__nbsp_.mp3"

SAMPLE_LYRICS = (
    'Test lyrics for "{title}":\n\n'
    "Verse 1:\nThis is a test track generated\nFor your music AI application\n"
    "The melody flows like dreams\nIn digital realms\n\n"
    "Chorus:\nTest track, test track\nPlaying back\nAll systems working\nNothing lacking"
)


class SandboxProvider:
    """Provider that fabricates a finished track after an optional delay."""

    name = Provider.test.value

    def __init__(self, *, delay: float = 0.0, sleep: Optional[SleepFunc] = None) -> None:
        self.delay = delay
        self._sleep: SleepFunc = sleep or asyncio.sleep

    async def submit(self, params: GenerationParams) -> str:
        return f"test_{uuid4().hex[:12]}"

    async def wait_for_result(
        self,
        task_id: str,
        params: GenerationParams,
        *,
        on_progress: Optional[ProgressCallback] = None,
    ) -> GenerationResult:
        if self.delay:
            await self._sleep(self.delay)
        if on_progress is not None:
            await on_progress(70)

        short_prompt = params.prompt[:30]
        ellipsis = "..." if len(short_prompt) < len(params.prompt) else ""
        lyrics = None
        if not params.instrumental:
            lyrics = params.lyrics or SAMPLE_LYRICS.format(title=short_prompt)
        return GenerationResult(
            id=task_id,
            title=f"Test: {short_prompt}{ellipsis}",
            audio_url=SAMPLE_AUDIO_URL,
            image_url=f"https://picsum.photos/300/300?random={task_id}",
            duration=params.duration,
            lyrics=lyrics,
            task_id=task_id,
        )

    async def aclose(self) -> None:
        return None
