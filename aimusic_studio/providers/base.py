"""Provider protocol and the models shared by every provider client.

Every generation provider goes through the same two steps: ``submit`` hands
the request to the provider and returns its task id, ``wait_for_result``
follows that task until an audio track is available. The generation service
drives both steps and records job progress in between.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Optional, Protocol, runtime_checkable

from pydantic import BaseModel, Field

ProgressCallback = Callable[[int], Awaitable[None]]


class GenerationParams(BaseModel):
    """Provider-agnostic description of one generation request."""

    prompt: str
    model: str
    style: str = "pop"
    duration: int = 60
    instrumental: bool = False
    lyrics: Optional[str] = None


class GenerationResult(BaseModel):
    """Normalized track returned by a provider once generation finishes."""

    id: str = Field(description="Provider track id")
    title: str
    audio_url: str
    image_url: Optional[str] = None
    duration: Optional[int] = None
    lyrics: Optional[str] = None
    task_id: Optional[str] = Field(default=None, description="Provider task that produced the track")


@runtime_checkable
class MusicProvider(Protocol):
    """Protocol implemented by the Suno, Mureka and sandbox clients."""

    name: str

    async def submit(self, params: GenerationParams) -> str: ...

    async def wait_for_result(
        self,
        task_id: str,
        params: GenerationParams,
        *,
        on_progress: Optional[ProgressCallback] = None,
    ) -> GenerationResult: ...

    async def aclose(self) -> None: ...
