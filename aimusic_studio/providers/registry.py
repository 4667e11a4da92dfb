"""Provider lookup shared by the services."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from aimusic_studio.core.models.domain import Provider

from .base import MusicProvider
from .mureka import MurekaClient
from .sandbox import SandboxProvider
from .suno import SunoClient

if TYPE_CHECKING:
    from aimusic_studio.server.core.config import Settings


@dataclass
class ProviderRegistry:
    """One client per provider, resolved by ``Provider`` value."""

    suno: SunoClient
    mureka: MurekaClient
    sandbox: SandboxProvider

    @classmethod
    def from_settings(cls, settings: "Settings") -> "ProviderRegistry":
        return cls(
            suno=SunoClient.from_settings(settings),
            mureka=MurekaClient.from_settings(settings),
            sandbox=SandboxProvider(),
        )

    def get(self, provider: Union[Provider, str]) -> MusicProvider:
        """Return the client for ``provider``.

        Raises:
            ValueError: For an unknown provider name.
        """
        provider = Provider(provider)
        if provider is Provider.suno:
            return self.suno
        if provider is Provider.mureka:
            return self.mureka
        return self.sandbox

    async def aclose(self) -> None:
        await self.suno.aclose()
        await self.mureka.aclose()
        await self.sandbox.aclose()
