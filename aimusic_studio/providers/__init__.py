"""Music provider clients.

- ``SunoClient``: Suno REST API (generation, lyrics, credits, audio tools)
- ``MurekaClient``: Mureka REST API (generation)
- ``SandboxProvider``: offline ``test`` provider
- ``ProviderRegistry``: resolves a ``Provider`` value to its client
"""

from .base import GenerationParams, GenerationResult, MusicProvider, ProgressCallback
from .errors import ProviderError, ProviderNotConfiguredError, ProviderTimeoutError
from .mureka import MurekaClient
from .registry import ProviderRegistry
from .retry import retry_api_call
from .sandbox import SandboxProvider
from .suno import SunoClient

__all__ = [
    "GenerationParams",
    "GenerationResult",
    "MurekaClient",
    "MusicProvider",
    "ProgressCallback",
    "ProviderError",
    "ProviderNotConfiguredError",
    "ProviderRegistry",
    "ProviderTimeoutError",
    "SandboxProvider",
    "SunoClient",
    "retry_api_call",
]
