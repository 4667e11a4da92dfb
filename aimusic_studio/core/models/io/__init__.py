"""
I/O models for API requests and responses.

Pydantic schemas that define the HTTP contract of the service. Database
entities never leave the server directly; routes convert them with
``model_validate``.
"""

from .artists import (
    ArtistCreate,
    ArtistRead,
    ArtistUpdate,
    ProjectCreate,
    ProjectRead,
    ProjectUpdate,
)
from .callbacks import SunoCallback, SunoCallbackData
from .generation import (
    GenerationJobRead,
    GenerationRequest,
    GenerationSubmitted,
    TrackSummary,
)
from .health import (
    CleanupReport,
    CreditsInfo,
    HealthLogRead,
    HealthReport,
    HealthSummary,
    ProviderHealth,
)
from .lyrics import LyricsGenerated, LyricsGenerateRequest, LyricsRead, LyricsUpdate
from .pipeline import PipelineRead, PipelineRequest, PipelineStepRead, PipelineSubmitted
from .prompts import (
    PromptEnhancement,
    PromptEnhanceRequest,
    StyleEnhancement,
    StyleEnhanceRequest,
)
from .tracks import (
    AudioTaskRequest,
    AudioTaskResponse,
    DraftCreate,
    ExtendTrackRequest,
    TrackRead,
    TrackUpdate,
    TrackVariations,
    VariationCreate,
    VariationMember,
    VariationRead,
    VariationStats,
    VariationTree,
)

__all__ = [
    "ArtistCreate",
    "ArtistRead",
    "ArtistUpdate",
    "AudioTaskRequest",
    "AudioTaskResponse",
    "CleanupReport",
    "CreditsInfo",
    "DraftCreate",
    "ExtendTrackRequest",
    "GenerationJobRead",
    "GenerationRequest",
    "GenerationSubmitted",
    "HealthLogRead",
    "HealthReport",
    "HealthSummary",
    "LyricsGenerateRequest",
    "LyricsGenerated",
    "LyricsRead",
    "LyricsUpdate",
    "PipelineRead",
    "PipelineRequest",
    "PipelineStepRead",
    "PipelineSubmitted",
    "ProjectCreate",
    "ProjectRead",
    "ProjectUpdate",
    "PromptEnhanceRequest",
    "PromptEnhancement",
    "ProviderHealth",
    "StyleEnhanceRequest",
    "SunoCallback",
    "SunoCallbackData",
    "StyleEnhancement",
    "TrackRead",
    "TrackSummary",
    "TrackUpdate",
    "TrackVariations",
    "VariationCreate",
    "VariationMember",
    "VariationRead",
    "VariationStats",
    "VariationTree",
]
