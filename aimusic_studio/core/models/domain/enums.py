"""Domain enums for music generation models."""

from __future__ import annotations

from enum import Enum


class Provider(str, Enum):
    """Generation providers a job can be routed to."""

    suno = "suno"
    mureka = "mureka"
    test = "test"  # offline provider, no network, no credits


class JobStatus(str, Enum):
    """Lifecycle status of a generation job."""

    pending = "pending"
    processing = "processing"
    completed = "completed"
    failed = "failed"
    cancelled = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.completed, JobStatus.failed, JobStatus.cancelled)


class HealthStatus(str, Enum):
    """Availability verdict for a provider or the whole system."""

    healthy = "healthy"
    degraded = "degraded"
    unhealthy = "unhealthy"


class ProjectType(str, Enum):
    """Release format of a project."""

    teaser = "teaser"
    single = "single"
    ep = "ep"
    album = "album"


class EnhancementType(str, Enum):
    """What a prompt enhancement request should focus on."""

    style = "style"
    lyrics = "lyrics"
    structure = "structure"
    complete = "complete"


class EnhancementMethod(str, Enum):
    """How an enhancement result was produced."""

    openai = "openai"
    fallback = "fallback"
    suno_api = "suno_api"
    local_fallback = "local_fallback"


class CallbackType(str, Enum):
    """``callbackType`` values sent by the Suno webhook."""

    complete = "complete"
    error = "error"
    processing = "processing"
    text = "text"
    first = "first"


class VariationType(str, Enum):
    """How a track variation relates to its parent."""

    manual = "manual"
    auto_improve = "auto_improve"
    style_change = "style_change"
    lyrics_change = "lyrics_change"


class PipelineStep(str, Enum):
    """Steps of the music pipeline, in the order they run."""

    style = "style"
    generate = "generate"
    extend = "extend"
    vocal_separation = "vocal_separation"
    wav_conversion = "wav_conversion"


class PipelineStepStatus(str, Enum):
    pending = "pending"
    processing = "processing"
    completed = "completed"
    failed = "failed"
    skipped = "skipped"
