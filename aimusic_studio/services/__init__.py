"""Application services shared by the HTTP routes and background tasks."""

from .callbacks import CallbackError, SunoCallbackHandler, clean_lyrics, extract_lyrics_text
from .cleanup import TIMEOUT_MESSAGE, cleanup_stuck_jobs
from .credits import check_credits, estimate_credits
from .generation import (
    CREDITS_PER_BLOCK,
    DEFAULT_MODELS,
    GenerationService,
    JobClosedError,
    calculate_credits,
    default_model,
)
from .health_monitor import HealthMonitor, persist_report
from .lyrics import generate_lyrics
from .pipeline import PipelineService, PipelineStepError, describe_run
from .progress_hub import ProgressHub, get_progress_hub
from .prompt_enhancer import PromptEnhancer
from .variations import (
    DuplicateVariationError,
    VariationError,
    create_draft,
    create_variation,
    describe_variations,
    variation_stats,
    variation_tree,
)

__all__ = [
    "CREDITS_PER_BLOCK",
    "CallbackError",
    "DEFAULT_MODELS",
    "DuplicateVariationError",
    "GenerationService",
    "HealthMonitor",
    "JobClosedError",
    "PipelineService",
    "PipelineStepError",
    "ProgressHub",
    "PromptEnhancer",
    "SunoCallbackHandler",
    "TIMEOUT_MESSAGE",
    "VariationError",
    "calculate_credits",
    "check_credits",
    "cleanup_stuck_jobs",
    "clean_lyrics",
    "create_draft",
    "create_variation",
    "default_model",
    "describe_run",
    "describe_variations",
    "estimate_credits",
    "extract_lyrics_text",
    "generate_lyrics",
    "get_progress_hub",
    "persist_report",
    "variation_stats",
    "variation_tree",
]
