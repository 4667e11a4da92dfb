"""Client helpers for following generation jobs."""

from .status_poller import (
    BACKOFF_FACTOR,
    INITIAL_INTERVAL_MS,
    MAX_CONSECUTIVE_ERRORS,
    MAX_INTERVAL_MS,
    GenerationStatusPoller,
    JobSnapshot,
    http_status_fetcher,
)
from .steps import GenerationStep, GenerationStepTracker, StepStatus

__all__ = [
    "BACKOFF_FACTOR",
    "GenerationStatusPoller",
    "GenerationStep",
    "GenerationStepTracker",
    "INITIAL_INTERVAL_MS",
    "JobSnapshot",
    "MAX_CONSECUTIVE_ERRORS",
    "MAX_INTERVAL_MS",
    "StepStatus",
    "http_status_fetcher",
]
