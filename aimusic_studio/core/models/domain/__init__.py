"""Domain-level enums shared by entities, services and API schemas."""

from .enums import (
    CallbackType,
    EnhancementMethod,
    EnhancementType,
    HealthStatus,
    JobStatus,
    PipelineStep,
    PipelineStepStatus,
    ProjectType,
    Provider,
    VariationType,
)

__all__ = [
    "CallbackType",
    "EnhancementMethod",
    "EnhancementType",
    "HealthStatus",
    "JobStatus",
    "PipelineStep",
    "PipelineStepStatus",
    "ProjectType",
    "Provider",
    "VariationType",
]
