"""
Database entities, one module per table.

Importing this package registers every table with ``SQLModel.metadata``.
"""

from .artists import Artist, Project
from .generation_jobs import GenerationJob
from .health_logs import ApiHealthLog
from .lyrics import Lyrics
from .pipeline_runs import PipelineRun
from .track_variations import TrackVariation
from .tracks import Track

__all__ = [
    "ApiHealthLog",
    "Artist",
    "GenerationJob",
    "Lyrics",
    "PipelineRun",
    "Project",
    "Track",
    "TrackVariation",
]
