"""
Repositories for the database layer.

Each repository wraps one entity and an ``AsyncSession``; ``RepoBundle``
groups them for code that needs several at once.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from .base import AsyncBaseRepository, QueryBuilder
from .generation_jobs import GenerationJobRepository
from .health_logs import HealthLogRepository
from .lyrics import LyricsRepository
from .pipeline_runs import PipelineRunRepository
from .track_variations import TrackVariationRepository
from .tracks import ArtistRepository, ProjectRepository, TrackRepository


@dataclass(frozen=True)
class RepoBundle:
    """Convenience bundle of all repositories sharing one session."""

    jobs: GenerationJobRepository
    tracks: TrackRepository
    lyrics: LyricsRepository
    artists: ArtistRepository
    projects: ProjectRepository
    health_logs: HealthLogRepository
    variations: TrackVariationRepository
    pipelines: PipelineRunRepository


def build_repos(session: AsyncSession) -> RepoBundle:
    """Build a ``RepoBundle`` bound to ``session``."""
    return RepoBundle(
        jobs=GenerationJobRepository(session),
        tracks=TrackRepository(session),
        lyrics=LyricsRepository(session),
        artists=ArtistRepository(session),
        projects=ProjectRepository(session),
        health_logs=HealthLogRepository(session),
        variations=TrackVariationRepository(session),
        pipelines=PipelineRunRepository(session),
    )


__all__ = [
    "ArtistRepository",
    "AsyncBaseRepository",
    "GenerationJobRepository",
    "HealthLogRepository",
    "LyricsRepository",
    "PipelineRunRepository",
    "ProjectRepository",
    "QueryBuilder",
    "RepoBundle",
    "TrackRepository",
    "TrackVariationRepository",
    "build_repos",
]
