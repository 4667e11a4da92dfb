"""Initial schema for AI Music Studio

Revision ID: 20250801_000000
Revises: None
Create Date: 2025-08-01 00:00:00.000000

This is the initial migration that creates all tables of the AI Music Studio
service:
- Library tables (artists, projects, tracks, lyrics)
- Generation job tracking (generation_jobs)
- Provider availability history (api_health_logs)

Revision format: YYYYMMDD_HHMMSS_description

"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20250801_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all tables."""

    # Create artists table
    op.create_table(
        "artists",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("style", sa.Text(), nullable=True),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_artists_user_id", "user_id"),
        sa.Index("ix_artists_created_at", "created_at"),
    )

    # Create projects table
    op.create_table(
        "projects",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("artist_id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("type", sa.String(16), nullable=False, server_default="single"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("concept", sa.Text(), nullable=True),
        sa.Column("style", sa.Text(), nullable=True),
        sa.Column("cover_url", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["artist_id"], ["artists.id"], ondelete="CASCADE"),
        sa.CheckConstraint("type IN ('teaser', 'single', 'ep', 'album')", name="ck_projects_type"),
        sa.Index("ix_projects_artist_id", "artist_id"),
        sa.Index("ix_projects_user_id", "user_id"),
        sa.Index("ix_projects_created_at", "created_at"),
    )

    # Create tracks table
    op.create_table(
        "tracks",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("project_id", sa.String(36), nullable=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("duration", sa.Integer(), nullable=True),
        sa.Column("file_url", sa.Text(), nullable=True),
        sa.Column("artwork_url", sa.Text(), nullable=True),
        sa.Column("audio_format", sa.String(16), nullable=False, server_default="mp3"),
        sa.Column("genre", sa.Text(), nullable=True),
        sa.Column("mood", sa.Text(), nullable=True),
        sa.Column("bpm", sa.Integer(), nullable=True),
        sa.Column("key_signature", sa.Text(), nullable=True),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_commercial", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("provider", sa.String(32), nullable=False),
        sa.Column("provider_track_id", sa.Text(), nullable=True),
        sa.Column("generation_params", JSONB(), nullable=True),
        sa.Column("lyrics", sa.Text(), nullable=True),
        sa.Column("play_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("like_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="SET NULL"),
        sa.Index("ix_tracks_user_id", "user_id"),
        sa.Index("ix_tracks_project_id", "project_id"),
        sa.Index("ix_tracks_provider_track_id", "provider_track_id"),
        sa.Index("ix_tracks_created_at", "created_at"),
    )

    # Create generation_jobs table
    op.create_table(
        "generation_jobs",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("track_id", sa.String(36), nullable=True),
        sa.Column("provider", sa.String(32), nullable=False),
        sa.Column("model", sa.String(64), nullable=True),
        sa.Column("status", sa.String(32), nullable=False, server_default="pending"),
        sa.Column("progress", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("request_params", JSONB(), nullable=False, server_default="{}"),
        sa.Column("response_data", JSONB(), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("credits_used", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["track_id"], ["tracks.id"], ondelete="SET NULL"),
        sa.CheckConstraint(
            "status IN ('pending', 'processing', 'completed', 'failed', 'cancelled')",
            name="ck_generation_jobs_status",
        ),
        sa.CheckConstraint("progress >= 0 AND progress <= 100", name="ck_generation_jobs_progress"),
        sa.Index("ix_generation_jobs_user_id", "user_id"),
        sa.Index("ix_generation_jobs_status", "status"),
        sa.Index("ix_generation_jobs_created_at", "created_at"),
    )

    # Create lyrics table
    op.create_table(
        "lyrics",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("prompt", sa.Text(), nullable=False),
        sa.Column("style", sa.Text(), nullable=True),
        sa.Column("language", sa.String(32), nullable=False, server_default="russian"),
        sa.Column("provider", sa.String(32), nullable=False, server_default="suno"),
        sa.Column("provider_lyrics_id", sa.Text(), nullable=True),
        sa.Column("generation_params", JSONB(), nullable=True),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_lyrics_user_id", "user_id"),
        sa.Index("ix_lyrics_provider_lyrics_id", "provider_lyrics_id"),
        sa.Index("ix_lyrics_created_at", "created_at"),
    )

    # Create api_health_logs table
    op.create_table(
        "api_health_logs",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("provider", sa.String(32), nullable=False),
        sa.Column("model", sa.String(64), nullable=True),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("response_time", sa.Integer(), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("checked_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("status IN ('healthy', 'degraded', 'unhealthy')", name="ck_api_health_logs_status"),
        sa.Index("ix_api_health_logs_provider", "provider"),
        sa.Index("ix_api_health_logs_checked_at", "checked_at"),
    )


def downgrade() -> None:
    """Drop all tables created in upgrade."""
    op.drop_table("api_health_logs")
    op.drop_table("lyrics")
    op.drop_table("generation_jobs")
    op.drop_table("tracks")
    op.drop_table("projects")
    op.drop_table("artists")
