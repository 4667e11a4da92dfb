"""Pipelines and track variations

Revision ID: 20250815_000000
Revises: 20250801_000000
Create Date: 2025-08-15 00:00:00.000000

- Draft columns on tracks (is_draft, parent_draft_id)
- Parent/child links between tracks (track_variations)
- Persisted music pipeline runs (pipeline_runs)

"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20250815_000000"
down_revision: Union[str, None] = "20250801_000000"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Add drafts, variations and pipeline runs."""

    op.add_column("tracks", sa.Column("is_draft", sa.Boolean(), nullable=False, server_default=sa.false()))
    op.add_column("tracks", sa.Column("parent_draft_id", sa.String(36), nullable=True))
    op.create_foreign_key(
        "fk_tracks_parent_draft_id", "tracks", "tracks", ["parent_draft_id"], ["id"], ondelete="SET NULL"
    )
    op.create_index("ix_tracks_parent_draft_id", "tracks", ["parent_draft_id"])

    # Create track_variations table
    op.create_table(
        "track_variations",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("parent_track_id", sa.String(36), nullable=False),
        sa.Column("child_track_id", sa.String(36), nullable=False),
        sa.Column("variation_type", sa.String(32), nullable=False, server_default="manual"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["parent_track_id"], ["tracks.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["child_track_id"], ["tracks.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("parent_track_id", "child_track_id", name="uq_track_variations_pair"),
        sa.CheckConstraint("parent_track_id <> child_track_id", name="ck_track_variations_not_self"),
        sa.CheckConstraint(
            "variation_type IN ('manual', 'auto_improve', 'style_change', 'lyrics_change')",
            name="ck_track_variations_type",
        ),
        sa.Index("ix_track_variations_parent_track_id", "parent_track_id"),
        sa.Index("ix_track_variations_child_track_id", "child_track_id"),
        sa.Index("ix_track_variations_variation_type", "variation_type"),
    )

    # Create pipeline_runs table
    op.create_table(
        "pipeline_runs",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("status", sa.String(32), nullable=False, server_default="pending"),
        sa.Column("current_step", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("steps", JSONB(), nullable=False, server_default="[]"),
        sa.Column("request_params", JSONB(), nullable=False, server_default="{}"),
        sa.Column("generation_job_id", sa.String(36), nullable=True),
        sa.Column("track_id", sa.String(36), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["generation_job_id"], ["generation_jobs.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["track_id"], ["tracks.id"], ondelete="SET NULL"),
        sa.CheckConstraint(
            "status IN ('pending', 'processing', 'completed', 'failed', 'cancelled')",
            name="ck_pipeline_runs_status",
        ),
        sa.Index("ix_pipeline_runs_user_id", "user_id"),
        sa.Index("ix_pipeline_runs_status", "status"),
        sa.Index("ix_pipeline_runs_created_at", "created_at"),
    )


def downgrade() -> None:
    """Drop the tables and columns added in upgrade."""
    op.drop_table("pipeline_runs")
    op.drop_table("track_variations")
    op.drop_index("ix_tracks_parent_draft_id", table_name="tracks")
    op.drop_constraint("fk_tracks_parent_draft_id", "tracks", type_="foreignkey")
    op.drop_column("tracks", "parent_draft_id")
    op.drop_column("tracks", "is_draft")
