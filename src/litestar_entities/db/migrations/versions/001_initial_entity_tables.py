"""Initial entity journal and workflow snapshot tables.

Revision ID: 001_initial
Revises:
Create Date: 2024-12-02
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create the event journal and snapshot tables."""
    # Create entity_events table
    op.create_table(
        "entity_events",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("component_id", sa.String(length=255), nullable=False),
        sa.Column("entity_id", sa.String(length=255), nullable=False),
        sa.Column("seq_nr", sa.Integer(), nullable=False),
        sa.Column("event_type", sa.String(length=100), nullable=True),
        sa.Column("payload", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_entity_events_identity_seq",
        "entity_events",
        ["component_id", "entity_id", "seq_nr"],
        unique=True,
    )
    op.create_index(
        "ix_entity_events_event_type",
        "entity_events",
        ["event_type"],
    )

    # Create workflow_snapshots table
    op.create_table(
        "workflow_snapshots",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("component_id", sa.String(length=255), nullable=False),
        sa.Column("workflow_id", sa.String(length=255), nullable=False),
        sa.Column("step", sa.String(length=255), nullable=True),
        sa.Column("state", sa.JSON(), nullable=False),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("finished", sa.Boolean(), nullable=False, default=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_workflow_snapshots_identity",
        "workflow_snapshots",
        ["component_id", "workflow_id"],
        unique=True,
    )
    op.create_index(
        "ix_workflow_snapshots_finished",
        "workflow_snapshots",
        ["component_id", "finished"],
    )


def downgrade() -> None:
    """Drop the event journal and snapshot tables."""
    op.drop_index("ix_workflow_snapshots_finished", table_name="workflow_snapshots")
    op.drop_index("ix_workflow_snapshots_identity", table_name="workflow_snapshots")
    op.drop_table("workflow_snapshots")

    op.drop_index("ix_entity_events_event_type", table_name="entity_events")
    op.drop_index("ix_entity_events_identity_seq", table_name="entity_events")
    op.drop_table("entity_events")
