"""SQLAlchemy models for entity and workflow persistence.

This module defines the database models backing the SQL stores:
- EventJournalModel: One row per persisted entity event
- WorkflowSnapshotModel: Latest state and step position of each workflow
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from advanced_alchemy.base import UUIDAuditBase
from sqlalchemy import JSON, DateTime, Index, Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

__all__ = ["EventJournalModel", "WorkflowSnapshotModel"]


# Cross-database JSON type: uses JSONB for PostgreSQL, JSON for others (SQLite, MySQL, etc.)
JSONType = JSON().with_variant(JSONB, "postgresql")


class EventJournalModel(UUIDAuditBase):
    """Persisted event of an event-sourced entity.

    The unique index on ``(component_id, entity_id, seq_nr)`` rejects a
    second writer appending the same position.

    Attributes:
        component_id: Component the entity belongs to.
        entity_id: Identity of the entity.
        seq_nr: Position of the event in the entity's log, starting at 1.
        event_type: Discriminant of the event, denormalized for queries.
        payload: The serialized event.
    """

    __tablename__ = "entity_events"
    __table_args__ = (
        Index("ix_entity_events_identity_seq", "component_id", "entity_id", "seq_nr", unique=True),
        Index("ix_entity_events_event_type", "event_type"),
    )

    component_id: Mapped[str] = mapped_column(String(255))
    entity_id: Mapped[str] = mapped_column(String(255))
    seq_nr: Mapped[int] = mapped_column(Integer)
    event_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    payload: Mapped[dict[str, Any]] = mapped_column(JSONType, default=dict)


class WorkflowSnapshotModel(UUIDAuditBase):
    """Persisted snapshot of a durable workflow.

    Attributes:
        component_id: Component the workflow belongs to.
        workflow_id: Identity of the workflow.
        step: Step to run next, None once the workflow ended.
        state: The serialized workflow state.
        started_at: When the workflow first transitioned into a step.
        finished: Whether the workflow reached a terminal step.
    """

    __tablename__ = "workflow_snapshots"
    __table_args__ = (
        Index("ix_workflow_snapshots_identity", "component_id", "workflow_id", unique=True),
        Index("ix_workflow_snapshots_finished", "component_id", "finished"),
    )

    component_id: Mapped[str] = mapped_column(String(255))
    workflow_id: Mapped[str] = mapped_column(String(255))
    step: Mapped[str | None] = mapped_column(String(255), nullable=True)
    state: Mapped[dict[str, Any]] = mapped_column(JSONType, default=dict)
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    finished: Mapped[bool] = mapped_column(default=False)
