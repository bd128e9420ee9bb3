"""Repository implementations for entity and workflow persistence.

This module provides async repositories for the journal and snapshot models
using advanced-alchemy's repository pattern.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from advanced_alchemy.repository import SQLAlchemyAsyncRepository
from sqlalchemy import and_, select

from litestar_entities.db.models import EventJournalModel, WorkflowSnapshotModel

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__ = ["EventJournalRepository", "WorkflowSnapshotRepository"]


class EventJournalRepository(SQLAlchemyAsyncRepository[EventJournalModel]):
    """Repository for the entity event journal."""

    model_type = EventJournalModel

    async def list_for_entity(self, component_id: str, entity_id: str) -> Sequence[EventJournalModel]:
        """List the events of an entity in log order.

        Args:
            component_id: The entity's component.
            entity_id: The entity identity.

        Returns:
            Events ordered by sequence number.
        """
        stmt = (
            select(EventJournalModel)
            .where(
                and_(
                    EventJournalModel.component_id == component_id,
                    EventJournalModel.entity_id == entity_id,
                )
            )
            .order_by(EventJournalModel.seq_nr)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()


class WorkflowSnapshotRepository(SQLAlchemyAsyncRepository[WorkflowSnapshotModel]):
    """Repository for workflow snapshots."""

    model_type = WorkflowSnapshotModel

    async def get_by_identity(self, component_id: str, workflow_id: str) -> WorkflowSnapshotModel | None:
        """Get the snapshot of a workflow identity.

        Args:
            component_id: The workflow's component.
            workflow_id: The workflow identity.

        Returns:
            The snapshot or None if the workflow never started.
        """
        stmt = select(WorkflowSnapshotModel).where(
            and_(
                WorkflowSnapshotModel.component_id == component_id,
                WorkflowSnapshotModel.workflow_id == workflow_id,
            )
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_unfinished(self, component_id: str) -> Sequence[WorkflowSnapshotModel]:
        """List workflows of a component that have not ended.

        Args:
            component_id: The workflow component.

        Returns:
            Unfinished snapshots with a pending step, oldest first.
        """
        stmt = (
            select(WorkflowSnapshotModel)
            .where(
                and_(
                    WorkflowSnapshotModel.component_id == component_id,
                    WorkflowSnapshotModel.finished == False,  # noqa: E712
                    WorkflowSnapshotModel.step.is_not(None),
                )
            )
            .order_by(WorkflowSnapshotModel.started_at)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()
