"""SQL-backed event journal and snapshot store.

Both stores open a short-lived session per operation from an
``async_sessionmaker``, so they can be shared by every identity the engine
drives.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from advanced_alchemy.exceptions import IntegrityError as RepositoryIntegrityError
from sqlalchemy.exc import IntegrityError

from litestar_entities.core.records import JournalRecord, SnapshotRecord
from litestar_entities.db.models import EventJournalModel, WorkflowSnapshotModel
from litestar_entities.db.repositories import EventJournalRepository, WorkflowSnapshotRepository
from litestar_entities.exceptions import ConcurrencyConflictError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

__all__ = ["SQLAlchemyEventJournal", "SQLAlchemySnapshotStore"]


def _as_utc(value: datetime) -> datetime:
    # SQLite drops the offset of timezone-aware columns
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


class SQLAlchemyEventJournal:
    """Event journal stored in the ``entity_events`` table.

    Attributes:
        session_maker: Factory for the sessions used by each operation.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]) -> None:
        self.session_maker = session_maker

    async def append(self, record: JournalRecord) -> None:
        """Insert an event row.

        Raises:
            ConcurrencyConflictError: If the sequence number is already taken.
        """
        model = EventJournalModel(
            component_id=record.component_id,
            entity_id=record.entity_id,
            seq_nr=record.seq_nr,
            event_type=record.payload.get("type"),
            payload=record.payload,
        )
        async with self.session_maker() as session:
            repo = EventJournalRepository(session=session)
            try:
                await repo.add(model, auto_commit=True)
            except (IntegrityError, RepositoryIntegrityError) as e:
                await session.rollback()
                raise ConcurrencyConflictError(record.component_id, record.entity_id, record.seq_nr) from e

    async def read(self, component_id: str, entity_id: str) -> Sequence[JournalRecord]:
        async with self.session_maker() as session:
            rows = await EventJournalRepository(session=session).list_for_entity(component_id, entity_id)
            return [JournalRecord(row.component_id, row.entity_id, row.seq_nr, dict(row.payload)) for row in rows]


class SQLAlchemySnapshotStore:
    """Snapshot store backed by the ``workflow_snapshots`` table.

    Attributes:
        session_maker: Factory for the sessions used by each operation.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]) -> None:
        self.session_maker = session_maker

    async def save(self, record: SnapshotRecord) -> None:
        """Insert or replace the snapshot of a workflow."""
        async with self.session_maker() as session:
            repo = WorkflowSnapshotRepository(session=session)
            existing = await repo.get_by_identity(record.component_id, record.workflow_id)
            if existing is None:
                await repo.add(
                    WorkflowSnapshotModel(
                        component_id=record.component_id,
                        workflow_id=record.workflow_id,
                        step=record.step,
                        state=record.state,
                        started_at=record.started_at,
                        finished=record.finished,
                    ),
                    auto_commit=True,
                )
                return

            existing.step = record.step
            existing.state = dict(record.state)
            existing.started_at = record.started_at
            existing.finished = record.finished
            await repo.update(existing, auto_commit=True)

    async def load(self, component_id: str, workflow_id: str) -> SnapshotRecord | None:
        async with self.session_maker() as session:
            row = await WorkflowSnapshotRepository(session=session).get_by_identity(component_id, workflow_id)
            return self._to_record(row) if row is not None else None

    async def list_unfinished(self, component_id: str) -> Sequence[SnapshotRecord]:
        async with self.session_maker() as session:
            rows = await WorkflowSnapshotRepository(session=session).list_unfinished(component_id)
            return [self._to_record(row) for row in rows]

    @staticmethod
    def _to_record(row: WorkflowSnapshotModel) -> SnapshotRecord:
        return SnapshotRecord(
            component_id=row.component_id,
            workflow_id=row.workflow_id,
            step=row.step,
            state=dict(row.state),
            started_at=_as_utc(row.started_at),
            finished=row.finished,
        )
