"""In-memory event journal and snapshot store.

Suitable for development, testing and single-process deployments where state
does not need to survive a restart of the process.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from litestar_entities.exceptions import ConcurrencyConflictError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from litestar_entities.core.records import JournalRecord, SnapshotRecord

__all__ = ["InMemoryEventJournal", "InMemorySnapshotStore"]


class InMemoryEventJournal:
    """Append-only event log held in a dictionary."""

    def __init__(self) -> None:
        self._logs: dict[tuple[str, str], list[JournalRecord]] = {}
        self.append_count = 0

    async def append(self, record: JournalRecord) -> None:
        log = self._logs.setdefault((record.component_id, record.entity_id), [])
        if record.seq_nr <= len(log):
            raise ConcurrencyConflictError(record.component_id, record.entity_id, record.seq_nr)
        if record.seq_nr != len(log) + 1:
            msg = f"Expected sequence number {len(log) + 1}, got {record.seq_nr}"
            raise ValueError(msg)
        log.append(record)
        self.append_count += 1

    async def read(self, component_id: str, entity_id: str) -> Sequence[JournalRecord]:
        return list(self._logs.get((component_id, entity_id), []))


class InMemorySnapshotStore:
    """Latest snapshot per workflow held in a dictionary."""

    def __init__(self) -> None:
        self._snapshots: dict[tuple[str, str], SnapshotRecord] = {}
        self.save_count = 0

    async def save(self, record: SnapshotRecord) -> None:
        self._snapshots[(record.component_id, record.workflow_id)] = record
        self.save_count += 1

    async def load(self, component_id: str, workflow_id: str) -> SnapshotRecord | None:
        return self._snapshots.get((component_id, workflow_id))

    async def list_unfinished(self, component_id: str) -> Sequence[SnapshotRecord]:
        return [
            record
            for (cid, _), record in self._snapshots.items()
            if cid == component_id and not record.finished and record.step is not None
        ]
