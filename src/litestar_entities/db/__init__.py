"""Database persistence layer for litestar-entities.

This module provides SQLAlchemy models, repositories and the SQL event
journal and snapshot store used by the engine.

Requires an async database driver, for example ``aiosqlite`` or ``asyncpg``.
"""

from __future__ import annotations

from litestar_entities.db.models import EventJournalModel, WorkflowSnapshotModel
from litestar_entities.db.repositories import EventJournalRepository, WorkflowSnapshotRepository
from litestar_entities.db.store import SQLAlchemyEventJournal, SQLAlchemySnapshotStore

__all__ = [
    "EventJournalModel",
    "EventJournalRepository",
    "SQLAlchemyEventJournal",
    "SQLAlchemySnapshotStore",
    "WorkflowSnapshotModel",
    "WorkflowSnapshotRepository",
]
