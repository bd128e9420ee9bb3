"""Execution engine for litestar-entities.

This module provides the in-process runtime, the component registry and the
in-memory stores.
"""

from __future__ import annotations

from litestar_entities.engine.local import EntityRef, LocalExecutionEngine, WorkflowRef
from litestar_entities.engine.registry import ComponentRegistry
from litestar_entities.engine.store import InMemoryEventJournal, InMemorySnapshotStore

__all__ = [
    "ComponentRegistry",
    "EntityRef",
    "InMemoryEventJournal",
    "InMemorySnapshotStore",
    "LocalExecutionEngine",
    "WorkflowRef",
]
