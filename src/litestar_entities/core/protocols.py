"""Core protocols for litestar-entities.

This module defines the Protocol-based interfaces between the engine, its
components and its collaborators. Using Protocol allows duck typing while
maintaining type safety.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from litestar_entities.core.definition import WorkflowDef
    from litestar_entities.core.records import JournalRecord, SnapshotRecord
    from litestar_entities.core.types import Payload

__all__ = [
    "Clock",
    "EntityComponent",
    "EventJournal",
    "FaultInjector",
    "SnapshotStore",
    "WorkflowComponent",
]

S = TypeVar("S")
E = TypeVar("E")


@runtime_checkable
class Clock(Protocol):
    """Source of time for the engine and step actions.

    Injecting the clock lets tests advance time deterministically instead of
    depending on real delays.
    """

    def now(self) -> datetime:
        """Return the current time as an aware datetime."""
        ...

    async def sleep(self, seconds: float) -> None:
        """Suspend the caller for ``seconds``."""
        ...


@runtime_checkable
class FaultInjector(Protocol):
    """Decides whether a simulated step should fail."""

    def should_fail(self, step_name: str) -> bool:
        """Return True to make the named step report a failure."""
        ...


@runtime_checkable
class EntityComponent(Protocol[S, E]):
    """Protocol for event-sourced entity components.

    An entity component is stateless: it describes how to build the empty
    state, how to validate commands into events and how to fold events into
    state. The engine owns the state and the event log.

    Attributes:
        component_id: Stable identifier of the component type.
    """

    component_id: str

    def empty_state(self, entity_id: str) -> S:
        """Return the state of an entity that has no events yet."""
        ...

    def apply_event(self, state: S, event: E) -> S:
        """Fold one event into the state. Must be pure."""
        ...

    def serialize_event(self, event: E) -> Payload:
        """Encode an event for the journal."""
        ...

    def deserialize_event(self, data: Payload) -> E:
        """Decode an event read from the journal."""
        ...


@runtime_checkable
class WorkflowComponent(Protocol[S]):
    """Protocol for durable workflow components.

    Attributes:
        component_id: Stable identifier of the component type.
    """

    component_id: str

    def definition(self) -> WorkflowDef[S]:
        """Return the step graph of the workflow."""
        ...

    def serialize_state(self, state: S) -> Payload:
        """Encode the workflow state for the snapshot store."""
        ...

    def deserialize_state(self, data: Payload) -> S:
        """Decode a workflow state read from the snapshot store."""
        ...


@runtime_checkable
class EventJournal(Protocol):
    """Append-only event log per entity identity."""

    async def append(self, record: JournalRecord) -> None:
        """Append an event to the entity's log.

        Raises:
            ConcurrencyConflictError: If the sequence number is already taken.
        """
        ...

    async def read(self, component_id: str, entity_id: str) -> Sequence[JournalRecord]:
        """Return the entity's events ordered by sequence number."""
        ...


@runtime_checkable
class SnapshotStore(Protocol):
    """Current state and step position per workflow identity."""

    async def save(self, record: SnapshotRecord) -> None:
        """Insert or replace the snapshot of a workflow."""
        ...

    async def load(self, component_id: str, workflow_id: str) -> SnapshotRecord | None:
        """Return the snapshot of a workflow, or None if it never started."""
        ...

    async def list_unfinished(self, component_id: str) -> Sequence[SnapshotRecord]:
        """Return the snapshots of workflows that did not reach a terminal step."""
        ...
