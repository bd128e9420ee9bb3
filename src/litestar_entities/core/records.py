"""Persistence records exchanged between the engine and its stores.

Stores only ever see serialized payloads, so replaying a journal or resuming
a workflow always goes through the component's codec.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Generic

from litestar_entities.core.types import Payload, StateT

__all__ = ["JournalRecord", "SnapshotRecord", "WorkflowInstance"]


@dataclass(frozen=True)
class JournalRecord:
    """One persisted event of an entity.

    Attributes:
        component_id: Component the entity belongs to.
        entity_id: Identity of the entity.
        seq_nr: Position of the event in the entity's log, starting at 1.
        payload: The serialized event.
    """

    component_id: str
    entity_id: str
    seq_nr: int
    payload: Payload


@dataclass(frozen=True)
class SnapshotRecord:
    """Persisted current state and step position of a workflow.

    Attributes:
        component_id: Component the workflow belongs to.
        workflow_id: Identity of the workflow.
        step: Step to run next, or None once the workflow ended.
        state: The serialized workflow state.
        started_at: When the workflow first transitioned into a step. The
            global timeout is measured from this instant.
        finished: Whether the workflow reached a terminal step.
    """

    component_id: str
    workflow_id: str
    step: str | None
    state: Payload
    started_at: datetime
    finished: bool = False


@dataclass
class WorkflowInstance(Generic[StateT]):
    """In-memory replica of a workflow held by the engine.

    Attributes:
        component_id: Component the workflow belongs to.
        workflow_id: Identity of the workflow.
        state: Current decoded state, None before the start command.
        step: Step to run next, or None when not running.
        started_at: When the workflow first transitioned into a step.
        finished: Whether the workflow reached a terminal step.
        history: Steps entered so far, in order.
    """

    component_id: str
    workflow_id: str
    state: StateT | None = None
    step: str | None = None
    started_at: datetime | None = None
    finished: bool = False
    history: list[str] = field(default_factory=list)

    @property
    def is_running(self) -> bool:
        return self.step is not None and not self.finished
