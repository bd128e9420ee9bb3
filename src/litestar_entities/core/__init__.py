"""Core domain models, outcomes and protocols for litestar-entities.

This module exports the fundamental building blocks shared by the aggregate
and workflow engines.
"""

from __future__ import annotations

from litestar_entities.core.definition import (
    CommandContext,
    StepDef,
    Transition,
    WorkflowDef,
    WorkflowEffect,
    keep_state,
)
from litestar_entities.core.events import (
    CartEvent,
    CheckedOut,
    ItemAdded,
    ItemRemoved,
    event_from_dict,
    event_to_dict,
)
from litestar_entities.core.models import CartState, CycleState, LineItem, StartCommand
from litestar_entities.core.outcomes import (
    TIMEOUT_MESSAGE,
    Failure,
    StepOutcome,
    Success,
    outcome_from_dict,
    outcome_to_dict,
)
from litestar_entities.core.protocols import (
    Clock,
    EntityComponent,
    EventJournal,
    FaultInjector,
    SnapshotStore,
    WorkflowComponent,
)
from litestar_entities.core.records import JournalRecord, SnapshotRecord, WorkflowInstance
from litestar_entities.core.types import CycleStatus, EventKind, OutcomeKind, Payload

__all__ = [
    # Definitions
    "CommandContext",
    "StepDef",
    "Transition",
    "WorkflowDef",
    "WorkflowEffect",
    "keep_state",
    # Events
    "CartEvent",
    "CheckedOut",
    "ItemAdded",
    "ItemRemoved",
    "event_from_dict",
    "event_to_dict",
    # Models
    "CartState",
    "CycleState",
    "LineItem",
    "StartCommand",
    # Outcomes
    "TIMEOUT_MESSAGE",
    "Failure",
    "StepOutcome",
    "Success",
    "outcome_from_dict",
    "outcome_to_dict",
    # Protocols
    "Clock",
    "EntityComponent",
    "EventJournal",
    "FaultInjector",
    "SnapshotStore",
    "WorkflowComponent",
    # Records
    "JournalRecord",
    "SnapshotRecord",
    "WorkflowInstance",
    # Types
    "CycleStatus",
    "EventKind",
    "OutcomeKind",
    "Payload",
]
