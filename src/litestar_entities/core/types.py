"""Core type definitions for litestar-entities.

This module defines the enums and type aliases shared by the aggregate and
workflow engines.
"""

from __future__ import annotations

import sys
from enum import Enum
from typing import Any, TypeAlias, TypeVar

# StrEnum backport for Python < 3.11
if sys.version_info >= (3, 11):
    from enum import StrEnum
else:

    class StrEnum(str, Enum):
        """String enumeration compatibility for Python < 3.11."""

        def __str__(self) -> str:
            return str(self.value)


__all__ = [
    "CycleStatus",
    "EventKind",
    "OutcomeKind",
    "Payload",
    "StateT",
]


class CycleStatus(StrEnum):
    """Lifecycle status of a washing cycle.

    The status only moves forward along FILLING, WASHING, RINSING, SPINNING,
    COMPLETED, or jumps to ERROR. COMPLETED and ERROR are terminal.

    Attributes:
        FILLING: The drum is filling with water.
        WASHING: Clothes are being washed.
        RINSING: Clothes are being rinsed.
        SPINNING: The drum is spinning.
        COMPLETED: The cycle finished successfully.
        ERROR: A step failed or timed out.
    """

    FILLING = "FILLING"
    WASHING = "WASHING"
    RINSING = "RINSING"
    SPINNING = "SPINNING"
    COMPLETED = "COMPLETED"
    ERROR = "ERROR"

    @property
    def is_terminal(self) -> bool:
        """Whether no further transition can leave this status."""
        return self in (CycleStatus.COMPLETED, CycleStatus.ERROR)


class EventKind(StrEnum):
    """Discriminant values of the shopping cart event union."""

    ITEM_ADDED = "item-added"
    ITEM_REMOVED = "item-removed"
    CHECKED_OUT = "checked-out"


class OutcomeKind(StrEnum):
    """Discriminant values of the step outcome union."""

    SUCCESS = "success"
    FAILURE = "failure"


# Serialized form of events, outcomes and states
Payload: TypeAlias = dict[str, Any]
"""Type alias for a JSON-compatible dictionary."""

StateT = TypeVar("StateT")
"""Type variable for component state."""
