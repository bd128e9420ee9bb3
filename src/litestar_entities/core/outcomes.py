"""Step outcomes.

A step action reports exactly one outcome: :class:`Success` or
:class:`Failure`. The message is carried along for logging and replies but the
engine never interprets it; routing only looks at the outcome kind.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union

from typing_extensions import assert_never

from litestar_entities.core.types import OutcomeKind, Payload

__all__ = [
    "TIMEOUT_MESSAGE",
    "Failure",
    "StepOutcome",
    "Success",
    "outcome_from_dict",
    "outcome_to_dict",
]

TIMEOUT_MESSAGE = "timeout"
"""Message of the failure synthesized when a step exceeds its timeout."""


@dataclass(frozen=True)
class Success:
    """Outcome of a step action that completed its work.

    Attributes:
        message: Free-form description of the result.
    """

    message: str = ""
    type: ClassVar[OutcomeKind] = OutcomeKind.SUCCESS

    @classmethod
    def of(cls, message: str) -> Success:
        return cls(message)


@dataclass(frozen=True)
class Failure:
    """Outcome of a step action that failed or timed out.

    Attributes:
        message: Free-form description of the failure.
    """

    message: str = ""
    type: ClassVar[OutcomeKind] = OutcomeKind.FAILURE

    @classmethod
    def of(cls, message: str) -> Failure:
        return cls(message)

    @classmethod
    def timeout(cls) -> Failure:
        """Failure reported in place of an action that did not finish in time."""
        return cls(TIMEOUT_MESSAGE)


StepOutcome = Union[Success, Failure]
"""Union of all step outcomes."""


def outcome_to_dict(outcome: StepOutcome) -> Payload:
    """Serialize an outcome to its tagged wire shape.

    Args:
        outcome: The outcome to serialize.

    Returns:
        A dictionary of the form ``{"type": "success", "message": "..."}``.
    """
    match outcome:
        case Success(message=message) | Failure(message=message):
            return {"type": str(outcome.type), "message": message}
        case _:
            assert_never(outcome)


def outcome_from_dict(data: Payload) -> StepOutcome:
    """Deserialize an outcome from its tagged wire shape.

    Raises:
        ValueError: If the discriminant is missing or unknown.
    """
    kind = OutcomeKind(data.get("type"))
    message = data.get("message", "")
    if kind is OutcomeKind.SUCCESS:
        return Success(message)
    return Failure(message)
