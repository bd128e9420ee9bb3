"""Workflow step graph definitions.

A workflow is declared as a set of named steps and an explicit transition
table mapping ``(step name, outcome kind)`` to the next step and a state
update. The engine drives the table with a single loop that awaits one
outcome at a time.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Generic

from litestar_entities.core.outcomes import StepOutcome
from litestar_entities.core.types import OutcomeKind, StateT
from litestar_entities.exceptions import InvalidTransitionError

__all__ = [
    "CommandContext",
    "StepDef",
    "Transition",
    "WorkflowDef",
    "WorkflowEffect",
    "keep_state",
]


def keep_state(state: Any, outcome: StepOutcome, now: datetime) -> Any:
    """State update that leaves the state untouched."""
    return state


@dataclass(frozen=True)
class StepDef(Generic[StateT]):
    """A named unit of work in a workflow.

    Attributes:
        name: Unique step name within the workflow.
        action: Asynchronous callable producing the step outcome from the
            current state. None marks an instantaneous finalizer step, which
            is treated as an immediate success.
        timeout: Per-step timeout overriding the workflow default.
    """

    name: str
    action: Callable[[StateT], Awaitable[StepOutcome]] | None = None
    timeout: timedelta | None = None


@dataclass(frozen=True)
class Transition(Generic[StateT]):
    """Row of the transition table.

    Attributes:
        next_step: Step to move to, or None to end the workflow.
        update: Pure function computing the new state from the current
            state, the outcome and the transition time.

    Example:
        >>> Transition("washing", lambda s, o, now: s.with_status(CycleStatus.WASHING, now))
    """

    next_step: str | None
    update: Callable[[StateT, StepOutcome, datetime], StateT] = keep_state

    @property
    def ends(self) -> bool:
        return self.next_step is None


@dataclass
class WorkflowDef(Generic[StateT]):
    """Declarative workflow structure.

    Attributes:
        steps: Dictionary mapping step names to step definitions.
        transitions: Transition table keyed by step name and outcome kind.
        timeout: Bound on the total duration of the workflow.
        default_step_timeout: Bound on a single step without its own timeout.
        failover_step: Step forced when the workflow timeout elapses.
    """

    steps: dict[str, StepDef[StateT]]
    transitions: dict[tuple[str, OutcomeKind], Transition[StateT]]
    timeout: timedelta
    default_step_timeout: timedelta
    failover_step: str | None = None

    def step_timeout(self, step_name: str) -> timedelta:
        """Get the timeout applying to a step.

        Args:
            step_name: Name of the step.

        Returns:
            The step's own timeout, or the workflow default.
        """
        step = self.steps[step_name]
        return step.timeout if step.timeout is not None else self.default_step_timeout

    def resolve(self, step_name: str, outcome: StepOutcome) -> Transition[StateT]:
        """Look up the transition for a step outcome.

        Args:
            step_name: The step that produced the outcome.
            outcome: The outcome delivered for the step.

        Returns:
            The matching transition table row.

        Raises:
            InvalidTransitionError: If the table has no row for the pair.
        """
        try:
            return self.transitions[(step_name, outcome.type)]
        except KeyError as e:
            raise InvalidTransitionError(step_name, str(outcome.type)) from e

    def validate(self) -> list[str]:
        """Validate the workflow definition for common issues.

        Returns:
            List of validation error messages. Empty list if valid.
        """
        errors: list[str] = []

        for name, step in self.steps.items():
            if name != step.name:
                errors.append(f"Step registered as '{name}' is named '{step.name}'")
            for kind in OutcomeKind:
                if (name, kind) not in self.transitions:
                    errors.append(f"Step '{name}' has no transition on '{kind}'")

        for (source, _), transition in self.transitions.items():
            if source not in self.steps:
                errors.append(f"Transition source step '{source}' not found")
            if transition.next_step is not None and transition.next_step not in self.steps:
                errors.append(f"Transition target step '{transition.next_step}' not found")

        if self.failover_step is not None and self.failover_step not in self.steps:
            errors.append(f"Failover step '{self.failover_step}' not found")

        return errors


@dataclass(frozen=True)
class CommandContext(Generic[StateT]):
    """Information available to a workflow command handler.

    Attributes:
        workflow_id: Identity of the workflow receiving the command.
        current_state: Current state, None before the workflow started.
        now: Time at which the command is processed.
    """

    workflow_id: str
    current_state: StateT | None
    now: datetime


@dataclass(frozen=True)
class WorkflowEffect(Generic[StateT]):
    """Result of an accepted workflow command.

    Attributes:
        reply: Value returned to the caller.
        state: New state to store, or None to keep the current one.
        transition_to: Step to move to, or None to stay put.
    """

    reply: Any = None
    state: StateT | None = None
    transition_to: str | None = None
