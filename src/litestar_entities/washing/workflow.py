"""Washing machine workflow.

The cycle runs ``fill-water -> washing -> rinsing -> spinning`` and ends.
Any failure, including a step timeout, routes to the ``error`` step, which
stamps the ERROR status and ends the workflow.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from litestar_entities.core.definition import (
    CommandContext,
    StepDef,
    Transition,
    WorkflowDef,
    WorkflowEffect,
    keep_state,
)
from litestar_entities.core.models import CycleState, StartCommand
from litestar_entities.core.outcomes import StepOutcome, Success
from litestar_entities.core.types import CycleStatus, OutcomeKind
from litestar_entities.exceptions import (
    AlreadyRunningError,
    InvalidTemperatureError,
    MissingProgramError,
    NoActiveCycleError,
)
from litestar_entities.steps.clock import SystemClock
from litestar_entities.steps.faults import NoFaults
from litestar_entities.steps.simulated import SimulatedAction

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping

    from litestar_entities.core.protocols import Clock, FaultInjector
    from litestar_entities.core.types import Payload

__all__ = [
    "DEFAULT_DURATIONS",
    "DEFAULT_STEP_TIMEOUT",
    "ERROR_STEP",
    "FILL_WATER",
    "MAX_TEMPERATURE",
    "MIN_TEMPERATURE",
    "RINSING",
    "SPINNING",
    "TRANSITIONS",
    "WASHING",
    "WORKFLOW_TIMEOUT",
    "WashingMachineWorkflow",
]

logger = logging.getLogger(__name__)

FILL_WATER = "fill-water"
WASHING = "washing"
RINSING = "rinsing"
SPINNING = "spinning"
ERROR_STEP = "error"

MIN_TEMPERATURE = 0
MAX_TEMPERATURE = 95

WORKFLOW_TIMEOUT = timedelta(minutes=2)
DEFAULT_STEP_TIMEOUT = timedelta(minutes=1)

DEFAULT_DURATIONS: dict[str, timedelta] = {
    FILL_WATER: timedelta(seconds=1),
    WASHING: timedelta(seconds=2),
    RINSING: timedelta(seconds=1.5),
    SPINNING: timedelta(seconds=1),
}

_MESSAGES: dict[str, tuple[str, str]] = {
    FILL_WATER: ("Water filled", "Failed to fill water"),
    WASHING: ("Washing completed", "Washing failed"),
    RINSING: ("Rinsing completed", "Rinsing failed"),
    SPINNING: ("Spinning completed", "Spinning failed"),
}


def _advance(status: CycleStatus) -> Callable[[CycleState, StepOutcome, datetime], CycleState]:
    def update(state: CycleState, outcome: StepOutcome, now: datetime) -> CycleState:
        return state.with_status(status, now)

    return update


def _mark_error(state: CycleState, outcome: StepOutcome, now: datetime) -> CycleState:
    if state.status is CycleStatus.ERROR:
        return state
    logger.error("Washing cycle %s ended in error while %s", state.cycle_id, state.status)
    return state.with_status(CycleStatus.ERROR, now)


# (step, outcome) -> (next step, state update)
TRANSITIONS: dict[tuple[str, OutcomeKind], Transition[CycleState]] = {
    (FILL_WATER, OutcomeKind.SUCCESS): Transition(WASHING, _advance(CycleStatus.WASHING)),
    (FILL_WATER, OutcomeKind.FAILURE): Transition(ERROR_STEP, keep_state),
    (WASHING, OutcomeKind.SUCCESS): Transition(RINSING, _advance(CycleStatus.RINSING)),
    (WASHING, OutcomeKind.FAILURE): Transition(ERROR_STEP, keep_state),
    (RINSING, OutcomeKind.SUCCESS): Transition(SPINNING, _advance(CycleStatus.SPINNING)),
    (RINSING, OutcomeKind.FAILURE): Transition(ERROR_STEP, keep_state),
    (SPINNING, OutcomeKind.SUCCESS): Transition(None, _advance(CycleStatus.COMPLETED)),
    (SPINNING, OutcomeKind.FAILURE): Transition(ERROR_STEP, keep_state),
    (ERROR_STEP, OutcomeKind.SUCCESS): Transition(None, _mark_error),
    (ERROR_STEP, OutcomeKind.FAILURE): Transition(None, _mark_error),
}


class WashingMachineWorkflow:
    """Durable washing cycle, one per machine identity.

    Attributes:
        clock: Clock used by the simulated steps and for timestamps.
        faults: Injector deciding which simulated steps fail.
        durations: Simulated duration of each working step.
        timeout: Bound on the whole cycle.
        default_step_timeout: Bound on a single step.
        step_timeouts: Per-step overrides of the default step timeout.

    Example:
        >>> engine.register(WashingMachineWorkflow())
        >>> machine = engine.workflow(WashingMachineWorkflow.component_id, "machine1")
        >>> await machine.execute(WashingMachineWorkflow.start, StartCommand("eco", 40))
        Success(message='Washing cycle machine1 started')
    """

    component_id = "washing-machine"

    def __init__(
        self,
        clock: Clock | None = None,
        faults: FaultInjector | None = None,
        durations: Mapping[str, timedelta] | None = None,
        timeout: timedelta = WORKFLOW_TIMEOUT,
        default_step_timeout: timedelta = DEFAULT_STEP_TIMEOUT,
        step_timeouts: Mapping[str, timedelta] | None = None,
    ) -> None:
        """Initialize the workflow component.

        Args:
            clock: Clock for simulated work and timestamps. Defaults to the system clock.
            faults: Fault injector. Defaults to never failing.
            durations: Overrides of the simulated step durations.
            timeout: Bound on the whole cycle.
            default_step_timeout: Bound on a single step.
            step_timeouts: Per-step timeout overrides, keyed by step name.
        """
        self.clock = clock or SystemClock()
        self.faults = faults or NoFaults()
        self.durations = {**DEFAULT_DURATIONS, **(durations or {})}
        self.timeout = timeout
        self.default_step_timeout = default_step_timeout
        self.step_timeouts = dict(step_timeouts or {})

    def definition(self) -> WorkflowDef[CycleState]:
        steps: dict[str, StepDef[CycleState]] = {}
        for name, (success_message, failure_message) in _MESSAGES.items():
            action = SimulatedAction(
                name,
                duration=self.durations[name],
                clock=self.clock,
                faults=self.faults,
                success_message=success_message,
                failure_message=failure_message,
            )
            steps[name] = StepDef(name, action=self._logged(name, action), timeout=self.step_timeouts.get(name))
        steps[ERROR_STEP] = StepDef(ERROR_STEP)

        return WorkflowDef(
            steps=steps,
            transitions=TRANSITIONS,
            timeout=self.timeout,
            default_step_timeout=self.default_step_timeout,
            failover_step=ERROR_STEP,
        )

    @staticmethod
    def _logged(
        step_name: str,
        action: SimulatedAction,
    ) -> Callable[[CycleState], Awaitable[StepOutcome]]:
        async def run(state: CycleState) -> StepOutcome:
            logger.info(
                "Running step %s for cycle %s with program %s at %s°C",
                step_name,
                state.cycle_id,
                state.program,
                state.temperature,
            )
            return await action(state)

        return run

    def start(self, ctx: CommandContext[CycleState], command: StartCommand) -> WorkflowEffect[CycleState]:
        """Start a washing cycle.

        Args:
            ctx: Command context with the machine identity and current state.
            command: Program and temperature of the cycle.

        Returns:
            An effect storing the FILLING state, moving to ``fill-water`` and
            replying with an acknowledgement. The cycle continues asynchronously.

        Raises:
            AlreadyRunningError: If the machine already has a cycle.
            InvalidTemperatureError: If the temperature is out of range.
            MissingProgramError: If no program is given.
        """
        if ctx.current_state is not None:
            logger.warning("Attempt to start washing when machine %s is already running", ctx.workflow_id)
            raise AlreadyRunningError(ctx.workflow_id, str(ctx.current_state.status))

        if not MIN_TEMPERATURE <= command.temperature <= MAX_TEMPERATURE:
            raise InvalidTemperatureError(command.temperature, MIN_TEMPERATURE, MAX_TEMPERATURE)
        if not command.program or not command.program.strip():
            raise MissingProgramError()

        logger.info(
            "Starting new washing cycle %s with program %s at %s°C",
            ctx.workflow_id,
            command.program,
            command.temperature,
        )
        state = CycleState(
            cycle_id=ctx.workflow_id,
            program=command.program,
            temperature=command.temperature,
            status=CycleStatus.FILLING,
            start_time=ctx.now,
            last_updated=ctx.now,
        )
        return WorkflowEffect(
            reply=Success.of(f"Washing cycle {ctx.workflow_id} started"),
            state=state,
            transition_to=FILL_WATER,
        )

    def status(self, ctx: CommandContext[CycleState]) -> CycleState:
        """Return the current cycle snapshot.

        Raises:
            NoActiveCycleError: If the machine never started a cycle.
        """
        if ctx.current_state is None:
            raise NoActiveCycleError(ctx.workflow_id)
        return ctx.current_state

    def serialize_state(self, state: CycleState) -> Payload:
        return state.to_dict()

    def deserialize_state(self, data: Payload) -> CycleState:
        return CycleState.from_dict(data)
