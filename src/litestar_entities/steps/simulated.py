"""Simulated step actions.

A simulated action waits for a duration on the injected clock and then
reports success, unless the fault injector decides it should fail. It has no
externally observable side effects, so the runtime may invoke it again after
a crash.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import timedelta
from typing import Any

from litestar_entities.core.outcomes import Failure, StepOutcome, Success
from litestar_entities.core.protocols import Clock, FaultInjector

__all__ = ["SimulatedAction"]

logger = logging.getLogger(__name__)


class SimulatedAction:
    """Step action that simulates work with a delay.

    The duration can be static or computed from the workflow state.

    Example:
        >>> action = SimulatedAction(
        ...     "washing",
        ...     duration=timedelta(seconds=2),
        ...     clock=SystemClock(),
        ...     faults=NoFaults(),
        ...     success_message="Washing completed",
        ... )
        >>> await action(state)
        Success(message='Washing completed')
    """

    def __init__(
        self,
        step_name: str,
        duration: timedelta | Callable[[Any], timedelta],
        clock: Clock,
        faults: FaultInjector,
        success_message: str,
        failure_message: str | None = None,
    ) -> None:
        """Initialize a simulated action.

        Args:
            step_name: Name of the step the action belongs to.
            duration: Fixed duration or callable that returns it from the state.
            clock: Clock used to wait.
            faults: Injector deciding whether the action fails.
            success_message: Message of the success outcome.
            failure_message: Message of the failure outcome.
        """
        self.step_name = step_name
        self._duration = duration
        self._clock = clock
        self._faults = faults
        self.success_message = success_message
        self.failure_message = failure_message or f"{step_name} failed"

    def get_duration(self, state: Any) -> timedelta:
        """Get the simulated duration for this action.

        Args:
            state: The workflow state.

        Returns:
            The duration to wait.
        """
        if isinstance(self._duration, timedelta):
            return self._duration
        return self._duration(state)

    async def __call__(self, state: Any) -> StepOutcome:
        await self._clock.sleep(self.get_duration(state).total_seconds())
        if self._faults.should_fail(self.step_name):
            logger.warning("Injected failure in step %s", self.step_name)
            return Failure.of(self.failure_message)
        return Success.of(self.success_message)
