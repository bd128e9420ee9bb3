"""Fault injection for simulated step actions."""

from __future__ import annotations

import random
from collections.abc import Iterable

__all__ = ["NoFaults", "RandomFaults", "ScriptedFaults"]


class NoFaults:
    """Never injects a failure."""

    def should_fail(self, step_name: str) -> bool:
        return False


class RandomFaults:
    """Fails each step with a fixed probability.

    Attributes:
        probability: Chance in ``[0, 1]`` that a step fails.
    """

    def __init__(self, probability: float, rng: random.Random | None = None) -> None:
        """Initialize the injector.

        Args:
            probability: Chance in ``[0, 1]`` that a step fails.
            rng: Random number generator, seedable for reproducible runs.

        Raises:
            ValueError: If probability is outside ``[0, 1]``.
        """
        if not 0.0 <= probability <= 1.0:
            msg = f"Failure probability must be between 0 and 1, got {probability}"
            raise ValueError(msg)
        self.probability = probability
        self._rng = rng or random.Random()

    def should_fail(self, step_name: str) -> bool:
        return self._rng.random() < self.probability


class ScriptedFaults:
    """Fails exactly the named steps.

    Every invocation of a listed step fails, so re-invoking a step after a
    crash yields the same outcome.

    Example:
        >>> faults = ScriptedFaults({"washing"})
        >>> faults.should_fail("washing"), faults.should_fail("rinsing")
        (True, False)
    """

    def __init__(self, failing_steps: Iterable[str]) -> None:
        self.failing_steps = frozenset(failing_steps)
        self.calls: list[str] = []

    def should_fail(self, step_name: str) -> bool:
        self.calls.append(step_name)
        return step_name in self.failing_steps
