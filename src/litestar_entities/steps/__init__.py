"""Step action building blocks: clocks, fault injectors and simulated actions."""

from __future__ import annotations

from litestar_entities.steps.clock import InstantClock, SystemClock
from litestar_entities.steps.faults import NoFaults, RandomFaults, ScriptedFaults
from litestar_entities.steps.simulated import SimulatedAction

__all__ = [
    "InstantClock",
    "NoFaults",
    "RandomFaults",
    "ScriptedFaults",
    "SimulatedAction",
    "SystemClock",
]
