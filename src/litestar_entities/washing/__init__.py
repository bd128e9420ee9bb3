"""Washing machine durable workflow."""

from __future__ import annotations

from litestar_entities.washing.workflow import (
    ERROR_STEP,
    FILL_WATER,
    RINSING,
    SPINNING,
    WASHING,
    WashingMachineWorkflow,
)

__all__ = [
    "ERROR_STEP",
    "FILL_WATER",
    "RINSING",
    "SPINNING",
    "WASHING",
    "WashingMachineWorkflow",
]
