"""Shared test fixtures for litestar-entities test suite."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

import pytest

from litestar_entities.engine.local import LocalExecutionEngine
from litestar_entities.engine.store import InMemoryEventJournal, InMemorySnapshotStore
from litestar_entities.entity.cart import ShoppingCartEntity
from litestar_entities.steps.clock import InstantClock
from litestar_entities.steps.faults import ScriptedFaults
from litestar_entities.washing.workflow import WashingMachineWorkflow

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


@pytest.fixture
def start_time() -> datetime:
    """Fixed virtual start time for deterministic timestamps."""
    return datetime(2024, 1, 21, 10, 30, tzinfo=timezone.utc)


@pytest.fixture
def clock(start_time: datetime) -> InstantClock:
    """Virtual clock shared by the engine and the simulated steps."""
    return InstantClock(start_time)


@pytest.fixture
def faults() -> ScriptedFaults:
    """Fault injector that never fails but records invoked steps."""
    return ScriptedFaults(set())


@pytest.fixture
def journal() -> InMemoryEventJournal:
    return InMemoryEventJournal()


@pytest.fixture
def snapshots() -> InMemorySnapshotStore:
    return InMemorySnapshotStore()


@pytest.fixture
def washing_workflow(clock: InstantClock, faults: ScriptedFaults) -> WashingMachineWorkflow:
    """Washing machine workflow driven by the virtual clock."""
    return WashingMachineWorkflow(clock=clock, faults=faults)


@pytest.fixture
async def engine(
    clock: InstantClock,
    journal: InMemoryEventJournal,
    snapshots: InMemorySnapshotStore,
    washing_workflow: WashingMachineWorkflow,
) -> AsyncIterator[LocalExecutionEngine]:
    """Engine with the shopping cart and washing machine registered.

    Yields:
        LocalExecutionEngine instance, shut down after the test.
    """
    engine = LocalExecutionEngine(journal=journal, snapshots=snapshots, clock=clock)
    engine.register(ShoppingCartEntity(), washing_workflow)
    yield engine
    await engine.shutdown()
