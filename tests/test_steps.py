"""Tests for clocks, fault injectors and simulated actions."""

from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone

import pytest

from litestar_entities.core.outcomes import Failure, Success
from litestar_entities.core.protocols import Clock, FaultInjector
from litestar_entities.steps.clock import InstantClock, SystemClock
from litestar_entities.steps.faults import NoFaults, RandomFaults, ScriptedFaults
from litestar_entities.steps.simulated import SimulatedAction


@pytest.mark.unit
@pytest.mark.asyncio
class TestClocks:
    """Tests for clock implementations."""

    async def test_instant_clock_sleep_advances_time(self) -> None:
        start = datetime(2024, 1, 21, 10, 30, tzinfo=timezone.utc)
        clock = InstantClock(start)

        await clock.sleep(90)

        assert clock.now() == start + timedelta(seconds=90)

    async def test_instant_clock_advance(self) -> None:
        clock = InstantClock()
        before = clock.now()

        clock.advance(1.5)

        assert clock.now() - before == timedelta(seconds=1.5)

    async def test_system_clock_is_aware(self) -> None:
        assert SystemClock().now().tzinfo is not None

    async def test_clocks_satisfy_protocol(self) -> None:
        assert isinstance(SystemClock(), Clock)
        assert isinstance(InstantClock(), Clock)


@pytest.mark.unit
class TestFaults:
    """Tests for fault injectors."""

    def test_no_faults(self) -> None:
        assert NoFaults().should_fail("washing") is False

    def test_scripted_faults_record_calls(self) -> None:
        faults = ScriptedFaults({"washing"})

        assert faults.should_fail("fill-water") is False
        assert faults.should_fail("washing") is True
        assert faults.calls == ["fill-water", "washing"]

    @pytest.mark.parametrize(("probability", "expected"), [(0.0, False), (1.0, True)])
    def test_random_faults_bounds(self, probability: float, expected: bool) -> None:
        faults = RandomFaults(probability, rng=random.Random(42))

        assert all(faults.should_fail("washing") is expected for _ in range(20))

    def test_random_faults_seeded(self) -> None:
        first = RandomFaults(0.5, rng=random.Random(7))
        second = RandomFaults(0.5, rng=random.Random(7))

        assert [first.should_fail("x") for _ in range(10)] == [second.should_fail("x") for _ in range(10)]

    @pytest.mark.parametrize("probability", [-0.1, 1.5])
    def test_random_faults_rejects_invalid_probability(self, probability: float) -> None:
        with pytest.raises(ValueError):
            RandomFaults(probability)

    def test_injectors_satisfy_protocol(self) -> None:
        assert isinstance(NoFaults(), FaultInjector)
        assert isinstance(ScriptedFaults(()), FaultInjector)


@pytest.mark.unit
@pytest.mark.asyncio
class TestSimulatedAction:
    """Tests for SimulatedAction."""

    async def test_success(self) -> None:
        clock = InstantClock()
        before = clock.now()
        action = SimulatedAction(
            "washing",
            duration=timedelta(seconds=2),
            clock=clock,
            faults=NoFaults(),
            success_message="Washing completed",
        )

        outcome = await action(None)

        assert outcome == Success("Washing completed")
        assert clock.now() - before == timedelta(seconds=2)

    async def test_injected_failure(self) -> None:
        action = SimulatedAction(
            "washing",
            duration=timedelta(seconds=2),
            clock=InstantClock(),
            faults=ScriptedFaults({"washing"}),
            success_message="Washing completed",
            failure_message="Washing failed",
        )

        assert await action(None) == Failure("Washing failed")

    async def test_default_failure_message(self) -> None:
        action = SimulatedAction(
            "rinsing",
            duration=timedelta(0),
            clock=InstantClock(),
            faults=ScriptedFaults({"rinsing"}),
            success_message="Rinsing completed",
        )

        assert await action(None) == Failure("rinsing failed")

    async def test_duration_from_state(self) -> None:
        action = SimulatedAction(
            "washing",
            duration=lambda state: timedelta(seconds=state["minutes"] * 60),
            clock=InstantClock(),
            faults=NoFaults(),
            success_message="ok",
        )

        assert action.get_duration({"minutes": 3}) == timedelta(minutes=3)
