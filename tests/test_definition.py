"""Tests for workflow definitions and the washing machine transition table."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from litestar_entities.core.definition import StepDef, Transition, WorkflowDef, keep_state
from litestar_entities.core.models import CycleState
from litestar_entities.core.outcomes import Failure, Success
from litestar_entities.core.types import CycleStatus, OutcomeKind
from litestar_entities.exceptions import InvalidTransitionError
from litestar_entities.washing.workflow import (
    DEFAULT_STEP_TIMEOUT,
    ERROR_STEP,
    FILL_WATER,
    RINSING,
    SPINNING,
    TRANSITIONS,
    WASHING,
    WORKFLOW_TIMEOUT,
    WashingMachineWorkflow,
)

START = datetime(2024, 1, 21, 10, 30, tzinfo=timezone.utc)
LATER = START + timedelta(seconds=3)


def make_state(status: CycleStatus) -> CycleState:
    return CycleState("machine1", "eco", 40, status, START, START)


async def noop(state: object) -> Success:
    return Success()


@pytest.mark.unit
class TestWorkflowDef:
    """Tests for the generic step graph."""

    def test_step_timeout_defaults(self) -> None:
        definition = WorkflowDef(
            steps={"a": StepDef("a", noop), "b": StepDef("b", noop, timeout=timedelta(seconds=5))},
            transitions={},
            timeout=timedelta(minutes=2),
            default_step_timeout=timedelta(minutes=1),
        )

        assert definition.step_timeout("a") == timedelta(minutes=1)
        assert definition.step_timeout("b") == timedelta(seconds=5)

    def test_validate_reports_missing_rows(self) -> None:
        definition = WorkflowDef(
            steps={"a": StepDef("a", noop)},
            transitions={("a", OutcomeKind.SUCCESS): Transition("missing")},
            timeout=timedelta(minutes=2),
            default_step_timeout=timedelta(minutes=1),
            failover_step="nowhere",
        )

        errors = definition.validate()

        assert "Step 'a' has no transition on 'failure'" in errors
        assert "Transition target step 'missing' not found" in errors
        assert "Failover step 'nowhere' not found" in errors

    def test_validate_reports_misnamed_step(self) -> None:
        definition = WorkflowDef(
            steps={"a": StepDef("b")},
            transitions={("a", kind): Transition(None) for kind in OutcomeKind},
            timeout=timedelta(minutes=2),
            default_step_timeout=timedelta(minutes=1),
        )

        assert definition.validate() == ["Step registered as 'a' is named 'b'"]

    def test_resolve_unknown_pair(self) -> None:
        definition = WorkflowDef(
            steps={"a": StepDef("a")},
            transitions={("a", OutcomeKind.SUCCESS): Transition(None)},
            timeout=timedelta(minutes=2),
            default_step_timeout=timedelta(minutes=1),
        )

        with pytest.raises(InvalidTransitionError):
            definition.resolve("a", Failure.of("boom"))

    def test_keep_state(self) -> None:
        state = make_state(CycleStatus.WASHING)

        assert keep_state(state, Failure(), LATER) is state


@pytest.mark.unit
class TestWashingTransitions:
    """Tests for the washing machine transition table."""

    def test_definition_is_valid(self) -> None:
        definition = WashingMachineWorkflow().definition()

        assert definition.validate() == []
        assert definition.failover_step == ERROR_STEP
        assert definition.timeout == WORKFLOW_TIMEOUT == timedelta(minutes=2)
        assert definition.step_timeout(WASHING) == DEFAULT_STEP_TIMEOUT == timedelta(minutes=1)

    def test_error_step_has_no_action(self) -> None:
        definition = WashingMachineWorkflow().definition()

        assert definition.steps[ERROR_STEP].action is None
        assert all(definition.steps[name].action is not None for name in (FILL_WATER, WASHING, RINSING, SPINNING))

    def test_step_timeout_override(self) -> None:
        definition = WashingMachineWorkflow(step_timeouts={RINSING: timedelta(seconds=10)}).definition()

        assert definition.step_timeout(RINSING) == timedelta(seconds=10)
        assert definition.step_timeout(SPINNING) == timedelta(minutes=1)

    @pytest.mark.parametrize(
        ("step", "status", "next_step", "expected"),
        [
            (FILL_WATER, CycleStatus.FILLING, WASHING, CycleStatus.WASHING),
            (WASHING, CycleStatus.WASHING, RINSING, CycleStatus.RINSING),
            (RINSING, CycleStatus.RINSING, SPINNING, CycleStatus.SPINNING),
            (SPINNING, CycleStatus.SPINNING, None, CycleStatus.COMPLETED),
        ],
    )
    def test_success_advances(
        self,
        step: str,
        status: CycleStatus,
        next_step: str | None,
        expected: CycleStatus,
    ) -> None:
        transition = TRANSITIONS[(step, OutcomeKind.SUCCESS)]

        updated = transition.update(make_state(status), Success(), LATER)

        assert transition.next_step == next_step
        assert updated.status is expected
        assert updated.last_updated == LATER

    @pytest.mark.parametrize("step", [FILL_WATER, WASHING, RINSING, SPINNING])
    def test_failure_routes_to_error_without_status_change(self, step: str) -> None:
        transition = TRANSITIONS[(step, OutcomeKind.FAILURE)]
        state = make_state(CycleStatus.RINSING)

        assert transition.next_step == ERROR_STEP
        assert transition.update(state, Failure.timeout(), LATER) == state

    @pytest.mark.parametrize("kind", list(OutcomeKind))
    def test_error_step_marks_error_and_ends(self, kind: OutcomeKind) -> None:
        transition = TRANSITIONS[(ERROR_STEP, kind)]

        updated = transition.update(make_state(CycleStatus.WASHING), Success(), LATER)

        assert transition.ends
        assert updated.status is CycleStatus.ERROR
        assert updated.last_updated == LATER

    def test_error_step_is_idempotent(self) -> None:
        transition = TRANSITIONS[(ERROR_STEP, OutcomeKind.SUCCESS)]
        state = make_state(CycleStatus.ERROR)

        assert transition.update(state, Success(), LATER) is state
