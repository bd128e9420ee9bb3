"""Tests for domain models, events and outcomes."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from litestar_entities.core.events import (
    CheckedOut,
    ItemAdded,
    ItemRemoved,
    event_from_dict,
    event_to_dict,
)
from litestar_entities.core.models import CartState, CycleState, LineItem
from litestar_entities.core.outcomes import (
    TIMEOUT_MESSAGE,
    Failure,
    Success,
    outcome_from_dict,
    outcome_to_dict,
)
from litestar_entities.core.types import CycleStatus, EventKind, OutcomeKind
from litestar_entities.exceptions import InvalidQuantityError


@pytest.mark.unit
class TestLineItem:
    """Tests for LineItem."""

    def test_rejects_non_positive_quantity(self) -> None:
        with pytest.raises(InvalidQuantityError):
            LineItem("p1", "Soap", 0)
        with pytest.raises(InvalidQuantityError):
            LineItem("p1", "Soap", -2)

    def test_with_quantity_returns_copy(self) -> None:
        item = LineItem("p1", "Soap", 2)

        updated = item.with_quantity(5)

        assert updated == LineItem("p1", "Soap", 5)
        assert item.quantity == 2


@pytest.mark.unit
class TestCartState:
    """Tests for CartState."""

    def test_defaults(self) -> None:
        cart = CartState("cart-1")

        assert cart.items == ()
        assert cart.checked_out is False

    def test_find_item(self) -> None:
        cart = CartState("cart-1", items=(LineItem("p1", "Soap", 2),))

        assert cart.find_item("p1") == LineItem("p1", "Soap", 2)
        assert cart.find_item("p2") is None


@pytest.mark.unit
class TestCycleState:
    """Tests for CycleState."""

    def test_with_status_stamps_last_updated(self) -> None:
        start = datetime(2024, 1, 21, 10, 30, tzinfo=timezone.utc)
        state = CycleState("machine1", "eco", 40, CycleStatus.FILLING, start, start)

        later = start + timedelta(seconds=1)
        updated = state.with_status(CycleStatus.WASHING, later)

        assert updated.status is CycleStatus.WASHING
        assert updated.last_updated == later
        assert updated.start_time == start
        assert (updated.program, updated.temperature) == ("eco", 40)

    def test_wire_shape(self) -> None:
        start = datetime(2024, 1, 21, 10, 30, tzinfo=timezone.utc)
        state = CycleState("machine1", "eco", 40, CycleStatus.FILLING, start, start)

        data = state.to_dict()

        assert data == {
            "cycle_id": "machine1",
            "program": "eco",
            "temperature": 40,
            "status": "FILLING",
            "start_time": "2024-01-21T10:30:00+00:00",
            "last_updated": "2024-01-21T10:30:00+00:00",
        }
        assert CycleState.from_dict(data) == state

    def test_terminal_statuses(self) -> None:
        assert CycleStatus.COMPLETED.is_terminal
        assert CycleStatus.ERROR.is_terminal
        assert not CycleStatus.SPINNING.is_terminal


@pytest.mark.unit
class TestEvents:
    """Tests for the tagged event union."""

    def test_discriminants(self) -> None:
        item = LineItem("p1", "Soap", 2)

        assert ItemAdded(item).type is EventKind.ITEM_ADDED
        assert ItemRemoved(item).type is EventKind.ITEM_REMOVED
        assert CheckedOut().type is EventKind.CHECKED_OUT

    def test_item_added_wire_shape(self) -> None:
        data = event_to_dict(ItemAdded(LineItem("p1", "Soap", 2)))

        assert data == {"type": "item-added", "item": {"product_id": "p1", "name": "Soap", "quantity": 2}}

    def test_checked_out_wire_shape(self) -> None:
        assert event_to_dict(CheckedOut()) == {"type": "checked-out"}

    def test_decode_by_discriminant(self) -> None:
        item = {"product_id": "p2", "name": "Towel", "quantity": 1}

        assert event_from_dict({"type": "item-removed", "item": item}) == ItemRemoved(LineItem("p2", "Towel", 1))
        assert event_from_dict({"type": "checked-out"}) == CheckedOut()

    @pytest.mark.parametrize("data", [{}, {"type": "item-renamed"}])
    def test_decode_rejects_unknown_discriminant(self, data: dict[str, object]) -> None:
        with pytest.raises(ValueError):
            event_from_dict(data)


@pytest.mark.unit
class TestOutcomes:
    """Tests for the tagged outcome union."""

    def test_discriminants(self) -> None:
        assert Success().type is OutcomeKind.SUCCESS
        assert Failure().type is OutcomeKind.FAILURE

    def test_timeout_is_a_failure(self) -> None:
        outcome = Failure.timeout()

        assert outcome.type is OutcomeKind.FAILURE
        assert outcome.message == TIMEOUT_MESSAGE == "timeout"

    def test_wire_shape(self) -> None:
        assert outcome_to_dict(Success.of("Water filled")) == {"type": "success", "message": "Water filled"}
        assert outcome_to_dict(Failure.of("Washing failed")) == {"type": "failure", "message": "Washing failed"}

    def test_decode(self) -> None:
        assert outcome_from_dict({"type": "failure", "message": "timeout"}) == Failure.timeout()
        assert outcome_from_dict({"type": "success"}) == Success()
