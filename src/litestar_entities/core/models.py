"""Domain value types for carts and washing cycles.

All models are frozen dataclasses. State changes always produce a new value.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from litestar_entities.core.types import CycleStatus
from litestar_entities.exceptions import InvalidQuantityError

__all__ = ["CartState", "CycleState", "LineItem", "StartCommand"]


@dataclass(frozen=True)
class LineItem:
    """A product and quantity held in a shopping cart.

    Attributes:
        product_id: Unique key of the item within a cart.
        name: Display name of the product.
        quantity: Number of units, always positive.

    Raises:
        InvalidQuantityError: If quantity is zero or negative.
    """

    product_id: str
    name: str
    quantity: int

    def __post_init__(self) -> None:
        if self.quantity <= 0:
            raise InvalidQuantityError(self.product_id, self.quantity)

    def with_quantity(self, quantity: int) -> LineItem:
        """Return a copy of the item with another quantity."""
        return replace(self, quantity=quantity)

    def to_dict(self) -> dict[str, Any]:
        return {"product_id": self.product_id, "name": self.name, "quantity": self.quantity}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LineItem:
        return cls(product_id=data["product_id"], name=data["name"], quantity=int(data["quantity"]))


@dataclass(frozen=True)
class CartState:
    """Current state of a shopping cart.

    Attributes:
        cart_id: Identity of the cart.
        items: Line items sorted ascending by product_id, one per product.
        checked_out: Whether the cart accepts no further mutation.
    """

    cart_id: str
    items: tuple[LineItem, ...] = field(default_factory=tuple)
    checked_out: bool = False

    def find_item(self, product_id: str) -> LineItem | None:
        """Find the line item for a product.

        Args:
            product_id: The product to look up.

        Returns:
            The matching line item, or None if the product is not in the cart.
        """
        return next((item for item in self.items if item.product_id == product_id), None)


@dataclass(frozen=True)
class StartCommand:
    """Input for starting a washing cycle.

    Attributes:
        program: Name of the washing program.
        temperature: Washing temperature in degrees Celsius.
    """

    program: str
    temperature: int


@dataclass(frozen=True)
class CycleState:
    """Snapshot of a washing cycle.

    Program and temperature are fixed when the cycle starts; only the status
    and ``last_updated`` change afterwards.

    Attributes:
        cycle_id: Identity of the washing machine running the cycle.
        program: Name of the washing program.
        temperature: Washing temperature in degrees Celsius.
        status: Current lifecycle status.
        start_time: When the cycle was started.
        last_updated: When the status last changed.

    Example:
        >>> state = CycleState("machine1", "eco", 40, CycleStatus.FILLING, now, now)
        >>> state.with_status(CycleStatus.WASHING, later).status
        <CycleStatus.WASHING: 'WASHING'>
    """

    cycle_id: str
    program: str
    temperature: int
    status: CycleStatus
    start_time: datetime
    last_updated: datetime

    def with_status(self, status: CycleStatus, now: datetime) -> CycleState:
        """Return a copy with a new status stamped at ``now``.

        Args:
            status: The new lifecycle status.
            now: Timestamp of the change.

        Returns:
            The updated cycle state.
        """
        return replace(self, status=status, last_updated=now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "cycle_id": self.cycle_id,
            "program": self.program,
            "temperature": self.temperature,
            "status": str(self.status),
            "start_time": self.start_time.isoformat(),
            "last_updated": self.last_updated.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CycleState:
        return cls(
            cycle_id=data["cycle_id"],
            program=data["program"],
            temperature=int(data["temperature"]),
            status=CycleStatus(data["status"]),
            start_time=datetime.fromisoformat(data["start_time"]),
            last_updated=datetime.fromisoformat(data["last_updated"]),
        )
