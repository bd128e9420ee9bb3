"""Data Transfer Objects for the HTTP API.

This module defines DTOs for serializing and deserializing cart and washing
cycle data in REST API requests and responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from litestar_entities.core.models import CartState, CycleState, LineItem

__all__ = [
    "AddItemDTO",
    "CartDTO",
    "CycleStateDTO",
    "LineItemDTO",
    "ReplyDTO",
    "StartWashingDTO",
]


@dataclass
class AddItemDTO:
    """DTO for adding a product to a cart.

    Attributes:
        product_id: Product key.
        name: Display name of the product.
        quantity: Number of units to add.
    """

    product_id: str
    name: str
    quantity: int

    def to_line_item(self) -> LineItem:
        return LineItem(product_id=self.product_id, name=self.name, quantity=self.quantity)


@dataclass
class LineItemDTO:
    """DTO for a cart line item."""

    product_id: str
    name: str
    quantity: int


@dataclass
class CartDTO:
    """DTO for a shopping cart.

    Attributes:
        cart_id: Identity of the cart.
        items: Line items sorted by product id.
        checked_out: Whether the cart has been checked out.
    """

    cart_id: str
    items: list[LineItemDTO]
    checked_out: bool

    @classmethod
    def from_state(cls, state: CartState) -> CartDTO:
        return cls(
            cart_id=state.cart_id,
            items=[LineItemDTO(item.product_id, item.name, item.quantity) for item in state.items],
            checked_out=state.checked_out,
        )


@dataclass
class StartWashingDTO:
    """DTO for starting a washing cycle.

    Attributes:
        program: Name of the washing program.
        temperature: Washing temperature in degrees Celsius.
    """

    program: str
    temperature: int


@dataclass
class CycleStateDTO:
    """DTO for a washing cycle snapshot.

    Attributes:
        cycle_id: Identity of the machine.
        program: Washing program.
        temperature: Washing temperature.
        status: Lifecycle status (FILLING, WASHING, ..., COMPLETED, ERROR).
        start_time: When the cycle was started.
        last_updated: When the status last changed.
    """

    cycle_id: str
    program: str
    temperature: int
    status: str
    start_time: datetime
    last_updated: datetime

    @classmethod
    def from_state(cls, state: CycleState) -> CycleStateDTO:
        return cls(
            cycle_id=state.cycle_id,
            program=state.program,
            temperature=state.temperature,
            status=str(state.status),
            start_time=state.start_time,
            last_updated=state.last_updated,
        )


@dataclass
class ReplyDTO:
    """DTO for a command acknowledgement.

    Attributes:
        type: ``success`` or ``failure``.
        message: Human readable message.
    """

    type: str
    message: str
