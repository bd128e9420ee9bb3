"""Event-sourced shopping cart."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from typing_extensions import assert_never

from litestar_entities.core.events import (
    CartEvent,
    CheckedOut,
    ItemAdded,
    ItemRemoved,
    event_from_dict,
    event_to_dict,
)
from litestar_entities.core.models import CartState, LineItem
from litestar_entities.entity.base import EventSourcedEntity
from litestar_entities.exceptions import AlreadyCheckedOutError

if TYPE_CHECKING:
    from litestar_entities.core.types import Payload

__all__ = ["ShoppingCartEntity"]

logger = logging.getLogger(__name__)


class ShoppingCartEntity(EventSourcedEntity[CartState, CartEvent]):
    """Shopping cart whose state is derived from its event log.

    Example:
        >>> carts = engine.entity(ShoppingCartEntity.component_id, "cart-1")
        >>> await carts.execute(ShoppingCartEntity.add_item, LineItem("p1", "Soap", 2))
        >>> cart = await carts.read(ShoppingCartEntity.get_cart)
    """

    component_id = "shopping-cart"

    def empty_state(self, entity_id: str) -> CartState:
        return CartState(cart_id=entity_id, items=(), checked_out=False)

    def add_item(self, state: CartState, item: LineItem) -> ItemAdded:
        """Validate an add-item command.

        Args:
            state: Current cart state.
            item: The line item to add.

        Returns:
            The event to persist.

        Raises:
            AlreadyCheckedOutError: If the cart has been checked out.
        """
        if state.checked_out:
            logger.info("Shopping cart %s has already been checked-out", state.cart_id)
            raise AlreadyCheckedOutError(state.cart_id)
        return ItemAdded(item)

    def get_cart(self, state: CartState) -> CartState:
        """Return the cart. Served from a possibly stale replica."""
        return state

    def apply_event(self, state: CartState, event: CartEvent) -> CartState:
        match event:
            case ItemAdded(item=item):
                return self._on_item_added(state, item)
            # Removal and checkout do not change the state yet
            case ItemRemoved():
                return state
            case CheckedOut():
                return state
            case _:
                assert_never(event)

    def serialize_event(self, event: CartEvent) -> Payload:
        return event_to_dict(event)

    def deserialize_event(self, data: Payload) -> CartEvent:
        return event_from_dict(data)

    @staticmethod
    def _on_item_added(state: CartState, item: LineItem) -> CartState:
        existing = state.find_item(item.product_id)
        line_item = existing.with_quantity(existing.quantity + item.quantity) if existing else item
        items = [li for li in state.items if li.product_id != item.product_id]
        items.append(line_item)
        items.sort(key=lambda li: li.product_id)
        return CartState(cart_id=state.cart_id, items=tuple(items), checked_out=state.checked_out)
