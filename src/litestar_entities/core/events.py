"""Shopping cart domain events.

Events form a tagged union. Each variant carries its discriminant in the
``type`` class variable, and the serialized form always includes it so any
consumer can decode an event without knowing its Python class.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union

from typing_extensions import assert_never

from litestar_entities.core.models import LineItem
from litestar_entities.core.types import EventKind, Payload

__all__ = [
    "CartEvent",
    "CheckedOut",
    "ItemAdded",
    "ItemRemoved",
    "event_from_dict",
    "event_to_dict",
]


@dataclass(frozen=True)
class ItemAdded:
    """Event emitted when a line item is added to a cart.

    Attributes:
        item: The added line item. Its quantity is merged into any existing
            item for the same product.

    Example:
        >>> event_to_dict(ItemAdded(LineItem("p1", "Soap", 2)))
        {'type': 'item-added', 'item': {'product_id': 'p1', 'name': 'Soap', 'quantity': 2}}
    """

    item: LineItem
    type: ClassVar[EventKind] = EventKind.ITEM_ADDED


@dataclass(frozen=True)
class ItemRemoved:
    """Event emitted when a line item is removed from a cart.

    Attributes:
        item: The removed line item.
    """

    item: LineItem
    type: ClassVar[EventKind] = EventKind.ITEM_REMOVED


@dataclass(frozen=True)
class CheckedOut:
    """Event emitted when a cart is checked out."""

    type: ClassVar[EventKind] = EventKind.CHECKED_OUT


CartEvent = Union[ItemAdded, ItemRemoved, CheckedOut]
"""Union of all shopping cart events."""


def event_to_dict(event: CartEvent) -> Payload:
    """Serialize a cart event to its tagged wire shape.

    Args:
        event: The event to serialize.

    Returns:
        A JSON-compatible dictionary with a ``type`` discriminant.
    """
    match event:
        case ItemAdded(item=item) | ItemRemoved(item=item):
            return {"type": str(event.type), "item": item.to_dict()}
        case CheckedOut():
            return {"type": str(event.type)}
        case _:
            assert_never(event)


def event_from_dict(data: Payload) -> CartEvent:
    """Deserialize a cart event from its tagged wire shape.

    Args:
        data: A dictionary produced by :func:`event_to_dict`.

    Returns:
        The decoded event.

    Raises:
        ValueError: If the discriminant is missing or unknown.
    """
    kind = EventKind(data.get("type"))
    if kind is EventKind.ITEM_ADDED:
        return ItemAdded(item=LineItem.from_dict(data["item"]))
    if kind is EventKind.ITEM_REMOVED:
        return ItemRemoved(item=LineItem.from_dict(data["item"]))
    return CheckedOut()
