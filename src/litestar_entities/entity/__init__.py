"""Event-sourced entity components."""

from __future__ import annotations

from litestar_entities.entity.base import EventSourcedEntity
from litestar_entities.entity.cart import ShoppingCartEntity

__all__ = ["EventSourcedEntity", "ShoppingCartEntity"]
