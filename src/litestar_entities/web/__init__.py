"""Web API for litestar-entities.

This module provides the REST controllers, DTOs and exception handlers
mounted by :class:`~litestar_entities.plugin.EntitiesPlugin`.
"""

from __future__ import annotations

from litestar_entities.web.controllers import ShoppingCartController, WashingMachineController
from litestar_entities.web.dto import (
    AddItemDTO,
    CartDTO,
    CycleStateDTO,
    LineItemDTO,
    ReplyDTO,
    StartWashingDTO,
)
from litestar_entities.web.exceptions import domain_error_handler

__all__ = [
    "AddItemDTO",
    "CartDTO",
    "CycleStateDTO",
    "LineItemDTO",
    "ReplyDTO",
    "ShoppingCartController",
    "StartWashingDTO",
    "WashingMachineController",
    "domain_error_handler",
]
