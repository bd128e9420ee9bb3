"""Litestar Entities - Durable entities and workflows for Litestar.

This package provides two identity-scoped execution patterns for
long-running stateful processes in Litestar applications.

Key Features:
    - Event-sourced entities rebuilt by replaying their event log
    - Durable step workflows driven by an explicit transition table
    - Per-step and whole-workflow timeouts with failure rerouting
    - Single writer per identity, parallel across identities
    - In-memory and SQL persistence
    - Injectable clock and fault injection for deterministic tests

Example:
    >>> from litestar_entities import LocalExecutionEngine, ShoppingCartEntity, LineItem
    >>>
    >>> engine = LocalExecutionEngine()
    >>> engine.register(ShoppingCartEntity())
    >>> cart = engine.entity(ShoppingCartEntity.component_id, "cart-1")
    >>> await cart.execute(ShoppingCartEntity.add_item, LineItem("p1", "Soap", 2))
"""

from __future__ import annotations

from litestar_entities.__metadata__ import __project__, __version__
from litestar_entities.core.models import CartState, CycleState, LineItem, StartCommand
from litestar_entities.core.outcomes import Failure, Success
from litestar_entities.core.types import CycleStatus
from litestar_entities.engine.local import LocalExecutionEngine
from litestar_entities.entity.cart import ShoppingCartEntity
from litestar_entities.exceptions import (
    AlreadyCheckedOutError,
    AlreadyRunningError,
    ComponentNotFoundError,
    ConcurrencyConflictError,
    ConflictError,
    DomainError,
    EntitiesError,
    InvalidQuantityError,
    InvalidTemperatureError,
    InvalidTransitionError,
    MissingProgramError,
    NoActiveCycleError,
    ValidationError,
    WorkflowValidationError,
)
from litestar_entities.plugin import EntitiesPlugin, EntitiesPluginConfig
from litestar_entities.washing.workflow import WashingMachineWorkflow

__all__ = (
    "AlreadyCheckedOutError",
    "AlreadyRunningError",
    "CartState",
    "ComponentNotFoundError",
    "ConcurrencyConflictError",
    "ConflictError",
    "CycleState",
    "CycleStatus",
    "DomainError",
    "EntitiesError",
    "EntitiesPlugin",
    "EntitiesPluginConfig",
    "Failure",
    "InvalidQuantityError",
    "InvalidTemperatureError",
    "InvalidTransitionError",
    "LineItem",
    "LocalExecutionEngine",
    "MissingProgramError",
    "NoActiveCycleError",
    "ShoppingCartEntity",
    "StartCommand",
    "Success",
    "ValidationError",
    "WashingMachineWorkflow",
    "WorkflowValidationError",
    "__project__",
    "__version__",
)
