"""REST API controllers.

This module provides two controller classes:
- ShoppingCartController: Read carts and add items to them
- WashingMachineController: Start washing cycles and query their status
"""

from __future__ import annotations

import logging
from typing import ClassVar

from litestar import Controller, get, post
from litestar.exceptions import NotFoundException
from litestar.status_codes import HTTP_200_OK

from litestar_entities.core.models import StartCommand
from litestar_entities.core.outcomes import outcome_to_dict
from litestar_entities.engine.local import LocalExecutionEngine  # noqa: TC001 - needed for DI
from litestar_entities.entity.cart import ShoppingCartEntity
from litestar_entities.exceptions import NoActiveCycleError
from litestar_entities.washing.workflow import WashingMachineWorkflow
from litestar_entities.web.dto import AddItemDTO, CartDTO, CycleStateDTO, ReplyDTO, StartWashingDTO

__all__ = ["ShoppingCartController", "WashingMachineController"]

logger = logging.getLogger(__name__)


class ShoppingCartController(Controller):
    """API controller for shopping carts.

    Tags: Shopping Carts
    """

    path = "/carts"
    tags: ClassVar[list[str]] = ["Shopping Carts"]

    @get("/{cart_id:str}")
    async def get_cart(self, cart_id: str, entities_engine: LocalExecutionEngine) -> CartDTO:
        """Get a shopping cart.

        A cart that never received an item is returned empty.

        Args:
            cart_id: The cart identity.
            entities_engine: Injected execution engine.

        Returns:
            The cart with its line items.
        """
        cart = entities_engine.entity(ShoppingCartEntity.component_id, cart_id)
        state = await cart.read(ShoppingCartEntity.get_cart)
        return CartDTO.from_state(state)

    @post("/{cart_id:str}/items", status_code=HTTP_200_OK)
    async def add_item(
        self,
        cart_id: str,
        data: AddItemDTO,
        entities_engine: LocalExecutionEngine,
    ) -> CartDTO:
        """Add a product to a shopping cart.

        Adding a product already in the cart increases its quantity.

        Args:
            cart_id: The cart identity.
            data: The product and quantity to add.
            entities_engine: Injected execution engine.

        Returns:
            The cart after the item was added.
        """
        logger.info("Adding %s x%s to cart %s", data.product_id, data.quantity, cart_id)
        cart = entities_engine.entity(ShoppingCartEntity.component_id, cart_id)
        state = await cart.execute(ShoppingCartEntity.add_item, data.to_line_item())
        return CartDTO.from_state(state)


class WashingMachineController(Controller):
    """API controller for washing machines.

    Tags: Washing Machines
    """

    path = "/washing-machines"
    tags: ClassVar[list[str]] = ["Washing Machines"]

    @get("/{machine_id:str}")
    async def get_status(self, machine_id: str, entities_engine: LocalExecutionEngine) -> CycleStateDTO:
        """Get the washing cycle of a machine.

        Args:
            machine_id: The machine identity.
            entities_engine: Injected execution engine.

        Returns:
            The current cycle snapshot.

        Raises:
            NotFoundException: If the machine never started a cycle.
        """
        machine = entities_engine.workflow(WashingMachineWorkflow.component_id, machine_id)
        try:
            state = await machine.read(WashingMachineWorkflow.status)
        except NoActiveCycleError as e:
            raise NotFoundException(detail=str(e)) from e
        return CycleStateDTO.from_state(state)

    @post("/{machine_id:str}/start", status_code=HTTP_200_OK)
    async def start(
        self,
        machine_id: str,
        data: StartWashingDTO,
        entities_engine: LocalExecutionEngine,
    ) -> ReplyDTO:
        """Start a washing cycle.

        The reply is sent once the cycle has been accepted; the steps run in
        the background.

        Args:
            machine_id: The machine identity.
            data: Program and temperature.
            entities_engine: Injected execution engine.

        Returns:
            A success reply.
        """
        logger.info(
            "Starting washing machine %s with program %s at %s°C",
            machine_id,
            data.program,
            data.temperature,
        )
        machine = entities_engine.workflow(WashingMachineWorkflow.component_id, machine_id)
        reply = await machine.execute(WashingMachineWorkflow.start, StartCommand(data.program, data.temperature))
        return ReplyDTO(**outcome_to_dict(reply))
