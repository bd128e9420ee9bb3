"""Litestar plugin for entity and workflow integration.

This module provides the EntitiesPlugin for seamless integration of
litestar-entities with Litestar applications.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from litestar.di import Provide
from litestar.plugins import InitPluginProtocol

from litestar_entities.engine.local import LocalExecutionEngine

if TYPE_CHECKING:
    from litestar.config.app import AppConfig

__all__ = ["EntitiesPlugin", "EntitiesPluginConfig"]

logger = logging.getLogger(__name__)


@dataclass
class EntitiesPluginConfig:
    """Configuration for the EntitiesPlugin.

    Attributes:
        engine: Optional pre-configured LocalExecutionEngine. If not provided,
            one with in-memory stores will be created.
        components: Entity and workflow component instances to register with
            the engine on app init.
        dependency_key_engine: The key used for dependency injection of
            the engine. Defaults to "entities_engine".
        enable_api: Whether to enable the REST API endpoints. Defaults to True.
        api_path_prefix: URL path prefix for the cart and washing machine
            endpoints. Defaults to "/".
        api_guards: List of Litestar guards to apply to all API endpoints.
        api_tags: OpenAPI tags to apply to the API endpoints.
        include_api_in_schema: Whether to include API endpoints in OpenAPI schema.
            Defaults to True.
        recover_on_startup: Whether to resume unfinished workflows when the
            app starts. Defaults to True.
    """

    engine: LocalExecutionEngine | None = None
    components: list[Any] = field(default_factory=list)
    dependency_key_engine: str = "entities_engine"
    enable_api: bool = True
    api_path_prefix: str = "/"
    api_guards: list[Any] = field(default_factory=list)
    api_tags: list[str] = field(default_factory=list)
    include_api_in_schema: bool = True
    recover_on_startup: bool = True


class EntitiesPlugin(InitPluginProtocol):
    """Litestar plugin for event-sourced entities and durable workflows.

    This plugin registers components with an execution engine, provides the
    engine through dependency injection and ties its lifetime to the app.

    Example:
        Basic usage::

            from litestar import Litestar
            from litestar_entities import (
                EntitiesPlugin,
                EntitiesPluginConfig,
                ShoppingCartEntity,
                WashingMachineWorkflow,
            )

            app = Litestar(
                plugins=[
                    EntitiesPlugin(
                        config=EntitiesPluginConfig(
                            components=[ShoppingCartEntity(), WashingMachineWorkflow()],
                        )
                    )
                ]
            )

        Using in a route handler::

            from litestar import get
            from litestar_entities import LocalExecutionEngine, ShoppingCartEntity


            @get("/carts/{cart_id:str}/size")
            async def cart_size(cart_id: str, entities_engine: LocalExecutionEngine) -> int:
                cart = entities_engine.entity(ShoppingCartEntity.component_id, cart_id)
                state = await cart.read(ShoppingCartEntity.get_cart)
                return sum(item.quantity for item in state.items)
    """

    __slots__ = ("_config", "_engine")

    def __init__(self, config: EntitiesPluginConfig | None = None) -> None:
        """Initialize the plugin.

        Args:
            config: Optional configuration for the plugin.
        """
        self._config = config or EntitiesPluginConfig()
        self._engine: LocalExecutionEngine | None = None

    @property
    def engine(self) -> LocalExecutionEngine:
        """Get the execution engine.

        Returns:
            The LocalExecutionEngine instance.

        Raises:
            RuntimeError: If accessed before plugin initialization.
        """
        if self._engine is None:
            msg = "EntitiesPlugin has not been initialized. Access engine after app init."
            raise RuntimeError(msg)
        return self._engine

    async def on_startup(self) -> None:
        """Resume unfinished workflows if recovery is enabled."""
        if self._config.recover_on_startup:
            resumed = await self.engine.recover()
            if resumed:
                logger.info("Resumed %d unfinished workflow(s)", resumed)

    async def on_shutdown(self) -> None:
        """Stop workflow drivers. Snapshots stay in place for the next start."""
        await self.engine.shutdown()

    def on_app_init(self, app_config: AppConfig) -> AppConfig:
        """Initialize the plugin when the Litestar app is created.

        This method:
        1. Creates or uses the provided LocalExecutionEngine
        2. Registers the configured components
        3. Adds the engine dependency provider to the app config
        4. Hooks workflow recovery and engine shutdown into the app lifecycle
        5. Optionally registers the REST API controllers of the registered
           components if enable_api=True

        Args:
            app_config: The Litestar application configuration.

        Returns:
            The modified application configuration.
        """
        self._engine = self._config.engine or LocalExecutionEngine()
        self._engine.register(*self._config.components)

        def provide_engine() -> LocalExecutionEngine:
            return self._engine  # type: ignore[return-value]

        app_config.dependencies[self._config.dependency_key_engine] = Provide(
            provide_engine,
            sync_to_thread=False,
        )

        app_config.on_startup.append(self.on_startup)
        app_config.on_shutdown.append(self.on_shutdown)

        if self._config.enable_api:
            from litestar import Router

            from litestar_entities.entity.cart import ShoppingCartEntity
            from litestar_entities.exceptions import DomainError
            from litestar_entities.washing.workflow import WashingMachineWorkflow
            from litestar_entities.web.controllers import ShoppingCartController, WashingMachineController
            from litestar_entities.web.exceptions import domain_error_handler

            # Controllers are only mounted for registered components
            controllers = [
                controller
                for component_id, controller in (
                    (ShoppingCartEntity.component_id, ShoppingCartController),
                    (WashingMachineWorkflow.component_id, WashingMachineController),
                )
                if self._engine.registry.has_component(component_id)
            ]
            if controllers:
                api_router = Router(
                    path=self._config.api_path_prefix,
                    route_handlers=controllers,
                    guards=self._config.api_guards,
                    tags=self._config.api_tags,
                    include_in_schema=self._config.include_api_in_schema,
                )
                app_config.route_handlers.append(api_router)
                app_config.exception_handlers[DomainError] = domain_error_handler  # type: ignore[assignment]
            else:
                logger.warning("API enabled but no shopping cart or washing machine component is registered")

        return app_config
