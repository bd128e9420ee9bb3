"""Component registry.

This module provides a registry for the entity and workflow components known
to an engine, keyed by their component id.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from litestar_entities.core.protocols import EntityComponent, WorkflowComponent
from litestar_entities.exceptions import ComponentNotFoundError, WorkflowValidationError

if TYPE_CHECKING:
    from litestar_entities.core.definition import WorkflowDef

__all__ = ["ComponentRegistry"]


class ComponentRegistry:
    """Registry for storing and retrieving components.

    Workflow definitions are built and validated once, on registration.

    Attributes:
        _entities: Map of component ids to entity components.
        _workflows: Map of component ids to workflow components.
        _definitions: Map of workflow component ids to their definitions.
    """

    def __init__(self) -> None:
        """Initialize an empty component registry."""
        self._entities: dict[str, EntityComponent[Any, Any]] = {}
        self._workflows: dict[str, WorkflowComponent[Any]] = {}
        self._definitions: dict[str, WorkflowDef[Any]] = {}

    def register(self, component: Any) -> None:
        """Register an entity or workflow component.

        Registering a component under an existing id replaces it.

        Args:
            component: The component instance to register.

        Raises:
            TypeError: If the object is neither an entity nor a workflow component.
            WorkflowValidationError: If a workflow definition is invalid.

        Example:
            >>> registry = ComponentRegistry()
            >>> registry.register(ShoppingCartEntity())
            >>> registry.register(WashingMachineWorkflow())
        """
        if isinstance(component, WorkflowComponent):
            definition = component.definition()
            errors = definition.validate()
            if errors:
                raise WorkflowValidationError(errors)
            self.unregister(component.component_id)
            self._workflows[component.component_id] = component
            self._definitions[component.component_id] = definition
        elif isinstance(component, EntityComponent):
            self.unregister(component.component_id)
            self._entities[component.component_id] = component
        else:
            msg = f"{type(component).__name__} is neither an entity nor a workflow component"
            raise TypeError(msg)

    def get_entity(self, component_id: str) -> EntityComponent[Any, Any]:
        """Retrieve an entity component by id.

        Raises:
            ComponentNotFoundError: If no entity is registered under the id.
        """
        if component_id not in self._entities:
            raise ComponentNotFoundError(component_id)
        return self._entities[component_id]

    def get_workflow(self, component_id: str) -> WorkflowComponent[Any]:
        """Retrieve a workflow component by id.

        Raises:
            ComponentNotFoundError: If no workflow is registered under the id.
        """
        if component_id not in self._workflows:
            raise ComponentNotFoundError(component_id)
        return self._workflows[component_id]

    def get_definition(self, component_id: str) -> WorkflowDef[Any]:
        """Retrieve the validated definition of a workflow component.

        Raises:
            ComponentNotFoundError: If no workflow is registered under the id.
        """
        if component_id not in self._definitions:
            raise ComponentNotFoundError(component_id)
        return self._definitions[component_id]

    def list_workflows(self) -> list[WorkflowComponent[Any]]:
        return list(self._workflows.values())

    def list_entities(self) -> list[EntityComponent[Any, Any]]:
        return list(self._entities.values())

    def has_component(self, component_id: str) -> bool:
        return component_id in self._entities or component_id in self._workflows

    def unregister(self, component_id: str) -> None:
        """Remove a component from the registry. Unknown ids are ignored."""
        self._entities.pop(component_id, None)
        self._workflows.pop(component_id, None)
        self._definitions.pop(component_id, None)
