"""Tests for the component registry."""

from __future__ import annotations

from datetime import timedelta

import pytest

from litestar_entities.core.definition import StepDef, Transition, WorkflowDef
from litestar_entities.core.types import OutcomeKind, Payload
from litestar_entities.engine.registry import ComponentRegistry
from litestar_entities.entity.cart import ShoppingCartEntity
from litestar_entities.exceptions import ComponentNotFoundError, WorkflowValidationError
from litestar_entities.washing.workflow import WashingMachineWorkflow


class BrokenWorkflow:
    """Workflow whose only step has no failure transition."""

    component_id = "broken"

    def definition(self) -> WorkflowDef[dict]:
        return WorkflowDef(
            steps={"only": StepDef("only")},
            transitions={("only", OutcomeKind.SUCCESS): Transition(None)},
            timeout=timedelta(seconds=10),
            default_step_timeout=timedelta(seconds=5),
        )

    def serialize_state(self, state: dict) -> Payload:
        return state

    def deserialize_state(self, data: Payload) -> dict:
        return data


@pytest.mark.unit
class TestComponentRegistry:
    """Tests for ComponentRegistry."""

    def test_register_entity(self) -> None:
        registry = ComponentRegistry()
        cart = ShoppingCartEntity()

        registry.register(cart)

        assert registry.get_entity("shopping-cart") is cart
        assert registry.list_entities() == [cart]
        assert registry.has_component("shopping-cart")

    def test_register_workflow_builds_definition(self) -> None:
        registry = ComponentRegistry()
        workflow = WashingMachineWorkflow()

        registry.register(workflow)

        assert registry.get_workflow("washing-machine") is workflow
        assert registry.list_workflows() == [workflow]
        assert "fill-water" in registry.get_definition("washing-machine").steps

    def test_invalid_workflow_rejected(self) -> None:
        registry = ComponentRegistry()

        with pytest.raises(WorkflowValidationError, match="no transition on 'failure'"):
            registry.register(BrokenWorkflow())

        assert not registry.has_component("broken")

    def test_register_rejects_other_objects(self) -> None:
        with pytest.raises(TypeError):
            ComponentRegistry().register(object())

    def test_lookup_by_wrong_kind(self) -> None:
        registry = ComponentRegistry()
        registry.register(ShoppingCartEntity())

        with pytest.raises(ComponentNotFoundError):
            registry.get_workflow("shopping-cart")
        with pytest.raises(ComponentNotFoundError):
            registry.get_definition("shopping-cart")

    def test_unregister(self) -> None:
        registry = ComponentRegistry()
        registry.register(WashingMachineWorkflow())

        registry.unregister("washing-machine")
        registry.unregister("never-registered")

        assert not registry.has_component("washing-machine")
        with pytest.raises(ComponentNotFoundError):
            registry.get_definition("washing-machine")
