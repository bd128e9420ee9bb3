"""Tests for the REST API controllers."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from litestar import Litestar
from litestar.status_codes import HTTP_200_OK, HTTP_400_BAD_REQUEST, HTTP_404_NOT_FOUND
from litestar.testing import AsyncTestClient

from litestar_entities.engine.local import LocalExecutionEngine
from litestar_entities.entity.cart import ShoppingCartEntity
from litestar_entities.plugin import EntitiesPlugin, EntitiesPluginConfig
from litestar_entities.steps.faults import ScriptedFaults
from litestar_entities.washing.workflow import WASHING, WashingMachineWorkflow

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from litestar_entities.steps.clock import InstantClock


def make_app(clock: InstantClock, faults: ScriptedFaults | None = None) -> tuple[Litestar, LocalExecutionEngine]:
    engine = LocalExecutionEngine(clock=clock)
    plugin = EntitiesPlugin(
        config=EntitiesPluginConfig(
            engine=engine,
            components=[ShoppingCartEntity(), WashingMachineWorkflow(clock=clock, faults=faults)],
        )
    )
    return Litestar(plugins=[plugin]), engine


@pytest.fixture
def app_and_engine(clock: InstantClock) -> tuple[Litestar, LocalExecutionEngine]:
    return make_app(clock)


@pytest.fixture
async def client(app_and_engine: tuple[Litestar, LocalExecutionEngine]) -> AsyncIterator[AsyncTestClient]:
    app, _ = app_and_engine
    async with AsyncTestClient(app=app) as client:
        yield client


@pytest.mark.integration
@pytest.mark.asyncio
class TestShoppingCartController:
    """Tests for the /carts endpoints."""

    async def test_add_items(self, client: AsyncTestClient) -> None:
        await client.post("/carts/cart-1/items", json={"product_id": "p1", "name": "Soap", "quantity": 2})
        await client.post("/carts/cart-1/items", json={"product_id": "p2", "name": "Towel", "quantity": 1})
        response = await client.post("/carts/cart-1/items", json={"product_id": "p1", "name": "Soap", "quantity": 3})

        assert response.status_code == HTTP_200_OK
        assert response.json() == {
            "cart_id": "cart-1",
            "items": [
                {"product_id": "p1", "name": "Soap", "quantity": 5},
                {"product_id": "p2", "name": "Towel", "quantity": 1},
            ],
            "checked_out": False,
        }

    async def test_get_cart(self, client: AsyncTestClient) -> None:
        await client.post("/carts/cart-1/items", json={"product_id": "p1", "name": "Soap", "quantity": 2})

        response = await client.get("/carts/cart-1")

        assert response.status_code == HTTP_200_OK
        assert response.json()["items"] == [{"product_id": "p1", "name": "Soap", "quantity": 2}]

    async def test_get_empty_cart(self, client: AsyncTestClient) -> None:
        response = await client.get("/carts/new-cart")

        assert response.status_code == HTTP_200_OK
        assert response.json() == {"cart_id": "new-cart", "items": [], "checked_out": False}

    @pytest.mark.parametrize("quantity", [0, -1])
    async def test_non_positive_quantity(self, client: AsyncTestClient, quantity: int) -> None:
        response = await client.post(
            "/carts/cart-1/items",
            json={"product_id": "p1", "name": "Soap", "quantity": quantity},
        )

        assert response.status_code == HTTP_400_BAD_REQUEST
        assert response.json()["type"] == "failure"
        assert (await client.get("/carts/cart-1")).json()["items"] == []


@pytest.mark.integration
@pytest.mark.asyncio
class TestWashingMachineController:
    """Tests for the /washing-machines endpoints."""

    async def test_start(
        self,
        client: AsyncTestClient,
        app_and_engine: tuple[Litestar, LocalExecutionEngine],
    ) -> None:
        _, engine = app_and_engine
        response = await client.post("/washing-machines/machine1/start", json={"program": "eco", "temperature": 40})
        await engine.wait_for(WashingMachineWorkflow.component_id, "machine1")

        assert response.status_code == HTTP_200_OK
        assert response.json() == {"type": "success", "message": "Washing cycle machine1 started"}

    async def test_status_after_cycle(
        self,
        client: AsyncTestClient,
        app_and_engine: tuple[Litestar, LocalExecutionEngine],
    ) -> None:
        _, engine = app_and_engine
        await client.post("/washing-machines/machine1/start", json={"program": "eco", "temperature": 40})
        await engine.wait_for(WashingMachineWorkflow.component_id, "machine1")

        response = await client.get("/washing-machines/machine1")

        assert response.status_code == HTTP_200_OK
        body = response.json()
        assert body["cycle_id"] == "machine1"
        assert body["program"] == "eco"
        assert body["temperature"] == 40
        assert body["status"] == "COMPLETED"

    async def test_status_without_cycle(self, client: AsyncTestClient) -> None:
        response = await client.get("/washing-machines/idle")

        assert response.status_code == HTTP_404_NOT_FOUND

    async def test_invalid_temperature(self, client: AsyncTestClient) -> None:
        response = await client.post("/washing-machines/machine1/start", json={"program": "eco", "temperature": 120})

        assert response.status_code == HTTP_400_BAD_REQUEST
        assert response.json() == {"type": "failure", "message": "Invalid temperature 120. Must be between 0 and 95°C"}

    async def test_missing_program(self, client: AsyncTestClient) -> None:
        response = await client.post("/washing-machines/machine1/start", json={"program": "", "temperature": 40})

        assert response.status_code == HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Program must be specified"

    async def test_already_running(
        self,
        client: AsyncTestClient,
        app_and_engine: tuple[Litestar, LocalExecutionEngine],
    ) -> None:
        _, engine = app_and_engine
        await client.post("/washing-machines/machine1/start", json={"program": "eco", "temperature": 40})

        response = await client.post("/washing-machines/machine1/start", json={"program": "eco", "temperature": 40})
        await engine.wait_for(WashingMachineWorkflow.component_id, "machine1")

        assert response.status_code == HTTP_400_BAD_REQUEST
        assert "already running" in response.json()["message"]

    async def test_failed_cycle_reports_error(self, clock: InstantClock) -> None:
        app, engine = make_app(clock, ScriptedFaults({WASHING}))

        async with AsyncTestClient(app=app) as client:
            await client.post("/washing-machines/machine1/start", json={"program": "eco", "temperature": 40})
            await engine.wait_for(WashingMachineWorkflow.component_id, "machine1")
            response = await client.get("/washing-machines/machine1")

        assert response.json()["status"] == "ERROR"
