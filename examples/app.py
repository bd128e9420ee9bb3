"""Example Litestar app serving shopping carts and washing machines.

Carts are journaled and washing cycles are snapshotted to a SQLite file, so
both survive a restart and unfinished cycles resume on startup.

Run with:
    cd examples
    litestar run

Or:
    uvicorn app:app --reload

Then try:
    curl -X POST localhost:8000/carts/cart-1/items -H 'Content-Type: application/json' \
        -d '{"product_id": "p1", "name": "Soap", "quantity": 2}'
    curl -X POST localhost:8000/washing-machines/machine1/start -H 'Content-Type: application/json' \
        -d '{"program": "eco", "temperature": 40}'
    curl localhost:8000/washing-machines/machine1
"""

from __future__ import annotations

import logging
import os

from litestar import Litestar
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from litestar_entities import (
    EntitiesPlugin,
    EntitiesPluginConfig,
    LocalExecutionEngine,
    ShoppingCartEntity,
    WashingMachineWorkflow,
)
from litestar_entities.db import EventJournalModel, SQLAlchemyEventJournal, SQLAlchemySnapshotStore
from litestar_entities.steps import RandomFaults

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

DATABASE_URL = os.environ.get("ENTITIES_DATABASE_URL", "sqlite+aiosqlite:///entities.db")
FAILURE_PROBABILITY = float(os.environ.get("WASHING_FAILURE_PROBABILITY", "0.1"))

db_engine = create_async_engine(DATABASE_URL)
session_maker = async_sessionmaker(db_engine, expire_on_commit=False)

engine = LocalExecutionEngine(
    journal=SQLAlchemyEventJournal(session_maker),
    snapshots=SQLAlchemySnapshotStore(session_maker),
)


async def create_tables() -> None:
    async with db_engine.begin() as conn:
        await conn.run_sync(EventJournalModel.metadata.create_all)


app = Litestar(
    on_startup=[create_tables],
    on_shutdown=[db_engine.dispose],
    plugins=[
        EntitiesPlugin(
            config=EntitiesPluginConfig(
                engine=engine,
                components=[
                    ShoppingCartEntity(),
                    WashingMachineWorkflow(faults=RandomFaults(FAILURE_PROBABILITY)),
                ],
                api_tags=["Examples"],
            )
        )
    ],
)
