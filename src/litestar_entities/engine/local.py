"""Local in-process async execution engine.

This module provides an in-process runtime for event-sourced entities and
durable workflows, suitable for development, testing, and single-instance
deployments.

Every identity is a single writer: commands and step results for one
identity are processed one at a time under that identity's lock, while
different identities proceed in parallel. Reads are served from the cached
replica without taking the lock.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from functools import reduce
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from litestar_entities.core.definition import CommandContext
from litestar_entities.core.outcomes import Failure, Success
from litestar_entities.core.records import JournalRecord, SnapshotRecord, WorkflowInstance
from litestar_entities.engine.registry import ComponentRegistry
from litestar_entities.engine.store import InMemoryEventJournal, InMemorySnapshotStore
from litestar_entities.exceptions import InvalidTransitionError
from litestar_entities.steps.clock import SystemClock

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from litestar_entities.core.definition import StepDef, WorkflowDef, WorkflowEffect
    from litestar_entities.core.outcomes import StepOutcome
    from litestar_entities.core.protocols import (
        Clock,
        EntityComponent,
        EventJournal,
        SnapshotStore,
        WorkflowComponent,
    )

__all__ = ["EntityRef", "LocalExecutionEngine", "WorkflowRef"]

logger = logging.getLogger(__name__)

S = TypeVar("S")
R = TypeVar("R")

_Key = tuple[str, str]


@dataclass
class _EntityReplica(Generic[S]):
    state: S
    seq_nr: int


@dataclass(frozen=True)
class EntityRef:
    """Handle for sending commands to one entity identity.

    Handlers are passed unbound, the way they are declared on the component
    class, and receive the component instance and the current state first.

    Example:
        >>> cart = engine.entity("shopping-cart", "cart-1")
        >>> await cart.execute(ShoppingCartEntity.add_item, LineItem("p1", "Soap", 2))
    """

    engine: LocalExecutionEngine
    component_id: str
    entity_id: str

    async def execute(self, handler: Callable[..., Any], *args: Any) -> Any:
        """Run a command handler and persist the event it returns.

        Args:
            handler: Command handler returning one event or raising a DomainError.
            *args: Command arguments.

        Returns:
            The entity state after the event was applied.
        """
        return await self.engine._execute_entity_command(self.component_id, self.entity_id, handler, args)

    async def read(self, handler: Callable[..., R], *args: Any) -> R:
        """Run a read-only handler against the cached state."""
        return await self.engine._read_entity(self.component_id, self.entity_id, handler, args)


@dataclass(frozen=True)
class WorkflowRef:
    """Handle for sending commands to one workflow identity.

    Handlers receive the component instance and a
    :class:`~litestar_entities.core.definition.CommandContext` first.

    Example:
        >>> machine = engine.workflow("washing-machine", "machine1")
        >>> await machine.execute(WashingMachineWorkflow.start, StartCommand("eco", 40))
    """

    engine: LocalExecutionEngine
    component_id: str
    workflow_id: str

    async def execute(self, handler: Callable[..., WorkflowEffect[Any]], *args: Any) -> Any:
        """Run a command handler and apply the effect it returns.

        Args:
            handler: Command handler returning an effect or raising a DomainError.
            *args: Command arguments.

        Returns:
            The reply of the effect.
        """
        return await self.engine._execute_workflow_command(self.component_id, self.workflow_id, handler, args)

    async def read(self, handler: Callable[..., R], *args: Any) -> R:
        """Run a read-only handler against the cached state."""
        return await self.engine._read_workflow(self.component_id, self.workflow_id, handler, args)

    async def wait(self) -> WorkflowInstance[Any]:
        """Wait until the workflow driver is idle and return the instance."""
        return await self.engine.wait_for(self.component_id, self.workflow_id)


class LocalExecutionEngine:
    """In-process async execution engine for entities and workflows.

    Workflows are driven by one asyncio task per identity, advancing one step
    at a time. A step's outcome is awaited for at most the step timeout
    (bounded by what is left of the workflow timeout). When the wait expires
    the action is left running detached and a ``Failure("timeout")`` is routed
    through the transition table instead.

    Entity replicas and workflow instances stay cached for the lifetime of the
    engine. The lock of a workflow is dropped once the workflow has finished.

    Attributes:
        registry: The component registry.
        journal: Event journal for entities.
        snapshots: Snapshot store for workflows.
        clock: Clock used for command timestamps and the workflow timeout.
        _entities: Cached entity replicas.
        _workflows: Cached workflow instances.
        _running: Map of workflow keys to their driver tasks.
        _detached: Step actions that outlived their timeout.
    """

    def __init__(
        self,
        registry: ComponentRegistry | None = None,
        journal: EventJournal | None = None,
        snapshots: SnapshotStore | None = None,
        clock: Clock | None = None,
    ) -> None:
        """Initialize the local execution engine.

        Args:
            registry: The component registry. A new one is created if omitted.
            journal: Event journal. Defaults to an in-memory journal.
            snapshots: Snapshot store. Defaults to an in-memory store.
            clock: Clock for timestamps and the workflow timeout.
        """
        self.registry = registry or ComponentRegistry()
        self.journal = journal or InMemoryEventJournal()
        self.snapshots = snapshots or InMemorySnapshotStore()
        self.clock = clock or SystemClock()
        self._locks: dict[_Key, asyncio.Lock] = {}
        self._entities: dict[_Key, _EntityReplica[Any]] = {}
        self._workflows: dict[_Key, WorkflowInstance[Any]] = {}
        self._running: dict[_Key, asyncio.Task[None]] = {}
        self._detached: set[asyncio.Task[Any]] = set()

    def register(self, *components: Any) -> None:
        """Register entity and workflow components with the engine."""
        for component in components:
            self.registry.register(component)

    def entity(self, component_id: str, entity_id: str) -> EntityRef:
        """Get a handle on an entity identity.

        Raises:
            ComponentNotFoundError: If the component is not registered.
        """
        self.registry.get_entity(component_id)
        return EntityRef(self, component_id, entity_id)

    def workflow(self, component_id: str, workflow_id: str) -> WorkflowRef:
        """Get a handle on a workflow identity.

        Raises:
            ComponentNotFoundError: If the component is not registered.
        """
        self.registry.get_workflow(component_id)
        return WorkflowRef(self, component_id, workflow_id)

    def _lock(self, key: _Key) -> asyncio.Lock:
        return self._locks.setdefault(key, asyncio.Lock())

    # Entities

    async def _load_entity(self, component: EntityComponent[Any, Any], entity_id: str) -> _EntityReplica[Any]:
        key = (component.component_id, entity_id)
        if key not in self._entities:
            records = await self.journal.read(component.component_id, entity_id)
            events = [component.deserialize_event(record.payload) for record in records]
            state = reduce(component.apply_event, events, component.empty_state(entity_id))
            self._entities[key] = _EntityReplica(state, records[-1].seq_nr if records else 0)
        return self._entities[key]

    async def _execute_entity_command(
        self,
        component_id: str,
        entity_id: str,
        handler: Callable[..., Any],
        args: tuple[Any, ...],
    ) -> Any:
        component = self.registry.get_entity(component_id)
        key = (component_id, entity_id)
        async with self._lock(key):
            replica = await self._load_entity(component, entity_id)
            event = handler(component, replica.state, *args)
            seq_nr = replica.seq_nr + 1
            await self.journal.append(
                JournalRecord(component_id, entity_id, seq_nr, component.serialize_event(event))
            )
            state = component.apply_event(replica.state, event)
            self._entities[key] = _EntityReplica(state, seq_nr)
            logger.info("Persisted %s #%d for %s/%s", type(event).__name__, seq_nr, component_id, entity_id)
            return state

    async def _read_entity(
        self,
        component_id: str,
        entity_id: str,
        handler: Callable[..., R],
        args: tuple[Any, ...],
    ) -> R:
        component = self.registry.get_entity(component_id)
        replica = self._entities.get((component_id, entity_id))
        if replica is None:
            async with self._lock((component_id, entity_id)):
                replica = await self._load_entity(component, entity_id)
        return handler(component, replica.state, *args)

    # Workflows

    async def _load_workflow(self, component: WorkflowComponent[Any], workflow_id: str) -> WorkflowInstance[Any]:
        key = (component.component_id, workflow_id)
        if key not in self._workflows:
            record = await self.snapshots.load(component.component_id, workflow_id)
            if record is None:
                self._workflows[key] = WorkflowInstance(component.component_id, workflow_id)
            else:
                self._workflows[key] = self._instance_from_record(component, record)
        return self._workflows[key]

    @staticmethod
    def _instance_from_record(component: WorkflowComponent[Any], record: SnapshotRecord) -> WorkflowInstance[Any]:
        return WorkflowInstance(
            component_id=record.component_id,
            workflow_id=record.workflow_id,
            state=component.deserialize_state(record.state) if record.state else None,
            step=record.step,
            started_at=record.started_at,
            finished=record.finished,
            history=[record.step] if record.step else [],
        )

    async def _save(self, component: WorkflowComponent[Any], instance: WorkflowInstance[Any]) -> None:
        await self.snapshots.save(
            SnapshotRecord(
                component_id=instance.component_id,
                workflow_id=instance.workflow_id,
                step=instance.step,
                state=component.serialize_state(instance.state) if instance.state is not None else {},
                started_at=instance.started_at or self.clock.now(),
                finished=instance.finished,
            )
        )

    async def _commit(
        self,
        component: WorkflowComponent[Any],
        instance: WorkflowInstance[Any],
        changes: dict[str, Any],
    ) -> None:
        """Persist changes to a workflow, then apply them to the cached instance.

        The cached instance is left untouched when the snapshot cannot be
        saved, so it never runs ahead of the store.
        """
        await self._save(component, replace(instance, **changes))
        for name, value in changes.items():
            setattr(instance, name, value)

    async def _execute_workflow_command(
        self,
        component_id: str,
        workflow_id: str,
        handler: Callable[..., WorkflowEffect[Any]],
        args: tuple[Any, ...],
    ) -> Any:
        component = self.registry.get_workflow(component_id)
        definition = self.registry.get_definition(component_id)
        async with self._lock((component_id, workflow_id)):
            instance = await self._load_workflow(component, workflow_id)
            now = self.clock.now()
            effect = handler(component, CommandContext(workflow_id, instance.state, now), *args)

            if effect.transition_to is not None and effect.transition_to not in definition.steps:
                raise InvalidTransitionError(
                    instance.step or "<start>", "command", reason=f"unknown step '{effect.transition_to}'"
                )
            if effect.state is None and effect.transition_to is None:
                return effect.reply

            changes: dict[str, Any] = {}
            if effect.state is not None:
                changes["state"] = effect.state
            if effect.transition_to is not None:
                changes["step"] = effect.transition_to
                changes["finished"] = False
                changes["history"] = [*instance.history, effect.transition_to]
                if instance.started_at is None:
                    changes["started_at"] = now
            await self._commit(component, instance, changes)

        if effect.transition_to is not None:
            self._launch(component, instance)
        return effect.reply

    async def _read_workflow(
        self,
        component_id: str,
        workflow_id: str,
        handler: Callable[..., R],
        args: tuple[Any, ...],
    ) -> R:
        component = self.registry.get_workflow(component_id)
        instance = self._workflows.get((component_id, workflow_id))
        if instance is None:
            async with self._lock((component_id, workflow_id)):
                instance = await self._load_workflow(component, workflow_id)
        return handler(component, CommandContext(workflow_id, instance.state, self.clock.now()), *args)

    def _launch(self, component: WorkflowComponent[Any], instance: WorkflowInstance[Any]) -> None:
        key = (instance.component_id, instance.workflow_id)
        running = self._running.get(key)
        if running is not None and not running.done():
            return
        task = asyncio.create_task(
            self._run_workflow(component, instance),
            name=f"workflow:{instance.component_id}/{instance.workflow_id}",
        )
        self._running[key] = task

    async def _run_workflow(self, component: WorkflowComponent[Any], instance: WorkflowInstance[Any]) -> None:
        """Main workflow execution loop.

        Awaits one step outcome at a time and applies the matching transition
        under the identity's lock before the next action starts.

        Args:
            component: The workflow component.
            instance: The cached instance to drive.
        """
        definition = self.registry.get_definition(component.component_id)
        key = (instance.component_id, instance.workflow_id)

        try:
            while True:
                step_name = instance.step
                if step_name is None or instance.finished:
                    break
                outcome, workflow_timed_out = await self._invoke_step(definition, definition.steps[step_name], instance)

                async with self._lock(key):
                    if instance.step != step_name or instance.finished:
                        continue
                    now = self.clock.now()
                    state = instance.state
                    if not workflow_timed_out and step_name != definition.failover_step:
                        workflow_timed_out = self._budget_left(definition, instance, now) <= 0

                    if workflow_timed_out:
                        logger.error(
                            "Workflow %s/%s timed out in step %s",
                            instance.component_id,
                            instance.workflow_id,
                            step_name,
                        )
                        next_step = definition.failover_step
                    else:
                        transition = definition.resolve(step_name, outcome)
                        state = transition.update(instance.state, outcome, now)
                        next_step = transition.next_step
                        if isinstance(outcome, Failure):
                            logger.warning(
                                "Step %s of %s/%s failed: %s",
                                step_name,
                                instance.component_id,
                                instance.workflow_id,
                                outcome.message,
                            )

                    if next_step is None:
                        await self._commit(component, instance, {"state": state, "step": None, "finished": True})
                        logger.info("Workflow %s/%s ended", instance.component_id, instance.workflow_id)
                    else:
                        await self._commit(
                            component,
                            instance,
                            {"state": state, "step": next_step, "history": [*instance.history, next_step]},
                        )
                        logger.info(
                            "Workflow %s/%s moving from %s to %s",
                            instance.component_id,
                            instance.workflow_id,
                            step_name,
                            next_step,
                        )
        except Exception:
            logger.exception("Driver of workflow %s/%s crashed", instance.component_id, instance.workflow_id)
            raise
        finally:
            if self._running.get(key) is asyncio.current_task():
                del self._running[key]
            lock = self._locks.get(key)
            if instance.finished and lock is not None and not lock.locked():
                del self._locks[key]

    def _budget_left(self, definition: WorkflowDef[Any], instance: WorkflowInstance[Any], now: datetime) -> float:
        started_at = instance.started_at or now
        return (definition.timeout - (now - started_at)).total_seconds()

    async def _invoke_step(
        self,
        definition: WorkflowDef[Any],
        step: StepDef[Any],
        instance: WorkflowInstance[Any],
    ) -> tuple[StepOutcome, bool]:
        """Invoke a step action and wait for its outcome.

        Returns:
            The outcome and whether the workflow timeout expired while waiting.
        """
        if step.action is None:
            return Success(), False

        step_timeout = definition.step_timeout(step.name).total_seconds()
        bounded_by_workflow = False
        wait = step_timeout
        if step.name != definition.failover_step:
            budget = self._budget_left(definition, instance, self.clock.now())
            if budget <= 0:
                return Failure.timeout(), True
            if budget < step_timeout:
                wait = budget
                bounded_by_workflow = True

        task = asyncio.ensure_future(step.action(instance.state))
        try:
            done, _ = await asyncio.wait({task}, timeout=wait)
        except asyncio.CancelledError:
            task.cancel()
            raise

        if task not in done:
            self._detach(task)
            logger.warning(
                "Step %s of %s/%s timed out after %.3fs",
                step.name,
                instance.component_id,
                instance.workflow_id,
                wait,
            )
            return Failure.timeout(), bounded_by_workflow

        if task.cancelled():
            return Failure.of("cancelled"), False
        error = task.exception()
        if error is not None:
            logger.warning("Step %s of %s/%s raised %r", step.name, instance.component_id, instance.workflow_id, error)
            return Failure.of(str(error) or type(error).__name__), False
        return task.result(), False

    def _detach(self, task: asyncio.Task[Any]) -> None:
        self._detached.add(task)
        task.add_done_callback(self._reap)

    def _reap(self, task: asyncio.Task[Any]) -> None:
        self._detached.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.debug("Detached step action finished with %r", task.exception())

    async def wait_for(self, component_id: str, workflow_id: str) -> WorkflowInstance[Any]:
        """Wait for the driver of a workflow to become idle.

        Args:
            component_id: The workflow component id.
            workflow_id: The workflow identity.

        Returns:
            The cached workflow instance.

        Raises:
            KeyError: If the workflow was never referenced.
        """
        key = (component_id, workflow_id)
        task = self._running.get(key)
        if task is not None:
            await asyncio.shield(task)
        if key not in self._workflows:
            msg = f"Workflow {component_id}/{workflow_id} not found"
            raise KeyError(msg)
        return self._workflows[key]

    async def recover(self) -> int:
        """Resume every unfinished workflow from its persisted snapshot.

        The step recorded in the snapshot is invoked again, so a step whose
        action was in flight when the process stopped runs at least twice.

        Returns:
            Number of workflows resumed.
        """
        resumed = 0
        for component in self.registry.list_workflows():
            for record in await self.snapshots.list_unfinished(component.component_id):
                key = (record.component_id, record.workflow_id)
                running = self._running.get(key)
                if running is not None and not running.done():
                    continue
                async with self._lock(key):
                    instance = self._instance_from_record(component, record)
                    self._workflows[key] = instance
                self._launch(component, instance)
                resumed += 1
                logger.info("Resumed workflow %s/%s at step %s", record.component_id, record.workflow_id, record.step)
        return resumed

    def get_running_workflows(self) -> list[WorkflowInstance[Any]]:
        """Get all workflow instances whose driver is active."""
        return [self._workflows[key] for key, task in self._running.items() if not task.done()]

    async def shutdown(self) -> None:
        """Cancel workflow drivers and detached step actions.

        Persisted snapshots are left untouched so :meth:`recover` can resume
        the workflows later.
        """
        tasks = [*self._running.values(), *self._detached]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._running.clear()
        self._detached.clear()
