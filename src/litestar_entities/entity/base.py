"""Base class for event-sourced entity components."""

from __future__ import annotations

from abc import ABC, abstractmethod
from functools import reduce
from typing import TYPE_CHECKING, ClassVar, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Iterable

    from litestar_entities.core.types import Payload

__all__ = ["EventSourcedEntity"]

S = TypeVar("S")
E = TypeVar("E")


class EventSourcedEntity(ABC, Generic[S, E]):
    """Base implementation for event-sourced entities.

    Subclasses define the empty state, the event reducer and the event codec.
    Command handlers are plain methods taking the current state and the
    command arguments; they return the single event to persist or raise a
    :class:`~litestar_entities.exceptions.DomainError`. Read handlers take the
    state and return a projection of it.

    The engine never calls a command handler and the reducer concurrently for
    the same identity.
    """

    component_id: ClassVar[str]
    """Stable identifier of the component type."""

    @abstractmethod
    def empty_state(self, entity_id: str) -> S:
        """Return the state of an entity that has no events yet.

        Args:
            entity_id: Identity of the entity.

        Returns:
            The zero value of the state. Must depend on the identity alone.
        """

    @abstractmethod
    def apply_event(self, state: S, event: E) -> S:
        """Fold one event into the state.

        This runs both for newly persisted events and during replay, so it
        must be pure.

        Args:
            state: The state before the event.
            event: The event to apply.

        Returns:
            The state after the event.
        """

    @abstractmethod
    def serialize_event(self, event: E) -> Payload:
        """Encode an event for the journal."""

    @abstractmethod
    def deserialize_event(self, data: Payload) -> E:
        """Decode an event read from the journal."""

    def replay(self, entity_id: str, events: Iterable[E]) -> S:
        """Rebuild the state of an entity from its event history.

        Args:
            entity_id: Identity of the entity.
            events: The entity's events in log order.

        Returns:
            The state obtained by applying every event to the empty state.
        """
        return reduce(self.apply_event, events, self.empty_state(entity_id))
