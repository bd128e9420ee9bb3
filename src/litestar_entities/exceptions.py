"""Exception hierarchy for litestar-entities."""

from __future__ import annotations

__all__ = (
    "AlreadyCheckedOutError",
    "AlreadyRunningError",
    "ComponentNotFoundError",
    "ConcurrencyConflictError",
    "ConflictError",
    "DomainError",
    "EntitiesError",
    "InvalidQuantityError",
    "InvalidTemperatureError",
    "InvalidTransitionError",
    "MissingProgramError",
    "NoActiveCycleError",
    "ValidationError",
    "WorkflowValidationError",
)


class EntitiesError(Exception):
    """Base exception for all litestar-entities errors.

    All exceptions raised by litestar-entities inherit from this class.
    This allows users to catch all entity and workflow errors with a single except clause.
    """


class DomainError(EntitiesError):
    """Base exception for command rejections.

    Domain errors are raised synchronously by command handlers. A rejected
    command never changes state and never appends an event.
    """


class ValidationError(DomainError):
    """Raised when command input is malformed."""


class ConflictError(DomainError):
    """Raised when a command is invalid given the current lifecycle state."""


class InvalidTemperatureError(ValidationError):
    """Raised when a washing cycle is started with an out of range temperature.

    Attributes:
        temperature: The rejected temperature.
        minimum: Lowest accepted temperature.
        maximum: Highest accepted temperature.
    """

    def __init__(self, temperature: int, minimum: int = 0, maximum: int = 95) -> None:
        """Initialize the exception with the rejected temperature.

        Args:
            temperature: The rejected temperature.
            minimum: Lowest accepted temperature.
            maximum: Highest accepted temperature.
        """
        self.temperature = temperature
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(f"Invalid temperature {temperature}. Must be between {minimum} and {maximum}°C")


class MissingProgramError(ValidationError):
    """Raised when a washing cycle is started without a program."""

    def __init__(self) -> None:
        """Initialize the exception."""
        super().__init__("Program must be specified")


class InvalidQuantityError(ValidationError):
    """Raised when a line item is created with a non-positive quantity.

    Attributes:
        product_id: The product of the rejected line item.
        quantity: The rejected quantity.
    """

    def __init__(self, product_id: str, quantity: int) -> None:
        """Initialize the exception with line item details.

        Args:
            product_id: The product of the rejected line item.
            quantity: The rejected quantity.
        """
        self.product_id = product_id
        self.quantity = quantity
        super().__init__(f"Quantity for product '{product_id}' must be positive, got {quantity}")


class AlreadyCheckedOutError(ConflictError):
    """Raised when a checked-out cart receives a mutating command.

    Attributes:
        cart_id: The ID of the checked-out cart.
    """

    def __init__(self, cart_id: str) -> None:
        """Initialize the exception with cart details.

        Args:
            cart_id: The ID of the checked-out cart.
        """
        self.cart_id = cart_id
        super().__init__(f"Shopping cart '{cart_id}' has already been checked-out")


class AlreadyRunningError(ConflictError):
    """Raised when a cycle is started on a machine that already has one.

    Attributes:
        cycle_id: The ID of the existing cycle.
        status: The status of the existing cycle.
    """

    def __init__(self, cycle_id: str, status: str) -> None:
        """Initialize the exception with cycle details.

        Args:
            cycle_id: The ID of the existing cycle.
            status: The status of the existing cycle.
        """
        self.cycle_id = cycle_id
        self.status = status
        super().__init__(f"Washing machine '{cycle_id}' is already running. Current status: {status}")


class NoActiveCycleError(DomainError):
    """Raised when the status of a machine without a cycle is requested.

    Attributes:
        cycle_id: The ID of the machine.
    """

    def __init__(self, cycle_id: str) -> None:
        """Initialize the exception with machine details.

        Args:
            cycle_id: The ID of the machine.
        """
        self.cycle_id = cycle_id
        super().__init__(f"No washing cycle in progress for '{cycle_id}'")


class ComponentNotFoundError(EntitiesError):
    """Raised when a component is not registered with the engine.

    Attributes:
        component_id: The ID of the component that was not found.
    """

    def __init__(self, component_id: str) -> None:
        """Initialize the exception with component details.

        Args:
            component_id: The ID of the component that was not found.
        """
        self.component_id = component_id
        super().__init__(f"Component '{component_id}' not found")


class InvalidTransitionError(EntitiesError):
    """Raised when the transition table has no row for a step outcome.

    Attributes:
        step_name: The step that produced the outcome.
        outcome: The kind of outcome that could not be routed.
    """

    def __init__(self, step_name: str, outcome: str, reason: str | None = None) -> None:
        """Initialize the exception with transition details.

        Args:
            step_name: The step that produced the outcome.
            outcome: The kind of outcome that could not be routed.
            reason: Additional context about why the transition is invalid.
        """
        self.step_name = step_name
        self.outcome = outcome
        msg = f"No transition from step '{step_name}' on '{outcome}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class WorkflowValidationError(EntitiesError):
    """Raised when workflow definition validation fails.

    Attributes:
        errors: List of validation error messages.
    """

    def __init__(self, errors: list[str]) -> None:
        """Initialize the exception with validation errors.

        Args:
            errors: List of validation error messages.
        """
        self.errors = errors
        super().__init__(f"Workflow validation failed: {'; '.join(errors)}")


class ConcurrencyConflictError(EntitiesError):
    """Raised when an event is appended with an already used sequence number.

    Attributes:
        component_id: The component of the entity.
        entity_id: The entity identity.
        seq_nr: The conflicting sequence number.
    """

    def __init__(self, component_id: str, entity_id: str, seq_nr: int) -> None:
        """Initialize the exception with journal details.

        Args:
            component_id: The component of the entity.
            entity_id: The entity identity.
            seq_nr: The conflicting sequence number.
        """
        self.component_id = component_id
        self.entity_id = entity_id
        self.seq_nr = seq_nr
        super().__init__(f"Event {seq_nr} for '{component_id}/{entity_id}' has already been persisted")
