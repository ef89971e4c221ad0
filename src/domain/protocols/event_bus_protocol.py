"""Event bus protocol (port) for domain events.

Architecture:
    - Protocol (structural typing, NOT ABC inheritance)
    - Domain layer defines the interface (port)
    - Infrastructure layer implements adapters (InMemoryEventBus)
    - Container (src/core/container/events.py) provides the factory function

Usage:
    >>> event_bus = get_event_bus()
    >>> event_bus.subscribe(CloudProvidersChanged, handler.handle)
    >>> await event_bus.publish(CloudProvidersChanged(...))
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

from src.domain.events.base_event import DomainEvent

# Type alias for event handler functions
EventHandler = Callable[[DomainEvent], Awaitable[None]]


class EventBusProtocol(Protocol):
    """Protocol for event bus implementations.

    Key Requirements:
        - Multiple handlers per event type
        - Handlers run concurrently
        - Fail-open: one failing handler never affects the others or the
          publisher
    """

    def subscribe(
        self,
        event_type: type[DomainEvent],
        handler: EventHandler,
    ) -> None:
        """Register a handler for an event type.

        Args:
            event_type: Concrete DomainEvent subclass to listen for.
            handler: Async callable invoked with the event.
        """
        ...

    async def publish(self, event: DomainEvent) -> None:
        """Publish an event to all handlers registered for its type.

        Never raises. No handlers registered is a no-op.

        Args:
            event: Event instance to deliver.
        """
        ...
