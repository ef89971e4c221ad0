"""In-process event bus.

Connection workflows live in one process, so their events do too. The bus
dispatches each event to the handlers subscribed for its exact class and
runs them concurrently. A failing handler is logged and never reaches the
publisher: a connected workflow stays connected even when the follow-up
data sync or audit logging breaks.

Usage:
    >>> bus = InMemoryEventBus(logger=get_logger())
    >>> bus.subscribe(CloudProvidersChanged, sync_handler.handle_cloud_providers_changed)
    >>> await bus.publish(CloudProvidersChanged(...))
"""

import asyncio
from collections import defaultdict

from src.domain.events.base_event import DomainEvent
from src.domain.protocols.event_bus_protocol import EventHandler
from src.domain.protocols.logger_protocol import LoggerProtocol


def _handler_name(handler: EventHandler) -> str:
    return getattr(handler, "__name__", None) or repr(handler)


class InMemoryEventBus:
    """EventBusProtocol adapter backed by a dict of handler lists.

    Single event loop only; not thread-safe.
    """

    def __init__(self, logger: LoggerProtocol) -> None:
        self._subscriptions: defaultdict[type[DomainEvent], list[EventHandler]] = (
            defaultdict(list)
        )
        self._logger = logger

    def subscribe(
        self,
        event_type: type[DomainEvent],
        handler: EventHandler,
    ) -> None:
        """Call ``handler`` for every published ``event_type`` (subclasses excluded)."""
        self._subscriptions[event_type].append(handler)

    def handler_count(self, event_type: type[DomainEvent]) -> int:
        """Number of handlers subscribed to an event class."""
        return len(self._subscriptions.get(event_type, ()))

    async def publish(self, event: DomainEvent) -> None:
        """Run every subscribed handler; failures are logged, not raised."""
        handlers = tuple(self._subscriptions.get(type(event), ()))
        if not handlers:
            return

        log = self._logger.bind(
            event_type=type(event).__name__,
            event_id=str(event.event_id),
        )
        log.debug("event_dispatching", handler_count=len(handlers))

        outcomes = await asyncio.gather(
            *(handler(event) for handler in handlers),
            return_exceptions=True,
        )

        for handler, outcome in zip(handlers, outcomes, strict=True):
            if isinstance(outcome, Exception):
                log.warning(
                    "event_handler_failed",
                    handler_name=_handler_name(handler),
                    error_type=type(outcome).__name__,
                    error_message=str(outcome),
                )
