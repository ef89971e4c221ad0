"""Event bus dependency factory.

Application-scoped singleton for domain event publishing. Subscribes all
event handlers at creation time.
"""

from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.domain.protocols.event_bus_protocol import EventBusProtocol
    from src.infrastructure.events.handlers.data_sync_event_handler import (
        DataSyncEventHandler,
    )


@lru_cache()
def get_data_sync_handler() -> "DataSyncEventHandler":
    """Get the post-connect data sync handler (app-scoped).

    A singleton so shutdown can cancel the sync requests it still runs.
    """
    from src.core.container.infrastructure import get_backend_client, get_logger
    from src.infrastructure.events.handlers.data_sync_event_handler import (
        DataSyncEventHandler,
    )

    return DataSyncEventHandler(backend=get_backend_client(), logger=get_logger())


@lru_cache()
def get_event_bus() -> "EventBusProtocol":
    """Get event bus singleton (app-scoped).

    Adapter chosen by settings.event_bus_type:
        - 'in-memory': InMemoryEventBus

    Subscriptions:
        CloudProvidersChanged → LoggingEventHandler, DataSyncEventHandler

    Returns:
        Event bus implementing EventBusProtocol.

    Raises:
        ValueError: If event_bus_type is not supported.
    """
    from src.core.config import get_settings
    from src.core.container.infrastructure import get_logger
    from src.domain.events.cloud_provider_events import CloudProvidersChanged
    from src.infrastructure.events.handlers.logging_event_handler import (
        LoggingEventHandler,
    )
    from src.infrastructure.events.in_memory_event_bus import InMemoryEventBus

    settings = get_settings()

    if settings.event_bus_type == "in-memory":
        event_bus = InMemoryEventBus(logger=get_logger())
    else:
        raise ValueError(
            f"Unsupported EVENT_BUS_TYPE: {settings.event_bus_type}. "
            "Supported: 'in-memory'"
        )

    logging_handler = LoggingEventHandler(logger=get_logger())
    data_sync_handler = get_data_sync_handler()

    event_bus.subscribe(
        CloudProvidersChanged,
        logging_handler.handle_cloud_providers_changed,
    )
    event_bus.subscribe(
        CloudProvidersChanged,
        data_sync_handler.handle_cloud_providers_changed,
    )

    return event_bus
