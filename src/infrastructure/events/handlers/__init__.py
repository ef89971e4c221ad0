"""Event handlers wired to the event bus by the container."""

from src.infrastructure.events.handlers.data_sync_event_handler import (
    DataSyncEventHandler,
)
from src.infrastructure.events.handlers.logging_event_handler import (
    LoggingEventHandler,
)

__all__ = [
    "DataSyncEventHandler",
    "LoggingEventHandler",
]
