"""Infrastructure event implementations.

Event Bus:
    - InMemoryEventBus: Fail-open in-process event bus

Event Handlers:
    - LoggingEventHandler: Structured logging of domain events
    - DataSyncEventHandler: Post-connect data sync request
"""

from src.infrastructure.events.in_memory_event_bus import InMemoryEventBus

__all__ = [
    "InMemoryEventBus",
]
