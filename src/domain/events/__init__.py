"""Domain events.

Usage:
    from src.domain.events import CloudProvidersChanged, DomainEvent
"""

from src.domain.events.base_event import DomainEvent
from src.domain.events.cloud_provider_events import CloudProvidersChanged

__all__ = [
    "CloudProvidersChanged",
    "DomainEvent",
]
