"""Domain protocols (ports) package.

Infrastructure adapters implement these protocols without inheritance.

Usage:
    from src.domain.protocols import CloudConnectionBackendProtocol, LoggerProtocol
"""

from src.domain.protocols.cloud_connection_backend_protocol import (
    CloudConnectionBackendProtocol,
)
from src.domain.protocols.event_bus_protocol import EventBusProtocol, EventHandler
from src.domain.protocols.logger_protocol import LoggerProtocol

__all__ = [
    "CloudConnectionBackendProtocol",
    "EventBusProtocol",
    "EventHandler",
    "LoggerProtocol",
]
