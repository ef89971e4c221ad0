"""Domain entities for the connection workflow.

Pure business logic entities with no framework dependencies.
"""

from src.domain.entities.connection_intent import ConnectionIntent
from src.domain.entities.connection_record import ConnectionRecord
from src.domain.entities.polling_session import PollingSession

__all__ = [
    "ConnectionIntent",
    "ConnectionRecord",
    "PollingSession",
]
