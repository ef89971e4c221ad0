"""Application DTOs."""

from src.application.dtos.connection_dtos import ConnectionRequest, WorkflowSnapshot

__all__ = [
    "ConnectionRequest",
    "WorkflowSnapshot",
]
