"""Container module - Centralized dependency injection.

Re-exports all factory functions from submodules:

    from src.core.container import get_logger, get_workflow_registry

Modules:
- infrastructure: Logging and backend API client
- events: Event bus and subscriptions
- workflows: Connection workflow factories and registry
"""

from src.core.container.events import get_data_sync_handler, get_event_bus
from src.core.container.infrastructure import get_backend_client, get_logger
from src.core.container.workflows import (
    create_connection_controller,
    get_workflow_registry,
)

__all__ = [
    # Infrastructure
    "get_backend_client",
    "get_logger",
    # Events
    "get_data_sync_handler",
    "get_event_bus",
    # Workflows
    "create_connection_controller",
    "get_workflow_registry",
]
