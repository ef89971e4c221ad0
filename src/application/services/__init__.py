"""Application services for the automated connection workflow."""

from src.application.services.connection_initiation_service import (
    ConnectionInitiationService,
)
from src.application.services.connection_lifecycle_controller import (
    ConnectionLifecycleController,
)
from src.application.services.connection_request_builder import (
    ConnectionRequestBuilder,
    normalize_connection_name,
)
from src.application.services.orphan_cleanup_service import OrphanCleanupService
from src.application.services.status_poller import StatusPoller
from src.application.services.verification_service import VerificationService
from src.application.services.workflow_registry import WorkflowRegistry

__all__ = [
    "ConnectionInitiationService",
    "ConnectionLifecycleController",
    "ConnectionRequestBuilder",
    "OrphanCleanupService",
    "StatusPoller",
    "VerificationService",
    "WorkflowRegistry",
    "normalize_connection_name",
]
