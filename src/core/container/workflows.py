"""Connection workflow factories.

Every workflow gets its own StatusPoller (one timer per workflow); the
backend client, event bus and logger are shared singletons.
"""

from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.application.services.connection_lifecycle_controller import (
        ConnectionLifecycleController,
    )
    from src.application.services.workflow_registry import WorkflowRegistry


def create_connection_controller() -> "ConnectionLifecycleController":
    """Build a new IDLE connection workflow wired to app singletons.

    Returns:
        ConnectionLifecycleController with a dedicated StatusPoller.
    """
    from src.application.services.connection_initiation_service import (
        ConnectionInitiationService,
    )
    from src.application.services.connection_lifecycle_controller import (
        ConnectionLifecycleController,
    )
    from src.application.services.connection_request_builder import (
        ConnectionRequestBuilder,
    )
    from src.application.services.orphan_cleanup_service import OrphanCleanupService
    from src.application.services.status_poller import StatusPoller
    from src.application.services.verification_service import VerificationService
    from src.core.config import get_settings
    from src.core.container.events import get_event_bus
    from src.core.container.infrastructure import get_backend_client, get_logger
    from src.domain.enums import ConnectionKind

    settings = get_settings()
    backend = get_backend_client()
    logger = get_logger()
    kind = ConnectionKind(settings.default_connection_kind)

    verification_service = VerificationService(backend=backend, logger=logger)
    poller = StatusPoller(
        backend=backend,
        verification_service=verification_service,
        logger=logger,
        interval_seconds=settings.poll_interval_seconds,
        max_attempts=settings.poll_max_attempts,
        fallback_verify_every=settings.fallback_verify_every,
    )
    initiation_service = ConnectionInitiationService(
        backend=backend,
        cleanup_service=OrphanCleanupService(backend=backend, logger=logger),
        logger=logger,
        default_kind=kind,
    )

    return ConnectionLifecycleController(
        request_builder=ConnectionRequestBuilder(),
        initiation_service=initiation_service,
        verification_service=verification_service,
        poller=poller,
        event_bus=get_event_bus(),
        logger=logger,
        kind=kind,
    )


@lru_cache()
def get_workflow_registry() -> "WorkflowRegistry":
    """Get the workflow registry singleton (app-scoped).

    Usage:
        # Presentation Layer (FastAPI Depends)
        registry: WorkflowRegistry = Depends(get_workflow_registry)
    """
    from src.application.services.workflow_registry import WorkflowRegistry
    from src.core.config import get_settings
    from src.core.container.infrastructure import get_logger

    settings = get_settings()
    return WorkflowRegistry(
        factory=create_connection_controller,
        logger=get_logger(),
        idle_ttl_seconds=settings.workflow_idle_ttl_seconds,
        max_workflows=settings.workflow_max_count,
    )
