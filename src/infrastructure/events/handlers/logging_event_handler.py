"""Logging event handler for domain events.

Structured log line for every cloud-provider change so operators can follow
new connections without reading backend logs.
"""

from src.domain.events.cloud_provider_events import CloudProvidersChanged
from src.domain.protocols.logger_protocol import LoggerProtocol


class LoggingEventHandler:
    """Event handler for structured logging of domain events.

    Attributes:
        _logger: Logger protocol implementation (from container).
    """

    def __init__(self, logger: LoggerProtocol) -> None:
        self._logger = logger

    async def handle_cloud_providers_changed(self, event: CloudProvidersChanged) -> None:
        """Log a newly recorded cloud-account connection."""
        self._logger.info(
            "cloud_providers_changed",
            event_id=str(event.event_id),
            occurred_at=event.occurred_at.isoformat(),
            workflow_id=str(event.workflow_id),
            connection_id=event.connection_id,
            connection_name=event.connection_name,
            external_account_id=event.external_account_id,
            kind=event.kind,
        )
