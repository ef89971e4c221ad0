"""Orphan cleanup service.

Earlier abandoned attempts for the same account may have left provisioning
resources behind. Before a new initiation we ask the backend to remove them.
This is best effort: it never fails and never blocks initiation.
"""

from src.core.result import Failure
from src.domain.protocols.cloud_connection_backend_protocol import (
    CloudConnectionBackendProtocol,
)
from src.domain.protocols.logger_protocol import LoggerProtocol


class OrphanCleanupService:
    """Best-effort removal of resources from abandoned attempts.

    Attributes:
        _backend: Backend port.
        _logger: Logger for cleanup failures.
    """

    def __init__(
        self,
        backend: CloudConnectionBackendProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._backend = backend
        self._logger = logger

    async def cleanup(self, external_account_id: str, connection_name: str) -> None:
        """Request cleanup; failures are logged and swallowed.

        Args:
            external_account_id: Account the next initiation targets.
            connection_name: Normalized name of the next initiation.
        """
        try:
            result = await self._backend.cleanup_orphaned_resources(
                external_account_id=external_account_id,
                connection_name=connection_name,
            )
        except Exception as e:
            self._logger.warning(
                "orphan_cleanup_crashed",
                connection_name=connection_name,
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return

        if isinstance(result, Failure):
            self._logger.warning(
                "orphan_cleanup_failed",
                connection_name=connection_name,
                error_code=result.error.code.value,
                error_message=result.error.message,
            )
            return

        self._logger.debug("orphan_cleanup_completed", connection_name=connection_name)
