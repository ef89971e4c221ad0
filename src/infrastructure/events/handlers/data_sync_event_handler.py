"""Data sync event handler.

When a new cloud account is connected, ask the backend to refresh cost data
right away instead of waiting for the next scheduled sync. The request runs
as a background task: the workflow reports CONNECTED without waiting for the
backend, and a sync failure is only logged.
"""

import asyncio

from src.core.result import Failure
from src.domain.events.cloud_provider_events import CloudProvidersChanged
from src.domain.protocols.cloud_connection_backend_protocol import (
    CloudConnectionBackendProtocol,
)
from src.domain.protocols.logger_protocol import LoggerProtocol


class DataSyncEventHandler:
    """Requests an out-of-band data sync on CloudProvidersChanged.

    Attributes:
        _backend: Backend port used to request the sync.
        _logger: Logger for sync outcomes.
        _pending: Sync requests still running; references keep the tasks
            alive until they finish.
    """

    def __init__(
        self,
        backend: CloudConnectionBackendProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._backend = backend
        self._logger = logger
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def pending_count(self) -> int:
        """Sync requests that have not finished yet."""
        return len(self._pending)

    async def handle_cloud_providers_changed(self, event: CloudProvidersChanged) -> None:
        """Start the sync request and return immediately."""
        task = asyncio.create_task(self._request_sync(event))
        self._pending.add(task)
        task.add_done_callback(self._on_sync_done)

    async def aclose(self) -> None:
        """Cancel outstanding sync requests (application shutdown)."""
        pending = list(self._pending)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    async def _request_sync(self, event: CloudProvidersChanged) -> None:
        log = self._logger.bind(
            event_id=str(event.event_id),
            workflow_id=str(event.workflow_id),
        )
        result = await self._backend.request_data_sync()

        if isinstance(result, Failure):
            log.warning(
                "data_sync_request_failed",
                error_code=result.error.code.value,
                error_message=result.error.message,
            )
            return

        log.info("data_sync_requested")

    def _on_sync_done(self, task: asyncio.Task[None]) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            self._logger.error("data_sync_task_crashed", error=error)
