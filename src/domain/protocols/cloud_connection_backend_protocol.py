"""Cloud-connection backend protocol (port).

The cost-dashboard backend owns provisioning templates, connection records
and data sync. This port lists the operations the connection workflow needs
from it. Payloads are returned as decoded JSON objects; interpreting them is
the application services' job.

Implementations:
    - CloudConnectionAPIClient: src/infrastructure/backend/cloud_connection_api.py

Idempotency:
    ``verify_and_create_connection`` MUST be idempotent for a given
    correlation token: concurrent or repeated calls yield at most one
    connection record.
"""

from typing import Any, Protocol

from src.core.result import Result
from src.domain.errors.backend_error import BackendError


class CloudConnectionBackendProtocol(Protocol):
    """Operations the backend exposes to the connection workflow."""

    async def initiate_automated_connection(
        self,
        *,
        connection_name: str,
        external_account_id: str,
        kind: str,
    ) -> Result[dict[str, Any], BackendError]:
        """Start an automated connection.

        Returns:
            Success(payload) with ``externalId``, ``roleArn``,
            ``quickCreateUrl`` and ``hasCallback`` fields.
        """
        ...

    async def check_connection_status(
        self,
        correlation_token: str,
    ) -> Result[dict[str, Any], BackendError]:
        """Cheap status check for a correlation token.

        Returns:
            Success(payload) with ``status`` in pending/connected/error and
            optionally ``error`` and ``connectionId``.
        """
        ...

    async def verify_and_create_connection(
        self,
        *,
        connection_name: str,
        external_account_id: str,
        trust_role_identifier: str,
        correlation_token: str,
        kind: str,
    ) -> Result[dict[str, Any], BackendError]:
        """Verify the provisioned role and create the connection record.

        Returns:
            Success(payload) describing the connection record.
        """
        ...

    async def cleanup_orphaned_resources(
        self,
        *,
        external_account_id: str,
        connection_name: str,
    ) -> Result[None, BackendError]:
        """Remove leftovers of earlier abandoned attempts."""
        ...

    async def request_data_sync(self) -> Result[None, BackendError]:
        """Ask the backend to refresh cost data for all connections."""
        ...
