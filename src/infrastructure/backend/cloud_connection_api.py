"""Cloud-connection backend API client.

Implements CloudConnectionBackendProtocol against the cost-dashboard backend
REST API. Request bodies use the backend's camelCase field names.

Endpoints:
    POST /cloud-providers/aws/automated                   initiate
    GET  /cloud-providers/aws/automated/{token}/status    cheap status check
    POST /cloud-providers/aws/automated/verify            verify + create record
    POST /cloud-providers/aws/automated/cleanup           orphan cleanup
    POST /sync                                            data sync
"""

from typing import Any
from urllib.parse import quote

from src.core.result import Result
from src.domain.errors import BackendError
from src.infrastructure.backend.base_api_client import BaseBackendAPIClient

AUTOMATED_CONNECTION_PATH = "/cloud-providers/aws/automated"


class CloudConnectionAPIClient(BaseBackendAPIClient):
    """httpx adapter for the automated connection endpoints.

    Example:
        >>> client = CloudConnectionAPIClient(base_url="http://localhost:3001/api")
        >>> result = await client.check_connection_status("a1b2c3")
    """

    async def initiate_automated_connection(
        self,
        *,
        connection_name: str,
        external_account_id: str,
        kind: str,
    ) -> Result[dict[str, Any], BackendError]:
        """Start an automated connection and receive the console link."""
        return await self._execute_and_parse_object(
            method="POST",
            path=AUTOMATED_CONNECTION_PATH,
            json_data={
                "connectionName": connection_name,
                "awsAccountId": external_account_id,
                "connectionType": kind,
            },
            operation="initiate_automated_connection",
        )

    async def check_connection_status(
        self,
        correlation_token: str,
    ) -> Result[dict[str, Any], BackendError]:
        """Read the push-confirmation status recorded for a token."""
        return await self._execute_and_parse_object(
            method="GET",
            path=f"{AUTOMATED_CONNECTION_PATH}/{quote(correlation_token, safe='')}/status",
            operation="check_connection_status",
        )

    async def verify_and_create_connection(
        self,
        *,
        connection_name: str,
        external_account_id: str,
        trust_role_identifier: str,
        correlation_token: str,
        kind: str,
    ) -> Result[dict[str, Any], BackendError]:
        """Verify the provisioned role; the backend creates the record once."""
        return await self._execute_and_parse_object(
            method="POST",
            path=f"{AUTOMATED_CONNECTION_PATH}/verify",
            json_data={
                "connectionName": connection_name,
                "awsAccountId": external_account_id,
                "roleArn": trust_role_identifier,
                "externalId": correlation_token,
                "connectionType": kind,
            },
            operation="verify_and_create_connection",
        )

    async def cleanup_orphaned_resources(
        self,
        *,
        external_account_id: str,
        connection_name: str,
    ) -> Result[None, BackendError]:
        """Remove resources left behind by earlier abandoned attempts."""
        return await self._execute_and_check(
            method="POST",
            path=f"{AUTOMATED_CONNECTION_PATH}/cleanup",
            json_data={
                "awsAccountId": external_account_id,
                "connectionName": connection_name,
            },
            operation="cleanup_orphaned_resources",
        )

    async def request_data_sync(self) -> Result[None, BackendError]:
        """Trigger a background refresh of cost data."""
        return await self._execute_and_check(
            method="POST",
            path="/sync",
            operation="request_data_sync",
        )
