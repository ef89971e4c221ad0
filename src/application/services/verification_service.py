"""Verification service.

The single authoritative path that creates a connection record. The backend
checks that the provisioned role can be assumed and records the connection;
it is idempotent per correlation token, so the automatic fallback and a
manual "verify" racing each other still yield one record.

Failure mapping:
    BackendRejectedError, BackendUnavailableError, BackendRateLimitError
        → VerificationPendingError (wait and retry)
    BackendAuthenticationError, BackendInvalidResponseError, unusable payload
        → CloudConnectionError (hard failure)
"""

from typing import Any

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.entities.connection_intent import ConnectionIntent
from src.domain.entities.connection_record import ConnectionRecord
from src.domain.errors import (
    BackendError,
    BackendRateLimitError,
    BackendRejectedError,
    BackendUnavailableError,
    CloudConnectionError,
    VerificationPendingError,
)
from src.domain.protocols.cloud_connection_backend_protocol import (
    CloudConnectionBackendProtocol,
)
from src.domain.protocols.logger_protocol import LoggerProtocol

_RECORD_ID_KEYS = ("id", "connectionId", "accountId")


def _find_record_id(payload: dict[str, Any]) -> str | None:
    for key in _RECORD_ID_KEYS:
        value = payload.get(key)
        if isinstance(value, str | int) and not isinstance(value, bool) and str(value):
            return str(value)
    return None


def record_from_payload(
    payload: dict[str, Any],
    intent: ConnectionIntent,
) -> ConnectionRecord | None:
    """Build a ConnectionRecord from a backend payload.

    Accepts the record at the top level or nested under ``connection`` or
    ``account``. Missing name/account fields fall back to the intent.

    Returns:
        ConnectionRecord, or None when the payload carries no record id.
    """
    for nested_key in ("connection", "account"):
        nested = payload.get(nested_key)
        if isinstance(nested, dict):
            payload = nested
            break

    record_id = _find_record_id(payload)
    if record_id is None:
        return None

    name = payload.get("connectionName") or payload.get("name")
    account = payload.get("awsAccountId") or payload.get("externalAccountId")
    status = payload.get("status")
    return ConnectionRecord(
        id=record_id,
        connection_name=name if isinstance(name, str) and name else intent.connection_name,
        external_account_id=(
            account if isinstance(account, str) and account else intent.external_account_id
        ),
        status=status if isinstance(status, str) else None,
    )


class VerificationService:
    """Verifies provisioning and creates the connection record.

    Attributes:
        _backend: Backend port.
        _logger: Structured logger.
    """

    def __init__(
        self,
        backend: CloudConnectionBackendProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._backend = backend
        self._logger = logger

    async def verify(
        self,
        intent: ConnectionIntent,
    ) -> Result[ConnectionRecord, VerificationPendingError | CloudConnectionError]:
        """Verify the external step and create the record at most once.

        Safe to call concurrently for the same intent.

        Args:
            intent: Intent whose provisioning should be verified.

        Returns:
            Success(ConnectionRecord): Connection exists.
            Failure(VerificationPendingError): Not ready yet; retry later.
            Failure(CloudConnectionError): Hard failure.
        """
        log = self._logger.bind(token_prefix=intent.token_prefix)

        result = await self._backend.verify_and_create_connection(
            connection_name=intent.connection_name,
            external_account_id=intent.external_account_id,
            trust_role_identifier=intent.trust_role_identifier,
            correlation_token=intent.correlation_token,
            kind=intent.kind.verification_type,
        )

        match result:
            case Failure(error=error):
                return Failure(error=self._map_backend_error(error, log))
            case Success(value=payload):
                record = record_from_payload(payload, intent)
                if record is None:
                    log.error("verification_response_missing_record")
                    return Failure(
                        error=CloudConnectionError(
                            code=ErrorCode.CONNECTION_FAILED,
                            message="Backend verified the connection but returned no record",
                            reason="missing connection record",
                        )
                    )
                log.info("verification_succeeded", connection_id=record.id)
                return Success(value=record)

    @staticmethod
    def _map_backend_error(
        error: BackendError,
        log: LoggerProtocol,
    ) -> VerificationPendingError | CloudConnectionError:
        if isinstance(
            error, BackendRejectedError | BackendUnavailableError | BackendRateLimitError
        ):
            log.info(
                "verification_pending",
                error_code=error.code.value,
                error_message=error.message,
            )
            return VerificationPendingError(
                code=ErrorCode.VERIFICATION_PENDING,
                message=error.message,
            )

        log.warning(
            "verification_failed",
            error_code=error.code.value,
            error_message=error.message,
        )
        return CloudConnectionError(
            code=ErrorCode.CONNECTION_FAILED,
            message=error.message,
            reason=error.code.value,
        )
