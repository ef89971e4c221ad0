"""Connection initiation service.

Turns a validated ConnectionRequest into a ConnectionIntent by asking the
backend to start an automated connection. Never creates a connection record.

Flow:
    1. Re-validate the account id (no network call for bad input)
    2. Best-effort orphan cleanup (awaited, never fails)
    3. initiate_automated_connection
    4. Map the payload to a ConnectionIntent, or the failure to
       ConfigurationError / InitiationError
"""

from typing import Any

from src.application.dtos.connection_dtos import ConnectionRequest
from src.application.services.connection_request_builder import (
    validate_external_account_id,
)
from src.application.services.orphan_cleanup_service import OrphanCleanupService
from src.core.enums import ErrorCode
from src.core.errors import ValidationError
from src.core.result import Failure, Result, Success
from src.domain.entities.connection_intent import ConnectionIntent
from src.domain.enums import ConnectionKind
from src.domain.errors import (
    BackendError,
    BackendRateLimitError,
    BackendUnavailableError,
    ConfigurationError,
    InitiationError,
)
from src.domain.protocols.cloud_connection_backend_protocol import (
    CloudConnectionBackendProtocol,
)
from src.domain.protocols.logger_protocol import LoggerProtocol

type InitiationFailure = ValidationError | ConfigurationError | InitiationError


def is_template_not_configured(message: str | None) -> bool:
    """Detect the backend's "provisioning template not configured" failure."""
    text = (message or "").lower()
    return "template" in text and "not configured" in text


def _required_text(payload: dict[str, Any], key: str) -> str | None:
    value = payload.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


class ConnectionInitiationService:
    """Starts automated connections.

    Attributes:
        _backend: Backend port.
        _cleanup: Orphan cleanup run before each initiation.
        _logger: Structured logger.
        _default_kind: Kind used when the caller does not pass one.
    """

    def __init__(
        self,
        backend: CloudConnectionBackendProtocol,
        cleanup_service: OrphanCleanupService,
        logger: LoggerProtocol,
        default_kind: ConnectionKind = ConnectionKind.BILLING,
    ) -> None:
        self._backend = backend
        self._cleanup = cleanup_service
        self._logger = logger
        self._default_kind = default_kind

    async def initiate(
        self,
        request: ConnectionRequest,
        *,
        kind: ConnectionKind | None = None,
    ) -> Result[ConnectionIntent, InitiationFailure]:
        """Initiate an automated connection.

        Args:
            request: Output of ConnectionRequestBuilder.
            kind: Connection kind; defaults to the service default.

        Returns:
            Success(ConnectionIntent): User can open the console link.
            Failure(ValidationError): Account id invalid; nothing was sent.
            Failure(ConfigurationError): Backend has no provisioning template.
            Failure(InitiationError): Any other initiation failure.
        """
        account_result = validate_external_account_id(request.external_account_id)
        if isinstance(account_result, Failure):
            return account_result

        connection_kind = kind or self._default_kind
        log = self._logger.bind(
            connection_name=request.connection_name,
            kind=connection_kind.value,
        )

        await self._cleanup.cleanup(account_result.value, request.connection_name)

        log.info("connection_initiation_started")

        result = await self._backend.initiate_automated_connection(
            connection_name=request.connection_name,
            external_account_id=account_result.value,
            kind=connection_kind.value,
        )

        match result:
            case Failure(error=error):
                return Failure(error=self._map_backend_error(error, log))
            case Success(value=payload):
                return self._build_intent(payload, request, connection_kind, log)

    def _map_backend_error(
        self,
        error: BackendError,
        log: LoggerProtocol,
    ) -> ConfigurationError | InitiationError:
        if is_template_not_configured(error.message):
            log.error(
                "connection_initiation_misconfigured",
                error_message=error.message,
            )
            return ConfigurationError(
                code=ErrorCode.PROVISIONING_TEMPLATE_NOT_CONFIGURED,
                message="Provisioning template is not configured on the server",
                details={"backend_message": error.message},
            )

        is_transient = isinstance(error, BackendUnavailableError | BackendRateLimitError)
        log.warning(
            "connection_initiation_failed",
            error_code=error.code.value,
            error_message=error.message,
            is_transient=is_transient,
        )
        return InitiationError(
            code=ErrorCode.CONNECTION_INITIATION_FAILED,
            message=error.message,
            is_transient=is_transient,
        )

    def _build_intent(
        self,
        payload: dict[str, Any],
        request: ConnectionRequest,
        kind: ConnectionKind,
        log: LoggerProtocol,
    ) -> Result[ConnectionIntent, InitiationError]:
        token = _required_text(payload, "externalId")
        role = _required_text(payload, "roleArn")
        console_url = _required_text(payload, "quickCreateUrl")

        if token is None or role is None or console_url is None:
            missing = [
                key
                for key, value in (
                    ("externalId", token),
                    ("roleArn", role),
                    ("quickCreateUrl", console_url),
                )
                if value is None
            ]
            log.error("connection_initiation_incomplete_response", missing=missing)
            return Failure(
                error=InitiationError(
                    code=ErrorCode.CONNECTION_INITIATION_FAILED,
                    message="Backend returned an incomplete connection intent",
                    details={"missing": ", ".join(missing)},
                )
            )

        intent = ConnectionIntent(
            correlation_token=token,
            trust_role_identifier=role,
            provisioning_console_url=console_url,
            connection_name=_required_text(payload, "connectionName")
            or request.connection_name,
            external_account_id=_required_text(payload, "awsAccountId")
            or request.external_account_id,
            supports_push_confirmation=payload.get("hasCallback") is True,
            kind=kind,
        )

        log.info(
            "connection_initiation_succeeded",
            token_prefix=intent.token_prefix,
            supports_push_confirmation=intent.supports_push_confirmation,
        )
        return Success(value=intent)
