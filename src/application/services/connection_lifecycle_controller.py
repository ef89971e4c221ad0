"""Connection lifecycle controller.

Owns one automated-connection workflow and exposes it to a UI as
"current state + user-triggered transitions". Every failure ends up as a
state, never as an uncaught exception.

State machine (see WorkflowState for the full table):
    IDLE --submit--> INITIATING --intent--> AWAITING_EXTERNAL_STEP
    AWAITING_EXTERNAL_STEP --console opened--> POLLING
    POLLING --connected--> CONNECTED
    POLLING --error--> ERROR
    POLLING --timeout--> TIMED_OUT
    POLLING | TIMED_OUT | AWAITING_EXTERNAL_STEP --verify--> VERIFYING
    VERIFYING --success--> CONNECTED
    VERIFYING --pending--> state it came from
    VERIFYING --hard failure--> ERROR
    any active state --cancel--> IDLE
    ERROR | CONNECTED --reset--> IDLE

Guarantees:
    - CONNECTED is entered at most once per workflow and CloudProvidersChanged
      is published exactly once, even when automatic detection and a manual
      verification succeed together.
    - Leaving POLLING always stops the poller.
    - Results of operations overtaken by cancel/reset are discarded.
"""

from uuid import UUID

from uuid_extensions import uuid7

from src.application.dtos.connection_dtos import ConnectionRequest, WorkflowSnapshot
from src.application.services.connection_initiation_service import (
    ConnectionInitiationService,
)
from src.application.services.connection_request_builder import (
    ConnectionRequestBuilder,
)
from src.application.services.status_poller import StatusPoller
from src.application.services.verification_service import VerificationService
from src.core.enums import ErrorCode
from src.core.errors import ConflictError, DomainError, ValidationError
from src.core.result import Failure, Result, Success
from src.domain.entities.connection_intent import ConnectionIntent
from src.domain.entities.connection_record import ConnectionRecord
from src.domain.entities.polling_session import PollingSession
from src.domain.enums import ConnectionKind, WorkflowState
from src.domain.errors import (
    CloudConnectionError,
    ConfigurationError,
    InitiationError,
    VerificationPendingError,
)
from src.domain.events.cloud_provider_events import CloudProvidersChanged
from src.domain.protocols.event_bus_protocol import EventBusProtocol
from src.domain.protocols.logger_protocol import LoggerProtocol

MESSAGE_AWAITING_EXTERNAL_STEP = (
    "Open the provisioning console, create the stack, then come back here."
)
MESSAGE_POLLING = "Waiting for the provisioning stack to finish. This usually takes a few minutes."
MESSAGE_VERIFYING = "Verifying the connection..."
MESSAGE_CONNECTED = "Cloud account connected."
MESSAGE_TIMED_OUT = (
    "Automatic detection timed out. If the stack finished creating, "
    "click Verify Connection."
)
MESSAGE_PENDING = (
    "The connection is not ready yet. Make sure the stack finished creating, "
    "then try Verify Connection again."
)
MESSAGE_CONFIGURATION = (
    "Automated connection is not available because the provisioning template "
    "is not configured. Please contact your administrator."
)


def format_elapsed(seconds: float) -> str:
    """Format a duration as m:ss."""
    total = max(int(seconds), 0)
    minutes, secs = divmod(total, 60)
    return f"{minutes}:{secs:02d}"


def user_message_for(error: DomainError) -> str:
    """User-facing text for an error that moved the workflow to ERROR."""
    match error:
        case ConfigurationError():
            return MESSAGE_CONFIGURATION
        case InitiationError(is_transient=True):
            return f"Could not reach the server to start the connection: {error.message}. Please try again."
        case InitiationError():
            return f"Could not start the connection: {error.message}"
        case CloudConnectionError():
            return f"The connection failed: {error.message}. Cancel and start again."
        case _:
            return error.message


class ConnectionLifecycleController:
    """State machine for one automated connection workflow.

    Not thread-safe; all calls must come from the event loop that owns the
    poller.

    Attributes:
        workflow_id: Identifier used by the registry and in events.
    """

    def __init__(
        self,
        *,
        request_builder: ConnectionRequestBuilder,
        initiation_service: ConnectionInitiationService,
        verification_service: VerificationService,
        poller: StatusPoller,
        event_bus: EventBusProtocol,
        logger: LoggerProtocol,
        kind: ConnectionKind = ConnectionKind.BILLING,
        workflow_id: UUID | None = None,
    ) -> None:
        self.workflow_id: UUID = workflow_id or uuid7()
        self._builder = request_builder
        self._initiation = initiation_service
        self._verification = verification_service
        self._poller = poller
        self._event_bus = event_bus
        self._kind = kind
        self._logger = logger.bind(workflow_id=str(self.workflow_id))

        self._state = WorkflowState.IDLE
        self._generation = 0
        self._request: ConnectionRequest | None = None
        self._intent: ConnectionIntent | None = None
        self._record: ConnectionRecord | None = None
        self._polling_session: PollingSession | None = None
        self._error: DomainError | None = None
        self._is_operator_error = False
        self._message: str | None = None
        self._connected_announced = False

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def intent(self) -> ConnectionIntent | None:
        return self._intent

    @property
    def record(self) -> ConnectionRecord | None:
        return self._record

    def snapshot(self) -> WorkflowSnapshot:
        """Immutable view of the workflow for a UI."""
        attempts = self._polling_session.attempt_count if self._polling_session else 0
        elapsed = attempts * self._poller.interval_seconds
        request = self._request
        intent = self._intent
        return WorkflowSnapshot(
            workflow_id=self.workflow_id,
            state=self._state,
            message=self._message,
            connection_name=intent.connection_name if intent else (
                request.connection_name if request else None
            ),
            external_account_id=intent.external_account_id if intent else (
                request.external_account_id if request else None
            ),
            display_name=request.display_name if request else None,
            name_was_changed=request.name_was_changed if request else False,
            provisioning_console_url=intent.provisioning_console_url if intent else None,
            supports_push_confirmation=intent.supports_push_confirmation if intent else False,
            attempt_count=attempts,
            max_attempts=self._poller.max_attempts,
            elapsed_seconds=elapsed,
            elapsed_display=format_elapsed(elapsed),
            connection_id=self._record.id if self._record else None,
            error_code=self._error.code.value if self._error else None,
            is_operator_error=self._is_operator_error,
        )

    # -------------------------------------------------------------------------
    # User-triggered transitions
    # -------------------------------------------------------------------------

    async def submit(
        self,
        display_name: str | None,
        external_account_id: str | None,
    ) -> Result[WorkflowSnapshot, ValidationError | ConflictError]:
        """Validate the form and initiate a connection.

        Returns:
            Success(snapshot): Now AWAITING_EXTERNAL_STEP or ERROR.
            Failure(ValidationError): Bad input; state stays IDLE.
            Failure(ConflictError): Workflow is not IDLE.
        """
        if self._state is not WorkflowState.IDLE:
            return Failure(error=self._conflict("submit"))

        build_result = self._builder.build(display_name, external_account_id)
        if isinstance(build_result, Failure):
            self._message = build_result.error.message
            return build_result

        request = build_result.value
        self._request = request
        self._error = None
        self._is_operator_error = False
        if request.name_was_changed:
            self._logger.info(
                "connection_name_normalized",
                connection_name=request.connection_name,
            )

        self._transition(WorkflowState.INITIATING)
        self._message = None
        generation = self._generation

        result = await self._initiation.initiate(request, kind=self._kind)

        if generation != self._generation:
            self._logger.info("initiation_result_discarded")
            return Success(value=self.snapshot())

        match result:
            case Success(value=intent):
                self._intent = intent
                self._transition(WorkflowState.AWAITING_EXTERNAL_STEP)
                self._message = MESSAGE_AWAITING_EXTERNAL_STEP
            case Failure(error=ValidationError() as validation_error):
                self._request = None
                self._transition(WorkflowState.IDLE)
                self._message = validation_error.message
                return Failure(error=validation_error)
            case Failure(error=ConfigurationError() as config_error):
                self._fail(config_error, is_operator_error=True)
            case Failure(error=error):
                self._fail(error)

        return Success(value=self.snapshot())

    def mark_external_step_opened(self) -> Result[WorkflowSnapshot, ConflictError]:
        """User opened the provisioning console; start automatic detection.

        Idempotent while already POLLING.
        """
        if self._state is WorkflowState.POLLING:
            return Success(value=self.snapshot())
        if self._state is not WorkflowState.AWAITING_EXTERNAL_STEP:
            return Failure(error=self._conflict("start_polling"))

        self._transition(WorkflowState.POLLING)
        self._start_polling()
        return Success(value=self.snapshot())

    async def verify_manually(self) -> Result[WorkflowSnapshot, ConflictError]:
        """Run the authoritative verification now.

        Stops the poller first. A pending result returns the workflow to the
        state it came from. Polling resumes where the interrupted session left
        off; with no attempts left the workflow times out instead.
        """
        if self._state not in WorkflowState.manual_verification_states():
            return Failure(error=self._conflict("verify"))

        intent = self._intent
        if intent is None:
            return Failure(error=self._conflict("verify"))

        origin = self._state
        self._poller.stop()
        self._transition(WorkflowState.VERIFYING)
        self._message = MESSAGE_VERIFYING
        generation = self._generation

        result = await self._verification.verify(intent)

        if generation != self._generation or self._state is not WorkflowState.VERIFYING:
            self._logger.info(
                "manual_verification_result_discarded",
                succeeded=isinstance(result, Success),
            )
            return Success(value=self.snapshot())

        match result:
            case Success(value=record):
                await self._complete(record, source="manual_verification")
            case Failure(error=VerificationPendingError()):
                self._return_after_pending(origin)
            case Failure(error=error):
                self._fail(error)

        return Success(value=self.snapshot())

    def cancel(self) -> Result[WorkflowSnapshot, ConflictError]:
        """Abandon the workflow and return to IDLE. Idempotent in IDLE."""
        if self._state is WorkflowState.IDLE:
            return Success(value=self.snapshot())
        if self._state not in WorkflowState.cancellable_states():
            return Failure(error=self._conflict("cancel"))

        self._poller.stop()
        self._clear()
        self._transition(WorkflowState.IDLE)
        return Success(value=self.snapshot())

    def reset(self) -> Result[WorkflowSnapshot, ConflictError]:
        """Leave ERROR or CONNECTED to start another connection."""
        if self._state not in WorkflowState.terminal_states():
            return Failure(error=self._conflict("reset"))

        self._poller.stop()
        self._clear()
        self._transition(WorkflowState.IDLE)
        return Success(value=self.snapshot())

    async def aclose(self) -> None:
        """Tear down: stop the poller and drop any late results."""
        self._generation += 1
        await self._poller.aclose()

    # -------------------------------------------------------------------------
    # Poller callbacks
    # -------------------------------------------------------------------------

    def _start_polling(self, *, resume_from: int = 0) -> None:
        intent = self._require_intent()
        self._polling_session = self._poller.start(
            intent,
            on_connected=self._on_polling_connected,
            on_error=self._on_polling_error,
            on_timeout=self._on_polling_timeout,
            resume_from=resume_from,
        )
        self._message = MESSAGE_POLLING

    async def _on_polling_connected(self, record: ConnectionRecord | None) -> None:
        if self._state is not WorkflowState.POLLING:
            self._logger.debug("polling_connected_ignored", state=self._state.value)
            return
        await self._complete(record, source="polling")

    async def _on_polling_error(self, reason: str) -> None:
        if self._state is not WorkflowState.POLLING:
            self._logger.debug("polling_error_ignored", state=self._state.value)
            return
        self._fail(
            CloudConnectionError(
                code=ErrorCode.CONNECTION_FAILED,
                message=reason,
                reason=reason,
            )
        )

    async def _on_polling_timeout(self) -> None:
        if self._state is not WorkflowState.POLLING:
            self._logger.debug("polling_timeout_ignored", state=self._state.value)
            return
        self._transition(WorkflowState.TIMED_OUT)
        self._message = MESSAGE_TIMED_OUT

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    async def _complete(self, record: ConnectionRecord | None, *, source: str) -> None:
        if self._connected_announced:
            self._logger.info("duplicate_connection_success_discarded", source=source)
            return
        intent = self._require_intent()

        self._connected_announced = True
        self._poller.stop()
        self._record = record
        self._transition(WorkflowState.CONNECTED)
        self._message = MESSAGE_CONNECTED
        self._logger.info(
            "connection_established",
            source=source,
            connection_id=record.id if record else None,
        )

        await self._event_bus.publish(
            CloudProvidersChanged(
                workflow_id=self.workflow_id,
                connection_id=record.id if record else None,
                connection_name=intent.connection_name,
                external_account_id=intent.external_account_id,
                kind=intent.kind.value,
            )
        )

    def _return_after_pending(self, origin: WorkflowState) -> None:
        if origin is not WorkflowState.POLLING:
            self._transition(origin)
        else:
            # Continue the interrupted session's count; the window never restarts.
            spent = self._polling_session.attempt_count if self._polling_session else 0
            if spent >= self._poller.max_attempts:
                self._transition(WorkflowState.TIMED_OUT)
            else:
                self._transition(WorkflowState.POLLING)
                self._start_polling(resume_from=spent)
        self._message = MESSAGE_PENDING

    def _require_intent(self) -> ConnectionIntent:
        if self._intent is None:
            raise RuntimeError(
                f"workflow in state {self._state.value} has no connection intent"
            )
        return self._intent

    def _fail(self, error: DomainError, *, is_operator_error: bool = False) -> None:
        self._poller.stop()
        self._error = error
        self._is_operator_error = is_operator_error
        self._transition(WorkflowState.ERROR)
        self._message = user_message_for(error)
        self._logger.warning(
            "connection_workflow_failed",
            error_code=error.code.value,
            error_message=error.message,
            is_operator_error=is_operator_error,
        )

    def _clear(self) -> None:
        self._generation += 1
        self._request = None
        self._intent = None
        self._record = None
        self._polling_session = None
        self._error = None
        self._is_operator_error = False
        self._message = None
        self._connected_announced = False

    def _transition(self, target: WorkflowState) -> None:
        if not self._state.can_transition_to(target):
            raise RuntimeError(
                f"illegal workflow transition {self._state.value} -> {target.value}"
            )
        self._logger.debug(
            "workflow_state_changed",
            from_state=self._state.value,
            to_state=target.value,
        )
        self._state = target

    def _conflict(self, operation: str) -> ConflictError:
        return ConflictError(
            code=ErrorCode.INVALID_STATE_TRANSITION,
            message=f"Cannot {operation.replace('_', ' ')} while the workflow is {self._state.value}",
            resource_type="ConnectionWorkflow",
            current_state=self._state.value,
        )
