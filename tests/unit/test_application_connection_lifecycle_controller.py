"""Unit tests for ConnectionLifecycleController.

The controller runs against real services and a real StatusPoller; only the
backend, the event bus and the clock are doubles.

Tests cover:
- Submit: validation, initiation success, configuration and other failures
- Polling: connected, error, timeout
- Manual verification: success, pending (resume), hard failure
- Cancel and reset, including results arriving after cancel
- Fallback and manual verification racing: CONNECTED and the event once
- Connected reported before the follow-up data sync finishes
- Snapshot elapsed time
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.application.services.connection_initiation_service import (
    ConnectionInitiationService,
)
from src.application.services.connection_lifecycle_controller import (
    MESSAGE_AWAITING_EXTERNAL_STEP,
    MESSAGE_CONFIGURATION,
    MESSAGE_PENDING,
    MESSAGE_POLLING,
    MESSAGE_TIMED_OUT,
    ConnectionLifecycleController,
    format_elapsed,
    user_message_for,
)
from src.application.services.connection_request_builder import (
    ConnectionRequestBuilder,
)
from src.application.services.orphan_cleanup_service import OrphanCleanupService
from src.application.services.status_poller import StatusPoller
from src.application.services.verification_service import VerificationService
from src.core.enums import ErrorCode
from src.core.errors import ConflictError, ValidationError
from src.core.result import Failure, Success
from src.domain.enums import WorkflowState
from src.domain.errors import (
    BackendAuthenticationError,
    BackendRejectedError,
    BackendUnavailableError,
    CloudConnectionError,
    ConfigurationError,
    InitiationError,
)
from src.domain.events.cloud_provider_events import CloudProvidersChanged
from src.infrastructure.events.handlers import DataSyncEventHandler
from src.infrastructure.events.in_memory_event_bus import InMemoryEventBus
from tests.conftest import ManualClock, initiation_payload, settle

NOT_READY = Failure(
    error=BackendRejectedError(
        code=ErrorCode.BACKEND_REQUEST_REJECTED,
        message="Unable to assume role",
        operation="verify_and_create_connection",
        status_code=400,
    )
)

VERIFIED = Success(
    value={"id": "conn-42", "connectionName": "my-account", "awsAccountId": "123456789012"}
)


def create_event_bus() -> MagicMock:
    event_bus = MagicMock()
    event_bus.publish = AsyncMock()
    return event_bus


def create_controller(
    backend,
    logger,
    clock: ManualClock,
    event_bus: MagicMock | None = None,
    *,
    max_attempts: int = 36,
) -> ConnectionLifecycleController:
    verification = VerificationService(backend=backend, logger=logger)
    poller = StatusPoller(
        backend=backend,
        verification_service=verification,
        logger=logger,
        interval_seconds=10.0,
        max_attempts=max_attempts,
        fallback_verify_every=3,
        sleep=clock.sleep,
    )
    return ConnectionLifecycleController(
        request_builder=ConnectionRequestBuilder(),
        initiation_service=ConnectionInitiationService(
            backend=backend,
            cleanup_service=OrphanCleanupService(backend=backend, logger=logger),
            logger=logger,
        ),
        verification_service=verification,
        poller=poller,
        event_bus=event_bus or create_event_bus(),
        logger=logger,
    )


async def submit_and_open(controller: ConnectionLifecycleController) -> None:
    """Drive a controller to POLLING."""
    await controller.submit("My Account!!", "123456789012")
    controller.mark_external_step_opened()


# =============================================================================
# Submit
# =============================================================================


@pytest.mark.unit
class TestControllerSubmit:
    def test_initial_snapshot(self, backend, mock_logger, clock):
        controller = create_controller(backend, mock_logger, clock)

        snapshot = controller.snapshot()

        assert snapshot.workflow_id == controller.workflow_id
        assert snapshot.state is WorkflowState.IDLE
        assert snapshot.attempt_count == 0
        assert snapshot.max_attempts == 36
        assert snapshot.elapsed_display == "0:00"

    async def test_submit_success_awaits_external_step(self, backend, mock_logger, clock):
        # Arrange
        controller = create_controller(backend, mock_logger, clock)

        # Act
        result = await controller.submit("My Account!!", "123456789012")

        # Assert
        assert isinstance(result, Success)
        snapshot = result.value
        assert snapshot.state is WorkflowState.AWAITING_EXTERNAL_STEP
        assert snapshot.message == MESSAGE_AWAITING_EXTERNAL_STEP
        assert snapshot.connection_name == "my-account"
        assert snapshot.name_was_changed is True
        assert snapshot.provisioning_console_url is not None
        assert controller.intent is not None

    async def test_invalid_account_stays_idle(self, backend, mock_logger, clock):
        controller = create_controller(backend, mock_logger, clock)

        result = await controller.submit("My Account", "12AB")

        assert isinstance(result, Failure)
        assert isinstance(result.error, ValidationError)
        assert controller.state is WorkflowState.IDLE
        assert controller.snapshot().message == result.error.message
        backend.initiate_automated_connection.assert_not_called()

    async def test_submit_when_not_idle_conflicts(self, backend, mock_logger, clock):
        controller = create_controller(backend, mock_logger, clock)
        await controller.submit("My Account", "123456789012")

        result = await controller.submit("Other", "123456789012")

        assert isinstance(result, Failure)
        assert isinstance(result.error, ConflictError)
        assert result.error.code == ErrorCode.INVALID_STATE_TRANSITION
        assert result.error.current_state == "awaiting_external_step"

    async def test_template_not_configured_is_operator_error(
        self, backend, mock_logger, clock
    ):
        backend.initiate_automated_connection.return_value = Failure(
            error=BackendUnavailableError(
                code=ErrorCode.BACKEND_UNAVAILABLE,
                message="CloudFormation template URL not configured",
                operation="initiate_automated_connection",
            )
        )
        controller = create_controller(backend, mock_logger, clock)

        result = await controller.submit("My Account", "123456789012")

        assert isinstance(result, Success)
        snapshot = result.value
        assert snapshot.state is WorkflowState.ERROR
        assert snapshot.is_operator_error is True
        assert snapshot.error_code == "provisioning_template_not_configured"
        assert snapshot.message == MESSAGE_CONFIGURATION

    async def test_other_initiation_failure_is_user_retryable(
        self, backend, mock_logger, clock
    ):
        backend.initiate_automated_connection.return_value = Failure(
            error=BackendRejectedError(
                code=ErrorCode.BACKEND_REQUEST_REJECTED,
                message="Account already connected",
                operation="initiate_automated_connection",
                status_code=409,
            )
        )
        controller = create_controller(backend, mock_logger, clock)

        result = await controller.submit("My Account", "123456789012")

        assert isinstance(result, Success)
        assert result.value.state is WorkflowState.ERROR
        assert result.value.is_operator_error is False
        assert "Account already connected" in result.value.message


# =============================================================================
# Polling
# =============================================================================


@pytest.mark.unit
class TestControllerPolling:
    async def test_open_console_starts_polling(self, backend, mock_logger, clock):
        controller = create_controller(backend, mock_logger, clock)
        await controller.submit("My Account", "123456789012")

        result = controller.mark_external_step_opened()

        assert isinstance(result, Success)
        assert result.value.state is WorkflowState.POLLING
        assert result.value.message == MESSAGE_POLLING
        controller.mark_external_step_opened()
        await clock.advance(1)
        assert backend.check_connection_status.call_count == 1
        await controller.aclose()

    def test_open_console_from_idle_conflicts(self, backend, mock_logger, clock):
        controller = create_controller(backend, mock_logger, clock)

        result = controller.mark_external_step_opened()

        assert isinstance(result, Failure)
        assert isinstance(result.error, ConflictError)

    async def test_polling_connected_publishes_event(self, backend, mock_logger, clock):
        # Arrange
        event_bus = create_event_bus()
        backend.check_connection_status.return_value = Success(
            value={"status": "connected", "id": "conn-99"}
        )
        controller = create_controller(backend, mock_logger, clock, event_bus)
        await submit_and_open(controller)

        # Act
        await clock.advance(1)

        # Assert
        snapshot = controller.snapshot()
        assert snapshot.state is WorkflowState.CONNECTED
        assert snapshot.connection_id == "conn-99"
        event_bus.publish.assert_awaited_once()
        event = event_bus.publish.call_args.args[0]
        assert isinstance(event, CloudProvidersChanged)
        assert event.workflow_id == controller.workflow_id
        assert event.connection_id == "conn-99"
        assert event.connection_name == "my-account"
        assert event.kind == "billing"

    async def test_polling_error_moves_to_error(self, backend, mock_logger, clock):
        backend.check_connection_status.return_value = Success(
            value={"status": "error", "error": "Stack creation rolled back"}
        )
        controller = create_controller(backend, mock_logger, clock)
        await submit_and_open(controller)

        await clock.advance(1)

        snapshot = controller.snapshot()
        assert snapshot.state is WorkflowState.ERROR
        assert snapshot.error_code == "connection_failed"
        assert "Stack creation rolled back" in snapshot.message

    async def test_polling_timeout_moves_to_timed_out(self, backend, mock_logger, clock):
        backend.verify_and_create_connection.return_value = NOT_READY
        controller = create_controller(backend, mock_logger, clock, max_attempts=3)
        await submit_and_open(controller)

        await clock.advance(3)

        snapshot = controller.snapshot()
        assert snapshot.state is WorkflowState.TIMED_OUT
        assert snapshot.message == MESSAGE_TIMED_OUT
        assert snapshot.attempt_count == 3

    async def test_snapshot_reports_elapsed_time(self, backend, mock_logger, clock):
        backend.verify_and_create_connection.return_value = NOT_READY
        controller = create_controller(backend, mock_logger, clock)
        await submit_and_open(controller)

        await clock.advance(7)

        snapshot = controller.snapshot()
        assert snapshot.attempt_count == 7
        assert snapshot.elapsed_seconds == 70.0
        assert snapshot.elapsed_display == "1:10"
        await controller.aclose()


# =============================================================================
# Manual verification
# =============================================================================


@pytest.mark.unit
class TestControllerManualVerification:
    async def test_verify_from_timed_out_connects(self, backend, mock_logger, clock):
        # Arrange
        event_bus = create_event_bus()
        backend.verify_and_create_connection.return_value = NOT_READY
        controller = create_controller(backend, mock_logger, clock, event_bus, max_attempts=3)
        await submit_and_open(controller)
        await clock.advance(3)
        backend.verify_and_create_connection.return_value = VERIFIED

        # Act
        result = await controller.verify_manually()

        # Assert
        assert isinstance(result, Success)
        assert result.value.state is WorkflowState.CONNECTED
        assert result.value.connection_id == "conn-42"
        event_bus.publish.assert_awaited_once()

    async def test_connected_without_waiting_for_data_sync(
        self, backend, mock_logger, clock
    ):
        # Arrange
        release = asyncio.Event()

        async def slow_sync():
            await release.wait()
            return Success(value=None)

        backend.request_data_sync.side_effect = slow_sync
        sync_handler = DataSyncEventHandler(backend=backend, logger=mock_logger)
        event_bus = InMemoryEventBus(logger=mock_logger)
        event_bus.subscribe(
            CloudProvidersChanged, sync_handler.handle_cloud_providers_changed
        )
        backend.verify_and_create_connection.return_value = NOT_READY
        controller = create_controller(backend, mock_logger, clock, event_bus)
        await submit_and_open(controller)
        backend.verify_and_create_connection.return_value = VERIFIED

        # Act
        result = await asyncio.wait_for(controller.verify_manually(), timeout=1.0)

        # Assert
        assert isinstance(result, Success)
        assert result.value.state is WorkflowState.CONNECTED
        assert sync_handler.pending_count == 1
        assert not release.is_set()

        release.set()
        await settle()

        assert sync_handler.pending_count == 0
        backend.request_data_sync.assert_awaited_once()
        logged = [call.args[0] for call in mock_logger.info.call_args_list if call.args]
        assert "data_sync_requested" in logged
        await controller.aclose()

    async def test_pending_from_polling_resumes_polling(self, backend, mock_logger, clock):
        backend.verify_and_create_connection.return_value = NOT_READY
        controller = create_controller(backend, mock_logger, clock)
        await submit_and_open(controller)
        await clock.advance(2)

        result = await controller.verify_manually()

        assert isinstance(result, Success)
        assert result.value.state is WorkflowState.POLLING
        assert result.value.message == MESSAGE_PENDING
        assert result.value.attempt_count == 2
        await clock.advance(1)
        assert controller.snapshot().attempt_count == 3
        await controller.aclose()

    async def test_pending_verify_does_not_extend_detection_window(
        self, backend, mock_logger, clock
    ):
        backend.verify_and_create_connection.return_value = NOT_READY
        controller = create_controller(backend, mock_logger, clock, max_attempts=5)
        await submit_and_open(controller)
        await clock.advance(4)

        await controller.verify_manually()
        await clock.advance(1)

        snapshot = controller.snapshot()
        assert snapshot.state is WorkflowState.TIMED_OUT
        assert snapshot.attempt_count == 5
        assert backend.check_connection_status.call_count == 5

    async def test_pending_verify_after_last_tick_times_out(
        self, backend, mock_logger, clock
    ):
        # Arrange: the last status check hangs while the user verifies
        backend.verify_and_create_connection.return_value = NOT_READY
        release = asyncio.Event()

        async def hanging_last_check(token):
            if backend.check_connection_status.call_count == 3:
                await release.wait()
            return Success(value={"status": "pending"})

        backend.check_connection_status.side_effect = hanging_last_check
        controller = create_controller(backend, mock_logger, clock, max_attempts=3)
        await submit_and_open(controller)
        await clock.advance(3)

        # Act
        result = await controller.verify_manually()
        release.set()
        await settle()

        # Assert
        assert result.value.state is WorkflowState.TIMED_OUT
        assert result.value.message == MESSAGE_PENDING
        assert controller.snapshot().state is WorkflowState.TIMED_OUT
        await controller.aclose()

    async def test_pending_from_timed_out_stays_timed_out(self, backend, mock_logger, clock):
        backend.verify_and_create_connection.return_value = NOT_READY
        controller = create_controller(backend, mock_logger, clock, max_attempts=3)
        await submit_and_open(controller)
        await clock.advance(3)
        checks_before = backend.check_connection_status.call_count

        result = await controller.verify_manually()
        await clock.advance(2)

        assert isinstance(result, Success)
        assert result.value.state is WorkflowState.TIMED_OUT
        assert result.value.message == MESSAGE_PENDING
        assert backend.check_connection_status.call_count == checks_before

    async def test_verify_before_opening_console(self, backend, mock_logger, clock):
        controller = create_controller(backend, mock_logger, clock)
        await controller.submit("My Account", "123456789012")

        result = await controller.verify_manually()

        assert isinstance(result, Success)
        assert result.value.state is WorkflowState.CONNECTED

    async def test_hard_failure_moves_to_error(self, backend, mock_logger, clock):
        backend.verify_and_create_connection.return_value = Failure(
            error=BackendAuthenticationError(
                code=ErrorCode.BACKEND_AUTHENTICATION_FAILED,
                message="Backend rejected the API credentials",
                operation="verify_and_create_connection",
            )
        )
        controller = create_controller(backend, mock_logger, clock)
        await submit_and_open(controller)

        result = await controller.verify_manually()

        assert isinstance(result, Success)
        assert result.value.state is WorkflowState.ERROR
        assert result.value.error_code == "connection_failed"

    async def test_verify_from_idle_conflicts(self, backend, mock_logger, clock):
        controller = create_controller(backend, mock_logger, clock)

        result = await controller.verify_manually()

        assert isinstance(result, Failure)
        assert isinstance(result.error, ConflictError)
        backend.verify_and_create_connection.assert_not_called()

    async def test_fallback_and_manual_success_connect_once(
        self, backend, mock_logger, clock
    ):
        # Arrange
        event_bus = create_event_bus()
        release = asyncio.Event()

        async def slow_verify(**kwargs):
            await release.wait()
            return VERIFIED

        backend.verify_and_create_connection.side_effect = slow_verify
        controller = create_controller(backend, mock_logger, clock, event_bus)
        await submit_and_open(controller)
        await clock.advance(3)  # fallback verification now in flight

        # Act
        manual = asyncio.create_task(controller.verify_manually())
        await settle()
        release.set()
        result = await manual
        await settle()

        # Assert
        assert backend.verify_and_create_connection.call_count == 2
        assert isinstance(result, Success)
        assert controller.state is WorkflowState.CONNECTED
        event_bus.publish.assert_awaited_once()


# =============================================================================
# Cancel, reset, teardown
# =============================================================================


@pytest.mark.unit
class TestControllerCancelAndReset:
    async def test_cancel_polling_stops_poller(self, backend, mock_logger, clock):
        controller = create_controller(backend, mock_logger, clock)
        await submit_and_open(controller)
        await clock.advance(1)

        result = controller.cancel()
        await clock.advance(3)

        assert isinstance(result, Success)
        assert result.value.state is WorkflowState.IDLE
        assert result.value.provisioning_console_url is None
        assert controller.intent is None
        assert backend.check_connection_status.call_count == 1

    def test_cancel_idle_is_noop(self, backend, mock_logger, clock):
        controller = create_controller(backend, mock_logger, clock)

        result = controller.cancel()

        assert isinstance(result, Success)
        assert result.value.state is WorkflowState.IDLE

    async def test_cancel_connected_conflicts(self, backend, mock_logger, clock):
        controller = create_controller(backend, mock_logger, clock)
        await controller.submit("My Account", "123456789012")
        await controller.verify_manually()

        result = controller.cancel()

        assert isinstance(result, Failure)
        assert isinstance(result.error, ConflictError)
        assert controller.state is WorkflowState.CONNECTED

    async def test_initiation_result_after_cancel_is_discarded(
        self, backend, mock_logger, clock
    ):
        release = asyncio.Event()

        async def slow_initiate(**kwargs):
            await release.wait()
            return Success(value=initiation_payload())

        backend.initiate_automated_connection.side_effect = slow_initiate
        controller = create_controller(backend, mock_logger, clock)

        submit = asyncio.create_task(controller.submit("My Account", "123456789012"))
        await settle()
        assert controller.state is WorkflowState.INITIATING
        controller.cancel()
        release.set()
        result = await submit

        assert isinstance(result, Success)
        assert controller.state is WorkflowState.IDLE
        assert controller.intent is None

    async def test_verification_result_after_cancel_is_discarded(
        self, backend, mock_logger, clock
    ):
        event_bus = create_event_bus()
        release = asyncio.Event()

        async def slow_verify(**kwargs):
            await release.wait()
            return VERIFIED

        backend.verify_and_create_connection.side_effect = slow_verify
        controller = create_controller(backend, mock_logger, clock, event_bus)
        await submit_and_open(controller)

        verify = asyncio.create_task(controller.verify_manually())
        await settle()
        assert controller.state is WorkflowState.VERIFYING
        controller.cancel()
        release.set()
        await verify

        assert controller.state is WorkflowState.IDLE
        event_bus.publish.assert_not_called()

    async def test_reset_from_error_allows_new_attempt(self, backend, mock_logger, clock):
        backend.initiate_automated_connection.return_value = Failure(
            error=BackendRejectedError(
                code=ErrorCode.BACKEND_REQUEST_REJECTED,
                message="Stack already exists",
                operation="initiate_automated_connection",
                status_code=409,
            )
        )
        controller = create_controller(backend, mock_logger, clock)
        await controller.submit("My Account", "123456789012")
        backend.initiate_automated_connection.return_value = Success(
            value=initiation_payload()
        )

        reset = controller.reset()
        retry = await controller.submit("My Account", "123456789012")

        assert isinstance(reset, Success)
        assert reset.value.state is WorkflowState.IDLE
        assert reset.value.error_code is None
        assert isinstance(retry, Success)
        assert retry.value.state is WorkflowState.AWAITING_EXTERNAL_STEP

    async def test_reset_while_polling_conflicts(self, backend, mock_logger, clock):
        controller = create_controller(backend, mock_logger, clock)
        await submit_and_open(controller)

        result = controller.reset()

        assert isinstance(result, Failure)
        assert controller.state is WorkflowState.POLLING
        await controller.aclose()

    async def test_aclose_stops_background_work(self, backend, mock_logger, clock):
        controller = create_controller(backend, mock_logger, clock)
        await submit_and_open(controller)

        await controller.aclose()
        await clock.advance(3)

        backend.check_connection_status.assert_not_called()
        assert clock.pending == 0


# =============================================================================
# Internal guards
# =============================================================================


@pytest.mark.unit
class TestControllerWithoutIntent:
    def test_start_polling_requires_intent(self, backend, mock_logger, clock):
        controller = create_controller(backend, mock_logger, clock)

        with pytest.raises(RuntimeError, match="no connection intent"):
            controller._start_polling()

        assert clock.pending == 0

    async def test_complete_requires_intent(self, backend, mock_logger, clock):
        event_bus = create_event_bus()
        controller = create_controller(backend, mock_logger, clock, event_bus)

        with pytest.raises(RuntimeError, match="no connection intent"):
            await controller._complete(None, source="test")

        event_bus.publish.assert_not_awaited()
        assert controller.state is WorkflowState.IDLE


# =============================================================================
# Helpers
# =============================================================================


@pytest.mark.unit
class TestFormatElapsed:
    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [(0, "0:00"), (9.9, "0:09"), (70, "1:10"), (360, "6:00"), (-5, "0:00")],
    )
    def test_format(self, seconds, expected):
        assert format_elapsed(seconds) == expected


@pytest.mark.unit
class TestUserMessageFor:
    def test_configuration_error(self):
        error = ConfigurationError(
            code=ErrorCode.PROVISIONING_TEMPLATE_NOT_CONFIGURED,
            message="Provisioning template is not configured on the server",
        )

        assert user_message_for(error) == MESSAGE_CONFIGURATION

    def test_transient_initiation_error_suggests_retry(self):
        error = InitiationError(
            code=ErrorCode.CONNECTION_INITIATION_FAILED,
            message="Backend request timed out",
            is_transient=True,
        )

        assert "try again" in user_message_for(error)

    def test_connection_error_suggests_restart(self):
        error = CloudConnectionError(
            code=ErrorCode.CONNECTION_FAILED,
            message="Stack creation rolled back",
        )

        assert "start again" in user_message_for(error)
