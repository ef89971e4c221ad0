"""Unit tests for mapping workflow errors to application errors."""

import pytest

from src.application.errors import ApplicationErrorCode, to_application_error
from src.core.enums import ErrorCode
from src.core.errors import ConflictError, NotFoundError, ValidationError
from src.domain.errors import (
    BackendUnavailableError,
    CloudConnectionError,
    ConfigurationError,
    InitiationError,
    VerificationPendingError,
)


@pytest.mark.unit
class TestToApplicationError:
    @pytest.mark.parametrize(
        ("error", "expected"),
        [
            (
                ValidationError(
                    code=ErrorCode.INVALID_ACCOUNT_ID,
                    message="Account ID must be exactly 12 digits",
                    field="external_account_id",
                ),
                ApplicationErrorCode.COMMAND_VALIDATION_FAILED,
            ),
            (
                NotFoundError(
                    code=ErrorCode.WORKFLOW_NOT_FOUND,
                    message="Connection workflow not found",
                    resource_type="ConnectionWorkflow",
                    resource_id="abc",
                ),
                ApplicationErrorCode.NOT_FOUND,
            ),
            (
                ConflictError(
                    code=ErrorCode.INVALID_STATE_TRANSITION,
                    message="Cannot verify while the workflow is idle",
                    resource_type="ConnectionWorkflow",
                ),
                ApplicationErrorCode.CONFLICT,
            ),
            (
                ConfigurationError(
                    code=ErrorCode.PROVISIONING_TEMPLATE_NOT_CONFIGURED,
                    message="Provisioning template is not configured on the server",
                ),
                ApplicationErrorCode.SERVICE_MISCONFIGURED,
            ),
            (
                InitiationError(
                    code=ErrorCode.CONNECTION_INITIATION_FAILED,
                    message="Account already connected",
                ),
                ApplicationErrorCode.EXTERNAL_SERVICE_ERROR,
            ),
            (
                VerificationPendingError(
                    code=ErrorCode.VERIFICATION_PENDING,
                    message="Unable to assume role",
                ),
                ApplicationErrorCode.EXTERNAL_SERVICE_ERROR,
            ),
            (
                CloudConnectionError(
                    code=ErrorCode.CONNECTION_FAILED,
                    message="Stack creation rolled back",
                ),
                ApplicationErrorCode.EXTERNAL_SERVICE_ERROR,
            ),
            (
                BackendUnavailableError(
                    code=ErrorCode.BACKEND_UNAVAILABLE,
                    message="Backend request timed out",
                    operation="check_connection_status",
                ),
                ApplicationErrorCode.COMMAND_EXECUTION_FAILED,
            ),
        ],
    )
    def test_mapping(self, error, expected):
        app_error = to_application_error(error)

        assert app_error.code is expected
        assert app_error.message == error.message
        assert app_error.domain_error is error
