"""Connection workflow DTOs.

Data transfer objects passed between the workflow services and out to the
presentation layer. Immutable snapshots; never hold live workflow objects.

DTOs:
    - ConnectionRequest: Validated and normalized user input
    - WorkflowSnapshot: Point-in-time view of one workflow for a UI
"""

from dataclasses import dataclass
from uuid import UUID

from src.domain.enums import WorkflowState


@dataclass(frozen=True, kw_only=True)
class ConnectionRequest:
    """Validated input for ConnectionInitiationService.

    Attributes:
        connection_name: Normalized name matching ^[a-z][a-z0-9-]{0,49}$.
        external_account_id: 12-digit cloud account id.
        display_name: Name as the user typed it.
        name_was_changed: Normalization changed more than case and spacing.
    """

    connection_name: str
    external_account_id: str
    display_name: str
    name_was_changed: bool = False


@dataclass(frozen=True, kw_only=True)
class WorkflowSnapshot:
    """Point-in-time view of a connection workflow.

    Attributes:
        workflow_id: Workflow identifier.
        state: Current workflow state.
        message: User-facing status or error text, if any.
        connection_name: Normalized connection name, once submitted.
        external_account_id: Account id, once submitted.
        display_name: Name as the user typed it.
        name_was_changed: Show the "name was adjusted" notice.
        provisioning_console_url: Console link, while an intent exists.
        supports_push_confirmation: Backend gets a push on completion.
        attempt_count: Status checks issued by the current or last poll.
        max_attempts: Status checks before timing out.
        elapsed_seconds: attempt_count x poll interval.
        elapsed_display: elapsed_seconds as m:ss.
        connection_id: Backend record id once CONNECTED.
        error_code: Machine-readable error code in ERROR state.
        is_operator_error: ERROR needs an administrator, not a retry.
    """

    workflow_id: UUID
    state: WorkflowState
    message: str | None = None
    connection_name: str | None = None
    external_account_id: str | None = None
    display_name: str | None = None
    name_was_changed: bool = False
    provisioning_console_url: str | None = None
    supports_push_confirmation: bool = False
    attempt_count: int = 0
    max_attempts: int = 0
    elapsed_seconds: float = 0.0
    elapsed_display: str = "0:00"
    connection_id: str | None = None
    error_code: str | None = None
    is_operator_error: bool = False
