"""Cloud connection request and response schemas.

Pydantic schemas for the cloud-connection workflow endpoints. Includes:
- Request schemas (client → API)
- Response schemas (API → client)
- DTO-to-schema conversion methods
"""

from uuid import UUID

from pydantic import BaseModel, Field

from src.application.dtos.connection_dtos import WorkflowSnapshot


# =============================================================================
# Request Schemas
# =============================================================================


class CreateCloudConnectionRequest(BaseModel):
    """Start an automated cloud-account connection.

    Field-level rules (12-digit account id, name normalization) are applied
    by the workflow so the API reports them as RFC 7807 validation errors.
    """

    display_name: str = Field(
        default="",
        max_length=255,
        description="Connection name as typed by the user",
        examples=["Production Billing"],
    )
    external_account_id: str = Field(
        ...,
        max_length=64,
        description="12-digit cloud account id",
        examples=["123456789012"],
    )


# =============================================================================
# Response Schemas
# =============================================================================


class CloudConnectionWorkflowResponse(BaseModel):
    """Current state of a connection workflow."""

    workflow_id: UUID = Field(..., description="Workflow identifier")
    state: str = Field(..., description="Workflow state", examples=["polling"])
    message: str | None = Field(None, description="User-facing status text")
    connection_name: str | None = Field(
        None, description="Normalized connection name", examples=["production-billing"]
    )
    external_account_id: str | None = Field(None, description="12-digit account id")
    display_name: str | None = Field(None, description="Name as typed")
    name_was_changed: bool = Field(
        False, description="Normalization adjusted the name beyond case and spaces"
    )
    provisioning_console_url: str | None = Field(
        None, description="Console link for the provisioning step"
    )
    supports_push_confirmation: bool = Field(
        False, description="Backend is notified when provisioning finishes"
    )
    attempt_count: int = Field(0, description="Status checks issued")
    max_attempts: int = Field(0, description="Status checks before timing out")
    elapsed_seconds: float = Field(0.0, description="Detection time so far")
    elapsed_display: str = Field("0:00", description="Detection time as m:ss")
    connection_id: str | None = Field(None, description="Connection record id")
    error_code: str | None = Field(None, description="Error code in error state")
    is_operator_error: bool = Field(
        False, description="Error requires an administrator"
    )

    @classmethod
    def from_dto(cls, dto: WorkflowSnapshot) -> "CloudConnectionWorkflowResponse":
        """Convert application DTO to response schema."""
        return cls(
            workflow_id=dto.workflow_id,
            state=dto.state.value,
            message=dto.message,
            connection_name=dto.connection_name,
            external_account_id=dto.external_account_id,
            display_name=dto.display_name,
            name_was_changed=dto.name_was_changed,
            provisioning_console_url=dto.provisioning_console_url,
            supports_push_confirmation=dto.supports_push_confirmation,
            attempt_count=dto.attempt_count,
            max_attempts=dto.max_attempts,
            elapsed_seconds=dto.elapsed_seconds,
            elapsed_display=dto.elapsed_display,
            connection_id=dto.connection_id,
            error_code=dto.error_code,
            is_operator_error=dto.is_operator_error,
        )
