"""Domain-level error codes (machine-readable).

Error codes follow ENTITY_ACTION_REASON naming convention.
Used with Result types for railway-oriented programming.

Categories:
- Validation errors (INVALID_*, VALIDATION_*)
- Workflow errors (CONNECTION_*, VERIFICATION_*, PROVISIONING_*)
- Backend errors (BACKEND_*, RATE_LIMITED)
- State errors (INVALID_STATE_TRANSITION, *_NOT_FOUND)
"""

from enum import Enum


class ErrorCode(Enum):
    """Domain-level error codes (machine-readable).

    Error codes follow ENTITY_ACTION_REASON naming convention.
    """

    # Validation errors
    VALIDATION_FAILED = "validation_failed"
    INVALID_ACCOUNT_ID = "invalid_account_id"

    # Workflow errors
    PROVISIONING_TEMPLATE_NOT_CONFIGURED = "provisioning_template_not_configured"
    CONNECTION_INITIATION_FAILED = "connection_initiation_failed"
    VERIFICATION_PENDING = "verification_pending"
    CONNECTION_FAILED = "connection_failed"

    # Backend errors
    BACKEND_UNAVAILABLE = "backend_unavailable"
    BACKEND_AUTHENTICATION_FAILED = "backend_authentication_failed"
    BACKEND_INVALID_RESPONSE = "backend_invalid_response"
    BACKEND_REQUEST_REJECTED = "backend_request_rejected"
    RATE_LIMITED = "rate_limited"

    # State errors
    INVALID_STATE_TRANSITION = "invalid_state_transition"
    WORKFLOW_NOT_FOUND = "workflow_not_found"
