"""Domain enums for the connection workflow.

Available Enums:
    - WorkflowState: Lifecycle states of one connection workflow
    - ConnectionCheckStatus: Result of a cheap status check
    - ConnectionKind: What the provisioned access covers
"""

from src.domain.enums.connection_check_status import ConnectionCheckStatus
from src.domain.enums.connection_kind import ConnectionKind
from src.domain.enums.workflow_state import WorkflowState

__all__ = [
    "ConnectionCheckStatus",
    "ConnectionKind",
    "WorkflowState",
]
