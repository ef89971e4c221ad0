"""Common error classes shared by all layers.

Error Types:
- ValidationError: Input rejected before any network call
- NotFoundError: Unknown resource (e.g. workflow id)
- ConflictError: Operation not allowed in the current state
"""

from dataclasses import dataclass

from src.core.errors.domain_error import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class ValidationError(DomainError):
    """Input validation failure.

    Attributes:
        field: Field name that failed validation.
    """

    field: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class NotFoundError(DomainError):
    """Resource not found.

    Attributes:
        resource_type: Type of resource (Workflow, Connection, ...).
        resource_id: ID of the resource that was not found.
    """

    resource_type: str
    resource_id: str


@dataclass(frozen=True, slots=True, kw_only=True)
class ConflictError(DomainError):
    """Operation conflicts with the current state of a resource.

    Attributes:
        resource_type: Type of resource in conflict.
        current_state: State the resource was in when the operation arrived.
    """

    resource_type: str
    current_state: str | None = None
