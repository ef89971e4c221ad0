"""Connection workflow errors.

The error taxonomy a user of the workflow can observe. Each one maps to a
distinct controller reaction:

- ConfigurationError: operator must fix the system (template missing)
- InitiationError: initiation failed, user may retry
- VerificationPendingError: external step not finished, wait and retry
- CloudConnectionError: hard failure, restart from scratch

Input validation failures use ``src.core.errors.ValidationError``.

Usage:
    from src.domain.errors import VerificationPendingError

    match await verification_service.verify(intent):
        case Failure(error=VerificationPendingError()):
            ...  # keep waiting
"""

from dataclasses import dataclass

from src.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class ConfigurationError(DomainError):
    """The backend cannot provision connections at all.

    User-facing text tells the user to contact an administrator.
    """


@dataclass(frozen=True, slots=True, kw_only=True)
class InitiationError(DomainError):
    """Initiating the connection failed.

    Attributes:
        is_transient: Whether retrying the same request may succeed.
    """

    is_transient: bool = False


@dataclass(frozen=True, slots=True, kw_only=True)
class VerificationPendingError(DomainError):
    """Verification could not find the provisioned resources yet."""


@dataclass(frozen=True, slots=True, kw_only=True)
class CloudConnectionError(DomainError):
    """Connection failed and the workflow cannot continue.

    Attributes:
        reason: Short reason reported by the backend or adapter.
    """

    reason: str | None = None
