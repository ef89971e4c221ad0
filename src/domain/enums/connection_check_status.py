"""Status values reported by the cheap connection status check."""

from enum import Enum


class ConnectionCheckStatus(str, Enum):
    """Outcome of ``check_connection_status`` for one correlation token."""

    PENDING = "pending"
    CONNECTED = "connected"
    ERROR = "error"

    @classmethod
    def parse(cls, value: object) -> "ConnectionCheckStatus":
        """Parse a backend status value.

        Unknown or missing values are treated as PENDING so an unexpected
        payload never ends a workflow.

        Args:
            value: Raw ``status`` field from the backend payload.

        Returns:
            ConnectionCheckStatus: Parsed status.
        """
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                return cls.PENDING
        return cls.PENDING
