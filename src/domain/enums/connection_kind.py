"""Kinds of cross-account connection the backend can provision.

Usage:
    from src.domain.enums import ConnectionKind

    kind = ConnectionKind.BILLING
    kind.verification_type  # "automated-billing"
"""

from enum import Enum


class ConnectionKind(str, Enum):
    """What the provisioned trust relationship grants access to."""

    BILLING = "billing"
    """Cost and usage reports only."""

    RESOURCE = "resource"
    """Resource inventory in addition to billing data."""

    @property
    def verification_type(self) -> str:
        """Connection type string the backend expects on verification."""
        return f"automated-{self.value}"

    @classmethod
    def values(cls) -> list[str]:
        """Get all kind values as strings."""
        return [kind.value for kind in cls]
