"""Connection intent domain entity.

A short-lived handle returned by the backend when an automated connection is
initiated. It carries everything the user needs to run the external
provisioning step and everything the workflow needs to detect its result.

Architecture:
    - Pure domain entity (no infrastructure dependencies)
    - Immutable: created once by ConnectionInitiationService
    - Never persisted; discarded on cancel, success or teardown

Usage:
    intent = ConnectionIntent(
        correlation_token="a1b2c3...",
        trust_role_identifier="arn:aws:iam::123456789012:role/CloudSpendRole",
        provisioning_console_url="https://console.aws.amazon.com/...",
        connection_name="my-account",
        external_account_id="123456789012",
        supports_push_confirmation=True,
    )
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime

from src.core.constants import TOKEN_LOG_PREFIX_LENGTH
from src.domain.enums.connection_kind import ConnectionKind


@dataclass(frozen=True, kw_only=True)
class ConnectionIntent:
    """Pending automated connection.

    Attributes:
        correlation_token: Opaque token tying the external step to this intent.
        trust_role_identifier: Identifier of the role the provisioning step creates.
        provisioning_console_url: Pre-filled console link the user must open.
        connection_name: Normalized connection name.
        external_account_id: 12-digit cloud account id.
        supports_push_confirmation: Backend receives a push when provisioning
            finishes, so the cheap status check is authoritative.
        kind: What the connection grants access to.
        created_at: When the intent was received.
    """

    correlation_token: str
    trust_role_identifier: str
    provisioning_console_url: str
    connection_name: str
    external_account_id: str
    supports_push_confirmation: bool = False
    kind: ConnectionKind = ConnectionKind.BILLING
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Validate intent after initialization.

        Raises:
            ValueError: If a required field is empty. These are programming
                errors; the initiation service validates payloads first.
        """
        for name in (
            "correlation_token",
            "trust_role_identifier",
            "provisioning_console_url",
            "connection_name",
            "external_account_id",
        ):
            if not getattr(self, name):
                raise ValueError(f"ConnectionIntent.{name} must not be empty")

    @property
    def token_prefix(self) -> str:
        """Loggable prefix of the correlation token."""
        return self.correlation_token[:TOKEN_LOG_PREFIX_LENGTH]
