"""Cloud provider connection events.

Published by ConnectionLifecycleController when a workflow reaches CONNECTED.
Subscribers refresh anything derived from the set of connected cloud
accounts (provider lists, cost data sync).

Handlers:
    - LoggingEventHandler: structured log line
    - DataSyncEventHandler: asks the backend for an out-of-band data sync
"""

from dataclasses import dataclass
from uuid import UUID

from src.domain.events.base_event import DomainEvent


@dataclass(frozen=True, kw_only=True, slots=True)
class CloudProvidersChanged(DomainEvent):
    """A new cloud-account connection was recorded.

    Published exactly once per successful workflow.

    Attributes:
        workflow_id: Workflow that produced the connection.
        connection_id: Backend id of the connection record, when reported.
        connection_name: Normalized connection name.
        external_account_id: Connected 12-digit account id.
        kind: Connection kind value (billing, resource).
    """

    workflow_id: UUID
    connection_id: str | None
    connection_name: str
    external_account_id: str
    kind: str
