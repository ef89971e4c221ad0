"""Connection record: the durable account connection owned by the backend."""

from dataclasses import dataclass


@dataclass(frozen=True, kw_only=True)
class ConnectionRecord:
    """Reference to a persisted cloud-account connection.

    Created at most once per successful verification of a ConnectionIntent.
    The workflow only ever holds a reference; the backend owns the record.

    Attributes:
        id: Backend identifier of the connection.
        connection_name: Name the connection was stored under.
        external_account_id: Connected 12-digit cloud account id.
        status: Backend-reported status, if any.
    """

    id: str
    connection_name: str
    external_account_id: str
    status: str | None = None
