"""Connection request builder.

Turns the raw connection form (display name + account id) into a validated
ConnectionRequest. Pure and synchronous: no I/O, no logging.

Name normalization rules, applied in order:
    1. lower-case
    2. every character outside [a-z0-9-] becomes "-"
    3. runs of "-" collapse to one, leading/trailing "-" are stripped
    4. a leading digit gets the CONNECTION_NAME_PREFIX
    5. an empty result becomes DEFAULT_CONNECTION_NAME
    6. truncate to CONNECTION_NAME_MAX_LENGTH
    7. if it still does not start with a letter, prefix and truncate again

The result always matches ^[a-z][a-z0-9-]{0,49}$ and normalizing it again is
a no-op.

Usage:
    builder = ConnectionRequestBuilder()
    match builder.build("My Account!!", "123456789012"):
        case Success(value=request):
            request.connection_name  # "my-account"
"""

import re

from src.application.dtos.connection_dtos import ConnectionRequest
from src.core.constants import (
    CONNECTION_NAME_MAX_LENGTH,
    CONNECTION_NAME_PREFIX,
    DEFAULT_CONNECTION_NAME,
    EXTERNAL_ACCOUNT_ID_LENGTH,
)
from src.core.enums import ErrorCode
from src.core.errors import ValidationError
from src.core.result import Failure, Result, Success

_DISALLOWED_CHARS = re.compile(r"[^a-z0-9-]")
_REPEATED_HYPHENS = re.compile(r"-{2,}")
_WHITESPACE_RUNS = re.compile(r"\s+")
_LETTER_START = re.compile(r"[a-z]")
_ACCOUNT_ID = re.compile(rf"[0-9]{{{EXTERNAL_ACCOUNT_ID_LENGTH}}}")


def _truncate(name: str) -> str:
    return name[:CONNECTION_NAME_MAX_LENGTH].rstrip("-")


def normalize_connection_name(display_name: str | None) -> str:
    """Normalize a user-entered name into a provider-safe connection name.

    Args:
        display_name: Name as typed by the user. None is treated as empty.

    Returns:
        str: Name matching ^[a-z][a-z0-9-]{0,49}$.
    """
    name = (display_name or "").lower()
    name = _DISALLOWED_CHARS.sub("-", name)
    name = _REPEATED_HYPHENS.sub("-", name).strip("-")

    if name[:1].isdigit():
        name = f"{CONNECTION_NAME_PREFIX}{name}"
    if not name:
        name = DEFAULT_CONNECTION_NAME

    name = _truncate(name)

    if not _LETTER_START.match(name):
        name = _truncate(f"{CONNECTION_NAME_PREFIX}{name}")

    return name


def name_change_is_notable(display_name: str | None, connection_name: str) -> bool:
    """Whether the user should be told their name was adjusted.

    Lower-casing and turning spaces into hyphens are expected and do not
    count as a change.
    """
    expected = _WHITESPACE_RUNS.sub("-", (display_name or "").lower())
    return connection_name != expected


def validate_external_account_id(
    external_account_id: str | None,
) -> Result[str, ValidationError]:
    """Validate a cloud account id.

    Surrounding whitespace is ignored; anything else must be exactly twelve
    ASCII digits.

    Returns:
        Success(str): The stripped account id.
        Failure(ValidationError): When absent or malformed.
    """
    candidate = (external_account_id or "").strip()

    if not candidate:
        return Failure(
            error=ValidationError(
                code=ErrorCode.INVALID_ACCOUNT_ID,
                message="Account ID is required",
                field="external_account_id",
            )
        )

    if not _ACCOUNT_ID.fullmatch(candidate):
        return Failure(
            error=ValidationError(
                code=ErrorCode.INVALID_ACCOUNT_ID,
                message=f"Account ID must be exactly {EXTERNAL_ACCOUNT_ID_LENGTH} digits",
                field="external_account_id",
            )
        )

    return Success(value=candidate)


class ConnectionRequestBuilder:
    """Builds validated ConnectionRequest values from form input."""

    def build(
        self,
        display_name: str | None,
        external_account_id: str | None,
    ) -> Result[ConnectionRequest, ValidationError]:
        """Validate the account id and normalize the display name.

        Args:
            display_name: Name as typed by the user (may be empty).
            external_account_id: Cloud account id as typed by the user.

        Returns:
            Success(ConnectionRequest): Ready for initiation.
            Failure(ValidationError): Account id absent or malformed.
        """
        account_result = validate_external_account_id(external_account_id)
        if isinstance(account_result, Failure):
            return account_result

        connection_name = normalize_connection_name(display_name)

        return Success(
            value=ConnectionRequest(
                connection_name=connection_name,
                external_account_id=account_result.value,
                display_name=display_name or "",
                name_was_changed=name_change_is_notable(display_name, connection_name),
            )
        )
