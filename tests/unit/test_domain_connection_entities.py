"""Unit tests for connection entities and supporting enums.

Tests cover:
- ConnectionIntent validation and token prefix
- ConnectionKind verification type
- ConnectionCheckStatus parsing of backend values
"""

import pytest

from src.domain.entities.connection_intent import ConnectionIntent
from src.domain.enums import ConnectionCheckStatus, ConnectionKind
from tests.conftest import create_intent


@pytest.mark.unit
class TestConnectionIntent:
    def test_defaults(self):
        intent = create_intent()

        assert intent.supports_push_confirmation is False
        assert intent.kind is ConnectionKind.BILLING
        assert intent.created_at.tzinfo is not None

    def test_token_prefix_is_truncated(self):
        intent = create_intent(correlation_token="abcdefghijklmnop")

        assert intent.token_prefix == "abcdefgh"

    def test_empty_required_field_rejected(self):
        with pytest.raises(ValueError, match="correlation_token"):
            ConnectionIntent(
                correlation_token="",
                trust_role_identifier="arn:aws:iam::123456789012:role/CloudSpendRole",
                provisioning_console_url="https://console.aws.amazon.com/",
                connection_name="my-account",
                external_account_id="123456789012",
            )

    def test_intent_is_immutable(self):
        intent = create_intent()

        with pytest.raises(AttributeError):
            intent.connection_name = "other"  # type: ignore[misc]


@pytest.mark.unit
class TestConnectionKind:
    def test_verification_type(self):
        assert ConnectionKind.BILLING.verification_type == "automated-billing"
        assert ConnectionKind.RESOURCE.verification_type == "automated-resource"

    def test_values(self):
        assert ConnectionKind.values() == ["billing", "resource"]


@pytest.mark.unit
class TestConnectionCheckStatus:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("connected", ConnectionCheckStatus.CONNECTED),
            ("ERROR", ConnectionCheckStatus.ERROR),
            (" pending ", ConnectionCheckStatus.PENDING),
            ("creating", ConnectionCheckStatus.PENDING),
            (None, ConnectionCheckStatus.PENDING),
            (1, ConnectionCheckStatus.PENDING),
        ],
    )
    def test_parse(self, raw, expected):
        assert ConnectionCheckStatus.parse(raw) is expected
