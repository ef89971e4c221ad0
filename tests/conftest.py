"""Pytest configuration and shared test helpers.

This configuration ensures:
1. Settings load in the testing environment (JSON logs, no dev-only routes)
2. Async tests are marked for pytest-asyncio automatically
3. Polling can be driven tick by tick without real sleeps (ManualClock)
"""

import asyncio
import inspect
import os
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

os.environ.setdefault("ENVIRONMENT", "testing")

from src.core.result import Success  # noqa: E402
from src.domain.entities.connection_intent import ConnectionIntent  # noqa: E402
from src.domain.entities.connection_record import ConnectionRecord  # noqa: E402
from src.domain.enums import ConnectionKind  # noqa: E402

pytest_plugins = ("pytest_asyncio",)


# =============================================================================
# Helper Factories
# =============================================================================


def create_intent(
    correlation_token: str = "ext-3f9a2b7c1d4e",
    trust_role_identifier: str = "arn:aws:iam::123456789012:role/CloudSpendRole",
    provisioning_console_url: str = "https://console.aws.amazon.com/cloudformation/quickcreate",
    connection_name: str = "my-account",
    external_account_id: str = "123456789012",
    supports_push_confirmation: bool = False,
    kind: ConnectionKind = ConnectionKind.BILLING,
) -> ConnectionIntent:
    """Helper to create a ConnectionIntent for testing.

    Usage:
        # Pull-style detection (fallback verification runs)
        intent = create_intent()

        # Push-style detection (status check is authoritative)
        intent = create_intent(supports_push_confirmation=True)
    """
    return ConnectionIntent(
        correlation_token=correlation_token,
        trust_role_identifier=trust_role_identifier,
        provisioning_console_url=provisioning_console_url,
        connection_name=connection_name,
        external_account_id=external_account_id,
        supports_push_confirmation=supports_push_confirmation,
        kind=kind,
    )


def create_record(
    id: str = "conn-42",
    connection_name: str = "my-account",
    external_account_id: str = "123456789012",
    status: str | None = "active",
) -> ConnectionRecord:
    """Helper to create a ConnectionRecord for testing."""
    return ConnectionRecord(
        id=id,
        connection_name=connection_name,
        external_account_id=external_account_id,
        status=status,
    )


def initiation_payload(**overrides: Any) -> dict[str, Any]:
    """Backend response body for a successful initiation."""
    payload: dict[str, Any] = {
        "externalId": "ext-3f9a2b7c1d4e",
        "roleArn": "arn:aws:iam::123456789012:role/CloudSpendRole",
        "quickCreateUrl": "https://console.aws.amazon.com/cloudformation/quickcreate",
        "connectionName": "my-account",
        "awsAccountId": "123456789012",
        "hasCallback": False,
    }
    payload.update(overrides)
    return payload


def create_backend() -> AsyncMock:
    """Backend double whose calls all succeed with "nothing happened yet".

    Defaults:
        initiate_automated_connection → initiation_payload()
        check_connection_status       → {"status": "pending"}
        verify_and_create_connection  → {"id": "conn-42", ...}
        cleanup_orphaned_resources    → None
        request_data_sync             → None
    """
    backend = AsyncMock()
    backend.initiate_automated_connection.return_value = Success(value=initiation_payload())
    backend.check_connection_status.return_value = Success(value={"status": "pending"})
    backend.verify_and_create_connection.return_value = Success(
        value={
            "id": "conn-42",
            "connectionName": "my-account",
            "awsAccountId": "123456789012",
            "status": "active",
        }
    )
    backend.cleanup_orphaned_resources.return_value = Success(value=None)
    backend.request_data_sync.return_value = Success(value=None)
    return backend


async def settle(rounds: int = 20) -> None:
    """Let every ready task run until it blocks again."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class ManualClock:
    """Stand-in for asyncio.sleep that only returns when told to.

    Every sleep() parks on a future; advance() releases the parked sleeps
    and lets the tasks they wake up run to their next suspension point.

    Usage:
        clock = ManualClock()
        poller = StatusPoller(..., sleep=clock.sleep)
        poller.start(intent, ...)
        await clock.advance(3)  # three ticks
    """

    def __init__(self) -> None:
        self.sleeps: list[float] = []
        self._waiters: list[asyncio.Future[None]] = []

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        waiter = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        await waiter

    @property
    def pending(self) -> int:
        """Number of sleeps currently parked."""
        return sum(1 for waiter in self._waiters if not waiter.done())

    async def advance(self, ticks: int = 1) -> None:
        for _ in range(ticks):
            await settle()
            waiters = [waiter for waiter in self._waiters if not waiter.done()]
            self._waiters = []
            if not waiters:
                return
            for waiter in waiters:
                waiter.set_result(None)
            await settle()


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def mock_logger() -> MagicMock:
    """Logger double; bind() returns itself so bound calls are observable."""
    logger = MagicMock()
    logger.bind.return_value = logger
    logger.with_context.return_value = logger
    return logger


@pytest.fixture
def backend() -> AsyncMock:
    return create_backend()


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


# Pytest markers for different test types
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests with mocked dependencies")
    config.addinivalue_line(
        "markers", "integration: Integration tests against mocked HTTP transport"
    )
    config.addinivalue_line("markers", "api: API tests through the FastAPI app")


def pytest_collection_modifyitems(config, items):
    """Automatically add asyncio marker to async test functions.

    This ensures all async tests are properly marked even if
    the developer forgets to add @pytest.mark.asyncio.
    """
    for item in items:
        if inspect.iscoroutinefunction(getattr(item, "function", None)):
            item.add_marker(pytest.mark.asyncio)
