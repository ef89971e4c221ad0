"""Unit tests for InMemoryEventBus.

Tests cover:
- Subscribe/publish basic flow
- Multiple handlers for the same event
- Handler failure doesn't break others (fail-open)
- No handlers registered (no-op)
"""

from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from src.domain.events.base_event import DomainEvent
from src.domain.events.cloud_provider_events import CloudProvidersChanged
from src.infrastructure.events.in_memory_event_bus import InMemoryEventBus


def create_event() -> CloudProvidersChanged:
    return CloudProvidersChanged(
        workflow_id=uuid4(),
        connection_id="conn-42",
        connection_name="my-account",
        external_account_id="123456789012",
        kind="billing",
    )


@pytest.mark.unit
class TestInMemoryEventBusBasicFlow:
    """Test basic subscribe/publish flow."""

    async def test_subscribe_and_publish_single_handler(self):
        # Arrange
        event_bus = InMemoryEventBus(logger=MagicMock())
        received: list[DomainEvent] = []

        async def handler(event: DomainEvent) -> None:
            received.append(event)

        event = create_event()

        # Act
        event_bus.subscribe(CloudProvidersChanged, handler)
        await event_bus.publish(event)

        # Assert
        assert received == [event]
        assert event_bus.handler_count(CloudProvidersChanged) == 1

    async def test_all_handlers_called(self):
        event_bus = InMemoryEventBus(logger=MagicMock())
        calls: list[str] = []

        async def handler_1(event: DomainEvent) -> None:
            calls.append("handler_1")

        async def handler_2(event: DomainEvent) -> None:
            calls.append("handler_2")

        event_bus.subscribe(CloudProvidersChanged, handler_1)
        event_bus.subscribe(CloudProvidersChanged, handler_2)
        await event_bus.publish(create_event())

        assert sorted(calls) == ["handler_1", "handler_2"]

    async def test_publish_with_no_handlers_is_noop(self):
        mock_logger = MagicMock()
        event_bus = InMemoryEventBus(logger=mock_logger)

        await event_bus.publish(create_event())

        mock_logger.debug.assert_not_called()
        assert event_bus.handler_count(CloudProvidersChanged) == 0


@pytest.mark.unit
class TestInMemoryEventBusFailOpen:
    """Test fail-open behavior."""

    async def test_failing_handler_does_not_break_others(self):
        # Arrange
        mock_logger = MagicMock()
        event_bus = InMemoryEventBus(logger=mock_logger)
        calls: list[str] = []

        async def failing_handler(event: DomainEvent) -> None:
            raise RuntimeError("handler exploded")

        async def working_handler(event: DomainEvent) -> None:
            calls.append("working")

        event_bus.subscribe(CloudProvidersChanged, failing_handler)
        event_bus.subscribe(CloudProvidersChanged, working_handler)

        # Act
        await event_bus.publish(create_event())

        # Assert
        assert calls == ["working"]
        mock_logger.warning.assert_called_once()
        kwargs = mock_logger.warning.call_args.kwargs
        assert kwargs["handler_name"] == "failing_handler"
        assert kwargs["error_type"] == "RuntimeError"
        assert kwargs["error_message"] == "handler exploded"
