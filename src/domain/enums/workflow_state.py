"""Connection workflow states.

State Machine:
    IDLE → INITIATING → AWAITING_EXTERNAL_STEP → POLLING → VERIFYING → CONNECTED

    - ERROR and TIMED_OUT are reachable from AWAITING_EXTERNAL_STEP, POLLING
      and VERIFYING
    - Every active state can be cancelled back to IDLE
    - ERROR recovers only through an explicit reset to IDLE
    - TIMED_OUT still accepts a manual verification

Usage:
    from src.domain.enums import WorkflowState

    if WorkflowState.POLLING.can_transition_to(WorkflowState.CONNECTED):
        ...
"""

from enum import Enum


class WorkflowState(str, Enum):
    """States of a single automated-connection workflow.

    String Enum:
        Inherits from str so snapshots serialize to plain strings.
    """

    IDLE = "idle"
    """No connection in progress. Form is editable."""

    INITIATING = "initiating"
    """Waiting for the backend to hand out a connection intent."""

    AWAITING_EXTERNAL_STEP = "awaiting_external_step"
    """Intent received; user has not opened the provisioning console yet."""

    POLLING = "polling"
    """User opened the console; status checks are running."""

    VERIFYING = "verifying"
    """A manual verification is in flight. Polling is stopped."""

    CONNECTED = "connected"
    """Connection record exists. Terminal."""

    ERROR = "error"
    """Hard failure. Only a reset leaves this state."""

    TIMED_OUT = "timed_out"
    """Automatic detection gave up. Manual verification is still possible."""

    def can_transition_to(self, target: "WorkflowState") -> bool:
        """Check whether ``self → target`` is an allowed transition.

        Args:
            target: Desired next state.

        Returns:
            bool: True if the transition is in the allowed table.
        """
        return target in _ALLOWED_TRANSITIONS[self]

    @property
    def has_background_work(self) -> bool:
        """Whether a timer or request may be outstanding in this state."""
        return self not in (WorkflowState.IDLE, WorkflowState.CONNECTED, WorkflowState.ERROR)

    @classmethod
    def cancellable_states(cls) -> list["WorkflowState"]:
        """States a user cancel moves back to IDLE.

        Returns:
            list[WorkflowState]: States where cancel is accepted.
        """
        return [
            cls.INITIATING,
            cls.AWAITING_EXTERNAL_STEP,
            cls.POLLING,
            cls.VERIFYING,
            cls.TIMED_OUT,
        ]

    @classmethod
    def manual_verification_states(cls) -> list["WorkflowState"]:
        """States that accept a manual "verify connection" request.

        Returns:
            list[WorkflowState]: States where manual verify is accepted.
        """
        return [cls.AWAITING_EXTERNAL_STEP, cls.POLLING, cls.TIMED_OUT]

    @classmethod
    def terminal_states(cls) -> list["WorkflowState"]:
        """States that only a reset leaves.

        Returns:
            list[WorkflowState]: Terminal states.
        """
        return [cls.CONNECTED, cls.ERROR]


_ALLOWED_TRANSITIONS: dict[WorkflowState, frozenset[WorkflowState]] = {
    WorkflowState.IDLE: frozenset({WorkflowState.INITIATING}),
    WorkflowState.INITIATING: frozenset(
        {
            WorkflowState.AWAITING_EXTERNAL_STEP,
            WorkflowState.ERROR,
            WorkflowState.IDLE,
        }
    ),
    WorkflowState.AWAITING_EXTERNAL_STEP: frozenset(
        {
            WorkflowState.POLLING,
            WorkflowState.VERIFYING,
            WorkflowState.ERROR,
            WorkflowState.TIMED_OUT,
            WorkflowState.IDLE,
        }
    ),
    WorkflowState.POLLING: frozenset(
        {
            WorkflowState.VERIFYING,
            WorkflowState.CONNECTED,
            WorkflowState.ERROR,
            WorkflowState.TIMED_OUT,
            WorkflowState.IDLE,
        }
    ),
    WorkflowState.VERIFYING: frozenset(
        {
            WorkflowState.CONNECTED,
            WorkflowState.AWAITING_EXTERNAL_STEP,
            WorkflowState.POLLING,
            WorkflowState.TIMED_OUT,
            WorkflowState.ERROR,
            WorkflowState.IDLE,
        }
    ),
    WorkflowState.TIMED_OUT: frozenset({WorkflowState.VERIFYING, WorkflowState.IDLE}),
    WorkflowState.CONNECTED: frozenset({WorkflowState.IDLE}),
    WorkflowState.ERROR: frozenset({WorkflowState.IDLE}),
}
