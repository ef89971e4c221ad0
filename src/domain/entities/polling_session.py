"""Polling session domain entity.

One run of the status poller for one connection intent. The session object is
the cancellation token for everything the run started: a tick's network
response is applied only if the session it was issued under is still active.

Usage:
    session = PollingSession(
        correlation_token=intent.correlation_token,
        max_attempts=36,
        interval_seconds=10.0,
    )
    attempt = session.record_attempt()
    if session.claim_terminal():
        ...  # this caller owns the single terminal notification
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime


@dataclass
class PollingSession:
    """State of one polling run.

    Invariants:
        - attempt_count never exceeds max_attempts
        - at most one caller ever wins claim_terminal()
        - once deactivated, a session never becomes active again

    Attributes:
        correlation_token: Token being polled.
        max_attempts: Ticks before the session times out.
        interval_seconds: Delay between ticks.
        attempt_count: Ticks issued so far.
        started_at: When the session was started.
        active: False once stopped or finished.
        terminal_claimed: True once a terminal outcome was claimed.
    """

    correlation_token: str
    max_attempts: int
    interval_seconds: float
    attempt_count: int = 0
    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    active: bool = True
    terminal_claimed: bool = False

    def __post_init__(self) -> None:
        """Validate session parameters.

        Raises:
            ValueError: If max_attempts < 1, interval_seconds <= 0 or
                attempt_count is outside 0..max_attempts.
        """
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.interval_seconds <= 0:
            raise ValueError("interval_seconds must be greater than 0")
        if not 0 <= self.attempt_count <= self.max_attempts:
            raise ValueError("attempt_count must be between 0 and max_attempts")

    # -------------------------------------------------------------------------
    # Query Methods (Read-Only)
    # -------------------------------------------------------------------------

    def is_active(self) -> bool:
        """Check if results for this session should still be applied."""
        return self.active and not self.terminal_claimed

    def has_attempts_remaining(self) -> bool:
        """Check if another tick may be issued."""
        return self.attempt_count < self.max_attempts

    @property
    def elapsed_seconds(self) -> float:
        """Nominal detection time spent so far."""
        return self.attempt_count * self.interval_seconds

    # -------------------------------------------------------------------------
    # State Transitions
    # -------------------------------------------------------------------------

    def record_attempt(self) -> int:
        """Count a new tick.

        Returns:
            int: The 1-based number of the tick just recorded.

        Raises:
            RuntimeError: If no attempts remain. The poller never schedules
                past max_attempts, so this signals a scheduling bug.
        """
        if not self.has_attempts_remaining():
            raise RuntimeError("polling session has no attempts remaining")
        self.attempt_count += 1
        return self.attempt_count

    def claim_terminal(self) -> bool:
        """Claim the single terminal outcome of this session.

        Returns:
            bool: True for exactly one caller while the session is active,
                False for everyone else.
        """
        if not self.is_active():
            return False
        self.terminal_claimed = True
        self.active = False
        return True

    def deactivate(self) -> None:
        """Stop the session without a terminal outcome. Idempotent."""
        self.active = False
