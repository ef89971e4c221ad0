"""Status poller.

Detects the result of the external provisioning step by ticking every
``interval_seconds`` for at most ``max_attempts`` ticks.

Each tick:
    1. Cheap ``check_connection_status``
       - connected → on_connected(record or None)
       - error     → on_error(reason)
       - pending or failed check → keep polling
    2. Without push confirmation, every ``fallback_verify_every``-th tick also
       runs the authoritative VerificationService; success goes through the
       same on_connected path, any failure is ignored.
    3. The tick numbered ``max_attempts`` ends the session with on_timeout()
       when nothing terminal happened first.

Concurrency:
    - One timer task per session; it only sleeps and spawns tick tasks, so a
      slow backend response never delays the next tick.
    - The PollingSession captured when a tick starts is its cancellation
      token: results that arrive after stop() or after a terminal outcome
      are dropped.
    - Exactly one of on_connected / on_error / on_timeout fires per session.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from src.application.services.verification_service import (
    VerificationService,
    record_from_payload,
)
from src.core.result import Failure, Success
from src.domain.entities.connection_intent import ConnectionIntent
from src.domain.entities.connection_record import ConnectionRecord
from src.domain.entities.polling_session import PollingSession
from src.domain.enums import ConnectionCheckStatus
from src.domain.protocols.cloud_connection_backend_protocol import (
    CloudConnectionBackendProtocol,
)
from src.domain.protocols.logger_protocol import LoggerProtocol

SleepFunc = Callable[[float], Awaitable[None]]
OnConnected = Callable[[ConnectionRecord | None], Awaitable[None]]
OnError = Callable[[str], Awaitable[None]]
OnTimeout = Callable[[], Awaitable[None]]

DEFAULT_ERROR_REASON = "Connection failed"


@dataclass(frozen=True, slots=True, kw_only=True)
class PollingCallbacks:
    """Terminal notifications for one polling session."""

    on_connected: OnConnected
    on_error: OnError
    on_timeout: OnTimeout


class StatusPoller:
    """Owns at most one polling session at a time.

    Attributes:
        _backend: Backend port for the cheap status check.
        _verification: Fallback verification service.
        _logger: Structured logger.
        _interval_seconds: Delay between ticks.
        _max_attempts: Ticks before timing out.
        _fallback_verify_every: Fallback cadence in ticks.
        _sleep: Awaitable delay (asyncio.sleep outside tests).
    """

    def __init__(
        self,
        backend: CloudConnectionBackendProtocol,
        verification_service: VerificationService,
        logger: LoggerProtocol,
        *,
        interval_seconds: float = 10.0,
        max_attempts: int = 36,
        fallback_verify_every: int = 3,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        if fallback_verify_every < 1:
            raise ValueError("fallback_verify_every must be at least 1")
        self._backend = backend
        self._verification = verification_service
        self._logger = logger
        self._interval_seconds = interval_seconds
        self._max_attempts = max_attempts
        self._fallback_verify_every = fallback_verify_every
        self._sleep = sleep
        self._session: PollingSession | None = None
        self._timer_task: asyncio.Task[None] | None = None
        self._tick_tasks: set[asyncio.Task[None]] = set()

    @property
    def session(self) -> PollingSession | None:
        """Current session, if one is running."""
        return self._session

    @property
    def is_running(self) -> bool:
        """Whether a session is active."""
        return self._session is not None and self._session.is_active()

    @property
    def attempt_count(self) -> int:
        """Ticks issued by the running session; zero when stopped."""
        return self._session.attempt_count if self.is_running else 0

    @property
    def interval_seconds(self) -> float:
        return self._interval_seconds

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def start(
        self,
        intent: ConnectionIntent,
        *,
        on_connected: OnConnected,
        on_error: OnError,
        on_timeout: OnTimeout,
        resume_from: int = 0,
    ) -> PollingSession:
        """Start polling for an intent.

        A no-op returning the running session if one is already active.
        Must be called from within a running event loop.

        Args:
            resume_from: Ticks an earlier session already spent on this
                intent. The new session continues that count, so restarting
                never extends the detection window past max_attempts ticks.

        Raises:
            ValueError: If resume_from leaves no attempts.

        Returns:
            PollingSession: The session callbacks will be delivered for.
        """
        if self._session is not None and self._session.is_active():
            self._logger.debug(
                "status_poller_already_running",
                token_prefix=intent.token_prefix,
            )
            return self._session

        if resume_from >= self._max_attempts:
            raise ValueError("resume_from leaves no polling attempts")

        session = PollingSession(
            correlation_token=intent.correlation_token,
            max_attempts=self._max_attempts,
            interval_seconds=self._interval_seconds,
            attempt_count=resume_from,
        )
        callbacks = PollingCallbacks(
            on_connected=on_connected,
            on_error=on_error,
            on_timeout=on_timeout,
        )
        self._session = session
        self._timer_task = asyncio.create_task(self._run_timer(session, intent, callbacks))

        self._logger.info(
            "status_poller_started",
            token_prefix=intent.token_prefix,
            resume_from=resume_from,
            interval_seconds=self._interval_seconds,
            max_attempts=self._max_attempts,
            supports_push_confirmation=intent.supports_push_confirmation,
        )
        return session

    def stop(self) -> None:
        """Stop polling. Idempotent.

        Clears the timer, resets the attempt count and deactivates the
        session so in-flight ticks discard their results.
        """
        session = self._session
        if session is not None:
            session.deactivate()
        if self._timer_task is not None and not self._timer_task.done():
            self._timer_task.cancel()
        self._timer_task = None
        self._session = None

    async def aclose(self) -> None:
        """Stop polling and wait for outstanding tasks to finish."""
        timer_task = self._timer_task
        self.stop()
        pending = [task for task in self._tick_tasks if not task.done()]
        for task in pending:
            task.cancel()
        if timer_task is not None:
            pending.append(timer_task)
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    # -------------------------------------------------------------------------
    # Timer and ticks
    # -------------------------------------------------------------------------

    async def _run_timer(
        self,
        session: PollingSession,
        intent: ConnectionIntent,
        callbacks: PollingCallbacks,
    ) -> None:
        while session.is_active() and session.has_attempts_remaining():
            await self._sleep(session.interval_seconds)
            if not session.is_active():
                return
            attempt = session.record_attempt()
            task = asyncio.create_task(self._tick(session, intent, callbacks, attempt))
            self._tick_tasks.add(task)
            task.add_done_callback(self._tick_tasks.discard)

    def _should_run_fallback(self, intent: ConnectionIntent, attempt: int) -> bool:
        return (
            not intent.supports_push_confirmation
            and attempt % self._fallback_verify_every == 0
        )

    async def _tick(
        self,
        session: PollingSession,
        intent: ConnectionIntent,
        callbacks: PollingCallbacks,
        attempt: int,
    ) -> None:
        log = self._logger.bind(token_prefix=intent.token_prefix, attempt=attempt)
        log.debug("status_poll_tick", max_attempts=session.max_attempts)

        status_result = await self._backend.check_connection_status(
            intent.correlation_token
        )
        if not session.is_active():
            log.debug("status_poll_result_discarded")
            return

        match status_result:
            case Success(value=payload):
                status = ConnectionCheckStatus.parse(payload.get("status"))
                if status is ConnectionCheckStatus.CONNECTED:
                    record = record_from_payload(payload, intent)
                    await self._finish_connected(session, callbacks, record, log, "status_check")
                    return
                if status is ConnectionCheckStatus.ERROR:
                    reason = payload.get("error")
                    await self._finish_error(
                        session,
                        callbacks,
                        reason if isinstance(reason, str) and reason else DEFAULT_ERROR_REASON,
                        log,
                    )
                    return
            case Failure(error=error):
                log.warning(
                    "status_check_failed",
                    error_code=error.code.value,
                    error_message=error.message,
                )

        if self._should_run_fallback(intent, attempt):
            verify_result = await self._verification.verify(intent)
            if not session.is_active():
                log.debug("fallback_verification_result_discarded")
                return
            match verify_result:
                case Success(value=record):
                    await self._finish_connected(
                        session, callbacks, record, log, "fallback_verification"
                    )
                    return
                case Failure(error=verify_error):
                    log.debug(
                        "fallback_verification_not_ready",
                        error_code=verify_error.code.value,
                    )

        if attempt >= session.max_attempts and session.claim_terminal():
            self._release(session)
            log.info("status_poller_timed_out")
            await callbacks.on_timeout()

    # -------------------------------------------------------------------------
    # Terminal outcomes
    # -------------------------------------------------------------------------

    def _release(self, session: PollingSession) -> None:
        if self._session is session:
            self.stop()

    async def _finish_connected(
        self,
        session: PollingSession,
        callbacks: PollingCallbacks,
        record: ConnectionRecord | None,
        log: LoggerProtocol,
        source: str,
    ) -> None:
        if not session.claim_terminal():
            return
        self._release(session)
        log.info(
            "status_poller_connected",
            source=source,
            connection_id=record.id if record else None,
        )
        await callbacks.on_connected(record)

    async def _finish_error(
        self,
        session: PollingSession,
        callbacks: PollingCallbacks,
        reason: str,
        log: LoggerProtocol,
    ) -> None:
        if not session.claim_terminal():
            return
        self._release(session)
        log.warning("status_poller_connection_error", reason=reason)
        await callbacks.on_error(reason)
