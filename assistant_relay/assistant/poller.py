"""Run poller: waits for an assistant run to reach a terminal status.

Polls with exponential backoff under a deadline. The sleep function and clock
are injectable so tests can drive the loop in simulated time.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

from assistant_relay.assistant.config import AssistantConfig
from assistant_relay.assistant.errors import PollCancelled, PollTimeout, RunFailed
from assistant_relay.assistant.provider import AssistantProvider
from assistant_relay.models.schemas import PENDING_RUN_STATUSES, RunStatus

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]
ClockFunc = Callable[[], float]


class RunPoller:
    """Polls run status until completed, failed, timed out, or cancelled.

    Attributes:
        interval: First delay between checks, in seconds.
        backoff: Multiplier applied to the delay after each check.
        max_interval: Upper bound for a single delay.
        timeout: Default deadline for one run, in seconds.
        max_attempts: Optional cap on status checks.
    """

    def __init__(
        self,
        interval: float = 1.0,
        backoff: float = 1.5,
        max_interval: float = 5.0,
        timeout: float = 120.0,
        max_attempts: int | None = None,
        sleep: SleepFunc = asyncio.sleep,
        clock: ClockFunc = time.monotonic,
    ) -> None:
        self.interval = interval
        self.backoff = backoff
        self.max_interval = max_interval
        self.timeout = timeout
        self.max_attempts = max_attempts
        self._sleep = sleep
        self._clock = clock

    @classmethod
    def from_config(cls, config: AssistantConfig) -> "RunPoller":
        """Create a poller from relay configuration."""
        return cls(
            interval=config.poll_interval,
            backoff=config.poll_backoff,
            max_interval=config.max_poll_interval,
            timeout=config.poll_timeout,
            max_attempts=config.max_poll_attempts,
        )

    async def wait_for_completion(
        self,
        provider: AssistantProvider,
        thread_id: str,
        run_id: str,
        timeout: float | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> None:
        """Block until the run completes.

        Args:
            provider: Provider used to fetch run status.
            thread_id: Thread the run belongs to.
            run_id: Run to wait for.
            timeout: Deadline override for this run, in seconds.
            cancel_event: Set by the caller to stop waiting before the next check.

        Raises:
            RunFailed: Run reached a terminal status other than completed.
            PollTimeout: Deadline or attempt cap reached while still pending.
            PollCancelled: cancel_event was set while the run was pending.
            TransportError: Status could not be fetched.
        """
        started = self._clock()
        deadline = started + (self.timeout if timeout is None else timeout)
        delay = self.interval
        attempts = 0

        while True:
            if cancel_event is not None and cancel_event.is_set():
                logger.warning(f"Polling cancelled for run {run_id} on thread {thread_id}")
                raise PollCancelled(run_id)

            status = await provider.get_run_status(thread_id, run_id)
            attempts += 1
            logger.debug(f"Run {run_id} status={status} (check {attempts})")

            if status == RunStatus.COMPLETED.value:
                logger.info(f"Run {run_id} completed after {attempts} checks")
                return

            if status not in PENDING_RUN_STATUSES:
                raise RunFailed(status, run_id=run_id)

            now = self._clock()
            if (self.max_attempts is not None and attempts >= self.max_attempts) or (
                now >= deadline
            ):
                logger.warning(f"Run {run_id} still {status} after {attempts} checks")
                raise PollTimeout(run_id, attempts, now - started)

            await self._sleep(min(delay, deadline - now))
            delay = min(delay * self.backoff, self.max_interval)
