"""Fixed-interval polling until the service reports a terminal value."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable, FrozenSet, Optional

from ....domain.errors import FailureStateError, PollingTimeoutError

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]
Clock = Callable[[], float]


@dataclass(frozen=True)
class PollingPolicy:
    """Timing and termination rules shared by both waits of a flow.

    ``max_attempts`` and ``deadline_seconds`` default to ``None``, which
    polls until the terminal value appears. Failure state sets default to
    empty, so any non-terminal value keeps the loop going.
    """

    initial_delay_seconds: float = 5.0
    interval_seconds: float = 2.5
    max_attempts: Optional[int] = None
    deadline_seconds: Optional[float] = None
    connection_failure_states: FrozenSet[str] = field(default_factory=frozenset)
    credential_failure_states: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if self.initial_delay_seconds < 0 or self.interval_seconds < 0:
            raise ValueError("Polling delays cannot be negative")
        if self.max_attempts is not None and self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.deadline_seconds is not None and self.deadline_seconds <= 0:
            raise ValueError("deadline_seconds must be positive")


@dataclass(frozen=True)
class PollResult:
    value: str
    attempts: int


async def poll_until(
    fetch: Callable[[], Awaitable[str]],
    *,
    subject: str,
    terminal: str,
    interval_seconds: float,
    failure_states: FrozenSet[str] = frozenset(),
    max_attempts: Optional[int] = None,
    deadline_seconds: Optional[float] = None,
    sleep: Sleep = asyncio.sleep,
    clock: Clock = time.monotonic,
) -> PollResult:
    """Call ``fetch`` until it returns ``terminal``.

    The first poll happens immediately and ``interval_seconds`` is slept
    between consecutive polls, so a value sequence of length ``n`` costs
    ``n`` polls and ``n - 1`` sleeps. Errors raised by ``fetch`` propagate.

    Raises:
        FailureStateError: ``fetch`` returned a value in ``failure_states``.
        PollingTimeoutError: ``max_attempts`` polls were made, or the next
            poll would start after ``deadline_seconds``.
    """
    started = clock()
    attempts = 0
    while True:
        value = await fetch()
        attempts += 1
        logger.info("%s: %s (poll %d)", subject, value, attempts)

        if value == terminal:
            return PollResult(value=value, attempts=attempts)
        if value in failure_states:
            raise FailureStateError(subject, value)
        if max_attempts is not None and attempts >= max_attempts:
            raise PollingTimeoutError(subject, attempts, value)
        if (
            deadline_seconds is not None
            and clock() + interval_seconds - started > deadline_seconds
        ):
            raise PollingTimeoutError(subject, attempts, value)

        await sleep(interval_seconds)
