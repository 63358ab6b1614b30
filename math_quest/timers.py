from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol


class Clock(Protocol):
    """Time source the scheduler measures delays against.

    Tests pass a hand-advanced clock so delayed calls fire on demand.
    """

    def now(self) -> float:
        """Seconds on a clock that never goes backwards."""
        ...


class RealClock:
    """Wall-independent game time for the pygame loop."""

    def now(self) -> float:
        return time.monotonic()


@dataclass(frozen=True, slots=True)
class DelayedCall:
    due_at_s: float
    token: int
    callback: Callable[[int], None]


class Scheduler:
    """One-shot delayed callbacks polled from the frame loop.

    Nothing runs on its own: ``run_due()`` fires every call whose due time
    has passed, oldest first. Each callback receives the token it was
    scheduled with so the owner can tell whether it still applies.
    """

    def __init__(self, clock: Clock) -> None:
        self._clock = clock
        self._pending: list[DelayedCall] = []

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def call_later(self, delay_s: float, callback: Callable[[int], None], *, token: int) -> DelayedCall:
        if delay_s < 0:
            raise ValueError("delay_s must be non-negative")
        call = DelayedCall(due_at_s=self._clock.now() + float(delay_s), token=int(token), callback=callback)
        self._pending.append(call)
        return call

    def run_due(self) -> int:
        """Fire due calls. Returns how many fired."""

        now = self._clock.now()
        due = sorted((c for c in self._pending if c.due_at_s <= now), key=lambda c: c.due_at_s)
        if not due:
            return 0
        for call in due:
            # A raising callback leaves the later due calls queued.
            self._pending.remove(call)
            call.callback(call.token)
        return len(due)
