from __future__ import annotations

from dataclasses import dataclass

import pytest

from math_quest.timers import RealClock, Scheduler


@dataclass
class FakeClock:
    t: float = 0.0

    def now(self) -> float:
        return self.t

    def advance(self, dt: float) -> None:
        self.t += dt


def test_call_fires_once_when_due_with_its_token() -> None:
    clock = FakeClock()
    sched = Scheduler(clock)
    fired: list[int] = []

    sched.call_later(1.5, fired.append, token=7)
    assert sched.run_due() == 0

    clock.advance(1.5)
    assert sched.run_due() == 1
    assert fired == [7]

    clock.advance(10.0)
    assert sched.run_due() == 0
    assert fired == [7]
    assert sched.pending_count == 0


def test_due_calls_fire_in_due_order() -> None:
    clock = FakeClock()
    sched = Scheduler(clock)
    fired: list[int] = []

    sched.call_later(2.0, fired.append, token=2)
    sched.call_later(1.0, fired.append, token=1)
    sched.call_later(5.0, fired.append, token=5)

    clock.advance(3.0)
    assert sched.run_due() == 2
    assert fired == [1, 2]
    assert sched.pending_count == 1


def test_negative_delay_rejected() -> None:
    with pytest.raises(ValueError):
        Scheduler(FakeClock()).call_later(-1.0, lambda _t: None, token=0)


def test_real_clock_is_monotonic() -> None:
    clock = RealClock()
    a = clock.now()
    b = clock.now()
    assert b >= a


def test_raising_callback_keeps_later_due_calls_queued() -> None:
    clock = FakeClock()
    sched = Scheduler(clock)
    fired: list[int] = []

    def boom(_token: int) -> None:
        raise RuntimeError("boom")

    sched.call_later(1.0, boom, token=1)
    sched.call_later(2.0, fired.append, token=2)

    clock.advance(3.0)
    with pytest.raises(RuntimeError):
        sched.run_due()
    assert sched.pending_count == 1

    assert sched.run_due() == 1
    assert fired == [2]
    assert sched.pending_count == 0
