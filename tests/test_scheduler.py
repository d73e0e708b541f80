from __future__ import annotations

import pytest

from scrobble_status.scheduler import Scheduler


class FakeClock:
    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


def test_runs_immediately_then_every_interval():
    clock = FakeClock()
    fired = []

    def tick():
        fired.append(clock.now)
        clock.now += 2

    ticks = Scheduler(tick, interval=60, sleep=clock.sleep, clock=clock).run(max_ticks=3)

    assert ticks == 3
    assert fired == [0.0, 60.0, 120.0]
    assert clock.sleeps == [58.0, 58.0]


def test_slow_tick_skips_missed_slots(caplog):
    clock = FakeClock()
    fired = []
    durations = iter([150, 1, 1])

    def tick():
        fired.append(clock.now)
        clock.now += next(durations)

    Scheduler(tick, interval=60, sleep=clock.sleep, clock=clock).run(max_ticks=3)

    assert fired == [0.0, 180.0, 240.0]
    assert "skipped 2 slot(s)" in caplog.text


def test_trigger_skips_when_a_tick_is_in_progress():
    results = []
    scheduler = None

    def tick():
        results.append(scheduler.busy)
        results.append(scheduler.trigger())

    scheduler = Scheduler(tick, interval=60)

    assert scheduler.trigger() is True
    assert results == [True, False]
    assert scheduler.busy is False


def test_tick_exception_is_logged_and_loop_continues(caplog):
    clock = FakeClock()
    calls = []

    def tick():
        calls.append(clock.now)
        raise RuntimeError("kaboom")

    Scheduler(tick, interval=60, sleep=clock.sleep, clock=clock).run(max_ticks=2)

    assert calls == [0.0, 60.0]
    assert "Tick failed" in caplog.text


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        Scheduler(lambda: None, interval=0)
