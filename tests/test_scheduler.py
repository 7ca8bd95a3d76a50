from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from zoneinfo import ZoneInfo

from eink_calendar.scheduler import Scheduler, next_hour_boundary


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.current = start
        self.sleeps: list[float] = []

    def now(self) -> datetime:
        return self.current

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.current += timedelta(seconds=seconds)

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


@pytest.mark.parametrize(
    "moment, expected",
    [
        (datetime(2024, 1, 1, 12, 0, 5), datetime(2024, 1, 1, 13, 0)),
        (datetime(2024, 1, 1, 12, 0, 0), datetime(2024, 1, 1, 12, 0)),
        (datetime(2024, 1, 1, 12, 59, 59, 999999), datetime(2024, 1, 1, 13, 0)),
        (datetime(2024, 1, 1, 23, 30), datetime(2024, 1, 2, 0, 0)),
    ],
)
def test_next_hour_boundary(moment: datetime, expected: datetime) -> None:
    assert next_hour_boundary(moment) == expected


def test_next_hour_boundary_keeps_timezone() -> None:
    tz = ZoneInfo("Europe/Prague")

    result = next_hour_boundary(datetime(2024, 3, 15, 10, 15, tzinfo=tz))

    assert result == datetime(2024, 3, 15, 11, 0, tzinfo=tz)
    assert result.tzinfo is tz


def test_scheduler_waits_until_next_boundary() -> None:
    start = datetime(2024, 1, 1, 12, 59, 30, 500000)
    clock = FakeClock(start)
    trigger_times: list[datetime] = []

    def callback() -> None:
        trigger_times.append(clock.now())

    scheduler = Scheduler(callback, time_provider=clock.now, sleep_func=clock.sleep)
    scheduler.run(iterations=1)

    assert trigger_times == [datetime(2024, 1, 1, 13, 0)]
    assert pytest.approx(clock.sleeps[0], rel=0, abs=0.001) == 29.5


def test_immediate_run_counts_as_iteration() -> None:
    clock = FakeClock(datetime(2024, 1, 1, 12, 10))
    calls: list[datetime] = []

    scheduler = Scheduler(lambda: calls.append(clock.now()), time_provider=clock.now, sleep_func=clock.sleep)
    scheduler.run(immediate=True, iterations=1)

    assert calls == [datetime(2024, 1, 1, 12, 10)]
    assert clock.sleeps == []


def test_scheduler_resynchronizes_after_drift() -> None:
    clock = FakeClock(datetime(2024, 1, 1, 12, 0, 0))
    trigger_times: list[datetime] = []

    def callback() -> None:
        trigger_times.append(clock.now())
        # Simulate a refresh that overruns the following boundary.
        clock.advance(90 * 60)

    scheduler = Scheduler(callback, time_provider=clock.now, sleep_func=clock.sleep)
    scheduler.run(iterations=2)

    assert trigger_times == [
        datetime(2024, 1, 1, 12, 0, 0),
        datetime(2024, 1, 1, 14, 0, 0),
    ]
    assert pytest.approx(clock.sleeps[-1], rel=0, abs=0.001) == 30 * 60
