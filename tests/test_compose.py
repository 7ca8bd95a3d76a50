from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest
from zoneinfo import ZoneInfo

from eink_calendar.calendar.models import Event
from eink_calendar.month.compose import (
    MonthGrid,
    WeekRow,
    compose_month,
    sort_events,
    summarize_event,
)
from eink_calendar.weather.models import Forecast, HourlyForecastSample

TZ = ZoneInfo("Europe/Prague")
NOW = datetime(2024, 3, 15, 10, 0, tzinfo=TZ)


def _timed(summary: str, day: date, hour: int, minute: int = 0) -> Event:
    start = datetime(day.year, day.month, day.day, hour, minute, tzinfo=TZ)
    return Event(summary=summary, start=start, end=start + timedelta(hours=1))


def _all_day(summary: str, start: date, end: date) -> Event:
    return Event(
        summary=summary,
        start=datetime(start.year, start.month, start.day, tzinfo=TZ),
        end=datetime(end.year, end.month, end.day, tzinfo=TZ),
        all_day=True,
    )


def _cell(grid: MonthGrid, day: date):
    return next(cell for cell in grid.cells() if cell.date == day)


def test_march_2024_grid_shape() -> None:
    grid = compose_month([], NOW)
    cells = list(grid.cells())

    assert (grid.year, grid.month) == (2024, 3)
    assert grid.title == "March 2024"
    assert len(grid.weeks) == 5
    assert len(cells) == 35
    assert cells[0].date == date(2024, 2, 26)
    assert cells[-1].date == date(2024, 3, 31)
    assert all(later.date - earlier.date == timedelta(days=1) for earlier, later in zip(cells, cells[1:]))


def test_flags_are_derived_from_today_and_target_month() -> None:
    grid = compose_month([], NOW)

    today = _cell(grid, date(2024, 3, 15))
    assert today.is_today and not today.is_past
    assert _cell(grid, date(2024, 3, 14)).is_past
    assert not _cell(grid, date(2024, 3, 16)).is_past
    assert _cell(grid, date(2024, 3, 16)).is_weekend
    assert _cell(grid, date(2024, 3, 17)).is_weekend
    assert not _cell(grid, date(2024, 3, 18)).is_weekend
    assert not _cell(grid, date(2024, 2, 26)).is_current_month
    assert _cell(grid, date(2024, 3, 1)).is_current_month
    assert sum(cell.is_today for cell in grid.cells()) == 1


def test_day_labels() -> None:
    grid = compose_month([], NOW)
    first = _cell(grid, date(2024, 3, 1))

    assert first.day_label == "1"
    assert first.is_first_of_month
    assert first.month_abbr == date(2024, 3, 1).strftime("%b")


def test_conference_spans_three_cells() -> None:
    conference = _all_day("Conference", date(2024, 3, 10), date(2024, 3, 13))
    grid = compose_month([conference], NOW)

    for day in (date(2024, 3, 10), date(2024, 3, 11), date(2024, 3, 12)):
        assert [event.summary for event in _cell(grid, day).events] == ["Conference"]
    assert _cell(grid, date(2024, 3, 13)).events == ()


def test_events_capped_and_latest_dropped() -> None:
    day = date(2024, 3, 20)
    events = [_timed(f"Meeting {hour}", day, hour) for hour in range(19, 7, -1)]
    assert len(events) == 12

    grid = compose_month(events, NOW, max_events_per_day=10)
    summaries = _cell(grid, day).events

    assert len(summaries) == 10
    assert [summary.time for summary in summaries] == [f"{hour:02d}:00" for hour in range(8, 18)]
    assert "Meeting 18" not in {summary.summary for summary in summaries}
    assert "Meeting 19" not in {summary.summary for summary in summaries}


def test_all_day_events_sort_before_timed_events() -> None:
    day = date(2024, 3, 20)
    events = [
        _timed("Late", day, 16),
        _all_day("Holiday", day, day + timedelta(days=1)),
        _timed("Early", day, 7, 5),
    ]

    summaries = _cell(compose_month(events, NOW), day).events

    assert [(s.summary, s.time, s.all_day) for s in summaries] == [
        ("Holiday", "", True),
        ("Early", "07:05", False),
        ("Late", "16:00", False),
    ]


def test_sort_is_stable_for_equal_starts() -> None:
    day = date(2024, 3, 20)
    first = _timed("First", day, 9)
    second = _timed("Second", day, 9)

    assert sort_events([first, second]) == [first, second]


def test_summarize_event_formats_24_hour_time() -> None:
    summary = summarize_event(_timed("Review", date(2024, 3, 20), 15, 5))

    assert summary.time == "15:05"
    assert not summary.all_day


def test_temperatures_only_in_forecast_window() -> None:
    samples = []
    start = datetime(2024, 3, 10)
    for hour in range(20 * 24):
        samples.append(HourlyForecastSample(start + timedelta(hours=hour), 10.0))
    grid = compose_month([], NOW, forecast=Forecast(hourly=samples))

    with_temps = [cell.date for cell in grid.cells() if cell.day_temp]
    assert with_temps == [date(2024, 3, 15) + timedelta(days=offset) for offset in range(8)]
    assert all(bool(cell.day_temp) == bool(cell.night_temp) for cell in grid.cells())


def test_no_forecast_means_no_temperatures() -> None:
    grid = compose_month([], NOW, forecast=None)

    assert all(cell.day_temp == "" and cell.night_temp == "" for cell in grid.cells())


def test_invalid_event_limit_is_rejected() -> None:
    with pytest.raises(ValueError, match="max_events_per_day"):
        compose_month([], NOW, max_events_per_day=0)


def test_week_row_requires_seven_days() -> None:
    grid = compose_month([], NOW)

    with pytest.raises(ValueError, match="7 days"):
        WeekRow(days=grid.weeks[0].days[:6])
