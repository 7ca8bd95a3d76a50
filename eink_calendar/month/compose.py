"""Compose the month view model from events and the forecast."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Sequence

from ..calendar.models import Event
from ..weather.models import Forecast
from .events import map_events_by_date
from .grid import DAYS_PER_WEEK, iter_grid_dates, month_grid_range, split_weeks
from .temperature import TemperatureWindow

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_EVENTS_PER_DAY = 10

TemperatureLookup = Callable[[date], tuple[str, str]]


@dataclass(frozen=True)
class EventSummary:
    """Render-ready projection of an event."""

    time: str
    summary: str
    all_day: bool


@dataclass(frozen=True)
class DayCell:
    """Everything needed to draw a single grid square."""

    date: date
    day_label: str
    month_abbr: str
    is_today: bool
    is_past: bool
    is_weekend: bool
    is_current_month: bool
    day_temp: str = ""
    night_temp: str = ""
    events: tuple[EventSummary, ...] = ()

    @property
    def is_first_of_month(self) -> bool:
        return self.date.day == 1


@dataclass(frozen=True)
class WeekRow:
    days: tuple[DayCell, ...]

    def __post_init__(self) -> None:
        if len(self.days) != DAYS_PER_WEEK:
            raise ValueError(f"A week row needs {DAYS_PER_WEEK} days, got {len(self.days)}.")


@dataclass(frozen=True)
class MonthGrid:
    """Week rows covering one month, Monday through Sunday."""

    year: int
    month: int
    weeks: tuple[WeekRow, ...]

    @property
    def month_name(self) -> str:
        return date(self.year, self.month, 1).strftime("%B")

    @property
    def title(self) -> str:
        return f"{self.month_name} {self.year}"

    def cells(self) -> Iterator[DayCell]:
        for week in self.weeks:
            yield from week.days


@dataclass(frozen=True)
class MonthView:
    """Render payload: the grid plus header information."""

    grid: MonthGrid
    generated_at: datetime
    status: Optional[str] = None
    battery: Optional[str] = None
    weekday_labels: tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def sort_events(events: Iterable[Event]) -> List[Event]:
    """All-day events first, then timed events by start time."""

    return sorted(events, key=lambda event: (not event.all_day, event.start))


def summarize_event(event: Event) -> EventSummary:
    time_label = "" if event.all_day else event.start.strftime("%H:%M")
    return EventSummary(time=time_label, summary=event.summary, all_day=event.all_day)


def compose_day(
    day: date,
    *,
    today: date,
    target_month: int,
    events: Sequence[Event],
    temperatures: TemperatureLookup,
    max_events_per_day: int,
) -> DayCell:
    """Build the view model for one date."""

    ordered = sort_events(events)
    if len(ordered) > max_events_per_day:
        LOGGER.debug(
            "Dropping %d event(s) on %s beyond the limit of %d",
            len(ordered) - max_events_per_day,
            day,
            max_events_per_day,
        )
        ordered = ordered[:max_events_per_day]

    day_temp, night_temp = temperatures(day)

    return DayCell(
        date=day,
        day_label=str(day.day),
        month_abbr=day.strftime("%b"),
        is_today=day == today,
        is_past=day < today,
        is_weekend=day.isoweekday() >= 6,
        is_current_month=day.month == target_month,
        day_temp=day_temp,
        night_temp=night_temp,
        events=tuple(summarize_event(event) for event in ordered),
    )


def compose_weeks(
    dates: Iterable[date],
    *,
    today: date,
    target_month: int,
    events_by_date: Dict[date, List[Event]],
    temperatures: TemperatureLookup,
    max_events_per_day: int,
) -> tuple[WeekRow, ...]:
    rows: List[WeekRow] = []
    for week_dates in split_weeks(dates):
        cells = tuple(
            compose_day(
                day,
                today=today,
                target_month=target_month,
                events=events_by_date.get(day, ()),
                temperatures=temperatures,
                max_events_per_day=max_events_per_day,
            )
            for day in week_dates
        )
        rows.append(WeekRow(days=cells))
    return tuple(rows)


def compose_month(
    events: Iterable[Event],
    now: datetime,
    *,
    forecast: Forecast | None = None,
    max_events_per_day: int = DEFAULT_MAX_EVENTS_PER_DAY,
) -> MonthGrid:
    """Compose the grid for the month containing ``now``.

    Args:
        events: Flattened events from every calendar source.
        now: Current local time. Selects the month and the "today" cell.
        forecast: Optional hourly forecast. ``None`` renders without temperatures.
        max_events_per_day: Upper bound on the events listed per cell.
    Returns:
        The composed :class:`MonthGrid`.
    """

    if max_events_per_day < 1:
        raise ValueError(f"max_events_per_day must be positive, got {max_events_per_day}.")

    today = now.date()
    start, end = month_grid_range(now)
    events_by_date = map_events_by_date(events)
    weeks = compose_weeks(
        iter_grid_dates(start, end),
        today=today,
        target_month=now.month,
        events_by_date=events_by_date,
        temperatures=TemperatureWindow(forecast, today),
        max_events_per_day=max_events_per_day,
    )
    LOGGER.debug("Composed %d week rows from %s to %s", len(weeks), start, end)
    return MonthGrid(year=now.year, month=now.month, weeks=weeks)


__all__ = [
    "DEFAULT_MAX_EVENTS_PER_DAY",
    "DayCell",
    "EventSummary",
    "MonthGrid",
    "MonthView",
    "WeekRow",
    "compose_day",
    "compose_month",
    "compose_weeks",
    "sort_events",
    "summarize_event",
]
