"""Month-view composition: grid range, event mapping, temperatures and cells."""

from .compose import (
    DayCell,
    EventSummary,
    MonthGrid,
    MonthView,
    WeekRow,
    compose_month,
    sort_events,
)
from .events import EventDataError, map_events_by_date
from .grid import fetch_window, month_grid_range
from .temperature import TemperatureWindow, temperatures_for

__all__ = [
    "DayCell",
    "EventDataError",
    "EventSummary",
    "MonthGrid",
    "MonthView",
    "TemperatureWindow",
    "WeekRow",
    "compose_month",
    "fetch_window",
    "map_events_by_date",
    "month_grid_range",
    "sort_events",
    "temperatures_for",
]
