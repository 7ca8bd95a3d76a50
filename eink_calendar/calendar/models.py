"""Calendar data structures shared by the client and the month compositor."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Event:
    """A single calendar occurrence with recurrences already expanded.

    All-day events keep the provider's exclusive end: an event covering the
    10th through the 12th ends at midnight on the 13th.
    """

    summary: str
    start: datetime
    end: datetime
    all_day: bool = False
    description: Optional[str] = None
    location: Optional[str] = None
    calendar_name: Optional[str] = None


@dataclass(frozen=True)
class CalendarInfo:
    """Identifier and display name of a calendar visible to the account."""

    id: str
    name: str


__all__ = ["CalendarInfo", "Event"]
