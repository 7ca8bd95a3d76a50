"""Expand calendar events into the dates they occupy."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List

from ..calendar.models import Event

logger = logging.getLogger(__name__)


class EventDataError(ValueError):
    """Raised when an event's bounds cannot be placed on the calendar."""


def event_dates(event: Event) -> tuple[date, date]:
    """Return the first and last calendar date occupied by ``event``.

    Dates are taken in the event's own timezone. Providers encode the end of
    an all-day event as the day after its last occupied day, so that end is
    pulled back by one day.
    """

    if not isinstance(event.start, datetime) or not isinstance(event.end, datetime):
        raise EventDataError(
            f"Event {event.summary!r} has no usable start/end timestamps: "
            f"{event.start!r} .. {event.end!r}"
        )

    try:
        reversed_bounds = event.end < event.start
    except TypeError as exc:
        raise EventDataError(
            f"Event {event.summary!r} mixes naive and timezone-aware timestamps."
        ) from exc
    if reversed_bounds:
        raise EventDataError(
            f"Event {event.summary!r} ends ({event.end.isoformat()}) "
            f"before it starts ({event.start.isoformat()})."
        )

    start_date = event.start.date()
    end_date = event.end.date()

    if event.all_day and end_date > start_date:
        end_date -= timedelta(days=1)

    if end_date < start_date:
        raise EventDataError(
            f"Event {event.summary!r} ends ({end_date}) before it starts ({start_date})."
        )
    return start_date, end_date


def map_events_by_date(events: Iterable[Event]) -> Dict[date, List[Event]]:
    """Bucket ``events`` under every date they touch.

    Buckets keep the input order; ordering for display happens when the day
    cells are composed.
    """

    by_date: Dict[date, List[Event]] = {}
    for event in events:
        start_date, end_date = event_dates(event)
        current = start_date
        while current <= end_date:
            by_date.setdefault(current, []).append(event)
            current += timedelta(days=1)
        if end_date > start_date:
            logger.debug(
                "Event %r spans %d days from %s",
                event.summary,
                (end_date - start_date).days + 1,
                start_date,
            )
    return by_date


__all__ = ["EventDataError", "event_dates", "map_events_by_date"]
