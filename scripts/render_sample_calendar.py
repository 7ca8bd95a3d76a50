#!/usr/bin/env python3
"""Render a sample month-view PNG from synthetic events and a synthetic forecast."""

from __future__ import annotations

import argparse
import math
from datetime import date, datetime, timedelta
from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from zoneinfo import ZoneInfo

from eink_calendar.calendar import Event
from eink_calendar.month import MonthView, compose_month
from eink_calendar.rendering import MonthRenderer
from eink_calendar.weather import Forecast, HourlyForecastSample


PREVIEWS_DIR = Path(__file__).resolve().parents[1] / "previews"
DEFAULT_OUTPUT = PREVIEWS_DIR / "month_sample.png"


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--output",
        type=Path,
        default=DEFAULT_OUTPUT,
        help="Where to write the preview file (defaults to previews/month_sample.png).",
    )
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="Pretend today is this ISO date (defaults to the real date).",
    )
    parser.add_argument(
        "--timezone",
        default="Europe/Prague",
        help="IANA timezone for the sample events.",
    )
    return parser.parse_args()


def sample_events(today: date, tz: ZoneInfo) -> list[Event]:
    def at(day: date, hour: int, minute: int = 0) -> datetime:
        return datetime(day.year, day.month, day.day, hour, minute, tzinfo=tz)

    first = today.replace(day=1)
    conference = first + timedelta(days=9)
    return [
        Event("Conference", at(conference, 0), at(conference + timedelta(days=3), 0), all_day=True),
        Event("Standup", at(today, 9, 30), at(today, 9, 45)),
        Event("Lunch with the extended product design team", at(today, 12), at(today, 13)),
        Event("Dentist", at(today + timedelta(days=1), 8), at(today + timedelta(days=1), 9)),
        Event("Holiday", at(first, 0), at(first + timedelta(days=1), 0), all_day=True),
    ] + [
        Event(f"Sprint review {index}", at(first + timedelta(days=14), 9 + index), at(first + timedelta(days=14), 10 + index))
        for index in range(6)
    ]


def sample_forecast(today: date) -> Forecast:
    samples = []
    start = datetime(today.year, today.month, today.day)
    for hour in range(8 * 24):
        moment = start + timedelta(hours=hour)
        temperature = 12 + 6 * math.sin((moment.hour - 9) / 24 * 2 * math.pi) + hour / 48
        samples.append(HourlyForecastSample(time=moment, temperature=temperature))
    return Forecast(hourly=samples)


def main() -> None:
    args = parse_args()
    tz = ZoneInfo(args.timezone)
    now = datetime.now(tz=tz)
    if args.date is not None:
        now = datetime(args.date.year, args.date.month, args.date.day, 10, 0, tzinfo=tz)
    today = now.date()

    grid = compose_month(sample_events(today, tz), now, forecast=sample_forecast(today))
    view = MonthView(grid=grid, generated_at=now, status=None, battery="87%")

    args.output.parent.mkdir(parents=True, exist_ok=True)
    MonthRenderer().render_month(view, output_path=args.output)
    print(f"Wrote preview to {args.output}")


if __name__ == "__main__":
    main()
