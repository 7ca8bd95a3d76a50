"""Hourly forecast data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional

DAY_HOURS = range(12, 18)
NIGHT_HOURS = range(0, 6)


@dataclass(frozen=True)
class HourlyForecastSample:
    """Temperature reading for one hour, in degrees Celsius.

    ``time`` is a naive wall-clock timestamp in the forecast's timezone.
    """

    time: datetime
    temperature: float


@dataclass
class Forecast:
    """Collection of hourly samples returned by a weather provider."""

    hourly: List[HourlyForecastSample] = field(default_factory=list)

    def day_temperature(self, target: date) -> Optional[float]:
        """Mean temperature between 12:00 and 18:00 on ``target``."""

        return _band_mean(self.hourly, target, DAY_HOURS)

    def night_temperature(self, target: date) -> Optional[float]:
        """Mean temperature between 00:00 and 06:00 on ``target``."""

        return _band_mean(self.hourly, target, NIGHT_HOURS)


def _band_mean(
    samples: List[HourlyForecastSample], target: date, hours: range
) -> Optional[float]:
    values = [
        sample.temperature
        for sample in samples
        if sample.time.date() == target and sample.time.hour in hours
    ]
    if not values:
        return None
    return sum(values) / len(values)


__all__ = ["DAY_HOURS", "NIGHT_HOURS", "Forecast", "HourlyForecastSample"]
