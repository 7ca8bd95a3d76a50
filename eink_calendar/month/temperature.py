"""Per-day temperature labels for the upcoming week."""

from __future__ import annotations

import math
from datetime import date, timedelta
from typing import Iterable, Optional

from ..weather.models import Forecast, HourlyForecastSample

WINDOW_DAYS = 8
NO_TEMPERATURE = ("", "")


def format_temperature(value: float) -> str:
    """Round half up to a whole degree, e.g. ``21.5`` -> ``"22°"``."""

    rounded = int(math.floor(value + 0.5))
    return f"{rounded}°"


def temperatures_for(
    samples: Optional[Iterable[HourlyForecastSample]],
    target: date,
    today: date,
    *,
    window_days: int = WINDOW_DAYS,
) -> tuple[str, str]:
    """Return the ``(day, night)`` temperature labels for ``target``.

    Labels are only produced for dates in ``[today, today + window_days)`` and
    only when both the day band (12:00-18:00) and the night band (00:00-06:00)
    have at least one sample. Otherwise both labels are empty.
    """

    if samples is None:
        return NO_TEMPERATURE
    if target < today or target >= today + timedelta(days=window_days):
        return NO_TEMPERATURE

    forecast = Forecast(hourly=list(samples))
    day_value = forecast.day_temperature(target)
    night_value = forecast.night_temperature(target)
    if day_value is None or night_value is None:
        return NO_TEMPERATURE

    return format_temperature(day_value), format_temperature(night_value)


class TemperatureWindow:
    """Callable binding a forecast and a reference day for the composer."""

    def __init__(
        self,
        forecast: Forecast | Iterable[HourlyForecastSample] | None,
        today: date,
        *,
        window_days: int = WINDOW_DAYS,
    ) -> None:
        if isinstance(forecast, Forecast):
            self._samples: Optional[list[HourlyForecastSample]] = list(forecast.hourly)
        elif forecast is None:
            self._samples = None
        else:
            self._samples = list(forecast)
        self.today = today
        self.window_days = window_days

    def __call__(self, target: date) -> tuple[str, str]:
        return temperatures_for(
            self._samples, target, self.today, window_days=self.window_days
        )


__all__ = [
    "NO_TEMPERATURE",
    "TemperatureWindow",
    "WINDOW_DAYS",
    "format_temperature",
    "temperatures_for",
]
