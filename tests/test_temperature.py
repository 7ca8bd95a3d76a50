from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from eink_calendar.month.temperature import (
    TemperatureWindow,
    format_temperature,
    temperatures_for,
)
from eink_calendar.weather.models import Forecast, HourlyForecastSample

TODAY = date(2024, 3, 15)


def _day_samples(day: date, *, day_temp: float, night_temp: float) -> list[HourlyForecastSample]:
    start = datetime(day.year, day.month, day.day)
    samples = []
    for hour in range(24):
        if 12 <= hour < 18:
            value = day_temp
        elif hour < 6:
            value = night_temp
        else:
            value = 100.0
        samples.append(HourlyForecastSample(time=start + timedelta(hours=hour), temperature=value))
    return samples


def _week_samples() -> list[HourlyForecastSample]:
    samples: list[HourlyForecastSample] = []
    for offset in range(-3, 12):
        samples.extend(_day_samples(TODAY + timedelta(days=offset), day_temp=21.0, night_temp=4.0))
    return samples


def test_in_window_date_uses_band_means() -> None:
    samples = [
        HourlyForecastSample(datetime(2024, 3, 16, 12), 20.0),
        HourlyForecastSample(datetime(2024, 3, 16, 17), 23.0),
        HourlyForecastSample(datetime(2024, 3, 16, 18), 40.0),
        HourlyForecastSample(datetime(2024, 3, 16, 0), 2.0),
        HourlyForecastSample(datetime(2024, 3, 16, 5), 5.0),
        HourlyForecastSample(datetime(2024, 3, 16, 6), -40.0),
    ]

    assert temperatures_for(samples, date(2024, 3, 16), TODAY) == ("22°", "4°")


@pytest.mark.parametrize("offset", [-1, -10, 8, 9, 30])
def test_dates_outside_window_are_empty(offset: int) -> None:
    target = TODAY + timedelta(days=offset)

    assert temperatures_for(_week_samples(), target, TODAY) == ("", "")


@pytest.mark.parametrize("offset", range(0, 8))
def test_dates_inside_window_have_both_labels(offset: int) -> None:
    target = TODAY + timedelta(days=offset)

    assert temperatures_for(_week_samples(), target, TODAY) == ("21°", "4°")


def test_missing_samples_yield_empty_not_zero() -> None:
    assert temperatures_for([], TODAY + timedelta(days=2), TODAY) == ("", "")


def test_missing_night_band_blanks_both_labels() -> None:
    samples = [HourlyForecastSample(datetime(2024, 3, 15, 13), 18.0)]

    assert temperatures_for(samples, TODAY, TODAY) == ("", "")


def test_zero_degrees_is_a_real_temperature() -> None:
    samples = _day_samples(TODAY, day_temp=0.0, night_temp=0.0)

    assert temperatures_for(samples, TODAY, TODAY) == ("0°", "0°")


def test_no_forecast_yields_empty_labels() -> None:
    assert temperatures_for(None, TODAY, TODAY) == ("", "")


@pytest.mark.parametrize(
    "value, expected",
    [(21.4, "21°"), (21.5, "22°"), (-3.2, "-3°"), (-0.4, "0°"), (-2.5, "-2°"), (0.0, "0°")],
)
def test_format_temperature_rounds_to_nearest_degree(value: float, expected: str) -> None:
    assert format_temperature(value) == expected


def test_temperature_window_accepts_forecast() -> None:
    window = TemperatureWindow(Forecast(hourly=_week_samples()), TODAY)

    assert window(TODAY) == ("21°", "4°")
    assert window(TODAY - timedelta(days=1)) == ("", "")
    assert TemperatureWindow(None, TODAY)(TODAY) == ("", "")
