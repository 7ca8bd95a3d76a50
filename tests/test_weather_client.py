from __future__ import annotations

import io
import json
import urllib.error
from datetime import date, datetime
from urllib.parse import parse_qs, urlparse

import pytest

from eink_calendar.weather import open_meteo
from eink_calendar.weather.open_meteo import OpenMeteoClient, WeatherApiError, parse_forecast


class FakeResponse(io.BytesIO):
    status = 200

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def _payload() -> dict:
    return {
        "hourly": {
            "time": ["2024-03-15T00:00", "2024-03-15T13:00", "garbage", "2024-03-15T14:00"],
            "temperature_2m": [1.5, 18.0, 99.0, 20.0],
        }
    }


def test_fetch_builds_request_and_parses_samples(monkeypatch: pytest.MonkeyPatch) -> None:
    requested: dict[str, object] = {}

    def fake_urlopen(url: str, timeout: float):
        requested["url"] = url
        requested["timeout"] = timeout
        return FakeResponse(json.dumps(_payload()).encode("utf-8"))

    monkeypatch.setattr(open_meteo.urllib.request, "urlopen", fake_urlopen)

    client = OpenMeteoClient(50.0755, 14.4378, "Europe/Prague", timeout=5.0)
    forecast = client.fetch()

    query = parse_qs(urlparse(str(requested["url"])).query)
    assert query["latitude"] == ["50.0755"]
    assert query["longitude"] == ["14.4378"]
    assert query["hourly"] == ["temperature_2m"]
    assert query["timezone"] == ["Europe/Prague"]
    assert query["forecast_days"] == ["8"]
    assert requested["timeout"] == 5.0

    assert [sample.time for sample in forecast.hourly] == [
        datetime(2024, 3, 15, 0, 0),
        datetime(2024, 3, 15, 13, 0),
        datetime(2024, 3, 15, 14, 0),
    ]
    assert forecast.day_temperature(date(2024, 3, 15)) == pytest.approx(19.0)
    assert forecast.night_temperature(date(2024, 3, 15)) == pytest.approx(1.5)
    assert forecast.day_temperature(date(2024, 3, 16)) is None


def test_network_failure_raises_weather_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_urlopen(url: str, timeout: float):
        raise urllib.error.URLError("connection refused")

    monkeypatch.setattr(open_meteo.urllib.request, "urlopen", fake_urlopen)

    with pytest.raises(WeatherApiError, match="connection refused"):
        OpenMeteoClient(0.0, 0.0, "UTC").fetch()


def test_invalid_json_raises_weather_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        open_meteo.urllib.request,
        "urlopen",
        lambda url, timeout: FakeResponse(b"<html>"),
    )

    with pytest.raises(WeatherApiError, match="decode"):
        OpenMeteoClient(0.0, 0.0, "UTC").fetch()


def test_mismatched_arrays_are_rejected() -> None:
    with pytest.raises(WeatherApiError, match="timestamps"):
        parse_forecast({"hourly": {"time": ["2024-03-15T00:00"], "temperature_2m": []}})


def test_missing_hourly_section_is_rejected() -> None:
    with pytest.raises(WeatherApiError, match="hourly"):
        parse_forecast({})
