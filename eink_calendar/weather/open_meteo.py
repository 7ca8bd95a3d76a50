"""Open-Meteo client for the hourly temperature forecast."""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from datetime import datetime
from typing import Mapping

from .models import Forecast, HourlyForecastSample

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.open-meteo.com/v1/forecast"
FORECAST_DAYS = 8
TIME_FORMAT = "%Y-%m-%dT%H:%M"


class WeatherApiError(RuntimeError):
    """Raised when the forecast cannot be retrieved or decoded."""


class OpenMeteoClient:
    """Fetch hourly temperatures for a fixed location."""

    def __init__(
        self,
        latitude: float,
        longitude: float,
        timezone: str,
        *,
        timeout: float = 10.0,
        base_url: str = DEFAULT_BASE_URL,
    ) -> None:
        self.latitude = latitude
        self.longitude = longitude
        self.timezone = timezone
        self.timeout = timeout
        self.base_url = base_url

    def build_url(self) -> str:
        params = {
            "latitude": f"{self.latitude:.4f}",
            "longitude": f"{self.longitude:.4f}",
            "hourly": "temperature_2m",
            "timezone": self.timezone,
            "forecast_days": str(FORECAST_DAYS),
        }
        return f"{self.base_url}?{urllib.parse.urlencode(params)}"

    def fetch(self) -> Forecast:
        """Download and parse the forecast.

        Timestamps are returned by the API in local time for the configured
        timezone and are kept naive.
        """

        url = self.build_url()
        logger.debug("Requesting forecast from %s", url)
        try:
            with urllib.request.urlopen(url, timeout=self.timeout) as response:
                status = getattr(response, "status", 200)
                if status != 200:
                    raise WeatherApiError(f"Weather API returned status {status}")
                payload = json.loads(response.read().decode("utf-8"))
        except urllib.error.HTTPError as exc:
            raise WeatherApiError(f"Weather API returned status {exc.code}") from exc
        except (OSError, urllib.error.URLError) as exc:
            raise WeatherApiError(f"Failed to fetch weather: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise WeatherApiError("Failed to decode weather response") from exc

        return parse_forecast(payload)


def parse_forecast(payload: Mapping[str, object]) -> Forecast:
    """Convert an Open-Meteo response body into a :class:`Forecast`."""

    hourly = payload.get("hourly") if isinstance(payload, Mapping) else None
    if not isinstance(hourly, Mapping):
        raise WeatherApiError("Weather response lacks an 'hourly' section.")

    times = hourly.get("time") or []
    temperatures = hourly.get("temperature_2m") or []
    if len(times) != len(temperatures):
        raise WeatherApiError(
            f"Weather response has {len(times)} timestamps but {len(temperatures)} temperatures."
        )

    samples: list[HourlyForecastSample] = []
    for raw_time, temperature in zip(times, temperatures):
        if temperature is None:
            continue
        try:
            moment = datetime.strptime(str(raw_time), TIME_FORMAT)
        except ValueError:
            logger.debug("Skipping forecast entry with unparsable time %r", raw_time)
            continue
        samples.append(HourlyForecastSample(time=moment, temperature=float(temperature)))

    logger.debug("Parsed %d hourly forecast samples", len(samples))
    return Forecast(hourly=samples)


__all__ = ["OpenMeteoClient", "WeatherApiError", "parse_forecast"]
