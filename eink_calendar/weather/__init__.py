"""Weather forecast integration for the month view."""

from .models import Forecast, HourlyForecastSample
from .open_meteo import OpenMeteoClient, WeatherApiError

__all__ = [
    "Forecast",
    "HourlyForecastSample",
    "OpenMeteoClient",
    "WeatherApiError",
]
