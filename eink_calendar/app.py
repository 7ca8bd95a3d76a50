"""Command line entry point for the month-view calendar generator."""

from __future__ import annotations

import argparse
import logging
import platform
import sys
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .calendar import CalendarApiError, Event, GoogleCalendarClient, load_credentials
from .config import AppSettings, ConfigError, load_env_file, settings_from_env
from .month import MonthView, compose_month
from .rendering import (
    DEFAULT_LAYOUT,
    ErrorPanelRenderer,
    MonthRenderer,
    RendererConfig,
)
from .scheduler import Scheduler
from .weather import Forecast, OpenMeteoClient, WeatherApiError

LOGGER = logging.getLogger(__name__)

CalendarClientFactory = Callable[[AppSettings], GoogleCalendarClient]
WeatherClientFactory = Callable[[AppSettings], Optional[OpenMeteoClient]]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="E-Ink month calendar generator")
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Optional path to a .env file loaded before the app starts.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Output PNG path (overrides OUTPUT_PATH).",
    )
    parser.add_argument(
        "--list-calendars",
        action="store_true",
        help="List the calendars available to the account and exit.",
    )
    parser.add_argument(
        "--loop",
        action="store_true",
        help="Keep running and regenerate the image at the top of every hour.",
    )
    parser.add_argument(
        "--immediate",
        action="store_true",
        help="With --loop, render once right away before waiting for the next hour.",
    )
    return parser


def default_calendar_client(settings: AppSettings) -> GoogleCalendarClient:
    return GoogleCalendarClient(load_credentials(settings.token_file), settings.timezone)


def default_weather_client(settings: AppSettings) -> Optional[OpenMeteoClient]:
    if not settings.weather_enabled:
        return None
    return OpenMeteoClient(settings.latitude, settings.longitude, settings.timezone)


class AppRuntime:
    """Fetches events and the forecast, then renders the month or an error panel."""

    def __init__(
        self,
        *,
        settings: AppSettings,
        calendar_client_factory: CalendarClientFactory = default_calendar_client,
        weather_client_factory: WeatherClientFactory = default_weather_client,
        now_provider: Callable[[], datetime] | None = None,
        battery_provider: Callable[[], Optional[str]] | None = None,
        argv: Sequence[str] = (),
        logger: logging.Logger | None = None,
    ) -> None:
        self.settings = settings
        self.calendar_client_factory = calendar_client_factory
        self.weather_client_factory = weather_client_factory
        self.now_provider = now_provider or (lambda: datetime.now(tz=ZoneInfo(settings.timezone)))
        self.battery_provider = battery_provider
        self.argv = list(argv)
        self.logger = logger or LOGGER

        renderer_config = RendererConfig(
            layout=replace(DEFAULT_LAYOUT, canvas_width=settings.width, canvas_height=settings.height),
            font_regular_path=settings.font_regular_path,
            font_bold_path=settings.font_bold_path,
        )
        self.month_renderer = MonthRenderer(renderer_config)
        self.error_renderer = ErrorPanelRenderer(renderer_config)

    def refresh_once(self) -> bool:
        """Generate the calendar image. Returns ``False`` when the error panel was drawn instead."""

        now = self.now_provider()
        settings = self.settings
        self.logger.info("Generating %dx%d calendar at %s", settings.width, settings.height, now.isoformat())

        try:
            forecast, status = self._fetch_forecast()
            events = self._fetch_events(now)
            grid = compose_month(
                events,
                now,
                forecast=forecast,
                max_events_per_day=settings.max_events_per_day,
            )
            battery = self.battery_provider() if self.battery_provider is not None else None
            view = MonthView(grid=grid, generated_at=now, status=status, battery=battery)
            self.month_renderer.render_month(view, output_path=settings.output_path)
        except Exception as exc:
            self.logger.exception("Failed to generate calendar image")
            self.render_error(exc, now)
            return False

        self.logger.info("Calendar image generated at %s", settings.output_path)
        return True

    def render_error(self, error: BaseException, now: datetime) -> None:
        """Draw the error panel so the display does not keep showing stale content."""

        details = {
            "Error": str(error) or type(error).__name__,
            "Time": now.strftime("%Y-%m-%d %H:%M:%S %Z").strip(),
            "Args": " ".join(self.argv),
            "Python Version": platform.python_version(),
            "OS/Arch": f"{platform.system()}/{platform.machine()}",
        }
        try:
            self.error_renderer.render_error(
                details["Error"], details, output_path=self.settings.output_path
            )
        except Exception:
            self.logger.exception("Failed to render error panel")
        else:
            self.logger.info("Error details rendered to %s", self.settings.output_path)

    def list_calendars(self) -> List[str]:
        client = self.calendar_client_factory(self.settings)
        return [f"{info.id}\t{info.name}" for info in client.list_calendars()]

    # Internal helpers -------------------------------------------------
    def _fetch_forecast(self) -> tuple[Optional[Forecast], Optional[str]]:
        client = self.weather_client_factory(self.settings)
        if client is None:
            self.logger.info("Weather location not configured; rendering without temperatures")
            return None, None

        self.logger.info("Fetching weather data...")
        try:
            return client.fetch(), None
        except WeatherApiError as exc:
            self.logger.warning("Failed to fetch weather: %s", exc)
            return None, f"Weather: {exc}"

    def _fetch_events(self, now: datetime) -> List[Event]:
        client = self.calendar_client_factory(self.settings)
        self.logger.info("Fetching calendar events for month view...")

        events: List[Event] = []
        for source in self.settings.calendars:
            self.logger.info("  Fetching: %s", source.name)
            try:
                fetched = client.fetch_events_for_month(source.id, source.name, now=now)
            except CalendarApiError as exc:
                self.logger.warning("  Failed to fetch %s: %s", source.name, exc)
                continue
            self.logger.info("  Found %d events", len(fetched))
            events.extend(fetched)
        return events


def resolve_settings(args: argparse.Namespace) -> AppSettings:
    load_env_file(args.env_file)
    settings = settings_from_env()
    if args.output is not None:
        settings.output_path = args.output
    try:
        ZoneInfo(settings.timezone)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigError(f"Unknown timezone {settings.timezone!r}.") from exc
    return settings


def main(
    argv: Optional[Iterable[str]] = None,
    *,
    calendar_client_factory: CalendarClientFactory = default_calendar_client,
    weather_client_factory: WeatherClientFactory = default_weather_client,
    scheduler_factory: Callable[[Callable[[], object]], Scheduler] = Scheduler,
    now_provider: Callable[[], datetime] | None = None,
) -> None:
    logging.basicConfig(level=logging.INFO)
    parser = build_parser()
    arg_list = list(argv) if argv is not None else sys.argv[1:]
    args = parser.parse_args(arg_list)

    if args.immediate and not args.loop:
        parser.error("--immediate requires --loop")

    try:
        settings = resolve_settings(args)
    except ConfigError as exc:
        parser.error(str(exc))

    runtime = AppRuntime(
        settings=settings,
        calendar_client_factory=calendar_client_factory,
        weather_client_factory=weather_client_factory,
        now_provider=now_provider,
        argv=[parser.prog, *arg_list],
    )

    if args.list_calendars:
        for line in runtime.list_calendars():
            print(line)
        return

    if args.loop:
        scheduler = scheduler_factory(runtime.refresh_once)
        try:
            scheduler.run(immediate=args.immediate)
        except KeyboardInterrupt:
            LOGGER.info("Interrupted, shutting down")
        return

    if not runtime.refresh_once():
        raise SystemExit(1)


if __name__ == "__main__":
    main()
