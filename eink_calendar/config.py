"""Helpers for loading environment variables and the application settings."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Mapping, Optional

__all__ = [
    "AppSettings",
    "CalendarSource",
    "ConfigError",
    "load_env_file",
    "parse_calendar_sources",
    "settings_from_env",
]

DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 480
DEFAULT_MAX_EVENTS_PER_DAY = 10
DEFAULT_OUTPUT_PATH = "calendar.png"
DEFAULT_TIMEZONE = "UTC"
DEFAULT_TOKEN_FILE = "token.json"


class ConfigError(RuntimeError):
    """Raised when configuration values are malformed."""


@dataclass(frozen=True)
class CalendarSource:
    """A calendar to fetch and the label shown for it."""

    id: str
    name: str


@dataclass
class AppSettings:
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    max_events_per_day: int = DEFAULT_MAX_EVENTS_PER_DAY
    output_path: Path = Path(DEFAULT_OUTPUT_PATH)
    timezone: str = DEFAULT_TIMEZONE
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    token_file: Path = Path(DEFAULT_TOKEN_FILE)
    calendars: List[CalendarSource] = field(
        default_factory=lambda: [CalendarSource(id="primary", name="Primary")]
    )
    font_regular_path: Optional[Path] = None
    font_bold_path: Optional[Path] = None

    @property
    def weather_enabled(self) -> bool:
        return self.latitude is not None and self.longitude is not None


def load_env_file(env_file: str | Path | None = None) -> None:
    """Load environment variables from ``env_file`` if provided.

    When ``env_file`` is :data:`None`, the loader looks for a ``.env`` file in the
    current working directory. Existing environment variables are never overwritten.
    """

    path = Path(env_file) if env_file is not None else Path.cwd() / ".env"
    if not path.exists() or not path.is_file():
        return

    for key, value in _iter_env_entries(path):
        os.environ.setdefault(key, value)


def _iter_env_entries(path: Path) -> Iterable[tuple[str, str]]:
    for raw_line in path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            raise ConfigError(
                f"Invalid line in {path.name!r}: {raw_line!r}. Expected KEY=VALUE format."
            )
        key, raw_value = line.split("=", 1)
        key = key.strip()
        value = raw_value.strip().strip('"').strip("'")
        if not key:
            raise ConfigError(f"Environment variable key is missing in line: {raw_line!r}")
        yield key, value


def parse_calendar_sources(raw: str) -> List[CalendarSource]:
    """Parse ``"primary=Family,work@example.com"`` into calendar sources.

    Entries without a display name use their identifier as the name.
    """

    sources: List[CalendarSource] = []
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        calendar_id, _, name = entry.partition("=")
        calendar_id = calendar_id.strip()
        if not calendar_id:
            raise ConfigError(f"Calendar entry {entry!r} has no calendar ID.")
        sources.append(CalendarSource(id=calendar_id, name=name.strip() or calendar_id))
    if not sources:
        raise ConfigError("CALENDAR_IDS does not list any calendars.")
    return sources


def settings_from_env(environ: Mapping[str, str] | None = None) -> AppSettings:
    """Build :class:`AppSettings` from environment variables."""

    env = os.environ if environ is None else environ
    settings = AppSettings(
        width=_positive_int(env, "DISPLAY_WIDTH", DEFAULT_WIDTH),
        height=_positive_int(env, "DISPLAY_HEIGHT", DEFAULT_HEIGHT),
        max_events_per_day=_positive_int(env, "MAX_EVENTS_PER_DAY", DEFAULT_MAX_EVENTS_PER_DAY),
        output_path=Path(env.get("OUTPUT_PATH") or DEFAULT_OUTPUT_PATH),
        timezone=env.get("TIMEZONE") or DEFAULT_TIMEZONE,
        latitude=_optional_float(env, "WEATHER_LATITUDE"),
        longitude=_optional_float(env, "WEATHER_LONGITUDE"),
        token_file=Path(env.get("GOOGLE_TOKEN_FILE") or DEFAULT_TOKEN_FILE),
        font_regular_path=_optional_path(env, "FONT_REGULAR_PATH"),
        font_bold_path=_optional_path(env, "FONT_BOLD_PATH"),
    )
    raw_calendars = env.get("CALENDAR_IDS")
    if raw_calendars:
        settings.calendars = parse_calendar_sources(raw_calendars)
    return settings


def _positive_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{key} must be an integer, got {raw!r}.") from exc
    if value <= 0:
        raise ConfigError(f"{key} must be positive, got {value}.")
    return value


def _optional_float(env: Mapping[str, str], key: str) -> Optional[float]:
    raw = env.get(key)
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"{key} must be a number, got {raw!r}.") from exc


def _optional_path(env: Mapping[str, str], key: str) -> Optional[Path]:
    raw = env.get(key)
    return Path(raw) if raw else None
