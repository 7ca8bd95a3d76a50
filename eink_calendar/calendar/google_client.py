"""Google Calendar client for retrieving the month's events."""

from __future__ import annotations

import logging
import time
from datetime import date, datetime, time as time_
from pathlib import Path
from typing import Callable, List, Mapping, MutableMapping, Optional

from google.auth.credentials import Credentials
from google.auth.exceptions import RefreshError, TransportError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials as UserCredentials
from googleapiclient.discovery import Resource, build
from googleapiclient.errors import HttpError
from zoneinfo import ZoneInfo

from ..config import ConfigError
from ..month.grid import fetch_window
from .models import CalendarInfo, Event

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/calendar.readonly"]


class CalendarApiError(RuntimeError):
    """Raised when the Google Calendar API repeatedly fails."""


def load_credentials(token_file: str | Path) -> Credentials:
    """Load authorized-user credentials, refreshing them when expired.

    The token file is produced by Google's installed-app consent flow, which
    has to be completed once outside of this application.
    """

    path = Path(token_file)
    if not path.is_file():
        raise ConfigError(
            f"Google token file {str(path)!r} not found. Authorize the calendar account first."
        )
    try:
        credentials = UserCredentials.from_authorized_user_file(str(path), SCOPES)
    except ValueError as exc:
        raise ConfigError(f"Google token file {str(path)!r} is malformed: {exc}") from exc

    if credentials.expired and credentials.refresh_token:
        logger.info("Refreshing expired Google credentials")
        try:
            credentials.refresh(Request())
        except (RefreshError, TransportError) as exc:
            raise CalendarApiError("Unable to refresh Google credentials.") from exc
        path.write_text(credentials.to_json(), encoding="utf-8")
    return credentials


class GoogleCalendarClient:
    """Client wrapper around the Google Calendar API."""

    def __init__(
        self,
        credentials: Optional[Credentials],
        timezone: str | ZoneInfo,
        *,
        service: Optional[Resource] = None,
        max_retries: int = 3,
        retry_initial_delay: float = 1.0,
        retry_backoff: float = 2.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the client.

        Args:
            credentials: Google API credentials used to authenticate requests. Ignored when
                ``service`` is provided.
            timezone: IANA timezone name or ``ZoneInfo`` instance defining the local timezone.
            service: Pre-built Google API service (primarily for testing).
            max_retries: Maximum number of retries for API calls.
            retry_initial_delay: Base delay before the first retry (seconds).
            retry_backoff: Multiplier applied to the delay after each retry.
            sleep: Sleep function used between retries (primarily for testing).
        """
        self.timezone = timezone if isinstance(timezone, ZoneInfo) else ZoneInfo(str(timezone))
        self.max_retries = max_retries
        self.retry_initial_delay = retry_initial_delay
        self.retry_backoff = retry_backoff
        self._sleep = sleep

        if service is not None:
            self._service = service
        else:
            if credentials is None:
                raise ValueError("Credentials must be provided when service is not injected.")
            self._service = build("calendar", "v3", credentials=credentials, cache_discovery=False)

    def fetch_events_for_month(
        self,
        calendar_id: str,
        calendar_name: Optional[str] = None,
        *,
        now: Optional[datetime] = None,
    ) -> List[Event]:
        """Return events overlapping the month grid containing ``now``."""
        reference_time = self._ensure_timezone(now) if now is not None else datetime.now(tz=self.timezone)
        window_start, window_end = fetch_window(reference_time)
        label = calendar_name or calendar_id

        events: List[Event] = []
        page_token: Optional[str] = None
        while True:
            response = self._list_events(calendar_id, window_start, window_end, page_token)
            items = response.get("items", []) if isinstance(response, MutableMapping) else []
            for item in items:
                try:
                    events.append(self._normalize_event(item, label))
                except Exception as exc:  # pragma: no cover - logged and skipped
                    logger.exception("Failed to normalize event from calendar %s: %s", label, exc)
            page_token = response.get("nextPageToken") if isinstance(response, MutableMapping) else None
            if not page_token:
                break

        logger.debug("Fetched %d events from calendar %s", len(events), label)
        return events

    def list_calendars(self) -> List[CalendarInfo]:
        """Return every calendar visible to the authorized account."""

        def execute_request() -> Mapping[str, object]:
            return self._service.calendarList().list().execute()

        response = self._execute_with_backoff(execute_request)
        items = response.get("items", []) if isinstance(response, Mapping) else []
        return [
            CalendarInfo(id=str(item.get("id")), name=str(item.get("summary") or item.get("id")))
            for item in items
            if isinstance(item, Mapping)
        ]

    # ------------------------------------------------------------------
    def _list_events(
        self,
        calendar_id: str,
        start: datetime,
        end: datetime,
        page_token: Optional[str],
    ) -> Mapping[str, object]:
        def execute_request() -> Mapping[str, object]:
            params = dict(
                calendarId=calendar_id,
                timeMin=start.isoformat(),
                timeMax=end.isoformat(),
                singleEvents=True,
                showDeleted=False,
                orderBy="startTime",
                timeZone=self._timezone_name,
            )
            if page_token:
                params["pageToken"] = page_token
            return self._service.events().list(**params).execute()

        return self._execute_with_backoff(execute_request)

    def _normalize_event(self, event: Mapping[str, object], calendar_name: str) -> Event:
        summary = str(event.get("summary") or "Untitled Event")
        start, all_day = self._extract_time_info(event.get("start"))
        end, _ = self._extract_time_info(event.get("end"))
        description = event.get("description")
        location = event.get("location")

        return Event(
            summary=summary,
            start=start,
            end=end,
            all_day=all_day,
            description=str(description) if description is not None else None,
            location=str(location) if location is not None else None,
            calendar_name=calendar_name,
        )

    def _extract_time_info(self, value: object) -> tuple[datetime, bool]:
        if not isinstance(value, Mapping):
            raise CalendarApiError("Event time data is missing or malformed.")

        if "dateTime" in value:
            return self._ensure_timezone(self._parse_datetime(str(value["dateTime"]))), False
        if "date" in value:
            try:
                dt_date = date.fromisoformat(str(value["date"]))
            except ValueError as exc:
                raise CalendarApiError(f"Unable to parse date value: {value['date']}") from exc
            return datetime.combine(dt_date, time_.min, tzinfo=self.timezone), True
        raise CalendarApiError("Event time data lacks 'dateTime' or 'date'.")

    def _parse_datetime(self, value: str) -> datetime:
        cleaned = value.rstrip("Z") + ("+00:00" if value.endswith("Z") else "")
        try:
            parsed = datetime.fromisoformat(cleaned)
        except ValueError as exc:  # pragma: no cover - depends on malformed API response
            raise CalendarApiError(f"Unable to parse datetime value: {value}") from exc
        return parsed

    def _ensure_timezone(self, dt: datetime) -> datetime:
        if dt.tzinfo is None:
            return dt.replace(tzinfo=self.timezone)
        return dt.astimezone(self.timezone)

    @property
    def _timezone_name(self) -> str:
        return getattr(self.timezone, "key", str(self.timezone))

    def _execute_with_backoff(self, func: Callable[[], Mapping[str, object]]) -> Mapping[str, object]:
        attempt = 0
        delay = self.retry_initial_delay
        while True:
            try:
                return func()
            except (HttpError, TransportError, TimeoutError) as exc:
                attempt += 1
                if attempt > self.max_retries:
                    raise CalendarApiError("Google Calendar API request failed after retries.") from exc
                logger.warning(
                    "Google Calendar API request failed (attempt %d/%d): %s", attempt, self.max_retries, exc
                )
                self._sleep(delay)
                delay *= self.retry_backoff


__all__ = ["CalendarApiError", "GoogleCalendarClient", "load_credentials"]
