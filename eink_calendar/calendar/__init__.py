"""Calendar integrations for the month view."""

from .google_client import CalendarApiError, GoogleCalendarClient, load_credentials
from .models import CalendarInfo, Event

__all__ = [
    "CalendarApiError",
    "CalendarInfo",
    "Event",
    "GoogleCalendarClient",
    "load_credentials",
]
