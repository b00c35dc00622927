"""Template payloads describing an event, shared by the guest-facing emails."""

import typing as t
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from django.conf import settings

from common.utils import format_event_date, format_event_time, format_long_date
from events.models import Event

DEFAULT_HOST_NAME = "Event Organizer"


def event_local_time(event: Event, value: datetime | None = None) -> datetime:
    """Convert ``value`` (default: the event start) to the event's own timezone."""
    value = value or event.start_at
    try:
        return value.astimezone(ZoneInfo(event.timezone))
    except (ZoneInfoNotFoundError, ValueError):
        return value.astimezone(ZoneInfo("UTC"))


def host_name(event: Event, fallback: str | None = None) -> str:
    """The organizer's name, else ``fallback``, else their email address."""
    creator = event.creator
    return creator.name or fallback or creator.email


def event_url(event: Event) -> str:
    return f"{settings.BASE_URL}/events/{event.slug}"


def event_details(event: Event, host_fallback: str | None = None) -> dict[str, t.Any]:
    """Title, local date and time, location and host of an event."""
    start = event_local_time(event)
    return {
        "event_title": event.title,
        "event_date": format_event_date(start),
        "event_time": format_event_time(start),
        "event_location": event.location_text or None,
        "host_name": host_name(event, host_fallback),
    }


def rsvp_deadline_text(event: Event) -> str | None:
    """E.g. ``June 14, 2025``, or None without a deadline."""
    if event.rsvp_deadline is None:
        return None
    return format_long_date(event_local_time(event, event.rsvp_deadline))
