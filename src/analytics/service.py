import structlog
from django.conf import settings
from django.db.models import Count, Sum
from django.utils import timezone

from analytics import calculations
from analytics.models import AnalyticsEvent
from analytics.schema import TrackEventSchema
from common.exceptions import NotFoundError, ValidationError
from events.models import RSVP, Event, Invite

logger = structlog.get_logger(__name__)


def track_event(payload: TrackEventSchema) -> AnalyticsEvent:
    """Record a page interaction.

    Outside of DEBUG, only events with a published page are tracked.
    """
    event = Event.objects.filter(pk=payload.event_id).only("id", "published_at").first()
    if event is None:
        raise NotFoundError("Event not found")
    if event.published_at is None and not settings.DEBUG:
        raise ValidationError("Event not published", code="EVENT_NOT_PUBLISHED")
    tracked = AnalyticsEvent.objects.create(
        event=event,
        type=payload.type,
        session_id=payload.session_id,
        data=payload.data,
    )
    logger.debug("analytics_event_tracked", event_id=str(event.id), type=payload.type)
    return tracked


def _invite_counts(event: Event) -> tuple[int, int]:
    invites = Invite.objects.filter(event=event)
    return invites.count(), invites.filter(opened_at__isnull=False).count()


def rsvp_stats(event: Event) -> dict[str, calculations.ResponseCount]:
    rows = (
        RSVP.objects.filter(event=event)
        .order_by()
        .values("response")
        .annotate(count=Count("id"), guests=Sum("guest_count"))
    )
    return {
        row["response"].lower(): calculations.ResponseCount(count=row["count"], guests=row["guests"] or 0)
        for row in rows
    }


def snapshot(event: Event) -> calculations.AnalyticsSnapshot:
    total_invites, invites_opened = _invite_counts(event)
    return calculations.build_analytics_snapshot(
        rsvp_stats(event),
        total_invites=total_invites,
        invites_opened=invites_opened,
        event_date=event.start_at,
        now=timezone.now(),
    )


def _unique_sessions(event: Event, event_type: AnalyticsEvent.Type) -> int:
    return (
        AnalyticsEvent.objects.filter(event=event, type=event_type)
        .order_by()
        .values("session_id")
        .distinct()
        .count()
    )


def funnel(event: Event, extended: bool = False) -> calculations.FunnelData:
    """Invited, opened and responded; with ``extended`` also page views and form starts, by session."""
    total_invited, total_opened = _invite_counts(event)
    total_responded = RSVP.objects.filter(event=event).count()
    if not extended:
        return calculations.build_funnel_data(total_invited, total_opened, total_responded)
    return calculations.build_extended_funnel_data(
        total_invited,
        total_opened,
        _unique_sessions(event, AnalyticsEvent.Type.PAGE_VIEW),
        _unique_sessions(event, AnalyticsEvent.Type.RSVP_FORM_STARTED),
        total_responded,
    )


def velocity(event: Event, lookback_days: int = calculations.DEFAULT_LOOKBACK_DAYS) -> calculations.VelocityData:
    rsvp_dates = list(
        RSVP.objects.filter(event=event).order_by("responded_at").values_list("responded_at", flat=True)
    )
    return calculations.build_velocity_data(rsvp_dates, timezone.now(), lookback_days)
