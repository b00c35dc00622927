import typing as t
from uuid import UUID

import structlog
from django.db import transaction
from django.db.models import Count, Q
from django.utils import timezone

from accounts.models import User
from analytics.calculations import percentage
from common.exceptions import ForbiddenError, NotFoundError, UnauthorizedError, ValidationError
from common.schema import PaginationSchema, paginate
from common.utils import format_event_date, format_event_time, generate_unique_slug
from events.models import RSVP, Event, Invite, OrganizationMember
from events.schema import EventCreateSchema, EventQuerySchema, EventUpdateSchema, PublishEventSchema
from notifications.service import outbox
from notifications.service.payloads import event_details, event_local_time, event_url
from notifications.tasks import deliver_email

from . import update_db_instance

logger = structlog.get_logger(__name__)

# Fields whose change is announced to guests of a published event.
ANNOUNCED_FIELDS = ("start_at", "end_at", "venue_name", "address", "city")


def _slug_taken(slug: str) -> bool:
    return Event.objects.filter(slug=slug).exists()


def list_events(user: User | None, filters: EventQuerySchema) -> tuple[list[Event], PaginationSchema]:
    """Own and managed events for a signed-in user, published public events otherwise."""
    if user is not None:
        qs = Event.objects.manageable_by(user)
        if filters.status:
            qs = qs.filter(status=filters.status)
        if filters.visibility:
            qs = qs.filter(visibility=filters.visibility)
    else:
        qs = Event.objects.public()
        if filters.city:
            qs = qs.filter(city__iexact=filters.city)
    qs = qs.with_counts().order_by("start_at")
    return paginate(qs, filters.limit, filters.offset)


@transaction.atomic
def create_event(user: User, payload: EventCreateSchema) -> Event:
    data = payload.model_dump(exclude={"organization_id"})
    organization_id = payload.organization_id
    if organization_id is not None:
        is_manager = OrganizationMember.objects.filter(
            organization_id=organization_id,
            user=user,
            role__in=OrganizationMember.MANAGER_ROLES,
        ).exists()
        if not is_manager:
            raise ForbiddenError("You don't have permission to create events for this organization")
    event = Event.objects.create(
        creator=user,
        organization_id=organization_id,
        slug=generate_unique_slug(payload.title, _slug_taken),
        status=Event.Status.DRAFT,
        **data,
    )
    logger.info("event_created", event_id=str(event.id), user_id=str(user.id))
    return event


def get_event_detail(event_id: UUID, user: User | None) -> Event:
    """An event with its counts.

    Drafts, cancelled events and private events are only visible to the people who
    manage them.
    """
    event = Event.objects.with_counts().select_related("creator", "organization").filter(pk=event_id).first()
    if event is None:
        raise NotFoundError("Event not found")
    if event.is_published and event.visibility != Event.Visibility.PRIVATE:
        return event
    if user is None:
        raise UnauthorizedError("Authentication required")
    if not event.can_be_managed_by(user):
        raise ForbiddenError("You don't have permission to access this event")
    return event


def _announced_changes(event: Event, before: dict[str, t.Any]) -> list[str]:
    changes = []
    if before["start_at"] != event.start_at:
        start = event_local_time(event)
        changes.append(f"New date: {format_event_date(start)} at {format_event_time(start)}")
    elif before["end_at"] != event.end_at and event.end_at is not None:
        end = event_local_time(event, event.end_at)
        changes.append(f"New end time: {format_event_date(end)} at {format_event_time(end)}")
    location_fields = ("venue_name", "address", "city")
    if any(before[name] != getattr(event, name) for name in location_fields):
        location = ", ".join(part for part in (event.venue_name, event.address, event.city) if part)
        changes.append(f"New location: {location or 'To be announced'}")
    return changes


def _guest_recipients(event: Event) -> list[tuple[Invite, str, str]]:
    """Invited guests who said yes or maybe, as ``(invite, email, name)``."""
    recipients = []
    rsvps = (
        RSVP.objects.filter(event=event, invite__isnull=False, response__in=[RSVP.Response.YES, RSVP.Response.MAYBE])
        .select_related("invite")
    )
    for rsvp in rsvps:
        invite = rsvp.invite
        recipients.append((invite, rsvp.guest_email or invite.email, invite.name or rsvp.guest_name))
    return recipients


def notify_guests_of_update(event: Event, changes: list[str]) -> int:
    """Queue an update email for every invited guest that is coming or might come."""
    details = event_details(event)
    queued = 0
    for invite, email, name in _guest_recipients(event):
        payload = {**details, "guest_name": name, "changes": changes, "event_url": event_url(event)}
        queued_email = outbox.queue_update_email(invite, email, payload)
        deliver_email.delay(str(queued_email.id))
        queued += 1
    logger.info("event_update_emails_queued", event_id=str(event.id), count=queued)
    return queued


def notify_guests_of_cancellation(event: Event) -> int:
    details = event_details(event)
    queued = 0
    for invite, email, name in _guest_recipients(event):
        queued_email = outbox.queue_cancellation_email(invite, email, {**details, "guest_name": name})
        deliver_email.delay(str(queued_email.id))
        queued += 1
    logger.info("event_cancellation_emails_queued", event_id=str(event.id), count=queued)
    return queued


def update_event(event: Event, payload: EventUpdateSchema) -> Event:
    """Apply the sent fields. Guests of a published event hear about date and venue changes."""
    before = {name: getattr(event, name) for name in ANNOUNCED_FIELDS}
    start_at = payload.start_at if "start_at" in payload.model_fields_set else event.start_at
    end_at = payload.end_at if "end_at" in payload.model_fields_set else event.end_at
    if start_at is None:
        raise ValidationError("Start date is required")
    if end_at is not None and end_at < start_at:
        raise ValidationError("End date must be after the start date")
    if "title" in payload.model_fields_set and payload.title is None:
        raise ValidationError("Title is required")

    event = update_db_instance(event, payload)
    if event.is_published:
        changes = _announced_changes(event, before)
        if changes:
            notify_guests_of_update(event, changes)
    logger.info("event_updated", event_id=str(event.id), fields=sorted(payload.model_fields_set))
    return event


def delete_event(event: Event) -> None:
    event_id = str(event.id)
    event.delete()
    logger.info("event_deleted", event_id=event_id)


def publish_event(event: Event, payload: PublishEventSchema | None = None) -> Event:
    if event.status == Event.Status.PUBLISHED:
        raise ValidationError("Event is already published")
    if event.status == Event.Status.CANCELLED:
        raise ValidationError("Cannot publish a cancelled event")
    now = timezone.now()
    if event.start_at < now:
        raise ValidationError("Cannot publish an event with a start date in the past")
    published_at = payload.published_at if payload and payload.published_at else now
    event = update_db_instance(event, status=Event.Status.PUBLISHED, published_at=published_at)
    logger.info("event_published", event_id=str(event.id))
    return event


def cancel_event(event: Event) -> Event:
    """Cancel the event and tell the guests that were coming."""
    if event.status == Event.Status.CANCELLED:
        raise ValidationError("Event is already cancelled")
    was_published = event.is_published
    event = update_db_instance(event, status=Event.Status.CANCELLED)
    if was_published:
        notify_guests_of_cancellation(event)
    logger.info("event_cancelled", event_id=str(event.id))
    return event


@transaction.atomic
def duplicate_event(event: Event, user: User) -> Event:
    """Copy an event's details and page as a new draft.

    Guests, answers, media and preview links stay with the original.
    """
    title = f"Copy of {event.title}"[:200]
    copy = Event.objects.create(
        creator=user,
        organization=event.organization,
        title=title,
        slug=generate_unique_slug(title, _slug_taken),
        description=event.description,
        start_at=event.start_at,
        end_at=event.end_at,
        timezone=event.timezone,
        venue_name=event.venue_name,
        address=event.address,
        city=event.city,
        country=event.country,
        latitude=event.latitude,
        longitude=event.longitude,
        visibility=event.visibility,
        cover_image_url=event.cover_image_url,
        max_attendees=event.max_attendees,
        status=Event.Status.DRAFT,
        config_version=1,
        page_config=event.page_config,
        template_id=event.template_id,
        theme_preset=event.theme_preset,
        reminder_enabled=event.reminder_enabled,
        reminder_days=event.reminder_days,
        rsvp_deadline=event.rsvp_deadline,
    )
    logger.info("event_duplicated", source_event_id=str(event.id), event_id=str(copy.id))
    return copy


def dashboard_stats(user: User) -> dict[str, int]:
    """Totals over every event the user manages.

    Every event that is not published counts as a draft. The response rate is RSVPs per
    invite, so walk-in answers to public events count too.
    """
    events = Event.objects.manageable_by(user)
    event_counts = Event.objects.filter(pk__in=events.values("pk")).aggregate(
        total=Count("id"),
        published=Count("id", filter=Q(status=Event.Status.PUBLISHED)),
    )
    total_invites = Invite.objects.filter(event__in=events.values("pk")).count()
    rsvp_counts = RSVP.objects.filter(event__in=events.values("pk")).aggregate(
        total=Count("id"),
        yes=Count("id", filter=Q(response=RSVP.Response.YES)),
    )
    return {
        "total_events": event_counts["total"],
        "published_events": event_counts["published"],
        "draft_events": event_counts["total"] - event_counts["published"],
        "total_invites": total_invites,
        "total_rsvps": rsvp_counts["total"],
        "yes_rsvps": rsvp_counts["yes"],
        "response_rate": percentage(rsvp_counts["total"], total_invites),
    }
