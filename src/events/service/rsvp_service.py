"""Guest answers, through an invite link or on a public event page."""

from uuid import UUID

import structlog
from django.db import transaction
from django.db.models import Count, Sum
from django.utils import timezone

from common.exceptions import NotFoundError, ValidationError
from common.schema import PaginationSchema, paginate
from common.tokens import hash_token
from events.models import RSVP, Event, Invite
from events.schema import RSVPQuerySchema, RSVPSubmitSchema
from notifications.service import outbox
from notifications.service.payloads import event_details
from notifications.tasks import deliver_email

logger = structlog.get_logger(__name__)

# Largest party a guest can announce on a public page, themselves included.
PUBLIC_MAX_GUEST_COUNT = 5

RESPONSE_MESSAGES = {
    RSVP.Response.YES: "You're going! We'll see you there.",
    RSVP.Response.NO: "Thanks for letting us know.",
    RSVP.Response.MAYBE: "Thanks for your response. We hope to see you!",
}


def _check_party_size(guest_count: int, max_guest_count: int) -> None:
    if guest_count > max_guest_count:
        additional = max_guest_count - 1
        raise ValidationError(f"You can only bring up to {additional} additional guest(s)")


def _check_capacity(event: Event, payload: RSVPSubmitSchema, existing: RSVP | None) -> None:
    """A YES may not push the confirmed head count above the event's limit."""
    if payload.response != RSVP.Response.YES or event.max_attendees is None:
        return
    confirmed = RSVP.objects.filter(event=event).attending_guest_total(exclude_pk=existing.pk if existing else None)
    if confirmed + payload.guest_count > event.max_attendees:
        raise ValidationError("Sorry, this event has reached its maximum capacity")


def _save_rsvp(existing: RSVP | None, event: Event, invite: Invite | None, payload: RSVPSubmitSchema) -> RSVP:
    rsvp = existing or RSVP(event=event, invite=invite)
    rsvp.response = payload.response
    rsvp.guest_name = payload.guest_name
    rsvp.guest_email = payload.guest_email.lower() if payload.guest_email else None
    rsvp.guest_count = payload.guest_count
    rsvp.notes = payload.notes or None
    rsvp.responded_at = timezone.now()
    rsvp.save()
    return rsvp


def _send_confirmation(event: Event, invite: Invite | None, rsvp: RSVP, to_email: str) -> None:
    payload = {
        **event_details(event),
        "guest_name": rsvp.guest_name,
        "response": rsvp.response,
        "guest_count": rsvp.guest_count,
    }
    email = outbox.queue_confirmation_email(invite, to_email, payload)
    deliver_email.delay(str(email.id))


def _submit_with_invite(token: str, payload: RSVPSubmitSchema) -> RSVP:
    invite = Invite.objects.select_related("event", "event__creator").filter(token_hash=hash_token(token)).first()
    if invite is None:
        raise NotFoundError("Invite not found or has expired")
    if invite.is_expired():
        raise ValidationError("This invite has expired")
    event = invite.event
    if event.status == Event.Status.CANCELLED:
        raise ValidationError("This event has been cancelled")
    _check_party_size(payload.guest_count, invite.plus_ones_allowed + 1)

    with transaction.atomic():
        existing = RSVP.objects.select_for_update().filter(invite=invite).first()
        _check_capacity(event, payload, existing)
        rsvp = _save_rsvp(existing, event, invite, payload)
        invite.status = Invite.Status.RESPONDED
        invite.save(update_fields=["status", "updated_at"])

    _send_confirmation(event, invite, rsvp, rsvp.guest_email or invite.email)
    return rsvp


def _submit_public(event_id: UUID, payload: RSVPSubmitSchema) -> RSVP:
    event = Event.objects.select_related("creator").filter(pk=event_id).first()
    if event is None:
        raise NotFoundError("Event not found")
    if event.visibility == Event.Visibility.PRIVATE:
        raise ValidationError("This event requires an invitation")
    if event.status != Event.Status.PUBLISHED:
        raise ValidationError("This event is not accepting RSVPs")
    if not payload.guest_email:
        raise ValidationError("Email is required to RSVP without an invite")
    _check_party_size(payload.guest_count, PUBLIC_MAX_GUEST_COUNT)
    guest_email = payload.guest_email.lower()

    with transaction.atomic():
        existing = (
            RSVP.objects.select_for_update().filter(event=event, invite__isnull=True, guest_email=guest_email).first()
        )
        _check_capacity(event, payload, existing)
        rsvp = _save_rsvp(existing, event, None, payload)

    _send_confirmation(event, None, rsvp, guest_email)
    return rsvp


def submit_rsvp(payload: RSVPSubmitSchema) -> tuple[RSVP, str]:
    """Record a guest's answer and queue their confirmation email.

    Answering again updates the earlier answer. Returns the RSVP and the message to show
    the guest.
    """
    token = payload.invite_token_value
    if token:
        rsvp = _submit_with_invite(token, payload)
    else:
        assert payload.event_id is not None
        rsvp = _submit_public(payload.event_id, payload)
    logger.info(
        "rsvp_submitted",
        rsvp_id=str(rsvp.id),
        event_id=str(rsvp.event_id),
        response=rsvp.response,
        via_invite=bool(token),
    )
    return rsvp, RESPONSE_MESSAGES[RSVP.Response(rsvp.response)]


def list_rsvps(
    event: Event, filters: RSVPQuerySchema
) -> tuple[list[RSVP], dict[str, dict[str, int]], PaginationSchema]:
    qs = RSVP.objects.filter(event=event).select_related("invite").order_by("-responded_at")
    if filters.response:
        qs = qs.filter(response=filters.response)
    rsvps, pagination = paginate(qs, filters.limit, filters.offset)
    return rsvps, response_stats(event), pagination


def response_stats(event: Event) -> dict[str, dict[str, int]]:
    """Answers and head counts per response, e.g. ``{"yes": {"count": 3, "total_guests": 5}}``."""
    stats = {response.lower(): {"count": 0, "total_guests": 0} for response in RSVP.Response.values}
    rows = (
        RSVP.objects.filter(event=event)
        .order_by()
        .values("response")
        .annotate(count=Count("id"), guests=Sum("guest_count"))
    )
    for row in rows:
        stats[row["response"].lower()] = {"count": row["count"], "total_guests": row["guests"] or 0}
    return stats
