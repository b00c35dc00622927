"""Invites: creating them with their one-time tokens, looking them up and exporting them."""

import re
import typing as t
from dataclasses import dataclass

import structlog
from django.conf import settings
from django.db import transaction
from django.utils import timezone

from common.exceptions import ConflictError, NotFoundError, ValidationError
from common.schema import PaginationSchema, paginate
from common.tokens import generate_token_pair, hash_token
from common.utils import format_date_for_csv, generate_csv
from events.models import RSVP, Event, Invite
from events.schema import InviteCreateSchema, InviteItemSchema, InviteQuerySchema
from notifications.service import outbox
from notifications.service.payloads import event_details
from notifications.tasks import deliver_email

logger = structlog.get_logger(__name__)

EXPORT_FILTERS = ("all", "attending", "pending", "responded", "not_attending")
EXPORT_HEADERS = (
    "Name",
    "Email",
    "Invite Status",
    "RSVP Response",
    "Guest Count",
    "Responded Date",
    "Notes",
    "Invite Sent Date",
)


@dataclass
class CreatedInvite:
    """A freshly created invite with its raw token, which is never stored."""

    invite: Invite
    token: str
    email_queued: bool = False


def rsvp_url(token: str) -> str:
    return f"{settings.BASE_URL}/rsvp/{token}"


def list_invites(event: Event, filters: InviteQuerySchema) -> tuple[list[Invite], PaginationSchema]:
    qs = Invite.objects.filter(event=event).select_related("rsvp").order_by("-created_at")
    if filters.status:
        qs = qs.filter(status=filters.status)
    return paginate(qs, filters.limit, filters.offset)


def _build_invite(event: Event, item: InviteItemSchema) -> tuple[Invite, str]:
    token, token_hash = generate_token_pair()
    invite = Invite(
        event=event,
        email=item.email.lower(),
        name=item.name or None,
        plus_ones_allowed=item.plus_ones_allowed,
        expires_at=item.expires_at,
        token_hash=token_hash,
    )
    invite.save()
    return invite, token


def _queue_invite_email(event: Event, invite: Invite, token: str) -> None:
    payload = {
        **event_details(event),
        "guest_name": invite.name,
        "event_description": event.description,
        "rsvp_url": rsvp_url(token),
    }
    email = outbox.queue_invite_email(invite, payload)
    deliver_email.delay(str(email.id))


def _existing_emails(event: Event, emails: t.Iterable[str]) -> list[str]:
    return list(
        Invite.objects.filter(event=event, email__in=list(emails)).order_by("email").values_list("email", flat=True)
    )


def create_invites(event: Event, payload: InviteCreateSchema) -> list[CreatedInvite]:
    """Create one invite or a batch, optionally sending the invitation emails right away.

    Raises:
        ValidationError: the same email appears twice in a batch (``DUPLICATE_EMAILS``).
        ConflictError: some of the emails were already invited to the event.
    """
    items = payload.invites if payload.is_bulk else [payload.as_item()]
    assert items is not None
    emails = [item.email.lower() for item in items]

    if payload.is_bulk:
        duplicates = sorted({email for email in emails if emails.count(email) > 1})
        if duplicates:
            raise ValidationError("Duplicate emails in request", code="DUPLICATE_EMAILS", details=duplicates)

    existing = _existing_emails(event, emails)
    if existing:
        if not payload.is_bulk:
            raise ConflictError("An invite already exists for this email")
        raise ConflictError(f"Invites already exist for: {', '.join(existing)}", details=existing)

    with transaction.atomic():
        created = [CreatedInvite(*_build_invite(event, item)) for item in items]

    if payload.send_immediately:
        for entry in created:
            _queue_invite_email(event, entry.invite, entry.token)
            entry.email_queued = True

    logger.info(
        "invites_created",
        event_id=str(event.id),
        count=len(created),
        emails_queued=payload.send_immediately,
    )
    return created


def lookup_invite(token: str | None) -> tuple[Invite, int]:
    """Resolve an invite link for the guest and mark it as opened.

    Returns the invite and the number of guests who said yes to the event.
    """
    if not token:
        raise ValidationError("Token is required", code="MISSING_TOKEN")
    invite = (
        Invite.objects.select_related("event", "event__creator", "event__organization")
        .filter(token_hash=hash_token(token))
        .first()
    )
    if invite is None:
        raise NotFoundError("Invite not found or has expired")

    now = timezone.now()
    if invite.is_expired(now):
        if invite.status != Invite.Status.EXPIRED:
            invite.status = Invite.Status.EXPIRED
            invite.save(update_fields=["status", "updated_at"])
        raise NotFoundError("This invite has expired")

    event = invite.event
    if event.status == Event.Status.CANCELLED:
        raise ValidationError("This event has been cancelled", code="EVENT_CANCELLED")

    if invite.status in (Invite.Status.PENDING, Invite.Status.SENT):
        invite.status = Invite.Status.OPENED
        invite.opened_at = now
        invite.save(update_fields=["status", "opened_at", "updated_at"])
        logger.info("invite_opened", invite_id=str(invite.id), event_id=str(event.id))

    yes_count = RSVP.objects.filter(event=event).attending().count()
    return invite, yes_count


def existing_rsvp(invite: Invite) -> RSVP | None:
    try:
        return invite.rsvp  # type: ignore[no-any-return]
    except RSVP.DoesNotExist:
        return None


def _export_queryset(event: Event, filter_name: str) -> t.Any:
    qs = Invite.objects.filter(event=event).select_related("rsvp").order_by("-created_at")
    match filter_name:
        case "attending":
            return qs.filter(rsvp__response=RSVP.Response.YES)
        case "not_attending":
            return qs.filter(rsvp__response=RSVP.Response.NO)
        case "responded":
            return qs.filter(rsvp__isnull=False)
        case "pending":
            return qs.filter(rsvp__isnull=True)
    return qs


def export_filename(event: Event, filter_name: str) -> str:
    safe_title = re.sub(r"[^a-z0-9]+", "_", event.title.lower()).strip("_")[:50] or "event"
    return f"{safe_title}_invites_{filter_name}_{timezone.now():%Y-%m-%d}.csv"


def export_invites_csv(event: Event, filter_name: str = "all") -> str:
    """Guest list as CSV, filtered by answer."""
    if filter_name not in EXPORT_FILTERS:
        raise ValidationError(f"Invalid filter. Must be one of: {', '.join(EXPORT_FILTERS)}")
    rows = []
    for invite in _export_queryset(event, filter_name):
        rsvp = existing_rsvp(invite)
        rows.append(
            (
                invite.name or (rsvp.guest_name if rsvp else ""),
                invite.email,
                invite.status,
                rsvp.response if rsvp else "",
                rsvp.guest_count if rsvp else "",
                format_date_for_csv(rsvp.responded_at if rsvp else None),
                rsvp.notes if rsvp else "",
                format_date_for_csv(invite.sent_at),
            )
        )
    logger.info("invites_exported", event_id=str(event.id), filter=filter_name, rows=len(rows))
    return generate_csv(EXPORT_HEADERS, rows)

