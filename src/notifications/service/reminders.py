"""Scheduled reminder emails.

Two kinds of reminders exist:

- the day-before reminder, sent to every guest that said YES to an event starting tomorrow;
- the no-response reminder, sent every ``reminder_days`` days to invitees that have not
  answered yet, for events that opted in.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from datetime import timezone as dt_timezone

import structlog
from django.conf import settings
from django.db.models import Prefetch
from django.utils import timezone

from events.models import RSVP, Event, Invite
from notifications.enums import EmailStatus, EmailTemplate
from notifications.models import EmailOutbox
from notifications.service import outbox
from notifications.service.payloads import DEFAULT_HOST_NAME, event_details, event_url, rsvp_deadline_text

logger = structlog.get_logger(__name__)

REMINDER_DEDUP_WINDOW = timedelta(hours=48)


@dataclass
class ReminderRun:
    events_processed: int = 0
    reminders_queued: int = 0
    errors: list[str] = field(default_factory=list)
    email_ids: list[str] = field(default_factory=list)


def _start_of_utc_day(value: datetime) -> datetime:
    return value.astimezone(dt_timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)


def queue_event_reminders(now: datetime | None = None) -> ReminderRun:
    """Queue reminders for published events starting tomorrow (UTC).

    Only invitees whose RSVP is YES are reminded, and an invite that got a reminder in
    the last 48 hours is skipped.
    """
    now = now or timezone.now()
    tomorrow = _start_of_utc_day(now) + timedelta(days=1)
    day_after = tomorrow + timedelta(days=1)

    events = (
        Event.objects.filter(status=Event.Status.PUBLISHED, start_at__gte=tomorrow, start_at__lt=day_after)
        .select_related("creator")
        .prefetch_related(
            Prefetch(
                "invites",
                queryset=Invite.objects.filter(
                    status=Invite.Status.RESPONDED, rsvp__response=RSVP.Response.YES
                ).select_related("rsvp"),
                to_attr="confirmed_invites",
            )
        )
    )

    run = ReminderRun()
    for event in events:
        run.events_processed += 1
        details = event_details(event, host_fallback=DEFAULT_HOST_NAME)
        for invite in event.confirmed_invites:  # type: ignore[attr-defined]
            already_reminded = EmailOutbox.objects.filter(
                invite=invite,
                template=EmailTemplate.REMINDER,
                created_at__gte=now - REMINDER_DEDUP_WINDOW,
            ).exists()
            if already_reminded:
                continue
            rsvp = invite.rsvp
            try:
                email = outbox.queue_reminder_email(
                    invite,
                    invite.email,
                    {
                        **details,
                        "guest_name": invite.name or rsvp.guest_name or "Guest",
                        "event_url": event_url(event),
                        "guest_count": rsvp.guest_count or 1,
                    },
                )
            except Exception as e:
                logger.error("reminder_queue_failed", invite_id=str(invite.id), error=str(e))
                run.errors.append(f"Invite {invite.id}: {e}")
                continue
            run.reminders_queued += 1
            run.email_ids.append(str(email.id))

    logger.info(
        "event_reminders_queued",
        events_processed=run.events_processed,
        reminders_queued=run.reminders_queued,
        errors=len(run.errors),
    )
    return run


def expected_reminder_count(sent_at: datetime, reminder_days: int, now: datetime) -> int:
    """How many no-response reminders are due: one per full ``reminder_days`` interval since sending."""
    return int((now - sent_at) // timedelta(days=reminder_days))


def queue_no_response_reminders(now: datetime | None = None) -> ReminderRun:
    """Queue the due no-response reminders.

    Events must have reminders enabled, not have started and not be cancelled or
    completed; events whose RSVP deadline has passed are skipped. Reminder ``n`` goes out
    once ``n * reminder_days`` days have elapsed since the invite was sent. Failed
    reminders do not count, so they are retried on the next run.
    """
    now = now or timezone.now()
    events = Event.objects.filter(
        reminder_enabled=True,
        reminder_days__isnull=False,
        start_at__gt=now,
        status__in=[Event.Status.DRAFT, Event.Status.PUBLISHED],
    ).select_related("creator")

    run = ReminderRun()
    for event in events:
        run.events_processed += 1
        if event.rsvp_deadline and event.rsvp_deadline < now:
            continue
        assert event.reminder_days is not None

        invites = Invite.objects.awaiting_response().filter(event=event, sent_at__isnull=False)
        details = event_details(event)
        deadline = rsvp_deadline_text(event)
        for invite in invites:
            assert invite.sent_at is not None
            expected = expected_reminder_count(invite.sent_at, event.reminder_days, now)
            if expected < 1:
                continue
            already_sent = (
                EmailOutbox.objects.filter(invite=invite, template=EmailTemplate.NO_RESPONSE_REMINDER)
                .exclude(status=EmailStatus.FAILED)
                .count()
            )
            if already_sent >= expected:
                continue
            try:
                email = outbox.queue_no_response_reminder_email(
                    invite,
                    {
                        **details,
                        "guest_name": invite.name,
                        "rsvp_url": f"{settings.BASE_URL}/rsvp/remind/{invite.id}",
                        "rsvp_deadline": deadline,
                        "reminder_number": already_sent + 1,
                    },
                )
            except Exception as e:
                logger.error("no_response_reminder_queue_failed", invite_id=str(invite.id), error=str(e))
                run.errors.append(f"Invite {invite.id}: {e}")
                continue
            run.reminders_queued += 1
            run.email_ids.append(str(email.id))

    logger.info(
        "no_response_reminders_queued",
        events_processed=run.events_processed,
        reminders_queued=run.reminders_queued,
    )
    return run
