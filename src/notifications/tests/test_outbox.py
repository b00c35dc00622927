import typing as t
from datetime import datetime
from datetime import timezone as dt_timezone

import pytest
from django.core import mail

from common.exceptions import NotFoundError, ValidationError
from events.models import Event, Invite
from events.tests.conftest import InviteFactory
from notifications.enums import EmailStatus, EmailTemplate
from notifications.exceptions import EmailProviderError
from notifications.models import EmailOutbox
from notifications.service import outbox
from notifications.service.providers import OutgoingEmail

pytestmark = pytest.mark.django_db

PAYLOAD = {"event_title": "Summer Party", "guest_name": "Gina", "rsvp_url": "https://eventsfixer.test/rsvp/abc"}


def _failing_send(message: OutgoingEmail) -> str:
    raise EmailProviderError("Mailgun error: 401 - Forbidden")


class TestQueue:
    @pytest.mark.parametrize(
        "queue,subject,template",
        [
            (outbox.queue_invite_email, "You're invited to Summer Party", EmailTemplate.INVITE),
            (
                outbox.queue_no_response_reminder_email,
                "Reminder: Please RSVP for Summer Party",
                EmailTemplate.NO_RESPONSE_REMINDER,
            ),
        ],
    )
    def test_invite_addressed(self, invite: Invite, queue: t.Any, subject: str, template: EmailTemplate) -> None:
        email = queue(invite, PAYLOAD)

        assert email.status == EmailStatus.QUEUED
        assert email.subject == subject
        assert email.template == template
        assert email.to_email == invite.email

    def test_guest_addressed_subjects(self, invite: Invite) -> None:
        assert outbox.queue_reminder_email(invite, "a@b.c", PAYLOAD).subject == "Reminder: Summer Party is tomorrow!"
        assert outbox.queue_update_email(invite, "a@b.c", PAYLOAD).subject == "Update: Summer Party has changed"
        assert outbox.queue_cancellation_email(invite, "a@b.c", PAYLOAD).subject == "Cancelled: Summer Party"

    def test_confirmation_subject_depends_on_the_answer(self, invite: Invite) -> None:
        yes = outbox.queue_confirmation_email(invite, invite.email, {**PAYLOAD, "response": "YES"})
        no = outbox.queue_confirmation_email(None, "walk@in.com", {**PAYLOAD, "response": "NO"})

        assert yes.subject == "You're confirmed for Summer Party!"
        assert no.subject == "RSVP received for Summer Party"
        assert no.invite is None

    def test_verification(self) -> None:
        email = outbox.queue_verification_email("new@example.com", {"verify_url": "https://x"})
        assert email.subject == "Verify your email address for EventsFixer"


class TestProcess:
    def test_sends_and_marks_the_invite(self, invite: Invite) -> None:
        invite.status = Invite.Status.PENDING
        invite.save()
        email = outbox.queue_invite_email(invite, PAYLOAD)

        outbox.process_email(email.id)

        email.refresh_from_db()
        assert email.status == EmailStatus.SENT
        assert email.sent_at is not None
        assert email.provider_message_id
        assert "<" not in email.provider_message_id
        invite.refresh_from_db()
        assert invite.status == Invite.Status.SENT
        [message] = mail.outbox
        assert message.subject == "You're invited to Summer Party"
        assert message.to == [invite.email]
        assert "https://eventsfixer.test/rsvp/abc" in message.body

    def test_opened_invites_are_not_downgraded(self, invite: Invite) -> None:
        invite.status = Invite.Status.OPENED
        invite.save()
        email = outbox.queue_invite_email(invite, PAYLOAD)

        outbox.process_email(email.id)

        invite.refresh_from_db()
        assert invite.status == Invite.Status.OPENED

    def test_only_queued_rows_are_sent(self, invite: Invite) -> None:
        email = outbox.queue_invite_email(invite, PAYLOAD)
        outbox.process_email(email.id)
        outbox.process_email(email.id)
        assert len(mail.outbox) == 1

    def test_failure_is_recorded(self, invite: Invite, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(outbox, "send_email", _failing_send)
        email = outbox.queue_invite_email(invite, PAYLOAD)

        with pytest.raises(EmailProviderError):
            outbox.process_email(email.id)

        email.refresh_from_db()
        assert email.status == EmailStatus.FAILED
        assert email.error == "Mailgun error: 401 - Forbidden"

    def test_batch_continues_after_a_failure(self, invite: Invite, monkeypatch: pytest.MonkeyPatch) -> None:
        first = outbox.queue_invite_email(invite, PAYLOAD)
        outbox.queue_reminder_email(invite, invite.email, PAYLOAD)
        real_send = outbox.send_email

        def send_all_but_first(message: OutgoingEmail) -> str:
            if message.subject == first.subject:
                return _failing_send(message)
            return real_send(message)

        monkeypatch.setattr(outbox, "send_email", send_all_but_first)

        result = outbox.process_queued_emails(limit=10)

        assert result.processed == 1
        assert result.errors == [f"{first.id}: Mailgun error: 401 - Forbidden"]

    def test_batch_by_event(
        self, event: Event, invite: Invite, draft_event: Event, invite_factory: InviteFactory
    ) -> None:
        other, _ = invite_factory(draft_event, email="else@example.com")
        outbox.queue_invite_email(invite, PAYLOAD)
        outbox.queue_invite_email(other, PAYLOAD)

        result = outbox.process_queued_emails(event_id=event.id)

        assert result.processed == 1
        assert EmailOutbox.objects.filter(status=EmailStatus.QUEUED).count() == 1


class TestStatusUpdates:
    @pytest.fixture
    def sent_invite_email(self, invite: Invite) -> EmailOutbox:
        email = outbox.queue_invite_email(invite, PAYLOAD)
        EmailOutbox.objects.filter(pk=email.pk).update(status=EmailStatus.SENT, provider_message_id="msg-1@mg")
        return email

    def test_delivered(self, sent_invite_email: EmailOutbox) -> None:
        at = datetime(2026, 6, 1, 9, 0, tzinfo=dt_timezone.utc)

        assert outbox.update_email_status("msg-1@mg", EmailStatus.DELIVERED, at) == 1

        sent_invite_email.refresh_from_db()
        assert sent_invite_email.status == EmailStatus.DELIVERED
        assert sent_invite_email.delivered_at == at

    def test_opened_marks_the_invite_opened(self, sent_invite_email: EmailOutbox, invite: Invite) -> None:
        outbox.update_email_status("msg-1@mg", EmailStatus.OPENED)

        invite.refresh_from_db()
        assert invite.status == Invite.Status.OPENED
        assert invite.opened_at is not None

    def test_bounce_marks_the_invite_bounced(self, sent_invite_email: EmailOutbox, invite: Invite) -> None:
        outbox.update_email_status("msg-1@mg", EmailStatus.BOUNCED)

        invite.refresh_from_db()
        assert invite.status == Invite.Status.BOUNCED

    def test_unknown_message(self) -> None:
        assert outbox.update_email_status("nope@mg", EmailStatus.DELIVERED) == 0


def test_email_stats(event: Event, invite: Invite) -> None:
    for status in (EmailStatus.QUEUED, EmailStatus.SENDING, EmailStatus.SENT, EmailStatus.BOUNCED):
        email = outbox.queue_invite_email(invite, PAYLOAD)
        EmailOutbox.objects.filter(pk=email.pk).update(status=status)
    outbox.queue_verification_email("unrelated@example.com", {})

    stats = outbox.get_email_stats(event.id)

    assert stats == {"total": 4, "queued": 1, "sent": 2, "delivered": 0, "opened": 0, "failed": 0, "bounced": 1}


class TestResend:
    def test_copies_a_failed_email(self, invite: Invite) -> None:
        email = outbox.queue_invite_email(invite, PAYLOAD)
        EmailOutbox.objects.filter(pk=email.pk).update(status=EmailStatus.FAILED)

        copy = outbox.resend_email(email.id)

        assert copy.pk != email.pk
        assert copy.status == EmailStatus.QUEUED
        assert copy.payload == PAYLOAD
        email.refresh_from_db()
        assert email.status == EmailStatus.FAILED

    def test_sent_emails_cannot_be_resent(self, invite: Invite) -> None:
        email = outbox.queue_invite_email(invite, PAYLOAD)
        with pytest.raises(ValidationError, match="Can only resend failed or bounced emails"):
            outbox.resend_email(email.id)

    def test_unknown_email(self) -> None:
        with pytest.raises(NotFoundError, match="Email not found"):
            outbox.resend_email("00000000-0000-0000-0000-000000000000")
