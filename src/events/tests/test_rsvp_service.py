import typing as t
from datetime import timedelta

import pytest
from django.utils import timezone

from common.exceptions import NotFoundError, ValidationError
from events.models import RSVP, Event, Invite
from events.schema import RSVPQuerySchema, RSVPSubmitSchema
from events.service import rsvp_service
from events.tests.conftest import InviteFactory, make_rsvp
from notifications.enums import EmailTemplate
from notifications.models import EmailOutbox

pytestmark = pytest.mark.django_db


def _answer(**kwargs: t.Any) -> RSVPSubmitSchema:
    kwargs.setdefault("response", "YES")
    kwargs.setdefault("guest_name", "Gina Guest")
    return RSVPSubmitSchema(**kwargs)


class TestAnswerWithInvite:
    def test_yes_is_recorded_and_confirmed(self, invite: Invite, invite_token: str) -> None:
        rsvp, message = rsvp_service.submit_rsvp(_answer(token=invite_token, guest_count=2))

        assert rsvp.invite == invite
        assert rsvp.response == RSVP.Response.YES
        assert rsvp.guest_count == 2
        assert message == "You're going! We'll see you there."
        invite.refresh_from_db()
        assert invite.status == Invite.Status.RESPONDED

        email = EmailOutbox.objects.get(template=EmailTemplate.CONFIRMATION)
        assert email.to_email == invite.email
        assert email.subject == "You're confirmed for Summer Party!"

    def test_invite_token_field_is_accepted(self, invite: Invite, invite_token: str) -> None:
        rsvp, _ = rsvp_service.submit_rsvp(_answer(invite_token=invite_token))
        assert rsvp.invite == invite

    def test_answering_again_updates_the_answer(self, invite: Invite, invite_token: str) -> None:
        first, _ = rsvp_service.submit_rsvp(_answer(token=invite_token))
        second, message = rsvp_service.submit_rsvp(_answer(token=invite_token, response="NO"))

        assert second.pk == first.pk
        assert RSVP.objects.get().response == RSVP.Response.NO
        assert message == "Thanks for letting us know."

    def test_maybe_confirmation_subject(self, invite_token: str) -> None:
        _, message = rsvp_service.submit_rsvp(_answer(token=invite_token, response="MAYBE"))

        assert message == "Thanks for your response. We hope to see you!"
        assert EmailOutbox.objects.get().subject == "RSVP received for Summer Party"

    def test_guest_email_overrides_the_invite_address(self, invite_token: str) -> None:
        rsvp_service.submit_rsvp(_answer(token=invite_token, guest_email="Other@Example.com"))
        assert EmailOutbox.objects.get().to_email == "other@example.com"

    def test_party_size_is_limited_by_plus_ones(self, invite_token: str) -> None:
        with pytest.raises(ValidationError, match="You can only bring up to 2 additional guest"):
            rsvp_service.submit_rsvp(_answer(token=invite_token, guest_count=4))

    def test_unknown_token(self) -> None:
        with pytest.raises(NotFoundError, match="Invite not found or has expired"):
            rsvp_service.submit_rsvp(_answer(token="nope"))

    def test_expired_invite(self, event: Event, invite_factory: InviteFactory) -> None:
        _, token = invite_factory(event, expires_at=timezone.now() - timedelta(minutes=1))
        with pytest.raises(ValidationError, match="This invite has expired"):
            rsvp_service.submit_rsvp(_answer(token=token))

    def test_cancelled_event(self, event: Event, invite_token: str) -> None:
        event.status = Event.Status.CANCELLED
        event.save()
        with pytest.raises(ValidationError, match="This event has been cancelled"):
            rsvp_service.submit_rsvp(_answer(token=invite_token))


class TestCapacity:
    def test_full_event_rejects_yes(self, event: Event, invite_factory: InviteFactory, invite_token: str) -> None:
        event.max_attendees = 3
        event.save()
        other, _ = invite_factory(event, email="early@example.com")
        make_rsvp(event, other, guest_count=2)

        with pytest.raises(ValidationError, match="maximum capacity"):
            rsvp_service.submit_rsvp(_answer(token=invite_token, guest_count=2))

    def test_no_is_always_accepted(self, event: Event, invite_factory: InviteFactory, invite_token: str) -> None:
        event.max_attendees = 1
        event.save()
        other, _ = invite_factory(event, email="early@example.com")
        make_rsvp(event, other)

        rsvp, _ = rsvp_service.submit_rsvp(_answer(token=invite_token, response="NO"))
        assert rsvp.response == RSVP.Response.NO

    def test_own_previous_answer_does_not_count(self, event: Event, invite_token: str) -> None:
        event.max_attendees = 2
        event.save()
        rsvp_service.submit_rsvp(_answer(token=invite_token, guest_count=2))

        rsvp, _ = rsvp_service.submit_rsvp(_answer(token=invite_token, guest_count=2, notes="Still coming"))
        assert rsvp.notes == "Still coming"


class TestPublicAnswer:
    def test_public_event_accepts_answers_without_invite(self, event: Event) -> None:
        rsvp, _ = rsvp_service.submit_rsvp(_answer(event_id=event.id, guest_email="Walk@In.com", guest_count=3))

        assert rsvp.invite is None
        assert rsvp.guest_email == "walk@in.com"
        assert EmailOutbox.objects.get().to_email == "walk@in.com"

    def test_same_email_updates_the_answer(self, event: Event) -> None:
        rsvp_service.submit_rsvp(_answer(event_id=event.id, guest_email="walk@in.com"))
        rsvp_service.submit_rsvp(_answer(event_id=event.id, guest_email="walk@in.com", response="NO"))

        assert RSVP.objects.filter(event=event).count() == 1
        assert RSVP.objects.get().response == RSVP.Response.NO

    def test_email_is_required(self, event: Event) -> None:
        with pytest.raises(ValidationError, match="Email is required to RSVP without an invite"):
            rsvp_service.submit_rsvp(_answer(event_id=event.id))

    def test_party_size_limit(self, event: Event) -> None:
        with pytest.raises(ValidationError, match="up to 4 additional guest"):
            rsvp_service.submit_rsvp(_answer(event_id=event.id, guest_email="walk@in.com", guest_count=6))

    def test_private_events_require_an_invite(self, event: Event) -> None:
        event.visibility = Event.Visibility.PRIVATE
        event.save()
        with pytest.raises(ValidationError, match="This event requires an invitation"):
            rsvp_service.submit_rsvp(_answer(event_id=event.id, guest_email="walk@in.com"))

    def test_drafts_do_not_accept_answers(self, draft_event: Event) -> None:
        with pytest.raises(ValidationError, match="This event is not accepting RSVPs"):
            rsvp_service.submit_rsvp(_answer(event_id=draft_event.id, guest_email="walk@in.com"))

    def test_unknown_event(self) -> None:
        with pytest.raises(NotFoundError, match="Event not found"):
            rsvp_service.submit_rsvp(
                _answer(event_id="00000000-0000-0000-0000-000000000000", guest_email="walk@in.com")
            )


def test_payload_needs_a_token_or_an_event() -> None:
    with pytest.raises(ValueError, match="Either an invite token or an event_id is required"):
        _answer()


def test_list_rsvps_with_stats(event: Event, invite_factory: InviteFactory) -> None:
    a, _ = invite_factory(event, email="a@example.com")
    b, _ = invite_factory(event, email="b@example.com")
    make_rsvp(event, a, response="YES", guest_count=3)
    make_rsvp(event, b, response="MAYBE")
    make_rsvp(event, guest_email="walk@in.com", response="YES")

    rsvps, stats, pagination = rsvp_service.list_rsvps(event, RSVPQuerySchema(response="YES"))

    assert len(rsvps) == 2
    assert pagination.total == 2
    assert stats == {
        "yes": {"count": 2, "total_guests": 4},
        "no": {"count": 0, "total_guests": 0},
        "maybe": {"count": 1, "total_guests": 1},
    }
