from datetime import datetime, timedelta

import pytest
from django.core import mail
from django.utils import timezone

from accounts.models import User
from common.exceptions import ForbiddenError, NotFoundError, UnauthorizedError, ValidationError
from events.models import Event, Invite, Organization, OrganizationMember
from events.schema import EventCreateSchema, EventQuerySchema, EventUpdateSchema, PublishEventSchema
from events.service import event_service
from events.tests.conftest import InviteFactory, make_rsvp
from notifications.enums import EmailStatus, EmailTemplate
from notifications.models import EmailOutbox

pytestmark = pytest.mark.django_db


def _create_payload(start_at: datetime, **kwargs: object) -> EventCreateSchema:
    return EventCreateSchema(title="Garden Party", start_at=start_at, **kwargs)  # type: ignore[arg-type]


class TestCreateEvent:
    def test_creates_a_draft_with_a_slug(self, user: User, start_at: datetime) -> None:
        event = event_service.create_event(user, _create_payload(start_at, city="Vienna"))

        assert event.status == Event.Status.DRAFT
        assert event.slug == "garden-party"
        assert event.creator == user
        assert event.city == "Vienna"

    def test_slug_collisions_get_a_counter(self, user: User, start_at: datetime) -> None:
        first = event_service.create_event(user, _create_payload(start_at))
        second = event_service.create_event(user, _create_payload(start_at))

        assert first.slug == "garden-party"
        assert second.slug == "garden-party-1"

    def test_organization_managers_can_create_events(
        self, user: User, organization: Organization, start_at: datetime
    ) -> None:
        event = event_service.create_event(user, _create_payload(start_at, organization_id=organization.id))
        assert event.organization == organization

    def test_plain_members_cannot_create_events_for_the_organization(
        self, other_user: User, organization: Organization, start_at: datetime
    ) -> None:
        OrganizationMember.objects.create(organization=organization, user=other_user)

        with pytest.raises(ForbiddenError, match="permission to create events"):
            event_service.create_event(other_user, _create_payload(start_at, organization_id=organization.id))


class TestCreateEventSchema:
    def test_start_must_be_in_the_future(self) -> None:
        with pytest.raises(ValueError, match="Start date must be in the future"):
            _create_payload(timezone.now() - timedelta(hours=1))

    def test_end_must_not_precede_start(self, start_at: datetime) -> None:
        with pytest.raises(ValueError, match="End date must be after the start date"):
            _create_payload(start_at, end_at=start_at - timedelta(hours=1))

    def test_unknown_timezone_is_rejected(self, start_at: datetime) -> None:
        with pytest.raises(ValueError, match="Unknown timezone"):
            _create_payload(start_at, timezone="Mars/Olympus")


class TestListEvents:
    def test_signed_in_users_see_the_events_they_manage(
        self, user: User, other_user: User, event: Event, draft_event: Event, start_at: datetime
    ) -> None:
        Event.objects.create(creator=other_user, title="Not Mine", slug="not-mine", start_at=start_at)

        events, pagination = event_service.list_events(user, EventQuerySchema())

        assert {e.id for e in events} == {event.id, draft_event.id}
        assert pagination.total == 2
        assert pagination.has_more is False

    def test_status_filter(self, user: User, event: Event, draft_event: Event) -> None:
        events, _ = event_service.list_events(user, EventQuerySchema(status=Event.Status.DRAFT))
        assert [e.id for e in events] == [draft_event.id]

    def test_anonymous_users_see_published_public_events(
        self, event: Event, draft_event: Event, user: User, start_at: datetime
    ) -> None:
        Event.objects.create(
            creator=user,
            title="Secret",
            slug="secret",
            start_at=start_at,
            status=Event.Status.PUBLISHED,
            visibility=Event.Visibility.PRIVATE,
        )

        events, _ = event_service.list_events(None, EventQuerySchema())

        assert [e.id for e in events] == [event.id]

    def test_city_filter_ignores_case(self, event: Event) -> None:
        events, _ = event_service.list_events(None, EventQuerySchema(city="vienna"))
        assert [e.id for e in events] == [event.id]

        events, _ = event_service.list_events(None, EventQuerySchema(city="Graz"))
        assert events == []

    def test_yes_count_is_annotated(self, user: User, event: Event, invite_factory: InviteFactory) -> None:
        invite, _ = invite_factory(event)
        make_rsvp(event, invite)
        make_rsvp(event, guest_email="walkin@example.com", response="NO")

        events, _ = event_service.list_events(user, EventQuerySchema())

        assert events[0].yes_count == 1

    def test_pagination(self, user: User, start_at: datetime) -> None:
        for i in range(3):
            Event.objects.create(creator=user, title=f"Event {i}", slug=f"event-{i}", start_at=start_at)

        events, pagination = event_service.list_events(user, EventQuerySchema(limit=2, offset=0))

        assert len(events) == 2
        assert pagination.total == 3
        assert pagination.has_more is True


class TestGetEventDetail:
    def test_published_events_are_visible_to_anyone(self, event: Event) -> None:
        assert event_service.get_event_detail(event.id, None) == event

    def test_unknown_event(self) -> None:
        with pytest.raises(NotFoundError, match="Event not found"):
            event_service.get_event_detail("00000000-0000-0000-0000-000000000000", None)  # type: ignore[arg-type]

    def test_drafts_require_authentication(self, draft_event: Event) -> None:
        with pytest.raises(UnauthorizedError):
            event_service.get_event_detail(draft_event.id, None)

    def test_drafts_are_hidden_from_other_users(self, draft_event: Event, other_user: User) -> None:
        with pytest.raises(ForbiddenError):
            event_service.get_event_detail(draft_event.id, other_user)

    def test_organization_admins_see_drafts(
        self, draft_event: Event, organization: Organization, other_user: User
    ) -> None:
        draft_event.organization = organization
        draft_event.save()
        OrganizationMember.objects.create(
            organization=organization, user=other_user, role=OrganizationMember.Role.ADMIN
        )

        assert event_service.get_event_detail(draft_event.id, other_user) == draft_event


class TestUpdateEvent:
    def test_only_sent_fields_change(self, draft_event: Event) -> None:
        updated = event_service.update_event(draft_event, EventUpdateSchema(city="Graz"))

        assert updated.city == "Graz"
        assert updated.title == "Draft Dinner"

    def test_end_before_start_is_rejected(self, draft_event: Event) -> None:
        payload = EventUpdateSchema(end_at=draft_event.start_at - timedelta(hours=1))
        with pytest.raises(ValidationError, match="End date must be after the start date"):
            event_service.update_event(draft_event, payload)

    def test_title_cannot_be_cleared(self, draft_event: Event) -> None:
        with pytest.raises(ValidationError, match="Title is required"):
            event_service.update_event(draft_event, EventUpdateSchema(title=None))

    def test_guests_of_a_published_event_hear_about_a_new_venue(
        self, event: Event, invite_factory: InviteFactory
    ) -> None:
        coming, _ = invite_factory(event, email="coming@example.com", name="Carla")
        maybe, _ = invite_factory(event, email="maybe@example.com", name="Max")
        declined, _ = invite_factory(event, email="declined@example.com", name="Dora")
        make_rsvp(event, coming, response="YES")
        make_rsvp(event, maybe, response="MAYBE")
        make_rsvp(event, declined, response="NO")

        event_service.update_event(event, EventUpdateSchema(venue_name="The Greenhouse"))

        emails = EmailOutbox.objects.filter(template=EmailTemplate.UPDATE)
        assert sorted(emails.values_list("to_email", flat=True)) == ["coming@example.com", "maybe@example.com"]
        email = emails.get(to_email="coming@example.com")
        assert email.subject == "Update: Summer Party has changed"
        assert email.payload["changes"] == ["New location: The Greenhouse, 1 Farm Road, Vienna"]
        assert email.status == EmailStatus.SENT
        assert len(mail.outbox) == 2

    def test_date_change_is_announced(self, event: Event, invite_factory: InviteFactory) -> None:
        invite, _ = invite_factory(event)
        make_rsvp(event, invite)

        payload = EventUpdateSchema(
            start_at=event.start_at + timedelta(days=1),
            end_at=event.start_at + timedelta(days=1, hours=4),
        )
        event_service.update_event(event, payload)

        email = EmailOutbox.objects.get(template=EmailTemplate.UPDATE)
        assert email.payload["changes"][0].startswith("New date: ")

    def test_description_changes_are_not_announced(self, event: Event, invite_factory: InviteFactory) -> None:
        invite, _ = invite_factory(event)
        make_rsvp(event, invite)

        event_service.update_event(event, EventUpdateSchema(description="Bring a hat"))

        assert not EmailOutbox.objects.exists()

    def test_drafts_do_not_notify(self, draft_event: Event, invite_factory: InviteFactory) -> None:
        invite, _ = invite_factory(draft_event)
        make_rsvp(draft_event, invite)

        event_service.update_event(draft_event, EventUpdateSchema(city="Linz"))

        assert not EmailOutbox.objects.exists()


class TestPublishEvent:
    def test_publishes_a_draft(self, draft_event: Event) -> None:
        event = event_service.publish_event(draft_event)

        assert event.status == Event.Status.PUBLISHED
        assert event.published_at is not None

    def test_explicit_publication_time(self, draft_event: Event) -> None:
        published_at = timezone.now() - timedelta(days=1)
        event = event_service.publish_event(draft_event, PublishEventSchema(published_at=published_at))
        assert event.published_at == published_at

    def test_already_published(self, event: Event) -> None:
        with pytest.raises(ValidationError, match="Event is already published"):
            event_service.publish_event(event)

    def test_cancelled_events_cannot_be_published(self, draft_event: Event) -> None:
        draft_event.status = Event.Status.CANCELLED
        draft_event.save()
        with pytest.raises(ValidationError, match="Cannot publish a cancelled event"):
            event_service.publish_event(draft_event)

    def test_past_events_cannot_be_published(self, draft_event: Event) -> None:
        draft_event.start_at = timezone.now() - timedelta(days=1)
        draft_event.save()
        with pytest.raises(ValidationError, match="start date in the past"):
            event_service.publish_event(draft_event)


class TestCancelEvent:
    def test_guests_are_told(self, event: Event, invite_factory: InviteFactory) -> None:
        invite, _ = invite_factory(event, email="coming@example.com")
        make_rsvp(event, invite)

        cancelled = event_service.cancel_event(event)

        assert cancelled.status == Event.Status.CANCELLED
        email = EmailOutbox.objects.get(template=EmailTemplate.CANCELLATION)
        assert email.to_email == "coming@example.com"
        assert email.subject == "Cancelled: Summer Party"

    def test_cancelling_twice(self, event: Event) -> None:
        event_service.cancel_event(event)
        event.refresh_from_db()
        with pytest.raises(ValidationError, match="Event is already cancelled"):
            event_service.cancel_event(event)

    def test_draft_guests_are_not_told(self, draft_event: Event, invite_factory: InviteFactory) -> None:
        invite, _ = invite_factory(draft_event)
        make_rsvp(draft_event, invite)

        event_service.cancel_event(draft_event)

        assert not EmailOutbox.objects.exists()


def test_duplicate_event_copies_details_but_not_guests(
    event: Event, other_user: User, invite_factory: InviteFactory
) -> None:
    invite_factory(event)
    event.page_config = {"schemaVersion": 1, "hero": {"title": "Summer"}}
    event.save()

    copy = event_service.duplicate_event(event, other_user)

    assert copy.title == "Copy of Summer Party"
    assert copy.slug == "copy-of-summer-party"
    assert copy.status == Event.Status.DRAFT
    assert copy.creator == other_user
    assert copy.venue_name == event.venue_name
    assert copy.page_config == event.page_config
    assert copy.published_at is None
    assert not Invite.objects.filter(event=copy).exists()


def test_delete_event(event: Event, invite_factory: InviteFactory) -> None:
    invite_factory(event)
    event_service.delete_event(event)
    assert not Event.objects.filter(pk=event.pk).exists()
    assert not Invite.objects.exists()


def test_dashboard_stats(user: User, event: Event, draft_event: Event, invite_factory: InviteFactory) -> None:
    first, _ = invite_factory(event, email="a@example.com")
    second, _ = invite_factory(event, email="b@example.com")
    invite_factory(event, email="c@example.com")
    make_rsvp(event, first, response="YES")
    make_rsvp(event, second, response="NO")

    stats = event_service.dashboard_stats(user)

    assert stats == {
        "total_events": 2,
        "published_events": 1,
        "draft_events": 1,
        "total_invites": 3,
        "total_rsvps": 2,
        "yes_rsvps": 1,
        "response_rate": 67,
    }


def test_dashboard_response_rate_rounds_half_up(user: User, event: Event, invite_factory: InviteFactory) -> None:
    invites = [invite_factory(event, email=f"guest{i}@example.com")[0] for i in range(8)]
    make_rsvp(event, invites[0])

    assert event_service.dashboard_stats(user)["response_rate"] == 13


def test_dashboard_counts_every_unpublished_event_as_draft(
    user: User, event: Event, draft_event: Event, invite_factory: InviteFactory
) -> None:
    draft_event.status = Event.Status.CANCELLED
    draft_event.save()
    invite, _ = invite_factory(event)
    make_rsvp(event, invite)
    make_rsvp(event, guest_email="walk@in.com", response="MAYBE")

    stats = event_service.dashboard_stats(user)

    assert stats["draft_events"] == 1
    assert stats["total_rsvps"] == 2
    assert stats["response_rate"] == 200
