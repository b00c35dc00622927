import csv
import io
from datetime import timedelta

import pytest
from django.core import mail
from django.utils import timezone

from common.exceptions import ConflictError, NotFoundError, ValidationError
from common.tokens import hash_token
from events.models import Event, Invite
from events.schema import InviteCreateSchema, InviteQuerySchema
from events.service import invite_service
from events.tests.conftest import InviteFactory, make_rsvp
from notifications.enums import EmailStatus, EmailTemplate
from notifications.models import EmailOutbox

pytestmark = pytest.mark.django_db


class TestCreateInvites:
    def test_single_invite_stores_only_the_token_digest(self, event: Event) -> None:
        payload = InviteCreateSchema(email="Gina@Example.com", name="Gina", plus_ones_allowed=1)

        [created] = invite_service.create_invites(event, payload)

        invite = created.invite
        assert invite.email == "gina@example.com"
        assert invite.status == Invite.Status.PENDING
        assert invite.token_hash == hash_token(created.token)
        assert created.email_queued is False
        assert not EmailOutbox.objects.exists()

    def test_send_immediately_delivers_the_invitation(self, event: Event) -> None:
        payload = InviteCreateSchema(email="gina@example.com", name="Gina", send_immediately=True)

        [created] = invite_service.create_invites(event, payload)

        assert created.email_queued is True
        email = EmailOutbox.objects.get()
        assert email.template == EmailTemplate.INVITE
        assert email.subject == "You're invited to Summer Party"
        assert email.payload["rsvp_url"] == f"https://eventsfixer.test/rsvp/{created.token}"
        assert email.status == EmailStatus.SENT
        created.invite.refresh_from_db()
        assert created.invite.status == Invite.Status.SENT
        assert created.invite.sent_at is not None
        assert mail.outbox[0].to == ["gina@example.com"]

    def test_bulk_invites(self, event: Event) -> None:
        payload = InviteCreateSchema(
            invites=[
                {"email": "a@example.com"},
                {"email": "b@example.com", "plus_ones_allowed": 2},
            ]  # type: ignore[list-item]
        )

        created = invite_service.create_invites(event, payload)

        assert [c.invite.email for c in created] == ["a@example.com", "b@example.com"]
        assert len({c.token for c in created}) == 2

    def test_duplicate_emails_in_a_batch(self, event: Event) -> None:
        payload = InviteCreateSchema(
            invites=[{"email": "a@example.com"}, {"email": "A@example.com"}]  # type: ignore[list-item]
        )

        with pytest.raises(ValidationError) as exc_info:
            invite_service.create_invites(event, payload)

        assert exc_info.value.code == "DUPLICATE_EMAILS"
        assert exc_info.value.details == ["a@example.com"]
        assert not Invite.objects.exists()

    def test_single_invite_conflict(self, event: Event, invite_factory: InviteFactory) -> None:
        invite_factory(event, email="gina@example.com")

        with pytest.raises(ConflictError, match="An invite already exists for this email"):
            invite_service.create_invites(event, InviteCreateSchema(email="gina@example.com"))

    def test_bulk_conflict_lists_the_existing_emails(self, event: Event, invite_factory: InviteFactory) -> None:
        invite_factory(event, email="b@example.com")
        payload = InviteCreateSchema(
            invites=[{"email": "a@example.com"}, {"email": "b@example.com"}]  # type: ignore[list-item]
        )

        with pytest.raises(ConflictError, match="Invites already exist for: b@example.com"):
            invite_service.create_invites(event, payload)

        assert Invite.objects.count() == 1

    def test_payload_requires_email_or_invites(self) -> None:
        with pytest.raises(ValueError, match="Either email or invites is required"):
            InviteCreateSchema()


class TestLookupInvite:
    def test_marks_the_invite_opened(self, invite: Invite, invite_token: str) -> None:
        found, yes_count = invite_service.lookup_invite(invite_token)

        assert found == invite
        assert yes_count == 0
        found.refresh_from_db()
        assert found.status == Invite.Status.OPENED
        assert found.opened_at is not None

    def test_responded_invites_keep_their_status(self, invite: Invite, invite_token: str, event: Event) -> None:
        make_rsvp(event, invite)
        invite.status = Invite.Status.RESPONDED
        invite.save()

        found, yes_count = invite_service.lookup_invite(invite_token)

        assert found.status == Invite.Status.RESPONDED
        assert yes_count == 1

    def test_missing_token(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            invite_service.lookup_invite("")
        assert exc_info.value.code == "MISSING_TOKEN"

    def test_unknown_token(self) -> None:
        with pytest.raises(NotFoundError, match="^Invite not found or has expired$"):
            invite_service.lookup_invite("not-a-token")

    def test_expired_invite(self, event: Event, invite_factory: InviteFactory) -> None:
        invite, token = invite_factory(event, expires_at=timezone.now() - timedelta(hours=1))

        with pytest.raises(NotFoundError, match="This invite has expired"):
            invite_service.lookup_invite(token)

        invite.refresh_from_db()
        assert invite.status == Invite.Status.EXPIRED

    def test_cancelled_event(self, event: Event, invite_token: str) -> None:
        event.status = Event.Status.CANCELLED
        event.save()

        with pytest.raises(ValidationError) as exc_info:
            invite_service.lookup_invite(invite_token)
        assert exc_info.value.code == "EVENT_CANCELLED"


def test_list_invites_filters_by_status(event: Event, invite_factory: InviteFactory) -> None:
    invite_factory(event, email="a@example.com", status=Invite.Status.SENT)
    opened, _ = invite_factory(event, email="b@example.com", status=Invite.Status.OPENED)

    invites, pagination = invite_service.list_invites(event, InviteQuerySchema(status=Invite.Status.OPENED))

    assert invites == [opened]
    assert pagination.total == 1


class TestExport:
    @pytest.fixture
    def guests(self, event: Event, invite_factory: InviteFactory) -> None:
        yes, _ = invite_factory(event, email="yes@example.com", name="Yara")
        no, _ = invite_factory(event, email="no@example.com", name="Nils")
        invite_factory(event, email="pending@example.com", name="Pia")
        make_rsvp(event, yes, response="YES", guest_count=2, notes="Vegetarian")
        make_rsvp(event, no, response="NO")

    def _rows(self, content: str) -> list[list[str]]:
        return list(csv.reader(io.StringIO(content)))

    @pytest.mark.usefixtures("guests")
    def test_all(self, event: Event) -> None:
        rows = self._rows(invite_service.export_invites_csv(event))

        assert rows[0] == list(invite_service.EXPORT_HEADERS)
        assert sorted(row[1] for row in rows[1:]) == ["no@example.com", "pending@example.com", "yes@example.com"]

    @pytest.mark.usefixtures("guests")
    @pytest.mark.parametrize(
        "filter_name,emails",
        [
            ("attending", ["yes@example.com"]),
            ("not_attending", ["no@example.com"]),
            ("responded", ["no@example.com", "yes@example.com"]),
            ("pending", ["pending@example.com"]),
        ],
    )
    def test_filters(self, event: Event, filter_name: str, emails: list[str]) -> None:
        rows = self._rows(invite_service.export_invites_csv(event, filter_name))
        assert sorted(row[1] for row in rows[1:]) == emails

    @pytest.mark.usefixtures("guests")
    def test_answer_columns(self, event: Event) -> None:
        rows = self._rows(invite_service.export_invites_csv(event, "attending"))
        name, email, status, response, guest_count, responded, notes, sent = rows[1]

        assert (name, email, response, guest_count, notes) == ("Yara", "yes@example.com", "YES", "2", "Vegetarian")
        assert responded != ""
        assert sent == ""

    def test_unknown_filter(self, event: Event) -> None:
        with pytest.raises(ValidationError, match="Invalid filter. Must be one of: all, attending"):
            invite_service.export_invites_csv(event, "everyone")

    def test_filename(self, event: Event) -> None:
        name = invite_service.export_filename(event, "attending")
        assert name.startswith("summer_party_invites_attending_")
        assert name.endswith(".csv")
