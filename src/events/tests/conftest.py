import typing as t
from datetime import datetime, timedelta

import pytest
from django.utils import timezone

from accounts.models import User
from common.tokens import generate_token_pair
from events.models import RSVP, Event, Invite, Organization, OrganizationMember


@pytest.fixture
def organization(user: User) -> Organization:
    org = Organization.objects.create(name="Garden Parties", slug="garden-parties")
    OrganizationMember.objects.create(organization=org, user=user, role=OrganizationMember.Role.OWNER)
    return org


@pytest.fixture
def start_at() -> datetime:
    return timezone.now() + timedelta(days=14)


@pytest.fixture
def event(user: User, start_at: datetime) -> Event:
    """A published public event created by ``user``."""
    return Event.objects.create(
        creator=user,
        title="Summer Party",
        slug="summer-party",
        description="Drinks in the garden",
        start_at=start_at,
        end_at=start_at + timedelta(hours=4),
        venue_name="The Barn",
        address="1 Farm Road",
        city="Vienna",
        country="Austria",
        status=Event.Status.PUBLISHED,
        published_at=timezone.now(),
    )


@pytest.fixture
def draft_event(user: User, start_at: datetime) -> Event:
    return Event.objects.create(
        creator=user,
        title="Draft Dinner",
        slug="draft-dinner",
        start_at=start_at,
        status=Event.Status.DRAFT,
    )


class InviteFactory:
    """Creates invites and hands back the raw token, which is only known at creation."""

    def __call__(self, event: Event, email: str = "guest@example.com", **kwargs: t.Any) -> tuple[Invite, str]:
        token, token_hash = generate_token_pair()
        invite = Invite.objects.create(event=event, email=email, token_hash=token_hash, **kwargs)
        return invite, token


@pytest.fixture
def invite_factory() -> InviteFactory:
    return InviteFactory()


@pytest.fixture
def invite_with_token(event: Event, invite_factory: InviteFactory) -> tuple[Invite, str]:
    return invite_factory(event, name="Gina Guest", plus_ones_allowed=2, status=Invite.Status.SENT)


@pytest.fixture
def invite(invite_with_token: tuple[Invite, str]) -> Invite:
    return invite_with_token[0]


@pytest.fixture
def invite_token(invite_with_token: tuple[Invite, str]) -> str:
    return invite_with_token[1]


def make_rsvp(event: Event, invite: Invite | None = None, **kwargs: t.Any) -> RSVP:
    """An answer with sensible defaults for the guest's name and response."""
    kwargs.setdefault("response", RSVP.Response.YES)
    kwargs.setdefault("guest_name", invite.name if invite and invite.name else "Guest")
    return RSVP.objects.create(event=event, invite=invite, **kwargs)
