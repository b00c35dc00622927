"""Invite and RSVP schemas."""

import typing as t
from datetime import datetime
from uuid import UUID

from ninja import Schema
from pydantic import AwareDatetime, EmailStr, Field, model_validator

from common.schema import PaginationSchema, StrippedString
from events.models import RSVP, Invite

MAX_BULK_INVITES = 100


class InviteItemSchema(Schema):
    email: EmailStr
    name: StrippedString | None = Field(None, max_length=200)
    plus_ones_allowed: int = Field(0, ge=0, le=10)
    expires_at: AwareDatetime | None = None


class InviteCreateSchema(Schema):
    """A single invite (``email`` and friends) or a batch (``invites``)."""

    email: EmailStr | None = None
    name: StrippedString | None = Field(None, max_length=200)
    plus_ones_allowed: int = Field(0, ge=0, le=10)
    expires_at: AwareDatetime | None = None
    invites: list[InviteItemSchema] | None = Field(None, min_length=1, max_length=MAX_BULK_INVITES)
    send_immediately: bool = False

    @model_validator(mode="after")
    def single_or_bulk(self) -> t.Self:
        if self.invites is None and self.email is None:
            raise ValueError("Either email or invites is required")
        return self

    @property
    def is_bulk(self) -> bool:
        return self.invites is not None

    def as_item(self) -> InviteItemSchema:
        assert self.email is not None
        return InviteItemSchema(
            email=self.email,
            name=self.name,
            plus_ones_allowed=self.plus_ones_allowed,
            expires_at=self.expires_at,
        )


class InviteCreatedSchema(Schema):
    id: UUID
    email: str
    name: str | None = None
    status: Invite.Status
    plus_ones_allowed: int
    created_at: datetime
    token: str = Field(..., description="The raw invite token. It is only returned once.")


class SingleInviteCreatedSchema(InviteCreatedSchema):
    email_queued: bool


class BulkInviteCreatedSchema(Schema):
    invites: list[InviteCreatedSchema]
    count: int
    emails_queued: int


class InviteRSVPSummarySchema(Schema):
    id: UUID
    response: RSVP.Response
    guest_name: str
    guest_count: int
    responded_at: datetime


class InviteSchema(Schema):
    id: UUID
    email: str
    name: str | None = None
    status: Invite.Status
    plus_ones_allowed: int
    sent_at: datetime | None = None
    opened_at: datetime | None = None
    expires_at: datetime | None = None
    created_at: datetime
    rsvp: InviteRSVPSummarySchema | None = None

    @staticmethod
    def resolve_rsvp(obj: Invite) -> RSVP | None:
        try:
            return obj.rsvp  # type: ignore[no-any-return]
        except RSVP.DoesNotExist:
            return None


class InviteQuerySchema(Schema):
    status: Invite.Status | None = None
    limit: int = Field(50, ge=1, le=100)
    offset: int = Field(0, ge=0)


class InviteListSchema(Schema):
    invites: list[InviteSchema]
    pagination: PaginationSchema


class InviteExportQuerySchema(Schema):
    filter: str = "all"


class InviteLookupQuerySchema(Schema):
    token: str | None = None


class ExistingRSVPSchema(InviteRSVPSummarySchema):
    notes: str | None = None


class LookupInviteSchema(Schema):
    id: UUID
    email: str
    name: str | None = None
    status: Invite.Status
    plus_ones_allowed: int
    has_responded: bool
    existing_rsvp: ExistingRSVPSchema | None = None


class LookupEventSchema(Schema):
    id: UUID
    title: str
    slug: str
    description: str | None = None
    start_at: datetime
    end_at: datetime | None = None
    timezone: str
    venue_name: str | None = None
    address: str | None = None
    city: str | None = None
    country: str | None = None
    cover_image_url: str | None = None
    status: str
    max_attendees: int | None = None
    host_name: str | None = None
    organization_name: str | None = None
    yes_count: int = 0


class InviteLookupSchema(Schema):
    invite: LookupInviteSchema
    event: LookupEventSchema


class RSVPSubmitSchema(Schema):
    """Answer through an invite (``token``) or on a public event page (``event_id``)."""

    token: str | None = Field(None, min_length=1)
    invite_token: str | None = Field(None, min_length=1)
    event_id: UUID | None = None
    response: RSVP.Response
    guest_name: StrippedString = Field(..., min_length=1, max_length=200)
    guest_email: EmailStr | None = None
    guest_count: int = Field(1, ge=1, le=11)
    notes: StrippedString | None = Field(None, max_length=1000)

    @model_validator(mode="after")
    def invite_or_event(self) -> t.Self:
        if not self.invite_token_value and self.event_id is None:
            raise ValueError("Either an invite token or an event_id is required")
        return self

    @property
    def invite_token_value(self) -> str | None:
        return self.invite_token or self.token


class RSVPSchema(Schema):
    id: UUID
    response: RSVP.Response
    guest_name: str
    guest_count: int
    responded_at: datetime


class RSVPEventSchema(Schema):
    id: UUID
    title: str


class RSVPResultSchema(Schema):
    rsvp: RSVPSchema
    event: RSVPEventSchema
    message: str


class RSVPInviteSchema(Schema):
    id: UUID
    email: str
    name: str | None = None


class RSVPListItemSchema(Schema):
    id: UUID
    response: RSVP.Response
    guest_name: str
    guest_email: str | None = None
    guest_count: int
    notes: str | None = None
    responded_at: datetime
    updated_at: datetime
    invite: RSVPInviteSchema | None = None


class ResponseStatsSchema(Schema):
    count: int = 0
    total_guests: int = 0


class RSVPStatsSchema(Schema):
    yes: ResponseStatsSchema
    no: ResponseStatsSchema
    maybe: ResponseStatsSchema


class RSVPQuerySchema(Schema):
    response: RSVP.Response | None = None
    limit: int = Field(50, ge=1, le=100)
    offset: int = Field(0, ge=0)


class RSVPListSchema(Schema):
    rsvps: list[RSVPListItemSchema]
    stats: RSVPStatsSchema
    pagination: PaginationSchema
