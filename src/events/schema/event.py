"""Event-related schemas."""

import typing as t
from datetime import datetime
from uuid import UUID

from django.utils import timezone
from ninja import Schema
from pydantic import AwareDatetime, Field, StringConstraints, field_validator, model_validator

from accounts.schema import MinimalUserSchema
from common.schema import PaginationSchema, StrippedString
from events.models import Event

from .mixins import TimezoneString, UrlString
from .organization import MinimalOrganizationSchema

TitleString = t.Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=200)]


class EventCreateSchema(Schema):
    title: TitleString
    description: StrippedString | None = Field(None, max_length=5000)
    start_at: AwareDatetime
    end_at: AwareDatetime | None = None
    timezone: TimezoneString = "UTC"
    venue_name: StrippedString | None = Field(None, max_length=200)
    address: StrippedString | None = Field(None, max_length=500)
    city: StrippedString | None = Field(None, max_length=100)
    country: StrippedString | None = Field(None, max_length=100)
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    visibility: Event.Visibility = Event.Visibility.PUBLIC
    max_attendees: int | None = Field(None, ge=1, le=10000)
    cover_image_url: UrlString | None = None
    organization_id: UUID | None = Field(None, description="Create the event under an organization you manage.")
    reminder_enabled: bool = False
    reminder_days: int | None = Field(None, ge=1, le=30, description="Days between no-response reminders.")
    rsvp_deadline: AwareDatetime | None = None

    @field_validator("start_at")
    @classmethod
    def start_in_future(cls, value: datetime) -> datetime:
        if value <= timezone.now():
            raise ValueError("Start date must be in the future")
        return value

    @model_validator(mode="after")
    def end_after_start(self) -> t.Self:
        if self.end_at is not None and self.end_at < self.start_at:
            raise ValueError("End date must be after the start date")
        return self


class EventUpdateSchema(Schema):
    """Only the fields that are sent are changed; ``null`` clears a field."""

    title: TitleString | None = None
    description: StrippedString | None = Field(None, max_length=5000)
    start_at: AwareDatetime | None = None
    end_at: AwareDatetime | None = None
    timezone: TimezoneString | None = None
    venue_name: StrippedString | None = Field(None, max_length=200)
    address: StrippedString | None = Field(None, max_length=500)
    city: StrippedString | None = Field(None, max_length=100)
    country: StrippedString | None = Field(None, max_length=100)
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    visibility: Event.Visibility | None = None
    max_attendees: int | None = Field(None, ge=1, le=10000)
    cover_image_url: UrlString | None = None
    reminder_enabled: bool | None = None
    reminder_days: int | None = Field(None, ge=1, le=30)
    rsvp_deadline: AwareDatetime | None = None


class EventQuerySchema(Schema):
    status: Event.Status | None = None
    visibility: Event.Visibility | None = None
    city: str | None = None
    limit: int = Field(20, ge=1, le=100)
    offset: int = Field(0, ge=0)


class PublishEventSchema(Schema):
    published_at: AwareDatetime | None = None


class EventListItemSchema(Schema):
    id: UUID
    title: str
    slug: str
    description: str | None = None
    start_at: datetime
    end_at: datetime | None = None
    timezone: str
    venue_name: str | None = None
    city: str | None = None
    cover_image_url: str | None = None
    status: Event.Status
    visibility: Event.Visibility
    created_at: datetime
    yes_count: int = 0


class EventListSchema(Schema):
    events: list[EventListItemSchema]
    pagination: PaginationSchema


class EventSchema(Schema):
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
    latitude: float | None = None
    longitude: float | None = None
    visibility: Event.Visibility
    status: Event.Status
    cover_image_url: str | None = None
    max_attendees: int | None = None
    published_at: datetime | None = None
    template_id: str | None = None
    theme_preset: str | None = None
    reminder_enabled: bool
    reminder_days: int | None = None
    rsvp_deadline: datetime | None = None
    created_at: datetime
    updated_at: datetime


class EventCreatorSchema(MinimalUserSchema):
    avatar_url: str


class EventDetailSchema(EventSchema):
    creator: EventCreatorSchema
    organization: MinimalOrganizationSchema | None = None
    invite_count: int = 0
    rsvp_count: int = 0
    yes_count: int = 0


class DashboardStatsSchema(Schema):
    total_events: int
    published_events: int
    draft_events: int
    total_invites: int
    total_rsvps: int
    yes_rsvps: int
    response_rate: int
