import typing as t
from datetime import date, datetime
from uuid import UUID

from ninja import Schema
from pydantic import Field

from analytics.models import AnalyticsEvent


class TrackEventSchema(Schema):
    event_id: UUID
    type: AnalyticsEvent.Type
    session_id: str = Field(..., min_length=1, max_length=128)
    data: dict[str, t.Any] | None = None


class TrackedEventSchema(Schema):
    id: UUID


class AnalyticsSnapshotSchema(Schema):
    total_yes: int
    total_maybe: int
    total_no: int
    total_responses: int
    total_invites: int
    invites_opened: int
    response_rate: int
    open_rate: int
    expected_attendance: int
    days_until_event: int | None = None
    event_date: datetime
    last_updated: datetime


class FunnelQuerySchema(Schema):
    extended: bool = Field(False, description="Include page views and RSVP form starts.")


class FunnelStageSchema(Schema):
    name: str
    label: str
    count: int
    percentage: int


class FunnelDropoffSchema(Schema):
    from_stage: str
    to_stage: str
    lost: int
    rate: int


class FunnelSchema(Schema):
    stages: list[FunnelStageSchema]
    dropoffs: list[FunnelDropoffSchema]
    total_invited: int
    total_responded: int
    overall_conversion_rate: int


class DailyCountSchema(Schema):
    date: date
    count: int
    cumulative: int


class MomentumSchema(Schema):
    current_7_days: int
    previous_7_days: int
    trend: t.Literal["accelerating", "steady", "slowing"]
    percent_change: int


class VelocitySchema(Schema):
    daily: list[DailyCountSchema]
    momentum: MomentumSchema
    total_rsvps: int
    first_rsvp_date: date | None = None
    last_rsvp_date: date | None = None
