"""Event metrics computed from plain counts and dates.

Nothing here touches the database; :mod:`analytics.service` gathers the numbers.
"""

import math
import typing as t
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from datetime import timezone as dt_timezone

FunnelStageName = t.Literal["invited", "opened", "page_viewed", "form_started", "responded"]
VelocityTrend = t.Literal["accelerating", "steady", "slowing"]

FUNNEL_STAGE_LABELS: dict[str, str] = {
    "invited": "Invited",
    "opened": "Opened Invite",
    "page_viewed": "Viewed Page",
    "form_started": "Started RSVP",
    "responded": "Responded",
}

# Percent change over the previous week beyond which momentum counts as a trend.
TREND_THRESHOLD = 10
DEFAULT_LOOKBACK_DAYS = 30


@dataclass(frozen=True)
class ResponseCount:
    count: int = 0
    guests: int = 0


@dataclass(frozen=True)
class AnalyticsSnapshot:
    total_yes: int
    total_maybe: int
    total_no: int
    total_responses: int
    total_invites: int
    invites_opened: int
    response_rate: int
    open_rate: int
    expected_attendance: int
    days_until_event: int | None
    event_date: datetime
    last_updated: datetime


@dataclass(frozen=True)
class FunnelStage:
    name: str
    label: str
    count: int
    percentage: int


@dataclass(frozen=True)
class FunnelDropoff:
    from_stage: str
    to_stage: str
    lost: int
    rate: int


@dataclass(frozen=True)
class FunnelData:
    stages: list[FunnelStage]
    dropoffs: list[FunnelDropoff]
    total_invited: int
    total_responded: int
    overall_conversion_rate: int


@dataclass(frozen=True)
class DailyCount:
    date: date
    count: int
    cumulative: int


@dataclass(frozen=True)
class Momentum:
    current_7_days: int = 0
    previous_7_days: int = 0
    trend: VelocityTrend = "steady"
    percent_change: int = 0


@dataclass(frozen=True)
class VelocityData:
    daily: list[DailyCount] = field(default_factory=list)
    momentum: Momentum = field(default_factory=Momentum)
    total_rsvps: int = 0
    first_rsvp_date: date | None = None
    last_rsvp_date: date | None = None


def round_half_up(value: float) -> int:
    """Round .5 towards positive infinity, the way dashboards usually display percentages."""
    return math.floor(value + 0.5)


def percentage(part: int, whole: int) -> int:
    """``part`` as a whole-number percentage of ``whole``; 0 when ``whole`` is 0."""
    if whole == 0:
        return 0
    return round_half_up(part / whole * 100)


def calculate_response_rate(total_responses: int, total_invites: int) -> int:
    return percentage(total_responses, total_invites)


def calculate_open_rate(invites_opened: int, total_invites: int) -> int:
    return percentage(invites_opened, total_invites)


def calculate_days_until_event(event_date: datetime, now: datetime) -> int | None:
    """Whole days left, rounded up. None once the event has started."""
    seconds = (event_date - now).total_seconds()
    if seconds <= 0:
        return None
    return math.ceil(seconds / 86400)


def build_analytics_snapshot(
    rsvp_stats: t.Mapping[str, ResponseCount],
    total_invites: int,
    invites_opened: int,
    event_date: datetime,
    now: datetime,
) -> AnalyticsSnapshot:
    """Headline numbers for an event.

    ``rsvp_stats`` maps ``yes``, ``maybe`` and ``no`` to their counts; missing keys count as zero.
    Expected attendance is the head count of the YES answers.
    """
    yes = rsvp_stats.get("yes", ResponseCount())
    maybe = rsvp_stats.get("maybe", ResponseCount())
    no = rsvp_stats.get("no", ResponseCount())
    total_responses = yes.count + maybe.count + no.count
    return AnalyticsSnapshot(
        total_yes=yes.count,
        total_maybe=maybe.count,
        total_no=no.count,
        total_responses=total_responses,
        total_invites=total_invites,
        invites_opened=invites_opened,
        response_rate=calculate_response_rate(total_responses, total_invites),
        open_rate=calculate_open_rate(invites_opened, total_invites),
        expected_attendance=yes.guests,
        days_until_event=calculate_days_until_event(event_date, now),
        event_date=event_date,
        last_updated=now,
    )


def calculate_dropoff(from_count: int, to_count: int, from_stage: str, to_stage: str) -> FunnelDropoff:
    lost = max(0, from_count - to_count)
    return FunnelDropoff(from_stage=from_stage, to_stage=to_stage, lost=lost, rate=percentage(lost, from_count))


def _build_funnel(counts: list[tuple[str, int]]) -> FunnelData:
    total_invited = counts[0][1]
    total_responded = counts[-1][1]
    stages = [
        FunnelStage(
            name=name,
            label=FUNNEL_STAGE_LABELS[name],
            count=count,
            percentage=100 if index == 0 else percentage(count, total_invited),
        )
        for index, (name, count) in enumerate(counts)
    ]
    dropoffs = [
        calculate_dropoff(from_count, to_count, from_name, to_name)
        for (from_name, from_count), (to_name, to_count) in zip(counts, counts[1:])
    ]
    return FunnelData(
        stages=stages,
        dropoffs=dropoffs,
        total_invited=total_invited,
        total_responded=total_responded,
        overall_conversion_rate=percentage(total_responded, total_invited),
    )


def build_funnel_data(total_invited: int, total_opened: int, total_responded: int) -> FunnelData:
    """Invited, opened and responded, with the share lost between each stage."""
    return _build_funnel([("invited", total_invited), ("opened", total_opened), ("responded", total_responded)])


def build_extended_funnel_data(
    total_invited: int,
    total_opened: int,
    total_page_viewed: int,
    total_form_started: int,
    total_responded: int,
) -> FunnelData:
    """The funnel with the page views and RSVP form starts reported by the event page."""
    return _build_funnel(
        [
            ("invited", total_invited),
            ("opened", total_opened),
            ("page_viewed", total_page_viewed),
            ("form_started", total_form_started),
            ("responded", total_responded),
        ]
    )


def determine_trend(percent_change: int) -> VelocityTrend:
    if percent_change > TREND_THRESHOLD:
        return "accelerating"
    if percent_change < -TREND_THRESHOLD:
        return "slowing"
    return "steady"


def calculate_momentum(current_7_days: int, previous_7_days: int) -> Momentum:
    """Compare this week's answers to last week's.

    Answers after a silent week count as +100%.
    """
    if previous_7_days > 0:
        percent_change = round_half_up((current_7_days - previous_7_days) / previous_7_days * 100)
    elif current_7_days > 0:
        percent_change = 100
    else:
        percent_change = 0
    return Momentum(
        current_7_days=current_7_days,
        previous_7_days=previous_7_days,
        trend=determine_trend(percent_change),
        percent_change=percent_change,
    )


def _utc_date(value: datetime) -> date:
    return value.astimezone(dt_timezone.utc).date()


def build_daily_counts(rsvp_dates: t.Iterable[datetime], start: date, end: date) -> list[DailyCount]:
    """One entry per UTC day from ``start`` to ``end``, both included, with running totals.

    Answers outside the range are not counted.
    """
    per_day = Counter(_utc_date(value) for value in rsvp_dates)
    daily = []
    cumulative = 0
    day = start
    while day <= end:
        count = per_day.get(day, 0)
        cumulative += count
        daily.append(DailyCount(date=day, count=count, cumulative=cumulative))
        day += timedelta(days=1)
    return daily


def build_velocity_data(
    rsvp_dates: t.Sequence[datetime],
    reference: datetime,
    lookback_days: int = DEFAULT_LOOKBACK_DAYS,
) -> VelocityData:
    """Daily answers over the lookback window and the week-over-week momentum."""
    if not rsvp_dates:
        return VelocityData()

    ordered = sorted(rsvp_dates)
    end = _utc_date(reference)
    start = end - timedelta(days=lookback_days - 1)
    daily = build_daily_counts(ordered, start, end)

    seven_days_ago = reference - timedelta(days=7)
    fourteen_days_ago = reference - timedelta(days=14)
    current_7_days = sum(1 for value in ordered if seven_days_ago < value <= reference)
    previous_7_days = sum(1 for value in ordered if fourteen_days_ago < value <= seven_days_ago)

    return VelocityData(
        daily=daily,
        momentum=calculate_momentum(current_7_days, previous_7_days),
        total_rsvps=len(ordered),
        first_rsvp_date=_utc_date(ordered[0]),
        last_rsvp_date=_utc_date(ordered[-1]),
    )
