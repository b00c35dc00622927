from datetime import date, datetime, timedelta
from datetime import timezone as dt_timezone

import pytest

from analytics import calculations
from analytics.calculations import ResponseCount

NOW = datetime(2026, 6, 15, 12, 0, tzinfo=dt_timezone.utc)


@pytest.mark.parametrize(
    "part,whole,expected",
    [(0, 0, 0), (1, 3, 33), (2, 3, 67), (1, 8, 13), (5, 5, 100)],
)
def test_percentage(part: int, whole: int, expected: int) -> None:
    assert calculations.percentage(part, whole) == expected


def test_round_half_up() -> None:
    assert calculations.round_half_up(12.5) == 13
    assert calculations.round_half_up(-12.5) == -12


class TestDaysUntilEvent:
    def test_rounds_partial_days_up(self) -> None:
        assert calculations.calculate_days_until_event(NOW + timedelta(days=2, hours=1), NOW) == 3

    def test_started_events(self) -> None:
        assert calculations.calculate_days_until_event(NOW, NOW) is None
        assert calculations.calculate_days_until_event(NOW - timedelta(hours=1), NOW) is None


def test_snapshot() -> None:
    stats = {"yes": ResponseCount(count=3, guests=7), "no": ResponseCount(count=1, guests=1)}

    snapshot = calculations.build_analytics_snapshot(
        stats, total_invites=8, invites_opened=6, event_date=NOW + timedelta(days=10), now=NOW
    )

    assert snapshot.total_yes == 3
    assert snapshot.total_maybe == 0
    assert snapshot.total_responses == 4
    assert snapshot.response_rate == 50
    assert snapshot.open_rate == 75
    assert snapshot.expected_attendance == 7
    assert snapshot.days_until_event == 10
    assert snapshot.last_updated == NOW


class TestFunnel:
    def test_basic(self) -> None:
        funnel = calculations.build_funnel_data(10, 6, 3)

        assert [(s.name, s.label, s.count, s.percentage) for s in funnel.stages] == [
            ("invited", "Invited", 10, 100),
            ("opened", "Opened Invite", 6, 60),
            ("responded", "Responded", 3, 30),
        ]
        assert [(d.from_stage, d.to_stage, d.lost, d.rate) for d in funnel.dropoffs] == [
            ("invited", "opened", 4, 40),
            ("opened", "responded", 3, 50),
        ]
        assert funnel.overall_conversion_rate == 30

    def test_empty(self) -> None:
        funnel = calculations.build_funnel_data(0, 0, 0)
        assert funnel.stages[0].percentage == 100
        assert funnel.overall_conversion_rate == 0
        assert all(d.rate == 0 for d in funnel.dropoffs)

    def test_later_stage_larger_than_earlier_loses_nobody(self) -> None:
        dropoff = calculations.calculate_dropoff(2, 5, "opened", "responded")
        assert (dropoff.lost, dropoff.rate) == (0, 0)

    def test_extended(self) -> None:
        funnel = calculations.build_extended_funnel_data(10, 8, 7, 5, 4)

        assert [s.name for s in funnel.stages] == ["invited", "opened", "page_viewed", "form_started", "responded"]
        assert len(funnel.dropoffs) == 4
        assert funnel.total_responded == 4


class TestMomentum:
    @pytest.mark.parametrize(
        "current,previous,trend,change",
        [
            (12, 10, "accelerating", 20),
            (11, 10, "steady", 10),
            (5, 10, "slowing", -50),
            (3, 0, "accelerating", 100),
            (0, 0, "steady", 0),
        ],
    )
    def test_trend(self, current: int, previous: int, trend: str, change: int) -> None:
        momentum = calculations.calculate_momentum(current, previous)
        assert (momentum.trend, momentum.percent_change) == (trend, change)


class TestVelocity:
    def test_no_answers(self) -> None:
        velocity = calculations.build_velocity_data([], NOW)
        assert velocity.daily == []
        assert velocity.total_rsvps == 0
        assert velocity.first_rsvp_date is None

    def test_daily_counts_and_momentum(self) -> None:
        dates = [
            NOW - timedelta(days=1),
            NOW - timedelta(days=1, hours=2),
            NOW - timedelta(days=3),
            NOW - timedelta(days=10),
            NOW - timedelta(days=60),
        ]

        velocity = calculations.build_velocity_data(dates, NOW, lookback_days=14)

        assert len(velocity.daily) == 14
        assert velocity.daily[0].date == date(2026, 6, 2)
        assert velocity.daily[-1].date == date(2026, 6, 15)
        by_day = {entry.date: entry for entry in velocity.daily}
        assert by_day[date(2026, 6, 14)].count == 2
        assert velocity.daily[-1].cumulative == 4
        assert velocity.momentum.current_7_days == 3
        assert velocity.momentum.previous_7_days == 1
        assert velocity.momentum.trend == "accelerating"
        assert velocity.total_rsvps == 5
        assert velocity.first_rsvp_date == date(2026, 4, 16)
        assert velocity.last_rsvp_date == date(2026, 6, 14)
