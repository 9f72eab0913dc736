"""
Tests for time-based performance analysis.
"""

import pytest

from tradeclarity.analysis.time_based import (
    analyze_by_day_of_week,
    analyze_by_hour,
    analyze_by_month,
    analyze_time_based_performance,
    generate_time_insights,
)
from tradeclarity.core.models import Trade


def row(frame, column, value):
    return frame[frame[column] == value].iloc[0]


class TestAnalyzeByHour:
    """Tests for analyze_by_hour."""

    def test_twenty_four_rows(self, timed_trades):
        """Test every hour is present, traded or not."""
        hourly = analyze_by_hour(timed_trades)
        assert len(hourly) == 24
        assert list(hourly["label"][:3]) == ["00:00", "01:00", "02:00"]
        assert row(hourly, "hour", 3)["trades"] == 0
        assert row(hourly, "hour", 3)["win_rate"] == 0

    def test_bucket_values(self, timed_trades):
        """Test per-hour statistics."""
        hourly = analyze_by_hour(timed_trades)
        nine = row(hourly, "hour", 9)
        fourteen = row(hourly, "hour", 14)

        assert nine["trades"] == 20
        assert nine["total_pnl"] == pytest.approx(1000)
        assert nine["win_rate"] == pytest.approx(100)
        assert fourteen["avg_pnl"] == pytest.approx(-90)
        assert row(hourly, "hour", 20)["win_rate"] == pytest.approx(50)

    def test_break_even_counts_against_hour_win_rate(self, make_trade):
        """Test hourly win rate divides by every trade."""
        hourly = analyze_by_hour([make_trade(10, at=5), make_trade(0, at=5)])
        assert row(hourly, "hour", 5)["win_rate"] == pytest.approx(50)

    def test_untimed(self):
        """Test untimed trades give an empty frame."""
        assert analyze_by_hour([Trade(pnl=5)]).empty


class TestAnalyzeByDayOfWeek:
    """Tests for analyze_by_day_of_week."""

    def test_sunday_first(self, timed_trades):
        """Test seven rows starting on Sunday."""
        daily = analyze_by_day_of_week(timed_trades)
        assert list(daily["day_name"]) == [
            "Sunday",
            "Monday",
            "Tuesday",
            "Wednesday",
            "Thursday",
            "Friday",
            "Saturday",
        ]

    def test_monday(self, timed_trades):
        """Test the two Mondays in the fixture."""
        monday = row(analyze_by_day_of_week(timed_trades), "day", 1)
        assert monday["trades"] == 8
        assert monday["total_pnl"] == pytest.approx(30)
        assert monday["win_rate"] == pytest.approx(62.5)

    def test_break_even_excluded(self, make_trade):
        """Test daily win rate ignores break-even trades."""
        # hour 0 of the reference date falls on a Monday
        daily = analyze_by_day_of_week([make_trade(10, at=0), make_trade(0, at=1)])
        assert row(daily, "day", 1)["win_rate"] == pytest.approx(100)


class TestAnalyzeByMonth:
    """Tests for analyze_by_month."""

    def test_single_month(self, timed_trades):
        """Test one row per month traded."""
        monthly = analyze_by_month(timed_trades)
        assert len(monthly) == 1
        january = monthly.iloc[0]
        assert january["month"] == "2024-01"
        assert january["year"] == 2024
        assert january["month_name"] == "Jan"
        assert january["trades"] == 40

    def test_oldest_first(self, make_trade):
        """Test months sort chronologically regardless of input order."""
        trades = [make_trade(5, at=24 * 40), make_trade(5, at=0)]
        assert list(analyze_by_month(trades)["month"]) == ["2024-01", "2024-02"]


class TestTimeInsights:
    """Tests for generate_time_insights and the full analysis."""

    def test_timed_insights(self, timed_trades):
        """Test best and worst hour and day insights."""
        analysis = analyze_time_based_performance(timed_trades)
        titles = [i.title for i in analysis.insights]
        assert titles == [
            "Best Trading Hour: 09:00",
            "Avoid Trading at 14:00",
            "Sundays are your best day",
            "Consider avoiding Thursdays",
        ]
        assert analysis.insights[1].message == "You lose an average of $90.00 per trade at this hour"
        assert analysis.insights[1].severity == "medium"

    def test_monthly_consistency(self, make_trade):
        """Test three profitable months out of four."""
        # Jan, Feb, Mar and Apr 2024
        trades = [
            make_trade(pnl, at=hours)
            for pnl, hours in ((10, 0), (10, 24 * 31), (10, 24 * 60), (-10, 24 * 91))
        ]
        analysis = analyze_time_based_performance(trades)
        consistency = [i for i in analysis.insights if i.type == "monthly_consistency"]
        assert len(consistency) == 1
        assert consistency[0].title == "Highly Consistent Performance"
        assert consistency[0].message == "3 out of 4 months profitable (75%)"

    def test_best_worst_times(self, timed_trades):
        """Test significant buckets ranked by average P&L."""
        times = analyze_time_based_performance(timed_trades).best_worst_times
        assert list(times.best_hours["hour"]) == [9, 20, 14]
        assert list(times.worst_hours["hour"]) == [14, 20, 9]
        assert times.worst_hour["label"] == "14:00"
        # Only Monday to Wednesday have five or more trades
        assert sorted(times.best_days["day"]) == [1, 2, 3]

    def test_empty(self):
        """Test no trades give an empty analysis."""
        analysis = analyze_time_based_performance([])
        assert analysis.best_worst_times is None
        assert analysis.insights == []

    def test_untimed_only(self):
        """Test untimed trades give no worst hour."""
        analysis = analyze_time_based_performance([Trade(pnl=5), Trade(pnl=-5)])
        assert analysis.best_worst_times.worst_hour is None
        assert generate_time_insights(analysis.hourly, analysis.daily, analysis.monthly) == []
