"""
Tests for the platform benchmark comparator.
"""

import pytest

from tradeclarity.insights.benchmarks import (
    PLATFORM_BENCHMARKS,
    calculate_percentile,
    get_benchmark_comparison_for,
    get_benchmark_message,
)


class TestGetBenchmarkMessage:
    """Tests for get_benchmark_message."""

    @pytest.mark.parametrize(
        "value, level, percentile",
        [
            (70, "top10", "top 10%"),
            (69.9, "top25", "top 25%"),
            (62, "top25", "top 25%"),
            (48, "median", "50th percentile"),
            (35, "belowMedian", "bottom 50%"),
            (20, "bottom25", "bottom 25%"),
        ],
    )
    def test_win_rate_levels(self, value, level, percentile):
        """Test each win rate band, boundaries inclusive."""
        result = get_benchmark_message(value, "winRate")
        assert result.level == level
        assert result.percentile == percentile

    def test_message_format(self):
        """Test the comparison text."""
        result = get_benchmark_message(55, "winRate")
        assert "(55.0 vs 48 avg)" in result.message
        assert result.color == "slate"

    def test_gap_only_for_bottom(self):
        """Test the gap to top 25% is reported only in the bottom band."""
        assert get_benchmark_message(20, "winRate").gap == "42.0"
        assert get_benchmark_message(50, "winRate").gap is None

    def test_profit_factor(self):
        """Test profit factor bands."""
        assert get_benchmark_message(2.5, "profitFactor").level == "top10"
        assert get_benchmark_message(1.0, "profitFactor").level == "belowMedian"
        assert "1.2 avg" in get_benchmark_message(1.0, "profitFactor").message

    def test_unknown_metric(self):
        """Test unknown metrics give None."""
        assert get_benchmark_message(50, "sharpe") is None

    def test_all_metrics_ordered(self):
        """Test thresholds ascend from bottom25 to top10 where higher is better."""
        for name in ("winRate", "profitFactor", "avgLoss", "avgWin"):
            b = PLATFORM_BENCHMARKS[name]
            assert b["bottom25"] < b["median"] < b["top25"] < b["top10"]


class TestCalculatePercentile:
    """Tests for calculate_percentile."""

    @pytest.mark.parametrize(
        "value, expected", [(75, 95), (65, 75), (50, 50), (40, 25), (10, 10)]
    )
    def test_percentiles(self, value, expected):
        """Test percentile ranks for win rate."""
        assert calculate_percentile(value, "winRate") == expected

    def test_unknown_metric(self):
        """Test unknown metrics give None."""
        assert calculate_percentile(1, "unknown") is None


class TestBenchmarkComparison:
    """Tests for get_benchmark_comparison_for."""

    def test_top_10_boundary(self):
        """Test 70 is top 10% and 69.9 is top 25%."""
        assert get_benchmark_comparison_for("winRate", 70)["percentile"] == "top 10%"
        assert get_benchmark_comparison_for("winRate", 69.9)["percentile"] == "top 25%"

    def test_shape(self):
        """Test the comparison card fields."""
        card = get_benchmark_comparison_for("profitFactor", 1.0)
        assert card == {
            "metric": "Profit Factor",
            "userValue": 1.0,
            "benchmark": 1.2,
            "percentile": "below average",
        }

    def test_above_average(self):
        """Test the median band."""
        assert get_benchmark_comparison_for("winRate", 50)["percentile"] == "above average"

    def test_unsupported_metric(self):
        """Test metrics without a card give None."""
        assert get_benchmark_comparison_for("avgWin", 100) is None
