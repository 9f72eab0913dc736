"""
Tests for the value-first generator.
"""

from unittest.mock import patch

import pytest

from tradeclarity.config.settings import GenerationSettings
from tradeclarity.core.models import AnalyticsSnapshot, Trade
from tradeclarity.insights.models import (
    ActionDifficulty,
    Confidence,
    InsightCategory,
    InsightType,
)
from tradeclarity.insights.money_calculations import FeeOptimization, StopLossSavings
from tradeclarity.insights.value_first import (
    generate_value_first_insights,
    stop_loss_insight,
)
from tradeclarity.validation.models import parse_analytics

MODULE = "tradeclarity.insights.value_first"


def by_title(insights, title):
    return next((i for i in insights if i.title == title), None)


def fee_result(savings):
    return FeeOptimization(
        potential_savings=savings,
        current_fees=30.0,
        affected_trades=30,
        message=f"Using limit orders instead of market orders could save ~${savings:.0f}/year",
        action="Use limit orders (maker) instead of market orders (taker)",
    )


@pytest.fixture
def quiet_calculators():
    """Silence every calculator except fee optimization."""
    with patch(f"{MODULE}.calculate_stop_loss_savings", return_value=None), patch(
        f"{MODULE}.calculate_timing_edge", return_value=None
    ), patch(f"{MODULE}.calculate_loss_cutting_savings", return_value=None), patch(
        f"{MODULE}.calculate_fee_optimization"
    ) as fee_mock:
        yield fee_mock


@pytest.fixture
def plain_analytics():
    """30 untimed trades, $500 P&L, no strengths."""
    trades = [Trade(pnl=50.0) for _ in range(20)] + [Trade(pnl=-50.0) for _ in range(10)]
    return AnalyticsSnapshot(total_pnl=500.0, total_trades=30, all_trades=trades)


class TestThresholdGating:
    """Tests for the savings floor."""

    def test_below_floor_excluded(self, quiet_calculators, plain_analytics):
        """Test $15 savings is dropped for a $500 account."""
        quiet_calculators.return_value = fee_result(15)
        report = generate_value_first_insights(plain_analytics, all_trades=plain_analytics.all_trades)
        assert report.all_scored == []

    def test_above_floor_included(self, quiet_calculators, plain_analytics):
        """Test $25 savings is kept for a $500 account."""
        quiet_calculators.return_value = fee_result(25)
        report = generate_value_first_insights(plain_analytics, all_trades=plain_analytics.all_trades)
        assert [i.title for i in report.all_scored] == ["Optimize Trading Fees"]

    def test_floor_is_exclusive(self, quiet_calculators, plain_analytics):
        """Test savings equal to the floor are dropped."""
        quiet_calculators.return_value = fee_result(20)
        report = generate_value_first_insights(plain_analytics, all_trades=plain_analytics.all_trades)
        assert report.all_scored == []

    def test_large_account_floor(self, quiet_calculators, plain_analytics):
        """Test accounts over $1000 need more than $50."""
        analytics = AnalyticsSnapshot(
            total_pnl=5000.0, total_trades=30, all_trades=plain_analytics.all_trades
        )
        quiet_calculators.return_value = fee_result(45)
        report = generate_value_first_insights(analytics, all_trades=analytics.all_trades)
        assert report.all_scored == []

    def test_custom_settings(self, quiet_calculators, plain_analytics):
        """Test the floor comes from the settings passed in."""
        quiet_calculators.return_value = fee_result(15)
        settings = GenerationSettings(small_account_min_savings=10)
        report = generate_value_first_insights(
            plain_analytics, all_trades=plain_analytics.all_trades, settings=settings
        )
        assert len(report.all_scored) == 1


class TestSymbolScenario:
    """End-to-end BTCUSDT/ETHUSDT scenario."""

    def test_symbol_focus_opportunity(self, btc_eth_analytics, btc_eth_trades):
        """Test the best-symbol opportunity is surfaced with its savings."""
        report = generate_value_first_insights(btc_eth_analytics, all_trades=btc_eth_trades)
        insight = by_title(report.all_scored, "Focus on Your Best Symbol")

        assert insight is not None
        assert insight.type is InsightType.OPPORTUNITY
        assert insight.category is InsightCategory.OPPORTUNITY
        assert insight.potential_savings == pytest.approx(160)
        assert insight.metadata["bestSymbol"] == "BTCUSDT"
        assert insight.summary == "BTCUSDT has 75% win rate and $50 avg P&L per trade"
        assert insight.steps[1] == "Reduce exposure to ETHUSDT"

    def test_strengths(self, btc_eth_analytics, btc_eth_trades):
        """Test standout win rate and profit factor become strengths."""
        report = generate_value_first_insights(btc_eth_analytics, all_trades=btc_eth_trades)
        win_rate = by_title(report.all_scored, "Excellent Win Rate")
        profit_factor = by_title(report.all_scored, "Strong Profit Factor")

        assert win_rate.type is InsightType.STRENGTH
        assert win_rate.message == "Your 68.6% win rate outperforms most traders (48% average)"
        assert win_rate.data_points == 35
        assert profit_factor.summary == "You make $4.59 for every $1 you risk"
        assert profit_factor.benchmark["percentile"] == "top 10%"

    def test_no_tiers_above_cutoff(self, btc_eth_analytics, btc_eth_trades):
        """Test tier fields are unset at 30 trades and more."""
        report = generate_value_first_insights(btc_eth_analytics, all_trades=btc_eth_trades)
        assert report.unlock_tiers is None
        assert report.current_tier is None
        assert "unlockTiers" not in report.to_dict()

    def test_deterministic(self, btc_eth_analytics, btc_eth_trades):
        """Test identical input gives identical output."""
        first = generate_value_first_insights(btc_eth_analytics, all_trades=btc_eth_trades)
        second = generate_value_first_insights(btc_eth_analytics, all_trades=btc_eth_trades)
        assert first.to_dict() == second.to_dict()


@pytest.fixture
def fifty_trade_payload():
    """
    50 trades at a 72% win rate and 2.1 profit factor.

    BTCUSDT: 21 x +70, 4 x -150 ($34.80 avg, 84% wins).
    ETHUSDT: 15 x +42, 10 x -40 ($9.20 avg, 60% wins).
    """
    trades = [{"pnl": 70, "symbol": "BTCUSDT"}] * 21 + [{"pnl": -150, "symbol": "BTCUSDT"}] * 4
    trades += [{"pnl": 42, "symbol": "ETHUSDT"}] * 15 + [{"pnl": -40, "symbol": "ETHUSDT"}] * 10
    return {
        "winRate": 72,
        "profitFactor": 2.1,
        "avgWin": 2100 / 36,
        "avgLoss": -1000 / 14,
        "totalPnL": 1100,
        "totalCommission": 0,
        "totalTrades": 50,
        "symbols": {
            "BTCUSDT": {"trades": 25, "realized": 870, "winRate": 84},
            "ETHUSDT": {"trades": 25, "realized": 230, "winRate": 60},
        },
        "allTrades": trades,
    }


class TestFiftyTradeScenario:
    """End-to-end run from a 50-trade BTCUSDT/ETHUSDT payload."""

    def test_opportunity_with_savings(self, fifty_trade_payload):
        """Test the payload yields a symbol-focus opportunity worth money."""
        analytics = parse_analytics(fifty_trade_payload)
        report = generate_value_first_insights(analytics, all_trades=analytics.all_trades)

        opportunities = [i for i in report.all_scored if i.type is InsightType.OPPORTUNITY]
        assert opportunities
        insight = by_title(opportunities, "Focus on Your Best Symbol")
        assert insight.potential_savings > 0
        # 35 trades at $34.80 plus 15 at $9.20, against $1100 today
        assert insight.potential_savings == pytest.approx(256)
        assert insight.metadata["bestSymbol"] == "BTCUSDT"
        assert insight.steps[1] == "Reduce exposure to ETHUSDT"

    def test_no_tiers(self, fifty_trade_payload):
        """Test the value-first path runs without unlock tiers."""
        analytics = parse_analytics(fifty_trade_payload)
        report = generate_value_first_insights(analytics, all_trades=analytics.all_trades)
        assert report.current_tier is None
        assert report.all_scored


class TestTimedScenario:
    """Scenario with timestamps, commissions and entry values."""

    @pytest.fixture
    def report(self, timed_analytics, timed_trades):
        return generate_value_first_insights(timed_analytics, all_trades=timed_trades)

    def test_candidates(self, report):
        """Test every calculator with enough data contributes."""
        titles = {i.title for i in report.all_scored}
        assert titles == {
            "Cut Losses Faster",
            "Optimize Trading Fees",
            "Optimize Trading Hours",
            "Excellent Win Rate",
        }

    def test_weakness_first(self, report):
        """Test the stop-loss weakness leads the list."""
        first = report.all_scored[0]
        assert first.type is InsightType.WEAKNESS
        assert first.category is InsightCategory.RISK_MANAGEMENT

    def test_stop_loss_insight(self, report):
        """Test the stop-loss weakness details."""
        insight = report.all_scored[0]
        assert insight.summary == "Your average loss is 1.6x what it could be with tighter stops"
        assert insight.confidence is Confidence.HIGH
        assert insight.impact == 3
        assert insight.action.expected_impact == "+$58/month"

    def test_fee_insight(self, report):
        """Test the fee recommendation details."""
        insight = by_title(report.all_scored, "Optimize Trading Fees")
        assert insight.action_difficulty is ActionDifficulty.EASY
        assert insight.is_counter_intuitive is True
        assert insight.impact == 2

    def test_timing_metadata(self, report):
        """Test timing metadata carries the hour lists."""
        insight = by_title(report.all_scored, "Optimize Trading Hours")
        assert insight.metadata["worstHours"][0] == 14
        assert insight.metadata["bestHours"][0] == 9
        assert insight.steps[0].startswith("Set trading alerts for 9:00")

    def test_enhanced_for_display(self, report):
        """Test every scored insight is decorated."""
        assert len(report.enhanced) == len(report.all_scored)
        for insight in report.enhanced:
            assert insight.urgency is not None
            assert insight.visual_priority is not None
            assert insight.formatted_difficulty is not None

    def test_buckets_capped(self, report):
        """Test display buckets hold at most three insights."""
        assert len(report.critical) <= 3
        assert len(report.opportunities) <= 3
        assert len(report.behavioral) <= 3


class TestLowActivityPath:
    """Tests for the fallback below the cutoff."""

    def test_low_activity_report(self, small_analytics):
        """Test small accounts get low-activity insights with tiers."""
        report = generate_value_first_insights(small_analytics)
        assert report.current_tier.name == "Pattern Detection"
        assert len(report.unlock_tiers) == 4
        assert any(i.type is InsightType.UNLOCK for i in report.all_scored)
        assert all(i.score is not None for i in report.all_scored)
        assert "currentTier" in report.to_dict()

    def test_empty(self):
        """Test no data at all gives an empty report."""
        report = generate_value_first_insights(AnalyticsSnapshot())
        assert report.all_scored == []
        assert report.current_tier.name == "Getting Started"


class TestBuilders:
    """Tests for the insight builders."""

    def test_stop_loss_impact_scales(self):
        """Test savings over $1000 raise impact to 4."""
        result = StopLossSavings(
            potential_savings=1500,
            avg_current_loss=100,
            avg_target_loss=20,
            loss_reduction=80,
            affected_trades=3,
            message="Tightening stop losses to 2% would've saved $1500",
            action="Set 2% stop loss on every trade",
        )
        insight = stop_loss_insight(result)
        assert insight.impact == 4
        assert insight.confidence is Confidence.LOW
