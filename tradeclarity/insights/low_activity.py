"""
Low-Activity Insight Generator

Insights for traders with fewer than 30 trades: platform benchmarks,
early warning patterns, fee awareness, an educational baseline and a
teaser for the next unlock tier.
"""

import logging
from typing import List, Optional

from ..config.logging import log_performance
from ..core.models import AnalyticsSnapshot, PsychologyAssessment, Trade
from .benchmarks import get_benchmark_message
from .models import (
    Confidence,
    Insight,
    InsightAction,
    InsightCategory,
    InsightType,
    LowActivityResult,
    UnlockTier,
)

logger = logging.getLogger(__name__)

UNLOCK_TIERS = (
    UnlockTier(
        name="Getting Started",
        min_trades=0,
        max_trades=10,
        features=("Basic metrics", "Benchmark comparisons", "Fee awareness"),
    ),
    UnlockTier(
        name="Pattern Detection",
        min_trades=10,
        max_trades=30,
        features=(
            "Early pattern detection",
            "Win/loss ratio analysis",
            "Basic timing insights",
        ),
    ),
    UnlockTier(
        name="Behavioral Insights",
        min_trades=30,
        max_trades=100,
        features=(
            "Deep behavioral patterns",
            "Timing optimization",
            "Symbol performance analysis",
        ),
    ),
    UnlockTier(
        name="Advanced Analytics",
        min_trades=100,
        max_trades=None,
        features=(
            "Statistical significance",
            "Complex pattern detection",
            "Custom optimizations",
        ),
    ),
)


# =============================================================================
# Tiers and Labels
# =============================================================================


def get_unlock_tiers() -> List[UnlockTier]:
    """The four unlock tiers, ordered by minimum trade count."""
    return list(UNLOCK_TIERS)


def get_current_tier(trade_count: int) -> UnlockTier:
    """Tier whose [min, max) range contains the trade count."""
    return next((t for t in UNLOCK_TIERS if t.contains(trade_count)), UNLOCK_TIERS[0])


def get_next_tier(trade_count: int) -> Optional[UnlockTier]:
    """First tier not yet reached, or None past the last one."""
    return next((t for t in UNLOCK_TIERS if trade_count < t.min_trades), None)


def get_confidence_label(confidence: Optional[Confidence], data_points: int = 0) -> str:
    """Human label for a confidence level."""
    if confidence is Confidence.HIGH:
        return "High Confidence"
    if confidence is Confidence.MEDIUM:
        return "Moderate Confidence"
    if data_points >= 20:
        return "Moderate Confidence"
    if data_points >= 10:
        return "Emerging Pattern"
    return "Early Signal"


def _sample_confidence(trade_count: int) -> Confidence:
    if trade_count >= 20:
        return Confidence.HIGH
    if trade_count >= 10:
        return Confidence.MEDIUM
    return Confidence.LOW


# =============================================================================
# Insight Builders
# =============================================================================


def _win_rate_benchmark(win_rate: float, trade_count: int) -> Optional[Insight]:
    benchmark = get_benchmark_message(win_rate, "winRate")
    if benchmark is None:
        return None

    if trade_count >= 20:
        steps = (
            "Focus on entry timing - review your best-performing trades",
            "Use stop losses to protect capital",
            "Wait for high-probability setups",
        )
    else:
        steps = (
            "Focus on entry timing",
            "Use stop losses",
            "Keep trading to unlock deeper insights",
        )

    if benchmark.level == "top10":
        impact = 2
    elif benchmark.level == "bottom25":
        impact = 3
    else:
        impact = 1

    return Insight(
        type=InsightType.BENCHMARK,
        category=InsightCategory.PERFORMANCE,
        title="How You Compare",
        message=f"Your {win_rate:.1f}% win rate is {benchmark.percentile}",
        summary=benchmark.message,
        confidence=_sample_confidence(trade_count),
        data_points=trade_count,
        action=InsightAction(
            title="Improve Your Win Rate",
            steps=steps,
            expected_impact=(
                "Could improve 10-15%" if benchmark.level == "bottom25"
                else "Maintain current level"
            ),
        ),
        impact=impact,
        metric_name="winRate",
        metadata={
            "percentile": benchmark.percentile,
            "userValue": win_rate,
            "benchmarkValue": 48,
            "color": benchmark.color,
        },
    )


def _profit_factor_benchmark(profit_factor: float, trade_count: int) -> Optional[Insight]:
    benchmark = get_benchmark_message(profit_factor, "profitFactor")
    if benchmark is None:
        return None

    weak = profit_factor < 1.2
    if profit_factor < 1:
        impact = 4
    elif weak:
        impact = 3
    else:
        impact = 1

    return Insight(
        type=InsightType.BENCHMARK,
        category=InsightCategory.RISK_MANAGEMENT,
        title="Risk/Reward Ratio",
        message=f"Your {profit_factor:.2f}x profit factor is {benchmark.percentile}",
        summary=benchmark.message,
        confidence=_sample_confidence(trade_count),
        data_points=trade_count,
        action=InsightAction(
            title="Improve Risk/Reward" if weak else "Maintain Strategy",
            steps=(
                (
                    "Let winners run longer",
                    "Cut losses faster",
                    "Aim for 2:1 reward-to-risk minimum",
                )
                if weak
                else (
                    "Continue current approach",
                    "Keep risk/reward consistent",
                    "Document what works",
                )
            ),
            expected_impact="Could reach 1.5x+" if weak else "Maintain current",
        ),
        impact=impact,
        metric_name="profitFactor",
        metadata={
            "percentile": benchmark.percentile,
            "userValue": profit_factor,
            "benchmarkValue": 1.2,
            "color": benchmark.color,
        },
    )


def _early_patterns(
    analytics: AnalyticsSnapshot,
    trades: List[Trade],
    trade_count: int,
) -> List[Insight]:
    """Win/loss size patterns, from 10 trades with both winners and losers."""
    winners = analytics.winners_count(trades)
    losers = analytics.losers_count(trades)
    if trade_count < 10 or winners <= 0 or losers <= 0:
        return []

    avg_win = analytics.avg_win or 0
    avg_loss = abs(analytics.avg_loss or 0)
    if avg_win <= 0 or avg_loss <= 0:
        return []

    insights = []
    ratio = avg_win / avg_loss

    if ratio < 1.5 and (analytics.win_rate or 0) > 50:
        insights.append(
            Insight(
                type=InsightType.WEAKNESS,
                category=InsightCategory.RISK_MANAGEMENT,
                title="Early Pattern: Cutting Winners Too Early",
                message=(
                    f"Your winners average ${avg_win:.0f} vs losses of ${avg_loss:.0f}. "
                    "Consider letting winners run longer."
                ),
                summary=(
                    f"Win/loss ratio of {ratio:.2f}x suggests you're exiting "
                    "winners too quickly"
                ),
                confidence=Confidence.MEDIUM if trade_count >= 20 else Confidence.LOW,
                data_points=trade_count,
                action=InsightAction(
                    title="Let Winners Run",
                    steps=(
                        "Set profit targets at 2x your stop loss",
                        "Use trailing stops instead of fixed targets",
                        "Allow 50% of position to run longer",
                    ),
                    expected_impact="Could improve profit factor by 20-30%",
                ),
                impact=2,
                potential_savings=avg_win * winners * 0.2,
            )
        )

    if avg_loss > avg_win * 1.5:
        loss_savings = avg_loss * losers * 0.3
        insights.append(
            Insight(
                type=InsightType.WEAKNESS,
                category=InsightCategory.RISK_MANAGEMENT,
                title="Early Pattern: Losses Too Large",
                message=(
                    f"Your average loss (${avg_loss:.0f}) is {avg_loss / avg_win:.1f}x "
                    "your average win. Tighten stop losses."
                ),
                summary=(
                    f"Average loss exceeds average win by "
                    f"{(avg_loss / avg_win - 1) * 100:.0f}%"
                ),
                confidence=Confidence.MEDIUM if trade_count >= 15 else Confidence.LOW,
                data_points=trade_count,
                action=InsightAction(
                    title="Tighten Stop Losses",
                    steps=(
                        "Set stop loss at 2% of entry price",
                        "Never move stop loss further away",
                        "Exit losers as quickly as winners",
                    ),
                    expected_impact=f"Could save ${loss_savings:.0f} with tighter stops",
                ),
                impact=3,
                potential_savings=loss_savings,
            )
        )

    return insights


def _fee_awareness(analytics: AnalyticsSnapshot, trade_count: int) -> Optional[Insight]:
    """Fees above 5% of absolute P&L."""
    commission = analytics.total_commission
    total_pnl = analytics.total_pnl
    if commission <= 0 or total_pnl == 0:
        return None

    fee_share = abs(commission / total_pnl) * 100
    if fee_share <= 5:
        return None

    return Insight(
        type=InsightType.RECOMMENDATION,
        category=InsightCategory.OPTIMIZATION,
        title="Fees Are Eating Your Profits",
        message=(
            f"Fees represent {fee_share:.1f}% of your P&L. Top traders keep fees under 2%."
        ),
        summary=f"${commission:.0f} in fees vs ${abs(total_pnl):.0f} P&L",
        confidence=Confidence.HIGH,
        data_points=trade_count,
        action=InsightAction(
            title="Reduce Trading Fees",
            steps=(
                "Use limit orders (maker fees) instead of market orders",
                "Trade less frequently - quality over quantity",
                "Consider fee rebates or VIP tiers",
            ),
            expected_impact=f"Could save ${commission * 0.5:.0f}/year",
        ),
        impact=2,
        potential_savings=commission * 0.5,
        metric_name="commissionEfficiency",
    )


def _educational(analytics: AnalyticsSnapshot) -> Insight:
    return Insight(
        type=InsightType.EDUCATIONAL,
        category=InsightCategory.EDUCATION,
        title="What Successful Traders Do",
        message=(
            "Based on platform data, profitable traders typically maintain 50%+ "
            "win rate and 1.5x+ profit factor."
        ),
        summary="Target metrics: 50%+ win rate, 1.5x+ profit factor, fees < 2% of P&L",
        confidence=Confidence.HIGH,
        data_points=0,
        action=InsightAction(
            title="Learn More",
            steps=(
                "Focus on quality setups over quantity",
                "Use proper risk management (2% rule)",
                "Keep a trading journal",
            ),
            expected_impact="Foundation for improvement",
        ),
        impact=1,
        benchmark={
            "winRate": {"target": 50, "user": analytics.win_rate or 0},
            "profitFactor": {"target": 1.5, "user": analytics.profit_factor or 0},
        },
    )


def _unlock_teaser(next_tier: UnlockTier, trade_count: int) -> Insight:
    needed = next_tier.min_trades - trade_count
    noun = "trade" if needed == 1 else "trades"

    return Insight(
        type=InsightType.UNLOCK,
        category=InsightCategory.PROGRESSION,
        title="Unlock Deeper Insights",
        message=f"{needed} more {noun} to unlock {next_tier.name}",
        summary=(
            f"With {next_tier.min_trades} trades, you'll get: "
            f"{', '.join(next_tier.features)}"
        ),
        confidence=Confidence.HIGH,
        data_points=trade_count,
        action=InsightAction(
            title="Keep Trading",
            steps=(
                f"Trade {needed} more times",
                "Connect more exchanges for additional data",
                "Upload historical CSV files",
            ),
            expected_impact="Unlock advanced pattern detection",
        ),
        impact=1,
        metadata={
            "progress": trade_count / next_tier.min_trades * 100,
            "tradesNeeded": needed,
            "unlockTier": next_tier.to_dict(),
        },
    )


# =============================================================================
# Generator
# =============================================================================


@log_performance(threshold_ms=100)
def generate_low_activity_insights(
    analytics: AnalyticsSnapshot,
    psychology: Optional[PsychologyAssessment] = None,
    all_trades: Optional[List[Trade]] = None,
) -> LowActivityResult:
    """
    Generate insights for traders with little history.

    Args:
        analytics: Precomputed analytics
        psychology: Psychology assessment (not used below the cutoff)
        all_trades: Trade records; their count takes precedence over
            ``analytics.total_trades``

    Returns:
        LowActivityResult with insights, all tiers and the current tier
    """
    trades = all_trades or []
    trade_count = len(trades) or analytics.total_trades or 0
    tiers = get_unlock_tiers()

    if trade_count == 0:
        return LowActivityResult(insights=[], unlock_tiers=tiers, current_tier=tiers[0])

    insights: List[Insight] = []

    if analytics.win_rate is not None:
        insight = _win_rate_benchmark(analytics.win_rate, trade_count)
        if insight is not None:
            insights.append(insight)

    if analytics.profit_factor is not None:
        insight = _profit_factor_benchmark(analytics.profit_factor, trade_count)
        if insight is not None:
            insights.append(insight)

    insights.extend(_early_patterns(analytics, trades, trade_count))

    fee_insight = _fee_awareness(analytics, trade_count)
    if fee_insight is not None:
        insights.append(fee_insight)

    if 5 <= trade_count < 30:
        insights.append(_educational(analytics))

    next_tier = get_next_tier(trade_count)
    if next_tier is not None:
        insights.append(_unlock_teaser(next_tier, trade_count))

    logger.debug(f"Low-activity pass produced {len(insights)} insights for {trade_count} trades")

    return LowActivityResult(
        insights=insights,
        unlock_tiers=tiers,
        current_tier=get_current_tier(trade_count),
    )
