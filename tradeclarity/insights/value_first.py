"""
Value-First Insight Generator

Turns the money-impact calculators into insights with concrete dollar
amounts and steps, adds strength insights for standout metrics and hands
everything to the prioritization engine.
"""

import logging
from typing import List, Optional

from ..config.logging import log_performance
from ..config.settings import GenerationSettings, get_settings
from ..core.models import AnalyticsSnapshot, PsychologyAssessment, Trade
from .display import enhance_insight_for_display
from .low_activity import generate_low_activity_insights
from .models import (
    ActionDifficulty,
    Confidence,
    Insight,
    InsightAction,
    InsightCategory,
    InsightReport,
    InsightType,
)
from .money_calculations import (
    FeeOptimization,
    LossCuttingSavings,
    StopLossSavings,
    SymbolFocusOpportunity,
    TimingEdge,
    calculate_fee_optimization,
    calculate_loss_cutting_savings,
    calculate_stop_loss_savings,
    calculate_symbol_focus_opportunity,
    calculate_timing_edge,
)
from .prioritization import prioritize_insights

logger = logging.getLogger(__name__)


def _monthly(savings: float) -> str:
    return f"+${round(savings / 12)}/month"


def _hours(hours: List[int]) -> str:
    return ", ".join(f"{h}:00" for h in hours)


# =============================================================================
# Insight Builders
# =============================================================================


def stop_loss_insight(result: StopLossSavings) -> Insight:
    affected = result.affected_trades
    if affected >= 10:
        confidence = Confidence.HIGH
    elif affected >= 5:
        confidence = Confidence.MEDIUM
    else:
        confidence = Confidence.LOW

    return Insight(
        type=InsightType.WEAKNESS,
        category=InsightCategory.RISK_MANAGEMENT,
        title="Cut Losses Faster",
        message=result.message,
        summary=(
            f"Your average loss is {result.avg_current_loss / result.avg_target_loss:.1f}x "
            "what it could be with tighter stops"
        ),
        potential_savings=result.potential_savings,
        action_difficulty=ActionDifficulty.MEDIUM,
        is_counter_intuitive=False,
        data_points=affected,
        affected_trades=affected,
        confidence=confidence,
        action=InsightAction(
            title=result.action,
            steps=(
                "Set 2% stop loss on every trade before entering",
                "Never move stop loss further away",
                "Use trailing stops to protect profits",
            ),
            expected_impact=_monthly(result.potential_savings),
        ),
        impact=4 if result.potential_savings > 1000 else 3,
        metadata={"lossReduction": result.loss_reduction},
    )


def fee_insight(result: FeeOptimization) -> Insight:
    return Insight(
        type=InsightType.RECOMMENDATION,
        category=InsightCategory.OPTIMIZATION,
        title="Optimize Trading Fees",
        message=result.message,
        summary=(
            "Using limit orders could save you "
            f"{result.potential_savings / result.current_fees * 100:.0f}% annually"
        ),
        potential_savings=result.potential_savings,
        action_difficulty=ActionDifficulty.EASY,
        is_counter_intuitive=True,
        data_points=result.affected_trades,
        affected_trades=result.affected_trades,
        confidence=Confidence.HIGH,
        action=InsightAction(
            title=result.action,
            steps=(
                "Use limit orders instead of market orders",
                "Place orders slightly below market price",
                "Wait for order to fill as maker",
            ),
            expected_impact=_monthly(result.potential_savings),
        ),
        impact=2,
        metadata={"currentFees": result.current_fees},
    )


def timing_insight(result: TimingEdge) -> Insight:
    return Insight(
        type=InsightType.RECOMMENDATION,
        category=InsightCategory.TIMING,
        title="Optimize Trading Hours",
        message=result.message,
        summary=(
            f"Your win rate during {_hours(result.best_hours)} is "
            f"{result.best_hours_win_rate:.0f}% vs {result.overall_win_rate:.0f}% overall"
        ),
        potential_savings=result.potential_savings,
        action_difficulty=ActionDifficulty.MEDIUM,
        is_counter_intuitive=True,
        data_points=result.affected_trades,
        affected_trades=result.affected_trades,
        confidence=Confidence.HIGH if result.affected_trades >= 10 else Confidence.MEDIUM,
        action=InsightAction(
            title=result.action,
            steps=(
                f"Set trading alerts for {_hours(result.best_hours)}",
                f"Avoid trading during {_hours(result.worst_hours)}",
                "Review your trading schedule to align with best hours",
            ),
            expected_impact=_monthly(result.potential_savings),
        ),
        impact=3,
        metadata={
            "worstHours": result.worst_hours,
            "bestHours": result.best_hours,
            "bestHoursWinRate": result.best_hours_win_rate,
        },
    )


def symbol_focus_insight(result: SymbolFocusOpportunity) -> Insight:
    return Insight(
        type=InsightType.OPPORTUNITY,
        category=InsightCategory.OPPORTUNITY,
        title="Focus on Your Best Symbol",
        message=result.message,
        summary=(
            f"{result.best_symbol} has {result.best_symbol_win_rate:.0f}% win rate and "
            f"${result.best_symbol_avg_pnl:.0f} avg P&L per trade"
        ),
        potential_savings=result.potential_savings,
        action_difficulty=ActionDifficulty.MEDIUM,
        is_counter_intuitive=False,
        data_points=0,
        confidence=Confidence.MEDIUM,
        action=InsightAction(
            title=result.action,
            steps=(
                f"Increase {result.best_symbol} allocation to 70%",
                f"Reduce exposure to {', '.join(result.worst_symbols)}",
                "Study what makes this symbol work for you",
            ),
            expected_impact=_monthly(result.potential_savings),
        ),
        impact=3,
        metadata={
            "bestSymbol": result.best_symbol,
            "bestSymbolWinRate": result.best_symbol_win_rate,
        },
    )


def loss_cutting_insight(result: LossCuttingSavings) -> Insight:
    return Insight(
        type=InsightType.WEAKNESS,
        category=InsightCategory.BEHAVIORAL,
        title="Cut Losses Faster",
        message=result.message,
        summary=f"You hold losing trades {result.hold_time_ratio:.1f}x longer than winners",
        potential_savings=result.potential_savings,
        action_difficulty=ActionDifficulty.MEDIUM,
        is_counter_intuitive=False,
        data_points=result.affected_trades,
        affected_trades=result.affected_trades,
        action=InsightAction(
            title=result.action,
            steps=(
                "Set maximum hold time equal to average winning trade duration",
                "Use time-based stop losses",
                "Exit losers as quickly as you exit winners",
            ),
            expected_impact=_monthly(result.potential_savings),
        ),
        impact=3,
        metadata={"holdTimeRatio": result.hold_time_ratio},
    )


def win_rate_strength(analytics: AnalyticsSnapshot) -> Insight:
    win_rate = analytics.win_rate
    return Insight(
        type=InsightType.STRENGTH,
        category=InsightCategory.PERFORMANCE,
        title="Excellent Win Rate",
        message=f"Your {win_rate:.1f}% win rate outperforms most traders (48% average)",
        summary="You're in the top 25% of traders with this win rate",
        action_difficulty=ActionDifficulty.HARD,
        is_counter_intuitive=False,
        data_points=analytics.total_trades or 0,
        action=InsightAction(
            title="Maintain Your Edge",
            steps=(
                "Document your entry criteria",
                "Consider increasing position sizes on high-probability setups",
                "Avoid changing what's working",
            ),
            expected_impact="Maintain current performance",
        ),
        impact=2,
        metric_name="winRate",
        benchmark={
            "metric": "Win Rate",
            "userValue": win_rate,
            "benchmark": 48,
            "percentile": "top 10%" if win_rate >= 70 else "top 25%",
        },
    )


def profit_factor_strength(analytics: AnalyticsSnapshot) -> Insight:
    profit_factor = analytics.profit_factor
    return Insight(
        type=InsightType.STRENGTH,
        category=InsightCategory.PERFORMANCE,
        title="Strong Profit Factor",
        message=f"Your {profit_factor:.2f}x profit factor shows excellent risk/reward",
        summary=f"You make ${profit_factor:.2f} for every $1 you risk",
        action_difficulty=ActionDifficulty.HARD,
        is_counter_intuitive=False,
        data_points=analytics.total_trades or 0,
        action=InsightAction(
            title="Maintain Risk/Reward Ratio",
            steps=(
                "Keep current stop loss and take profit levels",
                "Consider letting winners run even longer",
                "Maintain discipline on entry timing",
            ),
            expected_impact="Maintain current performance",
        ),
        impact=2,
        metric_name="profitFactor",
        benchmark={
            "metric": "Profit Factor",
            "userValue": profit_factor,
            "benchmark": 1.2,
            "percentile": "top 10%" if profit_factor >= 2.5 else "top 25%",
        },
    )


# =============================================================================
# Generator
# =============================================================================


def collect_value_first_insights(
    analytics: AnalyticsSnapshot,
    all_trades: List[Trade],
    settings: GenerationSettings,
) -> List[Insight]:
    """Run every calculator and keep the results above their savings floor."""
    insights: List[Insight] = []
    min_savings = settings.min_savings_for(analytics.total_pnl)

    if all_trades:
        stop_loss = calculate_stop_loss_savings(all_trades, settings.stop_loss_target_percent)
        if stop_loss is not None and stop_loss.potential_savings > min_savings:
            insights.append(stop_loss_insight(stop_loss))

        fees = calculate_fee_optimization(all_trades)
        if fees is not None and fees.potential_savings > min_savings:
            insights.append(fee_insight(fees))

        timing = calculate_timing_edge(all_trades)
        if timing is not None and timing.potential_savings > min_savings:
            insights.append(timing_insight(timing))

    if len(analytics.symbols) > 1:
        focus = calculate_symbol_focus_opportunity(all_trades, analytics.symbols)
        if focus is not None and focus.potential_savings > settings.symbol_focus_min_savings:
            insights.append(symbol_focus_insight(focus))

    if all_trades:
        loss_cutting = calculate_loss_cutting_savings(all_trades)
        if loss_cutting is not None and loss_cutting.potential_savings > min_savings:
            insights.append(loss_cutting_insight(loss_cutting))

    if analytics.win_rate is not None and analytics.win_rate >= settings.strength_win_rate:
        insights.append(win_rate_strength(analytics))

    if (
        analytics.profit_factor is not None
        and analytics.profit_factor >= settings.strength_profit_factor
    ):
        insights.append(profit_factor_strength(analytics))

    return insights


@log_performance(threshold_ms=250)
def generate_value_first_insights(
    analytics: AnalyticsSnapshot,
    psychology: Optional[PsychologyAssessment] = None,
    all_trades: Optional[List[Trade]] = None,
    settings: Optional[GenerationSettings] = None,
) -> InsightReport:
    """
    Generate prioritized insights with concrete dollar amounts.

    Below the low-activity cutoff the low-activity generator runs instead
    and its insights go through the same prioritization.

    Args:
        analytics: Precomputed analytics
        psychology: Psychology assessment
        all_trades: Trade records; their count takes precedence over
            ``analytics.total_trades``
        settings: Generation thresholds (process defaults when omitted)

    Returns:
        InsightReport with buckets, the full scored list and its display form
    """
    settings = settings or get_settings().generation
    trades = all_trades or []
    trade_count = len(trades) or analytics.total_trades or 0

    if trade_count < settings.low_activity_max_trades:
        low_activity = generate_low_activity_insights(analytics, psychology, trades)
        prioritized = prioritize_insights(low_activity.insights, analytics)
        return InsightReport(
            critical=prioritized.critical,
            opportunities=prioritized.opportunities,
            behavioral=prioritized.behavioral,
            all_scored=prioritized.all_scored,
            enhanced=[enhance_insight_for_display(i, analytics) for i in prioritized.all_scored],
            unlock_tiers=low_activity.unlock_tiers,
            current_tier=low_activity.current_tier,
        )

    insights = collect_value_first_insights(analytics, trades, settings)
    logger.debug(f"Value-first pass produced {len(insights)} candidates for {trade_count} trades")

    prioritized = prioritize_insights(insights, analytics)
    return InsightReport(
        critical=prioritized.critical,
        opportunities=prioritized.opportunities,
        behavioral=prioritized.behavioral,
        all_scored=prioritized.all_scored,
        enhanced=[enhance_insight_for_display(i, analytics) for i in prioritized.all_scored],
    )
