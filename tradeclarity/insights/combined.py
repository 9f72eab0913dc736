"""
Combined-Insight Aggregator

Merges value-first insights with drawdown, timing, symbol, hourly-rate and
psychology findings into the short list shown on the dashboard.
"""

import logging
from typing import List, Optional, Set, Tuple

from ..analysis.drawdown import analyze_drawdowns
from ..analysis.performance import calculate_hourly_rate, trading_period_days
from ..analysis.symbols import analyze_symbols
from ..analysis.time_based import analyze_time_based_performance
from ..config.logging import clear_analysis_context, log_performance, set_analysis_context
from ..config.settings import GenerationSettings, get_settings
from ..core.errors import wrap_exception
from ..core.models import AnalyticsSnapshot, PsychologyAssessment, Trade
from .display import enhance_insight_for_display
from .models import Insight, InsightCategory, InsightType
from .prioritization import prioritize_insights
from .value_first import generate_value_first_insights

logger = logging.getLogger(__name__)

DRAWDOWN_INSIGHT_PERCENT = -5
DRAWDOWN_SAVINGS_SHARE = 0.2
WORST_HOUR_MIN_TRADES = 5
NEGATIVE_HOURLY_RATE = -10
MEANINGFUL_STRENGTH_SCORE = 65


# =============================================================================
# Source Collectors
# =============================================================================


def drawdown_insights(trades: List[Trade]) -> List[Insight]:
    """The two worst drawdowns deeper than 5%."""
    insights = []
    analysis = analyze_drawdowns(trades)

    for idx, worst in enumerate(analysis.worst_drawdowns[:2]):
        if worst.drawdown_percent >= DRAWDOWN_INSIGHT_PERCENT:
            continue
        magnitude = abs(worst.drawdown_percent)
        if worst.drawdown_percent < -20:
            impact = 4
        elif worst.drawdown_percent < -10:
            impact = 3
        else:
            impact = 2

        insights.append(
            Insight(
                type=InsightType.WEAKNESS,
                category=InsightCategory.RISK_MANAGEMENT,
                title=(
                    f"Worst Drawdown: {magnitude:.1f}%" if idx == 0
                    else f"Drawdown: {magnitude:.1f}%"
                ),
                message=(
                    f"Lost ${abs(worst.drawdown_amount):.0f} over "
                    f"{worst.duration_days} days"
                ),
                summary=(
                    f"Recovered in {worst.recovery_days} days" if worst.recovered
                    else "Still in drawdown"
                ),
                potential_savings=abs(worst.drawdown_amount) * DRAWDOWN_SAVINGS_SHARE,
                impact=impact,
                source="drawdown",
            )
        )
    return insights


def worst_hour_insight(trades: List[Trade]) -> Optional[Insight]:
    """The worst significant hour, when it loses money over at least 5 trades."""
    analysis = analyze_time_based_performance(trades)
    if analysis.best_worst_times is None:
        return None

    worst_hour = analysis.best_worst_times.worst_hour
    if worst_hour is None:
        return None
    if worst_hour["trades"] < WORST_HOUR_MIN_TRADES or worst_hour["total_pnl"] >= 0:
        return None

    win_rate = float(worst_hour["win_rate"])
    return Insight(
        type=InsightType.WEAKNESS,
        category=InsightCategory.TIMING,
        title=f"Avoid {worst_hour['label']}",
        message=(
            f"Only {win_rate:.0f}% win rate, losing "
            f"${abs(worst_hour['avg_pnl']):.2f} per trade"
        ),
        summary=f"Consider avoiding trading during {worst_hour['label']}",
        potential_savings=abs(float(worst_hour["total_pnl"])) * 0.5,
        impact=3 if win_rate < 40 else 2,
        source="timing-analysis",
    )


def symbol_avoid_insights(trades: List[Trade]) -> List[Insight]:
    insights = []
    for rec in analyze_symbols(trades).recommendations:
        if rec.type != "avoid" or not rec.symbols:
            continue
        insights.append(
            Insight(
                type=InsightType.WEAKNESS,
                category=InsightCategory.OPPORTUNITY,
                title=f"Avoid {', '.join(rec.symbols)}",
                message=rec.message,
                summary="These symbols consistently lose money",
                potential_savings=sum(abs(d.get("totalPnL") or 0) for d in rec.details),
                impact=3 if rec.severity == "high" else 2,
                source="symbol",
            )
        )
    return insights


def performance_insights(
    analytics: AnalyticsSnapshot,
    trades: List[Trade],
) -> List[Insight]:
    """Negative hourly rate and a profit factor below 1."""
    insights = []

    period = analytics.trading_period_days or trading_period_days(trades)
    hourly = calculate_hourly_rate(analytics.total_pnl or 0, period)
    if hourly is not None and hourly.rate < NEGATIVE_HOURLY_RATE:
        insights.append(
            Insight(
                type=InsightType.WEAKNESS,
                category=InsightCategory.PERFORMANCE,
                title="Negative Hourly Rate",
                message=f"You're losing ${abs(hourly.rate):.2f}/hour while trading",
                summary="Review your strategy - this suggests fundamental issues",
                potential_savings=abs(hourly.rate * hourly.total_hours) * 0.5,
                impact=4 if hourly.rate < -20 else 3,
                source="analogy",
            )
        )

    profit_factor = analytics.profit_factor
    if profit_factor is not None and profit_factor < 1:
        total_pnl = analytics.total_pnl or 0
        insights.append(
            Insight(
                type=InsightType.WEAKNESS,
                category=InsightCategory.PERFORMANCE,
                title="Profit Factor Below 1.0",
                message=(
                    f"Your profit factor of {profit_factor:.2f}x means you're "
                    "losing more than you win"
                ),
                summary="Critical: This strategy is not profitable long-term",
                potential_savings=abs(total_pnl) * 0.5 if total_pnl < 0 else 0,
                impact=4,
                metric_name="profitFactor",
                source="analogy",
            )
        )

    return insights


def psychology_insights(psychology: Optional[PsychologyAssessment]) -> List[Insight]:
    """High-severity or high-impact behavioral weaknesses."""
    if psychology is None:
        return []

    insights = []
    for weakness in psychology.weaknesses:
        if weakness.severity != "high" and (weakness.impact or 0) < 3:
            continue
        if not weakness.message:
            logger.debug(f"Skipping psychology weakness without message: {weakness.title}")
            continue
        insights.append(
            Insight(
                type=InsightType.WEAKNESS,
                category=InsightCategory.BEHAVIORAL,
                title=weakness.title or "Behavioral Weakness",
                message=weakness.message,
                summary=weakness.message,
                impact=min(4, max(1, weakness.impact or 3)),
                source="psychology",
            )
        )
    return insights


# =============================================================================
# Selection
# =============================================================================


def _is_meaningful_strength(insight: Insight) -> bool:
    return (
        insight.potential_savings > 0
        or bool(insight.steps)
        or (insight.score or 0) >= MEANINGFUL_STRENGTH_SCORE
        or (insight.impact or 0) >= 3
    )


def _dedupe(insights: List[Insight]) -> List[Insight]:
    seen: Set[Tuple[str, str]] = set()
    unique = []
    for insight in insights:
        key = (insight.title, insight.message)
        if key in seen:
            continue
        seen.add(key)
        unique.append(insight)
    return unique


def select_top_insights(insights: List[Insight], limit: int) -> List[Insight]:
    """
    Keep improvements plus meaningful strengths and cut to ``limit``.

    Weaknesses come first, then higher impact (score when impact is unset).
    """
    weaknesses = [i for i in insights if i.type is InsightType.WEAKNESS]
    opportunities = [
        i for i in insights
        if i.type in (InsightType.OPPORTUNITY, InsightType.RECOMMENDATION)
    ]
    strengths = [
        i for i in insights
        if i.type is InsightType.STRENGTH and _is_meaningful_strength(i)
    ]

    combined = sorted(
        weaknesses + opportunities + strengths,
        key=lambda i: (i.type is not InsightType.WEAKNESS, -(i.impact or i.score or 0)),
    )
    return combined[:limit]


@log_performance(threshold_ms=500)
def generate_combined_insights(
    analytics: AnalyticsSnapshot,
    psychology: Optional[PsychologyAssessment] = None,
    settings: Optional[GenerationSettings] = None,
) -> List[Insight]:
    """
    Build the dashboard's combined insight list.

    Args:
        analytics: Precomputed analytics; ``all_trades`` feeds the analyzers
        psychology: Psychology assessment
        settings: Generation thresholds (process defaults when omitted)

    Returns:
        At most ``combined_max_insights`` display-ready insights; an empty
        list if anything fails along the way
    """
    settings = settings or get_settings().generation
    analysis_id = set_analysis_context()

    try:
        trades = analytics.all_trades or []
        candidates: List[Insight] = []

        report = generate_value_first_insights(analytics, psychology, trades, settings=settings)
        candidates.extend(i.evolve(source="value-first") for i in report.all_scored)
        candidates.extend(drawdown_insights(trades))

        hour_insight = worst_hour_insight(trades)
        if hour_insight is not None:
            candidates.append(hour_insight)

        candidates.extend(symbol_avoid_insights(trades))
        candidates.extend(performance_insights(analytics, trades))
        candidates.extend(psychology_insights(psychology))

        logger.debug(f"Combined pass {analysis_id} gathered {len(candidates)} candidates")

        prioritized = prioritize_insights(candidates, analytics)
        enhanced = _dedupe(
            [enhance_insight_for_display(i, analytics) for i in prioritized.all_scored]
        )
        return select_top_insights(enhanced, settings.combined_max_insights)

    except Exception as e:
        wrap_exception(e, context={"analysis_id": analysis_id}).log()
        return []

    finally:
        clear_analysis_context()
