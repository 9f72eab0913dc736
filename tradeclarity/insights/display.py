"""
Display Enhancement

Decorates scored insights with formatted savings, urgency, benchmark
comparison and card priority.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional

from ..core.models import AnalyticsSnapshot
from .benchmarks import get_benchmark_comparison_for
from .models import Insight, Urgency, VisualPriority


def format_savings(amount: float) -> Optional[str]:
    """Whole dollars, halves rounded up. None for zero savings."""
    if not amount:
        return None
    rounded = Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return f"${rounded}"


def urgency_for(score: float) -> Urgency:
    if score >= 80:
        return Urgency.CRITICAL
    if score >= 60:
        return Urgency.HIGH
    if score >= 40:
        return Urgency.MEDIUM
    return Urgency.LOW


def visual_priority_for(score: float) -> VisualPriority:
    if score >= 80:
        return VisualPriority.HERO
    if score >= 60:
        return VisualPriority.FEATURED
    return VisualPriority.STANDARD


def get_benchmark_comparison(
    insight: Insight,
    analytics: Optional[AnalyticsSnapshot],
) -> Optional[Dict[str, Any]]:
    """
    User-vs-platform comparison for win rate or profit factor insights.

    The insight's ``metric_name`` is used when set; otherwise the message
    is searched for "win rate" or "profit factor".
    """
    if analytics is None:
        return None

    metric_name = insight.metric_name
    if metric_name is None:
        message = insight.message.lower()
        if "win rate" in message:
            metric_name = "winRate"
        elif "profit factor" in message:
            metric_name = "profitFactor"
        else:
            return None

    if metric_name == "winRate":
        return get_benchmark_comparison_for(metric_name, analytics.win_rate or 0)
    if metric_name == "profitFactor":
        return get_benchmark_comparison_for(metric_name, analytics.profit_factor or 0)
    return None


def enhance_insight_for_display(
    insight: Insight,
    analytics: Optional[AnalyticsSnapshot] = None,
) -> Insight:
    """
    Return a decorated copy of a scored insight.

    Args:
        insight: Insight with ``score`` assigned
        analytics: Snapshot used for the benchmark comparison

    Returns:
        New Insight with formatted_savings, urgency, benchmark,
        formatted_difficulty and visual_priority set
    """
    score = insight.score or 0

    if insight.action_difficulty is not None:
        difficulty = insight.action_difficulty.value
    elif insight.steps and len(insight.steps) <= 2:
        difficulty = "easy"
    else:
        difficulty = "medium"

    benchmark = get_benchmark_comparison(insight, analytics)

    return insight.evolve(
        formatted_savings=format_savings(insight.potential_savings),
        urgency=urgency_for(score),
        benchmark=benchmark if benchmark is not None else insight.benchmark,
        formatted_difficulty=difficulty,
        visual_priority=visual_priority_for(score),
    )
