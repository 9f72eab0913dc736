"""
What's Next Actions

Turns the prioritized insights and supporting analyzers into three groups
of follow-up actions: high-impact fixes, quick wins and areas to explore.
Ordering adapts to whether the trader is currently profitable.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..analysis.drawdown import analyze_drawdowns
from ..analysis.symbols import analyze_symbols
from ..analysis.time_based import analyze_time_based_performance
from ..config.logging import log_performance
from ..core.models import AnalyticsSnapshot, PsychologyAssessment, Trade, TradeStats
from .models import Insight, InsightCategory
from .value_first import generate_value_first_insights

logger = logging.getLogger(__name__)

NEW_TRADER_MAX_TRADES = 50
VALUE_FIRST_MIN_TRADES = 30
OPPORTUNITY_MIN_SAVINGS = 50
DRAWDOWN_ACTION_PERCENT = -10
FEE_SHARE_OF_PNL = 0.1
TIMING_MIN_TRADES = 10
TIMING_MIN_SAVINGS = 20
SYMBOL_FOCUS_MIN_WIN_RATE = 60
MAX_ACTIONS_PER_GROUP = 3

CATEGORY_ICONS = {
    InsightCategory.RISK_MANAGEMENT: "Target",
    InsightCategory.OPTIMIZATION: "DollarSign",
    InsightCategory.TIMING: "Clock",
    InsightCategory.OPPORTUNITY: "TrendingUp",
    InsightCategory.BEHAVIORAL: "Brain",
    InsightCategory.PERFORMANCE: "BarChart3",
}
DEFAULT_ICON = "Lightbulb"


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class ActionTarget:
    """Where an action leads and what to do there."""

    route: str
    label: str
    steps: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"route": self.route, "label": self.label}
        if self.steps:
            result["steps"] = list(self.steps)
        return result


@dataclass
class WhatsNextAction:
    """A single follow-up card."""

    id: str
    priority: str
    title: str
    description: str
    action_type: str
    action: ActionTarget
    category: str
    icon: str
    color: str
    potential_savings: float = 0.0
    impact: Optional[int] = None
    urgency: Optional[str] = None
    difficulty: Optional[str] = None
    value: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "id": self.id,
            "priority": self.priority,
            "title": self.title,
            "description": self.description,
            "potentialSavings": self.potential_savings,
            "impact": self.impact,
            "actionType": self.action_type,
            "action": self.action.to_dict(),
            "category": self.category,
            "icon": self.icon,
            "color": self.color,
            "urgency": self.urgency,
            "difficulty": self.difficulty,
            "value": self.value,
        }
        return {k: v for k, v in result.items() if v is not None}


@dataclass
class UserContext:
    """Trader state that drives action ordering."""

    is_profitable: Optional[bool]
    is_losing: Optional[bool]
    is_new_trader: bool
    is_experienced: bool
    has_spot_trades: bool
    has_futures_trades: bool
    total_pnl: float
    total_trades: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isProfitable": self.is_profitable,
            "isLosing": self.is_losing,
            "isNewTrader": self.is_new_trader,
            "isExperienced": self.is_experienced,
            "hasSpotTrades": self.has_spot_trades,
            "hasFuturesTrades": self.has_futures_trades,
            "totalPnL": self.total_pnl,
            "totalTrades": self.total_trades,
        }


@dataclass
class WhatsNextResult:
    """Grouped actions; ``all`` is high impact, then quick, then explore."""

    high_impact: List[WhatsNextAction]
    quick_actions: List[WhatsNextAction]
    explore: List[WhatsNextAction]
    user_context: UserContext

    @property
    def all(self) -> List[WhatsNextAction]:
        return self.high_impact + self.quick_actions + self.explore

    def to_dict(self) -> Dict[str, Any]:
        return {
            "highImpact": [a.to_dict() for a in self.high_impact],
            "quickActions": [a.to_dict() for a in self.quick_actions],
            "explore": [a.to_dict() for a in self.explore],
            "all": [a.to_dict() for a in self.all],
            "userContext": self.user_context.to_dict(),
        }


# =============================================================================
# Helpers
# =============================================================================


def get_icon_for_category(category: Optional[InsightCategory]) -> str:
    return CATEGORY_ICONS.get(category, DEFAULT_ICON)


def get_action_from_insight(insight: Insight) -> ActionTarget:
    """Navigation target for an insight, carrying its steps when it has any."""
    category = insight.category

    if insight.steps:
        if category is InsightCategory.OPPORTUNITY and insight.metadata.get("bestSymbol"):
            route = "/analyze?tab=spot"
        elif category is InsightCategory.BEHAVIORAL:
            route = "/analyze?tab=behavioral"
        else:
            route = "/analyze?tab=overview"
        return ActionTarget(
            route=route,
            label=insight.action.title or "View Details",
            steps=list(insight.steps),
        )

    if category is InsightCategory.TIMING:
        return ActionTarget(route="/analyze?tab=overview", label="View Time Analysis")
    if category is InsightCategory.OPPORTUNITY:
        return ActionTarget(route="/analyze?tab=spot", label="View Symbol Analysis")
    if category is InsightCategory.BEHAVIORAL:
        return ActionTarget(route="/analyze?tab=behavioral", label="View Psychology Analysis")
    return ActionTarget(route="/analyze?tab=overview", label="View Details")


def _insight_action(
    insight: Insight,
    action_id: str,
    default_category: InsightCategory,
    default_impact: int,
    color: str,
    urgency: str,
) -> WhatsNextAction:
    category = insight.category or default_category
    return WhatsNextAction(
        id=action_id,
        priority="high",
        title=insight.title,
        description=insight.message or insight.summary,
        potential_savings=insight.potential_savings,
        impact=insight.impact or default_impact,
        action_type="insight",
        action=get_action_from_insight(insight),
        category=category.value,
        icon=get_icon_for_category(category),
        color=color,
        urgency=urgency,
    )


def _context_rank(action: WhatsNextAction, context: UserContext) -> int:
    """Preferred categories sort first among equal savings."""
    if context.is_profitable:
        return 0 if action.category in ("optimization", "opportunity") else 1
    if context.is_losing:
        return 0 if action.category == "risk_management" else 1
    return 0


def build_user_context(
    analytics: Optional[AnalyticsSnapshot],
    all_trades: Optional[List[Trade]],
    trades_stats: Optional[TradeStats],
) -> UserContext:
    total_pnl = analytics.total_pnl if analytics is not None else None
    trade_count = (
        len(all_trades or [])
        or (analytics.total_trades if analytics is not None else 0)
        or (trades_stats.total_trades if trades_stats is not None else 0)
        or 0
    )
    stats = trades_stats or TradeStats()

    return UserContext(
        is_profitable=None if total_pnl is None else total_pnl >= 0,
        is_losing=None if total_pnl is None else total_pnl < 0,
        is_new_trader=trade_count < NEW_TRADER_MAX_TRADES,
        is_experienced=trade_count >= NEW_TRADER_MAX_TRADES,
        has_spot_trades=stats.spot_trades > 0,
        has_futures_trades=stats.futures_income > 0 or stats.futures_positions > 0,
        total_pnl=total_pnl or 0.0,
        total_trades=trade_count,
    )


# =============================================================================
# Action Groups
# =============================================================================


def high_impact_actions(
    analytics: AnalyticsSnapshot,
    psychology: Optional[PsychologyAssessment],
    trades: List[Trade],
    context: UserContext,
) -> List[WhatsNextAction]:
    actions: List[WhatsNextAction] = []

    if context.total_trades >= VALUE_FIRST_MIN_TRADES and trades:
        report = generate_value_first_insights(analytics, psychology, trades)

        for idx, insight in enumerate(i for i in report.critical if i.potential_savings > 0):
            actions.append(
                _insight_action(
                    insight, f"critical-{idx}", InsightCategory.RISK_MANAGEMENT, 4,
                    color="amber", urgency="critical",
                )
            )

        big_opportunities = [
            i for i in report.opportunities if i.potential_savings > OPPORTUNITY_MIN_SAVINGS
        ]
        for idx, insight in enumerate(big_opportunities):
            actions.append(
                _insight_action(
                    insight, f"opportunity-{idx}", InsightCategory.OPPORTUNITY, 3,
                    color="emerald", urgency="high",
                )
            )

    if context.is_losing and trades:
        worst = analyze_drawdowns(trades).worst_drawdowns
        if worst and worst[0].drawdown_percent < DRAWDOWN_ACTION_PERCENT:
            drawdown = worst[0]
            actions.append(
                WhatsNextAction(
                    id="drawdown-analysis",
                    priority="high",
                    title=f"Address {abs(drawdown.drawdown_percent):.1f}% Drawdown",
                    description=(
                        f"Lost ${abs(drawdown.drawdown_amount):.0f} over "
                        f"{drawdown.duration_days} days"
                    ),
                    potential_savings=abs(drawdown.drawdown_amount) * 0.2,
                    impact=4,
                    action_type="navigation",
                    action=ActionTarget("/analyze?tab=overview", "View Drawdown Analysis"),
                    category=InsightCategory.RISK_MANAGEMENT.value,
                    icon="TrendingDown",
                    color="red",
                    urgency="critical",
                )
            )

    return actions


def quick_actions(
    analytics: AnalyticsSnapshot,
    trades: List[Trade],
    context: UserContext,
) -> List[WhatsNextAction]:
    actions: List[WhatsNextAction] = []

    commission = analytics.total_commission or 0
    if commission > 0 and commission > abs(analytics.total_pnl or 0) * FEE_SHARE_OF_PNL:
        fee_savings = commission * 0.5
        actions.append(
            WhatsNextAction(
                id="fee-optimization",
                priority="medium",
                title="Optimize Trading Fees",
                description=f"Save ~${fee_savings:.0f}/year by using limit orders",
                potential_savings=fee_savings,
                impact=2,
                action_type="navigation",
                action=ActionTarget("/analyze?tab=behavioral", "View Fee Analysis"),
                category=InsightCategory.OPTIMIZATION.value,
                icon="DollarSign",
                color="emerald",
                urgency="medium",
                difficulty="easy",
            )
        )

    if len(trades) > TIMING_MIN_TRADES:
        times = analyze_time_based_performance(trades).best_worst_times
        worst_hour = times.worst_hour if times is not None else None
        if worst_hour is not None and worst_hour["total_pnl"] < 0:
            savings = abs(float(worst_hour["total_pnl"])) * 0.5
            if savings > TIMING_MIN_SAVINGS:
                actions.append(
                    WhatsNextAction(
                        id="time-optimization",
                        priority="medium",
                        title="Optimize Trading Hours",
                        description=f"Avoiding worst hours could save ${savings:.0f}",
                        potential_savings=savings,
                        impact=3,
                        action_type="navigation",
                        action=ActionTarget("/analyze?tab=overview", "View Time Analysis"),
                        category=InsightCategory.TIMING.value,
                        icon="Clock",
                        color="cyan",
                        urgency="medium",
                        difficulty="medium",
                    )
                )

    if context.is_profitable and len(analytics.symbols) > 1:
        focus = analyze_symbols(trades).recommendation("focus")
        if focus is not None and focus.details:
            best = focus.details[0]
            if best["winRate"] > SYMBOL_FOCUS_MIN_WIN_RATE and best["totalPnL"] > 0:
                symbol = focus.symbols[0]
                actions.append(
                    WhatsNextAction(
                        id="symbol-focus",
                        priority="medium",
                        title=f"Focus on {symbol}",
                        description=f"{symbol} has {best['winRate']:.0f}% win rate",
                        potential_savings=best["totalPnL"] * 0.3,
                        impact=3,
                        action_type="navigation",
                        action=ActionTarget("/analyze?tab=spot", "View Symbol Analysis"),
                        category=InsightCategory.OPPORTUNITY.value,
                        icon="TrendingUp",
                        color="emerald",
                        urgency="medium",
                        difficulty="medium",
                    )
                )

    return actions


def explore_actions(
    analytics: AnalyticsSnapshot,
    psychology: Optional[PsychologyAssessment],
    trades_stats: Optional[TradeStats],
    context: UserContext,
) -> List[WhatsNextAction]:
    actions: List[WhatsNextAction] = []
    stats = trades_stats or TradeStats()

    if context.has_spot_trades:
        win_rate = analytics.spot_win_rate or 0
        actions.append(
            WhatsNextAction(
                id="explore-spot",
                priority="low",
                title="Spot Trading Analysis",
                description=f"{stats.spot_trades} trades • {win_rate:.1f}% win rate",
                value=analytics.spot_pnl or 0,
                action_type="navigation",
                action=ActionTarget("/analyze?tab=spot", "Analyze Spot Trades"),
                category="explore",
                icon="PieChart",
                color="emerald",
            )
        )

    if context.has_futures_trades:
        win_rate = analytics.futures_win_rate or 0
        actions.append(
            WhatsNextAction(
                id="explore-futures",
                priority="low",
                title="Futures Trading Analysis",
                description=f"{stats.futures_income} trades • {win_rate:.1f}% win rate",
                value=analytics.futures_pnl or 0,
                action_type="navigation",
                action=ActionTarget("/analyze?tab=futures", "Review Futures Performance"),
                category="explore",
                icon="Zap",
                color="cyan",
            )
        )

    if psychology is not None and psychology.health_score is not None:
        critical = sum(1 for p in psychology.patterns if p.get("severity") == "high")
        description = f"Health Score: {psychology.health_score:g}/100"
        if critical > 0:
            description += f" • {critical} critical patterns"
        actions.append(
            WhatsNextAction(
                id="explore-behavioral",
                priority="low",
                title="Trading Psychology",
                description=description,
                value=psychology.health_score,
                action_type="navigation",
                action=ActionTarget(
                    "/analyze?tab=behavioral", "Discover Trading Psychology Score"
                ),
                category="explore",
                icon="Brain",
                color="purple",
            )
        )

    actions.append(
        WhatsNextAction(
            id="explore-overview",
            priority="low",
            title="Complete Trading Overview",
            description="View all analytics and insights",
            action_type="navigation",
            action=ActionTarget("/analyze?tab=overview", "View Complete Overview"),
            category="explore",
            icon="BarChart3",
            color="slate",
        )
    )
    return actions


@log_performance(threshold_ms=500)
def generate_whats_next_actions(
    analytics: Optional[AnalyticsSnapshot],
    psychology: Optional[PsychologyAssessment] = None,
    all_trades: Optional[List[Trade]] = None,
    trades_stats: Optional[TradeStats] = None,
) -> WhatsNextResult:
    """
    Build grouped follow-up actions.

    High-impact and quick actions are ordered by potential savings; among
    equal savings, losing traders see risk management first and profitable
    traders see optimization and opportunities first. Each of those groups
    keeps its top three.

    Args:
        analytics: Precomputed analytics, if any
        psychology: Psychology assessment
        all_trades: Trade records
        trades_stats: Per-market trade counts

    Returns:
        WhatsNextResult with the three groups and the derived user context
    """
    context = build_user_context(analytics, all_trades, trades_stats)
    snapshot = analytics or AnalyticsSnapshot()
    trades = all_trades or []

    high = high_impact_actions(snapshot, psychology, trades, context)
    quick = quick_actions(snapshot, trades, context)
    explore = explore_actions(snapshot, psychology, trades_stats, context)

    high.sort(key=lambda a: (-a.potential_savings, _context_rank(a, context)))
    quick.sort(key=lambda a: -a.potential_savings)

    logger.debug(
        f"What's next: {len(high)} high impact, {len(quick)} quick, {len(explore)} explore"
    )

    return WhatsNextResult(
        high_impact=high[:MAX_ACTIONS_PER_GROUP],
        quick_actions=quick[:MAX_ACTIONS_PER_GROUP],
        explore=explore,
        user_context=context,
    )
