"""
TradeClarity Insights

Insight generation, prioritization and display enhancement.
"""

from .benchmarks import (
    METRIC_LABELS,
    PLATFORM_BENCHMARKS,
    BenchmarkResult,
    calculate_percentile,
    get_benchmark_comparison_for,
    get_benchmark_message,
)
from .combined import generate_combined_insights, select_top_insights
from .display import (
    enhance_insight_for_display,
    format_savings,
    get_benchmark_comparison,
)
from .low_activity import (
    UNLOCK_TIERS,
    generate_low_activity_insights,
    get_confidence_label,
    get_current_tier,
    get_next_tier,
    get_unlock_tiers,
)
from .models import (
    ActionDifficulty,
    Confidence,
    Insight,
    InsightAction,
    InsightCategory,
    InsightReport,
    InsightType,
    LowActivityResult,
    PrioritizedInsights,
    UnlockTier,
    Urgency,
    VisualPriority,
)
from .money_calculations import (
    FeeOptimization,
    LossCuttingSavings,
    StopLossSavings,
    SymbolFocusOpportunity,
    TimingEdge,
    calculate_avg_hold_time,
    calculate_fee_optimization,
    calculate_loss_cutting_savings,
    calculate_stop_loss_savings,
    calculate_symbol_focus_opportunity,
    calculate_timing_edge,
    is_stablecoin_pair,
)
from .prioritization import (
    DEFAULT_SCORING_POLICY,
    ScoringPolicy,
    calculate_insight_score,
    categorize_insight,
    prioritize_insights,
    sort_weakness_first,
)
from .value_first import generate_value_first_insights
from .whats_next import (
    ActionTarget,
    UserContext,
    WhatsNextAction,
    WhatsNextResult,
    generate_whats_next_actions,
    get_action_from_insight,
    get_icon_for_category,
)

__all__ = [
    # Models
    "InsightType",
    "InsightCategory",
    "Confidence",
    "ActionDifficulty",
    "Urgency",
    "VisualPriority",
    "Insight",
    "InsightAction",
    "UnlockTier",
    "PrioritizedInsights",
    "LowActivityResult",
    "InsightReport",
    # Benchmarks
    "PLATFORM_BENCHMARKS",
    "METRIC_LABELS",
    "BenchmarkResult",
    "get_benchmark_message",
    "calculate_percentile",
    "get_benchmark_comparison_for",
    # Money calculations
    "StopLossSavings",
    "FeeOptimization",
    "TimingEdge",
    "SymbolFocusOpportunity",
    "LossCuttingSavings",
    "calculate_stop_loss_savings",
    "calculate_fee_optimization",
    "calculate_timing_edge",
    "is_stablecoin_pair",
    "calculate_symbol_focus_opportunity",
    "calculate_avg_hold_time",
    "calculate_loss_cutting_savings",
    # Prioritization
    "ScoringPolicy",
    "DEFAULT_SCORING_POLICY",
    "calculate_insight_score",
    "categorize_insight",
    "sort_weakness_first",
    "prioritize_insights",
    # Display
    "format_savings",
    "get_benchmark_comparison",
    "enhance_insight_for_display",
    # Generators
    "UNLOCK_TIERS",
    "get_unlock_tiers",
    "get_current_tier",
    "get_next_tier",
    "get_confidence_label",
    "generate_low_activity_insights",
    "generate_value_first_insights",
    "generate_combined_insights",
    "select_top_insights",
    # What's next
    "ActionTarget",
    "WhatsNextAction",
    "UserContext",
    "WhatsNextResult",
    "get_action_from_insight",
    "get_icon_for_category",
    "generate_whats_next_actions",
]
