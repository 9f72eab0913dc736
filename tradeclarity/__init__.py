"""
TradeClarity Insight Engine

Turns a trader's analytics, trade history and psychology assessment into
scored, prioritized, display-ready insights.
"""

__version__ = "0.1.0"

from .core import (
    AnalyticsSnapshot,
    InsightValidationError,
    PsychologyAssessment,
    PsychologyWeakness,
    SymbolStats,
    Trade,
    TradeClarityError,
    TradeStats,
)
from .insights import (
    Insight,
    InsightCategory,
    InsightReport,
    InsightType,
    generate_combined_insights,
    generate_low_activity_insights,
    generate_value_first_insights,
    generate_whats_next_actions,
    prioritize_insights,
)
from .validation import (
    parse_analytics,
    parse_psychology,
    parse_trade_stats,
    parse_trades,
)

__all__ = [
    "__version__",
    # Domain
    "Trade",
    "SymbolStats",
    "AnalyticsSnapshot",
    "PsychologyWeakness",
    "PsychologyAssessment",
    "TradeStats",
    "TradeClarityError",
    "InsightValidationError",
    # Insights
    "Insight",
    "InsightType",
    "InsightCategory",
    "InsightReport",
    "generate_low_activity_insights",
    "generate_value_first_insights",
    "generate_combined_insights",
    "generate_whats_next_actions",
    "prioritize_insights",
    # Payload parsing
    "parse_trades",
    "parse_analytics",
    "parse_psychology",
    "parse_trade_stats",
]
