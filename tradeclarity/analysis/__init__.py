"""
TradeClarity Analysis

Supporting analyzers over the trade list: drawdowns, time-of-day and
calendar performance, per-symbol performance and hourly rate.
"""

from .drawdown import (
    Drawdown,
    DrawdownAnalysis,
    DrawdownPattern,
    DrawdownStats,
    EquityPoint,
    UnderwaterPoint,
    WorstDrawdown,
    analyze_drawdowns,
    calculate_drawdown_stats,
    calculate_drawdowns,
    calculate_equity_curve,
    calculate_underwater_curve,
    detect_drawdown_patterns,
    get_worst_drawdowns,
)
from .frames import count_trading_days, parse_timestamp, trades_to_frame
from .performance import HourlyRate, calculate_hourly_rate, trading_period_days
from .symbols import (
    RankedSymbol,
    SymbolAnalysis,
    SymbolPerformance,
    SymbolRecommendation,
    analyze_symbol_performance,
    analyze_symbols,
    compare_symbols,
    generate_symbol_recommendations,
    rank_symbols,
)
from .time_based import (
    BestWorstTimes,
    TimeBasedAnalysis,
    TimeInsight,
    analyze_by_day_of_week,
    analyze_by_hour,
    analyze_by_month,
    analyze_time_based_performance,
    generate_time_insights,
    get_best_worst_times,
)

__all__ = [
    # Frames
    "trades_to_frame",
    "parse_timestamp",
    "count_trading_days",
    # Drawdowns
    "EquityPoint",
    "UnderwaterPoint",
    "Drawdown",
    "WorstDrawdown",
    "DrawdownStats",
    "DrawdownPattern",
    "DrawdownAnalysis",
    "calculate_equity_curve",
    "calculate_drawdowns",
    "calculate_underwater_curve",
    "get_worst_drawdowns",
    "calculate_drawdown_stats",
    "detect_drawdown_patterns",
    "analyze_drawdowns",
    # Time-based
    "TimeInsight",
    "BestWorstTimes",
    "TimeBasedAnalysis",
    "analyze_by_hour",
    "analyze_by_day_of_week",
    "analyze_by_month",
    "generate_time_insights",
    "get_best_worst_times",
    "analyze_time_based_performance",
    # Symbols
    "SymbolPerformance",
    "SymbolRecommendation",
    "RankedSymbol",
    "SymbolAnalysis",
    "analyze_symbol_performance",
    "generate_symbol_recommendations",
    "rank_symbols",
    "compare_symbols",
    "analyze_symbols",
    # Performance
    "HourlyRate",
    "calculate_hourly_rate",
    "trading_period_days",
]
