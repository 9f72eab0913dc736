"""
TradeClarity Validation

Pydantic models for the camelCase payloads handed over by the analytics
layer, and helpers that turn them into domain objects.
"""

from .models import (
    AnalyticsInput,
    PsychologyInput,
    PsychologyWeaknessInput,
    SymbolStatsInput,
    TradeClarityBaseModel,
    TradeInput,
    TradeStatsInput,
    parse_analytics,
    parse_psychology,
    parse_trade_stats,
    parse_trades,
)

__all__ = [
    # Models
    "TradeClarityBaseModel",
    "TradeInput",
    "SymbolStatsInput",
    "AnalyticsInput",
    "PsychologyWeaknessInput",
    "PsychologyInput",
    "TradeStatsInput",
    # Parsers
    "parse_trades",
    "parse_analytics",
    "parse_psychology",
    "parse_trade_stats",
]
