"""
TradeClarity Core

Input domain models and the error taxonomy shared by every component.
"""

from .errors import (
    AnalysisError,
    ErrorCategory,
    ErrorCode,
    ErrorCodes,
    ErrorSeverity,
    InsightDataError,
    InsightValidationError,
    TradeClarityError,
    wrap_exception,
)
from .models import (
    AnalyticsSnapshot,
    PsychologyAssessment,
    PsychologyWeakness,
    SymbolStats,
    Trade,
    TradeStats,
    parse_timestamp,
)

__all__ = [
    # Errors
    "ErrorCategory",
    "ErrorSeverity",
    "ErrorCode",
    "ErrorCodes",
    "TradeClarityError",
    "InsightDataError",
    "InsightValidationError",
    "AnalysisError",
    "wrap_exception",
    # Models
    "Trade",
    "SymbolStats",
    "AnalyticsSnapshot",
    "PsychologyWeakness",
    "PsychologyAssessment",
    "TradeStats",
    "parse_timestamp",
]
