"""
TradeClarity Configuration

Logging setup and insight generation settings.
"""

from .logging import (
    ConsoleFormatter,
    LogContext,
    StructuredFormatter,
    clear_analysis_context,
    configure_logging,
    get_analysis_id,
    log_performance,
    set_analysis_context,
)
from .settings import (
    GenerationSettings,
    InsightSettings,
    LoggingSettings,
    configure_logging_from_settings,
    get_settings,
    load_settings,
)

__all__ = [
    # Logging
    "ConsoleFormatter",
    "StructuredFormatter",
    "LogContext",
    "configure_logging",
    "log_performance",
    "set_analysis_context",
    "clear_analysis_context",
    "get_analysis_id",
    # Settings
    "GenerationSettings",
    "LoggingSettings",
    "InsightSettings",
    "load_settings",
    "get_settings",
    "configure_logging_from_settings",
]
