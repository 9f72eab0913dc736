"""
TradeClarity Insight Settings

Thresholds that gate insight generation, plus logging preferences.
Loaded from YAML with environment overrides.
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field

from .logging import configure_logging

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "TRADECLARITY_CONFIG"
LOG_LEVEL_ENV_VAR = "TRADECLARITY_LOG_LEVEL"


# =============================================================================
# Pydantic Models - Settings Types
# =============================================================================


class GenerationSettings(BaseModel):
    """Thresholds used by the insight generators."""

    model_config = ConfigDict(frozen=True)

    low_activity_max_trades: int = Field(
        default=30, ge=1, description="Below this trade count the low-activity generator runs"
    )
    large_account_pnl: float = Field(
        default=1000.0, description="Total P&L above which the large-account savings floor applies"
    )
    large_account_min_savings: float = Field(default=50.0, ge=0)
    small_account_min_savings: float = Field(default=20.0, ge=0)
    symbol_focus_min_savings: float = Field(default=100.0, ge=0)
    stop_loss_target_percent: float = Field(default=0.02, gt=0, lt=1)
    strength_win_rate: float = Field(default=60.0, ge=0, le=100)
    strength_profit_factor: float = Field(default=1.8, ge=0)
    combined_max_insights: int = Field(default=5, ge=1, le=20)

    def min_savings_for(self, total_pnl: float) -> float:
        """Savings floor that scales with account size."""
        if total_pnl > self.large_account_pnl:
            return self.large_account_min_savings
        return self.small_account_min_savings


class LoggingSettings(BaseModel):
    """Logging preferences."""

    model_config = ConfigDict(frozen=True)

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    json_format: bool = False
    service_name: str = "tradeclarity-insights"
    environment: str = "development"
    log_file: Optional[str] = None


class InsightSettings(BaseModel):
    """Complete insight engine configuration."""

    model_config = ConfigDict(frozen=True)

    generation: GenerationSettings = Field(default_factory=GenerationSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


# =============================================================================
# Loading
# =============================================================================


def _read_yaml(path: Path) -> Dict[str, Any]:
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Settings file {path} must contain a mapping")
    return data


def load_settings(path: Optional[Union[str, Path]] = None) -> InsightSettings:
    """
    Load settings from YAML.

    Args:
        path: Settings file. Falls back to $TRADECLARITY_CONFIG, then defaults.

    Returns:
        Validated InsightSettings
    """
    path = path or os.environ.get(CONFIG_ENV_VAR)
    data: Dict[str, Any] = {}

    if path:
        config_path = Path(path)
        if config_path.exists():
            data = _read_yaml(config_path)
            logger.info(f"Loaded insight settings from {config_path}")
        else:
            logger.warning(f"Settings file {config_path} not found, using defaults")

    level = os.environ.get(LOG_LEVEL_ENV_VAR)
    if level:
        data.setdefault("logging", {})["level"] = level.upper()

    return InsightSettings.model_validate(data)


def configure_logging_from_settings(settings: LoggingSettings) -> None:
    """Apply logging preferences to the root logger."""
    configure_logging(
        level=settings.level,
        json_format=settings.json_format,
        service_name=settings.service_name,
        environment=settings.environment,
        log_file=settings.log_file,
    )


@lru_cache
def get_settings() -> InsightSettings:
    """
    Process-wide settings, loaded once.

    The first call also configures logging from the loaded preferences.
    """
    settings = load_settings()
    configure_logging_from_settings(settings.logging)
    return settings
