"""
Performance Rate Analysis

Converts overall P&L into an hourly earning rate.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..core.models import Trade
from .frames import trades_to_frame

# Conservative estimate of active screen time per trading day
ACTIVE_HOURS_PER_DAY = 2


@dataclass
class HourlyRate:
    """P&L per active trading hour."""

    rate: float
    total_hours: float
    days_active: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rate": self.rate,
            "totalHours": self.total_hours,
            "daysActive": self.days_active,
        }


def calculate_hourly_rate(
    total_pnl: float,
    trading_period_days: Optional[float],
) -> Optional[HourlyRate]:
    """
    P&L per active hour, assuming two active hours per trading day.

    Returns:
        HourlyRate, or None without a trading period
    """
    if not trading_period_days:
        return None

    total_hours = trading_period_days * ACTIVE_HOURS_PER_DAY
    return HourlyRate(
        rate=total_pnl / total_hours,
        total_hours=total_hours,
        days_active=trading_period_days,
    )


def trading_period_days(trades: List[Trade]) -> Optional[int]:
    """Days spanned from the first to the last timed trade, at least 1."""
    df = trades_to_frame(trades, timed_only=True)
    if df.empty:
        return None
    span = df["executed_at"].max() - df["executed_at"].min()
    return max(1, math.ceil(span.total_seconds() / 86_400))
