"""
Time-Based Performance Analysis

Performance by hour of day, day of week and calendar month. All times are
UTC. Trades without a resolvable timestamp are excluded.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from ..core.models import Trade
from .frames import trades_to_frame

logger = logging.getLogger(__name__)

DAY_NAMES = [
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
]

BUCKET_COLUMNS = ["trades", "wins", "losses", "total_pnl", "win_rate", "avg_pnl"]

MIN_HOUR_TRADES = 3
MIN_DAY_TRADES = 5


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class TimeInsight:
    """Finding about a time bucket."""

    type: str
    title: str
    message: str
    value: float
    icon: str
    category: str = "time"
    severity: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "category": self.category,
            "severity": self.severity,
            "title": self.title,
            "message": self.message,
            "value": self.value,
            "icon": self.icon,
        }


@dataclass
class BestWorstTimes:
    """Top three hours and days each way, from significant buckets only."""

    best_hours: pd.DataFrame = field(default_factory=pd.DataFrame)
    worst_hours: pd.DataFrame = field(default_factory=pd.DataFrame)
    best_days: pd.DataFrame = field(default_factory=pd.DataFrame)
    worst_days: pd.DataFrame = field(default_factory=pd.DataFrame)

    @property
    def worst_hour(self) -> Optional[pd.Series]:
        """The single worst significant hour, if any."""
        if self.worst_hours.empty:
            return None
        return self.worst_hours.iloc[0]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bestHours": self.best_hours.to_dict("records"),
            "worstHours": self.worst_hours.to_dict("records"),
            "bestDays": self.best_days.to_dict("records"),
            "worstDays": self.worst_days.to_dict("records"),
        }


@dataclass
class TimeBasedAnalysis:
    """Complete time-based analysis result."""

    hourly: pd.DataFrame = field(default_factory=pd.DataFrame)
    daily: pd.DataFrame = field(default_factory=pd.DataFrame)
    monthly: pd.DataFrame = field(default_factory=pd.DataFrame)
    insights: List[TimeInsight] = field(default_factory=list)
    best_worst_times: Optional[BestWorstTimes] = None


# =============================================================================
# Bucketing
# =============================================================================


def _aggregate(df: pd.DataFrame, key: pd.Series) -> pd.DataFrame:
    """Trades, wins, losses and total P&L per key."""
    return (
        df.assign(
            win=(df["pnl"] > 0).astype(int),
            loss=(df["pnl"] < 0).astype(int),
        )
        .groupby(key)
        .agg(
            trades=("pnl", "size"),
            wins=("win", "sum"),
            losses=("loss", "sum"),
            total_pnl=("pnl", "sum"),
        )
    )


def _finish(buckets: pd.DataFrame, decided_only: bool) -> pd.DataFrame:
    """Add win rate and average P&L columns."""
    denominator = buckets["wins"] + buckets["losses"] if decided_only else buckets["trades"]
    buckets["win_rate"] = np.where(
        denominator > 0, buckets["wins"] / denominator.where(denominator > 0, 1) * 100, 0.0
    )
    buckets["avg_pnl"] = np.where(
        buckets["trades"] > 0,
        buckets["total_pnl"] / buckets["trades"].where(buckets["trades"] > 0, 1),
        0.0,
    )
    return buckets


def analyze_by_hour(trades: List[Trade]) -> pd.DataFrame:
    """
    Performance per hour of day.

    Returns:
        24 rows (hours 0-23, empty hours included) with columns hour,
        label ("HH:00"), trades, wins, losses, total_pnl, win_rate, avg_pnl.
        Win rate is wins over all trades in the hour.
    """
    df = trades_to_frame(trades, timed_only=True)
    if df.empty:
        return pd.DataFrame(columns=["hour", "label"] + BUCKET_COLUMNS)

    buckets = _aggregate(df, df["executed_at"].dt.hour.rename("hour"))
    buckets = buckets.reindex(range(24), fill_value=0)
    buckets["total_pnl"] = buckets["total_pnl"].astype(float)
    buckets = _finish(buckets, decided_only=False)
    buckets = buckets.rename_axis("hour").reset_index()
    buckets.insert(1, "label", [f"{h:02d}:00" for h in buckets["hour"]])
    return buckets


def analyze_by_day_of_week(trades: List[Trade]) -> pd.DataFrame:
    """
    Performance per weekday.

    Returns:
        7 rows (day 0 = Sunday) with columns day, day_name and the bucket
        columns. Win rate excludes break-even trades.
    """
    df = trades_to_frame(trades, timed_only=True)
    if df.empty:
        return pd.DataFrame(columns=["day", "day_name"] + BUCKET_COLUMNS)

    # pandas counts Monday as 0
    weekday = ((df["executed_at"].dt.dayofweek + 1) % 7).rename("day")
    buckets = _aggregate(df, weekday)
    buckets = buckets.reindex(range(7), fill_value=0)
    buckets["total_pnl"] = buckets["total_pnl"].astype(float)
    buckets = _finish(buckets, decided_only=True)
    buckets = buckets.rename_axis("day").reset_index()
    buckets.insert(1, "day_name", [DAY_NAMES[d] for d in buckets["day"]])
    return buckets


def analyze_by_month(trades: List[Trade]) -> pd.DataFrame:
    """
    Performance per calendar month, oldest first.

    Returns:
        One row per month traded with columns month ("YYYY-MM"), year,
        month_num, month_name ("Jan") and the bucket columns. Win rate
        excludes break-even trades.
    """
    df = trades_to_frame(trades, timed_only=True)
    if df.empty:
        return pd.DataFrame(
            columns=["month", "year", "month_num", "month_name"] + BUCKET_COLUMNS
        )

    month_key = df["executed_at"].dt.strftime("%Y-%m").rename("month")
    buckets = _finish(_aggregate(df, month_key), decided_only=True)
    buckets = buckets.sort_index().reset_index()

    periods = pd.to_datetime(buckets["month"], format="%Y-%m")
    buckets.insert(1, "year", periods.dt.year)
    buckets.insert(2, "month_num", periods.dt.month)
    buckets.insert(3, "month_name", periods.dt.strftime("%b"))
    return buckets


# =============================================================================
# Insights
# =============================================================================


def generate_time_insights(
    hourly: pd.DataFrame,
    daily: pd.DataFrame,
    monthly: pd.DataFrame,
) -> List[TimeInsight]:
    """Best and worst hour and day, plus month-to-month consistency."""
    insights: List[TimeInsight] = []

    active_hours = hourly[hourly["trades"] > 0] if not hourly.empty else hourly
    if not active_hours.empty:
        best = active_hours.loc[active_hours["total_pnl"].idxmax()]
        worst = active_hours.loc[active_hours["total_pnl"].idxmin()]

        if best["total_pnl"] > 0:
            insights.append(
                TimeInsight(
                    type="best_hour",
                    title=f"Best Trading Hour: {best['label']}",
                    message=(
                        f"You make an average of ${best['avg_pnl']:.2f} per trade "
                        f"at {best['label']}"
                    ),
                    value=float(best["total_pnl"]),
                    icon="⏰",
                )
            )

        if worst["total_pnl"] < 0 and abs(worst["total_pnl"]) > 10:
            insights.append(
                TimeInsight(
                    type="worst_hour",
                    severity="medium",
                    title=f"Avoid Trading at {worst['label']}",
                    message=(
                        f"You lose an average of ${abs(worst['avg_pnl']):.2f} "
                        "per trade at this hour"
                    ),
                    value=float(worst["total_pnl"]),
                    icon="⏰",
                )
            )

    active_days = daily[daily["trades"] > 0] if not daily.empty else daily
    if not active_days.empty:
        best = active_days.loc[active_days["total_pnl"].idxmax()]
        worst = active_days.loc[active_days["total_pnl"].idxmin()]

        if best["total_pnl"] > 0:
            insights.append(
                TimeInsight(
                    type="best_day",
                    title=f"{best['day_name']}s are your best day",
                    message=(
                        f"Win rate: {best['win_rate']:.1f}% with "
                        f"${best['total_pnl']:.2f} total P&L"
                    ),
                    value=float(best["total_pnl"]),
                    icon="📅",
                )
            )

        if worst["total_pnl"] < 0:
            insights.append(
                TimeInsight(
                    type="worst_day",
                    severity="medium",
                    title=f"Consider avoiding {worst['day_name']}s",
                    message=(
                        f"Win rate: {worst['win_rate']:.1f}% with "
                        f"${worst['total_pnl']:.2f} total P&L"
                    ),
                    value=float(worst["total_pnl"]),
                    icon="📅",
                )
            )

    if len(monthly) > 3:
        profitable = int((monthly["total_pnl"] > 0).sum())
        consistency = profitable / len(monthly) * 100

        if consistency >= 70:
            insights.append(
                TimeInsight(
                    type="monthly_consistency",
                    title="Highly Consistent Performance",
                    message=(
                        f"{profitable} out of {len(monthly)} months profitable "
                        f"({consistency:.0f}%)"
                    ),
                    value=consistency,
                    icon="📊",
                )
            )
        elif consistency < 50:
            insights.append(
                TimeInsight(
                    type="monthly_consistency",
                    severity="high",
                    title="Inconsistent Monthly Performance",
                    message=(
                        f"Only {profitable} out of {len(monthly)} months profitable "
                        f"({consistency:.0f}%)"
                    ),
                    value=consistency,
                    icon="📊",
                )
            )

    return insights


def get_best_worst_times(hourly: pd.DataFrame, daily: pd.DataFrame) -> BestWorstTimes:
    """
    Top three hours (at least 3 trades) and days (at least 5 trades) by
    average P&L, best first and worst first respectively.
    """
    summary = BestWorstTimes()

    if not hourly.empty:
        significant = hourly[hourly["trades"] >= MIN_HOUR_TRADES]
        summary.best_hours = significant.sort_values(
            "avg_pnl", ascending=False, kind="mergesort"
        ).head(3)
        summary.worst_hours = significant.sort_values(
            "avg_pnl", ascending=True, kind="mergesort"
        ).head(3)

    if not daily.empty:
        significant = daily[daily["trades"] >= MIN_DAY_TRADES]
        summary.best_days = significant.sort_values(
            "avg_pnl", ascending=False, kind="mergesort"
        ).head(3)
        summary.worst_days = significant.sort_values(
            "avg_pnl", ascending=True, kind="mergesort"
        ).head(3)

    return summary


def analyze_time_based_performance(trades: List[Trade]) -> TimeBasedAnalysis:
    """
    Run the full time-based analysis.

    Returns:
        TimeBasedAnalysis; ``best_worst_times`` is None when there are no trades
    """
    if not trades:
        return TimeBasedAnalysis()

    hourly = analyze_by_hour(trades)
    daily = analyze_by_day_of_week(trades)
    monthly = analyze_by_month(trades)

    return TimeBasedAnalysis(
        hourly=hourly,
        daily=daily,
        monthly=monthly,
        insights=generate_time_insights(hourly, daily, monthly),
        best_worst_times=get_best_worst_times(hourly, daily),
    )
