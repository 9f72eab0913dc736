"""
Drawdown Analysis

Equity curve, drawdown periods, recovery statistics and drawdown patterns
computed from a trade list. Drawdown percentages are negative: a 12%
decline from the peak is reported as -12.0.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from ..core.models import Trade
from .frames import trades_to_frame

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86_400


def _days_between(start: pd.Timestamp, end: pd.Timestamp) -> int:
    """Whole days between two timestamps, rounded up."""
    return math.ceil((end - start).total_seconds() / SECONDS_PER_DAY)


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class EquityPoint:
    """Running balance after one trade."""

    timestamp: pd.Timestamp
    balance: float
    pnl: float
    symbol: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "balance": self.balance,
            "pnl": self.pnl,
            "symbol": self.symbol,
        }


@dataclass
class UnderwaterPoint:
    """Distance below the running peak."""

    timestamp: pd.Timestamp
    underwater_percent: float
    balance: float
    peak: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "underwaterPercent": self.underwater_percent,
            "balance": self.balance,
            "peak": self.peak,
        }


@dataclass
class Drawdown:
    """One peak-to-recovery drawdown period."""

    start_date: pd.Timestamp
    start_index: int
    peak_balance: float
    drawdown_amount: float
    drawdown_percent: float
    lowest_balance: float
    lowest_index: int
    end_date: Optional[pd.Timestamp] = None
    end_index: Optional[int] = None
    end_balance: Optional[float] = None
    recovered: bool = False
    recovery_date: Optional[pd.Timestamp] = None
    recovery_index: Optional[int] = None

    @property
    def drawdown_days(self) -> int:
        """Days from the peak to the last point before recovery."""
        return _days_between(self.start_date, self.end_date)

    @property
    def recovery_days(self) -> Optional[int]:
        if not self.recovered:
            return None
        return _days_between(self.end_date, self.recovery_date)

    @property
    def duration_days(self) -> int:
        """Days from the peak to recovery, or to the last point if unrecovered."""
        end = self.recovery_date if self.recovered else self.end_date
        return _days_between(self.start_date, end)


@dataclass
class WorstDrawdown:
    """Ranked drawdown with its durations resolved."""

    rank: int
    start_date: pd.Timestamp
    end_date: pd.Timestamp
    peak_balance: float
    lowest_balance: float
    drawdown_amount: float
    drawdown_percent: float
    recovered: bool
    recovery_date: Optional[pd.Timestamp]
    duration_days: int
    drawdown_days: int
    recovery_days: Optional[int]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rank": self.rank,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "peakBalance": self.peak_balance,
            "lowestBalance": self.lowest_balance,
            "drawdownAmount": self.drawdown_amount,
            "drawdownPercent": self.drawdown_percent,
            "recovered": self.recovered,
            "recoveryDate": self.recovery_date.isoformat() if self.recovery_date else None,
            "durationDays": self.duration_days,
            "drawdownDays": self.drawdown_days,
            "recoveryDays": self.recovery_days,
        }


@dataclass
class DrawdownStats:
    """Summary statistics over every drawdown period."""

    total_drawdowns: int = 0
    average_drawdown: float = 0.0
    max_drawdown: float = 0.0
    average_recovery_time: float = 0.0
    longest_drawdown: int = 0
    current_drawdown: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalDrawdowns": self.total_drawdowns,
            "averageDrawdown": self.average_drawdown,
            "maxDrawdown": self.max_drawdown,
            "averageRecoveryTime": self.average_recovery_time,
            "longestDrawdown": self.longest_drawdown,
            "currentDrawdown": self.current_drawdown,
        }


@dataclass
class DrawdownPattern:
    """Recurring drawdown behavior worth flagging."""

    type: str
    severity: str
    title: str
    message: str
    recommendation: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "severity": self.severity,
            "title": self.title,
            "message": self.message,
            "recommendation": self.recommendation,
        }


@dataclass
class DrawdownAnalysis:
    """Complete drawdown analysis result."""

    equity_curve: List[EquityPoint] = field(default_factory=list)
    underwater_curve: List[UnderwaterPoint] = field(default_factory=list)
    drawdowns: List[Drawdown] = field(default_factory=list)
    worst_drawdowns: List[WorstDrawdown] = field(default_factory=list)
    stats: Optional[DrawdownStats] = None
    patterns: List[DrawdownPattern] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "equityCurve": [p.to_dict() for p in self.equity_curve],
            "underwaterCurve": [p.to_dict() for p in self.underwater_curve],
            "worstDrawdowns": [d.to_dict() for d in self.worst_drawdowns],
            "stats": self.stats.to_dict() if self.stats else None,
            "patterns": [p.to_dict() for p in self.patterns],
        }


# =============================================================================
# Equity Curve
# =============================================================================


def calculate_equity_curve(trades: List[Trade]) -> List[EquityPoint]:
    """
    Running balance in execution order.

    Trades without a resolvable timestamp are left out.
    """
    df = trades_to_frame(trades, timed_only=True)
    if df.empty:
        return []

    df = df.sort_values("executed_at", kind="mergesort")
    balances = df["pnl"].cumsum()

    return [
        EquityPoint(
            timestamp=ts,
            balance=float(balance),
            pnl=float(pnl),
            symbol=symbol,
        )
        for ts, balance, pnl, symbol in zip(
            df["executed_at"], balances, df["pnl"], df["symbol"]
        )
    ]


def _drawdown_percent(amount: float, peak: float) -> float:
    if peak == 0:
        return 0.0
    return -(amount / abs(peak)) * 100


def calculate_drawdowns(equity_curve: List[EquityPoint]) -> List[Drawdown]:
    """
    Split an equity curve into drawdown periods.

    A drawdown starts when the balance falls below the running peak and
    ends (recovered) when a new peak is set. A drawdown still open at the
    last point is reported unrecovered.
    """
    if not equity_curve:
        return []

    drawdowns: List[Drawdown] = []
    peak = equity_curve[0].balance
    peak_index = 0
    current: Optional[Drawdown] = None

    for index, point in enumerate(equity_curve):
        if point.balance > peak:
            if current is not None:
                previous = equity_curve[index - 1]
                current.end_date = previous.timestamp
                current.end_index = index - 1
                current.end_balance = previous.balance
                current.recovered = True
                current.recovery_date = point.timestamp
                current.recovery_index = index
                drawdowns.append(current)
                current = None
            peak = point.balance
            peak_index = index
        elif point.balance < peak:
            amount = peak - point.balance
            if current is None:
                current = Drawdown(
                    start_date=equity_curve[peak_index].timestamp,
                    start_index=peak_index,
                    peak_balance=peak,
                    drawdown_amount=amount,
                    drawdown_percent=_drawdown_percent(amount, peak),
                    lowest_balance=point.balance,
                    lowest_index=index,
                )
            elif point.balance < current.lowest_balance:
                current.lowest_balance = point.balance
                current.lowest_index = index
                current.drawdown_amount = amount
                current.drawdown_percent = _drawdown_percent(amount, peak)

    if current is not None:
        last = equity_curve[-1]
        current.end_date = last.timestamp
        current.end_index = len(equity_curve) - 1
        current.end_balance = last.balance
        drawdowns.append(current)

    return drawdowns


def calculate_underwater_curve(equity_curve: List[EquityPoint]) -> List[UnderwaterPoint]:
    """Percentage below the running peak at every point (0 at a peak)."""
    if not equity_curve:
        return []

    balances = np.array([p.balance for p in equity_curve], dtype=float)
    peaks = np.maximum.accumulate(balances)
    abs_peaks = np.abs(peaks)
    underwater = np.divide(
        (balances - peaks) * 100,
        abs_peaks,
        out=np.zeros_like(balances),
        where=peaks != 0,
    )

    return [
        UnderwaterPoint(
            timestamp=point.timestamp,
            underwater_percent=float(pct),
            balance=point.balance,
            peak=float(peak),
        )
        for point, pct, peak in zip(equity_curve, underwater, peaks)
    ]


# =============================================================================
# Ranking and Statistics
# =============================================================================


def get_worst_drawdowns(drawdowns: List[Drawdown], limit: int = 5) -> List[WorstDrawdown]:
    """Deepest drawdowns by percentage, ranked from 1."""
    ranked = sorted(drawdowns, key=lambda dd: abs(dd.drawdown_percent), reverse=True)

    return [
        WorstDrawdown(
            rank=i + 1,
            start_date=dd.start_date,
            end_date=dd.end_date,
            peak_balance=dd.peak_balance,
            lowest_balance=dd.lowest_balance,
            drawdown_amount=dd.drawdown_amount,
            drawdown_percent=dd.drawdown_percent,
            recovered=dd.recovered,
            recovery_date=dd.recovery_date,
            duration_days=dd.duration_days,
            drawdown_days=dd.drawdown_days,
            recovery_days=dd.recovery_days,
        )
        for i, dd in enumerate(ranked[:limit])
    ]


def calculate_drawdown_stats(drawdowns: List[Drawdown]) -> DrawdownStats:
    """Aggregate statistics. Magnitudes are reported as positive percentages."""
    if not drawdowns:
        return DrawdownStats()

    recovered = [dd for dd in drawdowns if dd.recovered]
    current = next((dd for dd in drawdowns if not dd.recovered), None)
    magnitudes = [abs(dd.drawdown_percent) for dd in drawdowns]

    current_summary = None
    if current is not None:
        current_summary = {
            "drawdownPercent": current.drawdown_percent,
            "drawdownAmount": current.drawdown_amount,
            "durationDays": current.drawdown_days,
        }

    return DrawdownStats(
        total_drawdowns=len(drawdowns),
        average_drawdown=float(np.mean(magnitudes)),
        max_drawdown=float(np.max(magnitudes)),
        average_recovery_time=(
            float(np.mean([dd.recovery_days for dd in recovered])) if recovered else 0.0
        ),
        longest_drawdown=max(dd.duration_days for dd in drawdowns),
        current_drawdown=current_summary,
    )


def detect_drawdown_patterns(drawdowns: List[Drawdown]) -> List[DrawdownPattern]:
    """
    Flag recurring drawdown behavior.

    Patterns:
        slow_recovery: recovery took more than twice the decline
        frequent_small: more than 70% of drawdowns are under 10%
        large_drawdowns: any drawdown deeper than 20%
        current_drawdown: still more than 15% below the peak
    """
    if not drawdowns:
        return []

    patterns: List[DrawdownPattern] = []

    slow = [
        dd for dd in drawdowns
        if dd.recovered and dd.recovery_days > dd.drawdown_days * 2
    ]
    if slow:
        patterns.append(
            DrawdownPattern(
                type="slow_recovery",
                severity="medium",
                title="Slow Recovery Pattern",
                message=(
                    f"{len(slow)} drawdown(s) took more than 2x longer to recover "
                    "than the drawdown period itself."
                ),
                recommendation=(
                    "Consider reducing position sizes after losses to avoid deep "
                    "holes that are hard to climb out of."
                ),
            )
        )

    small = [dd for dd in drawdowns if abs(dd.drawdown_percent) < 10]
    if len(small) > len(drawdowns) * 0.7:
        share = round(len(small) / len(drawdowns) * 100)
        patterns.append(
            DrawdownPattern(
                type="frequent_small",
                severity="low",
                title="Death by a Thousand Cuts",
                message=f"{share}% of your drawdowns are small (<10%), but frequent.",
                recommendation=(
                    "Many small losses add up. Review your stop-loss strategy and "
                    "avoid overtrading."
                ),
            )
        )

    large = [dd for dd in drawdowns if abs(dd.drawdown_percent) > 20]
    if large:
        patterns.append(
            DrawdownPattern(
                type="large_drawdowns",
                severity="high",
                title="Severe Drawdown Alert",
                message=f"You have {len(large)} drawdown(s) exceeding 20% of your capital.",
                recommendation=(
                    "Critical: Review risk management. A 50% drawdown requires a 100% "
                    "gain to recover. Consider position sizing rules."
                ),
            )
        )

    current = next((dd for dd in drawdowns if not dd.recovered), None)
    if current is not None and abs(current.drawdown_percent) > 15:
        patterns.append(
            DrawdownPattern(
                type="current_drawdown",
                severity="high",
                title="Currently in Drawdown",
                message=(
                    f"You are currently {abs(current.drawdown_percent):.1f}% below "
                    "your peak balance."
                ),
                recommendation=(
                    "Focus on capital preservation. Consider reducing position sizes "
                    "until you recover to break-even."
                ),
            )
        )

    return patterns


def analyze_drawdowns(trades: List[Trade]) -> DrawdownAnalysis:
    """
    Run the full drawdown analysis.

    Args:
        trades: Trade records in any order

    Returns:
        DrawdownAnalysis (empty when there are no timed trades)
    """
    equity_curve = calculate_equity_curve(trades)
    if not equity_curve:
        return DrawdownAnalysis()

    drawdowns = calculate_drawdowns(equity_curve)
    logger.debug(f"Found {len(drawdowns)} drawdowns over {len(equity_curve)} trades")

    return DrawdownAnalysis(
        equity_curve=equity_curve,
        underwater_curve=calculate_underwater_curve(equity_curve),
        drawdowns=drawdowns,
        worst_drawdowns=get_worst_drawdowns(drawdowns, 5),
        stats=calculate_drawdown_stats(drawdowns),
        patterns=detect_drawdown_patterns(drawdowns),
    )
