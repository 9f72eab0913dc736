"""
Money-Impact Calculators

Pure functions that turn a trade list into concrete dollar estimates.
Each returns a result dataclass, or None when the data cannot support the
estimate. None is never an error: callers skip the insight.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np

from ..analysis.frames import count_trading_days, trades_to_frame
from ..core.models import SymbolStats, Trade

logger = logging.getLogger(__name__)

MAKER_FEE_SAVINGS_RATE = 0.5
MIN_HOUR_BUCKET_TRADES = 2
MIN_SYMBOL_TRADES = 15
SYMBOL_FOCUS_SHARE = 0.7
SYMBOL_FOCUS_EDGE = 2.0
SYMBOL_FOCUS_MIN_WIN_RATE = 50
SYMBOL_FOCUS_MIN_OPPORTUNITY = 100
HOLD_TIME_RATIO_THRESHOLD = 1.5
MS_PER_HOUR = 1000 * 60 * 60

# Stablecoin pairs cannot produce a meaningful trading edge
STABLECOIN_PAIRS = frozenset(
    {
        "USDCUSDT", "USDTUSDC",
        "BUSDUSDT", "USDTBUSD",
        "USDTUSDT", "USDCUSDC", "BUSDBUSD",
        "DAIUSDT", "USDTDAI",
        "TUSDUSDT", "USDTTUSD",
        "USDPUSDT", "USDTUSDP",
        "FDUSDUSDT", "USDTFDUSD",
        "USDCBUSD", "BUSDUSDC",
        "DAIUSDC", "USDCDAI",
        "PAXUSDT", "USDTPAX",
        "GUSDUSDT", "USDTGUSD",
    }
)


def _hour_label(hour: int) -> str:
    return f"{hour}:00"


# =============================================================================
# Result Types
# =============================================================================


@dataclass(frozen=True)
class StopLossSavings:
    potential_savings: float
    avg_current_loss: float
    avg_target_loss: float
    loss_reduction: float
    affected_trades: int
    message: str
    action: str


@dataclass(frozen=True)
class FeeOptimization:
    potential_savings: float
    current_fees: float
    affected_trades: int
    message: str
    action: str


@dataclass(frozen=True)
class TimingEdge:
    potential_savings: float
    worst_hours: List[int]
    best_hours: List[int]
    worst_hours_loss: float
    best_hours_gain: float
    best_hours_win_rate: float
    overall_win_rate: float
    affected_trades: int
    message: str
    action: str


@dataclass(frozen=True)
class SymbolFocusOpportunity:
    potential_savings: float
    best_symbol: str
    best_symbol_win_rate: float
    best_symbol_avg_pnl: float
    worst_symbols: List[str]
    message: str
    action: str


@dataclass(frozen=True)
class LossCuttingSavings:
    potential_savings: float
    avg_loser_hold_hours: float
    avg_winner_hold_hours: float
    hold_time_ratio: float
    affected_trades: int
    message: str
    action: str


@dataclass
class _HourBucket:
    hour: int
    pnl: float
    count: int
    wins: int

    @property
    def avg_pnl(self) -> float:
        return self.pnl / self.count if self.count else 0.0


@dataclass
class _SymbolEntry:
    symbol: str
    pnl: float
    win_rate: float
    trades: int
    avg_pnl: float = field(init=False)

    def __post_init__(self):
        self.avg_pnl = self.pnl / self.trades if self.trades > 0 else 0.0


# =============================================================================
# Calculators
# =============================================================================


def calculate_stop_loss_savings(
    trades: List[Trade],
    target_stop_loss_percent: float = 0.02,
) -> Optional[StopLossSavings]:
    """
    Savings from capping every loss at a fixed share of the position.

    Entry value is ``|realized|`` when present, else ``qty * price``. Losers
    with no positive entry value are skipped.

    Args:
        trades: Trade records
        target_stop_loss_percent: Stop distance as a fraction of entry value

    Returns:
        StopLossSavings, or None without a loser that has an entry value
    """
    actual_losses: List[float] = []
    target_losses: List[float] = []

    for trade in trades:
        if not trade.is_loss:
            continue
        if trade.realized:
            entry_value = abs(trade.realized)
        elif trade.qty and trade.price:
            entry_value = trade.qty * trade.price
        else:
            continue
        if entry_value <= 0:
            continue
        actual_losses.append(abs(trade.pnl_value))
        target_losses.append(entry_value * target_stop_loss_percent)

    if not actual_losses:
        return None

    actual = np.array(actual_losses)
    target = np.array(target_losses)
    total_savings = float(np.maximum(0, actual - target).sum())
    avg_current = float(actual.mean())
    avg_target = float(target.mean())
    pct = f"{target_stop_loss_percent * 100:.0f}%"

    return StopLossSavings(
        potential_savings=total_savings,
        avg_current_loss=avg_current,
        avg_target_loss=avg_target,
        loss_reduction=(avg_current - avg_target) / avg_current * 100,
        affected_trades=len(actual_losses),
        message=f"Tightening stop losses to {pct} would've saved ${total_savings:.0f}",
        action=f"Set {pct} stop loss on every trade",
    )


def calculate_fee_optimization(trades: List[Trade]) -> Optional[FeeOptimization]:
    """
    Annualized savings from switching taker orders to maker orders.

    Every trade with a positive commission is treated as a taker fill and
    half of those fees as recoverable. The total is annualized over the
    distinct trading dates.
    """
    taker_fees = [t.commission for t in trades if t.commission and t.commission > 0]
    if not taker_fees:
        return None

    total_fees = float(sum(taker_fees))
    savings = total_fees * MAKER_FEE_SAVINGS_RATE
    trading_days = count_trading_days(trades)
    yearly = savings / trading_days * 365 if trading_days > 0 else savings

    return FeeOptimization(
        potential_savings=yearly,
        current_fees=total_fees,
        affected_trades=len(taker_fees),
        message=(
            "Using limit orders instead of market orders could save "
            f"~${yearly:.0f}/year"
        ),
        action="Use limit orders (maker) instead of market orders (taker)",
    )


def calculate_timing_edge(trades: List[Trade]) -> Optional[TimingEdge]:
    """
    Loss attributable to the worst hours of the day (UTC).

    Hours need at least two trades. Buckets are ranked by average P&L; the
    bottom three sum to the avoidable loss and the top three are reported
    with their mean win rate against the overall win rate.
    """
    if not trades:
        return None

    df = trades_to_frame(trades, timed_only=True)
    if df.empty:
        return None

    grouped = (
        df.assign(win=(df["pnl"] > 0).astype(int))
        .groupby(df["executed_at"].dt.hour)
        .agg(pnl=("pnl", "sum"), count=("pnl", "size"), wins=("win", "sum"))
    )
    buckets = [
        _HourBucket(
            hour=int(hour),
            pnl=float(row["pnl"]),
            count=int(row["count"]),
            wins=int(row["wins"]),
        )
        for hour, row in grouped.iterrows()
        if row["count"] >= MIN_HOUR_BUCKET_TRADES
    ]
    if not buckets:
        return None

    ranked = sorted(buckets, key=lambda b: b.avg_pnl, reverse=True)
    best = ranked[:3]
    worst = list(reversed(ranked[-3:]))

    worst_loss = sum(b.pnl for b in worst)
    best_gain = sum(b.pnl for b in best)
    best_win_rate = float(np.mean([b.wins / b.count for b in best])) * 100
    overall_win_rate = sum(1 for t in trades if t.is_win) / len(trades) * 100

    worst_labels = ", ".join(_hour_label(b.hour) for b in worst)
    best_labels = ", ".join(_hour_label(b.hour) for b in best)

    return TimingEdge(
        potential_savings=abs(worst_loss),
        worst_hours=[b.hour for b in worst],
        best_hours=[b.hour for b in best],
        worst_hours_loss=worst_loss,
        best_hours_gain=best_gain,
        best_hours_win_rate=best_win_rate,
        overall_win_rate=overall_win_rate,
        affected_trades=sum(b.count for b in worst),
        message=f"Avoiding trading between {worst_labels} would've saved ${abs(worst_loss):.0f}",
        action=(
            f"Focus trading during {best_labels} ({best_win_rate:.0f}% win rate vs "
            f"{overall_win_rate:.0f}% overall)"
        ),
    )


def is_stablecoin_pair(symbol: Optional[str]) -> bool:
    """True for stablecoin-to-stablecoin pairs such as USDCUSDT."""
    if not symbol or not isinstance(symbol, str):
        return False
    return symbol.upper() in STABLECOIN_PAIRS


def calculate_symbol_focus_opportunity(
    trades: List[Trade],
    symbol_data: Dict[str, SymbolStats],
) -> Optional[SymbolFocusOpportunity]:
    """
    Extra profit from concentrating volume on the best symbol.

    Qualifying symbols are non-stablecoin pairs with at least 15 trades.
    The best one (by average P&L) must be profitable on average, win at
    least half its trades and average more than twice the mean average of
    the others. The projection keeps the qualifying volume constant, moves
    70% of it (floored) to the best symbol and values the rest at the
    others' trade-weighted average.

    Returns:
        SymbolFocusOpportunity, or None when any gate fails or the
        opportunity is under $100
    """
    if trades is None or not symbol_data:
        return None

    entries = sorted(
        (
            _SymbolEntry(
                symbol=symbol,
                pnl=stats.pnl,
                win_rate=stats.win_rate or 0.0,
                trades=stats.trades or 0,
            )
            for symbol, stats in symbol_data.items()
            if not is_stablecoin_pair(symbol) and (stats.trades or 0) >= MIN_SYMBOL_TRADES
        ),
        key=lambda e: e.avg_pnl,
        reverse=True,
    )
    if len(entries) < 2:
        return None

    best, others = entries[0], entries[1:]
    mean_other_avg = float(np.mean([e.avg_pnl for e in others]))

    if best.avg_pnl <= mean_other_avg * SYMBOL_FOCUS_EDGE:
        return None
    if best.avg_pnl <= 0 or best.win_rate < SYMBOL_FOCUS_MIN_WIN_RATE:
        return None

    total_trades = sum(e.trades for e in entries)
    current_pnl = sum(e.avg_pnl * e.trades for e in entries)
    other_trades = sum(e.trades for e in others)
    other_avg = sum(e.avg_pnl * e.trades for e in others) / other_trades

    focused_trades = math.floor(total_trades * SYMBOL_FOCUS_SHARE)
    projected_pnl = (
        best.avg_pnl * focused_trades + other_avg * (total_trades - focused_trades)
    )
    opportunity = projected_pnl - current_pnl

    if opportunity < SYMBOL_FOCUS_MIN_OPPORTUNITY:
        logger.debug(f"Symbol focus on {best.symbol} worth only ${opportunity:.2f}")
        return None

    return SymbolFocusOpportunity(
        potential_savings=opportunity,
        best_symbol=best.symbol,
        best_symbol_win_rate=best.win_rate,
        best_symbol_avg_pnl=best.avg_pnl,
        worst_symbols=[e.symbol for e in others[-3:]],
        message=f"Focusing 70% on {best.symbol} could increase profits by ${opportunity:.0f}",
        action=f"Increase {best.symbol} allocation to 70% of trading volume",
    )


def calculate_avg_hold_time(trades: List[Trade]) -> Optional[float]:
    """
    Approximate average hold time in milliseconds.

    Uses the span between the first and last timed trade of each symbol,
    averaged over symbols with a positive span. None with fewer than two
    timed trades or no positive span.
    """
    df = trades_to_frame(trades, timed_only=True)
    if len(df) < 2:
        return None

    spans = df.groupby("symbol")["executed_at"].agg(["min", "max", "size"])
    spans = spans[spans["size"] >= 2]
    hold_ms = (spans["max"] - spans["min"]).dt.total_seconds() * 1000
    hold_ms = hold_ms[hold_ms > 0]

    if hold_ms.empty:
        return None
    return float(hold_ms.mean())


def calculate_loss_cutting_savings(trades: List[Trade]) -> Optional[LossCuttingSavings]:
    """
    Savings from exiting losers as fast as winners.

    When losers are held at least 1.5x longer than winners, each loss is
    assumed to shrink by ``1 - 1/ratio``.
    """
    winners = [t for t in trades if t.is_win]
    losers = [t for t in trades if t.is_loss]
    if not winners or not losers:
        return None

    loser_hold = calculate_avg_hold_time(losers)
    winner_hold = calculate_avg_hold_time(winners)
    if not loser_hold or not winner_hold:
        return None

    ratio = loser_hold / winner_hold
    if ratio < HOLD_TIME_RATIO_THRESHOLD:
        return None

    avg_loss = float(np.mean([abs(t.pnl_value) for t in losers]))
    total_savings = avg_loss * (1 - 1 / ratio) * len(losers)

    return LossCuttingSavings(
        potential_savings=total_savings,
        avg_loser_hold_hours=loser_hold / MS_PER_HOUR,
        avg_winner_hold_hours=winner_hold / MS_PER_HOUR,
        hold_time_ratio=ratio,
        affected_trades=len(losers),
        message=f"Cutting losses {ratio - 1:.1f}x faster could save ${total_savings:.0f}",
        action=(
            "Set maximum hold time for losing trades equal to average winning "
            "trade hold time"
        ),
    )
