"""
Core Domain Models

Read-only inputs to the insight engine: trades, the precomputed analytics
snapshot and the psychology assessment. They are produced by the
normalization layer and never mutated here.
"""

import math
import numbers
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

import pandas as pd


def parse_timestamp(value: Any) -> Optional[pd.Timestamp]:
    """
    Parse a trade timestamp into a UTC ``pd.Timestamp``.

    Numbers are epoch milliseconds, strings are ISO-8601 and naive values
    are read as UTC. Anything unparseable yields None so that the trade is
    skipped by time-based calculations.

    Args:
        value: Raw timestamp (number, string, datetime or None)

    Returns:
        Timezone-aware timestamp or None
    """
    if value is None or isinstance(value, bool):
        return None

    try:
        if isinstance(value, numbers.Real):
            if math.isnan(value) or value <= 0:
                return None
            ts = pd.Timestamp(value, unit="ms")
        elif isinstance(value, (str, datetime)):
            if isinstance(value, str) and not value.strip():
                return None
            ts = pd.Timestamp(value)
        else:
            return None
    except (ValueError, TypeError, OverflowError):
        return None

    if ts is pd.NaT:
        return None
    if ts.tzinfo is None:
        return ts.tz_localize("UTC")
    return ts.tz_convert("UTC")


@dataclass(frozen=True)
class Trade:
    """Single execution record as delivered by the normalization layer."""

    pnl: Optional[float] = None
    commission: Optional[float] = None
    symbol: Optional[str] = None
    timestamp: Any = None
    time: Any = None
    qty: Optional[float] = None
    price: Optional[float] = None
    realized: Optional[float] = None

    @property
    def pnl_value(self) -> float:
        """Realized P&L, 0.0 when missing."""
        return self.pnl or 0.0

    @property
    def is_win(self) -> bool:
        return self.pnl_value > 0

    @property
    def is_loss(self) -> bool:
        return self.pnl_value < 0

    @property
    def executed_at(self) -> Optional[pd.Timestamp]:
        """Execution time from ``timestamp``, falling back to ``time``."""
        raw = self.timestamp if self.timestamp not in (None, "", 0) else self.time
        return parse_timestamp(raw)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Trade":
        """
        Build a trade from a raw record without validation.

        ``realizedPnl`` is accepted for ``pnl`` and ``quantity`` for ``qty``.
        """
        pnl = data.get("pnl")
        if pnl is None:
            pnl = data.get("realizedPnl")
        qty = data.get("qty")
        if qty is None:
            qty = data.get("quantity")
        return cls(
            pnl=pnl,
            commission=data.get("commission"),
            symbol=data.get("symbol"),
            timestamp=data.get("timestamp"),
            time=data.get("time"),
            qty=qty,
            price=data.get("price"),
            realized=data.get("realized"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "pnl": self.pnl,
            "commission": self.commission,
            "symbol": self.symbol,
            "timestamp": self.timestamp,
            "time": self.time,
            "qty": self.qty,
            "price": self.price,
            "realized": self.realized,
        }


@dataclass(frozen=True)
class SymbolStats:
    """Per-symbol aggregate from the analytics snapshot."""

    trades: int = 0
    realized: Optional[float] = None
    net_pnl: Optional[float] = None
    win_rate: Optional[float] = None

    @property
    def pnl(self) -> float:
        """Realized P&L, falling back to net P&L."""
        return self.realized or self.net_pnl or 0.0


@dataclass(frozen=True)
class AnalyticsSnapshot:
    """Precomputed aggregate metrics for one insight-generation pass."""

    win_rate: Optional[float] = None
    profit_factor: Optional[float] = None
    avg_win: float = 0.0
    avg_loss: float = 0.0
    total_pnl: float = 0.0
    total_commission: float = 0.0
    total_trades: int = 0
    winning_trades: Optional[int] = None
    losing_trades: Optional[int] = None
    symbols: Dict[str, SymbolStats] = field(default_factory=dict)
    all_trades: List[Trade] = field(default_factory=list)
    trading_period_days: Optional[float] = None

    # Market-specific breakdowns shown on explore cards
    spot_pnl: Optional[float] = None
    spot_win_rate: Optional[float] = None
    futures_pnl: Optional[float] = None
    futures_win_rate: Optional[float] = None

    def winners_count(self, trades: Optional[List[Trade]] = None) -> int:
        """Winning trade count, counted from trades when not precomputed."""
        if self.winning_trades is not None:
            return self.winning_trades
        return sum(1 for t in (trades or self.all_trades) if t.is_win)

    def losers_count(self, trades: Optional[List[Trade]] = None) -> int:
        """Losing trade count, counted from trades when not precomputed."""
        if self.losing_trades is not None:
            return self.losing_trades
        return sum(1 for t in (trades or self.all_trades) if t.is_loss)


@dataclass(frozen=True)
class PsychologyWeakness:
    """Behavioral weakness reported by the psychology analyzer."""

    message: str
    title: Optional[str] = None
    severity: Optional[str] = None
    impact: Optional[int] = None


@dataclass(frozen=True)
class PsychologyAssessment:
    """Output of the behavioral/psychology analyzer."""

    weaknesses: List[PsychologyWeakness] = field(default_factory=list)
    health_score: Optional[float] = None
    patterns: List[Dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class TradeStats:
    """Trade counts per market, as reported by the trade store."""

    total_trades: int = 0
    spot_trades: int = 0
    futures_income: int = 0
    futures_positions: int = 0
