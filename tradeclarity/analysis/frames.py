"""
Trade Frames

Conversion of trade lists into pandas DataFrames for the time and
equity based analyzers.
"""

import logging
from typing import Iterable, List

import pandas as pd

from ..core.models import Trade, parse_timestamp

logger = logging.getLogger(__name__)

TRADE_COLUMNS = [
    "symbol",
    "pnl",
    "commission",
    "qty",
    "price",
    "realized",
    "executed_at",
]


def trades_to_frame(trades: Iterable[Trade], timed_only: bool = False) -> pd.DataFrame:
    """
    Build a DataFrame with one row per trade.

    Args:
        trades: Trade records
        timed_only: Drop trades without a resolvable execution time

    Returns:
        DataFrame with TRADE_COLUMNS. ``pnl`` and ``commission`` are filled
        with 0.0, ``symbol`` with "UNKNOWN" and ``executed_at`` is a UTC
        datetime column (NaT when unresolvable). The original position of
        each trade is kept as the index.
    """
    rows: List[dict] = [
        {
            "symbol": t.symbol or "UNKNOWN",
            "pnl": t.pnl_value,
            "commission": t.commission or 0.0,
            "qty": t.qty,
            "price": t.price,
            "realized": t.realized,
            "executed_at": t.executed_at,
        }
        for t in trades
    ]

    if not rows:
        df = pd.DataFrame(columns=TRADE_COLUMNS)
        df["pnl"] = df["pnl"].astype(float)
        df["executed_at"] = pd.to_datetime(df["executed_at"], utc=True)
        return df

    df = pd.DataFrame(rows, columns=TRADE_COLUMNS)
    df["pnl"] = df["pnl"].astype(float)
    df["commission"] = df["commission"].astype(float)
    df["executed_at"] = pd.to_datetime(df["executed_at"], utc=True)

    if timed_only:
        untimed = int(df["executed_at"].isna().sum())
        if untimed:
            logger.debug(f"Excluding {untimed} trades without timestamps")
        df = df[df["executed_at"].notna()]

    return df


def count_trading_days(trades: Iterable[Trade]) -> int:
    """Number of distinct UTC calendar dates with at least one trade."""
    df = trades_to_frame(trades, timed_only=True)
    if df.empty:
        return 0
    return int(df["executed_at"].dt.normalize().nunique())


__all__ = [
    "TRADE_COLUMNS",
    "trades_to_frame",
    "count_trading_days",
    "parse_timestamp",
]
