"""
Shared test fixtures for the TradeClarity test suite.
"""

import logging

import pytest
import pandas as pd

from tradeclarity.config.logging import _HANDLER_MARK
from tradeclarity.core.models import (
    AnalyticsSnapshot,
    PsychologyAssessment,
    PsychologyWeakness,
    SymbolStats,
    Trade,
    TradeStats,
)

BASE_TIME = pd.Timestamp("2024-01-01 00:00", tz="UTC")  # a Monday


def ms(ts: pd.Timestamp) -> int:
    """Epoch milliseconds for a timestamp."""
    return int(ts.value // 1_000_000)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Put the root logger back after tests that configure logging."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers and getattr(handler, _HANDLER_MARK, False):
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def base_time():
    """Reference time all timed fixtures are built from."""
    return BASE_TIME


@pytest.fixture
def make_trade():
    """Factory for trades; ``at`` is hours after the reference time."""

    def _make(pnl, symbol="BTCUSDT", at=None, **kwargs):
        if at is not None:
            kwargs.setdefault("time", ms(BASE_TIME + pd.Timedelta(hours=at)))
        return Trade(pnl=pnl, symbol=symbol, **kwargs)

    return _make


@pytest.fixture
def btc_eth_trades():
    """BTCUSDT: 20 trades, $50 avg, 75% wins. ETHUSDT: 15 trades, $10 avg, 60% wins."""
    btc = [Trade(pnl=80.0, symbol="BTCUSDT") for _ in range(15)]
    btc += [Trade(pnl=-40.0, symbol="BTCUSDT") for _ in range(5)]
    eth = [Trade(pnl=30.0, symbol="ETHUSDT") for _ in range(9)]
    eth += [Trade(pnl=-20.0, symbol="ETHUSDT") for _ in range(6)]
    return btc + eth


@pytest.fixture
def btc_eth_analytics(btc_eth_trades):
    """Analytics snapshot matching ``btc_eth_trades``."""
    return AnalyticsSnapshot(
        win_rate=24 / 35 * 100,
        profit_factor=1470 / 320,
        avg_win=1470 / 24,
        avg_loss=-320 / 11,
        total_pnl=1150.0,
        total_commission=0.0,
        total_trades=35,
        symbols={
            "BTCUSDT": SymbolStats(trades=20, realized=1000.0, win_rate=75.0),
            "ETHUSDT": SymbolStats(trades=15, realized=150.0, win_rate=60.0),
        },
        all_trades=btc_eth_trades,
    )


@pytest.fixture
def timed_trades(make_trade):
    """
    40 timed trades over 10 days with commissions and entry values.

    Hour 9 wins, hour 14 loses, hour 20 is mixed. Losers carry
    ``realized`` so the stop-loss calculator can size them.
    """
    trades = []
    for day in range(10):
        offset = day * 24
        trades.append(make_trade(60.0, "BTCUSDT", at=offset + 9, commission=2.0))
        trades.append(make_trade(40.0, "ETHUSDT", at=offset + 9.5, commission=2.0))
        trades.append(
            make_trade(-90.0, "SOLUSDT", at=offset + 14, commission=2.0, realized=1000.0)
        )
        pnl = 25.0 if day % 2 == 0 else -15.0
        trades.append(
            make_trade(pnl, "BTCUSDT", at=offset + 20, commission=2.0, qty=0.1, price=40000.0)
        )
    return trades


@pytest.fixture
def timed_analytics(timed_trades):
    """Analytics snapshot matching ``timed_trades``."""
    wins = [t.pnl for t in timed_trades if t.pnl > 0]
    losses = [t.pnl for t in timed_trades if t.pnl < 0]
    return AnalyticsSnapshot(
        win_rate=len(wins) / len(timed_trades) * 100,
        profit_factor=sum(wins) / abs(sum(losses)),
        avg_win=sum(wins) / len(wins),
        avg_loss=sum(losses) / len(losses),
        total_pnl=sum(t.pnl for t in timed_trades),
        total_commission=sum(t.commission for t in timed_trades),
        total_trades=len(timed_trades),
        all_trades=timed_trades,
    )


@pytest.fixture
def small_analytics():
    """A 15-trade snapshot for the low-activity path."""
    return AnalyticsSnapshot(
        win_rate=40.0,
        profit_factor=0.9,
        avg_win=30.0,
        avg_loss=-50.0,
        total_pnl=-90.0,
        total_commission=12.0,
        total_trades=15,
        winning_trades=6,
        losing_trades=9,
    )


@pytest.fixture
def psychology():
    """Assessment with one high-severity and one minor weakness."""
    return PsychologyAssessment(
        weaknesses=[
            PsychologyWeakness(
                title="Revenge Trading",
                message="You open larger positions right after a loss",
                severity="high",
                impact=4,
            ),
            PsychologyWeakness(
                title="Late Entries",
                message="Entries often come after the move",
                severity="low",
                impact=1,
            ),
        ],
        health_score=62,
        patterns=[{"type": "revenge", "severity": "high"}],
    )


@pytest.fixture
def trade_stats():
    """Trade-store counts with both spot and futures activity."""
    return TradeStats(total_trades=40, spot_trades=30, futures_income=10, futures_positions=2)
