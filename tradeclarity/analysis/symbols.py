"""
Symbol Analysis

Per-symbol performance, focus/avoid recommendations and a multi-factor
ranking of the traded symbols.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np

from ..core.models import Trade

logger = logging.getLogger(__name__)

# Profit factor reported for symbols with wins but no losses
UNBOUNDED_PROFIT_FACTOR = 999.0


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class SymbolPerformance:
    """Performance of one symbol."""

    symbol: str
    trades: int = 0
    wins: int = 0
    losses: int = 0
    total_pnl: float = 0.0
    total_volume: float = 0.0
    winning_pnl: float = 0.0
    losing_pnl: float = 0.0
    largest_win: float = 0.0
    largest_loss: float = 0.0
    consecutive_wins: int = 0
    consecutive_losses: int = 0

    # Derived once every trade has been counted
    win_rate: float = 0.0
    avg_win: float = 0.0
    avg_loss: float = 0.0
    profit_factor: float = 0.0
    avg_pnl: float = 0.0
    expectancy: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symbol": self.symbol,
            "trades": self.trades,
            "wins": self.wins,
            "losses": self.losses,
            "totalPnL": self.total_pnl,
            "totalVolume": self.total_volume,
            "largestWin": self.largest_win,
            "largestLoss": self.largest_loss,
            "consecutiveWins": self.consecutive_wins,
            "consecutiveLosses": self.consecutive_losses,
            "winRate": self.win_rate,
            "avgWin": self.avg_win,
            "avgLoss": self.avg_loss,
            "profitFactor": self.profit_factor,
            "avgPnL": self.avg_pnl,
            "expectancy": self.expectancy,
        }


@dataclass
class SymbolRecommendation:
    """Focus, avoid or inefficient-activity recommendation."""

    type: str
    severity: str
    title: str
    symbols: List[str]
    message: str
    details: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "severity": self.severity,
            "title": self.title,
            "symbols": self.symbols,
            "message": self.message,
            "details": self.details,
        }


@dataclass
class RankedSymbol:
    """Symbol with its 0-100 ranking score."""

    performance: SymbolPerformance
    score: float
    rank: int

    @property
    def symbol(self) -> str:
        return self.performance.symbol

    def to_dict(self) -> Dict[str, Any]:
        result = self.performance.to_dict()
        result.update({"score": self.score, "rank": self.rank})
        return result


@dataclass
class SymbolAnalysis:
    """Complete symbol analysis result."""

    symbol_performance: List[SymbolPerformance] = field(default_factory=list)
    recommendations: List[SymbolRecommendation] = field(default_factory=list)
    rankings: List[RankedSymbol] = field(default_factory=list)
    summary: Optional[Dict[str, Any]] = None

    def recommendation(self, rec_type: str) -> Optional[SymbolRecommendation]:
        """First recommendation of the given type."""
        return next((r for r in self.recommendations if r.type == rec_type), None)


# =============================================================================
# Analysis
# =============================================================================


def _finalize(perf: SymbolPerformance) -> SymbolPerformance:
    perf.win_rate = perf.wins / perf.trades * 100 if perf.trades > 0 else 0.0
    perf.avg_win = perf.winning_pnl / perf.wins if perf.wins > 0 else 0.0
    perf.avg_loss = perf.losing_pnl / perf.losses if perf.losses > 0 else 0.0
    if perf.losing_pnl != 0:
        perf.profit_factor = abs(perf.winning_pnl / perf.losing_pnl)
    else:
        perf.profit_factor = UNBOUNDED_PROFIT_FACTOR if perf.winning_pnl > 0 else 0.0
    perf.avg_pnl = perf.total_pnl / perf.trades if perf.trades > 0 else 0.0
    win_share = perf.win_rate / 100
    perf.expectancy = win_share * perf.avg_win + (1 - win_share) * perf.avg_loss
    return perf


def analyze_symbol_performance(trades: List[Trade]) -> List[SymbolPerformance]:
    """
    Per-symbol statistics in order of first appearance.

    Streaks follow the order of the trade list; break-even trades neither
    extend nor reset a streak.
    """
    by_symbol: Dict[str, SymbolPerformance] = {}
    streaks: Dict[str, List[Any]] = {}

    for trade in trades:
        symbol = trade.symbol or "UNKNOWN"
        perf = by_symbol.get(symbol)
        if perf is None:
            perf = by_symbol[symbol] = SymbolPerformance(symbol=symbol)
            streaks[symbol] = [0, None]

        pnl = trade.pnl_value
        perf.trades += 1
        perf.total_pnl += pnl
        perf.total_volume += abs(trade.qty or 0)
        streak = streaks[symbol]

        if pnl > 0:
            perf.wins += 1
            perf.winning_pnl += pnl
            perf.largest_win = max(perf.largest_win, pnl)
            streak[0] = streak[0] + 1 if streak[1] == "win" else 1
            streak[1] = "win"
            perf.consecutive_wins = max(perf.consecutive_wins, streak[0])
        elif pnl < 0:
            perf.losses += 1
            perf.losing_pnl += pnl
            perf.largest_loss = min(perf.largest_loss, pnl)
            streak[0] = streak[0] + 1 if streak[1] == "loss" else 1
            streak[1] = "loss"
            perf.consecutive_losses = max(perf.consecutive_losses, streak[0])

    return [_finalize(perf) for perf in by_symbol.values()]


def _detail(perf: SymbolPerformance) -> Dict[str, Any]:
    return {
        "symbol": perf.symbol,
        "winRate": perf.win_rate,
        "expectancy": perf.expectancy,
        "totalPnL": perf.total_pnl,
        "profitFactor": perf.profit_factor,
    }


def generate_symbol_recommendations(
    symbol_data: List[SymbolPerformance],
) -> List[SymbolRecommendation]:
    """
    Recommendations from per-symbol performance.

    focus: up to 3 symbols with >= 10 trades and positive expectancy, best first
    avoid: up to 3 symbols with >= 10 trades and negative expectancy, worst first
    inefficient: symbols with >= 15 trades averaging under $5 either way
    """
    if not symbol_data:
        return []

    recommendations: List[SymbolRecommendation] = []
    by_expectancy = sorted(symbol_data, key=lambda s: s.expectancy, reverse=True)

    top = [s for s in by_expectancy if s.trades >= 10 and s.expectancy > 0][:3]
    if top:
        names = [s.symbol for s in top]
        recommendations.append(
            SymbolRecommendation(
                type="focus",
                severity="positive",
                title="Focus on These Pairs",
                symbols=names,
                message=(
                    f"{', '.join(names)} show strong positive expectancy. "
                    "Focus your trading here."
                ),
                details=[_detail(s) for s in top],
            )
        )

    losing = [s for s in by_expectancy if s.trades >= 10 and s.expectancy < 0]
    worst = list(reversed(losing[-3:]))
    if worst:
        names = [s.symbol for s in worst]
        recommendations.append(
            SymbolRecommendation(
                type="avoid",
                severity="high",
                title="Avoid These Pairs",
                symbols=names,
                message=f"{', '.join(names)} consistently lose money. Stop trading them.",
                details=[_detail(s) for s in worst],
            )
        )

    inefficient = [s for s in symbol_data if s.trades >= 15 and abs(s.avg_pnl) < 5]
    if inefficient:
        names = [s.symbol for s in inefficient]
        recommendations.append(
            SymbolRecommendation(
                type="inefficient",
                severity="medium",
                title="High Activity, Low Returns",
                symbols=names,
                message=(
                    f"You trade {', '.join(names)} frequently but with minimal profit. "
                    "Consider larger positions or avoid."
                ),
                details=[
                    {
                        "symbol": s.symbol,
                        "trades": s.trades,
                        "avgPnL": s.avg_pnl,
                        "totalPnL": s.total_pnl,
                    }
                    for s in inefficient
                ],
            )
        )

    return recommendations


def rank_symbols(symbol_data: List[SymbolPerformance]) -> List[RankedSymbol]:
    """
    Rank symbols with at least 5 trades on a 0-100 scale.

    Components:
        win rate: up to 30 points
        profit factor (capped at 3): up to 25 points
        expectancy (capped at $10): up to 25 points
        total P&L relative to the largest absolute P&L: +/- 20 points
    """
    if not symbol_data:
        return []

    max_pnl = max(abs(s.total_pnl) for s in symbol_data)
    scored = []

    for perf in symbol_data:
        if perf.trades < 5:
            continue

        score = perf.win_rate / 100 * 30
        score += min(perf.profit_factor / 3, 1) * 25
        score += float(np.clip(perf.expectancy / 10, 0, 1)) * 25

        pnl_score = abs(perf.total_pnl) / max_pnl * 20 if max_pnl > 0 else 0.0
        score += pnl_score if perf.total_pnl > 0 else -pnl_score

        scored.append((perf, float(np.clip(score, 0, 100))))

    scored.sort(key=lambda item: item[1], reverse=True)
    return [
        RankedSymbol(performance=perf, score=score, rank=i + 1)
        for i, (perf, score) in enumerate(scored)
    ]


def compare_symbols(
    symbol1: str,
    symbol2: str,
    symbol_data: List[SymbolPerformance],
) -> Optional[Dict[str, Any]]:
    """Head-to-head comparison; None if either symbol is missing."""
    s1 = next((s for s in symbol_data if s.symbol == symbol1), None)
    s2 = next((s for s in symbol_data if s.symbol == symbol2), None)
    if s1 is None or s2 is None:
        return None

    comparison = {}
    for key, attr in (
        ("winRate", "win_rate"),
        ("profitFactor", "profit_factor"),
        ("totalPnL", "total_pnl"),
        ("expectancy", "expectancy"),
    ):
        v1, v2 = getattr(s1, attr), getattr(s2, attr)
        comparison[key] = {
            "winner": symbol1 if v1 > v2 else symbol2,
            "diff": abs(v1 - v2),
        }

    return {"symbol1": symbol1, "symbol2": symbol2, "comparison": comparison}


def analyze_symbols(trades: List[Trade]) -> SymbolAnalysis:
    """Run the full symbol analysis."""
    if not trades:
        return SymbolAnalysis()

    performance = analyze_symbol_performance(trades)
    rankings = rank_symbols(performance)
    logger.debug(f"Analyzed {len(performance)} symbols, {len(rankings)} ranked")

    return SymbolAnalysis(
        symbol_performance=performance,
        recommendations=generate_symbol_recommendations(performance),
        rankings=rankings,
        summary={
            "totalSymbols": len(performance),
            "profitableSymbols": sum(1 for s in performance if s.total_pnl > 0),
            "bestSymbol": rankings[0].to_dict() if rankings else None,
            "worstSymbol": rankings[-1].to_dict() if rankings else None,
        },
    )
