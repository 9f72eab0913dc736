"""
Platform Benchmarks

Percentile thresholds across the platform's traders and the comparator
that places a user's metric against them.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

# Thresholds per metric. For avgLoss higher (less negative) is better; for
# commissionEfficiency the table is kept as published even though lower
# fee ratios are better.
PLATFORM_BENCHMARKS: Dict[str, Dict[str, float]] = {
    "winRate": {
        "bottom25": 35,
        "median": 48,
        "top25": 62,
        "top10": 70,
    },
    "profitFactor": {
        "bottom25": 0.8,
        "median": 1.2,
        "top25": 1.8,
        "top10": 2.5,
    },
    "avgLoss": {
        "bottom25": -85,
        "median": -45,
        "top25": -32,
        "top10": -25,
    },
    "avgWin": {
        "bottom25": 25,
        "median": 45,
        "top25": 75,
        "top10": 120,
    },
    "commissionEfficiency": {
        "bottom25": 0.15,  # 15% of P&L
        "median": 0.08,
        "top25": 0.04,
        "top10": 0.02,
    },
}

METRIC_LABELS = {
    "winRate": "Win Rate",
    "profitFactor": "Profit Factor",
}


@dataclass(frozen=True)
class BenchmarkResult:
    """Where a metric lands against the platform."""

    level: str
    message: str
    percentile: str
    color: str
    gap: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "level": self.level,
            "message": self.message,
            "percentile": self.percentile,
            "color": self.color,
        }
        if self.gap is not None:
            result["gap"] = self.gap
        return result


def get_benchmark_message(user_metric: float, metric_name: str) -> Optional[BenchmarkResult]:
    """
    Compare a metric against the platform thresholds.

    The highest threshold met wins, checked from top10 down. ``gap`` (the
    distance to top25) is set only for the bottom band.

    Args:
        user_metric: The user's value
        metric_name: Key into PLATFORM_BENCHMARKS

    Returns:
        BenchmarkResult, or None for an unknown metric
    """
    benchmarks = PLATFORM_BENCHMARKS.get(metric_name)
    if benchmarks is None:
        return None

    comparison = f"({user_metric:.1f} vs {benchmarks['median']:g} avg)"

    if user_metric >= benchmarks["top10"]:
        return BenchmarkResult("top10", f"🏆 Top 10% {comparison}", "top 10%", "emerald")
    if user_metric >= benchmarks["top25"]:
        return BenchmarkResult("top25", f"📈 Above Average {comparison}", "top 25%", "emerald")
    if user_metric >= benchmarks["median"]:
        return BenchmarkResult("median", f"📊 Average {comparison}", "50th percentile", "slate")
    if user_metric >= benchmarks["bottom25"]:
        return BenchmarkResult(
            "belowMedian", f"📉 Below Average {comparison}", "bottom 50%", "amber"
        )

    gap = benchmarks["top25"] - user_metric
    return BenchmarkResult(
        "bottom25",
        f"⚠️ Bottom 25% {comparison}",
        "bottom 25%",
        "red",
        gap=f"{gap:.1f}",
    )


def calculate_percentile(user_metric: float, metric_name: str) -> Optional[int]:
    """Approximate percentile rank: 95, 75, 50, 25 or 10."""
    benchmarks = PLATFORM_BENCHMARKS.get(metric_name)
    if benchmarks is None:
        return None

    if user_metric >= benchmarks["top10"]:
        return 95
    if user_metric >= benchmarks["top25"]:
        return 75
    if user_metric >= benchmarks["median"]:
        return 50
    if user_metric >= benchmarks["bottom25"]:
        return 25
    return 10


def get_benchmark_comparison_for(metric_name: str, user_value: float) -> Optional[Dict[str, Any]]:
    """User-vs-median comparison card for win rate or profit factor."""
    label = METRIC_LABELS.get(metric_name)
    if label is None:
        return None

    benchmarks = PLATFORM_BENCHMARKS[metric_name]
    if user_value >= benchmarks["top10"]:
        percentile = "top 10%"
    elif user_value >= benchmarks["top25"]:
        percentile = "top 25%"
    elif user_value >= benchmarks["median"]:
        percentile = "above average"
    else:
        percentile = "below average"

    return {
        "metric": label,
        "userValue": user_value,
        "benchmark": benchmarks["median"],
        "percentile": percentile,
    }
