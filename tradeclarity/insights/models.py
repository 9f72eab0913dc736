"""
Insight Models

The Insight value object and the closed vocabularies shared by the
generators, the prioritization engine and display enhancement.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..core.errors import InsightValidationError


# =============================================================================
# Enums
# =============================================================================


class InsightType(Enum):
    """What kind of finding an insight is."""

    WEAKNESS = "weakness"
    STRENGTH = "strength"
    OPPORTUNITY = "opportunity"
    RECOMMENDATION = "recommendation"
    BENCHMARK = "benchmark"
    EDUCATIONAL = "educational"
    UNLOCK = "unlock"


class InsightCategory(Enum):
    """Area of trading an insight is about."""

    RISK_MANAGEMENT = "risk_management"
    OPTIMIZATION = "optimization"
    TIMING = "timing"
    OPPORTUNITY = "opportunity"
    BEHAVIORAL = "behavioral"
    PERFORMANCE = "performance"
    EDUCATION = "education"
    PROGRESSION = "progression"


class Confidence(Enum):
    """Reliability label derived from sample size."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ActionDifficulty(Enum):
    """Effort needed to act on an insight."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Urgency(Enum):
    """Display urgency derived from score."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class VisualPriority(Enum):
    """Card treatment derived from score."""

    HERO = "hero"
    FEATURED = "featured"
    STANDARD = "standard"


def confidence_from_sample(data_points: int) -> Confidence:
    """High from 10 data points, medium from 5, low below."""
    if data_points >= 10:
        return Confidence.HIGH
    if data_points >= 5:
        return Confidence.MEDIUM
    return Confidence.LOW


# =============================================================================
# Data Classes
# =============================================================================


@dataclass(frozen=True)
class InsightAction:
    """Recommended next step."""

    title: str
    steps: Tuple[str, ...] = ()
    expected_impact: str = ""

    def __post_init__(self):
        object.__setattr__(self, "steps", tuple(self.steps))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "steps": list(self.steps),
            "expectedImpact": self.expected_impact,
        }


@dataclass(frozen=True)
class Insight:
    """
    A single scored, human-readable finding.

    Insights are immutable. Scoring and display decoration return new
    instances through ``evolve``.
    """

    type: InsightType
    title: str
    message: str
    category: Optional[InsightCategory] = None
    summary: str = ""
    potential_savings: float = 0.0
    impact: Optional[int] = None
    data_points: Optional[int] = None
    affected_trades: Optional[int] = None
    confidence: Optional[Confidence] = None
    action: Optional[InsightAction] = None
    action_difficulty: Optional[ActionDifficulty] = None
    is_counter_intuitive: Optional[bool] = None
    metric_name: Optional[str] = None
    source: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    # Assigned by the prioritization engine
    score: Optional[float] = None

    # Assigned by display enhancement
    urgency: Optional[Urgency] = None
    benchmark: Optional[Dict[str, Any]] = None
    visual_priority: Optional[VisualPriority] = None
    formatted_savings: Optional[str] = None
    formatted_difficulty: Optional[str] = None

    def __post_init__(self):
        if not self.message or not self.message.strip():
            raise InsightValidationError(
                detail=f"Insight '{self.title}' has an empty message",
                field="message",
            )
        if self.impact is not None and not 1 <= self.impact <= 4:
            raise InsightValidationError(
                detail=f"Insight impact must be between 1 and 4, got {self.impact}",
                field="impact",
            )

        object.__setattr__(self, "potential_savings", max(0.0, float(self.potential_savings or 0)))
        if self.confidence is None:
            object.__setattr__(self, "confidence", confidence_from_sample(self.evidence))

    @property
    def evidence(self) -> int:
        """Sample size backing the claim."""
        return self.data_points or self.affected_trades or 0

    @property
    def steps(self) -> Tuple[str, ...]:
        return self.action.steps if self.action else ()

    def evolve(self, **changes: Any) -> "Insight":
        """Copy with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase shape consumed by the dashboard."""
        result = {
            "type": self.type.value,
            "category": self.category.value if self.category else None,
            "title": self.title,
            "message": self.message,
            "summary": self.summary,
            "potentialSavings": self.potential_savings,
            "impact": self.impact,
            "dataPoints": self.data_points,
            "affectedTrades": self.affected_trades,
            "confidence": self.confidence.value if self.confidence else None,
            "action": self.action.to_dict() if self.action else None,
            "actionDifficulty": (
                self.action_difficulty.value if self.action_difficulty else None
            ),
            "isCounterIntuitive": self.is_counter_intuitive,
            "metricName": self.metric_name,
            "source": self.source,
            "score": self.score,
            "urgency": self.urgency.value if self.urgency else None,
            "benchmark": self.benchmark,
            "visualPriority": self.visual_priority.value if self.visual_priority else None,
            "formattedSavings": self.formatted_savings,
            "formattedDifficulty": self.formatted_difficulty,
        }
        for key, value in self.metadata.items():
            result.setdefault(key, value)
        return result


@dataclass(frozen=True)
class UnlockTier:
    """Trade-count band gating which insights are available."""

    name: str
    min_trades: int
    max_trades: Optional[int]
    features: Tuple[str, ...]

    def contains(self, trade_count: int) -> bool:
        """Min inclusive, max exclusive; the last tier is open-ended."""
        if trade_count < self.min_trades:
            return False
        return self.max_trades is None or trade_count < self.max_trades

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "name": self.name,
            "minTrades": self.min_trades,
            "features": list(self.features),
        }
        if self.max_trades is not None:
            result["maxTrades"] = self.max_trades
        return result


@dataclass
class PrioritizedInsights:
    """Scored insights, sorted and bucketed."""

    critical: List[Insight] = field(default_factory=list)
    opportunities: List[Insight] = field(default_factory=list)
    behavioral: List[Insight] = field(default_factory=list)
    all_scored: List[Insight] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "critical": [i.to_dict() for i in self.critical],
            "opportunities": [i.to_dict() for i in self.opportunities],
            "behavioral": [i.to_dict() for i in self.behavioral],
            "allScored": [i.to_dict() for i in self.all_scored],
        }


@dataclass
class LowActivityResult:
    """Output of the low-activity generator."""

    insights: List[Insight]
    unlock_tiers: List[UnlockTier]
    current_tier: UnlockTier

    def to_dict(self) -> Dict[str, Any]:
        return {
            "insights": [i.to_dict() for i in self.insights],
            "unlockTiers": [t.to_dict() for t in self.unlock_tiers],
            "currentTier": self.current_tier.to_dict(),
        }


@dataclass
class InsightReport(PrioritizedInsights):
    """
    Output of the value-first generator.

    ``enhanced`` holds ``all_scored`` decorated for display. Tier fields are
    set when the trader is still below the low-activity cutoff.
    """

    enhanced: List[Insight] = field(default_factory=list)
    unlock_tiers: Optional[List[UnlockTier]] = None
    current_tier: Optional[UnlockTier] = None

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["all"] = [i.to_dict() for i in self.enhanced]
        if self.unlock_tiers is not None:
            result["unlockTiers"] = [t.to_dict() for t in self.unlock_tiers]
        if self.current_tier is not None:
            result["currentTier"] = self.current_tier.to_dict()
        return result
