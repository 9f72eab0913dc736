"""
Insight Prioritization Engine

Scores insights by financial impact, actionability, surprise and evidence,
then sorts them (weaknesses first) and groups them into display buckets.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..core.models import AnalyticsSnapshot
from .models import (
    ActionDifficulty,
    Insight,
    InsightCategory,
    InsightType,
    PrioritizedInsights,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoringPolicy:
    """Additive scoring weights. Scores are clamped to [min_score, max_score]."""

    # Financial impact: (savings strictly above, points), checked in order
    savings_tiers: Tuple[Tuple[float, int], ...] = (
        (1000, 40),
        (500, 30),
        (100, 20),
        (0, 10),
    )

    # Type adjustments
    weakness_bonus: int = 15
    actionable_weakness_bonus: int = 10
    passive_strength_penalty: int = -10

    # Actionability
    easy_points: int = 30
    medium_points: int = 20
    hard_points: int = 10
    # (at most this many steps, points) when no difficulty is given
    step_tiers: Tuple[Tuple[int, int], ...] = ((2, 25), (4, 15))
    many_steps_points: int = 10

    # Surprise
    counter_intuitive_points: int = 20
    expected_points: int = 5
    surprise_points: int = 15
    surprise_markers: Tuple[str, ...] = ("3x", "4x", "2x", "never seen", "surprising")

    # Evidence: (at least this many data points, points)
    evidence_tiers: Tuple[Tuple[int, int], ...] = ((20, 10), (10, 7), (5, 4))
    any_evidence_points: int = 2

    impact_multiplier: int = 2
    risk_weakness_bonus: int = 5
    opportunity_strength_bonus: int = 3

    min_score: float = 0
    max_score: float = 100

    def difficulty_points(self, difficulty: ActionDifficulty) -> int:
        return {
            ActionDifficulty.EASY: self.easy_points,
            ActionDifficulty.MEDIUM: self.medium_points,
            ActionDifficulty.HARD: self.hard_points,
        }[difficulty]


DEFAULT_SCORING_POLICY = ScoringPolicy()

CRITICAL_SCORE = 80
BUCKET_SCORE = 60
BUCKET_SIZE = 3


def _actionability(insight: Insight, policy: ScoringPolicy) -> int:
    if insight.action_difficulty is not None:
        return policy.difficulty_points(insight.action_difficulty)

    steps = insight.steps
    if not steps:
        return policy.medium_points
    for max_steps, points in policy.step_tiers:
        if len(steps) <= max_steps:
            return points
    return policy.many_steps_points


def calculate_insight_score(
    insight: Insight,
    policy: ScoringPolicy = DEFAULT_SCORING_POLICY,
) -> float:
    """
    Score an insight from 0 to 100.

    Args:
        insight: Insight to score (category as supplied, not inferred)
        policy: Scoring weights

    Returns:
        Clamped score
    """
    score = 0
    savings = insight.potential_savings

    for floor, points in policy.savings_tiers:
        if savings > floor:
            score += points
            break

    if insight.type is InsightType.WEAKNESS:
        score += policy.weakness_bonus
        if savings > 0:
            score += policy.actionable_weakness_bonus
    elif insight.type is InsightType.STRENGTH and savings == 0:
        score += policy.passive_strength_penalty

    score += _actionability(insight, policy)

    if insight.is_counter_intuitive is True:
        score += policy.counter_intuitive_points
    elif insight.is_counter_intuitive is False:
        score += policy.expected_points

    if any(marker in insight.message for marker in policy.surprise_markers):
        score += policy.surprise_points

    evidence = insight.evidence
    for floor, points in policy.evidence_tiers:
        if evidence >= floor:
            score += points
            break
    else:
        if evidence > 0:
            score += policy.any_evidence_points

    if insight.impact:
        score += insight.impact * policy.impact_multiplier

    if (
        insight.category is InsightCategory.RISK_MANAGEMENT
        and insight.type is InsightType.WEAKNESS
    ):
        score += policy.risk_weakness_bonus
    if (
        insight.category is InsightCategory.OPPORTUNITY
        and insight.type is InsightType.STRENGTH
    ):
        score += policy.opportunity_strength_bonus

    return max(policy.min_score, min(policy.max_score, score))


def categorize_insight(insight: Insight) -> InsightCategory:
    """Infer a category from the title and message wording."""
    title = insight.title.lower()
    message = insight.message.lower()

    if "loss" in title or "stop" in title or "loss" in message:
        return InsightCategory.RISK_MANAGEMENT
    if "fee" in title or "fee" in message or "commission" in message:
        return InsightCategory.OPTIMIZATION
    if "time" in title or "hour" in title or "time" in message:
        return InsightCategory.TIMING
    if "symbol" in title or "symbol" in message or "focus" in message:
        return InsightCategory.OPPORTUNITY
    if "hold" in title or "holding" in message or "patience" in message:
        return InsightCategory.BEHAVIORAL
    if "win rate" in title or "win rate" in message:
        return InsightCategory.PERFORMANCE

    if insight.type is InsightType.WEAKNESS:
        return InsightCategory.BEHAVIORAL
    return InsightCategory.OPPORTUNITY


def sort_weakness_first(insights: List[Insight]) -> List[Insight]:
    """Weaknesses ahead of everything else, then score descending (stable)."""
    return sorted(
        insights,
        key=lambda i: (i.type is not InsightType.WEAKNESS, -(i.score or 0)),
    )


def prioritize_insights(
    insights: List[Insight],
    analytics: Optional[AnalyticsSnapshot] = None,
    policy: ScoringPolicy = DEFAULT_SCORING_POLICY,
) -> PrioritizedInsights:
    """
    Score, sort and bucket insights.

    Buckets overlap and hold at most three insights each:
        critical: score >= 80
        opportunities: opportunity, strength or recommendation type, or
            opportunity category, with score >= 60
        behavioral: behavioral category or weakness type, score >= 60

    Args:
        insights: Candidate insights
        analytics: Snapshot of the pass (accepted for call-site symmetry)
        policy: Scoring weights

    Returns:
        PrioritizedInsights; all buckets empty for empty input
    """
    if not insights:
        return PrioritizedInsights()

    scored = [
        insight.evolve(
            score=calculate_insight_score(insight, policy),
            category=insight.category or categorize_insight(insight),
        )
        for insight in insights
    ]
    ordered = sort_weakness_first(scored)

    opportunity_types = (
        InsightType.OPPORTUNITY,
        InsightType.STRENGTH,
        InsightType.RECOMMENDATION,
    )
    critical = [i for i in ordered if i.score >= CRITICAL_SCORE]
    opportunities = [
        i for i in ordered
        if (i.type in opportunity_types or i.category is InsightCategory.OPPORTUNITY)
        and i.score >= BUCKET_SCORE
    ]
    behavioral = [
        i for i in ordered
        if (i.category is InsightCategory.BEHAVIORAL or i.type is InsightType.WEAKNESS)
        and i.score >= BUCKET_SCORE
    ]

    logger.debug(
        f"Prioritized {len(ordered)} insights: {len(critical)} critical, "
        f"{len(opportunities)} opportunities, {len(behavioral)} behavioral"
    )

    return PrioritizedInsights(
        critical=critical[:BUCKET_SIZE],
        opportunities=opportunities[:BUCKET_SIZE],
        behavioral=behavioral[:BUCKET_SIZE],
        all_scored=ordered,
    )
