"""Derived session metrics: hypothesis confidence and reasoning efficiency."""

from reasoning_engine.models.thought import HypothesisVerification, ThoughtStep

BASE_CONFIDENCE = {
    "supported": 0.8,
    "refuted": 0.2,
    "needs_more_data": 0.5,
    "inconclusive": 0.5,
}

EVIDENCE_BOOST_PER_ITEM = 0.1
MAX_EVIDENCE_MULTIPLIER = 1.2

# Plans are produced in one pass, so planning mode reports a fixed efficiency
PLANNING_EFFICIENCY = 0.9


def hypothesis_confidence(verification: HypothesisVerification) -> float:
    """Confidence in a verified hypothesis.

    Base value by conclusion, scaled by up to 20% for supporting evidence
    (10% per evidence item), clamped to [0, 1].
    """
    base = BASE_CONFIDENCE.get(verification.conclusion, 0.5)
    multiplier = min(
        MAX_EVIDENCE_MULTIPLIER,
        1 + EVIDENCE_BOOST_PER_ITEM * len(verification.evidence),
    )
    return min(1.0, max(0.0, base * multiplier))


def reasoning_efficiency(thoughts: list[ThoughtStep], total_steps: int) -> float:
    """Share of steps that did not repeat the step before them.

    This is a non-repetition proxy, not a measure of semantic progress.
    The first thought always counts as progressive.
    """
    if total_steps <= 0:
        return 0.0

    progressive = sum(
        1
        for index, step in enumerate(thoughts)
        if index == 0 or step.thought != thoughts[index - 1].thought
    )
    return min(1.0, max(0.0, progressive / total_steps))
