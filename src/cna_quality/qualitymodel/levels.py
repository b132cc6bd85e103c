"""Qualitative evaluation levels and the aggregation of conflicting impacts.

Aggregation precedence, applied to the contributions of a factor's
incoming impacts (each already sign-adjusted by its impact effect):

    1. UNKNOWN contributions are dropped. Nothing left -> UNKNOWN.
    2. Contributions vote by direction: positive, neutral, negative.
    3. The direction with the most votes wins.
    4. A tie is broken by magnitude: the tied direction with the larger
       sum of |score| wins (neutral has magnitude 0, so any tie between
       neutral and a direction goes to the direction).
    5. Positive and negative still tied on votes and magnitude -> NEUTRAL.
    6. A winning direction is STRONGLY_* if its strong votes are at least
       as many as its plain votes, otherwise the plain level.

Every combination of inputs maps to exactly one level.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Optional


class EvaluationLevel(Enum):
    """Six-valued qualitative verdict."""

    STRONGLY_POSITIVE = "++"
    POSITIVE = "+"
    NEUTRAL = "o"
    NEGATIVE = "-"
    STRONGLY_NEGATIVE = "--"
    UNKNOWN = "n/a"

    @property
    def score(self) -> Optional[int]:
        """Signed strength in [-2, 2]; None for UNKNOWN."""
        return _SCORES[self]

    @property
    def is_known(self) -> bool:
        return self is not EvaluationLevel.UNKNOWN

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").lower()

    def flipped(self) -> EvaluationLevel:
        """The opposite verdict; NEUTRAL and UNKNOWN stay as they are."""
        score = self.score
        if score is None:
            return self
        return from_score(-score)


_SCORES: dict[EvaluationLevel, Optional[int]] = {
    EvaluationLevel.STRONGLY_POSITIVE: 2,
    EvaluationLevel.POSITIVE: 1,
    EvaluationLevel.NEUTRAL: 0,
    EvaluationLevel.NEGATIVE: -1,
    EvaluationLevel.STRONGLY_NEGATIVE: -2,
    EvaluationLevel.UNKNOWN: None,
}

_BY_SCORE: dict[int, EvaluationLevel] = {
    score: level for level, score in _SCORES.items() if score is not None
}


def from_score(score: int) -> EvaluationLevel:
    """Level for a score, clamped to [-2, 2]."""
    return _BY_SCORE[max(-2, min(2, score))]


def aggregate_levels(levels: Iterable[EvaluationLevel]) -> EvaluationLevel:
    """Combine contributions into one verdict using the precedence above."""
    known = [level.score for level in levels if level.score is not None]
    if not known:
        return EvaluationLevel.UNKNOWN

    positive = [s for s in known if s > 0]
    negative = [s for s in known if s < 0]
    neutral_votes = len(known) - len(positive) - len(negative)

    # (votes, magnitude, direction)
    candidates = [
        (len(positive), sum(positive), 1),
        (len(negative), -sum(negative), -1),
        (neutral_votes, 0, 0),
    ]
    best = max((votes, magnitude) for votes, magnitude, _ in candidates)
    winners = [d for votes, magnitude, d in candidates if (votes, magnitude) == best]

    if len(winners) != 1 or winners[0] == 0:
        return EvaluationLevel.NEUTRAL

    scores = positive if winners[0] > 0 else negative
    strong = sum(1 for s in scores if abs(s) == 2)
    plain = len(scores) - strong
    return from_score(winners[0] * (2 if strong >= plain else 1))


def describe_contributions(levels: Iterable[EvaluationLevel]) -> str:
    """Short vote summary used in reasoning strings, e.g. "2 positive, 1 unknown"."""
    counts: dict[str, int] = {}
    for level in levels:
        score = level.score
        if score is None:
            key = "unknown"
        elif score > 0:
            key = "positive"
        elif score < 0:
            key = "negative"
        else:
            key = "neutral"
        counts[key] = counts.get(key, 0) + 1

    order = ("positive", "neutral", "negative", "unknown")
    return ", ".join(f"{counts[k]} {k}" for k in order if k in counts) or "no contributions"
