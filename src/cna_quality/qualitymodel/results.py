"""Evaluation outputs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..measures import CalculatedMeasures
from .levels import EvaluationLevel


@dataclass(frozen=True)
class FactorEvaluationResult:
    """Verdict for one product factor or quality aspect."""

    factor_id: str
    level: EvaluationLevel
    reasoning: str = ""

    @property
    def is_known(self) -> bool:
        return self.level.is_known

    def to_dict(self) -> dict[str, Any]:
        return {"factor_id": self.factor_id, "level": self.level.value, "reasoning": self.reasoning}


def unknown(factor_id: str, reasoning: str) -> FactorEvaluationResult:
    return FactorEvaluationResult(factor_id, EvaluationLevel.UNKNOWN, reasoning)


@dataclass
class EvaluationResult:
    """Everything one evaluation run produced.

    Every factor of the quality model has an entry; factors that could not
    be evaluated carry EvaluationLevel.UNKNOWN rather than being omitted.
    """

    system_id: str
    measures: CalculatedMeasures
    product_factors: dict[str, FactorEvaluationResult] = field(default_factory=dict)
    quality_aspects: dict[str, FactorEvaluationResult] = field(default_factory=dict)

    def factor(self, factor_id: str) -> FactorEvaluationResult:
        if factor_id in self.product_factors:
            return self.product_factors[factor_id]
        return self.quality_aspects[factor_id]

    def to_dict(self) -> dict[str, Any]:
        return {
            "system_id": self.system_id,
            "measures": self.measures.to_dict(),
            "product_factors": {k: v.to_dict() for k, v in self.product_factors.items()},
            "quality_aspects": {k: v.to_dict() for k, v in self.quality_aspects.items()},
        }
