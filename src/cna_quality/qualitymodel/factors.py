"""The factor graph: product factors, quality aspects and the impacts between them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, Iterable, Mapping, Optional, Union

from ..exceptions import DuplicateFactorError, QualityModelError, UnknownFactorError
from .levels import EvaluationLevel

if TYPE_CHECKING:
    from ..measures import CalculatedMeasures
    from .results import FactorEvaluationResult


class ImpactEffect(Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"


EvaluationRule = Callable[
    ["Factor", "CalculatedMeasures", Mapping[str, "FactorEvaluationResult"]],
    "FactorEvaluationResult",
]


@dataclass(frozen=True)
class Impact:
    """Directed, signed edge: the source product factor influences the target factor."""

    source_id: str
    target_id: str
    effect: ImpactEffect = ImpactEffect.POSITIVE

    def contribution(self, source_level: EvaluationLevel) -> EvaluationLevel:
        """The source's verdict as seen by the target."""
        if self.effect is ImpactEffect.NEGATIVE:
            return source_level.flipped()
        return source_level


@dataclass
class ProductFactor:
    """An architectural quality concern evaluated from measures and other product factors.

    A factor without a rule is evaluated by aggregating its incoming impacts.
    """

    id: str
    name: str
    description: str = ""
    rule: Optional[EvaluationRule] = field(default=None, repr=False)
    measures: tuple[str, ...] = ()
    incoming_impacts: list[Impact] = field(default_factory=list, repr=False)

    factor_type = "productFactor"


@dataclass
class QualityAspect:
    """A top-level quality concern, grouped under an ISO 25010 high-level aspect."""

    id: str
    name: str
    high_level_aspect: str
    description: str = ""
    rule: Optional[EvaluationRule] = field(default=None, repr=False)
    incoming_impacts: list[Impact] = field(default_factory=list, repr=False)

    factor_type = "qualityAspect"


Factor = Union[ProductFactor, QualityAspect]


class FactorGraph:
    """Static graph of factors wired by impacts.

    Construction attaches every impact to its target and fails on dangling
    references or duplicate ids, so a malformed catalog is rejected at load
    time. Cycles among product factors are allowed.
    """

    def __init__(
        self,
        product_factors: Iterable[ProductFactor],
        quality_aspects: Iterable[QualityAspect],
        impacts: Iterable[Impact],
    ):
        self.product_factors: dict[str, ProductFactor] = {}
        self.quality_aspects: dict[str, QualityAspect] = {}
        self.impacts: list[Impact] = []

        for factor in product_factors:
            self._check_new_id(factor.id)
            factor.incoming_impacts = []
            self.product_factors[factor.id] = factor
        for aspect in quality_aspects:
            self._check_new_id(aspect.id)
            aspect.incoming_impacts = []
            self.quality_aspects[aspect.id] = aspect

        for impact in impacts:
            self._attach(impact)

    def _check_new_id(self, factor_id: str) -> None:
        if factor_id in self.product_factors or factor_id in self.quality_aspects:
            raise DuplicateFactorError(factor_id)

    def _attach(self, impact: Impact) -> None:
        label = f"impact {impact.source_id} -> {impact.target_id}"
        if impact.source_id not in self.product_factors:
            if impact.source_id in self.quality_aspects:
                raise QualityModelError(
                    "Impacts must originate from a product factor",
                    details={"impact": label},
                )
            raise UnknownFactorError(impact.source_id, referenced_by=label)

        target = self.get_factor(impact.target_id, referenced_by=label)
        target.incoming_impacts.append(impact)
        self.impacts.append(impact)

    def get_factor(self, factor_id: str, referenced_by: Optional[str] = None) -> Factor:
        if factor_id in self.product_factors:
            return self.product_factors[factor_id]
        if factor_id in self.quality_aspects:
            return self.quality_aspects[factor_id]
        raise UnknownFactorError(factor_id, referenced_by=referenced_by)

    def predecessors(self, factor_id: str) -> list[str]:
        """Ids of the product factors impacting the factor, in impact order."""
        return [impact.source_id for impact in self.get_factor(factor_id).incoming_impacts]

    def successors(self, factor_id: str) -> list[str]:
        self.get_factor(factor_id)
        return [impact.target_id for impact in self.impacts if impact.source_id == factor_id]

    def aspects_by_high_level_aspect(self) -> dict[str, list[QualityAspect]]:
        grouped: dict[str, list[QualityAspect]] = {}
        for aspect in self.quality_aspects.values():
            grouped.setdefault(aspect.high_level_aspect, []).append(aspect)
        return grouped

    def __len__(self) -> int:
        return len(self.product_factors) + len(self.quality_aspects)
