"""Tests for cna_quality.qualitymodel.factors and catalog modules."""

import pytest

from cna_quality.config import RuleThresholds
from cna_quality.exceptions import DuplicateFactorError, QualityModelError, UnknownFactorError
from cna_quality.measures import get_measure_names
from cna_quality.qualitymodel import (
    IMPACTS,
    MEASURE_CATALOG,
    FactorGraph,
    Impact,
    ImpactEffect,
    ProductFactor,
    QualityAspect,
    build_quality_model,
    get_measure_definition,
    validate_catalog,
)
from cna_quality.qualitymodel.levels import EvaluationLevel


def _graph(impacts):
    return FactorGraph(
        product_factors=[ProductFactor("pf1", "PF 1"), ProductFactor("pf2", "PF 2")],
        quality_aspects=[QualityAspect("qa1", "QA 1", "reliability")],
        impacts=impacts,
    )


class TestFactorGraph:
    """Tests for FactorGraph construction and queries."""

    def test_impacts_attach_to_targets(self):
        graph = _graph([Impact("pf1", "qa1"), Impact("pf2", "qa1", ImpactEffect.NEGATIVE)])
        assert graph.predecessors("qa1") == ["pf1", "pf2"]
        assert graph.successors("pf1") == ["qa1"]
        assert graph.successors("qa1") == []
        assert len(graph) == 3

    def test_product_factors_may_impact_each_other(self):
        graph = _graph([Impact("pf1", "pf2"), Impact("pf2", "pf1")])
        assert graph.predecessors("pf1") == ["pf2"]

    def test_duplicate_factor_id(self):
        with pytest.raises(DuplicateFactorError):
            FactorGraph(
                product_factors=[ProductFactor("x", "X")],
                quality_aspects=[QualityAspect("x", "X", "security")],
                impacts=[],
            )

    def test_unknown_source(self):
        with pytest.raises(UnknownFactorError) as exc_info:
            _graph([Impact("missing", "qa1")])
        assert exc_info.value.factor_id == "missing"

    def test_unknown_target(self):
        with pytest.raises(UnknownFactorError) as exc_info:
            _graph([Impact("pf1", "missing")])
        assert "pf1 -> missing" in str(exc_info.value)

    def test_impact_from_quality_aspect(self):
        with pytest.raises(QualityModelError):
            _graph([Impact("qa1", "pf1")])

    def test_unknown_factor_lookup(self):
        with pytest.raises(UnknownFactorError):
            _graph([]).get_factor("nope")

    def test_rebuilding_resets_incoming_impacts(self):
        factor = ProductFactor("pf1", "PF 1")
        aspect = QualityAspect("qa1", "QA 1", "reliability")
        FactorGraph([factor], [aspect], [Impact("pf1", "qa1")])
        FactorGraph([factor], [aspect], [Impact("pf1", "qa1")])
        assert len(aspect.incoming_impacts) == 1

    def test_negative_impact_flips_contribution(self):
        impact = Impact("pf1", "qa1", ImpactEffect.NEGATIVE)
        assert impact.contribution(EvaluationLevel.POSITIVE) is EvaluationLevel.NEGATIVE
        assert impact.contribution(EvaluationLevel.UNKNOWN) is EvaluationLevel.UNKNOWN


class TestQualityModelCatalog:
    """Tests for the built-in quality model."""

    def test_shape(self):
        graph = build_quality_model()
        assert len(graph.product_factors) == 15
        assert len(graph.quality_aspects) == 12
        assert len(graph.impacts) == len(IMPACTS) == 36

    def test_high_level_aspects(self):
        grouped = build_quality_model().aspects_by_high_level_aspect()
        assert set(grouped) == {
            "reliability",
            "maintainability",
            "security",
            "performanceEfficiency",
        }
        assert [a.id for a in grouped["security"]] == ["confidentiality", "integrity"]

    def test_every_aspect_is_impacted(self):
        graph = build_quality_model()
        for aspect_id in graph.quality_aspects:
            assert graph.predecessors(aspect_id), aspect_id

    def test_rule_measures_are_registered(self):
        registered = set(get_measure_names())
        for factor in build_quality_model().product_factors.values():
            assert set(factor.measures) <= registered, factor.id

    def test_factors_without_rule_aggregate(self):
        graph = build_quality_model()
        assert graph.product_factors["physicalDataDistribution"].rule is None
        assert graph.predecessors("physicalDataDistribution") == [
            "storageReplication",
            "dataSharding",
        ]

    def test_each_build_is_independent(self):
        first = build_quality_model()
        second = build_quality_model(RuleThresholds(high_ratio=0.9))
        assert first.product_factors["statelessness"] is not second.product_factors["statelessness"]

    def test_catalog_matches_registries(self):
        assert validate_catalog() == []
        assert {m.id for m in MEASURE_CATALOG} == set(get_measure_names())

    def test_measure_definition_lookup(self):
        definition = get_measure_definition("requestTraceLength")
        assert definition.name == "Request Trace Length"
        assert definition.calculation
        with pytest.raises(KeyError):
            get_measure_definition("linesOfCode")
