"""The quality model catalog: measure declarations, factors, aspects and impacts.

``build_quality_model()`` assembles a fresh, validated FactorGraph; the
measure declarations are checked against the calculator registries by
``validate_catalog()``.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..config import DEFAULT_THRESHOLDS, RuleThresholds
from ..measures import MeasureScope, validate_registries
from . import rules
from .factors import FactorGraph, Impact, ImpactEffect, ProductFactor, QualityAspect


@dataclass(frozen=True)
class MeasureDefinition:
    id: str
    name: str
    scope: MeasureScope
    description: str
    calculation: str


_S = MeasureScope.SYSTEM
_C = MeasureScope.COMPONENT
_T = MeasureScope.REQUEST_TRACE

MEASURE_CATALOG: tuple[MeasureDefinition, ...] = (
    # System
    MeasureDefinition(
        "serviceReplicationLevel", "Service Replication Level", _S,
        "How many instances of each service are deployed.",
        "Replicas summed per service over its deployment mappings, averaged over deployed services.",
    ),
    MeasureDefinition(
        "storageReplicationLevel", "Storage Replication Level", _S,
        "How many instances of each storage backing service are deployed.",
        "Replicas summed per storage backing service over its deployment mappings, averaged.",
    ),
    MeasureDefinition(
        "externallyAvailableEndpoints", "Externally Available Endpoints", _S,
        "Size of the system's externally reachable surface.",
        "Number of external endpoints over all components.",
    ),
    MeasureDefinition(
        "dataShardingLevel", "Data Sharding Level", _S,
        "How far stored data is partitioned.",
        "Average of the shards property over storage backing services.",
    ),
    MeasureDefinition(
        "ratioOfEndpointsSupportingSsl", "Ratio of Endpoints Supporting SSL", _S,
        "Endpoints using a TLS-capable protocol compared to those that do not.",
        "Endpoints with https or sftp divided by the remaining endpoints; 0 if none remain.",
    ),
    MeasureDefinition(
        "ratioOfExternalEndpointsSupportingTls", "Ratio of External Endpoints Supporting TLS", _S,
        "Share of the external surface protected by TLS.",
        "External endpoints with https or sftp divided by all external endpoints.",
    ),
    MeasureDefinition(
        "ratioOfSecuredLinks", "Ratio of Secured Links", _S,
        "Share of component interactions that are encrypted.",
        "Links targeting a TLS-capable endpoint divided by all links.",
    ),
    MeasureDefinition(
        "dataAggregateScope", "Data Aggregate Scope", _S,
        "Number of domain data concepts in the system.",
        "Number of data aggregates.",
    ),
    MeasureDefinition(
        "ratioOfStatefulComponents", "Ratio of Stateful Components", _S,
        "Share of components keeping state.",
        "Components whose stateless property is false divided by all components.",
    ),
    MeasureDefinition(
        "ratioOfStatelessComponents", "Ratio of Stateless Components", _S,
        "Share of components keeping no state.",
        "Components whose stateless property is true divided by all components.",
    ),
    MeasureDefinition(
        "degreeToWhichComponentsAreLinkedToStatefulComponents",
        "Degree to which components are linked to stateful components", _S,
        "How strongly components depend on stateful components.",
        "Distinct stateful link targets per component, summed and divided by the number of components.",
    ),
    MeasureDefinition(
        "degreeOfAsynchronousCommunication", "Degree of Asynchronous Communication", _S,
        "How much of the offered interface is asynchronous.",
        "Per component with endpoints the share of event endpoints, averaged.",
    ),
    MeasureDefinition(
        "asynchronousCommunicationUtilization", "Asynchronous Communication Utilization", _S,
        "How much of the actual communication is asynchronous.",
        "Links targeting an event endpoint divided by all links.",
    ),
    MeasureDefinition(
        "ratioOfServicesThatProvideHealthEndpoints",
        "Ratio of Services that provide Health Endpoints", _S,
        "Share of services that expose health and readiness checks to an orchestrator.",
        "Services with both a health check and a readiness check endpoint divided by all services.",
    ),
    MeasureDefinition(
        "couplingDegreeBasedOnPotentialCoupling", "Coupling Degree Based on Potential Coupling", _S,
        "How close the component graph is to full connectivity.",
        "(max - S) / (max - min) with S the sum of shortest paths over ordered component pairs, "
        "N - 1 for unreachable pairs, max = N(N-1)(N-1), min = N(N-1); 0 below three components.",
    ),
    MeasureDefinition(
        "interactionDensityBasedOnComponents", "Interaction Density Based on Components", _S,
        "Average amount of interaction per component.",
        "Number of links divided by number of components.",
    ),
    MeasureDefinition(
        "interactionDensityBasedOnLinks", "Interaction Density Based on Links", _S,
        "Actual links compared to the links that could exist.",
        "Number of links divided by (components x endpoints).",
    ),
    MeasureDefinition(
        "systemCouplingBasedOnEndpointEntropy", "System Coupling Based on Endpoint Entropy", _S,
        "Spread of each component's calls over the endpoints it uses.",
        "Sum over components of the base-10 Shannon entropy of outgoing links per target endpoint.",
    ),
    MeasureDefinition(
        "servicesInterdependenceInTheSystem", "Services Interdependence in the System", _S,
        "Pairs of components depending on each other.",
        "Number of component pairs with links in both directions.",
    ),
    MeasureDefinition(
        "aggregateSystemMetricToMeasureServiceCoupling",
        "Aggregate System Metric to measure Service Coupling", _S,
        "Average coupling of a component to the rest of the system.",
        "Per component (dependencies + consumers) / (2 (N - 1)), averaged.",
    ),
    MeasureDefinition(
        "degreeOfCouplingInASystem", "Degree of Coupling in a System", _S,
        "Component dependencies relative to the possible ones.",
        "Distinct component dependencies divided by N (N - 1).",
    ),
    MeasureDefinition(
        "simpleDegreeOfCouplingInASystem", "Simple Degree of Coupling in a System", _S,
        "Component dependencies per component.",
        "Distinct component dependencies divided by N.",
    ),
    MeasureDefinition(
        "directServiceSharing", "Direct Service Sharing", _S,
        "How much components and their endpoints are directly shared by several consumers.",
        "Sum over components with at least two consumers of consumers / (N - 1) plus the share "
        "of their endpoints with at least two consumers, divided by N.",
    ),
    MeasureDefinition(
        "transitivelySharedServices", "Transitively Shared Services", _S,
        "How many consumed components are shared through transitive dependencies.",
        "Components with at least two transitive consumers divided by components with any consumer.",
    ),
    MeasureDefinition(
        "ratioOfSharedNonExternalComponentsToNonExternalComponents",
        "Ratio of Shared Non-External Components to Non-External Components", _S,
        "Sharing among components that are not reachable from outside.",
        "Components without external endpoints consumed by at least two components, "
        "divided by all components without external endpoints.",
    ),
    MeasureDefinition(
        "ratioOfSharedDependenciesOfNonExternalComponentsToPossibleDependencies",
        "Ratio of Shared Dependencies of Non-External Components to Possible Dependencies", _S,
        "Dependencies on shared internal components relative to all possible dependencies.",
        "Consumer count summed over shared components without external endpoints, "
        "divided by (components x components without external endpoints).",
    ),
    # Component
    MeasureDefinition(
        "serviceInterfaceDataCohesion", "Service Interface Data Cohesion", _C,
        "Whether endpoints of a component work on the same data.",
        "Endpoints sharing a data aggregate with another endpoint divided by the data aggregates "
        "the component uses.",
    ),
    MeasureDefinition(
        "serviceInterfaceUsageCohesion", "Service Interface Usage Cohesion", _C,
        "Whether clients use the whole interface of a component.",
        "Links into internal endpoints divided by (internal endpoints x distinct clients).",
    ),
    MeasureDefinition(
        "totalServiceInterfaceCohesion", "Total Service Interface Cohesion", _C,
        "Combined data and usage cohesion.",
        "Mean of the applicable values of data and usage cohesion.",
    ),
    MeasureDefinition(
        "cohesionBetweenEndpointsBasedOnDataAggregateUsage",
        "Cohesion between Endpoints based on Data Aggregate usage", _C,
        "Overlap in data usage between endpoints.",
        "Mean Jaccard similarity of used data aggregates over all endpoint pairs.",
    ),
    MeasureDefinition(
        "numberOfProvidedSynchronousAndAsynchronousEndpoints",
        "Number of provided synchronous and asynchronous endpoints", _C,
        "Size of a component's interface.",
        "Number of internal and external endpoints.",
    ),
    MeasureDefinition(
        "numberOfSynchronousEndpointsOfferedByAService",
        "Number of synchronous endpoints offered by a service", _C,
        "Synchronous part of the interface.",
        "Endpoints of kind query or command.",
    ),
    MeasureDefinition(
        "numberOfAsynchronousEndpointsOfferedByAService",
        "Number of asynchronous endpoints offered by a service", _C,
        "Asynchronous part of the interface.",
        "Endpoints of kind event.",
    ),
    MeasureDefinition(
        "numberOfSynchronousOutgoingLinks", "Number of synchronous outgoing links", _C,
        "Synchronous calls a component makes.",
        "Outgoing links targeting a query or command endpoint.",
    ),
    MeasureDefinition(
        "numberOfAsynchronousOutgoingLinks", "Number of asynchronous outgoing links", _C,
        "Asynchronous calls a component makes.",
        "Outgoing links targeting an event endpoint.",
    ),
    MeasureDefinition(
        "ratioOfAsynchronousOutgoingLinks", "Ratio of asynchronous outgoing links", _C,
        "Share of a component's calls that are asynchronous.",
        "Asynchronous outgoing links divided by all outgoing links.",
    ),
    MeasureDefinition(
        "numberOfLinksPerComponent", "Number of Links per Component", _C,
        "How connected a component is.",
        "Outgoing plus incoming links.",
    ),
    MeasureDefinition(
        "numberOfConsumedEndpoints", "Number of Consumed Endpoints", _C,
        "How much a component depends on others.",
        "Number of outgoing links.",
    ),
    MeasureDefinition(
        "incomingOutgoingRatioOfAComponent", "Incoming and outgoing ratio of a component", _C,
        "Balance between calls made and calls received.",
        "Outgoing links divided by incoming links.",
    ),
    MeasureDefinition(
        "ratioOfOutgoingLinksOfAService", "Ratio of outgoing links of a service", _C,
        "Share of a component's links that it initiates.",
        "Outgoing links divided by all links touching the component, times 100.",
    ),
    # Request trace
    MeasureDefinition(
        "requestTraceLength", "Request Trace Length", _T,
        "How many steps a request takes through the system.",
        "Number of link groups in the trace.",
    ),
    MeasureDefinition(
        "numberOfCyclesInRequestTraces", "Number of Cycles in Request Traces", _T,
        "Whether a request returns to a component it already passed.",
        "Links in step order whose target component was already visited, starting from the "
        "component of the external endpoint.",
    ),
    MeasureDefinition(
        "dataReplicationAlongRequestTrace", "Data Replication along Request Trace", _T,
        "How much data is held by several components along a request.",
        "Strongest usage weight (persistence 0.5, usage 0.25, cached-usage 0.1) summed over "
        "referenced aggregates and touched components, divided by aggregates x components x 0.5.",
    ),
)


def get_measure_definition(measure_id: str) -> MeasureDefinition:
    for measure in MEASURE_CATALOG:
        if measure.id == measure_id:
            return measure
    raise KeyError(f"Unknown measure: {measure_id!r}")


def validate_catalog() -> list[str]:
    """Registry/catalog mismatches; empty when consistent."""
    return validate_registries(MEASURE_CATALOG)


# ── Quality aspects (ISO 25010) ────────────────────────────────────

RELIABILITY = "reliability"
MAINTAINABILITY = "maintainability"
SECURITY = "security"
PERFORMANCE_EFFICIENCY = "performanceEfficiency"


def _quality_aspects() -> list[QualityAspect]:
    return [
        QualityAspect("availability", "Availability", RELIABILITY,
                      "The system is operational and accessible when required."),
        QualityAspect("faultTolerance", "Fault Tolerance", RELIABILITY,
                      "The system operates as intended despite faults of some of its parts."),
        QualityAspect("recoverability", "Recoverability", RELIABILITY,
                      "The system recovers its state and operation after a failure."),
        QualityAspect("modularity", "Modularity", MAINTAINABILITY,
                      "Changes to one component have minimal impact on others."),
        QualityAspect("modifiability", "Modifiability", MAINTAINABILITY,
                      "The system can be changed without introducing defects."),
        QualityAspect("analysability", "Analysability", MAINTAINABILITY,
                      "The impact of changes and the causes of failures can be assessed."),
        QualityAspect("testability", "Testability", MAINTAINABILITY,
                      "Test criteria can be established and tests performed effectively."),
        QualityAspect("confidentiality", "Confidentiality", SECURITY,
                      "Data is accessible only to those authorized."),
        QualityAspect("integrity", "Integrity", SECURITY,
                      "Data cannot be modified without authorization."),
        QualityAspect("timeBehaviour", "Time Behaviour", PERFORMANCE_EFFICIENCY,
                      "Response times and throughput meet requirements."),
        QualityAspect("resourceUtilization", "Resource Utilization", PERFORMANCE_EFFICIENCY,
                      "Amounts of resources used meet requirements."),
        QualityAspect("capacity", "Capacity", PERFORMANCE_EFFICIENCY,
                      "Maximum limits of the system meet requirements."),
    ]


# ── Product factors ────────────────────────────────────────────────


def _product_factors(thresholds: RuleThresholds) -> list[ProductFactor]:
    return [
        ProductFactor(
            "securedCommunication", "Secured Communication",
            "Communication inside and into the system is encrypted.",
            rule=rules.secured_communication_rule(thresholds),
            measures=("ratioOfExternalEndpointsSupportingTls", "ratioOfSecuredLinks"),
        ),
        ProductFactor(
            "serviceReplication", "Service Replication",
            "Services run in several instances.",
            rule=rules.replication_rule("serviceReplicationLevel", thresholds),
            measures=("serviceReplicationLevel",),
        ),
        ProductFactor(
            "storageReplication", "Storage Replication",
            "Storage backing services run in several instances.",
            rule=rules.replication_rule("storageReplicationLevel", thresholds),
            measures=("storageReplicationLevel",),
        ),
        ProductFactor(
            "dataSharding", "Data Sharding",
            "Stored data is partitioned across shards.",
            rule=rules.sharding_rule(thresholds),
            measures=("dataShardingLevel",),
        ),
        ProductFactor(
            "physicalDataDistribution", "Physical Data Distribution",
            "Data is stored redundantly and distributed across nodes.",
        ),
        ProductFactor(
            "statelessness", "Statelessness",
            "Components keep no state between requests.",
            rule=rules.ratio_rule("ratioOfStatelessComponents", thresholds),
            measures=("ratioOfStatelessComponents",),
        ),
        ProductFactor(
            "asynchronousCommunication", "Asynchronous Communication",
            "Components communicate through events rather than blocking calls.",
            rule=rules.ratio_rule("asynchronousCommunicationUtilization", thresholds),
            measures=("asynchronousCommunicationUtilization",),
        ),
        ProductFactor(
            "healthAndReadinessChecks", "Health and Readiness Checks",
            "Services expose endpoints reporting health and readiness.",
            rule=rules.ratio_rule("ratioOfServicesThatProvideHealthEndpoints", thresholds),
            measures=("ratioOfServicesThatProvideHealthEndpoints",),
        ),
        ProductFactor(
            "looseCoupling", "Loose Coupling",
            "Components depend on few other components.",
            rule=rules.coupling_rule(thresholds),
            measures=("couplingDegreeBasedOnPotentialCoupling", "degreeOfCouplingInASystem"),
        ),
        ProductFactor(
            "serviceIndependence", "Service Independence",
            "Components can be developed, deployed and operated independently.",
        ),
        ProductFactor(
            "serviceCohesion", "Service Cohesion",
            "Each component's interface serves one purpose.",
            rule=rules.cohesion_rule(thresholds),
            measures=("totalServiceInterfaceCohesion",),
        ),
        ProductFactor(
            "limitedInteractionDensity", "Limited Interaction Density",
            "Components are involved in a manageable number of links.",
            rule=rules.interaction_density_rule(thresholds),
            measures=("numberOfLinksPerComponent",),
        ),
        ProductFactor(
            "limitedRequestTraceLength", "Limited Request Trace Length",
            "Requests pass through few components.",
            rule=rules.request_trace_length_rule(thresholds),
            measures=("requestTraceLength",),
        ),
        ProductFactor(
            "acyclicCommunication", "Acyclic Communication",
            "Requests never return to a component they already passed.",
            rule=rules.acyclic_communication_rule,
            measures=("numberOfCyclesInRequestTraces",),
        ),
        ProductFactor(
            "limitedDataReplication", "Limited Data Replication",
            "Data is not held redundantly by the components a request passes.",
            rule=rules.data_replication_rule(thresholds),
            measures=("dataReplicationAlongRequestTrace",),
        ),
    ]


# ── Impacts ────────────────────────────────────────────────────────

_POS = ImpactEffect.POSITIVE
_NEG = ImpactEffect.NEGATIVE

IMPACTS: tuple[tuple[str, str, ImpactEffect], ...] = (
    ("securedCommunication", "confidentiality", _POS),
    ("securedCommunication", "integrity", _POS),
    ("securedCommunication", "timeBehaviour", _NEG),
    ("serviceReplication", "availability", _POS),
    ("serviceReplication", "faultTolerance", _POS),
    ("serviceReplication", "resourceUtilization", _NEG),
    ("storageReplication", "physicalDataDistribution", _POS),
    ("dataSharding", "physicalDataDistribution", _POS),
    ("dataSharding", "capacity", _POS),
    ("physicalDataDistribution", "availability", _POS),
    ("physicalDataDistribution", "faultTolerance", _POS),
    ("physicalDataDistribution", "recoverability", _POS),
    ("statelessness", "serviceIndependence", _POS),
    ("statelessness", "capacity", _POS),
    ("statelessness", "recoverability", _POS),
    ("asynchronousCommunication", "serviceIndependence", _POS),
    ("asynchronousCommunication", "faultTolerance", _POS),
    ("asynchronousCommunication", "analysability", _NEG),
    ("healthAndReadinessChecks", "availability", _POS),
    ("healthAndReadinessChecks", "recoverability", _POS),
    ("looseCoupling", "serviceIndependence", _POS),
    ("looseCoupling", "modifiability", _POS),
    ("serviceIndependence", "modularity", _POS),
    ("serviceIndependence", "testability", _POS),
    ("serviceIndependence", "faultTolerance", _POS),
    ("serviceCohesion", "modularity", _POS),
    ("serviceCohesion", "modifiability", _POS),
    ("serviceCohesion", "analysability", _POS),
    ("limitedInteractionDensity", "analysability", _POS),
    ("limitedInteractionDensity", "testability", _POS),
    ("limitedRequestTraceLength", "timeBehaviour", _POS),
    ("limitedRequestTraceLength", "analysability", _POS),
    ("acyclicCommunication", "analysability", _POS),
    ("acyclicCommunication", "faultTolerance", _POS),
    ("limitedDataReplication", "integrity", _POS),
    ("limitedDataReplication", "resourceUtilization", _POS),
)


def build_quality_model(thresholds: RuleThresholds = DEFAULT_THRESHOLDS) -> FactorGraph:
    """A new FactorGraph with rules bound to the given thresholds."""
    return FactorGraph(
        product_factors=_product_factors(thresholds),
        quality_aspects=_quality_aspects(),
        impacts=[Impact(source, target, effect) for source, target, effect in IMPACTS],
    )
