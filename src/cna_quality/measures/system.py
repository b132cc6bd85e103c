"""System-scoped measure calculators.

Each calculator takes a System and returns a number or NOT_APPLICABLE.
Ratio-style measures return NOT_APPLICABLE when their denominator is
structurally zero (no components, no links, no endpoints, ...); counts
return 0.

Component dependencies used by the coupling measures are distinct
component pairs (A, B), A != B, such that A has at least one link to an
endpoint of B.
"""

from collections import Counter, defaultdict

from ..entities import ComponentKind, System
from ..graph import all_pairs_distances, mutual_pairs, transitive_dependents
from ..math import Entropy, Statistics
from .base import NOT_APPLICABLE, MeasureValue, SystemCalculation, ratio
from .features import is_asynchronous, supports_tls


def _dependencies(system: System) -> dict[str, list[str]]:
    """Component id -> distinct other components it links to."""
    return {
        cid: [target for target in targets if target != cid]
        for cid, targets in system.component_adjacency().items()
    }


def _consumers(system: System) -> dict[str, set[str]]:
    """Component id -> distinct other components linking to it."""
    consumers: dict[str, set[str]] = {c.id: set() for c in system.components}
    for source, targets in _dependencies(system).items():
        for target in targets:
            consumers[target].add(source)
    return consumers


def _non_external_component_ids(system: System) -> list[str]:
    return [c.id for c in system.components if not c.external_endpoints]


def _replication_level(system: System, kind: ComponentKind) -> MeasureValue:
    replicas: dict[str, int] = defaultdict(int)
    for mapping in system.deployment_mappings:
        deployed = mapping.deployed_entity
        if getattr(deployed, "component_kind", None) is kind:
            replicas[deployed.id] += mapping.replicas

    if not replicas:
        return NOT_APPLICABLE
    return Statistics.mean(list(replicas.values()))


# ── Replication and distribution ───────────────────────────────────


def service_replication_level(system: System) -> MeasureValue:
    """Average replicas per deployed service, summed over its deployment mappings."""
    return _replication_level(system, ComponentKind.SERVICE)


def storage_replication_level(system: System) -> MeasureValue:
    """Average replicas per deployed storage backing service."""
    return _replication_level(system, ComponentKind.STORAGE_BACKING_SERVICE)


def data_sharding_level(system: System) -> MeasureValue:
    """Average ``shards`` over storage backing services."""
    storages = system.components_of_kind(ComponentKind.STORAGE_BACKING_SERVICE)
    if not storages:
        return NOT_APPLICABLE
    return Statistics.mean([s.property_value("shards", 1) for s in storages])


def data_aggregate_scope(system: System) -> MeasureValue:
    """Number of data aggregates in the system."""
    return len(system.data_aggregates)


# ── Security ───────────────────────────────────────────────────────


def externally_available_endpoints(system: System) -> MeasureValue:
    return len(system.external_endpoints())


def ratio_of_endpoints_supporting_ssl(system: System) -> MeasureValue:
    """k / (|E| - k) for k TLS-capable endpoints among all endpoints E.

    Kept in this non-symmetric form; 0 when every endpoint supports TLS.
    """
    endpoints = system.all_endpoints()
    if not endpoints:
        return NOT_APPLICABLE

    supporting = sum(1 for e in endpoints if supports_tls(e))
    if len(endpoints) - supporting == 0:
        return 0
    return supporting / (len(endpoints) - supporting)


def ratio_of_external_endpoints_supporting_tls(system: System) -> MeasureValue:
    external = system.external_endpoints()
    return ratio(sum(1 for e in external if supports_tls(e)), len(external))


def ratio_of_secured_links(system: System) -> MeasureValue:
    """Share of links whose target endpoint supports TLS."""
    links = system.links
    return ratio(sum(1 for link in links if supports_tls(link.target)), len(links))


# ── State ──────────────────────────────────────────────────────────


def ratio_of_stateful_components(system: System) -> MeasureValue:
    components = system.components
    return ratio(sum(1 for c in components if not c.is_stateless), len(components))


def ratio_of_stateless_components(system: System) -> MeasureValue:
    components = system.components
    return ratio(sum(1 for c in components if c.is_stateless), len(components))


def degree_to_which_components_are_linked_to_stateful_components(system: System) -> MeasureValue:
    """Average number of distinct stateful components each component links to."""
    components = system.components
    if not components:
        return NOT_APPLICABLE

    total = 0
    for component in components:
        stateful_targets = set()
        for link in system.outgoing_links_of_component(component.id):
            target = system.target_component_of_link(link)
            if not target.is_stateless:
                stateful_targets.add(target.id)
        total += len(stateful_targets)
    return total / len(components)


# ── Communication style ────────────────────────────────────────────


def degree_of_asynchronous_communication(system: System) -> MeasureValue:
    """Mean share of asynchronous endpoints over components that have endpoints."""
    degrees = []
    for component in system.components:
        endpoints = component.all_endpoints()
        if endpoints:
            degrees.append(sum(1 for e in endpoints if is_asynchronous(e)) / len(endpoints))

    if not degrees:
        return NOT_APPLICABLE
    return Statistics.mean(degrees)


def asynchronous_communication_utilization(system: System) -> MeasureValue:
    """Share of links targeting an asynchronous endpoint."""
    links = system.links
    return ratio(sum(1 for link in links if is_asynchronous(link.target)), len(links))


def ratio_of_services_that_provide_health_endpoints(system: System) -> MeasureValue:
    """Share of services with both a health check and a readiness check endpoint.

    Only internal endpoints are considered.
    """
    services = system.components_of_kind(ComponentKind.SERVICE)
    providing = 0
    for service in services:
        endpoints = service.endpoints
        has_health = any(e.property_value("health_check", False) for e in endpoints)
        has_readiness = any(e.property_value("readiness_check", False) for e in endpoints)
        if has_health and has_readiness:
            providing += 1
    return ratio(providing, len(services))


# ── Coupling ───────────────────────────────────────────────────────


def coupling_degree_based_on_potential_coupling(system: System) -> MeasureValue:
    """Observed shortest-path sum normalised between its closed-form bounds.

    Over all ordered pairs of distinct components, an unreachable pair adds
    N - 1, the longest possible simple path. max = N(N-1)(N-1) is the sum
    with no links at all, min = N(N-1) the sum with every pair directly
    linked. The result is (max - observed) / (max - min); 0 below three
    components, where max equals min.
    """
    ids = [c.id for c in system.components]
    n = len(ids)
    if n < 3:
        return 0

    distances = all_pairs_distances(system.component_adjacency(), ids)
    path_sum = 0
    for source in ids:
        for target in ids:
            if source != target:
                path_sum += distances[source].get(target, n - 1)

    max_sum = n * (n - 1) * (n - 1)
    min_sum = n * (n - 1)
    return (max_sum - path_sum) / (max_sum - min_sum)


def interaction_density_based_on_components(system: System) -> MeasureValue:
    """Links per component."""
    return ratio(len(system.links), len(system.components))


def interaction_density_based_on_links(system: System) -> MeasureValue:
    """Links relative to every component linking to every endpoint once."""
    return ratio(len(system.links), len(system.components) * len(system.all_endpoints()))


def system_coupling_based_on_endpoint_entropy(system: System) -> MeasureValue:
    """Sum over components of the base-10 entropy of their outgoing links.

    A component's outgoing links are distributed over the distinct
    endpoints they target.
    """
    components = system.components
    if not components:
        return NOT_APPLICABLE

    total = 0.0
    for component in components:
        outgoing = system.outgoing_links_of_component(component.id)
        targets = Counter(link.target.id for link in outgoing)
        total += Entropy.shannon(targets, base=10)
    return total


def services_interdependence_in_the_system(system: System) -> MeasureValue:
    """Number of component pairs that depend on each other in both directions."""
    return len(mutual_pairs(_dependencies(system)))


def aggregate_system_metric_to_measure_service_coupling(system: System) -> MeasureValue:
    """Mean over components of (dependencies + consumers) / (2 (N - 1))."""
    n = len(system.components)
    if n < 2:
        return NOT_APPLICABLE

    dependencies = _dependencies(system)
    consumers = _consumers(system)
    per_component = [
        (len(dependencies[cid]) + len(consumers[cid])) / (2 * (n - 1)) for cid in dependencies
    ]
    return Statistics.mean(per_component)


def degree_of_coupling_in_a_system(system: System) -> MeasureValue:
    """Component dependencies relative to the N (N - 1) possible ones."""
    n = len(system.components)
    pairs = sum(len(targets) for targets in _dependencies(system).values())
    return ratio(pairs, n * (n - 1))


def simple_degree_of_coupling_in_a_system(system: System) -> MeasureValue:
    """Component dependencies per component."""
    pairs = sum(len(targets) for targets in _dependencies(system).values())
    return ratio(pairs, len(system.components))


# ── Sharing ────────────────────────────────────────────────────────


def direct_service_sharing(system: System) -> MeasureValue:
    """Direct sharing of components and of their endpoints, averaged over all components.

    A component linked to by at least two other components contributes
    consumers / (N - 1) plus the share of its endpoints that at least two
    other components link to. The sum is divided by N.
    """
    n = len(system.components)
    if n < 2:
        return NOT_APPLICABLE

    endpoint_consumers: dict[str, set[str]] = defaultdict(set)
    for link in system.links:
        if system.target_component_of_link(link).id != link.source.id:
            endpoint_consumers[link.target.id].add(link.source.id)

    total = 0.0
    consumers = _consumers(system)
    for component in system.components:
        if len(consumers[component.id]) < 2:
            continue
        endpoints = component.all_endpoints()
        shared_endpoints = sum(1 for e in endpoints if len(endpoint_consumers[e.id]) > 1)
        total += len(consumers[component.id]) / (n - 1) + shared_endpoints / len(endpoints)
    return total / n


def transitively_shared_services(system: System) -> MeasureValue:
    """Among consumed components, the share with at least two transitive consumers."""
    dependents = transitive_dependents(_dependencies(system))
    consumed = [d for d in dependents.values() if d]
    return ratio(sum(1 for d in consumed if len(d) > 1), len(consumed))


def ratio_of_shared_non_external_components_to_non_external_components(
    system: System,
) -> MeasureValue:
    """Share of components without external endpoints that at least two components consume."""
    non_external = _non_external_component_ids(system)
    consumers = _consumers(system)
    shared = sum(1 for cid in non_external if len(consumers[cid]) > 1)
    return ratio(shared, len(non_external))


def ratio_of_shared_dependencies_of_non_external_components_to_possible_dependencies(
    system: System,
) -> MeasureValue:
    """Dependencies on shared non-external components relative to all possible ones.

    Possible dependencies are every component depending on every
    non-external component: N * M.
    """
    non_external = _non_external_component_ids(system)
    consumers = _consumers(system)
    shared_dependencies = sum(
        len(consumers[cid]) for cid in non_external if len(consumers[cid]) > 1
    )
    return ratio(shared_dependencies, len(system.components) * len(non_external))


SYSTEM_MEASURES: dict[str, SystemCalculation] = {
    "serviceReplicationLevel": service_replication_level,
    "storageReplicationLevel": storage_replication_level,
    "externallyAvailableEndpoints": externally_available_endpoints,
    "dataShardingLevel": data_sharding_level,
    "ratioOfEndpointsSupportingSsl": ratio_of_endpoints_supporting_ssl,
    "ratioOfExternalEndpointsSupportingTls": ratio_of_external_endpoints_supporting_tls,
    "ratioOfSecuredLinks": ratio_of_secured_links,
    "dataAggregateScope": data_aggregate_scope,
    "ratioOfStatefulComponents": ratio_of_stateful_components,
    "ratioOfStatelessComponents": ratio_of_stateless_components,
    "degreeToWhichComponentsAreLinkedToStatefulComponents": (
        degree_to_which_components_are_linked_to_stateful_components
    ),
    "degreeOfAsynchronousCommunication": degree_of_asynchronous_communication,
    "asynchronousCommunicationUtilization": asynchronous_communication_utilization,
    "ratioOfServicesThatProvideHealthEndpoints": ratio_of_services_that_provide_health_endpoints,
    "couplingDegreeBasedOnPotentialCoupling": coupling_degree_based_on_potential_coupling,
    "interactionDensityBasedOnComponents": interaction_density_based_on_components,
    "interactionDensityBasedOnLinks": interaction_density_based_on_links,
    "systemCouplingBasedOnEndpointEntropy": system_coupling_based_on_endpoint_entropy,
    "servicesInterdependenceInTheSystem": services_interdependence_in_the_system,
    "aggregateSystemMetricToMeasureServiceCoupling": (
        aggregate_system_metric_to_measure_service_coupling
    ),
    "degreeOfCouplingInASystem": degree_of_coupling_in_a_system,
    "simpleDegreeOfCouplingInASystem": simple_degree_of_coupling_in_a_system,
    "directServiceSharing": direct_service_sharing,
    "transitivelySharedServices": transitively_shared_services,
    "ratioOfSharedNonExternalComponentsToNonExternalComponents": (
        ratio_of_shared_non_external_components_to_non_external_components
    ),
    "ratioOfSharedDependenciesOfNonExternalComponentsToPossibleDependencies": (
        ratio_of_shared_dependencies_of_non_external_components_to_possible_dependencies
    ),
}
