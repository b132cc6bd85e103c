"""Component-scoped measure calculators: cohesion, endpoint mix and link counts."""

from itertools import combinations

from ..entities import Component, System
from ..math import Statistics
from .base import NOT_APPLICABLE, ComponentCalculation, MeasureValue, ratio
from .features import is_asynchronous, is_synchronous


def _data_aggregate_ids(usages) -> set[str]:
    return {usage.data.id for usage in usages}


# ── Cohesion ───────────────────────────────────────────────────────


def service_interface_data_cohesion(system: System, component: Component) -> MeasureValue:
    """Endpoints sharing a data aggregate with another endpoint, per data aggregate used.

    Only aggregates the component itself uses are considered. Not applicable
    for a component without data aggregates.
    """
    used = _data_aggregate_ids(component.data_aggregates)
    if not used:
        return NOT_APPLICABLE

    users: dict[str, list[str]] = {data_id: [] for data_id in used}
    for endpoint in component.all_endpoints():
        for data_id in _data_aggregate_ids(endpoint.data_aggregates):
            if data_id in users:
                users[data_id].append(endpoint.id)

    sharing = {e for endpoints in users.values() if len(endpoints) > 1 for e in endpoints}
    return len(sharing) / len(used)


def service_interface_usage_cohesion(system: System, component: Component) -> MeasureValue:
    """Links into the component's internal endpoints over endpoints x distinct clients."""
    endpoint_ids = {e.id for e in component.endpoints}
    usages = 0
    clients = set()
    for link in system.links:
        if link.target.id in endpoint_ids:
            usages += 1
            clients.add(link.source.id)

    return ratio(usages, len(endpoint_ids) * len(clients))


def total_service_interface_cohesion(system: System, component: Component) -> MeasureValue:
    """Mean of data and usage cohesion, over whichever of the two is applicable."""
    values = [
        value
        for value in (
            service_interface_data_cohesion(system, component),
            service_interface_usage_cohesion(system, component),
        )
        if value != NOT_APPLICABLE
    ]
    if not values:
        return NOT_APPLICABLE
    return Statistics.mean(values)


def cohesion_between_endpoints_based_on_data_aggregate_usage(
    system: System, component: Component
) -> MeasureValue:
    """Mean Jaccard similarity of data aggregate usage over all endpoint pairs.

    A pair where neither endpoint uses data contributes 0.
    """
    endpoint_data = [_data_aggregate_ids(e.data_aggregates) for e in component.all_endpoints()]
    if len(endpoint_data) < 2:
        return NOT_APPLICABLE

    similarities = []
    for first, second in combinations(endpoint_data, 2):
        union = first | second
        similarities.append(len(first & second) / len(union) if union else 0.0)
    return Statistics.mean(similarities)


# ── Endpoints ──────────────────────────────────────────────────────


def number_of_provided_synchronous_and_asynchronous_endpoints(
    system: System, component: Component
) -> MeasureValue:
    return len(component.all_endpoints())


def number_of_synchronous_endpoints_offered_by_a_service(
    system: System, component: Component
) -> MeasureValue:
    return sum(1 for e in component.all_endpoints() if is_synchronous(e))


def number_of_asynchronous_endpoints_offered_by_a_service(
    system: System, component: Component
) -> MeasureValue:
    return sum(1 for e in component.all_endpoints() if is_asynchronous(e))


# ── Links ──────────────────────────────────────────────────────────


def number_of_synchronous_outgoing_links(system: System, component: Component) -> MeasureValue:
    links = system.outgoing_links_of_component(component.id)
    return sum(1 for link in links if is_synchronous(link.target))


def number_of_asynchronous_outgoing_links(system: System, component: Component) -> MeasureValue:
    links = system.outgoing_links_of_component(component.id)
    return sum(1 for link in links if is_asynchronous(link.target))


def ratio_of_asynchronous_outgoing_links(system: System, component: Component) -> MeasureValue:
    links = system.outgoing_links_of_component(component.id)
    return ratio(sum(1 for link in links if is_asynchronous(link.target)), len(links))


def number_of_links_per_component(system: System, component: Component) -> MeasureValue:
    """Outgoing plus incoming links."""
    return len(system.outgoing_links_of_component(component.id)) + len(
        system.incoming_links_of_component(component.id)
    )


def number_of_consumed_endpoints(system: System, component: Component) -> MeasureValue:
    """Number of outgoing links."""
    return len(system.outgoing_links_of_component(component.id))


def incoming_outgoing_ratio_of_a_component(system: System, component: Component) -> MeasureValue:
    """Outgoing links per incoming link."""
    outgoing = len(system.outgoing_links_of_component(component.id))
    incoming = len(system.incoming_links_of_component(component.id))
    return ratio(outgoing, incoming)


def ratio_of_outgoing_links_of_a_service(system: System, component: Component) -> MeasureValue:
    """Outgoing links as a percentage of all links touching the component."""
    outgoing = len(system.outgoing_links_of_component(component.id))
    incoming = len(system.incoming_links_of_component(component.id))
    if outgoing + incoming == 0:
        return NOT_APPLICABLE
    return outgoing / (outgoing + incoming) * 100


COMPONENT_MEASURES: dict[str, ComponentCalculation] = {
    "serviceInterfaceDataCohesion": service_interface_data_cohesion,
    "serviceInterfaceUsageCohesion": service_interface_usage_cohesion,
    "totalServiceInterfaceCohesion": total_service_interface_cohesion,
    "cohesionBetweenEndpointsBasedOnDataAggregateUsage": (
        cohesion_between_endpoints_based_on_data_aggregate_usage
    ),
    "numberOfProvidedSynchronousAndAsynchronousEndpoints": (
        number_of_provided_synchronous_and_asynchronous_endpoints
    ),
    "numberOfSynchronousEndpointsOfferedByAService": (
        number_of_synchronous_endpoints_offered_by_a_service
    ),
    "numberOfAsynchronousEndpointsOfferedByAService": (
        number_of_asynchronous_endpoints_offered_by_a_service
    ),
    "numberOfSynchronousOutgoingLinks": number_of_synchronous_outgoing_links,
    "numberOfAsynchronousOutgoingLinks": number_of_asynchronous_outgoing_links,
    "ratioOfAsynchronousOutgoingLinks": ratio_of_asynchronous_outgoing_links,
    "numberOfLinksPerComponent": number_of_links_per_component,
    "numberOfConsumedEndpoints": number_of_consumed_endpoints,
    "incomingOutgoingRatioOfAComponent": incoming_outgoing_ratio_of_a_component,
    "ratioOfOutgoingLinksOfAService": ratio_of_outgoing_links_of_a_service,
}
