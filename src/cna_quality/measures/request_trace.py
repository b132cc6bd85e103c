"""Request-trace-scoped measure calculators."""

from ..entities import Component, RequestTrace, System
from .base import NOT_APPLICABLE, MeasureValue, RequestTraceCalculation
from .features import MAX_USAGE_RELATION_WEIGHT, usage_weight


def _touched_components(system: System, trace: RequestTrace) -> list[Component]:
    """Components in order of first appearance: entry component, then link sources and targets."""
    seen: dict[str, Component] = {}
    if trace.external_endpoint is not None:
        entry = system.search_component_of_endpoint(trace.external_endpoint.id)
        seen[entry.id] = entry
    for link in trace.links:
        for component in (link.source, system.target_component_of_link(link)):
            seen.setdefault(component.id, component)
    return list(seen.values())


def request_trace_length(system: System, trace: RequestTrace) -> MeasureValue:
    """Number of steps (link groups) in the trace."""
    return len(trace.link_groups)


def number_of_cycles_in_request_traces(system: System, trace: RequestTrace) -> MeasureValue:
    """Walks the links in step order and counts arrivals at an already visited component.

    The entry component (owner of the external endpoint) counts as visited
    from the start; each link's source is marked visited before its target
    is checked.
    """
    visited: set[str] = set()
    if trace.external_endpoint is not None:
        visited.add(system.search_component_of_endpoint(trace.external_endpoint.id).id)

    cycles = 0
    for link in trace.links:
        visited.add(link.source.id)
        target = system.target_component_of_link(link)
        if target.id in visited:
            cycles += 1
        else:
            visited.add(target.id)
    return cycles


def data_replication_along_request_trace(system: System, trace: RequestTrace) -> MeasureValue:
    """Weighted data usage of the trace's components, normalised by its maximum.

    For every data aggregate referenced in the trace (by a touched component
    or by an involved endpoint) and every touched component, the weight of
    the component's strongest usage relation to that aggregate is summed
    (0 if it does not use it). The sum is divided by
    |aggregates| x |components| x the persistence weight. Not applicable
    when the trace references no data aggregate.
    """
    components = _touched_components(system, trace)

    aggregate_ids: set[str] = set()
    for component in components:
        aggregate_ids.update(usage.data.id for usage in component.data_aggregates)
    endpoints = [link.target for link in trace.links]
    if trace.external_endpoint is not None:
        endpoints.append(trace.external_endpoint)
    for endpoint in endpoints:
        aggregate_ids.update(usage.data.id for usage in endpoint.data_aggregates)

    if not aggregate_ids or not components:
        return NOT_APPLICABLE

    total = 0.0
    for component in components:
        weights: dict[str, float] = {}
        for usage in component.data_aggregates:
            weight = usage_weight(usage.usage_relation)
            weights[usage.data.id] = max(weight, weights.get(usage.data.id, 0.0))
        total += sum(weights.get(data_id, 0.0) for data_id in aggregate_ids)

    return total / (len(aggregate_ids) * len(components) * MAX_USAGE_RELATION_WEIGHT)


REQUEST_TRACE_MEASURES: dict[str, RequestTraceCalculation] = {
    "requestTraceLength": request_trace_length,
    "numberOfCyclesInRequestTraces": number_of_cycles_in_request_traces,
    "dataReplicationAlongRequestTrace": data_replication_along_request_trace,
}
