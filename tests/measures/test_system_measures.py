"""Tests for cna_quality.measures.system module."""

import math

import pytest

from cna_quality.entities import Endpoint, ExternalEndpoint, Link, Service, System
from cna_quality.measures import NOT_APPLICABLE, SYSTEM_MEASURES


def measure(name, system):
    return SYSTEM_MEASURES[name](system)


def _linked_services(count, links):
    """count services s1..sN each with endpoint e1..eN; links as (source, target) numbers."""
    system = System("testSystem")
    services = {}
    endpoints = {}
    for i in range(1, count + 1):
        services[i] = Service(f"s{i}", f"service {i}")
        endpoints[i] = Endpoint(f"e{i}", f"endpoint {i}")
        services[i].add_endpoint(endpoints[i])
    system.add_entities(services.values())
    system.add_entities(
        Link(f"l{n}", services[source], endpoints[target])
        for n, (source, target) in enumerate(links, start=1)
    )
    return system


class TestSecurityAndState:
    """Measures over endpoint protocols and component state."""

    def test_ratio_of_endpoints_supporting_ssl(self, security_system):
        """2 of 6 endpoints use https: 2 / (6 - 2)."""
        assert measure("ratioOfEndpointsSupportingSsl", security_system) == 0.5

    def test_ssl_ratio_is_zero_when_all_endpoints_support_tls(self):
        system = System("sys")
        service = Service("s1")
        service.add_endpoint(Endpoint("e1", protocol="https"))
        system.add_entity(service)
        assert measure("ratioOfEndpointsSupportingSsl", system) == 0

    def test_ratio_of_external_endpoints_supporting_tls(self, security_system):
        assert measure("ratioOfExternalEndpointsSupportingTls", security_system) == 0.5

    def test_ratio_of_secured_links(self, security_system):
        assert measure("ratioOfSecuredLinks", security_system) == 0.5

    def test_externally_available_endpoints(self, security_system):
        assert measure("externallyAvailableEndpoints", security_system) == 2

    def test_data_aggregate_scope(self, security_system):
        assert measure("dataAggregateScope", security_system) == 2

    def test_ratio_of_stateful_components(self, security_system):
        """serviceB and the storage service are stateful."""
        assert measure("ratioOfStatefulComponents", security_system) == pytest.approx(2 / 3)

    def test_ratio_of_stateless_components(self, security_system):
        assert measure("ratioOfStatelessComponents", security_system) == pytest.approx(1 / 3)

    def test_linked_to_stateful_components(self, security_system):
        """Only s1 links to a stateful component (s2, twice)."""
        value = measure("degreeToWhichComponentsAreLinkedToStatefulComponents", security_system)
        assert value == pytest.approx(1 / 3)


class TestCommunicationStyle:
    """Measures over synchronous and asynchronous endpoints."""

    @pytest.fixture
    def async_system(self):
        system = System("testSystem")
        s1 = Service("s1", "service 1")
        e1 = Endpoint("e1", kind="query")
        e2 = Endpoint("e2", kind="event")
        s1.add_endpoints(e1, e2, Endpoint("ee1", kind="query"))
        s2 = Service("s2", "service 2")
        e3 = Endpoint("e3", kind="event")
        e4 = Endpoint("e4", kind="event")
        s2.add_endpoints(e3, e4)
        s3 = Service("s3", "service 3")
        system.add_entities([s1, s2, s3])
        system.add_entities(
            [Link("l1", s2, e1), Link("l2", s2, e2), Link("l3", s3, e3), Link("l4", s3, e4)]
        )
        return system

    def test_degree_of_asynchronous_communication(self, async_system):
        """Mean of 1/3 (s1) and 1 (s2); s3 has no endpoints."""
        value = measure("degreeOfAsynchronousCommunication", async_system)
        assert value == pytest.approx(2 / 3)

    def test_asynchronous_communication_utilization(self, async_system):
        assert measure("asynchronousCommunicationUtilization", async_system) == 0.75

    def test_ratio_of_services_that_provide_health_endpoints(self):
        system = System("testSystem")
        s1 = Service("s1")
        health = Endpoint("e1")
        health.set_property_value("health_check", True)
        ready = Endpoint("e2")
        ready.set_property_value("readiness_check", True)
        s1.add_endpoints(health, ready)
        s2 = Service("s2")
        s2.add_endpoints(Endpoint("e3"), Endpoint("e4"))
        system.add_entities([s1, s2])

        assert measure("ratioOfServicesThatProvideHealthEndpoints", system) == 0.5

    def test_health_needs_both_checks(self):
        system = System("testSystem")
        service = Service("s1")
        health = Endpoint("e1")
        health.set_property_value("health_check", True)
        service.add_endpoint(health)
        system.add_entity(service)
        assert measure("ratioOfServicesThatProvideHealthEndpoints", system) == 0

    def test_external_health_endpoints_do_not_count(self):
        system = System("testSystem")
        service = Service("s1")
        health = ExternalEndpoint("ee1")
        health.set_property_value("health_check", True)
        ready = ExternalEndpoint("ee2")
        ready.set_property_value("readiness_check", True)
        service.add_endpoints(health, ready)
        system.add_entity(service)
        assert measure("ratioOfServicesThatProvideHealthEndpoints", system) == 0


class TestCoupling:
    """Coupling and interaction density measures."""

    def test_coupling_degree_based_on_potential_coupling(self):
        """Chain s1 -> s2 -> s3: path sum 10 between min 6 and max 12."""
        system = _linked_services(3, [(1, 2), (2, 3)])
        value = measure("couplingDegreeBasedOnPotentialCoupling", system)
        assert value == pytest.approx(1 / 3)

    def test_coupling_degree_of_fully_linked_system_is_one(self):
        pairs = [(a, b) for a in range(1, 4) for b in range(1, 4) if a != b]
        system = _linked_services(3, pairs)
        assert measure("couplingDegreeBasedOnPotentialCoupling", system) == pytest.approx(1.0)

    def test_coupling_degree_below_three_components(self):
        system = _linked_services(2, [(1, 2)])
        assert measure("couplingDegreeBasedOnPotentialCoupling", system) == 0

    def test_interaction_density_based_on_components(self, density_system):
        assert measure("interactionDensityBasedOnComponents", density_system) == pytest.approx(4 / 3)

    def test_interaction_density_based_on_links(self, density_system):
        """4 links over 3 components x 4 endpoints."""
        assert measure("interactionDensityBasedOnLinks", density_system) == pytest.approx(1 / 3)

    def test_system_coupling_based_on_endpoint_entropy(self, density_system):
        """s2 and s3 each spread two links evenly over two endpoints: 2 x log10(2)."""
        value = measure("systemCouplingBasedOnEndpointEntropy", density_system)
        assert value == pytest.approx(2 * math.log10(2))
        assert value == pytest.approx(0.602059, abs=1e-6)

    def test_services_interdependence(self):
        system = _linked_services(3, [(1, 3), (2, 1), (3, 1)])
        assert measure("servicesInterdependenceInTheSystem", system) == 1

    def test_aggregate_system_metric(self):
        """s1: (1 + 2) / 4, s2: 1 / 4, s3: (1 + 1) / 4; mean 0.5."""
        system = _linked_services(3, [(1, 3), (2, 1), (3, 1)])
        value = measure("aggregateSystemMetricToMeasureServiceCoupling", system)
        assert value == pytest.approx(0.5)

    def test_degree_of_coupling_in_a_system(self):
        system = _linked_services(4, [(1, 3), (2, 1), (3, 1)])
        assert measure("degreeOfCouplingInASystem", system) == pytest.approx(1 / 4)
        assert measure("simpleDegreeOfCouplingInASystem", system) == pytest.approx(3 / 4)

    def test_self_links_are_not_dependencies(self):
        system = _linked_services(2, [(1, 1)])
        assert measure("degreeOfCouplingInASystem", system) == 0
        assert measure("servicesInterdependenceInTheSystem", system) == 0


class TestSharing:
    """Measures over components consumed by several others."""

    def test_direct_service_sharing(self, sharing_system):
        """s1: 2 of 3 other components consume it, 1 of its 2 endpoints is shared; over 4."""
        assert measure("directServiceSharing", sharing_system) == pytest.approx(7 / 24)

    def test_direct_service_sharing_all_endpoints_shared(self):
        system = _linked_services(3, [(2, 1), (3, 1)])
        assert measure("directServiceSharing", system) == pytest.approx((2 / 2 + 1) / 3)

    def test_direct_service_sharing_without_shared_components(self):
        system = _linked_services(3, [(1, 2), (2, 3)])
        assert measure("directServiceSharing", system) == 0
        assert measure("directServiceSharing", _linked_services(1, [])) == NOT_APPLICABLE

    def test_ratio_of_shared_non_external_components(self, sharing_system):
        value = measure(
            "ratioOfSharedNonExternalComponentsToNonExternalComponents", sharing_system
        )
        assert value == pytest.approx(1 / 4)

    def test_ratio_of_shared_dependencies(self, sharing_system):
        """Two dependencies on s1 over 4 x 4 possible ones."""
        value = measure(
            "ratioOfSharedDependenciesOfNonExternalComponentsToPossibleDependencies",
            sharing_system,
        )
        assert value == pytest.approx(1 / 8)

    def test_transitively_shared_services(self):
        """s1 -> s2, s1 -> s3, s2 -> s4, s2 -> s5, s3 -> s5: s4 and s5 of four consumed are shared."""
        system = _linked_services(5, [(1, 2), (1, 3), (2, 4), (2, 5), (3, 5)])
        assert measure("transitivelySharedServices", system) == 0.5


class TestReplication:
    """Measures over deployment mappings and storage."""

    def test_service_replication_level(self, shop_system):
        """orders has 3 replicas and customers 2; the gateway is not a service."""
        assert measure("serviceReplicationLevel", shop_system) == pytest.approx(2.5)

    def test_storage_replication_level(self, shop_system):
        assert measure("storageReplicationLevel", shop_system) == 1

    def test_data_sharding_level(self, shop_system):
        assert measure("dataShardingLevel", shop_system) == 2

    def test_not_deployed_is_not_applicable(self, security_system):
        assert measure("serviceReplicationLevel", security_system) == NOT_APPLICABLE


class TestEmptySystem:
    """Ratios over an empty system are not applicable; counts are zero."""

    @pytest.mark.parametrize(
        "name",
        [
            "ratioOfEndpointsSupportingSsl",
            "ratioOfExternalEndpointsSupportingTls",
            "ratioOfSecuredLinks",
            "ratioOfStatefulComponents",
            "ratioOfStatelessComponents",
            "degreeOfAsynchronousCommunication",
            "asynchronousCommunicationUtilization",
            "ratioOfServicesThatProvideHealthEndpoints",
            "interactionDensityBasedOnLinks",
            "degreeOfCouplingInASystem",
            "directServiceSharing",
            "transitivelySharedServices",
            "dataShardingLevel",
        ],
    )
    def test_ratio_not_applicable(self, name):
        assert measure(name, System("empty")) == NOT_APPLICABLE

    @pytest.mark.parametrize(
        "name",
        [
            "externallyAvailableEndpoints",
            "dataAggregateScope",
            "servicesInterdependenceInTheSystem",
            "couplingDegreeBasedOnPotentialCoupling",
        ],
    )
    def test_count_is_zero(self, name):
        assert measure(name, System("empty")) == 0
