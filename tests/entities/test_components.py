"""Tests for components, endpoints, links, deployment mappings and request traces."""

import pytest

from cna_quality.entities import (
    CACHED_USAGE,
    BackingData,
    ComponentKind,
    DataAggregate,
    DataUsageRelation,
    DeploymentMapping,
    Endpoint,
    ExternalEndpoint,
    Infrastructure,
    Link,
    ProxyBackingService,
    RequestTrace,
    Service,
)
from cna_quality.exceptions import DuplicateEntityError, EntityTypeError


class TestComponentEndpoints:
    """Tests for Component.add_endpoint."""

    def test_endpoints_are_split_by_kind(self):
        service = Service("s1")
        internal = Endpoint("e1")
        external = ExternalEndpoint("ee1")
        service.add_endpoints(internal, external)

        assert service.endpoints == [internal]
        assert service.external_endpoints == [external]
        assert service.all_endpoints() == [internal, external]

    def test_same_endpoint_twice_is_noop(self):
        service = Service("s1")
        endpoint = Endpoint("e1")
        service.add_endpoint(endpoint)
        service.add_endpoint(endpoint)
        assert len(service.all_endpoints()) == 1

    def test_structurally_equal_endpoint_is_noop(self):
        service = Service("s1")
        service.add_endpoint(Endpoint("e1", "orders", protocol="https"))
        service.add_endpoint(Endpoint("e1", "orders", protocol="https"))
        assert len(service.endpoints) == 1

    def test_different_endpoint_with_same_id_raises(self):
        service = Service("s1")
        service.add_endpoint(Endpoint("e1", "orders"))
        with pytest.raises(DuplicateEntityError):
            service.add_endpoint(Endpoint("e1", "customers"))

    def test_internal_and_external_cannot_share_id(self):
        service = Service("s1")
        service.add_endpoint(Endpoint("e1"))
        with pytest.raises(DuplicateEntityError):
            service.add_endpoint(ExternalEndpoint("e1"))

    def test_non_endpoint_rejected(self):
        with pytest.raises(EntityTypeError):
            Service("s1").add_endpoint(Service("s2"))

    def test_component_kind_tag(self):
        assert Service("s1").component_kind is ComponentKind.SERVICE
        assert ProxyBackingService("p1").component_kind is ComponentKind.PROXY_BACKING_SERVICE


class TestDataUsage:
    """Tests for data aggregate and backing data usage."""

    def test_default_relation_is_usage(self):
        service = Service("s1")
        service.add_data_aggregate(DataAggregate("da1"))
        assert service.data_aggregates[0].usage_relation == "usage"

    def test_explicit_relation(self):
        endpoint = Endpoint("e1")
        relation = DataUsageRelation("r1", usage_relation=CACHED_USAGE)
        endpoint.add_data_aggregate(DataAggregate("da1"), relation)
        assert endpoint.data_aggregates[0].relation is relation
        assert endpoint.data_aggregates[0].usage_relation == CACHED_USAGE

    def test_wrong_data_kind_rejected(self):
        with pytest.raises(EntityTypeError):
            Service("s1").add_data_aggregate(BackingData("bd1"))
        with pytest.raises(EntityTypeError):
            Infrastructure("i1").add_backing_data(DataAggregate("da1"))


class TestLinksAndMappings:
    """Tests for relation entities."""

    def test_link_requires_component_and_endpoint(self):
        service = Service("s1")
        endpoint = Endpoint("e1")
        with pytest.raises(EntityTypeError):
            Link("l1", endpoint, endpoint)
        with pytest.raises(EntityTypeError):
            Link("l1", service, service)

    def test_link_has_relation_type_property(self):
        link = Link("l1", Service("s1"), Endpoint("e1"))
        link.set_property_value("relation_type", "REST call")
        assert link.property_value("relation_type") == "REST call"

    def test_deployment_mapping_defaults_to_one_replica(self):
        mapping = DeploymentMapping("dm1", Service("s1"), Infrastructure("i1"))
        assert mapping.replicas == 1

    def test_infrastructure_can_be_deployed_on_infrastructure(self):
        mapping = DeploymentMapping("dm1", Infrastructure("vm"), Infrastructure("host"), replicas=2)
        assert mapping.replicas == 2

    def test_deployment_mapping_type_checks(self):
        with pytest.raises(EntityTypeError):
            DeploymentMapping("dm1", Endpoint("e1"), Infrastructure("i1"))
        with pytest.raises(EntityTypeError):
            DeploymentMapping("dm1", Service("s1"), Service("s2"))


class TestRequestTrace:
    """Tests for RequestTrace steps and entry endpoint."""

    @pytest.fixture
    def links(self):
        source = Service("s1")
        return [Link(f"l{i}", source, Endpoint(f"e{i}")) for i in range(1, 4)]

    def test_entry_must_be_external(self):
        trace = RequestTrace("rt1")
        with pytest.raises(EntityTypeError):
            trace.external_endpoint = Endpoint("e1")
        entry = ExternalEndpoint("ee1")
        trace.external_endpoint = entry
        assert trace.external_endpoint is entry

    def test_bare_links_are_single_steps(self, links):
        trace = RequestTrace("rt1", links=links)
        assert trace.link_groups == [[links[0]], [links[1]], [links[2]]]

    def test_link_kept_at_first_position(self, links):
        l1, l2, l3 = links
        trace = RequestTrace("rt1", links=[[l1], [l1, l2], [l3, l2]])
        assert trace.link_groups == [[l1], [l2], [l3]]
        assert trace.links == [l1, l2, l3]

    def test_emptied_steps_are_removed(self, links):
        l1 = links[0]
        trace = RequestTrace("rt1", links=[[l1], [l1]])
        assert trace.link_groups == [[l1]]

    def test_parallel_links_share_a_step(self, links):
        l1, l2, l3 = links
        trace = RequestTrace("rt1", links=[[l1], [l2, l3]])
        assert len(trace.link_groups) == 2
        assert trace.link_groups[1] == [l2, l3]

    def test_non_link_rejected(self):
        with pytest.raises(EntityTypeError):
            RequestTrace("rt1", links=[[Endpoint("e1")]])

    def test_link_groups_are_copies(self, links):
        trace = RequestTrace("rt1", links=links)
        trace.link_groups[0].clear()
        assert len(trace.links) == 3
