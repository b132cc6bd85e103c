"""Tests for cna_quality.tosca converter and importer working together."""

import pytest

from cna_quality.entities import (
    CACHED_USAGE,
    PERSISTENCE,
    USAGE,
    DataAggregate,
    DataUsageRelation,
    ExternalEndpoint,
    RequestTrace,
    Service,
    System,
)
from cna_quality.measures import calculate_measures
from cna_quality.tosca import (
    ToscaConverter,
    convert_system,
    from_json,
    import_template,
    load_template,
    save_template,
    to_json,
)
from cna_quality.tosca import profile


@pytest.fixture
def shop_template(shop_system):
    template, _ = convert_system(shop_system)
    return template


@pytest.fixture
def reimported(shop_template):
    return import_template(from_json(to_json(shop_template)))


def _ids(entities):
    return sorted(entity.id for entity in entities)


def _assert_same_values(actual, expected):
    assert set(actual) == set(expected)
    for name, value in expected.items():
        if isinstance(value, str):
            assert actual[name] == value, name
        else:
            assert actual[name] == pytest.approx(value), name


class TestConverter:
    """Tests for System -> template conversion."""

    def test_template_header(self, shop_template):
        assert shop_template["tosca_definitions_version"] == "tosca_simple_yaml_1_3"
        assert shop_template["metadata"]["system_id"] == "shop"
        assert shop_template["metadata"]["template_name"] == "Shop"

    def test_node_keys_and_types(self, shop_template):
        nodes = shop_template["topology_template"]["node_templates"]
        assert nodes["order_service"]["type"] == profile.SERVICE_TYPE
        assert nodes["order_db"]["type"] == profile.STORAGE_BACKING_SERVICE_TYPE
        assert nodes["api_gateway"]["type"] == profile.PROXY_BACKING_SERVICE_TYPE
        assert nodes["shop_api"]["type"] == profile.EXTERNAL_ENDPOINT_TYPE
        assert nodes["order"]["metadata"]["id"] == "da1"

    def test_data_nodes_come_first(self, shop_template):
        keys = list(shop_template["topology_template"]["node_templates"])
        assert keys.index("order") < keys.index("order_service")
        assert keys.index("db_credentials") < keys.index("kubernetes_cluster")

    def test_relationship_keys(self, shop_template):
        relationships = shop_template["topology_template"]["relationship_templates"]
        assert relationships["order_service_links_to_get_customers"]["type"] == profile.LINK_TYPE
        hosting = relationships["kubernetes_cluster_hosts_order_service"]
        assert hosting["type"] == profile.DEPLOYMENT_MAPPING_TYPE
        assert hosting["properties"] == {"replicas": 3}
        assert "order_db_uses_order" in relationships

    def test_link_requirement(self, shop_template):
        gateway = shop_template["topology_template"]["node_templates"]["api_gateway"]
        assert {
            "endpoint_link": {"node": "get_orders", "relationship": "api_gateway_links_to_get_orders"}
        } in gateway["requirements"]

    def test_endpoint_properties_live_on_capability(self, shop_template):
        sql = shop_template["topology_template"]["node_templates"]["sql"]
        assert "properties" not in sql
        assert sql["capabilities"]["endpoint"]["properties"]["port"] == 5432

    def test_request_trace_properties(self, shop_template):
        trace = shop_template["topology_template"]["node_templates"]["place_order"]
        assert trace["properties"]["link_groups"] == [
            ["api_gateway_links_to_get_orders"],
            ["order_service_links_to_get_customers", "order_service_links_to_sql"],
            ["order_service_links_to_publish"],
        ]
        assert trace["properties"]["referred_endpoint"] == "shop_api"
        assert trace["properties"]["nodes"][:2] == ["api_gateway", "order_service"]

    def test_key_id_map(self, shop_system):
        converter = ToscaConverter(shop_system)
        converter.convert()
        assert converter.key_id_map.get_id("order_service") == "orders"
        assert converter.key_id_map.get_key("l3") == "order_service_links_to_sql"

    def test_colliding_names_get_suffixes(self, shop_system):
        shop_system.get_component("broker").name = "Order Service"
        template, key_id_map = convert_system(shop_system)
        assert key_id_map.get_id("order_service_1") == "broker"
        assert "order_service_1" in template["topology_template"]["node_templates"]

    def test_conversion_is_repeatable(self, shop_system):
        first, _ = convert_system(shop_system)
        second, _ = convert_system(shop_system)
        assert first == second


class TestRoundTrip:
    """A converted and re-imported system keeps its structure and measures."""

    def test_entities_preserved(self, shop_system, reimported):
        assert reimported.id == "shop"
        assert reimported.name == "Shop"
        assert _ids(reimported.components) == _ids(shop_system.components)
        assert _ids(reimported.links) == _ids(shop_system.links)
        assert _ids(reimported.all_endpoints()) == _ids(shop_system.all_endpoints())
        assert _ids(reimported.data_aggregates) == ["da1", "da2"]
        assert _ids(reimported.backing_data) == ["bd1"]
        assert _ids(reimported.infrastructure) == ["infra1"]

    def test_component_kinds_and_properties(self, reimported):
        db = reimported.get_component("db")
        assert type(db).__name__ == "StorageBackingService"
        assert db.property_value("shards") == 2
        assert reimported.get_endpoint("e6").property_value("port") == 5432
        assert reimported.get_endpoint("e2").property_value("health_check") is True
        assert [e.id for e in reimported.get_component("gw").external_endpoints] == ["ee1"]

    def test_links_resolve(self, reimported):
        link = reimported.get_link("l3")
        assert link.source.id == "orders"
        assert link.target.id == "e6"
        assert reimported.target_component_of_link(link).id == "db"

    def test_deployment_mappings(self, reimported):
        replicas = {m.id: m.replicas for m in reimported.deployment_mappings}
        assert replicas == {"dm1": 3, "dm2": 2, "dm3": 1}

    def test_data_usage(self, reimported):
        db_usage = reimported.get_component("db").data_aggregates
        assert [(u.data.id, u.relation.id, u.usage_relation) for u in db_usage] == [
            ("da1", "rel2", PERSISTENCE)
        ]
        customers = reimported.get_component("customers").data_aggregates
        assert customers[0].usage_relation == CACHED_USAGE
        endpoint_usage = reimported.get_endpoint("e1").data_aggregates
        assert endpoint_usage[0].usage_relation == USAGE
        credentials = reimported.backing_data[0]
        assert credentials.property_value("included_data") == {"user": "shop"}

    def test_request_trace(self, reimported):
        trace = reimported.get_request_trace("rt1")
        assert trace.name == "Place Order"
        assert trace.external_endpoint.id == "ee1"
        assert [[link.id for link in group] for group in trace.link_groups] == [
            ["l1"],
            ["l2", "l3"],
            ["l4"],
        ]

    def test_measures_unchanged(self, shop_system, reimported):
        before = calculate_measures(shop_system)
        after = calculate_measures(reimported)
        _assert_same_values(after.system, before.system)
        _assert_same_values(after.request_traces["rt1"], before.request_traces["rt1"])
        for component_id, values in before.components.items():
            _assert_same_values(after.components[component_id], values)

    def test_file_roundtrip(self, shop_template, tmp_path):
        path = tmp_path / "shop.json"
        save_template(shop_template, path)
        assert load_template(path) == shop_template


class TestRelationIds:
    """Usage relation ids live in their own scope."""

    @pytest.fixture
    def system(self):
        system = System("sys")
        data = DataAggregate("da1", "orders")
        service = Service("s1", "order service")
        entry = ExternalEndpoint("ee1", "place order")
        service.add_endpoint(entry)
        service.add_data_aggregate(data, DataUsageRelation("r1", usage_relation=PERSISTENCE))
        entry.add_data_aggregate(data, DataUsageRelation("s1", usage_relation=USAGE))
        system.add_entities([data, service])
        system.add_entity(RequestTrace("r1", "place order", entry))
        return system

    def test_relation_id_shared_with_entity(self, system):
        converter = ToscaConverter(system)
        converter.convert()
        assert converter.key_id_map.get_id("place_order_1") == "r1"
        assert converter.relation_ids == {
            "order_service_uses_orders": "r1",
            "place_order_uses_orders": "s1",
        }

    def test_roundtrip(self, system):
        template, _ = convert_system(system)
        reimported = import_template(template)
        assert reimported.get_request_trace("r1").external_endpoint.id == "ee1"
        usage = reimported.get_component("s1").data_aggregates
        assert [(u.relation.id, u.usage_relation) for u in usage] == [("r1", PERSISTENCE)]
        endpoint_usage = reimported.get_endpoint("ee1").data_aggregates
        assert [u.relation.id for u in endpoint_usage] == ["s1"]
