"""Shared test fixtures for CNA Quality tests."""

import pytest

from cna_quality.entities import (
    CACHED_USAGE,
    PERSISTENCE,
    BackingData,
    BrokerBackingService,
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
    StorageBackingService,
    System,
)


@pytest.fixture
def uniform_distribution():
    """Uniform distribution over 4 events."""
    return {"a": 25, "b": 25, "c": 25, "d": 25}


@pytest.fixture
def skewed_distribution():
    """Heavily skewed distribution."""
    return {"a": 97, "b": 1, "c": 1, "d": 1}


@pytest.fixture
def single_event_distribution():
    """Distribution with a single event."""
    return {"a": 100}


@pytest.fixture
def empty_distribution():
    """Empty distribution."""
    return {}


@pytest.fixture
def known_distribution():
    """Distribution with known entropy: fair coin = 1.0 bit."""
    return {"heads": 50, "tails": 50}


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """No global or project config files and no CNA_QUALITY_* variables."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    for name in (
        "CNA_QUALITY_INCLUDE_COMPONENT_MEASURES",
        "CNA_QUALITY_INCLUDE_REQUEST_TRACE_MEASURES",
        "CNA_QUALITY_VALIDATE_CATALOG",
        "CNA_QUALITY_VERBOSITY",
    ):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


@pytest.fixture
def security_system():
    """Two services, four TLS-mixed endpoints, two links and a storage service.

    serviceA (s1): e1, e2, ee1 (https), ee2
    serviceB (s2, stateful): e3 (https), e4
    s1 -> e3, s1 -> e4; s1 uses da1, s2 uses da2; st1 is unlinked storage.
    """
    system = System("testSystem")

    service_a = Service("s1", "serviceA")
    service_a.add_endpoints(
        Endpoint("e1", "endpoint 1"),
        Endpoint("e2", "endpoint 2"),
        ExternalEndpoint("ee1", "external endpoint 1", protocol="https"),
        ExternalEndpoint("ee2", "external endpoint 2"),
    )

    service_b = Service("s2", "serviceB", stateless=False)
    endpoint_c = Endpoint("e3", "endpoint 3", protocol="https")
    endpoint_d = Endpoint("e4", "endpoint 4")
    service_b.add_endpoints(endpoint_c, endpoint_d)

    system.add_entities([service_a, service_b])
    system.add_entities([Link("l1", service_a, endpoint_c), Link("l2", service_a, endpoint_d)])

    data_a = DataAggregate("da1", "Data A")
    data_b = DataAggregate("da2", "Data B")
    system.add_entities([data_a, data_b])
    service_a.add_data_aggregate(data_a)
    service_b.add_data_aggregate(data_b)

    system.add_entity(StorageBackingService("st1", "Storage 1"))
    return system


@pytest.fixture
def density_system():
    """s1 (e1, e2), s2 (e3, e4), s3; s2 -> e1, s2 -> e2, s3 -> e3, s3 -> e4."""
    system = System("testSystem")

    s1 = Service("s1", "service 1")
    e1, e2 = Endpoint("e1", "endpoint 1"), Endpoint("e2", "endpoint 2")
    s1.add_endpoints(e1, e2)
    s2 = Service("s2", "service 2")
    e3, e4 = Endpoint("e3", "endpoint 3"), Endpoint("e4", "endpoint 4")
    s2.add_endpoints(e3, e4)
    s3 = Service("s3", "service 3")

    system.add_entities([s1, s2, s3])
    system.add_entities(
        [
            Link("l1", s2, e1),
            Link("l2", s2, e2),
            Link("l3", s3, e3),
            Link("l4", s3, e4),
        ]
    )
    return system


@pytest.fixture
def sharing_system():
    """s1 (e1, e2) is consumed by s3 and s4; s2 (e3, e4) by nobody."""
    system = System("testSystem")

    s1 = Service("s1", "service 1")
    e1, e2 = Endpoint("e1", "endpoint 1"), Endpoint("e2", "endpoint 2")
    s1.add_endpoints(e1, e2)
    s2 = Service("s2", "service 2")
    s2.add_endpoints(Endpoint("e3", "endpoint 3"), Endpoint("e4", "endpoint 4"))
    s3 = Service("s3", "service 3")
    s4 = Service("s4", "service 4")

    system.add_entities([s1, s2, s3, s4])
    system.add_entities([Link("l1", s3, e1), Link("l2", s3, e2), Link("l3", s4, e2)])
    return system


@pytest.fixture
def trace_system():
    """Five services s1..s5, chain s1 -> s2 -> s3 -> s4 and a trace over it.

    The trace rq1 enters through ex1 of s1 and takes three steps.
    """
    system = System("testSystem")

    services = {}
    endpoints = {}
    for i in range(1, 6):
        service = Service(f"s{i}", "testService")
        endpoint = Endpoint(f"e{i}", f"endpoint {i}")
        service.add_endpoint(endpoint)
        services[i] = service
        endpoints[i] = endpoint
    entry = ExternalEndpoint("ex1", "external endpoint 1")
    services[1].add_endpoint(entry)
    services[5].add_endpoint(ExternalEndpoint("ex2", "external endpoint 2"))

    links = [
        Link("l1", services[1], endpoints[2]),
        Link("l2", services[2], endpoints[3]),
        Link("l3", services[3], endpoints[4]),
    ]
    system.add_entities(services.values())
    system.add_entities(links)
    system.add_entity(
        RequestTrace("rq1", "request trace 1", external_endpoint=entry, links=[[l] for l in links])
    )
    return system


@pytest.fixture
def shop_system():
    """A small shop covering every entity kind.

    gateway (proxy, external ee1) -> orders (e1 .. e4)
    orders -> customers (e5), orders -> order_db (e6), orders -> broker (e7)
    orders, customers and order_db are deployed on one cluster.
    Request trace rt1: [l1], [l2, l3], [l4]
    """
    system = System("shop", "Shop")

    order = DataAggregate("da1", "Order")
    customer = DataAggregate("da2", "Customer")
    credentials = BackingData("bd1", "DB Credentials", included_data={"user": "shop"})
    cluster = Infrastructure("infra1", "Kubernetes Cluster")
    cluster.add_backing_data(credentials)

    gateway = ProxyBackingService("gw", "API Gateway")
    entry = ExternalEndpoint("ee1", "Shop API", protocol="https", url_path="/shop")
    gateway.add_endpoint(entry)

    orders = Service("orders", "Order Service")
    get_orders = Endpoint("e1", "GET /orders", protocol="https", kind="query", url_path="/orders")
    get_orders.add_data_aggregate(order)
    health = Endpoint("e2", "health", kind="query")
    health.set_property_value("health_check", True)
    ready = Endpoint("e3", "ready", kind="query")
    ready.set_property_value("readiness_check", True)
    created = Endpoint("e4", "order created", protocol="amqp", kind="event")
    orders.add_endpoints(get_orders, health, ready, created)
    orders.add_data_aggregate(order)

    customers = Service("customers", "Customer Service")
    get_customers = Endpoint("e5", "GET /customers", protocol="https", url_path="/customers")
    customers.add_endpoint(get_customers)
    customers.add_data_aggregate(customer, DataUsageRelation("rel1", usage_relation=CACHED_USAGE))

    order_db = StorageBackingService("db", "Order DB", shards=2)
    sql = Endpoint("e6", "sql", protocol="tcp", port=5432)
    order_db.add_endpoint(sql)
    order_db.add_data_aggregate(order, DataUsageRelation("rel2", usage_relation=PERSISTENCE))
    order_db.add_backing_data(credentials)

    broker = BrokerBackingService("broker", "Message Broker")
    publish = Endpoint("e7", "publish", protocol="amqp", kind="event")
    broker.add_endpoint(publish)

    system.add_entities([order, customer, credentials, cluster])
    system.add_entities([gateway, orders, customers, order_db, broker])
    system.add_entities(
        [
            DeploymentMapping("dm1", orders, cluster, replicas=3),
            DeploymentMapping("dm2", customers, cluster, replicas=2),
            DeploymentMapping("dm3", order_db, cluster),
        ]
    )

    l1 = Link("l1", gateway, get_orders)
    l2 = Link("l2", orders, get_customers)
    l3 = Link("l3", orders, sql)
    l4 = Link("l4", orders, publish)
    system.add_entities([l1, l2, l3, l4])
    system.add_entity(
        RequestTrace("rt1", "Place Order", external_endpoint=entry, links=[[l1], [l2, l3], [l4]])
    )
    return system
