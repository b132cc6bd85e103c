"""Components and their specialisations (services and backing services)."""

from __future__ import annotations

from typing import ClassVar, Optional

from ..exceptions import DuplicateEntityError, EntityTypeError
from .base import ComponentKind, Entity, EntityKind, MetaData
from .data import (
    BackingData,
    BackingDataUsage,
    DataAggregate,
    DataAggregateUsage,
    DataUsageRelation,
    default_relation,
)
from .endpoint import Endpoint
from .property import (
    BACKING_SERVICE_PROPERTIES,
    COMPONENT_PROPERTIES,
    STORAGE_BACKING_SERVICE_PROPERTIES,
    EntityProperty,
    fresh_properties,
)


class Component(Entity):
    """A deployable unit providing endpoints and using data.

    Endpoints are kept in two lists: internal and external. An endpoint is
    never held twice, neither within one list nor across both.
    """

    entity_kind = EntityKind.COMPONENT
    component_kind: ClassVar[ComponentKind] = ComponentKind.COMPONENT

    def __init__(
        self,
        id: str,
        name: str = "",
        metadata: Optional[MetaData] = None,
        stateless: Optional[bool] = None,
        managed: Optional[bool] = None,
    ):
        super().__init__(id, name, metadata)
        self._endpoints: list[Endpoint] = []
        self._external_endpoints: list[Endpoint] = []
        self._data_aggregates: list[DataAggregateUsage] = []
        self._backing_data: list[BackingDataUsage] = []
        if stateless is not None:
            self.set_property_value("stateless", stateless)
        if managed is not None:
            self.set_property_value("managed", managed)

    def _default_properties(self) -> list[EntityProperty]:
        return fresh_properties(COMPONENT_PROPERTIES)

    @property
    def is_stateless(self) -> bool:
        return bool(self.property_value("stateless", True))

    # ── Endpoints ──────────────────────────────────────────────────

    @property
    def endpoints(self) -> list[Endpoint]:
        """Internal endpoints."""
        return list(self._endpoints)

    @property
    def external_endpoints(self) -> list[Endpoint]:
        return list(self._external_endpoints)

    def all_endpoints(self) -> list[Endpoint]:
        return self._endpoints + self._external_endpoints

    def add_endpoint(self, endpoint: Endpoint) -> None:
        """Add an endpoint to the list matching its kind.

        Adding an endpoint structurally equal to one already held is a no-op.
        A different endpoint under an id already held raises DuplicateEntityError.
        """
        if not isinstance(endpoint, Endpoint):
            raise EntityTypeError("Endpoint", endpoint)

        for existing in self.all_endpoints():
            if existing is endpoint or existing.snapshot() == endpoint.snapshot():
                return
            if existing.id == endpoint.id:
                raise DuplicateEntityError("endpoint", endpoint.id)

        if endpoint.is_external:
            self._external_endpoints.append(endpoint)
        else:
            self._endpoints.append(endpoint)

    def add_endpoints(self, *endpoints: Endpoint) -> None:
        for endpoint in endpoints:
            self.add_endpoint(endpoint)

    # ── Data usage ─────────────────────────────────────────────────

    @property
    def data_aggregates(self) -> list[DataAggregateUsage]:
        return list(self._data_aggregates)

    def add_data_aggregate(
        self, data: DataAggregate, relation: Optional[DataUsageRelation] = None
    ) -> None:
        if not isinstance(data, DataAggregate):
            raise EntityTypeError("DataAggregate", data)
        if relation is None:
            relation = default_relation(self.id, data.id)
        self._data_aggregates.append(DataAggregateUsage(data, relation))

    @property
    def backing_data(self) -> list[BackingDataUsage]:
        return list(self._backing_data)

    def add_backing_data(
        self, data: BackingData, relation: Optional[DataUsageRelation] = None
    ) -> None:
        if not isinstance(data, BackingData):
            raise EntityTypeError("BackingData", data)
        if relation is None:
            relation = default_relation(self.id, data.id)
        self._backing_data.append(BackingDataUsage(data, relation))


class Service(Component):
    """A component implementing business functionality."""

    component_kind = ComponentKind.SERVICE


class BackingService(Component):
    """A component providing supporting functionality (logging, config, ...)."""

    component_kind = ComponentKind.BACKING_SERVICE

    def _default_properties(self) -> list[EntityProperty]:
        return fresh_properties(COMPONENT_PROPERTIES, BACKING_SERVICE_PROPERTIES)


class StorageBackingService(Component):
    """A backing service that persists data. Stateful unless stated otherwise."""

    component_kind = ComponentKind.STORAGE_BACKING_SERVICE

    def __init__(
        self,
        id: str,
        name: str = "",
        metadata: Optional[MetaData] = None,
        stateless: Optional[bool] = None,
        managed: Optional[bool] = None,
        shards: Optional[int] = None,
    ):
        super().__init__(
            id, name, metadata, stateless=False if stateless is None else stateless, managed=managed
        )
        if shards is not None:
            self.set_property_value("shards", shards)

    def _default_properties(self) -> list[EntityProperty]:
        return fresh_properties(COMPONENT_PROPERTIES, STORAGE_BACKING_SERVICE_PROPERTIES)


class ProxyBackingService(BackingService):
    """A backing service forwarding requests (gateway, load balancer, ...)."""

    component_kind = ComponentKind.PROXY_BACKING_SERVICE


class BrokerBackingService(BackingService):
    """A backing service brokering messages between components."""

    component_kind = ComponentKind.BROKER_BACKING_SERVICE


COMPONENT_CLASSES: dict[ComponentKind, type[Component]] = {
    ComponentKind.COMPONENT: Component,
    ComponentKind.SERVICE: Service,
    ComponentKind.BACKING_SERVICE: BackingService,
    ComponentKind.STORAGE_BACKING_SERVICE: StorageBackingService,
    ComponentKind.PROXY_BACKING_SERVICE: ProxyBackingService,
    ComponentKind.BROKER_BACKING_SERVICE: BrokerBackingService,
}
