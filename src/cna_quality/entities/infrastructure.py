"""Infrastructure entities and the deployment mappings placing things on them."""

from __future__ import annotations

from typing import Optional, Union

from ..exceptions import EntityTypeError
from .base import Entity, EntityKind, MetaData
from .component import Component
from .data import BackingData, BackingDataUsage, DataUsageRelation, default_relation
from .property import (
    DEPLOYMENT_MAPPING_PROPERTIES,
    INFRASTRUCTURE_PROPERTIES,
    EntityProperty,
    fresh_properties,
)


class Infrastructure(Entity):
    """Compute, container runtime or platform that components are deployed on."""

    entity_kind = EntityKind.INFRASTRUCTURE

    def __init__(self, id: str, name: str = "", metadata: Optional[MetaData] = None):
        super().__init__(id, name, metadata)
        self._backing_data: list[BackingDataUsage] = []

    def _default_properties(self) -> list[EntityProperty]:
        return fresh_properties(INFRASTRUCTURE_PROPERTIES)

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


Deployable = Union[Component, Infrastructure]


class DeploymentMapping(Entity):
    """Places a component (or nested infrastructure) on an infrastructure."""

    entity_kind = EntityKind.DEPLOYMENT_MAPPING

    def __init__(
        self,
        id: str,
        deployed_entity: Deployable,
        underlying_infrastructure: Infrastructure,
        name: str = "",
        metadata: Optional[MetaData] = None,
        replicas: Optional[int] = None,
    ):
        if not isinstance(deployed_entity, (Component, Infrastructure)):
            raise EntityTypeError("Component or Infrastructure", deployed_entity)
        if not isinstance(underlying_infrastructure, Infrastructure):
            raise EntityTypeError("Infrastructure", underlying_infrastructure)

        super().__init__(id, name, metadata)
        self.deployed_entity = deployed_entity
        self.underlying_infrastructure = underlying_infrastructure
        if replicas is not None:
            self.set_property_value("replicas", replicas)

    def _default_properties(self) -> list[EntityProperty]:
        return fresh_properties(DEPLOYMENT_MAPPING_PROPERTIES)

    @property
    def replicas(self) -> int:
        return self.property_value("replicas", 1)
