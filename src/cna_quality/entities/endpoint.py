"""Endpoints: interfaces a component exposes, optionally reachable from outside."""

from __future__ import annotations

from typing import Optional

from ..exceptions import EntityTypeError
from .base import Entity, EntityKind, MetaData
from .data import DataAggregate, DataAggregateUsage, DataUsageRelation, default_relation
from .property import ENDPOINT_PROPERTIES, EntityProperty, fresh_properties


class Endpoint(Entity):
    """An interface of a component, reachable by links from other components."""

    entity_kind = EntityKind.ENDPOINT

    def __init__(
        self,
        id: str,
        name: str = "",
        metadata: Optional[MetaData] = None,
        protocol: Optional[str] = None,
        kind: Optional[str] = None,
        url_path: Optional[str] = None,
        port: Optional[int] = None,
    ):
        super().__init__(id, name, metadata)
        self._data_aggregates: list[DataAggregateUsage] = []
        for key, value in (
            ("protocol", protocol),
            ("kind", kind),
            ("url_path", url_path),
            ("port", port),
        ):
            if value is not None:
                self.set_property_value(key, value)

    def _default_properties(self) -> list[EntityProperty]:
        return fresh_properties(ENDPOINT_PROPERTIES)

    @property
    def is_external(self) -> bool:
        return self.entity_kind is EntityKind.EXTERNAL_ENDPOINT

    @property
    def protocol(self) -> str:
        return self.property_value("protocol", "")

    @property
    def kind(self) -> str:
        return self.property_value("kind", "")

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

    def snapshot(self) -> tuple:
        usages = tuple(
            (usage.data.id, usage.usage_relation) for usage in self._data_aggregates
        )
        return super().snapshot() + (usages,)


class ExternalEndpoint(Endpoint):
    """An endpoint reachable from outside the system, e.g. an entry point of request traces."""

    entity_kind = EntityKind.EXTERNAL_ENDPOINT
