"""Data entities and the relations through which components use them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .base import Entity, EntityKind, MetaData
from .property import (
    BACKING_DATA_PROPERTIES,
    DATA_USAGE_RELATION_PROPERTIES,
    EntityProperty,
    fresh_properties,
)

USAGE = "usage"
CACHED_USAGE = "cached-usage"
PERSISTENCE = "persistence"


class DataAggregate(Entity):
    """A domain-level data concept (e.g. "Order") used by components and endpoints."""

    entity_kind = EntityKind.DATA_AGGREGATE


class BackingData(Entity):
    """Configuration or secret data attached to components or infrastructure."""

    entity_kind = EntityKind.BACKING_DATA

    def __init__(
        self,
        id: str,
        name: str = "",
        metadata: Optional[MetaData] = None,
        included_data: Optional[dict[str, Any]] = None,
    ):
        super().__init__(id, name, metadata)
        if included_data is not None:
            self.set_property_value("included_data", dict(included_data))

    def _default_properties(self) -> list[EntityProperty]:
        return fresh_properties(BACKING_DATA_PROPERTIES)


class DataUsageRelation(Entity):
    """Relation entity carrying how data is used (usage, cached-usage, persistence)."""

    entity_kind = EntityKind.DATA_USAGE_RELATION

    def __init__(
        self,
        id: str,
        name: str = "",
        metadata: Optional[MetaData] = None,
        usage_relation: Optional[str] = None,
    ):
        super().__init__(id, name, metadata)
        if usage_relation is not None:
            self.set_property_value("usage_relation", usage_relation)

    def _default_properties(self) -> list[EntityProperty]:
        return fresh_properties(DATA_USAGE_RELATION_PROPERTIES)

    @property
    def usage_relation(self) -> str:
        return self.property_value("usage_relation", USAGE)


@dataclass
class DataAggregateUsage:
    """A data aggregate together with the relation describing its use."""

    data: DataAggregate
    relation: DataUsageRelation

    @property
    def usage_relation(self) -> str:
        return self.relation.usage_relation


@dataclass
class BackingDataUsage:
    """Backing data together with the relation describing its use."""

    data: BackingData
    relation: DataUsageRelation


def default_relation(owner_id: str, data_id: str, usage_relation: Optional[str] = None) -> DataUsageRelation:
    """Relation entity for callers that only care about the usage kind."""
    return DataUsageRelation(f"{owner_id}__{data_id}", usage_relation=usage_relation)
