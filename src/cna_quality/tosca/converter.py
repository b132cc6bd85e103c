"""Convert a System into a TOSCA service template (plain dicts).

Node templates are emitted in dependency order: data aggregates, backing
data, infrastructure, components with their endpoints, then request traces.
Deployment mappings, links and data usage relations become relationship
templates referenced from the requirements of the node that owns them.
Every generated template carries the originating entity id in
``metadata.id``. Usage relation ids are not unique system-wide, so their
keys are tracked apart from the entity key/id map.
"""

from __future__ import annotations

from typing import Any

from ..entities import (
    BackingDataUsage,
    Component,
    DataAggregate,
    DataAggregateUsage,
    Endpoint,
    Entity,
    RequestTrace,
    System,
)
from ..logging_config import get_logger
from . import profile
from .keys import TwoWayKeyIdMap, UniqueKeyManager, normalize_key

logger = get_logger(__name__)

Template = dict[str, Any]


def _metadata(entity: Entity) -> dict[str, Any]:
    return {"id": entity.id, "name": entity.name, **entity.metadata.to_dict()}


def _properties(entity: Entity) -> dict[str, Any]:
    return {key: value for key, value in entity.property_values().items() if value is not None}


class ToscaConverter:
    """One conversion pass. Keys are unique within the pass.

    Example:
        >>> converter = ToscaConverter(system)
        >>> template = converter.convert()
        >>> converter.key_id_map.get_id("order_service")
    """

    def __init__(self, system: System):
        self.system = system
        self.key_id_map = TwoWayKeyIdMap()
        self.relation_ids: dict[str, str] = {}
        self._keys = UniqueKeyManager()
        self._nodes: dict[str, Template] = {}
        self._relationships: dict[str, Template] = {}

    def convert(self) -> Template:
        for data in self.system.data_aggregates:
            self._data_node(data)
        for data in self.system.backing_data:
            self._data_node(data)

        for infrastructure in self.system.infrastructure:
            key = self._new_node(infrastructure, profile.INFRASTRUCTURE_TYPE)
            for usage in infrastructure.backing_data:
                self._require_data(key, profile.USES_BACKING_DATA, usage)

        for component in self.system.components:
            self._component(component)

        for mapping in self.system.deployment_mappings:
            host_key = self.key_id_map.get_key(mapping.underlying_infrastructure.id)
            hosted_key = self.key_id_map.get_key(mapping.deployed_entity.id)
            key = self._new_relationship(
                mapping, f"{host_key}_hosts_{hosted_key}", profile.DEPLOYMENT_MAPPING_TYPE
            )
            self._require(hosted_key, profile.HOST, {"node": host_key, "relationship": key})

        for link in self.system.links:
            source_key = self.key_id_map.get_key(link.source.id)
            target_key = self.key_id_map.get_key(link.target.id)
            key = self._new_relationship(
                link, f"{source_key}_links_to_{target_key}", profile.LINK_TYPE
            )
            self._require(
                source_key, profile.ENDPOINT_LINK, {"node": target_key, "relationship": key}
            )

        for trace in self.system.request_traces:
            self._request_trace(trace)

        logger.debug(
            f"Converted {self.system.id}: {len(self._nodes)} node templates, "
            f"{len(self._relationships)} relationship templates"
        )
        return {
            "tosca_definitions_version": profile.TOSCA_DEFINITIONS_VERSION,
            "metadata": {
                "template_author": profile.TEMPLATE_AUTHOR,
                "template_name": self.system.name,
                "template_version": profile.TEMPLATE_VERSION,
                "system_id": self.system.id,
            },
            "description": f"Service template of {self.system.name}",
            "topology_template": {
                "node_templates": self._nodes,
                "relationship_templates": self._relationships,
            },
        }

    # ── Templates ──────────────────────────────────────────────────

    def _new_key(self, entity: Entity, key: str) -> str:
        key = self._keys.ensure_uniqueness(key)
        self.key_id_map.add(key, entity.id)
        return key

    def _new_node(self, entity: Entity, node_type: str, with_properties: bool = True) -> str:
        key = self._new_key(entity, normalize_key(entity.name or entity.id))
        node: Template = {"type": node_type, "metadata": _metadata(entity)}
        properties = _properties(entity) if with_properties else {}
        if properties:
            node["properties"] = properties
        self._nodes[key] = node
        return key

    def _new_relationship(
        self, entity: Entity, key: str, relationship_type: str, usage: bool = False
    ) -> str:
        if usage:
            key = self._keys.ensure_uniqueness(key)
            self.relation_ids[key] = entity.id
        else:
            key = self._new_key(entity, key)
        relationship: Template = {"type": relationship_type, "metadata": _metadata(entity)}
        properties = _properties(entity)
        if properties:
            relationship["properties"] = properties
        self._relationships[key] = relationship
        return key

    def _require(self, node_key: str, name: str, assignment: dict[str, Any]) -> None:
        self._nodes[node_key].setdefault("requirements", []).append({name: assignment})

    # ── Entities ───────────────────────────────────────────────────

    def _data_node(self, data: Entity) -> str:
        """Key of a data node, emitting it first if it is not in the template yet."""
        if self.key_id_map.has_id(data.id):
            return self.key_id_map.get_key(data.id)
        node_type = (
            profile.DATA_AGGREGATE_TYPE
            if isinstance(data, DataAggregate)
            else profile.BACKING_DATA_TYPE
        )
        key = self._new_node(data, node_type)
        self._nodes[key]["capabilities"] = {"provides_data": {}}
        return key

    def _require_data(
        self, owner_key: str, name: str, usage: DataAggregateUsage | BackingDataUsage
    ) -> None:
        data_key = self._data_node(usage.data)
        key = self._new_relationship(
            usage.relation, f"{owner_key}_uses_{data_key}", profile.DATA_USAGE_TYPE, usage=True
        )
        self._require(owner_key, name, {"node": data_key, "relationship": key})

    def _component(self, component: Component) -> None:
        key = self._new_node(component, profile.COMPONENT_TYPES[component.component_kind])
        for endpoint in component.endpoints:
            endpoint_key = self._endpoint(endpoint)
            self._require(
                key,
                profile.PROVIDES_ENDPOINT,
                {
                    "capability": profile.ENDPOINT_CAPABILITY,
                    "node": endpoint_key,
                    "relationship": {"type": profile.PROVIDES_ENDPOINT_TYPE},
                },
            )
        for endpoint in component.external_endpoints:
            endpoint_key = self._endpoint(endpoint)
            self._require(
                key,
                profile.PROVIDES_EXTERNAL_ENDPOINT,
                {
                    "capability": profile.EXTERNAL_ENDPOINT_CAPABILITY,
                    "node": endpoint_key,
                    "relationship": {"type": profile.PROVIDES_ENDPOINT_TYPE},
                },
            )
        for usage in component.data_aggregates:
            self._require_data(key, profile.USES_DATA, usage)
        for usage in component.backing_data:
            self._require_data(key, profile.USES_BACKING_DATA, usage)

    def _endpoint(self, endpoint: Endpoint) -> str:
        if endpoint.is_external:
            node_type, capability = profile.EXTERNAL_ENDPOINT_TYPE, "external_endpoint"
        else:
            node_type, capability = profile.ENDPOINT_TYPE, "endpoint"

        key = self._new_node(endpoint, node_type, with_properties=False)
        self._nodes[key]["capabilities"] = {capability: {"properties": _properties(endpoint)}}
        for usage in endpoint.data_aggregates:
            self._require_data(key, profile.USES_DATA, usage)
        return key

    def _request_trace(self, trace: RequestTrace) -> None:
        key = self._new_node(trace, profile.REQUEST_TRACE_TYPE)
        node = self._nodes[key]

        link_keys: list[str] = []
        node_keys: list[str] = []
        for link in trace.links:
            link_keys.append(self.key_id_map.get_key(link.id))
            for component in (link.source, self.system.target_component_of_link(link)):
                component_key = self.key_id_map.get_key(component.id)
                if component_key not in node_keys:
                    node_keys.append(component_key)

        properties = node.setdefault("properties", {})
        properties["involved_links"] = link_keys
        properties["nodes"] = node_keys
        properties["link_groups"] = [
            [self.key_id_map.get_key(link.id) for link in group] for group in trace.link_groups
        ]
        if trace.external_endpoint is not None:
            endpoint_key = self.key_id_map.get_key(trace.external_endpoint.id)
            properties["referred_endpoint"] = endpoint_key
            self._require(key, profile.EXTERNAL_ENDPOINT, {"node": endpoint_key})


def convert_system(system: System) -> tuple[Template, TwoWayKeyIdMap]:
    """Template plus the key <-> id map built while converting."""
    converter = ToscaConverter(system)
    template = converter.convert()
    return template, converter.key_id_map
