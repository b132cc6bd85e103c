"""Rebuild a System from a TOSCA service template."""

from __future__ import annotations

from typing import Any, Optional, Union

from ..entities import (
    COMPONENT_CLASSES,
    BackingData,
    Component,
    DataAggregate,
    DataUsageRelation,
    DeploymentMapping,
    Endpoint,
    Entity,
    ExternalEndpoint,
    Infrastructure,
    Link,
    MetaData,
    RequestTrace,
    System,
)
from ..exceptions import TemplateFormatError
from ..logging_config import get_logger
from . import profile
from .keys import TwoWayKeyIdMap

logger = get_logger(__name__)

Template = dict[str, Any]

_KNOWN_NODE_TYPES = set(profile.COMPONENT_KINDS_BY_TYPE) | {
    profile.DATA_AGGREGATE_TYPE,
    profile.BACKING_DATA_TYPE,
    profile.ENDPOINT_TYPE,
    profile.EXTERNAL_ENDPOINT_TYPE,
    profile.INFRASTRUCTURE_TYPE,
    profile.REQUEST_TRACE_TYPE,
}


def _requirements(node: Template) -> list[tuple[str, dict[str, Any]]]:
    """(requirement name, assignment) pairs of a node template.

    The short form ``{name: node_key}`` is accepted as well.
    """
    pairs = []
    for requirement in node.get("requirements") or []:
        for name, assignment in requirement.items():
            if isinstance(assignment, str):
                assignment = {"node": assignment}
            pairs.append((name, assignment))
    return pairs


class ToscaImporter:
    """Reads one service template into a new System.

    Entity ids come from ``metadata.id`` of each template; templates
    without one fall back to the key/id map if given, then to the key.
    Node templates of types outside the profile are skipped with a warning.
    """

    def __init__(self, template: Template, key_id_map: Optional[TwoWayKeyIdMap] = None):
        try:
            topology = template["topology_template"]
        except (KeyError, TypeError):
            raise TemplateFormatError("missing topology_template") from None
        self.template = template
        self.key_id_map = key_id_map
        self._nodes: dict[str, Template] = topology.get("node_templates") or {}
        self._relationships: dict[str, Template] = topology.get("relationship_templates") or {}
        self._entities: dict[str, Entity] = {}

    def to_system(self) -> System:
        metadata = self.template.get("metadata") or {}
        name = metadata.get("template_name", "")
        system = System(metadata.get("system_id") or name or "system", name)

        by_type: dict[str, list[str]] = {}
        for key, node in self._nodes.items():
            node_type = node.get("type")
            if node_type is None:
                raise TemplateFormatError("node template without type", key=key)
            by_type.setdefault(node_type, []).append(key)

        for node_type, keys in by_type.items():
            if node_type not in _KNOWN_NODE_TYPES:
                logger.warning(f"Skipping {len(keys)} node templates of unknown type {node_type}")

        data_keys = by_type.get(profile.DATA_AGGREGATE_TYPE, [])
        backing_data_keys = by_type.get(profile.BACKING_DATA_TYPE, [])
        infrastructure_keys = by_type.get(profile.INFRASTRUCTURE_TYPE, [])
        endpoint_keys = by_type.get(profile.ENDPOINT_TYPE, []) + by_type.get(
            profile.EXTERNAL_ENDPOINT_TYPE, []
        )
        component_keys = [
            key
            for key, node in self._nodes.items()
            if node["type"] in profile.COMPONENT_KINDS_BY_TYPE
        ]

        for key in data_keys:
            self._entities[key] = self._with_attributes(DataAggregate, key, self._nodes[key])
        for key in backing_data_keys:
            self._entities[key] = self._with_attributes(BackingData, key, self._nodes[key])
        for key in endpoint_keys:
            self._entities[key] = self._endpoint(key)
        for key in infrastructure_keys:
            self._entities[key] = self._infrastructure(key)
        for key in component_keys:
            self._entities[key] = self._component(key)

        for keys in (data_keys, backing_data_keys, infrastructure_keys, component_keys):
            system.add_entities(self._entities[key] for key in keys)
        system.add_entities(self._deployment_mappings())
        system.add_entities(self._links())
        system.add_entities(
            self._request_trace(key) for key in by_type.get(profile.REQUEST_TRACE_TYPE, [])
        )

        logger.debug(f"Imported {system!r}")
        return system

    # ── Lookups ────────────────────────────────────────────────────

    def _entity_id(self, key: str, template: Template) -> str:
        entity_id = (template.get("metadata") or {}).get("id")
        if entity_id:
            return entity_id
        if self.key_id_map is not None and self.key_id_map.has_key(key):
            return self.key_id_map.get_id(key)
        return key

    def _entity(self, key: Any, expected: Union[type, tuple[type, ...]], referenced_by: str) -> Any:
        entity = self._entities.get(key) if isinstance(key, str) else None
        if entity is None:
            raise TemplateFormatError(f"{referenced_by} refers to unknown node {key!r}")
        if not isinstance(entity, expected):
            raise TemplateFormatError(
                f"{referenced_by} refers to {key!r}, a {type(entity).__name__}", key=key
            )
        return entity

    def _relationship(self, assignment: dict[str, Any], referenced_by: str) -> tuple[str, Template]:
        key = assignment.get("relationship")
        if not isinstance(key, str) or key not in self._relationships:
            raise TemplateFormatError(f"{referenced_by} refers to unknown relationship {key!r}")
        return key, self._relationships[key]

    # ── Entities ───────────────────────────────────────────────────

    def _with_attributes(self, cls: type, key: str, template: Template, **kwargs: Any) -> Any:
        """Instantiate cls with id, name, layout and properties taken from a template."""
        metadata = template.get("metadata") or {}
        entity = cls(
            self._entity_id(key, template),
            name=metadata.get("name", key),
            metadata=MetaData.from_dict(metadata),
            **kwargs,
        )
        self._apply_properties(entity, template.get("properties") or {}, key)
        return entity

    def _apply_properties(self, entity: Entity, properties: dict[str, Any], key: str) -> None:
        for name, value in properties.items():
            if entity.has_property(name):
                entity.set_property_value(name, value)
            else:
                logger.warning(f"Ignoring unknown property {name!r} of {key}")

    def _usage_relation(self, assignment: dict[str, Any], owner_key: str) -> DataUsageRelation:
        if "relationship" not in assignment:
            return DataUsageRelation(f"{owner_key}__{assignment.get('node')}")
        key, relationship = self._relationship(assignment, owner_key)
        return self._with_attributes(DataUsageRelation, key, relationship)

    def _attach_data(self, owner: Union[Component, Endpoint, Infrastructure], key: str) -> None:
        for name, assignment in _requirements(self._nodes[key]):
            referenced_by = f"{key}.{name}"
            if name == profile.USES_DATA and not isinstance(owner, Infrastructure):
                data = self._entity(assignment.get("node"), DataAggregate, referenced_by)
                owner.add_data_aggregate(data, self._usage_relation(assignment, key))
            elif name == profile.USES_BACKING_DATA and not isinstance(owner, Endpoint):
                data = self._entity(assignment.get("node"), BackingData, referenced_by)
                owner.add_backing_data(data, self._usage_relation(assignment, key))

    def _endpoint(self, key: str) -> Endpoint:
        node = self._nodes[key]
        cls = ExternalEndpoint if node["type"] == profile.EXTERNAL_ENDPOINT_TYPE else Endpoint
        endpoint = self._with_attributes(cls, key, node)
        for capability in (node.get("capabilities") or {}).values():
            if isinstance(capability, dict):
                self._apply_properties(endpoint, capability.get("properties") or {}, key)
        self._attach_data(endpoint, key)
        return endpoint

    def _infrastructure(self, key: str) -> Infrastructure:
        infrastructure = self._with_attributes(Infrastructure, key, self._nodes[key])
        self._attach_data(infrastructure, key)
        return infrastructure

    def _component(self, key: str) -> Component:
        node = self._nodes[key]
        cls = COMPONENT_CLASSES[profile.COMPONENT_KINDS_BY_TYPE[node["type"]]]
        component = self._with_attributes(cls, key, node)
        for name, assignment in _requirements(node):
            if name in (profile.PROVIDES_ENDPOINT, profile.PROVIDES_EXTERNAL_ENDPOINT):
                endpoint = self._entity(assignment.get("node"), Endpoint, f"{key}.{name}")
                component.add_endpoint(endpoint)
        self._attach_data(component, key)
        return component

    def _deployment_mappings(self) -> list[DeploymentMapping]:
        mappings = []
        for key, node in self._nodes.items():
            for name, assignment in _requirements(node):
                if name != profile.HOST:
                    continue
                referenced_by = f"{key}.{name}"
                deployed = self._entity(key, (Component, Infrastructure), referenced_by)
                host = self._entity(assignment.get("node"), Infrastructure, referenced_by)
                relationship_key, relationship = self._relationship(assignment, referenced_by)
                mappings.append(
                    self._with_attributes(
                        DeploymentMapping,
                        relationship_key,
                        relationship,
                        deployed_entity=deployed,
                        underlying_infrastructure=host,
                    )
                )
        return mappings

    def _links(self) -> list[Link]:
        links = []
        for key, node in self._nodes.items():
            for name, assignment in _requirements(node):
                if name != profile.ENDPOINT_LINK:
                    continue
                referenced_by = f"{key}.{name}"
                source = self._entity(key, Component, referenced_by)
                target = self._entity(assignment.get("node"), Endpoint, referenced_by)
                relationship_key, relationship = self._relationship(assignment, referenced_by)
                link = self._with_attributes(
                    Link, relationship_key, relationship, source=source, target=target
                )
                self._entities[relationship_key] = link
                links.append(link)
        return links

    def _request_trace(self, key: str) -> RequestTrace:
        node = self._nodes[key]
        properties = dict(node.get("properties") or {})
        endpoint_key = properties.pop("referred_endpoint", None)
        for name, assignment in _requirements(node):
            if name == profile.EXTERNAL_ENDPOINT:
                endpoint_key = assignment.get("node", endpoint_key)

        # Without link_groups every involved link is a step of its own
        involved = properties.pop("involved_links", [])
        groups = properties.pop("link_groups", None) or [[link_key] for link_key in involved]
        properties.pop("nodes", None)

        steps = [
            [self._entity(link_key, Link, f"{key}.link_groups") for link_key in group]
            for group in groups
        ]
        trace = self._with_attributes(
            RequestTrace, key, {**node, "properties": properties}, links=steps
        )
        if endpoint_key is not None:
            trace.external_endpoint = self._entity(
                endpoint_key, ExternalEndpoint, f"{key}.{profile.EXTERNAL_ENDPOINT}"
            )
        return trace


def import_template(
    template: Template, key_id_map: Optional[TwoWayKeyIdMap] = None
) -> System:
    return ToscaImporter(template, key_id_map).to_system()
