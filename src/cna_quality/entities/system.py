"""System: the root container of an architecture model and its graph queries."""

from __future__ import annotations

from typing import Iterable, Optional

from ..exceptions import (
    DuplicateEntityError,
    EndpointNotFoundError,
    EntityNotFoundError,
    EntityTypeError,
)
from ..graph import shortest_path_length as _shortest_path_length
from ..logging_config import get_logger
from .base import ComponentKind, Entity, EntityKind
from .component import Component
from .data import BackingData, DataAggregate
from .endpoint import Endpoint
from .infrastructure import DeploymentMapping, Infrastructure
from .link import Link
from .request_trace import RequestTrace

logger = get_logger(__name__)


class System:
    """Root container holding every entity of one architecture model.

    Entity ids are unique across the whole system. Adding the same instance
    twice is a no-op; adding a different entity under a taken id raises
    DuplicateEntityError.

    Indices kept alongside the entity maps:
        endpoint id -> owning component id
        component id -> outgoing links / incoming links

    The endpoint index is refreshed from the components on a lookup miss,
    so endpoints added to a component after the component joined the system
    are still found.
    """

    def __init__(self, id: str, name: str = ""):
        self.id = id
        self.name = name or id

        self._components: dict[str, Component] = {}
        self._data_aggregates: dict[str, DataAggregate] = {}
        self._backing_data: dict[str, BackingData] = {}
        self._infrastructure: dict[str, Infrastructure] = {}
        self._deployment_mappings: dict[str, DeploymentMapping] = {}
        self._links: dict[str, Link] = {}
        self._request_traces: dict[str, RequestTrace] = {}

        self._entities_by_id: dict[str, Entity] = {}
        self._endpoint_owner: dict[str, str] = {}
        self._outgoing: dict[str, list[Link]] = {}
        self._incoming: dict[str, list[Link]] = {}

    # ── Mutation ───────────────────────────────────────────────────

    def add_entity(self, entity: Entity) -> None:
        """Add one entity, dispatching on its kind.

        References must already be resolvable: links need their source
        component and target endpoint in the system, deployment mappings
        their entities, request traces their links and entry endpoint.
        """
        kind = getattr(entity, "entity_kind", None)
        if kind is EntityKind.COMPONENT:
            self._add_component(entity)  # type: ignore[arg-type]
        elif kind is EntityKind.DATA_AGGREGATE:
            self._register(entity, self._data_aggregates)
        elif kind is EntityKind.BACKING_DATA:
            self._register(entity, self._backing_data)
        elif kind is EntityKind.INFRASTRUCTURE:
            self._register(entity, self._infrastructure)
        elif kind is EntityKind.DEPLOYMENT_MAPPING:
            self._add_deployment_mapping(entity)  # type: ignore[arg-type]
        elif kind is EntityKind.LINK:
            self._add_link(entity)  # type: ignore[arg-type]
        elif kind is EntityKind.REQUEST_TRACE:
            self._add_request_trace(entity)  # type: ignore[arg-type]
        else:
            raise EntityTypeError(
                "Component, DataAggregate, BackingData, Infrastructure, "
                "DeploymentMapping, Link or RequestTrace",
                entity,
            )

    def add_entities(self, entities: Iterable[Entity]) -> None:
        for entity in entities:
            self.add_entity(entity)

    def _claim_id(self, entity: Entity) -> bool:
        """Reserve entity.id. Returns False if this very instance already holds it."""
        existing = self._entities_by_id.get(entity.id)
        if existing is entity:
            return False
        if existing is not None:
            raise DuplicateEntityError(entity.entity_kind.value, entity.id)
        self._entities_by_id[entity.id] = entity
        return True

    def _register(self, entity: Entity, table: dict) -> bool:
        if not self._claim_id(entity):
            return False
        table[entity.id] = entity
        logger.debug(f"Added {entity.entity_kind.value} {entity.id} to system {self.id}")
        return True

    def _add_component(self, component: Component) -> None:
        if self._components.get(component.id) is component:
            return

        # Endpoint ids must be free before the component itself is registered
        for endpoint in component.all_endpoints():
            if endpoint.id in self._entities_by_id or endpoint.id == component.id:
                raise DuplicateEntityError("endpoint", endpoint.id)

        self._register(component, self._components)

        self._outgoing.setdefault(component.id, [])
        self._incoming.setdefault(component.id, [])
        for endpoint in component.all_endpoints():
            self._entities_by_id[endpoint.id] = endpoint
            self._endpoint_owner[endpoint.id] = component.id

    def _add_deployment_mapping(self, mapping: DeploymentMapping) -> None:
        self._require_member(mapping.deployed_entity)
        self._require_member(mapping.underlying_infrastructure)
        self._register(mapping, self._deployment_mappings)

    def _add_link(self, link: Link) -> None:
        self._require_member(link.source)
        owner = self.search_component_of_endpoint(link.target.id)
        if not self._register(link, self._links):
            return
        self._outgoing[link.source.id].append(link)
        self._incoming[owner.id].append(link)

    def _add_request_trace(self, trace: RequestTrace) -> None:
        if trace.external_endpoint is not None:
            self.search_component_of_endpoint(trace.external_endpoint.id)
        for link in trace.links:
            self._require_member(link)
        self._register(trace, self._request_traces)

    def _require_member(self, entity: Entity) -> None:
        if self._entities_by_id.get(entity.id) is not entity:
            raise EntityNotFoundError(entity.entity_kind.value, entity.id)

    # ── Entity access ──────────────────────────────────────────────

    @property
    def components(self) -> list[Component]:
        return list(self._components.values())

    @property
    def data_aggregates(self) -> list[DataAggregate]:
        return list(self._data_aggregates.values())

    @property
    def backing_data(self) -> list[BackingData]:
        return list(self._backing_data.values())

    @property
    def infrastructure(self) -> list[Infrastructure]:
        return list(self._infrastructure.values())

    @property
    def deployment_mappings(self) -> list[DeploymentMapping]:
        return list(self._deployment_mappings.values())

    @property
    def links(self) -> list[Link]:
        return list(self._links.values())

    @property
    def request_traces(self) -> list[RequestTrace]:
        return list(self._request_traces.values())

    def get_component(self, component_id: str) -> Component:
        try:
            return self._components[component_id]
        except KeyError:
            raise EntityNotFoundError("component", component_id) from None

    def get_link(self, link_id: str) -> Link:
        try:
            return self._links[link_id]
        except KeyError:
            raise EntityNotFoundError("link", link_id) from None

    def get_request_trace(self, trace_id: str) -> RequestTrace:
        try:
            return self._request_traces[trace_id]
        except KeyError:
            raise EntityNotFoundError("request_trace", trace_id) from None

    def get_endpoint(self, endpoint_id: str) -> Endpoint:
        component = self.search_component_of_endpoint(endpoint_id)
        for endpoint in component.all_endpoints():
            if endpoint.id == endpoint_id:
                return endpoint
        raise EndpointNotFoundError(endpoint_id)

    def all_endpoints(self) -> list[Endpoint]:
        return [e for component in self._components.values() for e in component.all_endpoints()]

    def external_endpoints(self) -> list[Endpoint]:
        return [
            e for component in self._components.values() for e in component.external_endpoints
        ]

    def components_of_kind(self, *kinds: ComponentKind) -> list[Component]:
        return [c for c in self._components.values() if c.component_kind in kinds]

    def deployment_mappings_of(self, entity_id: str) -> list[DeploymentMapping]:
        """Mappings placing the given component or infrastructure somewhere."""
        return [m for m in self._deployment_mappings.values() if m.deployed_entity.id == entity_id]

    def links_of_request_trace(self, trace_id: str) -> list[Link]:
        return self.get_request_trace(trace_id).links

    # ── Graph queries ──────────────────────────────────────────────

    def search_component_of_endpoint(self, endpoint_id: str) -> Component:
        """The component providing the endpoint. Raises EndpointNotFoundError."""
        owner_id = self._endpoint_owner.get(endpoint_id)
        if owner_id is None:
            self._refresh_endpoint_index()
            owner_id = self._endpoint_owner.get(endpoint_id)
        if owner_id is None:
            raise EndpointNotFoundError(endpoint_id)
        return self._components[owner_id]

    def _refresh_endpoint_index(self) -> None:
        for component in self._components.values():
            for endpoint in component.all_endpoints():
                owner_id = self._endpoint_owner.get(endpoint.id)
                if owner_id == component.id:
                    continue
                if owner_id is not None:
                    raise DuplicateEntityError("endpoint", endpoint.id)
                if self._entities_by_id.get(endpoint.id, endpoint) is not endpoint:
                    raise DuplicateEntityError("endpoint", endpoint.id)
                self._entities_by_id[endpoint.id] = endpoint
                self._endpoint_owner[endpoint.id] = component.id
                logger.debug(f"Indexed endpoint {endpoint.id} of component {component.id}")

    def outgoing_links_of_component(self, component_id: str) -> list[Link]:
        self.get_component(component_id)
        return list(self._outgoing.get(component_id, []))

    def incoming_links_of_component(self, component_id: str) -> list[Link]:
        self.get_component(component_id)
        return list(self._incoming.get(component_id, []))

    def target_component_of_link(self, link: Link) -> Component:
        return self.search_component_of_endpoint(link.target.id)

    def component_adjacency(self) -> dict[str, list[str]]:
        """Component id -> distinct ids of invoked components, in link order."""
        adjacency: dict[str, list[str]] = {cid: [] for cid in self._components}
        for link in self._links.values():
            target_id = self._endpoint_owner[link.target.id]
            if target_id not in adjacency[link.source.id]:
                adjacency[link.source.id].append(target_id)
        return adjacency

    def shortest_path_length(self, from_component_id: str, to_component_id: str) -> Optional[int]:
        """Directed hop count between two components, None if unreachable.

        A component reaches itself in 0 hops.
        """
        self.get_component(from_component_id)
        self.get_component(to_component_id)
        return _shortest_path_length(
            self.component_adjacency(), from_component_id, to_component_id
        )

    def __repr__(self) -> str:
        return (
            f"System(id={self.id!r}, components={len(self._components)}, "
            f"links={len(self._links)}, request_traces={len(self._request_traces)})"
        )
