"""Links: a component invoking an endpoint."""

from __future__ import annotations

from typing import Optional

from ..exceptions import EntityTypeError
from .base import Entity, EntityKind, MetaData
from .component import Component
from .endpoint import Endpoint
from .property import LINK_PROPERTIES, EntityProperty, fresh_properties


class Link(Entity):
    """Directed call relation from a source component to a target endpoint.

    The target's owning component is not stored here; the System resolves it
    through its endpoint index.
    """

    entity_kind = EntityKind.LINK

    def __init__(
        self,
        id: str,
        source: Component,
        target: Endpoint,
        name: str = "",
        metadata: Optional[MetaData] = None,
    ):
        if not isinstance(source, Component):
            raise EntityTypeError("Component", source)
        if not isinstance(target, Endpoint):
            raise EntityTypeError("Endpoint", target)

        super().__init__(id, name, metadata)
        self.source = source
        self.target = target

    def _default_properties(self) -> list[EntityProperty]:
        return fresh_properties(LINK_PROPERTIES)

    def __repr__(self) -> str:
        return f"Link(id={self.id!r}, {self.source.id} -> {self.target.id})"
