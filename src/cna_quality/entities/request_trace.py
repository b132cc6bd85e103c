"""Request traces: the path a request takes through the system."""

from __future__ import annotations

from typing import Iterable, Optional, Union

from ..exceptions import EntityTypeError
from .base import Entity, EntityKind, MetaData
from .endpoint import Endpoint
from .link import Link

LinkStep = Union[Link, Iterable[Link]]


class RequestTrace(Entity):
    """An external endpoint plus an ordered sequence of link groups.

    Each group is one step of the trace; links in the same group happen in
    parallel. A link appears at most once across all groups.
    """

    entity_kind = EntityKind.REQUEST_TRACE

    def __init__(
        self,
        id: str,
        name: str = "",
        external_endpoint: Optional[Endpoint] = None,
        links: Optional[Iterable[LinkStep]] = None,
        metadata: Optional[MetaData] = None,
    ):
        super().__init__(id, name, metadata)
        self._external_endpoint: Optional[Endpoint] = None
        self._link_groups: list[list[Link]] = []
        if external_endpoint is not None:
            self.external_endpoint = external_endpoint
        if links is not None:
            self.set_links(links)

    @property
    def external_endpoint(self) -> Optional[Endpoint]:
        return self._external_endpoint

    @external_endpoint.setter
    def external_endpoint(self, endpoint: Endpoint) -> None:
        if not isinstance(endpoint, Endpoint) or not endpoint.is_external:
            raise EntityTypeError("ExternalEndpoint", endpoint)
        self._external_endpoint = endpoint

    @property
    def link_groups(self) -> list[list[Link]]:
        return [list(group) for group in self._link_groups]

    @property
    def links(self) -> list[Link]:
        """All links in step order."""
        return [link for group in self._link_groups for link in group]

    def set_links(self, steps: Iterable[LinkStep]) -> None:
        """Replace the trace's steps. A bare Link is a step of its own.

        Links already placed in an earlier position are dropped; steps left
        empty by that are removed.
        """
        seen: set[int] = set()
        groups: list[list[Link]] = []
        for step in steps:
            members = [step] if isinstance(step, Link) else list(step)
            group: list[Link] = []
            for link in members:
                if not isinstance(link, Link):
                    raise EntityTypeError("Link", link)
                if id(link) in seen:
                    continue
                seen.add(id(link))
                group.append(link)
            if group:
                groups.append(group)
        self._link_groups = groups

    def snapshot(self) -> tuple:
        entry = self._external_endpoint.id if self._external_endpoint else None
        steps = tuple(tuple(link.id for link in group) for group in self._link_groups)
        return super().snapshot() + (entry, steps)
