"""Common entity machinery: kinds, layout metadata and the property-carrying base."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, ClassVar, Iterable, Optional

from ..exceptions import PropertyNotFoundError
from .property import EntityProperty


class EntityKind(Enum):
    """Closed set of entity kinds in the architecture model."""

    COMPONENT = "component"
    ENDPOINT = "endpoint"
    EXTERNAL_ENDPOINT = "external_endpoint"
    LINK = "link"
    INFRASTRUCTURE = "infrastructure"
    DEPLOYMENT_MAPPING = "deployment_mapping"
    REQUEST_TRACE = "request_trace"
    DATA_AGGREGATE = "data_aggregate"
    BACKING_DATA = "backing_data"
    DATA_USAGE_RELATION = "data_usage_relation"


class ComponentKind(Enum):
    """Specialisations of Component. Stored as a tag on every component."""

    COMPONENT = "component"
    SERVICE = "service"
    BACKING_SERVICE = "backing_service"
    STORAGE_BACKING_SERVICE = "storage_backing_service"
    PROXY_BACKING_SERVICE = "proxy_backing_service"
    BROKER_BACKING_SERVICE = "broker_backing_service"


@dataclass
class MetaData:
    """Diagram layout information. Carried through conversion, never evaluated."""

    label: str = ""
    x: float = 0
    y: float = 0
    width: float = 0
    height: float = 0
    fill_color: str = ""
    stroke_color: str = ""
    stroke_width: float = 0
    text_color: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> MetaData:
        if not data:
            return cls()
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**known)


class Entity:
    """Base of every model entity: identity, name, layout and typed properties.

    Entities compare by identity. ``snapshot()`` gives a structural view used
    where two separately constructed instances must be recognised as equal.
    """

    entity_kind: ClassVar[EntityKind]

    def __init__(self, id: str, name: str = "", metadata: Optional[MetaData] = None):
        self.id = id
        self.name = name
        self.metadata = metadata if metadata is not None else MetaData()
        self._properties: list[EntityProperty] = self._default_properties()

    def _default_properties(self) -> list[EntityProperty]:
        return []

    # ── Properties ─────────────────────────────────────────────────

    @property
    def properties(self) -> list[EntityProperty]:
        return list(self._properties)

    def add_properties(self, properties: Iterable[EntityProperty]) -> None:
        """Add descriptors; a descriptor with an existing key replaces the old one."""
        for prop in properties:
            existing = self._find_property(prop.key)
            if existing is not None:
                self._properties.remove(existing)
            self._properties.append(prop)

    def _find_property(self, key: str) -> Optional[EntityProperty]:
        for prop in self._properties:
            if prop.key == key:
                return prop
        return None

    def get_property(self, key: str) -> EntityProperty:
        prop = self._find_property(key)
        if prop is None:
            raise PropertyNotFoundError(self.id, key)
        return prop

    def has_property(self, key: str) -> bool:
        return self._find_property(key) is not None

    def property_value(self, key: str, default: Any = None) -> Any:
        """Current value of a property, or default if undeclared or unset."""
        prop = self._find_property(key)
        if prop is None or prop.value is None:
            return default
        return prop.value

    def set_property_value(self, key: str, value: Any) -> None:
        self.get_property(key).set_value(value)

    def property_values(self) -> dict[str, Any]:
        return {prop.key: prop.value for prop in self._properties}

    # ── Identity ───────────────────────────────────────────────────

    def snapshot(self) -> tuple:
        return (
            self.entity_kind,
            self.id,
            self.name,
            tuple(sorted(self.property_values().items(), key=lambda kv: kv[0])),
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, name={self.name!r})"
