"""Entity properties: typed, named attribute descriptors with a current value.

Every entity kind receives a fresh list of descriptors built from the schema
tables below, so mutating one entity's property never leaks into another.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Iterable, Optional

from ..exceptions import InvalidPropertyValueError


class PropertyDatatype(Enum):
    """Value domains a property can declare."""

    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    LIST = "list"  # one of the declared options
    MAP = "map"


@dataclass(frozen=True)
class PropertyOption:
    """One selectable value of a LIST property."""

    value: str
    text: str


@dataclass
class EntityProperty:
    """A typed, named attribute of an entity.

    Attributes:
        key: Unique key within the entity, used by measures and the converter
        name: Human-readable label
        description: Help text
        example: Placeholder example value
        required: Whether a value is mandatory
        datatype: Declared value domain
        max_length: Maximum number of digits (NUMBER only)
        options: Allowed values (LIST only)
        value: Current value
    """

    key: str
    name: str
    description: str = ""
    example: str = ""
    required: bool = False
    datatype: PropertyDatatype = PropertyDatatype.TEXT
    max_length: Optional[int] = None
    options: tuple[PropertyOption, ...] = field(default_factory=tuple)
    value: Any = None

    def validate(self, value: Any) -> None:
        """Raise InvalidPropertyValueError if value does not fit this descriptor."""
        if value is None:
            return

        if self.datatype is PropertyDatatype.BOOLEAN:
            if not isinstance(value, bool):
                raise InvalidPropertyValueError(self.key, value, "expected a boolean")
        elif self.datatype is PropertyDatatype.NUMBER:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidPropertyValueError(self.key, value, "expected a number")
            if self.max_length is not None and len(str(abs(int(value)))) > self.max_length:
                raise InvalidPropertyValueError(
                    self.key, value, f"more than {self.max_length} digits"
                )
        elif self.datatype is PropertyDatatype.LIST:
            allowed = {option.value for option in self.options}
            if allowed and value not in allowed:
                raise InvalidPropertyValueError(
                    self.key, value, f"expected one of {', '.join(sorted(allowed))}"
                )
        elif self.datatype is PropertyDatatype.MAP:
            if not isinstance(value, dict):
                raise InvalidPropertyValueError(self.key, value, "expected a mapping")
        elif not isinstance(value, str):
            raise InvalidPropertyValueError(self.key, value, "expected text")

    def set_value(self, value: Any) -> None:
        self.validate(value)
        self.value = value


def _options(*values: str) -> tuple[PropertyOption, ...]:
    return tuple(PropertyOption(value=v, text=v) for v in values)


def fresh_properties(*schemas: Iterable[EntityProperty]) -> list[EntityProperty]:
    """Copy descriptors from schema tables so each entity owns its own values."""
    result: list[EntityProperty] = []
    for schema in schemas:
        for prop in schema:
            value = dict(prop.value) if isinstance(prop.value, dict) else prop.value
            result.append(replace(prop, value=value))
    return result


# ── Schema tables ──────────────────────────────────────────────────

COMPONENT_PROPERTIES: tuple[EntityProperty, ...] = (
    EntityProperty(
        key="managed",
        name="Managed cloud service?",
        description="A component is managed if it is operated by a cloud provider.",
        example="e.g. yes",
        datatype=PropertyDatatype.BOOLEAN,
        value=False,
    ),
    EntityProperty(
        key="stateless",
        name="Stateless?",
        description="A component is stateless if it keeps no state between requests.",
        datatype=PropertyDatatype.BOOLEAN,
        value=True,
    ),
    EntityProperty(
        key="software_type",
        name="Software type",
        description="Implementation technology of the component.",
        example="e.g. Java Spring Boot",
    ),
)

BACKING_SERVICE_PROPERTIES: tuple[EntityProperty, ...] = (
    EntityProperty(
        key="provided_functionality",
        name="Provided Functionality:",
        description="A short description of the provided functionality.",
        example="e.g. Logging",
    ),
)

STORAGE_BACKING_SERVICE_PROPERTIES: tuple[EntityProperty, ...] = (
    EntityProperty(
        key="shards",
        name="Shards",
        description="Number of shards the stored data is partitioned into.",
        example="e.g. 3",
        datatype=PropertyDatatype.NUMBER,
        max_length=4,
        value=1,
    ),
)

ENDPOINT_PROPERTIES: tuple[EntityProperty, ...] = (
    EntityProperty(
        key="protocol",
        name="Protocol:",
        description="Protocol used to invoke the endpoint.",
        example="e.g. https",
        datatype=PropertyDatatype.LIST,
        options=_options("http", "https", "sftp", "ftp", "grpc", "amqp", "mqtt", "kafka", "tcp", "udp"),
        value="http",
    ),
    EntityProperty(
        key="url_path",
        name="Endpoint Path:",
        description="Path under which the endpoint is reachable.",
        example="e.g. /orders",
        value="",
    ),
    EntityProperty(
        key="port",
        name="Port:",
        description="Port the endpoint listens on.",
        example="e.g. 3306",
        datatype=PropertyDatatype.NUMBER,
        max_length=5,
    ),
    EntityProperty(
        key="kind",
        name="Endpoint kind:",
        description="Whether the endpoint answers queries, accepts commands or emits events.",
        datatype=PropertyDatatype.LIST,
        options=_options("query", "command", "event"),
        value="query",
    ),
    EntityProperty(
        key="health_check",
        name="Health check endpoint?",
        datatype=PropertyDatatype.BOOLEAN,
        value=False,
    ),
    EntityProperty(
        key="readiness_check",
        name="Readiness check endpoint?",
        datatype=PropertyDatatype.BOOLEAN,
        value=False,
    ),
)

DEPLOYMENT_MAPPING_PROPERTIES: tuple[EntityProperty, ...] = (
    EntityProperty(
        key="replicas",
        name="Replicas",
        description="Number of instances deployed on the underlying infrastructure.",
        example="e.g. 3",
        datatype=PropertyDatatype.NUMBER,
        max_length=4,
        value=1,
    ),
)

INFRASTRUCTURE_PROPERTIES: tuple[EntityProperty, ...] = (
    EntityProperty(
        key="kind",
        name="Infrastructure kind",
        datatype=PropertyDatatype.LIST,
        options=_options("compute", "container-runtime", "orchestrator", "serverless", "other"),
        value="compute",
    ),
    EntityProperty(
        key="environment_access",
        name="Environment access",
        description="How much access operators have to the environment.",
        datatype=PropertyDatatype.LIST,
        options=_options("full", "limited", "none"),
        value="full",
    ),
)

BACKING_DATA_PROPERTIES: tuple[EntityProperty, ...] = (
    EntityProperty(
        key="included_data",
        name="Included data",
        description="Named backing data elements (configuration values, secrets, ...).",
        required=True,
        datatype=PropertyDatatype.MAP,
        value={},
    ),
)

DATA_USAGE_RELATION_PROPERTIES: tuple[EntityProperty, ...] = (
    EntityProperty(
        key="usage_relation",
        name="Usage relation",
        description="How the data is used by the component or endpoint.",
        datatype=PropertyDatatype.LIST,
        options=_options("usage", "cached-usage", "persistence"),
        value="usage",
    ),
)

LINK_PROPERTIES: tuple[EntityProperty, ...] = (
    EntityProperty(
        key="relation_type",
        name="Relation type",
        description="Kind of interaction the link stands for.",
        example="e.g. REST call",
    ),
)
