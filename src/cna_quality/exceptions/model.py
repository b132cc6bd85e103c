"""Architecture model integrity errors: unresolved references, wrong entity kinds."""

from typing import Any

from .base import CnaQualityError


class ModelIntegrityError(CnaQualityError):
    """Base class for violations of the entity graph's integrity."""

    pass


class EndpointNotFoundError(ModelIntegrityError):
    """Raised when an endpoint id is not provided by any component of a system."""

    def __init__(self, endpoint_id: str):
        super().__init__(
            f"No component provides endpoint: {endpoint_id}",
            details={"endpoint_id": endpoint_id},
        )
        self.endpoint_id = endpoint_id


class EntityNotFoundError(ModelIntegrityError):
    """Raised when an id lookup in a system fails."""

    def __init__(self, entity_kind: str, entity_id: str):
        super().__init__(
            f"Unknown {entity_kind}: {entity_id}",
            details={"entity_kind": entity_kind, "entity_id": entity_id},
        )
        self.entity_kind = entity_kind
        self.entity_id = entity_id


class DuplicateEntityError(ModelIntegrityError):
    """Raised when a different entity is added under an id that is already taken."""

    def __init__(self, entity_kind: str, entity_id: str):
        super().__init__(
            f"Duplicate {entity_kind} id: {entity_id}",
            details={"entity_kind": entity_kind, "entity_id": entity_id},
        )
        self.entity_kind = entity_kind
        self.entity_id = entity_id


class EntityTypeError(ModelIntegrityError, TypeError):
    """Raised when a relation receives an entity of the wrong kind."""

    def __init__(self, expected: str, actual: Any):
        actual_name = getattr(actual, "entity_kind", None) or type(actual).__name__
        super().__init__(
            f"Wrong entity type provided, expected {expected}",
            details={"expected": expected, "actual": str(actual_name)},
        )
        self.expected = expected
        self.actual = actual


class PropertyNotFoundError(ModelIntegrityError, KeyError):
    """Raised when accessing a property key the entity does not declare."""

    def __init__(self, entity_id: str, key: str):
        super().__init__(
            f"Property {key!r} not declared on {entity_id}",
            details={"entity_id": entity_id, "key": key},
        )
        self.entity_id = entity_id
        self.key = key

    # KeyError would otherwise quote the whole message
    def __str__(self) -> str:
        return CnaQualityError.__str__(self)


class InvalidPropertyValueError(ModelIntegrityError, ValueError):
    """Raised when a property value does not match its descriptor."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid value for property {key}: {value!r}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason
