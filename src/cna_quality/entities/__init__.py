"""Architecture model: components, endpoints, links, data, infrastructure, request traces."""

from .base import ComponentKind, Entity, EntityKind, MetaData
from .component import (
    COMPONENT_CLASSES,
    BackingService,
    BrokerBackingService,
    Component,
    ProxyBackingService,
    Service,
    StorageBackingService,
)
from .data import (
    CACHED_USAGE,
    PERSISTENCE,
    USAGE,
    BackingData,
    BackingDataUsage,
    DataAggregate,
    DataAggregateUsage,
    DataUsageRelation,
)
from .endpoint import Endpoint, ExternalEndpoint
from .infrastructure import DeploymentMapping, Infrastructure
from .link import Link
from .property import EntityProperty, PropertyDatatype, PropertyOption
from .request_trace import RequestTrace
from .system import System

__all__ = [
    "ComponentKind",
    "Entity",
    "EntityKind",
    "MetaData",
    "COMPONENT_CLASSES",
    "Component",
    "Service",
    "BackingService",
    "StorageBackingService",
    "ProxyBackingService",
    "BrokerBackingService",
    "USAGE",
    "CACHED_USAGE",
    "PERSISTENCE",
    "BackingData",
    "BackingDataUsage",
    "DataAggregate",
    "DataAggregateUsage",
    "DataUsageRelation",
    "Endpoint",
    "ExternalEndpoint",
    "DeploymentMapping",
    "Infrastructure",
    "Link",
    "EntityProperty",
    "PropertyDatatype",
    "PropertyOption",
    "RequestTrace",
    "System",
]
