"""Type, requirement and capability names of the CNA quality model TOSCA profile."""

from ..entities import ComponentKind

TOSCA_DEFINITIONS_VERSION = "tosca_simple_yaml_1_3"
TEMPLATE_AUTHOR = "cna-quality"
TEMPLATE_VERSION = "0.1.0"

# Node types
COMPONENT_TYPE = "cna.qualityModel.entities.Root.Component"
SERVICE_TYPE = "cna.qualityModel.entities.SoftwareComponent.Service"
BACKING_SERVICE_TYPE = "cna.qualityModel.entities.BackingService"
STORAGE_BACKING_SERVICE_TYPE = "cna.qualityModel.entities.DBMS.StorageService"
PROXY_BACKING_SERVICE_TYPE = "cna.qualityModel.entities.BackingService.Proxy"
BROKER_BACKING_SERVICE_TYPE = "cna.qualityModel.entities.BackingService.Broker"
ENDPOINT_TYPE = "cna.qualityModel.entities.Endpoint"
EXTERNAL_ENDPOINT_TYPE = "cna.qualityModel.entities.Endpoint.External"
INFRASTRUCTURE_TYPE = "cna.qualityModel.entities.Compute.Infrastructure"
BACKING_DATA_TYPE = "cna.qualityModel.entities.BackingData"
DATA_AGGREGATE_TYPE = "cna.qualityModel.entities.DataAggregate"
REQUEST_TRACE_TYPE = "cna.qualityModel.entities.RequestTrace"

# Relationship types
LINK_TYPE = "cna.qualityModel.relationships.ConnectsTo.Link"
DEPLOYMENT_MAPPING_TYPE = "tosca.relationships.HostedOn"
PROVIDES_ENDPOINT_TYPE = "cna.qualityModel.relationships.Provides.Endpoint"
DATA_USAGE_TYPE = "cna.qualityModel.relationships.AttachesTo.Data"

# Capabilities
ENDPOINT_CAPABILITY = "tosca.capabilities.Endpoint"
EXTERNAL_ENDPOINT_CAPABILITY = "tosca.capabilities.Endpoint.Public"

# Requirement names
PROVIDES_ENDPOINT = "provides_endpoint"
PROVIDES_EXTERNAL_ENDPOINT = "provides_external_endpoint"
USES_DATA = "uses_data"
USES_BACKING_DATA = "uses_backing_data"
HOST = "host"
ENDPOINT_LINK = "endpoint_link"
EXTERNAL_ENDPOINT = "external_endpoint"

COMPONENT_TYPES: dict[ComponentKind, str] = {
    ComponentKind.COMPONENT: COMPONENT_TYPE,
    ComponentKind.SERVICE: SERVICE_TYPE,
    ComponentKind.BACKING_SERVICE: BACKING_SERVICE_TYPE,
    ComponentKind.STORAGE_BACKING_SERVICE: STORAGE_BACKING_SERVICE_TYPE,
    ComponentKind.PROXY_BACKING_SERVICE: PROXY_BACKING_SERVICE_TYPE,
    ComponentKind.BROKER_BACKING_SERVICE: BROKER_BACKING_SERVICE_TYPE,
}

COMPONENT_KINDS_BY_TYPE: dict[str, ComponentKind] = {v: k for k, v in COMPONENT_TYPES.items()}
