"""Feature constants the calculators classify endpoints and data usage by."""

from ..entities import CACHED_USAGE, PERSISTENCE, USAGE, Endpoint

PROTOCOLS_SUPPORTING_TLS: tuple[str, ...] = ("https", "sftp")

SYNCHRONOUS_ENDPOINT_KINDS: tuple[str, ...] = ("query", "command")
ASYNCHRONOUS_ENDPOINT_KINDS: tuple[str, ...] = ("event",)

# Weight of a data usage relation; persistence > usage > cached-usage
USAGE_RELATION_WEIGHTS: dict[str, float] = {
    PERSISTENCE: 0.5,
    USAGE: 0.25,
    CACHED_USAGE: 0.1,
}
MAX_USAGE_RELATION_WEIGHT = max(USAGE_RELATION_WEIGHTS.values())


def supports_tls(endpoint: Endpoint) -> bool:
    return endpoint.protocol in PROTOCOLS_SUPPORTING_TLS


def is_synchronous(endpoint: Endpoint) -> bool:
    return endpoint.kind in SYNCHRONOUS_ENDPOINT_KINDS


def is_asynchronous(endpoint: Endpoint) -> bool:
    return endpoint.kind in ASYNCHRONOUS_ENDPOINT_KINDS


def usage_weight(usage_relation: str) -> float:
    """Weight of a usage relation; unknown relations weigh as plain usage."""
    return USAGE_RELATION_WEIGHTS.get(usage_relation, USAGE_RELATION_WEIGHTS[USAGE])
