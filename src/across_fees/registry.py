"""Static registry of supported destination networks.

Built once at import time and exposed as a read-only mapping. Each entry
carries the identifier the upstream transfers table uses for the network
and the first day with valid fee data. Schedulers must not request days
before `supported_since`; doing so yields zero metrics, which is accurate
(no transfers existed) but indistinguishable from a day without traffic.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from enum import Enum
from types import MappingProxyType

from across_fees.exceptions import ConfigurationError


class Network(str, Enum):
    """Destination networks reported by the adapter."""

    ETHEREUM = "ethereum"
    ARBITRUM = "arbitrum"
    OPTIMISM = "optimism"
    POLYGON = "polygon"
    BASE = "base"
    ZKSYNC = "era"
    LINEA = "linea"
    UNICHAIN = "unichain"
    BLAST = "blast"
    SCROLL = "scroll"


@dataclass(frozen=True)
class NetworkRegistryEntry:
    """Upstream identifier and activation date for one network."""

    query_identifier: str
    supported_since: date


NETWORK_REGISTRY: MappingProxyType[Network, NetworkRegistryEntry] = MappingProxyType(
    {
        Network.ETHEREUM: NetworkRegistryEntry("ethereum", date(2023, 4, 30)),
        Network.ARBITRUM: NetworkRegistryEntry("arbitrum", date(2023, 4, 30)),
        Network.OPTIMISM: NetworkRegistryEntry("optimism", date(2023, 4, 30)),
        Network.POLYGON: NetworkRegistryEntry("polygon", date(2023, 4, 30)),
        Network.BASE: NetworkRegistryEntry("base", date(2023, 8, 22)),
        Network.ZKSYNC: NetworkRegistryEntry("era", date(2023, 8, 10)),
        Network.LINEA: NetworkRegistryEntry("linea", date(2024, 4, 20)),
        Network.UNICHAIN: NetworkRegistryEntry("unichain", date(2025, 2, 6)),
        Network.BLAST: NetworkRegistryEntry("blast", date(2024, 7, 10)),
        Network.SCROLL: NetworkRegistryEntry("scroll", date(2024, 7, 31)),
    }
)


def resolve_network(
    network: Network | str,
    registry: Mapping[Network, NetworkRegistryEntry] = NETWORK_REGISTRY,
) -> Network:
    """Coerce a Network or its string value into a registered Network.

    Raises:
        ConfigurationError: If the identifier is unknown or not registered.
    """
    try:
        resolved = Network(network)
    except ValueError:
        raise ConfigurationError(f"Unknown network: {network!r}") from None
    if resolved not in registry:
        raise ConfigurationError(f"Network {resolved.value!r} is not registered")
    return resolved


def get_entry(
    network: Network | str,
    registry: Mapping[Network, NetworkRegistryEntry] = NETWORK_REGISTRY,
) -> NetworkRegistryEntry:
    """Return the registry entry for a network, raising ConfigurationError if absent."""
    return registry[resolve_network(network, registry)]
