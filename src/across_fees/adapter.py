"""Uniform adapter contract consumed by the fee reporting scheduler.

The scheduler calls `prefetch` once per window and `fetch` once per
(network, day), handing each fetch the cached prefetch result through
FetchOptions. Per-network configuration is an immutable mapping from
Network to its activation date, fetch function and methodology.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from datetime import date
from types import MappingProxyType

from across_fees.config import QuerySettings
from across_fees.exceptions import ConfigurationError
from across_fees.logging import get_logger
from across_fees.metrics import compute_metrics
from across_fees.models import FetchRequest, MetricReport, PrefetchOptions, PrefetchResult
from across_fees.prefetch import PrefetchAggregator
from across_fees.query.client import QueryClient
from across_fees.registry import NETWORK_REGISTRY, Network, resolve_network

logger = get_logger(__name__)

ADAPTER_VERSION = 1

METHODOLOGY: Mapping[str, str] = MappingProxyType(
    {
        "Fees": "Total fees paid by users to bridge tokens.",
        "Revenue": "Total fees paid by users to bridge tokens.",
        "ProtocolRevenue": "Across takes 0% of the fees paid by users.",
        "SupplySideRevenue": (
            "Total fees paid by users are distributed to liquidity providers."
        ),
    }
)

FetchFn = Callable[[FetchRequest], MetricReport]
PrefetchFn = Callable[[PrefetchOptions], Awaitable[PrefetchResult]]


def fetch(request: FetchRequest) -> MetricReport:
    """Map one network's slice of the cached prefetch result onto its metrics."""
    return compute_metrics(request.network, request.options.prefetched)


@dataclass(frozen=True)
class ChainAdapter:
    """Per-network entry: fetch function, activation date and methodology."""

    fetch: FetchFn
    start: date
    meta: Mapping[str, str]


@dataclass(frozen=True)
class FeeAdapter:
    """Window-scoped prefetch plus per-network fetch entries."""

    chains: Mapping[Network, ChainAdapter]
    prefetch_fn: PrefetchFn
    version: int = ADAPTER_VERSION
    is_expensive: bool = True

    @property
    def networks(self) -> list[Network]:
        return list(self.chains)

    async def prefetch(self, options: PrefetchOptions) -> PrefetchResult:
        """Run the batched aggregation for options.window."""
        return await self.prefetch_fn(options)

    def fetch(self, request: FetchRequest) -> MetricReport:
        """Dispatch a fetch through the requested network's chain entry.

        Raises:
            ConfigurationError: If the network has no chain entry.
        """
        return self._chain(request.network).fetch(request)

    def start(self, network: Network | str) -> date:
        return self._chain(network).start

    def meta(self, network: Network | str) -> Mapping[str, str]:
        return self._chain(network).meta

    def is_active(self, network: Network | str, day: date) -> bool:
        """True if the day is on or after the network's activation date."""
        return day >= self.start(network)

    def _chain(self, network: Network | str) -> ChainAdapter:
        resolved = resolve_network(network)
        chain = self.chains.get(resolved)
        if chain is None:
            raise ConfigurationError(f"No adapter entry for network {resolved.value!r}")
        return chain


def build_adapter(client: QueryClient, settings: QuerySettings) -> FeeAdapter:
    """Build the adapter once at process start.

    Args:
        client: Query service client used by the prefetch step.
        settings: Query settings (source table name).

    Returns:
        A FeeAdapter with one chain entry per registered network.
    """
    aggregator = PrefetchAggregator(client, table=settings.transfers_table)

    async def prefetch(options: PrefetchOptions) -> PrefetchResult:
        return await aggregator.prefetch(options.window)

    chains = MappingProxyType(
        {
            network: ChainAdapter(fetch=fetch, start=entry.supported_since, meta=METHODOLOGY)
            for network, entry in NETWORK_REGISTRY.items()
        }
    )
    logger.info(
        "adapter_built",
        networks=[network.value for network in chains],
        table=settings.transfers_table,
    )
    return FeeAdapter(chains=chains, prefetch_fn=prefetch)
