"""Per-network metric mapper.

Fee policy: 100% of the fee a user pays goes to liquidity suppliers (relayers
and LPs) and the protocol keeps none. So fees, revenue and supply-side revenue
are the same amount and protocol revenue is always zero.
"""

from collections.abc import Mapping
from decimal import Decimal

from across_fees.logging import get_logger
from across_fees.models import MetricReport, PrefetchResult
from across_fees.registry import (
    NETWORK_REGISTRY,
    Network,
    NetworkRegistryEntry,
    get_entry,
)

logger = get_logger(__name__)


def compute_metrics(
    network: Network | str,
    prefetched: PrefetchResult,
    registry: Mapping[Network, NetworkRegistryEntry] = NETWORK_REGISTRY,
) -> MetricReport:
    """Derive the daily metric report for one network from a prefetch result.

    Pure: reads `prefetched` without mutating it. A network missing from the
    result had no qualifying transfers and reports zeros.

    Raises:
        ConfigurationError: If `network` is not registered.
    """
    entry = get_entry(network, registry)
    summary = prefetched.find(entry.query_identifier)

    if summary is None:
        logger.debug(
            "network_absent_from_prefetch",
            network=entry.query_identifier,
            window_start=prefetched.window.start_timestamp,
        )
        return MetricReport.zero()

    fees = summary.total_fees
    return MetricReport(
        daily_fees=fees,
        daily_revenue=fees,
        daily_protocol_revenue=Decimal("0"),
        daily_supply_side_revenue=fees,
    )
