"""Shared data models for the bridge fee adapter.

CRITICAL: All monetary values use Decimal. Never use float for fees or revenue.
Every model is frozen: a PrefetchResult is shared read-only across all
per-network fetches of its window.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from across_fees.registry import Network

SECONDS_PER_DAY = 86_400

_ZERO = Decimal("0")


@dataclass(frozen=True)
class TimeWindow:
    """Half-open interval [start_timestamp, end_timestamp) in Unix epoch seconds.

    Not validated on construction: callers check is_valid before handing a
    window to the prefetch step.
    """

    start_timestamp: int
    end_timestamp: int

    @classmethod
    def for_day(cls, day: date) -> TimeWindow:
        """Return the UTC calendar-day window for a date."""
        start = int(datetime(day.year, day.month, day.day, tzinfo=timezone.utc).timestamp())
        return cls(start_timestamp=start, end_timestamp=start + SECONDS_PER_DAY)

    @property
    def is_valid(self) -> bool:
        return self.start_timestamp < self.end_timestamp

    def contains(self, timestamp: int) -> bool:
        return self.start_timestamp <= timestamp < self.end_timestamp


@dataclass(frozen=True)
class NetworkFeeSummary:
    """Aggregated fees for one destination network over one window.

    `network` is the upstream destination-network identifier (the registry's
    query_identifier), not a Network member: rows for chains outside the
    registry are kept and simply never selected.
    """

    network: str
    total_fees: Decimal
    total_lp_fees: Decimal


@dataclass(frozen=True)
class PrefetchResult:
    """All network summaries produced by one prefetch call.

    Networks without activity in the window are absent, and absent means zero.
    """

    window: TimeWindow
    summaries: tuple[NetworkFeeSummary, ...] = ()

    @classmethod
    def empty(cls, window: TimeWindow) -> PrefetchResult:
        """Explicit default used when no prefetch has run for the window."""
        return cls(window=window, summaries=())

    @property
    def networks(self) -> list[str]:
        return [summary.network for summary in self.summaries]

    def find(self, network_id: str) -> NetworkFeeSummary | None:
        """Return the first summary whose identifier equals network_id exactly."""
        for summary in self.summaries:
            if summary.network == network_id:
                return summary
        return None

    def __len__(self) -> int:
        return len(self.summaries)


@dataclass(frozen=True)
class MetricReport:
    """Standardized daily metrics for one network.

    All values are non-negative USD amounts.
    """

    daily_fees: Decimal
    daily_revenue: Decimal
    daily_protocol_revenue: Decimal
    daily_supply_side_revenue: Decimal

    @classmethod
    def zero(cls) -> MetricReport:
        return cls(_ZERO, _ZERO, _ZERO, _ZERO)

    def to_dict(self) -> dict[str, Decimal]:
        """Render with the reporting platform's metric keys."""
        return {
            "dailyFees": self.daily_fees,
            "dailyRevenue": self.daily_revenue,
            "dailyProtocolRevenue": self.daily_protocol_revenue,
            "dailySupplySideRevenue": self.daily_supply_side_revenue,
        }


@dataclass(frozen=True)
class PrefetchOptions:
    """Input to the window-scoped prefetch entry point."""

    window: TimeWindow


@dataclass(frozen=True)
class FetchOptions:
    """Resolved window plus the prefetch result cached for it.

    `prefetched` is required. When no prefetch has run, build the options
    with without_prefetch() to get an explicit empty result.
    """

    window: TimeWindow
    prefetched: PrefetchResult

    @classmethod
    def without_prefetch(cls, window: TimeWindow) -> FetchOptions:
        return cls(window=window, prefetched=PrefetchResult.empty(window))


@dataclass(frozen=True)
class FetchRequest:
    """One (network, day) fetch call as issued by the scheduler."""

    network: Network
    day: date
    options: FetchOptions
