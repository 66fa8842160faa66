"""Across bridge fee adapter: batched per-window prefetch, per-network metrics."""

from across_fees.adapter import METHODOLOGY, ChainAdapter, FeeAdapter, build_adapter
from across_fees.exceptions import ConfigurationError, DataSourceError, FeeAdapterError
from across_fees.main import build_components
from across_fees.metrics import compute_metrics
from across_fees.models import (
    FetchOptions,
    FetchRequest,
    MetricReport,
    NetworkFeeSummary,
    PrefetchOptions,
    PrefetchResult,
    TimeWindow,
)
from across_fees.prefetch import PrefetchAggregator
from across_fees.registry import NETWORK_REGISTRY, Network, NetworkRegistryEntry
from across_fees.runner import DailyRunner

__all__ = [
    "METHODOLOGY",
    "NETWORK_REGISTRY",
    "ChainAdapter",
    "ConfigurationError",
    "DailyRunner",
    "DataSourceError",
    "FeeAdapter",
    "FeeAdapterError",
    "FetchOptions",
    "FetchRequest",
    "MetricReport",
    "Network",
    "NetworkFeeSummary",
    "NetworkRegistryEntry",
    "PrefetchAggregator",
    "PrefetchOptions",
    "PrefetchResult",
    "TimeWindow",
    "build_adapter",
    "build_components",
    "compute_metrics",
]
