"""Daily runner -- drives the adapter the way the reporting scheduler does.

For each day: build the UTC day window, prefetch it once, then fetch every
active network from the same immutable result. Prefetch always completes
before any fetch of its window, and the result is dropped once the day's
fetches are done.

A failed or timed-out prefetch marks every network of the day as None
("no data") rather than zero, so a broken query is never reported as a
day without fees.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from datetime import date, timedelta

import structlog

from across_fees.adapter import FeeAdapter
from across_fees.config import RunnerSettings
from across_fees.exceptions import DataSourceError
from across_fees.logging import get_logger
from across_fees.models import (
    FetchOptions,
    FetchRequest,
    MetricReport,
    PrefetchOptions,
    PrefetchResult,
    TimeWindow,
)
from across_fees.registry import Network

logger = get_logger(__name__)

DayReport = dict[Network, MetricReport | None]


class DailyRunner:
    """Runs prefetch-then-fetch for single days or inclusive day ranges.

    Usage:
        runner = DailyRunner(adapter, settings.runner)
        reports = await runner.run_day(date(2024, 5, 1))

    Args:
        adapter: Adapter built by build_adapter().
        settings: Runner settings (prefetch timeout).
    """

    def __init__(self, adapter: FeeAdapter, settings: RunnerSettings) -> None:
        self._adapter = adapter
        self._settings = settings
        self._cache: dict[TimeWindow, PrefetchResult] = {}
        self._prefetch_lock = asyncio.Lock()

    async def prefetch_window(self, window: TimeWindow) -> PrefetchResult:
        """Return the prefetch result for a window, querying at most once.

        Raises:
            ValueError: If the window is empty or inverted.
            DataSourceError: If the query fails.
            TimeoutError: If the query exceeds prefetch_timeout_seconds.
        """
        if not window.is_valid:
            raise ValueError(
                f"Invalid window: start {window.start_timestamp} >= end {window.end_timestamp}"
            )

        async with self._prefetch_lock:
            cached = self._cache.get(window)
            if cached is not None:
                return cached
            result = await asyncio.wait_for(
                self._adapter.prefetch(PrefetchOptions(window=window)),
                timeout=self._settings.prefetch_timeout_seconds,
            )
            self._cache[window] = result
            return result

    def discard(self, window: TimeWindow) -> None:
        """Drop a window's cached result; run_day calls this after its fetches."""
        self._cache.pop(window, None)

    async def run_day(
        self, day: date, networks: Iterable[Network] | None = None
    ) -> DayReport:
        """Compute reports for every active network on a day.

        Networks not yet active on the day are omitted from the result.
        """
        window = TimeWindow.for_day(day)
        candidates = list(networks) if networks is not None else self._adapter.networks
        active = [n for n in candidates if self._adapter.is_active(n, day)]

        structlog.contextvars.bind_contextvars(day=day.isoformat())
        try:
            if not active:
                logger.info("no_active_networks", requested=len(candidates))
                return {}

            try:
                prefetched = await self.prefetch_window(window)
            except (DataSourceError, asyncio.TimeoutError) as e:
                logger.error(
                    "prefetch_failed",
                    window_start=window.start_timestamp,
                    error=str(e) or type(e).__name__,
                )
                return {network: None for network in active}

            options = FetchOptions(window=window, prefetched=prefetched)
            try:
                reports: DayReport = {
                    network: self._adapter.fetch(
                        FetchRequest(network=network, day=day, options=options)
                    )
                    for network in active
                }
            finally:
                self.discard(window)
            logger.info(
                "day_complete",
                networks=len(reports),
                with_fees=sum(1 for r in reports.values() if r and r.daily_fees > 0),
            )
            return reports
        finally:
            structlog.contextvars.unbind_contextvars("day")

    async def run_range(
        self,
        first_day: date,
        last_day: date,
        networks: Iterable[Network] | None = None,
    ) -> dict[date, DayReport]:
        """Backfill an inclusive range of days, one window per day."""
        if last_day < first_day:
            raise ValueError(f"last_day {last_day} is before first_day {first_day}")

        selected = list(networks) if networks is not None else None
        results: dict[date, DayReport] = {}
        day = first_day
        while day <= last_day:
            results[day] = await self.run_day(day, selected)
            day += timedelta(days=1)

        logger.info(
            "range_complete",
            first_day=first_day.isoformat(),
            last_day=last_day.isoformat(),
            days=len(results),
        )
        return results
