"""Tests for the adapter contract: chain entries, dispatch and prefetch wiring."""

from datetime import date
from decimal import Decimal
from types import MappingProxyType
from unittest.mock import AsyncMock

import pytest

from across_fees.adapter import METHODOLOGY, FeeAdapter, build_adapter
from across_fees.config import QuerySettings
from across_fees.exceptions import ConfigurationError
from across_fees.models import (
    FetchOptions,
    FetchRequest,
    MetricReport,
    PrefetchOptions,
    TimeWindow,
)
from across_fees.registry import NETWORK_REGISTRY, Network


class TestBuildAdapter:
    def test_one_chain_entry_per_registered_network(self, adapter: FeeAdapter) -> None:
        assert set(adapter.networks) == set(NETWORK_REGISTRY)
        assert adapter.version == 1
        assert adapter.is_expensive

    def test_chain_start_matches_registry(self, adapter: FeeAdapter) -> None:
        for network, entry in NETWORK_REGISTRY.items():
            assert adapter.start(network) == entry.supported_since

    def test_chains_are_read_only(self, adapter: FeeAdapter) -> None:
        assert isinstance(adapter.chains, MappingProxyType)

    def test_methodology_has_four_fixed_entries(self, adapter: FeeAdapter) -> None:
        meta = adapter.meta(Network.ETHEREUM)
        assert meta is METHODOLOGY
        assert set(meta) == {"Fees", "Revenue", "ProtocolRevenue", "SupplySideRevenue"}
        assert "0%" in meta["ProtocolRevenue"]


class TestPrefetch:
    @pytest.mark.asyncio
    async def test_prefetch_queries_configured_table(
        self,
        mock_client: AsyncMock,
        query_settings: QuerySettings,
        window: TimeWindow,
    ) -> None:
        settings = query_settings.model_copy(update={"transfers_table": "dune.team.t"})
        adapter = build_adapter(mock_client, settings)

        result = await adapter.prefetch(PrefetchOptions(window=window))

        assert result.window == window
        assert "FROM dune.team.t" in mock_client.execute_sql.await_args.args[0]


class TestFetch:
    @pytest.mark.asyncio
    async def test_fetch_uses_prefetched_result(
        self, adapter: FeeAdapter, mock_client: AsyncMock, window: TimeWindow
    ) -> None:
        prefetched = await adapter.prefetch(PrefetchOptions(window=window))
        options = FetchOptions(window=window, prefetched=prefetched)

        report = adapter.fetch(
            FetchRequest(network=Network.ARBITRUM, day=date(2024, 5, 1), options=options)
        )

        assert report.to_dict() == {
            "dailyFees": Decimal("1000"),
            "dailyRevenue": Decimal("1000"),
            "dailyProtocolRevenue": Decimal("0"),
            "dailySupplySideRevenue": Decimal("1000"),
        }
        # fetch never touches the query service
        assert mock_client.execute_sql.await_count == 1

    def test_fetch_without_prefetch_is_zero(
        self, adapter: FeeAdapter, window: TimeWindow
    ) -> None:
        request = FetchRequest(
            network=Network.BASE,
            day=date(2024, 5, 1),
            options=FetchOptions.without_prefetch(window),
        )
        assert adapter.fetch(request) == MetricReport.zero()

    def test_fetch_for_network_without_entry_raises(
        self, adapter: FeeAdapter, window: TimeWindow
    ) -> None:
        trimmed = FeeAdapter(
            chains={Network.ETHEREUM: adapter.chains[Network.ETHEREUM]},
            prefetch_fn=adapter.prefetch_fn,
        )
        request = FetchRequest(
            network=Network.BASE,
            day=date(2024, 5, 1),
            options=FetchOptions.without_prefetch(window),
        )
        with pytest.raises(ConfigurationError):
            trimmed.fetch(request)


class TestActivation:
    def test_is_active_on_and_after_start(self, adapter: FeeAdapter) -> None:
        assert adapter.is_active(Network.LINEA, date(2024, 4, 20))
        assert not adapter.is_active(Network.LINEA, date(2024, 4, 19))
        assert adapter.is_active("base", date(2023, 8, 22))
        assert not adapter.is_active(Network.BASE, date(2023, 8, 21))

    def test_pre_activation_fetch_yields_zero(
        self, adapter: FeeAdapter, window: TimeWindow
    ) -> None:
        """Not gated by fetch itself: indistinguishable from a day without traffic."""
        request = FetchRequest(
            network=Network.UNICHAIN,
            day=date(2024, 5, 1),
            options=FetchOptions.without_prefetch(window),
        )
        assert adapter.fetch(request) == MetricReport.zero()

    def test_unknown_network_start_raises(self, adapter: FeeAdapter) -> None:
        with pytest.raises(ConfigurationError):
            adapter.start("solana")
