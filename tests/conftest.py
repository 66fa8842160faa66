"""Shared test fixtures for the bridge fee adapter."""

from unittest.mock import AsyncMock

import pytest

from across_fees.adapter import FeeAdapter, build_adapter
from across_fees.config import QuerySettings, RunnerSettings
from across_fees.models import TimeWindow
from across_fees.query.client import QueryClient

MAY_FIRST_START = 1714521600  # 2024-05-01 00:00:00 UTC


# ---------------------------------------------------------------------------
# Sample query rows (shape of the Dune aggregation result)
# ---------------------------------------------------------------------------

SAMPLE_ROWS = [
    {"destination_network": "ethereum", "fee_sum": 5231.75, "lp_fee_sum": 812.5},
    {"destination_network": "arbitrum", "fee_sum": 1000, "lp_fee_sum": 1000},
    {"destination_network": "polygon", "fee_sum": "42.125", "lp_fee_sum": None},
]


@pytest.fixture
def window() -> TimeWindow:
    """UTC day window for 2024-05-01."""
    return TimeWindow(start_timestamp=MAY_FIRST_START, end_timestamp=MAY_FIRST_START + 86_400)


@pytest.fixture
def query_settings() -> QuerySettings:
    """QuerySettings with a dummy API key and fast polling."""
    return QuerySettings(
        api_key="test-dune-key",  # type: ignore[arg-type]
        poll_interval=0.0,
        max_polls=3,
        request_timeout=5.0,
    )


@pytest.fixture
def runner_settings() -> RunnerSettings:
    return RunnerSettings(prefetch_timeout_seconds=1.0)


@pytest.fixture
def mock_client() -> AsyncMock:
    """Mock QueryClient returning SAMPLE_ROWS."""
    client = AsyncMock(spec=QueryClient)
    client.execute_sql = AsyncMock(return_value=[dict(row) for row in SAMPLE_ROWS])
    return client


@pytest.fixture
def adapter(mock_client: AsyncMock, query_settings: QuerySettings) -> FeeAdapter:
    """Adapter wired to the mock query client."""
    return build_adapter(mock_client, query_settings)
