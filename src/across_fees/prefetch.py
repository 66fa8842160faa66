"""Prefetch aggregator -- one batched fee query per time window.

Fees are read from the pre-aggregated transfers table rather than derived
from bridge events. Input minus output amounts are wrong across tokens with
different decimals and across cross-token swaps, so event-based estimates
were dropped.

The aggregator has no cache: every call runs the full aggregation, and the
caller is expected to invoke it at most once per window.
"""

import math
from decimal import Decimal, InvalidOperation
from typing import Any

from across_fees.exceptions import DataSourceError
from across_fees.logging import get_logger
from across_fees.models import NetworkFeeSummary, PrefetchResult, TimeWindow
from across_fees.query.client import QueryClient

logger = get_logger(__name__)

DEFAULT_TRANSFERS_TABLE = "dune.risk_labs.result_across_transfers_foundation"

_QUERY_TEMPLATE = """
SELECT
    dst_chain AS destination_network
    , SUM(relay_fee_in_usd) AS fee_sum
    , SUM(lp_fee_in_usd) AS lp_fee_sum
FROM {table}
WHERE relay_fee_in_usd IS NOT NULL
  AND block_time >= from_unixtime({start})
  AND block_time < from_unixtime({end})
GROUP BY dst_chain
"""


def build_query(window: TimeWindow, table: str = DEFAULT_TRANSFERS_TABLE) -> str:
    """Render the windowed aggregation query.

    Boundaries are coerced to int before substitution; the window itself
    is not validated here.
    """
    return _QUERY_TEMPLATE.format(
        table=table,
        start=int(window.start_timestamp),
        end=int(window.end_timestamp),
    ).strip()


def _to_amount(value: Any, field_name: str, row: dict) -> Decimal:
    """Convert a numeric cell to a finite, non-negative Decimal."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise DataSourceError(f"Non-numeric {field_name} in row {row!r}")
    if isinstance(value, float) and not math.isfinite(value):
        raise DataSourceError(f"Non-finite {field_name} in row {row!r}")
    try:
        amount = Decimal(str(value))
    except InvalidOperation as e:
        raise DataSourceError(f"Unparseable {field_name} in row {row!r}") from e
    if not amount.is_finite() or amount < 0:
        raise DataSourceError(f"Invalid {field_name} {amount} in row {row!r}")
    return amount


def parse_row(row: Any) -> NetworkFeeSummary:
    """Map one query row onto a NetworkFeeSummary.

    `lp_fee_sum` is NULL when every LP fee in the group was NULL; that
    is treated as zero. `fee_sum` can never be NULL given the query filter,
    so a NULL there means the response is malformed.
    """
    if not isinstance(row, dict):
        raise DataSourceError(f"Expected a row mapping, got {row!r}")

    network = row.get("destination_network")
    if not isinstance(network, str) or not network:
        raise DataSourceError(f"Missing destination_network in row {row!r}")

    if row.get("fee_sum") is None:
        raise DataSourceError(f"Missing fee_sum in row {row!r}")
    total_fees = _to_amount(row["fee_sum"], "fee_sum", row)

    lp_value = row.get("lp_fee_sum")
    total_lp_fees = (
        Decimal("0") if lp_value is None else _to_amount(lp_value, "lp_fee_sum", row)
    )

    return NetworkFeeSummary(
        network=network,
        total_fees=total_fees,
        total_lp_fees=total_lp_fees,
    )


class PrefetchAggregator:
    """Runs the batched fee aggregation for a window.

    Args:
        client: Query service client.
        table: Fully qualified transfers table name.
    """

    def __init__(self, client: QueryClient, table: str = DEFAULT_TRANSFERS_TABLE) -> None:
        self._client = client
        self._table = table

    async def prefetch(self, window: TimeWindow) -> PrefetchResult:
        """Return one summary per destination network active in the window.

        Raises:
            DataSourceError: If the query fails or any row is malformed,
                including a destination network reported twice.
        """
        logger.info(
            "prefetch_started",
            start=window.start_timestamp,
            end=window.end_timestamp,
        )
        rows = await self._client.execute_sql(build_query(window, self._table))
        if not isinstance(rows, list):
            raise DataSourceError(f"Query service returned {type(rows).__name__}, not rows")

        summaries: list[NetworkFeeSummary] = []
        seen: set[str] = set()
        for row in rows:
            summary = parse_row(row)
            if summary.network in seen:
                raise DataSourceError(
                    f"Destination network {summary.network!r} appears more than once"
                )
            seen.add(summary.network)
            summaries.append(summary)

        logger.info(
            "prefetch_complete",
            start=window.start_timestamp,
            end=window.end_timestamp,
            networks=len(summaries),
            total_fees=str(sum((s.total_fees for s in summaries), Decimal("0"))),
        )
        return PrefetchResult(window=window, summaries=tuple(summaries))
