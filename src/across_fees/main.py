"""Component wiring for processes that embed the fee adapter.

There is no command-line entry point: a scheduler process calls
build_components() once at startup and closes the query client on shutdown.

Component wiring order:
1. AppSettings (configuration)
2. Logging setup
3. QueryClient (DuneClient unless one is injected)
4. FeeAdapter (prefetch aggregator + per-network chain entries)
5. DailyRunner (prefetch once per window, then fetch)
"""

from typing import Any

from across_fees.adapter import build_adapter
from across_fees.config import AppSettings
from across_fees.logging import get_logger, setup_logging
from across_fees.query.client import QueryClient
from across_fees.query.dune_client import DuneClient
from across_fees.runner import DailyRunner


def build_components(
    settings: AppSettings | None = None,
    client: QueryClient | None = None,
) -> dict[str, Any]:
    """Build all adapter components from settings.

    Args:
        settings: Application-wide settings; loaded from the environment if None.
        client: Query client to use instead of a DuneClient built from settings.

    Returns:
        Dict mapping component names ("settings", "client", "adapter",
        "runner") to instances.

    Raises:
        ConfigurationError: If no client is injected and DUNE_API_KEY is unset.
    """
    # 1. Configuration
    settings = settings or AppSettings()

    # 2. Logging
    setup_logging(settings.log_level)
    logger = get_logger("across_fees.main")

    # 3. Query client
    query_client = client if client is not None else DuneClient(settings.query)

    # 4. Adapter
    adapter = build_adapter(query_client, settings.query)

    # 5. Runner
    runner = DailyRunner(adapter, settings.runner)

    logger.info(
        "components_built",
        client=type(query_client).__name__,
        networks=len(adapter.networks),
        prefetch_timeout_seconds=settings.runner.prefetch_timeout_seconds,
    )
    return {
        "settings": settings,
        "client": query_client,
        "adapter": adapter,
        "runner": runner,
    }
