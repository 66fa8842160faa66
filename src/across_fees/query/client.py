"""Abstract query service client interface.

The prefetch aggregator depends only on this interface, keeping the
warehouse vendor's API details isolated in the concrete implementation.
"""

from abc import ABC, abstractmethod


class QueryClient(ABC):
    """Abstract base class for analytical query service clients."""

    @abstractmethod
    async def execute_sql(self, sql: str) -> list[dict]:
        """Run one SQL statement and return its result rows.

        Raises:
            DataSourceError: If the service is unreachable, rejects the
                query, or returns a malformed response.
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release transport resources."""
        ...
