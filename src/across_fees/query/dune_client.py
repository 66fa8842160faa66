"""Dune Analytics query client via the SQL execution API.

Submits raw SQL, polls the execution until it reaches a terminal state and
returns the result rows. HTTP calls go through a blocking requests.Session
run in a worker thread, so callers can await a prefetch alongside other work.

Polling for completion is not retrying: a failed, cancelled, expired or
partially completed execution raises DataSourceError immediately.
"""

import asyncio
from typing import Any

import requests

from across_fees.config import QuerySettings
from across_fees.exceptions import ConfigurationError, DataSourceError
from across_fees.logging import get_logger
from across_fees.query.client import QueryClient

logger = get_logger(__name__)

STATE_COMPLETED = "QUERY_STATE_COMPLETED"
TERMINAL_FAILURE_STATES = frozenset(
    {
        "QUERY_STATE_FAILED",
        "QUERY_STATE_COMPLETED_PARTIAL",
        "QUERY_STATE_CANCELLED",
        "QUERY_STATE_EXPIRED",
    }
)


class DuneClient(QueryClient):
    """Concrete Dune client using the /sql/execute endpoint."""

    def __init__(
        self,
        settings: QuerySettings,
        session: requests.Session | None = None,
    ) -> None:
        api_key = settings.api_key.get_secret_value()
        if not api_key:
            raise ConfigurationError("DUNE_API_KEY is not set")

        self._settings = settings
        self._base_url = settings.base_url.rstrip("/")
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "X-DUNE-API-KEY": api_key,
                "Content-Type": "application/json",
            }
        )

    async def execute_sql(self, sql: str) -> list[dict]:
        """Submit SQL and wait for its rows."""
        submitted = await asyncio.to_thread(
            self._request,
            "POST",
            "/sql/execute",
            {"sql": sql, "performance": self._settings.performance},
        )
        execution_id = submitted.get("execution_id")
        if not execution_id:
            raise DataSourceError(f"Dune did not return an execution_id: {submitted!r}")

        logger.info(
            "dune_execution_submitted",
            execution_id=execution_id,
            performance=self._settings.performance,
        )
        return await self._wait_for_rows(execution_id)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await asyncio.to_thread(self._session.close)
        logger.debug("dune_session_closed")

    # ──────────────────────────────────────────────
    # Internal helpers
    # ──────────────────────────────────────────────

    async def _wait_for_rows(self, execution_id: str) -> list[dict]:
        """Poll execution results until a terminal state or max_polls."""
        for attempt in range(1, self._settings.max_polls + 1):
            payload = await asyncio.to_thread(
                self._request, "GET", f"/execution/{execution_id}/results"
            )
            state = payload.get("state")

            if state == STATE_COMPLETED:
                result = payload.get("result")
                rows = result.get("rows") if isinstance(result, dict) else None
                if not isinstance(rows, list):
                    raise DataSourceError(
                        f"Dune execution {execution_id} completed without a row list"
                    )
                logger.info(
                    "dune_execution_completed",
                    execution_id=execution_id,
                    rows=len(rows),
                    polls=attempt,
                )
                return rows

            if state in TERMINAL_FAILURE_STATES:
                error = payload.get("error") or {}
                message = error.get("message") if isinstance(error, dict) else error
                raise DataSourceError(
                    f"Dune execution {execution_id} ended in {state}: {message}"
                )

            logger.debug(
                "dune_execution_pending",
                execution_id=execution_id,
                state=state,
                attempt=attempt,
            )
            await asyncio.sleep(self._settings.poll_interval)

        raise DataSourceError(
            f"Dune execution {execution_id} not finished after "
            f"{self._settings.max_polls} polls"
        )

    def _request(
        self, method: str, path: str, payload: dict | None = None
    ) -> dict[str, Any]:
        """Perform one blocking HTTP call and decode the JSON object body."""
        url = f"{self._base_url}{path}"
        try:
            response = self._session.request(
                method, url, json=payload, timeout=self._settings.request_timeout
            )
            response.raise_for_status()
            body = response.json()
        except requests.exceptions.JSONDecodeError as e:
            raise DataSourceError(f"Dune returned non-JSON body for {path}") from e
        except requests.exceptions.RequestException as e:
            logger.warning("dune_request_failed", method=method, path=path, error=str(e))
            raise DataSourceError(f"Dune request {method} {path} failed: {e}") from e

        if not isinstance(body, dict):
            raise DataSourceError(f"Dune returned unexpected body for {path}: {body!r}")
        return body
