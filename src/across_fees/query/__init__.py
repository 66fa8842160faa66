"""Query service layer -- Dune Analytics SQL execution via requests."""

from across_fees.query.client import QueryClient
from across_fees.query.dune_client import DuneClient

__all__ = ["DuneClient", "QueryClient"]
