"""Supabase-backed sales repository.

Reads the hosted ``sales`` table joined to ``bags`` (and its ``models`` /
``sources`` lookups), the same schema the web front end queries.
"""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import ValidationError

from src.common.config import get_supabase_key, get_supabase_url
from src.common.models import BagAttributes, SaleRecord

from ..common.config import Config
from .base import RepositoryError, SalesRepository

logger = logging.getLogger(__name__)

_BAG_COLUMNS = (
    "size, is_exotic, exotic_type, leather_type, year, hardware, color, "
    "color_secondary, is_limited_edition, condition"
)

# PostgREST caps a response at 1000 rows
PAGE_SIZE = 1000


def _select(model_inner: bool = False) -> str:
    models = "models!inner (name)" if model_inner else "models (name)"
    return (
        "id, sale_price, currency, sale_date, "
        f"bags!inner ({_BAG_COLUMNS}, {models}), "
        "sources (name)"
    )


class SupabaseSalesRepository(SalesRepository):
    """Fetches sales from the hosted Supabase project.

    Credentials come from SUPABASE_URL / SUPABASE_ANON_KEY, falling back to
    the front end's NEXT_PUBLIC_SUPABASE_URL / NEXT_PUBLIC_SUPABASE_ANON_KEY.
    """

    def __init__(
        self,
        supabase_url: Optional[str] = None,
        supabase_key: Optional[str] = None,
        config: Config | None = None,
    ):
        self.config = config or Config()
        self._supabase_url = supabase_url
        self._supabase_key = supabase_key
        self._client = None  # Lazy init

    def _get_client(self):
        """Lazy-initialize Supabase client (only when actually querying)."""
        if self._client is not None:
            return self._client
        # Raise ValueError when credentials are missing
        self._supabase_url = self._supabase_url or get_supabase_url()
        self._supabase_key = self._supabase_key or get_supabase_key()
        from supabase import create_client

        self._client = create_client(self._supabase_url, self._supabase_key)
        logger.info("Connected to Supabase: %s", self._supabase_url)
        return self._client

    def fetch_sales(
        self,
        size: int | None = None,
        is_exotic: bool | None = None,
    ) -> list[SaleRecord]:
        filters: dict = {}
        if size is not None:
            filters["bags.size"] = size
        if is_exotic is not None:
            filters["bags.is_exotic"] = is_exotic
        return self._query(filters, limit=self.config.sales_fetch_limit)

    def fetch_comparables(self, bag: BagAttributes, limit: int = 20) -> list[SaleRecord]:
        filters: dict = {"bags.size": bag.size, "bags.is_exotic": bag.is_exotic}
        if bag.model_name:
            filters["bags.models.name"] = bag.model_name
        return self._query(filters, limit=limit, model_inner=bool(bag.model_name))

    def _query(
        self,
        filters: dict,
        limit: int | None = None,
        model_inner: bool = False,
    ) -> list[SaleRecord]:
        """Run a filtered, newest-first select, paging through the row cap."""
        client = self._get_client()
        rows: list[dict] = []
        start = 0
        try:
            while True:
                end = start + PAGE_SIZE - 1
                if limit is not None:
                    end = min(end, limit - 1)
                query = client.table(self.config.sales_table).select(_select(model_inner))
                for column, value in filters.items():
                    query = query.eq(column, value)
                response = (
                    query.order("sale_date", desc=True)
                    .range(start, end)
                    .execute()
                )
                page = response.data or []
                rows.extend(page)
                if len(page) < end - start + 1 or (limit is not None and len(rows) >= limit):
                    break
                start = end + 1
        except Exception as e:
            logger.error("Supabase query on %s failed: %s", self.config.sales_table, e)
            raise RepositoryError(f"Supabase query failed: {e}") from e

        records: list[SaleRecord] = []
        for row in rows:
            try:
                records.append(SaleRecord.from_row(row))
            except (ValidationError, KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping sale %s: %s", row.get("id"), e)

        logger.info("Fetched %d sales from Supabase (filters=%s)", len(records), filters)
        return records
