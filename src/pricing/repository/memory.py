"""In-memory sales repository, optionally loaded from a JSON export."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from src.common.models import SaleRecord

from .base import RepositoryError, SalesRepository, filter_sales

logger = logging.getLogger(__name__)


class InMemorySalesRepository(SalesRepository):
    """Serves a fixed list of sales.

    Usage:
        repo = InMemorySalesRepository.from_json("data/sales.json")
        sales = repo.fetch_sales(is_exotic=False)
    """

    def __init__(self, records: list[SaleRecord] | None = None) -> None:
        self._records = list(records or [])
        self._version = 0

    @classmethod
    def from_json(cls, path: str | Path) -> InMemorySalesRepository:
        """Load sales from a JSON file.

        Accepts either a list of rows or ``{"sales": [...]}``; rows use the
        backend shape understood by ``SaleRecord.from_row``.
        """
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise RepositoryError(f"Cannot read sales file {path}: {e}") from e

        rows = data.get("sales", []) if isinstance(data, dict) else data
        records: list[SaleRecord] = []
        for row in rows:
            try:
                records.append(SaleRecord.from_row(row))
            except (ValidationError, KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping malformed sale row in %s: %s", path, e)

        logger.info("Loaded %d sales from %s", len(records), path)
        return cls(records)

    @property
    def data_version(self) -> int:
        return self._version

    def add(self, record: SaleRecord) -> None:
        self.add_sales([record])

    def add_sales(self, records: list[SaleRecord]) -> None:
        self._records.extend(records)
        self._version += 1

    def fetch_sales(
        self,
        size: int | None = None,
        is_exotic: bool | None = None,
    ) -> list[SaleRecord]:
        return filter_sales(self._records, size, is_exotic)
