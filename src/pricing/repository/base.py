"""Sales repository interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

from src.common.models import BagAttributes, SaleRecord

from ..segments.guide import select_comparables


class RepositoryError(Exception):
    """The sales backend could not be queried."""


class SalesRepository(ABC):
    """Source of historical sale records.

    The pricing engine always aggregates over the full dataset; the size and
    exotic filters exist for display-layer convenience.
    """

    @abstractmethod
    def fetch_sales(
        self,
        size: int | None = None,
        is_exotic: bool | None = None,
    ) -> list[SaleRecord]:
        """Fetch sales, optionally filtered by size and exotic flag.

        Raises:
            RepositoryError: If the backend is unreachable or the query fails.
        """

    @property
    def data_version(self) -> int | None:
        """Counter bumped by every write made through this repository.

        ``None`` means the backend cannot report changes (another process
        owns the data); caches fall back to expiry alone.
        """
        return None

    def fetch_comparables(self, bag: BagAttributes, limit: int = 20) -> list[SaleRecord]:
        """Most recent sales of the same model, size and exotic flag as ``bag``."""
        candidates = self.fetch_sales(size=bag.size, is_exotic=bag.is_exotic)
        return select_comparables(candidates, bag, limit)


def filter_sales(
    records: Iterable[SaleRecord],
    size: int | None = None,
    is_exotic: bool | None = None,
) -> list[SaleRecord]:
    """Apply the equality filters shared by every repository."""
    return [
        r for r in records
        if (size is None or r.bag.size == size)
        and (is_exotic is None or r.bag.is_exotic == is_exotic)
    ]
