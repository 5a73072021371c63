"""Pricing service — cached factor tables over a sales repository.

Building factor tables needs the whole dataset, so the service fetches it
once, builds a ``FactorSnapshot`` and serves estimates, model comparisons
and guide tables from that snapshot until it expires or the repository
reports a write.

Snapshots are immutable. ``refresh`` builds a new one outside the lock and
swaps the reference under it, so a concurrent reader always sees either
the old snapshot or the new one, never a half-built table.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass

from src.common.config import Settings, settings
from src.common.logging import setup_logging
from src.common.models import (
    BagAttributes,
    ComparablesSummary,
    EstimateResult,
    InsufficientData,
    MarketGuide,
    ModelComparisonReport,
    SaleRecord,
)

from ..common.config import Config
from ..evaluator.evaluator import evaluate_models
from ..repository.base import RepositoryError, SalesRepository
from ..segments.aggregator import build_factor_tables
from ..segments.guide import build_market_guide, summarize_comparables
from ..segments.models import FactorTables
from .strategies import get_model

logger = setup_logging(module_name="pricing.service")


@dataclass(frozen=True)
class FactorSnapshot:
    """One fetch of the dataset and the factor tables built from it."""

    records: tuple[SaleRecord, ...]
    tables: FactorTables
    built_at: float
    data_version: int | None = None

    @property
    def record_count(self) -> int:
        return len(self.records)


class PricingService:
    """Estimates bag prices from a repository, caching the factor tables.

    Args:
        repository: Source of historical sales.
        app_settings: Pricing / confidence / guide settings.
        cache_ttl_seconds: Snapshot lifetime. 0 rebuilds on every request;
            defaults to ``Config().factor_cache_ttl_seconds``.
    """

    def __init__(
        self,
        repository: SalesRepository,
        app_settings: Settings | None = None,
        cache_ttl_seconds: float | None = None,
    ):
        self.repository = repository
        self.settings = app_settings or settings
        if cache_ttl_seconds is None:
            cache_ttl_seconds = Config().factor_cache_ttl_seconds
        self.cache_ttl_seconds = cache_ttl_seconds
        self._snapshot: FactorSnapshot | None = None
        self._lock = threading.Lock()

    # --- Cache management ---

    def refresh(self) -> FactorSnapshot:
        """Fetch every sale, rebuild the tables and swap in the new snapshot.

        Raises:
            RepositoryError: If the repository cannot be queried.
        """
        # Read before fetching so a concurrent write forces another rebuild
        version = self.repository.data_version
        records = tuple(self.repository.fetch_sales())
        tables = build_factor_tables(records, self.settings.pricing)
        snapshot = FactorSnapshot(
            records=records, tables=tables, built_at=time.monotonic(), data_version=version,
        )
        with self._lock:
            self._snapshot = snapshot
        logger.info(
            "Factor tables rebuilt from %d sales (%d standard, %d exotic)",
            len(records), tables.standard_count, tables.exotic_count,
        )
        return snapshot

    def invalidate(self) -> None:
        """Drop the cached snapshot; the next request refetches."""
        with self._lock:
            self._snapshot = None
        logger.debug("Factor snapshot invalidated")

    def snapshot(self) -> FactorSnapshot:
        """Current snapshot, refreshed first if missing, expired or stale.

        A snapshot is stale once the repository reports a different data
        version than the one it was built from.
        """
        current = self._snapshot
        if (
            current is not None
            and self.cache_ttl_seconds > 0
            and current.data_version == self.repository.data_version
        ):
            if time.monotonic() - current.built_at < self.cache_ttl_seconds:
                return current
        return self.refresh()

    def _usable_snapshot(self) -> FactorSnapshot | InsufficientData:
        try:
            current = self.snapshot()
        except RepositoryError as e:
            logger.warning("Sales repository unavailable: %s", e)
            return InsufficientData(reason=f"Sales repository unavailable: {e}")
        if not current.records:
            logger.warning("Sales repository returned no sales")
            return InsufficientData(reason="No sales data available")
        return current

    # --- Queries ---

    def estimate(
        self,
        config: BagAttributes,
        model_name: str | None = None,
    ) -> EstimateResult | InsufficientData:
        """Estimate the price of one bag configuration.

        Raises:
            ValueError: If ``model_name`` is not a registered model.
        """
        model_name = model_name or self.settings.pricing.default_model
        current = self._usable_snapshot()
        if isinstance(current, InsufficientData):
            return current
        model = get_model(model_name, current.tables, self.settings.confidence)
        return model.estimate(config)

    def compare_models(self) -> ModelComparisonReport | InsufficientData:
        """Evaluate every model against the cached dataset."""
        current = self._usable_snapshot()
        if isinstance(current, InsufficientData):
            return current
        return evaluate_models(current.records, app_settings=self.settings)

    def market_guide(self) -> MarketGuide | InsufficientData:
        """Guide tables over the cached dataset."""
        current = self._usable_snapshot()
        if isinstance(current, InsufficientData):
            return current
        return build_market_guide(current.records, self.settings.guide, self.settings.pricing)

    def comparables(
        self,
        bag: BagAttributes,
        limit: int = 20,
    ) -> ComparablesSummary | InsufficientData:
        """Price range of the most recent sales comparable to ``bag``."""
        try:
            records = self.repository.fetch_comparables(bag, limit=limit)
        except RepositoryError as e:
            logger.warning("Comparable sales unavailable: %s", e)
            return InsufficientData(reason=f"Sales repository unavailable: {e}")
        return summarize_comparables(records)
