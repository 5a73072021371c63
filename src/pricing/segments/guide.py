"""Market guide summaries and comparable-sales statistics.

Produces the descriptive tables behind the buyer's guide: price ranges by
size, leather, exotic skin, hardware, color name and color family, the
exotic premium over standard leathers, and the price range of sales
comparable to one bag.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import date

from src.common.config import GuideSettings, PricingSettings, settings
from src.common.models import (
    BagAttributes,
    ComparablesSummary,
    MarketGuide,
    SaleRecord,
    SegmentRow,
)

from ..common.stats import mean, median
from .aggregator import dimension_categories, group_prices
from .models import STANDARD_SEGMENT, Dimension, category_label

logger = logging.getLogger(__name__)


def segment_summary(
    records: Iterable[SaleRecord],
    dimension: Dimension,
    min_count: int = 1,
    canonical_sizes: Sequence[int] | None = None,
) -> list[SegmentRow]:
    """Summarize prices per category along ``dimension``.

    Size rows are sorted by size; every other dimension by median price,
    highest first. Categories with fewer than ``min_count`` sales are
    dropped. The exotic axis only reports exotic skins.
    """
    categories = [
        c for c in dimension_categories(dimension, canonical_sizes)
        if c != STANDARD_SEGMENT
    ]
    groups = group_prices(records, dimension, categories)

    rows = [
        _segment_row(category_label(category), prices)
        for category, prices in groups.items()
        if prices and len(prices) >= min_count
    ]
    if dimension is not Dimension.SIZE:
        rows.sort(key=lambda r: r.median, reverse=True)
    return rows


def color_summary(
    records: Iterable[SaleRecord],
    min_count: int = 1,
    top: int | None = None,
) -> list[SegmentRow]:
    """Summarize standard-leather prices per color name as recorded.

    Unlike the color-family table, names are not classified, so "Etoupe"
    and "Craie" stay separate rows. Rows are sorted by median, highest
    first, and cut to the ``top`` most expensive.
    """
    groups: dict[str, list[float]] = {}
    for record in records:
        if record.bag.is_exotic or not record.bag.color:
            continue
        groups.setdefault(record.bag.color.strip(), []).append(record.price)

    rows = [
        _segment_row(color, prices)
        for color, prices in groups.items()
        if color and len(prices) >= min_count
    ]
    rows.sort(key=lambda r: r.median, reverse=True)
    return rows[:top] if top is not None else rows


def _segment_row(label: str, prices: Sequence[float]) -> SegmentRow:
    return SegmentRow(
        category=label,
        median=median(prices),
        min=min(prices),
        max=max(prices),
        mean=round(mean(prices)),
        count=len(prices),
    )


def build_market_guide(
    records: Sequence[SaleRecord],
    guide: GuideSettings | None = None,
    pricing: PricingSettings | None = None,
) -> MarketGuide:
    """Build every guide table from one dataset."""
    guide = guide or settings.guide
    pricing = pricing or settings.pricing
    sizes = pricing.canonical_sizes

    standard_prices = [r.price for r in records if not r.bag.is_exotic]
    exotic_prices = [r.price for r in records if r.bag.is_exotic]
    standard_mean = mean(standard_prices)
    exotic_mean = mean(exotic_prices)
    premium_pct = 0
    if standard_mean > 0 and exotic_prices:
        premium_pct = round((exotic_mean - standard_mean) / standard_mean * 100)

    result = MarketGuide(
        sizes=segment_summary(records, Dimension.SIZE, guide.min_size_count, sizes),
        leathers=segment_summary(records, Dimension.LEATHER, guide.min_leather_count),
        exotic_types=segment_summary(records, Dimension.EXOTIC, guide.min_exotic_count),
        hardware=segment_summary(records, Dimension.HARDWARE, guide.min_hardware_count),
        colors=color_summary(records, guide.min_color_count, guide.top_colors),
        color_families=segment_summary(records, Dimension.COLOR, guide.min_color_count),
        standard_mean=round(standard_mean),
        exotic_mean=round(exotic_mean),
        exotic_premium_pct=premium_pct,
    )
    logger.info(
        "Market guide: %d standard / %d exotic sales, exotic premium %+d%%",
        len(standard_prices), len(exotic_prices), premium_pct,
    )
    return result


def select_comparables(
    records: Iterable[SaleRecord],
    bag: BagAttributes,
    limit: int = 20,
) -> list[SaleRecord]:
    """Most recent sales with the same size, exotic flag and model as ``bag``."""
    matches = [
        r for r in records
        if r.bag.size == bag.size
        and r.bag.is_exotic == bag.is_exotic
        and (bag.model_name is None or r.bag.model_name == bag.model_name)
    ]
    matches.sort(key=lambda r: r.sale_date or date.min, reverse=True)
    return matches[:limit]


def summarize_comparables(records: Sequence[SaleRecord]) -> ComparablesSummary:
    """Price range of a set of comparable sales; all zeros when empty."""
    prices = [r.price for r in records]
    if not prices:
        return ComparablesSummary(count=0, mean=0, median=0, min=0, max=0)
    return ComparablesSummary(
        count=len(prices),
        mean=round(mean(prices)),
        median=median(prices),
        min=min(prices),
        max=max(prices),
    )
