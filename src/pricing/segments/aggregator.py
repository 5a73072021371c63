"""Segment aggregator — per-attribute factor tables.

Partitions sales by one attribute at a time and expresses each category's
median price against a reference category, either as a ratio or as a
dollar premium.

Populations are never pooled: size, leather, year, hardware and color
tables use standard-leather sales only. The exotic table keys every
standard sale as ``Standard`` (the reference) and every exotic sale by its
skin, so exotic factors are always measured against the standard market.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Sequence

from src.common.config import PricingSettings, settings
from src.common.models import (
    ColorFamily,
    ExoticType,
    HardwareType,
    LeatherType,
    SaleRecord,
    YearBand,
)

from ..classifier import (
    classify_color,
    classify_exotic,
    classify_hardware,
    classify_leather,
    classify_year,
)
from ..classifier.classifier import STANDARD_LEATHERS
from ..common.stats import median
from .models import (
    STANDARD_SEGMENT,
    AttributeFactor,
    Baseline,
    Category,
    Dimension,
    FactorTables,
    StatisticMode,
)

logger = logging.getLogger(__name__)


def dimension_categories(
    dimension: Dimension,
    canonical_sizes: Sequence[int] | None = None,
) -> list[Category]:
    """Every category a table over ``dimension`` carries, in display order."""
    if dimension is Dimension.SIZE:
        return list(canonical_sizes or settings.pricing.canonical_sizes)
    if dimension is Dimension.LEATHER:
        return list(STANDARD_LEATHERS)
    if dimension is Dimension.EXOTIC:
        return [STANDARD_SEGMENT, *ExoticType]
    if dimension is Dimension.YEAR:
        return list(YearBand)
    if dimension is Dimension.HARDWARE:
        return [h for h in HardwareType if h is not HardwareType.OTHER]
    return [c for c in ColorFamily if c is not ColorFamily.OTHER]


def category_of(record: SaleRecord, dimension: Dimension) -> Category:
    """Category ``record`` falls into along ``dimension``."""
    bag = record.bag
    if dimension is Dimension.SIZE:
        return bag.size
    if dimension is Dimension.LEATHER:
        return classify_leather(bag.leather_type)
    if dimension is Dimension.EXOTIC:
        if not bag.is_exotic:
            return STANDARD_SEGMENT
        return classify_exotic(bag.exotic_type, bag.leather_type)
    if dimension is Dimension.YEAR:
        return classify_year(bag.year)
    if dimension is Dimension.HARDWARE:
        return classify_hardware(bag.hardware)
    return classify_color(bag.color)


def population(records: Iterable[SaleRecord], dimension: Dimension) -> list[SaleRecord]:
    """Records eligible for a table over ``dimension``."""
    if dimension is Dimension.EXOTIC:
        return list(records)
    return [r for r in records if not r.bag.is_exotic]


def group_prices(
    records: Iterable[SaleRecord],
    dimension: Dimension,
    categories: Sequence[Category],
) -> dict[Category, list[float]]:
    """Prices per category; categories outside ``categories`` are dropped."""
    groups: dict[Category, list[float]] = {c: [] for c in categories}
    for record in population(records, dimension):
        key = category_of(record, dimension)
        if key in groups:
            groups[key].append(record.price)
    return groups


def _resolve(categories: Sequence[Category], reference: Category) -> Category:
    for category in categories:
        if category == reference:
            return category
    raise ValueError(f"Reference category {reference!r} is not a known category")


def aggregate(
    records: Iterable[SaleRecord],
    dimension: Dimension,
    reference_category: Category,
    mode: StatisticMode | str,
    canonical_sizes: Sequence[int] | None = None,
) -> dict[Category, AttributeFactor]:
    """Compute the factor of every category relative to ``reference_category``.

    Args:
        records: Sales to aggregate (full dataset; the right population is
            selected per dimension).
        dimension: Attribute axis.
        reference_category: Category every other one is compared against.
        mode: ``ratio`` (median / reference median) or ``premium``
            (median - reference median).
        canonical_sizes: Size categories for the size axis.

    Returns:
        Mapping with a key for every category of the dimension. Empty
        categories carry the neutral value (1 or 0) with sample size 0; if
        the reference category itself is empty, every entry is neutral with
        sample size 0, since none of them was measured against anything.
    """
    mode = StatisticMode(mode)
    categories = dimension_categories(dimension, canonical_sizes)
    reference = _resolve(categories, reference_category)
    groups = group_prices(records, dimension, categories)

    reference_median = median(groups[reference])
    if reference_median <= 0:
        logger.warning(
            "Reference segment %s=%s is empty; %s factors default to %s",
            dimension.value, reference, mode.value, mode.neutral,
        )

    factors: dict[Category, AttributeFactor] = {}
    for category, prices in groups.items():
        value = mode.neutral
        if prices and reference_median > 0:
            category_median = median(prices)
            if mode is StatisticMode.RATIO:
                value = category_median / reference_median
            else:
                value = category_median - reference_median
        sample_size = len(prices) if reference_median > 0 else 0
        factors[category] = AttributeFactor(value=value, sample_size=sample_size)
        logger.debug(
            "%s=%s: %s=%.4f (n=%d)",
            dimension.value, category, mode.value, value, sample_size,
        )
    return factors


def most_common_leather(records: Iterable[SaleRecord]) -> LeatherType:
    """Most frequent standard leather; ties go to the earlier canonical leather."""
    counts = Counter(
        category_of(r, Dimension.LEATHER) for r in population(records, Dimension.LEATHER)
    )
    best = STANDARD_LEATHERS[0]
    for leather in STANDARD_LEATHERS:
        if counts[leather] > counts[best]:
            best = leather
    return best


def build_factor_tables(
    records: Sequence[SaleRecord],
    pricing: PricingSettings | None = None,
) -> FactorTables:
    """Build baseline and every ratio / premium table from ``records``.

    Pure function of its inputs. Configured business fallbacks are applied
    to empty exotic categories and to an empty Rose Gold segment; those
    entries keep sample size 0 so confidence still reflects the gap.
    """
    pricing = pricing or settings.pricing
    sizes = pricing.canonical_sizes
    standard = [r for r in records if not r.bag.is_exotic]

    baseline_prices = [r.price for r in standard if r.bag.size == pricing.reference_size]
    baseline = Baseline(value=median(baseline_prices), sample_size=len(baseline_prices))
    standard_median = median([r.price for r in standard])

    references: dict[Dimension, Category] = {
        Dimension.SIZE: pricing.reference_size,
        Dimension.LEATHER: most_common_leather(standard),
        Dimension.EXOTIC: STANDARD_SEGMENT,
        Dimension.YEAR: YearBand(pricing.reference_year_band),
        Dimension.HARDWARE: HardwareType(pricing.reference_hardware),
        Dimension.COLOR: ColorFamily(pricing.reference_color),
    }

    ratios: dict[Dimension, dict[Category, AttributeFactor]] = {}
    premiums: dict[Dimension, dict[Category, AttributeFactor]] = {}
    for dimension, reference in references.items():
        ratios[dimension] = aggregate(records, dimension, reference, StatisticMode.RATIO, sizes)
        premiums[dimension] = aggregate(records, dimension, reference, StatisticMode.PREMIUM, sizes)

    _apply_exotic_fallbacks(ratios, premiums, standard_median, pricing)
    _apply_rose_gold_fallback(ratios, premiums, records, references[Dimension.HARDWARE], pricing)

    tables = FactorTables(
        baseline=baseline,
        standard_median=standard_median,
        standard_count=len(standard),
        exotic_count=len(records) - len(standard),
        ratios=ratios,
        premiums=premiums,
        references=references,
    )
    logger.info(
        "Factor tables built: %d sales (%d standard, %d exotic), baseline=%s (n=%d)",
        tables.total_count,
        tables.standard_count,
        tables.exotic_count,
        f"{baseline.value:,.0f}",
        baseline.sample_size,
    )
    return tables


def _apply_exotic_fallbacks(
    ratios: dict[Dimension, dict[Category, AttributeFactor]],
    premiums: dict[Dimension, dict[Category, AttributeFactor]],
    standard_median: float,
    pricing: PricingSettings,
) -> None:
    fallback_ratio = pricing.exotic_fallback_ratio
    if pricing.exotic_fallback_premium is not None:
        fallback_premium = pricing.exotic_fallback_premium
    else:
        fallback_premium = standard_median * (fallback_ratio - 1)

    for exotic_type in ExoticType:
        if ratios[Dimension.EXOTIC][exotic_type].sample_size > 0:
            continue
        logger.debug("No %s sales; using fallback ratio %.2f", exotic_type.value, fallback_ratio)
        ratios[Dimension.EXOTIC][exotic_type] = AttributeFactor(fallback_ratio, 0)
        premiums[Dimension.EXOTIC][exotic_type] = AttributeFactor(fallback_premium, 0)


def _apply_rose_gold_fallback(
    ratios: dict[Dimension, dict[Category, AttributeFactor]],
    premiums: dict[Dimension, dict[Category, AttributeFactor]],
    records: Sequence[SaleRecord],
    reference: Category,
    pricing: PricingSettings,
) -> None:
    rose_gold = HardwareType.ROSE_GOLD
    if rose_gold == reference or premiums[Dimension.HARDWARE][rose_gold].sample_size > 0:
        return

    groups = group_prices(records, Dimension.HARDWARE, [reference])
    reference_median = median(groups[reference])
    if reference_median <= 0:
        return
    premium = pricing.rose_gold_fallback_premium
    ratio = (reference_median + premium) / reference_median

    logger.debug("No Rose Gold sales; using fallback premium %s", f"{premium:,.0f}")
    premiums[Dimension.HARDWARE][rose_gold] = AttributeFactor(premium, 0)
    ratios[Dimension.HARDWARE][rose_gold] = AttributeFactor(ratio, 0)
