"""Segment Aggregator Module - Factor tables and market guide summaries."""

from .aggregator import aggregate, build_factor_tables, dimension_categories
from .guide import (
    build_market_guide,
    color_summary,
    segment_summary,
    select_comparables,
    summarize_comparables,
)
from .models import (
    STANDARD_SEGMENT,
    AttributeFactor,
    Baseline,
    Dimension,
    FactorLookup,
    FactorTables,
    StatisticMode,
)

__all__ = [
    "STANDARD_SEGMENT",
    "AttributeFactor",
    "Baseline",
    "Dimension",
    "FactorLookup",
    "FactorTables",
    "StatisticMode",
    "aggregate",
    "build_factor_tables",
    "build_market_guide",
    "color_summary",
    "dimension_categories",
    "segment_summary",
    "select_comparables",
    "summarize_comparables",
]
