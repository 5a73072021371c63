"""Tests for market guide summaries and comparable sales."""

from __future__ import annotations

from datetime import date

import pytest

from src.common.config import GuideSettings
from src.common.models import BagAttributes
from src.pricing.segments import (
    Dimension,
    build_market_guide,
    color_summary,
    segment_summary,
    select_comparables,
    summarize_comparables,
)


class TestSegmentSummary:
    def test_sizes_ascending(self, sample_sales):
        rows = segment_summary(sample_sales, Dimension.SIZE)
        assert [r.category for r in rows] == ["25", "30", "35", "40"]
        size_30 = rows[1]
        assert size_30.count == 6
        assert size_30.median == 11_750
        assert size_30.min == 10_500
        assert size_30.max == 15_000

    def test_other_dimensions_by_median_descending(self, sample_sales):
        rows = segment_summary(sample_sales, Dimension.EXOTIC, min_count=1)
        assert [r.category for r in rows] == ["Crocodile", "Alligator", "Ostrich"]
        assert rows[0].median == 52_500

    def test_min_count_drops_thin_segments(self, sample_sales):
        rows = segment_summary(sample_sales, Dimension.HARDWARE, min_count=3)
        assert [r.category for r in rows] == ["Gold", "Palladium"]

    def test_standard_segment_never_listed(self, sample_sales):
        rows = segment_summary(sample_sales, Dimension.EXOTIC)
        assert "Standard" not in [r.category for r in rows]

    def test_mean_is_rounded(self, make_sale):
        records = [make_sale(10_000, leather_type="Epsom"), make_sale(10_001, leather_type="Epsom")]
        rows = segment_summary(records, Dimension.LEATHER)
        assert rows[0].mean == 10_000

    def test_empty(self):
        assert segment_summary([], Dimension.COLOR) == []


COLOR_NAMES = [
    "Etoupe", "Gold", "Rouge Casaque", "Bleu Nuit",
    "Vert Criquet", "Black", "Craie", "Rose Sakura",
]


class TestColorSummary:
    def test_names_are_not_collapsed_into_families(self, make_sale):
        records = [
            make_sale(10_000 + 500 * i, color=name)
            for i, name in enumerate(COLOR_NAMES)
            for _ in range(3)
        ]
        guide = build_market_guide(records)
        assert [r.category for r in guide.colors] == list(reversed(COLOR_NAMES))
        assert len(guide.color_families) < len(COLOR_NAMES)

    def test_min_count_and_top(self, make_sale):
        records = [make_sale(11_000, color="Etoupe") for _ in range(3)]
        records += [make_sale(12_000, color="Gold") for _ in range(3)]
        records += [make_sale(20_000, color="Craie") for _ in range(2)]
        assert [r.category for r in color_summary(records, min_count=3)] == ["Gold", "Etoupe"]
        assert [r.category for r in color_summary(records, top=1)] == ["Craie"]

    def test_standard_only_and_named(self, make_sale):
        records = [
            make_sale(10_000, color="Black"),
            make_sale(50_000, color="Black", is_exotic=True, exotic_type="Crocodile"),
            make_sale(9_000, color=None),
            make_sale(9_500, color=" Black "),
        ]
        rows = color_summary(records)
        assert len(rows) == 1
        assert (rows[0].category, rows[0].count, rows[0].max) == ("Black", 2, 10_000)


class TestMarketGuide:
    def test_tables(self, sample_sales):
        guide = build_market_guide(sample_sales)
        assert [r.category for r in guide.leathers] == ["Togo", "Clemence"]
        assert [r.category for r in guide.exotic_types] == ["Crocodile", "Alligator"]
        assert [r.category for r in guide.hardware] == ["Gold", "Palladium"]
        assert [r.category for r in guide.colors] == ["Black"]
        assert [r.category for r in guide.color_families] == ["Neutral"]
        assert len(guide.sizes) == 4

    def test_means_and_premium(self, sample_sales):
        guide = build_market_guide(sample_sales)
        assert guide.standard_mean == 11_464
        assert guide.exotic_mean == 39_800
        assert guide.exotic_premium_pct == 247

    def test_top_colors_limit(self, sample_sales):
        guide = build_market_guide(sample_sales, GuideSettings(min_color_count=1, top_colors=2))
        assert len(guide.colors) == 2
        assert guide.colors[0].median >= guide.colors[1].median

    def test_no_exotics(self, make_sale):
        guide = build_market_guide([make_sale(10_000)])
        assert guide.exotic_types == []
        assert guide.exotic_premium_pct == 0

    def test_empty(self):
        guide = build_market_guide([])
        assert guide.standard_mean == 0
        assert guide.exotic_premium_pct == 0


class TestComparables:
    def test_same_size_and_population_newest_first(self, sample_sales):
        bag = BagAttributes(size=30, model_name="Birkin")
        comps = select_comparables(sample_sales, bag)
        assert [c.sale_id for c in comps] == ["1", "2", "3", "4", "5", "14"]

    def test_limit(self, sample_sales):
        bag = BagAttributes(size=30)
        assert len(select_comparables(sample_sales, bag, limit=2)) == 2

    def test_model_name_filter(self, make_sale):
        records = [
            make_sale(10_000, model_name="Birkin"),
            make_sale(9_000, model_name="Kelly"),
        ]
        comps = select_comparables(records, BagAttributes(size=30, model_name="Kelly"))
        assert [c.price for c in comps] == [9_000]

    def test_undated_sales_last(self, make_sale):
        records = [
            make_sale(10_000, sale_id="undated"),
            make_sale(11_000, sale_date=date(2024, 3, 1), sale_id="dated"),
        ]
        comps = select_comparables(records, BagAttributes(size=30))
        assert [c.sale_id for c in comps] == ["dated", "undated"]

    def test_summary(self, sample_sales):
        comps = select_comparables(sample_sales, BagAttributes(size=30))
        summary = summarize_comparables(comps)
        assert summary.count == 6
        assert summary.median == 11_750
        assert summary.mean == 12_250
        assert summary.min == 10_500
        assert summary.max == 15_000

    def test_empty_summary(self):
        summary = summarize_comparables([])
        assert summary.count == 0
        assert summary.median == 0

    def test_exotic_bag_only_matches_exotics(self, sample_sales):
        bag = BagAttributes(size=25, is_exotic=True)
        comps = select_comparables(sample_sales, bag)
        assert [c.price for c in comps] == pytest.approx([60_000, 40_000])
