"""Tests for the segment aggregator and factor tables."""

from __future__ import annotations

import pytest

from src.common.config import PricingSettings
from src.common.models import ColorFamily, ExoticType, HardwareType, LeatherType, YearBand
from src.pricing.segments import (
    STANDARD_SEGMENT,
    Dimension,
    StatisticMode,
    aggregate,
    build_factor_tables,
)
from src.pricing.segments.aggregator import most_common_leather


class TestAggregateSize:
    def test_ratio_against_reference(self, size_scenario):
        factors = aggregate(size_scenario, Dimension.SIZE, 30, StatisticMode.RATIO)
        assert factors[25].value == pytest.approx(1.3)
        assert factors[25].sample_size == 5
        assert factors[30].value == pytest.approx(1.0)
        assert factors[30].sample_size == 20

    def test_premium_against_reference(self, size_scenario):
        factors = aggregate(size_scenario, Dimension.SIZE, 30, "premium")
        assert factors[25].value == pytest.approx(3_000)
        assert factors[30].value == 0

    def test_empty_category_is_neutral(self, size_scenario):
        ratios = aggregate(size_scenario, Dimension.SIZE, 30, StatisticMode.RATIO)
        premiums = aggregate(size_scenario, Dimension.SIZE, 30, StatisticMode.PREMIUM)
        assert (ratios[40].value, ratios[40].sample_size) == (1.0, 0)
        assert (premiums[40].value, premiums[40].sample_size) == (0.0, 0)

    def test_empty_reference_makes_everything_neutral(self, make_sale):
        records = [make_sale(13_000, size=25), make_sale(9_000, size=35)]
        factors = aggregate(records, Dimension.SIZE, 30, StatisticMode.RATIO)
        assert factors[25].value == 1.0
        assert factors[25].sample_size == 0
        assert factors[35].value == 1.0

    def test_no_records(self):
        factors = aggregate([], Dimension.SIZE, 30, StatisticMode.PREMIUM)
        assert all(f.value == 0 and f.sample_size == 0 for f in factors.values())

    def test_exotic_sales_excluded(self, make_sale):
        records = [
            make_sale(10_000),
            make_sale(12_000, size=25),
            make_sale(60_000, size=25, is_exotic=True, exotic_type="Crocodile"),
        ]
        factors = aggregate(records, Dimension.SIZE, 30, StatisticMode.RATIO)
        assert factors[25].value == pytest.approx(1.2)
        assert factors[25].sample_size == 1

    def test_unknown_reference_raises(self, size_scenario):
        with pytest.raises(ValueError, match="Reference category"):
            aggregate(size_scenario, Dimension.SIZE, 33, StatisticMode.RATIO)

    def test_unknown_mode_raises(self, size_scenario):
        with pytest.raises(ValueError):
            aggregate(size_scenario, Dimension.SIZE, 30, "percent")


class TestAggregateOtherDimensions:
    def test_exotic_against_standard(self, make_sale):
        records = [make_sale(10_000) for _ in range(4)]
        records += [
            make_sale(30_000, is_exotic=True, exotic_type="Porosus Crocodile"),
            make_sale(30_000, is_exotic=True, exotic_type="Crocodile"),
        ]
        ratios = aggregate(records, Dimension.EXOTIC, STANDARD_SEGMENT, StatisticMode.RATIO)
        premiums = aggregate(records, Dimension.EXOTIC, STANDARD_SEGMENT, StatisticMode.PREMIUM)
        assert ratios[ExoticType.CROCODILE].value == pytest.approx(3.0)
        assert ratios[ExoticType.CROCODILE].sample_size == 2
        assert premiums[ExoticType.CROCODILE].value == pytest.approx(20_000)
        assert ratios[STANDARD_SEGMENT].sample_size == 4
        # No fallback at this level: empty skins are neutral
        assert ratios[ExoticType.LIZARD].value == 1.0

    def test_year_reference_by_label(self, make_sale):
        records = [make_sale(10_000, year=2018), make_sale(8_000, year=2012)]
        factors = aggregate(records, Dimension.YEAR, "2015-2019", StatisticMode.RATIO)
        assert factors[YearBand.EARLY].value == pytest.approx(0.8)

    def test_missing_year_counts_as_modern(self, make_sale):
        records = [make_sale(10_000, year=None), make_sale(12_000, year=2016)]
        factors = aggregate(records, Dimension.YEAR, YearBand.MODERN, StatisticMode.PREMIUM)
        assert factors[YearBand.MODERN].sample_size == 2

    def test_other_hardware_not_tabulated(self, make_sale):
        records = [make_sale(10_000), make_sale(11_000, hardware="Permabrass")]
        factors = aggregate(records, Dimension.HARDWARE, HardwareType.PALLADIUM, StatisticMode.RATIO)
        assert HardwareType.OTHER not in factors
        assert factors[HardwareType.PALLADIUM].sample_size == 1

    def test_color_families(self, make_sale):
        records = [
            make_sale(10_000, color="Black"),
            make_sale(10_000, color="Etoupe"),
            make_sale(11_500, color="Rose Sakura"),
        ]
        factors = aggregate(records, Dimension.COLOR, ColorFamily.NEUTRAL, StatisticMode.PREMIUM)
        assert factors[ColorFamily.PINK_RED].value == pytest.approx(1_500)
        assert factors[ColorFamily.NEUTRAL].sample_size == 2


class TestMostCommonLeather:
    def test_most_frequent(self, make_sale):
        records = [make_sale(10_000, leather_type="Epsom") for _ in range(3)]
        records += [make_sale(10_000, leather_type="Togo") for _ in range(2)]
        assert most_common_leather(records) is LeatherType.EPSOM

    def test_tie_goes_to_canonical_order(self, make_sale):
        records = [
            make_sale(10_000, leather_type="Epsom"),
            make_sale(10_000, leather_type="Togo"),
        ]
        assert most_common_leather(records) is LeatherType.TOGO

    def test_no_standard_leather(self):
        assert most_common_leather([]) is LeatherType.TOGO


class TestBuildFactorTables:
    def test_baseline(self, size_scenario):
        tables = build_factor_tables(size_scenario)
        assert tables.baseline.value == 10_000
        assert tables.baseline.sample_size == 20
        assert tables.standard_count == 25
        assert tables.exotic_count == 0
        assert tables.total_count == 25

    def test_tables_are_read_only(self, size_scenario):
        tables = build_factor_tables(size_scenario)
        with pytest.raises(TypeError):
            tables.ratios[Dimension.SIZE][25] = None
        with pytest.raises(TypeError):
            tables.premiums[Dimension.SIZE] = {}
        with pytest.raises(TypeError):
            tables.references[Dimension.SIZE] = 35
        assert tables.ratios[Dimension.SIZE][25].value == pytest.approx(1.3)

    def test_tables_compare_by_value(self, size_scenario):
        assert build_factor_tables(size_scenario) == build_factor_tables(list(size_scenario))

    def test_empty_dataset_does_not_raise(self):
        tables = build_factor_tables([])
        assert tables.baseline.value == 0
        assert tables.baseline.sample_size == 0
        assert tables.ratios[Dimension.SIZE][25].value == 1.0

    def test_exotic_fallback_ratio(self, make_sale):
        records = [make_sale(10_000) for _ in range(3)]
        tables = build_factor_tables(records)
        lizard_ratio = tables.ratios[Dimension.EXOTIC][ExoticType.LIZARD]
        lizard_premium = tables.premiums[Dimension.EXOTIC][ExoticType.LIZARD]
        assert lizard_ratio.value == pytest.approx(2.5)
        assert lizard_ratio.sample_size == 0
        assert lizard_premium.value == pytest.approx(15_000)

    def test_exotic_fallback_fixed_premium(self, make_sale):
        records = [make_sale(10_000) for _ in range(3)]
        pricing = PricingSettings(exotic_fallback_ratio=3.0, exotic_fallback_premium=20_000)
        tables = build_factor_tables(records, pricing)
        assert tables.ratios[Dimension.EXOTIC][ExoticType.OTHER].value == pytest.approx(3.0)
        assert tables.premiums[Dimension.EXOTIC][ExoticType.OTHER].value == 20_000

    def test_observed_exotic_keeps_data(self, make_sale):
        records = [make_sale(10_000) for _ in range(3)]
        records.append(make_sale(40_000, is_exotic=True, exotic_type="Ostrich"))
        tables = build_factor_tables(records)
        ostrich = tables.ratios[Dimension.EXOTIC][ExoticType.OSTRICH]
        assert ostrich.value == pytest.approx(4.0)
        assert ostrich.sample_size == 1

    def test_other_exotic_uses_unmatched_sales_only(self, make_sale):
        records = [make_sale(10_000) for _ in range(3)]
        records.append(make_sale(60_000, is_exotic=True, exotic_type="Crocodile"))
        records.append(make_sale(30_000, is_exotic=True, exotic_type="Python"))
        tables = build_factor_tables(records)
        other = tables.ratios[Dimension.EXOTIC][ExoticType.OTHER]
        assert (other.value, other.sample_size) == (pytest.approx(3.0), 1)

    def test_rose_gold_fallback(self, make_sale):
        records = [make_sale(10_000) for _ in range(3)]
        tables = build_factor_tables(records)
        premium = tables.premiums[Dimension.HARDWARE][HardwareType.ROSE_GOLD]
        ratio = tables.ratios[Dimension.HARDWARE][HardwareType.ROSE_GOLD]
        assert premium.value == 1_000
        assert premium.sample_size == 0
        assert ratio.value == pytest.approx(1.1)

    def test_rose_gold_fallback_needs_reference(self, make_sale):
        records = [make_sale(10_000, hardware="Gold")]
        tables = build_factor_tables(records)
        assert tables.premiums[Dimension.HARDWARE][HardwareType.ROSE_GOLD].value == 0

    def test_references(self, size_scenario):
        tables = build_factor_tables(size_scenario)
        assert tables.references[Dimension.SIZE] == 30
        assert tables.references[Dimension.LEATHER] is LeatherType.TOGO
        assert tables.references[Dimension.YEAR] is YearBand.MODERN
        assert tables.references[Dimension.HARDWARE] is HardwareType.PALLADIUM
        assert tables.references[Dimension.EXOTIC] == STANDARD_SEGMENT

    def test_lookup_falls_back_to_reference(self, size_scenario):
        tables = build_factor_tables(size_scenario)
        found = tables.lookup(Dimension.SIZE, 28, StatisticMode.RATIO)
        assert not found.matched
        assert found.category == 30
        assert found.factor.value == pytest.approx(1.0)

    def test_pure_function(self, size_scenario):
        assert build_factor_tables(size_scenario) == build_factor_tables(size_scenario)

    def test_to_dict_labels(self, size_scenario):
        data = build_factor_tables(size_scenario).to_dict()
        assert data["baseline"] == {"value": 10_000, "sample_size": 20}
        assert data["ratios"]["size"]["25"]["sample_size"] == 5
        assert data["references"]["hardware"] == "Palladium"
        assert data["premiums"]["exotic"]["Crocodile"]["sample_size"] == 0
