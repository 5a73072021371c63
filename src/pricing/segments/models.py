"""Data models for segment aggregation."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Union

from src.common.models import ColorFamily, ExoticType, HardwareType, LeatherType, YearBand

# Label of the non-exotic population on the exotic axis
STANDARD_SEGMENT = "Standard"

Category = Union[int, str, ExoticType, LeatherType, HardwareType, ColorFamily, YearBand]


class Dimension(str, Enum):
    """Attribute axis a segment table is built over."""
    SIZE = "size"
    LEATHER = "leather"
    EXOTIC = "exotic"
    YEAR = "year"
    HARDWARE = "hardware"
    COLOR = "color"


class StatisticMode(str, Enum):
    """How a category is expressed against its reference."""
    RATIO = "ratio"
    PREMIUM = "premium"

    @property
    def neutral(self) -> float:
        return 1.0 if self is StatisticMode.RATIO else 0.0


@dataclass(frozen=True)
class AttributeFactor:
    """Adjustment for one category, with the number of sales behind it.

    ``value`` is a ratio or a dollar premium depending on the table it sits
    in. A ``sample_size`` of 0 means the value is a neutral default or a
    configured fallback, not an observation.
    """

    value: float
    sample_size: int

    def to_dict(self) -> dict:
        return {"value": self.value, "sample_size": self.sample_size}


@dataclass(frozen=True)
class Baseline:
    """Median price of standard-leather size-30 sales."""

    value: float
    sample_size: int

    def to_dict(self) -> dict:
        return {"value": self.value, "sample_size": self.sample_size}


@dataclass(frozen=True)
class FactorLookup:
    """Result of looking up a category in a factor table."""

    category: Category
    factor: AttributeFactor
    matched: bool


@dataclass(frozen=True)
class FactorTables:
    """Every factor table derived from one dataset.

    Built by ``build_factor_tables``. The tables are copied into read-only
    mappings on construction, so a cached instance can be shared between
    requests. Callers that cache it own its lifetime.
    """

    baseline: Baseline
    standard_median: float
    standard_count: int
    exotic_count: int
    ratios: Mapping[Dimension, Mapping[Category, AttributeFactor]] = field(default_factory=dict)
    premiums: Mapping[Dimension, Mapping[Category, AttributeFactor]] = field(default_factory=dict)
    references: Mapping[Dimension, Category] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "ratios", _freeze(self.ratios))
        object.__setattr__(self, "premiums", _freeze(self.premiums))
        object.__setattr__(self, "references", MappingProxyType(dict(self.references)))

    @property
    def total_count(self) -> int:
        return self.standard_count + self.exotic_count

    def table(self, dimension: Dimension, mode: StatisticMode) -> Mapping[Category, AttributeFactor]:
        tables = self.ratios if mode is StatisticMode.RATIO else self.premiums
        return tables[dimension]

    def lookup(
        self,
        dimension: Dimension,
        category: Category,
        mode: StatisticMode,
    ) -> FactorLookup:
        """Find ``category`` in a table, falling back to the reference category."""
        table = self.table(dimension, mode)
        if category in table:
            return FactorLookup(category, table[category], matched=True)
        reference = self.references[dimension]
        return FactorLookup(reference, table[reference], matched=False)

    def to_dict(self) -> dict:
        def _dump(tables: Mapping[Dimension, Mapping[Category, AttributeFactor]]) -> dict:
            return {
                dim.value: {category_label(cat): f.to_dict() for cat, f in table.items()}
                for dim, table in tables.items()
            }

        return {
            "baseline": self.baseline.to_dict(),
            "standard_median": self.standard_median,
            "standard_count": self.standard_count,
            "exotic_count": self.exotic_count,
            "references": {dim.value: category_label(cat) for dim, cat in self.references.items()},
            "ratios": _dump(self.ratios),
            "premiums": _dump(self.premiums),
        }


def _freeze(
    tables: Mapping[Dimension, Mapping[Category, AttributeFactor]],
) -> Mapping[Dimension, Mapping[Category, AttributeFactor]]:
    return MappingProxyType({dim: MappingProxyType(dict(t)) for dim, t in tables.items()})


def category_label(category: Category) -> str:
    if isinstance(category, Enum):
        return str(category.value)
    return str(category)
