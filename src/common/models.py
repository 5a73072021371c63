"""Shared Pydantic data models for the Birkin price index.

These models define the data contracts between the sales repository,
the pricing engine and whatever presentation layer renders the results.
All modules import from here.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# === Enums ===

class ExoticType(str, Enum):
    """Canonical exotic skins."""
    CROCODILE = "Crocodile"
    ALLIGATOR = "Alligator"
    OSTRICH = "Ostrich"
    LIZARD = "Lizard"
    OTHER = "Other"


class LeatherType(str, Enum):
    """Canonical standard (calf/goat) leathers."""
    TOGO = "Togo"
    EPSOM = "Epsom"
    CLEMENCE = "Clemence"
    SWIFT = "Swift"
    CHEVRE = "Chevre"
    BARENIA = "Barenia"
    EVERCALF = "Evercalf"
    COURCHEVEL = "Courchevel"
    ARDENNES = "Ardennes"
    OTHER = "Other"


class HardwareType(str, Enum):
    """Canonical hardware finishes."""
    GOLD = "Gold"
    PALLADIUM = "Palladium"
    ROSE_GOLD = "Rose Gold"
    OTHER = "Other"


class ColorFamily(str, Enum):
    """Broad color families."""
    NEUTRAL = "Neutral"
    PINK_RED = "Pink/Red"
    BLUE = "Blue"
    GREEN = "Green"
    ORANGE_YELLOW = "Orange/Yellow"
    BROWN_TAN = "Brown/Tan"
    OTHER = "Other"


class YearBand(str, Enum):
    """Production year bands."""
    RECENT = "2020+"
    MODERN = "2015-2019"
    EARLY = "2010-2014"
    VINTAGE = "Pre-2010"


class Confidence(str, Enum):
    """Confidence tier of an estimate."""
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


# === Sales data ===

class BagAttributes(BaseModel):
    """Descriptive snapshot of a bag at sale time."""
    model_config = ConfigDict(frozen=True)

    size: int
    is_exotic: bool = False
    exotic_type: str | None = None
    leather_type: str | None = None
    year: int | None = None
    hardware: str | None = None
    color: str | None = None
    color_secondary: str | None = None
    model_name: str | None = None
    is_limited_edition: bool = False
    condition: str | None = None


class SaleRecord(BaseModel):
    """One observed auction sale."""
    model_config = ConfigDict(frozen=True)

    price: float = Field(gt=0, description="Hammer price, single currency")
    bag: BagAttributes
    sale_date: date | None = None
    sale_id: str | None = None
    currency: str = "USD"
    source_name: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> SaleRecord:
        """Build a record from a backend row.

        Accepts the nested Supabase shape (``bags`` / ``sources`` joined
        objects) as well as a flat row with the bag columns inline.
        """
        bag_row = row.get("bags") or row
        if isinstance(bag_row, list):
            bag_row = bag_row[0] if bag_row else {}
        model_row = bag_row.get("models") or {}
        source_row = row.get("sources") or {}

        bag = BagAttributes(
            size=int(bag_row.get("size") or 0),
            is_exotic=bool(bag_row.get("is_exotic")),
            exotic_type=bag_row.get("exotic_type"),
            leather_type=bag_row.get("leather_type"),
            year=bag_row.get("year") or None,
            hardware=bag_row.get("hardware"),
            color=bag_row.get("color"),
            color_secondary=bag_row.get("color_secondary"),
            model_name=model_row.get("name") or bag_row.get("model_name"),
            is_limited_edition=bool(bag_row.get("is_limited_edition")),
            condition=bag_row.get("condition"),
        )
        sale_id = row.get("sale_id") if "sale_id" in row else row.get("id")
        sale_date = row.get("sale_date")
        return cls(
            price=float(row["sale_price"]),
            bag=bag,
            sale_date=str(sale_date)[:10] if sale_date else None,
            sale_id=str(sale_id) if sale_id is not None else None,
            currency=row.get("currency") or "USD",
            source_name=source_row.get("name") or row.get("source_name"),
        )


# === Estimates ===

class FactorContribution(BaseModel):
    """One named factor applied to an estimate."""
    category: str | None = None
    value: float
    sample_size: int | None = None


class EstimateResult(BaseModel):
    """Point estimate with confidence band for one bag configuration."""
    model: str
    point_estimate: float
    low_bound: float
    high_bound: float
    confidence: Confidence
    interval_pct: float = Field(description="Half-width of the band as a fraction")
    min_sample_size: int
    breakdown: dict[str, FactorContribution] = Field(default_factory=dict)


class InsufficientData(BaseModel):
    """Returned instead of an estimate when no usable sales are available."""
    reason: str
    sample_count: int = 0


# === Model comparison ===

class ModelMetrics(BaseModel):
    """Fit quality of one model over one population."""
    r2: float
    mae: float
    mape: float = Field(description="Percent; inf when an actual price is zero")
    sample_count: int


class PredictionSample(BaseModel):
    """A single record with every model's prediction, for review."""
    actual: float
    predictions: dict[str, float]
    size: int
    is_exotic: bool
    year: int | None = None


class ModelComparisonReport(BaseModel):
    """Per-model fit metrics, overall and per standard/exotic segment."""
    total_sales: int
    standard_sales: int
    exotic_sales: int
    baseline: float
    overall: dict[str, ModelMetrics]
    standard: dict[str, ModelMetrics]
    exotic: dict[str, ModelMetrics]
    ranking: list[str]
    winner: str
    samples: list[PredictionSample] = Field(default_factory=list)


# === Market guide ===

class SegmentRow(BaseModel):
    """Price summary for one segment."""
    category: str
    median: float
    min: float
    max: float
    mean: float
    count: int


class MarketGuide(BaseModel):
    """Segment tables behind the buyer's guide pages."""
    sizes: list[SegmentRow] = Field(default_factory=list)
    leathers: list[SegmentRow] = Field(default_factory=list)
    exotic_types: list[SegmentRow] = Field(default_factory=list)
    hardware: list[SegmentRow] = Field(default_factory=list)
    colors: list[SegmentRow] = Field(default_factory=list)
    color_families: list[SegmentRow] = Field(default_factory=list)
    standard_mean: float = 0
    exotic_mean: float = 0
    exotic_premium_pct: int = 0


class ComparablesSummary(BaseModel):
    """Price range of sales comparable to one bag."""
    count: int
    mean: float
    median: float
    min: float
    max: float
