"""Pricing models — ratio, additive and hybrid estimators.

All three share one interface and read the same ``FactorTables``:

- Ratio:    baseline x size x year x (exotic ratio | hardware ratio)
- Additive: baseline + size + (exotic | leather) + year + color + hardware
- Hybrid:   additive standard-equivalent, then x exotic ratio for exotics

Models are stateless: the same tables and configuration always give the
same estimate. Configuration values the tables don't know (an unusual
size, say) fall back to the reference category; ``Other`` hardware, color
and leather carry no adjustment and are left out of the confidence check.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from src.common.config import ConfidenceSettings, settings
from src.common.models import (
    BagAttributes,
    ColorFamily,
    EstimateResult,
    FactorContribution,
    HardwareType,
    LeatherType,
)

from ..classifier import BagProfile, classify_bag
from ..segments.models import (
    Category,
    Dimension,
    FactorTables,
    StatisticMode,
    category_label,
)
from .confidence import classify_confidence, interval_for

logger = logging.getLogger(__name__)

# Categories that mean "unrecognized": applied as a no-op
_NO_OP_CATEGORIES = {ColorFamily.OTHER, HardwareType.OTHER, LeatherType.OTHER}


class _Pricing:
    """Running state of one estimate: applied factors and their samples."""

    def __init__(self, tables: FactorTables) -> None:
        self.tables = tables
        self.breakdown: dict[str, FactorContribution] = {
            "baseline": FactorContribution(
                category=category_label(tables.references[Dimension.SIZE]),
                value=tables.baseline.value,
                sample_size=tables.baseline.sample_size,
            )
        }
        # An empty baseline caps confidence like any thin factor
        self.samples: list[int] = [tables.baseline.sample_size]

    def factor(self, dimension: Dimension, category: Category, mode: StatisticMode) -> float:
        if category in _NO_OP_CATEGORIES:
            self.breakdown[dimension.value] = FactorContribution(
                category=category_label(category), value=mode.neutral,
            )
            return mode.neutral

        found = self.tables.lookup(dimension, category, mode)
        if not found.matched:
            logger.debug(
                "Unknown %s %r; using %s factor",
                dimension.value, category, category_label(found.category),
            )
        self.breakdown[dimension.value] = FactorContribution(
            category=category_label(found.category),
            value=found.factor.value,
            sample_size=found.factor.sample_size,
        )
        self.samples.append(found.factor.sample_size)
        return found.factor.value


class PricingModel(ABC):
    """Common interface of every pricing model."""

    name: str = ""

    def __init__(
        self,
        tables: FactorTables,
        confidence: ConfidenceSettings | None = None,
    ) -> None:
        self.tables = tables
        self.confidence = confidence or settings.confidence

    @abstractmethod
    def _price(self, profile: BagProfile, pricing: _Pricing) -> float:
        """Combine factors into a point estimate, recording each one used."""

    def predict(self, config: BagAttributes) -> float:
        """Point estimate only."""
        return self._price(classify_bag(config), _Pricing(self.tables))

    def estimate(self, config: BagAttributes) -> EstimateResult:
        """Point estimate with confidence band and factor breakdown."""
        profile = classify_bag(config)
        pricing = _Pricing(self.tables)
        point = self._price(profile, pricing)

        min_sample = min(pricing.samples) if pricing.samples else 0
        confidence = classify_confidence(min_sample, self.confidence)
        interval = interval_for(confidence, self.confidence)

        logger.debug(
            "%s estimate for size %d (%s): %.0f, %s confidence (min n=%d)",
            self.name, config.size, "exotic" if config.is_exotic else "standard",
            point, confidence.value, min_sample,
        )
        return EstimateResult(
            model=self.name,
            point_estimate=point,
            low_bound=point * (1 - interval),
            high_bound=point * (1 + interval),
            confidence=confidence,
            interval_pct=interval,
            min_sample_size=min_sample,
            breakdown=pricing.breakdown,
        )


class RatioModel(PricingModel):
    """Every attribute is a multiplier on the baseline."""

    name = "ratio"

    def _price(self, profile: BagProfile, pricing: _Pricing) -> float:
        mode = StatisticMode.RATIO
        value = self.tables.baseline.value
        value *= pricing.factor(Dimension.SIZE, profile.size, mode)
        if profile.is_exotic:
            value *= pricing.factor(Dimension.EXOTIC, profile.exotic_type, mode)
        value *= pricing.factor(Dimension.YEAR, profile.year_band, mode)
        if not profile.is_exotic:
            value *= pricing.factor(Dimension.HARDWARE, profile.hardware, mode)
        return value


class AdditiveModel(PricingModel):
    """Every attribute is a dollar premium summed onto the baseline."""

    name = "additive"

    def _price(self, profile: BagProfile, pricing: _Pricing) -> float:
        mode = StatisticMode.PREMIUM
        value = self.tables.baseline.value
        value += pricing.factor(Dimension.SIZE, profile.size, mode)
        if profile.is_exotic:
            value += pricing.factor(Dimension.EXOTIC, profile.exotic_type, mode)
        else:
            value += pricing.factor(Dimension.LEATHER, profile.leather, mode)
        value += pricing.factor(Dimension.YEAR, profile.year_band, mode)
        value += pricing.factor(Dimension.COLOR, profile.color, mode)
        value += pricing.factor(Dimension.HARDWARE, profile.hardware, mode)
        return value


class HybridModel(PricingModel):
    """Additive standard-equivalent price, scaled by the exotic ratio."""

    name = "hybrid"

    def _price(self, profile: BagProfile, pricing: _Pricing) -> float:
        premium = StatisticMode.PREMIUM
        value = self.tables.baseline.value
        value += pricing.factor(Dimension.SIZE, profile.size, premium)
        if not profile.is_exotic:
            value += pricing.factor(Dimension.LEATHER, profile.leather, premium)
        value += pricing.factor(Dimension.YEAR, profile.year_band, premium)
        value += pricing.factor(Dimension.COLOR, profile.color, premium)
        value += pricing.factor(Dimension.HARDWARE, profile.hardware, premium)
        if profile.is_exotic:
            value *= pricing.factor(Dimension.EXOTIC, profile.exotic_type, StatisticMode.RATIO)
        return value


MODEL_REGISTRY: dict[str, type[PricingModel]] = {
    RatioModel.name: RatioModel,
    AdditiveModel.name: AdditiveModel,
    HybridModel.name: HybridModel,
}

# Tie-break order when models fit equally well
MODEL_PRECEDENCE: tuple[str, ...] = ("hybrid", "additive", "ratio")


def get_model(
    name: str,
    tables: FactorTables,
    confidence: ConfidenceSettings | None = None,
) -> PricingModel:
    """Instantiate a registered model by name."""
    try:
        model_cls = MODEL_REGISTRY[name]
    except KeyError:
        raise ValueError(
            f"Unknown pricing model {name!r}; expected one of {sorted(MODEL_REGISTRY)}"
        ) from None
    return model_cls(tables, confidence)


def build_models(
    tables: FactorTables,
    confidence: ConfidenceSettings | None = None,
) -> dict[str, PricingModel]:
    """Every registered model over the same tables, in precedence order."""
    return {name: get_model(name, tables, confidence) for name in MODEL_PRECEDENCE}
