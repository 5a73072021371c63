"""Pricing Estimator Module - Ratio, additive and hybrid pricing models.

The cached ``PricingService`` lives in ``estimator.service``.
"""

from .confidence import classify_confidence, interval_for
from .strategies import (
    MODEL_PRECEDENCE,
    MODEL_REGISTRY,
    AdditiveModel,
    HybridModel,
    PricingModel,
    RatioModel,
    build_models,
    get_model,
)

__all__ = [
    "MODEL_PRECEDENCE",
    "MODEL_REGISTRY",
    "AdditiveModel",
    "HybridModel",
    "PricingModel",
    "RatioModel",
    "build_models",
    "classify_confidence",
    "get_model",
    "interval_for",
]
