"""Confidence tiers for price estimates.

An estimate is only as trustworthy as its thinnest segment: the tier is
driven by the smallest sample size among the factors actually applied.
"""

from __future__ import annotations

from src.common.config import ConfidenceSettings, settings
from src.common.models import Confidence


def classify_confidence(
    min_sample_size: int,
    policy: ConfidenceSettings | None = None,
) -> Confidence:
    """Map the smallest contributing sample size onto a confidence tier."""
    policy = policy or settings.confidence
    if min_sample_size >= policy.high_min_samples:
        return Confidence.HIGH
    if min_sample_size >= policy.medium_min_samples:
        return Confidence.MEDIUM
    return Confidence.LOW


def interval_for(
    confidence: Confidence,
    policy: ConfidenceSettings | None = None,
) -> float:
    """Half-width of the estimate band, as a fraction of the point estimate."""
    policy = policy or settings.confidence
    return {
        Confidence.HIGH: policy.high_interval,
        Confidence.MEDIUM: policy.medium_interval,
        Confidence.LOW: policy.low_interval,
    }[confidence]
