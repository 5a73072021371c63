"""Attribute Classifier Module - Free-text attribute normalization."""

from .classifier import (
    BagProfile,
    classify_bag,
    classify_color,
    classify_exotic,
    classify_hardware,
    classify_leather,
    classify_year,
)

__all__ = [
    "BagProfile",
    "classify_bag",
    "classify_color",
    "classify_exotic",
    "classify_hardware",
    "classify_leather",
    "classify_year",
]
