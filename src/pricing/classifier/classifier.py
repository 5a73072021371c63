"""Attribute classification for bag listings.

Maps free-text leather, exotic skin, hardware and color names onto the
canonical categories used by the factor tables. Matching is
case-insensitive substring matching, checked in a fixed precedence order:

- Alligator before Crocodile (auction houses often list alligator as
  "croc"; an alligator record must never land in the Crocodile bucket)
- Rose Gold before Gold
- Color families in declaration order; first keyword hit wins

Every function is total: unmatched or missing input maps to an ``Other``
category (or the modal year band), never to None or an exception.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.common.models import (
    BagAttributes,
    ColorFamily,
    ExoticType,
    HardwareType,
    LeatherType,
    YearBand,
)

# Ordered: first match wins
EXOTIC_KEYWORDS: list[tuple[ExoticType, tuple[str, ...]]] = [
    (ExoticType.ALLIGATOR, ("alligator", "mississippiensis")),
    # Varanus niloticus is a lizard; Crocodylus niloticus is not
    (ExoticType.LIZARD, ("lizard", "varanus", "salvator")),
    (ExoticType.CROCODILE, ("croc", "porosus", "niloticus")),
    (ExoticType.OSTRICH, ("ostrich",)),
]

STANDARD_LEATHERS: list[LeatherType] = [
    LeatherType.TOGO,
    LeatherType.EPSOM,
    LeatherType.CLEMENCE,
    LeatherType.SWIFT,
    LeatherType.CHEVRE,
    LeatherType.BARENIA,
    LeatherType.EVERCALF,
    LeatherType.COURCHEVEL,
    LeatherType.ARDENNES,
]

COLOR_KEYWORDS: list[tuple[ColorFamily, tuple[str, ...]]] = [
    (ColorFamily.NEUTRAL, (
        "black", "noir", "white", "blanc", "grey", "gray", "gris", "etain",
        "etoupe", "craie", "beige", "trench", "nata", "graphite", "parchemin",
        "argile",
    )),
    (ColorFamily.PINK_RED, (
        "pink", "rose", "red", "rouge", "framboise", "fuchsia", "bougainvillier",
        "casaque", "grenat", "sakura", "lipstick", "cerise",
    )),
    (ColorFamily.BLUE, (
        "blue", "bleu", "navy", "indigo", "zanzibar", "izmir", "paon", "nuit",
    )),
    (ColorFamily.GREEN, (
        "green", "vert", "olive", "malachite", "criquet", "amande", "jade",
        "cypress", "bambou",
    )),
    (ColorFamily.ORANGE_YELLOW, (
        "orange", "yellow", "jaune", "soleil", "lime", "mimosa", "feu", "poppy",
        "curry",
    )),
    (ColorFamily.BROWN_TAN, (
        "brown", "tan", "gold", "marron", "chocolat", "caramel", "fauve",
        "havane", "biscuit", "cognac", "ebene", "alezan",
    )),
]


@dataclass(frozen=True)
class BagProfile:
    """Canonical labels for one bag."""

    size: int
    is_exotic: bool
    exotic_type: ExoticType | None
    leather: LeatherType
    year_band: YearBand
    hardware: HardwareType
    color: ColorFamily


def _match_exotic(text: str | None) -> ExoticType | None:
    lowered = (text or "").lower()
    for exotic_type, keywords in EXOTIC_KEYWORDS:
        if any(k in lowered for k in keywords):
            return exotic_type
    return None


def classify_exotic(exotic_type: str | None, leather_type: str | None = None) -> ExoticType:
    """Classify an exotic skin, checking ``exotic_type`` before ``leather_type``."""
    return _match_exotic(exotic_type) or _match_exotic(leather_type) or ExoticType.OTHER


def classify_leather(leather_type: str | None) -> LeatherType:
    """Classify a standard leather name."""
    lowered = (leather_type or "").lower()
    for leather in STANDARD_LEATHERS:
        if leather.value.lower() in lowered:
            return leather
    return LeatherType.OTHER


def classify_hardware(hardware: str | None) -> HardwareType:
    """Classify a hardware finish. Rose gold never counts as gold."""
    lowered = (hardware or "").lower()
    # GHW / PHW / RGHW are the usual auction-listing abbreviations
    if "rose gold" in lowered or "rghw" in lowered:
        return HardwareType.ROSE_GOLD
    if "gold" in lowered or "ghw" in lowered:
        return HardwareType.GOLD
    if "palladium" in lowered or "phw" in lowered:
        return HardwareType.PALLADIUM
    return HardwareType.OTHER


def classify_color(color: str | None) -> ColorFamily:
    """Classify a color name into a broad family."""
    lowered = (color or "").lower()
    for family, keywords in COLOR_KEYWORDS:
        if any(k in lowered for k in keywords):
            return family
    return ColorFamily.OTHER


def classify_year(year: int | None) -> YearBand:
    """Map a production year onto its band; unknown years use the modal band."""
    if not year:
        return YearBand.MODERN
    if year >= 2020:
        return YearBand.RECENT
    if year >= 2015:
        return YearBand.MODERN
    if year >= 2010:
        return YearBand.EARLY
    return YearBand.VINTAGE


def classify_bag(bag: BagAttributes) -> BagProfile:
    """Classify every attribute of ``bag`` at once."""
    return BagProfile(
        size=bag.size,
        is_exotic=bag.is_exotic,
        exotic_type=classify_exotic(bag.exotic_type, bag.leather_type) if bag.is_exotic else None,
        leather=classify_leather(bag.leather_type),
        year_band=classify_year(bag.year),
        hardware=classify_hardware(bag.hardware),
        color=classify_color(bag.color),
    )
