"""Project configuration and paths.

Loads pricing policy from config/settings.yaml and credentials from
environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

# === Paths ===
PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"
DATA_DIR = PROJECT_ROOT / "data"
DATA_EXPORTS_DIR = DATA_DIR / "exports"

# Load .env from project root
load_dotenv(PROJECT_ROOT / ".env")


class PricingSettings(BaseModel):
    """Reference categories and business fallbacks for the factor tables."""
    canonical_sizes: list[int] = Field(default_factory=lambda: [25, 30, 35, 40])
    reference_size: int = 30
    reference_year_band: str = "2015-2019"
    reference_hardware: str = "Palladium"
    reference_color: str = "Neutral"
    # Exotic types with no sales are priced at this multiple of the standard median
    exotic_fallback_ratio: float = Field(default=2.5, gt=0)
    # Fixed dollar premium for empty exotic types; None derives it from the ratio
    exotic_fallback_premium: float | None = None
    rose_gold_fallback_premium: float = 1000.0
    default_model: str = "hybrid"


class ConfidenceSettings(BaseModel):
    """Sample-size tiers and the interval half-width used for each."""
    high_min_samples: int = Field(default=10, ge=1)
    medium_min_samples: int = Field(default=5, ge=1)
    high_interval: float = Field(default=0.15, gt=0, lt=1)
    medium_interval: float = Field(default=0.20, gt=0, lt=1)
    low_interval: float = Field(default=0.25, gt=0, lt=1)

    @model_validator(mode="after")
    def _check_monotonic(self) -> ConfidenceSettings:
        if self.high_min_samples <= self.medium_min_samples:
            raise ValueError("high_min_samples must exceed medium_min_samples")
        if not self.high_interval < self.medium_interval < self.low_interval:
            raise ValueError(
                "Interval widths must widen as confidence drops "
                "(high < medium < low)"
            )
        return self


class GuideSettings(BaseModel):
    """Minimum segment sizes for the market guide tables."""
    min_size_count: int = 1
    min_leather_count: int = 3
    min_exotic_count: int = 2
    min_hardware_count: int = 3
    min_color_count: int = 3
    top_colors: int = 12


class Settings(BaseModel):
    """Top-level application settings."""
    pricing: PricingSettings = Field(default_factory=PricingSettings)
    confidence: ConfidenceSettings = Field(default_factory=ConfidenceSettings)
    guide: GuideSettings = Field(default_factory=GuideSettings)

    @classmethod
    def load(cls, settings_path: Path | None = None) -> Settings:
        """Load settings from config/settings.yaml, falling back to defaults."""
        settings_path = settings_path or CONFIG_DIR / "settings.yaml"
        if settings_path.exists():
            with open(settings_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            return cls(**data)
        return cls()


def get_supabase_url() -> str:
    """Get the Supabase project URL from environment."""
    url = os.getenv("SUPABASE_URL", "") or os.getenv("NEXT_PUBLIC_SUPABASE_URL", "")
    if not url:
        raise ValueError("SUPABASE_URL not set in environment")
    return url


def get_supabase_key() -> str:
    """Get the Supabase anon key from environment."""
    key = os.getenv("SUPABASE_ANON_KEY", "") or os.getenv("NEXT_PUBLIC_SUPABASE_ANON_KEY", "")
    if not key:
        raise ValueError("SUPABASE_ANON_KEY not set in environment")
    return key


# Singleton settings instance
settings = Settings.load()
