"""Configuration management for pricing modules."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
_PROJECT_ROOT = Path(__file__).resolve().parents[3]
load_dotenv(_PROJECT_ROOT / ".env")


@dataclass
class Config:
    """Central configuration loaded from environment variables."""

    # Database
    database_path: str = field(
        default_factory=lambda: os.getenv(
            "DATABASE_PATH", "data/birkin_index.db"
        )
    )

    # JSON fixture used by the in-memory repository
    sales_fixture_path: str = field(
        default_factory=lambda: os.getenv(
            "SALES_FIXTURE_PATH", "data/sales.json"
        )
    )

    # Supabase
    sales_table: str = "sales"
    sales_fetch_limit: int | None = None

    # Factor table cache
    factor_cache_ttl_seconds: float = 300.0

    def __post_init__(self) -> None:
        """Load overrides from environment."""
        if table := os.getenv("SUPABASE_SALES_TABLE"):
            self.sales_table = table
        if limit := os.getenv("SALES_FETCH_LIMIT"):
            self.sales_fetch_limit = int(limit)
        if ttl := os.getenv("FACTOR_CACHE_TTL_SECONDS"):
            self.factor_cache_ttl_seconds = float(ttl)

    @property
    def database_abs_path(self) -> Path:
        """Resolve database path relative to project root."""
        p = Path(self.database_path)
        if p.is_absolute():
            return p
        return _PROJECT_ROOT / p

    @property
    def sales_fixture_abs_path(self) -> Path:
        """Resolve fixture path relative to project root."""
        p = Path(self.sales_fixture_path)
        if p.is_absolute():
            return p
        return _PROJECT_ROOT / p
