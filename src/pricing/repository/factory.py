"""Repository selection for CLI entry points."""

from __future__ import annotations

from pathlib import Path

from ..common.config import Config
from .base import SalesRepository
from .memory import InMemorySalesRepository
from .sqlite_repository import SqliteSalesRepository
from .supabase_repository import SupabaseSalesRepository

SOURCES = ("supabase", "sqlite", "json")


def open_repository(
    source: str = "supabase",
    config: Config | None = None,
    data_path: str | Path | None = None,
) -> SalesRepository:
    """Build the repository named by ``source``.

    Args:
        source: ``supabase``, ``sqlite`` or ``json``.
        config: Optional Config. Uses defaults if not provided.
        data_path: JSON file for ``json``, database file for ``sqlite``.
    """
    config = config or Config()
    if source == "supabase":
        return SupabaseSalesRepository(config=config)
    if source == "sqlite":
        if data_path:
            config.database_path = str(data_path)
        return SqliteSalesRepository(config)
    if source == "json":
        return InMemorySalesRepository.from_json(data_path or config.sales_fixture_abs_path)
    raise ValueError(f"Unknown sales source {source!r}; expected one of {SOURCES}")
