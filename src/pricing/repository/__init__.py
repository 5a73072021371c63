"""Sales Repository Module - Supabase, SQLite and in-memory sales sources."""

from .base import RepositoryError, SalesRepository, filter_sales
from .factory import SOURCES, open_repository
from .memory import InMemorySalesRepository
from .sqlite_repository import SqliteSalesRepository
from .supabase_repository import SupabaseSalesRepository

__all__ = [
    "RepositoryError",
    "SalesRepository",
    "filter_sales",
    "SOURCES",
    "open_repository",
    "InMemorySalesRepository",
    "SqliteSalesRepository",
    "SupabaseSalesRepository",
]
