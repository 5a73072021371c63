"""Shared test fixtures for the Birkin price index."""

import json
import sys
from datetime import date
from pathlib import Path

import pytest

# Ensure src is importable
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.common.models import BagAttributes, SaleRecord
from src.pricing.common.config import Config
from src.pricing.database.connection import get_connection, init_db


def _make_sale(
    price: float,
    size: int = 30,
    is_exotic: bool = False,
    exotic_type: str | None = None,
    leather_type: str | None = "Togo",
    year: int | None = 2017,
    hardware: str | None = "Palladium",
    color: str | None = "Black",
    sale_date: date | None = None,
    model_name: str | None = "Birkin",
    sale_id: str | None = None,
) -> SaleRecord:
    return SaleRecord(
        price=price,
        bag=BagAttributes(
            size=size,
            is_exotic=is_exotic,
            exotic_type=exotic_type,
            leather_type=leather_type,
            year=year,
            hardware=hardware,
            color=color,
            model_name=model_name,
        ),
        sale_date=sale_date,
        sale_id=sale_id,
    )


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the shared fixtures directory."""
    return PROJECT_ROOT / "fixtures"


@pytest.fixture
def temp_db(tmp_path):
    """Provide a Config pointing to a temporary SQLite database."""
    db_file = tmp_path / "test_birkin.db"
    config = Config(database_path=str(db_file))
    init_db(config)
    return config


@pytest.fixture
def db_conn(temp_db):
    """Provide an initialized SQLite connection from temp_db."""
    conn = get_connection(temp_db)
    yield conn
    conn.close()


@pytest.fixture
def make_sale():
    """Factory for SaleRecords; defaults describe the baseline configuration
    (standard Togo size 30, 2015-2019, Palladium, neutral color)."""
    return _make_sale


@pytest.fixture
def sample_rows(fixtures_dir) -> list[dict]:
    """Supabase-shaped sale rows from fixtures/sample_sales.json."""
    with open(fixtures_dir / "sample_sales.json", encoding="utf-8") as f:
        return json.load(f)["sales"]


@pytest.fixture
def sample_sales(sample_rows) -> list[SaleRecord]:
    """The sample dataset: 14 standard and 5 exotic Birkin sales."""
    return [SaleRecord.from_row(row) for row in sample_rows]


@pytest.fixture
def size_scenario(make_sale) -> list[SaleRecord]:
    """20 size-30 sales with median $10,000 and 5 size-25 sales with median $13,000."""
    records = [make_sale(p) for p in [9_000] * 5 + [10_000] * 10 + [11_000] * 5]
    records += [make_sale(p, size=25) for p in (12_000, 12_500, 13_000, 13_500, 14_000)]
    return records
