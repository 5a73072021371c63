"""SQLite-backed sales repository."""

from __future__ import annotations

import logging
import sqlite3

from pydantic import ValidationError

from src.common.models import SaleRecord

from ..common.config import Config
from ..database.connection import get_connection, init_db
from .base import RepositoryError, SalesRepository

logger = logging.getLogger(__name__)

_SELECT_SALES = """
    SELECT s.id AS sale_id, s.sale_price, s.currency, s.sale_date, s.source_name,
           b.model_name, b.size, b.color, b.color_secondary, b.leather_type,
           b.hardware, b.year, b.is_exotic, b.exotic_type,
           b.is_limited_edition, b.condition
    FROM sales s
    JOIN bags b ON b.id = s.bag_id
"""


class SqliteSalesRepository(SalesRepository):
    """Reads sales from the local ``bags`` / ``sales`` tables.

    Usage:
        repo = SqliteSalesRepository()
        repo.add_sales(records)
        standard_30 = repo.fetch_sales(size=30, is_exotic=False)
    """

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or Config()
        self._version = 0
        init_db(self.config)

    @property
    def data_version(self) -> int:
        """Writes made through this instance; other writers go unseen."""
        return self._version

    def fetch_sales(
        self,
        size: int | None = None,
        is_exotic: bool | None = None,
    ) -> list[SaleRecord]:
        clauses: list[str] = []
        params: list = []
        if size is not None:
            clauses.append("b.size = ?")
            params.append(size)
        if is_exotic is not None:
            clauses.append("b.is_exotic = ?")
            params.append(int(is_exotic))

        sql = _SELECT_SALES
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        sql += " ORDER BY s.sale_date DESC"

        try:
            conn = get_connection(self.config)
            try:
                rows = conn.execute(sql, params).fetchall()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise RepositoryError(f"SQLite query failed: {e}") from e

        records: list[SaleRecord] = []
        for row in rows:
            try:
                records.append(SaleRecord.from_row(dict(row)))
            except (ValidationError, ValueError) as e:
                logger.warning("Skipping sale %s: %s", row["sale_id"], e)
        return records

    def add_sale(self, record: SaleRecord) -> int:
        """Insert one sale (and its bag snapshot). Returns the sale ID."""
        return self.add_sales([record])[0]

    def add_sales(self, records: list[SaleRecord]) -> list[int]:
        """Insert sales in one transaction. Returns the new sale IDs."""
        conn = get_connection(self.config)
        try:
            sale_ids: list[int] = []
            for record in records:
                bag = record.bag
                cursor = conn.execute(
                    """INSERT INTO bags
                       (model_name, size, color, color_secondary, leather_type, hardware,
                        year, is_exotic, exotic_type, is_limited_edition, condition)
                       VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                    (
                        bag.model_name, bag.size, bag.color, bag.color_secondary,
                        bag.leather_type, bag.hardware, bag.year, int(bag.is_exotic),
                        bag.exotic_type, int(bag.is_limited_edition), bag.condition,
                    ),
                )
                cursor = conn.execute(
                    """INSERT INTO sales (bag_id, source_name, sale_price, currency, sale_date)
                       VALUES (?, ?, ?, ?, ?)""",
                    (
                        cursor.lastrowid,
                        record.source_name,
                        record.price,
                        record.currency,
                        record.sale_date.isoformat() if record.sale_date else None,
                    ),
                )
                sale_ids.append(cursor.lastrowid)
            conn.commit()
            self._version += 1
            logger.info("Inserted %d sales into %s", len(sale_ids), self.config.database_abs_path)
            return sale_ids
        finally:
            conn.close()
