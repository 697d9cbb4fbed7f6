# unitprice/storage/price_history_db.py

"""SQLite-backed unit-price history keyed by product name."""

import logging
import sqlite3
import threading
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from unitprice.config.settings import Settings
from unitprice.engine.normalizer import mean, round_money
from unitprice.models.comparison_result import ComparisonResult
from unitprice.models.price_history import PriceEntry, PriceHistory

logger = logging.getLogger("unitprice.price_history")

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS products (
    id         INTEGER PRIMARY KEY AUTOINCREMENT,
    name_key   TEXT    NOT NULL UNIQUE,
    name       TEXT    NOT NULL,
    first_seen TEXT    NOT NULL
);

CREATE TABLE IF NOT EXISTS price_entries (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    product_id  INTEGER NOT NULL
                REFERENCES products(id) ON DELETE CASCADE,
    unit_price  TEXT    NOT NULL,
    unit_label  TEXT    NOT NULL,
    store_name  TEXT    NOT NULL DEFAULT '',
    recorded_at TEXT    NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_entries_product_date
    ON price_entries(product_id, recorded_at);
"""


def _check_name(product_name: str) -> None:
    if not product_name.strip():
        msg = "Product name must not be empty"
        raise ValueError(msg)


def normalize_name(raw_name: str) -> str:
    """Case- and whitespace-insensitive key for a product name."""
    return " ".join(raw_name.split()).casefold()


class PriceHistoryDB:
    """SQLite store for recorded unit prices.

    Unit prices are stored as decimal strings so they come back
    exactly as recorded. A lock serialises access so lookups can run
    from worker threads.
    """

    def __init__(
        self, db_path: Path | None = None,
    ) -> None:
        path = db_path or Settings.PRICE_DB_PATH
        path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(
            str(path), check_same_thread=False,
        )
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute("PRAGMA foreign_keys=ON")
        self._conn.executescript(_SCHEMA)
        self._lock = threading.Lock()
        logger.debug(
            "PriceHistoryDB opened at %s", path,
        )

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    # ── Recording ────────────────────────────────────────

    def _product_id(self, product_name: str, ts: str) -> int:
        """Upsert a product row and return its id."""
        key = normalize_name(product_name)
        self._conn.execute(
            "INSERT INTO products (name_key, name, first_seen) "
            "VALUES (?, ?, ?) "
            "ON CONFLICT(name_key) DO UPDATE SET name=excluded.name",
            (key, product_name.strip(), ts),
        )
        row = self._conn.execute(
            "SELECT id FROM products WHERE name_key = ?",
            (key,),
        ).fetchone()
        product_id: int = row[0]
        return product_id

    def _insert_entry(
        self,
        product_name: str,
        unit_price: Decimal,
        unit_label: str,
        store_name: str,
        ts: str,
    ) -> None:
        """Insert one entry; the caller holds the lock and commits."""
        product_id = self._product_id(product_name, ts)
        self._conn.execute(
            "INSERT INTO price_entries "
            "(product_id, unit_price, unit_label, store_name, "
            " recorded_at) "
            "VALUES (?, ?, ?, ?, ?)",
            (product_id, f"{unit_price:f}", unit_label, store_name, ts),
        )

    def record_entry(
        self,
        product_name: str,
        unit_price: Decimal,
        unit_label: str,
        store_name: str = "",
        recorded_at: datetime | None = None,
    ) -> None:
        """Insert one unit-price observation for a product."""
        _check_name(product_name)
        ts = (recorded_at or datetime.now()).isoformat()
        with self._lock, self._conn:
            self._insert_entry(
                product_name, unit_price, unit_label, store_name, ts,
            )

    def record_comparison(
        self,
        result: ComparisonResult,
        store_name: str = "",
        recorded_at: datetime | None = None,
    ) -> int:
        """Record the unit price of both listings in one transaction.

        Either both entries are written or neither is. Returns the
        number of entries written.
        """
        now = recorded_at or datetime.now()
        ts = now.isoformat()
        label = result.details.common_unit_label
        pairs = (
            (result.product_a.name, result.details.unit_price_a),
            (result.product_b.name, result.details.unit_price_b),
        )
        for name, _ in pairs:
            _check_name(name)
        with self._lock, self._conn:
            for name, price in pairs:
                self._insert_entry(name, price, label, store_name, ts)
        logger.info("Recorded %d unit prices at %s", len(pairs), ts)
        return len(pairs)

    # ── Querying ─────────────────────────────────────────

    def get_price_history(
        self, product_name: str,
    ) -> PriceHistory | None:
        """Return every entry for a product, oldest first.

        Returns ``None`` when the product has never been recorded.
        """
        key = normalize_name(product_name)
        with self._lock:
            rows = self._conn.execute(
                "SELECT p.name, e.unit_price, e.unit_label, "
                "       e.store_name, e.recorded_at "
                "FROM price_entries e "
                "JOIN products p ON p.id = e.product_id "
                "WHERE p.name_key = ? "
                "ORDER BY e.recorded_at ASC, e.id ASC",
                (key,),
            ).fetchall()
        if not rows:
            return None

        entries = tuple(
            PriceEntry(
                unit_price=Decimal(r[1]),
                unit_label=r[2],
                store_name=r[3],
                recorded_at=datetime.fromisoformat(r[4]),
            )
            for r in rows
        )
        prices = [e.unit_price for e in entries]
        average = round_money(mean(prices))
        return PriceHistory(
            product_name=rows[0][0],
            average_unit_price=average,
            lowest_unit_price=min(prices),
            highest_unit_price=max(prices),
            entries=entries,
        )

    def forget(self, product_name: str) -> bool:
        """Delete a product and its entries. Returns True if it existed."""
        with self._lock:
            cur = self._conn.execute(
                "DELETE FROM products WHERE name_key = ?",
                (normalize_name(product_name),),
            )
            self._conn.commit()
        return cur.rowcount > 0
