# unitprice/models/price_history.py

"""Recorded unit-price history for a product name."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class PriceEntry:
    """A single unit-price observation at a point in time."""

    unit_price: Decimal
    unit_label: str
    store_name: str
    recorded_at: datetime


@dataclass(frozen=True)
class PriceHistory:
    """All recorded observations for one product, oldest first."""

    product_name: str
    average_unit_price: Decimal
    lowest_unit_price: Decimal
    highest_unit_price: Decimal
    entries: tuple[PriceEntry, ...]

    @property
    def latest(self) -> PriceEntry | None:
        """Most recent observation, if any."""
        return self.entries[-1] if self.entries else None

    @property
    def is_current_price_competitive(self) -> bool:
        """True when the latest unit price is at or below the average."""
        latest = self.latest
        if latest is None:
            return False
        return latest.unit_price <= self.average_unit_price
