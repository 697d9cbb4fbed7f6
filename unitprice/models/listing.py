# unitprice/models/listing.py

"""Product listing data models for the comparison engine."""

from dataclasses import dataclass, field
from decimal import Decimal

from unitprice.config.settings import Settings
from unitprice.models.unit import Unit


@dataclass(frozen=True)
class ProductListing:
    """A single shelf listing entered by the shopper.

    Validation is external: a listing may hold out-of-range values
    until it goes through :mod:`unitprice.engine.validator`.
    """

    name: str
    price: Decimal
    quantity: Decimal
    unit: Unit
    tax_included: bool = True
    tax_rate: Decimal = field(
        default_factory=lambda: Settings.DEFAULT_TAX_RATE
    )

    def __post_init__(self) -> None:
        # Whole numbers are exact; floats are left alone and fail validation
        for name in ("price", "quantity", "tax_rate"):
            value = getattr(self, name)
            if isinstance(value, int) and not isinstance(value, bool):
                object.__setattr__(self, name, Decimal(value))


@dataclass(frozen=True)
class NormalizedProduct:
    """Tax-final price and base-unit quantity derived from a listing."""

    listing: ProductListing
    final_price: Decimal
    base_quantity: Decimal
    unit_price: Decimal

    @property
    def tax_adjustment(self) -> Decimal:
        """Amount added to the shelf price by tax normalization."""
        return self.final_price - self.listing.price
