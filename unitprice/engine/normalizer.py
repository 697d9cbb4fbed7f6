# unitprice/engine/normalizer.py

"""Tax and unit normalization of validated listings.

All arithmetic runs in the engine's own :class:`decimal.Context`, so
results do not depend on the caller's thread-local decimal context.
Rounding to cents is ROUND_HALF_EVEN unless a caller asks otherwise.
"""

from collections.abc import Sequence
from decimal import ROUND_HALF_EVEN, Decimal

from unitprice.config.settings import Settings
from unitprice.engine.unit_registry import DECIMAL_CONTEXT, convert_to_base
from unitprice.models.listing import NormalizedProduct, ProductListing

_CENTS = Decimal(1).scaleb(-Settings.DECIMAL_PLACES)
_ZERO = Decimal("0.00")


def round_money(value: Decimal, rounding: str = ROUND_HALF_EVEN) -> Decimal:
    """Round to cents, half-to-even by default."""
    return value.quantize(_CENTS, rounding=rounding, context=DECIMAL_CONTEXT)


def mean(values: Sequence[Decimal]) -> Decimal:
    """Unrounded arithmetic mean. Raises ``ValueError`` when empty."""
    if not values:
        msg = "mean() of an empty sequence"
        raise ValueError(msg)
    total = Decimal(0)
    for value in values:
        total = DECIMAL_CONTEXT.add(total, value)
    return DECIMAL_CONTEXT.divide(total, Decimal(len(values)))


def final_price(listing: ProductListing) -> Decimal:
    """Shelf price including tax.

    Tax-included prices pass through untouched; otherwise the rate is
    applied and the result rounded to cents.
    """
    if listing.tax_included:
        return listing.price
    multiplier = DECIMAL_CONTEXT.add(Decimal(1), listing.tax_rate)
    return round_money(
        DECIMAL_CONTEXT.multiply(listing.price, multiplier)
    )


def unit_price(price: Decimal, base_quantity: Decimal) -> Decimal:
    """Price per base unit, or zero when there is no quantity."""
    if base_quantity == 0:
        return _ZERO
    return round_money(DECIMAL_CONTEXT.divide(price, base_quantity))


def normalize(listing: ProductListing) -> NormalizedProduct:
    """Derive final price, base quantity and base unit price."""
    price = final_price(listing)
    base_quantity = convert_to_base(listing.unit, listing.quantity)
    return NormalizedProduct(
        listing=listing,
        final_price=price,
        base_quantity=base_quantity,
        unit_price=unit_price(price, base_quantity),
    )
