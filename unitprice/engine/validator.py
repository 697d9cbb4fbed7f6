# unitprice/engine/validator.py

"""Listing validation: reject malformed input before any arithmetic."""

import logging
from decimal import Decimal

from unitprice.config.settings import Settings
from unitprice.engine.errors import (
    EmptyNameError,
    InvalidPriceError,
    InvalidQuantityError,
    InvalidTaxRateError,
    NameTooLongError,
)
from unitprice.models.listing import ProductListing

logger = logging.getLogger("unitprice.validator")


def _in_range(
    value: Decimal, *, low: Decimal, high: Decimal, low_inclusive: bool,
) -> bool:
    """Range check that treats NaN and infinities as out of range."""
    if not isinstance(value, Decimal) or not value.is_finite():
        return False
    if low_inclusive:
        return low <= value <= high
    return low < value <= high


class ListingValidator:
    """Fail-fast validation of product listings."""

    @staticmethod
    def validate_listing(listing: ProductListing, which: str) -> None:
        """Raise the first violated check for a single listing.

        Checks run in a fixed order: name, price, quantity, tax rate.
        """
        name = listing.name.strip()
        if not name:
            logger.debug("Product %s rejected: empty name", which)
            raise EmptyNameError(which)
        if len(name) > Settings.MAX_NAME_LENGTH:
            logger.debug(
                "Product %s rejected: name length %d", which, len(name),
            )
            raise NameTooLongError(which, len(name))

        if not _in_range(
            listing.price,
            low=Decimal(0),
            high=Settings.MAX_PRICE,
            low_inclusive=False,
        ):
            logger.debug(
                "Product %s rejected: price %s", which, listing.price,
            )
            raise InvalidPriceError(which, listing.price)

        if not _in_range(
            listing.quantity,
            low=Decimal(0),
            high=Settings.MAX_QUANTITY,
            low_inclusive=False,
        ):
            logger.debug(
                "Product %s rejected: quantity %s",
                which,
                listing.quantity,
            )
            raise InvalidQuantityError(which, listing.quantity)

        if not _in_range(
            listing.tax_rate,
            low=Decimal(0),
            high=Decimal(1),
            low_inclusive=True,
        ):
            logger.debug(
                "Product %s rejected: tax rate %s",
                which,
                listing.tax_rate,
            )
            raise InvalidTaxRateError(which, listing.tax_rate)

    @staticmethod
    def validate(
        product_a: ProductListing, product_b: ProductListing,
    ) -> None:
        """Validate product A, then product B; the first error wins."""
        ListingValidator.validate_listing(product_a, "A")
        ListingValidator.validate_listing(product_b, "B")
