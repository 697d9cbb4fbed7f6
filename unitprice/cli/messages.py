# unitprice/cli/messages.py

"""User-facing text for comparison errors."""

from collections.abc import Callable

from unitprice.config.settings import Settings
from unitprice.engine.errors import (
    CalculationOverflowError,
    ComparisonError,
    DivisionByZeroError,
    EmptyNameError,
    ErrorKind,
    IncompatibleUnitsError,
    InvalidPriceError,
    InvalidQuantityError,
    InvalidTaxRateError,
    NameTooLongError,
)


def _empty_name(err: EmptyNameError) -> tuple[str, str]:
    return (
        f"Product {err.which} has no name.",
        "Enter a product name.",
    )


def _name_too_long(err: NameTooLongError) -> tuple[str, str]:
    return (
        f"Product {err.which} name is too long "
        f"({err.length} characters, max {Settings.MAX_NAME_LENGTH}).",
        f"Shorten the name to {Settings.MAX_NAME_LENGTH} characters "
        "or fewer.",
    )


def _invalid_price(err: InvalidPriceError) -> tuple[str, str]:
    return (
        f"Product {err.which} price {err.value} is not valid.",
        f"Enter a price above 0 and at most {Settings.MAX_PRICE:,}.",
    )


def _invalid_quantity(err: InvalidQuantityError) -> tuple[str, str]:
    return (
        f"Product {err.which} quantity {err.value} is not valid.",
        f"Enter a quantity above 0 and at most {Settings.MAX_QUANTITY:,}.",
    )


def _invalid_tax_rate(err: InvalidTaxRateError) -> tuple[str, str]:
    return (
        f"Product {err.which} tax rate {err.value} is not valid.",
        "Enter a tax rate between 0 and 1 (e.g. 0.10 for 10%).",
    )


def _incompatible_units(err: IncompatibleUnitsError) -> tuple[str, str]:
    return (
        f"Cannot compare {err.unit_a.symbol} "
        f"({err.unit_a.category.value}) with {err.unit_b.symbol} "
        f"({err.unit_b.category.value}).",
        "Compare weight with weight, volume with volume, "
        "or counts with counts.",
    )


def _overflow(err: CalculationOverflowError) -> tuple[str, str]:
    return (
        f"The numbers are too large to calculate ({err.context}).",
        "Try again with smaller values.",
    )


def _division_by_zero(err: DivisionByZeroError) -> tuple[str, str]:
    return (
        f"Division by zero ({err.context}).",
        "Enter a quantity other than zero.",
    )


_DESCRIBERS: dict[ErrorKind, Callable[..., tuple[str, str]]] = {
    ErrorKind.EMPTY_NAME: _empty_name,
    ErrorKind.NAME_TOO_LONG: _name_too_long,
    ErrorKind.INVALID_PRICE: _invalid_price,
    ErrorKind.INVALID_QUANTITY: _invalid_quantity,
    ErrorKind.INVALID_TAX_RATE: _invalid_tax_rate,
    ErrorKind.INCOMPATIBLE_UNITS: _incompatible_units,
    ErrorKind.CALCULATION_OVERFLOW: _overflow,
    ErrorKind.DIVISION_BY_ZERO: _division_by_zero,
}


def describe_error(error: ComparisonError) -> tuple[str, str]:
    """Return ``(message, suggestion)`` for a comparison error."""
    return _DESCRIBERS[error.kind](error)
