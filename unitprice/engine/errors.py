# unitprice/engine/errors.py

"""Closed family of errors raised by the comparison engine.

Every concrete error carries a :class:`ErrorKind` tag so callers can
dispatch on ``error.kind`` instead of inspecting exception classes.
The set of kinds is fixed; caller layers are expected to handle each
one (see :func:`unitprice.cli.messages.describe_error`).
"""

from decimal import Decimal
from enum import Enum
from typing import ClassVar

from unitprice.models.unit import Unit


class ErrorKind(Enum):
    """Tag identifying each comparison failure."""

    EMPTY_NAME = "empty_name"
    NAME_TOO_LONG = "name_too_long"
    INVALID_PRICE = "invalid_price"
    INVALID_QUANTITY = "invalid_quantity"
    INVALID_TAX_RATE = "invalid_tax_rate"
    INCOMPATIBLE_UNITS = "incompatible_units"
    CALCULATION_OVERFLOW = "calculation_overflow"
    DIVISION_BY_ZERO = "division_by_zero"


class ComparisonError(Exception):
    """Base class for every failure ``compare`` can raise."""

    kind: ClassVar[ErrorKind]


class ValidationError(ComparisonError):
    """A listing failed one of the input checks.

    ``which`` is ``"A"`` or ``"B"``.
    """

    def __init__(self, which: str, msg: str) -> None:
        super().__init__(msg)
        self.which = which


class EmptyNameError(ValidationError):
    """Listing name is empty or whitespace only."""

    kind = ErrorKind.EMPTY_NAME

    def __init__(self, which: str) -> None:
        super().__init__(which, f"Product {which}: name is empty")


class NameTooLongError(ValidationError):
    """Listing name exceeds the maximum length."""

    kind = ErrorKind.NAME_TOO_LONG

    def __init__(self, which: str, length: int) -> None:
        super().__init__(
            which, f"Product {which}: name is {length} characters long",
        )
        self.length = length


class InvalidPriceError(ValidationError):
    """Price is not positive or above the allowed maximum."""

    kind = ErrorKind.INVALID_PRICE

    def __init__(self, which: str, value: Decimal) -> None:
        super().__init__(which, f"Product {which}: invalid price {value}")
        self.value = value


class InvalidQuantityError(ValidationError):
    """Quantity is not positive or above the allowed maximum."""

    kind = ErrorKind.INVALID_QUANTITY

    def __init__(self, which: str, value: Decimal) -> None:
        super().__init__(
            which, f"Product {which}: invalid quantity {value}",
        )
        self.value = value


class InvalidTaxRateError(ValidationError):
    """Tax rate lies outside [0, 1]."""

    kind = ErrorKind.INVALID_TAX_RATE

    def __init__(self, which: str, value: Decimal) -> None:
        super().__init__(
            which, f"Product {which}: invalid tax rate {value}",
        )
        self.value = value


class IncompatibleUnitsError(ComparisonError):
    """The two listings use units from different categories."""

    kind = ErrorKind.INCOMPATIBLE_UNITS

    def __init__(self, unit_a: Unit, unit_b: Unit) -> None:
        super().__init__(
            f"Cannot compare {unit_a.category.value} ({unit_a.symbol}) "
            f"with {unit_b.category.value} ({unit_b.symbol})"
        )
        self.unit_a = unit_a
        self.unit_b = unit_b


class CalculationOverflowError(ComparisonError):
    """Decimal arithmetic overflowed."""

    kind = ErrorKind.CALCULATION_OVERFLOW

    def __init__(self, context: str) -> None:
        super().__init__(f"Calculation overflow ({context})")
        self.context = context


class DivisionByZeroError(ComparisonError):
    """Decimal arithmetic divided by zero."""

    kind = ErrorKind.DIVISION_BY_ZERO

    def __init__(self, context: str) -> None:
        super().__init__(f"Division by zero ({context})")
        self.context = context
