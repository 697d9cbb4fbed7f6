# unitprice/models/unit.py

"""Measurement units and the categories they belong to."""

from decimal import Decimal
from enum import Enum


class UnitCategory(Enum):
    """A family of units that can be converted into one another."""

    WEIGHT = "weight"
    VOLUME = "volume"
    COUNT = "count"


class Unit(Enum):
    """A purchasable unit with its factor to the category base unit.

    Base units are gram (weight), milliliter (volume) and piece (count).
    Members are looked up by symbol, e.g. ``Unit("kg")``.
    """

    # Weight (gram base)
    GRAM = ("g", UnitCategory.WEIGHT, "1")
    KILOGRAM = ("kg", UnitCategory.WEIGHT, "1000")
    OUNCE = ("oz", UnitCategory.WEIGHT, "28.3495")
    POUND = ("lb", UnitCategory.WEIGHT, "453.592")

    # Volume (milliliter base)
    MILLILITER = ("ml", UnitCategory.VOLUME, "1")
    LITER = ("L", UnitCategory.VOLUME, "1000")
    CUP = ("cup", UnitCategory.VOLUME, "200")
    GOU = ("gou", UnitCategory.VOLUME, "180")

    # Count (piece base)
    PIECE = ("piece", UnitCategory.COUNT, "1")
    PACK = ("pack", UnitCategory.COUNT, "1")
    BOTTLE = ("bottle", UnitCategory.COUNT, "1")
    BAG = ("bag", UnitCategory.COUNT, "1")
    SHEET = ("sheet", UnitCategory.COUNT, "1")
    SLICE = ("slice", UnitCategory.COUNT, "1")

    def __init__(
        self, symbol: str, category: UnitCategory, factor: str,
    ) -> None:
        self.symbol = symbol
        self.category = category
        self.factor = Decimal(factor)

    @classmethod
    def _missing_(cls, value: object) -> "Unit | None":
        """Allow ``Unit("kg")`` lookups by symbol."""
        for member in cls:
            if member.symbol == value:
                return member
        return None
