# unitprice/engine/unit_registry.py

"""Unit conversion and compatibility lookups over the static registry."""

from decimal import ROUND_HALF_EVEN, Context, Decimal

from unitprice.models.unit import Unit, UnitCategory

# Every engine calculation runs here, never in the caller's context
DECIMAL_CONTEXT = Context(prec=28, rounding=ROUND_HALF_EVEN)

_BASE_LABELS: dict[UnitCategory, str] = {
    UnitCategory.WEIGHT: "g",
    UnitCategory.VOLUME: "ml",
    UnitCategory.COUNT: "piece",
}


def convert_to_base(unit: Unit, quantity: Decimal) -> Decimal:
    """Express *quantity* of *unit* in the category base unit."""
    return DECIMAL_CONTEXT.multiply(quantity, unit.factor)


def are_compatible(unit_a: Unit, unit_b: Unit) -> bool:
    """Two units can be compared only within the same category."""
    return unit_a.category is unit_b.category


def base_label(category: UnitCategory) -> str:
    """Symbol of the base unit for *category*."""
    return _BASE_LABELS[category]


def display_unit(unit_a: Unit, unit_b: Unit) -> Unit:
    """Pick the unit that comparison prices are quoted in.

    The larger unit wins so prices read naturally ("per kg" rather
    than "per g" when either side is sold by the kilogram). Equal
    factors keep *unit_a*.
    """
    if unit_b.factor > unit_a.factor:
        return unit_b
    return unit_a


def parse_unit(text: str) -> Unit:
    """Resolve a unit from its symbol or name, case-insensitively.

    Raises ``ValueError`` for unknown units.
    """
    needle = text.strip().lower()
    for unit in Unit:
        if needle in (unit.symbol.lower(), unit.name.lower()):
            return unit
    valid = ", ".join(u.symbol for u in Unit)
    msg = f"Unknown unit '{text}' (expected one of: {valid})"
    raise ValueError(msg)
