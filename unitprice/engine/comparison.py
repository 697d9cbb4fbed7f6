# unitprice/engine/comparison.py

"""Two-listing unit-price comparison engine.

The pipeline is linear: validate, check unit compatibility, normalize,
pick the winner, compute the percentage gap, then build the calculation
trace and the recommendations. The first two stages raise a
:class:`~unitprice.engine.errors.ComparisonError` and nothing else runs.

``compare`` is a pure function of its inputs: it reads only immutable
constants and allocates a fresh result, so it is safe to call from any
number of threads.
"""

import logging
from decimal import ROUND_DOWN, Decimal, InvalidOperation, Overflow

from unitprice.config.settings import Settings
from unitprice.engine.errors import (
    CalculationOverflowError,
    DivisionByZeroError,
    IncompatibleUnitsError,
)
from unitprice.engine.normalizer import normalize, round_money
from unitprice.engine.unit_registry import (
    DECIMAL_CONTEXT,
    are_compatible,
    base_label,
    display_unit,
)
from unitprice.engine.validator import ListingValidator
from unitprice.models.comparison_result import (
    ComparisonDetails,
    ComparisonResult,
    Winner,
)
from unitprice.models.listing import NormalizedProduct, ProductListing
from unitprice.models.unit import Unit

logger = logging.getLogger("unitprice.engine")

_ZERO = Decimal("0.00")
_HUNDRED = Decimal(100)


def validate(
    product_a: ProductListing, product_b: ProductListing,
) -> None:
    """Raise the first validation error for the pair, A before B."""
    ListingValidator.validate(product_a, product_b)


def compare(
    product_a: ProductListing, product_b: ProductListing,
) -> ComparisonResult:
    """Compare two listings and return the verdict.

    Raises:
        ValidationError: a listing failed an input check.
        IncompatibleUnitsError: the units belong to different categories.
        CalculationOverflowError, DivisionByZeroError: decimal arithmetic
            failed; unreachable for validated input.
    """
    validate(product_a, product_b)

    if not are_compatible(product_a.unit, product_b.unit):
        logger.debug(
            "Incompatible units: %s vs %s",
            product_a.unit.symbol,
            product_b.unit.symbol,
        )
        raise IncompatibleUnitsError(product_a.unit, product_b.unit)

    try:
        result = _build_result(product_a, product_b)
    except ZeroDivisionError as exc:
        raise DivisionByZeroError("unit price") from exc
    except (Overflow, InvalidOperation) as exc:
        raise CalculationOverflowError("unit price") from exc

    logger.debug(
        "Compared '%s' vs '%s': winner=%s (%s vs %s per %s, %s%%)",
        product_a.name,
        product_b.name,
        result.winner.value,
        result.details.unit_price_a,
        result.details.unit_price_b,
        result.details.common_unit_label,
        result.details.percentage_difference,
    )
    return result


# ── Arithmetic ───────────────────────────────────────────


def exact_price_per_unit(
    normalized: NormalizedProduct, unit: Unit,
) -> Decimal:
    """Final price per one *unit*, unrounded."""
    if normalized.base_quantity == 0:
        return _ZERO
    scaled = DECIMAL_CONTEXT.multiply(normalized.final_price, unit.factor)
    return DECIMAL_CONTEXT.divide(scaled, normalized.base_quantity)


def price_per_unit(normalized: NormalizedProduct, unit: Unit) -> Decimal:
    """Final price per one *unit*, rounded to cents."""
    return round_money(exact_price_per_unit(normalized, unit))


def determine_winner(unit_price_a: Decimal, unit_price_b: Decimal) -> Winner:
    """Cheaper unit price wins; gaps under the tie threshold tie."""
    gap = DECIMAL_CONTEXT.abs(
        DECIMAL_CONTEXT.subtract(unit_price_a, unit_price_b)
    )
    if gap < Settings.TIE_THRESHOLD:
        return Winner.TIE
    if unit_price_a < unit_price_b:
        return Winner.PRODUCT_A
    return Winner.PRODUCT_B


def percentage_difference(
    unit_price_a: Decimal, unit_price_b: Decimal,
) -> Decimal:
    """Gap between the two prices as a percentage of the larger one.

    Pass unrounded prices. The result is rounded half-even to cents,
    except that a positive *low* price never yields 100.00: a gap just
    under 100% is truncated to 99.99 instead.
    """
    high = max(unit_price_a, unit_price_b)
    low = min(unit_price_a, unit_price_b)
    if high == 0:
        return _ZERO
    ratio = DECIMAL_CONTEXT.divide(
        DECIMAL_CONTEXT.subtract(high, low), high,
    )
    percent = DECIMAL_CONTEXT.multiply(ratio, _HUNDRED)
    rounded = round_money(percent)
    if low > 0 and rounded >= _HUNDRED:
        return round_money(percent, rounding=ROUND_DOWN)
    return rounded


def _build_result(
    product_a: ProductListing, product_b: ProductListing,
) -> ComparisonResult:
    """Run the arithmetic stages on a validated, compatible pair."""
    norm_a = normalize(product_a)
    norm_b = normalize(product_b)
    unit = display_unit(product_a.unit, product_b.unit)

    exact_a = exact_price_per_unit(norm_a, unit)
    exact_b = exact_price_per_unit(norm_b, unit)
    unit_price_a = round_money(exact_a)
    unit_price_b = round_money(exact_b)
    winner = determine_winner(unit_price_a, unit_price_b)

    details = ComparisonDetails(
        unit_price_a=unit_price_a,
        unit_price_b=unit_price_b,
        absolute_difference=DECIMAL_CONTEXT.abs(
            DECIMAL_CONTEXT.subtract(unit_price_a, unit_price_b)
        ),
        percentage_difference=percentage_difference(exact_a, exact_b),
        common_unit_label=unit.symbol,
        calculation_trace=build_trace(norm_a, norm_b, unit),
    )
    return ComparisonResult(
        product_a=product_a,
        product_b=product_b,
        winner=winner,
        details=details,
        recommendations=build_recommendations(
            norm_a, norm_b, winner, details,
        ),
    )


# ── Trace & recommendations ──────────────────────────────


def _percent(rate: Decimal) -> str:
    """Render a 0-1 rate as a bare percentage, e.g. ``0.10`` → ``10``."""
    percent = DECIMAL_CONTEXT.multiply(rate, _HUNDRED)
    return f"{percent.normalize(DECIMAL_CONTEXT):f}"


def build_trace(
    norm_a: NormalizedProduct, norm_b: NormalizedProduct, unit: Unit,
) -> tuple[str, ...]:
    """Human-readable audit trail of how each unit price was derived."""
    lines: list[str] = []
    products = (("A", norm_a), ("B", norm_b))

    for which, norm in products:
        listing = norm.listing
        if not listing.tax_included:
            lines.append(
                f"Product {which}: {listing.price:f} excl. tax "
                f"+ {_percent(listing.tax_rate)}% tax "
                f"= {norm.final_price:f}"
            )

    base = base_label(unit.category)
    if norm_a.listing.unit is not norm_b.listing.unit:
        lines.append(
            f"Units differ ({norm_a.listing.unit.symbol} vs "
            f"{norm_b.listing.unit.symbol}): quantities converted "
            f"to base unit {base}"
        )

    for which, norm in products:
        line = (
            f"Product {which}: {norm.final_price:f} ÷ "
            f"{norm.base_quantity:f} {base} = "
            f"{norm.unit_price:f} per {base}"
        )
        if unit.factor != 1:
            line += f" ({price_per_unit(norm, unit):f} per {unit.symbol})"
        lines.append(line)

    return tuple(lines)


def _headline(
    winner: Winner,
    norm_a: NormalizedProduct,
    norm_b: NormalizedProduct,
    details: ComparisonDetails,
) -> str:
    """First recommendation line naming the better buy."""
    label = details.common_unit_label
    if winner is Winner.PRODUCT_A:
        return (
            f"Product A ({norm_a.listing.name.strip()}) is the better "
            f"value at {details.unit_price_a:f} per {label}."
        )
    if winner is Winner.PRODUCT_B:
        return (
            f"Product B ({norm_b.listing.name.strip()}) is the better "
            f"value at {details.unit_price_b:f} per {label}."
        )
    return (
        f"Both products cost the same per {label}; "
        "choose by quality or preference."
    )


def build_recommendations(
    norm_a: NormalizedProduct,
    norm_b: NormalizedProduct,
    winner: Winner,
    details: ComparisonDetails,
) -> tuple[str, ...]:
    """Advisory text: headline, savings tier, size gap, price tier."""
    recommendations = [_headline(winner, norm_a, norm_b, details)]

    pct = details.percentage_difference
    if pct > Settings.SAVINGS_TIER_HIGH:
        recommendations.append(
            f"Saves more than {Settings.SAVINGS_TIER_HIGH}% per unit: "
            "an excellent buy."
        )
    elif pct > Settings.SAVINGS_TIER_LOW:
        recommendations.append(
            f"Saves more than {Settings.SAVINGS_TIER_LOW}% per unit: "
            "a good buy."
        )

    larger = max(norm_a.base_quantity, norm_b.base_quantity)
    if larger > 0:
        spread = DECIMAL_CONTEXT.divide(
            DECIMAL_CONTEXT.abs(DECIMAL_CONTEXT.subtract(
                norm_a.base_quantity, norm_b.base_quantity,
            )),
            larger,
        )
        if spread > Settings.QUANTITY_DISPARITY_RATIO:
            recommendations.append(
                "Package sizes differ a lot; consider how much "
                "you will actually use."
            )

    average = DECIMAL_CONTEXT.divide(
        DECIMAL_CONTEXT.add(details.unit_price_a, details.unit_price_b),
        Decimal(2),
    )
    if average > Settings.HIGH_PRICE_TIER:
        recommendations.append(
            "High-priced item; weigh quality alongside unit price."
        )

    return tuple(recommendations)
