# tests/test_comparison.py

"""Tests for the comparison engine."""

import dataclasses
import unittest
from decimal import Decimal, DivisionByZero, Overflow, localcontext
from unittest.mock import patch

from unitprice.engine.comparison import (
    compare,
    determine_winner,
    percentage_difference,
    validate,
)
from unitprice.engine.errors import (
    CalculationOverflowError,
    ComparisonError,
    DivisionByZeroError,
    ErrorKind,
    IncompatibleUnitsError,
    InvalidPriceError,
)
from unitprice.models.comparison_result import Winner
from unitprice.models.listing import ProductListing
from unitprice.models.unit import Unit


def _p(
    name: str,
    price: str,
    quantity: str = "1",
    unit: Unit = Unit.PIECE,
    tax_included: bool = True,
    tax_rate: str = "0.10",
) -> ProductListing:
    """Create a listing from string-typed numbers."""
    return ProductListing(
        name=name,
        price=Decimal(price),
        quantity=Decimal(quantity),
        unit=unit,
        tax_included=tax_included,
        tax_rate=Decimal(tax_rate),
    )


RICE_5KG = _p("Rice 5kg", "1400", "5", Unit.KILOGRAM)
RICE_2KG = _p("Rice 2kg", "650", "2", Unit.KILOGRAM)


class TestScenarios(unittest.TestCase):
    """End-to-end behaviour on the reference scenarios."""

    def test_rice_bulk_bag_wins(self) -> None:
        """5 kg at 1400 beats 2 kg at 650 by 13.85%."""
        result = compare(RICE_5KG, RICE_2KG)
        self.assertIs(result.winner, Winner.PRODUCT_A)
        self.assertEqual(result.details.unit_price_a, Decimal("280.00"))
        self.assertEqual(result.details.unit_price_b, Decimal("325.00"))
        self.assertEqual(result.details.common_unit_label, "kg")
        self.assertEqual(
            result.details.absolute_difference, Decimal("45.00"),
        )
        self.assertEqual(
            result.details.percentage_difference, Decimal("13.85"),
        )
        self.assertIs(result.winner_product, RICE_5KG)
        self.assertIs(result.loser_product, RICE_2KG)

    def test_identical_listings_tie(self) -> None:
        """Same price and size is a tie with no percentage gap."""
        result = compare(
            _p("X", "100", "1", Unit.GRAM), _p("Y", "100", "1", Unit.GRAM),
        )
        self.assertIs(result.winner, Winner.TIE)
        self.assertEqual(result.details.percentage_difference, 0)
        self.assertIsNone(result.winner_product)
        self.assertIsNone(result.loser_product)

    def test_zero_price_rejected(self) -> None:
        """validate() reports product A's zero price."""
        with self.assertRaises(InvalidPriceError) as ctx:
            validate(_p("Z", "0", "1", Unit.GRAM), RICE_2KG)
        self.assertEqual(ctx.exception.which, "A")
        self.assertEqual(ctx.exception.value, 0)

    def test_weight_vs_volume_rejected(self) -> None:
        """Grams and milliliters cannot be compared."""
        with self.assertRaises(IncompatibleUnitsError) as ctx:
            compare(
                _p("Flour", "100", "500", Unit.GRAM),
                _p("Milk", "100", "500", Unit.MILLILITER),
            )
        self.assertIs(ctx.exception.unit_a, Unit.GRAM)
        self.assertIs(ctx.exception.unit_b, Unit.MILLILITER)
        self.assertIs(ctx.exception.kind, ErrorKind.INCOMPATIBLE_UNITS)

    def test_tax_excluded_price_normalized(self) -> None:
        """1000 excl. 10% tax ties with 1100 incl. tax."""
        result = compare(
            _p("W", "1000", tax_included=False),
            _p("V", "1100"),
        )
        self.assertIs(result.winner, Winner.TIE)
        self.assertEqual(result.details.unit_price_a, Decimal("1100.00"))
        self.assertEqual(
            result.details.calculation_trace[0],
            "Product A: 1000 excl. tax + 10% tax = 1100.00",
        )


class TestWinnerRule(unittest.TestCase):
    """Tie threshold and argmin."""

    def test_gap_below_threshold_ties(self) -> None:
        """Half a cent apart is a tie."""
        self.assertIs(
            determine_winner(Decimal("1.005"), Decimal("1.000")), Winner.TIE,
        )

    def test_gap_at_threshold_decides(self) -> None:
        """Exactly one cent apart is not a tie."""
        result = compare(_p("A", "100.00"), _p("B", "100.01"))
        self.assertIs(result.winner, Winner.PRODUCT_A)
        result = compare(_p("A", "100.01"), _p("B", "100.00"))
        self.assertIs(result.winner, Winner.PRODUCT_B)

    def test_symmetry(self) -> None:
        """Swapping the listings mirrors the winner."""
        pairs = [
            (RICE_5KG, RICE_2KG),
            (_p("A", "5"), _p("B", "5")),
            (_p("A", "300", "500", Unit.GRAM), _p("B", "500", "1", Unit.KILOGRAM)),
            (_p("A", "3", "1", Unit.LITER), _p("B", "1", "1", Unit.CUP)),
        ]
        for a, b in pairs:
            with self.subTest(a=a.name, b=b.name):
                forward = compare(a, b)
                backward = compare(b, a)
                self.assertIs(backward.winner, forward.winner.mirrored())
                self.assertEqual(
                    backward.details.percentage_difference,
                    forward.details.percentage_difference,
                )

    def test_threshold_law(self) -> None:
        """TIE iff the gap is under a cent, otherwise the cheaper wins."""
        prices = ["1.00", "1.01", "2.50", "2.50", "10"]
        for pa in prices:
            for pb in prices:
                with self.subTest(a=pa, b=pb):
                    result = compare(_p("A", pa), _p("B", pb))
                    a = result.details.unit_price_a
                    b = result.details.unit_price_b
                    if abs(a - b) < Decimal("0.01"):
                        self.assertIs(result.winner, Winner.TIE)
                    elif a < b:
                        self.assertIs(result.winner, Winner.PRODUCT_A)
                    else:
                        self.assertIs(result.winner, Winner.PRODUCT_B)


class TestPercentage(unittest.TestCase):
    """percentage_difference."""

    def test_relative_to_larger_price(self) -> None:
        """(200 - 150) / 200 = 25%."""
        self.assertEqual(
            percentage_difference(Decimal("150"), Decimal("200")),
            Decimal("25.00"),
        )

    def test_zero_max_guarded(self) -> None:
        """Both zero gives 0, not a division error."""
        self.assertEqual(
            percentage_difference(Decimal("0"), Decimal("0")), 0,
        )

    def test_within_range(self) -> None:
        """Percentages stay in [0, 100) for positive prices."""
        pct = percentage_difference(Decimal("0.01"), Decimal("999999.99"))
        self.assertGreaterEqual(pct, 0)
        self.assertLess(pct, 100)

    def test_near_total_gap_truncated(self) -> None:
        """A gap that would round up to 100% is truncated to 99.99."""
        self.assertEqual(
            percentage_difference(Decimal("0.01"), Decimal("999999.99")),
            Decimal("99.99"),
        )
        self.assertEqual(
            percentage_difference(Decimal("0.0001"), Decimal("2")),
            Decimal("99.99"),
        )

    def test_ordinary_gap_rounds_half_even(self) -> None:
        """Below the cap the usual half-even rounding applies."""
        self.assertEqual(
            percentage_difference(Decimal("1"), Decimal("8")),
            Decimal("87.50"),
        )

    def test_sub_cent_unit_price_stays_below_100(self) -> None:
        """A unit price that rounds to 0.00 still gives a gap under 100%."""
        result = compare(_p("Bulk", "1", "1000"), _p("Single", "5", "1"))
        self.assertEqual(result.details.unit_price_a, Decimal("0.00"))
        self.assertEqual(result.details.unit_price_b, Decimal("5.00"))
        self.assertIs(result.winner, Winner.PRODUCT_A)
        # (5 - 0.001) / 5
        self.assertEqual(
            result.details.percentage_difference, Decimal("99.98"),
        )

    def test_sub_cent_unit_prices_tie(self) -> None:
        """Unit prices that both round to 0.00 tie."""
        result = compare(_p("A", "1", "1000"), _p("B", "4", "1000"))
        self.assertIs(result.winner, Winner.TIE)
        self.assertEqual(result.details.unit_price_a, Decimal("0.00"))
        self.assertEqual(result.details.unit_price_b, Decimal("0.00"))


class TestMixedUnits(unittest.TestCase):
    """Comparisons across units of one category."""

    def test_grams_vs_kilograms(self) -> None:
        """Prices are quoted per the larger unit."""
        result = compare(
            _p("Small", "300", "500", Unit.GRAM),
            _p("Large", "500", "1", Unit.KILOGRAM),
        )
        self.assertEqual(result.details.common_unit_label, "kg")
        self.assertEqual(result.details.unit_price_a, Decimal("600.00"))
        self.assertEqual(result.details.unit_price_b, Decimal("500.00"))
        self.assertIs(result.winner, Winner.PRODUCT_B)
        self.assertEqual(
            result.details.percentage_difference, Decimal("16.67"),
        )

    def test_trace_notes_unit_conversion(self) -> None:
        """A unit line appears only when the units differ."""
        result = compare(
            _p("Small", "300", "500", Unit.GRAM),
            _p("Large", "500", "1", Unit.KILOGRAM),
        )
        self.assertEqual(
            result.details.calculation_trace,
            (
                "Units differ (g vs kg): quantities converted to base unit g",
                "Product A: 300 ÷ 500 g = 0.60 per g (600.00 per kg)",
                "Product B: 500 ÷ 1000 g = 0.50 per g (500.00 per kg)",
            ),
        )

    def test_volume_units(self) -> None:
        """Liters against cups resolve through milliliters."""
        result = compare(
            _p("Bottle", "300", "1", Unit.LITER),
            _p("Cup", "50", "1", Unit.CUP),
        )
        # 300 per L vs 50 * 1000 / 200 = 250 per L
        self.assertEqual(result.details.common_unit_label, "L")
        self.assertEqual(result.details.unit_price_b, Decimal("250.00"))
        self.assertIs(result.winner, Winner.PRODUCT_B)


class TestTrace(unittest.TestCase):
    """calculation_trace content and order."""

    def test_same_unit_trace(self) -> None:
        """Two lines, one per product, when nothing else happened."""
        result = compare(RICE_5KG, RICE_2KG)
        self.assertEqual(
            result.details.calculation_trace,
            (
                "Product A: 1400 ÷ 5000 g = 0.28 per g (280.00 per kg)",
                "Product B: 650 ÷ 2000 g = 0.32 per g (325.00 per kg)",
            ),
        )

    def test_base_unit_has_no_suffix(self) -> None:
        """Listings already in a base unit need no per-unit suffix."""
        result = compare(
            _p("X", "100", "1", Unit.GRAM), _p("Y", "100", "1", Unit.GRAM),
        )
        self.assertEqual(
            result.details.calculation_trace[0],
            "Product A: 100 ÷ 1 g = 100.00 per g",
        )

    def test_tax_lines_come_first(self) -> None:
        """Tax lines for A then B precede the unit price lines."""
        result = compare(
            _p("A", "100", tax_included=False, tax_rate="0.08"),
            _p("B", "100", tax_included=False),
        )
        trace = result.details.calculation_trace
        self.assertEqual(len(trace), 4)
        self.assertEqual(trace[0], "Product A: 100 excl. tax + 8% tax = 108.00")
        self.assertEqual(trace[1], "Product B: 100 excl. tax + 10% tax = 110.00")
        self.assertTrue(trace[2].startswith("Product A: 108.00 ÷ 1 piece"))


class TestRecommendations(unittest.TestCase):
    """Ordered advisory text."""

    def test_rice_recommendations(self) -> None:
        """Headline, >10% tier and size disparity."""
        recs = compare(RICE_5KG, RICE_2KG).recommendations
        self.assertEqual(len(recs), 3)
        self.assertEqual(
            recs[0],
            "Product A (Rice 5kg) is the better value at 280.00 per kg.",
        )
        self.assertIn("more than 10%", recs[1])
        self.assertIn("Package sizes differ", recs[2])

    def test_high_tier_excludes_low_tier(self) -> None:
        """Only the >20% note appears at 50% savings."""
        recs = compare(_p("A", "100"), _p("B", "200")).recommendations
        self.assertEqual(len(recs), 2)
        self.assertIn("more than 20%", recs[1])
        self.assertFalse(any("more than 10%" in r for r in recs))

    def test_tie_headline_only(self) -> None:
        """A tie with similar sizes gives just the headline."""
        recs = compare(_p("A", "5"), _p("B", "5")).recommendations
        self.assertEqual(len(recs), 1)
        self.assertIn("same per piece", recs[0])

    def test_product_b_headline(self) -> None:
        """Product B is named when it wins."""
        recs = compare(_p("A", "10"), _p("Cheap", "9.5")).recommendations
        self.assertEqual(
            recs[0], "Product B (Cheap) is the better value at 9.50 per piece.",
        )

    def test_quantity_disparity_boundary(self) -> None:
        """A spread of exactly one half adds no size note."""
        recs = compare(
            _p("A", "300", "500", Unit.GRAM),
            _p("B", "500", "1", Unit.KILOGRAM),
        ).recommendations
        self.assertFalse(any("Package sizes" in r for r in recs))

    def test_high_price_note(self) -> None:
        """Average unit price above 1000 adds the price-tier note."""
        recs = compare(_p("A", "5000"), _p("B", "6000")).recommendations
        self.assertEqual(recs[-1], "High-priced item; weigh quality alongside unit price.")
        self.assertIn("more than 10%", recs[1])


class TestEngineGuarantees(unittest.TestCase):
    """Purity, immutability and error surfacing."""

    def test_idempotent(self) -> None:
        """Identical inputs give identical results."""
        self.assertEqual(compare(RICE_5KG, RICE_2KG), compare(RICE_5KG, RICE_2KG))

    def test_caller_decimal_context_irrelevant(self) -> None:
        """A low-precision caller context does not change the output."""
        expected = compare(RICE_5KG, RICE_2KG)
        with localcontext() as ctx:
            ctx.prec = 2
            self.assertEqual(compare(RICE_5KG, RICE_2KG), expected)

    def test_result_is_frozen(self) -> None:
        """Results cannot be mutated after the fact."""
        result = compare(RICE_5KG, RICE_2KG)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            result.winner = Winner.TIE  # type: ignore[misc]
        with self.assertRaises(dataclasses.FrozenInstanceError):
            result.details.unit_price_a = Decimal(0)  # type: ignore[misc]

    def test_validation_runs_before_unit_check(self) -> None:
        """Invalid input is reported even when units also clash."""
        with self.assertRaises(InvalidPriceError):
            compare(
                _p("A", "0", "1", Unit.GRAM),
                _p("B", "1", "1", Unit.MILLILITER),
            )

    def test_never_faults_unhandled(self) -> None:
        """Odd inputs raise ComparisonError or return a result."""
        values = ["0", "-1", "NaN", "Infinity", "0.001", "999999.99", "1e9"]
        for price in values:
            for quantity in values:
                with self.subTest(price=price, quantity=quantity):
                    try:
                        result = compare(
                            _p("A", price, quantity, Unit.POUND),
                            _p("B", "1", "1", Unit.OUNCE),
                        )
                    except ComparisonError:
                        continue
                    self.assertLess(result.details.percentage_difference, 100)

    def test_overflow_mapped(self) -> None:
        """A decimal overflow surfaces as CalculationOverflowError."""
        with patch(
            "unitprice.engine.comparison.normalize", side_effect=Overflow,
        ):
            with self.assertRaises(CalculationOverflowError):
                compare(RICE_5KG, RICE_2KG)

    def test_division_by_zero_mapped(self) -> None:
        """A decimal division by zero surfaces as DivisionByZeroError."""
        with patch(
            "unitprice.engine.comparison.normalize",
            side_effect=DivisionByZero,
        ):
            with self.assertRaises(DivisionByZeroError) as ctx:
                compare(RICE_5KG, RICE_2KG)
        self.assertIs(ctx.exception.kind, ErrorKind.DIVISION_BY_ZERO)

    def test_integer_inputs_accepted(self) -> None:
        """Whole-number ints are coerced to Decimal."""
        a = ProductListing(name="A", price=100, quantity=1, unit=Unit.GRAM)  # type: ignore[arg-type]
        b = ProductListing(name="B", price=50, quantity=1, unit=Unit.GRAM)  # type: ignore[arg-type]
        result = compare(a, b)
        self.assertIsInstance(a.price, Decimal)
        self.assertIs(result.winner, Winner.PRODUCT_B)


if __name__ == "__main__":
    unittest.main()
