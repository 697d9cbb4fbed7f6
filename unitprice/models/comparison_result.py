# unitprice/models/comparison_result.py

"""Immutable output of a two-listing comparison."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from unitprice.models.listing import ProductListing


class Winner(Enum):
    """Which listing offers the better unit price."""

    PRODUCT_A = "A"
    PRODUCT_B = "B"
    TIE = "tie"

    def mirrored(self) -> "Winner":
        """Return the winner as seen with the listings swapped."""
        if self is Winner.PRODUCT_A:
            return Winner.PRODUCT_B
        if self is Winner.PRODUCT_B:
            return Winner.PRODUCT_A
        return Winner.TIE


@dataclass(frozen=True)
class ComparisonDetails:
    """Numbers behind the verdict, plus the audit trail."""

    unit_price_a: Decimal
    unit_price_b: Decimal
    absolute_difference: Decimal
    percentage_difference: Decimal
    common_unit_label: str
    calculation_trace: tuple[str, ...]


@dataclass(frozen=True)
class ComparisonResult:
    """Verdict for one pair of listings."""

    product_a: ProductListing
    product_b: ProductListing
    winner: Winner
    details: ComparisonDetails
    recommendations: tuple[str, ...]

    @property
    def winner_product(self) -> ProductListing | None:
        """The winning listing, or ``None`` on a tie."""
        if self.winner is Winner.PRODUCT_A:
            return self.product_a
        if self.winner is Winner.PRODUCT_B:
            return self.product_b
        return None

    @property
    def loser_product(self) -> ProductListing | None:
        """The losing listing, or ``None`` on a tie."""
        if self.winner is Winner.PRODUCT_A:
            return self.product_b
        if self.winner is Winner.PRODUCT_B:
            return self.product_a
        return None
