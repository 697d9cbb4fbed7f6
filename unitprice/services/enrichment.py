# unitprice/services/enrichment.py

"""History-aware recommendations layered on top of a base comparison.

The base result is never modified: enrichment returns a copy with extra
recommendation lines appended, or the base result itself when the
history lookup or the recommendation step fails or times out.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal

from unitprice.config.settings import Settings
from unitprice.engine.normalizer import mean, round_money
from unitprice.models.comparison_result import ComparisonResult
from unitprice.models.price_history import PriceHistory

logger = logging.getLogger("unitprice.enrichment")

PriceHistoryLookup = Callable[[str], PriceHistory | None]


@dataclass(frozen=True)
class HistoricalInsights:
    """Price history for both listings of a comparison."""

    product_a_history: PriceHistory | None
    product_b_history: PriceHistory | None
    analysis_date: datetime


RecommendationGenerator = Callable[
    [ComparisonResult, HistoricalInsights], list[str]
]


def _history_note(
    which: str,
    current: Decimal,
    unit_label: str,
    history: PriceHistory | None,
) -> str | None:
    """Compare one listing's unit price with its recorded history."""
    if history is None:
        return None
    prices = [
        e.unit_price for e in history.entries if e.unit_label == unit_label
    ]
    if not prices:
        return None

    lowest = min(prices)
    average = mean(prices)
    if current < lowest:
        return (
            f"Product {which} is below its lowest recorded price "
            f"({lowest:f} per {unit_label})."
        )
    if current > average:
        return (
            f"Product {which} is above its average recorded price "
            f"({round_money(average):f} per {unit_label}); "
            "it may be worth waiting for a sale."
        )
    return (
        f"Product {which} is at a competitive price compared "
        "with its history."
    )


def generate_advanced_recommendations(
    result: ComparisonResult, insights: HistoricalInsights,
) -> list[str]:
    """Default generator: one history note per listing with history.

    Only entries recorded in the same unit as the comparison are used.
    """
    label = result.details.common_unit_label
    notes = [
        _history_note(
            "A", result.details.unit_price_a, label,
            insights.product_a_history,
        ),
        _history_note(
            "B", result.details.unit_price_b, label,
            insights.product_b_history,
        ),
    ]
    return [n for n in notes if n is not None]


async def _gather_insights(
    result: ComparisonResult, lookup: PriceHistoryLookup,
) -> HistoricalInsights:
    """Run both history lookups concurrently in worker threads."""
    history_a, history_b = await asyncio.gather(
        asyncio.to_thread(lookup, result.product_a.name),
        asyncio.to_thread(lookup, result.product_b.name),
    )
    return HistoricalInsights(
        product_a_history=history_a,
        product_b_history=history_b,
        analysis_date=datetime.now(),
    )


async def enrich_with_history(
    result: ComparisonResult,
    lookup: PriceHistoryLookup,
    recommend: RecommendationGenerator = generate_advanced_recommendations,
    timeout: float | None = None,
) -> ComparisonResult:
    """Append history-based advice to a finished comparison.

    Any failure degrades to returning *result* unchanged.
    """
    limit = Settings.HISTORY_LOOKUP_TIMEOUT if timeout is None else timeout
    try:
        insights = await asyncio.wait_for(
            _gather_insights(result, lookup), timeout=limit,
        )
        extra = recommend(result, insights)
    except asyncio.TimeoutError:
        logger.warning(
            "Price history lookup timed out after %.1fs", limit,
        )
        return result
    except Exception as exc:
        logger.warning(
            "History enrichment failed, using base result: %s",
            exc,
            exc_info=True,
        )
        return result

    if not extra:
        return result
    logger.debug("Added %d history recommendations", len(extra))
    return replace(
        result,
        recommendations=result.recommendations + tuple(extra),
    )
