# unitprice/cli/runner.py

"""Headless CLI comparison runner."""

import asyncio
import json
import logging
import sys
from decimal import Decimal, InvalidOperation

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from unitprice.cli.messages import describe_error
from unitprice.config.settings import Settings
from unitprice.engine.comparison import compare
from unitprice.engine.errors import ComparisonError
from unitprice.engine.unit_registry import base_label, parse_unit
from unitprice.models.comparison_result import ComparisonResult, Winner
from unitprice.models.listing import ProductListing
from unitprice.models.unit import Unit
from unitprice.services.enrichment import enrich_with_history

logger = logging.getLogger("unitprice.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)

EXIT_OK = 0
EXIT_COMPARISON_ERROR = 1
EXIT_BAD_INPUT = 2


class InputError(ValueError):
    """Raw command-line text could not be turned into a listing."""


def parse_decimal(raw: str, field_name: str) -> Decimal:
    """Parse user text into a finite Decimal.

    Accepts thousands separators (``1,400``). Raises ``InputError``.
    """
    cleaned = raw.strip().replace(",", "")
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        msg = f"{field_name} '{raw}' is not a number"
        raise InputError(msg) from None
    if not value.is_finite():
        msg = f"{field_name} '{raw}' is not a finite number"
        raise InputError(msg)
    return value


def build_listing(
    fields: list[str],
    tax_included: bool,
    tax_rate: str | None,
) -> ProductListing:
    """Turn ``[NAME, PRICE, QUANTITY, UNIT]`` into a ProductListing."""
    name, price, quantity, unit_text = fields
    try:
        unit = parse_unit(unit_text)
    except ValueError as exc:
        raise InputError(str(exc)) from None
    rate = (
        parse_decimal(tax_rate, "Tax rate")
        if tax_rate is not None
        else Settings.DEFAULT_TAX_RATE
    )
    return ProductListing(
        name=name,
        price=parse_decimal(price, "Price"),
        quantity=parse_decimal(quantity, "Quantity"),
        unit=unit,
        tax_included=tax_included,
        tax_rate=rate,
    )


def result_to_dict(result: ComparisonResult) -> dict[str, object]:
    """Serialise a comparison result to plain JSON-friendly values."""

    def listing(p: ProductListing) -> dict[str, object]:
        return {
            "name": p.name,
            "price": f"{p.price:f}",
            "quantity": f"{p.quantity:f}",
            "unit": p.unit.symbol,
            "tax_included": p.tax_included,
            "tax_rate": f"{p.tax_rate:f}",
        }

    d = result.details
    return {
        "product_a": listing(result.product_a),
        "product_b": listing(result.product_b),
        "winner": result.winner.value,
        "details": {
            "unit_price_a": f"{d.unit_price_a:f}",
            "unit_price_b": f"{d.unit_price_b:f}",
            "absolute_difference": f"{d.absolute_difference:f}",
            "percentage_difference": f"{d.percentage_difference:f}",
            "common_unit_label": d.common_unit_label,
            "calculation_trace": list(d.calculation_trace),
        },
        "recommendations": list(result.recommendations),
    }


def _print_table(result: ComparisonResult) -> None:
    """Render a Rich table of the comparison to stdout."""
    d = result.details
    table = Table(
        title="Unit Price Comparison",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("", style="dim", width=3)
    table.add_column("Product", max_width=40)
    table.add_column("Price", justify="right")
    table.add_column("Quantity", justify="right")
    table.add_column(
        f"Per {d.common_unit_label}", justify="right", style="green",
    )

    rows = (
        ("A", result.product_a, d.unit_price_a, Winner.PRODUCT_A),
        ("B", result.product_b, d.unit_price_b, Winner.PRODUCT_B),
    )
    for label, p, price, side in rows:
        tax = "incl." if p.tax_included else "excl."
        marker = " 🏆" if result.winner is side else ""
        table.add_row(
            label,
            escape(p.name[:40]) + marker,
            f"{p.price:,.2f} ({tax} tax)",
            f"{p.quantity:f} {p.unit.symbol}",
            f"{price:,.2f}",
        )

    console = Console()
    console.print(table)
    if result.winner is not Winner.TIE:
        console.print(
            f"Difference: {d.absolute_difference:,.2f} per "
            f"{d.common_unit_label} ({d.percentage_difference:f}%)"
        )
    for line in d.calculation_trace:
        console.print(f"[dim]{escape(line)}[/dim]")
    for line in result.recommendations:
        console.print(f"💡 {escape(line)}")


def print_units() -> None:
    """List every registered unit with its conversion factor."""
    table = Table(title="Units", title_style="bold cyan")
    table.add_column("Symbol", style="bold")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Factor", justify="right")
    for unit in Unit:
        table.add_row(
            unit.symbol,
            unit.name.lower(),
            unit.category.value,
            f"{unit.factor:f} {base_label(unit.category)}",
        )
    Console().print(table)


def run_compare(
    product_a: list[str],
    product_b: list[str],
    tax_excluded_a: bool = False,
    tax_excluded_b: bool = False,
    tax_rate_a: str | None = None,
    tax_rate_b: str | None = None,
    output_format: str = "table",
    record: bool = False,
    history: bool = False,
) -> int:
    """Compare two listings from raw CLI text and return an exit code."""
    try:
        listing_a = build_listing(
            product_a, not tax_excluded_a, tax_rate_a,
        )
        listing_b = build_listing(
            product_b, not tax_excluded_b, tax_rate_b,
        )
    except InputError as exc:
        _err.print(f"[red]Invalid input: {escape(str(exc))}[/red]")
        return EXIT_BAD_INPUT

    try:
        result = compare(listing_a, listing_b)
    except ComparisonError as exc:
        message, suggestion = describe_error(exc)
        logger.info("Comparison rejected (%s): %s", exc.kind.value, exc)
        _err.print(f"[red]{escape(message)}[/red]")
        _err.print(f"[dim]{suggestion}[/dim]")
        return EXIT_COMPARISON_ERROR

    if record or history:
        from unitprice.storage.price_history_db import PriceHistoryDB

        db = PriceHistoryDB()
        try:
            if history:
                result = asyncio.run(
                    enrich_with_history(result, db.get_price_history)
                )
            if record:
                db.record_comparison(result)
                _err.print("[dim]Recorded unit prices to history.[/dim]")
        finally:
            db.close()

    if output_format == "json":
        json.dump(
            result_to_dict(result),
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")
    else:
        _print_table(result)

    return EXIT_OK
