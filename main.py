# main.py

"""Entry point for the unitprice command-line comparison tool."""

import argparse
import logging
import sys

from unitprice.config.logging_config import setup_logging

logger = logging.getLogger("unitprice.main")

_LISTING_FIELDS = ("NAME", "PRICE", "QUANTITY", "UNIT")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="unitprice",
        description="Compare two product listings by unit price.",
        epilog=(
            "Example: unitprice -a 'Rice 5kg' 1400 5 kg "
            "-b 'Rice 2kg' 650 2 kg"
        ),
    )
    parser.add_argument(
        "-a",
        "--product-a",
        nargs=4,
        metavar=_LISTING_FIELDS,
        dest="product_a",
        help="First listing: name, price, quantity and unit.",
    )
    parser.add_argument(
        "-b",
        "--product-b",
        nargs=4,
        metavar=_LISTING_FIELDS,
        dest="product_b",
        help="Second listing: name, price, quantity and unit.",
    )
    parser.add_argument(
        "--tax-excluded-a",
        action="store_true",
        default=False,
        help="Product A's price excludes tax.",
    )
    parser.add_argument(
        "--tax-excluded-b",
        action="store_true",
        default=False,
        help="Product B's price excludes tax.",
    )
    parser.add_argument(
        "--tax-rate-a",
        default=None,
        help="Tax rate for product A as a fraction (default: 0.10).",
    )
    parser.add_argument(
        "--tax-rate-b",
        default=None,
        help="Tax rate for product B as a fraction (default: 0.10).",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["table", "json"],
        default="table",
        dest="output_format",
        help="Output format (default: table).",
    )
    parser.add_argument(
        "--record",
        action="store_true",
        default=False,
        help="Store both unit prices in the price history DB.",
    )
    parser.add_argument(
        "--history",
        action="store_true",
        default=False,
        help="Add advice based on recorded price history.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Echo debug logging to stderr.",
    )
    parser.add_argument(
        "--units",
        action="store_true",
        default=False,
        help="List the supported units and exit.",
    )
    return parser


def main() -> None:
    """Route to the unit listing or a comparison."""
    parser = _build_parser()
    args = parser.parse_args()

    log_file = setup_logging(verbose=args.verbose)
    logger.info("unitprice starting, log file: %s", log_file)

    from unitprice.cli.runner import print_units, run_compare

    if args.units:
        print_units()
        sys.exit(0)

    if args.product_a is None or args.product_b is None:
        parser.error("both --product-a and --product-b are required")

    exit_code = run_compare(
        product_a=args.product_a,
        product_b=args.product_b,
        tax_excluded_a=args.tax_excluded_a,
        tax_excluded_b=args.tax_excluded_b,
        tax_rate_a=args.tax_rate_a,
        tax_rate_b=args.tax_rate_b,
        output_format=args.output_format,
        record=args.record,
        history=args.history,
    )
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
