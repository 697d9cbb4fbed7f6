# unitprice/config/settings.py

"""Central configuration for the unitprice comparison engine."""

import os
from decimal import Decimal
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the unitprice comparison engine."""

    # --- Precision ---
    DECIMAL_PLACES: int = 2                  # Money is rounded to cents
    TIE_THRESHOLD: Decimal = Decimal("0.01")  # Smaller unit-price gaps tie

    # --- Listing limits ---
    MAX_NAME_LENGTH: int = 100
    MAX_PRICE: Decimal = Decimal("999999.99")
    MAX_QUANTITY: Decimal = Decimal("99999.99")
    DEFAULT_TAX_RATE: Decimal = Decimal(
        os.getenv("UNITPRICE_DEFAULT_TAX_RATE", "0.10")
    )

    # --- Recommendations ---
    SAVINGS_TIER_HIGH: Decimal = Decimal("20")   # Percent
    SAVINGS_TIER_LOW: Decimal = Decimal("10")    # Percent
    QUANTITY_DISPARITY_RATIO: Decimal = Decimal("0.5")
    HIGH_PRICE_TIER: Decimal = Decimal("1000")   # Average unit price

    # --- History enrichment ---
    HISTORY_LOOKUP_TIMEOUT: float = float(
        os.getenv("UNITPRICE_HISTORY_TIMEOUT", "5.0")
    )

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    LOGS_DIR: Path = Path(
        os.getenv("UNITPRICE_LOGS_DIR", str(BASE_DIR / "logs"))
    )
    PRICE_DB_PATH: Path = Path(
        os.getenv(
            "UNITPRICE_PRICE_DB",
            str(BASE_DIR / "data" / "price_history.db"),
        )
    )
