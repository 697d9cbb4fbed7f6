# unitprice/config/logging_config.py

"""Per-run timestamped logging configuration for unitprice.

Each CLI launch creates a dedicated log file inside ``logs/``, named
with the launch timestamp (e.g. ``logs/run_20260214_153045.log``).
All ``unitprice.*`` loggers route through this file handler, so the
engine, the history store and the CLI share one per-run log.

The engine only logs at DEBUG. The console handler stays at WARNING
unless ``verbose`` is set, so CLI output is not cluttered.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from unitprice.config.settings import Settings

# Reusable format strings --------------------------------------------------

_DETAILED_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
)

_CONSOLE_FORMAT = "%(levelname)-8s | %(name)s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _handler(
    handler: logging.Handler, level: int, fmt: str,
) -> logging.Handler:
    """Apply level and formatter to *handler* and return it."""
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=_DATE_FORMAT))
    return handler


def setup_logging(
    logs_dir: Path | None = None, verbose: bool = False,
) -> Path:
    """Initialise the root ``unitprice`` logger for the current run.

    Args:
        logs_dir: Directory for the run log. Defaults to
            ``Settings.LOGS_DIR``.
        verbose: Echo DEBUG records to stderr as well.

    Returns:
        The :class:`~pathlib.Path` to the log file created for this run.
    """
    directory: Path = logs_dir or Settings.LOGS_DIR
    directory.mkdir(parents=True, exist_ok=True)
    log_file = directory / f"run_{datetime.now():%Y%m%d_%H%M%S}.log"

    root_logger = logging.getLogger("unitprice")
    root_logger.setLevel(logging.DEBUG)

    # Repeated calls (e.g. tests) keep the first run's handlers
    if root_logger.handlers:
        return log_file

    root_logger.addHandler(
        _handler(
            logging.FileHandler(log_file, encoding="utf-8"),
            logging.DEBUG,
            _DETAILED_FORMAT,
        )
    )
    root_logger.addHandler(
        _handler(
            logging.StreamHandler(sys.stderr),
            logging.DEBUG if verbose else logging.WARNING,
            _CONSOLE_FORMAT,
        )
    )

    root_logger.info("Logging initialised, log file: %s", log_file)
    return log_file
