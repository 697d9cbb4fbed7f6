# tests/conftest.py

"""Shared pytest fixtures for all unitprice tests."""

import logging
from collections.abc import Generator
from pathlib import Path

import pytest

from unitprice.config.settings import Settings


@pytest.fixture(autouse=True)
def isolated_paths(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
) -> Generator[None, None, None]:
    """Point log and history DB paths at a per-test temp directory."""
    monkeypatch.setattr(Settings, "LOGS_DIR", tmp_path / "logs")
    monkeypatch.setattr(
        Settings, "PRICE_DB_PATH", tmp_path / "data" / "history.db",
    )
    yield
    root_logger = logging.getLogger("unitprice")
    for handler in list(root_logger.handlers):
        handler.close()
        root_logger.removeHandler(handler)
