"""Pytest configuration and fixtures for test suite."""

import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Add src directory to path for imports
SRC_PATH = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(SRC_PATH))

from bibnorm.macros import MacroTable  # noqa: E402
from bibnorm.models import Concat, Quoted, Text  # noqa: E402
from bibnorm.parse import RawEntry  # noqa: E402

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding JSON fixtures."""
    return FIXTURES_DIR


@pytest.fixture
def macros() -> MacroTable:
    """Small resolved macro table shared across tests."""
    return MacroTable(
        {
            "ieee": Text("IEEE"),
            "tpami": Concat((Text("IEEE"), Text(" Trans. Pattern Anal."))),
            "jan": Text("January"),
        }
    )


@pytest.fixture
def make_raw_entry() -> Callable[..., RawEntry]:
    """Factory for raw entries whose string fields become delimited text."""

    def _factory(entry_id: str = "key", entry_type: str = "article", **fields: object) -> RawEntry:
        parsed = {}
        for name, value in fields.items():
            if isinstance(value, str):
                parsed[name] = Quoted((Text(value),))
            else:
                parsed[name] = value
        return RawEntry(type=entry_type, id=entry_id, fields=parsed)

    return _factory

