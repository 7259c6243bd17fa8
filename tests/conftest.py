"""Pytest configuration and fixtures for test suite.

Provides:
- Python path setup (so we can import supplier_rules without installing)
- Environment defaults for engine settings
- Shared fixtures for all tests
"""
import os
import sys
from pathlib import Path

import pytest

# Add project root to Python path so we can import supplier_rules
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

os.environ.setdefault("RULES_LOG_LEVEL", "WARNING")
os.environ.setdefault("RULES_LOG_JSON", "false")
os.environ.setdefault("RULES_TRACE_ACTIONS", "false")

from supplier_rules.engine.bag import PropertyBag
from supplier_rules.engine.context import CellContext
from supplier_rules.engine.lookups import LookupTables

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def bag():
    """Empty row-wide property bag."""
    return PropertyBag()


@pytest.fixture
def make_ctx(bag):
    """Build a cell context over the shared ``bag`` fixture."""
    def _make(raw: str = "", column: str = "A") -> CellContext:
        return CellContext(column=column, raw=raw, bag=bag)
    return _make


@pytest.fixture
def lookups():
    """Small resolved lookup table set used across tests."""
    return LookupTables.from_mapping({
        "Brands": {
            "chanel": "Chanel",
            "dior": "Dior",
            "Christian Dior": "Dior",
            "YSL": "Yves Saint Laurent",
        },
        "Genders": {
            "MENS": "Men",
            "WOMENS": "Women",
            "UNISEX": "Unisex",
        },
        "Empty": {},
    })


@pytest.fixture
def suppliers_config_path():
    """Path to the sample suppliers configuration document."""
    return FIXTURES_DIR / "suppliers.json"
