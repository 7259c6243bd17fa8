"""Configuration-driven rule interpreter for supplier spreadsheets.

Each spreadsheet column is run through a declarative chain of text actions
(assign, split, find, map, conditional) that write to a row-wide property bag; the chain
then resolves a flat set of property assignments such as ``Product.Brand``.
"""
from supplier_rules.engine.chain import ChainExecutor
from supplier_rules.engine.parser_engine import ParserEngine
from supplier_rules.errors import ConfigurationError, RowReadError, RuleEngineError
from supplier_rules.loader import load_parser_config, load_suppliers_configuration
from supplier_rules.models import (
    ActionConfig,
    ParseResult,
    ParserConfig,
    RowData,
    RuleConfig,
    SupplierConfiguration,
    SuppliersConfiguration,
)

__version__ = "0.1.0"

__all__ = [
    "ActionConfig",
    "ChainExecutor",
    "ConfigurationError",
    "ParseResult",
    "ParserConfig",
    "ParserEngine",
    "RowData",
    "RowReadError",
    "RuleConfig",
    "RuleEngineError",
    "SupplierConfiguration",
    "SuppliersConfiguration",
    "load_parser_config",
    "load_suppliers_configuration",
]
