"""Configuration and row models for the rule interpreter."""
from supplier_rules.models.parser_config import (
    ActionConfig,
    ParserConfig,
    ParserSettings,
    RuleConfig,
)
from supplier_rules.models.row import ParseResult, RowData
from supplier_rules.models.supplier_config import (
    SupplierConfiguration,
    SuppliersConfiguration,
)

__all__ = [
    "ActionConfig",
    "ParserConfig",
    "ParserSettings",
    "RuleConfig",
    "ParseResult",
    "RowData",
    "SupplierConfiguration",
    "SuppliersConfiguration",
]
