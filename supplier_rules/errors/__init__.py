"""Error handling module."""
from supplier_rules.errors.exceptions import (
    RuleEngineError,
    ConfigurationError,
    RowReadError,
)

__all__ = [
    "RuleEngineError",
    "ConfigurationError",
    "RowReadError",
]
