"""Custom exception hierarchy for rule interpreter errors.

Only structurally invalid configuration and unreadable input files raise.
Data that does not fit a rule never raises; it produces fewer assignments.
"""


class RuleEngineError(Exception):
    """Base exception for all rule interpreter errors."""

    def __init__(self, message: str, *args, **kwargs):
        """Initialize error with message."""
        self.message = message
        super().__init__(message, *args, **kwargs)


class ConfigurationError(RuleEngineError):
    """Raised when a parser configuration is rejected while being built.

    Covers missing required action parameters, references to unknown lookup
    tables, malformed regular expressions and unreadable configuration files.
    """

    def __init__(self, message: str, *args, op: str | None = None, column: str | None = None, **kwargs):
        """Initialize error with optional action/column context."""
        self.op = op
        self.column = column
        super().__init__(message, *args, **kwargs)


class RowReadError(RuleEngineError):
    """Raised when a spreadsheet file cannot be opened or read into rows."""
    pass
