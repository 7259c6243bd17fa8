"""Spreadsheet input adapters."""
from supplier_rules.io.row_reader import read_rows

__all__ = ["read_rows"]
