#!/usr/bin/env python3
"""Parse a supplier spreadsheet with the configured column rules.

Prints one JSON object per data row (row index, matched flag, assigned
values and, with --trace, the diagnostic trace).

Usage:
    python scripts/parse_file.py --config suppliers.json --supplier "Acme" prices.xlsx
"""
import argparse
import json
import sys
from pathlib import Path

# Add project root to path
script_dir = Path(__file__).parent
project_root = script_dir.parent
sys.path.insert(0, str(project_root))

from supplier_rules.engine.parser_engine import ParserEngine
from supplier_rules.errors import RuleEngineError
from supplier_rules.io import read_rows
from supplier_rules.loader import load_suppliers_configuration


def run(args: argparse.Namespace) -> int:
    config = load_suppliers_configuration(args.config)
    supplier = config.find_supplier(args.supplier)
    if supplier is None:
        available = ", ".join(s.name for s in config.suppliers) or "none"
        print(f"Unknown supplier '{args.supplier}'. Available: {available}", file=sys.stderr)
        return 2
    if supplier.parser_config is None:
        print(f"Supplier '{supplier.name}' has no parser configuration", file=sys.stderr)
        return 2

    engine = ParserEngine(supplier.parser_config)
    rows = read_rows(args.file, sheet_name=args.sheet_name, data_start_row=args.start_row)

    matched = 0
    total = 0
    for result in engine.parse_rows(rows):
        total += 1
        if result.matched:
            matched += 1
        elif args.matched_only:
            continue
        payload = result.to_dict()
        if not args.trace:
            payload.pop("trace")
        print(json.dumps(payload, ensure_ascii=False))

    print(f"{matched}/{total} rows matched", file=sys.stderr)
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Apply supplier column rules to a spreadsheet",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Excel file, first sheet, data from row 2
  python scripts/parse_file.py --config suppliers.json --supplier "Acme" \\
    --start-row 2 price-list.xlsx

  # CSV file with per-action trace
  python scripts/parse_file.py --config suppliers.json --supplier "Acme" \\
    --trace prices.csv
        """
    )

    parser.add_argument(
        "file",
        help="Path to an .xlsx or .csv file"
    )
    parser.add_argument(
        "--config",
        required=True,
        help="Path to the suppliers configuration JSON"
    )
    parser.add_argument(
        "--supplier",
        required=True,
        help="Supplier name (case-insensitive)"
    )
    parser.add_argument(
        "--sheet-name",
        help="Worksheet name (default: first sheet)"
    )
    parser.add_argument(
        "--start-row",
        type=int,
        default=1,
        help="1-based number of the first data row (default: 1)"
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Include the diagnostic trace in the output"
    )
    parser.add_argument(
        "--matched-only",
        action="store_true",
        help="Only print rows with at least one assignment"
    )

    args = parser.parse_args()

    try:
        sys.exit(run(args))
    except RuleEngineError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
