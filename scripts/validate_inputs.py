#!/usr/bin/env python
"""
Validate raw sheet exports against schema requirements.

Usage:
    python scripts/validate_inputs.py
    python scripts/validate_inputs.py --data-dir /path/to/data
"""
import argparse
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.config import config, RAW_FILES
from src.data.loader import load_raw_tables
from src.data.normalizer import process_logbook_entries
from src.data.schema import validate_schema


def main():
    parser = argparse.ArgumentParser(description="Validate raw sheet exports")
    parser.add_argument(
        "--data-dir",
        type=str,
        default=None,
        help="Override data directory"
    )

    args = parser.parse_args()

    data_dir = Path(args.data_dir) if args.data_dir else config.data_dir
    raw_dir = data_dir / "raw"

    print("=" * 60)
    print("Sheet Export Validation")
    print("=" * 60)
    print(f"Source directory: {raw_dir}")
    print()

    all_valid = True
    tables = load_raw_tables(raw_dir)

    for table_key, filename in RAW_FILES.items():
        path = raw_dir / f"{filename}.csv"
        df = tables[table_key]

        print(f"Validating: {table_key}")
        print("-" * 40)

        if not path.exists():
            if table_key == "logbook":
                print(f"  ✗ Not found: {filename}.csv (REQUIRED)")
                all_valid = False
            elif table_key == "mapping":
                print(f"  ⚠ Not found: {filename}.csv (built-in client mapping used)")
            else:
                print(f"  ⚠ Not found: {filename}.csv (values will be 0)")
            print()
            continue

        result = validate_schema(df, table_key, strict=False)
        print(f"  ✓ Found: {filename}.csv")
        print(f"    Rows: {result['total_rows']:,}")

        if result["is_valid"]:
            print("  ✓ Schema valid")
        else:
            print("  ✗ Schema invalid")
            print(f"    Missing required: {result['missing_required']}")
            all_valid = False

        if result["missing_optional"]:
            print(f"  ⚠ Missing optional: {result['missing_optional']}")

        if result["unrecognized_months"]:
            print(f"  ⚠ Columns ignored (not a month): {result['unrecognized_months']}")

        if table_key == "logbook":
            valid_rows = len(process_logbook_entries(df))
            dropped = len(df) - valid_rows
            print(f"    Rows with a valid date: {valid_rows:,}")
            if dropped:
                print(f"  ⚠ {dropped:,} rows will be dropped (unparseable date)")

        print()

    print("=" * 60)
    if all_valid:
        print("✓ All validations passed")
        sys.exit(0)
    else:
        print("✗ Validation failed - see errors above")
        sys.exit(1)


if __name__ == "__main__":
    main()
