#!/usr/bin/env python
"""
Generate the fuzzy name-mapping report for review.

Lists, per category, every raw label that canonicalization rewrites, so
wrong merges can be fixed with entries in mapping-overrides.json.

Usage:
    python scripts/name_mappings.py
    python scripts/name_mappings.py --data-dir /path/to/data --threshold 90 --output report.json
"""
import argparse
import json
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.config import config, configure_logging
from src.data.canonical import build_mapping_report
from src.data.loader import load_raw_tables
from src.data.normalizer import process_logbook_entries
from src.data.overrides import load_mapping_overrides


def main():
    parser = argparse.ArgumentParser(description="Generate name-mapping report")
    parser.add_argument(
        "--data-dir",
        type=str,
        default=None,
        help="Override data directory"
    )
    parser.add_argument(
        "--overrides",
        type=str,
        default=None,
        help="Path to mapping overrides JSON"
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=config.similarity_threshold,
        help="Similarity threshold in percent (default: %(default)s)"
    )
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        default=None,
        help="Write the report to this file instead of stdout"
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose output"
    )

    args = parser.parse_args()
    configure_logging("DEBUG" if args.verbose else "WARNING")

    data_dir = Path(args.data_dir) if args.data_dir else config.data_dir
    raw_dir = data_dir / "raw"

    tables = load_raw_tables(raw_dir)
    logbook = process_logbook_entries(tables["logbook"])
    if len(logbook) == 0:
        print(f"ERROR: No logbook rows with a valid date found in {raw_dir}")
        sys.exit(1)

    overrides = load_mapping_overrides(args.overrides)
    report = build_mapping_report(logbook, overrides, args.threshold)
    payload = json.dumps(report, indent=2, ensure_ascii=False)

    if args.output:
        Path(args.output).write_text(payload, encoding="utf-8")
        print(f"Report written to {args.output}")
        for category, stats in report["stats"].items():
            print(
                f"  {category}: {stats['original_count']} labels -> "
                f"{stats['canonical_count']} canonical ({stats['mappings_applied']} remapped)"
            )
    else:
        print(payload)


if __name__ == "__main__":
    main()
