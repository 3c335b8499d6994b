"""
Column checks for the parsed sheet frames.

The logbook needs its identity, date, client and minutes columns; the wide
revenue and compensation sheets need their name column and should carry
Italian month headers (anything else is never summed).
"""
import pandas as pd
from typing import Dict, List, Tuple

from src.config import MONTH_LABELS, OPTIONAL_COLUMNS, REQUIRED_COLUMNS


# wide sheets -> their name column
MONTHLY_TABLES = {"clients": "client", "compensation": "collaborator"}


class SchemaValidationError(Exception):
    """Raised when required columns are missing."""
    pass


def validate_required_columns(df: pd.DataFrame, table_name: str) -> Tuple[bool, List[str]]:
    """(is_valid, missing_required) for a table; unknown tables always pass."""
    required = REQUIRED_COLUMNS.get(table_name, [])
    missing = [col for col in required if col not in df.columns]
    return not missing, missing


def check_optional_columns(df: pd.DataFrame, table_name: str) -> List[str]:
    """Optional columns absent from df; their values read as blank."""
    return [col for col in OPTIONAL_COLUMNS.get(table_name, []) if col not in df.columns]


def unrecognized_month_columns(df: pd.DataFrame, table_name: str) -> List[str]:
    """Headers of a wide sheet that are neither its name column nor a month label."""
    key_column = MONTHLY_TABLES.get(table_name)
    if key_column is None:
        return []
    return [col for col in df.columns if col != key_column and col not in MONTH_LABELS]


def validate_schema(df: pd.DataFrame, table_name: str, strict: bool = True) -> Dict:
    """
    Validate a parsed sheet.

    Args:
        df: parsed sheet frame
        table_name: key into REQUIRED_COLUMNS / OPTIONAL_COLUMNS
        strict: raise SchemaValidationError on missing required columns

    Returns:
        Dict with is_valid, missing_required, missing_optional,
        unrecognized_months, total_columns, total_rows
    """
    is_valid, missing_required = validate_required_columns(df, table_name)

    if strict and not is_valid:
        raise SchemaValidationError(
            f"Missing required columns in {table_name}: {missing_required}"
        )

    return {
        "is_valid": is_valid,
        "missing_required": missing_required,
        "missing_optional": check_optional_columns(df, table_name),
        "unrecognized_months": unrecognized_month_columns(df, table_name),
        "total_columns": len(df.columns),
        "total_rows": len(df),
    }
