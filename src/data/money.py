"""
Monetary value parsing for Eu-formatted sheet cells.
"""
import re
from typing import Any

import numpy as np
import pandas as pd

from src.config import CURRENCY_SYMBOL


_NUMBER_PREFIX = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def convert_eu_to_number(value: Any) -> float:
    """
    Parse a display-formatted amount such as "€ 1.234,56" to 1234.56.

    Dots are treated as thousands separators only when a comma is present,
    so "1.5" stays 1.5. Anything unparsable (or blank) is 0.0.
    """
    if isinstance(value, (bool, np.bool_)):
        return 0.0
    if isinstance(value, (int, float, np.integer, np.floating)):
        return 0.0 if pd.isna(value) or np.isinf(value) else float(value)
    if not isinstance(value, str):
        return 0.0

    clean = value.replace(CURRENCY_SYMBOL, "").strip()
    if "," in clean:
        clean = clean.replace(".", "")
        clean = clean.replace(",", ".", 1)
    clean = clean.replace(" ", "")

    # Leading-number parse: "12,50 EUR" still reads as 12.5
    match = _NUMBER_PREFIX.match(clean)
    if not match:
        return 0.0
    number = float(match.group(0))
    return 0.0 if np.isinf(number) else number


def convert_eu_series(series: pd.Series) -> pd.Series:
    """Vectorised-by-apply version of convert_eu_to_number."""
    return series.apply(convert_eu_to_number).astype(float)
