"""
Consistent number and display formatting (Italian conventions: 1.234,56 €).
"""
import pandas as pd
from typing import Union

from src.config import CURRENCY_SYMBOL, RATE_SENTINEL_LABEL


Number = Union[float, int, None]


def _swap_separators(text: str) -> str:
    """1,234.56 -> 1.234,56"""
    return text.replace(",", "_").replace(".", ",").replace("_", ".")


def fmt_currency(value: Number, decimals: int = 2) -> str:
    """Format as currency: 1.234,56 €"""
    if value is None or pd.isna(value):
        return "—"
    return f"{_swap_separators(f'{value:,.{decimals}f}')} {CURRENCY_SYMBOL}"


def fmt_hours(value: Number) -> str:
    """Format hours: 1.234,5"""
    if value is None or pd.isna(value):
        return "—"
    return _swap_separators(f"{value:,.1f}")


def fmt_rate(value: Number) -> str:
    """Format hourly rate: 45,00 €/h; the paid-without-hours sentinel shows as n/d."""
    if value is None or pd.isna(value):
        return "—"
    if value == -1:
        return RATE_SENTINEL_LABEL
    return f"{fmt_currency(value)}/h"


def fmt_percent(value: Number, decimals: int = 1) -> str:
    """Format percentage: 12,3%"""
    if value is None or pd.isna(value):
        return "—"
    return f"{_swap_separators(f'{value:,.{decimals}f}')}%"


def fmt_count(value: Number) -> str:
    """Format count: 1.234"""
    if value is None or pd.isna(value):
        return "—"
    return _swap_separators(f"{int(value):,}")


# =============================================================================
# DATAFRAME FORMATTERS
# =============================================================================

CURRENCY_COLS = [
    "total_compensation", "total_cost", "total_revenue", "margin",
    "allocated_revenue", "allocated_cost", "client_revenue", "total",
]
HOURS_COLS = ["hours", "filtered_hours", "total_period_hours"]
RATE_COLS = ["effective_hourly_rate", "hourly_cost"]
PERCENT_COLS = ["margin_percentage"]
COUNT_COLS = ["clients_served", "collaborators", "macro_activities"]


def format_metric_df(df: pd.DataFrame, currency_cols: list = None) -> pd.DataFrame:
    """
    Format a summary dataframe for display.

    Applies appropriate formatting to known column types; `currency_cols`
    adds extra currency columns (e.g. month columns of the revenue matrix).
    """
    df = df.copy()
    currency = set(CURRENCY_COLS) | set(currency_cols or [])

    for col in df.columns:
        if col in currency:
            df[col] = df[col].apply(fmt_currency)
        elif col in HOURS_COLS:
            df[col] = df[col].apply(fmt_hours)
        elif col in RATE_COLS:
            df[col] = df[col].apply(fmt_rate)
        elif col in PERCENT_COLS:
            df[col] = df[col].apply(fmt_percent)
        elif col in COUNT_COLS:
            df[col] = df[col].apply(fmt_count)

    return df


def to_csv_export(df: pd.DataFrame) -> bytes:
    """Numeric CSV export (two decimals) for download buttons."""
    return df.to_csv(index=False, float_format="%.2f").encode("utf-8")
