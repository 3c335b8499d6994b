"""
Logbook filtering: date range plus conjunctive entity-set dimensions.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

import pandas as pd


# filter attribute -> logbook column
FILTER_DIMENSIONS = {
    "collaborators": "collaborator",
    "departments": "department",
    "macro_activities": "macro_activity",
    "clients": "client",
}


@dataclass(frozen=True)
class FilterOptions:
    """
    Filter criteria. Dates are inclusive at calendar-day granularity.

    An empty or None set for a dimension means no restriction on it.
    """
    start_date: pd.Timestamp
    end_date: pd.Timestamp
    collaborators: Optional[List[str]] = field(default=None)
    departments: Optional[List[str]] = field(default=None)
    macro_activities: Optional[List[str]] = field(default=None)
    clients: Optional[List[str]] = field(default=None)

    @classmethod
    def full_range(cls, df: pd.DataFrame, **dimensions) -> "FilterOptions":
        """Criteria spanning every date present in the logbook."""
        if len(df) == 0:
            today = pd.Timestamp.today().normalize()
            return cls(start_date=today, end_date=today, **dimensions)
        return cls(
            start_date=df["work_date"].min(),
            end_date=df["work_date"].max(),
            **dimensions,
        )

    @property
    def start_day(self) -> pd.Timestamp:
        return pd.Timestamp(self.start_date).normalize()

    @property
    def end_day(self) -> pd.Timestamp:
        return pd.Timestamp(self.end_date).normalize()


def date_range_mask(df: pd.DataFrame, start_date, end_date) -> pd.Series:
    """True where work_date falls in [start_date, end_date], by calendar day."""
    days = pd.to_datetime(df["work_date"]).dt.normalize()
    start = pd.Timestamp(start_date).normalize()
    end = pd.Timestamp(end_date).normalize()
    return (days >= start) & (days <= end)


def filter_logbook(df: pd.DataFrame, filters: FilterOptions) -> pd.DataFrame:
    """
    Rows in the date range that satisfy every restricted dimension.

    Within a dimension membership is ORed; dimensions are ANDed.
    """
    if df is None:
        raise TypeError("logbook must be a DataFrame, got None")

    mask = date_range_mask(df, filters.start_date, filters.end_date)
    for attr, column in FILTER_DIMENSIONS.items():
        selected = getattr(filters, attr)
        if selected:
            mask &= df[column].isin(list(selected))

    return df[mask].copy()


def get_unique_values(df: pd.DataFrame, column: str) -> List[str]:
    """Sorted distinct non-blank values of a column (filter widget options)."""
    if column not in df.columns:
        return []
    values = df[column].dropna().astype(str)
    values = values[values.str.strip() != ""]
    return sorted(values.unique().tolist())
