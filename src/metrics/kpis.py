"""
Financial KPI pack.

Single source of truth for: hours, cost, revenue, margin, margin% over a
filtered logbook, plus the compensation / revenue lookups every summary uses.

Cost is compensation spread over logged hours: the hourly rate denominator is
the FULL date-range activity of the relevant collaborators, not just the
filtered rows, so narrow filters do not inflate the rate.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Iterable, List, Mapping, Optional

import pandas as pd

from src.data.money import convert_eu_to_number
from src.metrics.aggregations import minutes_to_hours
from src.metrics.filters import FilterOptions, date_range_mask


MonthValues = Dict[str, object]


@dataclass(frozen=True)
class KPIData:
    total_hours: float
    average_hourly_cost: float
    filtered_hours_cost: float
    total_revenue: float
    margin: float
    margin_percentage: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


# =============================================================================
# LOOKUPS
# =============================================================================

def _first_row_lookup(df: Optional[pd.DataFrame], key_column: str) -> Dict[str, MonthValues]:
    """key -> {month: raw cell}; the first row for a key wins."""
    lookup: Dict[str, MonthValues] = {}
    if df is None or len(df) == 0 or key_column not in df.columns:
        return lookup
    for record in df.to_dict("records"):
        key = str(record.pop(key_column))
        if key not in lookup:
            lookup[key] = record
    return lookup


def build_compensation_lookup(compensation: Optional[pd.DataFrame]) -> Dict[str, MonthValues]:
    return _first_row_lookup(compensation, "collaborator")


def build_revenue_lookup(clients: Optional[pd.DataFrame]) -> Dict[str, MonthValues]:
    return _first_row_lookup(clients, "client")


def build_client_lookup(mapping: Optional[pd.DataFrame]) -> Dict[str, str]:
    """Logbook client name -> billing client name (last pair wins)."""
    if mapping is None or len(mapping) == 0:
        return {}
    return {
        str(row["client_map"]): str(row["client"])
        for row in mapping.to_dict("records")
    }


def resolve_billing_name(client_lookup: Mapping[str, str], client: str) -> str:
    return client_lookup.get(client) or client


def _sum_months(values: Optional[MonthValues], months: Iterable[str]) -> float:
    if not values:
        return 0.0
    return float(sum(convert_eu_to_number(values.get(month)) for month in months))


def compensation_for(compensation_lookup: Mapping[str, MonthValues],
                     collaborator: str,
                     months: Iterable[str]) -> float:
    """Σ compensation for a collaborator over months; missing months are 0."""
    return _sum_months(compensation_lookup.get(collaborator), months)


def revenue_for(revenue_lookup: Mapping[str, MonthValues],
                client_lookup: Mapping[str, str],
                client: str,
                months: Iterable[str]) -> float:
    """Σ revenue for a logbook client over months, via the billing-name remap."""
    billing_name = resolve_billing_name(client_lookup, client)
    return _sum_months(revenue_lookup.get(billing_name), months)


# =============================================================================
# SHARED SELECTIONS
# =============================================================================

def selected_months(filtered: pd.DataFrame) -> List[str]:
    """Distinct month labels present in the filtered logbook, first-seen order."""
    if len(filtered) == 0:
        return []
    labels = filtered["month_label"].dropna()
    return [label for label in labels.unique().tolist() if label]


def distinct(filtered: pd.DataFrame, column: str) -> List[str]:
    if len(filtered) == 0:
        return []
    return filtered[column].unique().tolist()


def period_entries(all_entries: pd.DataFrame, filters: FilterOptions) -> pd.DataFrame:
    """All logbook rows in the filter date range, ignoring other dimensions."""
    return all_entries[date_range_mask(all_entries, filters.start_date, filters.end_date)]


def margin_percentage(margin: float, revenue: float) -> float:
    return margin / revenue * 100 if revenue > 0 else 0.0


# =============================================================================
# GLOBAL KPIS
# =============================================================================

def calculate_kpis(filtered: pd.DataFrame,
                   all_entries: pd.DataFrame,
                   clients: Optional[pd.DataFrame],
                   compensation: Optional[pd.DataFrame],
                   mapping: Optional[pd.DataFrame],
                   filters: FilterOptions) -> KPIData:
    """
    Compute the headline KPIs for the filtered logbook.

    - total_hours: Σ filtered minutes / 60
    - average_hourly_cost: compensation of the relevant collaborators over
      the selected months / their hours over the whole date range
    - filtered_hours_cost: total_hours * average_hourly_cost
    - total_revenue: revenue of the relevant clients over the selected months
    - margin, margin_percentage (0 when there is no revenue)
    """
    if filtered is None or all_entries is None:
        raise TypeError("filtered and all_entries must be DataFrames")

    total_hours = minutes_to_hours(filtered)
    months = selected_months(filtered)

    relevant_collaborators = list(filters.collaborators or []) or distinct(filtered, "collaborator")
    compensation_lookup = build_compensation_lookup(compensation)
    total_cost = float(sum(
        compensation_for(compensation_lookup, name, months)
        for name in relevant_collaborators
    ))

    in_period = period_entries(all_entries, filters)
    company_hours = minutes_to_hours(
        in_period[in_period["collaborator"].isin(relevant_collaborators)]
    )

    average_hourly_cost = total_cost / company_hours if company_hours > 0 else 0.0
    filtered_hours_cost = total_hours * average_hourly_cost

    relevant_clients = list(filters.clients or []) or distinct(filtered, "client")
    revenue_lookup = build_revenue_lookup(clients)
    client_lookup = build_client_lookup(mapping)
    total_revenue = float(sum(
        revenue_for(revenue_lookup, client_lookup, name, months)
        for name in relevant_clients
    ))

    margin = total_revenue - filtered_hours_cost

    return KPIData(
        total_hours=total_hours,
        average_hourly_cost=average_hourly_cost,
        filtered_hours_cost=filtered_hours_cost,
        total_revenue=total_revenue,
        margin=margin,
        margin_percentage=margin_percentage(margin, total_revenue),
    )
