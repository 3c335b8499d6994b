"""
Per-entity summary tables: collaborators, departments, clients, and the
client x month revenue matrix.

Cost and revenue are attributed by proportional allocation on filtered hours:
- cost: each collaborator's hourly cost x hours that collaborator logged on
  the entity
- revenue: a client's revenue for the selected months, split across entities
  in proportion to the hours each logged on that client

Summing a client's allocated revenue over every department that worked on it
reproduces the client's own revenue (partition property).
"""
from __future__ import annotations

from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from src.config import MONTH_LABELS, TOTAL_ROW_LABEL
from src.metrics.aggregations import minutes_to_hours
from src.metrics.filters import FilterOptions
from src.metrics.kpis import (
    build_client_lookup,
    build_compensation_lookup,
    build_revenue_lookup,
    compensation_for,
    distinct,
    margin_percentage,
    period_entries,
    revenue_for,
    selected_months,
)


COLLABORATOR_SUMMARY_COLUMNS = [
    "collaborator",
    "total_compensation",
    "total_period_hours",
    "effective_hourly_rate",
    "filtered_hours",
    "clients_served",
]

DEPARTMENT_SUMMARY_COLUMNS = [
    "department",
    "total_period_hours",
    "filtered_hours",
    "clients_served",
    "collaborators",
    "macro_activities",
    "total_cost",
    "total_revenue",
    "margin",
    "margin_percentage",
]

CLIENT_SUMMARY_COLUMNS = [
    "client",
    "total_period_hours",
    "filtered_hours",
    "collaborators",
    "total_cost",
    "total_revenue",
    "margin",
    "margin_percentage",
]

# Effective rate reported for a collaborator paid in the period with no logged hours
PAID_WITHOUT_HOURS_RATE = -1.0


def _sort_by_name(df: pd.DataFrame, column: str) -> pd.DataFrame:
    """Case-insensitive name order, exact name breaking ties."""
    keyed = df.assign(_sort_key=df[column].astype(str).str.casefold())
    keyed = keyed.sort_values(["_sort_key", column], kind="stable")
    return keyed.drop(columns=["_sort_key"]).reset_index(drop=True)


def _hours_by(df: pd.DataFrame, keys: List[str]) -> pd.DataFrame:
    """Σ hours per key combination, first-seen order."""
    agg = df.groupby(keys, sort=False)["minutes"].sum().reset_index()
    agg["hours"] = agg["minutes"] / 60
    return agg.drop(columns=["minutes"])


# =============================================================================
# COLLABORATORS
# =============================================================================

def _collaborator_rates(filtered: pd.DataFrame,
                        all_entries: pd.DataFrame,
                        compensation: Optional[pd.DataFrame],
                        filters: FilterOptions) -> pd.DataFrame:
    """collaborator, total_compensation, total_period_hours for the filtered collaborators."""
    months = selected_months(filtered)
    compensation_lookup = build_compensation_lookup(compensation)
    in_period = period_entries(all_entries, filters)

    rows = []
    for name in distinct(filtered, "collaborator"):
        rows.append({
            "collaborator": name,
            "total_compensation": compensation_for(compensation_lookup, name, months),
            "total_period_hours": minutes_to_hours(in_period[in_period["collaborator"] == name]),
        })
    return pd.DataFrame(rows, columns=["collaborator", "total_compensation", "total_period_hours"])


def collaborator_hourly_costs(filtered: pd.DataFrame,
                              all_entries: pd.DataFrame,
                              compensation: Optional[pd.DataFrame],
                              filters: FilterOptions) -> Dict[str, float]:
    """Collaborator -> compensation / period hours (0 when no hours logged)."""
    rates = _collaborator_rates(filtered, all_entries, compensation, filters)
    return {
        row["collaborator"]: (
            row["total_compensation"] / row["total_period_hours"]
            if row["total_period_hours"] > 0 else 0.0
        )
        for row in rates.to_dict("records")
    }


def get_collaborator_summary(filtered: pd.DataFrame,
                             all_entries: pd.DataFrame,
                             compensation: Optional[pd.DataFrame],
                             filters: FilterOptions) -> pd.DataFrame:
    """
    One row per collaborator in the filtered logbook.

    effective_hourly_rate is total_compensation / total_period_hours; when a
    collaborator was paid but logged no hours in the period it is -1, and 0
    when there is neither pay nor hours.
    """
    if len(filtered) == 0:
        return pd.DataFrame(columns=COLLABORATOR_SUMMARY_COLUMNS)

    result = _collaborator_rates(filtered, all_entries, compensation, filters)

    result["effective_hourly_rate"] = np.select(
        [result["total_period_hours"] > 0, result["total_compensation"] > 0],
        [
            result["total_compensation"] / result["total_period_hours"].where(result["total_period_hours"] > 0, 1),
            PAID_WITHOUT_HOURS_RATE,
        ],
        default=0.0,
    )

    activity = filtered.groupby("collaborator", sort=False).agg(
        minutes=("minutes", "sum"),
        clients_served=("client", "nunique"),
    ).reset_index()
    activity["filtered_hours"] = activity["minutes"] / 60

    result = result.merge(
        activity[["collaborator", "filtered_hours", "clients_served"]],
        on="collaborator",
        how="left",
    )
    return _sort_by_name(result[COLLABORATOR_SUMMARY_COLUMNS], "collaborator")


# =============================================================================
# PROPORTIONAL ALLOCATION
# =============================================================================

def allocate_client_revenue(filtered: pd.DataFrame,
                            clients: Optional[pd.DataFrame],
                            mapping: Optional[pd.DataFrame],
                            by: str) -> pd.DataFrame:
    """
    Split each client's revenue across `by` entities by filtered hours.

    Returns DataFrame with:
        {by}, client, hours, share, client_revenue, allocated_revenue

    A client with no logged minutes splits evenly across its entities so
    the allocation still sums to the client's revenue.
    """
    keys = ["client"] if by == "client" else [by, "client"]
    columns = list(dict.fromkeys(keys + ["client", "hours", "share", "client_revenue", "allocated_revenue"]))
    if len(filtered) == 0:
        return pd.DataFrame(columns=columns)

    months = selected_months(filtered)
    revenue_lookup = build_revenue_lookup(clients)
    client_lookup = build_client_lookup(mapping)

    alloc = _hours_by(filtered, keys)
    client_hours = alloc.groupby("client", sort=False)["hours"].transform("sum")
    client_entities = alloc.groupby("client", sort=False)["hours"].transform("count")

    alloc["share"] = np.where(
        client_hours > 0,
        alloc["hours"] / client_hours.where(client_hours > 0, 1),
        1 / client_entities,
    )

    client_revenue = {
        name: revenue_for(revenue_lookup, client_lookup, name, months)
        for name in alloc["client"].unique()
    }
    alloc["client_revenue"] = alloc["client"].map(client_revenue).astype(float)
    alloc["allocated_revenue"] = alloc["share"] * alloc["client_revenue"]
    return alloc[columns]


def allocate_collaborator_cost(filtered: pd.DataFrame,
                               hourly_costs: Dict[str, float],
                               by: str) -> pd.DataFrame:
    """
    Attribute each collaborator's cost to `by` entities.

    Returns DataFrame with: {by}, collaborator, hours, hourly_cost, allocated_cost
    """
    keys = ["collaborator"] if by == "collaborator" else [by, "collaborator"]
    columns = list(dict.fromkeys(keys + ["collaborator", "hours", "hourly_cost", "allocated_cost"]))
    if len(filtered) == 0:
        return pd.DataFrame(columns=columns)

    alloc = _hours_by(filtered, keys)
    alloc["hourly_cost"] = alloc["collaborator"].map(hourly_costs).fillna(0.0).astype(float)
    alloc["allocated_cost"] = alloc["hourly_cost"] * alloc["hours"]
    return alloc[columns]


def _entity_summary(filtered: pd.DataFrame,
                    all_entries: pd.DataFrame,
                    clients: Optional[pd.DataFrame],
                    compensation: Optional[pd.DataFrame],
                    mapping: Optional[pd.DataFrame],
                    filters: FilterOptions,
                    by: str,
                    counts: Dict[str, tuple]) -> pd.DataFrame:
    """Shared body of the department and client summaries."""
    activity = filtered.groupby(by, sort=False).agg(minutes=("minutes", "sum"), **counts).reset_index()
    activity["filtered_hours"] = activity["minutes"] / 60
    activity = activity.drop(columns=["minutes"])

    in_period = period_entries(all_entries, filters)
    period_hours = in_period.groupby(by)["minutes"].sum() / 60
    activity["total_period_hours"] = activity[by].map(period_hours).fillna(0.0).astype(float)

    hourly_costs = collaborator_hourly_costs(filtered, all_entries, compensation, filters)
    cost = allocate_collaborator_cost(filtered, hourly_costs, by).groupby(by)["allocated_cost"].sum()
    revenue = allocate_client_revenue(filtered, clients, mapping, by).groupby(by)["allocated_revenue"].sum()

    activity["total_cost"] = activity[by].map(cost).fillna(0.0).astype(float)
    activity["total_revenue"] = activity[by].map(revenue).fillna(0.0).astype(float)
    activity["margin"] = activity["total_revenue"] - activity["total_cost"]
    activity["margin_percentage"] = [
        margin_percentage(m, r) for m, r in zip(activity["margin"], activity["total_revenue"])
    ]
    return activity


def get_department_summary(filtered: pd.DataFrame,
                           all_entries: pd.DataFrame,
                           clients: Optional[pd.DataFrame],
                           compensation: Optional[pd.DataFrame],
                           mapping: Optional[pd.DataFrame],
                           filters: FilterOptions) -> pd.DataFrame:
    """One row per department in the filtered logbook, sorted by name."""
    if len(filtered) == 0:
        return pd.DataFrame(columns=DEPARTMENT_SUMMARY_COLUMNS)

    result = _entity_summary(
        filtered, all_entries, clients, compensation, mapping, filters,
        by="department",
        counts={
            "clients_served": ("client", "nunique"),
            "collaborators": ("collaborator", "nunique"),
            "macro_activities": ("macro_activity", "nunique"),
        },
    )
    return _sort_by_name(result[DEPARTMENT_SUMMARY_COLUMNS], "department")


def get_client_summary(filtered: pd.DataFrame,
                       all_entries: pd.DataFrame,
                       clients: Optional[pd.DataFrame],
                       compensation: Optional[pd.DataFrame],
                       mapping: Optional[pd.DataFrame],
                       filters: FilterOptions) -> pd.DataFrame:
    """One row per client in the filtered logbook, sorted by name."""
    if len(filtered) == 0:
        return pd.DataFrame(columns=CLIENT_SUMMARY_COLUMNS)

    result = _entity_summary(
        filtered, all_entries, clients, compensation, mapping, filters,
        by="client",
        counts={"collaborators": ("collaborator", "nunique")},
    )
    return _sort_by_name(result[CLIENT_SUMMARY_COLUMNS], "client")


# =============================================================================
# CLIENT x MONTH REVENUE
# =============================================================================

def _calendar_order(months: List[str]) -> List[str]:
    rank = {label: i for i, label in enumerate(MONTH_LABELS)}
    return sorted(months, key=lambda label: (rank.get(label, len(rank)), label))


def get_client_monthly_revenue(filtered: pd.DataFrame,
                               clients: Optional[pd.DataFrame],
                               mapping: Optional[pd.DataFrame]) -> pd.DataFrame:
    """
    Revenue per client per selected month, for export.

    Returns DataFrame with: client, <month labels in calendar order>, total
    and a final TOTAL row summing every client per month.
    """
    months = _calendar_order(selected_months(filtered))
    columns = ["client"] + months + ["total"]
    if len(filtered) == 0:
        return pd.DataFrame(columns=columns)

    revenue_lookup = build_revenue_lookup(clients)
    client_lookup = build_client_lookup(mapping)

    rows = []
    for name in distinct(filtered, "client"):
        row = {"client": name}
        for month in months:
            row[month] = revenue_for(revenue_lookup, client_lookup, name, [month])
        row["total"] = float(sum(row[month] for month in months))
        rows.append(row)

    matrix = _sort_by_name(pd.DataFrame(rows, columns=columns), "client")

    totals = {"client": TOTAL_ROW_LABEL}
    for col in months + ["total"]:
        totals[col] = float(matrix[col].sum())
    return pd.concat([matrix, pd.DataFrame([totals], columns=columns)], ignore_index=True)
