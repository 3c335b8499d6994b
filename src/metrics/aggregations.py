"""
Hours aggregations by a single logbook dimension.
"""
import pandas as pd


def minutes_to_hours(df: pd.DataFrame) -> float:
    """Σ minutes / 60 over a logbook frame."""
    if len(df) == 0:
        return 0.0
    return float(df["minutes"].sum()) / 60


def aggregate_hours(df: pd.DataFrame, column: str) -> pd.DataFrame:
    """
    Group by `column` summing hours, sorted descending by hours.

    Ties keep first-seen order. Returns DataFrame with: {column}, hours
    """
    if len(df) == 0 or column not in df.columns:
        return pd.DataFrame(columns=[column, "hours"])

    agg = df.groupby(column, sort=False)["minutes"].sum().reset_index()
    agg["hours"] = agg["minutes"] / 60
    agg = agg.drop(columns=["minutes"])
    return agg.sort_values("hours", ascending=False, kind="stable").reset_index(drop=True)


def aggregate_hours_by_collaborator(df: pd.DataFrame) -> pd.DataFrame:
    return aggregate_hours(df, "collaborator")


def aggregate_hours_by_client(df: pd.DataFrame) -> pd.DataFrame:
    return aggregate_hours(df, "client")


def aggregate_hours_by_department(df: pd.DataFrame) -> pd.DataFrame:
    return aggregate_hours(df, "department")


def aggregate_hours_by_macro_activity(df: pd.DataFrame) -> pd.DataFrame:
    return aggregate_hours(df, "macro_activity")


def aggregate_hours_by_micro_activity(df: pd.DataFrame) -> pd.DataFrame:
    """Hours by micro activity; blank micro activities are not reportable."""
    if "micro_activity" not in df.columns:
        return pd.DataFrame(columns=["micro_activity", "hours"])
    specified = df["micro_activity"].fillna("").astype(str).str.strip() != ""
    return aggregate_hours(df[specified], "micro_activity")
