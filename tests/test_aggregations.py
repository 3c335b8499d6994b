"""
Tests for hours aggregations.
"""
import pytest
import pandas as pd
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from src.metrics.aggregations import (
    aggregate_hours,
    aggregate_hours_by_client,
    aggregate_hours_by_collaborator,
    aggregate_hours_by_department,
    aggregate_hours_by_macro_activity,
    aggregate_hours_by_micro_activity,
    minutes_to_hours,
)


def _make_df() -> pd.DataFrame:
    return pd.DataFrame({
        "collaborator": ["Anna", "Anna", "Marco", "Marco", "Luca"],
        "department": ["Sviluppo", "Sviluppo", "Grafica", "Grafica", "Sviluppo"],
        "macro_activity": ["Web", "Web", "Branding", "Branding", "Supporto"],
        "micro_activity": ["Frontend", "Backend", "Logo", "  ", ""],
        "client": ["Acme", "Beta", "Acme", "Beta", "Gamma"],
        "minutes": [120, 60, 180, 60, 30],
    })


class TestAggregateHours:
    """Tests for group-by-sum of hours."""

    def test_sorted_descending(self):
        result = aggregate_hours_by_collaborator(_make_df())

        assert result["collaborator"].tolist() == ["Marco", "Anna", "Luca"]
        assert result["hours"].tolist() == pytest.approx([4.0, 3.0, 0.5])

    def test_by_client(self):
        result = aggregate_hours_by_client(_make_df())

        assert dict(zip(result["client"], result["hours"])) == pytest.approx(
            {"Acme": 5.0, "Beta": 2.0, "Gamma": 0.5}
        )

    def test_by_department_and_macro(self):
        assert aggregate_hours_by_department(_make_df())["hours"].sum() == pytest.approx(7.5)
        assert aggregate_hours_by_macro_activity(_make_df())["macro_activity"].tolist() == [
            "Branding", "Web", "Supporto"
        ]

    def test_ties_keep_first_seen_order(self):
        df = pd.DataFrame({"client": ["Beta", "Acme", "Gamma"], "minutes": [60, 60, 120]})

        result = aggregate_hours(df, "client")

        assert result["client"].tolist() == ["Gamma", "Beta", "Acme"]

    def test_micro_activity_drops_blank(self):
        result = aggregate_hours_by_micro_activity(_make_df())

        assert result["micro_activity"].tolist() == ["Logo", "Frontend", "Backend"]
        assert result["hours"].sum() == pytest.approx(6.0)

    def test_empty(self):
        empty = _make_df().iloc[0:0]

        assert list(aggregate_hours_by_client(empty).columns) == ["client", "hours"]
        assert len(aggregate_hours_by_micro_activity(empty)) == 0
        assert minutes_to_hours(empty) == 0.0
