"""
Tests for logbook filtering.
"""
import pytest
import pandas as pd
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from src.data.normalizer import process_logbook_entries
from src.metrics.filters import FilterOptions, filter_logbook, get_unique_values


def _make_logbook() -> pd.DataFrame:
    rows = [
        ("Anna", "10/01/2024", "Sviluppo", "Web", "Frontend", "Acme", "120"),
        ("Anna", "20/01/2024", "Sviluppo", "Web", "Backend", "Beta", "60"),
        ("Marco", "15/01/2024", "Grafica", "Branding", "Logo", "Acme", "180"),
        ("Marco", "05/02/2024", "Grafica", "Branding", "", "Beta", "60"),
        ("Luca", "31/01/2024", "Sviluppo", "Supporto", "", "Gamma", "30"),
    ]
    df = pd.DataFrame(rows, columns=[
        "collaborator", "work_date", "department", "macro_activity",
        "micro_activity", "client", "minutes",
    ])
    return process_logbook_entries(df)


JAN = dict(start_date=pd.Timestamp("2024-01-01"), end_date=pd.Timestamp("2024-01-31"))
ALL = dict(start_date=pd.Timestamp("2024-01-01"), end_date=pd.Timestamp("2024-12-31"))


class TestDateRange:
    """Tests for the inclusive day-granularity date range."""

    def test_inclusive_bounds(self):
        df = _make_logbook()

        result = filter_logbook(df, FilterOptions(
            start_date=pd.Timestamp("2024-01-10"), end_date=pd.Timestamp("2024-01-15")
        ))

        assert sorted(result["work_date"].dt.day.tolist()) == [10, 15]

    def test_time_of_day_ignored(self):
        """Bounds carrying a time still include the whole calendar day."""
        df = _make_logbook()

        result = filter_logbook(df, FilterOptions(
            start_date=pd.Timestamp("2024-01-31 18:00"),
            end_date=pd.Timestamp("2024-01-31 08:00"),
        ))

        assert result["collaborator"].tolist() == ["Luca"]

    def test_full_range(self):
        df = _make_logbook()
        filters = FilterOptions.full_range(df)

        assert filters.start_date == pd.Timestamp("2024-01-10")
        assert filters.end_date == pd.Timestamp("2024-02-05")
        assert len(filter_logbook(df, filters)) == len(df)


class TestDimensions:
    """Tests for conjunctive set filters."""

    def test_empty_sets_do_not_restrict(self):
        df = _make_logbook()

        result = filter_logbook(df, FilterOptions(
            collaborators=[], departments=[], macro_activities=None, clients=[], **ALL
        ))

        assert len(result) == len(df)

    def test_membership_is_ored_within_dimension(self):
        df = _make_logbook()

        result = filter_logbook(df, FilterOptions(clients=["Acme", "Gamma"], **ALL))

        assert sorted(result["client"].unique()) == ["Acme", "Gamma"]
        assert len(result) == 3

    def test_dimensions_are_anded(self):
        df = _make_logbook()

        result = filter_logbook(df, FilterOptions(
            collaborators=["Anna", "Marco"], clients=["Beta"], **JAN
        ))

        assert result["collaborator"].tolist() == ["Anna"]

    def test_conjunction_property(self):
        df = _make_logbook()
        criteria = dict(
            collaborators=["Anna", "Luca"],
            departments=["Sviluppo"],
            macro_activities=["Web", "Supporto"],
            clients=["Acme", "Gamma"],
        )
        filters = FilterOptions(**criteria, **JAN)

        kept = set(filter_logbook(df, filters).index)

        columns = {
            "collaborators": "collaborator",
            "departments": "department",
            "macro_activities": "macro_activity",
            "clients": "client",
        }
        for idx, row in df.iterrows():
            in_range = JAN["start_date"] <= row["work_date"] <= JAN["end_date"]
            passes = in_range and all(row[columns[k]] in v for k, v in criteria.items())
            assert (idx in kept) == passes

    def test_removing_a_restriction_only_grows(self):
        df = _make_logbook()
        criteria = dict(
            collaborators=["Anna", "Marco"],
            departments=["Sviluppo"],
            macro_activities=["Web"],
            clients=["Acme"],
        )
        full = set(filter_logbook(df, FilterOptions(**criteria, **ALL)).index)

        for key in criteria:
            relaxed = dict(criteria, **{key: None})
            grown = set(filter_logbook(df, FilterOptions(**relaxed, **ALL)).index)
            assert full <= grown

    def test_does_not_mutate_input(self):
        df = _make_logbook()
        before = df.copy()

        filter_logbook(df, FilterOptions(clients=["Acme"], **JAN))

        pd.testing.assert_frame_equal(df, before)


class TestGetUniqueValues:
    def test_sorted_non_blank(self):
        df = _make_logbook()

        assert get_unique_values(df, "micro_activity") == ["Backend", "Frontend", "Logo"]
        assert get_unique_values(df, "missing") == []
