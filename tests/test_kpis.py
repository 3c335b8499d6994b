"""
Tests for the headline KPI pack.
"""
import pytest
import pandas as pd
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from src.metrics.filters import FilterOptions, filter_logbook
from src.metrics.kpis import (
    build_client_lookup,
    build_compensation_lookup,
    calculate_kpis,
    margin_percentage,
    revenue_for,
    build_revenue_lookup,
    selected_months,
)


def _kpis(logbook, clients, compensation, mapping, filters):
    filtered = filter_logbook(logbook, filters)
    return calculate_kpis(filtered, logbook, clients, compensation, mapping, filters)


class TestCalculateKpis:
    """Tests for calculate_kpis."""

    def test_full_range(self, logbook, clients, compensation, mapping):
        kpis = _kpis(logbook, clients, compensation, mapping, FilterOptions.full_range(logbook))

        assert kpis.total_hours == pytest.approx(7.0)
        assert kpis.average_hourly_cost == pytest.approx(4100 / 7)
        assert kpis.filtered_hours_cost == pytest.approx(4100.0)
        assert kpis.total_revenue == pytest.approx(2000.0)
        assert kpis.margin == pytest.approx(-2100.0)
        assert kpis.margin_percentage == pytest.approx(-105.0)

    def test_january_only(self, logbook, clients, compensation, mapping):
        filters = FilterOptions(
            start_date=pd.Timestamp("2024-01-01"), end_date=pd.Timestamp("2024-01-31")
        )

        kpis = _kpis(logbook, clients, compensation, mapping, filters)

        assert kpis.total_hours == pytest.approx(6.0)
        assert kpis.filtered_hours_cost == pytest.approx(2500.0)
        assert kpis.total_revenue == pytest.approx(1500.0)
        assert kpis.margin == pytest.approx(-1000.0)
        assert kpis.margin_percentage == pytest.approx(-1000 / 1500 * 100)

    def test_client_filter_uses_company_hours_for_rate(self, logbook, clients, compensation, mapping):
        """Rate denominator is every hour the collaborators logged in the range."""
        filters = FilterOptions.full_range(logbook, clients=["Acme"])

        kpis = _kpis(logbook, clients, compensation, mapping, filters)

        assert kpis.total_hours == pytest.approx(5.0)
        assert kpis.average_hourly_cost == pytest.approx(2500 / 7)
        assert kpis.filtered_hours_cost == pytest.approx(5 * 2500 / 7)
        assert kpis.total_revenue == pytest.approx(1200.0)
        assert kpis.margin == pytest.approx(1200 - 5 * 2500 / 7)

    def test_margin_identity(self, logbook, clients, compensation, mapping):
        kpis = _kpis(logbook, clients, compensation, mapping, FilterOptions.full_range(logbook))

        assert kpis.margin == pytest.approx(kpis.total_revenue - kpis.filtered_hours_cost)
        assert kpis.filtered_hours_cost == pytest.approx(kpis.total_hours * kpis.average_hourly_cost)

    def test_no_revenue_gives_zero_percentage(self, logbook, compensation, mapping):
        kpis = _kpis(logbook, None, compensation, mapping, FilterOptions.full_range(logbook))

        assert kpis.total_revenue == 0.0
        assert kpis.margin_percentage == 0.0
        assert kpis.margin == pytest.approx(-4100.0)

    def test_empty_selection(self, logbook, clients, compensation, mapping):
        filters = FilterOptions(
            start_date=pd.Timestamp("2023-01-01"), end_date=pd.Timestamp("2023-12-31")
        )

        kpis = _kpis(logbook, clients, compensation, mapping, filters)

        assert kpis.to_dict() == {
            "total_hours": 0.0,
            "average_hourly_cost": 0.0,
            "filtered_hours_cost": 0.0,
            "total_revenue": 0.0,
            "margin": 0.0,
            "margin_percentage": 0.0,
        }

    def test_unmapped_client_uses_own_name(self, logbook, clients, compensation):
        kpis = _kpis(logbook, clients, compensation, None, FilterOptions.full_range(logbook))

        # "Acme" has no revenue row without the remap; Beta still counts
        assert kpis.total_revenue == pytest.approx(800.0)

    def test_none_fails_fast(self, logbook, clients, compensation, mapping):
        with pytest.raises(TypeError):
            calculate_kpis(None, logbook, clients, compensation, mapping,
                           FilterOptions.full_range(logbook))


class TestLookups:
    """Tests for compensation, revenue and remap lookups."""

    def test_first_row_wins(self):
        compensation = pd.DataFrame({
            "collaborator": ["Anna", "Anna"],
            "Gennaio": [100.0, 999.0],
        })

        assert build_compensation_lookup(compensation)["Anna"]["Gennaio"] == 100.0

    def test_last_remap_pair_wins(self):
        mapping = pd.DataFrame({
            "client": ["OLD SRL", "NEW SRL"],
            "client_map": ["Acme", "Acme"],
        })

        assert build_client_lookup(mapping) == {"Acme": "NEW SRL"}

    def test_revenue_for_missing_month_is_zero(self, clients, mapping):
        revenue = build_revenue_lookup(clients)
        remap = build_client_lookup(mapping)

        assert revenue_for(revenue, remap, "Acme", ["Gennaio", "Marzo"]) == pytest.approx(1200.0)
        assert revenue_for(revenue, remap, "Nobody", ["Gennaio"]) == 0.0

    def test_selected_months_first_seen(self, logbook):
        assert selected_months(logbook) == ["Gennaio", "Febbraio"]

    def test_margin_percentage(self):
        assert margin_percentage(50.0, 200.0) == pytest.approx(25.0)
        assert margin_percentage(-50.0, 0.0) == 0.0
