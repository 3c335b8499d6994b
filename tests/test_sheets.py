"""
Tests for header-driven sheet row parsing and override loading.
"""
import json
import pytest
import pandas as pd
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from src.config import DEFAULT_CLIENT_MAPPING
from src.data.overrides import empty_overrides, load_mapping_overrides
from src.data.sheets import (
    parse_compensation_rows,
    parse_logbook_rows,
    parse_mapping_rows,
    parse_revenue_rows,
)


class TestParseLogbookRows:
    """Tests for the logbook sheet."""

    def test_italian_headers(self):
        rows = [
            ["Nome", "Data", "Mese", "Reparto1", "Macro attività", "Micro attività",
             "Cliente", "Note", "Minuti impiegati"],
            ["Anna", "05/03/2024", "Marzo", "Sviluppo", "Web", "Frontend", "Acme", "", "90"],
            ["", "", "", "", "", "", "", "", ""],
            ["Marco", "06/03/2024"],
        ]

        df = parse_logbook_rows(rows)

        assert len(df) == 2
        assert df["collaborator"].tolist() == ["Anna", "Marco"]
        assert df["macro_activity"].tolist() == ["Web", ""]
        assert df["minutes"].tolist() == ["90", ""]
        assert "Mese" not in df.columns

    def test_missing_headers_stay_absent(self):
        rows = [["Nome", "Data", "Minuti impiegati"], ["Anna", "05/03/2024", "60"]]

        df = parse_logbook_rows(rows)

        assert list(df.columns) == ["collaborator", "work_date", "minutes"]

    def test_reparto_alias(self):
        rows = [["Nome", "Reparto"], ["Anna", "Grafica"]]

        assert parse_logbook_rows(rows)["department"].tolist() == ["Grafica"]

    def test_no_rows(self):
        assert len(parse_logbook_rows([])) == 0
        assert len(parse_logbook_rows([["Nome"]])) == 0


class TestParseRevenueRows:
    """Tests for the client revenue sheet."""

    def test_keeps_only_actual_rows(self):
        rows = [
            ["Cliente", "Actual", "Gennaio", "Febbraio"],
            ["ACME SPA", "Actual", "1.200,00", ""],
            ["ACME SPA", "Budget", "9.999,00", "9.999,00"],
            ["Beta", "Actual", "€ 300,00", "500"],
        ]

        df = parse_revenue_rows(rows)

        assert list(df.columns) == ["client", "Gennaio", "Febbraio"]
        assert df["client"].tolist() == ["ACME SPA", "Beta"]
        assert df["Gennaio"].tolist() == ["1.200,00", "€ 300,00"]

    def test_without_actual_column(self):
        rows = [["Cliente", "Gennaio"], ["Beta", "100"]]

        df = parse_revenue_rows(rows)

        assert df["client"].tolist() == ["Beta"]


class TestParseCompensationRows:
    """Tests for the compensation sheet."""

    def test_parses_amounts(self):
        rows = [
            ["Collaboaratore", "Gennaio", "Febbraio"],
            ["Anna", "1.500,00", ""],
        ]

        df = parse_compensation_rows(rows)

        assert df["collaborator"].tolist() == ["Anna"]
        assert df["Gennaio"].iloc[0] == pytest.approx(1500.0)
        assert df["Febbraio"].iloc[0] == 0.0


class TestParseMappingRows:
    """Tests for the client remap sheet."""

    def test_default_when_missing(self):
        df = parse_mapping_rows([])

        assert len(df) == len(DEFAULT_CLIENT_MAPPING)
        assert ("CARL ZEISS VISION ITALIA S.P.A.", "Zeiss") in list(
            zip(df["client"], df["client_map"])
        )

    def test_parses_sheet(self):
        rows = [["Cliente", "Cliente Map"], ["ACME SPA", "Acme"]]

        df = parse_mapping_rows(rows)

        assert df.to_dict("records") == [{"client": "ACME SPA", "client_map": "Acme"}]


class TestLoadMappingOverrides:
    """Tests for the overrides JSON file."""

    def test_missing_file_gives_empty_maps(self, tmp_path):
        overrides = load_mapping_overrides(tmp_path / "missing.json")

        assert overrides == empty_overrides()
        assert set(overrides) == {
            "client", "collaborator", "department", "macro_activity", "micro_activity"
        }

    def test_italian_keys(self, tmp_path):
        path = tmp_path / "mapping-overrides.json"
        path.write_text(json.dumps({
            "clienti": {"ACME": "Acme"},
            "collaboratori": {"Jhon": "John"},
            "sconosciuto": {"x": "y"},
        }), encoding="utf-8")

        overrides = load_mapping_overrides(path)

        assert overrides["client"] == {"ACME": "Acme"}
        assert overrides["collaborator"] == {"Jhon": "John"}
        assert overrides["department"] == {}
        assert "sconosciuto" not in overrides

    def test_invalid_json_gives_empty_maps(self, tmp_path):
        path = tmp_path / "mapping-overrides.json"
        path.write_text("{not json", encoding="utf-8")

        assert load_mapping_overrides(path) == empty_overrides()
