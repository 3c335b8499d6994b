"""
Shared fixture tables for the KPI and summary tests.

Expected values used across the tests (full date range):
- Anna: 2h Acme + 1h Beta in January, paid 1000 + 1000
- Marco: 3h Acme in January + 1h Beta in February, paid 1500 + 600
- Revenue: ACME SPA (logbook "Acme") 1200 + 0, Beta 300 + 500
"""
import sys
from pathlib import Path

import pandas as pd
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from src.data.normalizer import process_logbook_entries


def make_logbook(extra_rows=None) -> pd.DataFrame:
    rows = [
        ("Anna", "10/01/2024", "Dev", "Web", "Frontend", "Acme", "120"),
        ("Anna", "20/01/2024", "Dev", "Web", "Backend", "Beta", "60"),
        ("Marco", "15/01/2024", "Design", "Grafica", "Logo", "Acme", "180"),
        ("Marco", "05/02/2024", "Design", "Grafica", "", "Beta", "60"),
    ]
    rows.extend(extra_rows or [])
    df = pd.DataFrame(rows, columns=[
        "collaborator", "work_date", "department", "macro_activity",
        "micro_activity", "client", "minutes",
    ])
    return process_logbook_entries(df)


@pytest.fixture
def logbook():
    return make_logbook()


@pytest.fixture
def compensation():
    return pd.DataFrame({
        "collaborator": ["Anna", "Marco"],
        "Gennaio": [1000.0, 1500.0],
        "Febbraio": [1000.0, 600.0],
    })


@pytest.fixture
def clients():
    return pd.DataFrame({
        "client": ["ACME SPA", "Beta"],
        "Gennaio": ["1.200,00", "€ 300,00"],
        "Febbraio": ["", "500"],
    })


@pytest.fixture
def mapping():
    return pd.DataFrame({"client": ["ACME SPA"], "client_map": ["Acme"]})


@pytest.fixture
def logbook_with():
    """Factory: the base logbook plus extra raw rows."""
    return make_logbook
