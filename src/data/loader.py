"""
Data loading utilities with Streamlit caching.

Reads sheet exports (one CSV per sheet) from the raw data directory and hands
them to the sheet parsers as plain string rows.
"""
import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
import streamlit as st

from src.config import config, RAW_FILES
from src.data.normalizer import normalize_logbook
from src.data.overrides import load_mapping_overrides
from src.data.schema import validate_schema
from src.data.sheets import (
    parse_compensation_rows,
    parse_logbook_rows,
    parse_mapping_rows,
    parse_revenue_rows,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardData:
    """Everything the dashboard computes on, already parsed."""
    logbook: pd.DataFrame
    clients: pd.DataFrame
    compensation: pd.DataFrame
    mapping: pd.DataFrame


def _read_rows(filepath: Path) -> Optional[List[List[str]]]:
    """Read a sheet export as string rows (header included), or None if absent."""
    csv_path = filepath.with_suffix(".csv")
    if not csv_path.exists():
        return None
    # Ragged exports: size the frame to the widest row so no line overflows it
    with open(csv_path, newline="", encoding="utf-8") as f:
        width = max((len(row) for row in csv.reader(f)), default=0)
    if width == 0:
        return []
    df = pd.read_csv(
        csv_path, dtype=str, header=None, names=list(range(width)), keep_default_na=False
    )
    return df.fillna("").values.tolist()


def _raw_path(key: str, raw_dir: Optional[Path] = None) -> Path:
    return (raw_dir or config.raw_dir) / RAW_FILES[key]


def load_raw_tables(raw_dir: Optional[Path] = None) -> Dict[str, pd.DataFrame]:
    """Load and parse every sheet export; missing sheets parse as empty."""
    logbook_rows = _read_rows(_raw_path("logbook", raw_dir))
    if logbook_rows is None:
        logger.warning("Logbook export not found in %s", raw_dir or config.raw_dir)

    return {
        "logbook": parse_logbook_rows(logbook_rows),
        "clients": parse_revenue_rows(_read_rows(_raw_path("clients", raw_dir))),
        "compensation": parse_compensation_rows(_read_rows(_raw_path("compensation", raw_dir))),
        "mapping": parse_mapping_rows(_read_rows(_raw_path("mapping", raw_dir))),
    }


@st.cache_data(ttl=config.cache_ttl_seconds)
def load_dashboard_data() -> DashboardData:
    """Load all sheets and canonicalize the logbook.

    Raises SchemaValidationError when the logbook lacks a required column.
    """
    tables = load_raw_tables()
    validate_schema(tables["logbook"], "logbook", strict=True)
    overrides = load_mapping_overrides()
    logbook = normalize_logbook(tables["logbook"], overrides, config.similarity_threshold)
    return DashboardData(
        logbook=logbook,
        clients=tables["clients"],
        compensation=tables["compensation"],
        mapping=tables["mapping"],
    )


def get_data_status(raw_dir: Optional[Path] = None) -> Dict[str, Any]:
    """Get status of all raw sheet exports."""
    status = {}
    for key in RAW_FILES:
        csv_path = _raw_path(key, raw_dir).with_suffix(".csv")
        status[key] = {
            "path": str(csv_path),
            "csv_exists": csv_path.exists(),
        }
    return status
