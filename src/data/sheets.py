"""
Header-driven parsing of raw sheet rows into frames.

Each parser takes a list of rows (first row = headers, cells as strings) the
way a spreadsheet export hands them over, and returns a frame with the
canonical column names. Blank rows are skipped; unknown headers are ignored.
"""
from typing import List, Optional, Sequence

import pandas as pd

from src.config import (
    COMPENSATION_NAME_HEADERS,
    DEFAULT_CLIENT_MAPPING,
    LOGBOOK_COLUMNS,
    LOGBOOK_HEADER_ALIASES,
    REVENUE_ACTUAL_HEADER,
    REVENUE_ACTUAL_VALUE,
    REVENUE_NAME_HEADERS,
)
from src.data.money import convert_eu_to_number


Rows = Sequence[Sequence[str]]


def _cell(row: Sequence[str], index: int) -> str:
    if index >= len(row) or row[index] is None:
        return ""
    return str(row[index])


def _is_blank_row(row: Sequence[str]) -> bool:
    return not any(cell is not None and str(cell).strip() for cell in row)


def _split(rows: Optional[Rows]):
    if not rows or len(rows) < 2:
        return None, []
    headers = [str(h) if h is not None else "" for h in rows[0]]
    body = [row for row in rows[1:] if not _is_blank_row(row)]
    return headers, body


def parse_logbook_rows(rows: Optional[Rows]) -> pd.DataFrame:
    """
    Parse the logbook sheet.

    Dates and minutes are left as raw strings; the normalizer owns parsing
    and fills in any absent columns.
    """
    headers, body = _split(rows)
    if headers is None:
        return pd.DataFrame(columns=LOGBOOK_COLUMNS)

    columns = {}
    for index, header in enumerate(headers):
        target = LOGBOOK_HEADER_ALIASES.get(header.strip().lower())
        if target and target not in columns:
            columns[target] = index

    records = []
    for row in body:
        records.append({col: _cell(row, index) for col, index in columns.items()})

    # Columns without a matching header stay absent
    ordered = [col for col in LOGBOOK_COLUMNS if col in columns]
    return pd.DataFrame(records, columns=list(columns))[ordered]


def _find_header(headers: List[str], candidates: List[str]) -> Optional[int]:
    for index, header in enumerate(headers):
        if header.strip().lower() in candidates:
            return index
    return None


def parse_revenue_rows(rows: Optional[Rows]) -> pd.DataFrame:
    """
    Parse the client revenue sheet into a wide frame: client + month columns.

    When an "Actual" column exists only rows flagged "Actual" are kept.
    Month cells stay as raw strings (parsed at lookup time).
    """
    headers, body = _split(rows)
    if headers is None:
        return pd.DataFrame(columns=["client"])

    name_index = _find_header(headers, REVENUE_NAME_HEADERS)
    actual_index = _find_header(headers, [REVENUE_ACTUAL_HEADER])
    if actual_index is not None:
        body = [row for row in body if _cell(row, actual_index) == REVENUE_ACTUAL_VALUE]

    month_columns = [
        (index, header) for index, header in enumerate(headers)
        if index not in (name_index, actual_index) and header.strip()
    ]

    records = []
    for row in body:
        record = {} if name_index is None else {"client": _cell(row, name_index)}
        for index, header in month_columns:
            record[header] = _cell(row, index)
        records.append(record)

    key_columns = [] if name_index is None else ["client"]
    return pd.DataFrame(records, columns=key_columns + [h for _, h in month_columns])


def parse_compensation_rows(rows: Optional[Rows]) -> pd.DataFrame:
    """
    Parse the collaborator compensation sheet: collaborator + numeric months.

    Blank cells are 0; amounts use the Eu convention.
    """
    headers, body = _split(rows)
    if headers is None:
        return pd.DataFrame(columns=["collaborator"])

    name_index = _find_header(headers, COMPENSATION_NAME_HEADERS)
    month_columns = [
        (index, header) for index, header in enumerate(headers)
        if index != name_index and header.strip()
    ]

    records = []
    for row in body:
        record = {} if name_index is None else {"collaborator": _cell(row, name_index)}
        for index, header in month_columns:
            value = _cell(row, index)
            record[header] = convert_eu_to_number(value) if value else 0.0
        records.append(record)

    key_columns = [] if name_index is None else ["collaborator"]
    return pd.DataFrame(records, columns=key_columns + [h for _, h in month_columns])


def default_client_mapping() -> pd.DataFrame:
    """Built-in billing name -> logbook name pairs."""
    return pd.DataFrame(DEFAULT_CLIENT_MAPPING, columns=["client", "client_map"])


def parse_mapping_rows(rows: Optional[Rows]) -> pd.DataFrame:
    """
    Parse the client name remap sheet (cliente / cliente map).

    A missing or empty sheet falls back to the built-in mapping.
    """
    headers, body = _split(rows)
    if headers is None:
        return default_client_mapping()

    client_index = _find_header(headers, ["cliente", "client"])
    map_index = _find_header(headers, ["cliente map", "client map"])

    records = []
    for row in body:
        records.append({
            "client": _cell(row, client_index) if client_index is not None else "",
            "client_map": _cell(row, map_index) if map_index is not None else "",
        })
    return pd.DataFrame(records, columns=["client", "client_map"])
