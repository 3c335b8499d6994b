"""
Logbook record normalization: date parsing, month labels, canonical names.

Rows whose date cannot be parsed (or overflows the calendar, e.g. 31/02)
are dropped before anything downstream sees them.
"""
import logging
import re
from datetime import date, datetime
from typing import Any, Mapping, Optional

import pandas as pd
from dateutil import parser as date_parser

from src.config import CATEGORY_COLUMNS, LOGBOOK_COLUMNS, MONTH_LABELS, config
from src.data.canonical import build_canonical_maps


logger = logging.getLogger(__name__)


_DD_MM_YYYY = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")

# (pattern, year-first)
_EXPLICIT_FORMATS = [
    (re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$"), True),
    (re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{4})$"), False),
    (re.compile(r"^(\d{4})/(\d{1,2})/(\d{1,2})$"), True),
]

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

_FALLBACK_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


def _build_date(year: int, month: int, day: int) -> Optional[pd.Timestamp]:
    try:
        return pd.Timestamp(datetime(year, month, day))
    except (ValueError, OverflowError):
        return None


def parse_date(value: Any) -> Optional[pd.Timestamp]:
    """
    Parse a logbook date to a midnight Timestamp, or None if invalid.

    DD/MM/YYYY is tried first (dominant sheet convention, ambiguous for
    generic parsers), then a few explicit layouts, then a day-first free-form
    parse that must name a full date (time-only or year-only text is invalid).
    """
    if value is None:
        return None
    if isinstance(value, (pd.Timestamp, datetime, date)):
        ts = pd.Timestamp(value)
        if pd.isna(ts):
            return None
        if ts.tzinfo is not None:
            ts = ts.tz_localize(None)
        return ts.normalize()
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    match = _DD_MM_YYYY.match(text)
    if match:
        day, month, year = (int(part) for part in match.groups())
        return _build_date(year, month, day)

    for pattern, year_first in _EXPLICIT_FORMATS:
        match = pattern.match(text)
        if match:
            p1, p2, p3 = (int(part) for part in match.groups())
            if year_first:
                return _build_date(p1, p2, p3)
            return _build_date(p3, p2, p1)

    # A free-form date counts only if it names day, month and year: parsed
    # against two different defaults it must land on the same calendar day.
    try:
        first, second = (
            date_parser.parse(text, dayfirst=True, default=default)
            for default in _FALLBACK_DEFAULTS
        )
    except (ValueError, OverflowError):
        return None
    if first.date() != second.date():
        return None
    return pd.Timestamp(first.date())


def parse_minutes(value: Any) -> int:
    """Leading-integer parse of a minutes cell; blank, garbage or negative -> 0."""
    if value is None:
        return 0
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if pd.isna(value):
            return 0
        return max(int(value), 0)
    match = _LEADING_INT.match(str(value))
    if not match:
        return 0
    return max(int(match.group(1)), 0)


def extract_month_label(value: Any) -> Optional[str]:
    """Italian month name for a date, or None for missing dates."""
    if value is None or pd.isna(value):
        return None
    return MONTH_LABELS[pd.Timestamp(value).month - 1]


def process_logbook_entries(df: pd.DataFrame) -> pd.DataFrame:
    """
    Parse dates and minutes, derive month labels, drop invalid-date rows.

    Missing logbook columns are added as blank so downstream code can rely
    on the full column set.
    """
    if df is None:
        raise TypeError("logbook must be a DataFrame, got None")

    df = df.copy()
    for col in LOGBOOK_COLUMNS:
        if col not in df.columns:
            df[col] = 0 if col == "minutes" else ""

    text_cols = [col for col in LOGBOOK_COLUMNS if col not in ("work_date", "minutes")]
    for col in text_cols:
        df[col] = df[col].fillna("").astype(str)

    df["work_date"] = df["work_date"].apply(parse_date)
    df["minutes"] = df["minutes"].apply(parse_minutes).astype(int)

    valid = df["work_date"].notna()
    dropped = int((~valid).sum())
    if dropped:
        logger.info("Dropped %d logbook rows with invalid dates", dropped)

    df = df[valid].reset_index(drop=True)
    df["work_date"] = pd.to_datetime(df["work_date"])
    df["month_label"] = df["work_date"].apply(extract_month_label)
    return df


def normalize_logbook(df: pd.DataFrame,
                      overrides_by_category: Optional[Mapping[str, Mapping[str, str]]] = None,
                      threshold: Optional[float] = None) -> pd.DataFrame:
    """
    Produce the canonical logbook.

    Each label category is canonicalized once over the surviving rows and
    the corresponding column rewritten to canonical values.
    """
    if threshold is None:
        threshold = config.similarity_threshold

    df = process_logbook_entries(df)
    maps = build_canonical_maps(df, overrides_by_category, threshold)

    for category, column in CATEGORY_COLUMNS.items():
        mapping = maps.get(category, {})
        if mapping:
            df[column] = df[column].map(lambda value, m=mapping: m.get(value, value))

    logger.info(
        "Normalized %d logbook rows (%s)",
        len(df),
        ", ".join(f"{cat}: {len(set(m.values()))} canonical" for cat, m in maps.items()),
    )
    return df
