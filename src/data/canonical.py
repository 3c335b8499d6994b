"""
Fuzzy name canonicalization.

Free-text labels (clients, collaborators, departments, activities) are typed
inconsistently across thousands of logbook rows. Near-duplicates are clustered
so that aggregations are not fragmented by typos, casing or spacing.

Clustering is greedy and order dependent: each distinct label joins the FIRST
existing cluster whose key is similar enough, even if a later cluster would be
closer. Cost is O(D^2 * L) per category (D distinct labels, L label length),
fine for vocabularies in the low thousands.
"""
import logging
from collections import Counter
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

import pandas as pd

from src.config import CATEGORY_COLUMNS, config
from src.data.similarity import calculate_similarity, normalize_for_comparison


logger = logging.getLogger(__name__)


def find_canonical_names(names: Iterable[str],
                         threshold: float = 85,
                         manual_overrides: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """
    Map every raw label to one canonical label.

    Args:
        names: Full multiset of raw labels (occurrence counts drive the choice
            of canonical label, so pass every occurrence, not distinct values).
        threshold: Minimum similarity percentage to join an existing cluster.
        manual_overrides: raw label -> forced canonical label. Exact match,
            applied last, always wins.

    Returns:
        Dict raw label -> canonical label.
    """
    if names is None:
        raise TypeError("names must be an iterable of labels, got None")

    labels = [str(name) for name in names]
    counts = Counter(labels)

    # (normalized first member, members in first-seen order), in creation order
    clusters: List[Tuple[str, List[str]]] = []
    for label in dict.fromkeys(labels):
        normalized = normalize_for_comparison(label)
        for key, members in clusters:
            if calculate_similarity(normalized, key) >= threshold:
                members.append(label)
                break
        else:
            clusters.append((normalized, [label]))

    mapping: Dict[str, str] = {}
    for _, members in clusters:
        canonical = members[0]
        for member in members[1:]:
            if counts[member] > counts[canonical]:
                canonical = member
        for member in members:
            mapping[member] = canonical

    for original, forced in (manual_overrides or {}).items():
        mapping[original] = forced

    logger.debug(
        "Clustered %d distinct labels into %d clusters (threshold=%s)",
        len(counts), len(clusters), threshold,
    )
    return mapping


def normalize_names(df: pd.DataFrame,
                    column: str,
                    threshold: float = 85,
                    manual_overrides: Optional[Mapping[str, str]] = None) -> pd.DataFrame:
    """Return a copy of df with `column` rewritten to canonical labels."""
    df = df.copy()
    if column not in df.columns:
        return df

    values = df[column].fillna("").astype(str)
    mapping = find_canonical_names(values.tolist(), threshold, manual_overrides)
    df[column] = values.map(mapping)
    return df


def build_canonical_maps(df: pd.DataFrame,
                         overrides_by_category: Optional[Mapping[str, Mapping[str, str]]] = None,
                         threshold: Optional[float] = None) -> Dict[str, Dict[str, str]]:
    """
    Build one canonical map per label category.

    Categories are independent: a decision in one never affects another.
    Categories whose column is absent get an empty map.
    """
    if threshold is None:
        threshold = config.similarity_threshold
    overrides_by_category = overrides_by_category or {}

    maps = {}
    for category, column in CATEGORY_COLUMNS.items():
        if column not in df.columns:
            maps[category] = {}
            continue
        values = df[column].fillna("").astype(str).tolist()
        maps[category] = find_canonical_names(
            values, threshold, overrides_by_category.get(category, {})
        )
    return maps


def summarize_mapping(names: Iterable[str], mapping: Mapping[str, str]) -> Dict:
    """
    Describe a canonical map for review.

    Returns dict with:
      - mappings: only the raw -> canonical pairs that actually change a label
      - stats: original_count, canonical_count, mappings_applied
    """
    distinct = list(dict.fromkeys(str(name) for name in names))
    changed = {
        original: canonical
        for original, canonical in mapping.items()
        if original != canonical
    }
    return {
        "mappings": changed,
        "stats": {
            "original_count": len(distinct),
            "canonical_count": len(set(mapping.values())),
            "mappings_applied": len(changed),
        },
    }


def build_mapping_report(df: pd.DataFrame,
                         overrides_by_category: Optional[Mapping[str, Mapping[str, str]]] = None,
                         threshold: Optional[float] = None) -> Dict:
    """
    Build the name-mapping review report for a raw logbook.

    Blank labels are left out of the report; they are not reviewable names.
    """
    if threshold is None:
        threshold = config.similarity_threshold
    overrides_by_category = overrides_by_category or {}

    mappings = {}
    stats = {}
    for category, column in CATEGORY_COLUMNS.items():
        if column in df.columns:
            values = df[column].fillna("").astype(str)
            names = [value for value in values if value.strip()]
        else:
            names = []
        mapping = find_canonical_names(names, threshold, overrides_by_category.get(category, {}))
        summary = summarize_mapping(names, mapping)
        mappings[category] = summary["mappings"]
        stats[category] = summary["stats"]

    return {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "threshold": threshold,
        "description": "Fuzzy matching on Levenshtein distance with manual overrides",
        "overrides_applied": {k: dict(v) for k, v in overrides_by_category.items()},
        "stats": stats,
        "mappings": mappings,
    }
