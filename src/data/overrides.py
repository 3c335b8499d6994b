"""
Manual name-mapping overrides loaded from a JSON file.

File layout: {category: {raw label: forced canonical label}}. Categories may
use the English keys (client, collaborator, ...) or the sheet's Italian keys
(clienti, collaboratori, reparti, macroAttivita, microAttivita).
"""
import json
import logging
from pathlib import Path
from typing import Dict, Optional, Union

from src.config import CATEGORY_COLUMNS, CATEGORY_KEY_ALIASES, config


logger = logging.getLogger(__name__)


Overrides = Dict[str, Dict[str, str]]


def empty_overrides() -> Overrides:
    """One empty override map per label category."""
    return {category: {} for category in CATEGORY_COLUMNS}


def coerce_overrides(raw: dict) -> Overrides:
    """Normalise category keys and drop anything that is not a str -> str map."""
    overrides = empty_overrides()
    if not isinstance(raw, dict):
        logger.warning("Ignoring mapping overrides: expected an object, got %s", type(raw).__name__)
        return overrides

    for key, entries in raw.items():
        category = CATEGORY_KEY_ALIASES.get(key, key)
        if category not in overrides:
            logger.warning("Ignoring overrides for unknown category %r", key)
            continue
        if not isinstance(entries, dict):
            logger.warning("Ignoring overrides for %r: expected an object", key)
            continue
        overrides[category].update(
            {str(original): str(canonical) for original, canonical in entries.items()}
        )
    return overrides


def load_mapping_overrides(path: Optional[Union[str, Path]] = None) -> Overrides:
    """
    Load override maps; a missing or unreadable file yields empty maps.
    """
    path = Path(path) if path is not None else config.overrides_path
    if not path.exists():
        return empty_overrides()

    try:
        with path.open(encoding="utf-8") as fh:
            raw = json.load(fh)
    except (OSError, ValueError) as e:
        logger.warning("Could not load mapping overrides from %s: %s", path, e)
        return empty_overrides()

    return coerce_overrides(raw)
