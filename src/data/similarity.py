"""
String similarity used to detect near-duplicate labels.

Similarity is an edit-distance percentage over a normalized form of each
string (lowercase, no accents, no whitespace).
"""
import re
import unicodedata

from rapidfuzz.distance import Levenshtein


_WHITESPACE = re.compile(r"\s+")


def normalize_for_comparison(value: str) -> str:
    """Lowercase, strip diacritics and remove all whitespace."""
    decomposed = unicodedata.normalize("NFD", str(value).lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _WHITESPACE.sub("", stripped)


def levenshtein_distance(a: str, b: str) -> int:
    """Unit-cost insert/delete/substitute edit distance (no transpositions)."""
    return Levenshtein.distance(a, b, weights=(1, 1, 1))


def calculate_similarity(a: str, b: str) -> float:
    """
    Similarity percentage (0-100) between two strings.

    100 * (max_len - distance) / max_len over the normalized forms; two
    strings that normalize to the same value (including both empty) are 100.
    """
    if a == b:
        return 100.0

    norm_a = normalize_for_comparison(a)
    norm_b = normalize_for_comparison(b)
    if norm_a == norm_b:
        return 100.0

    max_len = max(len(norm_a), len(norm_b))
    distance = levenshtein_distance(norm_a, norm_b)
    return (max_len - distance) / max_len * 100
