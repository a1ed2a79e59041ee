"""
Bounded Levenshtein edit distance.

Only ever used for thresholded accept/reject decisions, so callers pass a
max_distance and the computation stops as soon as the cap is provably exceeded.
"""

from typing import Optional

from src.utils.normalization import strip_diacritics


def levenshtein(
    a: str,
    b: str,
    max_distance: Optional[int] = None,
    case_sensitive: bool = False,
    normalize_diacritics: bool = False,
) -> int:
    """
    Minimum number of single-character insertions, deletions or substitutions
    turning a into b.

    Args:
        a, b: Strings to compare.
        max_distance: Optional cap. When the true distance exceeds it the
            return value is max_distance + 1 (or any value above the cap).
        case_sensitive: Compare as-is instead of case-folded.
        normalize_diacritics: Strip accents before comparing.

    Examples:
        >>> levenshtein("wngs", "wings")
        1
        >>> levenshtein("Bogotá", "Bogota", normalize_diacritics=True)
        0
    """
    if not case_sensitive:
        a = a.lower()
        b = b.lower()
    if normalize_diacritics:
        a = strip_diacritics(a)
        b = strip_diacritics(b)

    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    if max_distance is not None and abs(len(a) - len(b)) > max_distance:
        return max_distance + 1

    # Keep the shorter string as the inner dimension
    if len(a) < len(b):
        a, b = b, a

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i] + [0] * len(b)
        row_min = i
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            current[j] = min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + cost,
            )
            if current[j] < row_min:
                row_min = current[j]

        if max_distance is not None and row_min > max_distance:
            return max_distance + 1
        previous = current

    return previous[len(b)]
