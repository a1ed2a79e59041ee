"""
Entity-resolution engines: edit distance, variation patterns, product groups.
"""

from .context import MatchingContext
from .errors import AlreadyInitializedError, NotInitializedError
from .levenshtein import levenshtein
from .product_groups import GroupMatch, ProductGroupMatcher
from .variation_patterns import VariationExtraction, VariationPatternEngine

__all__ = [
    "MatchingContext",
    "AlreadyInitializedError",
    "NotInitializedError",
    "levenshtein",
    "GroupMatch",
    "ProductGroupMatcher",
    "VariationExtraction",
    "VariationPatternEngine",
]
