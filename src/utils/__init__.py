"""
Shared utilities: logging, text normalization and integer-cent money helpers.
"""

from .logging_config import logger, setup_logging
from .money import divide_cents
from .normalization import (
    category_key,
    normalize_category,
    normalize_match_key,
    normalize_product_name,
    strip_diacritics,
)

__all__ = [
    "logger",
    "setup_logging",
    "divide_cents",
    "category_key",
    "normalize_category",
    "normalize_match_key",
    "normalize_product_name",
    "strip_diacritics",
]
