"""
Centralized text normalization for menu items and categories.
"""

import re
import unicodedata

# Emoji blocks commonly used as decoration in POS category names
EMOJI_PATTERN = re.compile(
    '['
    '\U0001F300-\U0001F9FF'
    '\u2600-\u26FF'
    '\u2700-\u27BF'
    '\uFE0F'
    ']'
)


def strip_diacritics(text: str) -> str:
    """Removes combining accents after canonical decomposition ("Bogotá" -> "Bogota")."""
    decomposed = unicodedata.normalize('NFD', text)
    return ''.join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_category(raw: str) -> str:
    """
    Produces the display name of a menu category.

    "🍔 Burgers" -> "Burgers", "sides & APPETIZERS" -> "Sides & Appetizers"
    """
    if not raw:
        return ""

    text = EMOJI_PATTERN.sub('', raw)
    text = re.sub(r'\s+', ' ', text).strip()
    return ' '.join(word[:1].upper() + word[1:].lower() for word in text.split(' ') if word)


def category_key(raw: str) -> str:
    """
    Standardizes a category name into its deduplication key.

    Transformation pipeline:
    1. Strip emoji
    2. Force lowercase
    3. Remove anything that is not a letter, digit or space
    4. Collapse whitespace
    """
    if not raw:
        return ""

    key = EMOJI_PATTERN.sub('', raw).lower()
    key = re.sub(r'[^\w\s]|_', ' ', key)
    return re.sub(r'\s+', ' ', key).strip()


def normalize_product_name(raw: str) -> str:
    """Lowercases and collapses whitespace; used for lookup-map keys."""
    if not raw:
        return ""
    return re.sub(r'\s+', ' ', raw.lower().strip())


def normalize_match_key(raw: str) -> str:
    """
    Reduces a product base name to the form compared by edit distance.

    Lowercase, accents stripped, punctuation runs collapsed to a single space.
    """
    if not raw:
        return ""

    norm = strip_diacritics(raw.lower())
    norm = re.sub(r'[^\w\s]|_', ' ', norm)
    return re.sub(r'\s+', ' ', norm).strip()
