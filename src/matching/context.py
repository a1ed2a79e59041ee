"""
MatchingContext - the configured matching engines for one batch.

Built once from the variation-pattern and product-group configuration and
passed by reference to the catalog builder and the order normalizers. It is
read-only after construction.
"""

import re
from pathlib import Path
from typing import Optional, Tuple, Union

from src.config.loader import load_product_groups, load_variation_patterns
from src.matching.product_groups import GroupMatch, ProductGroupMatcher
from src.matching.variation_patterns import VariationExtraction, VariationPatternEngine
from src.models.canonical import VariationType
from src.models.config import ProductGroupsConfig, VariationPatternsConfig
from src.utils.normalization import normalize_match_key


class MatchingContext:
    """Name normalizers built on top of the pattern engine and group matcher."""

    SIZE_ABBREVIATIONS = {
        'lg': 'Large',
        'sm': 'Small',
        'med': 'Medium',
        'xl': 'XL',
        'xxl': 'XXL',
    }

    LEADING_DASH = re.compile('^[-–—]\\s*')

    def __init__(self, patterns: VariationPatternEngine, groups: ProductGroupMatcher):
        self.patterns = patterns
        self.groups = groups

    @classmethod
    def from_configs(cls, patterns: VariationPatternsConfig,
                     groups: ProductGroupsConfig) -> "MatchingContext":
        return cls(
            patterns=VariationPatternEngine.from_config(patterns),
            groups=ProductGroupMatcher.from_config(groups),
        )

    @classmethod
    def from_files(cls, patterns_path: Union[str, Path],
                   groups_path: Union[str, Path]) -> "MatchingContext":
        """Loads and validates both configuration files. Raises ConfigError."""
        return cls.from_configs(
            load_variation_patterns(patterns_path),
            load_product_groups(groups_path),
        )

    def extract_variation(self, name: str) -> VariationExtraction:
        return self.patterns.extract(name)

    def expand_abbreviation(self, name: str) -> str:
        return self.patterns.expand_abbreviation(name.strip())

    def normalize_variation_name(self, text: Optional[str]) -> Tuple[Optional[str], Optional[VariationType]]:
        """
        Brings a variation label into its canonical spelling.

        "Buffalo Wings 12pc" -> ("12 pcs", quantity), "lg" -> ("Large", size),
        "- spicy" -> ("Spicy", None)
        """
        if not text:
            return text, None

        name = text.strip()

        extracted = self.patterns.extract(name)
        if extracted.variation:
            return extracted.variation, extracted.variation_type

        size = self.SIZE_ABBREVIATIONS.get(name.lower())
        if size:
            return size, VariationType.SIZE

        name = self.LEADING_DASH.sub('', name).strip()

        if name and name == name.lower():
            name = ' '.join(word[:1].upper() + word[1:] for word in name.split(' '))

        return name, None

    def normalized_base_name(self, name: str) -> str:
        """The form of a product name compared by edit distance during grouping."""
        base_name = self.patterns.extract(name).base_name or name.strip()
        return normalize_match_key(self.expand_abbreviation(base_name))

    def match_group(self, name: str) -> Optional[GroupMatch]:
        return self.groups.match(name)
