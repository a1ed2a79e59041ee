"""
Product Group Matcher - curated grouping of menu items into one product.

A configured group names a base product ("Wings") and how to recognize its
members: a suffix word ("buffalo wings", "bbq wings") or keywords ("latte",
"espresso" -> "Coffee").

Strategy hierarchy, per group in configuration order:
1. Exact whole-word suffix
2. Fuzzy suffix (typo tolerance, single-word suffixes only)
3. Exact keyword containment
4. Fuzzy keyword (single-word keywords only)

The first group that matches wins.
"""

import re
from typing import List, Optional

from pydantic import BaseModel

from src.matching.errors import AlreadyInitializedError, NotInitializedError
from src.matching.levenshtein import levenshtein
from src.models.config import ProductGroupsConfig
from src.utils.logging_config import logger

# Words of at most this length tolerate one typo, longer words two
SHORT_WORD_LENGTH = 5
# Same-length words this short are usually different words ("rings"/"wings")
SAME_LENGTH_VETO_LENGTH = 6


def fuzzy_threshold(word: str) -> int:
    return 1 if len(word) <= SHORT_WORD_LENGTH else 2


def is_fuzzy_match(word: str, target: str) -> bool:
    """True when word is a plausible misspelling of target."""
    if word == target:
        return True
    distance = levenshtein(word, target, max_distance=fuzzy_threshold(word))
    if distance > fuzzy_threshold(word):
        return False
    if len(word) == len(target) and len(word) <= SAME_LENGTH_VETO_LENGTH:
        return False
    return True


class CompiledProductGroup(BaseModel):
    base_name: str
    suffix: Optional[str] = None
    keywords: Optional[List[str]] = None


class GroupMatch(BaseModel):
    group: CompiledProductGroup
    base_name: str
    variation_name: Optional[str] = None


class ProductGroupMatcher:
    """Matches item names against configured product groups."""

    WORD_PATTERN = re.compile(r'[\w\']+')

    def __init__(self):
        self._groups: Optional[List[CompiledProductGroup]] = None

    @classmethod
    def from_config(cls, config: ProductGroupsConfig) -> "ProductGroupMatcher":
        matcher = cls()
        matcher.initialize(config)
        return matcher

    @property
    def is_initialized(self) -> bool:
        return self._groups is not None

    def initialize(self, config: ProductGroupsConfig) -> None:
        if self.is_initialized:
            raise AlreadyInitializedError("Product groups already initialized")

        self._groups = [
            CompiledProductGroup(
                base_name=group.base_name,
                suffix=group.suffix.lower().strip() if group.suffix else None,
                keywords=[k.lower().strip() for k in group.keywords] if group.keywords else None,
            )
            for group in config.groups
        ]
        logger.debug(f"Compiled {len(self._groups)} product groups")

    @property
    def groups(self) -> List[CompiledProductGroup]:
        if self._groups is None:
            raise NotInitializedError(
                "Product groups not initialized. Call initialize() first."
            )
        return self._groups

    def match(self, product_name: str) -> Optional[GroupMatch]:
        """
        Match a product name to a group.

        Examples:
            "Buffalo Wings" -> Wings, variation "Buffalo"
            "Expresso"      -> Coffee (fuzzy keyword)
            "Onion Rings"   -> None ("rings" is not a typo of "wings")
        """
        groups = self.groups
        name_lower = product_name.lower().strip()
        words = self.WORD_PATTERN.findall(name_lower)

        for group in groups:
            if group.suffix:
                if re.search(rf'\b{re.escape(group.suffix)}\b', name_lower):
                    return self._suffix_match(group, product_name, group.suffix)

                if ' ' not in group.suffix:
                    for word in words:
                        if is_fuzzy_match(word, group.suffix):
                            logger.debug(
                                f"Fuzzy suffix match: '{word}' ~ '{group.suffix}' -> {group.base_name}"
                            )
                            return self._suffix_match(group, product_name, word)

            if group.keywords:
                for keyword in group.keywords:
                    if name_lower == keyword or keyword in name_lower:
                        return self._keyword_match(group, product_name)

                for keyword in group.keywords:
                    if ' ' in keyword:
                        continue
                    for word in words:
                        if is_fuzzy_match(word, keyword):
                            logger.debug(
                                f"Fuzzy keyword match: '{word}' ~ '{keyword}' -> {group.base_name}"
                            )
                            return self._keyword_match(group, product_name)

        return None

    def _suffix_match(self, group: CompiledProductGroup, product_name: str,
                      matched: str) -> GroupMatch:
        return GroupMatch(
            group=group,
            base_name=group.base_name,
            variation_name=self._variation_from_suffix(product_name, matched),
        )

    def _keyword_match(self, group: CompiledProductGroup, product_name: str) -> GroupMatch:
        # The whole name is the variation unless it is the base product itself
        name = product_name.strip()
        variation = None if name.lower() == group.base_name.lower() else name
        return GroupMatch(group=group, base_name=group.base_name, variation_name=variation)

    @staticmethod
    def _variation_from_suffix(product_name: str, suffix: str) -> Optional[str]:
        """
        Everything before the suffix at the end of the name.

        "Buffalo Wings" with suffix "wings" -> "Buffalo"; "Wings" -> None
        """
        pattern = re.compile(rf'\s*\b{re.escape(suffix)}\b\s*$', re.IGNORECASE)
        variation = pattern.sub('', product_name, count=1).strip()

        if not variation or variation.lower() == suffix.lower():
            return None
        return variation
