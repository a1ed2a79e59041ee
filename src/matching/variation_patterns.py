"""
Regex-driven extraction of variations ("Large", "2 Pack", "Double") from item
names.

Patterns come from configuration; each carries a format template such as
"{1|size_expand}" which renders the variation text from the capture groups.
"""

import re
from typing import Callable, Dict, List, Optional

from pydantic import BaseModel

from src.matching.errors import AlreadyInitializedError, NotInitializedError
from src.models.canonical import VariationType
from src.models.config import VariationPatternsConfig, compile_flags
from src.utils.logging_config import logger


def _capitalize(text: str) -> str:
    return ' '.join(word[:1].upper() + word[1:].lower() for word in text.split(' '))


def _size_expand(text: str) -> str:
    sizes = {'lg': 'Large', 'sm': 'Small', 'med': 'Medium'}
    return sizes.get(text.lower(), text)


def _strength_expand(text: str) -> str:
    strengths = {'single': 'Single', 'double': 'Double', 'dbl': 'Double'}
    return strengths.get(text.lower(), text)


TRANSFORMERS: Dict[str, Callable[[str], str]] = {
    'capitalize': _capitalize,
    'size_expand': _size_expand,
    'strength_expand': _strength_expand,
}

PLACEHOLDER_PATTERN = re.compile(r'\{(\d+)(?:\|(\w+))?\}')


def build_formatter(template: str) -> Callable[["re.Match"], str]:
    """
    Compiles a format template into a function of a regex match.

    "{N}" inserts capture group N; "{N|name}" passes it through a transformer
    first. Missing groups render as "", unknown transformers are a no-op.
    """
    def render(match: "re.Match") -> str:
        def substitute(placeholder: "re.Match") -> str:
            index = int(placeholder.group(1))
            try:
                value = match.group(index)
            except IndexError:
                value = None
            if value is None:
                return ''
            transformer = TRANSFORMERS.get(placeholder.group(2) or '')
            return transformer(value) if transformer else value

        return PLACEHOLDER_PATTERN.sub(substitute, template)

    return render


class VariationExtraction(BaseModel):
    base_name: str
    variation: Optional[str] = None
    variation_type: Optional[VariationType] = None


class CompiledPattern:
    def __init__(self, name: str, regex: "re.Pattern", variation_type: VariationType,
                 render: Callable[["re.Match"], str]):
        self.name = name
        self.regex = regex
        self.variation_type = variation_type
        self.render = render


class VariationPatternEngine:
    """
    Applies configured variation patterns to item names.

    Must be initialized exactly once; lookups before that raise
    NotInitializedError.
    """

    def __init__(self):
        self._patterns: Optional[List[CompiledPattern]] = None
        self._abbreviations: Dict[str, str] = {}

    @classmethod
    def from_config(cls, config: VariationPatternsConfig) -> "VariationPatternEngine":
        engine = cls()
        engine.initialize(config)
        return engine

    @property
    def is_initialized(self) -> bool:
        return self._patterns is not None

    def initialize(self, config: VariationPatternsConfig) -> None:
        if self.is_initialized:
            raise AlreadyInitializedError("Variation patterns already initialized")

        self._patterns = [
            CompiledPattern(
                name=pattern.name,
                regex=re.compile(pattern.regex, compile_flags(pattern.flags)),
                variation_type=pattern.type,
                render=build_formatter(pattern.format),
            )
            for pattern in config.patterns
        ]
        self._abbreviations = {key.lower(): value for key, value in config.abbreviations.items()}
        logger.debug(
            f"Compiled {len(self._patterns)} variation patterns, "
            f"{len(self._abbreviations)} abbreviations"
        )

    def _require_patterns(self) -> List[CompiledPattern]:
        if self._patterns is None:
            raise NotInitializedError(
                "Variation patterns not initialized. Call initialize() first."
            )
        return self._patterns

    def extract(self, name: str) -> VariationExtraction:
        """
        Splits a name into base name and variation using the first matching
        pattern.

        "Large Coffee" -> base_name "Coffee", variation "Large" (size)
        """
        trimmed = name.strip()
        for pattern in self._require_patterns():
            match = pattern.regex.search(trimmed)
            if not match:
                continue
            base_name = (trimmed[:match.start()] + trimmed[match.end():]).strip()
            base_name = re.sub(r'\s+', ' ', base_name)
            return VariationExtraction(
                base_name=base_name,
                variation=pattern.render(match) or None,
                variation_type=pattern.variation_type,
            )

        return VariationExtraction(base_name=trimmed)

    def expand_abbreviation(self, name: str) -> str:
        """Whole-name abbreviation lookup; returns the lower-cased name otherwise."""
        self._require_patterns()
        lowered = name.lower()
        return self._abbreviations.get(lowered, lowered)
