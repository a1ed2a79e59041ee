"""
Configuration documents that drive matching.

Three JSON files are validated into these models before a batch runs:
locations (vendor id mapping), variation patterns, and product groups.
"""

import re
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .canonical import VariationType

# JS-style regex flags accepted in pattern configs. g/u/y have no Python
# counterpart and are accepted without effect.
REGEX_FLAGS = {
    'i': re.IGNORECASE,
    'm': re.MULTILINE,
    's': re.DOTALL,
    'g': 0,
    'u': 0,
    'y': 0,
}


def compile_flags(flags: Optional[str]) -> int:
    """Translates a flag string like "gi" into re module flags."""
    compiled = 0
    for flag in flags or '':
        if flag not in REGEX_FLAGS:
            raise ValueError(f"Unsupported regex flag '{flag}'")
        compiled |= REGEX_FLAGS[flag]
    return compiled


class LocationConfig(BaseModel):
    name: str = Field(..., min_length=1, description="Location display name")
    toast_id: str = Field(..., min_length=1, description="Toast restaurant GUID")
    doordash_id: str = Field(..., min_length=1, description="DoorDash store id")
    square_id: str = Field(..., min_length=1, description="Square location id")


class LocationsConfig(BaseModel):
    locations: List[LocationConfig] = Field(..., min_length=1)


class VariationPatternConfig(BaseModel):
    """A named regex whose match marks a variation inside an item name."""
    name: str = Field(..., min_length=1)
    regex: str = Field(..., min_length=1)
    flags: Optional[str] = None
    type: VariationType
    format: str = Field(..., min_length=1, description='Template such as "{1|size_expand}"')

    @field_validator('type')
    @classmethod
    def validate_pattern_type(cls, v):
        if v == VariationType.SEMANTIC:
            raise ValueError("semantic variations come from product groups, not patterns")
        return v

    @model_validator(mode='after')
    def validate_regex(self):
        """Rejects patterns that would fail at compile time."""
        try:
            re.compile(self.regex, compile_flags(self.flags))
        except re.error as e:
            raise ValueError(f"Invalid regex '{self.regex}': {e}")
        return self


class VariationPatternsConfig(BaseModel):
    patterns: List[VariationPatternConfig] = Field(..., min_length=1)
    abbreviations: Dict[str, str] = Field(default_factory=dict)


class ProductGroupConfig(BaseModel):
    """A curated grouping rule: all matching names become one product."""
    base_name: str = Field(..., min_length=1)
    suffix: Optional[str] = None
    keywords: Optional[List[str]] = None

    @model_validator(mode='after')
    def validate_has_rule(self):
        if not self.suffix and not self.keywords:
            raise ValueError("At least one of suffix or keywords must be provided")
        return self


class ProductGroupsConfig(BaseModel):
    description: Optional[str] = None
    groups: List[ProductGroupConfig] = Field(..., min_length=1)
