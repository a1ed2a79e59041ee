import re

import pytest

from src.matching import AlreadyInitializedError, NotInitializedError, VariationPatternEngine
from src.matching.variation_patterns import build_formatter
from src.models import VariationPatternsConfig, VariationType


@pytest.fixture
def engine(patterns_config):
    return VariationPatternEngine.from_config(patterns_config)


def test_extract_quantity(engine):
    result = engine.extract("Churros 12pcs")
    assert result.base_name == "Churros"
    assert result.variation == "12 pcs"
    assert result.variation_type == VariationType.QUANTITY


def test_extract_size_prefix(engine):
    result = engine.extract("Lg Coke")
    assert result.base_name == "Coke"
    assert result.variation == "Large"
    assert result.variation_type == VariationType.SIZE


def test_extract_size_suffix(engine):
    result = engine.extract("Fries - Large")
    assert result.base_name == "Fries"
    assert result.variation == "Large"


def test_extract_strength(engine):
    result = engine.extract("Dbl Espresso")
    assert result.base_name == "Espresso"
    assert result.variation == "Double"
    assert result.variation_type == VariationType.STRENGTH


def test_no_match_keeps_trimmed_name(engine):
    result = engine.extract("  Hamburger  ")
    assert result.base_name == "Hamburger"
    assert result.variation is None
    assert result.variation_type is None


def test_expand_abbreviation(engine):
    assert engine.expand_abbreviation("Coke") == "coca-cola"
    assert engine.expand_abbreviation("Hamburger") == "hamburger"


def test_uninitialized_engine_raises():
    engine = VariationPatternEngine()
    with pytest.raises(NotInitializedError):
        engine.extract("Coke")
    with pytest.raises(NotInitializedError):
        engine.expand_abbreviation("Coke")


def test_double_initialization_raises(engine, patterns_config):
    with pytest.raises(AlreadyInitializedError):
        engine.initialize(patterns_config)


class TestFormatter:
    """Format templates rendered against regex matches."""

    def _render(self, template, regex, text):
        return build_formatter(template)(re.search(regex, text))

    def test_plain_group(self):
        assert self._render("{1} pcs", r"(\d+)", "12") == "12 pcs"

    def test_capitalize(self):
        assert self._render("{1|capitalize}", r"(\w+)", "hello world") == "Hello"

    def test_unknown_size_passes_through(self):
        assert self._render("{1|size_expand}", r"(\w+)", "xl") == "xl"

    def test_unknown_strength_passes_through(self):
        assert self._render("{1|strength_expand}", r"(\w+)", "triple") == "triple"

    def test_unknown_transformer_is_noop(self):
        assert self._render("{1|shout}", r"(\w+)", "quiet") == "quiet"

    def test_missing_group_renders_empty(self):
        assert self._render("{5}", r"test", "test") == ""


def test_unsupported_flag_rejected():
    with pytest.raises(ValueError):
        VariationPatternsConfig.model_validate({
            "patterns": [{"name": "x", "regex": "a", "flags": "q", "type": "size", "format": "{0}"}],
        })


def test_js_only_flags_accepted():
    config = VariationPatternsConfig.model_validate({
        "patterns": [{"name": "x", "regex": "(lg)", "flags": "gi", "type": "size", "format": "{1|size_expand}"}],
    })
    engine = VariationPatternEngine.from_config(config)
    assert engine.extract("LG Soda").variation == "Large"
