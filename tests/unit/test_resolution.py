from unittest.mock import patch

import pytest

from src.models import SourceSystem
from src.pipeline import build_unified_catalog
from src.pipeline.resolution import AliasRecorder, OrderResolver

from tests.payloads import make_sources, toast_order, toast_selection


@pytest.fixture
def resolver(context):
    sources = make_sources(toast_orders=[toast_order("t-1", [
        toast_selection("Bagel Sandwich"),
        toast_selection("Buffalo Wings"),
    ])])
    return OrderResolver(build_unified_catalog(sources, context), context, AliasRecorder())


def test_name_lookup_collapses_whitespace(resolver):
    product_id = resolver.catalog.product_map["bagel sandwich"]

    assert resolver.resolve_product("  Bagel   Sandwich ") == product_id
    assert resolver.resolve_product("BAGEL\tSANDWICH") == product_id


def test_unknown_name_unresolved(resolver):
    assert resolver.resolve_item("Seasonal Pie", SourceSystem.TOAST) == (None, None)
    assert resolver.aliases.aliases == []


def test_candidates_pattern_first(resolver):
    assert resolver.variation_candidates("Buffalo Wings 6pc")[0] == "6 pcs"


def test_candidates_from_group(resolver):
    assert resolver.variation_candidates("Buffalo Wings") == ["Buffalo"]
    assert resolver.variation_candidates("Hamburger") == []


def test_group_matched_once_per_line(resolver):
    groups = resolver.context.groups
    with patch.object(groups, "match", wraps=groups.match) as match:
        resolver.variation_candidates("Buffalo Wings")

    match.assert_called_once_with("Buffalo Wings")
