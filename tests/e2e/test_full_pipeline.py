"""
End-to-end tests for the full reconciliation pipeline.
Tests the complete flow: vendor payloads -> catalog -> orders -> integrity.
"""
import pytest

from src.matching import MatchingContext
from src.models import ProductGroupsConfig, SourceSystem, VariationPatternsConfig
from src.pipeline import check_data_integrity, preprocess_data

from tests.payloads import (
    PATTERNS,
    doordash_item,
    doordash_order,
    make_sources,
    square_category,
    square_item,
    square_line_item,
    square_order,
    square_payment,
    square_variation,
    toast_order,
    toast_selection,
)

# No group would claim a burger, so these stay clustered by name
BURGER_FREE_GROUPS = {
    "groups": [
        {"base_name": "Wings", "suffix": "wings"},
        {"base_name": "Coffee", "keywords": ["latte", "espresso"]},
    ]
}


def make_context():
    return MatchingContext.from_configs(
        VariationPatternsConfig.model_validate(PATTERNS),
        ProductGroupsConfig.model_validate(BURGER_FREE_GROUPS),
    )


def canonicalize(normalized):
    """The dumped bundle with generated ids replaced by their order of appearance."""
    data = normalized.model_dump(mode="json")
    ids = {}
    for records in data.values():
        for record in records:
            ids.setdefault(record["id"], f"id-{len(ids)}")

    def replace(value):
        if isinstance(value, dict):
            return {key: replace(item) for key, item in value.items()}
        if isinstance(value, list):
            return [replace(item) for item in value]
        if isinstance(value, str):
            return ids.get(value, value)
        return value

    return replace(data)


class TestFullPipeline:
    """One small multi-vendor batch through every stage."""

    @pytest.fixture
    def sources(self):
        return make_sources(
            toast_orders=[
                toast_order("t-1", [
                    toast_selection("Hamburger", item_guid="toast-burger", group="Burgers"),
                    toast_selection("Buffalo Wings", price=1200),
                ]),
            ],
            doordash_orders=[
                doordash_order("dd-1", [
                    doordash_item("hamburger", category="🍔 Burgers"),
                    doordash_item("BBQ Wings"),
                ]),
            ],
            square_objects=[
                square_category("SQ-CAT-1", "🍔 Burgers"),
                square_item("SQ-BURGER", "Hamburger", [
                    square_variation("SQ-BURGER-R", "Regular"),
                    square_variation("SQ-BURGER-L", "Large", price=1300),
                ], category_id="SQ-CAT-1"),
            ],
            square_orders=[
                square_order("sq-1", [
                    square_line_item("SQ-BURGER-L", total=1300),
                    square_line_item("SQ-RETIRED", name="Seasonal Pie"),
                ]),
            ],
            square_payments=[square_payment("p-1", "sq-1", amount=1380)],
        )

    @pytest.fixture
    def normalized(self, sources, location_configs):
        return preprocess_data(sources, location_configs, make_context())

    def test_hamburger_is_one_product_with_three_aliases(self, normalized):
        burgers = [p for p in normalized.products if p.name == "Hamburger"]
        assert len(burgers) == 1
        burger = burgers[0]

        aliases = [a for a in normalized.product_aliases if a.product_id == burger.id]
        assert sorted(a.source.value for a in aliases) == ["doordash", "square", "toast"]

        variations = [v for v in normalized.product_variations if v.product_id == burger.id]
        assert [v.name for v in variations] == ["Large"]

    def test_every_burger_line_resolves(self, normalized):
        burger = next(p for p in normalized.products if p.name == "Hamburger")
        names = {item.original_name: item for item in normalized.order_items}

        for name in ("Hamburger", "hamburger", "Hamburger - Large"):
            assert names[name].product_id == burger.id
        assert names["Hamburger - Large"].variation_id is not None

    def test_wings_share_configured_product(self, normalized):
        wings = next(p for p in normalized.products if p.name == "Wings")
        items = [i for i in normalized.order_items if i.original_name.endswith("Wings")]

        assert [i.product_id for i in items] == [wings.id, wings.id]
        assert all(i.variation_id for i in items)

    def test_unresolved_item_still_emitted(self, normalized):
        pie = next(i for i in normalized.order_items if i.original_name == "Seasonal Pie")
        assert pie.product_id is None
        assert pie.variation_id is None

    def test_single_category(self, normalized):
        assert [c.name for c in normalized.categories] == ["Burgers"]

    def test_every_reference_points_inside_the_bundle(self, normalized):
        order_ids = {o.id for o in normalized.orders}
        product_ids = {p.id for p in normalized.products}
        location_ids = {loc.id for loc in normalized.locations}

        assert all(o.location_id in location_ids for o in normalized.orders)
        assert all(i.order_id in order_ids for i in normalized.order_items)
        assert all(p.order_id in order_ids for p in normalized.payments)
        assert all(i.product_id in product_ids for i in normalized.order_items if i.product_id)
        assert all(a.product_id in product_ids for a in normalized.product_aliases)

    def test_vendor_order_of_output(self, normalized):
        assert [o.source for o in normalized.orders] == [
            SourceSystem.TOAST, SourceSystem.DOORDASH, SourceSystem.SQUARE,
        ]

    def test_integrity_passes(self, sources, normalized):
        result = check_data_integrity(sources, normalized)
        assert result.success, result.warnings

    def test_integrity_flags_missing_order(self, sources, normalized):
        normalized.orders.pop()
        result = check_data_integrity(sources, normalized)

        assert not result.success
        assert result.warnings[0].startswith("Order count mismatch: 3 source orders → 2 preprocessed")

    def test_idempotent_modulo_ids(self, sources, location_configs):
        first = preprocess_data(sources, location_configs, make_context())
        second = preprocess_data(sources, location_configs, make_context())

        assert canonicalize(first) == canonicalize(second)
