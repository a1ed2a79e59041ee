from decimal import Decimal

import pytest

from src.models import PaymentType, SourceSystem
from src.pipeline import build_locations, build_unified_catalog
from src.pipeline.process_square import process_square_orders
from src.pipeline.resolution import AliasRecorder, OrderResolver

from tests.payloads import (
    make_sources,
    square_item,
    square_line_item,
    square_order,
    square_payment,
    square_variation,
)

CATALOG = [
    square_item("SQ-ITEM-1", "Hamburger", [
        square_variation("SQ-VAR-1", "Regular"),
        square_variation("SQ-VAR-2", "Large", price=1300),
    ]),
]


@pytest.fixture
def run_square(context, location_configs):
    def run(orders, payments=()):
        sources = make_sources(square_objects=CATALOG, square_orders=orders, square_payments=payments)
        _, location_map = build_locations(sources, location_configs)
        catalog = build_unified_catalog(sources, context)
        aliases = AliasRecorder()
        result = process_square_orders(sources.square, location_map, OrderResolver(catalog, context, aliases))
        return result, catalog, aliases
    return run


class TestSquareLineItems:

    def test_names_rebuilt_from_catalog(self, run_square):
        result, catalog, _ = run_square([square_order("sq-1", [
            square_line_item("SQ-VAR-1"),
            square_line_item("SQ-VAR-2", total=1300),
        ])])

        first, second = result.order_items
        product_id = catalog.product_map["SQ-ITEM-1"]
        assert first.original_name == "Hamburger"
        assert second.original_name == "Hamburger - Large"
        assert first.product_id == second.product_id == product_id
        assert first.variation_id is None
        assert second.variation_id == catalog.variation_map[f"{product_id}:large"]

    def test_unit_price_from_total(self, run_square):
        result, _, _ = run_square([square_order("sq-1", [square_line_item("SQ-VAR-1", total=2001, quantity="2")])])

        item = result.order_items[0]
        assert item.quantity == Decimal("2")
        assert item.unit_price_cents == 1001

    def test_unknown_catalog_object_kept_unresolved(self, run_square):
        result, _, _ = run_square([square_order("sq-1", [square_line_item("SQ-GONE", name="Mystery Special")])])

        assert len(result.orders) == 1
        item = result.order_items[0]
        assert item.original_name == "Mystery Special"
        assert item.product_id is None
        assert item.variation_id is None

    def test_alias_uses_catalog_item_name(self, run_square):
        _, _, aliases = run_square([square_order("sq-1", [square_line_item("SQ-VAR-2", total=1300)])])
        assert [(a.raw_name, a.source) for a in aliases.aliases] == [("Hamburger", SourceSystem.SQUARE)]


class TestSquareOrders:

    def test_order_totals(self, run_square):
        result, _, _ = run_square([square_order("sq-1", [square_line_item("SQ-VAR-1")], tax=80, tip=150)])

        order = result.orders[0]
        assert order.total_cents == 1230
        assert order.subtotal_cents == 1000
        assert order.tax_cents == 80
        assert order.tip_cents == 150
        assert order.status == "completed"

    def test_order_type_and_channel(self, run_square):
        result, _, _ = run_square([
            square_order("sq-1", [square_line_item("SQ-VAR-1")], fulfillment=None),
            square_order("sq-2", [square_line_item("SQ-VAR-1")], fulfillment="DELIVERY",
                         source_name="Square Online"),
        ])

        first, second = result.orders
        assert (first.order_type, first.channel) == ("dine_in", "pos")
        assert (second.order_type, second.channel) == ("delivery", "online")

    def test_unknown_location_skipped(self, run_square):
        result, _, _ = run_square([square_order("sq-1", [square_line_item("SQ-VAR-1")], location="SQ-ELSE")])
        assert result.orders == []


class TestSquarePayments:

    def test_payments_joined_on_order(self, run_square):
        result, _, _ = run_square(
            [square_order("sq-1", [square_line_item("SQ-VAR-1")]),
             square_order("sq-2", [square_line_item("SQ-VAR-1")])],
            [square_payment("p-1", "sq-1"), square_payment("p-2", "sq-2", source_type="CASH"),
             square_payment("p-3", "sq-other")],
        )

        orders = {o.source_order_id: o.id for o in result.orders}
        assert [(p.source_payment_id, p.order_id) for p in result.payments] == [
            ("p-1", orders["sq-1"]), ("p-2", orders["sq-2"]),
        ]

    @pytest.mark.parametrize("source_type,brand,expected_type,expected_brand", [
        ("CARD", "VISA", PaymentType.CREDIT, "visa"),
        ("CASH", None, PaymentType.CASH, None),
        ("WALLET", "APPLE_PAY", PaymentType.WALLET, "apple_pay"),
        ("EXTERNAL", None, PaymentType.OTHER, None),
    ])
    def test_payment_types(self, run_square, source_type, brand, expected_type, expected_brand):
        result, _, _ = run_square(
            [square_order("sq-1", [square_line_item("SQ-VAR-1")])],
            [square_payment("p-1", "sq-1", source_type=source_type, brand=brand)],
        )

        payment = result.payments[0]
        assert payment.payment_type == expected_type
        assert payment.card_brand == expected_brand
        assert payment.last_four == ("1111" if source_type == "CARD" else None)
