from decimal import Decimal

import pytest

from src.models import PaymentType, SourceSystem
from src.pipeline import build_locations, build_unified_catalog
from src.pipeline.process_toast import process_toast_orders
from src.pipeline.resolution import AliasRecorder, OrderResolver

from tests.payloads import make_sources, toast_order, toast_payment, toast_selection


@pytest.fixture
def run_toast(context, location_configs):
    def run(*orders):
        sources = make_sources(toast_orders=orders)
        _, location_map = build_locations(sources, location_configs)
        catalog = build_unified_catalog(sources, context)
        aliases = AliasRecorder()
        result = process_toast_orders(sources.toast, location_map, OrderResolver(catalog, context, aliases))
        return result, catalog, aliases
    return run


class TestToastOrders:

    def test_basic_order(self, run_toast):
        result, catalog, _ = run_toast(toast_order("t-1", [
            toast_selection("Hamburger", price=1000),
            toast_selection("Bagel", price=700, quantity=2),
        ]))

        assert len(result.orders) == 1
        order = result.orders[0]
        assert order.source == SourceSystem.TOAST
        assert order.source_order_id == "t-1"
        assert order.order_type == "dine_in"
        assert order.channel == "pos"
        assert order.status == "completed"
        assert order.subtotal_cents == 1700
        assert order.total_cents == 1700 + 160 + 200

        items = result.order_items
        assert [i.original_name for i in items] == ["Hamburger", "Bagel"]
        assert all(i.order_id == order.id for i in items)
        assert items[1].quantity == Decimal("2")
        assert items[1].unit_price_cents == 350
        assert items[0].product_id == catalog.product_map["hamburger"]

    def test_unit_price_rounds_half_up(self, run_toast):
        result, _, _ = run_toast(toast_order("t-1", [toast_selection("Bagel", price=1001, quantity=2)]))
        assert result.order_items[0].unit_price_cents == 501

    def test_modifiers_kept(self, run_toast):
        result, _, _ = run_toast(toast_order("t-1", [
            toast_selection("Hamburger", modifiers=[{"guid": "m-1", "displayName": "Extra Cheese", "price": 100}]),
        ]))
        assert result.order_items[0].modifiers == [{"name": "Extra Cheese", "price": 100}]

    def test_takeout_online(self, run_toast):
        result, _, _ = run_toast(toast_order("t-1", [toast_selection("Bagel")],
                                             behavior="TAKE_OUT", source="ONLINE"))
        assert result.orders[0].order_type == "takeout"
        assert result.orders[0].channel == "online"

    def test_payments(self, run_toast):
        result, _, _ = run_toast(toast_order("t-1", [toast_selection("Bagel")], payments=[
            toast_payment("pay-a"),
            toast_payment("pay-b", refund_status="FULL_REFUND"),
        ]))

        assert [p.source_payment_id for p in result.payments] == ["pay-a"]
        payment = result.payments[0]
        assert payment.order_id == result.orders[0].id
        assert payment.payment_type == PaymentType.CREDIT
        assert payment.card_brand == "visa"
        assert payment.last_four == "4242"
        assert payment.processing_fee_cents == 35

    def test_voided_and_unmapped_orders_skipped(self, run_toast):
        result, _, _ = run_toast(
            toast_order("t-1", [toast_selection("Bagel")], voided=True),
            toast_order("t-2", [toast_selection("Bagel")], deleted=True),
            toast_order("t-3", [toast_selection("Bagel")], restaurant="elsewhere"),
            toast_order("t-4", [toast_selection("Bagel")]),
        )
        assert [o.source_order_id for o in result.orders] == ["t-4"]

    def test_order_without_live_items_dropped_with_payments(self, run_toast):
        result, _, _ = run_toast(
            toast_order("t-1", [toast_selection("Bagel", voided=True)]),
            toast_order("t-2", [toast_selection("Bagel")], check_voided=True),
        )
        assert result.orders == []
        assert result.payments == []
        assert result.order_items == []


class TestToastResolution:

    def test_group_variation_resolved(self, run_toast):
        result, catalog, _ = run_toast(toast_order("t-1", [toast_selection("Buffalo Wings")]))

        item = result.order_items[0]
        wings = next(p for p in catalog.products if p.name == "Wings")
        assert item.product_id == wings.id
        assert item.variation_id == catalog.variation_map[f"{wings.id}:buffalo"]

    def test_aliases_recorded_once(self, run_toast):
        _, _, aliases = run_toast(
            toast_order("t-1", [toast_selection("Buffalo Wings")]),
            toast_order("t-2", [toast_selection("Buffalo Wings")]),
        )
        assert [(a.raw_name, a.source) for a in aliases.aliases] == [("Buffalo Wings", SourceSystem.TOAST)]
