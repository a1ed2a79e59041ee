"""
Square order normalizer.

Square line items reference catalog ITEM_VARIATION ids, so names are rebuilt
from the catalog as "<item> - <variation>". Payments arrive in a separate
export and are joined on order_id.
"""

from decimal import Decimal
from typing import Dict, List, NamedTuple

from src.models.canonical import PaymentType, SourceSystem
from src.models.catalog import OrdersResult
from src.models.sources import SquareData, SquareLineItem, SquareOrder, SquarePayment
from src.pipeline.mappings import map_square_channel, map_square_order_type, normalize_card_brand
from src.pipeline.resolution import OrderAccumulator, OrderResolver
from src.utils.logging_config import logger
from src.utils.money import divide_cents

DEFAULT_VARIATION = 'regular'


class CatalogVariation(NamedTuple):
    item_id: str
    item_name: str
    variation_name: str

    @property
    def is_default(self) -> bool:
        return self.variation_name.lower().strip() == DEFAULT_VARIATION

    @property
    def display_name(self) -> str:
        if self.is_default:
            return self.item_name
        return f"{self.item_name} - {self.variation_name}"


def index_catalog_variations(data: SquareData) -> Dict[str, CatalogVariation]:
    """ITEM_VARIATION id -> owning item and variation names."""
    index = {}
    for obj in data.catalog.item_objects():
        for variation in obj.item_data.variations:
            index[variation.id] = CatalogVariation(
                item_id=obj.id,
                item_name=obj.item_data.name,
                variation_name=variation.item_variation_data.name,
            )
    return index


def group_payments_by_order(data: SquareData) -> Dict[str, List[SquarePayment]]:
    grouped: Dict[str, List[SquarePayment]] = {}
    for payment in data.payments.payments:
        grouped.setdefault(payment.order_id, []).append(payment)
    return grouped


def _add_line_item(line_item: SquareLineItem, accumulator: OrderAccumulator,
                   variations: Dict[str, CatalogVariation], resolver: OrderResolver) -> None:
    quantity = Decimal(line_item.quantity or '1')
    total_price = line_item.total_money.amount
    catalog_entry = variations.get(line_item.catalog_object_id) if line_item.catalog_object_id else None

    if catalog_entry:
        name = catalog_entry.display_name
        variation_text = None
        if not catalog_entry.is_default:
            extraction = resolver.context.extract_variation(catalog_entry.variation_name)
            variation_text = extraction.variation or catalog_entry.variation_name

        product_id, variation_id = resolver.resolve_item(
            catalog_entry.item_name,
            SourceSystem.SQUARE,
            vendor_ids=(catalog_entry.item_id, line_item.catalog_object_id),
            variation_text=variation_text,
        )
    else:
        name = line_item.name or line_item.catalog_object_id or ''
        product_id, variation_id = resolver.resolve_item(
            name, SourceSystem.SQUARE, vendor_ids=(line_item.catalog_object_id,)
        )

    accumulator.add_item(
        product_id=product_id,
        variation_id=variation_id,
        original_name=name,
        quantity=quantity,
        unit_price_cents=divide_cents(total_price, quantity),
        total_price_cents=total_price,
        modifiers=[{'modifier_id': m.modifier_id} for m in line_item.applied_modifiers],
        raw_data=line_item.raw(),
    )


def _add_payment(payment: SquarePayment, accumulator: OrderAccumulator) -> None:
    payment_type = PaymentType.OTHER
    card_brand = None
    last_four = None

    if payment.source_type == 'CARD':
        payment_type = PaymentType.CREDIT
        if payment.card_details:
            card_brand = normalize_card_brand(payment.card_details.card.card_brand)
            last_four = payment.card_details.card.last_4
    elif payment.source_type == 'CASH':
        payment_type = PaymentType.CASH
    elif payment.source_type == 'WALLET':
        payment_type = PaymentType.WALLET
        if payment.wallet_details:
            card_brand = normalize_card_brand(payment.wallet_details.brand)

    accumulator.add_payment(
        source_payment_id=payment.id,
        payment_type=payment_type,
        card_brand=card_brand,
        last_four=last_four,
        amount_cents=payment.amount_money.amount,
        tip_cents=payment.tip_money.amount,
        created_at=payment.created_at,
        raw_data=payment.raw(),
    )


def process_square_order(order: SquareOrder, location_id: str, resolver: OrderResolver,
                         variations: Dict[str, CatalogVariation],
                         payments: List[SquarePayment], result: OrdersResult) -> None:
    accumulator = OrderAccumulator(SourceSystem.SQUARE, order.id)

    for line_item in order.line_items:
        _add_line_item(line_item, accumulator, variations, resolver)
    for payment in payments:
        _add_payment(payment, accumulator)

    total = order.total_money.amount
    tax = order.total_tax_money.amount
    tip = order.total_tip_money.amount
    fulfillment_type = order.fulfillments[0].type if order.fulfillments else None

    accumulator.emit(
        result,
        location_id=location_id,
        order_type=map_square_order_type(fulfillment_type),
        channel=map_square_channel(order.source.name if order.source else None),
        status=order.state.lower(),
        created_at=order.created_at,
        closed_at=order.closed_at,
        subtotal_cents=total - tax - tip,
        tax_cents=tax,
        tip_cents=tip,
        total_cents=total,
        raw_data=order.raw(),
    )


def process_square_orders(data: SquareData, location_map: Dict[str, str],
                          resolver: OrderResolver) -> OrdersResult:
    variations = index_catalog_variations(data)
    payments_by_order = group_payments_by_order(data)

    result = OrdersResult()
    for order in data.orders.orders:
        location_id = location_map.get(order.location_id)
        if not location_id:
            logger.debug(f"Skipping Square order {order.id}: unknown location {order.location_id}")
            continue
        process_square_order(
            order, location_id, resolver, variations,
            payments_by_order.get(order.id, []), result,
        )

    logger.info(
        f"Square: {len(result.orders)} orders, {len(result.order_items)} items, "
        f"{len(result.payments)} payments"
    )
    return result
