"""
Toast order normalizer.
"""

from typing import Dict

from src.models.canonical import SourceSystem
from src.models.catalog import OrdersResult
from src.models.sources import ToastData, ToastOrder
from src.pipeline.mappings import (
    map_toast_channel,
    map_toast_order_type,
    normalize_card_brand,
    normalize_payment_type,
)
from src.pipeline.resolution import OrderAccumulator, OrderResolver
from src.utils.logging_config import logger
from src.utils.money import divide_cents


def process_toast_order(order: ToastOrder, location_id: str, resolver: OrderResolver,
                        result: OrdersResult) -> None:
    accumulator = OrderAccumulator(SourceSystem.TOAST, order.guid)
    subtotal = tax = tip = total = 0

    for check in order.checks:
        if not check.is_active:
            continue

        subtotal += check.amount
        tax += check.taxAmount
        tip += check.tipAmount
        total += check.totalAmount

        for selection in check.selections:
            if selection.voided:
                continue

            product_id, variation_id = resolver.resolve_item(
                selection.displayName,
                SourceSystem.TOAST,
                vendor_ids=(selection.item.guid if selection.item else None, selection.guid),
            )
            accumulator.add_item(
                product_id=product_id,
                variation_id=variation_id,
                original_name=selection.displayName,
                quantity=selection.quantity,
                unit_price_cents=divide_cents(selection.preDiscountPrice, selection.quantity),
                total_price_cents=selection.price,
                tax_cents=selection.tax,
                modifiers=[{'name': m.displayName, 'price': m.price} for m in selection.modifiers],
                raw_data=selection.raw(),
            )

        for payment in check.payments:
            if payment.is_fully_refunded:
                continue
            accumulator.add_payment(
                source_payment_id=payment.guid,
                payment_type=normalize_payment_type(payment.type),
                card_brand=normalize_card_brand(payment.cardType),
                last_four=payment.last4Digits,
                amount_cents=payment.amount,
                tip_cents=payment.tipAmount,
                processing_fee_cents=payment.originalProcessingFee,
                created_at=payment.paidDate,
                raw_data=payment.raw(),
            )

    behavior = order.diningOption.behavior if order.diningOption else 'DINE_IN'
    accumulator.emit(
        result,
        location_id=location_id,
        order_type=map_toast_order_type(behavior),
        channel=map_toast_channel(order.source),
        status='completed',
        created_at=order.openedDate,
        closed_at=order.closedDate,
        subtotal_cents=subtotal,
        tax_cents=tax,
        tip_cents=tip,
        total_cents=total,
        raw_data=order.raw(),
    )


def process_toast_orders(data: ToastData, location_map: Dict[str, str],
                         resolver: OrderResolver) -> OrdersResult:
    """Normalizes every active Toast order placed at a configured location."""
    result = OrdersResult()
    for order in data.orders:
        if not order.is_active:
            continue
        location_id = location_map.get(order.restaurantGuid)
        if not location_id:
            logger.debug(f"Skipping Toast order {order.guid}: unknown restaurant {order.restaurantGuid}")
            continue
        process_toast_order(order, location_id, resolver, result)

    logger.info(
        f"Toast: {len(result.orders)} orders, {len(result.order_items)} items, "
        f"{len(result.payments)} payments"
    )
    return result
