"""
DoorDash order normalizer.

DoorDash reports one settlement per delivery instead of tender records, so
every emitted order gets one synthetic payment.
"""

from typing import Dict

from src.models.canonical import PaymentType, SourceSystem
from src.models.catalog import OrdersResult
from src.models.sources import DoorDashData, DoorDashOrder
from src.pipeline.mappings import map_doordash_order_type
from src.pipeline.resolution import OrderAccumulator, OrderResolver
from src.utils.logging_config import logger


def process_doordash_order(order: DoorDashOrder, location_id: str, resolver: OrderResolver,
                           result: OrdersResult) -> None:
    accumulator = OrderAccumulator(SourceSystem.DOORDASH, order.external_delivery_id)

    for item in order.order_items:
        product_id, variation_id = resolver.resolve_item(
            item.name, SourceSystem.DOORDASH, vendor_ids=(item.item_id,)
        )
        accumulator.add_item(
            product_id=product_id,
            variation_id=variation_id,
            original_name=item.name,
            quantity=item.quantity,
            unit_price_cents=item.unit_price,
            total_price_cents=item.total_price,
            modifiers=[option.raw() for option in item.options],
            special_instructions=item.special_instructions or None,
            raw_data=item.raw(),
        )

    accumulator.add_payment(
        source_payment_id=f"dd_pay_{order.external_delivery_id}",
        payment_type=PaymentType.DOORDASH,
        amount_cents=order.merchant_payout,
        tip_cents=order.dasher_tip,
        processing_fee_cents=order.commission,
        created_at=order.delivery_time or order.pickup_time or order.created_at,
        raw_data={
            'source': SourceSystem.DOORDASH.value,
            'order_id': order.external_delivery_id,
            'merchant_payout': order.merchant_payout,
            'commission': order.commission,
        },
    )

    accumulator.emit(
        result,
        location_id=location_id,
        order_type=map_doordash_order_type(order.order_fulfillment_method),
        channel='doordash',
        status=order.order_status.lower(),
        created_at=order.created_at,
        closed_at=order.delivery_time or order.pickup_time,
        subtotal_cents=order.order_subtotal,
        tax_cents=order.tax_amount,
        tip_cents=order.dasher_tip,
        delivery_fee_cents=order.delivery_fee,
        service_fee_cents=order.service_fee,
        commission_cents=order.commission,
        total_cents=order.total_charged_to_consumer,
        contains_alcohol=order.contains_alcohol,
        is_catering=order.is_catering,
        raw_data=order.raw(),
    )


def process_doordash_orders(data: DoorDashData, location_map: Dict[str, str],
                            resolver: OrderResolver) -> OrdersResult:
    result = OrdersResult()
    for order in data.orders:
        location_id = location_map.get(order.store_id)
        if not location_id:
            logger.debug(f"Skipping DoorDash order {order.external_delivery_id}: unknown store {order.store_id}")
            continue
        process_doordash_order(order, location_id, resolver, result)

    logger.info(
        f"DoorDash: {len(result.orders)} orders, {len(result.order_items)} items, "
        f"{len(result.payments)} payments"
    )
    return result
