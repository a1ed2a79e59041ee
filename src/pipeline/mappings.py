"""
Vendor vocabulary to canonical vocabulary: order types, channels, payment
types and card brands.
"""

from typing import Optional

from src.models.canonical import PaymentType

TOAST_ORDER_TYPES = {
    'DINE_IN': 'dine_in',
    'TAKE_OUT': 'takeout',
    'DELIVERY': 'delivery',
}

TOAST_CHANNELS = {
    'POS': 'pos',
    'ONLINE': 'online',
    'THIRD_PARTY': 'third_party',
}

DOORDASH_ORDER_TYPES = {
    'MERCHANT_DELIVERY': 'delivery',
    'PICKUP': 'pickup',
}

SQUARE_ORDER_TYPES = {
    'DINE_IN': 'dine_in',
    'PICKUP': 'pickup',
    'DELIVERY': 'delivery',
}

PAYMENT_TYPES = {
    'CREDIT': PaymentType.CREDIT,
    'CARD': PaymentType.CREDIT,
    'CASH': PaymentType.CASH,
    'WALLET': PaymentType.WALLET,
    'DOORDASH': PaymentType.DOORDASH,
    'OTHER': PaymentType.OTHER,
}

CARD_BRANDS = {
    'VISA': 'visa',
    'MASTERCARD': 'mastercard',
    'AMEX': 'amex',
    'AMERICAN_EXPRESS': 'amex',
    'DISCOVER': 'discover',
    'APPLE_PAY': 'apple_pay',
    'GOOGLE_PAY': 'google_pay',
}


def map_toast_order_type(behavior: str) -> str:
    return TOAST_ORDER_TYPES.get(behavior, behavior.lower())


def map_toast_channel(source: str) -> str:
    return TOAST_CHANNELS.get(source, source.lower())


def map_doordash_order_type(method: str) -> str:
    return DOORDASH_ORDER_TYPES.get(method, method.lower())


def map_square_order_type(fulfillment_type: Optional[str]) -> str:
    """Square orders without fulfillments are counter sales."""
    if not fulfillment_type:
        return 'dine_in'
    return SQUARE_ORDER_TYPES.get(fulfillment_type, fulfillment_type.lower())


def map_square_channel(source_name: Optional[str]) -> str:
    if source_name and 'online' in source_name.lower():
        return 'online'
    return 'pos'


def normalize_payment_type(payment_type: Optional[str]) -> PaymentType:
    """Vendor payment type to canonical; anything unrecognized is OTHER."""
    if not payment_type:
        return PaymentType.OTHER
    return PAYMENT_TYPES.get(payment_type.upper(), PaymentType.OTHER)


def normalize_card_brand(brand: Optional[str]) -> Optional[str]:
    if not brand:
        return None
    return CARD_BRANDS.get(brand.upper(), brand.lower())
