"""
Canonical data models produced by the reconciliation pipeline.

Every record carries a generated identifier and a raw_data passthrough of the
vendor record it came from, so lineage survives normalization. Money is held
in integer cents throughout.
"""

import uuid
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Dict, Any

from pydantic import BaseModel, Field, field_validator

from src.utils.logging_config import logger


def new_id() -> str:
    """Generates a record identifier."""
    return str(uuid.uuid4())


class SourceSystem(str, Enum):
    """Vendor feeds the pipeline reconciles."""
    TOAST = "toast"
    DOORDASH = "doordash"
    SQUARE = "square"


class VariationType(str, Enum):
    """Kinds of product differentiators."""
    QUANTITY = "quantity"
    SIZE = "size"
    SERVING = "serving"
    STRENGTH = "strength"
    SEMANTIC = "semantic"  # label assigned by a configured product group


class PaymentType(str, Enum):
    """Canonical payment vocabulary shared by all vendors."""
    CREDIT = "credit"
    CASH = "cash"
    WALLET = "wallet"
    DOORDASH = "doordash"
    OTHER = "other"


class Location(BaseModel):
    """A physical restaurant with one identifier per vendor."""
    id: str = Field(default_factory=new_id)
    name: str
    address: Optional[Dict[str, Optional[str]]] = None
    timezone: str = "America/New_York"
    toast_id: Optional[str] = None
    doordash_id: Optional[str] = None
    square_id: Optional[str] = None
    raw_data: Dict[str, Any] = Field(default_factory=dict)


class Category(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str
    raw_data: Dict[str, Any] = Field(default_factory=dict)


class Product(BaseModel):
    """A canonical menu item that a family of raw vendor names resolves to."""
    id: str = Field(default_factory=new_id)
    name: str
    category_id: Optional[str] = None
    description: Optional[str] = None
    raw_data: Dict[str, Any] = Field(default_factory=dict)


class ProductVariation(BaseModel):
    id: str = Field(default_factory=new_id)
    product_id: str
    name: str
    variation_type: Optional[VariationType] = None
    source_raw_name: Optional[str] = None
    raw_data: Dict[str, Any] = Field(default_factory=dict)


class ProductAlias(BaseModel):
    """Evidence that a raw vendor string resolves to a product."""
    id: str = Field(default_factory=new_id)
    product_id: str
    raw_name: str
    source: SourceSystem
    raw_data: Dict[str, Any] = Field(default_factory=dict)


class OrderItem(BaseModel):
    """
    A single line of an order. product_id and variation_id stay None when no
    canonical match was found; original_name is always kept verbatim.
    """
    id: str = Field(default_factory=new_id)
    order_id: str
    product_id: Optional[str] = None
    variation_id: Optional[str] = None
    original_name: str
    quantity: Decimal = Field(default=Decimal('1'))
    unit_price_cents: int
    total_price_cents: int
    tax_cents: Optional[int] = None
    modifiers: List[Dict[str, Any]] = Field(default_factory=list)
    special_instructions: Optional[str] = None
    raw_data: Dict[str, Any] = Field(default_factory=dict)


class Order(BaseModel):
    """One vendor order, tagged with its source and owning location."""
    id: str = Field(default_factory=new_id)
    source: SourceSystem
    source_order_id: str
    location_id: str
    order_type: str
    channel: str
    status: Optional[str] = None
    created_at: Optional[str] = None
    closed_at: Optional[str] = None
    subtotal_cents: int = 0
    tax_cents: int = 0
    tip_cents: int = 0
    delivery_fee_cents: Optional[int] = None
    service_fee_cents: Optional[int] = None
    commission_cents: Optional[int] = None
    total_cents: int = 0
    contains_alcohol: Optional[bool] = None
    is_catering: Optional[bool] = None
    raw_data: Dict[str, Any] = Field(default_factory=dict)

    @field_validator('total_cents')
    @classmethod
    def validate_total_consistency(cls, v, info):
        """Cross-references the order total with its component parts."""
        data = info.data
        if not data:
            return v

        calculated = (
            data.get('subtotal_cents', 0)
            + data.get('tax_cents', 0)
            + (data.get('delivery_fee_cents') or 0)
            + (data.get('service_fee_cents') or 0)
        )
        tip = data.get('tip_cents', 0)

        # Some vendors fold the tip into the total and some do not
        if abs(v - calculated) > 100 and abs(v - calculated - tip) > 100:
            logger.warning(
                f"Financial mismatch detected in {data.get('source')} order "
                f"{data.get('source_order_id')}: found {v}, expected {calculated} (+{tip} tip)"
            )
        return v


class Payment(BaseModel):
    id: str = Field(default_factory=new_id)
    order_id: str
    source_payment_id: Optional[str] = None
    payment_type: PaymentType = PaymentType.OTHER
    card_brand: Optional[str] = None
    last_four: Optional[str] = None
    amount_cents: int
    tip_cents: int = 0
    processing_fee_cents: Optional[int] = None
    created_at: Optional[str] = None
    raw_data: Dict[str, Any] = Field(default_factory=dict)


class NormalizedData(BaseModel):
    """The bundle handed to persistence and to the integrity check."""
    locations: List[Location] = Field(default_factory=list)
    categories: List[Category] = Field(default_factory=list)
    products: List[Product] = Field(default_factory=list)
    product_variations: List[ProductVariation] = Field(default_factory=list)
    product_aliases: List[ProductAlias] = Field(default_factory=list)
    orders: List[Order] = Field(default_factory=list)
    order_items: List[OrderItem] = Field(default_factory=list)
    payments: List[Payment] = Field(default_factory=list)

    @property
    def counts(self) -> Dict[str, int]:
        """Record count per collection."""
        return {name: len(getattr(self, name)) for name in type(self).model_fields}
