"""
Vendor payload models for the three POS exports.

Field names mirror each vendor's JSON so payloads validate as-is. Unknown
fields are kept (extra="allow") because raw_data on canonical records must
retain the full original record. All money fields are integer cents.
"""

from decimal import Decimal
from typing import List, Optional, Dict, Any

from pydantic import BaseModel, ConfigDict, Field


class VendorModel(BaseModel):
    """Base for vendor records: tolerant of extra fields."""
    model_config = ConfigDict(extra="allow")

    def raw(self) -> Dict[str, Any]:
        """The record as plain JSON-compatible data, extra fields included."""
        return self.model_dump(mode="json")


# =============================================================================
# Toast
# =============================================================================

class ToastReference(VendorModel):
    guid: str
    name: Optional[str] = None


class ToastAddress(VendorModel):
    line1: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None


class ToastLocation(VendorModel):
    guid: str
    name: str
    address: Optional[ToastAddress] = None
    timezone: Optional[str] = None


class ToastModifier(VendorModel):
    guid: Optional[str] = None
    displayName: str
    price: int = 0


class ToastSelection(VendorModel):
    guid: str
    displayName: str
    itemGroup: Optional[ToastReference] = None
    item: Optional[ToastReference] = None
    quantity: Decimal = Decimal('1')
    preDiscountPrice: int = 0
    price: int = 0
    tax: int = 0
    voided: bool = False
    modifiers: List[ToastModifier] = Field(default_factory=list)


class ToastPayment(VendorModel):
    guid: str
    paidDate: Optional[str] = None
    type: str
    cardType: Optional[str] = None
    last4Digits: Optional[str] = None
    amount: int = 0
    tipAmount: int = 0
    originalProcessingFee: Optional[int] = None
    refundStatus: Optional[str] = None

    @property
    def is_fully_refunded(self) -> bool:
        return self.refundStatus == "FULL_REFUND"


class ToastCheck(VendorModel):
    guid: str
    voided: bool = False
    deleted: bool = False
    selections: List[ToastSelection] = Field(default_factory=list)
    payments: List[ToastPayment] = Field(default_factory=list)
    amount: int = 0
    taxAmount: int = 0
    totalAmount: int = 0
    tipAmount: int = 0

    @property
    def is_active(self) -> bool:
        return not (self.voided or self.deleted)


class ToastDiningOption(VendorModel):
    guid: Optional[str] = None
    name: Optional[str] = None
    behavior: str = "DINE_IN"


class ToastOrder(VendorModel):
    guid: str
    restaurantGuid: str
    openedDate: Optional[str] = None
    closedDate: Optional[str] = None
    voided: bool = False
    deleted: bool = False
    diningOption: Optional[ToastDiningOption] = None
    checks: List[ToastCheck] = Field(default_factory=list)
    source: str = "POS"

    @property
    def is_active(self) -> bool:
        return not (self.voided or self.deleted)


class ToastData(VendorModel):
    restaurant: Optional[ToastReference] = None
    locations: List[ToastLocation] = Field(default_factory=list)
    orders: List[ToastOrder] = Field(default_factory=list)


# =============================================================================
# DoorDash
# =============================================================================

class DoorDashAddress(VendorModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None


class DoorDashStore(VendorModel):
    store_id: str
    name: str
    address: Optional[DoorDashAddress] = None
    timezone: Optional[str] = None


class DoorDashOption(VendorModel):
    name: str
    price: int = 0


class DoorDashOrderItem(VendorModel):
    item_id: Optional[str] = None
    name: str
    quantity: int = 1
    unit_price: int = 0
    total_price: int = 0
    special_instructions: Optional[str] = None
    options: List[DoorDashOption] = Field(default_factory=list)
    category: Optional[str] = None


class DoorDashOrder(VendorModel):
    external_delivery_id: str
    store_id: str
    order_fulfillment_method: str = "MERCHANT_DELIVERY"
    order_status: str = "DELIVERED"
    created_at: Optional[str] = None
    pickup_time: Optional[str] = None
    delivery_time: Optional[str] = None
    order_items: List[DoorDashOrderItem] = Field(default_factory=list)
    order_subtotal: int = 0
    delivery_fee: int = 0
    service_fee: int = 0
    dasher_tip: int = 0
    tax_amount: int = 0
    total_charged_to_consumer: int = 0
    commission: int = 0
    merchant_payout: int = 0
    contains_alcohol: bool = False
    is_catering: bool = False


class DoorDashMerchant(VendorModel):
    merchant_id: Optional[str] = None
    business_name: Optional[str] = None
    currency: str = "USD"


class DoorDashData(VendorModel):
    merchant: Optional[DoorDashMerchant] = None
    stores: List[DoorDashStore] = Field(default_factory=list)
    orders: List[DoorDashOrder] = Field(default_factory=list)


# =============================================================================
# Square
# =============================================================================

class SquareMoney(VendorModel):
    amount: int = 0
    currency: str = "USD"


class SquareAddress(VendorModel):
    address_line_1: Optional[str] = None
    locality: Optional[str] = None
    administrative_district_level_1: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None


class SquareLocation(VendorModel):
    id: str
    name: str
    address: Optional[SquareAddress] = None
    timezone: Optional[str] = None


class SquareItemVariationData(VendorModel):
    item_id: Optional[str] = None
    name: str
    price_money: Optional[SquareMoney] = None


class SquareItemVariation(VendorModel):
    type: str = "ITEM_VARIATION"
    id: str
    item_variation_data: SquareItemVariationData


class SquareItemData(VendorModel):
    name: str
    description: Optional[str] = None
    category_id: Optional[str] = None
    variations: List[SquareItemVariation] = Field(default_factory=list)


class SquareCategoryData(VendorModel):
    name: str


class SquareCatalogObject(VendorModel):
    type: str
    id: str
    item_data: Optional[SquareItemData] = None
    category_data: Optional[SquareCategoryData] = None


class SquareAppliedModifier(VendorModel):
    modifier_id: Optional[str] = None


class SquareLineItem(VendorModel):
    uid: Optional[str] = None
    catalog_object_id: Optional[str] = None
    name: Optional[str] = None
    quantity: str = "1"
    total_money: SquareMoney = Field(default_factory=SquareMoney)
    applied_modifiers: List[SquareAppliedModifier] = Field(default_factory=list)


class SquareOrderSource(VendorModel):
    name: str = ""


class SquareFulfillment(VendorModel):
    type: str


class SquareOrder(VendorModel):
    id: str
    location_id: str
    source: Optional[SquareOrderSource] = None
    created_at: Optional[str] = None
    closed_at: Optional[str] = None
    state: str = "COMPLETED"
    line_items: List[SquareLineItem] = Field(default_factory=list)
    fulfillments: List[SquareFulfillment] = Field(default_factory=list)
    total_money: SquareMoney = Field(default_factory=SquareMoney)
    total_tax_money: SquareMoney = Field(default_factory=SquareMoney)
    total_tip_money: SquareMoney = Field(default_factory=SquareMoney)


class SquareCard(VendorModel):
    card_brand: Optional[str] = None
    last_4: Optional[str] = None


class SquareCardDetails(VendorModel):
    card: SquareCard = Field(default_factory=SquareCard)


class SquareWalletDetails(VendorModel):
    brand: Optional[str] = None


class SquarePayment(VendorModel):
    id: str
    order_id: str
    created_at: Optional[str] = None
    amount_money: SquareMoney = Field(default_factory=SquareMoney)
    tip_money: SquareMoney = Field(default_factory=SquareMoney)
    status: Optional[str] = None
    source_type: str = "OTHER"
    card_details: Optional[SquareCardDetails] = None
    wallet_details: Optional[SquareWalletDetails] = None


class SquareLocationsData(VendorModel):
    locations: List[SquareLocation] = Field(default_factory=list)


class SquareCatalogData(VendorModel):
    objects: List[SquareCatalogObject] = Field(default_factory=list)

    def item_objects(self) -> List[SquareCatalogObject]:
        """ITEM objects that carry item data, in catalog order."""
        return [obj for obj in self.objects if obj.type == "ITEM" and obj.item_data]

    def category_objects(self) -> List[SquareCatalogObject]:
        return [obj for obj in self.objects if obj.type == "CATEGORY" and obj.category_data]


class SquareOrdersData(VendorModel):
    orders: List[SquareOrder] = Field(default_factory=list)


class SquarePaymentsData(VendorModel):
    payments: List[SquarePayment] = Field(default_factory=list)


class SquareData(BaseModel):
    """Square ships four separate exports; they travel together."""
    locations: SquareLocationsData = Field(default_factory=SquareLocationsData)
    catalog: SquareCatalogData = Field(default_factory=SquareCatalogData)
    orders: SquareOrdersData = Field(default_factory=SquareOrdersData)
    payments: SquarePaymentsData = Field(default_factory=SquarePaymentsData)


class SourceData(BaseModel):
    """All vendor payloads for one batch run."""
    toast: ToastData = Field(default_factory=ToastData)
    doordash: DoorDashData = Field(default_factory=DoorDashData)
    square: SquareData = Field(default_factory=SquareData)
