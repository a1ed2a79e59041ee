"""
Intermediate records of the catalog build and the batch result envelope.
"""

from datetime import datetime, timezone
from typing import List, Optional, Dict, Any

from pydantic import BaseModel, Field

from .canonical import (
    Category,
    NormalizedData,
    Order,
    OrderItem,
    Payment,
    Product,
    ProductVariation,
    SourceSystem,
    VariationType,
)

PREPROCESSED_VERSION = "1.0.0"


class SourceVariation(BaseModel):
    """A variation declared by the vendor itself (Square ITEM_VARIATION)."""
    id: str
    name: str


class RawProductItem(BaseModel):
    """
    A distinct menu item observed in one vendor feed, before grouping.

    Each vendor has its own projection into this shape; `source` tags which.
    """
    source: SourceSystem
    source_id: Optional[str] = None
    # further vendor ids folded into this item by name deduplication
    alternate_ids: List[str] = Field(default_factory=list)
    original_name: str
    base_name: str
    extracted_variation: Optional[str] = None
    extracted_variation_type: Optional[VariationType] = None
    category_ref: Optional[str] = None
    description: Optional[str] = None
    source_variations: List[SourceVariation] = Field(default_factory=list)
    raw_data: Dict[str, Any] = Field(default_factory=dict)


class ProductGroupResult(BaseModel):
    """Raw items judged to be the same canonical product."""
    canonical_name: str
    items: List[RawProductItem] = Field(default_factory=list)
    category_ref: Optional[str] = None
    description: Optional[str] = None
    is_configured: bool = False


class CatalogResult(BaseModel):
    categories: List[Category] = Field(default_factory=list)
    products: List[Product] = Field(default_factory=list)
    product_variations: List[ProductVariation] = Field(default_factory=list)
    # lookup key (vendor id or lower-cased name) -> product id
    product_map: Dict[str, str] = Field(default_factory=dict)
    # "<product id>:<lower-cased variation name>" -> variation id
    variation_map: Dict[str, str] = Field(default_factory=dict)
    # normalized category key or Square category id -> category id
    category_map: Dict[str, str] = Field(default_factory=dict)


class OrdersResult(BaseModel):
    """What one order normalizer emits."""
    orders: List[Order] = Field(default_factory=list)
    order_items: List[OrderItem] = Field(default_factory=list)
    payments: List[Payment] = Field(default_factory=list)


class SourceCounts(BaseModel):
    toast: int = 0
    doordash: int = 0
    square: int = 0

    @property
    def total(self) -> int:
        return self.toast + self.doordash + self.square


class IntegritySummary(BaseModel):
    source_orders: SourceCounts = Field(default_factory=SourceCounts)
    preprocessed_orders: int = 0
    source_payments: SourceCounts = Field(default_factory=SourceCounts)
    preprocessed_payments: int = 0
    orders_with_payments: int = 0
    orders_without_payments: int = 0


class DataIntegrityResult(BaseModel):
    success: bool
    warnings: List[str] = Field(default_factory=list)
    summary: IntegritySummary = Field(default_factory=IntegritySummary)


class PreprocessedData(BaseModel):
    version: str = PREPROCESSED_VERSION
    generated_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    normalized: NormalizedData
    integrity: Optional[DataIntegrityResult] = None


class PreprocessResult(BaseModel):
    success: bool
    error: Optional[str] = None
    data: Optional[PreprocessedData] = None
