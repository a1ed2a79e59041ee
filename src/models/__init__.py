"""
Data models for POS reconciliation.
"""

from .canonical import (
    Category,
    Location,
    NormalizedData,
    Order,
    OrderItem,
    Payment,
    PaymentType,
    Product,
    ProductAlias,
    ProductVariation,
    SourceSystem,
    VariationType,
    new_id,
)
from .catalog import (
    CatalogResult,
    DataIntegrityResult,
    IntegritySummary,
    OrdersResult,
    PreprocessedData,
    PreprocessResult,
    ProductGroupResult,
    RawProductItem,
    SourceCounts,
    SourceVariation,
)
from .config import (
    LocationConfig,
    LocationsConfig,
    ProductGroupConfig,
    ProductGroupsConfig,
    VariationPatternConfig,
    VariationPatternsConfig,
)
from .sources import DoorDashData, SourceData, SquareData, ToastData

__all__ = [
    "Category", "Location", "NormalizedData", "Order", "OrderItem", "Payment",
    "PaymentType", "Product", "ProductAlias", "ProductVariation", "SourceSystem",
    "VariationType", "new_id",
    "CatalogResult", "DataIntegrityResult", "IntegritySummary", "OrdersResult",
    "PreprocessedData", "PreprocessResult", "ProductGroupResult", "RawProductItem", "SourceCounts",
    "SourceVariation",
    "LocationConfig", "LocationsConfig", "ProductGroupConfig", "ProductGroupsConfig",
    "VariationPatternConfig", "VariationPatternsConfig",
    "DoorDashData", "SourceData", "SquareData", "ToastData",
]
