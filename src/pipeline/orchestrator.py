"""
Preprocessing orchestrator: vendor payloads in, one NormalizedData bundle out.
"""

from typing import List, Sequence

from src.matching.context import MatchingContext
from src.models.canonical import NormalizedData, SourceSystem
from src.models.catalog import CatalogResult
from src.models.config import LocationConfig
from src.models.sources import SourceData
from src.pipeline.build_catalog import CATALOG_SOURCE_ORDER, build_unified_catalog
from src.pipeline.build_locations import build_locations
from src.pipeline.process_doordash import process_doordash_orders
from src.pipeline.process_square import process_square_orders
from src.pipeline.process_toast import process_toast_orders
from src.pipeline.resolution import AliasRecorder, OrderResolver
from src.utils.logging_config import logger


def record_catalog_aliases(sources: SourceData, catalog: CatalogResult, aliases: AliasRecorder) -> None:
    """Every Square catalog item is an alias of the product it was grouped into."""
    for obj in sources.square.catalog.item_objects():
        product_id = catalog.product_map.get(obj.id)
        if product_id:
            aliases.record(product_id, obj.item_data.name, SourceSystem.SQUARE)


def preprocess_data(
    sources: SourceData,
    location_configs: List[LocationConfig],
    context: MatchingContext,
    source_order: Sequence[SourceSystem] = CATALOG_SOURCE_ORDER,
) -> NormalizedData:
    """
    Runs the full reconciliation for one batch.

    Stages: locations, catalog, Square catalog aliases, then Toast, DoorDash
    and Square orders. Output collections keep that vendor order.
    """
    locations, location_map = build_locations(sources, location_configs)
    catalog = build_unified_catalog(sources, context, source_order)

    aliases = AliasRecorder()
    record_catalog_aliases(sources, catalog, aliases)
    resolver = OrderResolver(catalog, context, aliases)

    toast = process_toast_orders(sources.toast, location_map, resolver)
    doordash = process_doordash_orders(sources.doordash, location_map, resolver)
    square = process_square_orders(sources.square, location_map, resolver)

    normalized = NormalizedData(
        locations=locations,
        categories=catalog.categories,
        products=catalog.products,
        product_variations=catalog.product_variations,
        product_aliases=aliases.aliases,
        orders=toast.orders + doordash.orders + square.orders,
        order_items=toast.order_items + doordash.order_items + square.order_items,
        payments=toast.payments + doordash.payments + square.payments,
    )
    logger.info(f"Preprocessing complete: {normalized.counts}")
    return normalized
