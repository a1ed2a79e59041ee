"""
Helpers shared by the order normalizers: resolving order lines against the
catalog, recording aliases, and accumulating one order at a time.
"""

from typing import Iterable, List, Optional, Set, Tuple

from src.matching.context import MatchingContext
from src.models.canonical import Order, OrderItem, Payment, ProductAlias, SourceSystem, new_id
from src.models.catalog import CatalogResult, OrdersResult
from src.utils.logging_config import logger
from src.utils.normalization import normalize_product_name


class AliasRecorder:
    """Append-only alias list, unique by (lower-cased raw name, source)."""

    def __init__(self):
        self.aliases: List[ProductAlias] = []
        self._seen: Set[Tuple[str, SourceSystem]] = set()

    def record(self, product_id: str, raw_name: str, source: SourceSystem) -> Optional[ProductAlias]:
        key = (raw_name.lower(), source)
        if key in self._seen:
            return None
        self._seen.add(key)

        alias = ProductAlias(id=new_id(), product_id=product_id, raw_name=raw_name, source=source)
        self.aliases.append(alias)
        return alias


class OrderResolver:
    """
    Resolves raw order-line names to catalog product and variation ids.

    Resolution never fails loudly: an unresolved line keeps None references.
    """

    def __init__(self, catalog: CatalogResult, context: MatchingContext, aliases: AliasRecorder):
        self.catalog = catalog
        self.context = context
        self.aliases = aliases

    def resolve_product(self, raw_name: str, vendor_ids: Iterable[Optional[str]] = ()) -> Optional[str]:
        """Vendor ids first, then the raw name, then the pattern base name."""
        product_map = self.catalog.product_map

        for vendor_id in vendor_ids:
            if vendor_id and vendor_id in product_map:
                return product_map[vendor_id]

        name_key = normalize_product_name(raw_name)
        if name_key in product_map:
            return product_map[name_key]

        base_key = normalize_product_name(self.context.extract_variation(raw_name).base_name)
        return product_map.get(base_key)

    def variation_candidates(self, raw_name: str) -> List[str]:
        """Pattern variation first, then the configured group's label."""
        candidates = []
        extracted = self.context.extract_variation(raw_name)
        if extracted.variation:
            candidates.append(extracted.variation)

        group_match = self.context.match_group(raw_name)
        if group_match and group_match.variation_name and group_match.variation_name not in candidates:
            candidates.append(group_match.variation_name)
        return candidates

    def resolve_variation(self, product_id: str, raw_name: str,
                          variation_text: Optional[str] = None) -> Optional[str]:
        candidates = [variation_text] if variation_text else self.variation_candidates(raw_name)

        for candidate in candidates:
            normalized, _ = self.context.normalize_variation_name(candidate)
            for spelling in (candidate, normalized):
                if not spelling:
                    continue
                variation_id = self.catalog.variation_map.get(f"{product_id}:{spelling.lower()}")
                if variation_id:
                    return variation_id
        return None

    def resolve_item(
        self,
        raw_name: str,
        source: SourceSystem,
        vendor_ids: Iterable[Optional[str]] = (),
        variation_text: Optional[str] = None,
        alias_name: Optional[str] = None,
    ) -> Tuple[Optional[str], Optional[str]]:
        """
        Resolves one order line and records the alias it evidences.

        Returns:
            (product_id, variation_id), either may be None.
        """
        product_id = self.resolve_product(raw_name, vendor_ids)
        if not product_id:
            logger.debug(f"Unresolved {source.value} item '{raw_name}'")
            return None, None

        self.aliases.record(product_id, alias_name or raw_name, source)
        return product_id, self.resolve_variation(product_id, raw_name, variation_text)


class OrderAccumulator:
    """Collects the items and payments of one order before it is emitted."""

    def __init__(self, source: SourceSystem, source_order_id: str):
        self.order_id = new_id()
        self.source = source
        self.source_order_id = source_order_id
        self.items: List[OrderItem] = []
        self.payments: List[Payment] = []

    def add_item(self, **fields) -> OrderItem:
        item = OrderItem(id=new_id(), order_id=self.order_id, **fields)
        self.items.append(item)
        return item

    def add_payment(self, **fields) -> Payment:
        payment = Payment(id=new_id(), order_id=self.order_id, **fields)
        self.payments.append(payment)
        return payment

    def emit(self, result: OrdersResult, **order_fields) -> Optional[Order]:
        """Appends the order to result unless it has no items."""
        if not self.items:
            logger.debug(f"Dropping {self.source.value} order {self.source_order_id}: no items")
            return None

        order = Order(
            id=self.order_id,
            source=self.source,
            source_order_id=self.source_order_id,
            **order_fields,
        )
        result.orders.append(order)
        result.order_items.extend(self.items)
        result.payments.extend(self.payments)
        return order
