"""
Catalog Builder - resolves raw menu items from all vendors into canonical
products, variations and categories.

Stages:
1. Collection: each vendor is projected into RawProductItem records,
   deduplicated within the vendor by normalized name.
2. Grouping: configured product groups first, edit-distance clustering of
   normalized base names otherwise.
3. Materialization: one Product per group, variations canonicalized per
   product, and the lookup maps the order normalizers resolve against.

Collection order matters: grouping is a single ordered pass, so the same
batch processed in another vendor order can cluster differently.
"""

from typing import Callable, Dict, List, Optional, Sequence, Tuple

from src.matching.context import MatchingContext
from src.matching.levenshtein import levenshtein
from src.models.canonical import (
    Category,
    Product,
    ProductVariation,
    SourceSystem,
    VariationType,
    new_id,
)
from src.models.catalog import CatalogResult, ProductGroupResult, RawProductItem, SourceVariation
from src.models.sources import SourceData
from src.utils.logging_config import logger
from src.utils.normalization import category_key, normalize_category, normalize_product_name

CATALOG_SOURCE_ORDER: Tuple[SourceSystem, ...] = (
    SourceSystem.SQUARE,
    SourceSystem.TOAST,
    SourceSystem.DOORDASH,
)

# Maximum edit distance between normalized base names to join a group
GROUP_SIMILARITY_THRESHOLD = 3
# Maximum edit distance between two spellings of one product's variation
VARIATION_SIMILARITY_THRESHOLD = 2


class CategoryCollector:
    """First-write-wins category registry keyed by normalized name."""

    def __init__(self):
        self.entries: Dict[str, Dict[str, Optional[str]]] = {}

    def add(self, raw_name: str, square_id: Optional[str] = None) -> Optional[str]:
        """Registers a category and returns its key (None for blank names)."""
        key = category_key(raw_name)
        if not key:
            return None
        if key not in self.entries:
            self.entries[key] = {
                'name': normalize_category(raw_name),
                'square_id': square_id,
                'raw_name': raw_name,
            }
        return key


class ItemCollector:
    """Collects raw items of one vendor, first occurrence of a name wins."""

    def __init__(self, context: MatchingContext, source: SourceSystem):
        self.context = context
        self.source = source
        self.items: List[RawProductItem] = []
        self._by_name: Dict[str, RawProductItem] = {}

    def add(self, name: str, source_id: Optional[str] = None, **fields) -> Optional[RawProductItem]:
        key = normalize_product_name(name)
        if not key:
            return None

        existing = self._by_name.get(key)
        if existing:
            if source_id and source_id != existing.source_id and source_id not in existing.alternate_ids:
                existing.alternate_ids.append(source_id)
            existing.source_variations.extend(fields.get('source_variations') or [])
            return None

        extraction = self.context.extract_variation(name)
        item = RawProductItem(
            source=self.source,
            source_id=source_id,
            original_name=name,
            base_name=extraction.base_name or name.strip(),
            extracted_variation=extraction.variation,
            extracted_variation_type=extraction.variation_type,
            **fields,
        )
        self._by_name[key] = item
        self.items.append(item)
        return item


def collect_square(sources: SourceData, context: MatchingContext,
                   categories: CategoryCollector) -> List[RawProductItem]:
    catalog = sources.square.catalog
    for obj in catalog.category_objects():
        categories.add(obj.category_data.name, square_id=obj.id)

    collector = ItemCollector(context, SourceSystem.SQUARE)
    for obj in catalog.item_objects():
        item_data = obj.item_data
        collector.add(
            item_data.name,
            source_id=obj.id,
            category_ref=item_data.category_id,
            description=item_data.description,
            source_variations=[
                SourceVariation(id=v.id, name=v.item_variation_data.name)
                for v in item_data.variations
            ],
            raw_data=obj.raw(),
        )
    return collector.items


def collect_toast(sources: SourceData, context: MatchingContext,
                  categories: CategoryCollector) -> List[RawProductItem]:
    collector = ItemCollector(context, SourceSystem.TOAST)
    for order in sources.toast.orders:
        if not order.is_active:
            continue
        for check in order.checks:
            if not check.is_active:
                continue
            for selection in check.selections:
                if selection.voided:
                    continue

                category_ref = None
                if selection.itemGroup and selection.itemGroup.name:
                    category_ref = categories.add(selection.itemGroup.name)

                collector.add(
                    selection.displayName,
                    source_id=selection.item.guid if selection.item else selection.guid,
                    category_ref=category_ref,
                    raw_data={'guid': selection.guid, 'displayName': selection.displayName},
                )
    return collector.items


def collect_doordash(sources: SourceData, context: MatchingContext,
                     categories: CategoryCollector) -> List[RawProductItem]:
    collector = ItemCollector(context, SourceSystem.DOORDASH)
    for order in sources.doordash.orders:
        for item in order.order_items:
            category_ref = categories.add(item.category) if item.category else None
            collector.add(
                item.name,
                source_id=item.item_id,
                category_ref=category_ref,
                raw_data={'item_id': item.item_id, 'name': item.name},
            )
    return collector.items


COLLECTORS: Dict[SourceSystem, Callable[[SourceData, MatchingContext, CategoryCollector], List[RawProductItem]]] = {
    SourceSystem.SQUARE: collect_square,
    SourceSystem.TOAST: collect_toast,
    SourceSystem.DOORDASH: collect_doordash,
}


def validate_source_order(source_order: Sequence[SourceSystem]) -> Tuple[SourceSystem, ...]:
    """Source order must be an ordered sequence naming every vendor exactly once."""
    if isinstance(source_order, (set, frozenset)) or not isinstance(source_order, (list, tuple)):
        raise ValueError("source_order must be an ordered list or tuple of sources")

    order = tuple(SourceSystem(source) for source in source_order)
    if len(order) != len(COLLECTORS) or set(order) != set(COLLECTORS):
        raise ValueError(
            f"source_order must name each of {', '.join(s.value for s in COLLECTORS)} exactly once"
        )
    return order


def pick_canonical_name(names: List[str]) -> str:
    """
    Best display name among group members: properly capitalized first,
    then the longest. Ties keep member order.
    """
    def sort_key(name: str):
        proper = bool(name) and name[0] == name[0].upper()
        return (not proper, -len(name))

    return sorted(names, key=sort_key)[0]


def _absorb_details(group: ProductGroupResult, item: RawProductItem) -> None:
    if not group.description and item.description:
        group.description = item.description
    if not group.category_ref and item.category_ref:
        group.category_ref = item.category_ref


def group_products(items: List[RawProductItem], context: MatchingContext) -> List[ProductGroupResult]:
    """Assigns every raw item to exactly one product group, in input order."""
    groups: List[ProductGroupResult] = []
    configured: Dict[str, ProductGroupResult] = {}
    # normalized base name of each clustered group's current canonical name
    cluster_keys: Dict[int, str] = {}

    for item in items:
        group_match = context.match_group(item.original_name)

        if group_match:
            if group_match.variation_name:
                item.extracted_variation = group_match.variation_name
                item.extracted_variation_type = VariationType.SEMANTIC

            group_key = group_match.base_name.lower()
            group = configured.get(group_key)
            if group:
                group.items.append(item)
                _absorb_details(group, item)
            else:
                group = ProductGroupResult(
                    canonical_name=group_match.base_name,
                    items=[item],
                    category_ref=item.category_ref,
                    description=item.description,
                    is_configured=True,
                )
                configured[group_key] = group
                groups.append(group)
            logger.debug(f"'{item.original_name}' -> configured group '{group.canonical_name}'")
            continue

        normalized = context.normalized_base_name(item.original_name)

        joined = None
        for index, group in enumerate(groups):
            if group.is_configured:
                continue
            distance = levenshtein(normalized, cluster_keys[index], max_distance=GROUP_SIMILARITY_THRESHOLD)
            if distance <= GROUP_SIMILARITY_THRESHOLD:
                joined = index
                break

        if joined is not None:
            group = groups[joined]
            group.items.append(item)
            group.canonical_name = pick_canonical_name([member.base_name for member in group.items])
            cluster_keys[joined] = context.normalized_base_name(group.canonical_name)
            _absorb_details(group, item)
            logger.debug(f"'{item.original_name}' joined '{group.canonical_name}'")
        else:
            groups.append(ProductGroupResult(
                canonical_name=item.base_name,
                items=[item],
                category_ref=item.category_ref,
                description=item.description,
            ))
            cluster_keys[len(groups) - 1] = context.normalized_base_name(item.base_name)

    return groups


class VariationCatalog:
    """
    Variations of every product, with near-duplicate spellings collapsed.

    Two spellings within VARIATION_SIMILARITY_THRESHOLD edits of each other are
    one variation; the longer spelling is kept as its name.
    """

    def __init__(self):
        self.variations: List[ProductVariation] = []
        self.variation_map: Dict[str, str] = {}
        # product id -> lower-cased canonical name -> variation; raw vendor
        # spellings only ever reach variation_map
        self._canonical: Dict[str, Dict[str, ProductVariation]] = {}

    def add(self, product_id: str, name: str, variation_type: Optional[VariationType],
            source_raw_name: str, raw_data: Dict, extra_spellings: Sequence[str] = ()) -> ProductVariation:
        canonical = self._canonical.setdefault(product_id, {})
        lowered = name.lower()

        variation = canonical.get(lowered)
        if variation is None:
            for existing_lower, existing in canonical.items():
                if levenshtein(lowered, existing_lower, max_distance=VARIATION_SIMILARITY_THRESHOLD) \
                        <= VARIATION_SIMILARITY_THRESHOLD:
                    variation = existing
                    if len(name) > len(existing.name):
                        logger.debug(f"Variation '{existing.name}' renamed to '{name}'")
                        del canonical[existing_lower]
                        existing.name = name
                        canonical[lowered] = existing
                    break

        if variation is None:
            variation = ProductVariation(
                id=new_id(),
                product_id=product_id,
                name=name,
                variation_type=variation_type,
                source_raw_name=source_raw_name,
                raw_data=raw_data,
            )
            self.variations.append(variation)
            canonical[lowered] = variation

        for spelling in (name, variation.name, *extra_spellings):
            if not spelling:
                continue
            self.variation_map.setdefault(f"{product_id}:{spelling.lower()}", variation.id)
        return variation


def build_unified_catalog(
    sources: SourceData,
    context: MatchingContext,
    source_order: Sequence[SourceSystem] = CATALOG_SOURCE_ORDER,
) -> CatalogResult:
    """Builds categories, products, variations and lookup maps for one batch."""
    order = validate_source_order(source_order)

    category_collector = CategoryCollector()
    raw_items: List[RawProductItem] = []
    for source in order:
        collected = COLLECTORS[source](sources, context, category_collector)
        logger.debug(f"Collected {len(collected)} distinct {source.value} items")
        raw_items.extend(collected)

    categories: List[Category] = []
    category_map: Dict[str, str] = {}
    for key, info in category_collector.entries.items():
        category = Category(id=new_id(), name=info['name'], raw_data={'key': key, **info})
        categories.append(category)
        category_map[key] = category.id
        if info['square_id']:
            category_map[info['square_id']] = category.id

    groups = group_products(raw_items, context)

    products: List[Product] = []
    product_map: Dict[str, str] = {}
    variations = VariationCatalog()

    for group in groups:
        product = Product(
            id=new_id(),
            name=group.canonical_name,
            category_id=category_map.get(group.category_ref) if group.category_ref else None,
            description=group.description,
            raw_data={'items': [
                {'source': item.source.value, 'source_id': item.source_id, 'original_name': item.original_name}
                for item in group.items
            ]},
        )
        products.append(product)
        product_map.setdefault(normalize_product_name(group.canonical_name), product.id)

        for item in group.items:
            for vendor_id in (item.source_id, *item.alternate_ids):
                if vendor_id:
                    product_map.setdefault(vendor_id, product.id)
            product_map.setdefault(normalize_product_name(item.original_name), product.id)
            product_map.setdefault(normalize_product_name(item.base_name), product.id)

            if item.extracted_variation:
                normalized, normalized_type = context.normalize_variation_name(item.extracted_variation)
                if normalized:
                    variations.add(
                        product.id,
                        normalized,
                        normalized_type or item.extracted_variation_type,
                        source_raw_name=item.original_name,
                        raw_data={
                            'source': item.source.value,
                            'source_id': item.source_id,
                            'original_name': item.original_name,
                            'extracted_variation': item.extracted_variation,
                        },
                        extra_spellings=(item.extracted_variation,),
                    )

            for source_variation in item.source_variations:
                product_map.setdefault(source_variation.id, product.id)
                if source_variation.name.lower().strip() == 'regular':
                    continue

                extraction = context.extract_variation(source_variation.name)
                raw_name = extraction.variation or source_variation.name
                normalized, normalized_type = context.normalize_variation_name(raw_name)
                if not normalized:
                    continue
                variations.add(
                    product.id,
                    normalized,
                    normalized_type or extraction.variation_type,
                    source_raw_name=f"{item.original_name} - {source_variation.name}",
                    raw_data={
                        'source': SourceSystem.SQUARE.value,
                        'square_variation_id': source_variation.id,
                        'square_variation_name': source_variation.name,
                        'parent_item_name': item.original_name,
                    },
                    extra_spellings=(raw_name, source_variation.name),
                )

    logger.info(
        f"Catalog built: {len(categories)} categories, {len(products)} products, "
        f"{len(variations.variations)} variations from {len(raw_items)} raw items"
    )
    return CatalogResult(
        categories=categories,
        products=products,
        product_variations=variations.variations,
        product_map=product_map,
        variation_map=variations.variation_map,
        category_map=category_map,
    )
