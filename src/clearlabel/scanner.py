"""
ClearLabel - barcode product lookup
Looks a barcode up in the food, beauty and pet-food catalogs and builds the
product record the health engine works on
"""

import re
import logging
from collections import OrderedDict
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Tuple

from pydantic import ValidationError

from .catalog import CatalogClient, CatalogError, CatalogProduct
from .config import Config
from .models import Ingredient, ProductCategory, ScannedProduct
from .scoring import calculate_health_rating

logger = logging.getLogger(__name__)

# (source name, base URL, category), tried in order
PRODUCT_SOURCES = [
    ('openFoodFacts', Config.FOOD_CATALOG_URL, ProductCategory.FOOD),
    ('openBeautyFacts', Config.BEAUTY_CATALOG_URL, ProductCategory.COSMETICS),
    ('openPetFoodFacts', Config.PET_FOOD_CATALOG_URL, ProductCategory.PET_FOOD),
]


class ProductCache:
    """Bounded, expiring in-memory product cache; oldest entry evicted first"""

    def __init__(self, max_size: int = None, ttl: timedelta = None, clock=datetime.now):
        self.max_size = max_size or Config.CACHE_MAX_SIZE
        self.ttl = ttl or timedelta(days=Config.CACHE_TTL_DAYS)
        self.clock = clock
        self._entries: "OrderedDict[str, Tuple[ScannedProduct, datetime]]" = OrderedDict()

    def __len__(self):
        return len(self._entries)

    def get(self, barcode: str) -> Optional[ScannedProduct]:
        entry = self._entries.get(barcode)
        if entry is None:
            return None

        product, stored_at = entry
        if self.clock() - stored_at >= self.ttl:
            del self._entries[barcode]
            return None
        return product

    def put(self, barcode: str, product: ScannedProduct):
        if barcode in self._entries:
            del self._entries[barcode]
        elif len(self._entries) >= self.max_size:
            self._entries.popitem(last=False)
        self._entries[barcode] = (product, self.clock())


def split_ingredients(text: Optional[str]) -> List[str]:
    """Split an ingredient list on commas outside parentheses"""
    if not text:
        return []

    cleaned = re.sub(r'[\n•]', ',', text).replace('*', '')
    parts = []
    current = ''
    depth = 0
    for char in cleaned:
        if char == '(':
            depth += 1
        elif char == ')':
            depth = max(depth - 1, 0)
        elif char == ',' and depth == 0:
            if current.strip():
                parts.append(current.strip())
            current = ''
            continue
        current += char

    if current.strip():
        parts.append(current.strip())
    return parts


def flag_ingredients(names: List[str], avoid_terms: Iterable[str]) -> List[Ingredient]:
    """Mark ingredients that mention any of the user's avoided terms"""
    avoid = [t.strip().lower() for t in avoid_terms if t and t.strip()]
    ingredients = []
    for name in names:
        lowered = name.lower()
        reasons = [term for term in avoid if term in lowered]
        ingredients.append(Ingredient(name=name, is_flagged=bool(reasons), flag_reasons=reasons))
    return ingredients


def build_product(raw: CatalogProduct, barcode: str, source: str, category: ProductCategory,
                  avoid_terms: Iterable[str] = ()) -> ScannedProduct:
    additives = raw.additives
    return ScannedProduct(
        barcode=raw.code or barcode,
        name=raw.display_name,
        brand=raw.brands or None,
        category=category,
        categories=raw.categories,
        quantity=raw.quantity,
        image_url=raw.image_front_url or raw.image_url,
        nutriscore_grade=raw.grade,
        nova_group=raw.nova_group,
        ingredients=flag_ingredients(split_ingredients(raw.ingredients), avoid_terms),
        additives=additives,
        allergens=raw.allergen_list,
        health_rating=calculate_health_rating(raw.grade, raw.nova_group, len(additives)),
        data_source=source,
        scanned_at=datetime.now()
    )


class ProductScanner:
    """Barcode lookup with an injected cache"""

    def __init__(self, catalog: Optional[CatalogClient] = None, cache: Optional[ProductCache] = None):
        self.catalog = catalog or CatalogClient()
        self.cache = cache if cache is not None else ProductCache()

    def scan_barcode(self, barcode: str, avoid_terms: Iterable[str] = ()) -> Optional[ScannedProduct]:
        """
        Look up product information by barcode

        Args:
            barcode: UPC/EAN barcode string
            avoid_terms: ingredients the user wants flagged

        Returns:
            ScannedProduct or None
        """
        logger.info(f"Scanning barcode: {barcode}")

        cached = self.cache.get(barcode)
        if cached:
            logger.info(f"Cache hit for barcode: {barcode}")
            return cached

        for source, base_url, category in PRODUCT_SOURCES:
            product = self._lookup(barcode, source, base_url, category, avoid_terms)
            if product:
                self.cache.put(barcode, product)
                return product

        logger.info(f"Barcode {barcode} not found in any catalog")
        return None

    def _lookup(self, barcode, source, base_url, category, avoid_terms) -> Optional[ScannedProduct]:
        url = f"{base_url}{Config.PRODUCT_PATH.format(barcode=barcode)}"
        try:
            data = self.catalog.get_json(url)
        except CatalogError as e:
            if e.status != 404:
                logger.error(f"{source} lookup failed: {e}")
            return None

        if data.get('status') != 1 or not data.get('product'):
            return None

        try:
            raw = CatalogProduct.model_validate(data['product'])
        except ValidationError as e:
            logger.error(f"{source} returned an unreadable record for {barcode}: {e}")
            return None
        return build_product(raw, barcode, source, category, avoid_terms)
