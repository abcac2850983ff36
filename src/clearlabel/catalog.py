"""
ClearLabel - product catalog client
Searches the Open Food Facts family of databases for alternative candidates
"""

import logging
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field
from concurrent.futures import ThreadPoolExecutor

import requests
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .config import Config
from .models import CandidateProduct, NutriScoreGrade, ProductCategory

logger = logging.getLogger(__name__)

UNKNOWN_PRODUCT_NAME = "Unknown Product"


class CatalogRetryable(Exception):
    """Used to mark transient responses for retry."""
    pass


class CatalogError(Exception):
    """A catalog request that could not be completed"""

    TIMEOUT = 'timeout'
    NETWORK = 'network'
    RETRY_EXHAUSTED = 'retry_exhausted'
    HTTP_STATUS = 'http_status'
    BAD_RESPONSE = 'bad_response'

    def __init__(self, message: str, code: str, status: Optional[int] = None):
        super().__init__(message)
        self.code = code
        self.status = status


def _strip_lang_prefix(tag: str) -> str:
    tag = tag.strip()
    if len(tag) > 3 and tag[2] == ':':
        return tag[3:]
    return tag


class CatalogProduct(BaseModel):
    """Raw product record as returned by the catalog"""
    model_config = ConfigDict(extra='ignore')

    code: Optional[str] = None
    product_name: Optional[str] = None
    product_name_en: Optional[str] = None
    brands: Optional[str] = None
    categories: Optional[str] = None
    quantity: Optional[str] = None
    product_quantity: Optional[float] = None
    product_quantity_unit: Optional[str] = None
    image_front_url: Optional[str] = None
    image_url: Optional[str] = None
    nutriscore_grade: Optional[str] = None
    nutrition_grades: Optional[str] = None
    nova_group: Optional[int] = None
    additives_tags: List[str] = Field(default_factory=list)
    allergens: Optional[str] = None
    allergens_from_ingredients: Optional[str] = None
    ingredients_text: Optional[str] = None
    ingredients_text_en: Optional[str] = None

    @field_validator('code', mode='before')
    @classmethod
    def _code_as_text(cls, value):
        if value is None:
            return None
        return str(value).strip() or None

    @field_validator('nova_group', mode='before')
    @classmethod
    def _valid_nova(cls, value):
        try:
            nova = int(value)
        except (TypeError, ValueError):
            return None
        return nova if nova in (1, 2, 3, 4) else None

    @field_validator('product_quantity', mode='before')
    @classmethod
    def _numeric_quantity(cls, value):
        try:
            return float(value)
        except (TypeError, ValueError):
            return None

    @field_validator('additives_tags', mode='before')
    @classmethod
    def _tags_list(cls, value):
        return value or []

    @property
    def display_name(self) -> str:
        return self.product_name_en or self.product_name or UNKNOWN_PRODUCT_NAME

    @property
    def grade(self) -> Optional[NutriScoreGrade]:
        # nutrition_grades is the older field name
        return NutriScoreGrade.parse(self.nutriscore_grade) or NutriScoreGrade.parse(self.nutrition_grades)

    @property
    def additives(self) -> List[str]:
        return [_strip_lang_prefix(tag) for tag in self.additives_tags if tag]

    @property
    def allergen_list(self) -> List[str]:
        text = self.allergens_from_ingredients or self.allergens or ''
        return [_strip_lang_prefix(a) for a in text.split(',') if a.strip()]

    @property
    def ingredients(self) -> Optional[str]:
        return self.ingredients_text_en or self.ingredients_text

    def to_candidate(self) -> CandidateProduct:
        return CandidateProduct(
            barcode=self.code or '',
            name=self.display_name,
            brand=self.brands or None,
            image_url=self.image_front_url or self.image_url,
            nutriscore_grade=self.grade,
            nova_group=self.nova_group,
            additive_count=len(self.additives),
            quantity=self.quantity
        )


@dataclass
class CandidatePool:
    """Merged search results, in term order then response order"""
    candidates: List[CandidateProduct] = field(default_factory=list)
    failed_terms: List[str] = field(default_factory=list)
    searched_terms: List[str] = field(default_factory=list)

    @property
    def all_failed(self) -> bool:
        return bool(self.searched_terms) and len(self.failed_terms) == len(self.searched_terms)


def catalog_base_url(category: ProductCategory) -> str:
    if category == ProductCategory.PET_FOOD:
        return Config.PET_FOOD_CATALOG_URL
    return Config.FOOD_CATALOG_URL


class CatalogClient:
    """
    HTTP client for catalog reads

    Every request is bounded by a timeout and retried with exponential
    backoff. Only GET requests are issued.
    """

    def __init__(self,
                 session: Optional[requests.Session] = None,
                 timeout: float = None,
                 retries: int = None,
                 backoff: float = None,
                 page_size: int = None,
                 max_workers: int = 4):
        self.session = session or requests.Session()
        self.timeout = Config.CATALOG_TIMEOUT if timeout is None else timeout
        self.retries = Config.CATALOG_RETRIES if retries is None else retries
        self.backoff = Config.CATALOG_BACKOFF if backoff is None else backoff
        self.page_size = page_size or Config.CATALOG_PAGE_SIZE
        self.max_workers = max_workers
        self.headers = {'User-Agent': Config.USER_AGENT}

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self.retries + 1),
            wait=wait_exponential(multiplier=self.backoff),
            retry=retry_if_exception_type((CatalogRetryable, requests.Timeout, requests.ConnectionError)),
            before_sleep=before_sleep_log(logger, logging.INFO),
            reraise=True
        )

    def get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        GET a JSON document

        Raises:
            CatalogError: on timeout, connection failure, non-2xx status
                or a body that is not a JSON object
        """
        try:
            for attempt in self._retrying():
                with attempt:
                    response = self.session.get(url, params=params, headers=self.headers, timeout=self.timeout)
                    if response.status_code in Config.RETRYABLE_STATUSES:
                        raise CatalogRetryable(f"HTTP {response.status_code} from {url}")
        except CatalogRetryable as e:
            raise CatalogError(f"Request failed after {self.retries + 1} attempts: {e}",
                               CatalogError.RETRY_EXHAUSTED) from e
        except requests.Timeout as e:
            raise CatalogError(f"Request timed out after {self.timeout}s", CatalogError.TIMEOUT) from e
        except requests.RequestException as e:
            raise CatalogError(f"Network request failed: {e}", CatalogError.NETWORK) from e

        if not 200 <= response.status_code < 300:
            raise CatalogError(f"HTTP {response.status_code} from {url}",
                               CatalogError.HTTP_STATUS, status=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise CatalogError(f"Invalid JSON from {url}", CatalogError.BAD_RESPONSE) from e

        if not isinstance(data, dict):
            raise CatalogError(f"Unexpected payload from {url}", CatalogError.BAD_RESPONSE)

        return data

    def _search(self, term: str, category: ProductCategory) -> List[CandidateProduct]:
        url = f"{catalog_base_url(category)}{Config.SEARCH_PATH}"
        params = {
            'search_terms': term,
            'search_simple': 1,
            'action': 'process',
            'json': 1,
            'page_size': self.page_size,
            'sort_by': 'nutriscore_score',
        }

        data = self.get_json(url, params=params)

        products = data.get('products') or []
        if not isinstance(products, list):
            raise CatalogError(f"Unexpected products payload from {url}", CatalogError.BAD_RESPONSE)

        candidates = []
        for raw in products:
            try:
                candidates.append(CatalogProduct.model_validate(raw).to_candidate())
            except ValidationError as e:
                logger.debug(f"Skipping malformed catalog record: {e}")

        logger.info(f"Catalog search {term!r} returned {len(candidates)} products")
        return candidates

    def search(self, term: str, category: ProductCategory = ProductCategory.FOOD) -> List[CandidateProduct]:
        """
        Search the catalog for one term

        Returns:
            Candidate records; an empty list when the search fails
        """
        try:
            return self._search(term, category)
        except CatalogError as e:
            logger.warning(f"Catalog search failed for {term!r} ({e.code}): {e}")
            return []

    def fetch_candidates(self, terms: List[str],
                         category: ProductCategory = ProductCategory.FOOD) -> CandidatePool:
        """Search every term concurrently and merge in term order"""
        pool = CandidatePool(searched_terms=list(terms))
        if not terms:
            return pool

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(terms))) as executor:
            futures = [executor.submit(self._search, term, category) for term in terms]

        for term, future in zip(terms, futures):
            try:
                pool.candidates.extend(future.result())
            except CatalogError as e:
                logger.warning(f"Catalog search failed for {term!r} ({e.code}): {e}")
                pool.failed_terms.append(term)

        return pool
