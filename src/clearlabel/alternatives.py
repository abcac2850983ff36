"""
ClearLabel - healthier alternatives
Filters catalog candidates down to strictly healthier products and ranks them
"""

import logging
from typing import Iterable, List, Optional

from .catalog import CatalogClient, UNKNOWN_PRODUCT_NAME
from .config import Config
from .models import (
    AlternativeResult,
    CandidateProduct,
    ParsedQuantity,
    ProductHealthProfile,
    ScannedProduct,
)
from .quantity import compare_quantities, get_value_badge, parse_quantity
from .scoring import calculate_health_rating, calculate_health_score, catalog_profile
from .search_terms import get_search_terms

logger = logging.getLogger(__name__)

MAX_REASONS = 2
DEFAULT_REASON = "Healthier option"


def candidate_profile(candidate: CandidateProduct) -> ProductHealthProfile:
    return ProductHealthProfile(
        nutriscore_grade=candidate.nutriscore_grade,
        nova_group=candidate.nova_group,
        additive_count=candidate.additive_count,
    )


def improvement_reasons(candidate: CandidateProduct, original: ProductHealthProfile) -> List[str]:
    """Why the candidate is better than the original, most telling first"""
    reasons = []

    grade, original_grade = candidate.nutriscore_grade, original.nutriscore_grade
    if grade and original_grade and grade.rank < original_grade.rank:
        reasons.append(f"Better Nutri-Score ({grade.value} vs {original_grade.value})")

    nova, original_nova = candidate.nova_group, original.nova_group
    if nova and original_nova and nova < original_nova:
        reasons.append(f"Less processed (NOVA {nova} vs {original_nova})")

    if candidate.additive_count == 0:
        reasons.append("No additives")
    elif candidate.additive_count <= 2:
        reasons.append("Fewer additives")

    return reasons[:MAX_REASONS] or [DEFAULT_REASON]


def _has_display_name(candidate: CandidateProduct) -> bool:
    name = (candidate.name or '').strip()
    return bool(name) and name != UNKNOWN_PRODUCT_NAME


def rank_alternatives(original: ProductHealthProfile,
                      candidates: Iterable[CandidateProduct],
                      original_barcode: Optional[str] = None,
                      max_results: int = None,
                      original_quantity: Optional[ParsedQuantity] = None) -> List[AlternativeResult]:
    """
    Rank the candidates that beat the original's health score

    Args:
        original: profile of the scanned product
        candidates: merged catalog results, possibly with duplicates
        original_barcode: excluded from the results
        max_results: number of results to keep
        original_quantity: when given, results carry value-for-money framing

    Returns:
        At most max_results alternatives, best first
    """
    if max_results is None:
        max_results = Config.MAX_ALTERNATIVES
    original_score = calculate_health_score(original)

    seen = set()
    if original_barcode:
        seen.add(original_barcode)

    scored = []
    for candidate in candidates:
        if not candidate.barcode or candidate.barcode in seen:
            continue
        seen.add(candidate.barcode)

        if not _has_display_name(candidate):
            continue

        score = calculate_health_score(candidate_profile(candidate))
        if score <= original_score:
            continue

        scored.append((score, candidate))

    scored.sort(key=lambda item: (-item[0], item[1].barcode))
    scored = scored[:max(max_results, 0)]

    results = []
    for rank, (score, candidate) in enumerate(scored, 1):
        results.append(AlternativeResult(
            barcode=candidate.barcode,
            name=candidate.name.strip(),
            brand=candidate.brand,
            image_url=candidate.image_url,
            nutriscore_grade=candidate.nutriscore_grade,
            nova_group=candidate.nova_group,
            health_score=score,
            health_rating=calculate_health_rating(candidate.nutriscore_grade,
                                                  candidate.nova_group,
                                                  candidate.additive_count),
            improvement_reasons=improvement_reasons(candidate, original),
            rank=rank
        ))

    if original_quantity is not None:
        annotate_value(results, scored, original_score, original_quantity)

    return results


def annotate_value(results: List[AlternativeResult],
                   scored: list,
                   original_score: int,
                   original_quantity: ParsedQuantity):
    """Attach quantity comparison and value badge to ranked results"""
    top_score = results[0].health_score if results else None

    for result, (_, candidate) in zip(results, scored):
        quantity = parse_quantity(candidate.quantity)
        comparison = compare_quantities(original_quantity, quantity)
        result.quantity = quantity
        result.quantity_comparison = comparison
        result.value_badge = get_value_badge(
            result.health_score,
            original_score,
            comparison,
            result.health_score == top_score
        )


class AlternativeFinder:
    """Finds strictly healthier catalog products for a scanned product"""

    def __init__(self, catalog: Optional[CatalogClient] = None, max_search_terms: int = None):
        self.catalog = catalog or CatalogClient()
        self.max_search_terms = max_search_terms or Config.MAX_SEARCH_TERMS

    def find_healthier_alternatives(self,
                                    product: ScannedProduct,
                                    max_results: int = None,
                                    with_value: bool = False) -> List[AlternativeResult]:
        """
        Look up healthier alternatives for a product

        Network failures and an empty catalog answer both return an empty
        list; they are told apart in the logs only.

        Args:
            product: the scanned product
            max_results: number of results to keep
            with_value: annotate results with quantity comparison and badges

        Returns:
            Ranked alternatives, best first
        """
        logger.info(f"Finding alternatives for: {product.name}")

        terms = get_search_terms(product.name, product.categories)[:self.max_search_terms]
        if not terms:
            logger.info(f"No search terms for {product.name!r}; skipping catalog search")
            return []

        pool = self.catalog.fetch_candidates(terms, product.category)
        if pool.all_failed:
            logger.warning(f"Alternatives unavailable for {product.barcode}: catalog search failed for {pool.failed_terms}")
            return []

        original_quantity = parse_quantity(product.quantity) if with_value else None
        results = rank_alternatives(
            catalog_profile(product),
            pool.candidates,
            original_barcode=product.barcode,
            max_results=max_results,
            original_quantity=original_quantity
        )

        if not results:
            logger.info(f"No qualifying candidates for {product.barcode} among {len(pool.candidates)} catalog results")
        else:
            logger.info(f"Found {len(results)} healthier options for {product.barcode}")

        return results
