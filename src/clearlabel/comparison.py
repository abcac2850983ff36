"""
ClearLabel - head-to-head product comparison
"""

from typing import Optional

from .config import Config
from .models import (
    AttributeDelta,
    ComparisonResult,
    ComparisonVerdict,
    ParsedQuantity,
    ProductHealthProfile,
    Winner,
)
from .quantity import compare_quantities
from .scoring import (
    additive_penalty,
    calculate_health_score,
    flagged_penalty,
    nova_points,
    nutriscore_points,
)


def _by_points(points_a: int, points_b: int, tolerance: int) -> ComparisonResult:
    # Higher points are healthier for side A
    diff = points_a - points_b
    if abs(diff) < tolerance or diff == 0:
        return ComparisonResult.EQUAL
    return ComparisonResult.BETTER if diff > 0 else ComparisonResult.WORSE


def _by_count(count_a: Optional[int], count_b: Optional[int]) -> ComparisonResult:
    # Fewer is better
    if count_a is None or count_b is None:
        return ComparisonResult.UNKNOWN
    if count_a == count_b:
        return ComparisonResult.EQUAL
    return ComparisonResult.BETTER if count_a < count_b else ComparisonResult.WORSE


def compare_scores(score_a: int, score_b: int, tolerance: int = None) -> Winner:
    if tolerance is None:
        tolerance = Config.SCORE_TIE_TOLERANCE
    if abs(score_a - score_b) < tolerance:
        return Winner.TIE
    return Winner.A if score_a > score_b else Winner.B


def compare_products(profile_a: Optional[ProductHealthProfile],
                     profile_b: Optional[ProductHealthProfile],
                     quantity_a: Optional[ParsedQuantity] = None,
                     quantity_b: Optional[ParsedQuantity] = None,
                     tolerance: int = None) -> ComparisonVerdict:
    """
    Compare two products

    Health-correlated rows are judged on the score points each attribute
    contributes, with the same tolerance as the headline verdict. Quantity
    is judged separately: more product is better for side A.

    Args:
        profile_a: first product, or None when not yet chosen
        profile_b: second product, or None when not yet chosen
        quantity_a: parsed package size of the first product
        quantity_b: parsed package size of the second product
        tolerance: minimum score margin for a winner

    Returns:
        ComparisonVerdict with scores, winner and per-attribute deltas
    """
    if profile_a is None or profile_b is None:
        return ComparisonVerdict(score_a=0, score_b=0, winner=Winner.UNKNOWN)
    if tolerance is None:
        tolerance = Config.SCORE_TIE_TOLERANCE

    score_a = calculate_health_score(profile_a)
    score_b = calculate_health_score(profile_b)
    verdict = ComparisonVerdict(score_a=score_a, score_b=score_b,
                                winner=compare_scores(score_a, score_b, tolerance))

    grade_a, grade_b = profile_a.nutriscore_grade, profile_b.nutriscore_grade
    if grade_a is None or grade_b is None:
        nutriscore = ComparisonResult.UNKNOWN
    else:
        nutriscore = _by_points(nutriscore_points(grade_a), nutriscore_points(grade_b), tolerance)
    verdict.deltas['nutriscore'] = AttributeDelta(
        'nutriscore',
        grade_a.value if grade_a else None,
        grade_b.value if grade_b else None,
        nutriscore
    )

    nova_a, nova_b = profile_a.nova_group, profile_b.nova_group
    if nova_a is None or nova_b is None:
        nova = ComparisonResult.UNKNOWN
    else:
        nova = _by_points(nova_points(nova_a), nova_points(nova_b), tolerance)
    verdict.deltas['nova'] = AttributeDelta('nova', nova_a, nova_b, nova)

    flagged_a, flagged_b = profile_a.flagged_ingredient_count, profile_b.flagged_ingredient_count
    verdict.deltas['flagged_ingredients'] = AttributeDelta(
        'flagged_ingredients', flagged_a, flagged_b,
        _by_points(-flagged_penalty(flagged_a), -flagged_penalty(flagged_b), tolerance)
    )

    additives_a, additives_b = profile_a.additive_count, profile_b.additive_count
    verdict.deltas['additives'] = AttributeDelta(
        'additives', additives_a, additives_b,
        _by_points(-additive_penalty(additives_a), -additive_penalty(additives_b), tolerance)
    )

    verdict.deltas['allergens'] = AttributeDelta(
        'allergens', profile_a.allergen_count, profile_b.allergen_count,
        _by_count(profile_a.allergen_count, profile_b.allergen_count)
    )

    quantity = ComparisonResult.UNKNOWN
    comparison = compare_quantities(quantity_a, quantity_b)
    if comparison is not None:
        if abs(comparison.diff) < Config.QUANTITY_TOLERANCE_PERCENT:
            quantity = ComparisonResult.EQUAL
        else:
            # positive diff means B is larger
            quantity = ComparisonResult.WORSE if comparison.diff > 0 else ComparisonResult.BETTER
    verdict.deltas['quantity'] = AttributeDelta(
        'quantity',
        quantity_a.display if quantity_a else None,
        quantity_b.display if quantity_b else None,
        quantity
    )

    return verdict
