"""
ClearLabel - health scoring
The one canonical 0-100 health score used by comparison, alternatives and insights
"""

from typing import Optional

from .models import (
    HealthRating,
    NutriScoreGrade,
    ProductHealthProfile,
    ScannedProduct,
)

BASE_SCORE = 50
MIN_SCORE = 0
MAX_SCORE = 100

NUTRISCORE_POINTS = {
    NutriScoreGrade.A: 25,
    NutriScoreGrade.B: 15,
    NutriScoreGrade.C: 0,
    NutriScoreGrade.D: -15,
    NutriScoreGrade.E: -25,
}

NOVA_POINTS = {1: 20, 2: 10, 3: -10, 4: -20}

FLAGGED_PENALTY = 10
FLAGGED_PENALTY_CAP = 30
ADDITIVE_PENALTY = 3
ADDITIVE_PENALTY_CAP = 15

HINT_POINTS = {
    HealthRating.HEALTHY: 10,
    HealthRating.UNHEALTHY: -10,
}


def nutriscore_points(grade: Optional[NutriScoreGrade]) -> int:
    return NUTRISCORE_POINTS.get(grade, 0)


def nova_points(nova_group: Optional[int]) -> int:
    return NOVA_POINTS.get(nova_group, 0)


def flagged_penalty(count: int) -> int:
    return min(count * FLAGGED_PENALTY, FLAGGED_PENALTY_CAP)


def additive_penalty(count: int) -> int:
    return min(count * ADDITIVE_PENALTY, ADDITIVE_PENALTY_CAP)


def calculate_health_score(profile: ProductHealthProfile) -> int:
    """
    Score a product profile on a 0-100 scale

    Absent fields contribute nothing; there is no substitute default.

    Args:
        profile: nutrition and processing snapshot of one product

    Returns:
        Integer score clamped to [0, 100]
    """
    score = BASE_SCORE
    score += nutriscore_points(profile.nutriscore_grade)
    score += nova_points(profile.nova_group)
    score -= flagged_penalty(profile.flagged_ingredient_count)
    score -= additive_penalty(profile.additive_count)
    score += HINT_POINTS.get(profile.health_rating_hint, 0)

    return max(MIN_SCORE, min(MAX_SCORE, score))


def calculate_health_rating(nutriscore_grade: Optional[NutriScoreGrade] = None,
                            nova_group: Optional[int] = None,
                            additive_count: Optional[int] = None) -> HealthRating:
    """Average 1-5 sub-ratings of whichever factors are known"""
    score = 0
    factors = 0

    if nutriscore_grade is not None:
        factors += 1
        score += 5 - nutriscore_grade.rank

    if nova_group is not None:
        factors += 1
        score += {1: 5, 2: 4, 3: 2, 4: 1}[nova_group]

    if additive_count is not None:
        factors += 1
        if additive_count == 0:
            score += 5
        elif additive_count <= 2:
            score += 4
        elif additive_count <= 5:
            score += 3
        elif additive_count <= 10:
            score += 2
        else:
            score += 1

    if factors == 0:
        return HealthRating.UNKNOWN

    average = score / factors
    if average >= 4:
        return HealthRating.HEALTHY
    if average >= 2.5:
        return HealthRating.MODERATE
    return HealthRating.UNHEALTHY


def profile_from_product(product: ScannedProduct) -> ProductHealthProfile:
    """
    Build the full profile of a scanned product

    The coarse rating is only used as a hint when the record carries no
    ingredient list, otherwise the flagged count already speaks for it.
    """
    hint = None
    if not product.ingredients and product.health_rating != HealthRating.UNKNOWN:
        hint = product.health_rating

    return ProductHealthProfile(
        nutriscore_grade=product.nutriscore_grade,
        nova_group=product.nova_group,
        flagged_ingredient_count=len(product.flagged_ingredients),
        additive_count=len(product.additives),
        health_rating_hint=hint,
        allergen_count=len(product.allergens),
    )


def catalog_profile(product: ScannedProduct) -> ProductHealthProfile:
    """Profile restricted to the fields catalog candidates also carry"""
    return ProductHealthProfile(
        nutriscore_grade=product.nutriscore_grade,
        nova_group=product.nova_group,
        additive_count=len(product.additives),
    )
