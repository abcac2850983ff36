#!/usr/bin/env python3
"""
Tests for head-to-head comparison
"""

import pytest
from clearlabel.comparison import compare_products, compare_scores
from clearlabel.models import (
    ComparisonResult,
    Ingredient,
    NutriScoreGrade,
    ProductHealthProfile,
    ScannedProduct,
    Winner,
)
from clearlabel.quantity import parse_quantity
from clearlabel.scoring import calculate_health_rating, profile_from_product


class TestCompareProducts:
    """Test cases for compare_products"""

    def setup_method(self):
        self.best = ProductHealthProfile(
            nutriscore_grade=NutriScoreGrade.A,
            nova_group=1,
            flagged_ingredient_count=0,
            additive_count=0,
            allergen_count=0
        )
        self.worst = ProductHealthProfile(
            nutriscore_grade=NutriScoreGrade.E,
            nova_group=4,
            flagged_ingredient_count=3,
            additive_count=5,
            allergen_count=2
        )

    def test_clear_winner(self):
        verdict = compare_products(self.best, self.worst)
        assert verdict.score_a == 95
        assert verdict.score_b == 0
        assert verdict.winner == Winner.A

    def test_scanned_products_clamp_to_full_margin(self):
        """Test scanned records score 100 and 0 with their coarse ratings"""
        product_a = ScannedProduct(
            barcode="a",
            name="Rolled Oats",
            nutriscore_grade=NutriScoreGrade.A,
            nova_group=1,
            health_rating=calculate_health_rating(NutriScoreGrade.A, 1, 0)
        )
        product_b = ScannedProduct(
            barcode="b",
            name="Frosted Snack Cakes",
            nutriscore_grade=NutriScoreGrade.E,
            nova_group=4,
            ingredients=[Ingredient(f"flagged {i}", is_flagged=True) for i in range(3)],
            additives=["e102", "e110", "e129", "e322", "e471"],
            health_rating=calculate_health_rating(NutriScoreGrade.E, 4, 5)
        )
        verdict = compare_products(profile_from_product(product_a), profile_from_product(product_b))
        assert verdict.score_a == 100
        assert verdict.score_b == 0
        assert verdict.winner == Winner.A
        assert verdict.margin == 100

    def test_tie_under_five_points(self):
        a = ProductHealthProfile(additive_count=1)  # 47
        b = ProductHealthProfile()                   # 50
        assert compare_products(a, b).winner == Winner.TIE

    def test_exactly_five_points_wins(self):
        assert compare_scores(55, 50) == Winner.A
        assert compare_scores(50, 55) == Winner.B
        assert compare_scores(54, 50) == Winner.TIE

    def test_missing_side_is_unknown(self):
        verdict = compare_products(self.best, None)
        assert verdict.winner == Winner.UNKNOWN
        assert verdict.deltas == {}

    def test_deltas(self):
        verdict = compare_products(self.best, self.worst,
                                   parse_quantity("500g"), parse_quantity("600g"))
        deltas = verdict.deltas
        assert deltas['nutriscore'].result == ComparisonResult.BETTER
        assert deltas['nutriscore'].value_a == "A"
        assert deltas['nova'].result == ComparisonResult.BETTER
        assert deltas['flagged_ingredients'].result == ComparisonResult.BETTER
        assert deltas['additives'].result == ComparisonResult.BETTER
        assert deltas['allergens'].result == ComparisonResult.BETTER
        # B is 20% larger
        assert deltas['quantity'].result == ComparisonResult.WORSE

    def test_unknown_rows(self):
        verdict = compare_products(ProductHealthProfile(), ProductHealthProfile())
        assert verdict.deltas['nutriscore'].result == ComparisonResult.UNKNOWN
        assert verdict.deltas['nova'].result == ComparisonResult.UNKNOWN
        assert verdict.deltas['allergens'].result == ComparisonResult.UNKNOWN
        assert verdict.deltas['quantity'].result == ComparisonResult.UNKNOWN
        assert verdict.deltas['additives'].result == ComparisonResult.EQUAL

    def test_rows_follow_score_tolerance(self):
        """Test rows below the score tolerance read as equal"""
        a = ProductHealthProfile(additive_count=1, flagged_ingredient_count=3)
        b = ProductHealthProfile(additive_count=2, flagged_ingredient_count=5)
        verdict = compare_products(a, b)
        assert verdict.winner == Winner.TIE
        assert verdict.deltas['additives'].result == ComparisonResult.EQUAL
        assert verdict.deltas['flagged_ingredients'].result == ComparisonResult.EQUAL

    def test_incompatible_quantities(self):
        verdict = compare_products(self.best, self.worst,
                                   parse_quantity("500g"), parse_quantity("1L"))
        assert verdict.deltas['quantity'].result == ComparisonResult.UNKNOWN

    def test_same_quantity(self):
        verdict = compare_products(self.best, self.worst,
                                   parse_quantity("500g"), parse_quantity("0.5 kg"))
        assert verdict.deltas['quantity'].result == ComparisonResult.EQUAL


if __name__ == "__main__":
    pytest.main([__file__])
