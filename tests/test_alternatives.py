#!/usr/bin/env python3
"""
Tests for alternative filtering and ranking
"""

import logging

import pytest
from unittest.mock import Mock
from clearlabel.alternatives import AlternativeFinder, improvement_reasons, rank_alternatives
from clearlabel.catalog import CandidatePool
from clearlabel.models import (
    CandidateProduct,
    NutriScoreGrade,
    ProductCategory,
    ProductHealthProfile,
    ScannedProduct,
    ValueBadge,
)
from clearlabel.quantity import parse_quantity

A, B, C, D, E = (NutriScoreGrade.A, NutriScoreGrade.B, NutriScoreGrade.C,
                 NutriScoreGrade.D, NutriScoreGrade.E)


def candidate(barcode, grade=None, nova=None, additives=0, name=None, quantity=None):
    return CandidateProduct(
        barcode=barcode,
        name=name if name is not None else f"Product {barcode}",
        nutriscore_grade=grade,
        nova_group=nova,
        additive_count=additives,
        quantity=quantity
    )


class TestRankAlternatives:
    """Test cases for rank_alternatives"""

    def setup_method(self):
        # 50 - 15 - 20 = 15
        self.original = ProductHealthProfile(nutriscore_grade=D, nova_group=4)

    def test_only_strict_improvements(self):
        candidates = [
            candidate('1', D, 4),          # 15, tie
            candidate('2', E, 4),          # 5, worse
            candidate('3', C, 4),          # 30
        ]
        results = rank_alternatives(self.original, candidates)
        assert [r.barcode for r in results] == ['3']
        original_score = 15
        assert all(r.health_score > original_score for r in results)

    def test_excludes_original_and_duplicates(self):
        candidates = [
            candidate('orig', A, 1),
            candidate('1', B, 2),
            candidate('1', B, 2),
            candidate('', A, 1),
        ]
        results = rank_alternatives(self.original, candidates, original_barcode='orig')
        assert [r.barcode for r in results] == ['1']

    def test_discards_unnamed(self):
        candidates = [
            candidate('1', A, 1, name=''),
            candidate('2', A, 1, name='Unknown Product'),
            candidate('3', A, 1, name='  '),
        ]
        assert rank_alternatives(self.original, candidates) == []

    def test_sorted_with_barcode_tiebreak(self):
        candidates = [
            candidate('9', B, 2),   # 75
            candidate('5', A, 1),   # 95
            candidate('2', B, 2),   # 75
        ]
        results = rank_alternatives(self.original, candidates)
        assert [r.barcode for r in results] == ['5', '2', '9']
        assert [r.rank for r in results] == [1, 2, 3]

    def test_truncates(self):
        candidates = [candidate(str(i), A, 1) for i in range(10)]
        results = rank_alternatives(self.original, candidates)
        assert len(results) == 5
        assert len(rank_alternatives(self.original, candidates, max_results=2)) == 2

    def test_value_annotation(self):
        candidates = [
            candidate('1', A, 1, quantity='500 g'),
            candidate('2', C, 3, quantity='650 g'),
        ]
        results = rank_alternatives(self.original, candidates,
                                    original_quantity=parse_quantity('500 g'))
        assert results[0].value_badge == ValueBadge.BEST_QUALITY
        assert results[1].quantity_comparison.description == "30% more"
        assert results[1].value_badge == ValueBadge.BETTER_VALUE

    def test_no_annotation_without_quantity(self):
        results = rank_alternatives(self.original, [candidate('1', A, 1, quantity='500 g')])
        assert results[0].value_badge is None
        assert results[0].quantity is None


class TestImprovementReasons:
    """Test cases for improvement_reasons"""

    def test_nutriscore_and_nova(self):
        original = ProductHealthProfile(nutriscore_grade=D, nova_group=4)
        reasons = improvement_reasons(candidate('1', B, 2, additives=0), original)
        assert reasons == ["Better Nutri-Score (B vs D)", "Less processed (NOVA 2 vs 4)"]

    def test_additives(self):
        original = ProductHealthProfile(nutriscore_grade=B, nova_group=2)
        assert improvement_reasons(candidate('1', B, 2, additives=0), original) == ["No additives"]
        assert improvement_reasons(candidate('1', B, 2, additives=2), original) == ["Fewer additives"]

    def test_default_reason(self):
        original = ProductHealthProfile()
        assert improvement_reasons(candidate('1', A, 1, additives=4), original) == ["Healthier option"]


class TestAlternativeFinder:
    """Test cases for AlternativeFinder"""

    def setup_method(self):
        self.catalog = Mock()
        self.finder = AlternativeFinder(catalog=self.catalog)
        self.product = ScannedProduct(
            barcode="orig",
            name="Chocolate Chip Granola Bar",
            category=ProductCategory.FOOD,
            nutriscore_grade=D,
            nova_group=4,
            additives=["e322"]
        )

    def test_finds_alternatives(self):
        self.catalog.fetch_candidates.return_value = CandidatePool(
            candidates=[candidate('orig', D, 4), candidate('1', A, 1)],
            searched_terms=['granola bar', 'granola']
        )

        results = self.finder.find_healthier_alternatives(self.product)

        assert [r.barcode for r in results] == ['1']
        terms, category = self.catalog.fetch_candidates.call_args[0]
        assert terms == ['granola bar', 'granola']
        assert category == ProductCategory.FOOD

    def test_network_failure_is_empty(self, caplog):
        self.catalog.fetch_candidates.return_value = CandidatePool(
            failed_terms=['granola bar', 'granola'],
            searched_terms=['granola bar', 'granola']
        )
        with caplog.at_level(logging.INFO):
            assert self.finder.find_healthier_alternatives(self.product) == []
        assert any(r.levelno == logging.WARNING for r in caplog.records)

    def test_no_qualifying_candidates_is_empty(self, caplog):
        self.catalog.fetch_candidates.return_value = CandidatePool(
            candidates=[candidate('1', E, 4, additives=5)],
            searched_terms=['granola bar', 'granola']
        )
        with caplog.at_level(logging.INFO):
            assert self.finder.find_healthier_alternatives(self.product) == []
        assert not any(r.levelno == logging.WARNING for r in caplog.records)
        assert any("No qualifying candidates" in r.getMessage() for r in caplog.records)

    def test_no_terms_skips_search(self):
        self.product.name = "A B"
        assert self.finder.find_healthier_alternatives(self.product) == []
        self.catalog.fetch_candidates.assert_not_called()


if __name__ == "__main__":
    pytest.main([__file__])
