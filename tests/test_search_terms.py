#!/usr/bin/env python3
"""
Tests for search-term extraction
"""

import pytest
from clearlabel.search_terms import (
    NAME_RULES,
    get_search_terms,
    match_category_keywords,
    match_name_rules,
)


class TestNameRules:
    """Test cases for the name rule table"""

    @pytest.mark.parametrize("name,term", [
        ("Oats & Honey Granola Bar", "granola bar"),
        ("Chocolate Whey Protein Bar", "protein bar"),
        ("Crunchy Nut Corn Flakes", "cornflakes"),
        ("Sea Salt Kettle Chips", "chips"),
        ("Plain Greek Yogurt", "greek yogurt"),
        ("Unsweetened Almond Milk", "plant milk"),
        ("Red Bull Energy Drink", "energy drink"),
        ("Vanilla Ice Cream", "ice cream"),
        ("Sourdough Bread", "bread"),
        ("Marinara Sauce", "pasta sauce"),
        ("Creamy Peanut Butter", "peanut butter"),
    ])
    def test_archetype_rules(self, name, term):
        assert term in match_name_rules(name)

    def test_specific_before_broad(self):
        terms = [term for _, term in NAME_RULES]
        assert terms.index("granola bar") < terms.index("granola")
        assert terms.index("pasta sauce") < terms.index("sauce")

    def test_milk_chocolate_is_not_milk(self):
        assert "milk" not in match_name_rules("Milk Chocolate Buttons")

    def test_peanut_butter_is_not_butter(self):
        assert "butter" not in match_name_rules("Peanut Butter")

    def test_ice_cream_is_not_dairy_cream(self):
        terms = match_name_rules("Vanilla Ice Cream")
        assert terms[0] == "ice cream"
        assert "cream" not in terms

    def test_rice_cakes_are_not_cake(self):
        assert "cake" not in match_name_rules("Rice Cakes")
        assert match_name_rules("Rice Cakes")[0] == "rice cakes"

    @pytest.mark.parametrize("name", ["Cashew Butter", "Mixed Nut Butter", "Roasted Almond Butter"])
    def test_nut_butters_are_not_butter(self, name):
        terms = match_name_rules(name)
        assert "nut butter" in terms
        assert "butter" not in terms

    def test_cream_and_butter_still_match(self):
        assert "cream" in match_name_rules("Double Cream")
        assert "butter" in match_name_rules("Salted Butter")


class TestGetSearchTerms:
    """Test cases for get_search_terms"""

    def test_granola_bar(self):
        terms = get_search_terms("Chocolate Chip Granola Bar")
        assert "granola bar" in terms
        assert "granola" in terms
        assert len(terms) <= 3
        assert len(terms) == len(set(terms))

    def test_capped_at_three(self):
        terms = get_search_terms("Chocolate Granola Cereal Bar with Milk and Honey")
        assert len(terms) == 3

    def test_category_fallback(self):
        terms = get_search_terms("Zesty Mornings", "en:Breakfasts, Cereals and their products")
        assert terms == ["breakfast", "cereals", "cereal"]

    def test_name_rules_win_over_categories(self):
        assert get_search_terms("Tomato Soup", "Dairies") == ["soup"]

    def test_significant_words_fallback(self):
        assert get_search_terms("Original Zaatar Mix with Sumac") == ["zaatar sumac"]

    def test_no_terms(self):
        assert get_search_terms("A B c") == []
        assert get_search_terms("") == []

    def test_category_keywords_strip_language(self):
        assert match_category_keywords("en:snacks,  fr:biscuits") == ["snacks", "biscuits"]


if __name__ == "__main__":
    pytest.main([__file__])
